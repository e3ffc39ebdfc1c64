"""Tests for template resolution and the named template registry."""

import pytest

from codegen.exceptions import TemplateCompileError, TemplateExpansionError
from codegen.extensions.builtin import create_core_extensions
from codegen.models import TemplateDefinition
from codegen.templates import TemplateResolver, needs_reexpansion


@pytest.fixture
def recipe_dir(tmp_path):
    directory = tmp_path / "recipe"
    directory.mkdir()
    return directory


@pytest.fixture
def file_context(make_context, recipe_dir, tmp_path):
    """Context whose core extensions read from ``recipe_dir``."""
    return make_context(core=create_core_extensions("test", recipe_dir, tmp_path, tmp_path))


class TestNeedsReexpansion:

    @pytest.mark.parametrize("template", [
        "${extensions.core.read_config_file('a')}",
        "${extensions.core.read_recipe_file('a')}",
        "${extensions.core.read_source_file('a')}",
        "${templates.item(value)}",
    ])
    def test_triggers(self, template):
        assert needs_reexpansion(template)

    @pytest.mark.parametrize("template", [
        "plain",
        "${value.name}",
        "${templates.item}",
        "${extensions.read_recipe_file('a')}",
    ])
    def test_no_trigger(self, template):
        assert not needs_reexpansion(template)


class TestTemplateResolver:

    def test_text_without_expressions_is_unchanged(self, resolver, context):
        text = "class Foo { bar() {} }\n"
        assert resolver.resolve(text, context) == text

    def test_interpolates_value_and_key(self, resolver, context):
        assert resolver.resolve("${key}=${value}", context, "x", 2) == "2=x"

    def test_evaluation_error_returns_input(self, resolver, context):
        template = "before ${extensions.missing()} after"
        assert resolver.resolve(template, context) == template

    def test_compile_error_is_fatal(self, resolver, context):
        with pytest.raises(TemplateCompileError):
            resolver.resolve("${value +}", context)

    def test_file_contents_are_expanded(self, resolver, file_context, recipe_dir):
        (recipe_dir / "greeting.txt").write_text("Hello ${value}!")
        template = "${extensions.core.read_recipe_file('greeting.txt')}"
        assert resolver.resolve(template, file_context, "World") == "Hello World!"

    def test_output_of_plain_template_is_not_reexpanded(self, resolver, make_context):
        ctx = make_context(recipe_vars={"raw": "${value}"})
        assert resolver.resolve("${recipe.vars.raw}", ctx, "x") == "${value}"

    def test_failure_in_later_pass_returns_that_pass_text(self, resolver, file_context, recipe_dir):
        (recipe_dir / "broken.txt").write_text("${extensions.missing()}")
        template = "${extensions.core.read_recipe_file('broken.txt')}"
        assert resolver.resolve(template, file_context) == "${extensions.missing()}"

    def test_non_terminating_expansion_is_reported(self, compiler, file_context, recipe_dir):
        (recipe_dir / "loop.txt").write_text("${extensions.core.read_recipe_file('loop.txt')}")
        resolver = TemplateResolver(compiler, max_expansions=5)
        with pytest.raises(TemplateExpansionError) as exc_info:
            resolver.resolve("${extensions.core.read_recipe_file('loop.txt')}", file_context)
        assert exc_info.value.limit == 5


class TestTemplateRegistry:

    def test_sequence_source(self, registry, resolver, context):
        registry.register(TemplateDefinition(name="item", body="<${value}@${key}>", join=","), context)
        assert resolver.resolve("${templates.item(value)}", context, ["a", "b"]) == "<a@0>,<b@1>"

    def test_mapping_source(self, registry, context):
        invoke = registry.register(TemplateDefinition(name="pair", body="${key}=${value}"), context)
        assert invoke({"a": 1, "b": 2}) == "a=1\nb=2"

    def test_scalar_source_resolves_once_without_key(self, registry, context):
        invoke = registry.register(TemplateDefinition(name="one", body="[${value}|${key}]"), context)
        assert invoke("hi") == "[hi|None]"

    def test_none_source_is_empty(self, registry, context):
        invoke = registry.register(TemplateDefinition(name="item", body="x"), context)
        assert invoke(None) == ""

    def test_missing_path_source_is_empty(self, registry, resolver, context):
        registry.register(TemplateDefinition(name="item", body="X${value}X"), context)
        registry.register(TemplateDefinition(name="guarded", body="B${value}", condition="true"), context)

        assert resolver.resolve("[${templates.item(recipe.vars.missing)}]", context) == "[]"
        assert resolver.resolve("[${templates.guarded(metadata.nothing)}]", context) == "[]"

    def test_filtered_source_is_iterated(self, registry, resolver, context):
        registry.register(TemplateDefinition(name="item", body="<${value.name}@${key}>", join=","), context)
        source = [{"name": "a", "on": True}, {"name": "b", "on": False}, {"name": "c", "on": True}]

        assert resolver.resolve("${templates.item(value | selectattr('on'))}", context, source) == \
            "<a@0>,<c@1>"

    def test_range_and_generator_sources(self, registry, resolver, context):
        registry.register(TemplateDefinition(name="num", body="${key}:${value}", join=" "), context)

        assert resolver.resolve("${templates.num(range(3))}", context) == "0:0 1:1 2:2"
        assert resolver.resolve("${templates.num(value | reject('none'))}", context, [None, "x", None, "y"]) == \
            "0:x 1:y"

    def test_guard_sees_materialized_filter_result(self, registry, resolver, context):
        registry.register(
            TemplateDefinition(name="many", body="${value}", condition="value | length > 1", join=","),
            context,
        )
        assert resolver.resolve("${templates.many(value | select)}", context, [0, 1, 2]) == "1,2"

    @pytest.mark.parametrize("source", [[], {}])
    def test_empty_collection_is_empty(self, registry, context, source):
        invoke = registry.register(
            TemplateDefinition(name="item", body="always ${value}", condition="true", join="|"),
            context,
        )
        assert invoke(source) == ""

    def test_falsy_condition_skips_body(self, registry, make_context):
        calls = []

        def record(item):
            calls.append(item)
            return item

        ctx = make_context(local={"record": record})
        invoke = registry.register(
            TemplateDefinition(name="hidden", body="${extensions.record(value)}", condition="false"),
            ctx,
        )
        assert invoke([1, 2, 3]) == ""
        assert calls == []

    def test_condition_sees_source_as_value(self, registry, context):
        invoke = registry.register(
            TemplateDefinition(name="big", body="${value}", condition="value | length > 1", join=" "),
            context,
        )
        assert invoke([1]) == ""
        assert invoke([1, 2]) == "1 2"

    def test_falsy_guard_empties_outer_template(self, registry, resolver, context):
        registry.register(TemplateDefinition(name="hidden", body="secret", condition="false"), context)
        assert resolver.resolve("${templates.hidden(value)}", context, [1, 2]) == ""

    def test_nested_template_calls(self, registry, resolver, context):
        registry.register(TemplateDefinition(name="prop", body="  ${value}"), context)
        registry.register(
            TemplateDefinition(name="component", body="${value.name}:\n${templates.prop(value.props)}"),
            context,
        )
        source = [{"name": "Button", "props": ["label", "size"]}]
        assert resolver.resolve("${templates.component(value)}", context, source) == \
            "Button:\n  label\n  size"

    def test_compile_error_names_template(self, registry, context):
        with pytest.raises(TemplateCompileError) as exc_info:
            registry.register(TemplateDefinition(name="broken", body="${value +}"), context)
        assert exc_info.value.name == "broken"
        assert "broken" in str(exc_info.value)

    def test_register_all(self, registry, context):
        registry.register_all({
            "a": TemplateDefinition(name="a", body="A"),
            "b": TemplateDefinition(name="b", body="B"),
        }, context)
        assert "a" in registry and "b" in registry
        assert len(registry) == 2
        assert set(context.templates) == {"a", "b"}
