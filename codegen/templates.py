"""Template resolution and the named template registry."""

import re
from collections.abc import Iterable, Iterator, Mapping
from typing import Any, Callable, Dict, Tuple

import jinja2
import structlog

from .context import GenerationContext
from .exceptions import CodegenError, TemplateCompileError, TemplateExpansionError
from .expressions import ExpressionCompiler
from .extensions.builtin import READ_FILE_FUNCTIONS
from .models import TemplateDefinition

logger = structlog.get_logger(__name__)

DEFAULT_JOIN = "\n"
DEFAULT_MAX_EXPANSIONS = 100

# Output of templates matching either pattern may itself contain expressions
READ_FILE_PATTERN = re.compile(
    r"extensions[.]core[.](?:{})".format("|".join(READ_FILE_FUNCTIONS))
)
TEMPLATE_CALL_PATTERN = re.compile(r"templates[.]\w+[(]")


def needs_reexpansion(template: str) -> bool:
    return bool(READ_FILE_PATTERN.search(template) or TEMPLATE_CALL_PATTERN.search(template))


def iterate_source(source: Any) -> Iterator[Tuple[Any, Any]]:
    """Yield ``(key, value)`` pairs for a template or foreach source.

    Mappings yield their entries. Other iterables, filter results and
    ranges included, yield ``(index, item)``. Strings and scalars yield a
    single ``(None, source)`` pair.
    """
    if isinstance(source, Mapping):
        return iter(list(source.items()))
    if isinstance(source, Iterable) and not isinstance(source, (str, bytes)):
        return enumerate(list(source))
    return iter([(None, source)])


class TemplateResolver:
    """Expand template strings to a fixed point.

    A template is rendered once. Its output is rendered again only while the
    text being rendered reads an external file or calls a named template.
    If rendering fails at any pass, the text of that pass is returned
    unchanged instead of the error.
    """

    def __init__(self, compiler: ExpressionCompiler, max_expansions: int = DEFAULT_MAX_EXPANSIONS):
        self.compiler = compiler
        self.max_expansions = max_expansions

    def resolve(
        self,
        template: str,
        context: GenerationContext,
        value: Any = None,
        key: Any = None,
    ) -> str:
        for expansion in range(self.max_expansions):
            try:
                render = self.compiler.compile_template(template)
            except TemplateCompileError:
                if expansion == 0:
                    raise
                logger.debug("Expanded output is not a valid template", expansion=expansion)
                return template

            try:
                resolved = render(context, value, key)
            except CodegenError:
                raise
            except Exception as e:
                logger.debug("Template evaluation failed, keeping input", error=str(e))
                return template

            if not needs_reexpansion(template):
                return resolved

            template = resolved

        raise TemplateExpansionError(template, self.max_expansions)


class TemplateRegistry:
    """Named, guarded, iterating templates callable from expressions."""

    def __init__(self, compiler: ExpressionCompiler, resolver: TemplateResolver):
        self.compiler = compiler
        self.resolver = resolver
        self._definitions: Dict[str, TemplateDefinition] = {}

    def __contains__(self, name: str) -> bool:
        return name in self._definitions

    def __len__(self) -> int:
        return len(self._definitions)

    def register(self, definition: TemplateDefinition, context: GenerationContext) -> Callable[[Any], str]:
        """Compile a definition and publish it in ``context.templates``."""
        condition = None
        try:
            if definition.condition:
                condition = self.compiler.compile_expression(definition.condition)
            self.compiler.compile_template(definition.body)
        except TemplateCompileError as e:
            raise TemplateCompileError(e.source, e.reason, name=definition.name) from e

        join = DEFAULT_JOIN if definition.join is None else definition.join
        body = definition.body

        def invoke(source: Any = None) -> str:
            if source is None or isinstance(source, jinja2.Undefined):
                return ""
            if isinstance(source, Iterator):
                source = list(source)

            if condition is not None and not condition(context, source, None):
                logger.debug("Template condition is falsy", template=definition.name)
                return ""

            return join.join(
                self.resolver.resolve(body, context, item, name)
                for name, item in iterate_source(source)
            )

        invoke.__name__ = definition.name
        self._definitions[definition.name] = definition
        context.templates[definition.name] = invoke
        logger.debug("Registered template", template=definition.name)
        return invoke

    def register_all(self, definitions: Dict[str, TemplateDefinition], context: GenerationContext) -> None:
        for definition in definitions.values():
            self.register(definition, context)
