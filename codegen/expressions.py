"""Expression compiler backed by a sandboxed jinja2 environment.

Template strings embed expressions as ``${ expression }``; guards and
``foreach`` sources are bare expressions. Every compiled unit is a pure
function of ``(context, value, key)``.
"""

from typing import Any, Callable, Dict
import jinja2
from jinja2.sandbox import SandboxedEnvironment
import structlog

from .context import GenerationContext
from .exceptions import TemplateCompileError
from .extensions import builtin

logger = structlog.get_logger(__name__)

Expression = Callable[[GenerationContext, Any, Any], Any]
CompiledTemplate = Callable[[GenerationContext, Any, Any], str]


class ExpressionCompiler:
    """Compile expressions and templates into callables over the context."""

    def __init__(self):
        self.env = self._setup_jinja()
        self._expressions: Dict[str, Expression] = {}
        self._templates: Dict[str, CompiledTemplate] = {}

    def _setup_jinja(self) -> SandboxedEnvironment:
        """Setup the jinja2 environment with ``${ }`` interpolation."""
        env = SandboxedEnvironment(
            variable_start_string="${",
            variable_end_string="}",
            block_start_string="<%",
            block_end_string="%>",
            comment_start_string="<#",
            comment_end_string="#>",
            trim_blocks=False,
            lstrip_blocks=False,
            keep_trailing_newline=True,
            autoescape=False,
        )

        env.filters['snake_case'] = builtin.snake_case
        env.filters['camel_case'] = builtin.camel_case
        env.filters['pascal_case'] = builtin.pascal_case
        env.filters['kebab_case'] = builtin.kebab_case
        env.filters['python_value'] = builtin.python_value
        return env

    def compile_expression(self, source: str) -> Expression:
        """Compile a bare expression such as a guard or a foreach source."""
        cached = self._expressions.get(source)
        if cached is not None:
            return cached

        try:
            compiled = self.env.compile_expression(source)
        except jinja2.TemplateSyntaxError as e:
            raise TemplateCompileError(source, str(e)) from e

        def evaluate(context: GenerationContext, value: Any = None, key: Any = None) -> Any:
            return compiled(**context.bindings(value, key))

        self._expressions[source] = evaluate
        return evaluate

    def compile_template(self, source: str) -> CompiledTemplate:
        """Compile a template string with embedded ``${ }`` expressions."""
        cached = self._templates.get(source)
        if cached is not None:
            return cached

        try:
            template = self.env.from_string(source)
        except jinja2.TemplateSyntaxError as e:
            raise TemplateCompileError(source, str(e)) from e

        def render(context: GenerationContext, value: Any = None, key: Any = None) -> str:
            return template.render(**context.bindings(value, key))

        self._templates[source] = render
        return render
