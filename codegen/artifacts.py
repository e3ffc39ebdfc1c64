"""Expansion of artifact rules into generated files."""

from pathlib import Path
from typing import Any, List, NamedTuple, Optional

import structlog

from .context import GenerationContext
from .exceptions import ArtifactGenerationError, CodegenError, TemplateCompileError
from .expressions import ExpressionCompiler
from .models import ArtifactRule
from .templates import TemplateResolver, iterate_source

logger = structlog.get_logger(__name__)


class ResolvedArtifact(NamedTuple):
    path: str
    content: str


class ArtifactGenerator:
    """Turn artifact rules into ``(path, content)`` pairs.

    Rules are processed in declaration order; iterating rules emit one pair
    per item of their ``foreach`` source, in the source's order.
    """

    def __init__(
        self,
        compiler: ExpressionCompiler,
        resolver: TemplateResolver,
        template_dir: Optional[Path] = None,
    ):
        self.compiler = compiler
        self.resolver = resolver
        self.template_dir = Path(template_dir) if template_dir else None

    def generate(self, rules: List[ArtifactRule], context: GenerationContext) -> List[ResolvedArtifact]:
        artifacts: List[ResolvedArtifact] = []
        for index, rule in enumerate(rules):
            artifacts.extend(self.generate_rule(index, rule, context))
        logger.info("Resolved artifacts", rules=len(rules), artifacts=len(artifacts))
        return artifacts

    def generate_rule(self, index: int, rule: ArtifactRule, context: GenerationContext) -> List[ResolvedArtifact]:
        if rule.condition:
            result = self._evaluate(index, rule, rule.condition, context)
            if not result:
                logger.info("Skip artifact", filepath=rule.filepath, condition=rule.condition, result=result)
                return []

        template = self._template_text(index, rule)

        if not rule.foreach:
            return [self._resolve(index, rule, template, context, None, None)]

        source = self._evaluate(index, rule, rule.foreach, context)
        if source is None:
            logger.info("Skip artifact", filepath=rule.filepath, foreach=rule.foreach, result=source)
            return []

        return [
            self._resolve(index, rule, template, context, value, key)
            for key, value in iterate_source(source)
        ]

    def _template_text(self, index: int, rule: ArtifactRule) -> str:
        if rule.template is not None:
            return rule.template

        if self.template_dir is None:
            raise ArtifactGenerationError(index, rule.filepath, "templatefile requires a recipe directory")
        template_file = self.template_dir / rule.templatefile
        logger.debug("Load template file", path=str(template_file))
        return template_file.read_text(encoding="utf-8")

    def _evaluate(self, index: int, rule: ArtifactRule, source: str, context: GenerationContext) -> Any:
        try:
            return self.compiler.compile_expression(source)(context, None, None)
        except CodegenError as e:
            raise ArtifactGenerationError(index, rule.filepath, str(e)) from e
        except Exception as e:
            raise ArtifactGenerationError(
                index, rule.filepath, f"cannot evaluate {source!r}: {e}"
            ) from e

    def _resolve(
        self,
        index: int,
        rule: ArtifactRule,
        template: str,
        context: GenerationContext,
        value: Any,
        key: Any,
    ) -> ResolvedArtifact:
        try:
            path = self.resolver.resolve(rule.filepath, context, value, key)
            content = self.resolver.resolve(template, context, value, key)
        except TemplateCompileError as e:
            raise ArtifactGenerationError(index, rule.filepath, str(e)) from e
        return ResolvedArtifact(path, content)
