# codegen/engine.py
"""Main code generation engine."""

from copy import deepcopy
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

import structlog

from .artifacts import ArtifactGenerator, ResolvedArtifact
from .config import Settings, get_settings
from .context import GenerationContext
from .exceptions import CodegenError
from .expressions import ExpressionCompiler
from .extensions import ExtensionLoader
from .loader import load_package_manifest, load_project_config, load_recipe
from .metadata import ComponentMetadataProvider, MetadataProvider
from .models import ProjectConfig, Recipe
from .templates import TemplateRegistry, TemplateResolver
from .variables import VariableResolver
from .writer import ArtifactWriter

logger = structlog.get_logger(__name__)


@dataclass
class GenerationResult:
    """Outcome of generating one recipe."""
    recipe: str
    dist: Path
    artifacts: List[ResolvedArtifact] = field(default_factory=list)
    written: List[Path] = field(default_factory=list)


class CodeGenerator:
    """Generate source files from recipes and component metadata."""

    def __init__(
        self,
        config: ProjectConfig,
        recipes_dir: Optional[Path] = None,
        workdir: Optional[Path] = None,
        settings: Optional[Settings] = None,
        metadata_provider: Optional[MetadataProvider] = None,
        writer: Optional[ArtifactWriter] = None,
    ):
        self.config = config
        self.settings = settings or get_settings()
        self.workdir = Path(workdir) if workdir else Path.cwd()
        self.recipes_dir = self.workdir / (recipes_dir or self.settings.recipes_dir)
        self.base_path = self.workdir / config.path
        self.metadata_provider = metadata_provider or ComponentMetadataProvider(self.base_path)
        self.writer = writer or ArtifactWriter()

    @classmethod
    def from_config_file(cls, config_file: Path, **kwargs) -> "CodeGenerator":
        return cls(load_project_config(config_file), **kwargs)

    def generate_all(self, dry_run: bool = False) -> List[GenerationResult]:
        """Generate every recipe listed in the project config, in order."""
        return [self.generate_recipe(name, dry_run=dry_run) for name in self.config.recipes]

    def generate_recipe(self, name: str, dry_run: bool = False) -> GenerationResult:
        logger.info("Generate recipe", recipe=name)
        try:
            recipe = load_recipe(name, self.recipes_dir, self.settings.recipe_file)
            context = self.build_context(recipe)
            artifacts = self.resolve_artifacts(recipe, context)
        except CodegenError as e:
            logger.error("Generation failed", recipe=name, error=str(e))
            raise

        dist = self.workdir / (self.config.dist or "") / context.recipe["dist"]
        result = GenerationResult(recipe=name, dist=dist, artifacts=artifacts)

        if dry_run:
            logger.info("Dry run, nothing written", recipe=name, artifacts=len(artifacts))
            return result

        result.written = self.writer.write(dist, artifacts)
        logger.info("Successfully generated recipe", recipe=name, dist=str(dist))
        return result

    def build_context(self, recipe: Recipe) -> GenerationContext:
        """Populate the context store for ``recipe``; variables stay unresolved."""
        package = load_package_manifest(self.base_path / self.settings.package_manifest)
        metadata = self.metadata_provider.generate(
            recipe, [self.base_path / p for p in self.config.component_paths]
        )
        extensions = ExtensionLoader(
            recipe.name,
            recipe.directory or self.recipes_dir / recipe.name,
            self.config.directory,
            self.base_path,
        ).load()

        return GenerationContext.create(
            config=self.config.to_dict(),
            recipe=recipe.to_dict(),
            extensions=extensions,
            metadata=metadata,
            package=package,
        )

    def resolve_artifacts(self, recipe: Recipe, context: GenerationContext) -> List[ResolvedArtifact]:
        """Register templates, resolve variables and expand artifact rules."""
        compiler = ExpressionCompiler()
        resolver = TemplateResolver(compiler, max_expansions=self.settings.max_expansions)

        registry = TemplateRegistry(compiler, resolver)
        registry.register_all(recipe.templates, context)
        logger.info("Registered templates", recipe=recipe.name, templates=sorted(recipe.templates))

        variables = VariableResolver(resolver)

        logger.info("Resolve `config` variables", recipe=recipe.name)
        context.config["vars"] = deepcopy(self.config.vars_for(recipe.name))
        variables.resolve(context.config["vars"], context)

        logger.info("Resolve `recipe` variables", recipe=recipe.name)
        variables.resolve(context.recipe["vars"], context)

        generator = ArtifactGenerator(compiler, resolver, template_dir=recipe.directory)
        return generator.generate(recipe.artifacts, context)
