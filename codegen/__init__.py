# codegen/__init__.py
"""Recipe-driven source code generation."""

from .artifacts import ArtifactGenerator, ResolvedArtifact
from .context import ExtensionTable, GenerationContext
from .engine import CodeGenerator, GenerationResult
from .exceptions import (
    ArtifactGenerationError,
    CodegenError,
    ConfigurationError,
    ExtensionLoadError,
    TemplateCompileError,
    TemplateExpansionError,
)
from .expressions import ExpressionCompiler
from .loader import load_project_config, load_recipe
from .models import ArtifactRule, ProjectConfig, Recipe, TemplateDefinition
from .templates import TemplateRegistry, TemplateResolver
from .variables import VariableResolver

__all__ = [
    'ArtifactGenerator',
    'ResolvedArtifact',
    'ExtensionTable',
    'GenerationContext',
    'CodeGenerator',
    'GenerationResult',
    'ArtifactGenerationError',
    'CodegenError',
    'ConfigurationError',
    'ExtensionLoadError',
    'TemplateCompileError',
    'TemplateExpansionError',
    'ExpressionCompiler',
    'load_project_config',
    'load_recipe',
    'ArtifactRule',
    'ProjectConfig',
    'Recipe',
    'TemplateDefinition',
    'TemplateRegistry',
    'TemplateResolver',
    'VariableResolver',
]
