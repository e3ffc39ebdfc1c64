"""
Pytest configuration and fixtures for the recipe-codegen project.
"""

import sys
from pathlib import Path

# Add the project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import pytest

from codegen.context import ExtensionTable, GenerationContext
from codegen.expressions import ExpressionCompiler
from codegen.templates import TemplateRegistry, TemplateResolver


@pytest.fixture
def compiler():
    return ExpressionCompiler()


@pytest.fixture
def resolver(compiler):
    return TemplateResolver(compiler, max_expansions=20)


@pytest.fixture
def registry(compiler, resolver):
    return TemplateRegistry(compiler, resolver)


@pytest.fixture
def make_context():
    """Factory for contexts with optional recipe vars and extensions."""
    def factory(recipe_vars=None, config=None, metadata=None, package=None,
                local=None, core=None):
        return GenerationContext.create(
            config=config or {"vars": {}},
            recipe={"name": "test", "dist": "out", "vars": recipe_vars or {}},
            extensions=ExtensionTable(local=local or {}, core=core or {}),
            metadata=metadata,
            package=package,
        )
    return factory


@pytest.fixture
def context(make_context):
    return make_context()
