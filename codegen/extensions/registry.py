# codegen/extensions/registry.py
"""Extension loading for recipes."""

import importlib.util
import inspect
import sys
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import structlog

from ..context import ExtensionTable
from ..exceptions import ExtensionLoadError
from .builtin import create_core_extensions

logger = structlog.get_logger(__name__)


class ExtensionLoader:
    """Build the extension table for a recipe run.

    Every ``*.py`` module below the recipe directory is imported from its
    file and its public callables become recipe-local extensions. Built-ins
    are created per run and kept under the separate ``core`` namespace.
    """

    def __init__(self, recipe_name: str, recipe_dir: Path, config_dir: Path, base_path: Path):
        self.recipe_name = recipe_name
        self.recipe_dir = Path(recipe_dir)
        self.config_dir = Path(config_dir)
        self.base_path = Path(base_path)

    def load(self) -> ExtensionTable:
        table = ExtensionTable(
            local=self.load_recipe_extensions(),
            core=create_core_extensions(
                self.recipe_name, self.recipe_dir, self.config_dir, self.base_path
            ),
        )
        logger.info("Recipe functions", recipe=self.recipe_name, functions=sorted(table.local))
        logger.info("Core functions", recipe=self.recipe_name, functions=sorted(table.core))
        return table

    def load_recipe_extensions(self) -> Dict[str, Callable[..., Any]]:
        functions: Dict[str, Callable[..., Any]] = {}
        if not self.recipe_dir.is_dir():
            return functions

        for script in sorted(self.recipe_dir.rglob("*.py")):
            logger.info("Load extension module", path=str(script))
            module = self._load_module(script)
            for name, func in self._public_callables(module).items():
                if name == ExtensionTable.RESERVED:
                    logger.warning(
                        "Extension name is reserved, skipping", name=name, path=str(script)
                    )
                    continue
                functions[name] = func
        return functions

    def _load_module(self, file_path: Path):
        relative = file_path.relative_to(self.recipe_dir).with_suffix("")
        module_name = "recipes.{}.{}".format(self.recipe_name, ".".join(relative.parts))
        try:
            spec = importlib.util.spec_from_file_location(module_name, file_path)
            if not spec or not spec.loader:
                raise ExtensionLoadError(f"Cannot create module spec for {file_path}")

            module = importlib.util.module_from_spec(spec)
            sys.modules[spec.name] = module
            spec.loader.exec_module(module)
            return module
        except ExtensionLoadError:
            raise
        except Exception as e:
            sys.modules.pop(module_name, None)
            raise ExtensionLoadError(f"Error loading extension module {file_path}: {e}") from e

    @staticmethod
    def _public_callables(module) -> Dict[str, Callable[..., Any]]:
        exported: Optional[List[str]] = getattr(module, "__all__", None)
        if exported is not None:
            return {name: getattr(module, name) for name in exported if callable(getattr(module, name, None))}

        functions = {}
        for name, attr in vars(module).items():
            if name.startswith("_") or not callable(attr):
                continue
            # Skip names the module merely imported
            if inspect.isclass(attr) or inspect.isfunction(attr):
                if getattr(attr, "__module__", None) != module.__name__:
                    continue
            functions[name] = attr
        return functions
