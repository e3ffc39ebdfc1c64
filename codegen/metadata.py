# codegen/metadata.py
"""Component metadata extraction."""

import ast
import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Protocol

import yaml
import structlog

from .models import Recipe

logger = structlog.get_logger(__name__)

DATA_SUFFIXES = {".json", ".yaml", ".yml"}
SOURCE_SUFFIXES = {".py"}


class MetadataProvider(Protocol):
    def generate(self, recipe: Recipe, component_paths: Iterable[Path]) -> Dict[str, Any]:
        ...


class ComponentMetadataProvider:
    """Describe a component library found below a set of paths.

    The result maps each file's path, relative to ``base_path``, to its
    description: data files are parsed as-is and Python modules are
    analysed for their classes and constructor parameters.
    """

    def __init__(self, base_path: Path):
        self.base_path = Path(base_path)

    def generate(self, recipe: Recipe, component_paths: Iterable[Path]) -> Dict[str, Any]:
        metadata: Dict[str, Any] = {}
        for component_path in component_paths:
            for file_path in self._iter_files(Path(component_path)):
                key = self._relative(file_path)
                metadata[key] = self.describe(file_path)

        logger.info("Generated metadata", recipe=recipe.name, files=len(metadata))
        return metadata

    def _iter_files(self, path: Path) -> List[Path]:
        if path.is_file():
            return [path]
        if not path.is_dir():
            logger.warning("Component path does not exist", path=str(path))
            return []
        suffixes = DATA_SUFFIXES | SOURCE_SUFFIXES
        return sorted(p for p in path.rglob("*") if p.is_file() and p.suffix in suffixes)

    def _relative(self, path: Path) -> str:
        try:
            return path.resolve().relative_to(self.base_path.resolve()).as_posix()
        except ValueError:
            return path.as_posix()

    def describe(self, file_path: Path) -> Any:
        content = file_path.read_text(encoding="utf-8")
        if file_path.suffix == ".json":
            return json.loads(content)
        if file_path.suffix in (".yaml", ".yml"):
            return yaml.safe_load(content)
        return self._describe_module(file_path, content)

    def _describe_module(self, file_path: Path, source: str) -> Dict[str, Any]:
        tree = ast.parse(source, filename=str(file_path))
        visitor = ComponentVisitor()
        visitor.visit(tree)
        return {
            "name": file_path.stem,
            "description": ast.get_docstring(tree) or "",
            "components": visitor.components,
        }


class ComponentVisitor(ast.NodeVisitor):
    """Collect top-level classes and their constructor parameters."""

    def __init__(self):
        self.components: List[Dict[str, Any]] = []

    def visit_Module(self, node: ast.Module):
        for child in node.body:
            if isinstance(child, ast.ClassDef):
                self.visit_ClassDef(child)

    def visit_ClassDef(self, node: ast.ClassDef):
        self.components.append({
            "name": node.name,
            "description": ast.get_docstring(node) or "",
            "bases": [ast.unparse(base) for base in node.bases],
            "props": self._props(node),
        })

    def _props(self, node: ast.ClassDef) -> List[Dict[str, Any]]:
        init = next(
            (n for n in node.body if isinstance(n, ast.FunctionDef) and n.name == "__init__"),
            None,
        )
        if init is not None:
            return self._init_props(init.args)

        # Dataclass style: annotated class attributes
        props = []
        for child in node.body:
            if isinstance(child, ast.AnnAssign) and isinstance(child.target, ast.Name):
                props.append(self._prop(child.target.id, child.annotation, child.value))
        return props

    def _init_props(self, args: ast.arguments) -> List[Dict[str, Any]]:
        positional = args.posonlyargs + args.args
        defaults: List[Optional[ast.expr]] = [None] * (len(positional) - len(args.defaults)) + list(args.defaults)
        props = [
            self._prop(arg.arg, arg.annotation, default)
            for arg, default in zip(positional, defaults)
            if arg.arg not in ("self", "cls")
        ]
        props.extend(
            self._prop(arg.arg, arg.annotation, default)
            for arg, default in zip(args.kwonlyargs, args.kw_defaults)
        )
        return props

    @staticmethod
    def _prop(name: str, annotation: Optional[ast.expr], default: Optional[ast.expr]) -> Dict[str, Any]:
        return {
            "name": name,
            "annotation": ast.unparse(annotation) if annotation is not None else None,
            "default": ast.unparse(default) if default is not None else None,
            "required": default is None,
        }
