# codegen/extensions/builtin.py
"""Built-in extensions, exposed to expressions as ``extensions.core``."""

import json
import re
from pathlib import Path
from typing import Any, Callable, Dict

import structlog

logger = structlog.get_logger(__name__)

# Expressions calling one of these are re-expanded after evaluation
READ_FILE_FUNCTIONS = ("read_config_file", "read_recipe_file", "read_source_file")


def snake_case(text: str) -> str:
    """Convert to snake_case."""
    s1 = re.sub('(.)([A-Z][a-z]+)', r'\1_\2', text.replace('-', '_'))
    return re.sub('([a-z0-9])([A-Z])', r'\1_\2', s1).lower()


def camel_case(text: str) -> str:
    """Convert to camelCase."""
    components = snake_case(text).split('_')
    return components[0] + ''.join(x.capitalize() for x in components[1:])


def pascal_case(text: str) -> str:
    """Convert to PascalCase."""
    components = snake_case(text).split('_')
    return ''.join(x.capitalize() for x in components)


def kebab_case(text: str) -> str:
    return snake_case(text).replace('_', '-')


def to_json(value: Any, indent=None) -> str:
    return json.dumps(value, indent=indent)


def python_value(value: Any) -> str:
    """Convert JSON-like values to Python syntax."""
    if isinstance(value, bool):
        return 'True' if value else 'False'
    elif value is None:
        return 'None'
    elif isinstance(value, str):
        return repr(value)
    elif isinstance(value, list):
        return '[' + ', '.join(python_value(v) for v in value) + ']'
    elif isinstance(value, dict):
        items = (f"{python_value(k)}: {python_value(v)}" for k, v in value.items())
        return '{' + ', '.join(items) + '}'
    else:
        return str(value)


def _file_reader(base_dir: Path, kind: str) -> Callable[[str], str]:
    def read(path: str) -> str:
        target = base_dir / path
        logger.debug("Read file", kind=kind, path=str(target))
        return target.read_text(encoding="utf-8")

    read.__name__ = f"read_{kind}_file"
    read.__doc__ = f"Read a file relative to the {kind} directory ({base_dir})."
    return read


def create_core_extensions(
    recipe_name: str,
    recipe_dir: Path,
    config_dir: Path,
    base_path: Path,
) -> Dict[str, Callable[..., Any]]:
    """Create the built-in extension functions for one recipe run.

    Args:
        recipe_name: Name of the recipe being generated
        recipe_dir: Directory holding the recipe file
        config_dir: Directory holding the project config file
        base_path: Project base path, used to resolve source files

    Returns:
        Mapping of function name to callable
    """
    extensions = {
        "read_config_file": _file_reader(Path(config_dir), "config"),
        "read_recipe_file": _file_reader(Path(recipe_dir), "recipe"),
        "read_source_file": _file_reader(Path(base_path), "source"),
        "snake_case": snake_case,
        "camel_case": camel_case,
        "pascal_case": pascal_case,
        "kebab_case": kebab_case,
        "to_json": to_json,
        "python_value": python_value,
        "recipe_name": lambda: recipe_name,
    }
    return extensions
