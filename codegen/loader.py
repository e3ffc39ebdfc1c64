"""YAML loading and validation for project configs and recipes."""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
import structlog

from .exceptions import ConfigurationError, ValidationIssue
from .models import ProjectConfig, Recipe

logger = structlog.get_logger(__name__)


class RecipeParser:
    """Parse and validate recipe files.

    Every problem found is collected in ``issues``; a single
    ``ConfigurationError`` listing all of them is raised at the end.
    """

    def __init__(self):
        self.issues: List[ValidationIssue] = []

    @property
    def errors(self) -> List[ValidationIssue]:
        return [i for i in self.issues if i.severity == "error"]

    @property
    def warnings(self) -> List[ValidationIssue]:
        return [i for i in self.issues if i.severity == "warning"]

    def parse_file(self, name: str, recipe_file: Path) -> Recipe:
        """Parse a recipe from a YAML file."""
        with open(recipe_file, 'r', encoding='utf-8') as f:
            content = f.read()
        return self.parse_string(name, content, path=Path(recipe_file))

    def parse_string(self, name: str, yaml_content: str, path: Optional[Path] = None) -> Recipe:
        """Parse a recipe from a YAML string."""
        data = _load_yaml(yaml_content, path)
        self.issues.clear()

        if not isinstance(data, dict):
            raise ConfigurationError(f"Recipe '{name}' must be a mapping")

        self._validate(data)
        if self.errors:
            raise ConfigurationError(f"Invalid recipe '{name}'", self.errors)

        recipe = Recipe.from_dict(name, data, path=path)
        logger.debug("Parsed recipe", recipe=name, artifacts=len(recipe.artifacts),
                     templates=len(recipe.templates))
        return recipe

    def _error(self, path: str, message: str) -> None:
        self.issues.append(ValidationIssue(message=message, path=path))

    def _warning(self, path: str, message: str) -> None:
        self.issues.append(ValidationIssue(message=message, path=path, severity="warning"))

    def _validate(self, data: Dict[str, Any]) -> None:
        if not isinstance(data.get("dist"), str) or not data.get("dist"):
            self._error("dist", "Required string field 'dist' is missing")

        artifacts = data.get("artifacts")
        if artifacts is None:
            self._warning("artifacts", "Recipe declares no artifacts")
        elif not isinstance(artifacts, list):
            self._error("artifacts", "Field 'artifacts' must be a list")
        else:
            for index, artifact in enumerate(artifacts):
                self._validate_artifact(index, artifact)

        templates = data.get("templates")
        if templates is not None:
            if not isinstance(templates, dict):
                self._error("templates", "Field 'templates' must be a mapping")
            else:
                for name, definition in templates.items():
                    self._validate_template(name, definition)

        variables = data.get("vars")
        if variables is not None and not isinstance(variables, (dict, list)):
            self._error("vars", "Field 'vars' must be a mapping or a list")

    def _validate_artifact(self, index: int, artifact: Any) -> None:
        path = f"artifacts[{index}]"
        if not isinstance(artifact, dict):
            self._error(path, "Artifact must be a mapping")
            return

        if not isinstance(artifact.get("filepath"), str):
            self._error(f"{path}.filepath", "Artifact filepath is required")

        has_template = isinstance(artifact.get("template"), str)
        has_file = isinstance(artifact.get("templatefile"), str)
        if not has_template and not has_file:
            self._error(path, "Artifact requires 'template' or 'templatefile'")
        elif has_template and has_file:
            self._warning(path, "Both 'template' and 'templatefile' given, 'template' wins")

        for key in ("condition", "foreach"):
            if key in artifact and not isinstance(artifact[key], str):
                self._error(f"{path}.{key}", f"Artifact {key} must be an expression string")

    def _validate_template(self, name: str, definition: Any) -> None:
        path = f"templates.{name}"
        if not isinstance(definition, dict):
            self._error(path, "Template definition must be a mapping")
            return

        body = definition.get("template", definition.get("body"))
        if not isinstance(body, str):
            self._error(f"{path}.template", "Template body is required")

        if "join" in definition and not isinstance(definition["join"], str):
            self._error(f"{path}.join", "Template join must be a string")

        if "condition" in definition and not isinstance(definition["condition"], str):
            self._error(f"{path}.condition", "Template condition must be an expression string")


def _load_yaml(content: str, path: Optional[Path] = None) -> Any:
    try:
        return yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path or '<string>'}: {e}") from e


def load_project_config(config_file: Path) -> ProjectConfig:
    """Load the project configuration file."""
    config_file = Path(config_file)
    with open(config_file, 'r', encoding='utf-8') as f:
        data = _load_yaml(f.read(), config_file)

    if not isinstance(data, dict):
        raise ConfigurationError(f"Project config {config_file} must be a mapping")

    issues = []
    if not isinstance(data.get("recipes", []), list):
        issues.append(ValidationIssue("Field 'recipes' must be a list", "recipes"))
    if not isinstance(data.get("vars", {}) or {}, dict):
        issues.append(ValidationIssue("Field 'vars' must be a mapping keyed by recipe", "vars"))
    if issues:
        raise ConfigurationError(f"Invalid project config {config_file}", issues)

    return ProjectConfig.from_dict(data, source=config_file)


def load_recipe(name: str, recipes_dir: Path, recipe_file: str = "recipe.yaml") -> Recipe:
    """Load ``<recipes_dir>/<name>/<recipe_file>``."""
    parser = RecipeParser()
    recipe = parser.parse_file(name, Path(recipes_dir) / name / recipe_file)
    for warning in parser.warnings:
        logger.warning("Recipe warning", recipe=name, path=warning.path, message=warning.message)
    return recipe


def load_package_manifest(path: Path) -> Dict[str, Any]:
    """Load the project manifest (JSON or YAML); a missing file yields ``{}``."""
    path = Path(path)
    if not path.exists():
        logger.warning("Package manifest not found", path=str(path))
        return {}

    with open(path, 'r', encoding='utf-8') as f:
        content = f.read()

    if path.suffix == ".json":
        try:
            return json.loads(content)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in {path}: {e}") from e
    return _load_yaml(content, path) or {}
