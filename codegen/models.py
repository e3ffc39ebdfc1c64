"""Recipe and project configuration models."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional


@dataclass
class TemplateDefinition:
    """Reusable named template."""
    name: str
    body: str
    condition: Optional[str] = None
    join: Optional[str] = None

    @classmethod
    def from_dict(cls, name: str, data: Dict[str, Any]) -> "TemplateDefinition":
        """Create from dictionary."""
        return cls(
            name=name,
            body=data.get("template", data.get("body", "")),
            condition=data.get("condition"),
            join=data.get("join"),
        )


@dataclass
class ArtifactRule:
    """Instruction producing one or more generated files."""
    filepath: str
    template: Optional[str] = None
    templatefile: Optional[str] = None
    condition: Optional[str] = None
    foreach: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ArtifactRule":
        """Create from dictionary."""
        return cls(
            filepath=data.get("filepath", ""),
            template=data.get("template"),
            templatefile=data.get("templatefile"),
            condition=data.get("condition"),
            foreach=data.get("foreach"),
        )

    def to_dict(self) -> Dict[str, Any]:
        data = {"filepath": self.filepath}
        for name in ("template", "templatefile", "condition", "foreach"):
            value = getattr(self, name)
            if value is not None:
                data[name] = value
        return data


@dataclass
class Recipe:
    """Declarative description of one generation run."""
    name: str
    dist: str
    artifacts: List[ArtifactRule] = field(default_factory=list)
    templates: Dict[str, TemplateDefinition] = field(default_factory=dict)
    vars: Dict[str, Any] = field(default_factory=dict)
    path: Optional[Path] = None
    raw: Dict[str, Any] = field(default_factory=dict)

    @property
    def directory(self) -> Optional[Path]:
        return self.path.parent if self.path else None

    @classmethod
    def from_dict(cls, name: str, data: Dict[str, Any], path: Optional[Path] = None) -> "Recipe":
        """Create from dictionary."""
        return cls(
            name=name,
            dist=data.get("dist", ""),
            artifacts=[ArtifactRule.from_dict(a) for a in data.get("artifacts") or []],
            templates={
                key: TemplateDefinition.from_dict(key, value)
                for key, value in (data.get("templates") or {}).items()
            },
            vars=data.get("vars") or {},
            path=path,
            raw=data,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Plain data view exposed to expressions as ``recipe``."""
        data = dict(self.raw)
        data.update({
            "name": self.name,
            "dist": self.dist,
            "vars": self.vars,
            "artifacts": [a.to_dict() for a in self.artifacts],
            "templates": {
                key: {k: v for k, v in (("template", t.body), ("condition", t.condition), ("join", t.join))
                      if v is not None}
                for key, t in self.templates.items()
            },
        })
        return data


@dataclass
class ProjectConfig:
    """Project-wide generator configuration."""
    recipes: List[str] = field(default_factory=list)
    path: str = "."
    component_paths: List[str] = field(default_factory=list)
    dist: Optional[str] = None
    vars: Dict[str, Any] = field(default_factory=dict)
    source: Optional[Path] = None
    raw: Dict[str, Any] = field(default_factory=dict)

    @property
    def directory(self) -> Path:
        return self.source.parent if self.source else Path.cwd()

    @classmethod
    def from_dict(cls, data: Dict[str, Any], source: Optional[Path] = None) -> "ProjectConfig":
        """Create from dictionary."""
        return cls(
            recipes=list(data.get("recipes") or []),
            path=data.get("path", "."),
            component_paths=list(data.get("componentPaths", data.get("component_paths")) or []),
            dist=data.get("dist"),
            vars=data.get("vars") or {},
            source=source,
            raw=data,
        )

    def vars_for(self, recipe_name: str) -> Dict[str, Any]:
        return self.vars.get(recipe_name) or {}

    def to_dict(self) -> Dict[str, Any]:
        """Plain data view exposed to expressions as ``config``."""
        data = dict(self.raw)
        data.update({
            "recipes": self.recipes,
            "path": self.path,
            "componentPaths": self.component_paths,
            "dist": self.dist,
            "vars": self.vars,
        })
        return data
