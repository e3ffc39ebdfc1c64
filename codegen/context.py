"""Context store shared by every expression evaluated during a recipe run."""

from copy import deepcopy
from dataclasses import dataclass, field
from types import SimpleNamespace
from typing import Any, Callable, Dict, Optional


@dataclass
class ExtensionTable:
    """Named callables available to expressions.

    Recipe-local functions are exposed at the top level and built-ins under
    the reserved ``core`` namespace, so a recipe can never shadow a built-in.
    """
    local: Dict[str, Callable[..., Any]] = field(default_factory=dict)
    core: Dict[str, Callable[..., Any]] = field(default_factory=dict)

    RESERVED = "core"

    def namespace(self) -> SimpleNamespace:
        return SimpleNamespace(**self.local, core=SimpleNamespace(**self.core))


@dataclass
class GenerationContext:
    """Everything templates may reference during one recipe run."""
    config: Dict[str, Any] = field(default_factory=dict)
    extensions: ExtensionTable = field(default_factory=ExtensionTable)
    metadata: Dict[str, Any] = field(default_factory=dict)
    package: Dict[str, Any] = field(default_factory=dict)
    recipe: Dict[str, Any] = field(default_factory=dict)
    templates: Dict[str, Callable[[Any], str]] = field(default_factory=dict)

    _extensions_ns: Optional[SimpleNamespace] = field(default=None, init=False, repr=False)

    @classmethod
    def create(
        cls,
        config: Dict[str, Any],
        recipe: Dict[str, Any],
        extensions: Optional[ExtensionTable] = None,
        metadata: Optional[Dict[str, Any]] = None,
        package: Optional[Dict[str, Any]] = None,
    ) -> "GenerationContext":
        """Build a context owning deep copies of the caller's data."""
        return cls(
            config=deepcopy(config),
            extensions=extensions or ExtensionTable(),
            metadata=deepcopy(metadata or {}),
            package=deepcopy(package or {}),
            recipe=deepcopy(recipe),
        )

    def bindings(self, value: Any = None, key: Any = None) -> Dict[str, Any]:
        if self._extensions_ns is None:
            self._extensions_ns = self.extensions.namespace()
        return {
            "config": self.config,
            "extensions": self._extensions_ns,
            "metadata": self.metadata,
            "package": self.package,
            "recipe": self.recipe,
            "templates": SimpleNamespace(**self.templates),
            "value": value,
            "key": key,
        }
