"""In-place resolution of variable trees."""

from typing import Any, List, Optional, Union

import structlog

from .context import GenerationContext
from .templates import TemplateResolver

logger = structlog.get_logger(__name__)

PathPart = Union[str, int]


class VariableResolver:
    """Resolve every string leaf of a nested dict/list tree as a template."""

    def __init__(self, resolver: TemplateResolver):
        self.resolver = resolver

    def resolve(self, target: Any, context: GenerationContext, path: Optional[List[PathPart]] = None) -> Any:
        """Resolve ``target`` in place and return it.

        Children are visited depth-first in insertion order. A leaf is only
        replaced when resolution changed it.
        """
        path = path or []
        if isinstance(target, dict):
            entries = list(target.items())
        elif isinstance(target, list):
            entries = list(enumerate(target))
        else:
            return target

        for key, value in entries:
            if isinstance(value, (dict, list)):
                self.resolve(value, context, path + [key])
            elif isinstance(value, str):
                resolved = self.resolver.resolve(value, context)
                if resolved != value:
                    logger.debug("Resolved variable", path=".".join(str(p) for p in path + [key]))
                    target[key] = resolved
        return target
