"""Exception hierarchy for recipe generation."""

from dataclasses import dataclass
from typing import List, Optional


@dataclass
class ValidationIssue:
    message: str
    path: str
    severity: str = "error"


class CodegenError(Exception):
    """Base class for generation failures."""
    pass


class ConfigurationError(CodegenError):
    """Raised when a project config or recipe is invalid."""

    def __init__(self, message: str, issues: Optional[List[ValidationIssue]] = None):
        self.issues = issues or []
        if self.issues:
            details = "\n".join(f"{i.path}: {i.message}" for i in self.issues)
            message = f"{message}\n{details}"
        super().__init__(message)


class TemplateCompileError(CodegenError):
    """Raised when an expression or template has invalid syntax."""

    def __init__(self, source: str, reason: str, name: Optional[str] = None):
        self.source = source
        self.reason = reason
        self.name = name
        where = f" in '{name}'" if name else ""
        super().__init__(f"Cannot compile{where}: {reason} (source: {source!r})")


class TemplateExpansionError(CodegenError):
    """Raised when a template keeps re-expanding past the configured bound."""

    def __init__(self, source: str, limit: int):
        self.source = source
        self.limit = limit
        super().__init__(
            f"Template did not reach a fixed point after {limit} expansions: {source[:80]!r}"
        )


class ArtifactGenerationError(CodegenError):
    """Raised when an artifact rule cannot be expanded."""

    def __init__(self, index: int, filepath: str, reason: str):
        self.index = index
        self.filepath = filepath
        super().__init__(f"Artifact #{index} ({filepath}): {reason}")


class ExtensionLoadError(CodegenError):
    """Raised when an extension module cannot be imported."""
    pass
