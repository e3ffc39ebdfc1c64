# codegen/extensions/__init__.py
"""Extension functions callable from recipe expressions."""

from .builtin import READ_FILE_FUNCTIONS, create_core_extensions
from .registry import ExtensionLoader

__all__ = [
    'READ_FILE_FUNCTIONS',
    'create_core_extensions',
    'ExtensionLoader',
]
