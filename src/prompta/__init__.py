"""
Prompta - a personal prompt library for the command line.

This package stores reusable prompt templates with ``{{parameter}}``
placeholders, renders them on demand and copies the result to the clipboard.
"""

__version__ = "0.1.0"
__license__ = "MIT"

from typing import Final

# Package metadata
VERSION: Final[str] = __version__
PACKAGE_NAME: Final[str] = "prompta"

__all__ = [
    "__version__",
    "VERSION",
    "PACKAGE_NAME",
]
