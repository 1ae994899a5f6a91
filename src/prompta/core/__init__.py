"""Core building blocks shared across Prompta."""

from .errors import (
    PromptaError,
    InputValidationError,
    SelectionError,
    EditorError,
    ClipboardError,
    StoreError,
    ConfigurationError,
)

__all__ = [
    "PromptaError",
    "InputValidationError",
    "SelectionError",
    "EditorError",
    "ClipboardError",
    "StoreError",
    "ConfigurationError",
]
