"""
Structured error system for Prompta.

Every failure that can end a command is raised as a subclass of
``PromptaError`` so the CLI can report it uniformly and leave the stored
prompt library untouched.
"""

from pathlib import Path
from typing import Any, Dict, Optional, Union


class PromptaError(Exception):
    """Base exception for all Prompta errors."""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        original_error: Optional[Exception] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}
        self.original_error = original_error

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary representation."""
        return {
            "message": self.message,
            "code": self.code,
            "details": self.details,
            "type": self.__class__.__name__
        }

    def __str__(self) -> str:
        return self.message


class InputValidationError(PromptaError):
    """User input that was rejected and cannot be asked for again."""

    def __init__(
        self,
        message: str = "Invalid input",
        field: Optional[str] = None,
        **kwargs
    ):
        super().__init__(message, code="INVALID_INPUT", **kwargs)
        if field:
            self.details["field"] = field


class SelectionError(PromptaError):
    """A prompt index outside the stored collection."""

    def __init__(
        self,
        message: str = "Selection out of range",
        index: Optional[int] = None,
        size: Optional[int] = None,
        **kwargs
    ):
        super().__init__(message, code="SELECTION_OUT_OF_RANGE", **kwargs)
        if index is not None:
            self.details["index"] = index
        if size is not None:
            self.details["size"] = size


class EditorError(PromptaError):
    """The external editor could not be launched or exited abnormally."""

    def __init__(
        self,
        message: str = "Editor failed",
        command: Optional[str] = None,
        exit_code: Optional[int] = None,
        **kwargs
    ):
        super().__init__(message, code="EDITOR_FAILED", **kwargs)
        self.command = command
        self.exit_code = exit_code
        if command:
            self.details["command"] = command
        if exit_code is not None:
            self.details["exit_code"] = exit_code


class ClipboardError(PromptaError):
    """The system clipboard is not available."""

    def __init__(self, message: str = "Clipboard unavailable", **kwargs):
        super().__init__(message, code="CLIPBOARD_UNAVAILABLE", **kwargs)


class StoreError(PromptaError):
    """The prompt store could not be read or written."""

    def __init__(
        self,
        message: str = "Prompt store error",
        path: Optional[Union[str, Path]] = None,
        **kwargs
    ):
        super().__init__(message, code="STORE_ERROR", **kwargs)
        self.path = Path(path) if path is not None else None
        if path is not None:
            self.details["path"] = str(path)


class ConfigurationError(PromptaError):
    """Settings could not be loaded or failed validation."""

    def __init__(self, message: str = "Invalid configuration", **kwargs):
        super().__init__(message, code="CONFIGURATION_ERROR", **kwargs)
