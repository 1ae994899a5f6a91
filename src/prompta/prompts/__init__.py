"""
Prompt library for Prompta.

This package provides the prompt record model, the placeholder template
engine and the JSON record store.
"""

from .models import Parameter, Prompt
from .templates import extract_parameters, render_template, reconcile_parameters
from .store import PromptStore

__all__ = [
    "Parameter",
    "Prompt",
    "PromptStore",
    "extract_parameters",
    "render_template",
    "reconcile_parameters",
]
