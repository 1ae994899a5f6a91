"""
CLI interface package for Prompta.

This package contains the Typer application and the interactive command flows.
"""

__all__ = ["app", "commands"]
