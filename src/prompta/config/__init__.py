"""
Configuration package for Prompta.

This package contains the settings model, the hierarchical settings-file
loader and the .env loader.
"""

__all__ = ["settings", "hierarchical", "env_loader"]
