"""
Services package for Prompta.

Wrappers around the external collaborators: the user's text editor and the
system clipboard.
"""

__all__ = ["editor", "clipboard"]
