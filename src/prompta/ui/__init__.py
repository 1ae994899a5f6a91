"""Terminal interaction components."""

__all__ = ["interaction"]
