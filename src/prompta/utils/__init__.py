"""Utility helpers for Prompta."""
