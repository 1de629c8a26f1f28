"""Data models for graft."""

from .extension import ExtensionEntry, ExtensionSchema

__all__ = [
    "ExtensionEntry",
    "ExtensionSchema",
]
