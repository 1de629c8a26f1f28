"""Extensions package - named, typed extensions for host objects."""

from .aware import ExtensibleObject, ExtensionAware
from .instantiator import Instantiator
from .registry import ExtensionRegistry
from .introspection import ExtensionIntrospector

__all__ = [
    "ExtensibleObject",
    "ExtensionAware",
    "ExtensionRegistry",
    "Instantiator",
    "ExtensionIntrospector",
]
