"""graft - typed, namespaced extensions for host objects."""

from graft.core.errors import (
    AmbiguousExtensionError,
    ConstructionError,
    DuplicateExtensionError,
    GraftError,
    InvalidArgumentError,
    UnknownExtensionError,
)
from graft.extensions import (
    ExtensibleObject,
    ExtensionAware,
    ExtensionIntrospector,
    ExtensionRegistry,
    Instantiator,
)

__version__ = "0.1.0"

__all__ = [
    "AmbiguousExtensionError",
    "ConstructionError",
    "DuplicateExtensionError",
    "GraftError",
    "InvalidArgumentError",
    "UnknownExtensionError",
    "ExtensibleObject",
    "ExtensionAware",
    "ExtensionIntrospector",
    "ExtensionRegistry",
    "Instantiator",
]
