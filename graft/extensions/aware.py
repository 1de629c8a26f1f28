"""Extension-aware objects.

An extension-aware object owns exactly one ExtensionRegistry. Names that
are not real attributes of the object are resolved through that registry,
so once a plugin has run ``host.extensions.add("reporting", cfg)``,
``host.reporting`` returns ``cfg``.
"""

import copy
import inspect
import threading
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from graft.extensions.registry import ExtensionRegistry


_registry_lock = threading.Lock()


@runtime_checkable
class ExtensionAware(Protocol):
    """Anything that exposes its own extension registry."""

    @property
    def extensions(self) -> "ExtensionRegistry":
        ...


class ExtensibleObject:
    """Mixin giving an object its own registry and dynamic extension lookup."""

    @property
    def extensions(self) -> "ExtensionRegistry":
        """The registry owned by this object, created on first access."""
        registry = self.__dict__.get("_extensions")
        if registry is None:
            with _registry_lock:
                registry = self.__dict__.get("_extensions")
                if registry is None:
                    from graft.extensions.registry import ExtensionRegistry
                    registry = ExtensionRegistry()
                    self.__dict__["_extensions"] = registry
        return registry

    def __copy__(self):
        # Copies start with an empty registry of their own
        clone = type(self).__new__(type(self))
        clone.__dict__.update(
            (key, value) for key, value in self.__dict__.items() if key != "_extensions"
        )
        return clone

    def __deepcopy__(self, memo: dict):
        clone = type(self).__new__(type(self))
        memo[id(self)] = clone
        for key, value in self.__dict__.items():
            if key != "_extensions":
                clone.__dict__[key] = copy.deepcopy(value, memo)
        return clone

    def resolve_member(self, name: str) -> Any:
        """Resolve a name that is not a static attribute of this object.

        Raises:
            AttributeError: If no extension is registered under ``name``.
        """
        if not name.startswith("_"):
            extension = self.extensions.find_by_name(name)
            if extension is not None:
                return extension
        raise AttributeError(
            f"'{type(self).__name__}' object has no attribute or extension named '{name}'"
        )

    def __getattr__(self, name: str) -> Any:
        # Only reached when normal attribute lookup fails
        return self.resolve_member(name)


def adopt_registry(obj: ExtensibleObject, registry: "ExtensionRegistry") -> bool:
    """Give ``obj`` a prepared registry unless it already has one.

    Returns:
        True if ``registry`` became the object's registry.
    """
    with _registry_lock:
        if obj.__dict__.get("_extensions") is not None:
            return False
        obj.__dict__["_extensions"] = registry
        return True


def is_extension_aware_type(cls: type) -> bool:
    """Whether instances of ``cls`` already expose their own registry."""
    if issubclass(cls, ExtensibleObject):
        return True
    return isinstance(inspect.getattr_static(cls, "extensions", None), property)
