"""Extension instantiator - builds extension instances that are themselves extensible."""

import inspect
import threading
import types
from typing import Any

from graft.core.errors import ConstructionError
from graft.core.logging import get_logger
from graft.extensions.aware import ExtensibleObject, is_extension_aware_type

logger = get_logger("instantiator")


class Instantiator:
    """Creates decorated instances of arbitrary classes.

    This is responsible for:
    - Generating (and caching) an extensible subclass per requested class
    - Checking construction arguments against the constructor signature
    - Reporting every construction failure as a ConstructionError
    """

    def __init__(self):
        self._generated: dict[type, type] = {}
        self._lock = threading.Lock()

    def decorate(self, cls: type) -> type:
        """Return a class whose instances are extension-aware.

        Classes that already expose a registry are returned unchanged.
        Otherwise a ``<Name>_Decorated`` subclass mixing in ExtensibleObject
        is generated once and reused.
        """
        if not isinstance(cls, type):
            raise ConstructionError(
                f"Cannot create an extension from {cls!r}, a class is required."
            )

        if is_extension_aware_type(cls):
            return cls

        with self._lock:
            generated = self._generated.get(cls)
            if generated is None:
                generated = self._generate(cls)
                self._generated[cls] = generated
        return generated

    def is_generated(self, cls: type) -> bool:
        """Whether ``cls`` was produced by decorate()."""
        return cls in self._generated.values()

    def _generate(self, cls: type) -> type:
        name = f"{cls.__name__}_Decorated"

        def exec_body(ns: dict) -> None:
            ns["__module__"] = cls.__module__
            ns["__qualname__"] = f"{cls.__qualname__}_Decorated"
            ns["__doc__"] = cls.__doc__

        try:
            return types.new_class(name, (cls, ExtensibleObject), exec_body=exec_body)
        except TypeError as e:
            logger.warning(
                f"Cannot generate extensible subclass of {cls.__qualname__}",
                component="instantiator",
                extension_type=cls.__qualname__
            )
            raise ConstructionError(
                f"Type {cls.__qualname__} cannot be made extensible.",
                extension_type=cls,
                cause=e
            ) from e

    def new_instance(self, cls: type, *args: Any, **kwargs: Any) -> Any:
        """Construct a decorated instance of ``cls``.

        Raises:
            ConstructionError: If the arguments match no constructor of
                ``cls`` or the constructor itself raises.
        """
        decorated = self.decorate(cls)

        try:
            signature = inspect.signature(decorated)
        except (TypeError, ValueError):
            # Some builtins expose no signature; let the call decide
            signature = None

        if signature is not None:
            try:
                signature.bind(*args, **kwargs)
            except TypeError as e:
                raise ConstructionError(
                    f"Could not find any public constructor for {cls.__qualname__} "
                    f"which accepts the given parameters.",
                    extension_type=cls,
                    arguments=args,
                    cause=e
                ) from e

        try:
            return decorated(*args, **kwargs)
        except Exception as e:
            logger.warning(
                f"Construction of {cls.__qualname__} failed: {e}",
                component="instantiator",
                extension_type=cls.__qualname__
            )
            raise ConstructionError(
                f"Could not create an instance of type {cls.__qualname__}.",
                extension_type=cls,
                arguments=args,
                cause=e
            ) from e


_default_instantiator: Instantiator | None = None


def get_default_instantiator() -> Instantiator:
    """Shared instantiator so a class is only ever decorated once."""
    global _default_instantiator
    if _default_instantiator is None:
        _default_instantiator = Instantiator()
    return _default_instantiator
