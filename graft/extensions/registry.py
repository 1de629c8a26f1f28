"""Extension registry - named, typed extensions attached to a host object."""

import threading
import warnings
from typing import Any, Callable, Iterator, Optional, TypeVar, Union

from pydantic import ValidationError

from graft.config import RegistryConfig, get_config
from graft.core.errors import (
    AmbiguousExtensionError,
    DuplicateExtensionError,
    InvalidArgumentError,
    UnknownExtensionError,
)
from graft.core.logging import get_logger
from graft.extensions.aware import ExtensibleObject, adopt_registry
from graft.extensions.instantiator import Instantiator, get_default_instantiator
from graft.models.extension import ExtensionEntry, ExtensionSchema

T = TypeVar("T")

logger = get_logger("registry")


class ExtensionRegistry:
    """Stores the extensions of one host object.

    Extensions are resolved by name or by type. A type lookup matches every
    extension registered under that type or a subclass of it, and prefers
    the most specific declared type when several match.

    Registrations are expected from a single configuration pass; the insert
    is nonetheless done under a lock so the name check and the insert are
    atomic. Lookups read a snapshot and only lock when
    ``RegistryConfig.lock_reads`` is set.
    """

    def __init__(
        self,
        config: Optional[RegistryConfig] = None,
        instantiator: Optional[Instantiator] = None
    ):
        self._config = config or get_config().registry
        self._instantiator = instantiator or get_default_instantiator()
        self._entries: dict[str, ExtensionEntry] = {}
        self._lock = threading.RLock()

    # Registration

    def add(self, name: str, extension: Any, *construction_args: Any) -> None:
        """Add an extension under ``name``.

        The extension is registered under its own runtime type.

        Passing a class followed by construction arguments is the older
        spelling of add_decorated() and is deprecated.

        Raises:
            InvalidArgumentError: If ``name`` is empty or ``extension`` is None.
            DuplicateExtensionError: If ``name`` is already registered.
        """
        if construction_args and isinstance(extension, type):
            warnings.warn(
                "add(name, type, *args) is deprecated, use add_decorated() instead",
                DeprecationWarning,
                stacklevel=2
            )
            self.add_decorated(name, extension, *construction_args)
            return

        if construction_args:
            raise InvalidArgumentError(
                "Construction arguments require a class as the extension.",
                argument="extension",
                value=extension
            )

        self._validate_name(name)
        if extension is None:
            raise InvalidArgumentError(
                "Extension instance must not be None.",
                argument="extension",
                value=extension
            )
        self._store(name, type(extension), extension)

    def add_decorated(self, name: str, type_: type[T], *construction_args: Any, **construction_kwargs: Any) -> T:
        """Create an extension of ``type_`` and add it under ``name``.

        The new instance is itself extension-aware: it exposes its own
        registry through ``instance.extensions``.

        Returns:
            The created instance.

        Raises:
            ConstructionError: If ``type_`` cannot be built from the arguments.
            DuplicateExtensionError: If ``name`` is already registered.
        """
        self._validate_name(name)
        # Fail before running user code
        self._check_unique(name)

        instance = self._instantiator.new_instance(type_, *construction_args, **construction_kwargs)
        if isinstance(instance, ExtensibleObject):
            # Nested registries share this registry's config and instantiator
            adopt_registry(instance, ExtensionRegistry(config=self._config, instantiator=self._instantiator))
        logger.extension_decorated(name, type_, self._instantiator.is_generated(type(instance)))

        self._store(name, type_, instance)
        return instance

    def _store(self, name: str, declared_type: type, instance: Any) -> None:
        try:
            entry = ExtensionEntry(name=name, declared_type=declared_type, instance=instance)
        except ValidationError as e:
            raise InvalidArgumentError(
                f"Invalid extension '{name}'.",
                argument="extension",
                value=instance,
                cause=e
            ) from e

        with self._lock:
            self._check_unique(name)
            self._entries[name] = entry

        logger.extension_added(name, declared_type)

    def _check_unique(self, name: str) -> None:
        existing = self._entries.get(name)
        if existing is not None:
            raise DuplicateExtensionError(name, existing_type=existing.declared_type)

    @staticmethod
    def _validate_name(name: str) -> None:
        if not isinstance(name, str) or not name:
            raise InvalidArgumentError(
                "Extension name must be a non-empty string.",
                argument="name",
                value=name
            )

    # Lookup by name

    def find_by_name(self, name: str) -> Optional[Any]:
        """Look up an extension by name, returning None if there is none."""
        entry = self._snapshot().get(name)
        return entry.instance if entry is not None else None

    def get_by_name(self, name: str) -> Any:
        """Look up an extension by name.

        Raises:
            UnknownExtensionError: If no extension has that name. The error
                lists the names that are registered.
        """
        entries = self._snapshot()
        entry = entries.get(name)
        if entry is None:
            known = list(entries)
            logger.lookup_failed(name, known)
            raise UnknownExtensionError(
                f"Extension with name '{name}' does not exist.",
                key=name,
                known_names=known,
                max_listed=self._config.max_listed_names
            )
        return entry.instance

    # Lookup by type

    def find_by_type(self, type_: type[T]) -> Optional[T]:
        """Look up an extension by type, returning None if there is none.

        Raises:
            AmbiguousExtensionError: If several equally specific extensions match.
        """
        entry = self._resolve_type(type_)
        return entry.instance if entry is not None else None

    def get_by_type(self, type_: type[T]) -> T:
        """Look up an extension by type.

        Raises:
            UnknownExtensionError: If no extension matches.
            AmbiguousExtensionError: If several equally specific extensions match.
        """
        entry = self._resolve_type(type_)
        if entry is None:
            known = self.names
            logger.lookup_failed(type_.__qualname__, known)
            raise UnknownExtensionError(
                f"Extension of type '{type_.__qualname__}' does not exist.",
                key=type_,
                known_names=known,
                max_listed=self._config.max_listed_names
            )
        return entry.instance

    def _resolve_type(self, type_: type) -> Optional[ExtensionEntry]:
        if not isinstance(type_, type):
            raise InvalidArgumentError(
                "Extension lookups by type require a class.",
                argument="type",
                value=type_
            )

        try:
            matches = [e for e in self._snapshot().values() if e.matches(type_)]
        except TypeError as e:
            # e.g. a Protocol that is not runtime_checkable
            raise InvalidArgumentError(
                f"Extensions cannot be looked up by type '{type_.__qualname__}'.",
                argument="type",
                value=type_,
                cause=e
            ) from e
        if not matches:
            return None
        if len(matches) == 1:
            return matches[0]

        # Keep only the most derived declared types
        specific = [
            e for e in matches
            if not any(
                other.declared_type is not e.declared_type
                and issubclass(other.declared_type, e.declared_type)
                for other in matches
            )
        ]
        if len(specific) == 1:
            return specific[0]
        raise AmbiguousExtensionError(type_, [e.name for e in specific])

    # Configuration blocks

    def configure(self, key: Union[str, type[T]], action: Callable[[Any], Any]) -> Any:
        """Apply ``action`` to the extension found by name or type and return it."""
        if isinstance(key, str):
            extension = self.get_by_name(key)
        else:
            extension = self.get_by_type(key)
        action(extension)
        return extension

    # Read-only views

    def _snapshot(self) -> dict[str, ExtensionEntry]:
        if self._config.lock_reads:
            with self._lock:
                return dict(self._entries)
        return dict(self._entries)

    @property
    def names(self) -> list[str]:
        """Registered names, in registration order."""
        return list(self._snapshot())

    def entries(self) -> list[ExtensionEntry]:
        return list(self._snapshot().values())

    def as_map(self) -> dict[str, Any]:
        return {name: entry.instance for name, entry in self._snapshot().items()}

    def schema(self) -> list[ExtensionSchema]:
        return [
            ExtensionSchema(name=entry.name, public_type=entry.public_type)
            for entry in self._snapshot().values()
        ]

    def __contains__(self, name: object) -> bool:
        return name in self._snapshot()

    def __len__(self) -> int:
        return len(self._snapshot())

    def __iter__(self) -> Iterator[str]:
        return iter(self.names)

    def __repr__(self) -> str:
        return f"ExtensionRegistry({', '.join(self.names)})"
