"""Tests for decorated construction and the Instantiator."""

import copy
from dataclasses import dataclass

import pytest

from graft.config import RegistryConfig
from graft.core.errors import ConstructionError, UnknownExtensionError
from graft.extensions.aware import ExtensibleObject, ExtensionAware
from graft.extensions.instantiator import Instantiator
from graft.extensions.registry import ExtensionRegistry


class DatabaseConfig:
    """Connection settings."""

    def __init__(self, url: str, pool_size: int = 5):
        self.url = url
        self.pool_size = pool_size


class Broken:
    def __init__(self):
        raise RuntimeError("boom")


class AlreadyExtensible(ExtensibleObject):
    def __init__(self, label: str):
        self.label = label


@dataclass(frozen=True)
class Credentials:
    user: str
    password: str


def test_add_decorated_returns_extensible_instance(registry: ExtensionRegistry):
    """Test that the created extension hosts its own registry."""
    db = registry.add_decorated("db", DatabaseConfig, "postgres://localhost")

    assert isinstance(db, DatabaseConfig)
    assert isinstance(db, ExtensionAware)
    assert db.url == "postgres://localhost"
    assert db.pool_size == 5
    assert registry.get_by_name("db") is db

    # The nested registry is independent of the parent
    db.extensions.add("credentials", Credentials("admin", "secret"))
    assert db.extensions.get_by_type(Credentials).user == "admin"
    assert "credentials" not in registry


def test_nested_extension_resolves_as_attribute(registry: ExtensionRegistry):
    """Test dynamic attribute lookup on a decorated extension."""
    db = registry.add_decorated("db", DatabaseConfig, url="sqlite://")
    replica = db.extensions.add_decorated("replica", DatabaseConfig, "sqlite://replica")

    assert db.replica is replica
    assert isinstance(db.replica, ExtensionAware)
    assert db.replica.extensions is not db.extensions


def test_add_decorated_with_keyword_arguments(registry: ExtensionRegistry):
    """Test constructor keyword arguments."""
    db = registry.add_decorated("db", DatabaseConfig, "sqlite://", pool_size=20)

    assert db.pool_size == 20


def test_no_matching_constructor(registry: ExtensionRegistry):
    """Test that arguments must bind to the constructor."""
    with pytest.raises(ConstructionError) as exc_info:
        registry.add_decorated("db", DatabaseConfig, "a", 1, "too many")

    assert exc_info.value.extension_type is DatabaseConfig
    assert exc_info.value.arguments == ("a", 1, "too many")
    assert isinstance(exc_info.value.__cause__, TypeError)
    assert "db" not in registry


def test_constructor_failure_is_wrapped(registry: ExtensionRegistry):
    """Test that exceptions raised by the constructor are attached."""
    with pytest.raises(ConstructionError) as exc_info:
        registry.add_decorated("broken", Broken)

    assert isinstance(exc_info.value.cause, RuntimeError)
    assert exc_info.value.__cause__ is exc_info.value.cause
    assert "boom" in str(exc_info.value)
    assert len(registry) == 0


def test_non_class_type_rejected(registry: ExtensionRegistry):
    """Test that add_decorated needs a class."""
    with pytest.raises(ConstructionError):
        registry.add_decorated("thing", "DatabaseConfig")


def test_final_type_cannot_be_decorated(registry: ExtensionRegistry):
    """Test classes that refuse subclassing."""
    with pytest.raises(ConstructionError) as exc_info:
        registry.add_decorated("flag", bool, True)

    assert "cannot be made extensible" in exc_info.value.message


def test_extensible_type_used_as_is(instantiator: Instantiator):
    """Test that types with their own registry are not subclassed."""
    assert instantiator.decorate(AlreadyExtensible) is AlreadyExtensible

    obj = instantiator.new_instance(AlreadyExtensible, "x")
    assert type(obj) is AlreadyExtensible
    assert not instantiator.is_generated(AlreadyExtensible)


def test_generated_class_is_cached(instantiator: Instantiator):
    """Test that a class is decorated only once."""
    first = instantiator.decorate(DatabaseConfig)
    second = instantiator.decorate(DatabaseConfig)

    assert first is second
    assert issubclass(first, DatabaseConfig)
    assert first.__name__ == "DatabaseConfig_Decorated"
    assert first.__doc__ == DatabaseConfig.__doc__
    assert instantiator.is_generated(first)


def test_lookup_by_extension_aware_interface(registry: ExtensionRegistry):
    """Test finding the one extensible extension among plain ones."""
    registry.add("plain", Credentials("u", "p"))
    db = registry.add_decorated("db", DatabaseConfig, "sqlite://")

    assert registry.get_by_type(ExtensionAware) is db


def test_frozen_dataclass_can_be_decorated(registry: ExtensionRegistry):
    """Test that frozen instances still get a registry."""
    creds = registry.add_decorated("creds", Credentials, "user", "pw")

    creds.extensions.add("vault", DatabaseConfig("vault://"))
    assert creds.vault.url == "vault://"


def test_nested_registry_shares_parent_instantiator(instantiator: Instantiator):
    """Test that decorated extensions decorate their own children the same way."""
    registry = ExtensionRegistry(config=RegistryConfig(max_listed_names=1), instantiator=instantiator)
    db = registry.add_decorated("db", DatabaseConfig, "sqlite://")

    replica = db.extensions.add_decorated("replica", DatabaseConfig, "sqlite://replica")
    db.extensions.add("credentials", Credentials("u", "p"))

    assert instantiator.is_generated(type(replica))
    with pytest.raises(UnknownExtensionError) as exc_info:
        db.extensions.get_by_name("missing")
    assert exc_info.value.details == "Known extensions: replica (and 1 more)"


def test_copy_gets_fresh_registry(registry: ExtensionRegistry):
    """Test that a shallow copy does not share the original's extensions."""
    db = registry.add_decorated("db", DatabaseConfig, "sqlite://")
    db.extensions.add("credentials", Credentials("u", "p"))

    clone = copy.copy(db)

    assert type(clone) is type(db)
    assert clone.url == "sqlite://"
    assert clone.extensions is not db.extensions
    assert "credentials" not in clone.extensions
    assert db.credentials.user == "u"


def test_deepcopy_gets_fresh_registry(registry: ExtensionRegistry):
    """Test that a deep copy succeeds and copies plain attributes."""
    db = registry.add_decorated("db", DatabaseConfig, "sqlite://")
    db.options = {"timeout": 5}
    db.extensions.add("credentials", Credentials("u", "p"))

    clone = copy.deepcopy(db)

    assert clone.options == {"timeout": 5}
    assert clone.options is not db.options
    assert len(clone.extensions) == 0
    assert len(db.extensions) == 1
