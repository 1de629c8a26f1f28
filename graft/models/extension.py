"""Extension data models."""

from typing import Any
from pydantic import BaseModel, ConfigDict, Field, model_validator


class ExtensionEntry(BaseModel):
    """A single registered extension.

    The registry owns the entry; the instance itself is shared with
    whoever else references it and is never torn down by the registry.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    name: str = Field(..., min_length=1, description="Unique extension name")
    declared_type: type = Field(..., description="Type the extension was registered under")
    instance: Any = Field(..., description="The extension object")

    @model_validator(mode="after")
    def _check_instance(self) -> "ExtensionEntry":
        if self.instance is None:
            raise ValueError("extension instance must not be None")
        if not isinstance(self.instance, self.declared_type):
            raise ValueError(
                f"instance of {type(self.instance).__qualname__} is not a "
                f"{self.declared_type.__qualname__}"
            )
        return self

    def matches(self, requested: type) -> bool:
        """Whether this entry satisfies a lookup for ``requested``."""
        try:
            return issubclass(self.declared_type, requested)
        except TypeError:
            # Protocols with data members only support isinstance()
            return isinstance(self.instance, requested)

    @property
    def public_type(self) -> str:
        return f"{self.declared_type.__module__}.{self.declared_type.__qualname__}"


class ExtensionSchema(BaseModel):
    """Public description of an extension, used for diagnostics."""
    name: str
    public_type: str

    def to_display_string(self) -> str:
        return f"- {self.name}: {self.public_type}"
