"""Custom exceptions for graft.

Provides user-friendly error messages and structured error handling.
"""

from typing import Optional, Any


class GraftError(Exception):
    """Base exception for all graft errors.

    Provides:
    - User-friendly message
    - Technical details for debugging
    - Suggested fixes when applicable
    """

    def __init__(
        self,
        message: str,
        details: Optional[str] = None,
        suggestion: Optional[str] = None,
        cause: Optional[Exception] = None
    ):
        self.message = message
        self.details = details
        self.suggestion = suggestion
        self.cause = cause
        super().__init__(message)

    def format_user_friendly(self) -> str:
        """Format error for display to user."""
        parts = [self.message]

        if self.details:
            parts.append(f"   Details: {self.details}")

        if self.suggestion:
            parts.append(f"   Try: {self.suggestion}")

        return "\n".join(parts)

    def __str__(self) -> str:
        return self.format_user_friendly()


class ConfigError(GraftError):
    """Configuration-related errors."""

    def __init__(self, message: str, config_key: Optional[str] = None, **kwargs):
        suggestion = kwargs.pop("suggestion", None)
        if not suggestion and config_key:
            suggestion = f"Set the {config_key} environment variable or add it to .env"
        super().__init__(message, suggestion=suggestion, **kwargs)
        self.config_key = config_key


class InvalidArgumentError(GraftError):
    """Malformed input to a registry call."""

    def __init__(
        self,
        message: str,
        argument: Optional[str] = None,
        value: Optional[Any] = None,
        **kwargs
    ):
        details = kwargs.pop("details", None)
        if not details and argument:
            details = f"Argument: {argument}, Value: {repr(value)[:50]}"

        super().__init__(message, details=details, **kwargs)
        self.argument = argument
        self.value = value


class DuplicateExtensionError(GraftError):
    """An extension is already registered under the requested name."""

    def __init__(
        self,
        extension_name: str,
        existing_type: Optional[type] = None,
        **kwargs
    ):
        details = kwargs.pop("details", None)
        if not details and existing_type is not None:
            details = f"Existing extension type: {_type_name(existing_type)}"

        suggestion = kwargs.pop("suggestion", None)
        if not suggestion:
            suggestion = f"Register under a different name or look up '{extension_name}' instead"

        super().__init__(
            f"Cannot add extension with name '{extension_name}', as there is an extension already registered with that name.",
            details=details,
            suggestion=suggestion,
            **kwargs
        )
        self.extension_name = extension_name
        self.existing_type = existing_type


class ConstructionError(GraftError):
    """Errors while building an extension instance."""

    def __init__(
        self,
        message: str,
        extension_type: Optional[type] = None,
        arguments: tuple = (),
        **kwargs
    ):
        details = kwargs.pop("details", None)
        if not details:
            parts = []
            if extension_type is not None:
                parts.append(f"Type: {_type_name(extension_type)}")
            if arguments:
                parts.append(f"Arguments: {repr(arguments)[:80]}")
            cause = kwargs.get("cause")
            if cause is not None:
                parts.append(f"Cause: {type(cause).__name__}: {cause}")
            if parts:
                details = ", ".join(parts)

        super().__init__(message, details=details, **kwargs)
        self.extension_type = extension_type
        self.arguments = arguments


class UnknownExtensionError(GraftError):
    """A lookup found no matching extension."""

    def __init__(
        self,
        message: str,
        key: Any = None,
        known_names: Optional[list[str]] = None,
        max_listed: int = 20,
        **kwargs
    ):
        self.key = key
        self.known_names = list(known_names or [])

        details = kwargs.pop("details", None)
        if not details:
            if not self.known_names:
                details = "No extensions are registered"
            else:
                max_listed = max(max_listed, 1)
                listed = ", ".join(self.known_names[:max_listed])
                hidden = len(self.known_names) - max_listed
                if hidden > 0:
                    listed += f" (and {hidden} more)"
                details = f"Known extensions: {listed}"

        super().__init__(message, details=details, **kwargs)


class AmbiguousExtensionError(GraftError):
    """A type lookup matched several equally specific extensions."""

    def __init__(
        self,
        requested_type: type,
        candidates: list[str],
        **kwargs
    ):
        suggestion = kwargs.pop("suggestion", None)
        if not suggestion:
            suggestion = "Look the extension up by name instead"

        super().__init__(
            f"Extension of type '{_type_name(requested_type)}' is ambiguous.",
            details=f"Candidates: {', '.join(candidates)}",
            suggestion=suggestion,
            **kwargs
        )
        self.requested_type = requested_type
        self.candidates = list(candidates)


def _type_name(cls: type) -> str:
    return getattr(cls, "__qualname__", None) or repr(cls)


def format_exception_chain(error: Exception, max_depth: int = 5) -> str:
    """Format an exception chain for display.

    Handles nested exceptions and provides clean output.
    """
    lines = []
    current = error
    depth = 0

    while current and depth < max_depth:
        if isinstance(current, GraftError):
            lines.append(current.format_user_friendly())
        else:
            lines.append(f"{type(current).__name__}: {current}")

        current = getattr(current, "__cause__", None) or getattr(current, "cause", None)
        depth += 1

        if current:
            lines.append("   Caused by:")

    return "\n".join(lines)
