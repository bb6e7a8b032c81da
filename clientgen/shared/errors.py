"""Exceptions raised while loading definitions and schemas."""

from __future__ import annotations


class SchemaError(Exception):
    """Base exception for definition and schema loading errors."""

    def __init__(self, message: str, source_url: str | None = None) -> None:
        self.source_url = source_url
        full_message = f"{message}" if not source_url else f"[{source_url}] {message}"
        super().__init__(full_message)


class ConfigurationError(SchemaError):
    """Raised when a definition names a meta-schema we cannot decode."""

    def __init__(
        self,
        message: str,
        source_url: str | None = None,
        schema_url: str | None = None,
    ) -> None:
        self.schema_url = schema_url
        if schema_url:
            message = f"{message} (meta-schema '{schema_url}')"
        super().__init__(message, source_url)


class TransportError(SchemaError):
    """Raised when a manifest, document or schema cannot be retrieved."""


class DecodeError(SchemaError):
    """Raised when a retrieved document is malformed or has the wrong shape."""

    def __init__(
        self,
        message: str,
        source_url: str | None = None,
        field: str | None = None,
    ) -> None:
        self.field = field
        if field:
            message = f"Field '{field}': {message}"
        super().__init__(message, source_url)


class NamingError(SchemaError):
    """Raised when no unique identifier can be derived for a name."""

    def __init__(self, name: str, source_url: str | None = None) -> None:
        self.name = name
        super().__init__(f"Could not derive a unique identifier for '{name}'", source_url)
