"""Shared utilities for the client generator."""

from .schema_loader import (
    SchemaCache,
    canonical_url,
    load_document,
    parse_document,
)
from .fetcher import HttpFetcher
from .naming import (
    GO_KEYWORDS,
    normalise,
    sanitize_param_name,
    title_from_url,
    to_identifier,
    to_lower_camel,
)
from .errors import (
    SchemaError,
    ConfigurationError,
    TransportError,
    DecodeError,
    NamingError,
)

__all__ = [
    # Schema loading
    "SchemaCache",
    "canonical_url",
    "load_document",
    "parse_document",
    "HttpFetcher",
    # Naming utilities
    "GO_KEYWORDS",
    "normalise",
    "sanitize_param_name",
    "title_from_url",
    "to_identifier",
    "to_lower_camel",
    # Errors
    "SchemaError",
    "ConfigurationError",
    "TransportError",
    "DecodeError",
    "NamingError",
]
