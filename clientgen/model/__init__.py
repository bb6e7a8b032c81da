"""In-memory model of API/exchange definitions and their schemas."""

from .schema import SchemaRecord, decode_schema
from .documents import (
    API_REFERENCE_URL,
    EXCHANGES_REFERENCE_URL,
    ApiDocument,
    ApiEntry,
    Definition,
    Document,
    ExchangeDocument,
    ExchangeEntry,
    RouteElement,
    decode_document,
    decode_manifest,
)
from .patches import DEFAULT_PATCHES, SchemaPatch, apply_patches, load_patches
from .session import LoadResult, LoadSession, load_apis, load_manifest

__all__ = [
    "SchemaRecord",
    "decode_schema",
    "API_REFERENCE_URL",
    "EXCHANGES_REFERENCE_URL",
    "ApiDocument",
    "ApiEntry",
    "Definition",
    "Document",
    "ExchangeDocument",
    "ExchangeEntry",
    "RouteElement",
    "decode_document",
    "decode_manifest",
    "DEFAULT_PATCHES",
    "SchemaPatch",
    "apply_patches",
    "load_patches",
    "LoadResult",
    "LoadSession",
    "load_apis",
    "load_manifest",
]
