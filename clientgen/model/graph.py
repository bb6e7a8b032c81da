"""Link decoded documents to their schemas and assign entry identifiers."""

from __future__ import annotations

from typing import Callable

from ..shared import canonical_url, normalise
from .documents import ApiDocument, Document, ExchangeDocument, ExchangeEntry
from .schema import SchemaRecord

Resolver = Callable[[str], SchemaRecord | None]


def link_api_document(document: ApiDocument, resolve: Resolver) -> None:
    """Resolve entry schemas and give every entry a unique method name.

    Routes and args are left untouched; placeholders such as ``<taskId>``
    are spliced by the emitter.
    """
    methods: set[str] = set()

    for entry in document.entries:
        if entry.input:
            entry.input = canonical_url(entry.input)
            resolve(entry.input).is_input_schema = True
        if entry.output:
            entry.output = canonical_url(entry.output)
            resolve(entry.output).is_output_schema = True
        entry.method_name = normalise(entry.name, methods)
        entry.definition_url = document.definition_url


def _link_routing_key(entry: ExchangeEntry) -> None:
    key_names: set[str] = set()
    for element in entry.routing_key:
        element.field_name = normalise(element.name, key_names)


def link_exchange_document(document: ExchangeDocument, resolve: Resolver) -> None:
    """Resolve message schemas and give every entry a unique binding type name."""
    entry_type_names: set[str] = set()

    for entry in document.entries:
        if entry.schema:
            entry.schema = canonical_url(entry.schema)
            resolve(entry.schema)
        entry.type_name = normalise(entry.name, entry_type_names)
        _link_routing_key(entry)
        entry.definition_url = document.definition_url


def link_document(document: Document, resolve: Resolver) -> None:
    if isinstance(document, ApiDocument):
        link_api_document(document, resolve)
    else:
        link_exchange_document(document, resolve)
