"""Load pass: manifest -> definitions -> schemas -> type names.

A :class:`LoadSession` owns the schema cache for one run. Loading is two
phase: every definition is walked and every reachable schema is fetched
first, then type names are assigned over the sorted set of schema URLs,
which makes naming independent of discovery order.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Iterable, NamedTuple, Sequence

from ..shared import (
    HttpFetcher,
    SchemaCache,
    canonical_url,
    load_document,
    normalise,
    title_from_url,
)
from .documents import Definition, Document, check_document_kind, decode_manifest
from .graph import link_document
from .patches import DEFAULT_PATCHES, SchemaPatch, apply_patches
from .schema import SchemaRecord, decode_schema

Fetcher = Callable[[str], Any]


class LoadResult(NamedTuple):
    """Everything the emitter needs from a successful load."""

    definitions: list[Definition]
    schema_urls: list[str]
    schemas: SchemaCache

    def definition(self, url: str) -> Definition:
        """Look up the definition an entry or document belongs to."""
        for definition in self.definitions:
            if definition.url == url:
                return definition
        raise KeyError(url)


class LoadSession:
    """State for a single load pass."""

    def __init__(self, fetch: Fetcher) -> None:
        self._fetch = fetch
        self.schemas = SchemaCache()

    def resolve(self, url: str | None) -> SchemaRecord | None:
        """Return the record for ``url``, fetching it on first use.

        Nested ``$ref``s are resolved before the record is returned. The
        record is cached before recursing, so reference cycles terminate.
        """
        if not url:
            return None
        url = canonical_url(url)
        cached = self.schemas.get(url)
        if cached is not None:
            return cached

        record = decode_schema(self._fetch(url), url)
        record.source_url = url
        self.schemas.insert(url, record)
        for ref in record.iter_refs():
            self.resolve(ref)
        return record

    def load_definition(self, definition: Definition) -> Document:
        """Fetch, decode and link the document a definition points at."""
        print(f"  Loading {definition.name} ({definition.url})")
        decoder = check_document_kind(definition)
        document = decoder(self._fetch(definition.url), definition.url)
        link_document(document, self.resolve)
        definition.document = document
        return document

    def assign_type_names(self) -> list[str]:
        """Name every cached schema; returns the sorted URL list used."""
        type_names: set[str] = set()
        schema_urls = self.schemas.sorted_urls()
        for url in schema_urls:
            record = self.schemas[url]
            record.type_name = normalise(record.title or title_from_url(url), type_names)
        return schema_urls

    def load(
        self,
        definitions: Iterable[Definition],
        patches: Sequence[SchemaPatch] = (),
    ) -> LoadResult:
        ordered = sorted(definitions, key=lambda d: d.url)
        for definition in ordered:
            self.load_definition(definition)
        schema_urls = self.assign_type_names()
        apply_patches(self.schemas, patches)
        return LoadResult(ordered, schema_urls, self.schemas)


def load_manifest(source: str, fetch: Fetcher | None = None) -> list[Definition]:
    """Read the root manifest from a local path or URL."""
    if fetch is not None:
        data = fetch(source)
    elif source.startswith(("http://", "https://", "file://")):
        with HttpFetcher() as fetcher:
            data = fetcher(source)
    else:
        data = load_document(Path(source))
    return decode_manifest(data, source)


def load_apis(
    definitions: Iterable[Definition],
    fetch: Fetcher | None = None,
    patches: Sequence[SchemaPatch] = DEFAULT_PATCHES,
) -> LoadResult:
    """Load every definition and its schemas in a fresh session.

    Any error aborts the whole load; no partial result is returned.
    """
    if fetch is not None:
        return LoadSession(fetch).load(definitions, patches)
    with HttpFetcher() as fetcher:
        return LoadSession(fetcher).load(definitions, patches)
