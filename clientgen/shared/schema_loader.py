"""Schema cache and local document loading."""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING, Any, Iterator

import yaml

from .errors import DecodeError, SchemaError, TransportError

if TYPE_CHECKING:
    from ..model.schema import SchemaRecord

FRAGMENT_MARKER = "#"


def canonical_url(url: str) -> str:
    """Return ``url`` with a trailing fragment marker.

    Some references omit the trailing ``#``; both spellings must map to the
    same cache key.
    """
    if url.endswith(FRAGMENT_MARKER):
        return url
    return url + FRAGMENT_MARKER


class SchemaCache:
    """Map from canonical schema URL to its resolved record.

    Records are inserted once and never removed. Iteration follows
    discovery order; use :meth:`sorted_urls` for anything that has to be
    deterministic.
    """

    __slots__ = ("_records",)

    def __init__(self) -> None:
        self._records: dict[str, SchemaRecord] = {}

    def get(self, url: str) -> SchemaRecord | None:
        """Return the record cached for ``url`` (canonicalised), if any."""
        return self._records.get(canonical_url(url))

    def insert(self, url: str, record: SchemaRecord) -> None:
        """Register ``record`` under ``url``.

        Raises:
            SchemaError: If the URL is already cached.
        """
        key = canonical_url(url)
        if key in self._records:
            raise SchemaError("Schema is already cached", key)
        self._records[key] = record

    def sorted_urls(self) -> list[str]:
        """Return every cached URL in lexicographic order."""
        return sorted(self._records)

    def __getitem__(self, url: str) -> SchemaRecord:
        return self._records[canonical_url(url)]

    def __contains__(self, url: object) -> bool:
        return isinstance(url, str) and canonical_url(url) in self._records

    def __iter__(self) -> Iterator[str]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)


def parse_document(raw: str, source: str, *, yaml_allowed: bool = False) -> Any:
    """Decode JSON (or YAML, when allowed) text.

    Raises:
        DecodeError: If the text cannot be parsed.
    """
    if yaml_allowed:
        try:
            return yaml.safe_load(raw)
        except yaml.YAMLError as e:
            raise DecodeError(f"Invalid YAML: {e}", source) from e
    try:
        return json.loads(raw)
    except ValueError as e:
        raise DecodeError(f"Invalid JSON: {e}", source) from e


def load_document(path: Path) -> Any:
    """Load a JSON or YAML document from a local file.

    Raises:
        TransportError: If the file cannot be read.
        DecodeError: If the file cannot be parsed.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise TransportError(f"Failed to read file: {e}", str(path)) from e
    return parse_document(
        raw, str(path), yaml_allowed=path.suffix.lower() in {".yml", ".yaml"}
    )
