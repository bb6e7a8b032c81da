"""Declarative corrections applied to upstream schemas after loading."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Final, Sequence

from ..shared import DecodeError, SchemaCache, SchemaError, canonical_url, load_document
from .schema import SchemaRecord

_PATCHABLE_FIELDS: Final[frozenset[str]] = frozenset({
    "title",
    "description",
    "type",
    "format",
})


@dataclass(frozen=True, slots=True)
class SchemaPatch:
    """Set one field of a cached schema.

    ``path`` walks from the record through ``properties``/``items`` and
    ends with a field name, for example
    ``("properties", "artifacts", "items", "type")``.
    """

    url: str
    path: tuple[str, ...]
    value: Any


# list-artifacts-response declares its artifact items without a type
DEFAULT_PATCHES: Final[tuple[SchemaPatch, ...]] = (
    SchemaPatch(
        url="http://schemas.taskcluster.net/queue/v1/list-artifacts-response.json#",
        path=("properties", "artifacts", "items", "type"),
        value="object",
    ),
)


def _walk(record: SchemaRecord, steps: Sequence[str], patch: SchemaPatch) -> SchemaRecord:
    node = record
    remaining = list(steps)
    while remaining:
        step = remaining.pop(0)
        if step == "items" and node.items is not None:
            node = node.items
        elif step == "properties" and remaining and node.properties and remaining[0] in node.properties:
            node = node.properties[remaining.pop(0)]
        else:
            raise SchemaError(f"Patch path {'/'.join(patch.path)} does not exist", patch.url)
    return node


def apply_patch(record: SchemaRecord, patch: SchemaPatch) -> None:
    """Apply a single patch to ``record``.

    Raises:
        SchemaError: If the path does not exist, names an unknown field or
            lands on a ``$ref`` sub-schema.
    """
    if not patch.path or patch.path[-1] not in _PATCHABLE_FIELDS:
        raise SchemaError(f"Patch path {'/'.join(patch.path)} does not end in a patchable field", patch.url)
    node = _walk(record, patch.path[:-1], patch)
    if node.ref:
        raise SchemaError(f"Patch path {'/'.join(patch.path)} ends on a $ref to {node.ref}", patch.url)
    setattr(node, patch.path[-1], patch.value)


def apply_patches(schemas: SchemaCache, patches: Sequence[SchemaPatch]) -> int:
    """Apply every patch whose schema was loaded; returns how many applied."""
    applied = 0
    for patch in patches:
        record = schemas.get(patch.url)
        if record is None:
            continue
        apply_patch(record, patch)
        print(f"  Warning: patched {canonical_url(patch.url)} {'/'.join(patch.path)} = {patch.value!r}")
        applied += 1
    return applied


def load_patches(path: Path) -> tuple[SchemaPatch, ...]:
    """Read a YAML/JSON list of ``{url, path, value}`` patches."""
    data = load_document(path)
    if not isinstance(data, list):
        raise DecodeError("patch file must contain a list", str(path))
    patches: list[SchemaPatch] = []
    for index, item in enumerate(data):
        if not isinstance(item, dict) or not {"url", "path", "value"} <= item.keys():
            raise DecodeError("expected an object with url, path and value", str(path), field=f"[{index}]")
        raw_path = item["path"]
        if isinstance(raw_path, str):
            raw_path = [part for part in raw_path.split("/") if part]
        if not isinstance(raw_path, list) or not all(isinstance(p, str) for p in raw_path):
            raise DecodeError("path must be a string or a list of strings", str(path), field=f"[{index}].path")
        patches.append(SchemaPatch(url=str(item["url"]), path=tuple(raw_path), value=item["value"]))
    return tuple(patches)
