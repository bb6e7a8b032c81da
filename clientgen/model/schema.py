"""Resolved form of the JSON Schema documents referenced by entries."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator
from urllib.parse import unquote, urldefrag, urljoin

from ..shared import DecodeError, canonical_url


@dataclass(eq=False, slots=True)
class SchemaRecord:
    """A JSON Schema document or inline sub-schema.

    Only cached top-level records carry ``source_url`` and ``type_name``;
    inline property and item schemas are rendered where they appear. A
    sub-schema that is just a ``$ref`` stores the canonical URL of the
    referenced record in ``ref``.
    """

    title: str | None = None
    description: str = ""
    type: str | None = None
    format: str | None = None
    properties: dict[str, SchemaRecord] | None = None
    items: SchemaRecord | None = None
    ref: str | None = None
    required: list[str] = field(default_factory=list)
    enum: list[Any] | None = None
    additional_properties: bool | None = None

    source_url: str | None = None
    type_name: str | None = None
    is_input_schema: bool = False
    is_output_schema: bool = False

    def iter_refs(self) -> Iterator[str]:
        """Yield every ``$ref`` URL in this schema, depth first, in order."""
        if self.ref:
            yield self.ref
        if self.properties:
            for prop in self.properties.values():
                yield from prop.iter_refs()
        if self.items is not None:
            yield from self.items.iter_refs()

    def __str__(self) -> str:
        return "".join(self._describe("    "))

    def _describe(self, indent: str) -> Iterator[str]:
        if self.source_url:
            yield f"{indent}Source URL  = '{self.source_url}'\n"
            yield f"{indent}Type Name   = '{self.type_name}'\n"
            yield f"{indent}Input       = '{self.is_input_schema}'\n"
            yield f"{indent}Output      = '{self.is_output_schema}'\n"
        for label, value in (
            ("Title", self.title),
            ("Description", self.description),
            ("Type", self.type),
            ("Format", self.format),
            ("$ref", self.ref),
            ("Required", self.required),
            ("Enum", self.enum),
        ):
            if value:
                yield f"{indent}{label:<12}= '{value}'\n"
        if self.properties:
            for name, prop in self.properties.items():
                yield f"{indent}Property '{name}' =\n"
                yield from prop._describe(indent + "    ")
        if self.items is not None:
            yield f"{indent}Items =\n"
            yield from self.items._describe(indent + "    ")


def _expect(value: Any, kind: type | tuple[type, ...], source: str, name: str) -> Any:
    if not isinstance(value, kind):
        raise DecodeError(f"expected {_kind_name(kind)}, got {type(value).__name__}", source, field=name)
    return value


def _kind_name(kind: type | tuple[type, ...]) -> str:
    if isinstance(kind, tuple):
        return " or ".join(k.__name__ for k in kind)
    return kind.__name__


def _follow_pointer(root: Any, pointer: str, source: str, name: str) -> Any:
    """Resolve a JSON pointer (RFC 6901) against the document ``root``."""
    if not pointer.startswith("/"):
        raise DecodeError(f"unsupported fragment '#{pointer}'", source, field=name)
    node = root
    for token in pointer[1:].split("/"):
        token = unquote(token).replace("~1", "/").replace("~0", "~")
        if isinstance(node, dict) and token in node:
            node = node[token]
        elif isinstance(node, list) and token.isdigit() and int(token) < len(node):
            node = node[int(token)]
        else:
            raise DecodeError(f"JSON pointer '#{pointer}' does not exist", source, field=name)
    return node


def decode_schema(data: Any, source: str, path: str = "") -> SchemaRecord:
    """Build a :class:`SchemaRecord` from decoded JSON.

    ``source`` is the URL of the containing document; relative ``$ref``s
    are resolved against it. A ``$ref`` with a JSON pointer into the same
    document is expanded inline, so the document is still fetched once.
    ``path`` locates inline sub-schemas in error messages.

    Raises:
        DecodeError: If the document does not have the expected shape, or a
            ``$ref`` points into another document or back at itself.
    """
    return _decode(data, source, path, data, frozenset())


def _decode(data: Any, source: str, path: str, root: Any, expanding: frozenset[str]) -> SchemaRecord:
    _expect(data, dict, source, path or "<root>")
    where = f"{path}." if path else ""

    record = SchemaRecord()
    ref = data.get("$ref")
    if ref is not None:
        _expect(ref, str, source, f"{where}$ref")
        target, pointer = urldefrag(urljoin(source, ref))
        if not pointer:
            record.ref = canonical_url(target)
        elif canonical_url(target) != canonical_url(urldefrag(source)[0]):
            raise DecodeError(
                f"JSON pointer into another document is not supported: {ref}",
                source,
                field=f"{where}$ref",
            )
        elif pointer in expanding:
            raise DecodeError(f"recursive JSON pointer: {ref}", source, field=f"{where}$ref")
        else:
            # sibling keywords of a $ref are ignored
            target_data = _follow_pointer(root, pointer, source, f"{where}$ref")
            return _decode(target_data, source, path, root, expanding | {pointer})

    title = data.get("title")
    if title is not None:
        record.title = _expect(title, str, source, f"{where}title")
    record.description = _expect(data.get("description") or "", str, source, f"{where}description")

    schema_type = data.get("type")
    if schema_type is not None:
        if isinstance(schema_type, list):
            # ["string", "null"] unions collapse to the single non-null type
            non_null = [t for t in schema_type if t != "null"]
            schema_type = non_null[0] if len(non_null) == 1 else None
        else:
            schema_type = _expect(schema_type, str, source, f"{where}type")
    record.type = schema_type

    fmt = data.get("format")
    if fmt is not None:
        record.format = _expect(fmt, str, source, f"{where}format")

    properties = data.get("properties")
    if properties is not None:
        _expect(properties, dict, source, f"{where}properties")
        record.properties = {
            name: _decode(prop, source, f"{where}properties.{name}", root, expanding)
            for name, prop in properties.items()
        }

    items = data.get("items")
    if items is not None:
        record.items = _decode(items, source, f"{where}items", root, expanding)

    required = data.get("required") or []
    record.required = list(_expect(required, list, source, f"{where}required"))

    enum = data.get("enum")
    if enum is not None:
        record.enum = list(_expect(enum, list, source, f"{where}enum"))

    additional = data.get("additionalProperties")
    if isinstance(additional, bool):
        record.additional_properties = additional

    return record
