"""Definitions and the API/exchange reference documents they point at."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Final, Union

from ..shared import ConfigurationError, DecodeError

API_REFERENCE_URL: Final[str] = "http://schemas.taskcluster.net/base/v1/api-reference.json"
EXCHANGES_REFERENCE_URL: Final[str] = "http://schemas.taskcluster.net/base/v1/exchanges-reference.json"


def _field(
    data: dict[str, Any],
    key: str,
    kind: type | tuple[type, ...],
    source: str,
    default: Any = None,
    *,
    required: bool = False,
    where: str = "",
) -> Any:
    """Read ``data[key]`` and check its type.

    A JSON null is treated like a missing key. ``where`` prefixes the field
    path reported in errors.
    """
    path = f"{where}.{key}" if where else key
    value = data.get(key)
    if value is None:
        if required:
            raise DecodeError("missing required field", source, field=path)
        return default
    if not isinstance(value, kind):
        expected = " or ".join(k.__name__ for k in kind) if isinstance(kind, tuple) else kind.__name__
        raise DecodeError(
            f"expected {expected}, got {type(value).__name__}",
            source,
            field=path,
        )
    return value


def _string_list(value: Any, source: str, key: str) -> list[str]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise DecodeError("expected a list of strings", source, field=key)
    return list(value)


def _mapping(value: Any, source: str, key: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise DecodeError(f"expected an object, got {type(value).__name__}", source, field=key)
    return value


#############################################################################
# API reference documents
#############################################################################


@dataclass(slots=True)
class ApiEntry:
    """One REST operation of an API document."""

    type: str
    method: str
    route: str
    args: list[str]
    name: str
    scopes: list[list[str]]
    input: str
    output: str
    title: str
    description: str

    method_name: str = ""
    definition_url: str = ""

    def __str__(self) -> str:
        return (
            f"    Entry Type        = '{self.type}'\n"
            f"    Entry Method      = '{self.method}'\n"
            f"    Entry Route       = '{self.route}'\n"
            f"    Entry Args        = '{self.args}'\n"
            f"    Entry Name        = '{self.name}'\n"
            f"    Entry Scopes      = '{self.scopes}'\n"
            f"    Entry Input       = '{self.input}'\n"
            f"    Entry Output      = '{self.output}'\n"
            f"    Entry Title       = '{self.title}'\n"
            f"    Entry Description = '{self.description}'\n"
        )


@dataclass(slots=True)
class ApiDocument:
    """Decoded API reference document."""

    version: str
    title: str
    description: str
    base_url: str
    entries: list[ApiEntry]
    definition_url: str

    def __str__(self) -> str:
        result = (
            f"Version     = '{self.version}'\n"
            f"Title       = '{self.title}'\n"
            f"Description = '{self.description}'\n"
            f"Base URL    = '{self.base_url}'\n"
        )
        for i, entry in enumerate(self.entries):
            result += f"Entry {i:<6}= \n{entry}"
        return result


def _decode_api_entry(data: Any, source: str, index: int) -> ApiEntry:
    where = f"entries[{index}]"
    data = _mapping(data, source, where)
    scopes = _field(data, "scopes", list, source, [], where=where)
    return ApiEntry(
        type=_field(data, "type", str, source, "", where=where),
        method=_field(data, "method", str, source, required=True, where=where),
        route=_field(data, "route", str, source, required=True, where=where),
        args=_string_list(_field(data, "args", list, source, [], where=where), source, f"{where}.args"),
        name=_field(data, "name", str, source, required=True, where=where),
        scopes=[_string_list(s, source, f"{where}.scopes") for s in scopes],
        input=_field(data, "input", str, source, "", where=where),
        output=_field(data, "output", str, source, "", where=where),
        title=_field(data, "title", str, source, "", where=where),
        description=_field(data, "description", str, source, "", where=where),
    )


def decode_api_document(data: Any, definition_url: str) -> ApiDocument:
    """Decode an API reference document."""
    data = _mapping(data, definition_url, "<root>")
    entries = _field(data, "entries", list, definition_url, [])
    return ApiDocument(
        version=str(_field(data, "version", (str, int, float), definition_url, "")),
        title=_field(data, "title", str, definition_url, ""),
        description=_field(data, "description", str, definition_url, ""),
        base_url=_field(data, "baseUrl", str, definition_url, ""),
        entries=[_decode_api_entry(e, definition_url, i) for i, e in enumerate(entries)],
        definition_url=definition_url,
    )


#############################################################################
# Exchange reference documents
#############################################################################


@dataclass(slots=True)
class RouteElement:
    """One segment of an exchange routing key."""

    name: str
    summary: str
    constant: str
    multiple_words: bool
    required: bool

    field_name: str = ""

    def __str__(self) -> str:
        return (
            f"        Element Name      = '{self.name}'\n"
            f"        Element Summary   = '{self.summary}'\n"
            f"        Element Constant  = '{self.constant}'\n"
            f"        Element M Words   = '{self.multiple_words}'\n"
            f"        Element Required  = '{self.required}'\n"
        )


@dataclass(slots=True)
class ExchangeEntry:
    """One message binding of an exchange document."""

    type: str
    exchange: str
    name: str
    title: str
    description: str
    routing_key: list[RouteElement]
    schema: str

    type_name: str = ""
    definition_url: str = ""

    def __str__(self) -> str:
        result = (
            f"    Entry Type        = '{self.type}'\n"
            f"    Entry Exchange    = '{self.exchange}'\n"
            f"    Entry Name        = '{self.name}'\n"
            f"    Entry Title       = '{self.title}'\n"
            f"    Entry Description = '{self.description}'\n"
        )
        for i, element in enumerate(self.routing_key):
            result += f"    Routing Key Element {i:<6}= \n{element}"
        result += f"    Entry Schema      = '{self.schema}'\n"
        return result


@dataclass(slots=True)
class ExchangeDocument:
    """Decoded exchanges reference document."""

    version: str
    title: str
    description: str
    exchange_prefix: str
    entries: list[ExchangeEntry]
    definition_url: str

    def __str__(self) -> str:
        result = (
            f"Version         = '{self.version}'\n"
            f"Title           = '{self.title}'\n"
            f"Description     = '{self.description}'\n"
            f"Exchange Prefix = '{self.exchange_prefix}'\n"
        )
        for i, entry in enumerate(self.entries):
            result += f"Entry {i:<6}= \n{entry}"
        return result


def _decode_route_element(data: Any, source: str, where: str) -> RouteElement:
    data = _mapping(data, source, where)
    return RouteElement(
        name=_field(data, "name", str, source, required=True, where=where),
        summary=_field(data, "summary", str, source, "", where=where),
        constant=_field(data, "constant", str, source, "", where=where),
        multiple_words=_field(data, "multipleWords", bool, source, False, where=where),
        required=_field(data, "required", bool, source, False, where=where),
    )


def _decode_exchange_entry(data: Any, source: str, index: int) -> ExchangeEntry:
    where = f"entries[{index}]"
    data = _mapping(data, source, where)
    routing_key = _field(data, "routingKey", list, source, [], where=where)
    return ExchangeEntry(
        type=_field(data, "type", str, source, "", where=where),
        exchange=_field(data, "exchange", str, source, required=True, where=where),
        name=_field(data, "name", str, source, required=True, where=where),
        title=_field(data, "title", str, source, "", where=where),
        description=_field(data, "description", str, source, "", where=where),
        routing_key=[
            _decode_route_element(rk, source, f"{where}.routingKey[{i}]")
            for i, rk in enumerate(routing_key)
        ],
        schema=_field(data, "schema", str, source, "", where=where),
    )


def decode_exchange_document(data: Any, definition_url: str) -> ExchangeDocument:
    """Decode an exchanges reference document."""
    data = _mapping(data, definition_url, "<root>")
    entries = _field(data, "entries", list, definition_url, [])
    return ExchangeDocument(
        version=str(_field(data, "version", (str, int, float), definition_url, "")),
        title=_field(data, "title", str, definition_url, ""),
        description=_field(data, "description", str, definition_url, ""),
        exchange_prefix=_field(data, "exchangePrefix", str, definition_url, ""),
        entries=[_decode_exchange_entry(e, definition_url, i) for i, e in enumerate(entries)],
        definition_url=definition_url,
    )


#############################################################################
# Definitions
#############################################################################

Document = Union[ApiDocument, ExchangeDocument]

DOCUMENT_DECODERS: Final[dict[str, Callable[[Any, str], Document]]] = {
    API_REFERENCE_URL: decode_api_document,
    EXCHANGES_REFERENCE_URL: decode_exchange_document,
}


@dataclass(slots=True)
class Definition:
    """A manifest entry pointing at one API or exchange reference document."""

    url: str
    schema_url: str
    name: str
    docroot: str
    document: Document | None = field(default=None, repr=False)

    @property
    def is_api(self) -> bool:
        return isinstance(self.document, ApiDocument)

    @property
    def is_exchange(self) -> bool:
        return isinstance(self.document, ExchangeDocument)


def check_document_kind(definition: Definition) -> Callable[[Any, str], Document]:
    """Return the decoder for a definition's meta-schema URL.

    Raises:
        ConfigurationError: If the meta-schema URL is not supported.
    """
    decoder = DOCUMENT_DECODERS.get(definition.schema_url)
    if decoder is None:
        raise ConfigurationError(
            "Unsupported reference document type",
            definition.url,
            schema_url=definition.schema_url,
        )
    return decoder


def decode_document(data: Any, definition: Definition) -> Document:
    """Decode ``data`` into the document variant named by the definition."""
    return check_document_kind(definition)(data, definition.url)


def decode_manifest(data: Any, source: str = "<manifest>") -> list[Definition]:
    """Decode the root manifest into definitions, in declared order."""
    if not isinstance(data, list):
        raise DecodeError(f"manifest must be a list, got {type(data).__name__}", source)
    definitions: list[Definition] = []
    for index, item in enumerate(data):
        item = _mapping(item, source, f"[{index}]")
        definitions.append(Definition(
            url=_field(item, "url", str, source, required=True, where=f"[{index}]"),
            schema_url=_field(item, "schema", str, source, required=True, where=f"[{index}]"),
            name=_field(item, "name", str, source, required=True, where=f"[{index}]"),
            docroot=_field(item, "docroot", str, source, "", where=f"[{index}]"),
        ))
    return definitions
