"""
Go client generator - renders client bindings from loaded API definitions.

Loads the manifest, every API/exchange reference document and every JSON
schema they reference, then renders:
- a Go source file with payload types, API clients and exchange bindings
- a plain-text dump of the loaded model, for reference
"""

from __future__ import annotations

import argparse
import json
import re
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Final, Sequence

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from ..model import (
    DEFAULT_PATCHES,
    ApiDocument,
    ApiEntry,
    Definition,
    ExchangeDocument,
    ExchangeEntry,
    LoadResult,
    LoadSession,
    SchemaPatch,
    SchemaRecord,
    load_manifest,
    load_patches,
)
from ..shared import (
    HttpFetcher,
    SchemaCache,
    SchemaError,
    normalise,
    sanitize_param_name,
    to_lower_camel,
)
from ..shared.fetcher import DEFAULT_TIMEOUT

TEMPLATE_DIR: Final[Path] = Path(__file__).parent / "templates"

DEFAULT_MANIFEST: Final[Path] = Path("codegen/apis.json")
DEFAULT_OUTPUT: Final[Path] = Path("client/generated-code.go")
DEFAULT_MODEL_DATA: Final[Path] = Path("codegen/model-data.txt")
DEFAULT_PACKAGE: Final[str] = "client"

# JSON Schema scalar types to Go types
GO_SCALAR_TYPES: Final[dict[str, str]] = {
    "string": "string",
    "integer": "int",
    "number": "float64",
    "boolean": "bool",
}

_PLACEHOLDER = re.compile(r"<([^<>]+)>")


@dataclass(frozen=True, slots=True)
class GeneratorConfig:
    """Options for one generator run."""

    manifest: str
    output: Path = DEFAULT_OUTPUT
    model_data: Path | None = DEFAULT_MODEL_DATA
    package: str = DEFAULT_PACKAGE
    timeout: float = DEFAULT_TIMEOUT
    patches: tuple[SchemaPatch, ...] = DEFAULT_PATCHES

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> GeneratorConfig:
        if args.no_patches:
            patches: tuple[SchemaPatch, ...] = ()
        elif args.patches is not None:
            patches = load_patches(args.patches)
        else:
            patches = DEFAULT_PATCHES
        return cls(
            manifest=str(args.manifest),
            output=args.output,
            model_data=None if args.no_model_data else args.model_data,
            package=args.package,
            timeout=args.timeout,
            patches=patches,
        )


def go_comment(text: str, prefix: str = "// ") -> str:
    """Turn text into a Go line comment block ending in a newline."""
    if not text:
        return ""
    lines = text.rstrip("\n").split("\n")
    return "".join((prefix + line).rstrip() + "\n" for line in lines)


def underline(text: str) -> str:
    return f"{text}\n{'=' * len(text)}\n"


def route_expression(route: str) -> str:
    """Splice ``<arg>`` placeholders of a route into a Go string expression.

    Examples:
        >>> route_expression("/task/<taskId>/status")
        '"/task/" + taskId + "/status"'
    """
    # split() alternates literal text and placeholder names
    parts = _PLACEHOLDER.split(route)
    terms = []
    for index, part in enumerate(parts):
        if index % 2:
            terms.append(sanitize_param_name(part))
        elif part:
            terms.append(json.dumps(part))
    return " + ".join(terms) or '""'


def go_type(schema: SchemaRecord, schemas: SchemaCache, indent: str = "") -> str:
    """Render the Go type expression for a schema.

    ``$ref`` sub-schemas become the referenced type name; objects with
    properties become inline structs indented one tab deeper than
    ``indent``.
    """
    if schema.ref:
        target = schemas.get(schema.ref)
        if target is None or target.type_name is None:
            raise SchemaError("Referenced schema was never resolved", schema.ref)
        return target.type_name

    if schema.type == "array":
        if schema.items is None:
            return "[]interface{}"
        return "[]" + go_type(schema.items, schemas, indent)

    if schema.properties:
        return _go_struct(schema, schemas, indent)

    if schema.type == "object":
        return "map[string]interface{}"

    return GO_SCALAR_TYPES.get(schema.type or "", "interface{}")


def _go_struct(schema: SchemaRecord, schemas: SchemaCache, indent: str) -> str:
    properties = schema.properties or {}
    inner = indent + "\t"
    field_names: set[str] = set()
    required = set(schema.required)
    lines = ["struct {"]
    for index, (name, prop) in enumerate(properties.items()):
        if index:
            lines.append("")
        comment = go_comment(prop.description, inner + "// ")
        if comment:
            lines.append(comment.rstrip("\n"))
        tag = name if name in required else f"{name},omitempty"
        field_name = normalise(name, field_names)
        lines.append(f'{inner}{field_name} {go_type(prop, schemas, inner)} `json:"{tag}"`')
    lines.append(indent + "}")
    return "\n".join(lines)


def type_definition(url: str, schemas: SchemaCache) -> str:
    """Render one entry of the payload ``type ( ... )`` block."""
    record = schemas[url]
    content = "\n"
    comment = go_comment(record.description)
    if comment:
        content += comment + "//\n"
    content += f"// See {url}\n"
    content += f"{record.type_name} {go_type(record, schemas)}\n"
    return content


def indent_block(text: str, prefix: str) -> str:
    return "".join(prefix + line if line.strip() else line for line in text.splitlines(keepends=True))


@dataclass
class GeneratorContext:
    """Context for code generation with cached resources."""

    template_env: Environment = field(init=False)

    def __post_init__(self) -> None:
        self.template_env = Environment(
            loader=FileSystemLoader(TEMPLATE_DIR),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
            auto_reload=False,
        )
        self.template_env.filters["go_comment"] = go_comment
        self.template_env.filters["underline"] = underline
        # Pre-compile templates
        self._client_template = self.template_env.get_template("client.go.j2")
        self._model_data_template = self.template_env.get_template("model_data.txt.j2")

    @property
    def client_template(self):
        return self._client_template

    @property
    def model_data_template(self):
        return self._model_data_template


def _api_method(entry: ApiEntry, definition: Definition, schemas: SchemaCache) -> dict[str, Any]:
    params = [f"{sanitize_param_name(arg)} string" for arg in entry.args]
    payload = "nil"
    if entry.input:
        payload = "payload"
        params.append(f"payload *{schemas[entry.input].type_name}")
    output_type = schemas[entry.output].type_name if entry.output else None
    return {
        "name": entry.name,
        "method_name": entry.method_name,
        "description": entry.description,
        "docroot": definition.docroot,
        "params": ", ".join(params),
        "payload": payload,
        "http_method": entry.method.upper(),
        "route": route_expression(entry.route),
        "output_type": output_type,
    }


def _api_client(definition: Definition, result: LoadResult) -> dict[str, Any]:
    document = definition.document
    if not isinstance(document, ApiDocument):
        raise SchemaError("Definition has no loaded API document", definition.url)
    methods = [
        _api_method(entry, result.definition(entry.definition_url), result.schemas)
        for entry in document.entries
    ]
    return {
        "kind": "api",
        "name": definition.name,
        "var_name": to_lower_camel(definition.name),
        "url": definition.url,
        "description": document.description,
        "base_url": document.base_url,
        "example": methods[0] if methods else None,
        "methods": methods,
    }


def _exchange_binding(
    entry: ExchangeEntry,
    document: ExchangeDocument,
    definition: Definition,
    schemas: SchemaCache,
) -> dict[str, Any]:
    return {
        "name": entry.name,
        "type_name": entry.type_name,
        "description": entry.description,
        "docroot": definition.docroot,
        "fields": [
            {"name": rk.field_name, "mwords": "#" if rk.multiple_words else "*"}
            for rk in entry.routing_key
        ],
        "exchange_name": document.exchange_prefix + entry.exchange,
        "payload_type": schemas[entry.schema].type_name if entry.schema else None,
    }


def _exchange(definition: Definition, result: LoadResult) -> dict[str, Any]:
    document = definition.document
    if not isinstance(document, ExchangeDocument):
        raise SchemaError("Definition has no loaded exchange document", definition.url)
    return {
        "kind": "exchange",
        "name": definition.name,
        "url": definition.url,
        "description": document.description,
        "bindings": [
            _exchange_binding(entry, document, result.definition(entry.definition_url), result.schemas)
            for entry in document.entries
        ],
    }


def render_client(ctx: GeneratorContext, result: LoadResult, package: str = DEFAULT_PACKAGE) -> str:
    """Render the Go client source for a completed load."""
    types = "".join(indent_block(type_definition(url, result.schemas), "\t") for url in result.schema_urls)
    definitions = [
        _api_client(d, result) if d.is_api else _exchange(d, result)
        for d in result.definitions
    ]
    return ctx.client_template.render(
        package=package,
        types=types,
        definitions=definitions,
    )


def render_model_data(ctx: GeneratorContext, result: LoadResult) -> str:
    """Render the plain-text dump of every definition and schema."""
    return ctx.model_data_template.render(
        definitions=[(d.url, str(d.document)) for d in result.definitions],
        schemas=[(url, str(result.schemas[url])) for url in result.schema_urls],
    )


def load(config: GeneratorConfig) -> LoadResult:
    """Run the load pass for ``config``; raises SchemaError on any failure."""
    with HttpFetcher(timeout=config.timeout) as fetcher:
        definitions = load_manifest(config.manifest, fetcher)
        print(f"Found {len(definitions)} definition(s) in {config.manifest}")
        return LoadSession(fetcher).load(definitions, config.patches)


def generate(config: GeneratorConfig, ctx: GeneratorContext | None = None) -> LoadResult:
    """Load everything, render, then write output files."""
    result = load(config)
    ctx = ctx or GeneratorContext()

    client_code = render_client(ctx, result, config.package)
    model_data = render_model_data(ctx, result) if config.model_data else None

    config.output.parent.mkdir(parents=True, exist_ok=True)
    config.output.write_text(client_code, encoding="utf-8")
    print(f"Generated Go client -> {config.output} ({len(result.schema_urls)} schema types)")

    if config.model_data is not None and model_data is not None:
        config.model_data.parent.mkdir(parents=True, exist_ok=True)
        config.model_data.write_text(model_data, encoding="utf-8")
        print(f"Generated model data -> {config.model_data}")

    return result


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--manifest", default=DEFAULT_MANIFEST, help="Path or URL of the manifest listing API definitions (JSON or YAML)")
    parser.add_argument("--output", default=DEFAULT_OUTPUT, type=Path, help="Output path for the generated Go client")
    parser.add_argument("--model-data", default=DEFAULT_MODEL_DATA, type=Path, help="Output path for the model data dump")
    parser.add_argument("--no-model-data", action="store_true", help="Do not write the model data dump")
    parser.add_argument("--package", default=DEFAULT_PACKAGE, help="Go package name of the generated file")
    parser.add_argument("--timeout", default=DEFAULT_TIMEOUT, type=float, help="HTTP timeout in seconds for each fetch")
    patch_group = parser.add_mutually_exclusive_group()
    patch_group.add_argument("--patches", type=Path, help="YAML/JSON file of schema patches replacing the built-in list")
    patch_group.add_argument("--no-patches", action="store_true", help="Do not apply any schema patches")
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    try:
        config = GeneratorConfig.from_args(args)
        generate(config)
    except SchemaError as e:
        print(f"Error: {e}", file=sys.stderr)
        raise SystemExit(1) from e


def schemas_main(argv: Sequence[str] | None = None) -> None:
    """Print every schema URL with its assigned type name."""
    args = build_parser().parse_args(argv)
    try:
        result = load(GeneratorConfig.from_args(args))
    except SchemaError as e:
        print(f"Error: {e}", file=sys.stderr)
        raise SystemExit(1) from e
    for url in result.schema_urls:
        record = result.schemas[url]
        flags = "".join(flag for flag, on in (("I", record.is_input_schema), ("O", record.is_output_schema)) if on)
        print(f"{record.type_name:40} {flags:2} {url}")


if __name__ == "__main__":
    main()
