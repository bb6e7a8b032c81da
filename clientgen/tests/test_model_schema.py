import pytest

from clientgen.model.schema import SchemaRecord, decode_schema
from clientgen.shared.errors import DecodeError

BASE = "http://schemas.example.com/queue/v1/task.json#"


class TestDecodeSchema:
    def test_object_with_properties(self):
        record = decode_schema(
            {
                "title": "Task",
                "description": "A task.",
                "type": "object",
                "properties": {
                    "taskId": {"type": "string", "format": "slugid"},
                    "retries": {"type": "integer"},
                },
                "required": ["taskId"],
                "additionalProperties": False,
            },
            BASE,
        )
        assert record.title == "Task"
        assert record.description == "A task."
        assert record.type == "object"
        assert list(record.properties) == ["taskId", "retries"]
        assert record.properties["taskId"].format == "slugid"
        assert record.properties["taskId"].source_url is None
        assert record.required == ["taskId"]
        assert record.additional_properties is False

    def test_array_items(self):
        record = decode_schema({"type": "array", "items": {"type": "string", "enum": ["a", "b"]}}, BASE)
        assert record.items.type == "string"
        assert record.items.enum == ["a", "b"]

    def test_relative_ref_is_resolved_and_canonical(self):
        record = decode_schema({"properties": {"status": {"$ref": "task-status.json"}}}, BASE)
        assert record.properties["status"].ref == "http://schemas.example.com/queue/v1/task-status.json#"

    def test_absolute_ref_kept(self):
        record = decode_schema({"$ref": "http://other.example.com/x.json#"}, BASE)
        assert record.ref == "http://other.example.com/x.json#"

    def test_local_pointer_with_escapes(self):
        record = decode_schema(
            {"definitions": {"a/b": {"type": "integer"}}, "items": {"$ref": "#/definitions/a~1b"}},
            BASE,
        )
        assert record.items.type == "integer"
        assert record.items.ref is None

    def test_missing_pointer_target(self):
        with pytest.raises(DecodeError) as exc_info:
            decode_schema({"properties": {"x": {"$ref": "#/definitions/missing"}}}, BASE)
        assert exc_info.value.field == "properties.x.$ref"
        assert "does not exist" in str(exc_info.value)

    def test_nullable_type_union(self):
        record = decode_schema({"type": ["string", "null"]}, BASE)
        assert record.type == "string"

    def test_ambiguous_type_union(self):
        record = decode_schema({"type": ["string", "integer"]}, BASE)
        assert record.type is None

    def test_missing_title(self):
        assert decode_schema({"type": "string"}, BASE).title is None

    def test_root_must_be_object(self):
        with pytest.raises(DecodeError) as exc_info:
            decode_schema(["not", "a", "schema"], BASE)
        assert exc_info.value.field == "<root>"

    def test_bad_property_reports_path(self):
        with pytest.raises(DecodeError) as exc_info:
            decode_schema({"properties": {"runs": {"items": {"title": 5}}}}, BASE)
        assert exc_info.value.field == "properties.runs.items.title"
        assert exc_info.value.source_url == BASE


class TestIterRefs:
    def test_depth_first_in_declared_order(self):
        record = decode_schema(
            {
                "$ref": "a.json",
                "properties": {
                    "x": {"properties": {"y": {"$ref": "b.json"}}},
                    "z": {"type": "array", "items": {"$ref": "c.json"}},
                },
            },
            BASE,
        )
        names = [url.rsplit("/", 1)[-1] for url in record.iter_refs()]
        assert names == ["a.json#", "b.json#", "c.json#"]

    def test_no_refs(self):
        assert list(SchemaRecord(type="string").iter_refs()) == []


class TestStr:
    def test_cached_record_dump(self):
        record = decode_schema({"title": "Task", "properties": {"taskId": {"type": "string"}}}, BASE)
        record.source_url = BASE
        record.type_name = "Task"
        text = str(record)
        assert "Source URL  = 'http://schemas.example.com/queue/v1/task.json#'" in text
        assert "Type Name   = 'Task'" in text
        assert "Property 'taskId' =" in text
        assert "        Type        = 'string'" in text
