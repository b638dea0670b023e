from __future__ import annotations

import pytest

from json_schema_relations.fields import build_field_tree, count_nested_keys, extract_fields
from json_schema_relations.json_values import json_kind

DOCUMENT = {
    "id": 1,
    "name": "Ada",
    "active": True,
    "score": 9.5,
    "nickname": None,
    "address": {"city": "Oslo", "geo": {"lat": 59.9, "lng": 10.7}},
    "tags": ["x", {"ignored": 1}],
    "meta": {},
}


def test_fields_follow_depth_first_key_order():
    paths = [f.path for f in extract_fields(DOCUMENT, "s1")]
    assert paths == [
        "id",
        "name",
        "active",
        "score",
        "nickname",
        "address",
        "address.city",
        "address.geo",
        "address.geo.lat",
        "address.geo.lng",
        "tags",
        "meta",
    ]


def test_field_types_and_names():
    by_path = {f.path: f for f in extract_fields(DOCUMENT, "s1")}
    assert by_path["id"].type == "number"
    assert by_path["name"].type == "string"
    assert by_path["active"].type == "boolean"
    assert by_path["score"].type == "number"
    assert by_path["nickname"].type == "null"
    assert by_path["address"].type == "object"
    assert by_path["tags"].type == "array"
    assert by_path["meta"].type == "object"
    assert by_path["address.geo.lat"].name == "lat"
    assert all(f.schema_id == "s1" for f in by_path.values())


def test_field_count_matches_nested_key_count_and_paths_are_unique():
    fields = extract_fields(DOCUMENT, "s1")
    assert len(fields) == count_nested_keys(DOCUMENT) == 12
    assert len({f.path for f in fields}) == len(fields)


def test_dotted_keys_do_not_collide_with_nesting():
    fields = extract_fields({"a.b": 1, "a": {"b": 2}}, "s1")
    paths = [f.path for f in fields]
    assert paths == ["a\\.b", "a", "a.b"]


@pytest.mark.parametrize("document", [[{"id": 1}], "text", 3, None, True])
def test_non_object_documents_have_no_fields(document):
    assert extract_fields(document, "s1") == []
    assert count_nested_keys(document) == 0


def test_json_kind_rejects_non_json_values():
    with pytest.raises(TypeError):
        json_kind(object())


def test_build_field_tree_nests_children():
    tree = build_field_tree(extract_fields({"address": {"city": "Oslo"}, "id": 1}, "s1"))
    assert tree == {
        "address": {"type": "object", "children": {"city": {"type": "string", "children": {}}}},
        "id": {"type": "number", "children": {}},
    }
