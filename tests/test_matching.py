from __future__ import annotations

from json_schema_relations.matching import (
    EXACT_MATCH_CONFIDENCE,
    compute_matches,
    dashboard_stats,
    load_dataset,
    relationship_stats,
    relationships_for_schema,
)
from json_schema_relations.models import Relationship, RelationshipType, SchemaField


def _field(schema_id, path):
    return SchemaField(name=path.split(".")[-1], type="string", path=path, schema_id=schema_id)


def _relationship(rel_id, source, target):
    return Relationship(id=rel_id, name=rel_id, source_field=source, target_field=target, type=RelationshipType.ONE_TO_ONE)


ID_EMAIL = _relationship("r1", _field("s1", "id"), _field("s1", "email"))


def test_only_records_with_both_fields_match():
    processed = compute_matches([{"id": 1, "email": "a@x.com"}, {"id": 2}], "s1", [ID_EMAIL])

    assert len(processed) == 1
    assert processed[0].relationship_id == "r1"
    assert len(processed[0].matches) == 1
    match = processed[0].matches[0]
    assert match.source_record == {"id": 1}
    assert match.target_record == {"email": "a@x.com"}
    assert match.confidence == EXACT_MATCH_CONFIDENCE == 1.0


def test_explicit_null_counts_as_present():
    processed = compute_matches([{"id": 1, "email": None}], "s1", [ID_EMAIL])
    assert processed[0].matches[0].target_record == {"email": None}


def test_values_are_not_compared():
    relationship = _relationship("r", _field("s1", "a"), _field("s1", "b"))
    processed = compute_matches([{"a": 1, "b": 2}, {"a": "x", "b": "x"}], "s1", [relationship])
    assert len(processed[0].matches) == 2


def test_relationships_without_matches_are_omitted():
    empty = _relationship("r2", _field("s1", "phone"), _field("s1", "id"))
    processed = compute_matches([{"id": 1, "email": "a@x.com"}], "s1", [empty, ID_EMAIL])
    assert [p.relationship_id for p in processed] == ["r1"]
    assert all(p.matches for p in processed)


def test_relationships_are_filtered_by_either_endpoint():
    source_side = _relationship("src", _field("s1", "id"), _field("s2", "id"))
    target_side = _relationship("tgt", _field("s3", "id"), _field("s1", "id"))
    elsewhere = _relationship("none", _field("s2", "id"), _field("s3", "id"))

    selected = relationships_for_schema([source_side, target_side, elsewhere], "s1")
    assert [r.id for r in selected] == ["src", "tgt"]

    processed = compute_matches([{"id": 7}], "s1", [source_side, target_side, elsewhere])
    assert [p.relationship_id for p in processed] == ["src", "tgt"]


def test_nested_paths_and_odd_records():
    relationship = _relationship("geo", _field("s1", "address.city"), _field("s1", "address.zip"))
    records = [
        {"address": {"city": "Oslo", "zip": "0150"}},
        {"address": {"city": "Bergen"}},
        {"address": None},
        "scalar",
        None,
        [1, 2],
    ]
    processed = compute_matches(records, "s1", [relationship])
    assert [m.source_record for m in processed[0].matches] == [{"address.city": "Oslo"}]


def test_no_records_or_no_relationships():
    assert compute_matches([], "s1", [ID_EMAIL]) == []
    assert compute_matches([{"id": 1, "email": "x"}], "s1", []) == []


def test_load_dataset_stores_matches(context, contacts_schema):
    relationship = context.add_relationship("id-city", contacts_schema.fields[0], contacts_schema.fields[3])
    entry = load_dataset(
        context,
        contacts_schema.id,
        [{"id": 1, "address": {"city": "Oslo"}}, {"id": 2}],
    )

    assert context.get_loaded_data(contacts_schema.id) == entry
    assert entry.data == [{"id": 1, "address": {"city": "Oslo"}}, {"id": 2}]
    assert [p.relationship_id for p in entry.relationships] == [relationship.id]


def test_reloading_replaces_previous_matches(context, contacts_schema):
    context.add_relationship("id-email", contacts_schema.fields[0], contacts_schema.fields[1])
    load_dataset(context, contacts_schema.id, [{"id": 1, "email": "a"}])
    load_dataset(context, contacts_schema.id, [{"id": 1}])

    assert len(context.loaded_data) == 1
    assert context.loaded_data[0].relationships == ()


def test_relationship_stats(context, contacts_schema, orders_schema):
    context.add_relationship("id-email", contacts_schema.fields[0], contacts_schema.fields[1])
    context.add_relationship("id-tags", contacts_schema.fields[0], contacts_schema.fields[5])
    context.add_relationship("orders", orders_schema.fields[0], orders_schema.fields[1])

    empty = relationship_stats(context, contacts_schema.id)
    assert (empty.total, empty.active, empty.matches) == (0, 0, 0)

    load_dataset(context, contacts_schema.id, [{"id": 1, "email": "a"}, {"id": 2, "email": "b"}])
    stats = relationship_stats(context, contacts_schema.id)
    assert (stats.total, stats.active, stats.matches) == (2, 1, 2)


def test_dashboard_stats(context, contacts_schema, orders_schema):
    context.add_relationship("id-email", contacts_schema.fields[0], contacts_schema.fields[1])
    context.add_relationship("orders", orders_schema.fields[0], orders_schema.fields[1])
    load_dataset(context, contacts_schema.id, [{"id": 1, "email": "a"}])
    load_dataset(context, orders_schema.id, [{"orderId": 1, "customerId": 1}])

    stats = dashboard_stats(context)
    assert (stats.schemas, stats.relationships, stats.datasets, stats.active_relationships) == (2, 2, 2, 2)


def test_non_ascii_digit_key_over_list_does_not_match(context):
    schema = context.add_schema("odd", {"items": {"²": 1}, "id": 1})
    item_field = context.find_field(schema.id, "items.²")
    context.add_relationship("odd", item_field, context.find_field(schema.id, "id"))

    entry = load_dataset(context, schema.id, [{"items": [1, 2, 3], "id": 1}])

    assert entry.relationships == ()
    assert context.get_loaded_data(schema.id).data == [{"items": [1, 2, 3], "id": 1}]
