from __future__ import annotations

import pytest

from json_schema_relations.context import DataContext
from json_schema_relations.storage import MemoryStore, PersistentStore


@pytest.fixture
def backend():
    return MemoryStore()


@pytest.fixture
def store(backend):
    return PersistentStore(backend)


@pytest.fixture
def context(store):
    return DataContext.open(store)


@pytest.fixture
def contacts_schema(context):
    return context.add_schema(
        "contacts",
        {"id": 1, "email": "a@x.com", "address": {"city": "Oslo", "zip": "0150"}, "tags": ["a"]},
    )


@pytest.fixture
def orders_schema(context):
    return context.add_schema("orders", {"orderId": 10, "customerId": 1})
