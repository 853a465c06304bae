"""Tests for the static schema registry."""

from __future__ import annotations

import datetime as dt
import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal

import pytest

from requery.exceptions import RelationshipTraversalError, UnknownFieldError
from requery.schema import Relationship, SchemaRegistry

from .entities import Address, Order, Person, Status


class TestResolution:
    def test_scalar_fields(self, schema: SchemaRegistry) -> None:
        assert schema.resolve_field_type(Person, "name") is str
        assert schema.resolve_field_type(Person, "state") is Status

    def test_type_name_aliases(self, schema: SchemaRegistry) -> None:
        assert schema.resolve_field_type(Person, "age") is int
        assert schema.resolve_field_type(Address, "zip") is str

    def test_dotted_to_one(self, schema: SchemaRegistry) -> None:
        assert schema.resolve_field_type(Person, "address.city") is str

    def test_dotted_to_many(self, schema: SchemaRegistry) -> None:
        assert schema.resolve_field_type(Person, "orders.total") is Decimal
        assert schema.resolve_field_type(Person, "orders.placed_on") is dt.date

    def test_unknown_field_suggests(self, schema: SchemaRegistry) -> None:
        with pytest.raises(UnknownFieldError) as exc_info:
            schema.resolve_field_type(Person, "nmae")
        assert "name" in exc_info.value.suggestions
        assert exc_info.value.entity_name == "Person"

    def test_unknown_nested_field(self, schema: SchemaRegistry) -> None:
        with pytest.raises(UnknownFieldError) as exc_info:
            schema.resolve_field_type(Person, "address.cty")
        assert exc_info.value.entity_name == "Address"
        assert exc_info.value.full_path == "address.cty"

    def test_traversing_a_scalar(self, schema: SchemaRegistry) -> None:
        with pytest.raises(RelationshipTraversalError):
            schema.resolve_field_type(Person, "name.first")

    def test_relationship_is_not_filterable(self, schema: SchemaRegistry) -> None:
        with pytest.raises(UnknownFieldError) as exc_info:
            schema.resolve_field_type(Person, "address")
        assert not isinstance(exc_info.value, RelationshipTraversalError)
        assert "address" not in exc_info.value.available_fields

    def test_unregistered_entity(self) -> None:
        with pytest.raises(UnknownFieldError):
            SchemaRegistry().resolve_field_type(Person, "name")


class TestRegistration:
    def test_fields_returns_a_copy(self, schema: SchemaRegistry) -> None:
        fields = schema.fields(Address)
        fields["extra"] = int
        assert "extra" not in schema.fields(Address)

    def test_fields_of_unregistered_entity(self) -> None:
        assert SchemaRegistry().fields(Person) == {}

    def test_list_annotation_becomes_relationship(self, schema: SchemaRegistry) -> None:
        assert schema.fields(Person)["orders"] == Relationship(Order, many=True)

    def test_unknown_type_name(self) -> None:
        with pytest.raises(ValueError, match="Unknown type name"):
            SchemaRegistry().register(Address, {"city": "varchar2"})

    def test_is_registered(self, schema: SchemaRegistry) -> None:
        assert schema.is_registered(Person)
        assert not schema.is_registered(Status)


class TestCache:
    def test_resolution_is_memoized(
        self, schema: SchemaRegistry, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.DEBUG, logger="requery.schema"):
            schema.resolve_field_type(Person, "address.city")
            schema.resolve_field_type(Person, "address.city")
        misses = [r for r in caplog.records if "address.city" in r.getMessage()]
        assert len(misses) == 1

    def test_register_invalidates_cache(self, schema: SchemaRegistry) -> None:
        assert schema.resolve_field_type(Address, "zip") is str
        schema.register(Address, {"city": str, "zip": int})
        assert schema.resolve_field_type(Address, "zip") is int

    def test_registration_during_resolution_is_not_overwritten(
        self, schema: SchemaRegistry, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        resolve = SchemaRegistry._resolve

        def resolve_then_reregister(self, entity_type, field_name):
            value_type = resolve(self, entity_type, field_name)
            # Another thread replaces the table before the result is memoized
            self.register(Address, {"city": str, "zip": int})
            return value_type

        monkeypatch.setattr(SchemaRegistry, "_resolve", resolve_then_reregister)
        assert schema.resolve_field_type(Address, "zip") is str
        monkeypatch.undo()

        assert schema.resolve_field_type(Address, "zip") is int

    def test_concurrent_resolution_and_registration(self, schema: SchemaRegistry) -> None:
        barrier = threading.Barrier(8)

        def resolve() -> type:
            barrier.wait()
            return schema.resolve_field_type(Person, "orders.total")

        def reregister() -> None:
            barrier.wait()
            schema.register(Order, {"total": int, "placed_on": dt.date})

        with ThreadPoolExecutor(max_workers=8) as pool:
            resolving = [pool.submit(resolve) for _ in range(7)]
            registering = pool.submit(reregister)
            results = [f.result() for f in resolving]
            registering.result()

        assert all(r in (Decimal, int) for r in results)
        assert schema.resolve_field_type(Person, "orders.total") is int
