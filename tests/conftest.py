"""Shared fixtures for requery tests."""

from __future__ import annotations

import datetime as dt
from collections.abc import Iterator
from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from requery import DefaultFilterFactory, MemoryOperatorRegistry, SchemaRegistry
from requery.sqlalchemy import register_model

from .entities import (
    Address,
    AddressRecord,
    Base,
    Order,
    OrderRecord,
    Person,
    PersonRecord,
    Status,
)


@pytest.fixture
def registry():
    """Default in-memory operator registry."""
    return MemoryOperatorRegistry()


@pytest.fixture
def schema() -> SchemaRegistry:
    schema = SchemaRegistry()
    schema.register(Address, {"city": str, "zip": "string"})
    schema.register(Order, {"total": Decimal, "placed_on": dt.date})
    schema.register(
        Person,
        {
            "id": int,
            "name": str,
            "age": "integer",
            "status": str,
            "email": str,
            "state": Status,
            "address": Address,
            "orders": list[Order],
        },
    )
    return schema


@pytest.fixture
def factory(schema: SchemaRegistry) -> DefaultFilterFactory:
    return DefaultFilterFactory.create(schema)


@pytest.fixture
def people() -> list[Person]:
    return [
        Person(1, "John", 17, "A", "john@example.com", address=Address("Sofia")),
        Person(
            2,
            "Joanna",
            25,
            "B",
            None,
            address=Address("Plovdiv"),
            orders=[Order(Decimal("150"), dt.date(2024, 1, 5))],
        ),
        Person(3, "Alice", 31, "A", "alice@example.com", Status.BLOCKED),
        Person(
            4,
            "Bob",
            19,
            "B",
            None,
            orders=[
                Order(Decimal("20"), dt.date(2024, 2, 1)),
                Order(Decimal("75"), dt.date(2024, 3, 1)),
            ],
        ),
        Person(5, "Carol", 45, "C", "carol@example.com", address=Address("Sofia")),
    ]


@pytest.fixture
def sql_schema() -> SchemaRegistry:
    schema = SchemaRegistry()
    register_model(schema, PersonRecord)
    return schema


@pytest.fixture
def sql_factory(sql_schema: SchemaRegistry) -> DefaultFilterFactory:
    return DefaultFilterFactory.create(sql_schema)


@pytest.fixture
def session() -> Iterator[Session]:
    """In-memory SQLite session seeded with a handful of people."""
    engine = create_engine("sqlite://")
    Base.metadata.create_all(engine)
    with Session(engine) as session:
        sofia = AddressRecord(id=1, city="Sofia")
        plovdiv = AddressRecord(id=2, city="Plovdiv")
        session.add_all(
            [
                PersonRecord(
                    id=1,
                    name="John",
                    age=17,
                    status="A",
                    email="john@example.com",
                    address=sofia,
                ),
                PersonRecord(
                    id=2,
                    name="Joanna",
                    age=25,
                    status="B",
                    address=plovdiv,
                    orders=[OrderRecord(id=1, total=150)],
                ),
                PersonRecord(
                    id=3, name="Alice", age=31, status="A", email="alice@example.com"
                ),
                PersonRecord(
                    id=4,
                    name="Bob",
                    age=19,
                    status="B",
                    orders=[OrderRecord(id=2, total=20), OrderRecord(id=3, total=75)],
                ),
                PersonRecord(
                    id=5,
                    name="Carol",
                    age=45,
                    status="C",
                    email="carol@example.com",
                    address=sofia,
                ),
                PersonRecord(id=6, name="Dave", age=30, status="A"),
            ]
        )
        session.commit()
        yield session
    engine.dispose()
