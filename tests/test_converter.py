"""Tests for the forward converter (filter DSL → predicate)."""

from __future__ import annotations

import datetime as dt
import logging
from decimal import Decimal

import pytest

from requery import (
    AndPredicate,
    ComplexFilter,
    Condition,
    EmptyFilter,
    FieldPredicate,
    Group,
    GroupOperator,
    MatchAllPredicate,
    OrPredicate,
    PredicateConverter,
    PredicateOperator,
    SimpleFilter,
)
from requery.exceptions import (
    TypeCoercionError,
    UnknownFieldError,
    UnsupportedOperatorArityError,
)

from .entities import Person


def cond(field, operator, value=None) -> Condition:
    return Condition(field=field, operator=operator, value=value)


@pytest.fixture
def converter(schema) -> PredicateConverter:
    return PredicateConverter(schema)


def _matching(predicate, people):
    return [p.id for p in people if predicate.is_satisfied_by(p)]


class TestEmptyAndSimple:
    def test_empty_matches_everything(self, converter, people) -> None:
        predicate = converter.build_predicate(EmptyFilter(), Person)
        assert isinstance(predicate, MatchAllPredicate)
        assert _matching(predicate, people) == [1, 2, 3, 4, 5]

    def test_single_condition_is_a_leaf(self, converter) -> None:
        predicate = converter.build_predicate(
            SimpleFilter((cond("age", "gt", 18),)), Person
        )
        assert isinstance(predicate, FieldPredicate)
        assert predicate.to_dict() == {"op": ">", "attr": "age", "val": 18}

    def test_conditions_are_and_combined_in_order(self, converter, people) -> None:
        predicate = converter.build_predicate(
            SimpleFilter((cond("age", "gt", 18), cond("name", "like", "Jo"))),
            Person,
        )
        assert isinstance(predicate, AndPredicate)
        assert [p.to_dict()["attr"] for p in predicate.predicates] == ["age", "name"]
        assert _matching(predicate, people) == [2]

    def test_zero_conditions_match_everything(self, converter) -> None:
        predicate = converter.simple_filter_predicate([], Person)
        assert isinstance(predicate, MatchAllPredicate)


class TestLeaves:
    def test_literals_are_coerced(self, converter) -> None:
        predicate = converter.condition_predicate(cond("age", "eq", "30"), Person)
        assert predicate.to_dict()["val"] == 30

    def test_nested_literals_are_coerced(self, converter) -> None:
        predicate = converter.condition_predicate(
            cond("orders.total", "gte", "100.50"), Person
        )
        assert predicate.to_dict()["val"] == Decimal("100.50")

    def test_between_becomes_a_pair(self, converter, people) -> None:
        predicate = converter.condition_predicate(
            cond("age", "between", ["18", 30]), Person
        )
        assert predicate.to_dict()["val"] == (18, 30)
        assert _matching(predicate, people) == [2, 4]

    def test_in_becomes_a_tuple(self, converter, people) -> None:
        predicate = converter.condition_predicate(
            cond("status", "in", ["A", "C"]), Person
        )
        assert predicate.to_dict()["val"] == ("A", "C")
        assert _matching(predicate, people) == [1, 3, 5]

    def test_null_checks_carry_no_value(self, converter, people) -> None:
        predicate = converter.condition_predicate(cond("email", "is_null"), Person)
        assert predicate.to_dict() == {"op": "is_null", "attr": "email", "val": None}
        assert _matching(predicate, people) == [2, 4]

    def test_like_maps_to_contains(self, converter) -> None:
        predicate = converter.condition_predicate(cond("name", "like", "Jo"), Person)
        assert isinstance(predicate, FieldPredicate)
        assert predicate.op is PredicateOperator.CONTAINS

    def test_enum_fields(self, converter, people) -> None:
        predicate = converter.condition_predicate(cond("state", "eq", "blocked"), Person)
        assert _matching(predicate, people) == [3]

    def test_to_many_paths_use_any_semantics(self, converter, people) -> None:
        predicate = converter.condition_predicate(
            cond("orders.placed_on", "gte", "2024-03-01"), Person
        )
        assert predicate.to_dict()["val"] == dt.date(2024, 3, 1)
        assert _matching(predicate, people) == [4]

    def test_to_one_paths(self, converter, people) -> None:
        predicate = converter.condition_predicate(
            cond("address.city", "eq", "Sofia"), Person
        )
        assert _matching(predicate, people) == [1, 5]


class TestArity:
    @pytest.mark.parametrize(
        ("operator", "value"),
        [
            ("between", [1]),
            ("between", [1, 2, 3]),
            ("is_null", 5),
            ("is_not_null", [1]),
            ("in", []),
            ("eq", None),
            ("eq", [1, 2]),
        ],
    )
    def test_wrong_arity_fails(self, converter, operator, value) -> None:
        with pytest.raises(UnsupportedOperatorArityError) as exc_info:
            converter.condition_predicate(cond("age", operator, value), Person)
        assert exc_info.value.field == "age"


class TestComplex:
    def test_uniform_group(self, converter, people) -> None:
        group = Group(
            operator=GroupOperator.OR,
            operations=[cond("status", "eq", "C"), cond("age", "lt", 18)],
        )
        predicate = converter.build_predicate(ComplexFilter(group), Person)
        assert isinstance(predicate, OrPredicate)
        assert len(predicate.predicates) == 2
        assert _matching(predicate, people) == [1, 5]

    def test_nested_group(self, converter, people) -> None:
        group = Group(
            operator=GroupOperator.OR,
            operations=[
                cond("status", "eq", "A"),
                Group(
                    operator=GroupOperator.AND,
                    operations=[cond("status", "eq", "B"), cond("age", "lt", 20)],
                ),
            ],
        )
        predicate = converter.build_predicate(ComplexFilter(group), Person)
        assert _matching(predicate, people) == [1, 3, 4]

    def test_non_priority_operators_fold_left(self, converter, people) -> None:
        # (status = A AND age > 20) OR name = Bob
        group = Group(
            operator=GroupOperator.OR,
            operations=[
                cond("status", "eq", "A"),
                cond("age", "gt", 20),
                cond("name", "eq", "Bob"),
            ],
            non_priority_operators=[GroupOperator.AND, GroupOperator.OR],
        )
        predicate = converter.build_predicate(ComplexFilter(group), Person)
        assert predicate.to_dict()["op"] == "or"
        assert predicate.to_dict()["conditions"][0]["op"] == "and"
        assert _matching(predicate, people) == [3, 4]

    def test_right_side_operands(self, converter, people) -> None:
        # age > 18 AND (status = A OR status = C)
        group = Group(
            operator=GroupOperator.AND,
            operations=[cond("age", "gt", 18)],
            right_side_operands=Group(
                operator=GroupOperator.OR,
                operations=[cond("status", "eq", "A"), cond("status", "eq", "C")],
            ),
        )
        predicate = converter.build_predicate(ComplexFilter(group), Person)
        assert _matching(predicate, people) == [3, 5]

    def test_unknown_field_deep_in_the_tree_aborts(self, converter) -> None:
        group = Group(
            operator=GroupOperator.AND,
            operations=[
                cond("age", "gt", 1),
                Group(
                    operator=GroupOperator.OR,
                    operations=[
                        cond("name", "eq", "x"),
                        Group(
                            operator=GroupOperator.AND,
                            operations=[cond("address.town", "eq", "Sofia")],
                        ),
                    ],
                ),
            ],
        )
        with pytest.raises(UnknownFieldError) as exc_info:
            converter.build_predicate(ComplexFilter(group), Person)
        assert exc_info.value.full_path == "address.town"

    def test_bad_literal_aborts(self, converter) -> None:
        wrapper = SimpleFilter((cond("name", "eq", "x"), cond("age", "eq", "old")))
        with pytest.raises(TypeCoercionError):
            converter.build_predicate(wrapper, Person)


def test_build_logs_the_predicate(converter, caplog) -> None:
    with caplog.at_level(logging.DEBUG, logger="requery.converter"):
        converter.build_predicate(SimpleFilter((cond("age", "gt", 18),)), Person)
    assert "Built predicate for Person" in caplog.text


def test_injected_registry_reaches_leaves(schema, registry) -> None:
    registry.unregister(PredicateOperator.EQ)
    converter = PredicateConverter(schema, registry=registry)
    predicate = converter.condition_predicate(cond("age", "eq", 1), Person)
    with pytest.raises(ValueError, match="Unsupported operator"):
        predicate.is_satisfied_by(Person(1, "x", 1))
