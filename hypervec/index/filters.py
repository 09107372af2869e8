"""
Metadata filter expressions.

A filter is a small immutable tree built from four node types: ``And``,
``Or``, ``Not`` and ``Compare``. Trees are usually built with the
module-level builders and combined with ``and_``/``or_``/``not_`` (or
the ``&``, ``|`` and ``~`` operators), none of which modify their
operands.

Example:
    >>> f = eq("category", 1).or_(gt("id", 7).and_(eq("category", 2)))
    >>> f.evaluate({"category": 2, "id": 9})
    True
    >>> f.evaluate({"category": 2, "id": 3})
    False
"""

import numbers
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Collection, Union

from ..storage.records import VectorRecord


class ComparisonOperator(Enum):
    """Operators available to a ``Compare`` node."""
    EQUALS = "eq"
    NOT_EQUALS = "ne"
    GREATER_THAN = "gt"
    LESS_THAN = "lt"
    CONTAINS = "contains"
    IN = "in"


RecordLike = Union[VectorRecord, Mapping]


class FilterExpression:
    """Base of the filter node types; use the builders rather than subclassing."""

    __slots__ = ()

    def evaluate(self, record: RecordLike) -> bool:
        """Whether ``record`` (a VectorRecord or a metadata mapping) satisfies the filter."""
        return evaluate(self, _metadata_of(record))

    def and_(self, other: "FilterExpression") -> "FilterExpression":
        return And(self, other)

    def or_(self, other: "FilterExpression") -> "FilterExpression":
        return Or(self, other)

    def not_(self) -> "FilterExpression":
        return Not(self)

    def __and__(self, other: "FilterExpression") -> "FilterExpression":
        return And(self, other)

    def __or__(self, other: "FilterExpression") -> "FilterExpression":
        return Or(self, other)

    def __invert__(self) -> "FilterExpression":
        return Not(self)


@dataclass(frozen=True)
class And(FilterExpression):
    left: FilterExpression
    right: FilterExpression


@dataclass(frozen=True)
class Or(FilterExpression):
    left: FilterExpression
    right: FilterExpression


@dataclass(frozen=True)
class Not(FilterExpression):
    expression: FilterExpression


@dataclass(frozen=True)
class Compare(FilterExpression):
    field: str
    value: Any
    operator: ComparisonOperator


def evaluate(expression: FilterExpression, metadata: Mapping) -> bool:
    """Evaluate ``expression`` against a metadata mapping."""
    if isinstance(expression, And):
        return evaluate(expression.left, metadata) and evaluate(expression.right, metadata)
    if isinstance(expression, Or):
        return evaluate(expression.left, metadata) or evaluate(expression.right, metadata)
    if isinstance(expression, Not):
        return not evaluate(expression.expression, metadata)
    if isinstance(expression, Compare):
        if expression.field not in metadata:
            return False
        return _compare(metadata[expression.field], expression.value, expression.operator)
    raise TypeError(f"Unknown filter node: {type(expression).__name__}")


def _is_number(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def _compare(field_value: Any, literal: Any, operator: ComparisonOperator) -> bool:
    if operator is ComparisonOperator.EQUALS:
        return bool(field_value == literal)
    if operator is ComparisonOperator.NOT_EQUALS:
        return bool(field_value != literal)
    if operator is ComparisonOperator.GREATER_THAN:
        return _is_number(field_value) and _is_number(literal) and field_value > literal
    if operator is ComparisonOperator.LESS_THAN:
        return _is_number(field_value) and _is_number(literal) and field_value < literal
    if operator is ComparisonOperator.CONTAINS:
        return isinstance(field_value, str) and isinstance(literal, str) and literal in field_value
    if operator is ComparisonOperator.IN:
        if isinstance(literal, (str, bytes, Mapping)) or not isinstance(literal, Collection):
            return False
        return any(field_value == candidate for candidate in literal)
    raise TypeError(f"Unknown comparison operator: {operator}")


def _metadata_of(record: RecordLike) -> Mapping:
    if isinstance(record, Mapping):
        return record
    return record.metadata


def eq(field: str, value: Any) -> FilterExpression:
    return Compare(field, value, ComparisonOperator.EQUALS)


def ne(field: str, value: Any) -> FilterExpression:
    return Compare(field, value, ComparisonOperator.NOT_EQUALS)


def gt(field: str, value: float) -> FilterExpression:
    return Compare(field, value, ComparisonOperator.GREATER_THAN)


def lt(field: str, value: float) -> FilterExpression:
    return Compare(field, value, ComparisonOperator.LESS_THAN)


def contains(field: str, value: str) -> FilterExpression:
    return Compare(field, value, ComparisonOperator.CONTAINS)


def in_(field: str, values: Collection) -> FilterExpression:
    """Match records whose field equals one of ``values``."""
    return Compare(field, tuple(values) if isinstance(values, list) else values, ComparisonOperator.IN)
