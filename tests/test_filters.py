"""
Unit tests for metadata filter expressions.
"""

import dataclasses
import itertools

import pytest

from hypervec.index import And, Compare, ComparisonOperator, Not, Or, contains, eq, gt, in_, lt, ne
from hypervec.index.filters import FilterExpression, evaluate
from hypervec.storage import VectorRecord


class TestComparisons:
    """Test the leaf comparison operators."""

    def test_equals(self):
        assert eq("category", 1).evaluate({"category": 1})
        assert not eq("category", 1).evaluate({"category": 2})
        assert eq("name", "dog").evaluate({"name": "dog"})

    def test_not_equals(self):
        assert ne("category", 1).evaluate({"category": 2})
        assert not ne("category", 1).evaluate({"category": 1})

    def test_greater_and_less_than(self):
        assert gt("id", 7).evaluate({"id": 8})
        assert not gt("id", 7).evaluate({"id": 7})
        assert lt("id", 7).evaluate({"id": 6.5})
        assert not lt("id", 7).evaluate({"id": 7})

    def test_mixed_numeric_types(self):
        assert gt("score", 0.5).evaluate({"score": 1})
        assert lt("score", 2).evaluate({"score": 1.5})

    def test_ordering_requires_numbers(self):
        assert not gt("id", "7").evaluate({"id": 9})
        assert not gt("id", 7).evaluate({"id": "9"})
        assert not lt("id", 7).evaluate({"id": None})
        assert not gt("flag", 0).evaluate({"flag": True})

    def test_contains(self):
        assert contains("title", "vec").evaluate({"title": "hypervec"})
        assert not contains("title", "xyz").evaluate({"title": "hypervec"})
        assert not contains("tags", "a").evaluate({"tags": ["a", "b"]})
        assert not contains("title", 1).evaluate({"title": "1"})

    def test_in(self):
        f = in_("category", [1, 2])
        assert f.evaluate({"category": 2})
        assert not f.evaluate({"category": 3})
        assert in_("name", {"dog", "cat"}).evaluate({"name": "cat"})

    def test_in_requires_collection_literal(self):
        assert not in_("letter", "abc").evaluate({"letter": "a"})
        assert not Compare("category", 1, ComparisonOperator.IN).evaluate({"category": 1})

    def test_in_builder_copies_list(self):
        values = [1, 2]
        f = in_("category", values)
        values.append(3)
        assert not f.evaluate({"category": 3})

    def test_missing_field_is_false(self):
        for f in (eq("x", 1), ne("x", 1), gt("x", 1), lt("x", 1), contains("x", "a"), in_("x", [1])):
            assert not f.evaluate({"y": 1})

    def test_negated_missing_field_is_true(self):
        assert Not(eq("x", 1)).evaluate({})


class TestComposition:
    """Test And / Or / Not composition."""

    def test_composite_filter_truth_table(self):
        f = eq("category", 1).or_(gt("id", 7).and_(eq("category", 2)))

        for category, id_ in itertools.product([1, 2, 3], range(11)):
            expected = category == 1 or (id_ > 7 and category == 2)
            assert f.evaluate({"category": category, "id": id_}) == expected, (category, id_)

    def test_operator_overloads_match_methods(self):
        a = eq("category", 1)
        b = gt("id", 7)
        assert (a & b) == a.and_(b)
        assert (a | b) == a.or_(b)
        assert ~a == a.not_()

    def test_double_negation(self):
        f = eq("category", 1)
        for metadata in ({"category": 1}, {"category": 2}):
            assert (~~f).evaluate(metadata) == f.evaluate(metadata)

    def test_node_types(self):
        a = eq("category", 1)
        b = lt("id", 3)
        assert isinstance(a.and_(b), And)
        assert isinstance(a.or_(b), Or)
        assert isinstance(a.not_(), Not)
        assert isinstance(a, Compare)
        assert a.operator is ComparisonOperator.EQUALS

    def test_combinators_leave_operands_unchanged(self):
        a = eq("category", 1)
        b = gt("id", 7)
        combined = a.and_(b)

        assert a == eq("category", 1)
        assert b == gt("id", 7)
        assert combined.left is a
        assert combined.right is b

    def test_nodes_are_immutable(self):
        f = eq("category", 1)
        with pytest.raises(dataclasses.FrozenInstanceError):
            f.value = 2
        with pytest.raises(dataclasses.FrozenInstanceError):
            f.and_(f).left = f

    def test_nodes_are_hashable(self):
        assert len({eq("a", 1), eq("a", 1), eq("a", 2)}) == 2


class TestEvaluation:
    """Test evaluation against records and unknown nodes."""

    def test_evaluate_record(self):
        record = VectorRecord.create_euclidean([0.1, 0.2], {"category": 2, "id": 9})
        f = eq("category", 1) | (gt("id", 7) & eq("category", 2))
        assert f.evaluate(record)

    def test_module_level_evaluate(self):
        assert evaluate(eq("a", 1), {"a": 1})

    def test_unknown_node_type(self):
        with pytest.raises(TypeError):
            evaluate(FilterExpression(), {})
