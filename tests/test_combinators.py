"""
Tests for vetted.combinators.
"""

import pytest

from vetted import (
    Ascii,
    CompositionError,
    DetailReport,
    Each,
    EachValue,
    Gte,
    Length,
    LengthEquals,
    Lte,
    Member,
    Nested,
    Optional,
    Outcome,
    Path,
    Required,
    Schema,
    validate,
)
from vetted.combinators import get_member
from tests.structstest import Name


def run(validator, value, context=None):
    report = DetailReport()
    outcome = validator(value, context, Path.root("root"), report)
    return outcome, report


class TestOptional:
    def test_absent_is_valid(self):
        outcome, report = run(Optional(Ascii()), None)
        assert outcome is Outcome.VALID
        assert report.entries == ()

    def test_present_and_valid(self):
        assert run(Optional(Ascii()), "hello")[0] is Outcome.VALID

    def test_present_and_invalid_uses_same_path(self):
        outcome, report = validate(
            {"nickname": "Ω"}, Member("nickname", Optional(Ascii()))
        )
        assert outcome is Outcome.INVALID
        [entry] = report.entries
        assert str(entry.path) == "root.nickname"

    def test_required_rejects_absent(self):
        outcome, report = run(Required(), None)
        assert outcome is Outcome.INVALID
        assert report.entries[0].rule == "presence.required"


class TestMember:
    def test_object_attribute(self):
        name = Name(first="Gintoki", middle=None, last="S")
        outcome, report = validate(name, Member("last", Length(Gte(2))))
        assert outcome is Outcome.INVALID
        assert str(report.entries[0].path) == "root.last"

    def test_mapping_key(self):
        outcome, _ = validate({"age": 20}, Member("age", Gte(18)))
        assert outcome is Outcome.VALID

    def test_missing_key_reads_as_none(self):
        assert get_member({}, "age") is None
        outcome, report = validate({}, Member("age", Required()))
        assert outcome is Outcome.INVALID
        assert str(report.entries[0].path) == "root.age"

    def test_missing_attribute_is_composition_error(self):
        with pytest.raises(CompositionError):
            validate(Name("A", None, "B"), Member("nickname", Required()))


class TestNested:
    def test_resolves_declared_schema(self):
        outcome, report = validate(
            {"name": Name(first="G1ntoki", middle=None, last="Sakata")},
            Member("name", Nested()),
        )
        assert outcome is Outcome.INVALID
        assert [str(e.path) for e in report] == ["root.name.first"]

    def test_explicit_validator(self):
        inner = Schema({"city": Ascii()})
        outcome, report = validate(
            {"address": {"city": "Kyōto"}}, Member("address", Nested(inner))
        )
        assert outcome is Outcome.INVALID
        assert str(report.entries[0].path) == "root.address.city"

    def test_adds_no_segment(self):
        outcome, report = run(Nested(Schema({"x": Gte(1)})), {"x": 0})
        assert outcome is Outcome.INVALID
        assert str(report.entries[0].path) == "root.x"

    def test_undeclared_type(self):
        with pytest.raises(CompositionError):
            run(Nested(), 42)

    def test_absent_aggregate_is_reported(self):
        outcome, report = validate({"name": None}, Member("name", Nested()))
        assert outcome is Outcome.INVALID
        [entry] = report.entries
        assert str(entry.path) == "root.name"
        assert entry.rule == "type.aggregate"

    def test_optional_absent_aggregate(self):
        assert validate({"name": None}, Member("name", Optional(Nested())))[0] is Outcome.VALID


class TestEach:
    def test_every_failing_item_is_reported(self):
        hobbies = ["cards", "Ω", "manga", "∞"]
        outcome, report = run(Each(Ascii()), hobbies)

        assert outcome is Outcome.INVALID
        assert [str(e.path) for e in report] == ["root[1]", "root[3]"]

    def test_empty_collection(self):
        assert run(Each(Ascii()), [])[0] is Outcome.VALID

    def test_generator(self):
        outcome, report = run(Each(Gte(0)), (n for n in (1, -1, 2)))
        assert outcome is Outcome.INVALID
        assert report.entries[0].path == Path.root("root").index(1)

    def test_stop_at_first_failure(self):
        outcome, report = run(Each(Gte(0), stop_at_first_failure=True), [-1, -2, -3])
        assert outcome is Outcome.INVALID
        assert len(report.entries) == 1

    def test_not_iterable(self):
        outcome, report = run(Each(Ascii()), 42)
        assert outcome is Outcome.INVALID
        assert report.entries[0].rule == "collection.iterable"


class TestEachValue:
    def test_mapping(self):
        languages = {"Japanese": 10, "English": 0, "French": 11}
        outcome, report = run(EachValue(Gte(1) & Lte(10)), languages)

        assert outcome is Outcome.INVALID
        assert [str(e.path) for e in report] == [
            'root["English"]',
            'root["French"]',
        ]

    def test_pairs(self):
        outcome, report = run(EachValue(Gte(0)), [("a", 1), ("b", -1)])
        assert outcome is Outcome.INVALID
        assert report.entries[0].path == Path.root("root").key("b")

    @pytest.mark.parametrize("value", [[1, 2], ["abc"], [("a", 1, 2)]])
    def test_elements_that_are_not_pairs(self, value):
        outcome, report = run(EachValue(Gte(0)), value)
        assert outcome is Outcome.INVALID
        [entry] = report.entries
        assert entry.path == Path.root("root")
        assert entry.rule == "collection.pairs"

    def test_non_string_keys(self):
        _, report = run(EachValue(Gte(0)), {3: -1})
        assert str(report.entries[0].path) == "root[3]"

    def test_stop_at_first_failure(self):
        v = EachValue(Gte(0), stop_at_first_failure=True)
        _, report = run(v, {"a": -1, "b": -2})
        assert len(report.entries) == 1


class TestLengthEquals:
    def test_sized(self):
        assert run(LengthEquals(2), ["a", "b"])[0] is Outcome.VALID

    def test_mismatch(self):
        outcome, report = run(LengthEquals(3), ["a"])
        assert outcome is Outcome.INVALID
        [entry] = report.entries
        assert entry.rule == "collection.length_equals"
        assert entry.message == "must contain exactly 3 items"
        assert entry.failure.details == {"expected": 3, "actual": 1}

    def test_counts_iterables(self):
        assert run(LengthEquals(3), iter(range(3)))[0] is Outcome.VALID

    def test_independent_of_item_checks(self):
        v = LengthEquals(2) & Each(Ascii())
        outcome, report = run(v, ["Ω"])
        assert outcome is Outcome.INVALID
        assert [e.rule for e in report] == ["collection.length_equals", "string.ascii"]

    def test_negative(self):
        with pytest.raises(CompositionError):
            LengthEquals(-1)


class TestLength:
    def test_relabels_failures(self):
        outcome, report = run(Length(Gte(8), unit="chars"), "short")
        assert outcome is Outcome.INVALID
        [entry] = report.entries
        assert entry.rule == "length.chars:compare.ge"
        assert entry.message == "length must be greater than or equal to 8 characters"
        assert entry.failure.details["other"] == 8

    def test_bytes(self):
        assert run(Length(Lte(2), unit="bytes"), "ab")[0] is Outcome.VALID
        assert run(Length(Lte(2), unit="bytes"), "Ωb")[0] is Outcome.INVALID

    def test_items(self):
        assert run(Length(Gte(1)), ["x"])[0] is Outcome.VALID

    def test_not_measurable(self):
        _, report = run(Length(Gte(1)), 5)
        assert report.entries[0].rule == "collection.iterable"

    def test_unknown_unit(self):
        with pytest.raises(CompositionError):
            Length(Gte(1), unit="words")
