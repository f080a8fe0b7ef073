"""Property-based tests for the validation engine."""

import string

from hypothesis import given, settings
from hypothesis import strategies as st

from vetted import (
    Ascii,
    Bundle,
    Each,
    EachValue,
    Eq,
    Gte,
    Lt,
    Outcome,
    Path,
    Predicate,
    Schema,
    Sibling,
    Verbosity,
    parse_path,
    validate,
)

names = st.text(alphabet=string.ascii_letters, min_size=1, max_size=8)


@st.composite
def paths(draw):
    """Generate paths mixing fields, indices and keys."""
    path = Path.root(draw(names))
    for _ in range(draw(st.integers(min_value=0, max_value=5))):
        kind = draw(st.sampled_from(["field", "index", "key"]))
        if kind == "field":
            path = path.field(draw(names))
        elif kind == "index":
            path = path.index(draw(st.integers(min_value=0, max_value=1000)))
        else:
            path = path.key(draw(st.text(max_size=10)))
    return path


class TestPropertyBasedPaths:
    @settings(deadline=None)
    @given(paths())
    def test_rendered_paths_parse_back(self, path):
        assert parse_path(str(path)) == path

    @given(paths(), names)
    def test_extend_keeps_prefix(self, path, name):
        child = path.field(name)
        assert child.startswith(path)
        assert child.parent == path
        assert len(child) == len(path) + 1


class TestPropertyBasedValidation:
    @given(st.lists(st.text(max_size=5), max_size=30))
    def test_one_entry_per_failing_item(self, items):
        _, report = validate(items, Each(Ascii()))

        failing = [i for i, item in enumerate(items) if not item.isascii()]
        assert [e.path.last.index for e in report] == failing

    @given(st.dictionaries(st.text(max_size=5), st.integers(), max_size=20))
    def test_one_entry_per_failing_value(self, mapping):
        _, report = validate(mapping, EachValue(Gte(0)))

        failing = [k for k, v in mapping.items() if v < 0]
        assert [e.path.last.key for e in report] == failing

    @given(st.integers(), st.lists(st.integers(), max_size=10))
    def test_bundle_never_short_circuits(self, value, bounds):
        rules = [Predicate(lambda x, b=b: x >= b) for b in bounds]
        outcome, report = validate(value, Bundle(*rules))

        expected = sum(1 for b in bounds if value < b)
        assert len(report.entries) == expected
        assert outcome is Outcome.of(expected == 0)

    @given(st.integers())
    def test_lt_matches_native_ordering(self, value):
        outcome, _ = validate(value, Lt(5))
        assert outcome is Outcome.of(value < 5)

    @given(st.text(max_size=10), st.text(max_size=10))
    def test_sibling_equality(self, password, confirm):
        schema = Schema({"password": str, "confirm_password": Eq(Sibling("password"))})
        outcome, _ = validate(
            {"password": password, "confirm_password": confirm}, schema
        )
        assert outcome is Outcome.of(password == confirm)

    @given(st.lists(st.text(max_size=5), max_size=10))
    def test_verbosity_does_not_change_outcome(self, items):
        detail, _ = validate(items, Each(Ascii()), verbosity=Verbosity.DETAIL)
        brief, _ = validate(items, Each(Ascii()), verbosity=Verbosity.OUTCOME_ONLY)
        assert detail is brief

    @given(st.lists(st.integers(), max_size=10))
    def test_idempotent(self, items):
        _, first = validate(items, Each(Gte(0)))
        _, second = validate(items, Each(Gte(0)))
        assert first.entries == second.entries
