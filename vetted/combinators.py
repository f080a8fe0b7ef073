"""
Combinators: validators built out of other validators.

- Optional: validate only when a value is present
- Member: step into a named member of an aggregate
- Nested: hand off to an aggregate's own validator
- Each / EachValue: validate every element of a collection
- LengthEquals / Length: validate the size of a collection or string
"""

from __future__ import annotations

from collections.abc import Mapping, Sized
from typing import Any

from .accessor import Field, Index, Key, Path
from .core import Validator, to_validator
from .report import Report
from .types import CompositionError, Failure, Outcome


class Optional(Validator):
    """
    Allow None, validate if present.

    Absence is not a failure; compose with Required() to demand presence.
    The inner validator sees the same path as the optional itself.
    """

    __slots__ = ("inner",)

    def __init__(self, inner: Any) -> None:
        self.inner = to_validator(inner)

    def __call__(self, value: Any, context: Any, path: Path, report: Report) -> Outcome:
        if value is None:
            return Outcome.VALID
        return self.inner(value, context, path, report)

    def children(self) -> tuple[Validator, ...]:
        return (self.inner,)

    def bind(self, parent: Any) -> Validator:
        inner = self.inner.bind(parent)
        return self if inner is self.inner else Optional(inner)

    def __repr__(self) -> str:
        return f"Optional({self.inner!r})"


class Member(Validator):
    """Validate the member `name` of the value under `path.name`."""

    __slots__ = ("name", "inner")

    def __init__(self, name: str, inner: Any) -> None:
        self.name = name
        self.inner = to_validator(inner)

    def __call__(self, value: Any, context: Any, path: Path, report: Report) -> Outcome:
        member = get_member(value, self.name)
        return self.inner(member, context, path.extend(Field(self.name)), report)

    def children(self) -> tuple[Validator, ...]:
        return (self.inner,)

    def bind(self, parent: Any) -> Validator:
        inner = self.inner.bind(parent)
        return self if inner is self.inner else Member(self.name, inner)

    def __repr__(self) -> str:
        return f"Member({self.name!r}, {self.inner!r})"


def get_member(value: Any, name: str) -> Any:
    """
    Read a member from a mapping or an object.

    A missing mapping key reads as None (absent data). A missing attribute
    means the validator tree does not fit the value's type.
    """
    if isinstance(value, Mapping):
        return value.get(name)
    try:
        return getattr(value, name)
    except AttributeError as e:
        raise CompositionError(
            f"{type(value).__name__} has no member {name!r}"
        ) from e


class Nested(Validator):
    """
    Validate an aggregate with its own top-level validator.

    The path is handed over unchanged; use inside Member or a Schema field
    so that failures come back as `root.profile.name.first`.
    An absent value is a "type.aggregate" failure; wrap in Optional to
    allow it.
    """

    __slots__ = ("validator",)

    def __init__(self, validator: Any = None) -> None:
        self.validator = None if validator is None else to_validator(validator)

    def __call__(self, value: Any, context: Any, path: Path, report: Report) -> Outcome:
        validator = self.validator
        if validator is None:
            if value is None:
                report.append(path, _not_aggregate(value))
                return Outcome.INVALID

            from .schema import validator_for

            validator = validator_for(type(value))
        return validator(value, context, path, report)

    def __repr__(self) -> str:
        return "Nested()" if self.validator is None else f"Nested({self.validator!r})"


class Each(Validator):
    """
    Validate every item of an iterable, at `path[i]`.

    Args:
        inner: Validator applied to each item
        stop_at_first_failure: Stop after the first failing item instead of
            checking them all (the default checks everything)
    """

    __slots__ = ("inner", "stop_at_first_failure")

    def __init__(self, inner: Any, *, stop_at_first_failure: bool = False) -> None:
        self.inner = to_validator(inner)
        self.stop_at_first_failure = stop_at_first_failure

    def __call__(self, value: Any, context: Any, path: Path, report: Report) -> Outcome:
        try:
            items = iter(value)
        except TypeError:
            report.append(path, _not_iterable(value))
            return Outcome.INVALID

        outcome = Outcome.VALID
        for i, item in enumerate(items):
            if self.inner(item, context, path.extend(Index(i)), report).is_invalid:
                outcome = Outcome.INVALID
                if self.stop_at_first_failure:
                    break
        return outcome

    def children(self) -> tuple[Validator, ...]:
        return (self.inner,)

    def bind(self, parent: Any) -> Validator:
        inner = self.inner.bind(parent)
        if inner is self.inner:
            return self
        return Each(inner, stop_at_first_failure=self.stop_at_first_failure)

    def __repr__(self) -> str:
        return f"Each({self.inner!r})"


class EachValue(Validator):
    """
    Validate every value of a mapping (or iterable of key/value pairs),
    at `path["key"]`.

    An element that is not a key/value pair ends the walk with a single
    "collection.pairs" failure at `path`.
    """

    __slots__ = ("inner", "stop_at_first_failure")

    def __init__(self, inner: Any, *, stop_at_first_failure: bool = False) -> None:
        self.inner = to_validator(inner)
        self.stop_at_first_failure = stop_at_first_failure

    def __call__(self, value: Any, context: Any, path: Path, report: Report) -> Outcome:
        if isinstance(value, Mapping):
            pairs = iter(value.items())
        else:
            try:
                pairs = iter(value)
            except TypeError:
                report.append(path, _not_iterable(value))
                return Outcome.INVALID

        outcome = Outcome.VALID
        for pair in pairs:
            try:
                key, item = pair
            except (TypeError, ValueError):
                report.append(
                    path,
                    Failure(
                        rule="collection.pairs",
                        message=f"Expected key/value pairs, got {type(pair).__name__}",
                    ),
                )
                return Outcome.INVALID
            if self.inner(item, context, path.extend(Key(key)), report).is_invalid:
                outcome = Outcome.INVALID
                if self.stop_at_first_failure:
                    break
        return outcome

    def children(self) -> tuple[Validator, ...]:
        return (self.inner,)

    def bind(self, parent: Any) -> Validator:
        inner = self.inner.bind(parent)
        if inner is self.inner:
            return self
        return EachValue(inner, stop_at_first_failure=self.stop_at_first_failure)

    def __repr__(self) -> str:
        return f"EachValue({self.inner!r})"


class LengthEquals(Validator):
    """
    Validate that an iterable holds exactly `expected` items.

    Sized values are measured with len(); anything else is counted by
    iterating it, which consumes one-shot iterators.
    """

    __slots__ = ("expected",)

    def __init__(self, expected: int) -> None:
        if expected < 0:
            raise CompositionError("LengthEquals expects a non-negative size")
        self.expected = expected

    def __call__(self, value: Any, context: Any, path: Path, report: Report) -> Outcome:
        count = measure(value, "items")
        if count is None:
            report.append(path, _not_iterable(value))
            return Outcome.INVALID
        if count == self.expected:
            return Outcome.VALID
        report.append(
            path,
            Failure(
                rule="collection.length_equals",
                message=f"must contain exactly {self.expected} items",
                details={"expected": self.expected, "actual": count},
            ),
        )
        return Outcome.INVALID

    def __repr__(self) -> str:
        return f"LengthEquals({self.expected})"


class Length(Validator):
    """
    Forward the length of the value to `inner`.

    Usage:
        Length(Gte(8), unit="chars")
        Length(Between(1, 10))

    Failures from `inner` are relabeled, e.g. rule "length.chars:compare.ge"
    with message "length must be greater than or equal to 8 characters".
    """

    UNITS = {"items": "items", "chars": "characters", "bytes": "bytes"}

    __slots__ = ("inner", "unit")

    def __init__(self, inner: Any, *, unit: str = "items") -> None:
        if unit not in self.UNITS:
            raise CompositionError(f"Unknown length unit {unit!r}, expected one of {sorted(self.UNITS)}")
        self.inner = to_validator(inner)
        self.unit = unit

    def __call__(self, value: Any, context: Any, path: Path, report: Report) -> Outcome:
        n = measure(value, self.unit)
        if n is None:
            report.append(path, _not_iterable(value))
            return Outcome.INVALID
        relabeled = _RelabeledReport(
            report, f"length.{self.unit}", "length ", f" {self.UNITS[self.unit]}"
        )
        return self.inner(n, context, path, relabeled)

    def children(self) -> tuple[Validator, ...]:
        return (self.inner,)

    def bind(self, parent: Any) -> Validator:
        inner = self.inner.bind(parent)
        return self if inner is self.inner else Length(inner, unit=self.unit)

    def __repr__(self) -> str:
        return f"Length({self.inner!r}, unit={self.unit!r})"


def measure(value: Any, unit: str) -> int | None:
    """Length of `value` in `unit`, or None when it has no length."""
    if unit == "bytes" and isinstance(value, str):
        return len(value.encode("utf-8"))
    if isinstance(value, Sized):
        return len(value)
    try:
        return sum(1 for _ in value)
    except TypeError:
        return None


def _not_iterable(value: Any) -> Failure:
    return Failure(
        rule="collection.iterable",
        message=f"Expected an iterable, got {type(value).__name__}",
    )


def _not_aggregate(value: Any) -> Failure:
    actual = type(value).__name__
    return Failure(
        rule="type.aggregate",
        message=f"Expected an aggregate, got {actual}",
        details={"actual": actual},
    )


class _RelabeledReport(Report):
    """Passes failures through to another report, tagging them on the way."""

    __slots__ = ("_report", "_prefix", "_before", "_after")

    def __init__(self, report: Report, prefix: str, before: str, after: str) -> None:
        self._report = report
        self._prefix = prefix
        self._before = before
        self._after = after

    @property
    def verbosity(self):  # type: ignore[override]
        return self._report.verbosity

    def append(self, path: Path, failure: Failure) -> None:
        self._report.append(path, failure.relabel(self._prefix, self._before, self._after))

    @property
    def num_failures(self) -> int:
        return self._report.num_failures
