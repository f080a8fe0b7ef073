"""
Core validator classes for vetted.

Provides the Validator base class, the Rule leaf node and Bundle, plus
to_validator() for coercing plain Python objects into validators.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Iterator, Mapping

import structlog

from .accessor import Path
from .config import is_strict
from .report import Report
from .types import CompositionError, Failure, Outcome

logger = structlog.get_logger(__name__)


class Validator(ABC):
    """
    A unit of validation logic.

    Calling a validator checks `value` and records failures for `path` in
    `report`. Implementations keep no state between calls, do not raise on
    well-typed input, and append at least one failure whenever they return
    Outcome.INVALID (the report may still choose not to retain it).
    """

    __slots__ = ()

    @abstractmethod
    def __call__(self, value: Any, context: Any, path: Path, report: Report) -> Outcome:
        ...

    def children(self) -> tuple[Validator, ...]:
        """Validators run against the same aggregate scope as this one."""
        return ()

    def bind(self, parent: Any) -> Validator:
        """Resolve sibling references against the aggregate being validated.

        Only comparisons use the parent; combinators forward it to children.
        """
        return self

    def __and__(self, other: Any) -> Bundle:
        """
        Bundle with another validator: both run, both report.

        Usage:
            Alphanumeric() & LengthBetween(4, 20)
            str & Required()
        """
        return Bundle(self, other)

    def __rand__(self, other: Any) -> Bundle:
        """Support `str & Required()` where str comes first."""
        return Bundle(other, self)


@dataclass(frozen=True, slots=True)
class Rule(Validator):
    """
    Immutable leaf validator.

    The fundamental building block. Wraps a predicate with the metadata
    recorded when it fails.
    """

    check: Callable[..., bool]
    rule: str = "predicate"
    message: str | None = None
    payload: Any = None
    details: Mapping[str, Any] = field(default_factory=dict, hash=False)
    with_context: bool = False

    def __call__(self, value: Any, context: Any, path: Path, report: Report) -> Outcome:
        try:
            if self.with_context:
                passed = self.check(value, context)
            else:
                passed = self.check(value)
        except MemoryError:
            raise
        except Exception as e:
            if is_strict():
                raise
            logger.warning(
                "rule_raised",
                rule=self.rule,
                path=path.render(),
                error=repr(e),
            )
            report.append(
                path,
                Failure(
                    rule="error",
                    message=f"Validation error: {e}",
                    payload=self.payload,
                    details={"rule": self.rule, "exception": type(e).__name__},
                ),
            )
            return Outcome.INVALID

        if passed:
            return Outcome.VALID

        report.append(path, self.failure(value))
        return Outcome.INVALID

    def failure(self, value: Any) -> Failure:
        msg = self.message or f"Validation failed for value: {repr(value)[:50]}"
        return Failure(rule=self.rule, message=msg, payload=self.payload, details=self.details)

    def with_message(self, msg: str) -> Rule:
        """Return new rule with custom error message."""
        return replace(self, message=msg)

    def with_payload(self, payload: Any) -> Rule:
        """Return new rule that attaches `payload` to its failures."""
        return replace(self, payload=payload)


class Bundle(Validator):
    """
    Runs every child against the same value and path.

    Never short-circuits: a value breaking three rules gets three entries.
    """

    __slots__ = ("validators",)

    def __init__(self, *validators: Any) -> None:
        flat: list[Validator] = []
        for v in validators:
            v = to_validator(v)
            if isinstance(v, Bundle):
                flat.extend(v.validators)
            else:
                flat.append(v)
        self.validators: tuple[Validator, ...] = tuple(flat)

    def __call__(self, value: Any, context: Any, path: Path, report: Report) -> Outcome:
        outcome = Outcome.VALID
        for validator in self.validators:
            outcome = validator(value, context, path, report) & outcome
        return outcome

    def children(self) -> tuple[Validator, ...]:
        return self.validators

    def bind(self, parent: Any) -> Validator:
        bound = tuple(v.bind(parent) for v in self.validators)
        if all(b is v for b, v in zip(bound, self.validators)):
            return self
        return Bundle(*bound)

    def __repr__(self) -> str:
        return f"Bundle({', '.join(map(repr, self.validators))})"


def to_validator(v: Any) -> Validator:
    """
    Coerce a value to a validator.

    Conversion rules:
        Validator -> pass through
        type -> IsType(type)
        list | tuple -> Bundle of the converted items
        Callable -> Predicate(callable)
    """
    if isinstance(v, Validator):
        return v

    if isinstance(v, type):
        from .validators import IsType

        return IsType(v)

    if isinstance(v, (list, tuple)):
        return Bundle(*v)

    if callable(v):
        from .validators import Predicate

        return Predicate(v)

    raise CompositionError(f"Cannot convert {type(v).__name__} to validator")


def walk(validator: Validator) -> Iterator[Validator]:
    """Yield `validator` and every validator in its aggregate scope."""
    yield validator
    for child in validator.children():
        yield from walk(child)
