"""
Comparison validators.

A comparison is an (operator, operand) pair. The operand is resolved when
the comparison runs:
- Constant(5)            -> a value captured when the validator is built
- Sibling("password")    -> another member of the aggregate being validated
- FromContext("min_age") -> a value from the run's context

Usage:
    Lt(5)
    Compare("<=", 10)
    Eq(Sibling("password"))
    Gte(FromContext("required_age"))
"""

from __future__ import annotations

import operator
from abc import ABC, abstractmethod
from collections.abc import Set as AbstractSet
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, ClassVar

from .accessor import Path
from .core import Bundle, Validator
from .report import Report
from .types import CompositionError, Failure, Outcome


class Operator(Enum):
    LT = "lt"
    LE = "le"
    GT = "gt"
    GE = "ge"
    EQ = "eq"
    NE = "ne"

    @classmethod
    def parse(cls, op: Operator | str) -> Operator:
        """Accept an Operator, its name ("lt") or its symbol ("<")."""
        if isinstance(op, Operator):
            return op
        for candidate, symbol in _SYMBOLS.items():
            if op == symbol:
                return candidate
        try:
            return cls(op)
        except ValueError:
            raise CompositionError(f"Unknown comparison operator: {op!r}") from None

    @property
    def symbol(self) -> str:
        return _SYMBOLS[self]

    @property
    def phrase(self) -> str:
        return _PHRASES[self]

    @property
    def ordering(self) -> bool:
        """True for operators that need a total order (<, <=, >, >=)."""
        return self not in (Operator.EQ, Operator.NE)

    def apply(self, left: Any, right: Any) -> bool:
        return bool(_FUNCTIONS[self](left, right))


_SYMBOLS = {
    Operator.LT: "<",
    Operator.LE: "<=",
    Operator.GT: ">",
    Operator.GE: ">=",
    Operator.EQ: "==",
    Operator.NE: "!=",
}

_PHRASES = {
    Operator.LT: "less than",
    Operator.LE: "less than or equal to",
    Operator.GT: "greater than",
    Operator.GE: "greater than or equal to",
    Operator.EQ: "equal to",
    Operator.NE: "not equal to",
}

_FUNCTIONS: dict[Operator, Callable[[Any, Any], Any]] = {
    Operator.LT: operator.lt,
    Operator.LE: operator.le,
    Operator.GT: operator.gt,
    Operator.GE: operator.ge,
    Operator.EQ: operator.eq,
    Operator.NE: operator.ne,
}


class Operand(ABC):
    """The right-hand side of a comparison."""

    __slots__ = ()

    needs_parent: ClassVar[bool] = False

    @abstractmethod
    def resolve(self, parent: Any, context: Any) -> Any:
        ...

    @abstractmethod
    def describe(self) -> str:
        ...


@dataclass(frozen=True, slots=True)
class Constant(Operand):
    value: Any

    def resolve(self, parent: Any, context: Any) -> Any:
        return self.value

    def describe(self) -> str:
        return repr(self.value)


@dataclass(frozen=True, slots=True)
class Sibling(Operand):
    """Another member of the aggregate that holds the compared value."""

    name: str

    needs_parent = True

    def resolve(self, parent: Any, context: Any) -> Any:
        from .combinators import get_member

        return get_member(parent, self.name)

    def describe(self) -> str:
        return self.name


@dataclass(frozen=True, slots=True)
class FromContext(Operand):
    """A value taken from the run's context, by member name or callable."""

    getter: str | Callable[[Any], Any]

    def resolve(self, parent: Any, context: Any) -> Any:
        if callable(self.getter):
            return self.getter(context)
        if context is None:
            raise CompositionError(
                f"Operand {self.describe()} needs a context but none was passed"
            )
        from .combinators import get_member

        return get_member(context, self.getter)

    def describe(self) -> str:
        if callable(self.getter):
            return getattr(self.getter, "__name__", "context value")
        return f"context.{self.getter}"


class Compare(Validator):
    """
    Validate `value <op> operand` using the value type's own ordering and
    equality.

    Ordering operators on a constant without a total order (dicts, sets,
    None, complex) are rejected when the validator is built. A value that
    turns out not to compare with its operand at run time (a str against an
    int, a None sibling) is a "compare.incomparable" failure.
    """

    __slots__ = ("op", "operand", "message", "payload", "_parent", "_bound")

    def __init__(
        self,
        op: Operator | str,
        operand: Any,
        *,
        message: str | None = None,
        payload: Any = None,
    ) -> None:
        self.op = Operator.parse(op)
        self.operand = operand if isinstance(operand, Operand) else Constant(operand)
        self.message = message
        self.payload = payload
        self._parent: Any = None
        self._bound = False

        if self.op.ordering and isinstance(self.operand, Constant):
            _require_order(self.operand.value)

    def bind(self, parent: Any) -> Validator:
        if not self.operand.needs_parent:
            return self
        bound = self._copy(message=self.message, payload=self.payload)
        bound._parent = parent
        bound._bound = True
        return bound

    def __call__(self, value: Any, context: Any, path: Path, report: Report) -> Outcome:
        if self.operand.needs_parent and not self._bound:
            raise CompositionError(
                f"{self!r} compares against a sibling member and must run inside a Schema"
            )

        other = self.operand.resolve(self._parent, context)

        try:
            passed = self.op.apply(value, other)
        except TypeError:
            report.append(
                path,
                Failure(
                    rule="compare.incomparable",
                    message=self.message
                    or f"cannot be compared with {self.operand.describe()}",
                    payload=self.payload,
                    details={
                        "operator": self.op.symbol,
                        "other": other,
                        "types": [type(value).__name__, type(other).__name__],
                    },
                ),
            )
            return Outcome.INVALID

        if passed:
            return Outcome.VALID

        report.append(
            path,
            Failure(
                rule=f"compare.{self.op.value}",
                message=self.message or f"must be {self.op.phrase} {self.operand.describe()}",
                payload=self.payload,
                details={"operator": self.op.symbol, "other": other},
            ),
        )
        return Outcome.INVALID

    def with_message(self, msg: str) -> Compare:
        """Return new comparison with custom error message."""
        return self._copy(message=msg, payload=self.payload)

    def with_payload(self, payload: Any) -> Compare:
        return self._copy(message=self.message, payload=payload)

    def _copy(self, *, message: str | None, payload: Any) -> Compare:
        copied = Compare(self.op, self.operand, message=message, payload=payload)
        copied._parent = self._parent
        copied._bound = self._bound
        return copied

    def __repr__(self) -> str:
        return f"Compare({self.op.symbol!r}, {self.operand!r})"


def _require_order(value: Any) -> None:
    if isinstance(value, AbstractSet):
        raise CompositionError(
            f"{type(value).__name__} is only partially ordered; only Eq and Ne apply"
        )
    try:
        value < value
    except TypeError as e:
        raise CompositionError(
            f"{type(value).__name__} has no ordering; only Eq and Ne apply"
        ) from e


def Lt(value: Any) -> Compare:
    """Validate less than."""
    return Compare(Operator.LT, value)


def Lte(value: Any) -> Compare:
    """Validate less than or equal."""
    return Compare(Operator.LE, value)


def Gt(value: Any) -> Compare:
    """Validate greater than."""
    return Compare(Operator.GT, value)


def Gte(value: Any) -> Compare:
    """Validate greater than or equal."""
    return Compare(Operator.GE, value)


def Eq(value: Any) -> Compare:
    """Validate equality."""
    return Compare(Operator.EQ, value)


def Ne(value: Any) -> Compare:
    """Validate inequality."""
    return Compare(Operator.NE, value)


def Between(lower: Any, upper: Any, inclusive: bool = True) -> Bundle:
    """Validate value is between bounds."""
    if not isinstance(lower, Operand) and not isinstance(upper, Operand):
        try:
            inverted = lower > upper
        except TypeError as e:
            raise CompositionError("Between bounds must be comparable") from e
        if inverted:
            raise CompositionError(f"Empty range: {lower!r} > {upper!r}")

    if inclusive:
        return Bundle(Gte(lower), Lte(upper))
    return Bundle(Gt(lower), Lt(upper))
