"""
Type definitions for vetted.

Provides the binary Outcome, the Failure detail recorded in reports,
the composition error, and type aliases.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Callable, Mapping


class Outcome(Enum):
    """Pass/fail signal returned by every validator."""

    VALID = "valid"
    INVALID = "invalid"

    @classmethod
    def of(cls, passed: bool) -> Outcome:
        return cls.VALID if passed else cls.INVALID

    @property
    def is_valid(self) -> bool:
        return self is Outcome.VALID

    @property
    def is_invalid(self) -> bool:
        return self is Outcome.INVALID

    def __and__(self, other: Outcome) -> Outcome:
        if self is Outcome.INVALID or other is Outcome.INVALID:
            return Outcome.INVALID
        return Outcome.VALID


@dataclass(frozen=True, slots=True)
class Failure:
    """
    What went wrong at one location.

    `rule` identifies the failing rule (e.g. "string.ascii", "compare.eq").
    `payload` is an arbitrary user-defined error value attached at
    composition time; the engine never inspects it.
    """

    rule: str
    message: str | None = None
    payload: Any = None
    details: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def relabel(self, prefix: str, message_prefix: str = "", message_suffix: str = "") -> Failure:
        """Return a copy tagged as coming through an outer rule."""
        message = self.message
        if message is not None:
            message = f"{message_prefix}{message}{message_suffix}"
        return replace(self, rule=f"{prefix}:{self.rule}", message=message)


class CompositionError(TypeError):
    """A validator tree was put together incorrectly.

    Raised while building validators whenever possible; never used to signal
    that a value is invalid.
    """


# Type aliases
CheckFn = Callable[[Any], bool]
ContextCheckFn = Callable[[Any, Any], bool]
