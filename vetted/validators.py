"""
Built-in leaf validators for vetted.

Provides factory functions that return Rule instances (or small
compositions of them). None of these are special to the engine; any
Validator subclass can stand in for them.
"""

from __future__ import annotations

import ipaddress
import re
from typing import Any, Callable

from .combinators import Length
from .compare import Between, Gte, Lte
from .core import Rule


def Required() -> Rule:
    """
    Mark a value as required (cannot be None).

    Usage:
        Required()
        str & Required()     # Required string
    """
    return Rule(
        check=lambda x: x is not None,
        rule="presence.required",
        message="Required field is missing",
    )


def Forbidden() -> Rule:
    """The value must be absent (None)."""
    return Rule(
        check=lambda x: x is None,
        rule="presence.forbidden",
        message="must not be defined",
    )


def IsType(t: type | tuple[type, ...]) -> Rule:
    """
    Validate that value is an instance of type.

    Usage:
        IsType(str)
        IsType(int) & Between(0, 100)
    """
    name = t.__name__ if isinstance(t, type) else " | ".join(x.__name__ for x in t)

    def check(x: Any) -> bool:
        return isinstance(x, t)

    return Rule(
        check=check,
        rule="type.instance",
        message=f"Expected {name}",
        details={"expected": name},
    )


def Predicate(fn: Callable[[Any], bool], message: str | None = None, rule: str = "predicate") -> Rule:
    """
    Create validator from arbitrary predicate function.

    Usage:
        Predicate(lambda x: x > 0, "Must be positive")
        Predicate(str.isalpha, "Must be alphabetic")
    """
    return Rule(check=fn, rule=rule, message=message)


def ContextPredicate(
    fn: Callable[[Any, Any], bool], message: str | None = None, rule: str = "predicate"
) -> Rule:
    """
    Create validator from a predicate that also reads the run's context.

    Usage:
        ContextPredicate(lambda name, ctx: name not in ctx.taken, "is taken")
    """
    return Rule(check=fn, rule=rule, message=message, with_context=True)


def _all_chars(test: Callable[[str], bool]) -> Callable[[Any], bool]:
    def check(x: Any) -> bool:
        return isinstance(x, str) and all(test(c) for c in x)

    return check


def Alphabetic() -> Rule:
    return Rule(
        check=_all_chars(str.isalpha),
        rule="string.alphabetic",
        message="cannot contain non-alphabetic characters",
    )


def Alphanumeric() -> Rule:
    return Rule(
        check=_all_chars(str.isalnum),
        rule="string.alphanumeric",
        message="cannot contain non-alphanumeric characters",
    )


def Ascii() -> Rule:
    return Rule(
        check=lambda x: isinstance(x, str) and x.isascii(),
        rule="string.ascii",
        message="cannot contain non-ASCII characters",
    )


def Lowercase() -> Rule:
    return Rule(
        check=_all_chars(str.islower),
        rule="string.lowercase",
        message="cannot contain uppercase characters",
    )


def Uppercase() -> Rule:
    return Rule(
        check=_all_chars(str.isupper),
        rule="string.uppercase",
        message="cannot contain lowercase characters",
    )


def Matches(pattern: str | re.Pattern[str]) -> Rule:
    """
    Validate string contains a match for a regex pattern.

    Anchor the pattern to match the whole string.

    Usage:
        Matches(r"^[a-z]+$")
        Matches(r"\\d{3}-\\d{4}")
    """
    compiled = re.compile(pattern)

    def check(x: Any) -> bool:
        return isinstance(x, str) and compiled.search(x) is not None

    return Rule(
        check=check,
        rule="string.matches",
        message=f"Must match pattern: {compiled.pattern}",
        details={"pattern": compiled.pattern},
    )


def InSet(values: set | frozenset | list | tuple) -> Rule:
    """
    Validate value is in a set of allowed values.

    Usage:
        InSet({"active", "inactive", "pending"})
        InSet([1, 2, 3])
    """
    container = frozenset(values)

    def check(x: Any) -> bool:
        return x in container

    return Rule(
        check=check,
        rule="set.member",
        message=f"Must be one of: {sorted(map(repr, container))}",
    )


def IsTrue() -> Rule:
    return Rule(check=lambda x: x is True, rule="boolean.true", message="must be true")


def IsFalse() -> Rule:
    return Rule(check=lambda x: x is False, rule="boolean.false", message="must be false")


def IpAddress(version: int | None = None) -> Rule:
    """Validate a string is an IP address (optionally of a given version)."""
    if version not in (None, 4, 6):
        raise ValueError("version must be 4, 6 or None")

    def check(x: Any) -> bool:
        if not isinstance(x, str):
            return False
        try:
            address = ipaddress.ip_address(x)
        except ValueError:
            return False
        return version is None or address.version == version

    suffix = f"v{version}" if version else ""
    return Rule(
        check=check,
        rule=f"ip.address{suffix}",
        message=f"must be a valid IP{suffix} address",
    )


def LengthBetween(lower: int, upper: int, *, unit: str = "chars") -> Length:
    """
    Validate length is within range (inclusive).

    Usage:
        LengthBetween(4, 20)                # 4 to 20 characters
        LengthBetween(1, 10, unit="items")  # 1 to 10 items
    """
    return Length(Between(lower, upper), unit=unit)


def MinLength(n: int, *, unit: str = "chars") -> Length:
    """Validate minimum length."""
    return Length(Gte(n), unit=unit)


def MaxLength(n: int, *, unit: str = "chars") -> Length:
    """Validate maximum length."""
    return Length(Lte(n), unit=unit)
