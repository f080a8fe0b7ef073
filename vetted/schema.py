"""
Schema operations for vetted.

Provides Schema (validator for struct-like aggregates), schema_for() to
build one from Annotated class annotations, and validator_for() to look up
the validator a type is checked with.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated, Any, Callable, Mapping, get_origin, get_type_hints

from .accessor import Path
from .combinators import Member
from .compare import Compare, Sibling
from .core import Bundle, Validator, to_validator, walk
from .report import Report
from .types import CompositionError, Failure, Outcome


class Schema(Validator):
    """
    Validator for aggregates with named members (objects or dicts).

    Each field rule runs on the member of the same name, at `path.name`.
    Every field runs; failures from all of them are reported. A value that
    cannot hold the members (None, a scalar, an object lacking some of them)
    is one "type.aggregate" failure at the schema's own path.

    Usage:
        Schema({
            "username": Alphanumeric() & LengthBetween(4, 20),
            "password": Ascii() & MinLength(8),
            "confirm_password": Eq(Sibling("password")),
        })

    Args:
        fields: Mapping of member name to rule (anything to_validator accepts)
        model: Optional class the schema validates. When given, field names
               and sibling references are checked against its members.
    """

    __slots__ = ("members", "model", "_bindable", "_names")

    def __init__(
        self,
        fields: Mapping[str, Any] | None = None,
        *,
        model: type | None = None,
        **kwargs: Any,
    ) -> None:
        declared = {**(fields or {}), **kwargs}
        self.members: tuple[Member, ...] = tuple(
            Member(name, rule) for name, rule in declared.items()
        )
        self.model = model

        if model is not None:
            known = _member_names(model)
            unknown = sorted(set(declared) - known)
            if unknown:
                raise CompositionError(
                    f"{model.__name__} has no member(s): {', '.join(unknown)}"
                )
        else:
            known = set(declared)

        bindable = set()
        siblings: dict[str, None] = {}
        for member in self.members:
            for node in walk(member.inner):
                if isinstance(node, Compare) and isinstance(node.operand, Sibling):
                    if node.operand.name not in known:
                        raise CompositionError(
                            f"Field {member.name!r} compares against unknown "
                            f"member {node.operand.name!r}"
                        )
                    bindable.add(member.name)
                    siblings.setdefault(node.operand.name, None)
        self._bindable = frozenset(bindable)
        self._names = tuple({**dict.fromkeys(declared), **siblings})

    @property
    def fields(self) -> dict[str, Validator]:
        return {member.name: member.inner for member in self.members}

    def __call__(self, value: Any, context: Any, path: Path, report: Report) -> Outcome:
        failure = self._shape_failure(value)
        if failure is not None:
            report.append(path, failure)
            return Outcome.INVALID

        outcome = Outcome.VALID
        for member in self.members:
            if member.name in self._bindable:
                member = member.bind(value)
            outcome = member(value, context, path, report) & outcome
        return outcome

    def _shape_failure(self, value: Any) -> Failure | None:
        """
        A failure when `value` cannot hold the members, e.g. None or a str.

        Instances of `model` are trusted: a member missing from one of them
        is a composition mistake and raises from get_member.
        """
        if isinstance(value, Mapping):
            return None
        if self.model is not None and isinstance(value, self.model):
            return None

        missing = [name for name in self._names if not hasattr(value, name)]
        if value is not None and not missing:
            return None

        actual = type(value).__name__
        return Failure(
            rule="type.aggregate",
            message=f"Expected an aggregate, got {actual}",
            details={"actual": actual, "missing": missing},
        )

    def extend(self, fields: Mapping[str, Any] | None = None, **kwargs: Any) -> Schema:
        """Return a new schema with extra (or replaced) field rules."""
        merged: dict[str, Any] = self.fields
        merged.update(fields or {})
        merged.update(kwargs)
        return Schema(merged, model=self.model)

    def __repr__(self) -> str:
        inner = ", ".join(f"{m.name!r}: {m.inner!r}" for m in self.members)
        return f"Schema({{{inner}}})"


def _member_names(model: type) -> set[str]:
    names: set[str] = set()
    for klass in model.__mro__:
        names.update(getattr(klass, "__annotations__", None) or {})
    # pydantic does not keep required fields as class attributes
    names.update(getattr(model, "model_fields", None) or {})
    names.update(n for n in dir(model) if not n.startswith("_"))
    return names


@lru_cache(maxsize=None)
def schema_for(cls: type) -> Schema:
    """
    Build a Schema from validators declared in Annotated type hints.

    Works for pydantic models, dataclasses and plain annotated classes.

    Usage:
        @dataclass
        class Credentials:
            username: Annotated[str, Alphanumeric(), LengthBetween(4, 20)]
            password: Annotated[str, Ascii(), MinLength(8)]
            confirm_password: Annotated[str, Eq(Sibling("password"))]

        schema_for(Credentials)
    """
    fields: dict[str, Validator] = {}

    for name, metadata in _declared_metadata(cls):
        rules = [m for m in metadata if isinstance(m, Validator)]
        if rules:
            fields[name] = rules[0] if len(rules) == 1 else Bundle(*rules)

    if not fields:
        raise CompositionError(f"{cls.__name__} declares no validation rules")

    return Schema(fields, model=cls)


def _declared_metadata(cls: type) -> list[tuple[str, tuple[Any, ...]]]:
    # pydantic keeps unknown Annotated metadata on FieldInfo.metadata
    model_fields = getattr(cls, "model_fields", None)
    if isinstance(model_fields, dict):
        return [(name, tuple(info.metadata)) for name, info in model_fields.items()]

    try:
        hints = get_type_hints(cls, include_extras=True)
    except (NameError, TypeError) as e:
        raise CompositionError(f"Cannot resolve annotations of {cls.__name__}: {e}") from e

    return [
        (name, hint.__metadata__)
        for name, hint in hints.items()
        if get_origin(hint) is Annotated
    ]


def validator_for(cls: type) -> Validator:
    """
    The validator instances of `cls` are checked with.

    Looks for an explicit `__validator__` first, then for rules declared
    in Annotated type hints.
    """
    explicit = getattr(cls, "__validator__", None)
    if explicit is not None:
        return to_validator(explicit)
    return schema_for(cls)


def validated_by(validator: Any) -> Callable[[type], type]:
    """
    Class decorator attaching a hand-written validator to a type.

    Usage:
        @validated_by(Schema({"first": Alphabetic()}))
        @dataclass
        class Name:
            first: str
    """
    resolved = to_validator(validator)

    def decorator(cls: type) -> type:
        cls.__validator__ = resolved
        return cls

    return decorator
