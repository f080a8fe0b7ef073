"""
Vetted - composable validators with path-tagged reports.

Usage:
    from vetted import Schema, Alphanumeric, LengthBetween, Eq, Sibling, validate

    schema = Schema({
        "username": Alphanumeric() & LengthBetween(4, 20),
        "confirm_password": Eq(Sibling("password")),
    })

    outcome, report = validate(data, schema)
    for entry in report:
        print(entry.path, entry.failure.message)
"""

from .accessor import Field, Index, Key, Path, Root, extend, parse_path, render
from .combinators import Each, EachValue, Length, LengthEquals, Member, Nested, Optional
from .compare import (
    Between,
    Compare,
    Constant,
    Eq,
    FromContext,
    Gt,
    Gte,
    Lt,
    Lte,
    Ne,
    Operand,
    Operator,
    Sibling,
)
from .config import is_strict, validation_context
from .core import Bundle, Rule, Validator, to_validator, walk
from .engine import is_valid, validate
from .report import (
    DetailReport,
    OutcomeOnlyReport,
    Report,
    ReportEntry,
    ReportModel,
    Verbosity,
)
from .schema import Schema, schema_for, validated_by, validator_for
from .types import CompositionError, Failure, Outcome
from .validators import (
    Alphabetic,
    Alphanumeric,
    Ascii,
    ContextPredicate,
    Forbidden,
    InSet,
    IpAddress,
    IsFalse,
    IsTrue,
    IsType,
    LengthBetween,
    Lowercase,
    Matches,
    MaxLength,
    MinLength,
    Predicate,
    Required,
    Uppercase,
)

__all__ = [
    # Paths
    "Root",
    "Field",
    "Index",
    "Key",
    "Path",
    "extend",
    "render",
    "parse_path",
    # Results
    "Outcome",
    "Failure",
    "CompositionError",
    # Core
    "Validator",
    "Rule",
    "Bundle",
    "to_validator",
    "walk",
    # Combinators
    "Optional",
    "Member",
    "Nested",
    "Each",
    "EachValue",
    "LengthEquals",
    "Length",
    # Comparisons
    "Operator",
    "Operand",
    "Constant",
    "Sibling",
    "FromContext",
    "Compare",
    "Eq",
    "Ne",
    "Gt",
    "Gte",
    "Lt",
    "Lte",
    "Between",
    # Validators
    "Required",
    "Forbidden",
    "IsType",
    "Predicate",
    "ContextPredicate",
    "Alphabetic",
    "Alphanumeric",
    "Ascii",
    "Lowercase",
    "Uppercase",
    "Matches",
    "InSet",
    "IsTrue",
    "IsFalse",
    "IpAddress",
    "LengthBetween",
    "MinLength",
    "MaxLength",
    # Reports
    "Verbosity",
    "Report",
    "OutcomeOnlyReport",
    "DetailReport",
    "ReportEntry",
    "ReportModel",
    # Schema
    "Schema",
    "schema_for",
    "validator_for",
    "validated_by",
    # Driver
    "validate",
    "is_valid",
    # Config
    "validation_context",
    "is_strict",
]
