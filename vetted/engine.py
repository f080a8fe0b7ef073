"""
Execution driver: the entry point of a validation run.

Usage:
    outcome, report = validate(create_user, CREATE_USER, root="create_user")
    if outcome.is_invalid:
        for entry in report:
            print(entry.path, entry.failure.message)
"""

from __future__ import annotations

from typing import Any

import structlog

from .accessor import Path
from .core import to_validator
from .report import Report, Verbosity
from .schema import validator_for
from .types import Outcome

logger = structlog.get_logger(__name__)


def validate(
    value: Any,
    validator: Any = None,
    context: Any = None,
    *,
    root: str = "root",
    verbosity: Verbosity | str = Verbosity.DETAIL,
    report: Report | None = None,
) -> tuple[Outcome, Report]:
    """
    Validate `value` and collect every failure.

    Args:
        value: The value to check (never modified)
        validator: Validator (or anything to_validator accepts). Defaults to
                   the validator registered for type(value).
        context: Read-only data handed to every validator, untouched
        root: Label of the root path segment
        verbosity: Kind of report to create when `report` is not given
        report: Caller-owned empty report to fill instead of a new one

    Returns:
        (outcome, report). An invalid value is a normal return, not an error.

    Raises:
        CompositionError: the validator tree does not fit the value
    """
    resolved = validator_for(type(value)) if validator is None else to_validator(validator)

    if report is None:
        report = Report.for_verbosity(verbosity)

    path = Path.root(root)
    logger.debug("validation_started", root=root, validator=type(resolved).__name__)

    outcome = resolved(value, context, path, report)

    if outcome.is_invalid and report.num_failures == 0:
        logger.warning(
            "validator_contract_violation",
            root=root,
            validator=repr(resolved),
            reason="returned INVALID without recording a failure",
        )

    logger.debug(
        "validation_finished",
        root=root,
        outcome=outcome.value,
        failures=report.num_failures,
    )
    return outcome, report


def is_valid(value: Any, validator: Any = None, context: Any = None) -> bool:
    """Check a value without collecting failure details."""
    outcome, _ = validate(
        value, validator, context, verbosity=Verbosity.OUTCOME_ONLY
    )
    return outcome.is_valid
