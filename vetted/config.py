"""
Context manager for engine configuration (e.g., strict mode).
"""

from contextlib import contextmanager
from contextvars import ContextVar

# Context variable for strict mode
_strict_mode: ContextVar[bool] = ContextVar("strict_mode", default=False)


def is_strict() -> bool:
    """Check if strict mode is currently enabled."""
    return _strict_mode.get()


@contextmanager
def validation_context(*, strict: bool = False):
    """
    Context manager for validation configuration.

    Args:
        strict: If True, an exception raised inside a rule's predicate
               propagates out of the run instead of being recorded as an
               "error" failure. Useful in tests, where a crashing predicate
               is a bug rather than bad input.

    Example:
        from vetted import Predicate, validate, validation_context

        rule = Predicate(lambda s: s.startswith("x"))

        # Normal: the AttributeError becomes an entry in the report
        outcome, report = validate(42, rule)

        # Strict: the AttributeError is raised
        with validation_context(strict=True):
            validate(42, rule)  # AttributeError!
    """
    token = _strict_mode.set(strict)
    try:
        yield
    finally:
        _strict_mode.reset(token)
