"""
Reports: the accumulators validators write failures into.

Every validator calls `report.append(path, failure)`; the report decides
how much of that to keep:
- OutcomeOnlyReport counts failures and keeps nothing else.
- DetailReport keeps every (path, failure) entry in append order.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Iterator

from pydantic import BaseModel

from .accessor import Path, as_path, segment_value
from .types import Failure, Outcome


class Verbosity(Enum):
    """How much a report retains."""

    OUTCOME_ONLY = "outcome-only"
    DETAIL = "detail"


@dataclass(frozen=True, slots=True)
class ReportEntry:
    """One recorded failure and where it happened."""

    path: Path
    failure: Failure

    @property
    def rule(self) -> str:
        return self.failure.rule

    @property
    def message(self) -> str | None:
        return self.failure.message

    def to_model(self) -> EntryModel:
        return EntryModel(
            path=self.path.render(),
            segments=[segment_value(s) for s in self.path],
            rule=self.failure.rule,
            message=self.failure.message,
            payload=self.failure.payload,
            details=dict(self.failure.details),
        )

    def __str__(self) -> str:
        return f"{self.path}: {self.failure.message or self.failure.rule}"


class EntryModel(BaseModel):
    """Serializable form of a ReportEntry."""

    path: str
    segments: list[Any]
    rule: str
    message: str | None = None
    payload: Any = None
    details: dict[str, Any] = {}


class ReportModel(BaseModel):
    """Serializable form of a whole report."""

    valid: bool
    failures: int
    truncated: bool = False
    entries: list[EntryModel] = []


class Report(ABC):
    """Base class for failure accumulators."""

    __slots__ = ()

    verbosity: ClassVar[Verbosity]

    @abstractmethod
    def append(self, path: Path, failure: Failure) -> None:
        """Record a failure. The only mutation a report supports."""

    @property
    @abstractmethod
    def num_failures(self) -> int:
        """Number of failures appended, retained or not."""

    @property
    def entries(self) -> tuple[ReportEntry, ...]:
        return ()

    @property
    def is_valid(self) -> bool:
        return self.num_failures == 0

    @property
    def outcome(self) -> Outcome:
        return Outcome.of(self.is_valid)

    def __iter__(self) -> Iterator[ReportEntry]:
        return iter(self.entries)

    @staticmethod
    def for_verbosity(verbosity: Verbosity | str, **kwargs: Any) -> Report:
        """Create an empty report of the given verbosity."""
        match Verbosity(verbosity):
            case Verbosity.OUTCOME_ONLY:
                return OutcomeOnlyReport()
            case Verbosity.DETAIL:
                return DetailReport(**kwargs)
        raise ValueError(f"Unknown verbosity: {verbosity!r}")


class OutcomeOnlyReport(Report):
    """Tracks only whether anything failed (and how often)."""

    __slots__ = ("_failures",)

    verbosity = Verbosity.OUTCOME_ONLY

    def __init__(self) -> None:
        self._failures = 0

    def append(self, path: Path, failure: Failure) -> None:
        self._failures += 1

    @property
    def num_failures(self) -> int:
        return self._failures

    def __repr__(self) -> str:
        return f"OutcomeOnlyReport(failures={self._failures})"


class DetailReport(Report):
    """
    Keeps every failure with its path, in validation order.

    Args:
        limit: Keep at most this many entries. Failures past the limit are
               still counted, so the outcome never depends on the limit.
    """

    __slots__ = ("_entries", "_failures", "limit")

    verbosity = Verbosity.DETAIL

    def __init__(self, limit: int | None = None) -> None:
        if limit is not None and limit < 0:
            raise ValueError("limit must be >= 0")
        self.limit = limit
        self._entries: list[ReportEntry] = []
        self._failures = 0

    def append(self, path: Path, failure: Failure) -> None:
        self._failures += 1
        if self.limit is None or len(self._entries) < self.limit:
            self._entries.append(ReportEntry(path, failure))

    @property
    def num_failures(self) -> int:
        return self._failures

    @property
    def entries(self) -> tuple[ReportEntry, ...]:
        return tuple(self._entries)

    @property
    def truncated(self) -> bool:
        return self._failures > len(self._entries)

    # -- queries ------------------------------------------------------------

    def entries_at(self, path: Path | str, *, exact: bool = False) -> list[ReportEntry]:
        """
        Entries recorded at `path`.

        By default entries anywhere below `path` count as well, so
        `entries_at("root.profile")` includes `root.profile.name.first`.
        """
        target = as_path(path)
        if exact:
            return [e for e in self._entries if e.path == target]
        return [e for e in self._entries if e.path.startswith(target)]

    def count_at(self, path: Path | str, *, exact: bool = False) -> int:
        return len(self.entries_at(path, exact=exact))

    def is_any_invalid_at(self, path: Path | str) -> bool:
        return self.count_at(path) > 0

    def is_all_valid_at(self, path: Path | str) -> bool:
        return self.count_at(path) == 0

    def paths(self) -> list[Path]:
        """Distinct failing paths, in first-seen order."""
        seen: dict[Path, None] = {}
        for entry in self._entries:
            seen.setdefault(entry.path, None)
        return list(seen)

    # -- export -------------------------------------------------------------

    def to_model(self) -> ReportModel:
        return ReportModel(
            valid=self.is_valid,
            failures=self._failures,
            truncated=self.truncated,
            entries=[entry.to_model() for entry in self._entries],
        )

    def to_dict(self) -> dict[str, Any]:
        return self.to_model().model_dump()

    def to_json(self, indent: int | None = None) -> str:
        """JSON export; payloads and operands JSON cannot encode fall back to repr()."""
        return self.to_model().model_dump_json(indent=indent, fallback=repr)

    def __str__(self) -> str:
        if self.is_valid:
            return "valid"
        lines = [str(entry) for entry in self._entries]
        if self.truncated:
            lines.append(f"... {self._failures - len(self._entries)} more")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"DetailReport(failures={self._failures}, limit={self.limit})"
