"""
Result models for loading sources and applying sysctl settings.
"""

from enum import Enum
from typing import List, Optional, Tuple

from pydantic import Field

from kerntune.models.base import KerntuneBaseModel


class FailureReason(str, Enum):
    """Closed vocabulary of reasons a sysctl write can fail."""

    PERMISSION_DENIED = "permission_denied"
    ACCESS_DENIED = "access_denied"
    READ_ONLY = "read_only"
    NOT_FOUND = "not_found"
    OTHER = "other"

    @property
    def tolerable(self) -> bool:
        """
        Whether the failure is logged and ignored.

        Missing sysctls and reduced privileges are expected (containers
        usually protect their sysctls with a read-only mount).
        """
        return self in TOLERABLE_REASONS


TOLERABLE_REASONS = frozenset(
    {
        FailureReason.PERMISSION_DENIED,
        FailureReason.ACCESS_DENIED,
        FailureReason.READ_ONLY,
        FailureReason.NOT_FOUND,
    }
)


class WriteFailure(KerntuneBaseModel):
    """Failure reported by a writer for one key."""

    reason: FailureReason
    message: str = ""


class OutcomeKind(str, Enum):
    """Per-key result of the apply pass."""

    APPLIED = "applied"
    SKIPPED_BY_FILTER = "skipped_by_filter"
    TOLERABLE_FAILURE = "tolerable_failure"
    FATAL_FAILURE = "fatal_failure"


class ApplyOutcome(KerntuneBaseModel):
    """What happened to one key during the apply pass."""

    key: str
    value: str
    kind: OutcomeKind
    reason: Optional[FailureReason] = None
    message: Optional[str] = None

    @property
    def is_fatal(self) -> bool:
        return self.kind == OutcomeKind.FATAL_FAILURE


class SourceFailureKind(str, Enum):
    """Why a source could not be loaded."""

    PARSE = "parse"
    MISSING = "missing"
    UNREADABLE = "unreadable"


class SourceFailure(KerntuneBaseModel):
    """Tagged load failure for one source."""

    kind: SourceFailureKind
    path: str
    message: str
    line: Optional[int] = None

    def describe(self) -> str:
        """Human readable location and message."""
        if self.line is not None:
            return f"{self.path}:{self.line}: {self.message}"
        return f"{self.path}: {self.message}"


class LoadResult(KerntuneBaseModel):
    """
    Pairs parsed from one source, or the reason it could not be parsed.

    A failed load carries no pairs: parsing stops at the first malformed line.
    """

    path: str
    pairs: List[Tuple[str, str]] = Field(default_factory=list)
    failure: Optional[SourceFailure] = None

    @property
    def ok(self) -> bool:
        return self.failure is None


class RunResult(KerntuneBaseModel):
    """
    Aggregate status of one run.

    Tolerable failures never change the status. The first fatal apply
    failure and the first load failure are kept for reporting.
    """

    outcomes: List[ApplyOutcome] = Field(default_factory=list)
    first_fatal: Optional[ApplyOutcome] = None
    load_failure: Optional[SourceFailure] = None

    @property
    def success(self) -> bool:
        return self.first_fatal is None and self.load_failure is None

    @property
    def exit_code(self) -> int:
        return 0 if self.success else 1

    def count(self, kind: OutcomeKind) -> int:
        """Number of outcomes of the given kind."""
        return sum(1 for outcome in self.outcomes if outcome.kind == kind)

    def record(self, outcome: ApplyOutcome) -> None:
        """Append an outcome, keeping the first fatal one."""
        self.outcomes.append(outcome)
        if outcome.is_fatal and self.first_fatal is None:
            self.first_fatal = outcome
