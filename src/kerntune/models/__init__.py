"""
kerntune models.
"""

from kerntune.models.base import KerntuneBaseModel
from kerntune.models.sysctl import (
    FailureReason,
    TOLERABLE_REASONS,
    WriteFailure,
    OutcomeKind,
    ApplyOutcome,
    SourceFailureKind,
    SourceFailure,
    LoadResult,
    RunResult,
)

__all__ = [
    "KerntuneBaseModel",
    "FailureReason",
    "TOLERABLE_REASONS",
    "WriteFailure",
    "OutcomeKind",
    "ApplyOutcome",
    "SourceFailureKind",
    "SourceFailure",
    "LoadResult",
    "RunResult",
]
