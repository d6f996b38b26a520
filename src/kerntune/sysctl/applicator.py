"""
Apply pass over a finished SettingsStore.
"""

from typing import Optional, Sequence

from kerntune.core.logging import AsyncLogger
from kerntune.models.sysctl import ApplyOutcome, OutcomeKind, RunResult
from kerntune.sysctl.normalize import normalize
from kerntune.sysctl.prefix import matches
from kerntune.sysctl.store import SettingsStore
from kerntune.sysctl.writer import SysctlWriter

logger = AsyncLogger("applicator")


class Applicator:
    """
    Writes every selected entry of a store through a writer.

    Per-key failures never stop the pass. Missing sysctls and privilege
    problems (EPERM, EACCES, EROFS, ENOENT) are logged at NOTICE and
    ignored. Everything else is logged as an error and fails the run, but
    the remaining keys are still written. Nothing is rolled back.
    """

    def __init__(self, writer: SysctlWriter):
        self.writer = writer

    def apply_one(
        self,
        key: str,
        value: str,
        prefixes: Sequence[str] = (),
        origin: Optional[str] = None,
    ) -> ApplyOutcome:
        """Filter, normalize, write and classify a single entry. ``origin`` names the source for logs."""
        if not matches(key, prefixes):
            logger.debug("Skipping setting outside prefixes", key=key)
            return ApplyOutcome(key=key, value=value, kind=OutcomeKind.SKIPPED_BY_FILTER)

        value = normalize(value)
        logger.debug("Writing setting", key=key, value=value)
        failure = self.writer.write(key, value)

        if failure is None:
            logger.info(f"Set '{key}' to '{value}'")
            return ApplyOutcome(key=key, value=value, kind=OutcomeKind.APPLIED)

        if failure.reason.tolerable:
            logger.notice(
                f"Couldn't write '{value}' to '{key}', ignoring: {failure.message}",
                reason=failure.reason.value,
                source=origin,
            )
            kind = OutcomeKind.TOLERABLE_FAILURE
        else:
            logger.error(
                f"Couldn't write '{value}' to '{key}': {failure.message}",
                reason=failure.reason.value,
                source=origin,
            )
            kind = OutcomeKind.FATAL_FAILURE

        return ApplyOutcome(
            key=key, value=value, kind=kind, reason=failure.reason, message=failure.message
        )

    def apply_all(self, store: SettingsStore, prefixes: Sequence[str] = ()) -> RunResult:
        """
        Apply every entry of ``store`` in its enumeration order.

        Returns:
            RunResult with all outcomes; ``first_fatal`` is the first
            non-tolerable failure, if any.
        """
        result = RunResult()
        for key, value in store.entries():
            result.record(self.apply_one(key, value, prefixes, store.origin(key)))

        logger.debug(
            "Apply pass finished",
            applied=result.count(OutcomeKind.APPLIED),
            skipped=result.count(OutcomeKind.SKIPPED_BY_FILTER),
            tolerated=result.count(OutcomeKind.TOLERABLE_FAILURE),
            failed=result.count(OutcomeKind.FATAL_FAILURE),
        )
        return result


def apply_all(
    store: SettingsStore, prefixes: Sequence[str], writer: SysctlWriter
) -> RunResult:
    """Functional shortcut for Applicator(writer).apply_all(store, prefixes)."""
    return Applicator(writer).apply_all(store, prefixes)
