"""
Sysctl Service - one complete run.

Loads the sources in order, merges them, and applies the result.
"""

from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple

from kerntune.core.exceptions import MissingSourceError
from kerntune.core.logging import logger
from kerntune.core.settings import Settings
from kerntune.models.sysctl import RunResult, SourceFailure
from kerntune.sysctl.applicator import Applicator
from kerntune.sysctl.conf_files import list_conf_files
from kerntune.sysctl.loader import load_source, read_source
from kerntune.sysctl.prefix import PrefixMatcher
from kerntune.sysctl.store import SettingsStore
from kerntune.sysctl.writer import ProcSysWriter, SysctlWriter


class SysctlService:
    """
    Orchestrates a sysctl run.

    Responsibilities:
    - Choose the sources (explicit list or standard directories)
    - Load them in order into one SettingsStore
    - Apply the store through the writer
    - Fold load failures and apply failures into one RunResult
    """

    def __init__(
        self, settings: Optional[Settings] = None, writer: Optional[SysctlWriter] = None
    ):
        """
        Initialize SysctlService.

        Args:
            settings: Tool settings; loaded from the environment if omitted.
            writer: Apply capability; defaults to ProcSysWriter on settings' root.
        """
        self.settings = settings or Settings()
        self.writer = writer or ProcSysWriter(self.settings.sysctl_root)
        self.applicator = Applicator(self.writer)

    def discover_sources(self) -> List[Path]:
        """Sources found in the standard configuration directories."""
        return list_conf_files(self.settings.conf_dirs, self.settings.conf_suffix)

    def _sources(self, config_files: Sequence[str]) -> Tuple[List[Path], bool]:
        # Explicitly named files are required; discovered ones may vanish
        if config_files:
            return [Path(f) for f in config_files], False
        return self.discover_sources(), True

    def load(
        self, config_files: Sequence[str] = ()
    ) -> Tuple[SettingsStore, Optional[SourceFailure]]:
        """
        Load every source into a fresh store.

        All sources are attempted; the first failure is returned alongside
        the store built from the sources that did load.

        Raises:
            SourceEnumerationError: a configuration directory is unreadable
        """
        sources, tolerate_missing = self._sources(config_files)
        store = SettingsStore()
        first_failure: Optional[SourceFailure] = None

        for source in sources:
            failure = store.load(load_source(source, tolerate_missing=tolerate_missing))
            if failure is not None and first_failure is None:
                first_failure = failure

        logger.debug("Sources loaded", sources=len(sources), settings=len(store))
        return store, first_failure

    def run(self, config_files: Sequence[str] = (), prefixes: Iterable[str] = ()) -> RunResult:
        """
        Load, merge and apply.

        Args:
            config_files: Explicit sources, in order. Empty means the standard directories.
            prefixes: Raw filters (dot or slash form, with or without /proc/sys/).

        Returns:
            RunResult; ``exit_code`` is non-zero on any load or fatal apply failure.
        """
        matcher = PrefixMatcher(prefixes)
        store, load_failure = self.load(config_files)
        if matcher:
            logger.debug(
                "Filtering settings",
                matcher=repr(matcher),
                selected=sum(1 for key, _ in store.entries() if matcher(key)),
                total=len(store),
            )

        result = self.applicator.apply_all(store, matcher.prefixes)
        result.load_failure = load_failure

        if not result.success:
            logger.debug(
                "Run failed",
                load_failure=load_failure.describe() if load_failure else None,
                first_fatal=result.first_fatal.key if result.first_fatal else None,
            )
        return result

    def cat_config(self, config_files: Sequence[str] = ()) -> List[Tuple[str, str]]:
        """
        Text of every source that a run would read, in order.

        Missing discovered files are left out; missing explicit files raise.

        Raises:
            MissingSourceError, UnreadableSourceError, SourceEnumerationError
        """
        sources, tolerate_missing = self._sources(config_files)
        texts: List[Tuple[str, str]] = []
        for source in sources:
            try:
                texts.append((str(source), read_source(source)))
            except MissingSourceError:
                if not tolerate_missing:
                    raise
        return texts
