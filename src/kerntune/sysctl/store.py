"""
Override-aware mapping of sysctl settings.
"""

from typing import Dict, Iterator, List, Optional, Tuple

from kerntune.core.logging import AsyncLogger
from kerntune.models.sysctl import LoadResult, SourceFailure
from kerntune.sysctl.normalize import normalize

logger = AsyncLogger("store")


class SettingsStore:
    """
    Normalized key -> value mapping filled from sources in order.

    Later writes win: a key set again (in the same source or a later one)
    keeps its first position but takes the new value. The store remembers
    which source last set each key so overrides can be traced.
    """

    def __init__(self) -> None:
        self._values: Dict[str, str] = {}
        self._origins: Dict[str, Optional[str]] = {}

    def set(self, key: str, value: str, origin: Optional[str] = None) -> None:
        """Store ``value`` under the normalized form of ``key``."""
        key = normalize(key)
        if key in self._values and self._values[key] != value:
            logger.debug(
                "Overriding setting",
                key=key,
                old_value=self._values[key],
                new_value=value,
                previous_source=self._origins[key],
                source=origin,
            )
        self._values[key] = value
        self._origins[key] = origin

    def load(self, result: LoadResult) -> Optional[SourceFailure]:
        """
        Merge the pairs of one loaded source.

        Returns:
            The source failure, or None. Failed sources contribute nothing.
        """
        if result.failure is not None:
            return result.failure

        for key, value in result.pairs:
            self.set(key, value, origin=result.path)
        return None

    def entries(self) -> List[Tuple[str, str]]:
        """Entries in enumeration order."""
        return list(self._values.items())

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self._values.get(normalize(key), default)

    def origin(self, key: str) -> Optional[str]:
        """Source that last set ``key``."""
        return self._origins.get(normalize(key))

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and normalize(key) in self._values

    def __iter__(self) -> Iterator[Tuple[str, str]]:
        return iter(self.entries())

    def __len__(self) -> int:
        return len(self._values)
