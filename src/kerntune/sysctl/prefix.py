"""
Prefix filtering of sysctl keys.
"""

from typing import Iterable, List, Optional, Sequence, Tuple

from kerntune.sysctl.normalize import normalize

SYSCTL_ROOT = "/proc/sys/"


def _segments(path: str) -> List[str]:
    return [part for part in path.split("/") if part]


def path_startswith(path: str, prefix: str) -> Optional[str]:
    """
    Check whether ``path`` lies below ``prefix``, comparing whole segments.

    Repeated slashes are ignored and both arguments must agree on being
    absolute or relative. Returns the remainder of ``path`` after the prefix
    (possibly empty) or None when it does not match.

    Examples:
        >>> path_startswith("net/ipv4/ip_forward", "net/ipv4")
        'ip_forward'
        >>> path_startswith("net/ipv46", "net/ipv4") is None
        True
    """
    if path.startswith("/") != prefix.startswith("/"):
        return None

    path_parts = _segments(path)
    prefix_parts = _segments(prefix)
    if path_parts[: len(prefix_parts)] != prefix_parts:
        return None
    return "/".join(path_parts[len(prefix_parts):])


def normalize_prefixes(raw_prefixes: Iterable[str]) -> Tuple[str, ...]:
    """
    Turn user supplied filters into anchored prefixes.

    Each filter is normalized and placed under /proc/sys/ unless it already
    lives there: ``net.ipv4`` becomes ``/proc/sys/net/ipv4``.
    """
    prefixes = []
    for raw in raw_prefixes:
        prefix = normalize(raw)
        if path_startswith(prefix, SYSCTL_ROOT) is None:
            prefix = SYSCTL_ROOT + prefix
        if prefix not in prefixes:
            prefixes.append(prefix)
    return tuple(prefixes)


def matches(key: str, prefixes: Sequence[str]) -> bool:
    """
    Whether ``key`` is selected by ``prefixes``.

    An empty sequence selects everything. Prefixes under /proc/sys/ are
    compared without that root, since store keys are relative to it.
    """
    if not prefixes:
        return True

    for prefix in prefixes:
        bare = path_startswith(prefix, SYSCTL_ROOT)
        if bare is None:
            bare = prefix
        if path_startswith(key, bare) is not None:
            return True
    return False


class PrefixMatcher:
    """Immutable prefix set built once from the command line filters."""

    def __init__(self, raw_prefixes: Iterable[str] = ()):
        self.prefixes: Tuple[str, ...] = normalize_prefixes(raw_prefixes)

    def __call__(self, key: str) -> bool:
        return matches(key, self.prefixes)

    def __bool__(self) -> bool:
        return bool(self.prefixes)

    def __repr__(self) -> str:
        return f"PrefixMatcher({list(self.prefixes)!r})"
