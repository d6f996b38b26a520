"""
Settings resolution and application engine.
"""

from kerntune.sysctl.normalize import normalize
from kerntune.sysctl.prefix import (
    SYSCTL_ROOT,
    PrefixMatcher,
    matches,
    normalize_prefixes,
    path_startswith,
)
from kerntune.sysctl.store import SettingsStore
from kerntune.sysctl.loader import load_source, parse_text, read_source
from kerntune.sysctl.conf_files import list_conf_files
from kerntune.sysctl.writer import ProcSysWriter, SysctlWriter, reason_for_errno
from kerntune.sysctl.applicator import Applicator, apply_all

__all__ = [
    "normalize",
    "SYSCTL_ROOT",
    "PrefixMatcher",
    "matches",
    "normalize_prefixes",
    "path_startswith",
    "SettingsStore",
    "load_source",
    "parse_text",
    "read_source",
    "list_conf_files",
    "ProcSysWriter",
    "SysctlWriter",
    "reason_for_errno",
    "Applicator",
    "apply_all",
]
