"""
kerntune - apply kernel sysctl settings from configuration files.

Reads sysctl.d style sources, merges them in precedence order and writes
the result to /proc/sys.
"""

from kerntune._version import __version__, __version_info__

__license__ = "LGPL-2.1-or-later"

# Core components
from kerntune.core import (
    logger,
    Settings,
    KerntuneError,
    ConfigurationError,
    ParseError,
    MissingSourceError,
    SourceEnumerationError,
)

# Engine
from kerntune.sysctl import (
    normalize,
    matches,
    normalize_prefixes,
    PrefixMatcher,
    SettingsStore,
    load_source,
    list_conf_files,
    ProcSysWriter,
    Applicator,
    apply_all,
)

# Models
from kerntune.models import (
    FailureReason,
    OutcomeKind,
    ApplyOutcome,
    LoadResult,
    RunResult,
)

# Services
from kerntune.services import SysctlService

__all__ = [
    "__version__",
    "__version_info__",
    "__license__",
    # Core
    "logger",
    "Settings",
    "KerntuneError",
    "ConfigurationError",
    "ParseError",
    "MissingSourceError",
    "SourceEnumerationError",
    # Engine
    "normalize",
    "matches",
    "normalize_prefixes",
    "PrefixMatcher",
    "SettingsStore",
    "load_source",
    "list_conf_files",
    "ProcSysWriter",
    "Applicator",
    "apply_all",
    # Models
    "FailureReason",
    "OutcomeKind",
    "ApplyOutcome",
    "LoadResult",
    "RunResult",
    # Services
    "SysctlService",
]
