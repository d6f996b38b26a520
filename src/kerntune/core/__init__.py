"""
kerntune core module.

Exports the fundamental system components.
"""

# Configuration
from kerntune.core.settings import Settings, ConfigValidator

# Exceptions
from kerntune.core.exceptions import (
    KerntuneError,
    ConfigurationError,
    SourceError,
    ParseError,
    MissingSourceError,
    UnreadableSourceError,
    SourceEnumerationError,
)

# Logging
from kerntune.core.logging import (
    AsyncLogger,
    configure_logging,
    logger,  # Pre-configured global logger
)

__all__ = [
    # Configuration
    "Settings",
    "ConfigValidator",
    # Exceptions
    "KerntuneError",
    "ConfigurationError",
    "SourceError",
    "ParseError",
    "MissingSourceError",
    "UnreadableSourceError",
    "SourceEnumerationError",
    # Logging
    "AsyncLogger",
    "configure_logging",
    "logger",
]
