"""
Unified exception hierarchy for kerntune.
Single source of the errors raised by the settings and source layers.
"""

import secrets
from datetime import datetime, timezone
from typing import Dict, Any, Optional, List


class KerntuneError(Exception):
    """
    Base error of the kerntune system.

    Features:
    1. Structured serialization
    2. Rich context
    3. Resolution suggestions
    4. Unique ID for tracking
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ) -> None:
        self.id: str = secrets.token_hex(16)
        self.timestamp: datetime = datetime.now(timezone.utc)
        self.message: str = message
        self.code: str = code or self.__class__.__name__
        self.context: Dict[str, Any] = context or {}
        self.cause: Optional[Exception] = cause
        self.suggestions: List[str] = []
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize to a dictionary for structured logging.

        Returns:
            {
                "error_id": "hex32chars",
                "code": "ParseError",
                "message": "Missing '=' separator",
                "timestamp": "2024-01-20T10:30:00Z",
                "context": {...}
            }
        """
        result: Dict[str, Any] = {
            "error_id": self.id,
            "code": self.code,
            "message": self.message,
            "timestamp": self.timestamp.isoformat().replace("+00:00", "Z"),
            "context": self.context,
        }

        if self.cause:
            result["cause"] = {"type": type(self.cause).__name__, "message": str(self.cause)}

        if self.suggestions:
            result["suggestions"] = self.suggestions

        return result

    def add_suggestion(self, suggestion: str) -> None:
        """
        Add a resolution suggestion to the error.

        Suggestions accumulate so several options can be shown to the user.
        Duplicates and empty strings are ignored.

        Example:
            error = MissingSourceError("Source not found", path="/etc/sysctl.d/x.conf")
            error.add_suggestion("Check the path passed on the command line")
        """
        if not suggestion or not isinstance(suggestion, str):
            return

        if suggestion not in self.suggestions:
            self.suggestions.append(suggestion)


class ConfigurationError(KerntuneError):
    """Error in the tool's own settings (YAML file or environment)."""

    pass


class SourceError(KerntuneError):
    """Error reading one sysctl configuration source."""

    def __init__(self, message: str, path: str, **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.path = path
        self.context.setdefault("path", path)


class ParseError(SourceError):
    """
    Malformed sysctl source.

    Always fatal for the run, whether the source was named explicitly or
    discovered in a configuration directory.
    """

    def __init__(self, message: str, path: str, line: int, **kwargs: Any) -> None:
        super().__init__(message, path, **kwargs)
        self.line = line
        self.context.setdefault("line", line)

    def __str__(self) -> str:
        return f"{self.path}:{self.line}: {self.message}"


class MissingSourceError(SourceError):
    """An explicitly named source does not exist."""

    pass


class UnreadableSourceError(SourceError):
    """A source exists but cannot be read."""

    pass


class SourceEnumerationError(KerntuneError):
    """A configuration directory exists but cannot be listed."""

    pass


__all__ = [
    "KerntuneError",
    "ConfigurationError",
    "SourceError",
    "ParseError",
    "MissingSourceError",
    "UnreadableSourceError",
    "SourceEnumerationError",
]
