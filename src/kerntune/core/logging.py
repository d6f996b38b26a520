"""
Simple leveled logging for kerntune.
"""

import os
import sys
import traceback
from typing import Any, Dict, Optional
from loguru import logger as loguru_logger

NOTICE_LEVEL = "NOTICE"
NOTICE_LEVEL_NO = 22

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <7} | {extra[component]} | {message}"
VALID_LEVELS = ("TRACE", "DEBUG", "INFO", NOTICE_LEVEL, "WARNING", "ERROR", "CRITICAL")


def _register_notice_level() -> None:
    """Register NOTICE between INFO and WARNING (loguru has no such level)."""
    try:
        loguru_logger.level(NOTICE_LEVEL)
    except ValueError:
        loguru_logger.level(NOTICE_LEVEL, no=NOTICE_LEVEL_NO, color="<cyan><bold>")


def _format_record(record: Dict[str, Any]) -> str:
    """
    Build the format template for one record.

    Format: timestamp | level | component | message | key=value ...
    Bound context is appended as key=value pairs so it survives plain text sinks.
    """
    template = LOG_FORMAT
    for key in record["extra"]:
        if key == "component":
            continue
        template += f" | {key}={{extra[{key}]}}"
    return template + "\n{exception}"


class AsyncLogger:
    """
    Logger bound to one component with a plain format.

    Format: timestamp | level | component | message
    Without emojis or JSON, messages stay greppable on the console and in journald.
    """

    # Single handler shared between all instances
    _handler_ids: list = []

    def __init__(self, component: str, debug_mode: bool = False):
        self.component = component
        self.debug_mode = debug_mode
        self._setup_handler()

    @classmethod
    def _setup_handler(cls) -> None:
        """
        Install the default stderr handler once.

        Loguru's own default handler is removed so every line follows the
        kerntune format. The level can be changed later with configure_logging.
        """
        if cls._handler_ids:
            return
        _register_notice_level()
        loguru_logger.remove()
        level = os.getenv("KERNTUNE_LOG_LEVEL", "INFO").upper()
        if level not in VALID_LEVELS:
            level = "INFO"
        cls._handler_ids.append(
            loguru_logger.add(sys.stderr, format=_format_record, level=level, colorize=False)
        )

    def log(self, level: str, message: str, **context: Any) -> None:
        """Emit a message with the context bound as extras."""
        # Bind instead of passing kwargs: loguru would str.format() the message otherwise
        loguru_logger.bind(component=self.component, **context).log(level, message)

    def debug(self, message: str, **context: Any) -> None:
        """Log at DEBUG level."""
        self.log("DEBUG", message, **context)

    def info(self, message: str, **context: Any) -> None:
        """Log at INFO level."""
        self.log("INFO", message, **context)

    def notice(self, message: str, **context: Any) -> None:
        """Log at NOTICE level (tolerated problems)."""
        self.log(NOTICE_LEVEL, message, **context)

    def warning(self, message: str, **context: Any) -> None:
        """Log at WARNING level."""
        self.log("WARNING", message, **context)

    def error(self, message: str, include_trace: Optional[bool] = None, **context: Any) -> None:
        """
        Log at ERROR level with an optional stack trace.

        Args:
            message: Error message
            include_trace: Whether to include the stack trace (None = follow debug_mode)
            **context: Additional context
        """
        should_include_trace = include_trace if include_trace is not None else self.debug_mode

        if should_include_trace:
            context["stack_trace"] = traceback.format_exc()

        self.log("ERROR", message, **context)


def configure_logging(level: str = "INFO", file: Optional[str] = None) -> None:
    """
    Replace the shared handlers with the ones requested at startup.

    Args:
        level: Minimum level for stderr (and for the file sink, if any)
        file: Optional log file path, rotated at 10 MB
    """
    level = level.upper()
    if level not in VALID_LEVELS:
        level = "INFO"

    AsyncLogger._setup_handler()
    for handler_id in AsyncLogger._handler_ids:
        loguru_logger.remove(handler_id)
    AsyncLogger._handler_ids.clear()

    AsyncLogger._handler_ids.append(
        loguru_logger.add(sys.stderr, format=_format_record, level=level, colorize=False)
    )
    if file:
        AsyncLogger._handler_ids.append(
            loguru_logger.add(
                file,
                format=_format_record,
                level=level,
                rotation="10 MB",
                compression="zip",
            )
        )


def _get_debug_mode() -> bool:
    """Read debug_mode from the environment."""
    return os.getenv("KERNTUNE_DEBUG", "false").lower() == "true"


logger = AsyncLogger("kerntune", debug_mode=_get_debug_mode())
