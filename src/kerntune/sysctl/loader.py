"""
Parsing of sysctl configuration sources.

Format (flat, no sections):

    # comment
    ; comment
    net.ipv4.ip_forward = 1
    kernel/sysrq = 16
"""

from pathlib import Path
from typing import List, Tuple, Union

from kerntune.core.exceptions import (
    MissingSourceError,
    ParseError,
    SourceError,
    UnreadableSourceError,
)
from kerntune.core.logging import AsyncLogger
from kerntune.models.sysctl import LoadResult, SourceFailure, SourceFailureKind

logger = AsyncLogger("loader")

COMMENT_CHARS = ("#", ";")


def parse_text(text: str, path: str) -> List[Tuple[str, str]]:
    """
    Split the text of one source into ordered (key, value) pairs.

    Keys and values are stripped. Later duplicates are kept in order; the
    store resolves them.

    Raises:
        ParseError: on the first malformed line
    """
    pairs: List[Tuple[str, str]] = []
    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith(COMMENT_CHARS):
            continue

        if line.startswith("["):
            raise ParseError("Sections are not supported", path=path, line=lineno)

        key, sep, value = line.partition("=")
        if not sep:
            raise ParseError("Line is not an assignment (missing '=')", path=path, line=lineno)

        key = key.strip()
        if not key:
            raise ParseError("Missing key name", path=path, line=lineno)

        pairs.append((key, value.strip()))
    return pairs


def read_source(path: Union[str, Path]) -> str:
    """
    Read the raw text of a source.

    Raises:
        MissingSourceError: the file does not exist
        UnreadableSourceError: the file exists but cannot be read
    """
    path = Path(path)
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        error = MissingSourceError(f"No such file: {path}", path=str(path), cause=e)
        error.add_suggestion("Check the configuration file names passed on the command line")
        raise error
    except (OSError, UnicodeDecodeError) as e:
        raise UnreadableSourceError(f"Failed to read: {e}", path=str(path), cause=e)


def _failure_from(error: SourceError) -> SourceFailure:
    if isinstance(error, ParseError):
        return SourceFailure(
            kind=SourceFailureKind.PARSE, path=error.path, message=error.message, line=error.line
        )
    if isinstance(error, MissingSourceError):
        kind = SourceFailureKind.MISSING
    else:
        kind = SourceFailureKind.UNREADABLE
    return SourceFailure(kind=kind, path=error.path, message=error.message)


def load_source(path: Union[str, Path], tolerate_missing: bool = False) -> LoadResult:
    """
    Load one source into a tagged result.

    Args:
        path: Source location
        tolerate_missing: Treat a missing file as empty (directory discovery)

    Returns:
        LoadResult with the pairs in file order, or with the failure set.
        Malformed content is a failure regardless of ``tolerate_missing``.
    """
    path_str = str(path)
    logger.debug("Parsing source", path=path_str)

    try:
        text = read_source(path)
    except MissingSourceError as e:
        if tolerate_missing:
            logger.debug("Source vanished, ignoring", path=path_str)
            return LoadResult(path=path_str)
        logger.error("Failed to open source", path=path_str, error=e.message)
        return LoadResult(path=path_str, failure=_failure_from(e))
    except UnreadableSourceError as e:
        logger.error("Failed to read source", path=path_str, error=e.message)
        return LoadResult(path=path_str, failure=_failure_from(e))

    try:
        pairs = parse_text(text, path_str)
    except ParseError as e:
        logger.error("Failed to parse source", path=path_str, line=e.line, error=e.message)
        return LoadResult(path=path_str, failure=_failure_from(e))

    return LoadResult(path=path_str, pairs=pairs)
