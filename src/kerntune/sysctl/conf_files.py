"""
Discovery of sysctl sources in the standard configuration directories.
"""

from pathlib import Path
from typing import Dict, Iterable, List

from kerntune.core.exceptions import SourceEnumerationError
from kerntune.core.logging import AsyncLogger

logger = AsyncLogger("conf_files")


def list_conf_files(dirs: Iterable[str], suffix: str = ".conf") -> List[Path]:
    """
    List the sources found in ``dirs``.

    Directories are given from lowest to highest precedence: a file in a
    later directory masks a file with the same name in an earlier one
    (/etc/sysctl.d/50-x.conf replaces /usr/lib/sysctl.d/50-x.conf). The
    result is sorted by file name regardless of the directory it came from.

    Missing directories are skipped.

    Raises:
        SourceEnumerationError: a directory exists but cannot be listed
    """
    by_name: Dict[str, Path] = {}

    for directory in dirs:
        base = Path(directory)
        try:
            children = list(base.iterdir())
        except FileNotFoundError:
            logger.debug("Configuration directory missing, skipping", directory=directory)
            continue
        except NotADirectoryError as e:
            error = SourceEnumerationError(
                f"Not a directory: {directory}", context={"directory": directory}, cause=e
            )
            error.add_suggestion("Fix sysctl.conf_dirs in the settings file")
            raise error
        except OSError as e:
            logger.error("Failed to enumerate directory", directory=directory, error=str(e))
            error = SourceEnumerationError(
                f"Failed to enumerate {directory}: {e}",
                context={"directory": directory},
                cause=e,
            )
            error.add_suggestion(f"Check the permissions of {directory}")
            raise error

        for child in children:
            if not child.name.endswith(suffix) or child.name.startswith("."):
                continue
            if not child.is_file():
                continue
            if child.name in by_name:
                logger.debug("Masking source", masked=str(by_name[child.name]), by=str(child))
            by_name[child.name] = child

    return [by_name[name] for name in sorted(by_name)]
