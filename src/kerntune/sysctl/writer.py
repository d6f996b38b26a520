"""
Writers that push sysctl values into the running kernel.
"""

import errno
import os
from pathlib import Path
from typing import Dict, Optional, Protocol, runtime_checkable

from kerntune.models.sysctl import FailureReason, WriteFailure
from kerntune.sysctl.normalize import normalize

ERRNO_REASONS: Dict[int, FailureReason] = {
    errno.EPERM: FailureReason.PERMISSION_DENIED,
    errno.EACCES: FailureReason.ACCESS_DENIED,
    errno.EROFS: FailureReason.READ_ONLY,
    errno.ENOENT: FailureReason.NOT_FOUND,
}


def reason_for_errno(code: Optional[int]) -> FailureReason:
    """Map an errno value onto the failure vocabulary."""
    if code is None:
        return FailureReason.OTHER
    return ERRNO_REASONS.get(code, FailureReason.OTHER)


@runtime_checkable
class SysctlWriter(Protocol):
    """Capability to write one setting. Returns None on success."""

    def write(self, key: str, value: str) -> Optional[WriteFailure]:
        ...  # pragma: no cover


class ProcSysWriter:
    """
    Writes settings below a /proc/sys style tree.

    The file is opened without O_CREAT so a sysctl unknown to the running
    kernel reports NOT_FOUND instead of creating anything. A rejected or
    short write still counts as success when the file already holds the value.
    """

    def __init__(self, root: str = "/proc/sys"):
        self.root = Path(root)

    def path_for(self, key: str) -> Optional[Path]:
        """File backing ``key``, or None if the name escapes the root."""
        relative = normalize(key).lstrip("/")
        if not relative or ".." in relative.split("/"):
            return None
        return self.root / relative

    def write(self, key: str, value: str) -> Optional[WriteFailure]:
        path = self.path_for(key)
        if path is None:
            return WriteFailure(reason=FailureReason.OTHER, message=f"Invalid sysctl name: {key}")

        data = (value + "\n").encode()
        try:
            fd = os.open(path, os.O_WRONLY | os.O_CLOEXEC | os.O_NOCTTY)
        except OSError as e:
            return WriteFailure(reason=reason_for_errno(e.errno), message=e.strerror or str(e))

        try:
            written = os.write(fd, data)
            if written == len(data) and os.fstat(fd).st_size > written:
                # /proc reports size 0; only regular files keep stale bytes
                os.ftruncate(fd, written)
        except OSError as e:
            failure = WriteFailure(
                reason=reason_for_errno(e.errno), message=e.strerror or str(e)
            )
        else:
            if written == len(data):
                return None
            failure = WriteFailure(
                reason=FailureReason.OTHER, message=f"Short write ({written} of {len(data)} bytes)"
            )
        finally:
            os.close(fd)

        if self.read(key) == value:
            return None
        return failure

    def read(self, key: str) -> Optional[str]:
        """Current value of ``key``, or None if it cannot be read."""
        path = self.path_for(key)
        if path is None:
            return None
        try:
            return path.read_text().rstrip("\n")
        except OSError:
            return None
