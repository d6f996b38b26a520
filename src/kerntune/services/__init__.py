"""
kerntune services.
"""

from kerntune.services.sysctl_service import SysctlService

__all__ = ["SysctlService"]
