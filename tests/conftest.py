"""Shared fixtures for kerntune tests."""

from pathlib import Path
from typing import Dict, List, Optional, Tuple

import pytest
import yaml
from loguru import logger as loguru_logger

from kerntune.core.settings import Settings
from kerntune.models.sysctl import FailureReason, WriteFailure


class FakeWriter:
    """Writer that records calls and fails on demand."""

    def __init__(self, failures: Optional[Dict[str, FailureReason]] = None):
        self.failures = failures or {}
        self.calls: List[Tuple[str, str]] = []

    def write(self, key: str, value: str) -> Optional[WriteFailure]:
        self.calls.append((key, value))
        reason = self.failures.get(key)
        if reason is None:
            return None
        return WriteFailure(reason=reason, message=f"simulated {reason.value}")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the developer's environment out of the tests."""
    for name in ("KERNTUNE_CONFIG", "KERNTUNE_LOG_LEVEL", "KERNTUNE_SYSCTL_ROOT", "KERNTUNE_DEBUG"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def fake_writer():
    return FakeWriter()


@pytest.fixture
def proc_root(tmp_path) -> Path:
    """A tiny /proc/sys look-alike."""
    root = tmp_path / "proc_sys"
    files = {
        "net/ipv4/ip_forward": "0\n",
        "net/ipv4/conf/enp3s0.200/forwarding": "0\n",
        "net/ipv6/conf/all/forwarding": "0\n",
        "kernel/sysrq": "176\n",
        "vm/swappiness": "60\n",
    }
    for relative, content in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
    return root


@pytest.fixture
def conf_dirs(tmp_path) -> List[Path]:
    """Standard directory layout, lowest precedence first. Nothing is created."""
    base = tmp_path / "conf"
    return [
        base / "usr/lib/sysctl.d",
        base / "usr/local/lib/sysctl.d",
        base / "run/sysctl.d",
        base / "etc/sysctl.d",
    ]


@pytest.fixture
def make_settings(tmp_path, proc_root, conf_dirs):
    """Build Settings from a YAML file pointing at the temporary tree."""

    def _make(**overrides) -> Settings:
        data = {
            "sysctl": {
                "root": str(proc_root),
                "conf_dirs": [str(d) for d in conf_dirs],
            },
            "logging": {"level": "DEBUG"},
        }
        for section, values in overrides.items():
            data.setdefault(section, {}).update(values)
        settings_file = tmp_path / "kerntune.yaml"
        settings_file.write_text(yaml.safe_dump(data))
        return Settings(str(settings_file))

    return _make


@pytest.fixture
def write_conf(tmp_path):
    """Write a source file and return its path."""

    def _write(path, text: str) -> Path:
        path = Path(path) if Path(path).is_absolute() else tmp_path / path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text)
        return path

    return _write


@pytest.fixture
def log_records():
    """Capture loguru records emitted during the test."""
    records = []
    handler_id = loguru_logger.add(
        lambda message: records.append(message.record), level="DEBUG", format="{message}"
    )
    yield records
    loguru_logger.remove(handler_id)
