"""Tests for tool settings."""

import pytest

from kerntune.core.exceptions import ConfigurationError
from kerntune.core.settings import DEFAULT_CONFIG, Settings


class TestSettings:
    """Tests for layered configuration."""

    def test_defaults_without_file(self, monkeypatch):
        monkeypatch.setattr(Settings, "_find_config_file", lambda self: None)
        settings = Settings()

        assert settings.sysctl_root == "/proc/sys"
        assert settings.conf_dirs == DEFAULT_CONFIG["sysctl"]["conf_dirs"]
        assert settings.conf_dirs[-1] == "/etc/sysctl.d"
        assert settings.conf_suffix == ".conf"
        assert settings.log_level == "INFO"
        assert settings.log_file is None

    def test_file_is_deep_merged(self, make_settings, proc_root):
        settings = make_settings(logging={"file": "/tmp/kerntune.log"})

        assert settings.sysctl_root == str(proc_root)
        assert settings.conf_suffix == ".conf"
        assert settings.log_file == "/tmp/kerntune.log"
        assert settings.log_level == "DEBUG"

    def test_env_overrides_file(self, make_settings, monkeypatch, tmp_path):
        monkeypatch.setenv("KERNTUNE_SYSCTL_ROOT", str(tmp_path))
        monkeypatch.setenv("KERNTUNE_LOG_LEVEL", "warning")
        settings = make_settings()

        assert settings.sysctl_root == str(tmp_path)
        assert settings.log_level == "WARNING"

    def test_env_config_path(self, tmp_path, monkeypatch):
        settings_file = tmp_path / "env.yaml"
        settings_file.write_text("logging:\n  level: ERROR\n")
        monkeypatch.setenv("KERNTUNE_CONFIG", str(settings_file))

        assert Settings().log_level == "ERROR"

    def test_missing_explicit_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            Settings(str(tmp_path / "nope.yaml"))

    def test_invalid_yaml(self, tmp_path):
        settings_file = tmp_path / "bad.yaml"
        settings_file.write_text("sysctl: [unclosed\n")
        with pytest.raises(ConfigurationError):
            Settings(str(settings_file))

    def test_non_mapping_yaml(self, tmp_path):
        settings_file = tmp_path / "list.yaml"
        settings_file.write_text("- a\n- b\n")
        with pytest.raises(ConfigurationError):
            Settings(str(settings_file))

    @pytest.mark.parametrize(
        "overrides",
        [
            {"sysctl": {"root": "relative/root"}},
            {"sysctl": {"conf_dirs": "/etc/sysctl.d"}},
            {"sysctl": {"conf_dirs": ["etc/sysctl.d"]}},
            {"sysctl": {"conf_suffix": "conf"}},
            {"logging": {"level": "LOUD"}},
        ],
    )
    def test_validation(self, make_settings, overrides):
        with pytest.raises(ConfigurationError):
            make_settings(**overrides)

    @pytest.mark.parametrize(
        "text",
        ["sysctl:\n", "logging:\n", "sysctl: 5\n", "logging: [INFO]\n"],
    )
    def test_sections_must_be_mappings(self, tmp_path, text):
        settings_file = tmp_path / "sections.yaml"
        settings_file.write_text(text)
        with pytest.raises(ConfigurationError) as exc_info:
            Settings(str(settings_file))

        assert "must be a mapping" in exc_info.value.message
        assert exc_info.value.suggestions

    def test_env_override_with_null_section(self, tmp_path, monkeypatch):
        settings_file = tmp_path / "null.yaml"
        settings_file.write_text("logging:\n")
        monkeypatch.setenv("KERNTUNE_LOG_LEVEL", "DEBUG")
        with pytest.raises(ConfigurationError):
            Settings(str(settings_file))

    def test_get_dotted_and_require(self, make_settings):
        settings = make_settings()
        assert settings.get("sysctl.conf_suffix") == ".conf"
        assert settings.get("sysctl.nothing", "fallback") == "fallback"
        assert settings.get("logging")["level"] == "DEBUG"
        with pytest.raises(ConfigurationError):
            settings.require("sysctl.nothing")
