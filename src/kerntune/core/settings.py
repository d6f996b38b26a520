"""
Tool configuration for kerntune.
"""

import copy
import os
import yaml
from pathlib import Path
from typing import Dict, Any, Optional, cast

from kerntune.core.exceptions import ConfigurationError
from kerntune.core.logging import VALID_LEVELS, logger

DEFAULT_SETTINGS_FILE = "/etc/kerntune/kerntune.yaml"

DEFAULT_CONFIG: Dict[str, Any] = {
    "sysctl": {
        "root": "/proc/sys",
        # Lowest to highest precedence
        "conf_dirs": [
            "/usr/lib/sysctl.d",
            "/usr/local/lib/sysctl.d",
            "/run/sysctl.d",
            "/etc/sysctl.d",
        ],
        "conf_suffix": ".conf",
    },
    "logging": {"level": "INFO", "file": None},
}


class ConfigValidator:
    """
    Configuration validator with rules.

    Validations:
    1. Root of the sysctl tree is absolute
    2. Configuration directories are a list of absolute paths
    3. Source suffix looks like an extension
    4. Log level is known
    """

    def validate_config(self, config: Dict[str, Any]) -> None:
        """Validate the complete configuration, raising ConfigurationError on the first violation."""
        for section in ("sysctl", "logging"):
            if not isinstance(config.get(section), dict):
                logger.error("Settings section is not a mapping", section=section)
                error = ConfigurationError(
                    f"Section '{section}' must be a mapping, got: {config.get(section)!r}",
                    context={"setting": section},
                )
                error.add_suggestion(f"Remove the empty '{section}:' key or give it sub-keys")
                raise error

        sysctl = config["sysctl"]

        root = sysctl.get("root")
        if not isinstance(root, str) or not Path(root).is_absolute():
            logger.error("Invalid sysctl root", root=root)
            raise ConfigurationError(
                f"sysctl.root must be an absolute path, got: {root!r}",
                context={"setting": "sysctl.root"},
            )

        conf_dirs = sysctl.get("conf_dirs")
        if not isinstance(conf_dirs, list):
            logger.error("Invalid configuration directories", conf_dirs=conf_dirs)
            raise ConfigurationError(
                "sysctl.conf_dirs must be a list of directories",
                context={"setting": "sysctl.conf_dirs"},
            )
        for directory in conf_dirs:
            if not isinstance(directory, str) or not Path(directory).is_absolute():
                logger.error("Relative configuration directory", directory=directory)
                raise ConfigurationError(
                    f"Configuration directory must be absolute: {directory!r}",
                    context={"setting": "sysctl.conf_dirs"},
                )

        suffix = sysctl.get("conf_suffix")
        if not isinstance(suffix, str) or not suffix.startswith("."):
            raise ConfigurationError(
                f"sysctl.conf_suffix must start with '.', got: {suffix!r}",
                context={"setting": "sysctl.conf_suffix"},
            )

        level = str(config["logging"].get("level", "")).upper()
        if level not in VALID_LEVELS:
            raise ConfigurationError(
                f"Unknown log level: {level!r}",
                context={"setting": "logging.level", "allowed": list(VALID_LEVELS)},
            )


class Settings:
    """
    Main tool configuration.

    Layers, later wins:
    1. Default values
    2. YAML settings file (KERNTUNE_CONFIG or /etc/kerntune/kerntune.yaml)
    3. Environment variables
    """

    def __init__(self, config_file: Optional[str] = None) -> None:
        self._explicit_file = config_file
        self.config_file = self._find_config_file()
        self.config = self._load_config()
        self.validator = ConfigValidator()
        self.validator.validate_config(self.config)
        logger.debug(
            "Settings initialized",
            config_source=str(self.config_file) if self.config_file else "defaults",
        )

    def _find_config_file(self) -> Optional[Path]:
        """
        Find the YAML settings file.

        Search order:
        1. Path given to the constructor (must exist)
        2. KERNTUNE_CONFIG environment variable (must exist)
        3. /etc/kerntune/kerntune.yaml (optional)
        """
        explicit = self._explicit_file or os.getenv("KERNTUNE_CONFIG")
        if explicit:
            path = Path(explicit)
            if not path.is_file():
                error = ConfigurationError(
                    f"Settings file not found: {path}", context={"path": str(path)}
                )
                error.add_suggestion("Check --settings or the KERNTUNE_CONFIG variable")
                raise error
            return path

        default = Path(DEFAULT_SETTINGS_FILE)
        if default.is_file():
            return default
        return None

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration in priority order."""
        config = copy.deepcopy(DEFAULT_CONFIG)

        if self.config_file:
            try:
                with open(self.config_file, encoding="utf-8") as f:
                    file_config = yaml.safe_load(f)
            except (OSError, yaml.YAMLError) as e:
                logger.error(
                    "Error reading settings file", file=str(self.config_file), error=str(e)
                )
                raise ConfigurationError(
                    f"Error reading settings file: {e}",
                    context={"path": str(self.config_file)},
                    cause=e,
                )
            if file_config:
                if not isinstance(file_config, dict):
                    raise ConfigurationError(
                        f"Settings file must contain a mapping: {self.config_file}"
                    )
                self._deep_merge(config, file_config)
                logger.debug("Settings loaded from file", keys=list(file_config.keys()))

        env_overrides = {
            "KERNTUNE_SYSCTL_ROOT": ("sysctl", "root"),
            "KERNTUNE_LOG_LEVEL": ("logging", "level"),
        }
        for env_key, path_tuple in env_overrides.items():
            env_value = os.getenv(env_key)
            if env_value:
                self._set_nested(config, path_tuple, env_value)

        return config

    def _deep_merge(self, base: Dict[str, Any], update: Dict[str, Any]) -> None:
        """Deep merge of dictionaries."""
        for key, value in update.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._deep_merge(cast(Dict[str, Any], base[key]), cast(Dict[str, Any], value))
            else:
                base[key] = value

    def _set_nested(self, data: Dict[str, Any], path: tuple[str, ...], value: Any) -> None:
        """Set value at nested path."""
        current = data
        for key in path[:-1]:
            if key not in current:
                current[key] = {}
            current = current[key]
            if not isinstance(current, dict):
                # Left for the validator to report
                return
        current[path[-1]] = value

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value with support for dotted paths ("sysctl.root")."""
        if "." in key:
            current: Any = self.config
            for part in key.split("."):
                if isinstance(current, dict) and part in current:
                    current = current[part]
                else:
                    return default
            return current
        return self.config.get(key, default)

    def require(self, key: str) -> Any:
        """
        Get required value or raise exception.

        Useful for critical configs that must exist.
        """
        value = self.get(key)
        if value is None:
            logger.error("Required config missing", key=key)
            raise ConfigurationError(f"Missing required config: {key}")
        return value

    @property
    def sysctl_root(self) -> str:
        return self.require("sysctl.root")

    @property
    def conf_dirs(self) -> list[str]:
        return list(self.require("sysctl.conf_dirs"))

    @property
    def conf_suffix(self) -> str:
        return self.require("sysctl.conf_suffix")

    @property
    def log_level(self) -> str:
        return str(self.get("logging.level", "INFO")).upper()

    @property
    def log_file(self) -> Optional[str]:
        return self.get("logging.file")
