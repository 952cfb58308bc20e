"""Configuration loading for freshwind.

Values are resolved in order of increasing priority:
- Dataclass defaults
- YAML config file (./freshwind.yaml or an explicit path)
- Environment variables (FRESHWIND_LOG)
- Command-line overrides
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

_log = logging.getLogger("freshwind.config")

DEFAULT_CONFIG_NAMES = [
    "freshwind.yaml",
    ".freshwind.yaml",
    "freshwind.yml",
    ".freshwind.yml",
]

# Hidden files on *nix systems
DEFAULT_EXCLUDE = r"^\."


class ConfigError(ValueError):
    """Raised when configuration values are unusable."""


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str | None = None  # DEBUG, INFO, WARNING, ERROR
    verbose: int | None = None  # -v count, overrides level
    file: str | None = None  # Log file path


@dataclass
class Config:
    """freshwind configuration.

    Example freshwind.yaml:
        root: ./site
        port: 8080
        interval_ms: 500
        include: '\\.html$,\\.css$,\\.js$'
        exclude: '^\\.,~$'
        logging:
          level: DEBUG
    """

    root: Path = field(default_factory=lambda: Path("."))
    host: str = "127.0.0.1"
    port: int = 8000
    interval_ms: int = 1000
    include: str = ""  # Empty means match every file name
    exclude: str = DEFAULT_EXCLUDE
    reload_path: str = "__live_reload"
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @property
    def interval(self) -> float:
        """Tick interval in seconds."""
        return self.interval_ms / 1000.0

    @property
    def script_path(self) -> str:
        """URL path of the client reload script."""
        return f"/{self.reload_path}.js"

    def validate(self) -> None:
        """Check value ranges, raising ConfigError on the first problem."""
        if self.interval_ms <= 0:
            raise ConfigError(f"interval must be positive, got {self.interval_ms}")
        if not 0 < self.port < 65536:
            raise ConfigError(f"port must be between 1 and 65535, got {self.port}")
        self.reload_path = self.reload_path.strip("/")
        if not self.reload_path:
            raise ConfigError("reload path must not be empty")


def load_config(
    config_path: Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> Config:
    """Load configuration from file, environment and CLI overrides.

    Args:
        config_path: Explicit YAML file. When None, the default names are
            looked up in the current directory.
        overrides: Values from the command line. None entries are ignored.

    Returns:
        A validated Config.

    Raises:
        ConfigError: If the file cannot be read or a value is invalid.
    """
    if config_path is None:
        for name in DEFAULT_CONFIG_NAMES:
            if Path(name).exists():
                config_path = Path(name)
                break
    elif not config_path.exists():
        raise ConfigError(f"config file not found: {config_path}")

    data: dict[str, Any] = {}
    if config_path is not None:
        data = load_yaml_file(config_path)
        _log.debug("Loaded config from %s", config_path)

    _merge(data, env_overrides())
    if overrides:
        _merge(data, {k: v for k, v in overrides.items() if v is not None})

    config = dict_to_config(data)
    config.validate()
    return config


def load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a YAML mapping from ``path``."""
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid YAML in {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"cannot read {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping")
    return data


def env_overrides() -> dict[str, Any]:
    """Build config dict from environment variables."""
    overrides: dict[str, Any] = {}

    log_path = os.environ.get("FRESHWIND_LOG")
    if log_path:
        overrides["logging"] = {"file": log_path}

    return overrides


def dict_to_config(data: dict[str, Any]) -> Config:
    """Convert a merged dict to a typed Config."""
    log_data = data.get("logging") or {}
    logging_config = LoggingConfig(
        level=log_data.get("level"),
        verbose=log_data.get("verbose"),
        file=log_data.get("file"),
    )

    defaults = Config()
    try:
        return Config(
            root=Path(data.get("root", defaults.root)),
            host=str(data.get("host", defaults.host)),
            port=int(data.get("port", defaults.port)),
            interval_ms=int(data.get("interval_ms", defaults.interval_ms)),
            include=_patterns(data.get("include", defaults.include)),
            exclude=_patterns(data.get("exclude", defaults.exclude)),
            reload_path=str(data.get("reload_path", defaults.reload_path)),
            logging=logging_config,
        )
    except (TypeError, ValueError) as e:
        raise ConfigError(f"invalid configuration value: {e}") from e


def _patterns(value: Any) -> str:
    # YAML files may list patterns instead of joining them with commas
    if isinstance(value, list):
        return ",".join(str(v) for v in value)
    return str(value)


def _merge(base: dict[str, Any], override: dict[str, Any]) -> None:
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _merge(base[key], value)
        else:
            base[key] = value
