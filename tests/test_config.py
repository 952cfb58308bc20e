"""Tests for configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from freshwind.config import (
    DEFAULT_EXCLUDE,
    Config,
    ConfigError,
    LoggingConfig,
    dict_to_config,
    env_overrides,
    load_config,
    load_yaml_file,
)


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run each test in an empty directory without FRESHWIND_* variables."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("FRESHWIND_LOG", raising=False)
    return tmp_path


class TestDefaults:
    def test_defaults(self) -> None:
        config = load_config()
        assert config.root == Path(".")
        assert config.host == "127.0.0.1"
        assert config.port == 8000
        assert config.interval_ms == 1000
        assert config.interval == 1.0
        assert config.include == ""
        assert config.exclude == DEFAULT_EXCLUDE == r"^\."
        assert config.reload_path == "__live_reload"
        assert config.script_path == "/__live_reload.js"
        assert config.logging == LoggingConfig()


class TestYamlFile:
    def test_default_file_is_found(self, isolated_cwd: Path) -> None:
        (isolated_cwd / "freshwind.yaml").write_text("port: 9001\ninterval_ms: 250\n")
        config = load_config()
        assert config.port == 9001
        assert config.interval == 0.25

    def test_hidden_default_file(self, isolated_cwd: Path) -> None:
        (isolated_cwd / ".freshwind.yml").write_text("host: 0.0.0.0\n")
        assert load_config().host == "0.0.0.0"

    def test_explicit_path(self, isolated_cwd: Path) -> None:
        path = isolated_cwd / "custom.yaml"
        path.write_text("root: site\nreload_path: /_lr/\nlogging:\n  level: DEBUG\n")
        config = load_config(config_path=path)
        assert config.root == Path("site")
        assert config.reload_path == "_lr"
        assert config.logging.level == "DEBUG"

    def test_pattern_lists_are_joined(self, isolated_cwd: Path) -> None:
        path = isolated_cwd / "freshwind.yaml"
        path.write_text("include:\n  - '\\.css$'\n  - '\\.html$'\n")
        assert load_config().include == r"\.css$,\.html$"

    def test_missing_explicit_file(self, isolated_cwd: Path) -> None:
        with pytest.raises(ConfigError, match="not found"):
            load_config(config_path=isolated_cwd / "nope.yaml")

    def test_invalid_yaml(self, isolated_cwd: Path) -> None:
        path = isolated_cwd / "bad.yaml"
        path.write_text("port: [unclosed\n")
        with pytest.raises(ConfigError, match="invalid YAML"):
            load_yaml_file(path)

    def test_non_mapping(self, isolated_cwd: Path) -> None:
        path = isolated_cwd / "list.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_yaml_file(path)

    def test_empty_file(self, isolated_cwd: Path) -> None:
        path = isolated_cwd / "empty.yaml"
        path.write_text("")
        assert load_yaml_file(path) == {}


class TestOverrides:
    def test_env_sets_log_file(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("FRESHWIND_LOG", "/tmp/fw.log")
        assert env_overrides() == {"logging": {"file": "/tmp/fw.log"}}
        assert load_config().logging.file == "/tmp/fw.log"

    def test_cli_overrides_file(self, isolated_cwd: Path) -> None:
        (isolated_cwd / "freshwind.yaml").write_text(
            "port: 9001\nexclude: '~$'\nlogging:\n  level: DEBUG\n"
        )
        config = load_config(
            overrides={"port": 9100, "exclude": None, "logging": {"verbose": 0}}
        )
        assert config.port == 9100
        # None means "not given on the command line"
        assert config.exclude == "~$"
        assert config.logging.level == "DEBUG"
        assert config.logging.verbose == 0

    def test_cli_overrides_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("FRESHWIND_LOG", "/tmp/env.log")
        config = load_config(overrides={"logging": {"file": "/tmp/cli.log"}})
        assert config.logging.file == "/tmp/cli.log"


class TestValidation:
    @pytest.mark.parametrize(
        "overrides,message",
        [
            ({"interval_ms": 0}, "interval"),
            ({"interval_ms": -5}, "interval"),
            ({"port": 0}, "port"),
            ({"port": 70000}, "port"),
            ({"reload_path": "//"}, "reload path"),
        ],
    )
    def test_invalid_values(self, overrides: dict, message: str) -> None:
        with pytest.raises(ConfigError, match=message):
            load_config(overrides=overrides)

    def test_non_numeric_port(self) -> None:
        with pytest.raises(ConfigError, match="invalid configuration value"):
            dict_to_config({"port": "eighty"})

    def test_validate_strips_slashes(self) -> None:
        config = Config(reload_path="/reload/")
        config.validate()
        assert config.reload_path == "reload"
        assert config.script_path == "/reload.js"
