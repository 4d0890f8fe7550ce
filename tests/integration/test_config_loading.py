"""Integration tests for configuration loading with layered precedence.

Tests the real load_config() function with actual YAML files, environment
variables, and CLI overrides to verify precedence: defaults < YAML < ENV < CLI.
"""

from __future__ import annotations

import os
from pathlib import Path

import pydantic
import pytest
import yaml

from streambridge.infrastructure.config.load import load_config

pytestmark = pytest.mark.integration


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "STREAMBRIDGE_LOG_LEVEL",
        "STREAMBRIDGE_HTTP_TIMEOUT_SECONDS",
        "STREAMBRIDGE_MAX_CONCURRENT_REQUESTS",
        "STREAMBRIDGE_ALLOW_PRIVATE_HOSTS",
        "STREAMBRIDGE_MEDIA_SERVER_KIND",
        "STREAMBRIDGE_DEFAULT_STREAM_NAME",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture()
def yaml_config(tmp_path: Path) -> Path:
    """Write a minimal YAML config and return its path."""
    config = {
        "app_name": "streambridge-test",
        "environment": "test",
        "http": {"timeout_seconds": 5.0, "user_agent": "TestAgent/1.0"},
        "logging": {"level": "DEBUG", "format": "console"},
        "stremio": {"default_stream_name": "Home Server", "max_concurrent_requests": 8},
        "media_server": {"default_kind": "jellyfin"},
    }
    path = tmp_path / "config.yaml"
    path.write_text(yaml.dump(config), encoding="utf-8")
    return path


class TestDefaultsOnly:
    """Load with no YAML, no ENV, no CLI: pure defaults."""

    def test_defaults_produce_valid_config(self) -> None:
        config = load_config()
        assert config.app_name == "streambridge"
        assert config.environment == "dev"
        assert config.http_timeout_seconds == 15.0
        assert config.log_level == "INFO"
        assert config.log_format == "console"
        assert config.stremio.default_stream_name == "Emby"
        assert config.stremio.allow_private_hosts is False
        assert config.media_server.default_kind == "emby"
        assert config.media_server.movie_query_limit == 10
        assert config.media_server.series_query_limit == 5

    def test_log_format_derived_from_environment(self) -> None:
        assert load_config(cli_overrides={"environment": "prod"}).log_format == "json"


class TestYamlOverrides:
    def test_yaml_overrides_defaults(self, yaml_config: Path) -> None:
        config = load_config(config_path=yaml_config)
        assert config.app_name == "streambridge-test"
        assert config.http_timeout_seconds == 5.0
        assert config.http_user_agent == "TestAgent/1.0"
        assert config.log_level == "DEBUG"
        assert config.stremio.default_stream_name == "Home Server"
        assert config.stremio.max_concurrent_requests == 8
        assert config.media_server.default_kind == "jellyfin"
        # untouched keys in a partially overridden section keep defaults
        assert config.stremio.addon_id == "org.streambridge.embyresolver"
        assert config.media_server.device_id == "stremio-addon-device-id"

    def test_yaml_file_not_found_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(config_path=tmp_path / "nonexistent.yaml")

    def test_yaml_must_be_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ValueError, match="mapping"):
            load_config(config_path=path)

    def test_empty_yaml_is_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert load_config(config_path=path).app_name == "streambridge"


class TestEnvOverrides:
    def test_env_beats_yaml(
        self, yaml_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("STREAMBRIDGE_LOG_LEVEL", "WARNING")
        monkeypatch.setenv("STREAMBRIDGE_MAX_CONCURRENT_REQUESTS", "3")
        monkeypatch.setenv("STREAMBRIDGE_MEDIA_SERVER_KIND", "emby")
        monkeypatch.setenv("STREAMBRIDGE_ALLOW_PRIVATE_HOSTS", "true")

        config = load_config(config_path=yaml_config)

        assert config.log_level == "WARNING"
        assert config.stremio.max_concurrent_requests == 3
        assert config.stremio.allow_private_hosts is True
        assert config.media_server.default_kind == "emby"

    def test_dotenv_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        dotenv = tmp_path / ".env"
        dotenv.write_text("STREAMBRIDGE_DEFAULT_STREAM_NAME=Dotenv\n", encoding="utf-8")

        try:
            config = load_config(dotenv_path=dotenv)
        finally:
            os.environ.pop("STREAMBRIDGE_DEFAULT_STREAM_NAME", None)

        assert config.stremio.default_stream_name == "Dotenv"

    def test_dotenv_not_found_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(dotenv_path=tmp_path / "missing.env")


class TestCliOverrides:
    def test_cli_beats_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("STREAMBRIDGE_LOG_LEVEL", "WARNING")
        config = load_config(cli_overrides={"log_level": "ERROR"})
        assert config.log_level == "ERROR"


class TestValidation:
    def test_non_positive_timeout_rejected(self) -> None:
        with pytest.raises(pydantic.ValidationError):
            load_config(cli_overrides={"http_timeout_seconds": 0})

    def test_zero_concurrency_rejected(self) -> None:
        with pytest.raises(pydantic.ValidationError):
            load_config(cli_overrides={"max_concurrent_requests": 0})

    def test_sectioned_dump(self) -> None:
        dumped = load_config().to_sectioned_dict()
        assert dumped["http"]["timeout_seconds"] == 15.0
        assert dumped["media_server"]["default_kind"] == "emby"
