"""Tests for application settings and logging setup."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from searchfeed.config.settings import ObservabilitySettings, Settings
from searchfeed.models.query import QueryType
from searchfeed.observability.logging import setup_logging


class TestSettings:
    def test_defaults(self) -> None:
        settings = Settings(_env_file=None)  # type: ignore[call-arg]
        assert settings.app_name == "SearchFeed"
        assert settings.http.timeout == 10.0
        assert settings.service.results_per_page == 50
        assert settings.service.results_total_limit == 1000
        assert settings.service.query_type is QueryType.ALL
        assert settings.observability.log_format == "json"

    def test_env_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SEARCHFEED_HTTP__TIMEOUT", "2.5")
        monkeypatch.setenv("SEARCHFEED_SERVICE__ENDPOINT", "http://env.example.com/search")
        monkeypatch.setenv("SEARCHFEED_SERVICE__QUERY_TYPE", "phrase")
        settings = Settings(_env_file=None)  # type: ignore[call-arg]
        assert settings.http.timeout == 2.5
        assert settings.service.endpoint == "http://env.example.com/search"
        assert settings.service.query_type is QueryType.PHRASE

    def test_from_yaml(self, tmp_path: Path) -> None:
        config = tmp_path / "searchfeed.yaml"
        config.write_text(
            "service:\n"
            "  endpoint: http://yaml.example.com/search\n"
            "  appid: yaml-app\n"
            "  results_per_page: 20\n"
            "  param_names:\n"
            "    query: q\n"
            "http:\n"
            "  timeout: 3\n"
        )
        settings = Settings.from_yaml(config)
        assert settings.service.endpoint == "http://yaml.example.com/search"
        assert settings.service.appid == "yaml-app"
        assert settings.service.results_per_page == 20
        assert settings.service.param_names == {"query": "q"}
        assert settings.http.timeout == 3.0

    def test_from_yaml_overrides_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SEARCHFEED_SERVICE__APPID", "env-app")
        monkeypatch.setenv("SEARCHFEED_SERVICE__ENDPOINT", "http://env.example.com/search")
        config = tmp_path / "searchfeed.yaml"
        config.write_text("service:\n  appid: yaml-app\n")
        settings = Settings.from_yaml(config)
        assert settings.service.appid == "yaml-app"
        assert settings.service.endpoint == "http://env.example.com/search"

    def test_from_yaml_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            Settings.from_yaml(tmp_path / "missing.yaml")


class TestSetupLogging:
    @pytest.fixture(autouse=True)
    def _restore_root_logger(self):
        root = logging.getLogger()
        handlers, level = root.handlers[:], root.level
        yield
        root.handlers = handlers
        root.setLevel(level)

    def test_sets_level(self) -> None:
        setup_logging(ObservabilitySettings(log_level="debug", log_format="console"))
        assert logging.getLogger().level == logging.DEBUG

    def test_defaults_to_info(self) -> None:
        setup_logging()
        assert logging.getLogger().level == logging.INFO
        assert len(logging.getLogger().handlers) == 1
