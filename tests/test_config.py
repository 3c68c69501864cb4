from __future__ import annotations

import os
from typing import Iterator

import pytest

from service_reports import config


@pytest.fixture(autouse=True)
def _fresh_settings() -> Iterator[None]:
    for factory in (
        config.get_data_source_settings,
        config.get_http_settings,
        config.get_normalizer_settings,
    ):
        factory.cache_clear()
    yield
    for factory in (
        config.get_data_source_settings,
        config.get_http_settings,
        config.get_normalizer_settings,
    ):
        factory.cache_clear()


class TestDataSourceSettings:
    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for name in ("SERVICE_DATA_BASE_URL", "SERVICE_DATA_CSV_PATH", "SERVICE_DATA_JSON_PATH"):
            monkeypatch.delenv(name, raising=False)

        settings = config.get_data_source_settings()

        assert settings == config.DataSourceSettings()
        assert settings.csv_path.endswith(".csv")
        assert settings.json_path.endswith(".json")

    def test_reads_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SERVICE_DATA_BASE_URL", " https://reports.example ")
        monkeypatch.setenv("SERVICE_DATA_CSV_PATH", "/samples/a.csv")
        monkeypatch.setenv("SERVICE_DATA_JSON_PATH", "   ")

        settings = config.get_data_source_settings()

        assert settings.base_url == "https://reports.example"
        assert settings.csv_path == "/samples/a.csv"
        assert settings.json_path == config.DEFAULT_JSON_PATH


class TestHTTPSettings:
    def test_no_timeout_and_no_retries_by_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for name in ("SERVICE_DATA_HTTP_TIMEOUT_SECONDS", "SERVICE_DATA_HTTP_MAX_RETRIES"):
            monkeypatch.delenv(name, raising=False)

        settings = config.get_http_settings()

        assert settings.timeout_seconds is None
        assert settings.max_retries == 0

    @pytest.mark.parametrize("raw, expected", [("12.5", 12.5), ("abc", None), ("0", None), ("", None)])
    def test_timeout_parsing(self, monkeypatch: pytest.MonkeyPatch, raw: str, expected: float | None) -> None:
        monkeypatch.setenv("SERVICE_DATA_HTTP_TIMEOUT_SECONDS", raw)

        assert config.get_http_settings().timeout_seconds == expected

    def test_invalid_or_negative_retries_fall_back(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SERVICE_DATA_HTTP_MAX_RETRIES", "-4")
        monkeypatch.setenv("SERVICE_DATA_HTTP_BACKOFF_MULTIPLIER", "lots")

        settings = config.get_http_settings()

        assert settings.max_retries == 0
        assert settings.backoff_multiplier == 2.0

    def test_backoff_initial_parsing(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SERVICE_DATA_HTTP_BACKOFF_INITIAL_SECONDS", "1.5")
        assert config.get_http_settings().backoff_initial_seconds == 1.5

        config.get_http_settings.cache_clear()
        monkeypatch.setenv("SERVICE_DATA_HTTP_BACKOFF_INITIAL_SECONDS", "soon")
        assert config.get_http_settings().backoff_initial_seconds == 0.5


class TestNormalizerSettings:
    @pytest.mark.parametrize("raw, expected", [("false", False), ("0", False), ("YES", True), ("on", True)])
    def test_log_validation_errors_flag(self, monkeypatch: pytest.MonkeyPatch, raw: str, expected: bool) -> None:
        monkeypatch.setenv("SERVICE_DATA_LOG_VALIDATION_ERRORS", raw)

        assert config.get_normalizer_settings().log_validation_errors is expected

    def test_blank_flag_keeps_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SERVICE_DATA_LOG_VALIDATION_ERRORS", "  ")

        assert config.get_normalizer_settings().log_validation_errors is True


def test_env_file_does_not_override_process_environment(
    tmp_path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(config, "__file__", str(tmp_path / "service_reports" / "config.py"))
    (tmp_path / ".env").write_text(
        "# comment\nSERVICE_DATA_TEST_ONLY='from-file'\nSERVICE_DATA_TEST_KEEP=from-file\n",
        encoding="utf-8",
    )
    monkeypatch.delenv("SERVICE_DATA_TEST_ONLY", raising=False)
    monkeypatch.setenv("SERVICE_DATA_TEST_KEEP", "from-process")

    try:
        config.load_env_files()

        assert os.environ["SERVICE_DATA_TEST_ONLY"] == "from-file"
        assert os.environ["SERVICE_DATA_TEST_KEEP"] == "from-process"
    finally:
        os.environ.pop("SERVICE_DATA_TEST_ONLY", None)
