"""
service_reports/config.py

Environment-driven settings for data sources, HTTP transfer and validation.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

DEFAULT_BASE_URL = "http://127.0.0.1:8000"
DEFAULT_CSV_PATH = "/data/Datos-ONIET-2025---seguros-prestaciones.csv"
DEFAULT_JSON_PATH = "/data/Datos-ONIET-2025---seguros-prestaciones.json"


def load_env_files() -> None:
    """
    Copy KEY=VALUE lines from `.env`, then `.env.local`, into the process environment.

    Variables already set in the process keep their value.
    """

    project_root = Path(__file__).resolve().parents[1]
    for env_path in (project_root / ".env", project_root / ".env.local"):
        if not env_path.is_file():
            continue
        for entry in env_path.read_text(encoding="utf-8").splitlines():
            entry = entry.strip()
            if entry.startswith("#") or "=" not in entry:
                continue
            key, _, value = entry.partition("=")
            key = key.strip()
            if key:
                os.environ.setdefault(key, value.strip().strip("'\""))


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    load_env_files()


def _read_env(name: str) -> str | None:
    """
    Stripped value of ``name``, or None when unset or blank.
    """

    _load_env_once()
    value = (os.getenv(name) or "").strip()
    return value or None


def _get_bool_env(name: str, default: bool) -> bool:
    raw_value = _read_env(name)
    if raw_value is None:
        return default
    return raw_value.lower() in {"1", "true", "yes", "on"}


def _get_int_env(name: str, default: int) -> int:
    """
    Integer setting; unparseable values fall back to ``default``.
    """

    raw_value = _read_env(name)
    try:
        return default if raw_value is None else int(raw_value)
    except ValueError:
        return default


def _get_float_env(name: str, default: float) -> float:
    """
    Float setting; unparseable values fall back to ``default``.
    """

    raw_value = _read_env(name)
    try:
        return default if raw_value is None else float(raw_value)
    except ValueError:
        return default


def _get_optional_float_env(name: str) -> float | None:
    """
    Positive float setting; anything else, including unset, means None.
    """

    value = _get_float_env(name, 0.0)
    return value if value > 0 else None


def _get_str_env(name: str, default: str) -> str:
    return _read_env(name) or default


@dataclass(frozen=True)
class DataSourceSettings:
    """
    Location of the bundled sample data files.
    """

    base_url: str = DEFAULT_BASE_URL
    csv_path: str = DEFAULT_CSV_PATH
    json_path: str = DEFAULT_JSON_PATH


@dataclass(frozen=True)
class HTTPSettings:
    """
    Transfer behavior for remote-url sources.

    ``timeout_seconds=None`` waits indefinitely; a hung read stays in
    ``loading`` until superseded.
    """

    timeout_seconds: float | None = None
    max_retries: int = 0
    backoff_initial_seconds: float = 0.5
    backoff_multiplier: float = 2.0


@dataclass(frozen=True)
class NormalizerSettings:
    """
    Runtime settings for record normalization.
    """

    log_validation_errors: bool = True


@lru_cache(maxsize=1)
def get_data_source_settings() -> DataSourceSettings:
    """
    Return cached sample data locations from environment variables.
    """

    return DataSourceSettings(
        base_url=_get_str_env("SERVICE_DATA_BASE_URL", DEFAULT_BASE_URL),
        csv_path=_get_str_env("SERVICE_DATA_CSV_PATH", DEFAULT_CSV_PATH),
        json_path=_get_str_env("SERVICE_DATA_JSON_PATH", DEFAULT_JSON_PATH),
    )


@lru_cache(maxsize=1)
def get_http_settings() -> HTTPSettings:
    """
    Return cached HTTP transfer settings from environment variables.
    """

    return HTTPSettings(
        timeout_seconds=_get_optional_float_env("SERVICE_DATA_HTTP_TIMEOUT_SECONDS"),
        max_retries=max(0, _get_int_env("SERVICE_DATA_HTTP_MAX_RETRIES", 0)),
        backoff_initial_seconds=max(0.1, _get_float_env("SERVICE_DATA_HTTP_BACKOFF_INITIAL_SECONDS", 0.5)),
        backoff_multiplier=max(1.0, _get_float_env("SERVICE_DATA_HTTP_BACKOFF_MULTIPLIER", 2.0)),
    )


@lru_cache(maxsize=1)
def get_normalizer_settings() -> NormalizerSettings:
    """
    Return cached normalizer settings from environment variables.
    """

    return NormalizerSettings(
        log_validation_errors=_get_bool_env("SERVICE_DATA_LOG_VALIDATION_ERRORS", True),
    )
