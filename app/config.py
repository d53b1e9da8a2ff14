"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

_ALLOWED_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def load_env_files() -> None:
    """
    Load simple KEY=VALUE pairs from `.env` and `.env.local` (if present).
    Existing process environment variables are not overwritten.
    """

    project_root = Path(__file__).resolve().parents[1]
    for filename in (".env", ".env.local"):
        env_path = project_root / filename
        if not env_path.exists():
            continue

        for raw_line in env_path.read_text(encoding="utf-8").splitlines():
            line = raw_line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue

            key, value = line.split("=", 1)
            key = key.strip()
            value = value.strip().strip('"').strip("'")
            if key and key not in os.environ:
                os.environ[key] = value


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading app settings.
    """

    load_env_files()


def _get_bool_env(name: str, default: bool) -> bool:
    """
    Read a boolean from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    return raw_value.strip().lower() in {"1", "true", "yes", "on"}


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    """
    Read a string from environment variables with fallback.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


def collect_env_errors() -> list[str]:
    """
    Return one message per invalid environment variable.

    Unset variables are fine; only values that are present and unusable
    are reported, so the operator can fix all of them in one restart.
    """

    _load_env_once()
    errors: list[str] = []

    log_level = os.getenv("LOG_LEVEL")
    if log_level is not None and log_level.strip().upper() not in _ALLOWED_LOG_LEVELS:
        errors.append(
            f"LOG_LEVEL='{log_level.strip()}' is not valid. "
            f"Allowed values: {sorted(_ALLOWED_LOG_LEVELS)}."
        )

    for name in (
        "FABRIC_MAX_UPLOAD_MB",
        "FABRIC_REPORT_WWN_COLUMN_WIDTH",
        "FABRIC_REPORT_MIN_COLUMN_WIDTH",
        "FABRIC_REPORT_MAX_COLUMN_WIDTH",
    ):
        raw = os.getenv(name)
        if raw is None:
            continue
        try:
            value = int(raw)
        except ValueError:
            errors.append(f"{name}='{raw.strip()}' must be a positive integer.")
            continue
        if value < 1:
            errors.append(f"{name}='{raw.strip()}' must be a positive integer.")

    return errors


def get_log_level() -> int:
    """
    Resolve LOG_LEVEL to a logging constant, defaulting to INFO.
    """

    name = _get_str_env("LOG_LEVEL", "INFO").upper()
    return getattr(logging, name, logging.INFO)


@dataclass(frozen=True)
class FabricIngestionSettings:
    """
    Runtime settings for zoning table uploads.
    """

    max_upload_bytes: int = 10 * 1024 * 1024
    log_structure_errors: bool = True


@dataclass(frozen=True)
class ReportExportSettings:
    """
    Layout settings for downloadable validation reports.
    """

    filename_prefix: str = "fabric_validation_report"
    wwn_column_width: int = 60
    min_column_width: int = 10
    max_column_width: int = 30


@lru_cache(maxsize=1)
def get_fabric_ingestion_settings() -> FabricIngestionSettings:
    """
    Return cached ingestion settings from environment variables.
    """

    return FabricIngestionSettings(
        max_upload_bytes=max(1, _get_int_env("FABRIC_MAX_UPLOAD_MB", 10)) * 1024 * 1024,
        log_structure_errors=_get_bool_env("FABRIC_LOG_STRUCTURE_ERRORS", True),
    )


@lru_cache(maxsize=1)
def get_report_export_settings() -> ReportExportSettings:
    """
    Return cached report export settings from environment variables.
    """

    min_width = max(1, _get_int_env("FABRIC_REPORT_MIN_COLUMN_WIDTH", 10))
    return ReportExportSettings(
        filename_prefix=_get_str_env("FABRIC_REPORT_PREFIX", "fabric_validation_report"),
        wwn_column_width=max(1, _get_int_env("FABRIC_REPORT_WWN_COLUMN_WIDTH", 60)),
        min_column_width=min_width,
        max_column_width=max(min_width, _get_int_env("FABRIC_REPORT_MAX_COLUMN_WIDTH", 30)),
    )
