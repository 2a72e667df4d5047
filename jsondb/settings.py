from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int | None) -> int | None:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    if raw.strip().lower() in ("none", "null", "compact"):
        return None
    return int(raw)


@dataclass(frozen=True)
class Settings:
    # Relative database filenames resolve against this directory ("" = cwd)
    data_dir: str

    # On-disk formatting
    json_indent: int | None
    json_sort_keys: bool

    # Written into new documents' metadata
    schema_version: str

    # Logging
    log_level: str
    log_format: str


def get_settings() -> Settings:
    data_dir = os.getenv("JSONDB_DATA_DIR", "").strip()

    json_indent = _env_int("JSONDB_JSON_INDENT", 2)
    # Sorting keys would reorder tables on reopen; default off.
    json_sort_keys = _env_bool("JSONDB_SORT_KEYS", False)

    schema_version = os.getenv("JSONDB_SCHEMA_VERSION", "1.0.0")

    log_level = os.getenv("JSONDB_LOG_LEVEL", "INFO").strip().upper()
    log_format = os.getenv("JSONDB_LOG_FORMAT", "text").strip().lower()

    return Settings(
        data_dir=data_dir,
        json_indent=json_indent,
        json_sort_keys=json_sort_keys,
        schema_version=schema_version,
        log_level=log_level,
        log_format=log_format,
    )


def load_settings(env_file: str = "local.env") -> Settings:
    """Load `env_file` (if present) into the environment, then read settings."""
    load_dotenv(env_file)
    return get_settings()
