from __future__ import annotations

from pathlib import Path
import sys


import pytest


# Ensure the repository root (parent of ./tests) is importable during pytest collection.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from jsondb.settings import Settings  # noqa: E402


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """
    Settings pointing relative filenames at a temp data dir so tests never
    touch the working directory.
    """
    return Settings(
        data_dir=str(tmp_path / "data"),
        json_indent=2,
        json_sort_keys=False,
        schema_version="1.0.0",
        log_level="DEBUG",
        log_format="text",
    )


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "test-db.json"


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "JSONDB_DATA_DIR",
        "JSONDB_JSON_INDENT",
        "JSONDB_SORT_KEYS",
        "JSONDB_SCHEMA_VERSION",
        "JSONDB_LOG_LEVEL",
        "JSONDB_LOG_FORMAT",
    ):
        monkeypatch.delenv(name, raising=False)
