from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any


class InvalidJsonDocument(ValueError):
    """Raised when a file on disk does not hold a JSON object."""


def read_json(path: Path) -> dict[str, Any] | None:
    """
    Read a JSON object from disk.

    Returns None for a missing file. Empty files, invalid JSON and non-object
    roots raise InvalidJsonDocument; nothing is silently replaced by defaults.
    """
    if not path.exists():
        return None
    try:
        raw = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise InvalidJsonDocument(f"{path} is not UTF-8 text: {e}") from e
    if not raw.strip():
        raise InvalidJsonDocument(f"{path} is empty")
    try:
        doc = json.loads(raw)
    except json.JSONDecodeError as e:
        raise InvalidJsonDocument(f"{path} is not valid JSON: {e}") from e
    if not isinstance(doc, dict):
        raise InvalidJsonDocument(f"{path} must contain a JSON object, got {type(doc).__name__}")
    return doc


def atomic_write_json(path: Path, payload: Any, *, indent: int | None = 2, sort_keys: bool = False) -> None:
    """
    Atomically write JSON to disk by writing to a temp file then replacing.

    The payload is fully serialized before the temp file is opened, so a
    serialization error never leaves a partial file behind.
    """
    text = json.dumps(payload, indent=indent, sort_keys=sort_keys, ensure_ascii=False)
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    try:
        with tmp_path.open("w", encoding="utf-8") as f:
            f.write(text)
            f.write("\n")
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise
