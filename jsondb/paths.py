from __future__ import annotations

import os
from pathlib import Path

from .settings import Settings


def ensure_dir(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path


def data_dir(settings: Settings) -> Path:
    if not settings.data_dir:
        return Path.cwd()
    return ensure_dir(Path(settings.data_dir).expanduser())


def resolve_path(filename: str | os.PathLike[str], settings: Settings) -> Path:
    # Absolute paths are used as-is; relative ones land under the data dir.
    path = Path(filename).expanduser()
    if not path.is_absolute() and settings.data_dir:
        path = data_dir(settings) / path
    return path
