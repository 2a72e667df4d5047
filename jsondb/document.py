from __future__ import annotations

import asyncio
import copy
import logging
import os
import threading
from pathlib import Path
from typing import Any, Mapping

from .errors import DocumentLoadError, PersistenceError
from .interfaces import Mutator
from .json_store import InvalidJsonDocument, atomic_write_json, read_json
from .paths import resolve_path
from .settings import Settings, get_settings

logger = logging.getLogger(__name__)


class JsonDocument:
    """
    Stores a single JSON document on disk at a fixed path and keeps the live
    copy in memory.

    - Loads once on open; every later read is served from memory.
    - save() writes the whole document atomically; AsyncJsonDocument is the
      adapter tables mutate through.
    - One instance per file per process; there is no cross-process locking.
    """

    def __init__(self, path: Path, data: dict[str, Any], *, settings: Settings | None = None):
        self._path = path
        self._data = data
        self._settings = settings or get_settings()
        self._write_lock = threading.Lock()

    @classmethod
    def open(
        cls,
        path: str | os.PathLike[str],
        default: Mapping[str, Any],
        *,
        settings: Settings | None = None,
    ) -> "JsonDocument":
        settings = settings or get_settings()
        resolved = resolve_path(path, settings)
        try:
            existing = read_json(resolved)
        except InvalidJsonDocument as e:
            raise DocumentLoadError(resolved, str(e)) from e
        except OSError as e:
            raise DocumentLoadError(resolved, repr(e)) from e

        if existing is not None:
            logger.info("JSONDB OPEN: loaded %s", resolved, extra={"path": str(resolved)})
            return cls(resolved, existing, settings=settings)

        doc = cls(resolved, copy.deepcopy(dict(default)), settings=settings)
        doc.save()
        logger.info("JSONDB OPEN: created %s", resolved, extra={"path": str(resolved)})
        return doc

    @property
    def path(self) -> Path:
        return self._path

    @property
    def data(self) -> dict[str, Any]:
        return self._data

    def save(self) -> None:
        with self._write_lock:
            try:
                atomic_write_json(
                    self._path,
                    self._data,
                    indent=self._settings.json_indent,
                    sort_keys=self._settings.json_sort_keys,
                )
            except (OSError, TypeError, ValueError) as e:
                logger.error("JSONDB SAVE: failed to write %s: %r", self._path, e, exc_info=True)
                raise PersistenceError(self._path, repr(e)) from e
        logger.debug("JSONDB SAVE: wrote %s", self._path, extra={"path": str(self._path)})


class AsyncJsonDocument:
    """
    Async wrapper around JsonDocument.

    Updates are serialized on a FIFO asyncio.Lock: the mutator runs while the
    lock is held and the write happens on a worker thread, so mutations apply
    and persist in the order they were issued. Reads never touch the lock.
    """

    def __init__(self, doc: JsonDocument) -> None:
        self._doc = doc
        self._lock = asyncio.Lock()

    @classmethod
    async def open(
        cls,
        path: str | os.PathLike[str],
        default: Mapping[str, Any],
        *,
        settings: Settings | None = None,
    ) -> "AsyncJsonDocument":
        doc = await asyncio.to_thread(JsonDocument.open, path, default, settings=settings)
        return cls(doc)

    @property
    def path(self) -> Path:
        return self._doc.path

    @property
    def data(self) -> dict[str, Any]:
        return self._doc.data

    async def update(self, mutator: Mutator) -> None:
        async with self._lock:
            mutator(self._doc.data)
            await asyncio.to_thread(self._doc.save)

    async def save(self) -> None:
        async with self._lock:
            await asyncio.to_thread(self._doc.save)
