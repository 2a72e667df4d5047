from __future__ import annotations

import logging
import os
from typing import Any, Mapping

from .collection import Collection
from .document import AsyncJsonDocument
from .errors import DocumentLoadError
from .interfaces import Mutator
from .settings import Settings

logger = logging.getLogger(__name__)


class Database(Collection):
    """
    A document holding one main collection, plus whatever extra top-level
    fields the caller seeded it with:

      { "<collection>": [ {...}, ... ], "metadata": {...}, ... }
    """

    @property
    def raw(self) -> AsyncJsonDocument:
        return self._doc

    @property
    def data(self) -> dict[str, Any]:
        return self._doc.data

    async def update_data(self, callback: Mutator) -> None:
        """Run `callback` against the whole document and persist the result."""
        await self._doc.update(callback)


async def create_database(
    filename: str | os.PathLike[str],
    collection_name: str,
    default_data: Mapping[str, Any] | None = None,
    *,
    settings: Settings | None = None,
) -> Database:
    default = {collection_name: [], **(default_data or {})}
    doc = await AsyncJsonDocument.open(filename, default, settings=settings)

    current = doc.data.get(collection_name)
    if current is not None and not isinstance(current, list):
        raise DocumentLoadError(doc.path, f"'{collection_name}' must be a list, got {type(current).__name__}")
    if current is None:
        # Existing file without the collection: start it empty in memory; the
        # next mutation writes it out.
        logger.warning(
            "JSONDB OPEN: %s has no '%s' list; starting it empty",
            doc.path,
            collection_name,
            extra={"path": str(doc.path), "table": collection_name},
        )
        doc.data[collection_name] = []

    return Database(doc, collection_name)
