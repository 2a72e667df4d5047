from __future__ import annotations

import logging
import os
from typing import Any, Iterable, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .collection import Collection
from .document import AsyncJsonDocument
from .errors import DocumentLoadError, TableNotFoundError
from .interfaces import Mutator
from .records import Record, utc_now_iso
from .settings import Settings, get_settings

logger = logging.getLogger(__name__)

METADATA_KEY = "_metadata"


class DocumentMetadata(BaseModel):
    """
    Mirrors the reserved "_metadata" field of a multi-table document:
      { "created": "<iso8601>", "version": "1.0.0", "tables": ["users", ...] }
    """

    model_config = ConfigDict(extra="allow")

    created: str
    version: str
    tables: list[str] = Field(default_factory=list)

    @classmethod
    def new(cls, version: str, tables: Iterable[str]) -> "DocumentMetadata":
        return cls(created=utc_now_iso(), version=version, tables=list(tables))

    def to_disk_doc(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


def _table_names(data: Mapping[str, Any]) -> list[str]:
    return [key for key in data if key != METADATA_KEY]


def _non_list_tables(data: Mapping[str, Any]) -> list[str]:
    return [key for key in _table_names(data) if not isinstance(data[key], list)]


class TableHandle(Collection):
    """
    Stateless view of one table. Existence is checked on every call, not at
    construction, so a handle taken before create_table() works afterwards
    and one taken before drop_table() fails afterwards.
    """

    def exists(self) -> bool:
        return self._name != METADATA_KEY and isinstance(self._doc.data.get(self._name), list)

    def _check(self) -> None:
        if not self.exists():
            raise TableNotFoundError(self._name)

    def _items_in(self, data: dict[str, Any]) -> list[Record]:
        # Re-checked inside mutators: the table may be dropped while a write waits.
        items = data.get(self._name)
        if self._name == METADATA_KEY or not isinstance(items, list):
            raise TableNotFoundError(self._name)
        return items


class MultiTableDatabase:
    """
    One document holding several named tables plus a reserved metadata
    field that tracks the current table names:

      { "users": [...], "orders": [...], "_metadata": { "tables": ["users", "orders"], ... } }
    """

    def __init__(self, doc: AsyncJsonDocument, *, settings: Settings | None = None) -> None:
        self._doc = doc
        self._settings = settings or get_settings()

    @property
    def raw(self) -> AsyncJsonDocument:
        return self._doc

    @property
    def data(self) -> dict[str, Any]:
        return self._doc.data

    def table(self, name: str) -> TableHandle:
        return TableHandle(self._doc, name)

    def list_tables(self) -> list[str]:
        return _table_names(self._doc.data)

    def _sync_metadata(self, data: dict[str, Any]) -> None:
        meta = data.get(METADATA_KEY)
        if isinstance(meta, dict):
            meta["tables"] = _table_names(data)
        else:
            logger.warning("JSONDB META: restoring missing %s in %s", METADATA_KEY, self._doc.path)
            data[METADATA_KEY] = DocumentMetadata.new(self._settings.schema_version, _table_names(data)).to_disk_doc()

    async def create_table(self, name: str, initial_data: Iterable[Record] | None = None) -> None:
        if name == METADATA_KEY:
            raise ValueError(f"'{METADATA_KEY}' is reserved and cannot be used as a table name")
        records = list(initial_data or [])

        def _create(data: dict[str, Any]) -> None:
            if name in data:
                logger.warning("JSONDB TABLE: overwriting existing table '%s'", name, extra={"table": name})
            data[name] = records
            self._sync_metadata(data)

        await self._doc.update(_create)
        logger.info("JSONDB TABLE: created '%s' (%d records)", name, len(records), extra={"table": name})

    async def drop_table(self, name: str) -> None:
        if name == METADATA_KEY:
            raise ValueError(f"'{METADATA_KEY}' is reserved and cannot be dropped")

        def _drop(data: dict[str, Any]) -> None:
            data.pop(name, None)
            self._sync_metadata(data)

        await self._doc.update(_drop)
        logger.info("JSONDB TABLE: dropped '%s'", name, extra={"table": name})

    async def update_data(self, callback: Mutator) -> None:
        """Run `callback` against the whole document, re-sync metadata and persist."""

        def _apply(data: dict[str, Any]) -> None:
            before = dict(data)
            callback(data)
            bad = _non_list_tables(data)
            if bad:
                # Every non-metadata key is a table; put the top level back and skip the write.
                data.clear()
                data.update(before)
                raise ValueError(f"Table values must be lists: {', '.join(bad)}")
            self._sync_metadata(data)

        await self._doc.update(_apply)


async def create_multi_table_database(
    filename: str | os.PathLike[str],
    initial_tables: Mapping[str, Iterable[Record]] | None = None,
    *,
    settings: Settings | None = None,
) -> MultiTableDatabase:
    settings = settings or get_settings()
    tables = {name: list(records) for name, records in (initial_tables or {}).items()}
    if METADATA_KEY in tables:
        raise ValueError(f"'{METADATA_KEY}' is reserved and cannot be used as a table name")

    default: dict[str, Any] = {
        **tables,
        METADATA_KEY: DocumentMetadata.new(settings.schema_version, tables).to_disk_doc(),
    }
    doc = await AsyncJsonDocument.open(filename, default, settings=settings)

    meta = doc.data.get(METADATA_KEY)
    if meta is None:
        logger.warning("JSONDB OPEN: %s has no %s field", doc.path, METADATA_KEY, extra={"path": str(doc.path)})
    else:
        try:
            DocumentMetadata.model_validate(meta)
        except ValidationError as e:
            raise DocumentLoadError(doc.path, f"invalid {METADATA_KEY}: {e}") from e

    bad = _non_list_tables(doc.data)
    if bad:
        raise DocumentLoadError(doc.path, f"table values must be lists: {', '.join(bad)}")

    return MultiTableDatabase(doc, settings=settings)
