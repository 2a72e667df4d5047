from __future__ import annotations

from typing import Any, Callable, Mapping, TypeVar

from .interfaces import DocumentAdapter
from .records import Record, RecordId

R = TypeVar("R")

Predicate = Callable[[Record], bool]


def _index_of(items: list[Record], record_id: RecordId) -> int:
    for i, item in enumerate(items):
        if isinstance(item, dict) and item.get("id") == record_id:
            return i
    return -1


class Collection:
    """
    Identity-keyed CRUD over one named list inside a document.

    Holds no state of its own beyond (document, name): every call resolves
    the name against the live document, so reads always see the latest
    in-memory edit. Mutations go through the document's serialized update.
    """

    def __init__(self, doc: DocumentAdapter, name: str) -> None:
        self._doc = doc
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    def _check(self) -> None:
        """Precondition run before every operation."""

    def _items_in(self, data: dict[str, Any]) -> list[Record]:
        return data[self._name]

    def _items(self) -> list[Record]:
        return self._items_in(self._doc.data)

    def get_all(self) -> list[Record]:
        self._check()
        return self._items()

    def get_by_id(self, record_id: RecordId) -> Record | None:
        self._check()
        items = self._items()
        i = _index_of(items, record_id)
        return items[i] if i != -1 else None

    def find(self, predicate: Predicate) -> list[Record]:
        self._check()
        return [item for item in self._items() if predicate(item)]

    def find_one(self, predicate: Predicate) -> Record | None:
        self._check()
        return next((item for item in self._items() if predicate(item)), None)

    def count(self) -> int:
        self._check()
        return len(self._items())

    def query(self, callback: Callable[[list[Record]], R]) -> R:
        self._check()
        return callback(self._items())

    async def add(self, record: Record) -> Record:
        # Duplicate ids are accepted; lookups return the first match.
        self._check()

        def _append(data: dict[str, Any]) -> None:
            self._items_in(data).append(record)

        await self._doc.update(_append)
        return record

    async def update(self, record_id: RecordId, updates: Mapping[str, Any]) -> Record | None:
        self._check()
        merged: Record | None = None

        def _merge(data: dict[str, Any]) -> None:
            nonlocal merged
            items = self._items_in(data)
            i = _index_of(items, record_id)
            if i != -1:
                merged = {**items[i], **updates}
                items[i] = merged

        await self._doc.update(_merge)
        return merged

    async def remove(self, record_id: RecordId) -> Record | None:
        self._check()
        removed: Record | None = None

        def _pop(data: dict[str, Any]) -> None:
            nonlocal removed
            items = self._items_in(data)
            i = _index_of(items, record_id)
            if i != -1:
                removed = items.pop(i)

        await self._doc.update(_pop)
        return removed

    async def clear(self) -> None:
        self._check()

        def _reset(data: dict[str, Any]) -> None:
            self._items_in(data)
            data[self._name] = []

        await self._doc.update(_reset)
