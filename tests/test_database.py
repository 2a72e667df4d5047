from __future__ import annotations

import asyncio
import json

import pytest

from jsondb.database import create_database
from jsondb.errors import DocumentLoadError, PersistenceError


def test_create_database_with_empty_collection(db_path, settings):
    async def _run():
        db = await create_database(db_path, "items", settings=settings)
        assert db.get_all() == []
        assert db.count() == 0
        assert db.name == "items"

    asyncio.run(_run())


def test_create_database_with_default_data(db_path, settings):
    async def _run():
        db = await create_database(db_path, "items", {"metadata": {"version": "1.0.0"}}, settings=settings)
        assert db.data["metadata"] == {"version": "1.0.0"}
        assert db.raw.path == db_path

    asyncio.run(_run())

    assert json.loads(db_path.read_text(encoding="utf-8")) == {"items": [], "metadata": {"version": "1.0.0"}}


def test_add_then_get_by_id_without_reload(db_path, settings):
    async def _run():
        db = await create_database(db_path, "items", settings=settings)
        item = {"id": 1, "name": "Test Item"}

        returned = await db.add(item)

        assert returned is item
        assert db.get_all() == [item]
        assert db.get_by_id(1) == item
        assert db.get_by_id(999) is None

    asyncio.run(_run())


def test_id_lookup_distinguishes_str_and_int(db_path, settings):
    async def _run():
        db = await create_database(db_path, "items", settings=settings)
        await db.add({"id": "1", "kind": "str"})
        await db.add({"id": 1, "kind": "int"})

        assert db.get_by_id("1")["kind"] == "str"
        assert db.get_by_id(1)["kind"] == "int"

    asyncio.run(_run())


def test_find_and_find_one(db_path, settings):
    async def _run():
        db = await create_database(db_path, "items", settings=settings)
        await db.add({"id": 1, "name": "Active Item", "active": True, "type": "A"})
        await db.add({"id": 2, "name": "Inactive Item", "active": False, "type": "B"})
        await db.add({"id": 3, "name": "Another Active", "active": True, "type": "A"})

        active = db.find(lambda item: item["active"])
        assert [item["id"] for item in active] == [1, 3]

        assert db.find_one(lambda item: item["type"] == "A")["id"] == 1
        assert db.find_one(lambda item: item["type"] == "C") is None
        assert db.find(lambda item: False) == []

    asyncio.run(_run())


def test_update_merges_and_preserves_fields(db_path, settings):
    async def _run():
        db = await create_database(db_path, "items", settings=settings)
        await db.add({"id": 1, "name": "Test Item", "value": 10})

        updated = await db.update(1, {"value": 20, "tag": "new"})

        assert updated == {"id": 1, "name": "Test Item", "value": 20, "tag": "new"}
        assert db.get_by_id(1) == updated

    asyncio.run(_run())

    on_disk = json.loads(db_path.read_text(encoding="utf-8"))
    assert on_disk["items"] == [{"id": 1, "name": "Test Item", "value": 20, "tag": "new"}]


def test_update_and_remove_unknown_id_return_none(db_path, settings):
    async def _run():
        db = await create_database(db_path, "items", settings=settings)
        await db.add({"id": 1})

        assert await db.update(999, {"value": 30}) is None
        assert await db.remove(999) is None
        assert db.count() == 1

    asyncio.run(_run())


def test_remove_returns_record_and_keeps_order(db_path, settings):
    async def _run():
        db = await create_database(db_path, "items", settings=settings)
        for i in range(1, 5):
            await db.add({"id": i})

        removed = await db.remove(2)

        assert removed == {"id": 2}
        assert [item["id"] for item in db.get_all()] == [1, 3, 4]

    asyncio.run(_run())


def test_duplicate_ids_are_allowed_and_first_wins(db_path, settings):
    async def _run():
        db = await create_database(db_path, "items", settings=settings)
        await db.add({"id": 7, "n": "first"})
        await db.add({"id": 7, "n": "second"})

        assert db.count() == 2
        assert db.get_by_id(7)["n"] == "first"

        await db.update(7, {"n": "patched"})
        assert [item["n"] for item in db.get_all()] == ["patched", "second"]

        await db.remove(7)
        assert db.get_all() == [{"id": 7, "n": "second"}]

    asyncio.run(_run())


def test_count_tracks_adds_minus_successful_removes(db_path, settings):
    async def _run():
        db = await create_database(db_path, "items", settings=settings)
        adds = removes = 0
        for i in range(10):
            await db.add({"id": i})
            adds += 1
        for i in (0, 3, 3, 42, 9):
            if await db.remove(i) is not None:
                removes += 1
        assert db.count() == adds - removes == 7

    asyncio.run(_run())


def test_clear(db_path, settings):
    async def _run():
        db = await create_database(db_path, "items", {"keep": "me"}, settings=settings)
        await db.add({"id": 1})
        await db.add({"id": 2})

        await db.clear()

        assert db.count() == 0
        assert db.get_all() == []

    asyncio.run(_run())

    assert json.loads(db_path.read_text(encoding="utf-8")) == {"items": [], "keep": "me"}


def test_query_aggregates_without_persisting(db_path, settings):
    async def _run():
        db = await create_database(db_path, "items", settings=settings)
        for i, value in enumerate((10, 20, 30), start=1):
            await db.add({"id": i, "value": value})

        before = db_path.stat().st_mtime_ns
        assert db.query(lambda items: sum(item["value"] for item in items)) == 60
        assert db.query(lambda items: max(item["value"] for item in items)) == 30
        assert db_path.stat().st_mtime_ns == before

    asyncio.run(_run())


def test_update_data_edits_whole_document(db_path, settings):
    async def _run():
        db = await create_database(db_path, "items", {"metadata": {"count": 0}}, settings=settings)
        await db.add({"id": 1})

        def _stamp(data):
            data["metadata"]["count"] = len(data["items"])
            data["metadata"]["lastUpdated"] = "2024-01-01T00:00:00.000Z"

        await db.update_data(_stamp)

        assert db.data["metadata"] == {"count": 1, "lastUpdated": "2024-01-01T00:00:00.000Z"}

    asyncio.run(_run())

    assert json.loads(db_path.read_text(encoding="utf-8"))["metadata"]["count"] == 1


def test_get_all_is_live_view(db_path, settings):
    async def _run():
        db = await create_database(db_path, "items", settings=settings)
        view = db.get_all()
        await db.add({"id": 1})
        assert view == [{"id": 1}]

    asyncio.run(_run())


def test_reopen_round_trip(db_path, settings):
    async def _write():
        db = await create_database(db_path, "items", {"meta": {"v": 1}}, settings=settings)
        await db.add({"id": 1, "name": "A", "tags": ["x"], "nested": {"ok": True}})
        await db.add({"id": "two", "name": None})
        await db.update(1, {"name": "A2"})
        return dict(db.data)

    async def _reopen():
        # default data is ignored when the file exists
        db = await create_database(db_path, "items", {"meta": {"v": 2}}, settings=settings)
        return db.data

    before = asyncio.run(_write())
    after = asyncio.run(_reopen())

    assert after == before
    assert after["meta"] == {"v": 1}


def test_existing_file_without_collection_starts_empty(db_path, settings):
    db_path.write_text(json.dumps({"other": 1}), encoding="utf-8")

    async def _run():
        db = await create_database(db_path, "items", settings=settings)
        assert db.get_all() == []
        await db.add({"id": 1})

    asyncio.run(_run())

    assert json.loads(db_path.read_text(encoding="utf-8")) == {"other": 1, "items": [{"id": 1}]}


def test_existing_file_with_non_list_collection_fails(db_path, settings):
    db_path.write_text(json.dumps({"items": {"id": 1}}), encoding="utf-8")

    with pytest.raises(DocumentLoadError):
        asyncio.run(create_database(db_path, "items", settings=settings))


def test_concurrent_adds_persist_in_order(db_path, settings):
    async def _run():
        db = await create_database(db_path, "items", settings=settings)
        await asyncio.gather(*(db.add({"id": i}) for i in range(20)))
        return [item["id"] for item in db.get_all()]

    assert asyncio.run(_run()) == list(range(20))
    assert [r["id"] for r in json.loads(db_path.read_text(encoding="utf-8"))["items"]] == list(range(20))


def test_failed_save_reaches_caller_and_keeps_edit(db_path, settings):
    async def _run():
        db = await create_database(db_path, "items", settings=settings)
        await db.add({"id": 1, "name": "ok"})
        before = db_path.read_text(encoding="utf-8")

        bad = {"id": 2, "payload": object()}
        with pytest.raises(PersistenceError):
            await db.add(bad)

        # no rollback: the record is in memory, the file is unchanged
        assert db.get_all()[-1] is bad
        assert db.count() == 2
        assert db_path.read_text(encoding="utf-8") == before

        with pytest.raises(PersistenceError):
            await db.update(1, {"name": "renamed"})
        assert db.get_by_id(1)["name"] == "renamed"

        # the document lock is free again and later writes persist
        assert await db.remove(2) is bad
        await db.add({"id": 3})

    asyncio.run(_run())

    assert json.loads(db_path.read_text(encoding="utf-8"))["items"] == [
        {"id": 1, "name": "renamed"},
        {"id": 3},
    ]
