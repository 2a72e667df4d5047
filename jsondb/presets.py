from __future__ import annotations

import os
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict

from .database import Database, create_database
from .multi_table import MultiTableDatabase, create_multi_table_database
from .records import RecordId, utc_now_iso
from .settings import Settings, get_settings


class UserRecord(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: RecordId
    name: str
    email: str
    age: int | None = None
    role: str | None = None
    createdAt: str | None = None


class ProductRecord(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: RecordId
    name: str
    price: float
    description: str | None = None
    category: str | None = None
    inStock: bool | None = None


class TaskRecord(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: RecordId
    title: str
    completed: bool = False
    createdAt: str
    description: str | None = None
    priority: Literal["low", "medium", "high"] | None = None
    dueDate: str | None = None


def _metadata(description: str, settings: Settings) -> dict[str, Any]:
    return {
        "created": utc_now_iso(),
        "version": settings.schema_version,
        "description": description,
    }


async def create_users_database(
    filename: str | os.PathLike[str] = "users.json", *, settings: Settings | None = None
) -> Database:
    settings = settings or get_settings()
    return await create_database(
        filename,
        "users",
        {"metadata": _metadata("Users database", settings)},
        settings=settings,
    )


async def create_products_database(
    filename: str | os.PathLike[str] = "products.json", *, settings: Settings | None = None
) -> Database:
    settings = settings or get_settings()
    return await create_database(
        filename,
        "products",
        {"categories": [], "metadata": _metadata("Products database", settings)},
        settings=settings,
    )


async def create_tasks_database(
    filename: str | os.PathLike[str] = "tasks.json", *, settings: Settings | None = None
) -> Database:
    settings = settings or get_settings()
    return await create_database(
        filename,
        "tasks",
        {"metadata": _metadata("Tasks database", settings)},
        settings=settings,
    )


async def create_app_database(
    filename: str | os.PathLike[str] = "app.json", *, settings: Settings | None = None
) -> MultiTableDatabase:
    """Multi-table database seeded with the usual application tables."""
    return await create_multi_table_database(
        filename,
        {
            "users": [],
            "products": [],
            "orders": [],
            "categories": [],
            "settings": [],
        },
        settings=settings,
    )
