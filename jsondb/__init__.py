from __future__ import annotations

from .database import Database, create_database
from .document import AsyncJsonDocument, JsonDocument
from .errors import DocumentLoadError, JsonDbError, PersistenceError, TableNotFoundError
from .multi_table import METADATA_KEY, DocumentMetadata, MultiTableDatabase, TableHandle, create_multi_table_database
from .presets import (
    ProductRecord,
    TaskRecord,
    UserRecord,
    create_app_database,
    create_products_database,
    create_tasks_database,
    create_users_database,
)
from .records import Record, RecordId, generate_id, get_unique_id, update_timestamp, with_timestamps
from .settings import Settings, get_settings, load_settings

__all__ = [
    "AsyncJsonDocument",
    "JsonDocument",
    "Database",
    "create_database",
    "MultiTableDatabase",
    "TableHandle",
    "DocumentMetadata",
    "METADATA_KEY",
    "create_multi_table_database",
    "create_users_database",
    "create_products_database",
    "create_tasks_database",
    "create_app_database",
    "UserRecord",
    "ProductRecord",
    "TaskRecord",
    "Record",
    "RecordId",
    "generate_id",
    "get_unique_id",
    "with_timestamps",
    "update_timestamp",
    "JsonDbError",
    "DocumentLoadError",
    "PersistenceError",
    "TableNotFoundError",
    "Settings",
    "get_settings",
    "load_settings",
]
