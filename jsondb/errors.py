from __future__ import annotations

from pathlib import Path


class JsonDbError(Exception):
    """Base class for every error raised by jsondb."""


class DocumentLoadError(JsonDbError):
    """An existing document file could not be parsed into the expected shape."""

    def __init__(self, path: Path, reason: str):
        super().__init__(f"Cannot load document {path}: {reason}")
        self.path = path
        self.reason = reason


class PersistenceError(JsonDbError, OSError):
    """
    Writing the document to disk failed.

    The in-memory document already reflects the attempted edit when this is
    raised; it is not rolled back.
    """

    def __init__(self, path: Path, reason: str):
        super().__init__(f"Cannot persist document {path}: {reason}")
        self.path = path
        self.reason = reason

    def __str__(self) -> str:
        return self.args[0]


class TableNotFoundError(JsonDbError, KeyError):
    """An operation targeted a table that was never created or has been dropped."""

    def __init__(self, table: str):
        super().__init__(f"Table '{table}' does not exist. Use create_table() first.")
        self.table = table

    def __str__(self) -> str:
        return self.args[0]
