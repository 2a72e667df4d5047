from __future__ import annotations

import secrets
import string
from datetime import datetime, timedelta, timezone
from typing import Any, Mapping, Union

RecordId = Union[str, int]
Record = dict[str, Any]

ALPHANUMERIC = string.ascii_uppercase + string.ascii_lowercase + string.digits


def get_unique_id(prefix: str = "id", length: int = 8, characters: str = ALPHANUMERIC) -> str:
    token = "".join(secrets.choice(characters) for _ in range(length))
    return f"{prefix}-{token}" if prefix else token


def generate_id() -> str:
    """Random 12-character alphanumeric id for new records."""
    return get_unique_id("", 12)


def _format_iso(ts: datetime) -> str:
    return ts.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _truncate_ms(ts: datetime) -> datetime:
    return ts.replace(microsecond=ts.microsecond - ts.microsecond % 1000)


def _parse_iso(value: Any) -> datetime | None:
    if not isinstance(value, str):
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def utc_now_iso() -> str:
    return _format_iso(datetime.now(timezone.utc))


def with_timestamps(data: Mapping[str, Any]) -> Record:
    now = utc_now_iso()
    return {**data, "createdAt": now, "updatedAt": now}


def update_timestamp(data: Mapping[str, Any]) -> Record:
    """
    Return a copy of `data` with a fresh `updatedAt`.

    Timestamps have millisecond precision, so the new value is bumped past
    the previous one when both fall in the same millisecond.
    """
    now = _truncate_ms(datetime.now(timezone.utc))
    previous = _parse_iso(data.get("updatedAt"))
    if previous is not None and now <= _truncate_ms(previous):
        now = _truncate_ms(previous) + timedelta(milliseconds=1)
    return {**data, "updatedAt": _format_iso(now)}
