# key-value port used by every manager for durable records
from __future__ import annotations

import json
from typing import Any, Dict, Optional, Protocol

from db.database import connect
from utils.logger import get_logger

_logger = get_logger(__name__)


class KeyValueStore(Protocol):
    """
    Persistence boundary: one JSON document per collection key.

    get() returns None when the key is absent or its value cannot be decoded.
    """

    async def get(self, key: str) -> Optional[Any]: ...

    async def set(self, key: str, value: Any) -> None: ...

    async def remove(self, key: str) -> None: ...


def _decode(key: str, raw: Optional[str]) -> Optional[Any]:
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except (TypeError, ValueError):
        _logger.warning(f"Discarding unreadable record under '{key}'.")
        return None


class SqliteKeyValueStore:
    """KeyValueStore over the kv_store table (see db.database)."""

    async def get(self, key: str) -> Optional[Any]:
        async with connect() as conn:
            cur = await conn.execute(
                "SELECT value FROM kv_store WHERE key = ?;", (key,)
            )
            row = await cur.fetchone()
            await cur.close()
        return _decode(key, row[0] if row else None)

    async def set(self, key: str, value: Any) -> None:
        payload = json.dumps(value)
        async with connect() as conn:
            await conn.execute(
                """
                INSERT INTO kv_store(key, value, updated_at)
                VALUES (?, ?, datetime('now'))
                ON CONFLICT(key) DO UPDATE
                    SET value = excluded.value,
                        updated_at = excluded.updated_at;
                """,
                (key, payload),
            )
            await conn.commit()

    async def remove(self, key: str) -> None:
        async with connect() as conn:
            await conn.execute("DELETE FROM kv_store WHERE key = ?;", (key,))
            await conn.commit()


class MemoryKeyValueStore:
    """
    In-process KeyValueStore. Values are kept JSON-encoded so callers see
    the same copy semantics as the sqlite store.
    """

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self.data: Dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> Optional[Any]:
        return _decode(key, self.data.get(key))

    async def set(self, key: str, value: Any) -> None:
        self.data[key] = json.dumps(value)

    async def remove(self, key: str) -> None:
        self.data.pop(key, None)
