# key-value persistence port and its adapters
from __future__ import annotations

from typing import Dict, Optional, Protocol

from db.database import connect
from utils.logger import get_logger

_logger = get_logger(__name__)

REGISTERED_USERS_KEY = "registeredUsers"
CURRENT_USER_KEY = "currentUser"


class StoragePort(Protocol):
    """
    Durable string -> string store. Values are opaque to the store.
    """

    async def load(self, key: str) -> Optional[str]: ...

    async def save(self, key: str, value: str) -> None: ...

    async def remove(self, key: str) -> None: ...


class SqliteStorage:
    """Store records in the `kv` table of an SQLite file."""

    def __init__(self, path: Optional[str] = None) -> None:
        self.path = path

    async def load(self, key: str) -> Optional[str]:
        async with connect(self.path) as conn:
            cur = await conn.execute("SELECT value FROM kv WHERE key = ?;", (key,))
            row = await cur.fetchone()
            await cur.close()
        return row[0] if row else None

    async def save(self, key: str, value: str) -> None:
        async with connect(self.path) as conn:
            await conn.execute(
                """
                INSERT INTO kv(key, value) VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value;
                """,
                (key, value),
            )
            await conn.commit()
        _logger.debug(f"Saved '{key}' ({len(value)} chars).")

    async def remove(self, key: str) -> None:
        async with connect(self.path) as conn:
            await conn.execute("DELETE FROM kv WHERE key = ?;", (key,))
            await conn.commit()


class MemoryStorage:
    """Dict-backed store, for tests and throwaway runs."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self.data: Dict[str, str] = dict(initial or {})

    async def load(self, key: str) -> Optional[str]:
        return self.data.get(key)

    async def save(self, key: str, value: str) -> None:
        self.data[key] = value

    async def remove(self, key: str) -> None:
        self.data.pop(key, None)
