# manages connection to db, provides helper methods internal to db package
import asyncio
import os.path
from contextlib import asynccontextmanager
from sqlite3 import Row
from typing import Optional, Set

import aiosqlite

from utils.logger import get_logger

_logger = get_logger(__name__)

DB_PATH = "data/store.sqlite"

KV_SCHEMA = """
CREATE TABLE IF NOT EXISTS kv (
    key   TEXT PRIMARY KEY,
    value TEXT NOT NULL
);
"""

_initialized: Set[str] = set()
_init_lock = asyncio.Lock()


async def _init_db(conn: aiosqlite.Connection) -> None:
    await conn.executescript(KV_SCHEMA)
    await conn.commit()


async def _table_exists(conn: aiosqlite.Connection, table_name: str) -> bool:
    cur = await conn.execute(
        """
        SELECT name
        FROM sqlite_master
        WHERE type = 'table'
          AND name = ?;
        """,
        (table_name,),
    )
    row = await cur.fetchone()
    await cur.close()
    return row is not None


@asynccontextmanager
async def connect(path: Optional[str] = None) -> aiosqlite.Connection:
    """Async context manager yielding an aiosqlite connection to the store file.

    Creates the parent directory and the key-value table on first use.
    """
    path = path or DB_PATH
    if path != ":memory:":
        parent = os.path.dirname(os.path.abspath(path))
        os.makedirs(parent, exist_ok=True)

    conn = await aiosqlite.connect(path)
    conn.row_factory = Row

    if path not in _initialized or path == ":memory:":
        async with _init_lock:
            if not await _table_exists(conn, "kv"):
                _logger.info(f"Initializing key-value store at {path}...")
                await _init_db(conn)
            _initialized.add(path)
    try:
        yield conn
    finally:
        await conn.close()
