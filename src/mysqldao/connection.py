"""Connection capability consumed by the adapters, and its aiomysql bindings."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, NamedTuple, Optional, Protocol, Sequence, Tuple, Union, runtime_checkable

import aiomysql

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OkPacket:
    """Outcome of a statement that returns no result set."""
    affected_rows: int = 0
    insert_id: Optional[int] = None


class ExecuteResult(NamedTuple):
    rows: Union[List[Dict[str, Any]], OkPacket]
    raw: List[Tuple[Any, ...]]
    fields: Optional[Sequence[Tuple[Any, ...]]]


@runtime_checkable
class Connection(Protocol):
    """What an adapter needs from a database connection.

    ``database`` is the default schema used for unqualified table names.
    ``query`` sends one literal statement and returns its result, or raises
    the driver error.
    """

    database: Optional[str]

    async def query(self, sql: str) -> ExecuteResult:
        ...


async def _run(conn: aiomysql.Connection, sql: str) -> ExecuteResult:
    async with conn.cursor() as cur:
        # no args: the statement is already literal, aiomysql must not %-interpolate it
        await cur.execute(sql)
        if cur.description is None:
            return ExecuteResult(OkPacket(cur.rowcount, cur.lastrowid or None), [], None)
        raw = list(await cur.fetchall())
        names = [d[0] for d in cur.description]
        rows = [dict(zip(names, r)) for r in raw]
        return ExecuteResult(rows, raw, cur.description)


class AiomysqlConnection:
    """Single aiomysql connection.

    A MySQL connection carries one statement at a time, so concurrent callers
    are queued behind a lock.
    """

    def __init__(self, conn: aiomysql.Connection, database: Optional[str] = None):
        self._conn = conn
        self.database = database if database is not None else conn.db
        self._lock = asyncio.Lock()

    @property
    def raw_connection(self) -> aiomysql.Connection:
        return self._conn

    async def query(self, sql: str) -> ExecuteResult:
        async with self._lock:
            logger.debug("query: %s", sql)
            return await _run(self._conn, sql)

    async def close(self) -> None:
        await self._conn.ensure_closed()


class PoolConnection:
    """aiomysql pool; every statement runs on its own acquired connection."""

    def __init__(self, pool: aiomysql.Pool, database: Optional[str]):
        self._pool = pool
        self.database = database

    async def query(self, sql: str) -> ExecuteResult:
        async with self._pool.acquire() as conn:
            logger.debug("query: %s", sql)
            return await _run(conn, sql)

    async def close(self) -> None:
        self._pool.close()
        await self._pool.wait_closed()


async def connect(host: str, port: int, user: str, password: str, database: Optional[str] = None,
                  charset: str = "utf8mb4", autocommit: bool = True, conn_timeout: float = 10.0,
                  **kwargs) -> AiomysqlConnection:
    conn = await aiomysql.connect(
        host=host, port=int(port), user=user, password=password, db=database,
        charset=charset, autocommit=autocommit,
        connect_timeout=int(max(1, round(conn_timeout))), **kwargs
    )
    return AiomysqlConnection(conn, database)


async def create_pool(host: str, port: int, user: str, password: str, database: Optional[str] = None,
                      charset: str = "utf8mb4", autocommit: bool = True, conn_timeout: float = 10.0,
                      minsize: int = 1, maxsize: int = 10, **kwargs) -> PoolConnection:
    pool = await aiomysql.create_pool(
        host=host, port=int(port), user=user, password=password, db=database,
        charset=charset, autocommit=autocommit,
        connect_timeout=int(max(1, round(conn_timeout))),
        minsize=minsize, maxsize=maxsize, **kwargs
    )
    return PoolConnection(pool, database)
