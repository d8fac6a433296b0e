import asyncio

import aiomysql
import pytest

from mysqldao.connection import AiomysqlConnection, Connection, OkPacket, PoolConnection, connect, create_pool


class DummyCursor:
    def __init__(self, conn):
        self._conn = conn
        self.description = None
        self.rowcount = -1
        self.lastrowid = None
        self._rows = ()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False

    async def execute(self, query, args=None):
        self._conn.executed.append((query, args))
        self._conn.active += 1
        self._conn.max_active = max(self._conn.max_active, self._conn.active)
        await asyncio.sleep(0)
        self._conn.active -= 1
        if query.startswith("select"):
            self.description = (("id", 3), ("name", 253))
            self._rows = ((1, "a"), (2, "b"))
        else:
            self.rowcount = 2
            self.lastrowid = 17

    async def fetchall(self):
        return self._rows


class DummyRawConnection:
    def __init__(self, db="appdb"):
        self.db = db
        self.executed = []
        self.active = 0
        self.max_active = 0
        self.closed = False

    def cursor(self):
        return DummyCursor(self)

    async def ensure_closed(self):
        self.closed = True


class DummyAcquire:
    def __init__(self, pool):
        self._pool = pool

    async def __aenter__(self):
        conn = DummyRawConnection()
        self._pool.handed_out.append(conn)
        return conn

    async def __aexit__(self, exc_type, exc, tb):
        return False


class DummyPool:
    def __init__(self):
        self.handed_out = []
        self.closed = False

    def acquire(self):
        return DummyAcquire(self)

    def close(self):
        self.closed = True

    async def wait_closed(self):
        pass


@pytest.mark.asyncio
async def test_select_returns_rows_raw_and_fields():
    raw_conn = DummyRawConnection()
    conn = AiomysqlConnection(raw_conn)

    rows, raw, fields = await conn.query("select id, name from t")

    assert rows == [{"id": 1, "name": "a"}, {"id": 2, "name": "b"}]
    assert raw == [(1, "a"), (2, "b")]
    assert [f[0] for f in fields] == ["id", "name"]
    assert raw_conn.executed == [("select id, name from t", None)]


@pytest.mark.asyncio
async def test_write_returns_ok_packet():
    conn = AiomysqlConnection(DummyRawConnection())

    result = await conn.query("update t set name='x'")

    assert result.rows == OkPacket(affected_rows=2, insert_id=17)
    assert result.raw == [] and result.fields is None


@pytest.mark.asyncio
async def test_statements_on_one_connection_are_serialized():
    raw_conn = DummyRawConnection()
    conn = AiomysqlConnection(raw_conn)

    await asyncio.gather(*(conn.query(f"update t set n={i}") for i in range(4)))

    assert raw_conn.max_active == 1
    assert len(raw_conn.executed) == 4


def test_database_defaults_to_connection_db():
    assert AiomysqlConnection(DummyRawConnection(db="shop")).database == "shop"
    assert AiomysqlConnection(DummyRawConnection(db="shop"), "other").database == "other"


def test_bindings_satisfy_protocol():
    assert isinstance(AiomysqlConnection(DummyRawConnection()), Connection)
    assert isinstance(PoolConnection(DummyPool(), "appdb"), Connection)


@pytest.mark.asyncio
async def test_pool_acquires_per_statement():
    pool = DummyPool()
    conn = PoolConnection(pool, "appdb")

    await asyncio.gather(conn.query("select 1"), conn.query("select 2"))
    await conn.close()

    assert len(pool.handed_out) == 2
    assert pool.closed


@pytest.mark.asyncio
async def test_connect_passes_defaults(monkeypatch):
    captured = {}

    async def fake_connect(**kwargs):
        captured.update(kwargs)
        return DummyRawConnection(db=kwargs["db"])

    monkeypatch.setattr(aiomysql, "connect", fake_connect)
    conn = await connect("db.local", "3306", "u", "p", database="shop", conn_timeout=2.4)

    assert captured["port"] == 3306
    assert captured["db"] == "shop"
    assert captured["charset"] == "utf8mb4"
    assert captured["autocommit"] is True
    assert captured["connect_timeout"] == 2
    assert conn.database == "shop"


@pytest.mark.asyncio
async def test_create_pool_passes_sizes(monkeypatch):
    captured = {}

    async def fake_create_pool(**kwargs):
        captured.update(kwargs)
        return DummyPool()

    monkeypatch.setattr(aiomysql, "create_pool", fake_create_pool)
    conn = await create_pool("db.local", 3306, "u", "p", database="shop", maxsize=4)

    assert captured["minsize"] == 1 and captured["maxsize"] == 4
    assert conn.database == "shop"


@pytest.mark.asyncio
async def test_both_bindings_close_by_awaiting():
    raw_conn = DummyRawConnection()
    pool = DummyPool()

    for conn in (AiomysqlConnection(raw_conn), PoolConnection(pool, "appdb")):
        await conn.close()

    assert raw_conn.closed
    assert pool.closed
