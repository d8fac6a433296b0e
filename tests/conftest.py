import asyncio

import pytest

from mysqldao.connection import ExecuteResult, OkPacket


class FakeConnection:
    """In-memory stand-in for a MySQL connection.

    Serves ``information_schema`` rows from ``columns`` / ``indexes``, raises the
    exception mapped to any substring in ``errors``, blocks on statements
    containing a substring of ``hang`` until ``release`` is set, and answers
    everything else from ``responses`` (substring -> ExecuteResult) or with an
    ``OkPacket``.
    """

    def __init__(self, database="appdb", columns=(), indexes=()):
        self.database = database
        self.columns = list(columns)
        self.indexes = list(indexes)
        self.errors = {}
        self.responses = {}
        self.hang = set()
        self.release = asyncio.Event()
        self.queries = []

    def count(self, needle):
        return sum(1 for q in self.queries if needle in q)

    async def query(self, sql):
        self.queries.append(sql)
        await asyncio.sleep(0)
        for needle, exc in self.errors.items():
            if needle in sql:
                raise exc
        if any(needle in sql for needle in self.hang):
            await self.release.wait()
        if "information_schema.columns" in sql:
            raw = [(c,) for c in self.columns]
            return ExecuteResult([{"COLUMN_NAME": c} for c in self.columns], raw, (("COLUMN_NAME",),))
        if "information_schema.statistics" in sql:
            raw = list(self.indexes)
            rows = [{"COLUMN_NAME": c, "INDEX_NAME": i} for c, i in self.indexes]
            return ExecuteResult(rows, raw, (("COLUMN_NAME",), ("INDEX_NAME",)))
        for needle, result in self.responses.items():
            if needle in sql:
                return result
        return ExecuteResult(OkPacket(affected_rows=1), [], None)


@pytest.fixture
def orders_conn():
    return FakeConnection(
        database="appdb",
        columns=["ID", "Customer_ID", "status", "note"],
        indexes=[("ID", "PRIMARY"), ("customer_id", "idx_customer"), ("ghost", "idx_ghost")],
    )


@pytest.fixture
def make_conn():
    return FakeConnection
