
import logging

from .adapters import Adapter, AdapterOptions, LoadState, MySQLDaoAdapter, create_mysql_dao
from .connection import AiomysqlConnection, Connection, ExecuteResult, OkPacket, PoolConnection, connect, create_pool
from .exceptions import SchemaNotLoadedError
from .formatter import Named, Positional, QueryFormatter
from .schema import ColumnType, SchemaInfo, TableRef

__all__ = [
    "Adapter", "AdapterOptions", "LoadState", "MySQLDaoAdapter", "create_mysql_dao",
    "AiomysqlConnection", "Connection", "ExecuteResult", "OkPacket", "PoolConnection", "connect", "create_pool",
    "SchemaNotLoadedError", "Named", "Positional", "QueryFormatter",
    "ColumnType", "SchemaInfo", "TableRef", "enable_sql_echo",
]

def enable_sql_echo(adapter, logger=None):
    """Debug helper that logs every statement, as sent to the server, before it runs.
    Returns the original ``execute`` so callers can restore it.
    """
    log = logger or logging.getLogger("mysqldao.sql")
    orig = adapter.execute
    async def wrapper(sql, params=None):
        log.info("[%s] %s", adapter.table, adapter.formatter.format(sql, params))
        return await orig(sql, params)
    adapter.execute = wrapper
    return orig
