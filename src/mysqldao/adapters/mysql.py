
import logging
from typing import Any, Mapping, Optional, Union

from .base import Adapter, AdapterOptions, ConnectionSource
from ..connection import Connection, ExecuteResult
from ..formatter import ParamSet, QueryFormatter
from ..schema import SchemaInfo, load_metadata
from ..utils import quote_ident

logger = logging.getLogger(__name__)

class MySQLDaoAdapter(Adapter):

    async def load_schema(self, conn: Connection) -> SchemaInfo:
        return await load_metadata(conn, self.table_ref, self.options.case_sensitive, self.formatter)

    def quote_ident(self, name: str) -> str: return quote_ident(name)

    async def execute(self, sql: str, params: Optional[ParamSet] = None) -> ExecuteResult:
        conn = await self.get_connection()
        return await conn.query(self.formatter.format(sql, params))

def create_mysql_dao(table: str, connection: ConnectionSource,
                     options: Optional[Union[AdapterOptions, Mapping[str, Any]]] = None,
                     formatter: Optional[QueryFormatter] = None) -> MySQLDaoAdapter:
    adapter = MySQLDaoAdapter(table, connection, options, formatter)
    logger.debug("created adapter for %s", table)
    return adapter
