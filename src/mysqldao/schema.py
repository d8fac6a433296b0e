
import enum
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .connection import Connection
from .formatter import Named, QueryFormatter
from .utils import normalize_name

logger = logging.getLogger(__name__)

PRIMARY_INDEX = "PRIMARY"

COLUMNS_SQL = (
    "select COLUMN_NAME from information_schema.columns "
    "where TABLE_SCHEMA=:schema and TABLE_NAME=:table order by ORDINAL_POSITION"
)
INDEXES_SQL = (
    "select COLUMN_NAME, INDEX_NAME from information_schema.statistics "
    "where TABLE_SCHEMA=:schema and TABLE_NAME=:table"
)

class ColumnType(enum.Enum):
    PLAIN = 1
    PRIMARY_KEY = 2
    INDEXED = 3

@dataclass(frozen=True)
class TableRef:
    schema: Optional[str]
    name: str

    @classmethod
    def parse(cls, table: str) -> "TableRef":
        schema, sep, name = table.partition(".")
        if not sep: return cls(None, table)
        return cls(schema or None, name)

    def resolve(self, default_schema: Optional[str]) -> "TableRef":
        if self.schema: return self
        return TableRef(default_schema, self.name)

    def __str__(self) -> str:
        return f"{self.schema}.{self.name}" if self.schema else self.name

@dataclass
class SchemaInfo:
    columns: Dict[str, ColumnType] = field(default_factory=dict)
    column_names: List[str] = field(default_factory=list)

    @property
    def columns_string(self) -> str:
        return ",".join(self.column_names)

    def add_column(self, name: str) -> None:
        if name not in self.columns:
            self.column_names.append(name)
        self.columns[name] = ColumnType.PLAIN

    def mark_index(self, name: str, index_name: str) -> None:
        current = self.columns.get(name)
        if current is None: return
        if index_name == PRIMARY_INDEX:
            self.columns[name] = ColumnType.PRIMARY_KEY
        elif current is not ColumnType.PRIMARY_KEY:
            self.columns[name] = ColumnType.INDEXED

async def load_metadata(conn: Connection, table: TableRef, case_sensitive: bool = False,
                        formatter: Optional[QueryFormatter] = None) -> SchemaInfo:
    """Read column and index metadata of ``table`` from ``information_schema``.

    The two catalog queries run one after the other; any driver error aborts
    the load and propagates. Index rows naming a column absent from the
    column catalog are skipped.
    """
    formatter = formatter or QueryFormatter()
    table = table.resolve(conn.database)
    params = Named({"schema": table.schema, "table": table.name})

    col_result = await conn.query(formatter.format(COLUMNS_SQL, params))
    idx_result = await conn.query(formatter.format(INDEXES_SQL, params))

    info = SchemaInfo()
    for row in col_result.rows:
        info.add_column(normalize_name(row["COLUMN_NAME"], case_sensitive))
    for row in idx_result.rows:
        info.mark_index(normalize_name(row["COLUMN_NAME"], case_sensitive), row["INDEX_NAME"])

    logger.debug("loaded %d columns for %s", len(info.column_names), table)
    return info
