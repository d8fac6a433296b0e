
import asyncio
import enum
import inspect
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from ..connection import Connection, ExecuteResult
from ..exceptions import SchemaNotLoadedError
from ..formatter import ParamSet, QueryFormatter
from ..schema import ColumnType, SchemaInfo, TableRef
from ..utils import is_sequence, normalize_name

logger = logging.getLogger(__name__)

ConnectionSource = Union[Connection, Callable[[], Union[Connection, Awaitable[Connection]]]]
Script = Tuple[str, Optional[ParamSet]]

@dataclass
class AdapterOptions:
    case_sensitive: bool = False

def _retrieve_exception(task: asyncio.Future) -> None:
    # the failure is kept in _load_error; mark it retrieved even if every waiter was cancelled
    if not task.cancelled():
        task.exception()

class LoadState(enum.Enum):
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"

class Adapter:
    """Table-bound adapter consumed by the generic DAO layer.

    ``connection`` is either a connection object or a callable returning one
    (or an awaitable of one); a callable is invoked again for every
    statement. Schema metadata is loaded lazily by ``ensure_load`` and kept
    for the lifetime of the adapter.
    """

    def __init__(self, table: str, connection: ConnectionSource,
                 options: Optional[Union[AdapterOptions, Mapping[str, Any]]] = None,
                 formatter: Optional[QueryFormatter] = None):
        self.table = table
        self.table_ref = TableRef.parse(table)
        if options is None: options = AdapterOptions()
        elif not isinstance(options, AdapterOptions): options = AdapterOptions(**options)
        self.options = options
        self.formatter = formatter or QueryFormatter()
        if callable(connection) and not hasattr(connection, "query"):
            self._connection_fn = connection
        else:
            self._connection_fn = lambda: connection
        self._schema: Optional[SchemaInfo] = None
        self._loading: Optional[asyncio.Future] = None
        self._load_error: Optional[BaseException] = None

    async def get_connection(self) -> Connection:
        conn = self._connection_fn()
        if inspect.isawaitable(conn):
            conn = await conn
        return conn

    # --- schema cache -------------------------------------------------

    @property
    def schema(self) -> Optional[SchemaInfo]:
        return self._schema

    @property
    def state(self) -> LoadState:
        if self._schema is not None: return LoadState.READY
        if self._loading is not None: return LoadState.LOADING
        if self._load_error is not None: return LoadState.FAILED
        return LoadState.UNINITIALIZED

    async def ensure_load(self) -> SchemaInfo:
        if self._schema is not None:
            return self._schema
        if self._loading is None:
            self._loading = asyncio.ensure_future(self._load())
            self._loading.add_done_callback(_retrieve_exception)
        # a cancelled caller must not cancel the load other callers share
        return await asyncio.shield(self._loading)

    async def _load(self) -> SchemaInfo:
        try:
            conn = await self.get_connection()
            schema = await self.load_schema(conn)
        except BaseException as e:
            self._load_error = e
            logger.debug("schema load failed for %s: %s", self.table, e)
            raise
        finally:
            self._loading = None
        self._schema = schema
        self._load_error = None
        return schema

    async def load_schema(self, conn: Connection) -> SchemaInfo: raise NotImplementedError

    def _require_schema(self) -> SchemaInfo:
        if self._schema is None:
            raise SchemaNotLoadedError(f"Schema of '{self.table}' not loaded; await ensure_load() first.")
        return self._schema

    def _column_type(self, col: str) -> Optional[ColumnType]:
        return self._require_schema().columns.get(normalize_name(col, self.options.case_sensitive))

    def is_primary_key(self, col: str) -> bool:
        return self._column_type(col) is ColumnType.PRIMARY_KEY

    def is_index(self, col: str) -> bool:
        return self._column_type(col) is ColumnType.INDEXED

    def exists(self, col: str) -> bool:
        return self._column_type(col) is not None

    # --- statement fragments ------------------------------------------

    def quote_ident(self, name: str) -> str: return f'"{name}"'

    def select_columns(self, columns: Optional[Sequence[str]] = None) -> str:
        if columns: return ",".join(self.quote_ident(c) for c in columns)
        return self._require_schema().columns_string

    def columns_pair(self, columns: Iterable[str]) -> str:
        return ",".join(f"{col}=:{col}" for col in columns)

    def where_pair(self, field: str, value: Any) -> str:
        if is_sequence(value):
            return f"{field} in :{field}"
        return f"{field}=:{field}"

    # --- execution ----------------------------------------------------

    async def execute(self, sql: str, params: Optional[ParamSet] = None) -> ExecuteResult: raise NotImplementedError

    async def batch(self, scripts: Iterable[Script]) -> List[Any]:
        """Run independent statements concurrently.

        The first failure is raised as soon as it happens; statements already
        in flight are not cancelled and may still complete.
        """
        results = await asyncio.gather(*(self.execute(sql, params) for sql, params in scripts))
        return [r.rows for r in results]
