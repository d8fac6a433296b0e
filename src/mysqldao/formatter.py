
import re
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Sequence, Union

from pymysql.converters import escape_item

from .utils import quote_ident, is_sequence

_NAMED_RE = re.compile(r":(\w+)")
_POSITIONAL_RE = re.compile(r"\?\??")

@dataclass(frozen=True)
class Positional:
    values: Sequence[Any]

@dataclass(frozen=True)
class Named:
    values: Mapping[str, Any]

ParamSet = Union[Positional, Named]

class QueryFormatter:
    """Render SQL templates into literal, escaped MySQL statements.

    Named mode replaces ``:name`` tokens whose key is present in the mapping and
    leaves every other token verbatim, so text that only looks like a
    placeholder (``'12:30'``, an unsupplied ``:name``) reaches the server as
    written.

    Positional mode follows the ``?`` / ``??`` convention of MySQL drivers:
    ``?`` takes an escaped value, ``??`` an identifier. Placeholders past the
    end of the values are left alone.
    """

    def __init__(self, charset: str = "utf8mb4"):
        self.charset = charset

    def escape(self, value: Any) -> str:
        if is_sequence(value):
            # `IN ()` is a syntax error in MySQL
            if len(value) == 0: return "(NULL)"
            return "(" + ",".join(self.escape(v) for v in value) + ")"
        return escape_item(value, self.charset)

    def format(self, sql: str, params: Optional[ParamSet] = None) -> str:
        if params is None: return sql
        if isinstance(params, Named): return self._format_named(sql, params.values)
        if isinstance(params, Positional): return self._format_positional(sql, params.values)
        raise TypeError(f"params must be Named or Positional, not {type(params).__name__}")

    __call__ = format

    def _format_named(self, sql: str, values: Mapping[str, Any]) -> str:
        def repl(m: re.Match) -> str:
            key = m.group(1)
            if key in values:
                return self.escape(values[key])
            return m.group(0)
        return _NAMED_RE.sub(repl, sql)

    def _format_positional(self, sql: str, values: Sequence[Any]) -> str:
        it = iter(values)
        def repl(m: re.Match) -> str:
            try:
                v = next(it)
            except StopIteration:
                return m.group(0)
            if m.group(0) == "??":
                return quote_ident(str(v))
            return self.escape(v)
        return _POSITIONAL_RE.sub(repl, sql)
