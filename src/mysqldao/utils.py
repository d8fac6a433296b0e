
from typing import Any

def quote_ident(name: str) -> str:
    return "`" + name.replace("`", "``") + "`"

def normalize_name(name: str, case_sensitive: bool) -> str:
    return name if case_sensitive else name.lower()

def is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple, set, frozenset))
