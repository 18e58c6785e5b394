from enum import Enum
from typing import Any

class SortOrder(str, Enum):
    asc = "ASC"
    desc = "DESC"

def parse_allowed(value: Any, allowed: type[Enum]) -> Enum | None:
    """Converte ``value`` para um membro de ``allowed`` ou devolve None.

    Campos fora da lista permitida são ignorados em vez de rejeitados.
    """
    if value is None or isinstance(value, allowed):
        return value
    try:
        return allowed(value)
    except ValueError:
        return None

def parse_order(value: Any) -> SortOrder:
    if isinstance(value, str):
        parsed = parse_allowed(value.upper(), SortOrder)
        if parsed is not None:
            return parsed
    if isinstance(value, SortOrder):
        return value
    return SortOrder.asc
