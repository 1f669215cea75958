# credkeep/core/ordering.py
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from credkeep.core.record import Record

DEFAULT_SORT_KEY = "name"


class UnknownSortKeyError(ValueError):
    """Raised when a sort key is not one of SORT_KEYS."""

    def __init__(self, key: str):
        super().__init__(f"Unknown sort key '{key}'. Expected one of: {', '.join(SORT_KEYS)}.")
        self.key = key


# Each key maps to (primary field, tie-break field).
_SORT_FIELDS: Dict[str, Tuple[Callable[[Record], str], Optional[Callable[[Record], str]]]] = {
    "name": (lambda r: r.name, None),
    "id": (lambda r: r.account_id, lambda r: r.name),
    "time": (lambda r: r.stamp, lambda r: r.name),
    "memo": (lambda r: r.memo or "", lambda r: r.name),
}

SORT_KEYS = tuple(_SORT_FIELDS)


def order_for(records: Iterable[Record], key: Optional[str] = None) -> List[Record]:
    """Return a new list of records ordered for display.

    Fields are compared as plain strings. ``id``, ``time`` and ``memo`` break
    ties on ``name``; records equal on both stay in their input order.
    An absent memo sorts as the empty string.
    """
    if key is None:
        key = DEFAULT_SORT_KEY
    if key not in _SORT_FIELDS:
        raise UnknownSortKeyError(key)
    primary, tie_break = _SORT_FIELDS[key]
    if tie_break is None:
        return sorted(records, key=primary)
    return sorted(records, key=lambda r: (primary(r), tie_break(r)))
