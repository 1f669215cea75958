from credkeep.core.record import Record
from credkeep.core.store import CredentialStore, parse_records, serialize_records
from credkeep.core.ordering import SORT_KEYS, UnknownSortKeyError, order_for

__all__ = [
    'Record',
    'CredentialStore',
    'parse_records',
    'serialize_records',
    'SORT_KEYS',
    'UnknownSortKeyError',
    'order_for',
]
