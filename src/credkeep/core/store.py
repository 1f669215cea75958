# credkeep/core/store.py
import logging
from typing import Callable, Iterable, Iterator, List, Optional

from credkeep.core.record import Record, parse_stamp

FIELD_SEPARATOR = "\t"
LINE_SEPARATOR = "\n"

# Writer receives the serialized text and the stored file passphrase.
Writer = Callable[[str, Optional[str]], None]


def parse_line(line: str) -> Optional[Record]:
    """Parse one line of the accounts file, or return None if it is malformed."""
    fields = line.split(FIELD_SEPARATOR)
    if len(fields) not in (4, 5):
        return None
    try:
        update_time = parse_stamp(fields[3])
    except ValueError:
        logging.debug("Keeping unreadable update date as text")
        update_time = fields[3]
    return Record(
        name=fields[0],
        account_id=fields[1],
        password=fields[2],
        update_time=update_time,
        memo=fields[4] if len(fields) == 5 else None
    )


def parse_records(raw_text: str) -> List[Record]:
    """Parse the accounts file text, keeping file order.

    Blank lines are ignored and a trailing carriage return is stripped from
    each line. Lines with a field count other than 4 or 5 are dropped without
    raising. An update date that is not YYYY/MM/DD is kept verbatim.
    """
    records = []
    for lineno, line in enumerate(raw_text.split(LINE_SEPARATOR), start=1):
        line = line[:-1] if line.endswith("\r") else line
        if not line:
            continue
        record = parse_line(line)
        if record is None:
            logging.debug(f"Skipping malformed line {lineno} ({line.count(FIELD_SEPARATOR) + 1} fields)")
            continue
        records.append(record)
    return records


def serialize_record(record: Record) -> str:
    fields = [record.name, record.account_id, record.password, record.stamp]
    if record.memo is not None:
        fields.append(record.memo)
    return FIELD_SEPARATOR.join(fields)


def serialize_records(records: Iterable[Record]) -> str:
    return "".join(serialize_record(r) + LINE_SEPARATOR for r in records)


class CredentialStore:
    """In-memory collection of records with modification tracking.

    The store never touches the disk itself: text comes in through ``load``
    and goes out through the writer handed to ``save``. Edits made directly on
    a Record are not seen by the store, so callers follow them with
    ``mark_modified()``.
    """

    def __init__(self, records: Optional[Iterable[Record]] = None):
        self._records: List[Record] = list(records) if records is not None else []
        self._dirty = False
        self._file_password: Optional[str] = None

    @classmethod
    def load(cls, raw_text: str) -> 'CredentialStore':
        store = cls(parse_records(raw_text))
        logging.info(f"Loaded {len(store)} account(s)")
        return store

    @property
    def dirty(self) -> bool:
        return self._dirty

    @property
    def file_password(self) -> Optional[str]:
        return self._file_password

    def set_file_password(self, value: Optional[str]) -> None:
        self._file_password = value

    def get(self, name: str) -> Optional[Record]:
        """Return the record called ``name``; the last one added wins on duplicates."""
        found = None
        for record in self._records:
            if record.name == name:
                found = record
        return found

    def get_all(self) -> List[Record]:
        return self._records

    def add(self, record: Record) -> None:
        self._records.append(record)
        self._dirty = True

    def delete_by_name(self, name: str) -> int:
        """Remove every record called ``name`` and return how many were removed."""
        kept = [r for r in self._records if r.name != name]
        removed = len(self._records) - len(kept)
        if removed:
            self._records[:] = kept
            self._dirty = True
            logging.info(f"Deleted {removed} account(s) named '{name}'")
        return removed

    def mark_modified(self) -> None:
        self._dirty = True

    def save(self, writer: Writer) -> bool:
        """Write the records through ``writer`` if anything changed.

        Returns True when a write happened. If the writer raises, the store
        stays dirty and the exception reaches the caller.
        """
        if not self._dirty:
            logging.debug("Store is clean; nothing to save")
            return False
        writer(serialize_records(self._records), self._file_password)
        self._dirty = False
        logging.info(f"Saved {len(self)} account(s)")
        return True

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[Record]:
        return iter(self._records)
