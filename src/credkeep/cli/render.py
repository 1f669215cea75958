from typing import Iterable, List

from credkeep.core.record import Record

MASK = "********"
HEADERS = ("NAME", "ID", "PASSWORD", "UPDATED", "MEMO")


def row_for(record: Record, show_passwords: bool = False) -> tuple:
    return (
        record.name,
        record.account_id,
        record.password if show_passwords else MASK,
        record.stamp,
        record.memo or "",
    )


def format_rows(records: Iterable[Record], show_passwords: bool = False) -> List[str]:
    """Render records as aligned text columns, header first."""
    rows = [HEADERS] + [row_for(r, show_passwords) for r in records]
    widths = [max(len(row[i]) for row in rows) for i in range(len(HEADERS))]
    lines = []
    for row in rows:
        cells = [cell.ljust(width) for cell, width in zip(row, widths)]
        lines.append("  ".join(cells).rstrip())
    return lines


def describe(record: Record, show_password: bool = False) -> List[str]:
    return [
        f"Name: {record.name}",
        f"ID: {record.account_id}",
        f"Password: {record.password if show_password else MASK}",
        f"Updated: {record.stamp}",
        f"Memo: {record.memo if record.memo is not None else ''}",
    ]
