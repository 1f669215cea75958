from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Union

DATE_FORMAT = "%Y/%m/%d"


def format_stamp(day: Union[date, str]) -> str:
    # Dates that never parsed are kept as their original text.
    if isinstance(day, str):
        return day
    return day.strftime(DATE_FORMAT)


def parse_stamp(text: str) -> date:
    """Parse a ``YYYY/MM/DD`` stamp; raises ValueError on anything else."""
    return datetime.strptime(text, DATE_FORMAT).date()


@dataclass
class Record:
    """Represents one stored account."""
    name: str
    account_id: str
    password: str
    update_time: Union[date, str]
    memo: Optional[str] = None

    @classmethod
    def create(cls, name: str, account_id: str, password: str, memo: Optional[str] = None,
               today: Optional[date] = None) -> 'Record':
        """Create a new record stamped with today's date."""
        return cls(
            name=name,
            account_id=account_id,
            password=password,
            update_time=today or date.today(),
            memo=memo
        )

    def touch(self, today: Optional[date] = None) -> None:
        """Refresh update_time after the record's content was edited."""
        self.update_time = today or date.today()

    @property
    def stamp(self) -> str:
        return format_stamp(self.update_time)
