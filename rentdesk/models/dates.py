"""Calendar-day helpers and closed date windows."""

from datetime import date, datetime, timedelta
from typing import Iterator, Union

from pydantic import BaseModel, ConfigDict, model_validator

DayLike = Union[date, datetime, str]


def as_day(value: DayLike) -> date:
    """Normalize a date, datetime or ISO string to a calendar day."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value.strip()[:10])


class DateWindow(BaseModel):
    """Closed interval of calendar days, inclusive on both ends."""

    model_config = ConfigDict(frozen=True)

    start: date
    end: date

    @model_validator(mode="after")
    def check_order(self) -> "DateWindow":
        if self.start > self.end:
            raise ValueError("window start must not be after its end")
        return self

    @classmethod
    def of(cls, start: DayLike, end: DayLike | None = None) -> "DateWindow":
        """Build a window from day-like bounds; a single bound means one day."""
        first = as_day(start)
        return cls(start=first, end=as_day(end) if end is not None else first)

    @classmethod
    def month(cls, year: int, month: int) -> "DateWindow":
        """Window covering every day of a calendar month."""
        first = date(year, month, 1)
        if month == 12:
            following = date(year + 1, 1, 1)
        else:
            following = date(year, month + 1, 1)
        return cls(start=first, end=following - timedelta(days=1))

    def overlaps(self, other: "DateWindow") -> bool:
        return self.start <= other.end and other.start <= self.end

    def contains(self, day: DayLike) -> bool:
        return self.start <= as_day(day) <= self.end

    def days(self) -> Iterator[date]:
        current = self.start
        while current <= self.end:
            yield current
            current += timedelta(days=1)
