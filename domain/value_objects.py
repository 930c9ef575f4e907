"""Domain Value Objects"""
import calendar
import re
from datetime import date, timedelta
from decimal import Decimal
from functools import total_ordering
from typing import Iterator, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from domain.enums import ReasonCode

_MONTH_DAY_PATTERN = re.compile(r"^(0[1-9]|1[0-2])-(0[1-9]|[12][0-9]|3[01])$")


@total_ordering
class MonthDay(BaseModel):
    """Value Object for a yearless "MM-DD" calendar marker.

    Zero-padded markers compare lexicographically in the same order as
    the calendar within a single year, which is what lets season rules
    recur every year without being re-entered.
    """
    value: str

    model_config = ConfigDict(frozen=True)

    @field_validator('value')
    @classmethod
    def value_is_month_day(cls, v):
        v = v.strip()
        if not _MONTH_DAY_PATTERN.match(v):
            raise ValueError(f"Invalid month-day '{v}', expected MM-DD")
        return v

    @classmethod
    def of(cls, day: date) -> "MonthDay":
        return cls(value=day.strftime("%m-%d"))

    @classmethod
    def parse(cls, raw) -> "MonthDay":
        if isinstance(raw, MonthDay):
            return raw
        return cls(value=str(raw))

    def __lt__(self, other: "MonthDay") -> bool:
        return self.value < other.value

    def __str__(self) -> str:
        return self.value


class Period(BaseModel):
    """Value Object for an inclusive [start, end] range of calendar days"""
    start: date
    end: date

    model_config = ConfigDict(frozen=True)

    @model_validator(mode='after')
    def end_not_before_start(self):
        if self.end < self.start:
            raise ValueError('Period end must not be before its start')
        return self

    @classmethod
    def for_month(cls, year: int, month: int) -> "Period":
        last_day = calendar.monthrange(year, month)[1]
        return cls(start=date(year, month, 1), end=date(year, month, last_day))

    def length_days(self) -> int:
        """Number of calendar days in the period, both ends included"""
        return (self.end - self.start).days + 1

    def days(self) -> Iterator[date]:
        current = self.start
        while current <= self.end:
            yield current
            current += timedelta(days=1)


class OccupancyResult(BaseModel):
    property_id: str
    booked_nights: int = Field(ge=0)
    occupancy_rate: float = Field(ge=0, le=1)

    model_config = ConfigDict(frozen=True)


class PriceQuote(BaseModel):
    """Suggested nightly price for one date and the reason behind it"""
    price: int
    reason: ReasonCode
    multiplier: Decimal

    model_config = ConfigDict(frozen=True)


class MonthKPISet(BaseModel):
    year: int
    month: int = Field(ge=1, le=12)
    days_in_month: int
    property_count: int
    total_revenue: Decimal
    booked_nights: int
    revpar: Decimal
    adr: Decimal
    avg_occupancy: float
    potential_revenue: Decimal

    model_config = ConfigDict(frozen=True)


class CalendarDay(BaseModel):
    day: date
    price: int
    reason: ReasonCode
    booked: bool = False

    model_config = ConfigDict(frozen=True)


class PricingCalendar(BaseModel):
    year: int
    month: int
    property_id: Optional[str] = None
    base_price: Decimal
    occupancy_rate: float
    days: List[CalendarDay] = []

    model_config = ConfigDict(frozen=True)
