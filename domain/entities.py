"""Domain Entities"""
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Optional, Union
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from domain.enums import PropertyStatus, SeasonType
from domain.exceptions import InvalidSeasonRuleError
from domain.value_objects import MonthDay

# Placeholder nightly price used when a property has none set
FALLBACK_BASE_PRICE = Decimal("100")


class Property(BaseModel):
    """Rental unit as read from the external store"""
    property_id: str
    name: str = ""
    price_per_night: Optional[Decimal] = Field(default=None, ge=0)
    status: PropertyStatus = PropertyStatus.ACTIVE

    model_config = ConfigDict(from_attributes=True)

    @property
    def base_price(self) -> Decimal:
        """Nightly price to price from, falling back to the placeholder"""
        if not self.price_per_night:
            return FALLBACK_BASE_PRICE
        return self.price_per_night

    def is_active(self) -> bool:
        return self.status == PropertyStatus.ACTIVE


class Booking(BaseModel):
    """Booking as read from the external store; end_date is the checkout day"""
    booking_id: str
    property_id: str
    start_date: date
    end_date: date
    total_price: Decimal = Decimal("0")
    status: str = "confirmed"

    model_config = ConfigDict(from_attributes=True)

    @field_validator('total_price', mode='before')
    @classmethod
    def missing_total_is_zero(cls, v):
        return Decimal("0") if v is None else v

    @model_validator(mode='after')
    def end_not_before_start(self):
        if self.end_date < self.start_date:
            raise ValueError('Booking end date must not be before its start date')
        return self

    def nights(self) -> int:
        return (self.end_date - self.start_date).days

    def starts_in_month(self, year: int, month: int) -> bool:
        return self.start_date.year == year and self.start_date.month == month


class SeasonRule(BaseModel):
    """Annually recurring date range with a price multiplier.

    ``start``/``end`` are "MM-DD" markers. When start sorts after end the
    range wraps the year boundary (e.g. 12-15 to 01-15).
    """
    rule_id: UUID = Field(default_factory=uuid4)
    name: str
    start: str
    end: str
    multiplier: Decimal = Field(gt=0)
    season_type: SeasonType = SeasonType.HIGH

    model_config = ConfigDict(from_attributes=True)

    @field_validator('start', 'end')
    @classmethod
    def is_month_day(cls, v):
        return MonthDay.parse(v).value

    # ==================== FACTORY METHOD ====================
    @staticmethod
    def create(
        name: str,
        start: str,
        end: str,
        multiplier: Union[str, float, Decimal, None] = None,
        season_type: Union[SeasonType, str] = SeasonType.HIGH
    ) -> "SeasonRule":
        """Create a new rule from manager input, with validation"""
        name = (name or "").strip()
        start = (start or "").strip()
        end = (end or "").strip()
        if not name:
            raise InvalidSeasonRuleError("Season rule name is required")
        if not start or not end:
            raise InvalidSeasonRuleError("Season rule start and end are required")

        try:
            return SeasonRule(
                name=name,
                start=start,
                end=end,
                multiplier=SeasonRule.parse_multiplier(multiplier),
                season_type=SeasonType(season_type)
            )
        except (ValidationError, ValueError) as e:
            raise InvalidSeasonRuleError(str(e)) from e

    @staticmethod
    def parse_multiplier(raw: Union[str, float, Decimal, None]) -> Decimal:
        """Parse a multiplier, defaulting to 1 when it is missing, unparseable or zero"""
        try:
            value = Decimal(str(raw).strip())
        except (InvalidOperation, TypeError):
            return Decimal("1")
        if not value.is_finite() or value == 0:
            return Decimal("1")
        if value < 0:
            raise InvalidSeasonRuleError("Season multiplier must be positive")
        return value

    # ==================== QUERY METHODS ====================
    def wraps_year(self) -> bool:
        return self.start > self.end

    def contains(self, day: date) -> bool:
        """Check if a calendar date falls inside this rule, ignoring the year"""
        current = MonthDay.of(day).value
        if self.wraps_year():
            return current >= self.start or current <= self.end
        return self.start <= current <= self.end
