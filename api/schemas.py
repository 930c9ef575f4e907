"""API Schemas - Request and Response DTOs"""
from pydantic import BaseModel, Field
from datetime import date
from decimal import Decimal
from uuid import UUID
from typing import List, Optional, Union

from domain.enums import SeasonType, ReasonCode


# ============================================================================
# PROPERTY SCHEMAS
# ============================================================================

class PropertyResponse(BaseModel):
    """Property response DTO"""
    property_id: str
    name: str
    price_per_night: Optional[Decimal] = None
    base_price: Decimal
    status: str


# ============================================================================
# SEASON RULE SCHEMAS
# ============================================================================

class CreateSeasonRuleRequest(BaseModel):
    """Create season rule request DTO"""
    name: str
    start: str = Field(description="Start marker, MM-DD")
    end: str = Field(description="End marker, MM-DD; before start means the rule wraps the year")
    multiplier: Union[float, str, None] = Field(default="1.3", description="Unparseable values fall back to 1")
    season_type: SeasonType = SeasonType.HIGH


class SeasonRuleResponse(BaseModel):
    """Season rule response DTO"""
    rule_id: UUID
    name: str
    start: str
    end: str
    multiplier: float
    season_type: str
    wraps_year: bool


# ============================================================================
# PRICING SCHEMAS
# ============================================================================

class QuoteRequest(BaseModel):
    """Single-date quote request DTO"""
    base_price: Decimal = Field(ge=0)
    on_date: date
    occupancy_rate: float = Field(ge=0, le=1)


class QuoteResponse(BaseModel):
    """Single-date quote response DTO"""
    on_date: date
    base_price: Decimal
    price: int
    reason: ReasonCode
    multiplier: float


class OccupancyResponse(BaseModel):
    """Occupancy response DTO"""
    property_id: str
    year: int
    month: int
    booked_nights: int
    occupancy_rate: float


class PriceSuggestionResponse(BaseModel):
    """Price suggestion response DTO"""
    property_id: str
    property_name: str
    current_price: Decimal
    suggested_price: int
    occupancy_rate: float
    reason: ReasonCode
    change: Decimal


class ApplyPriceResponse(BaseModel):
    """Apply suggestion response DTO"""
    property_id: str
    previous_price: Decimal
    applied_price: int
    reason: ReasonCode


class MonthKPIResponse(BaseModel):
    """Month KPI response DTO"""
    year: int
    month: int
    days_in_month: int
    property_count: int
    total_revenue: Decimal
    booked_nights: int
    revpar: Decimal
    adr: Decimal
    avg_occupancy: float
    potential_revenue: Decimal


class CalendarDayResponse(BaseModel):
    """Pricing calendar day DTO"""
    day: date
    price: int
    reason: ReasonCode
    booked: bool


class PricingCalendarResponse(BaseModel):
    """Pricing calendar response DTO"""
    year: int
    month: int
    property_id: Optional[str] = None
    base_price: Decimal
    occupancy_rate: float
    days: List[CalendarDayResponse]
