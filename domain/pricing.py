"""
Pricing Suggestion Engine
=========================

Suggests a nightly price from a base price, the season rules, the
occupancy ratio and a weekend premium, and aggregates the month KPIs
shown next to the suggestions.

Calculation order for one date (order matters for the reason code):
1. Season multiplier - first matching rule in list order
2. Occupancy        - >= 80% adds 15%, < 30% takes 15% off
3. Weekend          - Friday/Saturday adds 10%, labelled only if nothing else was
4. Base × multiplier, rounded half-up to a whole price
"""
import logging
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, List, Optional, Sequence, Union

from pydantic import BaseModel, ConfigDict

from domain.entities import FALLBACK_BASE_PRICE, Booking, Property, SeasonRule
from domain.enums import SEASON_REASONS, ReasonCode
from domain.occupancy import calculate_occupancy, occupancy_by_property
from domain.value_objects import CalendarDay, MonthKPISet, Period, PriceQuote, PricingCalendar

logger = logging.getLogger(__name__)

HIGH_OCCUPANCY_THRESHOLD = 0.8
LOW_OCCUPANCY_THRESHOLD = 0.3
HIGH_OCCUPANCY_FACTOR = Decimal("1.15")
LOW_OCCUPANCY_FACTOR = Decimal("0.85")
WEEKEND_FACTOR = Decimal("1.10")

# date.weekday(): Monday=0 ... Friday=4, Saturday=5
WEEKEND_DAYS = (4, 5)

Number = Union[int, float, Decimal]


class PriceSuggestion(BaseModel):
    """Suggested price for a property, regenerated on every request"""
    property: Property
    current_price: Decimal
    suggested_price: int
    occupancy_rate: float
    reason: ReasonCode
    change: Decimal

    model_config = ConfigDict(frozen=True)


def round_half_up(value: Decimal) -> int:
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _money(value: Number) -> Decimal:
    return Decimal(value).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def _as_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def is_weekend(day: date) -> bool:
    return day.weekday() in WEEKEND_DAYS


def find_season_rule(day: date, rules: Sequence[SeasonRule]) -> Optional[SeasonRule]:
    """First rule in list order containing the date; later overlaps never win"""
    for rule in rules:
        if rule.contains(day):
            return rule
    return None


def suggest_price(
    base_price: Number,
    on_date: date,
    rules: Sequence[SeasonRule],
    occupancy_rate: float
) -> PriceQuote:
    """Suggested nightly price and reason code for a single date"""
    multiplier = Decimal("1")
    reason = ReasonCode.BASE

    rule = find_season_rule(on_date, rules)
    if rule is not None:
        multiplier = rule.multiplier
        reason = SEASON_REASONS[rule.season_type]

    if occupancy_rate >= HIGH_OCCUPANCY_THRESHOLD:
        multiplier *= HIGH_OCCUPANCY_FACTOR
        reason = ReasonCode.HIGH_OCCUPANCY
    elif occupancy_rate < LOW_OCCUPANCY_THRESHOLD:
        multiplier *= LOW_OCCUPANCY_FACTOR
        reason = ReasonCode.LOW_OCCUPANCY

    if is_weekend(on_date):
        multiplier *= WEEKEND_FACTOR
        if reason == ReasonCode.BASE:
            reason = ReasonCode.WEEKEND

    price = round_half_up(_as_decimal(base_price) * multiplier)

    logger.debug(f"{on_date.isoformat()}: base={base_price}, occupancy={occupancy_rate:.2f}, "
                 f"multiplier={multiplier}, price={price}, reason={reason.value}")

    return PriceQuote(price=price, reason=reason, multiplier=multiplier)


def build_suggestion(
    prop: Property,
    on_date: date,
    rules: Sequence[SeasonRule],
    occupancy_rate: float
) -> PriceSuggestion:
    base = prop.base_price
    quote = suggest_price(base, on_date, rules, occupancy_rate)
    return PriceSuggestion(
        property=prop,
        current_price=base,
        suggested_price=quote.price,
        occupancy_rate=occupancy_rate,
        reason=quote.reason,
        change=Decimal(quote.price) - base
    )


def suggestions_for(
    properties: Iterable[Property],
    on_date: date,
    rules: Sequence[SeasonRule],
    bookings: Iterable[Booking]
) -> List[PriceSuggestion]:
    """Suggestions for a date, using each property's occupancy over that date's month"""
    properties = list(properties)
    occupancy = occupancy_by_property(properties, Period.for_month(on_date.year, on_date.month), bookings)
    return [
        build_suggestion(p, on_date, rules, occupancy[p.property_id].occupancy_rate)
        for p in properties
    ]


def month_kpis(
    year: int,
    month: int,
    properties: Iterable[Property],
    bookings: Iterable[Booking],
    rules: Sequence[SeasonRule],
    today: date
) -> MonthKPISet:
    """
    RevPAR, ADR, average occupancy and potential revenue for a month.

    Revenue and booked nights count bookings that start in the month.
    Potential revenue multiplies today's suggested price by the month's
    days and occupancy. It is a rough signal, not a forecast.
    """
    properties = list(properties)
    bookings = list(bookings)
    period = Period.for_month(year, month)
    days = period.length_days()

    month_bookings = [b for b in bookings if b.starts_in_month(year, month)]
    total_revenue = sum((b.total_price for b in month_bookings), Decimal("0"))
    nights = sum(b.nights() for b in month_bookings)

    available_nights = len(properties) * days
    revpar = total_revenue / available_nights if available_nights > 0 else Decimal("0")
    adr = total_revenue / nights if nights > 0 else Decimal("0")

    occupancy = occupancy_by_property(properties, period, bookings)
    rates = [occupancy[p.property_id].occupancy_rate for p in properties]
    avg_occupancy = sum(rates) / len(rates) if rates else 0.0

    potential_revenue = Decimal("0")
    for suggestion in suggestions_for(properties, today, rules, bookings):
        rate = Decimal(str(occupancy[suggestion.property.property_id].occupancy_rate))
        potential_revenue += Decimal(suggestion.suggested_price) * days * rate

    return MonthKPISet(
        year=year,
        month=month,
        days_in_month=days,
        property_count=len(properties),
        total_revenue=_money(total_revenue),
        booked_nights=nights,
        revpar=_money(revpar),
        adr=_money(adr),
        avg_occupancy=avg_occupancy,
        potential_revenue=_money(potential_revenue)
    )


def pricing_calendar(
    year: int,
    month: int,
    properties: Iterable[Property],
    bookings: Iterable[Booking],
    rules: Sequence[SeasonRule],
    focus_property_id: Optional[str] = None
) -> PricingCalendar:
    """
    Suggested price, reason and booked flag for every day of a month.

    Prices are for the focus property, or the first property when none is
    selected. Without any property the fallback base price and zero
    occupancy are used and every booking counts towards the booked flag.
    """
    properties = list(properties)
    bookings = list(bookings)
    period = Period.for_month(year, month)

    focus: Optional[Property] = None
    if focus_property_id is not None:
        focus = next((p for p in properties if p.property_id == focus_property_id), None)
    elif properties:
        focus = properties[0]

    base_price = FALLBACK_BASE_PRICE
    if focus is not None and focus.price_per_night:
        base_price = focus.price_per_night
    elif properties and properties[0].price_per_night:
        base_price = properties[0].price_per_night

    occupancy_rate = 0.0
    relevant = bookings
    if focus is not None:
        occupancy_rate = calculate_occupancy(focus.property_id, period, bookings).occupancy_rate
        relevant = [b for b in bookings if b.property_id == focus.property_id]

    days: List[CalendarDay] = []
    for day in period.days():
        quote = suggest_price(base_price, day, rules, occupancy_rate)
        booked = any(b.start_date <= day <= b.end_date for b in relevant)
        days.append(CalendarDay(day=day, price=quote.price, reason=quote.reason, booked=booked))

    return PricingCalendar(
        year=year,
        month=month,
        property_id=focus.property_id if focus is not None else None,
        base_price=base_price,
        occupancy_rate=occupancy_rate,
        days=days
    )
