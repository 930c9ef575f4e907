"""Occupancy calculation over booking date ranges"""
from datetime import date
from typing import Dict, Iterable, List

from domain.entities import Booking, Property
from domain.value_objects import OccupancyResult, Period


def days_between(start: date, end: date) -> int:
    """Exclusive day count; a stay from day N to N+3 is 3 nights"""
    return (end - start).days


def overlaps(booking: Booking, period: Period) -> bool:
    return booking.start_date <= period.end and booking.end_date >= period.start


def booked_nights(booking: Booking, period: Period) -> int:
    """Nights of a booking that fall inside the period, never negative"""
    start = max(booking.start_date, period.start)
    end = min(booking.end_date, period.end)
    return max(0, days_between(start, end))


def calculate_occupancy(property_id: str, period: Period, bookings: Iterable[Booking]) -> OccupancyResult:
    """
    Booked nights and occupancy ratio of one property over a period.

    The ratio is capped at 1: overlapping or duplicate bookings are not
    rejected upstream and would otherwise over-count.
    """
    nights = sum(
        booked_nights(b, period)
        for b in bookings
        if b.property_id == property_id and overlaps(b, period)
    )

    length = period.length_days()
    rate = min(nights / length, 1.0) if length > 0 else 0.0

    return OccupancyResult(property_id=property_id, booked_nights=nights, occupancy_rate=rate)


def occupancy_by_property(
    properties: Iterable[Property],
    period: Period,
    bookings: Iterable[Booking]
) -> Dict[str, OccupancyResult]:
    """Occupancy of every property over the same period"""
    bookings: List[Booking] = list(bookings)
    return {
        p.property_id: calculate_occupancy(p.property_id, period, bookings)
        for p in properties
    }
