"""In-Memory Repository Implementations"""
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from domain.entities import Booking, Property, SeasonRule
from domain.repositories import BookingRepository, PropertyRepository, SeasonRuleRepository

CANCELLED_STATUS = "cancelled"


class InMemoryPropertyRepository(PropertyRepository):
    """In-memory implementation of PropertyRepository"""

    def __init__(self, properties: Optional[Iterable[Property]] = None):
        self._storage: Dict[str, Property] = {}
        for prop in properties or []:
            self.add(prop)

    def add(self, prop: Property) -> Property:
        """Seed a property; insertion order is listing order"""
        self._storage[prop.property_id] = prop
        return prop

    async def find_active(self) -> List[Property]:
        """Find all active properties"""
        return [p for p in self._storage.values() if p.is_active()]

    async def find_by_id(self, property_id: str) -> Optional[Property]:
        """Find property by ID"""
        return self._storage.get(property_id)

    async def update_price(self, property_id: str, new_price: Decimal) -> bool:
        """Update nightly price"""
        if property_id not in self._storage:
            return False
        self._storage[property_id] = self._storage[property_id].model_copy(
            update={"price_per_night": new_price}
        )
        return True


class InMemoryBookingRepository(BookingRepository):
    """In-memory implementation of BookingRepository"""

    def __init__(self, bookings: Optional[Iterable[Booking]] = None):
        self._storage: Dict[str, Booking] = {}
        for booking in bookings or []:
            self.add(booking)

    def add(self, booking: Booking) -> Booking:
        self._storage[booking.booking_id] = booking
        return booking

    async def find_active(self, property_ids: Optional[Iterable[str]] = None) -> List[Booking]:
        """Find non-cancelled bookings"""
        wanted = set(property_ids) if property_ids is not None else None
        return [
            b for b in self._storage.values()
            if b.status.lower() != CANCELLED_STATUS
            and (wanted is None or b.property_id in wanted)
        ]


class InMemorySeasonRuleRepository(SeasonRuleRepository):
    """In-memory implementation of SeasonRuleRepository"""

    def __init__(self):
        self._storage: Dict[str, List[SeasonRule]] = {}

    async def load(self, tenant_id: str) -> List[SeasonRule]:
        """Load a copy of the tenant's rule list"""
        return list(self._storage.get(tenant_id, []))

    async def save(self, tenant_id: str, rules: List[SeasonRule]) -> None:
        """Replace the tenant's rule list"""
        self._storage[tenant_id] = list(rules)
