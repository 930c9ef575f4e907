"""Domain Repository Interfaces"""
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Iterable, List, Optional

from domain.entities import Booking, Property, SeasonRule


class PropertyRepository(ABC):
    """Repository interface for properties held by the external store"""

    @abstractmethod
    async def find_active(self) -> List[Property]:
        """Find all active properties"""
        pass

    @abstractmethod
    async def find_by_id(self, property_id: str) -> Optional[Property]:
        """Find property by ID"""
        pass

    @abstractmethod
    async def update_price(self, property_id: str, new_price: Decimal) -> bool:
        """Write a new nightly price; False when the property does not exist"""
        pass


class BookingRepository(ABC):
    """Repository interface for bookings; cancelled bookings never come back"""

    @abstractmethod
    async def find_active(self, property_ids: Optional[Iterable[str]] = None) -> List[Booking]:
        """Find non-cancelled bookings, optionally for some properties only"""
        pass


class SeasonRuleRepository(ABC):
    """Repository interface for the per-tenant ordered season rule list"""

    @abstractmethod
    async def load(self, tenant_id: str) -> List[SeasonRule]:
        """Load the tenant's rules in priority order"""
        pass

    @abstractmethod
    async def save(self, tenant_id: str, rules: List[SeasonRule]) -> None:
        """Replace the tenant's rule list"""
        pass
