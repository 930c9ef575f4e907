"""PostgREST-backed repositories for the hosted property/booking store"""
import logging
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional

import httpx
from pydantic import ValidationError

from domain.entities import Booking, Property
from domain.enums import PropertyStatus
from domain.exceptions import DataGatewayError
from domain.repositories import BookingRepository, PropertyRepository

logger = logging.getLogger(__name__)

PROPERTY_COLUMNS = "id,name,price_per_night,status"
BOOKING_COLUMNS = "id,property_id,start_date,end_date,total_price,status"


class PostgrestClient:
    """Thin async client for a PostgREST endpoint (``/rest/v1`` style)"""

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        headers = {"Accept": "application/json"}
        if api_key:
            headers["apikey"] = api_key
            headers["Authorization"] = f"Bearer {api_key}"

        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers=headers,
            timeout=timeout,
            transport=transport
        )

    async def select(self, table: str, params: Dict[str, str]) -> List[Dict[str, Any]]:
        return await self._request("GET", f"/{table}", params=params)

    async def update(self, table: str, params: Dict[str, str], values: Dict[str, Any]) -> List[Dict[str, Any]]:
        return await self._request(
            "PATCH", f"/{table}",
            params=params,
            json=values,
            headers={"Prefer": "return=representation"}
        )

    async def _request(self, method: str, path: str, **kwargs) -> List[Dict[str, Any]]:
        try:
            response = await self._client.request(method, path, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(f"{method} {path} failed with HTTP {e.response.status_code}: {e.response.text}")
            raise DataGatewayError(f"{method} {path} returned HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            logger.error(f"{method} {path} failed: {e}")
            raise DataGatewayError(f"{method} {path} failed: {e}") from e

        if not response.content:
            return []
        return response.json()

    async def aclose(self) -> None:
        await self._client.aclose()


def _to_property(row: Dict[str, Any]) -> Property:
    return Property(
        property_id=str(row["id"]),
        name=row.get("name") or "",
        price_per_night=row.get("price_per_night"),
        status=PropertyStatus.ACTIVE if (row.get("status") or "active") == "active" else PropertyStatus.INACTIVE
    )


def _to_booking(row: Dict[str, Any]) -> Booking:
    return Booking(
        booking_id=str(row["id"]),
        property_id=str(row["property_id"]),
        start_date=row["start_date"],
        end_date=row["end_date"],
        total_price=row.get("total_price"),
        status=row.get("status") or ""
    )


class PostgrestPropertyRepository(PropertyRepository):
    """Reads active properties and writes nightly prices through PostgREST"""

    def __init__(self, client: PostgrestClient, table: str = "properties"):
        self.client = client
        self.table = table

    async def find_active(self) -> List[Property]:
        rows = await self.client.select(self.table, {
            "select": PROPERTY_COLUMNS,
            "status": "eq.active"
        })
        properties = []
        for row in rows:
            try:
                properties.append(_to_property(row))
            except (KeyError, ValidationError) as e:
                logger.warning(f"Skipping malformed property row {row.get('id')}: {e}")
        return properties

    async def find_by_id(self, property_id: str) -> Optional[Property]:
        rows = await self.client.select(self.table, {
            "select": PROPERTY_COLUMNS,
            "id": f"eq.{property_id}"
        })
        if not rows:
            return None
        try:
            return _to_property(rows[0])
        except (KeyError, ValidationError) as e:
            logger.error(f"Malformed property row {property_id}: {e}")
            raise DataGatewayError(f"Property {property_id} has malformed data") from e

    async def update_price(self, property_id: str, new_price: Decimal) -> bool:
        rows = await self.client.update(
            self.table,
            {"id": f"eq.{property_id}"},
            {"price_per_night": float(new_price)}
        )
        return len(rows) > 0


class PostgrestBookingRepository(BookingRepository):
    """Reads non-cancelled bookings through PostgREST"""

    def __init__(self, client: PostgrestClient, table: str = "bookings"):
        self.client = client
        self.table = table

    async def find_active(self, property_ids: Optional[Iterable[str]] = None) -> List[Booking]:
        params = {
            "select": BOOKING_COLUMNS,
            "status": "neq.cancelled"
        }
        if property_ids is not None:
            ids = list(property_ids)
            if not ids:
                return []
            params["property_id"] = f"in.({','.join(ids)})"

        rows = await self.client.select(self.table, params)
        bookings = []
        for row in rows:
            try:
                bookings.append(_to_booking(row))
            except (KeyError, ValidationError) as e:
                logger.warning(f"Skipping malformed booking row {row.get('id')}: {e}")
        return bookings
