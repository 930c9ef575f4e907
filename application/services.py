"""Application Services - Business use cases"""
import logging
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Dict, List, Optional, Union
from uuid import UUID

from domain.entities import Property, SeasonRule
from domain.enums import SeasonType
from domain.occupancy import occupancy_by_property
from domain.pricing import (
    PriceSuggestion, month_kpis, pricing_calendar, suggest_price, suggestions_for
)
from domain.repositories import BookingRepository, PropertyRepository, SeasonRuleRepository
from domain.value_objects import MonthKPISet, OccupancyResult, Period, PriceQuote, PricingCalendar

logger = logging.getLogger(__name__)


def utc_today() -> date:
    """Pricing works on UTC calendar dates"""
    return datetime.now(timezone.utc).date()


class SeasonRuleService:
    """Service for the per-tenant season rule list"""

    def __init__(self, repository: SeasonRuleRepository):
        self.repository = repository

    async def list_rules(self, tenant_id: str) -> List[SeasonRule]:
        """Get the tenant's rules in matching priority order"""
        return await self.repository.load(tenant_id)

    async def add_rule(
        self,
        tenant_id: str,
        name: str,
        start: str,
        end: str,
        multiplier: Union[str, float, Decimal, None] = None,
        season_type: Union[SeasonType, str] = SeasonType.HIGH
    ) -> SeasonRule:
        """Validate and append a rule; append order is matching priority"""
        rule = SeasonRule.create(
            name=name,
            start=start,
            end=end,
            multiplier=multiplier,
            season_type=season_type
        )

        rules = await self.repository.load(tenant_id)
        rules.append(rule)
        await self.repository.save(tenant_id, rules)

        logger.info(f"Tenant {tenant_id}: added season rule '{rule.name}' "
                    f"{rule.start}->{rule.end} x{rule.multiplier} ({rule.season_type.value})")
        return rule

    async def remove_rule(self, tenant_id: str, rule_id: UUID) -> bool:
        """Remove a rule by ID; removing an unknown ID is not an error"""
        rules = await self.repository.load(tenant_id)
        remaining = [r for r in rules if r.rule_id != rule_id]
        if len(remaining) == len(rules):
            return False

        await self.repository.save(tenant_id, remaining)
        logger.info(f"Tenant {tenant_id}: removed season rule {rule_id}")
        return True


class RevenueService:
    """Service for occupancy, price suggestions and month KPIs"""

    def __init__(self,
                 property_repo: PropertyRepository,
                 booking_repo: BookingRepository,
                 rule_repo: SeasonRuleRepository):
        self.property_repo = property_repo
        self.booking_repo = booking_repo
        self.rule_repo = rule_repo

    async def get_properties(self) -> List[Property]:
        """Get all active properties"""
        return await self.property_repo.find_active()

    async def quote(
        self,
        tenant_id: str,
        base_price: Decimal,
        on_date: date,
        occupancy_rate: float
    ) -> PriceQuote:
        """Single-date suggestion with the tenant's rules"""
        rules = await self.rule_repo.load(tenant_id)
        return suggest_price(base_price, on_date, rules, occupancy_rate)

    async def get_occupancy(self, year: int, month: int) -> Dict[str, OccupancyResult]:
        """Booked nights and occupancy per active property for a month"""
        properties = await self.property_repo.find_active()
        bookings = await self.booking_repo.find_active([p.property_id for p in properties])
        return occupancy_by_property(properties, Period.for_month(year, month), bookings)

    async def get_suggestions(
        self,
        tenant_id: str,
        property_id: Optional[str] = None,
        today: Optional[date] = None
    ) -> List[PriceSuggestion]:
        """Today's price suggestions, for every active property or just one"""
        today = today or utc_today()
        properties = await self.property_repo.find_active()
        if property_id is not None:
            properties = [p for p in properties if p.property_id == property_id]

        bookings = await self.booking_repo.find_active([p.property_id for p in properties])
        rules = await self.rule_repo.load(tenant_id)
        return suggestions_for(properties, today, rules, bookings)

    async def get_month_kpis(
        self,
        tenant_id: str,
        year: int,
        month: int,
        today: Optional[date] = None
    ) -> MonthKPISet:
        """RevPAR, ADR, average occupancy and potential revenue across active properties"""
        properties = await self.property_repo.find_active()
        bookings = await self.booking_repo.find_active([p.property_id for p in properties])
        rules = await self.rule_repo.load(tenant_id)
        return month_kpis(year, month, properties, bookings, rules, today or utc_today())

    async def get_pricing_calendar(
        self,
        tenant_id: str,
        year: int,
        month: int,
        property_id: Optional[str] = None
    ) -> Optional[PricingCalendar]:
        """Day-by-day suggestions for a month; None when the property is unknown"""
        properties = await self.property_repo.find_active()
        if property_id is not None and not any(p.property_id == property_id for p in properties):
            return None

        bookings = await self.booking_repo.find_active()
        rules = await self.rule_repo.load(tenant_id)
        return pricing_calendar(year, month, properties, bookings, rules, focus_property_id=property_id)

    async def apply_suggestion(
        self,
        tenant_id: str,
        property_id: str,
        today: Optional[date] = None
    ) -> Optional[PriceSuggestion]:
        """
        Recompute today's suggestion for a property and write it back.

        Returns None when the property is unknown. Gateway failures
        propagate as DataGatewayError; the suggestion can simply be
        recomputed afterwards since nothing is held between calls.
        """
        today = today or utc_today()
        prop = await self.property_repo.find_by_id(property_id)
        if not prop:
            return None

        bookings = await self.booking_repo.find_active([property_id])
        rules = await self.rule_repo.load(tenant_id)
        suggestion = suggestions_for([prop], today, rules, bookings)[0]

        updated = await self.property_repo.update_price(property_id, Decimal(suggestion.suggested_price))
        if not updated:
            return None

        logger.info(f"Applied price {suggestion.suggested_price} to property {property_id} "
                    f"(was {suggestion.current_price}, reason {suggestion.reason.value})")
        return suggestion
