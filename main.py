import logging
from contextlib import asynccontextmanager
from datetime import date
from typing import List, Optional
from uuid import UUID

from fastapi import FastAPI, HTTPException, Depends, Query, Request, Response
from fastapi.responses import JSONResponse

from api.schemas import (
    # Properties
    PropertyResponse,
    # Season rules
    CreateSeasonRuleRequest, SeasonRuleResponse,
    # Pricing & revenue
    QuoteRequest, QuoteResponse, OccupancyResponse, PriceSuggestionResponse,
    ApplyPriceResponse, MonthKPIResponse, CalendarDayResponse, PricingCalendarResponse
)
from api.dependencies import get_tenant_id

from application.services import SeasonRuleService, RevenueService, utc_today
from domain.enums import ReasonCode, SeasonType
from domain.exceptions import DataGatewayError
from infrastructure.config import Settings, get_settings
from infrastructure.logging_config import setup_logging
from infrastructure.repositories.in_memory_repositories import (
    InMemoryPropertyRepository, InMemoryBookingRepository, InMemorySeasonRuleRepository
)
from infrastructure.repositories.json_season_rule_repository import JsonFileSeasonRuleRepository
from infrastructure.repositories.postgrest_repositories import (
    PostgrestClient, PostgrestPropertyRepository, PostgrestBookingRepository
)

settings = get_settings()
setup_logging(settings)
logger = logging.getLogger(__name__)


def build_data_repositories(settings: Settings):
    """Property and booking repositories for the configured backend"""
    if settings.data_backend == "postgrest":
        if not settings.postgrest_url:
            raise RuntimeError("PRICING_POSTGREST_URL must be set when PRICING_DATA_BACKEND=postgrest")
        client = PostgrestClient(
            settings.postgrest_url,
            api_key=settings.postgrest_api_key,
            timeout=settings.postgrest_timeout_seconds
        )
        return PostgrestPropertyRepository(client), PostgrestBookingRepository(client), client
    return InMemoryPropertyRepository(), InMemoryBookingRepository(), None


def build_season_rule_repository(settings: Settings):
    if settings.season_rules_backend == "memory":
        return InMemorySeasonRuleRepository()
    return JsonFileSeasonRuleRepository(settings.season_rules_dir)


# Initialize repositories
property_repo, booking_repo, postgrest_client = build_data_repositories(settings)
season_rule_repo = build_season_rule_repository(settings)
logger.info(f"Data backend: {settings.data_backend}, season rules backend: {settings.season_rules_backend}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    if postgrest_client is not None:
        await postgrest_client.aclose()


app = FastAPI(
    title=settings.app_title,
    description="Occupancy, season-based price suggestions and month KPIs for rental properties",
    version="1.0.0",
    lifespan=lifespan
)


# Dependency injection
def get_season_rule_service() -> SeasonRuleService:
    return SeasonRuleService(season_rule_repo)

def get_revenue_service() -> RevenueService:
    return RevenueService(property_repo, booking_repo, season_rule_repo)


@app.exception_handler(DataGatewayError)
async def data_gateway_error_handler(request: Request, exc: DataGatewayError):
    logger.error(f"{request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=502, content={"detail": "Property data store is unavailable"})

# ============================================================================
# HEALTH & ENUM REFERENCE ENDPOINTS
# ============================================================================

@app.get("/api/health", tags=["Health"])
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "message": "API is running"}

@app.get("/api/enums/reason-codes", tags=["Enum Reference"])
async def get_reason_codes():
    """Get all ReasonCode values"""
    return {
        "values": [item.value for item in ReasonCode],
        "description": "Why a suggested price differs from base: season, occupancy or weekend"
    }

@app.get("/api/enums/season-types", tags=["Enum Reference"])
async def get_season_types():
    """Get all SeasonType values"""
    return {
        "values": [item.value for item in SeasonType],
        "description": "Season type values: high, mid, low (labels only, not precedence)"
    }

# ============================================================================
# PROPERTY ENDPOINTS
# ============================================================================

@app.get("/api/properties", response_model=List[PropertyResponse], tags=["Properties"])
async def get_properties(service: RevenueService = Depends(get_revenue_service)):
    """Get all active properties"""
    properties = await service.get_properties()
    return [_property_to_response(p) for p in properties]

# ============================================================================
# SEASON RULE ENDPOINTS
# ============================================================================

@app.get("/api/season-rules", response_model=List[SeasonRuleResponse], tags=["Season Rules"])
async def get_season_rules(
    tenant_id: str = Depends(get_tenant_id),
    service: SeasonRuleService = Depends(get_season_rule_service)
):
    """Get the tenant's season rules in matching priority order"""
    rules = await service.list_rules(tenant_id)
    return [_rule_to_response(r) for r in rules]

@app.post("/api/season-rules", response_model=SeasonRuleResponse, status_code=201, tags=["Season Rules"])
async def create_season_rule(
    request: CreateSeasonRuleRequest,
    tenant_id: str = Depends(get_tenant_id),
    service: SeasonRuleService = Depends(get_season_rule_service)
):
    """Append a season rule; earlier rules win when ranges overlap"""
    try:
        rule = await service.add_rule(
            tenant_id=tenant_id,
            name=request.name,
            start=request.start,
            end=request.end,
            multiplier=request.multiplier,
            season_type=request.season_type
        )
        return _rule_to_response(rule)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

@app.delete("/api/season-rules/{rule_id}", status_code=204, response_class=Response, tags=["Season Rules"])
async def delete_season_rule(
    rule_id: UUID,
    tenant_id: str = Depends(get_tenant_id),
    service: SeasonRuleService = Depends(get_season_rule_service)
):
    """Delete a season rule; deleting an unknown rule succeeds"""
    await service.remove_rule(tenant_id, rule_id)
    return Response(status_code=204)

# ============================================================================
# PRICING & REVENUE ENDPOINTS
# ============================================================================

@app.post("/api/pricing/quote", response_model=QuoteResponse, tags=["Pricing"])
async def quote_price(
    request: QuoteRequest,
    tenant_id: str = Depends(get_tenant_id),
    service: RevenueService = Depends(get_revenue_service)
):
    """Suggested price for one date with the tenant's season rules"""
    quote = await service.quote(tenant_id, request.base_price, request.on_date, request.occupancy_rate)
    return QuoteResponse(
        on_date=request.on_date,
        base_price=request.base_price,
        price=quote.price,
        reason=quote.reason,
        multiplier=float(quote.multiplier)
    )

@app.get("/api/revenue/occupancy", response_model=List[OccupancyResponse], tags=["Revenue"])
async def get_occupancy(
    year: Optional[int] = Query(None, ge=1),
    month: Optional[int] = Query(None, ge=1, le=12),
    service: RevenueService = Depends(get_revenue_service)
):
    """Booked nights and occupancy per property for a month (default: current month)"""
    year, month = _resolve_month(year, month)
    results = await service.get_occupancy(year, month)
    return [
        OccupancyResponse(
            property_id=r.property_id,
            year=year,
            month=month,
            booked_nights=r.booked_nights,
            occupancy_rate=r.occupancy_rate
        )
        for r in results.values()
    ]

@app.get("/api/revenue/suggestions", response_model=List[PriceSuggestionResponse], tags=["Revenue"])
async def get_suggestions(
    property_id: Optional[str] = None,
    as_of: Optional[date] = None,
    tenant_id: str = Depends(get_tenant_id),
    service: RevenueService = Depends(get_revenue_service)
):
    """Today's price suggestions for all active properties or one"""
    suggestions = await service.get_suggestions(tenant_id, property_id=property_id, today=as_of)
    return [_suggestion_to_response(s) for s in suggestions]

@app.post("/api/revenue/suggestions/{property_id}/apply", response_model=ApplyPriceResponse, tags=["Revenue"])
async def apply_suggestion(
    property_id: str,
    as_of: Optional[date] = None,
    tenant_id: str = Depends(get_tenant_id),
    service: RevenueService = Depends(get_revenue_service)
):
    """Write today's suggested price back to the property"""
    try:
        suggestion = await service.apply_suggestion(tenant_id, property_id, today=as_of)
    except DataGatewayError as e:
        logger.warning(f"Could not apply price to property {property_id}: {e}")
        raise HTTPException(status_code=502, detail="Could not apply price")
    if not suggestion:
        raise HTTPException(status_code=404, detail="Property not found")
    return ApplyPriceResponse(
        property_id=property_id,
        previous_price=suggestion.current_price,
        applied_price=suggestion.suggested_price,
        reason=suggestion.reason
    )

@app.get("/api/revenue/kpis", response_model=MonthKPIResponse, tags=["Revenue"])
async def get_month_kpis(
    year: Optional[int] = Query(None, ge=1),
    month: Optional[int] = Query(None, ge=1, le=12),
    as_of: Optional[date] = None,
    tenant_id: str = Depends(get_tenant_id),
    service: RevenueService = Depends(get_revenue_service)
):
    """RevPAR, ADR, average occupancy and potential revenue for a month"""
    year, month = _resolve_month(year, month, as_of)
    kpis = await service.get_month_kpis(tenant_id, year, month, today=as_of)
    return MonthKPIResponse(**kpis.model_dump())

@app.get("/api/revenue/calendar", response_model=PricingCalendarResponse, tags=["Revenue"])
async def get_pricing_calendar(
    year: Optional[int] = Query(None, ge=1),
    month: Optional[int] = Query(None, ge=1, le=12),
    property_id: Optional[str] = None,
    tenant_id: str = Depends(get_tenant_id),
    service: RevenueService = Depends(get_revenue_service)
):
    """Suggested price, reason and booked flag for each day of a month"""
    year, month = _resolve_month(year, month)
    calendar = await service.get_pricing_calendar(tenant_id, year, month, property_id=property_id)
    if not calendar:
        raise HTTPException(status_code=404, detail="Property not found")
    return PricingCalendarResponse(
        year=calendar.year,
        month=calendar.month,
        property_id=calendar.property_id,
        base_price=calendar.base_price,
        occupancy_rate=calendar.occupancy_rate,
        days=[
            CalendarDayResponse(day=d.day, price=d.price, reason=d.reason, booked=d.booked)
            for d in calendar.days
        ]
    )

# ============================================================================
# HELPER FUNCTIONS
# ============================================================================

def _resolve_month(year: Optional[int], month: Optional[int], as_of: Optional[date] = None):
    """Fill a missing year/month from the reference date (default: today, UTC)"""
    today = as_of or utc_today()
    return (year or today.year, month or today.month)

def _property_to_response(prop) -> PropertyResponse:
    """Convert Property entity to PropertyResponse"""
    return PropertyResponse(
        property_id=prop.property_id,
        name=prop.name,
        price_per_night=prop.price_per_night,
        base_price=prop.base_price,
        status=prop.status.value
    )

def _rule_to_response(rule) -> SeasonRuleResponse:
    """Convert SeasonRule entity to SeasonRuleResponse"""
    return SeasonRuleResponse(
        rule_id=rule.rule_id,
        name=rule.name,
        start=rule.start,
        end=rule.end,
        multiplier=float(rule.multiplier),
        season_type=rule.season_type.value,
        wraps_year=rule.wraps_year()
    )

def _suggestion_to_response(suggestion) -> PriceSuggestionResponse:
    """Convert PriceSuggestion to PriceSuggestionResponse"""
    return PriceSuggestionResponse(
        property_id=suggestion.property.property_id,
        property_name=suggestion.property.name,
        current_price=suggestion.current_price,
        suggested_price=suggestion.suggested_price,
        occupancy_rate=suggestion.occupancy_rate,
        reason=suggestion.reason,
        change=suggestion.change
    )

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
