"""FastAPI route definitions for the Dream Car Builder API."""

from typing import Annotated, Optional, Union

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, Field

from dreamcar.api.deps import (
    decode_rate_limit,
    get_engine,
    get_nhtsa,
    get_tracker,
    get_vin_validator,
    limiter,
)
from dreamcar.core.enums import BuildType
from dreamcar.core.exceptions import DecodeError, NetworkError
from dreamcar.core.logging import log_error
from dreamcar.models.performance import PerformanceCounters
from dreamcar.models.product import EnhancedProduct, RecommendationContext
from dreamcar.models.vehicle import VehicleRecord, VehicleSelection
from dreamcar.services.nhtsa import NHTSAClient
from dreamcar.services.performance import PerformanceTracker
from dreamcar.services.recommendations import RecommendationEngine
from dreamcar.services.vin import VinValidator

router = APIRouter()


# ---------------------------------------------------------------------------
# Request / Response Models
# ---------------------------------------------------------------------------


class VINDecodeRequest(BaseModel):
    vin: str


class VINValidationResponse(BaseModel):
    vin: str
    valid: bool
    check_character: Optional[str] = None


class VINDecodeResponse(BaseModel):
    vin: str
    display_name: str
    vehicle: VehicleRecord


class RecommendationRequest(BaseModel):
    category: Optional[str] = None
    build_type: Optional[str] = None
    vehicle: Union[VehicleSelection, VehicleRecord, str, None] = None
    keywords: list[str] = []

    def to_context(self) -> RecommendationContext:
        return RecommendationContext(
            category=self.category,
            build_type=self.build_type,
            vehicle=self.vehicle,
            keywords=tuple(self.keywords),
        )


class RecommendationResponse(BaseModel):
    recommendations: list[EnhancedProduct]
    count: int


class ClickRequest(BaseModel):
    product_id: str


class ImpressionRequest(BaseModel):
    count: int = Field(ge=0)


class ConversionRequest(BaseModel):
    product_id: str
    amount: float = Field(ge=0)


# ---------------------------------------------------------------------------
# VIN
# ---------------------------------------------------------------------------


@router.get("/vin/{vin}/validate", response_model=VINValidationResponse)
async def validate_vin(
    vin: str,
    validator: Annotated[VinValidator, Depends(get_vin_validator)],
):
    """Check a VIN locally: length, alphabet and check digit."""
    vin = validator.normalize(vin)
    return VINValidationResponse(
        vin=vin,
        valid=validator.is_valid(vin),
        check_character=validator.check_character(vin),
    )


@router.post("/decode-vin", response_model=VINDecodeResponse)
@limiter.limit(decode_rate_limit)
async def decode_vin_endpoint(
    request: Request,
    req: VINDecodeRequest,
    validator: Annotated[VinValidator, Depends(get_vin_validator)],
    nhtsa: Annotated[NHTSAClient, Depends(get_nhtsa)],
):
    """Validate a VIN locally, then decode it with the NHTSA vPIC API."""
    vin = validator.normalize(req.vin)
    if not validator.is_valid(vin):
        raise HTTPException(
            status_code=422, detail="Please enter a valid 17-character VIN"
        )

    try:
        vehicle = await nhtsa.decode_vin(vin)
    except NetworkError as e:
        log_error("VIN lookup failed", e, vin=vin)
        raise HTTPException(
            status_code=502, detail="Unable to decode VIN. Please try again."
        )
    except DecodeError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return VINDecodeResponse(vin=vin, display_name=vehicle.display_name, vehicle=vehicle)


# ---------------------------------------------------------------------------
# Recommendations
# ---------------------------------------------------------------------------


@router.post("/recommendations", response_model=RecommendationResponse)
async def get_recommendations(
    req: RecommendationRequest,
    engine: Annotated[RecommendationEngine, Depends(get_engine)],
):
    """Top-rated catalog products for the given build context (at most 6)."""
    results = engine.get_recommendations(req.to_context())
    return RecommendationResponse(recommendations=results, count=len(results))


@router.get("/build-types")
async def get_build_types():
    """Build types the recommendation filter recognizes."""
    return {"build_types": [bt.value for bt in BuildType]}


# ---------------------------------------------------------------------------
# Performance tracking
# ---------------------------------------------------------------------------


@router.post("/track/click", response_model=PerformanceCounters)
async def track_click(
    req: ClickRequest,
    tracker: Annotated[PerformanceTracker, Depends(get_tracker)],
):
    return tracker.record_click(req.product_id)


@router.post("/track/impressions", response_model=PerformanceCounters)
async def track_impressions(
    req: ImpressionRequest,
    tracker: Annotated[PerformanceTracker, Depends(get_tracker)],
):
    return tracker.record_impression(req.count)


@router.post("/track/conversion", response_model=PerformanceCounters)
async def track_conversion(
    req: ConversionRequest,
    tracker: Annotated[PerformanceTracker, Depends(get_tracker)],
):
    return tracker.record_conversion(req.product_id, req.amount)


@router.get("/performance", response_model=PerformanceCounters)
async def get_performance(
    tracker: Annotated[PerformanceTracker, Depends(get_tracker)],
):
    """Current counters with click-through, conversion and revenue-per-click ratios."""
    return tracker.snapshot()
