from decimal import Decimal
from typing import Annotated, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer

from dreamcar.models.vehicle import VehicleRecord, VehicleSelection

# Serialize prices as JSON numbers rather than pydantic's default string form
Price = Annotated[
    Decimal, PlainSerializer(float, return_type=float, when_used="json")
]


class Product(BaseModel):
    """A static catalog entry. Loaded once and never mutated."""

    model_config = ConfigDict(frozen=True)

    id: str  # Amazon ASIN
    name: str
    category: str
    price: str  # display string, e.g. "$899.99"
    rating: float = Field(ge=0, le=5)
    description: str = ""
    keywords: tuple[str, ...] = ()
    compatible_vehicles: tuple[str, ...] = ()


class EnhancedProduct(Product):
    """A product ready for display: affiliate link, image and numeric price attached."""

    affiliate_url: str
    image_url: str
    price_numeric: Price


class RecommendationContext(BaseModel):
    """Facts about the current build used to filter the catalog for one query."""

    model_config = ConfigDict(frozen=True)

    category: Optional[str] = None
    build_type: Optional[str] = None
    vehicle: Union[VehicleSelection, VehicleRecord, str, None] = None
    keywords: tuple[str, ...] = ()

    def merged(self, **overrides) -> "RecommendationContext":
        """Return a copy with the given fields replaced."""
        if "keywords" in overrides:
            overrides["keywords"] = tuple(overrides["keywords"] or ())
        return self.model_copy(update=overrides)
