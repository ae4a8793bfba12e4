"""Rule-based product recommendations for the current build.

The pipeline is a strict sequence of filters (category, build type,
vehicle, keywords), each narrowing the previous step's output, followed
by a stable rating sort and a cap of ``MAX_RECOMMENDATIONS``.
"""

import logging
from collections.abc import Iterable, Sequence
from typing import Optional, Union
from urllib.parse import quote

from dreamcar.core.enums import (
    BUILD_TYPE_KEYWORDS,
    BuildType,
    MAX_RECOMMENDATIONS,
    UNIVERSAL_FITMENT,
)
from dreamcar.models.product import EnhancedProduct, Product, RecommendationContext
from dreamcar.models.vehicle import VehicleRecord, VehicleSelection
from dreamcar.services.catalog import AffiliateConfig, Catalog
from dreamcar.utils.converters import parse_price

logger = logging.getLogger(__name__)

VehicleLike = Union[VehicleSelection, VehicleRecord, str, None]

# Characters encodeURIComponent leaves alone, beyond quote()'s own "_.-~"
_URI_COMPONENT_SAFE = "!*'()"


def vehicle_label(vehicle: VehicleLike) -> str:
    """Normalize a vehicle to the string used for compatibility matching."""
    if vehicle is None:
        return ""
    if isinstance(vehicle, str):
        return vehicle
    if isinstance(vehicle, VehicleSelection):
        return vehicle.label
    return vehicle.display_name


def filter_by_category(products: Iterable[Product], category: str) -> list[Product]:
    needle = category.lower()
    return [p for p in products if needle in p.category.lower()]


def filter_by_build_type(products: Iterable[Product], build_type: str) -> list[Product]:
    """Keep products with a keyword containing one of the build type's keywords.

    An unrecognized build type has no relevant keywords and so keeps nothing.
    """
    known = BuildType.from_string(build_type)
    relevant = BUILD_TYPE_KEYWORDS[known] if known else ()
    if not relevant:
        logger.debug("Unknown build type %r filters out every product", build_type)
    return [
        p
        for p in products
        if any(rk in pk.lower() for rk in relevant for pk in p.keywords)
    ]


def filter_by_vehicle(products: Iterable[Product], vehicle: VehicleLike) -> list[Product]:
    """Keep universal-fit products and those whose fitment list names the vehicle."""
    label = vehicle_label(vehicle).lower()
    return [
        p
        for p in products
        if UNIVERSAL_FITMENT in p.compatible_vehicles
        or any(c.lower() in label for c in p.compatible_vehicles)
    ]


def filter_by_keywords(
    products: Iterable[Product], keywords: Sequence[str]
) -> list[Product]:
    needles = [k.lower() for k in keywords]
    return [
        p
        for p in products
        if any(n in pk.lower() for n in needles for pk in p.keywords)
    ]


class RecommendationEngine:
    """Filters and ranks the catalog against a recommendation context.

    Holds only immutable state, so one instance can serve every caller.
    """

    def __init__(self, catalog: Catalog, config: AffiliateConfig) -> None:
        self.catalog = catalog
        self.config = config

    def get_recommendations(
        self, context: Optional[RecommendationContext] = None
    ) -> list[EnhancedProduct]:
        context = context or RecommendationContext()
        products: list[Product] = list(self.catalog.products())

        if context.category:
            products = filter_by_category(products, context.category)
        if context.build_type:
            products = filter_by_build_type(products, context.build_type)
        if context.vehicle:
            products = filter_by_vehicle(products, context.vehicle)
        if context.keywords:
            products = filter_by_keywords(products, context.keywords)

        # sorted() is stable, so equal ratings keep catalog order
        ranked = sorted(products, key=lambda p: p.rating, reverse=True)
        results = [self.enhance(p) for p in ranked[:MAX_RECOMMENDATIONS]]
        logger.debug(
            "Recommendations category=%s build_type=%s count=%d",
            context.category,
            context.build_type,
            len(results),
        )
        return results

    def get_product(self, product_id: str) -> Optional[Product]:
        return self.catalog.get(product_id)

    def all_products(self) -> tuple[Product, ...]:
        return self.catalog.products()

    def enhance(self, product: Product) -> EnhancedProduct:
        return EnhancedProduct(
            **product.model_dump(),
            affiliate_url=self.affiliate_url(product.id),
            image_url=self.image_url(product.id),
            price_numeric=parse_price(product.price),
        )

    def affiliate_url(self, product_id: str, **custom_params: str) -> str:
        """Build an Amazon product link; ``custom_params`` extend or override the defaults."""
        params = {
            "tag": self.config.associate_tag,
            "linkCode": self.config.link_code,
            "camp": self.config.camp,
            "creative": self.config.creative,
            **custom_params,
        }
        query = "&".join(
            f"{key}={quote(str(value), safe=_URI_COMPONENT_SAFE)}"
            for key, value in params.items()
        )
        return f"{self.config.base_url}/dp/{product_id}?{query}"

    def image_url(self, product_id: str, size: Optional[str] = None) -> str:
        image_size = size or self.config.image_size
        return f"{self.config.image_host}/images/P/{product_id}.01{image_size}.jpg"
