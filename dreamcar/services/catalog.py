"""Static affiliate product catalog and link configuration.

Both are built once at startup and handed to the recommendation engine;
nothing here is mutated afterwards.
"""

from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import Optional

from pydantic import BaseModel, ConfigDict

from dreamcar.config import Settings
from dreamcar.models.product import Product


class AffiliateConfig(BaseModel):
    """Amazon Associates settings used to build product and image links."""

    model_config = ConfigDict(frozen=True)

    associate_tag: str = "dreamcar-20"
    base_url: str = "https://www.amazon.com"
    image_host: str = "https://images-na.ssl-images-amazon.com"
    image_size: str = "_SX300_"
    link_code: str = "as2"
    camp: str = "1789"
    creative: str = "9325"

    @classmethod
    def from_settings(cls, settings: Settings) -> "AffiliateConfig":
        return cls(
            associate_tag=settings.associate_tag,
            base_url=settings.affiliate_base_url.rstrip("/"),
            image_host=settings.image_host.rstrip("/"),
            image_size=settings.image_size,
        )


class Catalog:
    """Products grouped by catalog section, in display order."""

    def __init__(self, groups: Mapping[str, tuple[Product, ...]]) -> None:
        self._groups = MappingProxyType({k: tuple(v) for k, v in groups.items()})
        self._products = tuple(p for group in self._groups.values() for p in group)
        self._by_id = MappingProxyType({p.id: p for p in self._products})

    @property
    def groups(self) -> Mapping[str, tuple[Product, ...]]:
        return self._groups

    def products(self) -> tuple[Product, ...]:
        """All products flattened: section order, then order within the section."""
        return self._products

    def get(self, product_id: str) -> Optional[Product]:
        return self._by_id.get(product_id)

    def __iter__(self) -> Iterator[Product]:
        return iter(self._products)

    def __len__(self) -> int:
        return len(self._products)

    @classmethod
    def default(cls) -> "Catalog":
        return cls(DEFAULT_CATALOG)


def _product(
    id: str,
    name: str,
    category: str,
    price: str,
    rating: float,
    description: str,
    keywords: list[str],
    compatible: list[str],
) -> Product:
    return Product(
        id=id,
        name=name,
        category=category,
        price=price,
        rating=rating,
        description=description,
        keywords=tuple(keywords),
        compatible_vehicles=tuple(compatible),
    )


DEFAULT_CATALOG: dict[str, tuple[Product, ...]] = {
    # Engine & Performance
    "engine": (
        _product(
            "B075ZQVQZ1",
            "K&N Cold Air Intake Kit",
            "Engine",
            "$329.99",
            4.5,
            "High-Performance Cold Air Intake System",
            ["intake", "cold air", "performance", "horsepower"],
            ["Honda Civic", "Subaru WRX", "Ford Mustang"],
        ),
        _product(
            "B00JGZM6G8",
            "Borla ATAK Cat-Back Exhaust",
            "Exhaust",
            "$899.99",
            4.7,
            "Aggressive Sound Cat-Back Exhaust System",
            ["exhaust", "borla", "catback", "performance", "sound"],
            ["Ford Mustang", "Chevrolet Camaro", "Dodge Charger"],
        ),
        _product(
            "B08K4X7QRY",
            "NGK Iridium IX Spark Plugs",
            "Engine",
            "$89.99",
            4.8,
            "High-Performance Iridium Spark Plugs Set",
            ["spark plugs", "ngk", "iridium", "performance"],
            ["universal"],
        ),
    ),
    # Suspension & Handling
    "suspension": (
        _product(
            "B01N4QZ8ZX",
            "Coilover Suspension Kit",
            "Suspension",
            "$1299.99",
            4.6,
            "Adjustable Height Coilover Suspension",
            ["coilovers", "suspension", "adjustable", "lowering"],
            ["Honda Civic", "Subaru WRX", "BMW 3 Series"],
        ),
        _product(
            "B07YD8MXTG",
            "Sway Bar Links Set",
            "Suspension",
            "$129.99",
            4.4,
            "Heavy Duty Sway Bar End Links",
            ["sway bar", "links", "handling", "stability"],
            ["universal"],
        ),
    ),
    # Exterior & Aero
    "exterior": (
        _product(
            "B08XYZHMT4",
            "Carbon Fiber Front Splitter",
            "Aerodynamics",
            "$599.99",
            4.3,
            "Real Carbon Fiber Front Lip Splitter",
            ["carbon fiber", "splitter", "aero", "front lip"],
            ["BMW M3", "Audi S4", "Mercedes C63"],
        ),
        _product(
            "B07MNKQS5Z",
            "LED Headlight Conversion Kit",
            "Lighting",
            "$199.99",
            4.5,
            "Plug-and-Play LED Headlight Bulbs",
            ["led", "headlights", "lighting", "conversion"],
            ["universal"],
        ),
    ),
    # Interior & Electronics
    "interior": (
        _product(
            "B08GY2J4QN",
            "Racing Bucket Seats",
            "Interior",
            "$899.99",
            4.6,
            "Carbon Fiber Racing Bucket Seats Pair",
            ["racing seats", "bucket seats", "carbon fiber"],
            ["universal"],
        ),
        _product(
            "B07Q2R8KPJ",
            "Performance Steering Wheel",
            "Interior",
            "$299.99",
            4.4,
            "Suede Racing Steering Wheel",
            ["steering wheel", "racing", "suede", "performance"],
            ["universal"],
        ),
    ),
    # Tools & Maintenance
    "tools": (
        _product(
            "B07NNFM8JY",
            "OBD2 Scanner Tool",
            "Diagnostics",
            "$129.99",
            4.7,
            "Professional OBD2 Diagnostic Scanner",
            ["obd2", "scanner", "diagnostic", "tool"],
            ["universal"],
        ),
        _product(
            "B08X1BK3YZ",
            "Torque Wrench Set",
            "Tools",
            "$199.99",
            4.8,
            'Professional Torque Wrench Set 1/4" 3/8" 1/2"',
            ["torque wrench", "tools", "professional", "set"],
            ["universal"],
        ),
    ),
}
