"""FastAPI dependency injection.

Each provider builds its service once per process; tests swap them out
through ``app.dependency_overrides``.
"""

from functools import lru_cache

from slowapi import Limiter
from slowapi.util import get_remote_address

from dreamcar.config import get_settings
from dreamcar.services.catalog import AffiliateConfig, Catalog
from dreamcar.services.nhtsa import NHTSAClient
from dreamcar.services.performance import JsonFileStore, PerformanceTracker
from dreamcar.services.recommendations import RecommendationEngine
from dreamcar.services.vin import VinValidator

limiter = Limiter(key_func=get_remote_address)


def decode_rate_limit() -> str:
    return get_settings().decode_rate_limit


@lru_cache
def get_vin_validator() -> VinValidator:
    return VinValidator()


@lru_cache
def get_engine() -> RecommendationEngine:
    settings = get_settings()
    return RecommendationEngine(Catalog.default(), AffiliateConfig.from_settings(settings))


@lru_cache
def get_tracker() -> PerformanceTracker:
    return PerformanceTracker(JsonFileStore(get_settings().counters_path))


@lru_cache
def get_nhtsa() -> NHTSAClient:
    return NHTSAClient()
