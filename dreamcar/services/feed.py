"""Keeps recommendations in step with the builder.

The feed subscribes to the builder's events, rebuilds a recommendation
context from the current build state on each one and re-queries the
engine. Whoever renders the results registers with :meth:`listen`.
"""

import logging
from collections.abc import Callable
from typing import Optional

from dreamcar.core.enums import STEP_CATEGORIES, BuildEvent
from dreamcar.models.product import EnhancedProduct, RecommendationContext
from dreamcar.services.builder import CarBuilder
from dreamcar.services.performance import PerformanceTracker
from dreamcar.services.recommendations import RecommendationEngine

logger = logging.getLogger(__name__)

# Fixed contexts for pages that have no build in progress
PAGE_CONTEXTS: dict[str, RecommendationContext] = {
    "gallery": RecommendationContext(
        category="exterior",
        keywords=("supercar", "performance", "luxury", "sports car"),
        build_type="show",
    ),
    "homepage": RecommendationContext(
        category="general",
        keywords=("car", "automotive", "performance", "modification"),
        build_type="street",
    ),
    "general": RecommendationContext(
        category="tools",
        keywords=("car", "automotive", "performance"),
    ),
}

_REFRESH_EVENTS = (
    BuildEvent.VEHICLE_SELECTED,
    BuildEvent.BUILD_TYPE_SELECTED,
    BuildEvent.STEP_CHANGED,
)

ResultsListener = Callable[[list[EnhancedProduct]], None]


def page_context(page: str) -> RecommendationContext:
    """Context for a named page; unknown pages get the general context."""
    return PAGE_CONTEXTS.get(page, PAGE_CONTEXTS["general"])


def builder_context(builder: CarBuilder) -> RecommendationContext:
    """Derive a recommendation context from the builder's current state."""
    keywords: list[str] = []
    if builder.build_type:
        keywords.extend(builder.build_type.categories)

    vehicle = builder.vehicle
    if vehicle and vehicle.decoded:
        decoded = vehicle.decoded
        keywords.extend(k for k in (decoded.make, decoded.model, decoded.body_style) if k)

    return RecommendationContext(
        category=STEP_CATEGORIES.get(builder.current_step, "general"),
        build_type=builder.build_type.type if builder.build_type else None,
        vehicle=vehicle,
        keywords=tuple(keywords),
    )


class RecommendationFeed:
    def __init__(
        self,
        engine: RecommendationEngine,
        builder: CarBuilder,
        tracker: Optional[PerformanceTracker] = None,
    ) -> None:
        self.engine = engine
        self.builder = builder
        self.tracker = tracker
        self.latest: list[EnhancedProduct] = []
        self._listeners: list[ResultsListener] = []
        self._unsubscribers = [
            builder.events.subscribe(event, self._on_build_event)
            for event in _REFRESH_EVENTS
        ]

    def listen(self, listener: ResultsListener) -> None:
        self._listeners.append(listener)

    def close(self) -> None:
        """Stop following the builder."""
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []

    def _on_build_event(self, _payload: object) -> None:
        self.update()

    def update(self, **overrides) -> list[EnhancedProduct]:
        """Re-query using the builder context, with any fields overridden."""
        context = builder_context(self.builder)
        if overrides:
            context = context.merged(**overrides)
        return self.show(context)

    def show(self, context: RecommendationContext) -> list[EnhancedProduct]:
        """Query the engine, publish the results and count the impressions."""
        self.latest = self.engine.get_recommendations(context)
        if not self.latest:
            logger.info("No product recommendations available")
        elif self.tracker is not None:
            self.tracker.record_impression(len(self.latest))

        for listener in self._listeners:
            listener(self.latest)
        return self.latest
