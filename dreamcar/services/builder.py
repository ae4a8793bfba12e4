"""Dream car builder state: wizard step, vehicle, build type and parts.

The builder owns the state and announces every change on its EventBus;
anything that reacts to the build (recommendations, UI) subscribes there.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Optional, Union

from dreamcar.core.enums import MAX_STEP, BuildEvent, VehicleSource
from dreamcar.models.build import BuildPart, BuildSummary, BuildTypeSelection
from dreamcar.models.vehicle import VehicleRecord, VehicleSelection
from dreamcar.services.events import EventBus

logger = logging.getLogger(__name__)


class CarBuilder:
    def __init__(self, events: Optional[EventBus] = None) -> None:
        self.events = events or EventBus()
        self.current_step = 1
        self.vehicle: Optional[VehicleSelection] = None
        self.build_type: Optional[BuildTypeSelection] = None
        self.parts: list[BuildPart] = []
        self.total_cost = 0.0

    # -----------------------------------------------------------------
    # Step navigation
    # -----------------------------------------------------------------

    def go_to_step(self, step: int) -> bool:
        """Move to ``step``. Steps can be revisited but not skipped ahead."""
        if step < 1 or step > MAX_STEP:
            return False
        if step > self.current_step + 1:
            return False

        self.current_step = step
        self._emit(BuildEvent.STEP_CHANGED, step)
        return True

    # -----------------------------------------------------------------
    # Vehicle and build type
    # -----------------------------------------------------------------

    def set_vehicle_from_vin(
        self,
        vehicle: VehicleRecord,
        vin: Optional[str] = None,
        display_name: Optional[str] = None,
    ) -> VehicleSelection:
        self.vehicle = VehicleSelection(
            source=VehicleSource.VIN,
            display_name=display_name or vehicle.display_name,
            vin=vin.upper() if vin else None,
            decoded=vehicle,
        )
        logger.info("Vehicle set from VIN: %s", self.vehicle.display_name)
        self._emit(BuildEvent.VEHICLE_SELECTED, self.vehicle)
        return self.vehicle

    def set_vehicle_manually(self, description: str) -> VehicleSelection:
        self.vehicle = VehicleSelection(
            source=VehicleSource.MANUAL, description=description.strip()
        )
        logger.info("Vehicle set manually: %s", self.vehicle.description)
        self._emit(BuildEvent.VEHICLE_SELECTED, self.vehicle)
        return self.vehicle

    def select_build_type(
        self,
        build_type: Union[str, BuildTypeSelection],
        description: str = "",
        categories: Optional[list[str]] = None,
    ) -> BuildTypeSelection:
        if isinstance(build_type, str):
            build_type = BuildTypeSelection(
                type=build_type,
                description=description,
                categories=list(categories or []),
            )
        self.build_type = build_type
        logger.info("Build type selected: %s", build_type.type)
        self._emit(BuildEvent.BUILD_TYPE_SELECTED, build_type)
        return build_type

    # -----------------------------------------------------------------
    # Parts
    # -----------------------------------------------------------------

    def add_part(self, part: Union[BuildPart, dict[str, Any]]) -> None:
        if isinstance(part, dict):
            part = BuildPart(**part)
        self.parts.append(part)
        self._update_cost()
        logger.info("Part added: %s", part.id)

    def remove_part(self, part_id: str) -> None:
        self.parts = [p for p in self.parts if p.id != part_id]
        self._update_cost()
        logger.info("Part removed: %s", part_id)

    def _update_cost(self) -> None:
        self.total_cost = sum(p.price for p in self.parts)
        self.events.emit(BuildEvent.BUILD_STATE_CHANGED, self)

    # -----------------------------------------------------------------
    # Summary / export
    # -----------------------------------------------------------------

    def build_summary(self) -> BuildSummary:
        return BuildSummary(
            vehicle=self.vehicle,
            build_type=self.build_type,
            parts=list(self.parts),
            total_cost=self.total_cost,
            generated_at=datetime.now(timezone.utc),
        )

    def export_json(self) -> str:
        return self.build_summary().model_dump_json(indent=2)

    def share_text(self) -> str:
        """Plain-text summary for sharing a build."""
        vehicle = (self.vehicle.label if self.vehicle else "") or "Custom Vehicle"
        build_type = self.build_type.type if self.build_type else "Custom"
        return (
            "My Dream Car Build:\n"
            f"Vehicle: {vehicle}\n"
            f"Build Type: {build_type}\n"
            f"Total Cost: ${self.total_cost:,.2f}"
        )

    def _emit(self, event: BuildEvent, payload: Any) -> None:
        self.events.emit(event, payload)
        self.events.emit(BuildEvent.BUILD_STATE_CHANGED, self)
