"""Enums and lookup tables for build-related constants."""

from enum import Enum


class BuildType(str, Enum):
    """Build styles offered in the builder's second step."""

    TRACK = "track"
    DRIFT = "drift"
    DRAG = "drag"
    STREET = "street"
    SHOW = "show"
    AUTOCROSS = "autocross"

    @classmethod
    def from_string(cls, value: str | None) -> "BuildType | None":
        """Convert string to enum, returning None if invalid."""
        if not value:
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


class VehicleSource(str, Enum):
    """How the vehicle in a build was chosen."""

    VIN = "vin"
    MANUAL = "manual"


class BuildEvent(str, Enum):
    """Notifications emitted by the build-state owner."""

    VEHICLE_SELECTED = "vehicle_selected"
    BUILD_TYPE_SELECTED = "build_type_selected"
    STEP_CHANGED = "step_changed"
    BUILD_STATE_CHANGED = "build_state_changed"


# Product keywords that make a part relevant to each build type.
# Unknown build types map to nothing, which filters every product out.
BUILD_TYPE_KEYWORDS: dict[str, tuple[str, ...]] = {
    "track": ("suspension", "brakes", "aero", "engine", "racing"),
    "drift": ("suspension", "tires", "differential", "angle kit"),
    "drag": ("engine", "transmission", "tires", "nitrous"),
    "street": ("intake", "exhaust", "wheels", "lighting"),
    "show": ("exterior", "interior", "lighting", "wheels"),
    "autocross": ("suspension", "tires", "brakes", "sway bar"),
}

# Builder step -> catalog category used for contextual recommendations
STEP_CATEGORIES: dict[int, str] = {
    1: "tools",
    2: "general",
    3: "parts",
    4: "accessories",
}

MAX_STEP = 4
MAX_RECOMMENDATIONS = 6
UNIVERSAL_FITMENT = "universal"
