from typing import Optional

from pydantic import BaseModel, ConfigDict

from dreamcar.core.enums import VehicleSource


class VehicleRecord(BaseModel):
    """Vehicle attributes decoded from the NHTSA vPIC service.

    Every field is optional: the service routinely omits values or
    reports them as "Not Applicable", and those are simply left unset.
    """

    make: Optional[str] = None
    model: Optional[str] = None
    year: Optional[str] = None
    vehicle_type: Optional[str] = None
    body_style: Optional[str] = None
    cylinders: Optional[str] = None
    displacement: Optional[str] = None
    fuel_type: Optional[str] = None
    drive_type: Optional[str] = None
    transmission: Optional[str] = None
    plant_city: Optional[str] = None
    plant_country: Optional[str] = None
    series: Optional[str] = None
    trim: Optional[str] = None
    engine_config: Optional[str] = None
    horsepower_from: Optional[str] = None
    horsepower_to: Optional[str] = None

    @property
    def display_name(self) -> str:
        """'2003 Honda Accord EX' style label, or a neutral fallback."""
        parts = [p for p in (self.year, self.make, self.model, self.trim) if p]
        return " ".join(parts) or "Vehicle Information"

    @property
    def horsepower_range(self) -> Optional[str]:
        if self.horsepower_from and self.horsepower_to:
            return f"{self.horsepower_from}-{self.horsepower_to}"
        return self.horsepower_from or self.horsepower_to


class VehicleSelection(BaseModel):
    """The vehicle a build is based on, either decoded from a VIN or typed in."""

    # A bare decoded record must not validate as an empty selection
    model_config = ConfigDict(extra="forbid")

    source: VehicleSource = VehicleSource.MANUAL
    display_name: Optional[str] = None
    description: Optional[str] = None
    vin: Optional[str] = None
    decoded: Optional[VehicleRecord] = None

    @property
    def label(self) -> str:
        """String used for compatibility matching."""
        if self.display_name or self.description:
            return self.display_name or self.description
        if self.decoded is not None:
            return self.decoded.display_name
        return ""
