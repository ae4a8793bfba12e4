from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from dreamcar.models.vehicle import VehicleSelection


class BuildTypeSelection(BaseModel):
    type: str
    description: str = ""
    categories: list[str] = []


class BuildPart(BaseModel):
    id: str
    name: str = ""
    price: float = 0.0


class BuildSummary(BaseModel):
    vehicle: Optional[VehicleSelection] = None
    build_type: Optional[BuildTypeSelection] = None
    parts: list[BuildPart] = []
    total_cost: float = 0.0
    generated_at: datetime
