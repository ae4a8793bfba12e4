"""Async client for the NHTSA vPIC API.

No authentication required. All endpoints return JSON with ?format=json.
"""

import logging
import time
from typing import Any, Optional

import httpx

from dreamcar.config import get_settings
from dreamcar.core.exceptions import DecodeError, NetworkError
from dreamcar.core.logging import log_external_call
from dreamcar.models.vehicle import VehicleRecord

logger = logging.getLogger(__name__)

NOT_APPLICABLE = "Not Applicable"

# vPIC variable name -> VehicleRecord field
FIELD_MAP: dict[str, str] = {
    "Make": "make",
    "Model": "model",
    "Model Year": "year",
    "Vehicle Type": "vehicle_type",
    "Body Class": "body_style",
    "Engine Number of Cylinders": "cylinders",
    "Displacement (L)": "displacement",
    "Fuel Type - Primary": "fuel_type",
    "Drive Type": "drive_type",
    "Transmission Style": "transmission",
    "Plant City": "plant_city",
    "Plant Country": "plant_country",
    "Series": "series",
    "Trim": "trim",
    "Engine Configuration": "engine_config",
    "Engine HP (From)": "horsepower_from",
    "Engine HP (To)": "horsepower_to",
}


def parse_vehicle_data(results: list[dict[str, Any]]) -> VehicleRecord:
    """Map vPIC's flat Variable/Value list onto a VehicleRecord.

    Unmapped variables, empty values and "Not Applicable" are skipped.
    """
    fields: dict[str, str] = {}
    for result in results:
        if not isinstance(result, dict):
            continue
        field = FIELD_MAP.get(result.get("Variable") or "")
        value = result.get("Value")
        if field is None or value is None:
            continue
        value = str(value).strip()
        if value and value != NOT_APPLICABLE:
            fields[field] = value
    return VehicleRecord(**fields)


class NHTSAClient:
    """Async client for the NHTSA vPIC API."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        settings = get_settings()
        self.base_url = (base_url or settings.nhtsa_base_url).rstrip("/")
        self.client = client or httpx.AsyncClient(
            timeout=timeout or settings.nhtsa_timeout
        )

    async def decode_vin(self, vin: str) -> VehicleRecord:
        """Decode a VIN and return the normalized vehicle record.

        Makes a single attempt; retry policy belongs to the caller.

        Raises:
            NetworkError: transport failure, timeout or non-2xx status.
            DecodeError: the service reported an error or sent unreadable JSON.
        """
        url = f"{self.base_url}/vehicles/DecodeVin/{vin}?format=json"
        start = time.time()
        try:
            resp = await self.client.get(url)
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            log_external_call("nhtsa", "decode_vin", False, _elapsed_ms(start))
            raise NetworkError(
                f"HTTP error! status: {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            log_external_call("nhtsa", "decode_vin", False, _elapsed_ms(start))
            raise NetworkError(f"VIN lookup failed: {e}") from e

        try:
            data = resp.json()
        except ValueError as e:
            log_external_call("nhtsa", "decode_vin", False, _elapsed_ms(start))
            raise DecodeError() from e

        message = data.get("Message") if isinstance(data, dict) else None
        if not isinstance(data, dict) or (
            isinstance(message, str) and "error" in message
        ):
            log_external_call("nhtsa", "decode_vin", False, _elapsed_ms(start))
            logger.warning("vPIC reported an error for %s: %s", vin, message)
            raise DecodeError()

        log_external_call("nhtsa", "decode_vin", True, _elapsed_ms(start))
        return parse_vehicle_data(data.get("Results") or [])

    async def close(self) -> None:
        await self.client.aclose()


def _elapsed_ms(start: float) -> float:
    return (time.time() - start) * 1000
