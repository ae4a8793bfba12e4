"""Tests for the NHTSA vPIC client and result normalization.

HTTP is stubbed with httpx.MockTransport, so nothing leaves the process.
"""

import asyncio

import httpx
import pytest

from dreamcar.core.exceptions import DecodeError, NetworkError
from dreamcar.services.nhtsa import NHTSAClient, parse_vehicle_data

VIN = "1HGCM82633A004352"

SAMPLE_RESULTS = [
    {"Variable": "Make", "Value": "HONDA"},
    {"Variable": "Model", "Value": "Accord"},
    {"Variable": "Model Year", "Value": "2003"},
    {"Variable": "Body Class", "Value": "Coupe"},
    {"Variable": "Engine Number of Cylinders", "Value": "6"},
    {"Variable": "Displacement (L)", "Value": "3.0"},
    {"Variable": "Drive Type", "Value": ""},
    {"Variable": "Trim", "Value": "EX-V6"},
    {"Variable": "Plant Country", "Value": "Not Applicable"},
    {"Variable": "Engine HP (From)", "Value": "240"},
    {"Variable": "Error Code", "Value": "0"},
    {"Variable": "Series", "Value": None},
]


def _client(handler) -> NHTSAClient:
    transport = httpx.MockTransport(handler)
    return NHTSAClient(
        base_url="https://vpic.test/api",
        client=httpx.AsyncClient(transport=transport),
    )


def _decode(handler):
    async def run():
        client = _client(handler)
        try:
            return await client.decode_vin(VIN)
        finally:
            await client.close()

    return asyncio.run(run())


# =============================================================================
# parse_vehicle_data
# =============================================================================


class TestParseVehicleData:
    def test_maps_known_fields(self):
        record = parse_vehicle_data(SAMPLE_RESULTS)
        assert record.make == "HONDA"
        assert record.model == "Accord"
        assert record.year == "2003"
        assert record.body_style == "Coupe"
        assert record.cylinders == "6"
        assert record.displacement == "3.0"
        assert record.trim == "EX-V6"
        assert record.horsepower_from == "240"

    def test_drops_empty_and_not_applicable(self):
        record = parse_vehicle_data(SAMPLE_RESULTS)
        assert record.drive_type is None
        assert record.plant_country is None
        assert record.series is None

    def test_unmapped_variables_ignored(self):
        record = parse_vehicle_data([{"Variable": "Error Code", "Value": "0"}])
        assert record.model_dump(exclude_none=True) == {}

    def test_empty_results(self):
        record = parse_vehicle_data([])
        assert record.display_name == "Vehicle Information"

    def test_display_name(self):
        record = parse_vehicle_data(SAMPLE_RESULTS)
        assert record.display_name == "2003 HONDA Accord EX-V6"

    def test_horsepower_range(self):
        record = parse_vehicle_data(
            [
                {"Variable": "Engine HP (From)", "Value": "240"},
                {"Variable": "Engine HP (To)", "Value": "260"},
            ]
        )
        assert record.horsepower_range == "240-260"


# =============================================================================
# decode_vin
# =============================================================================


class TestDecodeVin:
    def test_success(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            return httpx.Response(
                200,
                json={
                    "Count": len(SAMPLE_RESULTS),
                    "Message": "Results returned successfully",
                    "Results": SAMPLE_RESULTS,
                },
            )

        record = _decode(handler)
        assert record.make == "HONDA"
        assert seen["url"] == (
            f"https://vpic.test/api/vehicles/DecodeVin/{VIN}?format=json"
        )

    def test_non_success_status_is_network_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(503, text="unavailable")

        with pytest.raises(NetworkError) as exc_info:
            _decode(handler)
        assert exc_info.value.status_code == 503

    def test_transport_failure_is_network_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(NetworkError):
            _decode(handler)

    def test_timeout_is_network_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(NetworkError):
            _decode(handler)

    def test_error_message_is_decode_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200, json={"Message": "An error occurred", "Results": []}
            )

        with pytest.raises(DecodeError, match="Invalid VIN or API error"):
            _decode(handler)

    def test_invalid_json_is_decode_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>oops</html>")

        with pytest.raises(DecodeError):
            _decode(handler)

    def test_decode_error_is_not_network_error(self):
        assert not issubclass(DecodeError, NetworkError)
        assert not issubclass(NetworkError, DecodeError)

    def test_single_attempt(self):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(500)

        with pytest.raises(NetworkError):
            _decode(handler)
        assert len(calls) == 1
