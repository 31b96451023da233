import math
from typing import Optional

import ee

from ndvi_service.exceptions import RemoteComputeError, ValidationError
from ndvi_service.models.ndvi import Coordinate

# Buffer radius around the requested point, in meters
REGION_BUFFER_METERS = 500

MISSING_COORDINATES_MESSAGE = "lat and lon required"
NON_NUMERIC_COORDINATES_MESSAGE = "lat and lon must be numeric"


def _parse_degrees(value: str) -> float:
    try:
        degrees = float(value)
    except (TypeError, ValueError):
        raise ValidationError(NON_NUMERIC_COORDINATES_MESSAGE)
    if not math.isfinite(degrees):
        raise ValidationError(NON_NUMERIC_COORDINATES_MESSAGE)
    return degrees


def parse_coordinate(lat: Optional[str], lon: Optional[str]) -> Coordinate:
    """
    Build a Coordinate from raw query parameters.

    Range is not checked: lat=200 is handed to Earth Engine as-is and any
    rejection surfaces from there.

    Raises:
        ValidationError: If either value is missing or is not a finite number
    """
    if not lat or not lon:
        raise ValidationError(MISSING_COORDINATES_MESSAGE)

    return Coordinate(latitude=_parse_degrees(lat), longitude=_parse_degrees(lon))


def build_region(coordinate: Coordinate) -> ee.Geometry:
    """Buffer the point and reduce it to its bounding box (a rectangle, not a circle)."""
    try:
        return (
            ee.Geometry.Point([coordinate.longitude, coordinate.latitude])
            .buffer(REGION_BUFFER_METERS)
            .bounds()
        )
    except Exception as e:
        raise RemoteComputeError(f"Failed to build region for {coordinate}: {e}") from e
