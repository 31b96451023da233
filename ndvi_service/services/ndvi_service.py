import logging
from typing import Optional

from ndvi_service.config.settings import Settings, get_settings
from ndvi_service.models.ndvi import NdviResult
from ndvi_service.services.ndvi_pipeline import compute_ndvi
from ndvi_service.services.region_builder import build_region, parse_coordinate
from ndvi_service.services.result_extractor import extract
from ndvi_service.services.session_gate import SessionGate

logger = logging.getLogger(__name__)


class NdviService:
    """Business logic for point NDVI lookups."""

    def __init__(self, session_gate: SessionGate, settings: Optional[Settings] = None):
        self.session_gate = session_gate
        self.settings = settings or get_settings()

    async def get_ndvi(self, lat: Optional[str], lon: Optional[str]) -> NdviResult:
        """
        Compute mean NDVI and a tile layer around a point.

        Args:
            lat: Raw latitude query parameter
            lon: Raw longitude query parameter

        Returns:
            NdviResult for the 500 m box around the point

        Raises:
            AuthError: If the Earth Engine handshake fails
            ValidationError: If lat/lon are missing or not numeric
            RemoteComputeError: If Earth Engine fails to build or evaluate the query
        """
        await self.session_gate.ensure_ready()

        coordinate = parse_coordinate(lat, lon)
        region = build_region(coordinate)
        ndvi_image = compute_ndvi(region)

        result = await extract(ndvi_image, region, tile_host=self.settings.gee_tile_host)
        logger.info(
            f"NDVI for {coordinate.latitude}, {coordinate.longitude}: {result.mean_value}"
        )
        return result
