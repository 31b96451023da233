"""
NDVI query construction.

Builds the Earth Engine computation graph for a region: Sentinel-2 surface
reflectance over a fixed one-year window, filtered by scene cloudiness,
reduced to a per-pixel median composite, then the normalized difference of
the NIR and red bands. Nothing here is evaluated; Earth Engine only runs the
graph when the result extractor asks for a reduction or a map.
"""

import logging

import ee

from ndvi_service.exceptions import RemoteComputeError
from ndvi_service.models.ndvi import ImageQuerySpec

logger = logging.getLogger(__name__)

# Query policy (not request parameters)
SENTINEL2_COLLECTION = "COPERNICUS/S2_SR"
START_DATE = "2024-01-01"
END_DATE = "2024-12-31"
MAX_CLOUD_COVER_PERCENT = 20
CLOUD_COVER_PROPERTY = "CLOUDY_PIXEL_PERCENTAGE"
NIR_BAND = "B8"
RED_BAND = "B4"
NDVI_BAND = "NDVI"


def build_query_spec(region: ee.Geometry) -> ImageQuerySpec:
    """Pin the query policy constants to a region."""
    return ImageQuerySpec(
        region=region,
        collection=SENTINEL2_COLLECTION,
        start_date=START_DATE,
        end_date=END_DATE,
        cloud_cover_max_percent=MAX_CLOUD_COVER_PERCENT,
        bands=(NIR_BAND, RED_BAND),
    )


def build_ndvi_image(spec: ImageQuerySpec) -> ee.Image:
    """
    Turn a query spec into a lazy single-band NDVI image.

    Args:
        spec: Region, date window, cloud ceiling and band pair

    Returns:
        Unevaluated ee.Image with one band named NDVI

    Raises:
        RemoteComputeError: If the Earth Engine client rejects the graph
    """
    try:
        collection = (
            ee.ImageCollection(spec.collection)
            .filterBounds(spec.region)
            .filterDate(spec.start_date, spec.end_date)
            .filter(ee.Filter.lt(CLOUD_COVER_PROPERTY, spec.cloud_cover_max_percent))
        )

        composite = collection.median()
        return composite.normalizedDifference(list(spec.bands)).rename(NDVI_BAND)
    except Exception as e:
        logger.error(f"Failed to build NDVI query: {e}")
        raise RemoteComputeError(f"Failed to build NDVI query: {e}") from e


def compute_ndvi(region: ee.Geometry) -> ee.Image:
    """Build the NDVI image for a region using the fixed query policy."""
    return build_ndvi_image(build_query_spec(region))
