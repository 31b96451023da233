import logging
import math
from typing import Any, Dict, Optional

import ee

from ndvi_service.config.settings import get_settings
from ndvi_service.exceptions import RemoteComputeError
from ndvi_service.models.ndvi import MapDescriptor, NdviResult
from ndvi_service.services.ndvi_pipeline import NDVI_BAND
from ndvi_service.utils.async_helpers import run_in_executor_with_limit

logger = logging.getLogger(__name__)

# Reduction parameters
REDUCTION_SCALE_METERS = 10
REDUCTION_MAX_PIXELS = 1e9

# Red -> yellow -> green ramp over NDVI [0, 1]
NDVI_VIS_PARAMS = {"min": 0, "max": 1, "palette": ["red", "yellow", "green"]}


def _mean_ndvi(stats: Optional[Dict[str, Any]]) -> float:
    """Read the mean from reduceRegion output; no imagery means 0, not an error."""
    value = (stats or {}).get(NDVI_BAND)
    if value is None:
        return 0.0
    value = float(value)
    if math.isnan(value):
        return 0.0
    return value


def _map_descriptor(map_info: Optional[Dict[str, Any]]) -> Optional[MapDescriptor]:
    if not map_info or not map_info.get("mapid"):
        return None
    return MapDescriptor(map_id=map_info["mapid"], token=map_info.get("token") or "")


def _reduce_mean(ndvi_image: ee.Image, region: ee.Geometry) -> Dict[str, Any]:
    # Blocking: runs in the thread pool
    return ndvi_image.reduceRegion(
        reducer=ee.Reducer.mean(),
        geometry=region,
        scale=REDUCTION_SCALE_METERS,
        maxPixels=REDUCTION_MAX_PIXELS,
    ).getInfo()


def _register_map(ndvi_image: ee.Image) -> Dict[str, Any]:
    # Blocking: runs in the thread pool
    return ndvi_image.getMapId(NDVI_VIS_PARAMS)


async def extract(
    ndvi_image: ee.Image,
    region: ee.Geometry,
    tile_host: Optional[str] = None,
) -> NdviResult:
    """
    Evaluate the NDVI image: mean over the region, then a tile layer.

    Both evaluations form one unit of work. If either fails the whole
    extraction fails; no partial result is returned.

    Args:
        ndvi_image: Lazy NDVI image from the query pipeline
        region: Geometry to reduce over
        tile_host: Host used in the tile URL template

    Returns:
        NdviResult with the mean value and the tile URL template (or None)

    Raises:
        RemoteComputeError: If Earth Engine fails either evaluation
    """
    tile_host = tile_host or get_settings().gee_tile_host

    try:
        stats = await run_in_executor_with_limit(_reduce_mean, ndvi_image, region)
        map_info = await run_in_executor_with_limit(_register_map, ndvi_image)
    except Exception as e:
        logger.error(f"Earth Engine evaluation failed: {e}")
        raise RemoteComputeError(f"Earth Engine evaluation failed: {e}") from e

    mean_value = _mean_ndvi(stats)
    descriptor = _map_descriptor(map_info)

    if descriptor is None:
        logger.warning("Earth Engine returned no map id, mapUrl will be null")

    return NdviResult(
        mean_value=mean_value,
        tile_url_template=descriptor.tile_url_template(tile_host) if descriptor else None,
    )
