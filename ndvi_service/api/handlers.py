from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse
from typing import Optional
import logging

from ndvi_service.api.assembler import assemble_error, assemble_success
from ndvi_service.models.responses import ErrorResponse, NdviResponse
from ndvi_service.services.ndvi_service import NdviService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["ndvi"])


# The service (and its session gate) lives on the application instance
def get_ndvi_service(request: Request) -> NdviService:
    return request.app.state.ndvi_service


@router.get(
    "/ndvi",
    response_model=NdviResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def get_ndvi(
    lat: Optional[str] = Query(None, description="Latitude in decimal degrees"),
    lon: Optional[str] = Query(None, description="Longitude in decimal degrees"),
    ndvi_service: NdviService = Depends(get_ndvi_service),
) -> JSONResponse:
    """
    Mean NDVI and a map tile layer for a 500 m box around a point.

    Uses the 2024 Sentinel-2 median composite, scenes under 20% cloud.
    """
    logger.info(f"NDVI request for coordinates: lat={lat}, lon={lon}")

    try:
        result = await ndvi_service.get_ndvi(lat, lon)
    except Exception as e:
        return assemble_error(e)

    return assemble_success(result)
