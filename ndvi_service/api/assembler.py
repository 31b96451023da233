import logging

from fastapi.responses import JSONResponse

from ndvi_service.exceptions import AuthError, RemoteComputeError, ValidationError
from ndvi_service.models.ndvi import NdviResult
from ndvi_service.models.responses import ErrorResponse, NdviResponse

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Failed to fetch NDVI"


def assemble_success(result: NdviResult) -> JSONResponse:
    body = NdviResponse(ndvi_value=result.mean_value, map_url=result.tile_url_template)
    return JSONResponse(status_code=200, content=body.model_dump(by_alias=True))


def assemble_error(error: Exception) -> JSONResponse:
    """
    Map a failure to an HTTP response.

    Only validation failures reach the client with their message. Everything
    else is logged in full and answered with a generic 500.
    """
    if isinstance(error, ValidationError):
        logger.warning(f"Rejected NDVI request: {error}")
        return JSONResponse(
            status_code=400, content=ErrorResponse(error=str(error)).model_dump()
        )

    if isinstance(error, AuthError):
        logger.error(f"NDVI API error (authentication): {error}")
    elif isinstance(error, RemoteComputeError):
        logger.error(f"NDVI API error (remote compute): {error}")
    else:
        logger.exception(f"NDVI API error (unexpected): {error}", exc_info=error)

    return JSONResponse(
        status_code=500, content=ErrorResponse(error=GENERIC_ERROR_MESSAGE).model_dump()
    )
