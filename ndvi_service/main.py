import logging
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI

from ndvi_service.config.settings import get_settings
from ndvi_service.api.handlers import router
from ndvi_service.models.responses import HealthCheckResponse
from ndvi_service.services.earth_engine_auth import EarthEngineAuthenticator
from ndvi_service.services.ndvi_service import NdviService
from ndvi_service.services.session_gate import SessionGate
from ndvi_service.utils.async_helpers import shutdown_executor

# Get application settings
settings = get_settings()

# Configure logging
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application startup and shutdown."""
    # Startup; Earth Engine itself is initialized lazily by the first request
    logger.info(f"Starting {settings.app_name} {settings.app_version}")
    logger.info(
        f"Earth Engine credentials: {settings.gee_service_account_key or 'default'}"
    )

    yield

    # Shutdown
    logger.info(f"Shutting down {settings.app_name}")
    shutdown_executor()


def create_app(ndvi_service: Optional[NdviService] = None) -> FastAPI:
    """Build the application with one NDVI service, and so one session gate, per process."""
    app = FastAPI(title=settings.app_name, version=settings.app_version, lifespan=lifespan)

    if ndvi_service is None:
        ndvi_service = NdviService(SessionGate(EarthEngineAuthenticator(settings)), settings)
    app.state.ndvi_service = ndvi_service

    app.include_router(router)

    @app.get("/health", response_model=HealthCheckResponse)
    async def health_check() -> HealthCheckResponse:
        """Report service status without triggering the Earth Engine handshake."""
        return HealthCheckResponse(
            status="healthy",
            service=settings.app_name,
            version=settings.app_version,
            earth_engine=app.state.ndvi_service.session_gate.state.value,
        )

    return app


app = create_app()


# For development/testing only
if __name__ == "__main__":
    import uvicorn

    logger.info("Starting FastAPI server for development...")
    uvicorn.run(
        "ndvi_service.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
