from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class NdviResponse(BaseModel):
    """Successful NDVI payload."""

    model_config = ConfigDict(populate_by_name=True)

    ndvi_value: float = Field(..., alias="ndviValue")
    map_url: Optional[str] = Field(default=None, alias="mapUrl")


class ErrorResponse(BaseModel):
    """Error payload. Kept deliberately terse; details go to the server log."""

    error: str


class HealthCheckResponse(BaseModel):
    """Health check response model."""

    status: str
    service: str
    version: str
    earth_engine: str
