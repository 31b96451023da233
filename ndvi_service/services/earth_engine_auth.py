import json
import logging
from typing import Any, Dict, Optional

import ee

from ndvi_service.config.settings import Settings, get_settings
from ndvi_service.exceptions import AuthError
from ndvi_service.utils.async_helpers import run_in_executor

logger = logging.getLogger(__name__)


def load_service_account_key(key_file: str) -> Dict[str, Any]:
    """
    Read and parse a service account JSON key.

    Args:
        key_file: Filesystem path of the JSON key

    Returns:
        Parsed key material

    Raises:
        AuthError: If the file cannot be read, is not JSON, or has no client_email
    """
    try:
        with open(key_file, "r", encoding="utf-8") as f:
            key_data = json.load(f)
    except OSError as e:
        raise AuthError(f"Cannot read service account key {key_file}: {e}") from e
    except json.JSONDecodeError as e:
        raise AuthError(f"Service account key {key_file} is not valid JSON: {e}") from e

    if not isinstance(key_data, dict) or not key_data.get("client_email"):
        raise AuthError(f"Service account key {key_file} has no client_email")

    return key_data


class EarthEngineAuthenticator:
    """Authenticate with Google Earth Engine and initialize the client library."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    async def __call__(self) -> None:
        await run_in_executor(self._authenticate_and_initialize)

    def _authenticate_and_initialize(self) -> None:
        key_file = self.settings.gee_service_account_key

        if key_file:
            # Key file is read on every attempt so a fixed file is picked up on retry
            key_data = load_service_account_key(key_file)
            project = self.settings.gee_project_id or key_data.get("project_id")
            try:
                credentials = ee.ServiceAccountCredentials(
                    key_data["client_email"], key_data=json.dumps(key_data)
                )
                ee.Initialize(credentials, project=project)
            except Exception as e:
                raise AuthError(f"Earth Engine rejected service account credentials: {e}") from e
            logger.info(f"Authenticated with Earth Engine as {key_data['client_email']}")
        else:
            # Use default authentication (requires `earthengine authenticate`)
            logger.warning("No service account key configured, using default Earth Engine credentials")
            try:
                ee.Initialize(project=self.settings.gee_project_id or None)
            except Exception as e:
                raise AuthError(f"Earth Engine default authentication failed: {e}") from e
