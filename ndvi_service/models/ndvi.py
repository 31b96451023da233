from dataclasses import dataclass
from typing import Any, Optional, Tuple


@dataclass(frozen=True)
class Coordinate:
    """A point parsed from the request query string (decimal degrees)."""

    latitude: float
    longitude: float


@dataclass(frozen=True)
class ImageQuerySpec:
    """Everything the NDVI query depends on; fully determined by the region."""

    region: Any  # ee.Geometry
    collection: str
    start_date: str
    end_date: str
    cloud_cover_max_percent: float
    bands: Tuple[str, str]  # (nir, red)


@dataclass(frozen=True)
class MapDescriptor:
    """Identifier pair returned by Earth Engine when a map layer is registered."""

    map_id: str
    token: str

    def tile_url_template(self, host: str) -> str:
        return f"https://{host}/map/{self.map_id}/{{z}}/{{x}}/{{y}}?token={self.token}"


@dataclass(frozen=True)
class NdviResult:
    mean_value: float
    tile_url_template: Optional[str]
