from __future__ import annotations

from collections.abc import Iterator

import pytest

from fakes import FakeEarthEngine
from ndvi_service.services import (
    earth_engine_auth,
    ndvi_pipeline,
    region_builder,
    result_extractor,
)
from ndvi_service.utils.async_helpers import shutdown_executor


@pytest.fixture
def fake_ee(monkeypatch: pytest.MonkeyPatch) -> FakeEarthEngine:
    fake = FakeEarthEngine()
    for module in (earth_engine_auth, ndvi_pipeline, region_builder, result_extractor):
        monkeypatch.setattr(module, "ee", fake)
    return fake


@pytest.fixture(autouse=True)
def _reset_executor() -> Iterator[None]:
    yield
    shutdown_executor()
