from __future__ import annotations

import asyncio
from typing import Any


class FakeEEException(Exception):
    pass


class _Node:
    """Lazy graph node that records the chain of calls that built it."""

    def __init__(self, fake: FakeEarthEngine, ops: list[tuple[Any, ...]]) -> None:
        self._fake = fake
        self.ops = ops

    def _then(self, *op: Any) -> _Node:
        return type(self)(self._fake, [*self.ops, op])


class FakeGeometry(_Node):
    def buffer(self, distance: float) -> FakeGeometry:
        return self._then("buffer", distance)

    def bounds(self) -> FakeGeometry:
        return self._then("bounds")


class FakeComputed:
    def __init__(self, fake: FakeEarthEngine, kwargs: dict[str, Any]) -> None:
        self._fake = fake
        self.kwargs = kwargs

    def getInfo(self) -> Any:  # noqa: N802
        self._fake.reductions.append(self.kwargs)
        if self._fake.reduce_error is not None:
            raise self._fake.reduce_error
        return self._fake.stats


class FakeImage(_Node):
    def normalizedDifference(self, bands: list[str]) -> FakeImage:  # noqa: N802
        return self._then("normalizedDifference", tuple(bands))

    def rename(self, name: str) -> FakeImage:
        return self._then("rename", name)

    def reduceRegion(self, **kwargs: Any) -> FakeComputed:  # noqa: N802
        return FakeComputed(self._fake, kwargs)

    def getMapId(self, vis_params: dict[str, Any]) -> Any:  # noqa: N802
        self._fake.map_requests.append(vis_params)
        if self._fake.map_error is not None:
            raise self._fake.map_error
        return self._fake.map_info


class FakeCollection(_Node):
    def filterBounds(self, geometry: FakeGeometry) -> FakeCollection:  # noqa: N802
        return self._then("filterBounds", geometry)

    def filterDate(self, start: str, end: str) -> FakeCollection:  # noqa: N802
        return self._then("filterDate", start, end)

    def filter(self, condition: Any) -> FakeCollection:
        return self._then("filter", condition)

    def median(self) -> FakeImage:
        return FakeImage(self._fake, [*self.ops, ("median",)])


class FakeEarthEngine:
    """Stand-in for the ``ee`` module with canned evaluation results."""

    EEException = FakeEEException

    def __init__(self) -> None:
        self.stats: Any = {"NDVI": 0.42}
        self.map_info: Any = {"mapid": "projects/demo/maps/abc123", "token": "tok"}
        self.reduce_error: Exception | None = None
        self.map_error: Exception | None = None
        self.geometry_error: Exception | None = None
        self.initialize_error: Exception | None = None

        self.reductions: list[dict[str, Any]] = []
        self.map_requests: list[dict[str, Any]] = []
        self.points: list[list[float]] = []
        self.credentials: list[tuple[str, str]] = []
        self.initialize_calls: list[tuple[Any, Any]] = []

        fake = self

        class Geometry:
            @staticmethod
            def Point(coords: list[float]) -> FakeGeometry:  # noqa: N802
                if fake.geometry_error is not None:
                    raise fake.geometry_error
                fake.points.append(coords)
                return FakeGeometry(fake, [("Point", tuple(coords))])

        class Filter:
            @staticmethod
            def lt(name: str, value: Any) -> tuple[str, str, Any]:
                return ("lt", name, value)

        class Reducer:
            @staticmethod
            def mean() -> str:
                return "mean"

        self.Geometry = Geometry
        self.Filter = Filter
        self.Reducer = Reducer

    def ImageCollection(self, name: str) -> FakeCollection:  # noqa: N802
        return FakeCollection(self, [("ImageCollection", name)])

    def ServiceAccountCredentials(  # noqa: N802
        self, email: str, key_file: str | None = None, key_data: str | None = None
    ) -> tuple[str, str]:
        creds = (email, key_data or key_file or "")
        self.credentials.append(creds)
        return creds

    def Initialize(self, credentials: Any = None, project: Any = None) -> None:  # noqa: N802
        self.initialize_calls.append((credentials, project))
        if self.initialize_error is not None:
            raise self.initialize_error


class FakeHandshake:
    """Async handshake that counts attempts and can fail a set number of times."""

    def __init__(self, fail_times: int = 0, delay: float = 0.01) -> None:
        self.calls = 0
        self.fail_times = fail_times
        self.delay = delay

    async def __call__(self) -> None:
        self.calls += 1
        await asyncio.sleep(self.delay)
        if self.calls <= self.fail_times:
            raise RuntimeError(f"handshake rejected (attempt {self.calls})")
