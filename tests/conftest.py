"""Shared pytest fixtures and configuration."""

from collections.abc import Callable, Iterator
from datetime import UTC, datetime, timedelta

import pytest

from mapfence.config import Settings
from mapfence.geometry.primitives import Point
from mapfence.regions.models import Region
from mapfence.regions.store import InMemoryRegionStore
from mapfence.utils.logging import clear_correlation_context, configure_logging

EPOCH = datetime(2024, 1, 1, tzinfo=UTC)


def rectangle(left: float, top: float, right: float, bottom: float) -> tuple[Point, ...]:
    """Axis-aligned rectangle, clockwise from the top-left corner."""
    return (
        Point(x=left, y=top),
        Point(x=right, y=top),
        Point(x=right, y=bottom),
        Point(x=left, y=bottom),
    )


class ManualClock:
    """Monotonic clock advanced by hand."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class TickingUtcClock:
    """UTC clock that moves one second forward on every read."""

    def __init__(self, start: datetime = EPOCH) -> None:
        self.now = start

    def __call__(self) -> datetime:
        self.now += timedelta(seconds=1)
        return self.now


@pytest.fixture(autouse=True)
def reset_logging_context() -> Iterator[None]:
    """Reset correlation context between tests."""
    clear_correlation_context()
    yield
    clear_correlation_context()


@pytest.fixture
def test_settings() -> Settings:
    """Create a Settings instance with test-safe defaults."""
    return Settings(
        LOG_LEVEL="DEBUG",
        LOG_FORMAT="console",
        _env_file=None,  # type: ignore[call-arg]
    )


@pytest.fixture
def configure_test_logging() -> Iterator[None]:
    """Configure logging for tests with console output."""
    configure_logging(level="DEBUG", log_format="console")
    yield


@pytest.fixture
def rect() -> Callable[[float, float, float, float], tuple[Point, ...]]:
    """Factory for axis-aligned rectangular polygons."""
    return rectangle


@pytest.fixture
def manual_clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def utc_clock() -> TickingUtcClock:
    return TickingUtcClock()


@pytest.fixture
def memory_store(utc_clock: TickingUtcClock) -> InMemoryRegionStore:
    """Empty in-memory store with strictly increasing timestamps."""
    return InMemoryRegionStore(clock=utc_clock)


@pytest.fixture
def make_region() -> Callable[..., Region]:
    """Factory for regions; ``order`` controls creation time."""

    def _make(
        region_id: str,
        bounds: tuple[float, float, float, float],
        floors: tuple[int, ...] = (1,),
        *,
        name: str = "",
        order: int = 0,
        color: str | None = None,
    ) -> Region:
        created = EPOCH + timedelta(minutes=order)
        return Region(
            id=region_id,
            name=name or region_id,
            polygon=rectangle(*bounds),
            floors=floors,
            color=color,
            created_at=created,
            updated_at=created,
        )

    return _make
