from pathlib import Path

import pytest

from inventory.ingest.feed import parse_feed

FIXTURES = Path(__file__).parent / "fixtures"
FEED_URL = "https://feed.example.com/vehicles.xml"
IMAGE_BASE_URL = "https://img.example.com/brands"


def load_fixture(path: str) -> bytes:
    return (FIXTURES / path).read_bytes()


class FakeClock:
    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class CountingLoader:
    """Feed loader stand-in that records how often it was called."""

    def __init__(self, records=(), error: Exception | None = None) -> None:
        self.records = list(records)
        self.error = error
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.records


@pytest.fixture(autouse=True)
def feed_env(monkeypatch):
    monkeypatch.setenv("FEED_URL", FEED_URL)
    monkeypatch.setenv("IMAGE_BASE_URL", IMAGE_BASE_URL)
    monkeypatch.delenv("WEBHOOK_SECRET", raising=False)
    monkeypatch.delenv("IMAGE_UNOPTIMIZED", raising=False)


@pytest.fixture()
def feed_xml() -> bytes:
    return load_fixture("feed/vehicles.xml")


@pytest.fixture()
def vehicles(feed_xml):
    return parse_feed(feed_xml)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def loader(vehicles) -> CountingLoader:
    return CountingLoader(vehicles)
