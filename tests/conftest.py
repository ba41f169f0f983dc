import pathlib
from typing import Dict, List, Sequence

import httpx
import pytest

from fbref_tables.scrapers.fetcher import Fetcher, PolitenessThrottle

FIXTURES = pathlib.Path(__file__).parent / "fixtures"
BASE_URL = "https://fbref.test/en/comps/{source_id}/"


def read_sample(name: str) -> str:
    return (FIXTURES / name).read_text(encoding="utf-8")


def make_table(rows: Sequence[Sequence[str]], header_rows: int = 1) -> str:
    """Renders rows as an HTML table; the first `header_rows` rows go in <thead>."""
    head = "".join(
        "<tr>" + "".join(f"<th>{c}</th>" for c in row) + "</tr>"
        for row in rows[:header_rows]
    )
    body = "".join(
        "<tr>" + "".join(f"<td>{c}</td>" for c in row) + "</tr>"
        for row in rows[header_rows:]
    )
    return f"<table><thead>{head}</thead><tbody>{body}</tbody></table>"


def make_page(*tables: str) -> str:
    return "<html><body>" + "".join(f"<div>{t}</div>" for t in tables) + "</body></html>"


class FakeClock:
    """Monotonic clock that only moves when slept on or advanced."""

    def __init__(self, start: float = 1000.0):
        self.now = start
        self.sleeps: List[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def comp_page() -> str:
    return read_sample("comp_page.html")


@pytest.fixture
def make_fetcher(fake_clock):
    """Builds a Fetcher whose transport serves `pages` keyed by source id.

    Unknown source ids get a 404. Every requested URL is recorded on
    `fetcher.requested`.
    """
    created = []

    def _make(pages: Dict[str, str], min_interval: float = 3.0) -> Fetcher:
        requested: List[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requested.append(str(request.url))
            source_id = request.url.path.rstrip("/").split("/")[-1]
            if source_id not in pages:
                return httpx.Response(404, text="Not Found")
            return httpx.Response(200, text=pages[source_id])

        client = httpx.Client(transport=httpx.MockTransport(handler))
        fetcher = Fetcher(
            client=client,
            throttle=PolitenessThrottle(
                min_interval, clock=fake_clock, sleep=fake_clock.sleep
            ),
            base_url=BASE_URL,
        )
        fetcher.requested = requested
        created.append(client)
        return fetcher

    yield _make
    for client in created:
        client.close()
