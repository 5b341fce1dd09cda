"""Shared test fixtures and configuration."""

from __future__ import annotations

import gzip
from collections.abc import Callable, Iterator
from xml.sax.saxutils import escape

import httpx
import pytest

from searchfeed.adapters.base.service import ConfiguredServiceVariant, ServiceMetadata
from searchfeed.adapters.xml.adapter import XMLSearchSource
from searchfeed.adapters.xml.http import create_client
from searchfeed.config.settings import Settings
from searchfeed.models.query import Query

ENDPOINT = "http://search.example.com/WebSearchService/V1/webSearch"

Handler = Callable[[httpx.Request], httpx.Response]


def build_results_xml(
    records: list[dict[str, str]],
    total: int | None = None,
    first: int = 1,
    returned: int | None = None,
    namespace: str = "urn:yahoo:srch",
) -> bytes:
    """Build a ResultSet document with one Result per record dict."""
    attrs = [f'xmlns="{namespace}"']
    if total is not None:
        attrs.append(f'totalResultsAvailable="{total}"')
    attrs.append(f'totalResultsReturned="{len(records) if returned is None else returned}"')
    attrs.append(f'firstResultPosition="{first}"')

    items = []
    for record in records:
        fields = "".join(f"<{name}>{escape(value)}</{name}>" for name, value in record.items())
        items.append(f"<Result>{fields}</Result>")

    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f"<ResultSet {' '.join(attrs)}>{''.join(items)}</ResultSet>"
    ).encode("utf-8")


ERROR_XML = (
    b'<?xml version="1.0" encoding="UTF-8"?>\n'
    b'<Error xmlns="urn:yahoo:api">The following errors were detected:'
    b"<Message>invalid value: results (100) must be between 1 and 50</Message></Error>"
)


def sample_records(n: int, offset: int = 0) -> list[dict[str, str]]:
    return [
        {
            "Title": f"Result {i}",
            "Summary": f"Snippet of result {i}",
            "Url": f"http://example.com/{i}",
            "ClickUrl": f"http://click.example.com/{i}",
        }
        for i in range(offset, offset + n)
    ]


def xml_response(status_code: int, body: bytes, compressed: bool = False) -> httpx.Response:
    """A streamed response, gzip-encoded on the wire when ``compressed``."""
    headers = {"Content-Type": "text/xml; charset=utf-8"}
    if compressed:
        body = gzip.compress(body)
        headers["Content-Encoding"] = "gzip"
    return httpx.Response(status_code, headers=headers, stream=httpx.ByteStream(body))


class TruncatedStream(httpx.SyncByteStream):
    """Yields the first part of a body, then fails like a dropped connection."""

    def __init__(self, head: bytes) -> None:
        self._head = head

    def __iter__(self) -> Iterator[bytes]:
        yield self._head
        raise httpx.ReadError("Connection reset by peer")


class TrackingStream(httpx.SyncByteStream):
    """Counts how often the transport stream is closed."""

    def __init__(self, body: bytes) -> None:
        self._body = body
        self.close_calls = 0

    def __iter__(self) -> Iterator[bytes]:
        yield self._body

    def close(self) -> None:
        self.close_calls += 1


class RecordingHandler:
    """MockTransport handler that records requests and replays a response factory."""

    def __init__(self, respond: Handler) -> None:
        self._respond = respond
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._respond(request)

    @property
    def last_params(self) -> httpx.QueryParams:
        return self.requests[-1].url.params


def make_source(
    handler: Handler,
    results_per_page: int = 50,
    results_total_limit: int = 1000,
) -> XMLSearchSource:
    variant = ConfiguredServiceVariant(
        endpoint=ENDPOINT,
        appid="test-app",
        metadata=ServiceMetadata(
            results_per_page=results_per_page,
            results_total_limit=results_total_limit,
        ),
    )
    return XMLSearchSource(
        variant,
        client_factory=lambda: create_client(transport=httpx.MockTransport(handler)),
    )


@pytest.fixture
def settings() -> Settings:
    """Create a test Settings instance with defaults."""
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        debug=True,
        service={"endpoint": ENDPOINT, "appid": "test-app"},
    )


@pytest.fixture
def query() -> Query:
    return Query(text="data mining")
