"""XML search service adapter — Paged search over HTTP GET with XML responses.

Sends one GET per query to the endpoint of a ``ServiceVariant`` and parses
the (optionally gzip-compressed) XML answer into a ``SearchEngineResponse``.
Exactly one attempt is made; there is no retry.

Usage::

    variant = ConfiguredServiceVariant(
        endpoint="http://search.example.com/WebSearchService/V1/webSearch",
        appid="my-app",
    )
    source = XMLSearchSource(variant)
    response = source.search(Query(text="data mining"), start=0, count=100)
"""

from __future__ import annotations

import contextlib
import functools
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

import httpx

from searchfeed.adapters.base.adapter import SearchSource
from searchfeed.adapters.base.exceptions import ConfigurationError, ProtocolError, TransportError
from searchfeed.adapters.base.service import ConfiguredServiceVariant, ResponseSchema, ServiceMetadata, ServiceVariant
from searchfeed.adapters.xml.decoder import STREAM_ERRORS, decode_body
from searchfeed.adapters.xml.http import DEFAULT_TIMEOUT, USER_AGENT, create_client
from searchfeed.adapters.xml.parser import parse_response_xml
from searchfeed.models.query import Query
from searchfeed.models.response import COMPRESSION_KEY, FIRST_INDEX_KEY, SearchEngineResponse

if TYPE_CHECKING:
    from searchfeed.config.settings import Settings

logger = logging.getLogger(__name__)

ACCEPTED_STATUS_CODES = frozenset({httpx.codes.OK, httpx.codes.SERVICE_UNAVAILABLE, httpx.codes.BAD_REQUEST})
"""Statuses whose body is parsed as XML. The service reports errors in-band for 400 and 503."""


class XMLSearchSource(SearchSource):
    """Source adapter for search services answering in XML.

    Args:
        variant: Request construction and response schema of the service.
        client_factory: Returns a new ``httpx.Client`` per call. Defaults to
            ``create_client`` with ``timeout`` and ``user_agent``.
        timeout: HTTP timeout in seconds (ignored when ``client_factory`` is given).
        user_agent: ``User-Agent`` header (ignored when ``client_factory`` is given).
    """

    def __init__(
        self,
        variant: ServiceVariant,
        client_factory: Callable[[], httpx.Client] | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = USER_AGENT,
    ) -> None:
        self._variant = variant
        self._client_factory = client_factory or functools.partial(create_client, timeout, user_agent)

    @classmethod
    def from_settings(cls, settings: Settings) -> XMLSearchSource:
        """Build a source for the service described in ``settings.service``.

        Raises:
            ConfigurationError: If no endpoint is configured.
        """
        service = settings.service
        if not service.endpoint:
            raise ConfigurationError(
                "Search service endpoint is required. "
                "Set it via config: service.endpoint (or SEARCHFEED_SERVICE__ENDPOINT)"
            )
        variant = ConfiguredServiceVariant(
            endpoint=service.endpoint,
            appid=service.appid,
            metadata=ServiceMetadata(
                results_per_page=service.results_per_page,
                results_total_limit=service.results_total_limit,
            ),
            schema=ResponseSchema(**service.response_schema) if service.response_schema else None,
            param_names=service.param_names,
        )
        return cls(variant, timeout=settings.http.timeout, user_agent=settings.http.user_agent)

    @property
    def name(self) -> str:
        return "xml"

    @property
    def metadata(self) -> ServiceMetadata:
        return self._variant.metadata

    def search(self, query: Query, start: int, count: int) -> SearchEngineResponse:
        return self.query(query, start, count)

    def query(self, query: Query, start: int, count: int) -> SearchEngineResponse:
        """Send a query to the service and parse the result.

        Args:
            query: The query to send.
            start: 0-based index of the first requested result.
            count: Number of results requested; clamped to the service page size.

        Returns:
            The parsed response; ``metadata`` carries ``firstIndex``,
            ``resultsReturned`` and ``compression``.

        Raises:
            TransportError: On connection failure, timeout or a broken body stream.
            ProtocolError: If the HTTP status is not 200, 400 or 503.
            ParseError: If the body is not well-formed XML.
            ConfigurationError: If the service URI is not a valid URL.
        """
        # Service results start from 1.
        start += 1
        count = min(count, self._variant.metadata.results_per_page)

        params = self._variant.build_params(query, start, count)
        params.append(("output", "xml"))
        uri = self._variant.service_uri()
        logger.debug("Request params: %s", httpx.QueryParams(params))

        try:
            with self._client_factory() as client, client.stream("GET", uri, params=params) as http_response:
                return self._read_response(http_response, start)
        except httpx.InvalidURL as e:
            raise ConfigurationError(f"Invalid service URI '{uri}': {e}") from e
        except httpx.TransportError as e:
            raise TransportError(f"Request to {uri} failed: {e}") from e

    def _read_response(self, http_response: httpx.Response, start: int) -> SearchEngineResponse:
        status_code = http_response.status_code
        chunks, compression = decode_body(http_response)

        with contextlib.closing(chunks):
            if status_code in ACCEPTED_STATUS_CODES:
                response = parse_response_xml(chunks, self._variant.schema)
                response.metadata.setdefault(FIRST_INDEX_KEY, str(start))
                response.metadata[COMPRESSION_KEY] = compression

                if response.error:
                    logger.warning("Service reported an error (HTTP %d): %s", status_code, response.error)
                logger.debug(
                    "Received, results: %d, total: %d, first: %s",
                    len(response.results),
                    response.results_total,
                    response.metadata[FIRST_INDEX_KEY],
                )
                return response

            try:
                body = b"".join(chunks).decode("iso-8859-1")
            except STREAM_ERRORS as e:
                raise TransportError(f"Reading the error response failed: {e}") from e

        error = ProtocolError(status_code, body)
        logger.warning("%s", error)
        raise error
