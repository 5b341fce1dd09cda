"""Multipage collection — Serve a window larger than one service page.

Services cap each request at ``results_per_page`` and make only the first
``results_total_limit`` results reachable. ``collect_pages`` issues one
request per page, in order, until the window is filled or the service runs
out of results. Each page is a single attempt; the first failure propagates.
"""

from __future__ import annotations

import logging

from searchfeed.adapters.xml.adapter import XMLSearchSource
from searchfeed.models.query import Query
from searchfeed.models.response import (
    COMPRESSION_KEY,
    FIRST_INDEX_KEY,
    RESULTS_RETURNED_KEY,
    UNCOMPRESSED,
    SearchEngineResponse,
)

logger = logging.getLogger(__name__)


def collect_pages(source: XMLSearchSource, query: Query, start: int, count: int) -> SearchEngineResponse:
    """Fetch ``count`` results starting at ``start`` using as many requests as needed.

    Args:
        source: The source to query.
        query: The query to run.
        start: 0-based index of the first requested result.
        count: Total number of results requested.

    Returns:
        One response holding the records of all pages in order. ``metadata``
        is taken from the first page, with ``resultsReturned`` covering all
        pages.
    """
    metadata = source.metadata
    end = min(start + count, metadata.results_total_limit)

    collected = SearchEngineResponse(
        metadata={FIRST_INDEX_KEY: str(start + 1), COMPRESSION_KEY: UNCOMPRESSED},
    )
    offset = start
    pages = 0
    while offset < end:
        page_size = min(end - offset, metadata.results_per_page)
        page = source.search(query, offset, page_size)
        pages += 1

        if pages == 1:
            collected.metadata.update(page.metadata)
        records = page.results[: end - offset]
        collected.results.extend(records)
        collected.results_total = page.results_total
        offset += len(records)

        if page.error or len(records) < page_size or offset >= page.results_total:
            break

    collected.metadata[RESULTS_RETURNED_KEY] = str(len(collected.results))
    logger.debug(
        "Collected %d results in %d page(s), total: %d",
        len(collected.results),
        pages,
        collected.results_total,
    )
    return collected
