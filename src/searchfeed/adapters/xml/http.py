"""HTTP transport factory for XML search services."""

from __future__ import annotations

from typing import Any

import httpx

DEFAULT_TIMEOUT = 10.0
"""Connect/read timeout in seconds."""

USER_AGENT = "SearchFeed/0.1 (XML search source adapter)"

URL_ENCODED = "application/x-www-form-urlencoded; charset=UTF-8"


def create_client(
    timeout: float = DEFAULT_TIMEOUT,
    user_agent: str = USER_AGENT,
    **httpx_kwargs: Any,
) -> httpx.Client:
    """Create a timeout-bounded HTTP/1.1 client that negotiates gzip.

    Args:
        timeout: Connect, read, write and pool timeout in seconds.
        user_agent: Value of the ``User-Agent`` header.
        **httpx_kwargs: Additional keyword arguments passed to ``httpx.Client``
            (e.g. ``transport`` in tests).

    Returns:
        A new client; the caller owns it and must close it.
    """
    return httpx.Client(
        http1=True,
        http2=False,
        timeout=httpx.Timeout(timeout),
        headers={
            "Content-Type": URL_ENCODED,
            "Accept-Encoding": "gzip",
            "User-Agent": user_agent,
        },
        **httpx_kwargs,
    )
