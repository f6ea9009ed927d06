"""Shared non-blocking HTTP transport."""

from __future__ import annotations

import httpx

from bucketlist.models import ClientConfig


def build_async_client(
    config: ClientConfig,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create the ``httpx.AsyncClient`` every stream of a client shares.

    The connection pool is safe to share between concurrently running streams.
    ``transport`` lets tests substitute an ``httpx.MockTransport``.
    """
    return httpx.AsyncClient(
        timeout=httpx.Timeout(config.timeout),
        headers={"Accept": "application/json"},
        transport=transport,
    )
