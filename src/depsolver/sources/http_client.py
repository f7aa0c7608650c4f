"""Shared HTTP client utilities for registry-backed sources.

Provides a thin wrapper around ``httpx.Client`` with standardised timeouts,
user-agent headers, and error handling. All HTTP sources use this module so
that HTTP behaviour is consistent and testable.

Raises ``SourceError`` (a subclass of ``DepSolverError``) on unrecoverable
HTTP failures. The resolver does not retry; a failed fetch aborts the query.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from depsolver.exceptions import SourceError

logger = logging.getLogger(__name__)

# Timeout for all registry HTTP requests (seconds).
DEFAULT_TIMEOUT: float = 30.0

# User-Agent sent with every request.
USER_AGENT: str = "depsolver/0.1"


def build_client(
    *,
    timeout: float = DEFAULT_TIMEOUT,
    transport: httpx.BaseTransport | None = None,
) -> httpx.Client:
    """Create an ``httpx.Client`` with depsolver's defaults.

    Args:
        timeout: Request timeout in seconds.
        transport: Optional transport override (e.g. ``httpx.MockTransport``).
    """
    return httpx.Client(
        timeout=timeout,
        headers={"User-Agent": USER_AGENT},
        follow_redirects=True,
        transport=transport,
    )


def fetch_json(
    client: httpx.Client,
    url: str,
    *,
    params: dict[str, Any] | None = None,
) -> Any:
    """Fetch a URL and parse the response as JSON.

    Args:
        client: The client to send the request with.
        url: The URL to fetch.
        params: Optional query parameters.

    Returns:
        Parsed JSON response.

    Raises:
        SourceError: On HTTP errors, timeouts, or invalid JSON.
    """
    try:
        resp = client.get(url, params=params)
        resp.raise_for_status()
        return resp.json()
    except httpx.TimeoutException as exc:
        logger.warning("Timeout fetching %s", url)
        raise SourceError(f"Timeout fetching {url}") from exc
    except httpx.HTTPStatusError as exc:
        logger.warning("HTTP %d from %s", exc.response.status_code, url)
        raise SourceError(
            f"HTTP {exc.response.status_code} from {url}"
        ) from exc
    except (httpx.RequestError, ValueError) as exc:
        logger.warning("Request error for %s: %s", url, exc)
        raise SourceError(f"Request error for {url}: {exc}") from exc
