"""Shared async HTTP helpers for the remote store and repository probe.

Provides a thin wrapper around ``httpx.AsyncClient`` with standardised
timeouts, user-agent headers, and error handling, so that every remote
collaborator behaves the same way and can be tested by patching these
two functions.

A 404 is an answer ("not found") and is returned as None. Every other
failure raises ``StoreError`` (a subclass of ``DepotGraphError``).
"""

from __future__ import annotations

import logging
from typing import Any

from depotgraph.exceptions import StoreError

logger = logging.getLogger(__name__)

# Timeout for all remote requests (seconds).
DEFAULT_TIMEOUT: float = 30.0

# User-Agent sent with every request.
USER_AGENT: str = "depotgraph/0.1"


def _ensure_httpx() -> Any:  # noqa: ANN401
    """Lazily import httpx and raise a friendly error if missing.

    Returns:
        The ``httpx`` module.

    Raises:
        SystemExit: If httpx is not installed.
    """
    try:
        import httpx  # noqa: F811

        return httpx
    except ImportError:
        raise SystemExit(
            "httpx is required for remote stores.\n"
            "Install it with: pip install depotgraph[http]"
        )


async def _get(url: str, *, params: dict[str, str] | None, timeout: float) -> Any:
    httpx = _ensure_httpx()
    try:
        async with httpx.AsyncClient(
            timeout=timeout,
            headers={"User-Agent": USER_AGENT},
            follow_redirects=True,
        ) as client:
            resp = await client.get(url, params=params)
            if resp.status_code == 404:
                logger.debug("Not found: %s", url)
                return None
            resp.raise_for_status()
            return resp
    except httpx.TimeoutException as exc:
        logger.warning("Timeout fetching %s", url)
        raise StoreError(f"Timeout fetching {url}") from exc
    except httpx.HTTPStatusError as exc:
        logger.warning("HTTP %d from %s", exc.response.status_code, url)
        raise StoreError(f"HTTP {exc.response.status_code} from {url}") from exc
    except httpx.RequestError as exc:
        logger.warning("Request error for %s: %s", url, exc)
        raise StoreError(f"Request error for {url}: {exc}") from exc


async def fetch_json(
    url: str,
    *,
    params: dict[str, str] | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> Any | None:
    """Fetch a URL and parse the response as JSON.

    Args:
        url: The URL to fetch.
        params: Optional query parameters.
        timeout: Request timeout in seconds.

    Returns:
        Parsed JSON, or None on 404.

    Raises:
        StoreError: On other HTTP errors, timeouts, or invalid JSON.
    """
    resp = await _get(url, params=params, timeout=timeout)
    if resp is None:
        return None
    try:
        return resp.json()
    except ValueError as exc:
        raise StoreError(f"Invalid JSON from {url}") from exc


async def fetch_text(
    url: str,
    *,
    timeout: float = DEFAULT_TIMEOUT,
) -> str | None:
    """Fetch a URL and return the response body as text.

    Returns:
        Response body text, or None on 404.

    Raises:
        StoreError: On other HTTP errors or timeouts.
    """
    resp = await _get(url, params=None, timeout=timeout)
    return None if resp is None else resp.text
