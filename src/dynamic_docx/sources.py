"""Resolve image bytes from an in-memory buffer, a file path or a URL."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import httpx

from .config.settings import settings
from .errors import ImageSourceError
from .models import ImageSpec

logger = logging.getLogger(__name__)


async def load_image_from_path(path: str | Path) -> bytes:
    p = Path(path)
    try:
        return await asyncio.to_thread(p.read_bytes)
    except OSError as e:
        raise ImageSourceError(f"Cannot read image file {path}: {e}") from e


async def download_image(url: str, client: httpx.AsyncClient | None = None) -> bytes:
    """Fetch an image over HTTP.

    Args:
        url: The URL to fetch.
        client: Optional shared client; a short-lived one is created
                from settings when omitted.

    Returns:
        The response body.

    Raises:
        ImageSourceError: On any HTTP or transport failure.
    """
    try:
        if client is not None:
            resp = await client.get(url)
        else:
            async with httpx.AsyncClient(
                timeout=settings.image_fetch_timeout,
                follow_redirects=settings.image_fetch_follow_redirects,
                headers={"User-Agent": settings.image_fetch_user_agent},
            ) as own_client:
                resp = await own_client.get(url)
        resp.raise_for_status()
    except httpx.HTTPStatusError as e:
        raise ImageSourceError(f"HTTP {e.response.status_code}: {url}") from e
    except httpx.HTTPError as e:
        raise ImageSourceError(f"Image fetch failed for {url}: {e}") from e

    logger.info("Fetched image %s (%d bytes)", url, len(resp.content))
    return resp.content


async def resolve_image_bytes(
    spec: ImageSpec,
    client: httpx.AsyncClient | None = None,
) -> bytes:
    """Bytes for ``spec``: data, then path, then url."""
    if spec.data:
        return spec.data
    if spec.path:
        return await load_image_from_path(spec.path)
    if spec.url:
        return await download_image(spec.url, client=client)
    raise ImageSourceError(f"No image source provided for placeholder: {spec.placeholder}")
