"""Streaming download of the remote dictionary archive."""

import asyncio
import logging
from pathlib import Path

import httpx

from dictbot.errors import DownloadError, DownloadTimeoutError

logger = logging.getLogger(__name__)

DOWNLOAD_CHUNK_BYTES = 1024 * 1024


async def fetch_archive(
    client: httpx.AsyncClient,
    url: str,
    dest: Path,
    timeout_seconds: float = 60.0,
) -> Path:
    """Stream a GET response body to ``dest`` within a wall-clock budget.

    Raises DownloadTimeoutError when the budget is exhausted, DownloadError on
    a non-2xx status or transport failure. A partial file is removed before
    any error propagates.
    """
    try:
        async with asyncio.timeout(timeout_seconds):
            size = await _stream_to_file(client, url, dest)
    except TimeoutError as exc:
        dest.unlink(missing_ok=True)
        logger.warning("Download timed out after %.1fs: %s", timeout_seconds, url)
        raise DownloadTimeoutError(f"Download timed out after {timeout_seconds:.0f}s") from exc
    except httpx.TimeoutException as exc:
        dest.unlink(missing_ok=True)
        logger.warning("Download transport timeout: %s (%s)", url, exc)
        raise DownloadTimeoutError(f"Download transport timeout: {exc}") from exc
    except httpx.HTTPError as exc:
        dest.unlink(missing_ok=True)
        logger.warning("Download failed: %s (%s)", url, exc)
        raise DownloadError(f"Download failed: {exc}") from exc
    except BaseException:
        dest.unlink(missing_ok=True)
        raise

    logger.info("Downloaded %d bytes from %s", size, url)
    return dest


async def _stream_to_file(client: httpx.AsyncClient, url: str, dest: Path) -> int:
    size = 0
    async with client.stream("GET", url, follow_redirects=True) as response:
        if not response.is_success:
            body = (await response.aread())[:200].decode("utf-8", errors="replace")
            raise DownloadError(
                f"HTTP {response.status_code} fetching dictionary: {body}",
                status_code=response.status_code,
            )
        with dest.open("wb") as fh:
            async for chunk in response.aiter_bytes(DOWNLOAD_CHUNK_BYTES):
                await asyncio.to_thread(fh.write, chunk)
                size += len(chunk)
    return size
