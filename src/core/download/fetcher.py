"""
Single-URL fetcher that streams a response body to a local file.

One GET per call, no retries. The body is streamed into a uniquely named
".part" file next to the destination and renamed onto it only after the
byte count checks out, so the destination path exists only for complete
transfers. The partial file is removed on any failure, including
cancellation.
"""

import asyncio
import logging
import os
import secrets
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Union

import aiofiles
import aiohttp

from core.errors.exceptions import HTTPStatusError, ShortWriteError, TransferError
from core.logging.setup import get_logger
from core.logging.utilities import log_with_context

logger = get_logger(__name__)

CHUNK_SIZE = 8 * 1024 * 1024  # 8MB
PARTIAL_SUFFIX = ".part"


async def fetch(
    session: aiohttp.ClientSession,
    url: str,
    destination: Union[str, Path],
    timeout: Optional[float] = None,
    chunk_size: int = CHUNK_SIZE,
) -> int:
    """
    Download url to destination and verify the byte count.

    Args:
        session: Open aiohttp session
        url: URL to GET
        destination: File to create or replace once the transfer is complete
        timeout: Total timeout in seconds for request and body (None = no limit)
        chunk_size: Read size for streaming the body

    Returns:
        Number of bytes written

    Raises:
        HTTPStatusError: Status outside 200-299 (no file is created)
        ShortWriteError: Bytes written differ from Content-Length, or no
            Content-Length was declared
        TransferError: Connection failure or timeout
        OSError: Destination could not be written
    """
    destination = Path(destination)
    start = datetime.now(timezone.utc)

    try:
        async with session.get(
            url, timeout=aiohttp.ClientTimeout(total=timeout)
        ) as response:
            if response.status < 200 or response.status > 299:
                log_with_context(
                    logger,
                    logging.DEBUG,
                    "Download rejected",
                    download_url=url,
                    http_status=response.status,
                )
                raise HTTPStatusError(url, response.status)

            expected = response.content_length
            log_with_context(
                logger,
                logging.DEBUG,
                "Download response received",
                download_url=url,
                http_status=response.status,
                content_length=expected,
            )

            written = await _stream_to_file(response, url, destination, chunk_size)
    except (HTTPStatusError, ShortWriteError):
        raise
    except asyncio.TimeoutError as e:
        raise TransferError(
            f"Download of {url} timed out",
            url,
            cause=e,
            context={"timeout_seconds": timeout},
        ) from e
    except aiohttp.ClientError as e:
        raise TransferError(f"Connection error for {url}", url, cause=e) from e

    duration_ms = (datetime.now(timezone.utc) - start).total_seconds() * 1000
    log_with_context(
        logger,
        logging.DEBUG,
        "Download complete",
        download_url=url,
        destination=str(destination),
        bytes_written=written,
        duration_ms=round(duration_ms, 2),
    )
    return written


async def _stream_to_file(
    response: aiohttp.ClientResponse,
    url: str,
    destination: Path,
    chunk_size: int,
) -> int:
    expected = response.content_length
    part_path = partial_path(destination)
    written = 0
    try:
        async with aiofiles.open(part_path, "wb") as f:
            async for chunk in response.content.iter_chunked(chunk_size):
                await f.write(chunk)
                written += len(chunk)

        if expected is None or written != expected:
            raise ShortWriteError(url, expected, written)

        await asyncio.to_thread(os.replace, part_path, destination)
    except aiohttp.ClientPayloadError as e:
        # Body ended before the declared length
        await _discard(part_path)
        raise ShortWriteError(url, expected, written, cause=e) from e
    except BaseException:
        await _discard(part_path)
        raise

    return written


def partial_path(destination: Path) -> Path:
    """
    Unique in-progress path next to destination.

    Each transfer gets its own name so overlapping fetches of the same
    URL never write into one file.
    """
    return destination.with_name(
        f"{destination.name}.{secrets.token_hex(4)}{PARTIAL_SUFFIX}"
    )


async def _discard(path: Path) -> None:
    """Remove a partially written file."""
    try:
        await asyncio.to_thread(os.remove, path)
    except FileNotFoundError:
        pass
    except OSError as e:
        log_with_context(
            logger,
            logging.WARNING,
            "Could not remove partial download",
            destination=str(path),
            error_message=str(e),
        )


__all__ = ["fetch", "partial_path", "CHUNK_SIZE", "PARTIAL_SUFFIX"]
