"""
Concurrent population of the local image cache.

One asyncio task per catalog version. Each task resolves its destination,
returns immediately if the file is already there, and otherwise fetches
the version's ISO. Tasks never cancel each other; once all of them have
finished, the first failure (in completion order) is raised.
"""

import asyncio
import enum
import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Awaitable, Callable, List, Optional, Tuple, Union

import aiohttp

from core.download.fetcher import fetch
from core.download.http_client import create_session
from core.logging.setup import get_logger
from core.logging.utilities import log_exception, log_with_context
from image_store.catalog import ISO_URL, VersionCatalog
from image_store.paths import asset_url, resolve_path

logger = get_logger(__name__)

FetchFunc = Callable[..., Awaitable[int]]


class VersionOutcome(enum.Enum):
    """What a populate task did for its version."""

    FETCHED = "fetched"
    SKIPPED = "skipped"


class Populator:
    """
    Ensures every catalog version has its ISO in the data directory.

    Session management:
        By default a session is created for each populate() call and closed
        when it returns. A session passed to the constructor is shared and
        left open; the caller owns it.
    """

    def __init__(
        self,
        catalog: VersionCatalog,
        data_dir: Union[str, Path],
        download_timeout: Optional[float] = None,
        session: Optional[aiohttp.ClientSession] = None,
        fetch_func: FetchFunc = fetch,
    ):
        """
        Initialize Populator.

        Args:
            catalog: Versions to populate
            data_dir: Directory receiving the images
            download_timeout: Per-download total timeout in seconds (None = no limit)
            session: Optional shared aiohttp session
            fetch_func: Coroutine used to download one URL
        """
        self.catalog = catalog
        self.data_dir = Path(data_dir)
        self.download_timeout = download_timeout
        self._session = session
        self._fetch = fetch_func

    async def populate(self) -> None:
        """
        Fetch every version whose file is missing.

        Raises:
            The first exception raised by any version task, after all
            tasks have finished.
        """
        await asyncio.to_thread(self.data_dir.mkdir, parents=True, exist_ok=True)

        versions = list(self.catalog)
        if not versions:
            return

        log_with_context(
            logger,
            logging.DEBUG,
            "Starting populate",
            batch_size=len(versions),
            data_dir=str(self.data_dir),
        )

        session = self._session
        should_close_session = False
        try:
            if session is None:
                session = create_session()
                should_close_session = True
            failures = await self._run_all(session, versions)
        finally:
            if should_close_session and session is not None:
                await session.close()

        if failures:
            raise failures[0][1]

    async def _run_all(
        self, session: aiohttp.ClientSession, versions: List[str]
    ) -> List[Tuple[str, Exception]]:
        failures: List[Tuple[str, Exception]] = []
        fetched = 0
        skipped = 0

        async def run(version: str) -> None:
            nonlocal fetched, skipped
            try:
                outcome = await self.populate_version(session, version)
            except Exception as e:
                log_exception(
                    logger,
                    e,
                    "Populate failed for version",
                    include_traceback=False,
                    version=version,
                )
                failures.append((version, e))
                return
            if outcome is VersionOutcome.FETCHED:
                fetched += 1
            else:
                skipped += 1

        await asyncio.gather(*(run(version) for version in versions))

        log_with_context(
            logger,
            logging.INFO if not failures else logging.WARNING,
            "Populate complete",
            batch_size=len(versions),
            records_fetched=fetched,
            records_skipped=skipped,
            records_failed=len(failures),
        )
        return failures

    async def populate_version(
        self, session: aiohttp.ClientSession, version: str
    ) -> VersionOutcome:
        """
        Populate a single version.

        Returns:
            SKIPPED if the file already existed, FETCHED after a download
        """
        dest = resolve_path(self.data_dir, self.catalog, version)

        # Existing files are trusted as-is
        if await asyncio.to_thread(os.path.exists, dest):
            log_with_context(
                logger,
                logging.DEBUG,
                "Image already present",
                version=version,
                destination=str(dest),
            )
            return VersionOutcome.SKIPPED

        url = asset_url(self.catalog, version, ISO_URL)
        log_with_context(
            logger,
            logging.INFO,
            f"Downloading iso for version {version}",
            version=version,
            download_url=url,
            destination=str(dest),
        )
        start = datetime.now(timezone.utc)
        written = await self._fetch(session, url, dest, timeout=self.download_timeout)
        duration_ms = (datetime.now(timezone.utc) - start).total_seconds() * 1000
        log_with_context(
            logger,
            logging.INFO,
            f"Finished downloading for version {version}",
            version=version,
            bytes_written=written,
            duration_ms=round(duration_ms, 2),
        )
        return VersionOutcome.FETCHED
