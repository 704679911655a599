"""
Image store façade.

Combines the version catalog, path resolution and populator behind the
three operations consumers need: populate the cache, check whether a
version is known, and open a version's image for reading.
"""

import asyncio
from pathlib import Path
from typing import BinaryIO, List, Optional, Union

import aiohttp

from core.download.fetcher import fetch
from image_store.catalog import ISO_URL, VersionCatalog
from image_store.config import ImageStoreConfig
from image_store.paths import resolve_path
from image_store.populator import FetchFunc, Populator


class ImageStore:
    """
    Local cache of versioned boot images.

    Usage:
        store = ImageStore.from_config(ImageStoreConfig.from_env())
        await store.populate()
        with store.base_file("4.8") as f:
            ...
    """

    def __init__(
        self,
        data_dir: Union[str, Path],
        catalog: Optional[VersionCatalog] = None,
        download_timeout: Optional[float] = None,
        session: Optional[aiohttp.ClientSession] = None,
        fetch_func: FetchFunc = fetch,
    ):
        self.data_dir = Path(data_dir)
        self.catalog = catalog if catalog is not None else VersionCatalog.default()
        self._populator = Populator(
            self.catalog,
            self.data_dir,
            download_timeout=download_timeout,
            session=session,
            fetch_func=fetch_func,
        )

    @classmethod
    def from_config(cls, config: ImageStoreConfig, **kwargs) -> "ImageStore":
        """
        Build a store from configuration.

        Raises:
            ConfigError: If the versions override is malformed
        """
        return cls(
            config.data_dir,
            catalog=VersionCatalog.from_override(config.versions),
            download_timeout=config.download_timeout,
            **kwargs,
        )

    async def populate(self, timeout: Optional[float] = None) -> None:
        """
        Make sure every catalog version has its image on disk.

        Args:
            timeout: Overall deadline in seconds; in-flight downloads are
                cancelled and their partial files removed when it expires

        Raises:
            asyncio.TimeoutError: If timeout expired
            The first version failure otherwise (see Populator.populate)
        """
        if timeout is None:
            await self._populator.populate()
        else:
            await asyncio.wait_for(self._populator.populate(), timeout)

    def have_version(self, version: str) -> bool:
        """True if version is in the catalog. Does not look at disk."""
        return version in self.catalog

    def path_for_version(self, version: str, asset_key: str = ISO_URL) -> Path:
        """Local path for a version's asset."""
        return resolve_path(self.data_dir, self.catalog, version, asset_key)

    def base_file(self, version: str) -> BinaryIO:
        """
        Open a version's image for reading.

        The caller must close the returned file.

        Raises:
            UnknownVersionError: Version not in catalog
            MissingAssetError: Version has no iso_url
            FileNotFoundError: Image not downloaded yet
            OSError: Image could not be opened
        """
        return open(self.path_for_version(version), "rb")

    def versions(self) -> List[str]:
        """Sorted catalog versions."""
        return self.catalog.versions()
