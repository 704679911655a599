"""
Version to local path resolution.

A version's file lives directly under the data directory and is named
after the last path segment of the asset URL. Resolution never touches
the filesystem.
"""

import posixpath
from pathlib import Path
from typing import Mapping, Union
from urllib.parse import urlparse

from core.errors.exceptions import MissingAssetError, UnknownVersionError
from image_store.catalog import ISO_URL


def asset_url(
    catalog: Mapping[str, Mapping[str, str]],
    version: str,
    asset_key: str = ISO_URL,
) -> str:
    """
    Look up the URL for one asset of one version.

    Raises:
        UnknownVersionError: Version not in catalog
        MissingAssetError: Version has no entry for asset_key
    """
    assets = catalog.get(version)
    if assets is None:
        raise UnknownVersionError(version)
    url = assets.get(asset_key)
    if not url:
        raise MissingAssetError(version, asset_key)
    return url


def filename_from_url(url: str) -> str:
    """Final path segment of url, ignoring query string and fragment."""
    return posixpath.basename(urlparse(url).path)


def resolve_path(
    data_dir: Union[str, Path],
    catalog: Mapping[str, Mapping[str, str]],
    version: str,
    asset_key: str = ISO_URL,
) -> Path:
    """
    Resolve the local file for a version's asset.

    Args:
        data_dir: Directory holding downloaded images
        catalog: Version catalog
        version: Version identifier
        asset_key: Asset to resolve (default: iso_url)

    Returns:
        data_dir joined with the URL's basename

    Raises:
        UnknownVersionError: Version not in catalog
        MissingAssetError: Asset key absent, or URL has no file name
    """
    url = asset_url(catalog, version, asset_key)
    filename = filename_from_url(url)
    if not filename:
        raise MissingAssetError(version, asset_key)
    return Path(data_dir) / filename
