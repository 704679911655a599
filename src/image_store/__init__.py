"""
Local cache for versioned boot images.

Public surface:
    ImageStore: populate / have_version / base_file
    VersionCatalog: version -> {asset key -> URL}
    ImageStoreConfig: environment-driven settings
"""

from image_store.catalog import DEFAULT_VERSIONS, ISO_URL, ROOTFS_URL, VersionCatalog
from image_store.config import ImageStoreConfig
from image_store.paths import resolve_path
from image_store.store import ImageStore

__all__ = [
    "DEFAULT_VERSIONS",
    "ISO_URL",
    "ROOTFS_URL",
    "ImageStore",
    "ImageStoreConfig",
    "VersionCatalog",
    "resolve_path",
]
