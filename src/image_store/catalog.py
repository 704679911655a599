"""
Version catalog: version -> {asset key -> URL}.

The catalog is built once, either from the compiled-in RHCOS table or from
a JSON override, and is read-only afterwards so it can be shared between
concurrent populate tasks without locking.
"""

import json
from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Optional

from pydantic import TypeAdapter, ValidationError

from core.errors.exceptions import ConfigError

ISO_URL = "iso_url"
ROOTFS_URL = "rootfs_url"

_MIRROR = "https://mirror.openshift.com/pub/openshift-v4/dependencies/rhcos"

DEFAULT_VERSIONS: Mapping[str, Mapping[str, str]] = MappingProxyType(
    {
        "4.6": MappingProxyType(
            {
                ISO_URL: f"{_MIRROR}/4.6/4.6.8/rhcos-4.6.8-x86_64-live.x86_64.iso",
                ROOTFS_URL: f"{_MIRROR}/4.6/4.6.8/rhcos-live-rootfs.x86_64.img",
            }
        ),
        "4.7": MappingProxyType(
            {
                ISO_URL: f"{_MIRROR}/4.7/4.7.13/rhcos-4.7.13-x86_64-live.x86_64.iso",
                ROOTFS_URL: f"{_MIRROR}/4.7/4.7.13/rhcos-live-rootfs.x86_64.img",
            }
        ),
        "4.8": MappingProxyType(
            {
                ISO_URL: f"{_MIRROR}/pre-release/4.8.0-rc.3/rhcos-4.8.0-rc.3-x86_64-live.x86_64.iso",
                ROOTFS_URL: f"{_MIRROR}/pre-release/4.8.0-rc.3/rhcos-live-rootfs.x86_64.img",
            }
        ),
    }
)

_CATALOG_SHAPE = TypeAdapter(Dict[str, Dict[str, str]])


class VersionCatalog(Mapping[str, Mapping[str, str]]):
    """
    Immutable mapping from version identifier to asset descriptor.

    Entries are not checked for an ``iso_url`` here; a missing asset is
    reported when a path is resolved for that version.

    Example:
        >>> catalog = VersionCatalog({"4.8": {"iso_url": "https://h/a.iso"}})
        >>> "4.8" in catalog
        True
        >>> catalog["4.8"]["iso_url"]
        'https://h/a.iso'
    """

    def __init__(self, versions: Mapping[str, Mapping[str, str]]):
        self._versions: Mapping[str, Mapping[str, str]] = MappingProxyType(
            {
                str(version): MappingProxyType(dict(assets))
                for version, assets in versions.items()
            }
        )

    @classmethod
    def default(cls) -> "VersionCatalog":
        """Catalog built from the compiled-in RHCOS table."""
        return cls(DEFAULT_VERSIONS)

    @classmethod
    def from_json(cls, raw: str) -> "VersionCatalog":
        """
        Parse a serialized catalog.

        Args:
            raw: JSON object shaped {"<version>": {"<asset key>": "<url>"}}

        Returns:
            Parsed catalog

        Raises:
            ConfigError: If raw is not valid JSON of the expected shape
        """
        try:
            versions = _CATALOG_SHAPE.validate_json(raw)
        except ValidationError as e:
            raise ConfigError(
                "Invalid version catalog: expected a JSON object mapping "
                "version to an object of asset key to URL string",
                cause=e,
            ) from e
        return cls(versions)

    @classmethod
    def from_override(cls, raw: Optional[str]) -> "VersionCatalog":
        """
        Catalog from an optional override.

        An empty or absent override selects the default table; anything
        else replaces it entirely.
        """
        if raw is None or not raw.strip():
            return cls.default()
        return cls.from_json(raw)

    def versions(self) -> List[str]:
        """Sorted list of version identifiers."""
        return sorted(self._versions)

    def to_json(self) -> str:
        """Serialize in the same shape accepted by from_json."""
        return json.dumps(
            {version: dict(assets) for version, assets in self._versions.items()},
            sort_keys=True,
        )

    def __getitem__(self, version: str) -> Mapping[str, str]:
        return self._versions[version]

    def __iter__(self) -> Iterator[str]:
        return iter(self._versions)

    def __len__(self) -> int:
        return len(self._versions)

    def __repr__(self) -> str:
        return f"VersionCatalog(versions={self.versions()!r})"
