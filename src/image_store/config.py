"""Image store configuration from environment variables."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from core.errors.exceptions import ConfigError

DEFAULT_DOWNLOAD_TIMEOUT = 3600.0  # 1 hour per image


@dataclass
class ImageStoreConfig:
    """Image store settings.

    Load from environment using ImageStoreConfig.from_env().
    The versions override is kept as raw JSON; it is parsed when the
    store is built so that a malformed value fails store construction.
    """

    data_dir: Path
    versions: Optional[str] = None
    download_timeout: Optional[float] = DEFAULT_DOWNLOAD_TIMEOUT

    @classmethod
    def from_env(cls) -> "ImageStoreConfig":
        """Load configuration from environment variables.

        Required environment variables:
            DATA_DIR: Directory holding downloaded images

        Optional environment variables (with defaults):
            RHCOS_VERSIONS: JSON catalog override (default: built-in table)
            IMAGE_STORE_DOWNLOAD_TIMEOUT: 3600 (default, seconds per download)

        Raises:
            ConfigError: If required variables are missing or values are invalid
        """
        data_dir = os.getenv("DATA_DIR")
        if not data_dir:
            raise ConfigError("DATA_DIR environment variable is required")

        return cls(
            data_dir=Path(data_dir).expanduser(),
            versions=os.getenv("RHCOS_VERSIONS") or None,
            download_timeout=_parse_timeout(
                os.getenv("IMAGE_STORE_DOWNLOAD_TIMEOUT", str(DEFAULT_DOWNLOAD_TIMEOUT))
            ),
        )


def _parse_timeout(raw_value: str) -> float:
    try:
        timeout = float(raw_value)
    except ValueError as e:
        raise ConfigError(
            "Invalid IMAGE_STORE_DOWNLOAD_TIMEOUT value: "
            f"expected number of seconds, got '{raw_value}'",
            cause=e,
        ) from e
    if timeout <= 0:
        raise ConfigError(
            f"IMAGE_STORE_DOWNLOAD_TIMEOUT must be positive, got {raw_value}"
        )
    return timeout
