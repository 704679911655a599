"""
Entry point for the image store.

Usage:
    # Download every missing image
    python -m image_store populate

    # Give up after 30 minutes
    python -m image_store populate --timeout 1800

    # List catalog versions and whether each is on disk
    python -m image_store versions

    # Print the local path of a version's image
    python -m image_store path 4.8

Configuration:
    DATA_DIR: Directory holding downloaded images (required)
    RHCOS_VERSIONS: JSON catalog override, e.g.
        {"4.8": {"iso_url": "https://...", "rootfs_url": "https://..."}}
    IMAGE_STORE_DOWNLOAD_TIMEOUT: Per-download timeout in seconds
    JSON_LOGS: JSON file logs (default: true)
    LOG_DIR: Log directory (default: ./logs)
"""

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from core.async_utils import run_async_with_shutdown
from core.errors.exceptions import ConfigError, ImageStoreError
from core.logging.setup import get_logger, setup_logging
from core.logging.utilities import log_exception
from image_store.catalog import ISO_URL
from image_store.config import ImageStoreConfig
from image_store.store import ImageStore

# Placeholder logger until setup_logging() is called in main()
logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="image_store",
        description="Maintain a local cache of versioned boot images",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Console log level (default: INFO)",
    )
    parser.add_argument(
        "--log-dir",
        type=str,
        help="Directory for log files (default: LOG_DIR env var or ./logs)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    populate = subparsers.add_parser("populate", help="Download missing images")
    populate.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Overall deadline in seconds (default: none)",
    )

    subparsers.add_parser("versions", help="List catalog versions")

    path = subparsers.add_parser("path", help="Print the local path for a version")
    path.add_argument("version", help="Version identifier, e.g. 4.8")
    path.add_argument(
        "--asset",
        default=ISO_URL,
        help=f"Asset key to resolve (default: {ISO_URL})",
    )

    return parser.parse_args(argv)


def run_populate(store: ImageStore, timeout: Optional[float]) -> int:
    try:
        run_async_with_shutdown(store.populate(timeout=timeout))
    except KeyboardInterrupt:
        logger.warning("Populate interrupted")
        return 130
    except asyncio.TimeoutError as e:
        log_exception(logger, e, "Populate timed out", include_traceback=False)
        return 1
    except (ImageStoreError, OSError) as e:
        log_exception(logger, e, "Populate failed", include_traceback=False)
        return 1
    logger.info("All images present")
    return 0


def run_versions(store: ImageStore) -> int:
    for version in store.versions():
        try:
            present = store.path_for_version(version).exists()
            state = "present" if present else "missing"
        except ImageStoreError as e:
            state = f"unusable ({e.message})"
        print(f"{version}\t{state}")
    return 0


def run_path(store: ImageStore, version: str, asset_key: str) -> int:
    try:
        print(store.path_for_version(version, asset_key))
    except ImageStoreError as e:
        print(f"error: {e.message}", file=sys.stderr)
        return 1
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    global logger
    args = parse_args(argv)

    # JSON logs: controlled via JSON_LOGS env var (default: true)
    json_logs = os.getenv("JSON_LOGS", "true").lower() in ("true", "1", "yes")
    log_dir = Path(args.log_dir or os.getenv("LOG_DIR", "logs"))

    setup_logging(
        name="image_store",
        stage=args.command,
        domain="image_store",
        log_dir=log_dir,
        json_format=json_logs,
        console_level=getattr(logging, args.log_level),
        worker_id=os.getenv("WORKER_ID"),
    )
    logger = get_logger(__name__)

    try:
        store = ImageStore.from_config(ImageStoreConfig.from_env())
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        return 2

    if args.command == "populate":
        return run_populate(store, args.timeout)
    if args.command == "versions":
        return run_versions(store)
    return run_path(store, args.version, args.asset)


if __name__ == "__main__":
    sys.exit(main())
