"""
Exception types and error classification for the image store.

Provides:
- ErrorCategory enum for retry/reporting decisions
- Typed exception hierarchy for catalog, resolution and fetch failures
- HTTP status classification
"""

from enum import Enum
from typing import Optional


class ErrorCategory(Enum):
    """
    Classification of error types for handling decisions.

    Categories:
        TRANSIENT: Temporary failures that may succeed on a later run
                   (e.g., connection resets, timeouts, 5xx responses)
        PERMANENT: Failures that won't succeed without a config change
                   (e.g., unknown version, 404, malformed override)
        UNKNOWN: Unclassified errors
    """

    TRANSIENT = "transient"
    PERMANENT = "permanent"
    UNKNOWN = "unknown"


class ImageStoreError(Exception):
    """
    Base exception for all image store errors.

    Attributes:
        message: Human-readable error description
        category: Error classification
        cause: Original exception if wrapping
        context: Additional context dict for debugging
    """

    category: ErrorCategory = ErrorCategory.UNKNOWN

    def __init__(
        self,
        message: str,
        cause: Optional[BaseException] = None,
        context: Optional[dict] = None,
    ):
        self.message = message
        self.cause = cause
        self.context = context or {}
        super().__init__(message)

    @property
    def is_retryable(self) -> bool:
        """Whether a later populate run could plausibly succeed."""
        return self.category in (ErrorCategory.TRANSIENT, ErrorCategory.UNKNOWN)

    def __str__(self) -> str:
        parts = [self.message]
        if self.cause:
            parts.append(f"Caused by: {self.cause}")
        return " | ".join(parts)


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigError(ImageStoreError):
    """Invalid configuration or malformed version catalog override."""

    category = ErrorCategory.PERMANENT


# =============================================================================
# Resolution Errors
# =============================================================================


class NotFoundError(ImageStoreError):
    """Base class for catalog lookups that found nothing."""

    category = ErrorCategory.PERMANENT


class UnknownVersionError(NotFoundError):
    """Version is not present in the catalog."""

    def __init__(self, version: str):
        super().__init__(
            f"missing version entry for {version}", context={"version": version}
        )
        self.version = version


class MissingAssetError(NotFoundError):
    """Version entry has no usable URL for the requested asset key."""

    def __init__(self, version: str, asset_key: str):
        super().__init__(
            f"version {version} missing key '{asset_key}'",
            context={"version": version, "asset_key": asset_key},
        )
        self.version = version
        self.asset_key = asset_key


# =============================================================================
# Fetch Errors
# =============================================================================


class FetchError(ImageStoreError):
    """Base class for failures while downloading an asset."""

    def __init__(
        self,
        message: str,
        url: str,
        cause: Optional[BaseException] = None,
        context: Optional[dict] = None,
    ):
        context = dict(context or {})
        context.setdefault("download_url", url)
        super().__init__(message, cause, context)
        self.url = url


class HTTPStatusError(FetchError):
    """Server answered with a status outside 200-299."""

    def __init__(self, url: str, status: int):
        super().__init__(
            f"Request to {url} returned error code {status}",
            url,
            context={"http_status": status},
        )
        self.status = status

    @property
    def category(self) -> ErrorCategory:  # type: ignore[override]
        return classify_http_status(self.status)


class ShortWriteError(FetchError):
    """Bytes written differ from the declared Content-Length."""

    category = ErrorCategory.TRANSIENT

    def __init__(
        self,
        url: str,
        expected: Optional[int],
        actual: int,
        cause: Optional[BaseException] = None,
    ):
        if expected is None:
            message = f"Wrote {actual} bytes, but {url} declared no content length"
        else:
            message = f"Wrote {actual} bytes, but expected to write {expected}"
        super().__init__(
            message,
            url,
            cause=cause,
            context={"content_length": expected, "bytes_written": actual},
        )
        self.expected = expected
        self.actual = actual


class TransferError(FetchError):
    """Connection failure or timeout during the request or body transfer."""

    category = ErrorCategory.TRANSIENT


# =============================================================================
# Error Classification Utilities
# =============================================================================


def classify_http_status(status_code: int) -> ErrorCategory:
    """
    Classify HTTP status code into error category.

    Args:
        status_code: HTTP response status

    Returns:
        Appropriate ErrorCategory
    """
    if 200 <= status_code < 300:
        return ErrorCategory.UNKNOWN  # Not an error

    if status_code in (408, 429):
        return ErrorCategory.TRANSIENT

    if 400 <= status_code < 500:
        return ErrorCategory.PERMANENT  # Client errors, won't fix with retry

    if status_code >= 500:
        return ErrorCategory.TRANSIENT  # Server errors, may recover

    return ErrorCategory.UNKNOWN


def classify_exception(exc: BaseException) -> ErrorCategory:
    """
    Classify an exception into error category.

    Args:
        exc: Exception to classify

    Returns:
        Appropriate ErrorCategory
    """
    if isinstance(exc, ImageStoreError):
        return exc.category

    if isinstance(exc, FileNotFoundError):
        return ErrorCategory.PERMANENT

    exc_type = type(exc).__name__.lower()
    if "timeout" in exc_type:
        return ErrorCategory.TRANSIENT

    return ErrorCategory.UNKNOWN
