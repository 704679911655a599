"""
Error classification and exception hierarchy.

Provides:
- ErrorCategory enum for classifying errors
- ImageStoreError hierarchy for typed exceptions
- Classification utilities for error handling
"""

from core.errors.exceptions import (
    # Enums
    ErrorCategory,
    # Base classes
    ImageStoreError,
    NotFoundError,
    FetchError,
    # Configuration errors
    ConfigError,
    # Resolution errors
    UnknownVersionError,
    MissingAssetError,
    # Fetch errors
    HTTPStatusError,
    ShortWriteError,
    TransferError,
    # Classification utilities
    classify_http_status,
    classify_exception,
)

__all__ = [
    # Enums
    "ErrorCategory",
    # Base classes
    "ImageStoreError",
    "NotFoundError",
    "FetchError",
    # Configuration errors
    "ConfigError",
    # Resolution errors
    "UnknownVersionError",
    "MissingAssetError",
    # Fetch errors
    "HTTPStatusError",
    "ShortWriteError",
    "TransferError",
    # Classification utilities
    "classify_http_status",
    "classify_exception",
]
