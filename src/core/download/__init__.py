"""
Async download module.

Provides HTTP download logic decoupled from catalog and store concerns:
    - aiohttp session factory with per-request timeouts
    - Streaming of large bodies to disk with aiofiles
    - Content-Length validation
    - Partial files renamed into place only once complete, removed on failure
"""

from core.download.fetcher import CHUNK_SIZE, fetch
from core.download.http_client import create_session

__all__ = ["CHUNK_SIZE", "create_session", "fetch"]
