"""
HTTP session factory for asset downloads.

Sessions are created inside a running event loop and owned by whoever
created them; callers close them with ``async with`` or ``await close()``.
"""

import aiohttp

# 0 disables aiohttp's connection cap
UNLIMITED = 0


def create_session(
    max_connections: int = UNLIMITED,
    max_connections_per_host: int = UNLIMITED,
) -> aiohttp.ClientSession:
    """
    Create an aiohttp session for streaming downloads.

    The session-wide timeout is disabled; per-request timeouts are set by
    the fetcher so multi-gigabyte images aren't cut off by aiohttp's
    five minute default.

    Args:
        max_connections: Total connection pool size (0 = unlimited)
        max_connections_per_host: Per-host connection limit (0 = unlimited)

    Returns:
        New ClientSession
    """
    connector = aiohttp.TCPConnector(
        limit=max_connections,
        limit_per_host=max_connections_per_host,
    )
    return aiohttp.ClientSession(
        connector=connector,
        timeout=aiohttp.ClientTimeout(total=None),
    )


__all__ = ["create_session", "UNLIMITED"]
