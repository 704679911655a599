"""
Core library shared by the image store.

Modules:
    core.download: aiohttp fetcher with Content-Length validation
    core.errors: exception hierarchy and classification
    core.logging: structured logging setup
    core.async_utils: signal-aware asyncio runner
"""
