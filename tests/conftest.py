"""
pytest configuration for image store tests.

Adds src directory to Python path for imports and provides a fake
aiohttp session so downloads can be exercised without a network.
"""

import asyncio
import sys
from pathlib import Path
from typing import Dict, List, Optional, Union

import pytest

# Add src directory to Python path
src_dir = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_dir))

_UNSET = object()


class FakeStream:
    """Stands in for aiohttp's StreamReader."""

    def __init__(
        self,
        body: bytes,
        error: Optional[BaseException] = None,
        stall: bool = False,
    ):
        self._body = body
        self._error = error
        self._stall = stall

    async def iter_chunked(self, n: int):
        for start in range(0, len(self._body), n):
            yield self._body[start : start + n]
            await asyncio.sleep(0)
        if self._error is not None:
            raise self._error
        if self._stall:
            # Never completes; used to exercise cancellation
            await asyncio.Event().wait()


class FakeResponse:
    """Minimal aiohttp.ClientResponse surface used by the fetcher."""

    def __init__(
        self,
        status: int = 200,
        body: bytes = b"",
        content_length=_UNSET,
        error: Optional[BaseException] = None,
        stall: bool = False,
    ):
        self.status = status
        self.body = body
        self.content_length = len(body) if content_length is _UNSET else content_length
        self._error = error
        self._stall = stall
        self.released = False

    @property
    def content(self) -> FakeStream:
        return FakeStream(self.body, error=self._error, stall=self._stall)


class _RequestContext:
    def __init__(self, outcome: Union[FakeResponse, BaseException]):
        self._outcome = outcome

    async def __aenter__(self) -> FakeResponse:
        if isinstance(self._outcome, BaseException):
            raise self._outcome
        self._outcome.released = False
        return self._outcome

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if isinstance(self._outcome, FakeResponse):
            self._outcome.released = True


class FakeSession:
    """
    Stands in for aiohttp.ClientSession.

    routes maps URL to a FakeResponse, or to an exception raised when the
    request is made. Unknown URLs answer 404.
    """

    def __init__(self, routes: Optional[Dict[str, Union[FakeResponse, BaseException]]] = None):
        self.routes = dict(routes or {})
        self.requests: List[str] = []
        self.timeouts: List[object] = []
        self.closed = False

    def get(self, url: str, timeout=None, **kwargs) -> _RequestContext:
        self.requests.append(url)
        self.timeouts.append(timeout)
        return _RequestContext(self.routes.get(url, FakeResponse(status=404)))

    def request_count(self, url: str) -> int:
        return self.requests.count(url)

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_session():
    """Factory fixture: fake_session({url: FakeResponse(...)})."""

    def _make(routes=None) -> FakeSession:
        return FakeSession(routes)

    return _make


@pytest.fixture
def data_dir(tmp_path):
    """Empty image data directory."""
    path = tmp_path / "images"
    path.mkdir()
    return path


@pytest.fixture
def fake_response():
    """The FakeResponse class, for building routes."""
    return FakeResponse
