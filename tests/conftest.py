"""Test fixtures for mpdctrl tests."""

import asyncio
from collections.abc import Callable

import pytest

from mpdctrl.core.config import ConfigManager


class MockStreamWriter:
    """Mock asyncio StreamWriter for testing."""

    def __init__(self) -> None:
        self.data: list[bytes] = []
        self._closed = False

    def write(self, data: bytes) -> None:
        """Record written data."""
        self.data.append(data)

    async def drain(self) -> None:
        """Mock drain."""

    def close(self) -> None:
        """Mark as closed."""
        self._closed = True

    async def wait_closed(self) -> None:
        """Mock wait_closed."""

    def is_closing(self) -> bool:
        """Check if closing."""
        return self._closed


Connection = tuple[asyncio.StreamReader, MockStreamWriter]


@pytest.fixture
def mock_connection() -> Callable[..., Connection]:
    """Create a reader pre-filled with server output, plus a recording writer.

    Must be called from inside a running event loop.
    """

    def _mock_connection(
        responses: list[bytes], *, eof: bool = True, limit: int = 2**16
    ) -> Connection:
        reader = asyncio.StreamReader(limit=limit)
        for chunk in responses:
            reader.feed_data(chunk)
        if eof:
            reader.feed_eof()
        return reader, MockStreamWriter()

    return _mock_connection


@pytest.fixture
def config() -> ConfigManager:
    """Return a fresh ConfigManager for each test."""
    # Use unique organization/app to avoid touching the user's settings
    config = ConfigManager("mpdctrlTest", "TestConfig")
    config.clear()
    return config
