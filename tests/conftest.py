"""Test fixtures for mpdq tests."""

from collections.abc import Callable

import pytest
from PySide6.QtCore import QCoreApplication

GREETING = b"OK MPD 0.23.5\n"


class MockStreamReader:
    """Mock asyncio StreamReader for testing."""

    def __init__(self, responses: list[bytes]) -> None:
        self._responses = responses
        self._index = 0
        self._buffer = b""

    async def readline(self) -> bytes:
        """Read a line from mock data, or the partial rest at end of stream."""
        while b"\n" not in self._buffer:
            if self._index >= len(self._responses):
                rest, self._buffer = self._buffer, b""
                return rest
            self._buffer += self._responses[self._index]
            self._index += 1

        line, self._buffer = self._buffer.split(b"\n", 1)
        return line + b"\n"


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

    @property
    def sent(self) -> bytes:
        """Return everything written so far."""
        return b"".join(self.data)


MockConnection = tuple[MockStreamReader, MockStreamWriter]


@pytest.fixture
def mock_connection() -> Callable[..., MockConnection]:
    """Create a mock connection that greets as MPD, then replays responses."""

    def _mock_connection(*responses: bytes, greeting: bytes = GREETING) -> MockConnection:
        reader = MockStreamReader([greeting, *responses])
        writer = MockStreamWriter()
        return reader, writer

    return _mock_connection


@pytest.fixture
def qapp() -> QCoreApplication:
    """Create a Qt application for testing."""
    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication([])
    return app
