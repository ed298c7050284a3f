"""Async MPD client.

Every command runs on its own connection: the client dials the server,
checks the greeting, sends one command, reads the framed response and
closes the connection again, whatever the outcome. No connection is kept
between calls.

There are no client-side timeouts. ``idle`` in particular blocks until
the server reports a change, so callers run it on a dedicated task.

Example:
    client = MpdClient(ServerAddress.parse("192.168.1.100:6600"))
    payload = await client.execute("status")
"""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from mpdq.api.mpd.protocol import MpdClientError, ProtocolError
from mpdq.api.mpd.types import ServerAddress

logger = logging.getLogger(__name__)

GREETING_PREFIX = "OK MPD "


class ConnectError(MpdClientError):
    """Failed to reach the server or it did not greet as MPD."""


class TransportError(MpdClientError):
    """Connection failed in the middle of a command exchange."""


Connection = tuple[asyncio.StreamReader, asyncio.StreamWriter]


class MpdClient:
    """Async MPD client using one connection per command.

    Attributes:
        address: MPD server address.
        greeting_prefix: Required start of the server greeting.
    """

    def __init__(self, address: ServerAddress, greeting_prefix: str = GREETING_PREFIX) -> None:
        """Initialize MPD client.

        Args:
            address: MPD server address.
            greeting_prefix: Required start of the server greeting.
        """
        self.address = address
        self.greeting_prefix = greeting_prefix
        self._version: str = ""

    @property
    def version(self) -> str:
        """Return MPD protocol version from the most recent greeting."""
        return self._version

    async def _open(self) -> Connection:
        """Connect to MPD and validate the greeting.

        Raises:
            ConnectError: If the server cannot be reached or greets wrongly.
        """
        host, port = self.address.host, self.address.port
        try:
            reader, writer = await asyncio.open_connection(host, port)
        except (OSError, ValueError) as e:
            raise ConnectError(f"Failed to connect to {self.address}: {e}") from e

        try:
            greeting = (await reader.readline()).decode("utf-8")
        except (OSError, ValueError) as e:
            await _close(writer)
            raise ConnectError(f"Failed to read greeting from {self.address}: {e}") from e

        if not greeting.startswith(self.greeting_prefix):
            await _close(writer)
            raise ConnectError(f"No MPD server found at {self.address}: {greeting.rstrip()!r}")

        self._version = greeting[len(self.greeting_prefix) :].rstrip("\n")
        return reader, writer

    @asynccontextmanager
    async def connection(self) -> AsyncIterator[Connection]:
        """Open a connection that is closed when the block exits."""
        reader, writer = await self._open()
        try:
            yield reader, writer
        finally:
            await _close(writer)

    async def execute(self, command: str) -> str:
        """Send one command and return its response payload.

        Args:
            command: Command line without the trailing newline.

        Returns:
            Response lines before the final OK, each newline-terminated.

        Raises:
            ConnectError: If the connection cannot be opened.
            ProtocolError: If MPD answers with ACK.
            TransportError: If the connection fails mid-exchange.
        """
        if "\n" in command:
            raise ValueError(f"Command must be a single line: {command!r}")

        async with self.connection() as (reader, writer):
            logger.debug("MPD command: %s", command)
            try:
                writer.write(f"{command}\n".encode())
                await writer.drain()
            except OSError as e:
                raise TransportError(f"Failed to send {command!r}: {e}") from e

            lines: list[str] = []
            while True:
                line = await _read_line(reader)
                if line == "OK\n":
                    return "".join(lines)
                if line.startswith("ACK "):
                    raise ProtocolError(line)
                lines.append(line)

    async def status(self) -> str:
        """Return the raw payload of the status command."""
        return await self.execute("status")

    async def playlistinfo(self) -> str:
        """Return the raw payload of the playlistinfo command."""
        return await self.execute("playlistinfo")

    async def idle(self) -> str:
        """Block until MPD reports a change and return the changed subsystems."""
        return await self.execute("idle")


async def _read_line(reader: asyncio.StreamReader) -> str:
    """Read one newline-terminated line.

    Raises:
        TransportError: On I/O failure or if the stream ends.
    """
    try:
        data = await reader.readline()
        line = data.decode("utf-8")
    except (OSError, ValueError) as e:
        raise TransportError(f"Failed to read response: {e}") from e
    if not line.endswith("\n"):
        raise TransportError("Connection closed by server")
    return line


async def _close(writer: asyncio.StreamWriter) -> None:
    """Close a connection, ignoring errors from an already broken socket."""
    try:
        writer.close()
        await writer.wait_closed()
    except OSError as e:
        logger.debug("Expected error during MPD disconnect: %s", e)
    logger.debug("MPD connection closed")
