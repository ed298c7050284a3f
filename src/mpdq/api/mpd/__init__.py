"""MPD client module.

This module provides an async MPD client that runs every command on a
fresh connection, plus the parsers that turn its responses into typed
queue and playback state.

Example:
    from mpdq.api.mpd import MpdClient, ServerAddress

    client = MpdClient(ServerAddress.parse("192.168.1.100:6600"))
    payload = await client.status()
"""

from mpdq.api.mpd.client import ConnectError, MpdClient, TransportError
from mpdq.api.mpd.protocol import MpdClientError, ParseError, ProtocolError
from mpdq.api.mpd.types import PlaybackState, ServerAddress, Snapshot, Track

__all__ = [
    "ConnectError",
    "MpdClient",
    "MpdClientError",
    "ParseError",
    "PlaybackState",
    "ProtocolError",
    "ServerAddress",
    "Snapshot",
    "Track",
    "TransportError",
]
