"""mpdq: asyncio client for the MPD queue and playback protocol."""

__version__ = "0.1.0"
