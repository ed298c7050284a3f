"""MPD client data types.

This module defines the dataclasses the parsers produce: the server
address, the playback state, queue tracks, and the application snapshot.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Self

DEFAULT_PORT = 6600


@dataclass(frozen=True)
class ServerAddress:
    """Network location of an MPD server.

    Attributes:
        host: Hostname or IP address.
        port: TCP port.
    """

    host: str
    port: int = DEFAULT_PORT

    @classmethod
    def parse(cls, text: str) -> Self:
        """Parse a "host:port" string.

        Accepts "host:port", "[v6-address]:port" and a bare host, which
        gets the default port.

        Raises:
            ValueError: If the host is empty or the port is invalid.
        """
        text = text.strip()
        if text.startswith("["):
            host, sep, rest = text[1:].partition("]")
            if not sep or (rest and not rest.startswith(":")):
                raise ValueError(f"Invalid server address: {text!r}")
            port_text = rest[1:]
        elif text.count(":") == 1:
            host, _, port_text = text.partition(":")
        else:
            # Bare hostname, or a bare IPv6 address without brackets
            host, port_text = text, ""

        if not host:
            raise ValueError(f"Invalid server address: {text!r}")
        if not port_text:
            return cls(host)
        if not port_text.isdigit() or not 0 < int(port_text) <= 65535:
            raise ValueError(f"Invalid port in server address: {text!r}")
        return cls(host, int(port_text))

    def __str__(self) -> str:
        if ":" in self.host:
            return f"[{self.host}]:{self.port}"
        return f"{self.host}:{self.port}"


class PlaybackState(Enum):
    """Player state as reported by the "state" line of a status block."""

    PLAYING = "play"
    STOPPED = "stop"
    PAUSED = "pause"


@dataclass(frozen=True)
class Track:
    """One entry of the play queue.

    Attributes:
        uri: Path or URL of the song; identifies the track.
        track_id: Queue id assigned by MPD, valid while the song is queued.
        duration: Song duration in seconds.
        title: Title tag.
        artist: Artist tag.
        album: Album tag.
        track_number: Track number tag.
    """

    uri: str
    track_id: int | None = None
    duration: float | None = None
    title: str | None = None
    artist: str | None = None
    album: str | None = None
    track_number: int | None = None

    @property
    def display_title(self) -> str:
        """Return title for display, with filename fallback."""
        if self.title:
            return self.title
        name = self.uri.rsplit("/", 1)[-1]
        if "." in name:
            name = name.rsplit(".", 1)[0]
        return name


@dataclass
class Snapshot:
    """Application-visible MPD state, rebuilt on every refresh.

    ``highlighted`` is the caller's cursor into ``queue``. It is not
    reported by the server and is never adjusted when a new snapshot
    replaces an old one.

    Attributes:
        playback_state: Whether MPD is playing, paused or stopped.
        elapsed: Elapsed time of the current song in seconds.
        active_song_id: Queue id of the current song.
        queue: Queued tracks in queue order.
        highlighted: Index of the highlighted queue entry.
    """

    playback_state: PlaybackState
    elapsed: float | None = None
    active_song_id: int | None = None
    queue: list[Track] = field(default_factory=list)
    highlighted: int = 0

    @property
    def highlighted_track(self) -> Track | None:
        """Return the highlighted track, or None if the index is outside the queue."""
        if not 0 <= self.highlighted < len(self.queue):
            return None
        return self.queue[self.highlighted]

    @property
    def active_track(self) -> Track | None:
        """Return the queue entry that is currently playing, if any."""
        if self.active_song_id is None:
            return None
        for track in self.queue:
            if track.track_id == self.active_song_id:
                return track
        return None
