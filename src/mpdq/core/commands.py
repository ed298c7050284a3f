"""Queue and playback commands driven by the current snapshot.

Each operation turns one user action into at most one MPD command.
"""

import logging

from mpdq.api.mpd.client import MpdClient
from mpdq.api.mpd.protocol import ProtocolError, format_command
from mpdq.api.mpd.types import PlaybackState, Snapshot, Track

logger = logging.getLogger(__name__)

# MPD reports this when seeking past the end of the current song
SEEK_PAST_END_ERROR = "Decoder failed to seek"


def _queue_id(track: Track) -> int:
    if track.track_id is None:
        raise ValueError(f"Track has no queue id: {track.uri}")
    return track.track_id


def _seek_amount(seconds: int) -> int:
    if seconds < 0:
        raise ValueError(f"Seek amount must not be negative: {seconds}")
    return seconds


async def play_highlighted(client: MpdClient, snapshot: Snapshot) -> None:
    """Start playing the highlighted track."""
    track = snapshot.highlighted_track
    if track is None:
        return
    await client.execute(format_command("playid", _queue_id(track)))


async def toggle_pause(client: MpdClient, snapshot: Snapshot) -> None:
    """Pause when playing, resume when paused, nothing when stopped."""
    if snapshot.playback_state is PlaybackState.PLAYING:
        await client.execute("pause 1")
    elif snapshot.playback_state is PlaybackState.PAUSED:
        await client.execute("pause 0")


async def delete_highlighted(client: MpdClient, snapshot: Snapshot) -> None:
    """Remove the highlighted track from the queue."""
    track = snapshot.highlighted_track
    if track is None:
        return
    await client.execute(format_command("deleteid", _queue_id(track)))


async def move_highlighted_up(client: MpdClient, snapshot: Snapshot) -> None:
    """Swap the highlighted track with the one above it.

    The highlight follows the track once MPD has accepted the move.
    """
    index = snapshot.highlighted
    if not 0 < index < len(snapshot.queue):
        return
    await client.execute(format_command("move", index, index - 1))
    snapshot.highlighted = index - 1


async def move_highlighted_down(client: MpdClient, snapshot: Snapshot) -> None:
    """Swap the highlighted track with the one below it.

    The highlight follows the track once MPD has accepted the move.
    """
    index = snapshot.highlighted
    if not 0 <= index < len(snapshot.queue) - 1:
        return
    await client.execute(format_command("move", index, index + 1))
    snapshot.highlighted = index + 1


async def seek_backward(client: MpdClient, seconds: int) -> None:
    """Seek backwards within the current song."""
    await client.execute(format_command("seekcur", f"-{_seek_amount(seconds)}"))


async def seek_forward(client: MpdClient, seconds: int) -> None:
    """Seek forwards within the current song.

    Seeking across the end of the song is not an error.
    """
    try:
        await client.execute(format_command("seekcur", f"+{_seek_amount(seconds)}"))
    except ProtocolError as e:
        if SEEK_PAST_END_ERROR not in str(e):
            raise
        logger.debug("Ignoring seek past end of song: %s", e.message)
