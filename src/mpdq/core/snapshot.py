"""Build an application snapshot from MPD status and queue listings."""

import logging

from mpdq.api.mpd.client import MpdClient
from mpdq.api.mpd.protocol import (
    parse_elapsed,
    parse_playback_state,
    parse_queue,
    parse_song_id,
    split_lines,
)
from mpdq.api.mpd.types import Snapshot

logger = logging.getLogger(__name__)


async def fetch_snapshot(client: MpdClient) -> Snapshot:
    """Fetch status and queue and combine them into a new Snapshot.

    The two commands run on separate connections, so the queue may
    already reflect a change the status does not.

    Raises:
        MpdClientError: From whichever step failed; nothing partial is returned.
    """
    status = split_lines(await client.status())
    playback_state = parse_playback_state(status)
    elapsed = parse_elapsed(status)
    active_song_id = parse_song_id(status)

    queue = parse_queue(split_lines(await client.playlistinfo()))
    logger.debug("Fetched snapshot: %s, %d queued tracks", playback_state.value, len(queue))

    return Snapshot(
        playback_state=playback_state,
        elapsed=elapsed,
        active_song_id=active_song_id,
        queue=queue,
    )
