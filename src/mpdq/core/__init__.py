"""Core application logic layer.

This module builds snapshots and issues queue commands on top of the
async MPD client, and bridges server-side changes to Qt signals.

Classes:
    MpdWatcher: Background idle loop emitting change signals.
"""

from mpdq.core.commands import (
    delete_highlighted,
    move_highlighted_down,
    move_highlighted_up,
    play_highlighted,
    seek_backward,
    seek_forward,
    toggle_pause,
)
from mpdq.core.snapshot import fetch_snapshot
from mpdq.core.watcher import MpdWatcher

__all__ = [
    "MpdWatcher",
    "delete_highlighted",
    "fetch_snapshot",
    "move_highlighted_down",
    "move_highlighted_up",
    "play_highlighted",
    "seek_backward",
    "seek_forward",
    "toggle_pause",
]
