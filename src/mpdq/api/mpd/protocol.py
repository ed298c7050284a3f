"""MPD protocol parsing utilities.

MPD uses a simple line-based text protocol:
- Commands are sent as plain text lines
- Responses are key-value pairs: "key: value"
- Responses end with "OK" or "ACK [error@index] {command} message"

Keys are matched exactly as MPD emits them ("Title", not "title").

Reference: https://mpd.readthedocs.io/en/stable/protocol.html
"""

import re
import struct
from collections.abc import Callable, Iterable
from typing import Any

from mpdq.api.mpd.types import PlaybackState, Track


class MpdClientError(Exception):
    """Base class for all MPD client errors."""


class ProtocolError(MpdClientError):
    """MPD answered a command with an ACK line."""

    def __init__(self, line: str) -> None:
        self.line = line.rstrip("\n")
        match = ACK_PATTERN.match(self.line)
        if match:
            self.code = int(match.group(1))
            self.command = match.group(2)
            self.message = match.group(3)
        else:
            self.code = 0
            self.command = ""
            self.message = self.line.removeprefix("ACK ")
        super().__init__(f"received mpd error {self.line}")


class ParseError(MpdClientError):
    """Response was well-formed but its content has an unexpected shape."""


# Pattern for ACK responses: ACK [error@command_listNum] {current_command} message_text
ACK_PATTERN = re.compile(r"ACK \[(\d+)@\d+\] \{(\w*)\} (.+)")

# Decimal integer as accepted by MPD, without whitespace or digit separators
INT_PATTERN = re.compile(r"[+-]?[0-9]+")

# Substrings of an idle response that make a snapshot refresh necessary
RELEVANT_SUBSYSTEMS = ("playlist", "player")


def split_lines(payload: str) -> list[str]:
    """Split a raw response payload into lines without their newlines."""
    return payload.split("\n")


def split_key_value(line: str) -> tuple[str, str | None]:
    """Split a response line on the first ": ".

    A line without a separator has no value. A trailing bare colon
    ("file:") is dropped from the key.
    """
    if ": " in line:
        key, value = line.split(": ", 1)
        return key, value
    return line.removesuffix(":"), None


def _parse_int(text: str) -> int:
    """Parse an ASCII decimal integer; int() alone also takes spaces and "_"."""
    if not INT_PATTERN.fullmatch(text):
        raise ValueError(f"invalid integer {text!r}")
    return int(text)


def _parse_float32(text: str) -> float:
    """Parse text as a float rounded to single precision."""
    return struct.unpack("f", struct.pack("f", float(text)))[0]


def _find_value(lines: Iterable[str], prefix: str) -> str | None:
    """Return the text after the first line starting with prefix, if non-empty."""
    for line in lines:
        if line.startswith(prefix) and len(line) > len(prefix):
            return line[len(prefix) :]
    return None


def parse_playback_state(lines: Iterable[str]) -> PlaybackState:
    """Parse the playback state from status lines.

    Raises:
        ParseError: If no line holds a known state.
    """
    for line in lines:
        if line.startswith("state: ") and len(line) > 7:
            try:
                return PlaybackState(line[7:])
            except ValueError:
                continue
    raise ParseError("mpdState not found")


def parse_elapsed(lines: Iterable[str]) -> float | None:
    """Parse elapsed seconds from status lines.

    Returns:
        Elapsed time, or None when the status has no elapsed line.

    Raises:
        ParseError: If the elapsed value is not a number.
    """
    value = _find_value(lines, "elapsed: ")
    if value is None:
        return None
    try:
        return _parse_float32(value)
    except (ValueError, OverflowError) as e:
        raise ParseError(f"could not parse elapsed: {e}") from e


def parse_song_id(lines: Iterable[str]) -> int | None:
    """Parse the current song id from status lines.

    Returns:
        Song id, or None when nothing is selected.

    Raises:
        ParseError: If the songid value is not an integer.
    """
    value = _find_value(lines, "songid: ")
    if value is None:
        return None
    try:
        return _parse_int(value)
    except ValueError as e:
        raise ParseError(f"could not parse songid: {e}") from e


# playlistinfo key -> (Track field, converter)
_QUEUE_KEY_MAP: dict[str, tuple[str, Callable[[str], Any]]] = {
    "Id": ("track_id", _parse_int),
    "duration": ("duration", _parse_float32),
    "Title": ("title", str),
    "Artist": ("artist", str),
    "Album": ("album", str),
    "Track": ("track_number", _parse_int),
}


class _QueueScanner:
    """Accumulates playlistinfo lines into tracks.

    A "file" line starts a new track; the following lines fill in its
    fields until the next "file" line or the end of the listing.
    """

    def __init__(self) -> None:
        self.tracks: list[Track] = []
        self._fields: dict[str, Any] = {}

    def feed(self, line: str) -> None:
        key, value = split_key_value(line)
        if key == "file":
            self._flush()
            if not value:
                raise ParseError("encountered empty URI")
            self._fields["uri"] = value
            return

        if value is None or key not in _QUEUE_KEY_MAP:
            return

        field_name, convert = _QUEUE_KEY_MAP[key]
        try:
            self._fields[field_name] = convert(value)
        except (ValueError, OverflowError) as e:
            raise ParseError(f"could not parse {key}: {e}") from e

    def finish(self) -> list[Track]:
        self._flush()
        return self.tracks

    def _flush(self) -> None:
        if self._fields.get("uri"):
            self.tracks.append(Track(**self._fields))
            self._fields = {}


def parse_queue(lines: Iterable[str]) -> list[Track]:
    """Parse a playlistinfo listing into tracks in queue order.

    Raises:
        ParseError: On an empty URI or a malformed numeric field.
    """
    scanner = _QueueScanner()
    for line in lines:
        scanner.feed(line)
    return scanner.finish()


def is_relevant_change(payload: str) -> bool:
    """Return True if an idle response mentions the queue or the player."""
    return any(
        subsystem in line for line in split_lines(payload) for subsystem in RELEVANT_SUBSYSTEMS
    )


def escape_arg(arg: str) -> str:
    """Escape an argument for MPD command.

    MPD requires arguments with spaces or special chars to be quoted.
    Inside quotes, backslash and double-quote must be escaped.
    """
    if arg and not any(c in arg for c in ' "\t\n\\'):
        return arg

    escaped = arg.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def format_command(command: str, *args: object) -> str:
    """Format an MPD command with arguments.

    Args:
        command: The MPD command name.
        *args: Command arguments, converted with str().

    Returns:
        Formatted command string (without newline).
    """
    if not args:
        return command
    escaped_args = [escape_arg(str(arg)) for arg in args]
    return f"{command} {' '.join(escaped_args)}"
