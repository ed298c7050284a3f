"""Tests for MPD protocol parsing."""

import pytest

from mpdq.api.mpd.protocol import (
    ParseError,
    ProtocolError,
    escape_arg,
    format_command,
    is_relevant_change,
    parse_elapsed,
    parse_playback_state,
    parse_queue,
    parse_song_id,
    split_key_value,
    split_lines,
)
from mpdq.api.mpd.types import PlaybackState, Track

STATUS = split_lines(
    "volume: 75\nrepeat: 0\nsong: 1\nsongid: 42\nstate: play\nelapsed: 12.5\nduration: 180.5\n"
)


class TestSplitKeyValue:
    """Tests for split_key_value function."""

    def test_key_value(self) -> None:
        """Test splitting a regular line."""
        assert split_key_value("Title: Song") == ("Title", "Song")

    def test_colon_in_value(self) -> None:
        """Test that only the first separator splits."""
        assert split_key_value("file: a: b.mp3") == ("file", "a: b.mp3")

    def test_bare_key(self) -> None:
        """Test a key with no value."""
        assert split_key_value("file:") == ("file", None)
        assert split_key_value("") == ("", None)

    def test_empty_value(self) -> None:
        """Test a key with an empty value."""
        assert split_key_value("file: ") == ("file", "")


class TestParsePlaybackState:
    """Tests for parse_playback_state function."""

    @pytest.mark.parametrize(
        ("word", "expected"),
        [
            ("play", PlaybackState.PLAYING),
            ("stop", PlaybackState.STOPPED),
            ("pause", PlaybackState.PAUSED),
        ],
    )
    def test_known_states(self, word: str, expected: PlaybackState) -> None:
        """Test each state word maps to its enum member."""
        assert parse_playback_state(["volume: 50", f"state: {word}"]) is expected

    def test_missing_state(self) -> None:
        """Test a status block without state line."""
        with pytest.raises(ParseError, match="mpdState not found"):
            parse_playback_state(["volume: 50", ""])

    def test_unknown_state(self) -> None:
        """Test an unrecognized state word."""
        with pytest.raises(ParseError):
            parse_playback_state(["state: rewinding"])

    def test_empty_state(self) -> None:
        """Test a state line without word."""
        with pytest.raises(ParseError):
            parse_playback_state(["state: "])


class TestParseElapsed:
    """Tests for parse_elapsed function."""

    def test_present(self) -> None:
        """Test parsing elapsed time."""
        assert parse_elapsed(STATUS) == 12.5

    def test_absent(self) -> None:
        """Test that a missing elapsed line is not an error."""
        assert parse_elapsed(["state: stop"]) is None

    def test_single_precision(self) -> None:
        """Test that elapsed is rounded to 32-bit precision."""
        value = parse_elapsed(["elapsed: 0.1"])
        assert value is not None
        assert value != 0.1
        assert value == pytest.approx(0.1)

    def test_malformed(self) -> None:
        """Test an unparsable elapsed value."""
        with pytest.raises(ParseError, match="elapsed"):
            parse_elapsed(["elapsed: soon"])


class TestParseSongId:
    """Tests for parse_song_id function."""

    def test_present(self) -> None:
        """Test parsing the song id."""
        assert parse_song_id(STATUS) == 42

    def test_absent(self) -> None:
        """Test that a missing songid line is not an error."""
        assert parse_song_id(["state: stop"]) is None

    def test_malformed(self) -> None:
        """Test an unparsable song id."""
        with pytest.raises(ParseError, match="songid"):
            parse_song_id(["songid: 4.2"])

    @pytest.mark.parametrize("value", [" 42", "4_2", "٤٢"])
    def test_rejects_loose_integers(self, value: str) -> None:
        """Test a song id with spaces, separators or non-ASCII digits."""
        with pytest.raises(ParseError, match="songid"):
            parse_song_id([f"songid: {value}"])

    def test_negative(self) -> None:
        """Test a signed song id still parses."""
        assert parse_song_id(["songid: -1"]) == -1


class TestParseQueue:
    """Tests for parse_queue function."""

    def test_two_tracks(self) -> None:
        """Test tracks are returned in listing order."""
        queue = parse_queue(split_lines("file: a.mp3\nId: 1\nTitle: X\nfile: b.mp3\nId: 2\n"))
        assert queue == [
            Track(uri="a.mp3", track_id=1, title="X"),
            Track(uri="b.mp3", track_id=2),
        ]

    def test_all_fields(self) -> None:
        """Test every recognized key."""
        lines = [
            "file: music/song.flac",
            "Last-Modified: 2024-01-01T00:00:00Z",
            "Artist: Artist",
            "Album: Album",
            "Title: Title",
            "Track: 3",
            "Time: 181",
            "duration: 180.5",
            "Pos: 0",
            "Id: 7",
        ]
        assert parse_queue(lines) == [
            Track(
                uri="music/song.flac",
                track_id=7,
                duration=180.5,
                title="Title",
                artist="Artist",
                album="Album",
                track_number=3,
            )
        ]

    def test_empty_input(self) -> None:
        """Test an empty queue."""
        assert parse_queue(split_lines("")) == []

    def test_bare_file_line(self) -> None:
        """Test a file line without value fails the whole parse."""
        with pytest.raises(ParseError, match="encountered empty URI"):
            parse_queue(split_lines("file: a.mp3\nId: 1\nfile:\nId: 2\n"))

    def test_empty_file_value(self) -> None:
        """Test a file line with an empty value."""
        with pytest.raises(ParseError, match="encountered empty URI"):
            parse_queue(["file: "])

    @pytest.mark.parametrize("line", ["Id: x", "duration: long", "Track: 3/12"])
    def test_malformed_numbers(self, line: str) -> None:
        """Test malformed numeric fields."""
        with pytest.raises(ParseError, match=line.split(":")[0]):
            parse_queue(["file: a.mp3", line])

    def test_keys_are_case_sensitive(self) -> None:
        """Test that lowercase tag keys are not recognized."""
        queue = parse_queue(["file: a.mp3", "title: lower", "id: 3"])
        assert queue == [Track(uri="a.mp3")]

    def test_key_without_value_ignored(self) -> None:
        """Test tag keys without value are skipped."""
        assert parse_queue(["file: a.mp3", "Title", "Id:"]) == [Track(uri="a.mp3")]

    @pytest.mark.parametrize("value", [" 42", "4_2", "42 ", "٤٢", "0x2a", ""])
    def test_rejects_loose_integers(self, value: str) -> None:
        """Test integers must be plain ASCII digits."""
        with pytest.raises(ParseError, match="Id"):
            parse_queue(["file: a.mp3", f"Id: {value}"])
        with pytest.raises(ParseError, match="Track"):
            parse_queue(["file: a.mp3", f"Track: {value}"])

    def test_signed_integer(self) -> None:
        """Test a leading sign is accepted, as MPD's own parser does."""
        assert parse_queue(["file: a.mp3", "Track: +3"]) == [Track(uri="a.mp3", track_number=3)]

    def test_fields_before_first_file(self) -> None:
        """Test tags listed before the first file line belong to the first track."""
        queue = parse_queue(["Id: 5", "Title: Early", "file: a.mp3", "file: b.mp3", "Id: 6"])
        assert queue == [
            Track(uri="a.mp3", track_id=5, title="Early"),
            Track(uri="b.mp3", track_id=6),
        ]

    def test_parse_is_reentrant(self) -> None:
        """Test separate parses share no state."""
        first = parse_queue(["file: a.mp3", "Id: 1"])
        second = parse_queue(["Title: T"])
        assert first == [Track(uri="a.mp3", track_id=1)]
        assert second == []


class TestProtocolError:
    """Tests for ACK line decoding."""

    def test_structured_ack(self) -> None:
        """Test an ACK line with code and command."""
        error = ProtocolError("ACK [2@0] {seekcur} Decoder failed to seek\n")
        assert error.code == 2
        assert error.command == "seekcur"
        assert error.message == "Decoder failed to seek"
        assert error.line == "ACK [2@0] {seekcur} Decoder failed to seek"
        assert "Decoder failed to seek" in str(error)

    def test_free_form_ack(self) -> None:
        """Test an ACK line that does not follow the usual grammar."""
        error = ProtocolError("ACK error message\n")
        assert error.code == 0
        assert error.message == "error message"
        assert "error message" in str(error)


class TestIsRelevantChange:
    """Tests for is_relevant_change function."""

    @pytest.mark.parametrize(
        ("payload", "expected"),
        [
            ("changed: player\n", True),
            ("changed: playlist\n", True),
            ("changed: mixer\nchanged: player\n", True),
            ("changed: mixer\n", False),
            ("changed: options\nchanged: database\n", False),
            ("changed: PLAYER\n", False),
            ("", False),
        ],
    )
    def test_payloads(self, payload: str, expected: bool) -> None:
        """Test which subsystems trigger a refresh."""
        assert is_relevant_change(payload) is expected


class TestFormatCommand:
    """Tests for command formatting."""

    def test_no_args(self) -> None:
        """Test a bare command."""
        assert format_command("status") == "status"

    def test_int_args(self) -> None:
        """Test numeric arguments."""
        assert format_command("move", 3, 2) == "move 3 2"

    def test_quoted_arg(self) -> None:
        """Test arguments that need quoting."""
        assert escape_arg('a "b"') == '"a \\"b\\""'
        assert escape_arg("") == '""'
