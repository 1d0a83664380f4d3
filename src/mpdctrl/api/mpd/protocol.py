"""MPD protocol parsing utilities.

MPD uses a simple line-based text protocol:
- Commands are sent as plain text lines
- Responses are key-value pairs: "key: value"
- Responses end with "OK" or "ACK [error@index] {command} message"
- A fresh connection greets with "OK MPD <version>"

Reference: https://mpd.readthedocs.io/en/stable/protocol.html
"""

import logging
import re
from collections.abc import Callable, Iterable
from datetime import datetime

from mpdctrl.api.mpd.types import LineKind, MpdMessage, MpdSignal, MpdValue

logger = logging.getLogger(__name__)

# Verbs whose responses are a sequence of records rather than one record.
MULTI_RECORD_COMMANDS: frozenset[str] = frozenset(
    {
        "playlistinfo",
        "lsinfo",
        "listplaylistinfo",
        "listallinfo",
        "listfiles",
        "outputs",
    }
)

# Pattern for structured ACK text: [error@command_listNum] {current_command} message_text
ACK_PATTERN = re.compile(r"\[(\d+)@\d+\] \{(\w*)\} (.*)")

DEFAULT_PORT = 6600

_SEPARATOR = ": "


class MpdError(Exception):
    """MPD protocol error reported by an ACK line."""

    def __init__(self, message: str, code: int = 0, command: str = "") -> None:
        self.message = message
        self.code = code
        self.command = command
        super().__init__(message)

    @classmethod
    def from_line(cls, line: str) -> "MpdError":
        """Build an error from an ACK line.

        The message is everything after the marker and its separator.
        Structured MPD errors also fill in ``code`` and ``command``.
        """
        message = line[len(MpdSignal.ERROR) + 1 :]
        match = ACK_PATTERN.match(message)
        if match:
            return cls(message, code=int(match.group(1)), command=match.group(2))
        return cls(message)


class MpdConnectionError(Exception):
    """Failed to talk to the MPD server."""


class MpdValidationError(ValueError):
    """A command argument was rejected before sending."""


def format_command(command: str, argument: str | float | None = None) -> str:
    """Format an MPD command line (without newline).

    The argument is wrapped in double quotes verbatim; embedded quotes are
    not escaped.

    Raises:
        MpdValidationError: If the argument contains a line break.
    """
    if argument is None:
        return command
    text = str(argument)
    if "\n" in text or "\r" in text:
        raise MpdValidationError("Command arguments cannot contain line breaks")
    return f'{command} "{text}"'


def encode_command(command: str, argument: str | float | None = None) -> bytes:
    """Encode a command as the bytes written to the socket."""
    return f"{format_command(command, argument)}\n".encode()


def classify_line(line: str) -> LineKind:
    """Classify a response line."""
    if line == MpdSignal.END:
        return LineKind.END
    if line.startswith(MpdSignal.VERSION):
        return LineKind.BANNER
    if line.startswith(MpdSignal.ERROR):
        return LineKind.ERROR
    return LineKind.DATA


# -----------------------------------------------------------------------------
# Field coercion
# -----------------------------------------------------------------------------

Coercion = Callable[[str, str], MpdMessage]


def _as_int(key: str, value: str) -> MpdMessage:
    return {key.lower(): int(value)}


def _renamed(field: str, convert: Callable[[str], MpdValue]) -> Coercion:
    def coerce(_key: str, value: str) -> MpdMessage:
        return {field: convert(value)}

    return coerce


def _directory(_key: str, value: str) -> MpdMessage:
    return {"file": value, "isDir": 1}


def _elapsed_duration(_key: str, value: str) -> MpdMessage:
    # "elapsed:total", both in whole seconds
    return {"duration": float(value.split(":")[1])}


def _audio_format(_key: str, value: str) -> MpdMessage:
    # "samplerate:bits:channels"; bits is "f" for float output
    result: MpdMessage = {}
    for field, part in zip(("sampleRate", "sampleBits"), value.split(":")):
        try:
            result[field] = int(part)
        except ValueError:
            logger.debug("Skipping audio %s component: %r", field, part)
    return result


def _passthrough(key: str, value: str) -> MpdMessage:
    return {key.lower(): value}


FIELD_COERCIONS: dict[str, Coercion] = {
    "Id": _as_int,
    "Pos": _as_int,
    "volume": _as_int,
    "repeat": _as_int,
    "random": _as_int,
    "single": _as_int,
    "consume": _as_int,
    "playlist": _as_int,
    "directory": _directory,
    "Last-Modified": _renamed("lastModified", datetime.fromisoformat),
    "Time": _renamed("duration", float),
    "song": _renamed("songPos", int),
    "songid": _renamed("songId", int),
    "time": _elapsed_duration,
    "elapsed": _renamed("elapsed", float),
    "bitrate": _renamed("bitRate", int),
    "audio": _audio_format,
}


def split_line(line: str) -> tuple[str, str] | None:
    """Split a data line on its first ``": "``.

    Returns:
        (key, value), or None if the line has no separator.
    """
    key, separator, value = line.partition(_SEPARATOR)
    if not separator:
        return None
    return key, value


def parse_line(line: str) -> MpdMessage:
    """Decode one data line into the fields it contributes.

    Malformed lines and values that cannot be coerced yield no fields.
    """
    parts = split_line(line)
    if parts is None:
        if line:
            logger.debug("Skipping malformed MPD line: %r", line)
        return {}

    key, value = parts
    coerce = FIELD_COERCIONS.get(key, _passthrough)
    try:
        return coerce(key, value)
    except (ValueError, IndexError):
        logger.debug("Skipping MPD line with unexpected value: %r", line)
        return {}


# -----------------------------------------------------------------------------
# Message assembly
# -----------------------------------------------------------------------------


def parse_message_object(lines: Iterable[str]) -> MpdMessage:
    """Merge every data line into a single message.

    Args:
        lines: Data lines (without banner or OK).

    Returns:
        Message dict; later duplicate keys win.
    """
    result: MpdMessage = {}
    for line in lines:
        result.update(parse_line(line))
    return result


def parse_message_list(lines: Iterable[str]) -> list[MpdMessage]:
    """Split data lines into records.

    The raw key of the first data line is the delimiter: every line with
    that key starts a new record.

    Args:
        lines: Data lines (without banner or OK).

    Returns:
        List of message dicts, in response order.
    """
    result: list[MpdMessage] = []
    delimiter: str | None = None
    message: MpdMessage | None = None

    for line in lines:
        parts = split_line(line)
        key = parts[0] if parts else None
        if delimiter is None:
            delimiter = key
        if key is not None and key == delimiter:
            message = {}
            result.append(message)
        if message is not None:
            message.update(parse_line(line))

    return result


def parse_response(command: str, lines: list[str]) -> MpdMessage | list[MpdMessage]:
    """Parse collected data lines the way the command's verb requires."""
    if command in MULTI_RECORD_COMMANDS:
        return parse_message_list(lines)
    return parse_message_object(lines)
