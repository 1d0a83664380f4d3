"""MPD (Music Player Daemon) protocol client.

Classes:
    MpdClient: Async client, one connection per command.
    MpdError: ACK error returned by the server.
    MpdConnectionError: Server unreachable or connection dropped.
    MpdValidationError: Argument rejected before sending.
"""

from mpdctrl.api.mpd.client import MpdClient
from mpdctrl.api.mpd.protocol import (
    MULTI_RECORD_COMMANDS,
    MpdConnectionError,
    MpdError,
    MpdValidationError,
    parse_message_list,
    parse_message_object,
)
from mpdctrl.api.mpd.types import LineKind, MpdMessage, MpdSignal, MpdValue

__all__ = [
    "MULTI_RECORD_COMMANDS",
    "LineKind",
    "MpdClient",
    "MpdConnectionError",
    "MpdError",
    "MpdMessage",
    "MpdSignal",
    "MpdValidationError",
    "MpdValue",
    "parse_message_list",
    "parse_message_object",
]
