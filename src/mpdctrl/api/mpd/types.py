"""MPD protocol data types."""

from datetime import datetime
from enum import Enum, StrEnum

# A decoded field value. Boolean flags stay integers (0/1) as MPD sends them.
MpdValue = int | float | str | datetime

# One record: field name -> decoded value.
MpdMessage = dict[str, MpdValue]


class MpdSignal(StrEnum):
    """Line markers used by the server."""

    VERSION = "OK MPD"
    END = "OK"
    ERROR = "ACK"


class LineKind(Enum):
    """Classification of a single response line."""

    BANNER = "banner"
    END = "end"
    ERROR = "error"
    DATA = "data"
