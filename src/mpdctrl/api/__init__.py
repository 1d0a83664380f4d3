"""API clients for the MPD control protocol."""

from mpdctrl.api.mpd import (
    MpdClient,
    MpdConnectionError,
    MpdError,
    MpdMessage,
    MpdValidationError,
)

__all__ = [
    "MpdClient",
    "MpdConnectionError",
    "MpdError",
    "MpdMessage",
    "MpdValidationError",
]
