"""Async MPD client.

Each command runs on its own connection: connect, write one command line,
read until OK or ACK, close. Nothing but the connection target is kept
between calls, so concurrent calls on one client are safe.

Example:
    client = MpdClient("192.168.1.100")
    status = await client.get_status()
    for entry in await client.get_library("Albums"):
        print(entry["file"])
"""

import asyncio
import logging
from typing import TYPE_CHECKING, Self, cast

from mpdctrl.api.mpd.protocol import (
    DEFAULT_PORT,
    MpdConnectionError,
    MpdError,
    MpdValidationError,
    classify_line,
    encode_command,
    parse_response,
)
from mpdctrl.api.mpd.types import LineKind, MpdMessage
from mpdctrl.core.sorting import sort_library

if TYPE_CHECKING:
    from mpdctrl.core.config import ConfigManager

logger = logging.getLogger(__name__)

CONNECT_TIMEOUT = 5.0


async def read_line(reader: asyncio.StreamReader) -> str:
    """Read one newline-terminated line and decode it.

    Lines longer than the reader's buffer limit are read in pieces. Bytes
    that are not valid UTF-8 decode to U+FFFD.

    Raises:
        MpdConnectionError: If the stream ends before a full line.
    """
    chunks: list[bytes] = []
    while True:
        try:
            chunks.append(await reader.readuntil(b"\n"))
            break
        except asyncio.LimitOverrunError as e:
            chunks.append(await reader.readexactly(e.consumed))
        except asyncio.IncompleteReadError as e:
            raise MpdConnectionError("Connection closed before response was complete") from e

    line = b"".join(chunks)[:-1].decode("utf-8", errors="replace")
    return line.removesuffix("\r")


async def read_response(reader: asyncio.StreamReader) -> list[str]:
    """Read response lines until OK or ACK.

    Returns:
        Data lines, without the banner and the final OK.

    Raises:
        MpdError: On an ACK line. No further lines are read.
        MpdConnectionError: If the stream ends early.
    """
    lines: list[str] = []
    while True:
        line = await read_line(reader)
        kind = classify_line(line)
        if kind is LineKind.BANNER:
            logger.debug("MPD banner: %s", line)
        elif kind is LineKind.END:
            return lines
        elif kind is LineKind.ERROR:
            raise MpdError.from_line(line)
        else:
            lines.append(line)


class MpdClient:
    """Async MPD client.

    Attributes:
        host: MPD server hostname or IP.
        port: MPD server port (default 6600).
        connect_timeout: Seconds to wait for the TCP connection.
    """

    def __init__(
        self,
        host: str,
        port: int = DEFAULT_PORT,
        connect_timeout: float = CONNECT_TIMEOUT,
    ) -> None:
        self.host = host
        self.port = port
        self.connect_timeout = connect_timeout

    @classmethod
    def from_config(cls, config: "ConfigManager") -> Self:
        """Create a client for the MPD server stored in the config."""
        return cls(config.get_mpd_host(), config.get_mpd_port())

    def __repr__(self) -> str:
        return f"MpdClient({self.host!r}, {self.port})"

    async def _open_connection(self) -> tuple[asyncio.StreamReader, asyncio.StreamWriter]:
        """Open a new connection to the server.

        Raises:
            MpdConnectionError: If the connection fails or times out.
        """
        try:
            return await asyncio.wait_for(
                asyncio.open_connection(self.host, self.port),
                timeout=self.connect_timeout,
            )
        except TimeoutError as e:
            raise MpdConnectionError(f"Connection to {self.host}:{self.port} timed out") from e
        except OSError as e:
            raise MpdConnectionError(f"Failed to connect to {self.host}:{self.port}: {e}") from e

    @staticmethod
    async def _close(writer: asyncio.StreamWriter) -> None:
        writer.close()
        try:
            await writer.wait_closed()
        except OSError as e:
            logger.debug("Expected error during MPD disconnect: %s", e)

    async def execute(
        self, command: str, argument: str | float | None = None
    ) -> MpdMessage | list[MpdMessage]:
        """Send one command on a fresh connection and parse the response.

        Args:
            command: Command verb.
            argument: Optional single argument; None sends the bare verb.

        Returns:
            A list of messages for multi-record verbs, otherwise one message.

        Raises:
            MpdValidationError: If the argument cannot be sent.
            MpdConnectionError: If the server cannot be reached.
            MpdError: If the server answers with ACK.
        """
        data = encode_command(command, argument)
        reader, writer = await self._open_connection()
        try:
            logger.debug("MPD command: %s", data.decode().rstrip("\n"))
            writer.write(data)
            await writer.drain()
            lines = await read_response(reader)
        finally:
            await self._close(writer)

        return parse_response(command, lines)

    async def _message(self, command: str, argument: str | float | None = None) -> MpdMessage:
        return cast(MpdMessage, await self.execute(command, argument))

    async def _messages(
        self, command: str, argument: str | float | None = None
    ) -> list[MpdMessage]:
        return cast(list[MpdMessage], await self.execute(command, argument))

    # -------------------------------------------------------------------------
    # Status & Info Commands
    # -------------------------------------------------------------------------

    async def get_status(self) -> MpdMessage:
        """Get current player status (state, volume, options, timing)."""
        return await self._message("status")

    async def get_current_song(self) -> MpdMessage:
        """Get the current song; empty when nothing is loaded."""
        return await self._message("currentsong")

    async def get_stats(self) -> MpdMessage:
        """Get database statistics (artists, albums, songs, uptime, ...)."""
        return await self._message("stats")

    async def get_outputs(self) -> list[MpdMessage]:
        """List audio outputs."""
        return await self._messages("outputs")

    async def ping(self) -> None:
        """Ping MPD server to check it answers."""
        await self.execute("ping")

    # -------------------------------------------------------------------------
    # Playlist & Library
    # -------------------------------------------------------------------------

    async def get_playlist(self) -> list[MpdMessage]:
        """Get the songs of the current playlist."""
        return await self._messages("playlistinfo")

    async def get_library(self, path: str) -> list[MpdMessage]:
        """List a library directory, directories first.

        Args:
            path: Directory relative to the music directory ("" for the root).
        """
        return sort_library(await self._messages("lsinfo", path))

    async def add_song(self, path: str) -> None:
        """Append a song or directory to the playlist.

        Raises:
            MpdValidationError: If the path contains a "+" sign.
        """
        if "+" in path:
            raise MpdValidationError('The path cannot contain a "+" sign')
        await self.execute("add", path)

    async def remove_song(self, song_id: int) -> None:
        """Remove a song from the playlist by its song ID."""
        await self.execute("deleteid", song_id)

    async def clear_playlist(self) -> None:
        """Remove every song from the playlist."""
        await self.execute("clear")

    async def update_library(self) -> None:
        """Start a library rescan."""
        await self.execute("update")

    # -------------------------------------------------------------------------
    # Playback Control
    # -------------------------------------------------------------------------

    async def play(self) -> None:
        """Start playback."""
        await self.execute("play")

    async def play_id(self, song_id: int) -> None:
        """Start playback at the song with the given song ID."""
        await self.execute("playid", song_id)

    async def pause(self) -> None:
        """Toggle pause."""
        await self.execute("pause")

    async def stop(self) -> None:
        """Stop playback."""
        await self.execute("stop")

    async def next(self) -> None:
        """Skip to next track."""
        await self.execute("next")

    async def previous(self) -> None:
        """Skip to previous track."""
        await self.execute("previous")

    async def set_volume(self, volume: int) -> None:
        """Set volume, clamped to 0-100."""
        await self.execute("setvol", max(0, min(100, volume)))

    # -------------------------------------------------------------------------
    # Playback Options
    # -------------------------------------------------------------------------

    async def set_repeat(self, state: int) -> None:
        """Enable (1) or disable (0) repeat mode."""
        await self.execute("repeat", int(state))

    async def set_single(self, state: int) -> None:
        """Enable (1) or disable (0) single mode."""
        await self.execute("single", int(state))

    async def set_random(self, state: int) -> None:
        """Enable (1) or disable (0) random mode."""
        await self.execute("random", int(state))

    async def set_consume(self, state: int) -> None:
        """Enable (1) or disable (0) consume mode."""
        await self.execute("consume", int(state))
