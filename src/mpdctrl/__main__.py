"""Command-line entry point for mpdctrl."""

import argparse
import asyncio
import locale
import logging
import sys
from collections.abc import Awaitable, Callable, Sequence
from datetime import datetime
from typing import TextIO

from mpdctrl.api.mpd import (
    MpdClient,
    MpdConnectionError,
    MpdError,
    MpdMessage,
    MpdValidationError,
)
from mpdctrl.core.config import ConfigManager

logger = logging.getLogger(__name__)

Result = MpdMessage | list[MpdMessage] | None
Action = Callable[[MpdClient, str | None], Awaitable[Result]]


def _require(argument: str | None, name: str) -> str:
    if argument is None:
        raise MpdValidationError(f"missing argument: {name}")
    return argument


def _require_int(argument: str | None, name: str) -> int:
    value = _require(argument, name)
    try:
        return int(value)
    except ValueError as e:
        raise MpdValidationError(f"{name} must be an integer: {value!r}") from e


# command name -> (help text, action)
COMMANDS: dict[str, tuple[str, Action]] = {
    "status": ("show player status", lambda c, _: c.get_status()),
    "current": ("show the current song", lambda c, _: c.get_current_song()),
    "playlist": ("list the current playlist", lambda c, _: c.get_playlist()),
    "ls": ("list a library directory", lambda c, a: c.get_library(a or "")),
    "stats": ("show database statistics", lambda c, _: c.get_stats()),
    "outputs": ("list audio outputs", lambda c, _: c.get_outputs()),
    "play": ("start playback", lambda c, _: c.play()),
    "playid": ("play the song with ID", lambda c, a: c.play_id(_require_int(a, "id"))),
    "pause": ("toggle pause", lambda c, _: c.pause()),
    "stop": ("stop playback", lambda c, _: c.stop()),
    "next": ("skip to the next song", lambda c, _: c.next()),
    "previous": ("go back to the previous song", lambda c, _: c.previous()),
    "repeat": ("set repeat 0/1", lambda c, a: c.set_repeat(_require_int(a, "state"))),
    "single": ("set single 0/1", lambda c, a: c.set_single(_require_int(a, "state"))),
    "random": ("set random 0/1", lambda c, a: c.set_random(_require_int(a, "state"))),
    "consume": ("set consume 0/1", lambda c, a: c.set_consume(_require_int(a, "state"))),
    "volume": ("set volume 0-100", lambda c, a: c.set_volume(_require_int(a, "volume"))),
    "add": ("append a path to the playlist", lambda c, a: c.add_song(_require(a, "path"))),
    "remove": ("remove song ID from playlist", lambda c, a: c.remove_song(_require_int(a, "id"))),
    "update": ("rescan the library", lambda c, _: c.update_library()),
    "clear": ("clear the playlist", lambda c, _: c.clear_playlist()),
    "ping": ("check the server answers", lambda c, _: c.ping()),
}


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="mpdctrl",
        description="mpdctrl - MPD command-line controller",
        epilog="commands: " + ", ".join(f"{name} ({text})" for name, (text, _) in COMMANDS.items()),
    )
    parser.add_argument("command", choices=COMMANDS, metavar="command", help="command to run")
    parser.add_argument("argument", nargs="?", default=None, help="command argument")
    parser.add_argument("--host", default=None, help="MPD hostname or IP (default: saved)")
    parser.add_argument("--port", type=int, default=None, help="MPD TCP port (default: saved)")
    parser.add_argument("--save", action="store_true", help="remember --host/--port")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    return parser


def _format_value(value: object) -> str:
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def print_result(result: Result, out: TextIO) -> None:
    """Print messages as "key: value" lines, records separated by a blank line."""
    if result is None:
        return
    messages = result if isinstance(result, list) else [result]
    for index, message in enumerate(messages):
        if index:
            out.write("\n")
        for key, value in message.items():
            out.write(f"{key}: {_format_value(value)}\n")


def main(argv: Sequence[str] | None = None, config: ConfigManager | None = None) -> int:
    """Run one MPD command from the command line.

    Returns:
        Exit code (0 for success).
    """
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Library listings collate non-latin names with the user's locale
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error as e:
        logger.debug("Keeping default collation: %s", e)

    config = config or ConfigManager()
    host = args.host or config.get_mpd_host()
    port = args.port if args.port is not None else config.get_mpd_port()

    if args.save:
        config.set_mpd_host(host)
        config.set_mpd_port(port)
        config.sync()
        logger.info("Saved MPD server %s:%d", host, port)

    client = MpdClient(host, port)
    _, action = COMMANDS[args.command]
    try:
        result = asyncio.run(action(client, args.argument))
    except (MpdError, MpdConnectionError, MpdValidationError) as e:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return 1

    print_result(result, sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())
