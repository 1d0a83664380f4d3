"""Tests for the command-line entry point."""

import io
import locale
from datetime import UTC, datetime
from unittest.mock import AsyncMock, patch

import pytest

from mpdctrl.__main__ import build_parser, main, print_result
from mpdctrl.api.mpd import MpdClient, MpdConnectionError, MpdError


class TestPrintResult:
    """Tests for result formatting."""

    def test_message(self) -> None:
        """Test a single message."""
        out = io.StringIO()
        print_result({"volume": 42, "state": "play"}, out)
        assert out.getvalue() == "volume: 42\nstate: play\n"

    def test_message_list(self) -> None:
        """Test that records are separated by a blank line."""
        out = io.StringIO()
        print_result([{"file": "a"}, {"file": "b"}], out)
        assert out.getvalue() == "file: a\n\nfile: b\n"

    def test_timestamp(self) -> None:
        """Test that timestamps print in ISO format."""
        out = io.StringIO()
        print_result({"lastModified": datetime(2024, 1, 2, tzinfo=UTC)}, out)
        assert out.getvalue() == "lastModified: 2024-01-02T00:00:00+00:00\n"

    def test_none(self) -> None:
        """Test that commands without output print nothing."""
        out = io.StringIO()
        print_result(None, out)
        assert out.getvalue() == ""


class TestMain:
    """Tests for main()."""

    def test_unknown_command(self) -> None:
        """Test that argparse rejects unknown commands."""
        with pytest.raises(SystemExit):
            build_parser().parse_args(["dance"])

    def test_status_uses_saved_server(self, config, capsys) -> None:
        """Test that host and port default to the config."""
        config.set_mpd_host("10.0.0.2")
        config.set_mpd_port(6601)

        with patch.object(
            MpdClient, "get_status", AsyncMock(return_value={"volume": 42})
        ), patch("mpdctrl.__main__.MpdClient", wraps=MpdClient) as client_cls:
            assert main(["status"], config=config) == 0

        client_cls.assert_called_once_with("10.0.0.2", 6601)
        assert capsys.readouterr().out == "volume: 42\n"

    def test_host_flag_and_save(self, config) -> None:
        """Test that --save stores the given server."""
        with patch.object(MpdClient, "ping", AsyncMock(return_value=None)):
            argv = ["ping", "--host", "music.local", "--port", "6700", "--save"]
            assert main(argv, config=config) == 0

        assert config.get_mpd_host() == "music.local"
        assert config.get_mpd_port() == 6700

    def test_argument_passed(self, config) -> None:
        """Test that the positional argument reaches the client."""
        add_song = AsyncMock(return_value=None)
        with patch.object(MpdClient, "add_song", add_song):
            assert main(["add", "Albums/song.mp3"], config=config) == 0

        add_song.assert_awaited_once_with("Albums/song.mp3")

    def test_protocol_error(self, config, capsys) -> None:
        """Test that an ACK exits with status 1."""
        error = MpdError("No such directory")
        with patch.object(MpdClient, "get_library", AsyncMock(side_effect=error)):
            assert main(["ls", "missing"], config=config) == 1

        assert capsys.readouterr().err == "error: No such directory\n"

    def test_connection_error(self, config, capsys) -> None:
        """Test that an unreachable server exits with status 1."""
        with patch.object(
            MpdClient, "get_status", AsyncMock(side_effect=MpdConnectionError("refused"))
        ):
            assert main(["status"], config=config) == 1

        assert "refused" in capsys.readouterr().err

    def test_invalid_integer(self, config, capsys) -> None:
        """Test that a non-numeric id is rejected without connecting."""
        with patch("asyncio.open_connection") as opener:
            assert main(["playid", "abc"], config=config) == 1

        opener.assert_not_called()
        assert "id must be an integer" in capsys.readouterr().err

    def test_plus_rejected(self, config, capsys) -> None:
        """Test that add rejects "+" before connecting."""
        with patch("asyncio.open_connection") as opener:
            assert main(["add", "Rock+Roll"], config=config) == 1

        opener.assert_not_called()
        assert '"+"' in capsys.readouterr().err

    def test_collation_locale_enabled(self, config) -> None:
        """Test that main() switches LC_COLLATE to the user's locale."""
        with patch.object(MpdClient, "ping", AsyncMock(return_value=None)), patch(
            "locale.setlocale"
        ) as setlocale:
            assert main(["ping"], config=config) == 0

        setlocale.assert_called_once_with(locale.LC_COLLATE, "")

    def test_unsupported_locale_ignored(self, config) -> None:
        """Test that a missing system locale does not stop the command."""
        with patch.object(MpdClient, "ping", AsyncMock(return_value=None)), patch(
            "locale.setlocale", side_effect=locale.Error("unsupported locale setting")
        ):
            assert main(["ping"], config=config) == 0
