"""Configuration manager using QSettings for persistent storage."""

import logging

from PySide6.QtCore import QSettings

from mpdctrl.api.mpd.protocol import DEFAULT_PORT

logger = logging.getLogger(__name__)

# Settings keys
_KEY_MPD_HOST = "mpd/host"
_KEY_MPD_PORT = "mpd/port"

DEFAULT_HOST = "localhost"


class ConfigManager:
    """Wrapper around QSettings for type-safe config access.

    QSettings stores config in platform-specific locations:
    - Windows: HKEY_CURRENT_USER\\Software\\mpdctrl\\mpdctrl
    - macOS: ~/Library/Preferences/com.mpdctrl.mpdctrl.plist
    - Linux: ~/.config/mpdctrl/mpdctrl.conf

    Only the MPD connection target is stored here.

    Example:
        config = ConfigManager()
        client = MpdClient.from_config(config)
    """

    def __init__(self, organization: str = "mpdctrl", application: str = "mpdctrl") -> None:
        """Initialize the config manager.

        Args:
            organization: Organization name for QSettings.
            application: Application name for QSettings.
        """
        self._settings = QSettings(organization, application)

    @property
    def settings(self) -> QSettings:
        """Return the underlying QSettings instance."""
        return self._settings

    # -- MPD settings ----------------------------------------------------------

    def get_mpd_host(self) -> str:
        """Return the MPD host.

        Returns:
            Host string (default "localhost").
        """
        value = self._settings.value(_KEY_MPD_HOST, DEFAULT_HOST, str)
        return str(value) if value else DEFAULT_HOST

    def set_mpd_host(self, host: str) -> None:
        """Set the MPD host.

        Args:
            host: Hostname or IP.
        """
        self._settings.setValue(_KEY_MPD_HOST, host)
        logger.debug("MPD host set to %s", host)

    def get_mpd_port(self) -> int:
        """Return the MPD port.

        Returns:
            Port number (default 6600).
        """
        value = self._settings.value(_KEY_MPD_PORT, DEFAULT_PORT, int)
        return max(1, min(65535, int(value)))  # type: ignore[arg-type]

    def set_mpd_port(self, port: int) -> None:
        """Set the MPD port.

        Args:
            port: Port number (1-65535).
        """
        self._settings.setValue(_KEY_MPD_PORT, max(1, min(65535, port)))

    # -- General settings ------------------------------------------------------

    def clear(self) -> None:
        """Clear all settings (useful for testing or reset)."""
        self._settings.clear()

    def sync(self) -> None:
        """Force settings to be written to disk."""
        self._settings.sync()
