"""mpdctrl - asyncio client for the Music Player Daemon control protocol."""

__version__ = "0.1.0"
