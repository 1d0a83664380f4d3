"""Core application layer.

Functions:
    locale_compare: Tiered name comparator for library listings.
    sort_library: Directories-first ordering of lsinfo results.

The QSettings-backed ConfigManager lives in ``mpdctrl.core.config`` and is
not imported here, so the protocol client does not need Qt.
"""

from mpdctrl.core.sorting import locale_compare, sort_library

__all__ = ["locale_compare", "sort_library"]
