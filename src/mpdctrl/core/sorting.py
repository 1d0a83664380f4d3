"""Ordering of library listings.

Names are compared character by character in tiers: punctuation and
whitespace, then digits, then latin letters, then everything else. Only
the last tier goes through locale collation, so CJK names follow the
LC_COLLATE category (e.g. pinyin order under zh_CN) while ASCII names keep
a predictable order on every system. Python starts in the "C" locale;
applications call ``locale.setlocale(locale.LC_COLLATE, "")`` to use the
user's collation, as ``mpdctrl.__main__`` does.
"""

import locale
import re
from collections.abc import Iterable
from functools import cmp_to_key
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mpdctrl.api.mpd.types import MpdMessage

_TIERS: tuple[re.Pattern[str], ...] = (
    re.compile(r"[\s~!@#$%^&*()\-_+={}\[\]|<>,.?/\\]"),
    re.compile(r"[0-9]"),
    re.compile(r"[a-zA-Z]"),
)
_OTHER_TIER = len(_TIERS)
_DIGIT_TIER = 1
_LETTER_TIER = 2


def _tier(char: str) -> int:
    for index, pattern in enumerate(_TIERS):
        if pattern.match(char):
            return index
    return _OTHER_TIER


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


def _compare_chars(a: str, b: str) -> int:
    a_tier = _tier(a)
    b_tier = _tier(b)
    if a_tier != b_tier:
        return _sign(a_tier - b_tier)
    if a_tier == _DIGIT_TIER:
        return _sign(int(a) - int(b))
    if a_tier == _LETTER_TIER and a.lower() != b.lower():
        return -1 if a.lower() < b.lower() else 1
    if a_tier == _OTHER_TIER:
        collated = _sign(locale.strcoll(a, b))
        if collated:
            return collated
    return -1 if a < b else 1


def locale_compare(a: str, b: str) -> int:
    """Compare two names for display order.

    Returns:
        Negative if a sorts first, positive if b does, 0 if equal.
    """
    for a_char, b_char in zip(a, b):
        if a_char != b_char:
            return _compare_chars(a_char, b_char)
    return _sign(len(a) - len(b))


def sort_library(entries: Iterable["MpdMessage"]) -> list["MpdMessage"]:
    """Sort directory entries: directories first, then by name.

    Args:
        entries: Messages from an lsinfo listing.

    Returns:
        New sorted list; the input is not modified.
    """
    name_key = cmp_to_key(locale_compare)
    return sorted(
        entries,
        key=lambda entry: (not entry.get("isDir"), name_key(str(entry.get("file", "")))),
    )
