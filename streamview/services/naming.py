"""Naming helpers — split upstream names into a country-flag token and a label."""
from __future__ import annotations

# Offset between 'A' and U+1F1E6 REGIONAL INDICATOR SYMBOL LETTER A
_REGIONAL_INDICATOR_OFFSET = 0x1F1E6 - ord("A")


def flag_emoji(token: str) -> str:
    """Turn a two-letter country code into its flag emoji.

    Anything that is not exactly two ASCII letters (an emoji already, a
    bracketed tag, an empty string) is returned unchanged.
    """
    if len(token) == 2 and token.isascii() and token.isalpha():
        return "".join(chr(ord(c) + _REGIONAL_INDICATOR_OFFSET) for c in token.upper())
    return token


def split_flag_label(name: str) -> tuple[str, str]:
    """Split ``"<flag> <label...>"`` on the first space.

    >>> split_flag_label("🇺🇸 News Channel")
    ('🇺🇸', 'News Channel')
    """
    parts = name.split(" ")
    return parts[0], " ".join(parts[1:])


def display_parts(name: str) -> tuple[str, str]:
    """Flag and label for a media item name, with the flag rendered as emoji.

    Item names often start with a one-character separator (``"| FR Movie"``);
    in that case the second token is the flag.
    """
    parts = name.split(" ")
    flag, label = parts[0], " ".join(parts[1:])
    if len(flag) < 2 and len(parts) > 1:
        flag, label = parts[1], " ".join(parts[2:])
    return flag_emoji(flag), label
