"""Shared character-class utilities for the classifier module."""

import unicodedata
from collections.abc import Iterator

from emoji.unicode_codes import EMOJI_DATA, STATUS

# Characters accepted right after a count token, besides space separators
TRAILING_PUNCTUATION = frozenset("+")


def is_word_char(char: str) -> bool:
    """
    Check if a character is a letter, mark or number in any script.

    Uses the Unicode general category (L*, M*, N*), so "é", "ß", "٣" and
    combining accents are word characters while punctuation, symbols,
    emoji and whitespace are not.
    """
    return unicodedata.category(char)[0] in "LMN"


def is_trailing_char(char: str) -> bool:
    """Check if a character can terminate a count token (space separator or "+")."""
    return char in TRAILING_PUNCTUATION or unicodedata.category(char) == "Zs"


# Emoji test statuses that make up the recommended-for-general-interchange set
_RGI_STATUSES = frozenset({STATUS["fully_qualified"], STATUS["component"]})

RGI_EMOJI = frozenset(
    sequence for sequence, data in EMOJI_DATA.items() if data["status"] in _RGI_STATUSES
)


def _lengths_by_first_char(sequences: frozenset[str]) -> dict[str, tuple[int, ...]]:
    lengths: dict[str, set[int]] = {}
    for sequence in sequences:
        lengths.setdefault(sequence[0], set()).add(len(sequence))
    return {first: tuple(sorted(found)) for first, found in lengths.items()}


# First code point -> lengths of the RGI sequences starting with it
_RGI_LENGTHS = _lengths_by_first_char(RGI_EMOJI)


def emoji_ends(text: str, index: int) -> Iterator[int]:
    """
    Yield the end index of every RGI emoji starting at index, shortest first.

    Prefixes count on their own: "👍🏽" yields the end of "👍" and of "👍🏽".
    Text-style symbols such as "™" or a bare "❤" are not RGI emoji.
    """
    for length in _RGI_LENGTHS.get(text[index], ()):
        end = index + length
        if end <= len(text) and text[index:end] in RGI_EMOJI:
            yield end
