"""Title pattern matching for listicle detection.

A title is listicle-like when a count ("5", "10", "seven") sits at a place
where a list title or subtitle starts:

    <anchor> <separators> <count> <space or "+">

The anchor is either the start of the title, or a trigger followed by one
non-word character. Triggers are subtitle punctuation (":", "-", em-dash),
any RGI emoji, and words that tend to precede the count ("top 10", "my 5").
Counts are a single digit 2-9, a 2 or 3 digit number (4 digits is most
likely a year), or a number word from "two" to "ten".
"""

from collections.abc import Iterator

from .utils import emoji_ends, is_trailing_char, is_word_char

ANCHOR_PUNCTUATION = (":", "-", "—")

# Words often found right before the number in listicles
ANCHOR_WORDS = ("the", "top", "mastering", "these", "my", "best")

NUMBER_WORDS = ("two", "three", "four", "five", "six", "seven", "eight", "nine", "ten")

ASCII_DIGITS = frozenset("0123456789")

# Anything longer is most likely a year ("2023")
MAX_COUNT_DIGITS = 3


def _trigger_ends(title: str, index: int) -> Iterator[int]:
    """Yield the end index of every trigger token starting at index."""
    if title[index] in ANCHOR_PUNCTUATION:
        yield index + 1

    # Every RGI emoji here, including prefixes of longer sequences
    yield from emoji_ends(title, index)

    # "the" and "these" share a start, so every word is tried
    for word in ANCHOR_WORDS:
        end = index + len(word)
        if title[index:end].casefold() == word:
            yield end


def iter_anchor_positions(title: str) -> Iterator[int]:
    """
    Yield the positions where a count token may be searched for.

    The start of the title is always an anchor. A trigger is an anchor only
    when followed by a non-word character; the yielded position is just past
    that character. Positions are yielded left to right.
    """
    if not title:
        return

    yield 0

    for index in range(len(title)):
        for end in _trigger_ends(title, index):
            if end < len(title) and not is_word_char(title[end]):
                yield end + 1


def skip_separators(title: str, pos: int) -> int:
    """Advance past any run of non-word characters starting at pos."""
    while pos < len(title) and not is_word_char(title[pos]):
        pos += 1
    return pos


def match_count_token(title: str, pos: int) -> int | None:
    """
    Match a count token at pos and return its end index.

    Digit runs must be exactly one digit in 2-9, or two or three digits.
    Longer runs never match, not even partially.
    """
    end = pos
    while end < len(title) and title[end] in ASCII_DIGITS:
        end += 1

    num_digits = end - pos
    if num_digits == 1:
        return end if title[pos] not in "01" else None
    if num_digits:
        return end if num_digits <= MAX_COUNT_DIGITS else None

    for word in NUMBER_WORDS:
        end = pos + len(word)
        if title[pos:end].casefold() == word:
            return end

    return None


def is_listicle_like(title: str) -> bool:
    """
    Check whether a title looks like a listicle ("7 Tips for ...", "Top 10 ...").

    Case-insensitive and script-aware. Returns False for an empty title.
    """
    for pos in iter_anchor_positions(title):
        start = skip_separators(title, pos)
        end = match_count_token(title, start)
        if end is not None and end < len(title) and is_trailing_char(title[end]):
            return True
    return False
