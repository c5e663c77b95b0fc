"""Interactive labeling of reference titles."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import TypeVar

from .dataset import save_labeled
from .models import Category, LabeledTitle

logger = logging.getLogger("nolisticle.labeler")

T = TypeVar("T")

# Returns the 0-based indices of the listicles in a chunk, or None to stop
SelectionPrompt = Callable[[list[str]], set[int] | None]


def chunk_by_size(items: Sequence[T], size: int) -> list[list[T]]:
    """Split items into consecutive chunks of at most size items."""
    if size < 1:
        raise ValueError("Chunk size must be at least 1")
    return [list(items[i : i + size]) for i in range(0, len(items), size)]


def parse_selection(text: str, count: int) -> set[int]:
    """
    Parse a user selection like "1,3 5" into 0-based indices.

    Numbers are 1-based positions in a chunk of count titles. An empty
    string selects nothing.

    Raises:
        ValueError: If a token is not a number or is out of range.
    """
    indices: set[int] = set()
    for token in text.replace(",", " ").split():
        if not token.isdigit():
            raise ValueError(f"Not a number: {token}")
        position = int(token)
        if not 1 <= position <= count:
            raise ValueError(f"Out of range: {position} (expected 1-{count})")
        indices.add(position - 1)
    return indices


def label_chunk(titles: Sequence[str], selected: set[int]) -> list[LabeledTitle]:
    """Label selected titles as listicles and the rest as other."""
    return [
        LabeledTitle(
            title=title,
            category=Category.LISTICLE if idx in selected else Category.OTHER,
        )
        for idx, title in enumerate(titles)
    ]


def run_labeling(
    labeled: list[LabeledTitle],
    titles: Sequence[str],
    dataset_path: Path,
    prompt: SelectionPrompt,
    chunk_size: int = 10,
) -> int:
    """
    Label titles chunk by chunk, saving the dataset after every chunk.

    Args:
        labeled: Existing labels; extended in place
        titles: Unlabeled titles, in reference order
        dataset_path: CSV file rewritten after each chunk
        prompt: Asks which titles of a chunk are listicles
        chunk_size: Titles shown per prompt

    Returns:
        Number of titles labeled in this session.
    """
    added = 0
    for chunk in chunk_by_size(titles, chunk_size):
        selected = prompt(chunk)
        if selected is None:
            break

        labeled.extend(label_chunk(chunk, selected))
        save_labeled(dataset_path, labeled)
        added += len(chunk)

        logger.debug(
            "Labeled %d titles (%d listicles)",
            len(chunk),
            len(selected),
            extra={"chunk_size": len(chunk), "listicles": len(selected), "total": len(labeled)},
        )

    return added
