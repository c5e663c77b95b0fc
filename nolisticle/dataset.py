"""Labeled title dataset and reference article list."""

from __future__ import annotations

import csv
import json
import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from .errors import DataIntegrityError, DatasetError, ErrorCode
from .models import Category, LabeledTitle

logger = logging.getLogger("nolisticle.dataset")

COLUMNS = ("title", "category")


def load_labeled(path: Path, missing_ok: bool = False) -> list[LabeledTitle]:
    """
    Load labeled titles from a CSV file with a title,category header.

    Args:
        path: CSV file to read
        missing_ok: Return an empty list instead of raising when the file is absent

    Raises:
        DatasetError: If the file is missing, lacks a column, or has an unknown category.
    """
    if not path.exists():
        if missing_ok:
            return []
        raise DatasetError(
            code=ErrorCode.DATASET_MISSING,
            message=f"Labeled dataset not found: {path}",
            details={"path": str(path)},
        )

    labeled: list[LabeledTitle] = []
    try:
        with open(path, newline="", encoding="utf-8") as f:
            reader = csv.DictReader(f)
            missing = [c for c in COLUMNS if c not in (reader.fieldnames or [])]
            if missing:
                raise DatasetError(
                    code=ErrorCode.DATASET_INVALID,
                    message=f"Labeled dataset is missing columns: {', '.join(missing)}",
                    details={"path": str(path), "fieldnames": reader.fieldnames},
                )

            # Header is line 1
            for line_num, row in enumerate(reader, start=2):
                try:
                    category = Category(row["category"])
                except ValueError as e:
                    raise DatasetError(
                        code=ErrorCode.DATASET_INVALID,
                        message=f"Unknown category {row['category']!r} on line {line_num}",
                        details={"path": str(path), "line": line_num},
                        cause=e,
                    ) from e
                labeled.append(LabeledTitle(title=row["title"], category=category))
    except (UnicodeDecodeError, csv.Error) as e:
        raise DatasetError(
            code=ErrorCode.DATASET_INVALID,
            message=f"Labeled dataset is not a readable UTF-8 CSV file: {path}",
            details={"path": str(path), "error": str(e)},
            cause=e,
        ) from e

    logger.debug(
        "Loaded %d labeled titles from %s",
        len(labeled),
        path,
        extra={"path": str(path), "count": len(labeled)},
    )
    return labeled


def save_labeled(path: Path, labeled: Sequence[LabeledTitle]) -> None:
    """Write labeled titles to CSV, replacing the file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(COLUMNS)
        for item in labeled:
            writer.writerow((item.title, item.category.value))


def load_reference(path: Path) -> list[dict[str, Any]]:
    """
    Load the reference article list (a JSON array of objects with a title).

    Raises:
        DatasetError: If the file is missing or not an array of titled objects.
    """
    if not path.exists():
        raise DatasetError(
            code=ErrorCode.DATASET_MISSING,
            message=f"Reference articles not found: {path}",
            details={"path": str(path)},
        )

    try:
        with open(path, encoding="utf-8") as f:
            articles = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise DatasetError(
            code=ErrorCode.DATASET_INVALID,
            message=f"Reference articles are not valid JSON: {path}",
            details={"path": str(path)},
            cause=e,
        ) from e

    if not isinstance(articles, list) or not all(
        isinstance(a, dict) and "title" in a for a in articles
    ):
        raise DatasetError(
            code=ErrorCode.DATASET_INVALID,
            message="Reference articles must be a JSON array of objects with a title",
            details={"path": str(path)},
        )
    return articles


def reference_titles(articles: Sequence[dict[str, Any]]) -> list[str]:
    return [article["title"] for article in articles]


def verify_integrity(labeled: Sequence[LabeledTitle], titles: Sequence[str]) -> None:
    """
    Check that labeled titles match the reference titles row for row.

    A mismatch means the dataset has gone stale or been corrupted.

    Raises:
        DataIntegrityError: On the first row that differs, or if the
            reference has fewer rows than the dataset.
    """
    for idx, item in enumerate(labeled):
        expected = titles[idx] if idx < len(titles) else None
        if item.title != expected:
            raise DataIntegrityError(
                code=ErrorCode.DATA_INTEGRITY,
                message=f"Labeled title on row {idx} does not match the reference",
                details={"row": idx, "labeled": item.title, "reference": expected},
            )


def partition(labeled: Sequence[LabeledTitle]) -> dict[Category, list[str]]:
    """Group titles by ground-truth category, keeping dataset order."""
    groups: dict[Category, list[str]] = {category: [] for category in Category}
    for item in labeled:
        groups[item.category].append(item.title)
    return groups


def unlabeled_titles(labeled: Sequence[LabeledTitle], titles: Sequence[str]) -> list[str]:
    """Reference titles past the end of the labeled dataset."""
    return list(titles[len(labeled):])
