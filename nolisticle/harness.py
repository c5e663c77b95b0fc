"""Accuracy evaluation of title classifiers against the labeled dataset.

For every registered classifier the labeled titles are split by ground
truth. Listicles must be recognised (a miss is a false negative), other
titles must not be (a hit is a false positive). Each (classifier, kind)
unit is checked against its limit on its own, so a violation in one unit
never hides the results of the others.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from pathlib import Path

from .classifier.registry import ClassifierEntry, ClassifierRegistry
from .config import AccuracyThresholds
from .dataset import partition
from .errors import DatasetError, ErrorCode, ThresholdViolationError
from .models import (
    Category,
    ClassifierFunction,
    ClassifierResults,
    EvaluationRun,
    KindResult,
    LabeledTitle,
    RunResults,
    ThresholdViolation,
)

logger = logging.getLogger("nolisticle.harness")

# Order in which kinds are evaluated and stored
KIND_ORDER = (Category.LISTICLE, Category.OTHER)


def evaluate_kind(
    name: str,
    fn: ClassifierFunction,
    titles: Sequence[str],
    category: Category,
    thresholds: AccuracyThresholds,
) -> KindResult:
    """
    Run one classifier over the titles of one ground-truth group.

    An empty group is a vacuous pass: rate 1.0 and no threshold check.

    Raises:
        ThresholdViolationError: If the error rate exceeds the limit for the kind.
            The computed result travels with the exception.
    """
    expected = category is Category.LISTICLE
    failures = [title for title in titles if bool(fn(title)) != expected]
    result = KindResult.from_failures(len(titles), failures)
    kind = category.kind

    if result.total == 0:
        logger.warning(
            "No %s in the dataset; treating %s as a vacuous pass",
            kind,
            name,
            extra={
                "classifier": name,
                "kind": kind,
                "code": ErrorCode.DEGENERATE_INPUT.value,
            },
        )
        return result

    limit = thresholds.limit_for(kind)
    # Compared from counts so a rate exactly at the limit passes
    if result.error_rate > limit:
        raise ThresholdViolationError(
            classifier=name,
            kind=kind,
            error_rate=result.error_rate,
            limit=limit,
            result=result,
        )

    logger.debug(
        "%s on %s: %d/%d ok",
        name,
        kind,
        result.num_ok,
        result.total,
        extra={
            "classifier": name,
            "kind": kind,
            "num_ok": result.num_ok,
            "total": result.total,
            "limit": limit,
        },
    )
    return result


def evaluate_classifier(
    entry: ClassifierEntry,
    groups: dict[Category, list[str]],
    thresholds: AccuracyThresholds,
    violations: list[ThresholdViolation],
) -> ClassifierResults:
    """Evaluate both kinds for one classifier, appending any violations."""
    kind_results: dict[str, KindResult] = {}

    for category in KIND_ORDER:
        try:
            result = evaluate_kind(entry.name, entry.fn, groups[category], category, thresholds)
        except ThresholdViolationError as e:
            logger.error(
                "Threshold violated: %s",
                e.message,
                extra={"code": e.code.value, **e.details},
            )
            violations.append(
                ThresholdViolation(
                    classifier=e.classifier,
                    kind=e.kind,
                    error_rate=e.error_rate,
                    limit=e.limit,
                )
            )
            result = e.result
        kind_results[category.kind] = result

    return ClassifierResults(**kind_results)


def run_evaluation(
    labeled: Sequence[LabeledTitle],
    registry: ClassifierRegistry,
    thresholds: AccuracyThresholds,
) -> EvaluationRun:
    """
    Evaluate every registered classifier against the labeled titles.

    Returns:
        EvaluationRun with results keyed baseline first and every threshold
        violation found. The run failed if any violation was recorded.
    """
    groups = partition(labeled)
    results = RunResults()
    violations: list[ThresholdViolation] = []

    logger.info(
        "Evaluating %d classifiers on %d titles",
        len(registry),
        len(labeled),
        extra={
            "classifiers": registry.names(),
            "listicles": len(groups[Category.LISTICLE]),
            "others": len(groups[Category.OTHER]),
        },
    )

    for entry in registry:
        results.classifiers[entry.name] = evaluate_classifier(
            entry, groups, thresholds, violations
        )

    return EvaluationRun(
        results=results,
        baseline=registry.baseline.name,
        violations=violations,
    )


def save_results(results: RunResults, path: Path) -> None:
    """Persist run results as JSON, overwriting any previous artifact."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(results.to_dict(), f, indent=2, ensure_ascii=False)
    logger.info("Saved results to %s", path, extra={"path": str(path)})


def load_results(path: Path) -> RunResults:
    """
    Load a results artifact written by save_results.

    Raises:
        DatasetError: If the file is missing or malformed.
    """
    try:
        with open(path, encoding="utf-8") as f:
            return RunResults.from_dict(json.load(f))
    except FileNotFoundError as e:
        raise DatasetError(
            code=ErrorCode.DATASET_MISSING,
            message=f"Results not found: {path}",
            details={"path": str(path)},
            cause=e,
        ) from e
    except (json.JSONDecodeError, AttributeError, KeyError, TypeError, ValueError) as e:
        raise DatasetError(
            code=ErrorCode.DATASET_INVALID,
            message=f"Results file is malformed: {path}",
            details={"path": str(path)},
            cause=e,
        ) from e
