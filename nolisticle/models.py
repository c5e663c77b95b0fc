"""Data models for nolisticle."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

ClassifierFunction = Callable[[str], bool]


class Category(Enum):
    """Ground-truth label of a title."""

    LISTICLE = "listicle"
    OTHER = "other"

    @property
    def kind(self) -> str:
        """Key used for this category in run results ("listicles" / "others")."""
        return f"{self.value}s"


@dataclass(frozen=True)
class LabeledTitle:
    """A title with its human-assigned category."""

    title: str
    category: Category


@dataclass
class KindResult:
    """Outcome of one classifier on one ground-truth group.

    An empty group is a vacuous pass: total and num_ok are 0 and rate is 1.0.
    """

    num_ok: int
    total: int
    rate: float
    failures: list[str] = field(default_factory=list)

    @classmethod
    def from_failures(cls, total: int, failures: list[str]) -> KindResult:
        """Build a result from the group size and the misclassified titles."""
        num_ok = total - len(failures)
        rate = num_ok / total if total else 1.0
        return cls(num_ok=num_ok, total=total, rate=rate, failures=list(failures))

    @property
    def error_rate(self) -> float:
        """Share of the group the classifier got wrong."""
        if self.total == 0:
            return 0.0
        return len(self.failures) / self.total

    def to_dict(self) -> dict[str, Any]:
        return {
            "numOk": self.num_ok,
            "total": self.total,
            "rate": self.rate,
            "failures": list(self.failures),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> KindResult:
        return cls(
            num_ok=int(data["numOk"]),
            total=int(data["total"]),
            rate=float(data["rate"]),
            failures=list(data.get("failures", [])),
        )


@dataclass
class ClassifierResults:
    """Per-kind results for a single classifier."""

    listicles: KindResult
    others: KindResult

    @property
    def total(self) -> int:
        return self.listicles.total + self.others.total

    @property
    def overall_rate(self) -> float:
        """Share of all titles classified correctly (1.0 for an empty dataset)."""
        if self.total == 0:
            return 1.0
        return (self.listicles.num_ok + self.others.num_ok) / self.total

    def rates(self) -> dict[str, float]:
        return {
            "all": self.overall_rate,
            "listicles": self.listicles.rate,
            "others": self.others.rate,
        }

    def to_dict(self) -> dict[str, Any]:
        return {"listicles": self.listicles.to_dict(), "others": self.others.to_dict()}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ClassifierResults:
        return cls(
            listicles=KindResult.from_dict(data["listicles"]),
            others=KindResult.from_dict(data["others"]),
        )


@dataclass
class RunResults:
    """Results of one evaluation run, keyed by classifier name.

    Insertion order follows the registry order, which puts the baseline first.
    """

    classifiers: dict[str, ClassifierResults] = field(default_factory=dict)

    def __getitem__(self, name: str) -> ClassifierResults:
        return self.classifiers[name]

    def __contains__(self, name: object) -> bool:
        return name in self.classifiers

    def __iter__(self) -> Iterator[str]:
        return iter(self.classifiers)

    def __len__(self) -> int:
        return len(self.classifiers)

    def to_dict(self) -> dict[str, Any]:
        return {name: result.to_dict() for name, result in self.classifiers.items()}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RunResults:
        return cls(
            classifiers={name: ClassifierResults.from_dict(r) for name, r in data.items()}
        )


@dataclass(frozen=True)
class ThresholdViolation:
    """A (classifier, kind) unit whose error rate exceeded its limit."""

    classifier: str
    kind: str
    error_rate: float
    limit: float


@dataclass
class EvaluationRun:
    """Everything produced by one harness run."""

    results: RunResults
    baseline: str
    violations: list[ThresholdViolation] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return not self.violations

    @property
    def num_listicles(self) -> int:
        return self.results[self.baseline].listicles.total

    @property
    def num_others(self) -> int:
        return self.results[self.baseline].others.total
