"""Named classifier functions evaluated by the harness."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from ..config import Config
from ..errors import ConfigError, ErrorCode
from ..models import ClassifierFunction
from .heuristics import TitleScorer
from .patterns import is_listicle_like

BASELINE_NAME = "heuristic.should_remove"


@dataclass(frozen=True)
class ClassifierEntry:
    """A classifier function tagged with its report name."""

    name: str
    fn: ClassifierFunction
    baseline: bool = False


class ClassifierRegistry:
    """Ordered set of classifiers with exactly one baseline.

    Iteration always yields the baseline first, then the other entries in
    registration order.
    """

    def __init__(self, entries: Iterable[ClassifierEntry]):
        self._entries = list(entries)

        if not self._entries:
            raise ConfigError(
                code=ErrorCode.CONFIG_INVALID,
                message="At least one classifier must be registered",
            )

        names = [entry.name for entry in self._entries]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ConfigError(
                code=ErrorCode.CONFIG_INVALID,
                message="Classifier names must be unique",
                details={"duplicates": duplicates},
            )

        baselines = [entry.name for entry in self._entries if entry.baseline]
        if len(baselines) != 1:
            raise ConfigError(
                code=ErrorCode.CONFIG_INVALID,
                message="Exactly one classifier must be the baseline",
                details={"baselines": baselines},
            )

    @classmethod
    def from_functions(
        cls, functions: dict[str, ClassifierFunction], baseline: str
    ) -> ClassifierRegistry:
        """Build a registry from a name -> function mapping."""
        if baseline not in functions:
            raise ConfigError(
                code=ErrorCode.CONFIG_INVALID,
                message=f"Unknown baseline classifier: {baseline}",
                details={"available": list(functions)},
            )
        return cls(
            ClassifierEntry(name=name, fn=fn, baseline=name == baseline)
            for name, fn in functions.items()
        )

    @property
    def baseline(self) -> ClassifierEntry:
        return next(entry for entry in self._entries if entry.baseline)

    def ordered(self) -> list[ClassifierEntry]:
        """Entries with the baseline first."""
        return [self.baseline] + [entry for entry in self._entries if not entry.baseline]

    def names(self) -> list[str]:
        return [entry.name for entry in self.ordered()]

    def __iter__(self) -> Iterator[ClassifierEntry]:
        return iter(self.ordered())

    def __len__(self) -> int:
        return len(self._entries)


def default_registry(config: Config | None = None) -> ClassifierRegistry:
    """The baseline scorer followed by the title pattern matcher."""
    scorer = TitleScorer(config.scoring if config else None)
    return ClassifierRegistry(
        [
            ClassifierEntry(name=BASELINE_NAME, fn=scorer.should_remove, baseline=True),
            ClassifierEntry(name="is_listicle_like", fn=is_listicle_like),
        ]
    )
