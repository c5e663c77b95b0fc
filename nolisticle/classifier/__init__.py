"""Title classifiers for nolisticle."""

from .heuristics import TitleScorer
from .patterns import is_listicle_like
from .registry import BASELINE_NAME, ClassifierEntry, ClassifierRegistry, default_registry

__all__ = [
    "is_listicle_like",
    "TitleScorer",
    "ClassifierEntry",
    "ClassifierRegistry",
    "default_registry",
    "BASELINE_NAME",
]
