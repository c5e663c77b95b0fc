"""Baseline: keyword-weighted scoring of article titles."""

import logging
import re

from ..config import ScoringConfig

logger = logging.getLogger("nolisticle.classifier.heuristics")

# Signal patterns (raw strings for reference)
_LEADING_NUMBER_PATTERN_RAW = r"^\W*\d+\b"

_LIST_NOUN_PATTERN_RAW = (
    r"\b(tips|ways|things|reasons|tools|mistakes|lessons|steps|resources|ideas|"
    r"tricks|examples|libraries|projects|extensions|habits|books|questions)\b"
)

_SUPERLATIVE_PATTERN_RAW = r"\b(best|top|ultimate|essential|awesome|must[- ](know|have))\b"

_CLICKBAIT_PATTERNS_RAW = [
    r"you need to know",
    r"you should (know|use|try)",
    r"(will|that) change",
    r"every (developer|programmer)",
    r"you (didn't|did not) know",
]

# Titles that explain one thing rather than list many
_EXPLANATORY_PATTERNS_RAW = [
    r"^\W*(how|why|what|when)\b",
    r"\b(introduction to|guide|tutorial|deep dive|explained|understanding)\b",
]

# Pre-compiled patterns for performance
LEADING_NUMBER_PATTERN = re.compile(_LEADING_NUMBER_PATTERN_RAW)
LIST_NOUN_PATTERN = re.compile(_LIST_NOUN_PATTERN_RAW, re.IGNORECASE)
SUPERLATIVE_PATTERN = re.compile(_SUPERLATIVE_PATTERN_RAW, re.IGNORECASE)
CLICKBAIT_PATTERNS = [re.compile(p, re.IGNORECASE) for p in _CLICKBAIT_PATTERNS_RAW]
EXPLANATORY_PATTERNS = [re.compile(p, re.IGNORECASE) for p in _EXPLANATORY_PATTERNS_RAW]


class TitleScorer:
    """Scores titles using keyword heuristics."""

    def __init__(self, scoring_config: ScoringConfig | None = None) -> None:
        """Initialize the scorer.

        Args:
            scoring_config: Scoring weights and threshold. Uses defaults if None.
        """
        self._scoring = scoring_config or ScoringConfig()

    def score(self, title: str) -> int:
        """
        Calculate a listicle score for a title (0-100).
        Higher score = more likely to be a listicle.
        """
        cfg = self._scoring

        score = cfg.base_score

        if LEADING_NUMBER_PATTERN.search(title):
            score += cfg.leading_number

        if LIST_NOUN_PATTERN.search(title):
            score += cfg.list_noun

        if SUPERLATIVE_PATTERN.search(title):
            score += cfg.superlative

        for pattern in CLICKBAIT_PATTERNS:
            if pattern.search(title):
                score += cfg.clickbait_phrase
                break

        for pattern in EXPLANATORY_PATTERNS:
            if pattern.search(title):
                score += cfg.explanatory  # Negative value = decreases score
                break

        # Clamp to 0-100
        return max(0, min(100, score))

    def should_remove(self, title: str) -> bool:
        """Check whether a title scores at or above the removal threshold."""
        score = self.score(title)
        threshold = self._scoring.remove_threshold
        logger.debug(
            "Scored title %r: %d (threshold: %d)",
            title,
            score,
            threshold,
            extra={"title": title, "score": score, "threshold": threshold},
        )
        return score >= threshold
