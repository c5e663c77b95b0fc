"""Configuration management for nolisticle."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from urllib.parse import urlparse

from .errors import ConfigError, ErrorCode, validate_rate

logger = logging.getLogger("nolisticle.config")


def get_config_dir() -> Path:
    """Get the nolisticle config directory."""
    config_dir = Path.home() / ".nolisticle"
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def get_config_path() -> Path:
    """Get the path to config.json."""
    return get_config_dir() / "config.json"


@dataclass
class AccuracyThresholds:
    """Maximum error rates a classifier may show before a run fails.

    false_positive_rate_max applies to titles labeled "other",
    false_negative_rate_max to titles labeled "listicle".
    """

    false_positive_rate_max: float = 2.5 / 100
    false_negative_rate_max: float = 50 / 100

    def __post_init__(self):
        self.false_positive_rate_max = validate_rate(
            self.false_positive_rate_max, "false_positive_rate_max"
        )
        self.false_negative_rate_max = validate_rate(
            self.false_negative_rate_max, "false_negative_rate_max"
        )

    def limit_for(self, kind: str) -> float:
        """Limit on the error rate of a results kind ("listicles" or "others")."""
        if kind == "listicles":
            return self.false_negative_rate_max
        return self.false_positive_rate_max


@dataclass
class ScoringConfig:
    """Weights for the baseline title scorer.

    All scores start at base_score. Positive adjustments push a title towards
    removal, negative ones towards keeping it. Final score is clamped to 0-100.
    """

    base_score: int = 20

    leading_number: int = 35  # Title starts with a number
    list_noun: int = 25  # "tips", "ways", "reasons", ...
    superlative: int = 15  # "best", "top", "ultimate", ...
    clickbait_phrase: int = 20  # "you need to know", ...
    explanatory: int = -15  # "how", "why", "guide", ...

    # Score >= this = remove
    remove_threshold: int = 60


@dataclass
class PathsConfig:
    """Locations of the input files and the results artifact."""

    dataset: str = "data/labeled.csv"
    reference: str = "data/articles.json"
    results: str = "results.json"


def validate_api_url(api_url: str) -> str:
    """Validate the articles API URL.

    Raises:
        ConfigError: If the URL is missing a scheme or host.
    """
    api_url = api_url.strip()
    parsed = urlparse(api_url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ConfigError(
            code=ErrorCode.CONFIG_INVALID,
            message="Articles API URL must be an http(s) URL with a host",
            details={"api_url": api_url},
        )
    return api_url


@dataclass
class FetchConfig:
    """Configuration for downloading the reference article list."""

    api_url: str = "https://dev.to/api/articles"
    pages: int = 100
    timeout: float = 30.0
    max_attempts: int = 10

    def __post_init__(self):
        self.api_url = validate_api_url(self.api_url)


@dataclass
class Config:
    """Main configuration for nolisticle."""

    thresholds: AccuracyThresholds = field(default_factory=AccuracyThresholds)
    scoring: ScoringConfig = field(default_factory=ScoringConfig)
    paths: PathsConfig = field(default_factory=PathsConfig)
    fetch: FetchConfig = field(default_factory=FetchConfig)
    label_chunk_size: int = 10

    def save(self) -> None:
        """Save configuration to disk."""
        config_path = get_config_path()
        with open(config_path, "w") as f:
            json.dump(self._to_dict(), f, indent=2)

    def _to_dict(self) -> dict:
        """Convert config to dictionary for JSON serialization."""
        return {
            "thresholds": asdict(self.thresholds),
            "scoring": asdict(self.scoring),
            "paths": asdict(self.paths),
            "fetch": asdict(self.fetch),
            "label_chunk_size": self.label_chunk_size,
        }

    @classmethod
    def load(cls) -> Config:
        """Load configuration from disk, then apply environment overrides."""
        config = cls()
        config_path = get_config_path()

        if config_path.exists():
            with open(config_path) as f:
                data = json.load(f)

            if "thresholds" in data:
                config.thresholds = AccuracyThresholds(**data["thresholds"])
            if "scoring" in data:
                config.scoring = ScoringConfig(**data["scoring"])
            if "paths" in data:
                config.paths = PathsConfig(**data["paths"])
            if "fetch" in data:
                config.fetch = FetchConfig(**data["fetch"])
            config.label_chunk_size = data.get("label_chunk_size", 10)

        # Environment variables override file config
        fp_max = os.environ.get("NOLISTICLE_FP_MAX")
        if fp_max:
            config.thresholds.false_positive_rate_max = validate_rate(
                fp_max, "NOLISTICLE_FP_MAX"
            )
        fn_max = os.environ.get("NOLISTICLE_FN_MAX")
        if fn_max:
            config.thresholds.false_negative_rate_max = validate_rate(
                fn_max, "NOLISTICLE_FN_MAX"
            )
        dataset = os.environ.get("NOLISTICLE_DATASET")
        if dataset:
            config.paths.dataset = dataset

        logger.debug(
            "Loaded configuration",
            extra={
                "config_path": str(config_path),
                "fp_max": config.thresholds.false_positive_rate_max,
                "fn_max": config.thresholds.false_negative_rate_max,
            },
        )
        return config
