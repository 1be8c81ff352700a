# src/config/settings.py — v1
"""Typed configuration loaded from the environment / .env via pydantic-settings.

Environment variable names are the upper-cased field names, e.g.
SIMILARITY_THRESHOLD_COMBINED, SEARCH_WINDOW_DAYS, CACHE_TTL.

Every weight set must sum to 1 (within WEIGHT_TOLERANCE); violations raise
InvalidConfiguration when Settings is constructed, never per request.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from reqintake.core.errors import InvalidConfiguration

WEIGHT_TOLERANCE = 1e-3


def check_weights(name: str, weights: dict[str, float]) -> None:
    """Raise InvalidConfiguration unless weights are non-negative and sum to 1."""
    negative = [k for k, v in weights.items() if v < 0]
    if negative:
        raise InvalidConfiguration(
            f"{name} weights must be non-negative (got {', '.join(negative)})"
        )
    total = sum(weights.values())
    if abs(total - 1.0) > WEIGHT_TOLERANCE:
        raise InvalidConfiguration(
            f"{name} weights must sum to 1 (got {total:.4f})"
        )


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === Thresholds ===
    similarity_threshold_title: float = 0.8
    similarity_threshold_content: float = 0.7
    similarity_threshold_combined: float = 0.75

    # === Candidate window ===
    search_window_days: int = 180
    min_word_length: int = 3
    batch_size: int = 100

    # === Retry / timeout ===
    similarity_check_retries: int = 3
    similarity_check_retry_delay: float = 1.0
    check_timeout_s: float = 30.0

    # === Cache ===
    cache_enabled: bool = True
    cache_ttl: float = 3600.0
    cache_max_keys: int = 1000
    max_cache_age: float = 86400.0

    # === Weights: generic pairwise similarity ===
    weights_default_edit: float = 0.4
    weights_default_jaccard: float = 0.3
    weights_default_cosine: float = 0.3

    # === Weights: title similarity ===
    weights_title_edit: float = 0.5
    weights_title_jaccard: float = 0.3
    weights_title_cosine: float = 0.2

    # === Weights: body similarity ===
    weights_body_edit: float = 0.3
    weights_body_jaccard: float = 0.3
    weights_body_cosine: float = 0.4

    # === Weights: combined five-signal score ===
    weights_combined_title: float = 0.3
    weights_combined_body: float = 0.25
    weights_combined_title_overlap: float = 0.2
    weights_combined_body_overlap: float = 0.15
    weights_combined_semantic: float = 0.1

    # === Persistence ===
    database_path: Path = Path("~/.reqintake/requests.db")

    # === Text analysis provider ===
    llm_provider: str = "openai"
    llm_model: str = "gpt-4"
    llm_temperature: float = 0.7
    llm_max_tokens: int = 1000
    openai_api_key: str = ""
    anthropic_api_key: str = ""

    # === Intake policy ===
    block_on_check_failure: bool = False

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "json"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 5

    # --- Field validators ---

    @field_validator(
        "similarity_threshold_title",
        "similarity_threshold_content",
        "similarity_threshold_combined",
    )
    @classmethod
    def validate_threshold(cls, v: float, info) -> float:  # noqa: N805
        if not 0.0 <= v <= 1.0:
            raise InvalidConfiguration(f"{info.field_name} must be within [0, 1] (got {v})")
        return v

    @field_validator(
        "search_window_days", "min_word_length", "batch_size",
        "similarity_check_retries", "cache_max_keys",
    )
    @classmethod
    def validate_positive_int(cls, v: int, info) -> int:  # noqa: N805
        if v < 1:
            raise ValueError(f"{info.field_name} must be >= 1")
        return v

    @field_validator("similarity_check_retry_delay")
    @classmethod
    def validate_retry_delay(cls, v: float) -> float:  # noqa: N805
        if v < 0:
            raise ValueError("similarity_check_retry_delay must be >= 0")
        return v

    @field_validator("check_timeout_s", "cache_ttl", "max_cache_age")
    @classmethod
    def validate_positive_duration(cls, v: float, info) -> float:  # noqa: N805
        if v <= 0:
            raise ValueError(f"{info.field_name} must be > 0")
        return v

    @model_validator(mode="after")
    def validate_weight_sets(self) -> Settings:
        """Every weight set must sum to 1."""
        check_weights("default similarity", self.default_weights)
        check_weights("title similarity", self.title_weights)
        check_weights("body similarity", self.body_weights)
        check_weights("combined score", self.combined_weights)
        return self

    # --- Helpers ---

    @property
    def default_weights(self) -> dict[str, float]:
        return {
            "edit": self.weights_default_edit,
            "jaccard": self.weights_default_jaccard,
            "cosine": self.weights_default_cosine,
        }

    @property
    def title_weights(self) -> dict[str, float]:
        return {
            "edit": self.weights_title_edit,
            "jaccard": self.weights_title_jaccard,
            "cosine": self.weights_title_cosine,
        }

    @property
    def body_weights(self) -> dict[str, float]:
        return {
            "edit": self.weights_body_edit,
            "jaccard": self.weights_body_jaccard,
            "cosine": self.weights_body_cosine,
        }

    @property
    def combined_weights(self) -> dict[str, float]:
        """Weights of the five signals, keyed by signal name."""
        return {
            "title_similarity": self.weights_combined_title,
            "body_similarity": self.weights_combined_body,
            "title_overlap": self.weights_combined_title_overlap,
            "body_overlap": self.weights_combined_body_overlap,
            "semantic": self.weights_combined_semantic,
        }


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Raises:
        InvalidConfiguration: If a weight set does not sum to 1.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
