# profanity_filter/service/config.py

"""Application configuration using Pydantic Settings.

Manages environment variables, defaults, and validation rules.
"""

from pathlib import Path
from typing import List, Optional
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from profanity_filter.core.definitions import CategoryLabel
from profanity_filter.engine.matcher import validate_mask_char


class Settings(BaseSettings):
    """Global application settings.

    Loads values from environment variables (prefix 'PROFANITY_FILTER_') or .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="PROFANITY_FILTER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Dictionary Settings
    lexicon_path: Optional[Path] = Field(
        default=None,
        description="YAML lexicon file. Defaults to the packaged lexicon.",
    )

    mask_char: str = Field(
        default="*", description="Character used to mask each matched character."
    )

    # Classifier Settings
    classifier_enabled: bool = Field(
        default=True, description="Allow the AI-enhanced filtering path."
    )

    model_name: str = Field(
        default="unitary/toxic-bert",
        description="Hugging Face model used for toxicity classification.",
    )

    confidence_threshold: float = Field(
        default=0.8,
        ge=0.0,
        le=1.0,
        description="Probability (0.0-1.0) above which a category matches.",
    )

    classifier_labels: List[str] = Field(
        default_factory=lambda: list(CategoryLabel.ALL),
        description="Categories reported by the classifier.",
    )

    masking_labels: List[str] = Field(
        default_factory=lambda: list(CategoryLabel.MASKING),
        description="Categories whose scores drive segment masking.",
    )

    max_concurrency: int = Field(
        default=8,
        ge=1,
        description="Maximum segments scored by the classifier at once per request.",
    )

    log_level: str = Field(default="INFO", description="Root logging level.")

    @field_validator("mask_char")
    @classmethod
    def validate_mask_char(cls, v: str) -> str:
        """Ensure the mask is one character that can never form a word."""
        return validate_mask_char(v)

    @field_validator("model_name")
    @classmethod
    def validate_model_name(cls, v: str) -> str:
        """Ensure model name is not empty."""
        if not v.strip():
            raise ValueError("Model name cannot be empty")
        return v

    @model_validator(mode="after")
    def validate_masking_labels(self) -> "Settings":
        """Masking labels must be reported by the classifier."""
        unknown = set(self.masking_labels) - set(self.classifier_labels)
        if unknown:
            raise ValueError(
                f"masking_labels not in classifier_labels: {sorted(unknown)}"
            )
        return self


# Singleton settings instance
settings = Settings()
