"""Configuration management for the receipt text parser.

Loads and validates YAML configuration with defaults for the parser
thresholds, draft defaults, and the HTTP API.
"""

import logging
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field, model_validator

from receipt_text.extraction.patterns import LABEL_KEYWORDS

logger = logging.getLogger(__name__)


class ParserConfig(BaseModel):
    """Thresholds and keyword sets for receipt text extraction."""

    candidate_line_limit: int = Field(default=5, ge=1)
    min_line_length: int = Field(default=3, ge=0)
    max_line_length: int = Field(default=40, ge=1)
    merchant_max_length: int = Field(default=50, ge=1)
    strict_merchant_filters: bool = True
    extra_merchants: list[str] = Field(default_factory=list)
    label_keywords: list[str] = Field(default_factory=lambda: list(LABEL_KEYWORDS))
    labeled_amount_policy: Literal["first", "last"] = "last"
    enforce_amount_bounds: bool = True
    min_amount: float = 1.0
    max_amount: float = 100000.0

    @model_validator(mode="after")
    def _check_ranges(self) -> "ParserConfig":
        if self.min_amount > self.max_amount:
            raise ValueError(
                f"min_amount ({self.min_amount}) exceeds max_amount ({self.max_amount})"
            )
        if self.min_line_length > self.max_line_length:
            raise ValueError(
                f"min_line_length ({self.min_line_length}) exceeds "
                f"max_line_length ({self.max_line_length})"
            )
        return self


class DraftConfig(BaseModel):
    """Defaults applied when turning a parse result into a receipt draft."""

    default_currency: str = "MAD"
    default_category: str = "Other"


class APIConfig(BaseModel):
    """Configuration for the HTTP API server."""

    host: str = "0.0.0.0"
    port: int = 8000


class AppConfig(BaseModel):
    """Top-level application configuration."""

    parser: ParserConfig = Field(default_factory=ParserConfig)
    draft: DraftConfig = Field(default_factory=DraftConfig)
    api: APIConfig = Field(default_factory=APIConfig)
    log_level: str = "INFO"


def load_config(path: Path | None = None) -> AppConfig:
    """Load configuration from a YAML file.

    Args:
        path: Path to the YAML configuration file.
            Defaults to configs/config.yaml.

    Returns:
        Validated application configuration.

    Raises:
        pydantic.ValidationError: If the file holds invalid values.
    """
    if path is None:
        path = Path("configs/config.yaml")

    if path.exists():
        logger.info("Loading configuration from %s", path)
        with open(path, encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
        return AppConfig(**raw)

    logger.info("No config file found at %s, using defaults", path)
    return AppConfig()
