"""Tests for configuration loading and validation."""

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from receipt_text.extraction.patterns import LABEL_KEYWORDS
from receipt_text.utils.config import (
    APIConfig,
    AppConfig,
    DraftConfig,
    ParserConfig,
    load_config,
)


class TestParserConfig:
    """Tests for ParserConfig defaults, overrides and range checks."""

    def test_defaults(self) -> None:
        cfg = ParserConfig()
        assert cfg.candidate_line_limit == 5
        assert cfg.min_line_length == 3
        assert cfg.max_line_length == 40
        assert cfg.merchant_max_length == 50
        assert cfg.strict_merchant_filters is True
        assert cfg.extra_merchants == []
        assert cfg.label_keywords == list(LABEL_KEYWORDS)
        assert cfg.labeled_amount_policy == "last"
        assert cfg.enforce_amount_bounds is True
        assert cfg.min_amount == 1.0
        assert cfg.max_amount == 100000.0

    def test_override(self) -> None:
        cfg = ParserConfig(candidate_line_limit=3, labeled_amount_policy="first")
        assert cfg.candidate_line_limit == 3
        assert cfg.labeled_amount_policy == "first"

    def test_keyword_lists_not_shared(self) -> None:
        first = ParserConfig()
        first.label_keywords.append("custom")
        assert "custom" not in ParserConfig().label_keywords

    def test_unknown_policy_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ParserConfig(labeled_amount_policy="middle")

    def test_zero_line_limit_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ParserConfig(candidate_line_limit=0)

    def test_inverted_amount_bounds_rejected(self) -> None:
        with pytest.raises(ValidationError, match="min_amount"):
            ParserConfig(min_amount=500.0, max_amount=10.0)

    def test_inverted_line_lengths_rejected(self) -> None:
        with pytest.raises(ValidationError, match="min_line_length"):
            ParserConfig(min_line_length=50, max_line_length=10)


class TestDraftConfig:
    """Tests for DraftConfig defaults."""

    def test_defaults(self) -> None:
        cfg = DraftConfig()
        assert cfg.default_currency == "MAD"
        assert cfg.default_category == "Other"


class TestAPIConfig:
    """Tests for APIConfig defaults."""

    def test_defaults(self) -> None:
        cfg = APIConfig()
        assert cfg.host == "0.0.0.0"
        assert cfg.port == 8000


class TestAppConfig:
    """Tests for the top-level AppConfig."""

    def test_defaults(self) -> None:
        cfg = AppConfig()
        assert isinstance(cfg.parser, ParserConfig)
        assert isinstance(cfg.draft, DraftConfig)
        assert isinstance(cfg.api, APIConfig)
        assert cfg.log_level == "INFO"

    def test_nested_override(self) -> None:
        cfg = AppConfig(
            parser=ParserConfig(strict_merchant_filters=False),
            log_level="DEBUG",
        )
        assert cfg.parser.strict_merchant_filters is False
        assert cfg.log_level == "DEBUG"


class TestLoadConfig:
    """Tests for the load_config function."""

    def test_load_shipped_config(self, config_dir: Path) -> None:
        cfg = load_config(config_dir / "config.yaml")
        assert isinstance(cfg, AppConfig)
        assert cfg.parser == ParserConfig()
        assert cfg.draft.default_currency == "MAD"
        assert cfg.api.port == 8000

    def test_load_missing_file_returns_defaults(self) -> None:
        cfg = load_config(Path("/nonexistent/path/config.yaml"))
        assert cfg == AppConfig()

    def test_load_custom_yaml(self, tmp_path: Path) -> None:
        config_data = {
            "parser": {"extra_merchants": ["Super U"], "max_amount": 5000},
            "draft": {"default_currency": "EUR"},
            "log_level": "DEBUG",
        }
        config_file = tmp_path / "config.yaml"
        with open(config_file, "w", encoding="utf-8") as f:
            yaml.dump(config_data, f)

        cfg = load_config(config_file)
        assert cfg.parser.extra_merchants == ["Super U"]
        assert cfg.parser.max_amount == 5000.0
        assert cfg.draft.default_currency == "EUR"
        assert cfg.log_level == "DEBUG"

    def test_load_invalid_yaml_values(self, tmp_path: Path) -> None:
        config_file = tmp_path / "bad.yaml"
        config_file.write_text("parser:\n  min_amount: 10\n  max_amount: 1\n")
        with pytest.raises(ValidationError):
            load_config(config_file)

    def test_load_empty_yaml(self, tmp_path: Path) -> None:
        config_file = tmp_path / "empty.yaml"
        config_file.write_text("")
        cfg = load_config(config_file)
        assert isinstance(cfg, AppConfig)

    def test_load_none_defaults_to_standard_path(self) -> None:
        cfg = load_config()
        assert isinstance(cfg, AppConfig)
