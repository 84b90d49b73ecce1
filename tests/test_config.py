"""Tests for configuration loading."""

import os
from decimal import Decimal
from pathlib import Path
from unittest.mock import patch

import pytest

from training_ledger.config import (
    DATA_DIR_ENV,
    PASSWORD_ENV,
    USERNAME_ENV,
    ConfigError,
    load_config,
)


def write_settings(tmp_path: Path, content: str) -> Path:
    """Helper to write a settings.yaml into tmp_path."""
    settings = tmp_path / "settings.yaml"
    settings.write_text(content, encoding="utf-8")
    return settings


class TestLoadConfig:
    def test_missing_file_gives_defaults(self, tmp_path: Path) -> None:
        with patch.dict(os.environ, {}, clear=True):
            config = load_config(config_dir=tmp_path)

        assert config.tax.retention_rate == Decimal("25")
        assert config.withholding.year == 2026
        assert [p.label for p in config.withholding.periods] == ["Jan+Feb", "Mar-May"]
        assert config.auth.username == "trainer"
        assert config.storage.data_dir == Path("data")

    def test_sections_are_read(self, tmp_path: Path) -> None:
        settings = write_settings(
            tmp_path,
            """
tax:
  retention_rate: 11.5
withholding:
  year: 2027
  periods:
    - label: Q1
      months: [3, 1, 2]
      payment_month: 4
      tax_rate: 20
reporting:
  currency_symbol: "$"
  decimal_places: 0
logging:
  level: DEBUG
""",
        )
        with patch.dict(os.environ, {}, clear=True):
            config = load_config(settings_path=settings)

        assert config.tax.retention_rate == Decimal("11.5")
        assert config.withholding.year == 2027
        period = config.withholding.periods[0]
        assert period.months == (1, 2, 3)
        assert period.payment_month == 4
        assert period.tax_rate == Decimal("20")
        assert config.reporting.currency_symbol == "$"
        assert config.reporting.decimal_places == 0
        assert config.logging.level == "DEBUG"
        # Untouched sections keep defaults
        assert config.auth.password == "calendar"

    def test_empty_file(self, tmp_path: Path) -> None:
        settings = write_settings(tmp_path, "")
        with patch.dict(os.environ, {}, clear=True):
            config = load_config(settings_path=settings)

        assert config.tax.retention_rate == Decimal("25")

    @pytest.mark.parametrize(
        "content",
        [
            "tax:\n  retention_rate: 120\n",
            "tax:\n  retention_rate: lots\n",
            "tax: 25\n",
            "withholding:\n  periods:\n    - label: X\n      months: [13]\n      payment_month: 1\n",
            "withholding:\n  periods:\n    - label: X\n      months: [1]\n",
            "withholding:\n  year: next\n",
            "withholding:\n  year: true\n",
            "withholding:\n  periods:\n    - Jan+Feb\n",
            "reporting:\n  decimal_places: two\n",
            "reporting:\n  decimal_places: -1\n",
            "- just\n- a list\n",
        ],
    )
    def test_invalid_values(self, tmp_path: Path, content: str) -> None:
        settings = write_settings(tmp_path, content)

        with pytest.raises(ConfigError):
            load_config(settings_path=settings)


class TestEnvOverrides:
    def test_credentials_and_data_dir(self, tmp_path: Path) -> None:
        env = {USERNAME_ENV: "ana", PASSWORD_ENV: "s3cret", DATA_DIR_ENV: str(tmp_path / "d")}
        with patch.dict(os.environ, env, clear=True):
            config = load_config(config_dir=tmp_path)

        assert config.auth.username == "ana"
        assert config.auth.password == "s3cret"
        assert config.storage.data_dir == tmp_path / "d"
