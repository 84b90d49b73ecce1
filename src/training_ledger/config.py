"""Configuration loading and validation for the training ledger."""

import os
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Optional

import yaml

from training_ledger.utils.logging_config import get_logger

logger = get_logger(__name__)

# Environment variables that override the credential gate settings
USERNAME_ENV = "TRAINING_LEDGER_USERNAME"
PASSWORD_ENV = "TRAINING_LEDGER_PASSWORD"
DATA_DIR_ENV = "TRAINING_LEDGER_DATA_DIR"

DEFAULT_TAX_RATE = Decimal("25")
DEFAULT_WITHHOLDING_YEAR = 2026


class ConfigError(Exception):
    """Exception raised for configuration errors."""

    pass


def _parse_rate(value: object, field_name: str) -> Decimal:
    """Parse a percentage in the 0-100 range."""
    try:
        rate = Decimal(str(value))
    except InvalidOperation as e:
        raise ConfigError(f"'{field_name}' must be a number, got {value!r}") from e
    if not rate.is_finite() or not Decimal("0") <= rate <= Decimal("100"):
        raise ConfigError(f"'{field_name}' must be between 0 and 100, got {value!r}")
    return rate


def _parse_int(value: object, field_name: str, minimum: int = 0) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"'{field_name}' must be an integer, got {value!r}")
    try:
        number = int(value)  # type: ignore[call-overload]
    except (TypeError, ValueError) as e:
        raise ConfigError(f"'{field_name}' must be an integer, got {value!r}") from e
    if number < minimum:
        raise ConfigError(f"'{field_name}' must be at least {minimum}, got {value!r}")
    return number


def _parse_month(value: object, field_name: str) -> int:
    try:
        month = int(value)  # type: ignore[call-overload]
    except (TypeError, ValueError) as e:
        raise ConfigError(f"'{field_name}' must be a month number, got {value!r}") from e
    if not 1 <= month <= 12:
        raise ConfigError(f"'{field_name}' must be between 1 and 12, got {value!r}")
    return month


@dataclass
class TaxConfig:
    """Default withholding settings.

    Attributes:
        retention_rate: Withholding percentage used until the user sets one.
    """

    retention_rate: Decimal = field(default_factory=lambda: DEFAULT_TAX_RATE)

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "TaxConfig":
        """Create from dictionary."""
        return cls(
            retention_rate=_parse_rate(data.get("retention_rate", DEFAULT_TAX_RATE), "retention_rate"),
        )


@dataclass
class WithholdingPeriodConfig:
    """One lump of the withholding payment schedule.

    Attributes:
        label: Display label.
        months: Calendar months whose revenue the lump covers.
        payment_month: Month the withholding is paid in.
        tax_rate: Rate applied to this lump.
    """

    label: str
    months: tuple[int, ...]
    payment_month: int
    tax_rate: Decimal = field(default_factory=lambda: DEFAULT_TAX_RATE)

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "WithholdingPeriodConfig":
        """Create from dictionary."""
        raw_months = data.get("months")
        if not isinstance(raw_months, list) or not raw_months:
            raise ConfigError("Withholding period 'months' must be a non-empty list")
        months = tuple(sorted({_parse_month(m, "months") for m in raw_months}))
        if "payment_month" not in data:
            raise ConfigError("Withholding period requires 'payment_month'")
        return cls(
            label=str(data.get("label", "+".join(str(m) for m in months))),
            months=months,
            payment_month=_parse_month(data["payment_month"], "payment_month"),
            tax_rate=_parse_rate(data.get("tax_rate", DEFAULT_TAX_RATE), "tax_rate"),
        )


def _default_withholding_periods() -> list[WithholdingPeriodConfig]:
    return [
        WithholdingPeriodConfig(label="Jan+Feb", months=(1, 2), payment_month=3),
        WithholdingPeriodConfig(label="Mar-May", months=(3, 4, 5), payment_month=6),
    ]


@dataclass
class WithholdingConfig:
    """Withholding payment schedule for one calendar year.

    Attributes:
        year: Year whose months are simulated.
        periods: Payment lumps, in schedule order.
    """

    year: int = DEFAULT_WITHHOLDING_YEAR
    periods: list[WithholdingPeriodConfig] = field(default_factory=_default_withholding_periods)

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "WithholdingConfig":
        """Create from dictionary."""
        periods = _default_withholding_periods()
        if data.get("periods") is not None:
            period_list = data["periods"]
            if not isinstance(period_list, list):
                raise ConfigError(f"'periods' must be a list, got {type(period_list).__name__}")
            for p in period_list:
                if not isinstance(p, dict):
                    raise ConfigError(f"Withholding period must be a mapping, got {type(p).__name__}")
            periods = [WithholdingPeriodConfig.from_dict(p) for p in period_list]

        return cls(
            year=_parse_int(data.get("year", DEFAULT_WITHHOLDING_YEAR), "year", minimum=1),
            periods=periods,
        )


@dataclass
class AuthConfig:
    """Credential gate settings.

    The gate only keeps casual onlookers out of a personal tool; it is not a
    security boundary and the password is stored in plain text.

    Attributes:
        enabled: Whether commands require a prior login.
        username: Expected username (compared case-insensitively).
        password: Expected password (compared exactly).
    """

    enabled: bool = True
    username: str = "trainer"
    password: str = "calendar"

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "AuthConfig":
        """Create from dictionary."""
        return cls(
            enabled=bool(data.get("enabled", True)),
            username=str(data.get("username", "trainer")),
            password=str(data.get("password", "calendar")),
        )


@dataclass
class StorageConfig:
    """Where the ledger's blobs are kept.

    Attributes:
        data_dir: Directory holding one file per stored entry.
    """

    data_dir: Path = field(default_factory=lambda: Path("data"))

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "StorageConfig":
        """Create from dictionary."""
        return cls(data_dir=Path(str(data.get("data_dir", "data"))))


@dataclass
class ReportingConfig:
    """Configuration for console and file reports.

    Attributes:
        currency_symbol: Currency symbol for display.
        decimal_places: Number of decimal places.
        date_format: Date format for output.
    """

    currency_symbol: str = "€"
    decimal_places: int = 2
    date_format: str = "%Y-%m-%d"

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "ReportingConfig":
        """Create from dictionary."""
        return cls(
            currency_symbol=str(data.get("currency_symbol", "€")),
            decimal_places=_parse_int(data.get("decimal_places", 2), "decimal_places"),
            date_format=str(data.get("date_format", "%Y-%m-%d")),
        )


@dataclass
class LoggingConfig:
    """Configuration for logging.

    Attributes:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        file: Path to log file.
    """

    level: str = "INFO"
    file: str = "training_ledger.log"

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "LoggingConfig":
        """Create from dictionary."""
        return cls(
            level=str(data.get("level", "INFO")),
            file=str(data.get("file", "training_ledger.log")),
        )


@dataclass
class Config:
    """Main configuration container."""

    tax: TaxConfig = field(default_factory=TaxConfig)
    withholding: WithholdingConfig = field(default_factory=WithholdingConfig)
    auth: AuthConfig = field(default_factory=AuthConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    reporting: ReportingConfig = field(default_factory=ReportingConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_yaml_file(path: Path) -> dict[str, object]:
    """Load a YAML file.

    Raises:
        FileNotFoundError: If file doesn't exist.
        ConfigError: If the top level is not a mapping.
        yaml.YAMLError: If file is invalid YAML.
    """
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, encoding="utf-8") as f:
        content = yaml.safe_load(f)

    if content is None:
        return {}
    if not isinstance(content, dict):
        raise ConfigError(f"{path} must contain a mapping, got {type(content).__name__}")
    return content


def _section(data: dict[str, object], name: str) -> Optional[dict[str, object]]:
    section = data.get(name)
    if section is None:
        return None
    if not isinstance(section, dict):
        raise ConfigError(f"'{name}' must be a mapping, got {type(section).__name__}")
    return section


def apply_env_overrides(config: Config) -> Config:
    """Apply environment variable overrides (credentials, data directory)."""
    if os.environ.get(USERNAME_ENV):
        config.auth.username = os.environ[USERNAME_ENV]
    if os.environ.get(PASSWORD_ENV):
        config.auth.password = os.environ[PASSWORD_ENV]
    if os.environ.get(DATA_DIR_ENV):
        config.storage.data_dir = Path(os.environ[DATA_DIR_ENV])
    return config


def load_config(
    settings_path: Optional[Path] = None,
    config_dir: Optional[Path] = None,
) -> Config:
    """Load configuration from settings.yaml.

    A missing settings file is not an error: defaults are used and a warning
    is logged.

    Args:
        settings_path: Path to settings.yaml (or None to use default).
        config_dir: Base config directory (default: ./config).

    Returns:
        Complete Config object.

    Raises:
        ConfigError: If the settings file has invalid values.
    """
    if config_dir is None:
        config_dir = Path("config")
    if settings_path is None:
        settings_path = config_dir / "settings.yaml"

    config = Config()

    if settings_path.exists():
        data = load_yaml_file(settings_path)

        section = _section(data, "tax")
        if section is not None:
            config.tax = TaxConfig.from_dict(section)
        section = _section(data, "withholding")
        if section is not None:
            config.withholding = WithholdingConfig.from_dict(section)
        section = _section(data, "auth")
        if section is not None:
            config.auth = AuthConfig.from_dict(section)
        section = _section(data, "storage")
        if section is not None:
            config.storage = StorageConfig.from_dict(section)
        section = _section(data, "reporting")
        if section is not None:
            config.reporting = ReportingConfig.from_dict(section)
        section = _section(data, "logging")
        if section is not None:
            config.logging = LoggingConfig.from_dict(section)

        logger.info(f"Loaded settings from {settings_path}")
    else:
        logger.warning(f"Settings file not found: {settings_path}, using defaults")

    return apply_env_overrides(config)
