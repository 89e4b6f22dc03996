"""Configuration loader and validation for reconciliation settings."""

from pathlib import Path
from typing import Any, Optional
import logging

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .utils.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class InputConfig(BaseModel):
    """Configuration for the normalized transaction CSV loader."""

    encoding: str = "utf-8"
    delimiter: str = ","
    date_format: Optional[str] = "%Y-%m-%d"
    column_mappings: dict[str, str] = Field(
        default_factory=lambda: {
            "date": "date",
            "description": "description",
            "amount": "amount",
            "currency": "currency",
            "reference": "reference",
        }
    )


class CurrencyConfig(BaseModel):
    """Reporting and default currencies."""

    base_currency: str = "USD"
    default_currency: str = "USD"

    @field_validator("base_currency", "default_currency")
    @classmethod
    def _upper_iso_code(cls, value: str) -> str:
        value = value.strip().upper()
        if len(value) != 3 or not value.isalpha():
            raise ValueError(f"not an ISO-4217 currency code: {value!r}")
        return value


class ThresholdConfig(BaseModel):
    """Similarity thresholds for the three acceptance rules."""

    date_amount: float = Field(ge=0.0, le=1.0)
    date_only: float = Field(ge=0.0, le=1.0)
    amount_only: float = Field(ge=0.0, le=1.0)


class MatchingConfig(BaseModel):
    """Configuration for the matching engine."""

    amount_tolerance: float = Field(default=0.01, ge=0.0)
    date_tolerance_days: int = Field(default=3, ge=0)
    use_semantic_similarity: bool = False
    lexical: ThresholdConfig = Field(
        default_factory=lambda: ThresholdConfig(
            date_amount=0.05, date_only=0.45, amount_only=0.55
        )
    )
    semantic: ThresholdConfig = Field(
        default_factory=lambda: ThresholdConfig(
            date_amount=0.25, date_only=0.45, amount_only=0.55
        )
    )


class FXConfig(BaseModel):
    """Configuration for the exchange-rate provider."""

    provider_url: str = "https://api.frankfurter.app"
    timeout_seconds: float = Field(default=10.0, gt=0)
    max_workers: int = Field(default=8, ge=1)


class LoggingConfig(BaseModel):
    """Configuration for logging."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class ReconConfig(BaseModel):
    """Main configuration model for reconciliation."""

    input: InputConfig = Field(default_factory=InputConfig)
    currency: CurrencyConfig = Field(default_factory=CurrencyConfig)
    matching: MatchingConfig = Field(default_factory=MatchingConfig)
    fx: FXConfig = Field(default_factory=FXConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    config_file_path: Optional[str] = None


def get_default_config() -> dict[str, Any]:
    """Return the default configuration as a dictionary."""
    return {
        "input": {
            "encoding": "utf-8",
            "delimiter": ",",
            "date_format": "%Y-%m-%d",
            "column_mappings": {
                "date": "date",
                "description": "description",
                "amount": "amount",
                "currency": "currency",
                "reference": "reference",
            },
        },
        "currency": {
            "base_currency": "USD",
            "default_currency": "USD",
        },
        "matching": {
            "amount_tolerance": 0.01,
            "date_tolerance_days": 3,
            "use_semantic_similarity": False,
            "lexical": {"date_amount": 0.05, "date_only": 0.45, "amount_only": 0.55},
            "semantic": {"date_amount": 0.25, "date_only": 0.45, "amount_only": 0.55},
        },
        "fx": {
            "provider_url": "https://api.frankfurter.app",
            "timeout_seconds": 10.0,
            "max_workers": 8,
        },
        "logging": {
            "level": "INFO",
            "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        },
    }


def load_config(config_path: Optional[Path] = None) -> ReconConfig:
    """
    Load configuration from a YAML file or use defaults.

    Args:
        config_path: Path to YAML configuration file (optional)

    Returns:
        ReconConfig object with loaded or default settings

    Raises:
        ConfigurationError: If the file cannot be parsed or fails validation
    """
    config_dict = get_default_config()

    if config_path and config_path.exists():
        logger.info(f"Loading configuration from: {config_path}")
        try:
            with open(config_path, "r") as f:
                user_config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e

        if not isinstance(user_config, dict):
            raise ConfigurationError(f"Top level of {config_path} must be a mapping")

        config_dict = _deep_merge(config_dict, user_config)
        config_dict["config_file_path"] = str(config_path)
    else:
        logger.info("Using default configuration")

    try:
        return ReconConfig(**config_dict)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e


def with_base_currency(config: ReconConfig, base_currency: str) -> ReconConfig:
    """
    Return a copy of ``config`` reporting in ``base_currency``.

    Raises:
        ConfigurationError: If ``base_currency`` is not a three-letter code
    """
    try:
        currency = CurrencyConfig(
            base_currency=base_currency,
            default_currency=config.currency.default_currency,
        )
    except ValidationError as e:
        raise ConfigurationError(f"Invalid base currency {base_currency!r}: {e}") from e

    return config.model_copy(update={"currency": currency})


def _deep_merge(base: dict, override: dict) -> dict:
    """
    Deep merge two dictionaries.

    Args:
        base: Base dictionary
        override: Dictionary to merge on top

    Returns:
        Merged dictionary
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def generate_default_config(output_path: Path) -> None:
    """
    Write the default configuration to a YAML file.

    Args:
        output_path: Path to write the configuration file
    """
    yaml_content = """# fx-recon configuration
# Generated configuration file - customize as needed

"""
    yaml_content += yaml.dump(get_default_config(), default_flow_style=False, sort_keys=False)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w") as f:
        f.write(yaml_content)

    logger.info(f"Generated configuration file: {output_path}")
