"""Configuration loader and validation for parser settings."""

from pathlib import Path
from typing import Any, Optional
import logging

import yaml
from pydantic import BaseModel, Field, ValidationError

from .utils.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class KeywordConfig(BaseModel):
    """Keyword signals used by the dispatcher, matched case-insensitively."""

    bank_transfer_signals: list[str] = Field(
        default_factory=lambda: [
            "till transfer",
            "your mpesa transfer",
            "bank ref",
            "go for it",
            "has been debited with",
        ]
    )
    mobile_money: list[str] = Field(default_factory=lambda: ["m-pesa", "mpesa", "safaricom"])
    airtel_money: list[str] = Field(default_factory=lambda: ["airtel money"])
    bank: list[str] = Field(
        default_factory=lambda: [
            "bank",
            "kcb",
            "equity",
            "co-op",
            "ncba",
            "absa",
            "stanbic",
            "account",
        ]
    )


class CorrelatorConfig(BaseModel):
    """Configuration for multi-message splitting."""

    # Segments must be longer than this after trimming
    min_segment_length: int = Field(default=10, ge=0)


class LoggingConfig(BaseModel):
    """Configuration for logging."""

    level: str = "WARNING"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file: Optional[Path] = None


class ParserConfig(BaseModel):
    """Main configuration model for the message parser."""

    keywords: KeywordConfig = Field(default_factory=KeywordConfig)
    correlator: CorrelatorConfig = Field(default_factory=CorrelatorConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    config_file_path: Optional[str] = None


def get_default_config() -> dict[str, Any]:
    """Return the default configuration as a dictionary."""
    return ParserConfig().model_dump(exclude={"config_file_path"})


def load_config(config_path: Optional[Path] = None) -> ParserConfig:
    """
    Load configuration from a YAML file or use defaults.

    Args:
        config_path: Path to YAML configuration file (optional)

    Returns:
        ParserConfig object with loaded or default settings

    Raises:
        ConfigurationError: If the file is not valid YAML or fails validation
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
            raise ConfigurationError(f"Configuration root must be a mapping: {config_path}")

        # Deep merge user config into defaults
        config_dict = _deep_merge(config_dict, user_config)
        config_dict["config_file_path"] = str(config_path)
    else:
        logger.info("Using default configuration")

    try:
        return ParserConfig(**config_dict)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e


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
    Generate a default configuration file.

    Args:
        output_path: Path to write the configuration file
    """
    config_dict = get_default_config()

    yaml_content = """# Kenya transaction message parser configuration
# Keyword lists are matched case-insensitively against the whole message.

"""
    yaml_content += yaml.dump(config_dict, default_flow_style=False, sort_keys=False)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w") as f:
        f.write(yaml_content)

    logger.info(f"Generated configuration file: {output_path}")
