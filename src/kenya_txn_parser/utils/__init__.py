"""Utility modules."""

from .exceptions import (
    TxnParserError,
    ExtractionError,
    ConfigurationError,
)
from .logging_config import setup_logging, get_logger

__all__ = [
    "TxnParserError",
    "ExtractionError",
    "ConfigurationError",
    "setup_logging",
    "get_logger",
]
