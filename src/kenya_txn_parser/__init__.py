"""
Kenyan mobile-money and bank transaction message parser.

Turns M-Pesa, Airtel Money and bank SMS notifications into structured
ParsedTransaction records.
"""

from .classifier import MessageClassifier, parse_message, parse_combined
from .config import ParserConfig, load_config
from .correlator import MessageCorrelator
from .models import ParsedTransaction, Provider, TransactionType, BankTransferType
from .samples import SAMPLE_MESSAGES, get_sample

__version__ = "0.1.0"

__all__ = [
    "MessageClassifier",
    "MessageCorrelator",
    "ParsedTransaction",
    "Provider",
    "TransactionType",
    "BankTransferType",
    "ParserConfig",
    "load_config",
    "parse_message",
    "parse_combined",
    "SAMPLE_MESSAGES",
    "get_sample",
]
