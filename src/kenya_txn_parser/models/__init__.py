"""Data models for parsed transaction messages."""

from .transaction import (
    ParsedTransaction,
    Provider,
    TransactionType,
    BankTransferType,
)

__all__ = [
    "ParsedTransaction",
    "Provider",
    "TransactionType",
    "BankTransferType",
]
