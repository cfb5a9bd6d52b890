"""Data models for parsed mobile-money and bank transaction messages."""

from dataclasses import dataclass, fields, replace
from decimal import Decimal
from enum import Enum
from typing import Any, Optional


class Provider(Enum):
    """Coarse source classification of a message."""

    MPESA = "M-Pesa"
    AIRTEL_MONEY = "Airtel Money"
    BANK = "Bank"
    UNKNOWN = "Unknown"


class TransactionType(Enum):
    """Fine-grained transaction kind."""

    PAYMENT = "payment"
    SEND_MONEY = "send_money"
    RECEIVED = "received"
    WITHDRAW = "withdraw"
    DEBIT = "debit"
    CREDIT = "credit"
    TRANSFER = "transfer"
    BANK_TRANSFER = "bank_transfer"
    BANK_DEBIT = "bank_debit"


class BankTransferType(Enum):
    """Destination channel of a bank-originated M-Pesa transfer."""

    BANK_TO_TILL = "bank_to_till"
    BANK_TO_MPESA = "bank_to_mpesa"
    BANK_TO_PAYBILL = "bank_to_paybill"


@dataclass(frozen=True)
class ParsedTransaction:
    """
    Canonical result of one parse attempt.

    Every message family is expressed through this single shape; fields a
    family does not report stay None. A record is built fresh per call and
    never mutated afterwards (use ``dataclasses.replace`` to derive one).
    """

    # Original input, kept for audit
    raw_message: str

    provider: Provider = Provider.UNKNOWN
    transaction_type: Optional[TransactionType] = None

    # Only set for TransactionType.BANK_TRANSFER
    bank_transfer_type: Optional[BankTransferType] = None

    # Money fields
    amount: Optional[Decimal] = None
    transaction_cost: Optional[Decimal] = None
    balance: Optional[Decimal] = None
    new_balance: Optional[Decimal] = None

    # Counterparty
    recipient: Optional[str] = None
    recipient_number: Optional[str] = None
    account_number: Optional[str] = None

    # Reference codes
    reference: Optional[str] = None
    bank_reference: Optional[str] = None
    mpesa_reference: Optional[str] = None
    transaction_code: Optional[str] = None

    # Provider-formatted timestamp components
    date: Optional[str] = None
    time: Optional[str] = None

    # Diagnostic for unexpected failures (distinct from a plain no-match)
    error: Optional[str] = None

    def __post_init__(self) -> None:
        is_transfer = self.transaction_type is TransactionType.BANK_TRANSFER
        if is_transfer != (self.bank_transfer_type is not None):
            raise ValueError("bank_transfer_type is set only for bank_transfer transactions")
        if self.transaction_cost is not None and self.transaction_cost < 0:
            raise ValueError(f"Negative transaction cost: {self.transaction_cost}")

    @property
    def success(self) -> bool:
        """True iff an amount was confidently extracted."""
        return self.amount is not None

    @property
    def requires_manual_fee(self) -> bool:
        """True when the message reported no fee and the consumer must ask for one."""
        return self.success and self.transaction_cost is None

    @classmethod
    def failed(
        cls,
        raw_message: str,
        provider: Provider = Provider.UNKNOWN,
        error: Optional[str] = None,
    ) -> "ParsedTransaction":
        """Build a no-match (or failed) record with every optional field empty."""
        return cls(raw_message=raw_message, provider=provider, error=error)

    def with_provider(self, provider: Provider) -> "ParsedTransaction":
        """Return a copy labelled with ``provider``."""
        return replace(self, provider=provider)

    def to_dict(self) -> dict[str, Any]:
        """JSON-friendly representation for downstream consumers."""
        data: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, Enum):
                value = value.value
            elif isinstance(value, Decimal):
                value = str(value)
            data[f.name] = value
        data["success"] = self.success
        data["requires_manual_fee"] = self.requires_manual_fee
        return data

    def prefill_fields(self) -> dict[str, Any]:
        """
        Fields handed to an expense/transfer form.

        The fee is None (not zero) when it must be entered manually.
        """
        return {
            "amount": self.amount,
            "transaction_fee": self.transaction_cost,
            "requires_manual_fee": self.requires_manual_fee,
            "description": self.recipient or "",
            "reference": self.transaction_code or self.reference or "",
            "provider": self.provider.value,
        }
