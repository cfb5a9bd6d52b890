"""
Matchers for M-Pesa and Airtel Money confirmation messages.

All M-Pesa families share the same layout (code, amount, counterparty,
date, cost, new balance); they differ in the verb that names the
transaction and in where the counterparty appears.
"""

from decimal import Decimal
from typing import Optional
import re

from ..extractors import (
    FULL_STOP_PATTERN,
    NAME_PATTERN,
    extract_date_time,
    extract_phone,
    extract_transaction_code,
    find_amounts,
)
from ..models.transaction import ParsedTransaction, Provider, TransactionType
from .base import MessageMatcher, resolve_fee_and_balance, search_group

ZERO = Decimal("0")

# Counterparty names run up to a phone number, " on <date>", a full stop or an amount
_NAME_END = rf"(?=\s+\d{{10}}|\s+on\s|{FULL_STOP_PATTERN}|\s*(?:Ksh|KES)|$)"

_PAID_TO_RE = re.compile(rf"\bpaid\s+to\s+(?P<name>{NAME_PATTERN}){_NAME_END}", re.IGNORECASE)
_SENT_TO_RE = re.compile(rf"\bsent\s+to\s+(?P<name>{NAME_PATTERN}){_NAME_END}", re.IGNORECASE)
_TO_RE = re.compile(rf"\bto\s+(?P<name>{NAME_PATTERN}){_NAME_END}", re.IGNORECASE)
_FROM_RE = re.compile(rf"\bfrom\s+(?P<name>{NAME_PATTERN}){_NAME_END}", re.IGNORECASE)

# Paybill account: "Account Number 123456789", "Acc. 1234", "Reference INV001"
_ACCOUNT_REF_RE = re.compile(
    r"(?:\bAccount\s+Number|\bAcc\.|\bReference)[\s:]*(?P<ref>[\w-]+)", re.IGNORECASE
)


class MpesaMatcher(MessageMatcher):
    """
    Shared extraction for M-Pesa confirmations.

    Subclasses set the trigger keyword, the transaction type and the
    counterparty pattern.
    """

    provider = Provider.MPESA
    keyword: str = ""
    transaction_type: TransactionType = TransactionType.PAYMENT
    counterparty_pattern: re.Pattern = _PAID_TO_RE

    def applies(self, text: str) -> bool:
        return self.keyword in text.lower()

    def extract(self, text: str, raw_message: str) -> ParsedTransaction:
        amounts = find_amounts(text)
        fee, balance = resolve_fee_and_balance(text, amounts)
        date, time = extract_date_time(text)

        return ParsedTransaction(
            raw_message=raw_message,
            provider=self.provider,
            transaction_type=self.transaction_type,
            amount=amounts[0] if amounts else None,
            transaction_cost=self._transaction_cost(fee),
            recipient=search_group(self.counterparty_pattern, text, "name"),
            recipient_number=self._recipient_number(text),
            reference=search_group(_ACCOUNT_REF_RE, text, "ref"),
            transaction_code=extract_transaction_code(text),
            new_balance=balance,
            date=date,
            time=time,
        )

    def _transaction_cost(self, fee: Optional[Decimal]) -> Decimal:
        # M-Pesa confirmations without a cost line were free
        return fee if fee is not None else ZERO

    def _recipient_number(self, text: str) -> Optional[str]:
        return None


class MpesaPaymentMatcher(MpesaMatcher):
    """Till and Paybill payments: "Ksh500.00 paid to JAVA HOUSE"."""

    name = "mpesa_payment"
    keyword = "paid to"
    transaction_type = TransactionType.PAYMENT
    counterparty_pattern = _PAID_TO_RE


class MpesaSendMatcher(MpesaMatcher):
    """Send money: "Ksh1,000.00 sent to JOHN DOE 254712345678"."""

    name = "mpesa_send"
    keyword = "sent to"
    transaction_type = TransactionType.SEND_MONEY
    counterparty_pattern = _SENT_TO_RE

    def _recipient_number(self, text: str) -> Optional[str]:
        return extract_phone(text)


class MpesaReceivedMatcher(MpesaMatcher):
    """Incoming money: "You have received Ksh3,000.00 from JANE WANJIKU"."""

    name = "mpesa_received"
    keyword = "received"
    transaction_type = TransactionType.RECEIVED
    counterparty_pattern = _FROM_RE

    def _transaction_cost(self, fee: Optional[Decimal]) -> Decimal:
        # The receiver never pays; a second amount is never a fee here
        return ZERO

    def _recipient_number(self, text: str) -> Optional[str]:
        return extract_phone(text)


class MpesaWithdrawMatcher(MpesaMatcher):
    """Agent withdrawals: "Ksh5,000.00 withdrawn from MAMA NJERI - WESTLANDS"."""

    name = "mpesa_withdraw"
    keyword = "withdraw"
    transaction_type = TransactionType.WITHDRAW
    counterparty_pattern = _FROM_RE


MPESA_MATCHERS: tuple[MessageMatcher, ...] = (
    MpesaPaymentMatcher(),
    MpesaSendMatcher(),
    MpesaReceivedMatcher(),
    MpesaWithdrawMatcher(),
)


class AirtelMoneyMatcher(MessageMatcher):
    """Airtel Money payments, transfers and receipts."""

    name = "airtel_money"
    provider = Provider.AIRTEL_MONEY

    _types = (
        ("paid", TransactionType.PAYMENT, _TO_RE),
        ("sent", TransactionType.SEND_MONEY, _TO_RE),
        ("received", TransactionType.RECEIVED, _FROM_RE),
    )

    def applies(self, text: str) -> bool:
        return self._classify(text) is not None

    def extract(self, text: str, raw_message: str) -> ParsedTransaction:
        classified = self._classify(text)
        if classified is None:
            return ParsedTransaction.failed(raw_message, self.provider)
        txn_type, counterparty_pattern = classified

        amounts = find_amounts(text)
        fee, balance = resolve_fee_and_balance(text, amounts)
        if txn_type is TransactionType.RECEIVED or fee is None:
            fee = ZERO
        date, time = extract_date_time(text)

        return ParsedTransaction(
            raw_message=raw_message,
            provider=self.provider,
            transaction_type=txn_type,
            amount=amounts[0] if amounts else None,
            transaction_cost=fee,
            recipient=search_group(counterparty_pattern, text, "name"),
            recipient_number=extract_phone(text),
            transaction_code=extract_transaction_code(text),
            balance=balance,
            date=date,
            time=time,
        )

    def _classify(self, text: str) -> Optional[tuple[TransactionType, re.Pattern]]:
        lowered = text.lower()
        for keyword, txn_type, pattern in self._types:
            if keyword in lowered:
                return txn_type, pattern
        return None


AIRTEL_MATCHERS: tuple[MessageMatcher, ...] = (AirtelMoneyMatcher(),)
