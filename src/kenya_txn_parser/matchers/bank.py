"""
Matchers for bank messages.

Bank-originated M-Pesa transfers (till, mobile user, paybill) never state
the fee, so their records leave ``transaction_cost`` empty and the consumer
is asked for it. The debit notification that usually accompanies them
carries the account, timestamp and bank reference.
"""

from abc import abstractmethod
from decimal import Decimal
from typing import Optional
import re

from ..extractors import (
    AMOUNT_PATTERN,
    CURRENCY_PATTERN,
    FULL_STOP_PATTERN,
    NAME_PATTERN,
    extract_account_number,
    extract_balance,
    extract_date_time,
    extract_fee,
    extract_masked_account,
    extract_references,
    extract_transaction_code,
    find_amounts,
    parse_decimal,
)
from ..models.transaction import (
    BankTransferType,
    ParsedTransaction,
    Provider,
    TransactionType,
)
from .base import MessageMatcher, search_group

# (recipient, recipient_number, reference)
Counterparty = tuple[Optional[str], Optional[str], Optional[str]]

# Business or account names stop at a date, a status verb, the BANK REF block or a full stop
_LABEL_END = (
    rf"(?=\s+on\s+\d|\s+(?:was|has\s+been|is)\b|\s+BANK\s+REF|{FULL_STOP_PATTERN}|$)"
)

_TILL_RE = re.compile(
    rf"\bTill\s+transfer\s+of\s+(?:{CURRENCY_PATTERN})?\s*(?P<amount>{AMOUNT_PATTERN})"
    rf"\s+to\s+(?P<till>\d{{4,8}})\s+(?P<name>{NAME_PATTERN}){_LABEL_END}",
    re.IGNORECASE,
)

_MOBILE_RE = re.compile(
    rf"\bM-?PESA\s+transfer\s+of\s+(?:{CURRENCY_PATTERN})?\s*(?P<amount>{AMOUNT_PATTERN})"
    r"\s+to\s+(?P<name>[^()]+?)\s*\(\s*(?P<phone>\+?\d{9,12})\s*\)",
    re.IGNORECASE,
)

_PAYBILL_RE = re.compile(
    rf"\bPaybill\s+(?:transfer|payment)\s+of\s+(?:{CURRENCY_PATTERN})?\s*"
    rf"(?P<amount>{AMOUNT_PATTERN})\s+to\s+(?P<paybill>\d{{4,8}})\s+(?:for\s+)?"
    rf"Account(?:\s+(?:Number|No\.?))?[\s:]+(?P<account>{NAME_PATTERN}){_LABEL_END}",
    re.IGNORECASE,
)

_DEBIT_NOTIFICATION_RE = re.compile(
    rf"\baccount\s+(?P<account>[\dX*]+)\s+has\s+been\s+debited\s+with\s+"
    rf"(?:{CURRENCY_PATTERN})?\s*(?P<amount>{AMOUNT_PATTERN})",
    re.IGNORECASE,
)

_PAID_TO_RE = re.compile(
    rf"\b(?:paid\s+)?to\s+(?P<name>{NAME_PATTERN})"
    rf"(?={FULL_STOP_PATTERN}|\s+on\s|\s+Bal|$)",
    re.IGNORECASE,
)
_FROM_RE = re.compile(
    rf"\bfrom\s+(?P<name>{NAME_PATTERN})"
    rf"(?={FULL_STOP_PATTERN}|\s+on\s|\s+via\s|\s+Bal|$)",
    re.IGNORECASE,
)


class BankTransferMatcher(MessageMatcher):
    """Shared behavior for bank-to-M-Pesa transfer confirmations."""

    provider = Provider.BANK
    grammar: re.Pattern
    transfer_type: BankTransferType

    def applies(self, text: str) -> bool:
        return self.grammar.search(text) is not None

    def extract(self, text: str, raw_message: str) -> ParsedTransaction:
        match = self.grammar.search(text)
        if match is None:
            return ParsedTransaction.failed(raw_message, self.provider)

        refs = extract_references(text)
        date, time = extract_date_time(text)
        recipient, recipient_number, reference = self._counterparty(match)

        return ParsedTransaction(
            raw_message=raw_message,
            provider=self.provider,
            transaction_type=TransactionType.BANK_TRANSFER,
            bank_transfer_type=self.transfer_type,
            amount=parse_decimal(match.group("amount")),
            transaction_cost=None,
            recipient=recipient,
            recipient_number=recipient_number,
            reference=reference,
            bank_reference=refs.bank,
            mpesa_reference=refs.mpesa,
            transaction_code=refs.mpesa or refs.bank or refs.generic,
            account_number=extract_masked_account(text),
            date=date,
            time=time,
        )

    @abstractmethod
    def _counterparty(self, match: re.Match) -> Counterparty:
        """Return (recipient, recipient_number, reference) from the grammar match."""
        pass


class BankToTillMatcher(BankTransferMatcher):
    """Till transfer of KES X to <till> <business> ... BANK REF. X MPESA REF. Y"""

    name = "bank_to_till"
    grammar = _TILL_RE
    transfer_type = BankTransferType.BANK_TO_TILL

    def _counterparty(self, match: re.Match) -> Counterparty:
        return match.group("name").strip(), match.group("till"), None


class BankToMobileMatcher(BankTransferMatcher):
    """your MPESA transfer of KES. X to <name> (<phone>) ... MPESA ref number Y"""

    name = "bank_to_mpesa"
    grammar = _MOBILE_RE
    transfer_type = BankTransferType.BANK_TO_MPESA

    def _counterparty(self, match: re.Match) -> Counterparty:
        return match.group("name").strip(), match.group("phone").lstrip("+"), None


class BankToPaybillMatcher(BankTransferMatcher):
    """Paybill payment of KES X to <paybill> Account <label> ... BANK REF. X MPESA REF. Y"""

    name = "bank_to_paybill"
    grammar = _PAYBILL_RE
    transfer_type = BankTransferType.BANK_TO_PAYBILL

    def _counterparty(self, match: re.Match) -> Counterparty:
        account = match.group("account").strip()
        return account, match.group("paybill"), account


class BankDebitNotificationMatcher(MessageMatcher):
    """account <masked> has been debited with KES X on <date> at <time>. Ref: Y"""

    name = "bank_debit_notification"
    provider = Provider.BANK

    def applies(self, text: str) -> bool:
        return _DEBIT_NOTIFICATION_RE.search(text) is not None

    def extract(self, text: str, raw_message: str) -> ParsedTransaction:
        match = _DEBIT_NOTIFICATION_RE.search(text)
        if match is None:
            return ParsedTransaction.failed(raw_message, self.provider)

        refs = extract_references(text)
        bank_reference = refs.bank or refs.generic
        date, time = extract_date_time(text)

        return ParsedTransaction(
            raw_message=raw_message,
            provider=self.provider,
            transaction_type=TransactionType.BANK_DEBIT,
            amount=parse_decimal(match.group("amount")),
            transaction_cost=None,
            account_number=extract_masked_account(text) or match.group("account"),
            bank_reference=bank_reference,
            transaction_code=bank_reference,
            balance=extract_balance(text),
            date=date,
            time=time,
        )


class LegacyBankMatcher(MessageMatcher):
    """
    Older bank SMS formats (KCB, Equity, Co-op and similar).

    The verb decides the type: debited/withdrawn, credited/received, transfer.
    The fee is only read from an explicit cost/charge line.
    """

    name = "legacy_bank"
    provider = Provider.BANK

    _types = (
        (("debited", "withdrawn"), TransactionType.DEBIT, _PAID_TO_RE),
        (("credited", "received"), TransactionType.CREDIT, _FROM_RE),
        (("transfer",), TransactionType.TRANSFER, _PAID_TO_RE),
    )

    def applies(self, text: str) -> bool:
        return self._classify(text) is not None

    def extract(self, text: str, raw_message: str) -> ParsedTransaction:
        classified = self._classify(text)
        if classified is None:
            return ParsedTransaction.failed(raw_message, self.provider)
        txn_type, counterparty_pattern = classified

        amounts = find_amounts(text)
        balance = extract_balance(text)
        if balance is None and len(amounts) >= 3:
            balance = amounts[-1]
        date, time = extract_date_time(text)

        return ParsedTransaction(
            raw_message=raw_message,
            provider=self.provider,
            transaction_type=txn_type,
            amount=amounts[0] if amounts else None,
            transaction_cost=self._fee(text, amounts),
            recipient=search_group(counterparty_pattern, text, "name"),
            account_number=extract_account_number(text),
            transaction_code=extract_transaction_code(text),
            balance=balance,
            date=date,
            time=time,
        )

    def _classify(self, text: str) -> Optional[tuple[TransactionType, re.Pattern]]:
        lowered = text.lower()
        for keywords, txn_type, pattern in self._types:
            if any(keyword in lowered for keyword in keywords):
                return txn_type, pattern
        return None

    @staticmethod
    def _fee(text: str, amounts: list[Decimal]) -> Optional[Decimal]:
        fee = extract_fee(text)
        if fee is None and "charges" in text.lower() and len(amounts) >= 2:
            fee = amounts[1]
        return fee


BANK_TRANSFER_MATCHERS: tuple[MessageMatcher, ...] = (
    BankToTillMatcher(),
    BankToMobileMatcher(),
    BankToPaybillMatcher(),
    BankDebitNotificationMatcher(),
    LegacyBankMatcher(),
)

LEGACY_BANK_MATCHERS: tuple[MessageMatcher, ...] = (LegacyBankMatcher(),)
