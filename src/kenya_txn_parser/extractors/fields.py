"""
Field extractors for transaction messages.

Each extractor is a pure function over a normalized message (whitespace
collapsed to single spaces) that owns exactly one pattern. Extractors return
None (or an empty list) when their field is absent; they only raise
ExtractionError when matched text cannot be converted.
"""

from decimal import Decimal, InvalidOperation
from typing import NamedTuple, Optional
import re

from ..utils.exceptions import ExtractionError

# Currency marker: Ksh / KES, optionally followed by "."
CURRENCY_PATTERN = r"(?:Ksh|KES)\.?"

# Numeric literal with optional thousands separators and 0 or 2 decimals
AMOUNT_PATTERN = r"\d[\d,]*(?:\.\d{2}(?!\d))?"

# Counterparty name text: stops at a full stop, except one after an initial ("J. DOE")
NAME_PATTERN = r"(?:[^.]|(?<=\b[A-Za-z])\.)+?"

# A full stop that ends a sentence rather than an initial
FULL_STOP_PATTERN = r"(?<!\b[A-Za-z])\."


_WHITESPACE_RE = re.compile(r"\s+")

_MONEY_RE = re.compile(rf"{CURRENCY_PATTERN}\s*(?P<value>{AMOUNT_PATTERN})", re.IGNORECASE)

# "Transaction cost, Ksh7.00" / "Fee: KES 10" / "Transaction charges KES 35.00"
_FEE_RE = re.compile(
    rf"(?:\bTransaction\s+(?:cost|fee|charges?)|\bFee|\bCharges?)[,:\s]*"
    rf"{CURRENCY_PATTERN}\s*(?P<value>{AMOUNT_PATTERN})",
    re.IGNORECASE,
)

# "New M-PESA balance is Ksh15,234.50" / "Avail. Bal Ksh45,678.90" / "Balance: KES 67,890.00"
_BALANCE_RE = re.compile(
    rf"(?:\bAvail(?:able)?\.?\s*)?\bBal(?:ance)?\b(?:\s+is)?[\s:.]*"
    rf"(?:{CURRENCY_PATTERN}\s*)?(?P<value>{AMOUNT_PATTERN})",
    re.IGNORECASE,
)

# Keyword parts are case-insensitive; the reference tokens themselves are uppercase.
_MPESA_REF_RE = re.compile(
    r"(?i:\bM-?PESA\s+REF(?:erence)?(?:\.|\s+number|\s+no\.?)?)[\s:.]*"
    r"(?P<ref>[A-Z0-9]{6,})\b"
)
_BANK_REF_RE = re.compile(
    r"(?i:\bBANK\s+REF(?:erence)?\.?)[\s:.]*(?P<ref>[A-Z0-9]{6,})\b"
)
# Plain "Ref: X" that is not part of a BANK REF or MPESA REF label
_REF_RE = re.compile(
    r"(?i:(?<!bank\s)(?<!mpesa\s)(?<!m-pesa\s)\bRef(?:erence)?)[\s:.]*"
    r"(?P<ref>[A-Z0-9]{5,})\b"
)

# Bare 10-character code such as SHK1ABC123 (must mix letters and digits)
_CODE_RE = re.compile(r"\b(?=[A-Z0-9]*[A-Z])(?=[A-Z0-9]*\d)(?P<code>[A-Z0-9]{10})\b")

_PHONE_RE = re.compile(r"\b(?P<phone>254\d{9})\b")

_MASKED_ACCOUNT_RE = re.compile(r"(?<![\d*])(?P<account>\d{3}\*+\d{3})(?![\d*])")

# "Acc XXX123", "A/C ****5678", "account 0123456789"
_ACCOUNT_RE = re.compile(
    r"\b(?:A/C|Acc(?:ount)?\.?)\s+(?:no\.?\s*)?(?P<account>[X*\d]*\d)(?![\w*])",
    re.IGNORECASE,
)

_DATE_TIME_RE = re.compile(
    r"\b(?P<date>\d{1,2}[/-]\d{1,2}[/-](?:\d{4}|\d{2}))\b"
    r"(?:\s+at\s+(?P<time>\d{1,2}:\d{2}(?:\s*[AP]M)?))?",
    re.IGNORECASE,
)

# Compact bank dates such as 23Dec24
_COMPACT_DATE_RE = re.compile(r"\b(?P<date>\d{1,2}[A-Za-z]{3}\d{2}(?:\d{2})?)\b")


class MoneyMatch(NamedTuple):
    """A currency amount and the span it occupied in the message."""

    value: Decimal
    start: int
    end: int


class References(NamedTuple):
    """Named reference codes found in a message."""

    mpesa: Optional[str] = None
    bank: Optional[str] = None
    generic: Optional[str] = None


def normalize_message(message: str) -> str:
    """Trim and collapse all whitespace runs to single spaces."""
    return _WHITESPACE_RE.sub(" ", message.strip())


def parse_decimal(text: str) -> Decimal:
    """
    Convert a matched numeric literal such as ``15,234.50`` to Decimal.

    Raises:
        ExtractionError: If the literal is not a number
    """
    cleaned = text.replace(",", "")
    try:
        value = Decimal(cleaned)
    except InvalidOperation as e:
        raise ExtractionError(f"Invalid amount literal: {text!r}") from e
    if not value.is_finite():
        raise ExtractionError(f"Invalid amount literal: {text!r}")
    return value


def find_money(text: str) -> list[MoneyMatch]:
    """Return every currency amount, left to right."""
    return [
        MoneyMatch(parse_decimal(m.group("value")), m.start(), m.end())
        for m in _MONEY_RE.finditer(text)
    ]


def find_amounts(text: str) -> list[Decimal]:
    """Return the values of every currency amount, left to right."""
    return [match.value for match in find_money(text)]


def extract_fee(text: str) -> Optional[Decimal]:
    """Return the fee introduced by a cost/fee/charge keyword."""
    match = _FEE_RE.search(text)
    return parse_decimal(match.group("value")) if match else None


def extract_balance(text: str) -> Optional[Decimal]:
    """Return the keyword-anchored balance ("balance is", "Bal", "Balance")."""
    match = _BALANCE_RE.search(text)
    return parse_decimal(match.group("value")) if match else None


def extract_references(text: str) -> References:
    """Return the MPESA REF, BANK REF and plain Ref codes, when present."""
    mpesa = _MPESA_REF_RE.search(text)
    bank = _BANK_REF_RE.search(text)
    generic = _REF_RE.search(text)
    return References(
        mpesa=mpesa.group("ref") if mpesa else None,
        bank=bank.group("ref") if bank else None,
        generic=generic.group("ref") if generic else None,
    )


def extract_transaction_code(text: str) -> Optional[str]:
    """
    Return the primary transaction code.

    Named references win over the bare 10-character token, in the order
    MPESA REF, BANK REF, Ref.
    """
    refs = extract_references(text)
    named = refs.mpesa or refs.bank or refs.generic
    if named:
        return named
    match = _CODE_RE.search(text)
    return match.group("code") if match else None


def extract_phone(text: str) -> Optional[str]:
    """Return the first 12-digit phone number starting with 254."""
    match = _PHONE_RE.search(text)
    return match.group("phone") if match else None


def extract_masked_account(text: str) -> Optional[str]:
    """Return a masked account number such as ``992****013``."""
    match = _MASKED_ACCOUNT_RE.search(text)
    return match.group("account") if match else None


def extract_account_number(text: str) -> Optional[str]:
    """Return a masked account, else an account introduced by A/C, Acc or account."""
    masked = extract_masked_account(text)
    if masked:
        return masked
    match = _ACCOUNT_RE.search(text)
    return match.group("account") if match else None


def extract_date_time(text: str) -> tuple[Optional[str], Optional[str]]:
    """
    Return the (date, time) strings as written in the message.

    Numeric dates (DD/MM/YY[YY]) are preferred; compact dates like ``23Dec24``
    are used when none is present. Time is only read after "at".
    """
    match = _DATE_TIME_RE.search(text)
    if match:
        time = match.group("time")
        return match.group("date"), time.strip() if time else None

    compact = _COMPACT_DATE_RE.search(text)
    if compact:
        return compact.group("date"), None
    return None, None
