"""Field extractors shared by every message family."""

from .fields import (
    CURRENCY_PATTERN,
    AMOUNT_PATTERN,
    NAME_PATTERN,
    FULL_STOP_PATTERN,
    MoneyMatch,
    References,
    normalize_message,
    parse_decimal,
    find_money,
    find_amounts,
    extract_fee,
    extract_balance,
    extract_references,
    extract_transaction_code,
    extract_phone,
    extract_masked_account,
    extract_account_number,
    extract_date_time,
)

__all__ = [
    "CURRENCY_PATTERN",
    "AMOUNT_PATTERN",
    "NAME_PATTERN",
    "FULL_STOP_PATTERN",
    "MoneyMatch",
    "References",
    "normalize_message",
    "parse_decimal",
    "find_money",
    "find_amounts",
    "extract_fee",
    "extract_balance",
    "extract_references",
    "extract_transaction_code",
    "extract_phone",
    "extract_masked_account",
    "extract_account_number",
    "extract_date_time",
]
