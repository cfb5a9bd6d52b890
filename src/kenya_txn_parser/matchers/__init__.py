"""Provider matchers, one per message family."""

from .base import MessageMatcher, resolve_fee_and_balance
from .mobile_money import (
    MpesaPaymentMatcher,
    MpesaSendMatcher,
    MpesaReceivedMatcher,
    MpesaWithdrawMatcher,
    AirtelMoneyMatcher,
    MPESA_MATCHERS,
    AIRTEL_MATCHERS,
)
from .bank import (
    BankToTillMatcher,
    BankToMobileMatcher,
    BankToPaybillMatcher,
    BankDebitNotificationMatcher,
    LegacyBankMatcher,
    BANK_TRANSFER_MATCHERS,
    LEGACY_BANK_MATCHERS,
)

__all__ = [
    "MessageMatcher",
    "resolve_fee_and_balance",
    "MpesaPaymentMatcher",
    "MpesaSendMatcher",
    "MpesaReceivedMatcher",
    "MpesaWithdrawMatcher",
    "AirtelMoneyMatcher",
    "MPESA_MATCHERS",
    "AIRTEL_MATCHERS",
    "BankToTillMatcher",
    "BankToMobileMatcher",
    "BankToPaybillMatcher",
    "BankDebitNotificationMatcher",
    "LegacyBankMatcher",
    "BANK_TRANSFER_MATCHERS",
    "LEGACY_BANK_MATCHERS",
]
