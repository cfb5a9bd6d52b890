"""
Base class for provider matchers.

A matcher owns one message family's grammar. ``applies`` is the trigger the
dispatcher checks; ``extract`` builds the record. ``parse`` is the boundary
that turns unexpected exceptions into a failed record.
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Optional
import logging
import re

from ..extractors import extract_balance, extract_fee
from ..models.transaction import ParsedTransaction, Provider

logger = logging.getLogger(__name__)


class MessageMatcher(ABC):
    """Abstract base class for message family matchers."""

    #: Short identifier used in logs
    name: str = "matcher"

    #: Provider label for records this matcher produces
    provider: Provider = Provider.UNKNOWN

    @abstractmethod
    def applies(self, text: str) -> bool:
        """
        Check whether this matcher's grammar fires for the message.

        Args:
            text: Normalized message

        Returns:
            True if the matcher should handle the message
        """
        pass

    @abstractmethod
    def extract(self, text: str, raw_message: str) -> ParsedTransaction:
        """
        Extract a transaction record from a message this matcher applies to.

        Args:
            text: Normalized message
            raw_message: Original input, stored on the record

        Returns:
            Parsed transaction record
        """
        pass

    def parse(self, text: str, raw_message: str) -> ParsedTransaction:
        """Run ``extract`` and collapse unsuccessful or failed extraction to an empty record."""
        try:
            result = self.extract(text, raw_message)
        except Exception as e:
            logger.warning(f"{self.name} matcher failed: {e}")
            return ParsedTransaction.failed(raw_message, self.provider, error=str(e))

        if not result.success:
            logger.debug(f"{self.name} matcher found no amount")
            return ParsedTransaction.failed(raw_message, result.provider)
        return result

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


def resolve_fee_and_balance(
    text: str, amounts: list[Decimal]
) -> tuple[Optional[Decimal], Optional[Decimal]]:
    """
    Disambiguate the fee and balance among the message's currency amounts.

    The balance comes from its keyword when present, otherwise the last of
    three or more amounts. A keyword-anchored fee is taken as-is; otherwise the
    second amount is the fee unless it equals the balance.

    Args:
        text: Normalized message
        amounts: Currency amounts in message order

    Returns:
        Tuple of (fee, balance), either of which may be None
    """
    balance = extract_balance(text)
    if balance is None and len(amounts) >= 3:
        balance = amounts[-1]

    fee = extract_fee(text)
    if fee is None and len(amounts) >= 2 and amounts[1] != balance:
        fee = amounts[1]

    return fee, balance


def search_group(pattern: re.Pattern, text: str, group: str) -> Optional[str]:
    """Return a stripped named group from the first match, or None."""
    match = pattern.search(text)
    if not match or match.group(group) is None:
        return None
    value = match.group(group).strip()
    return value or None
