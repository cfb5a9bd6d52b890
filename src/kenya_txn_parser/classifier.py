"""
Message dispatcher.

Routes a raw message to a family of provider matchers using an ordered
table of keyword routes, then labels the winning record with the route's
provider. The first route whose keywords appear in the message wins, and
within a route the first matcher whose grammar fires does the extraction.
"""

from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Optional
import logging

from .config import ParserConfig
from .correlator import MessageCorrelator
from .extractors import normalize_message
from .matchers import (
    AIRTEL_MATCHERS,
    BANK_TRANSFER_MATCHERS,
    LEGACY_BANK_MATCHERS,
    MPESA_MATCHERS,
    MessageMatcher,
)
from .models.transaction import ParsedTransaction, Provider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Route:
    """A keyword predicate paired with the matchers it selects."""

    name: str
    provider: Provider
    keywords: tuple[str, ...]
    matchers: tuple[MessageMatcher, ...]

    # Try the multi-message correlator before the matchers
    correlate: bool = False

    # Matches every message regardless of keywords
    catch_all: bool = False

    def applies(self, lowered: str) -> bool:
        """Check the route's keywords against a lower-cased message."""
        return self.catch_all or any(keyword in lowered for keyword in self.keywords)


class MessageClassifier:
    """
    Classifies transaction messages and extracts a ParsedTransaction.

    ``classify`` never raises: unrecognized messages produce an unsuccessful
    record and unexpected failures produce one with ``error`` set.
    """

    def __init__(self, config: Optional[ParserConfig] = None):
        """
        Initialize the classifier.

        Args:
            config: Parser configuration (defaults when omitted)
        """
        self.config = config or ParserConfig()
        self.routes = self._build_routes()
        self.correlator = MessageCorrelator(
            self, min_segment_length=self.config.correlator.min_segment_length
        )

    def _build_routes(self) -> list[Route]:
        """
        Build the routing table in priority order.

        Returns:
            Ordered list of routes, ending with the catch-all fallback
        """
        keywords = self.config.keywords
        return [
            Route(
                "bank_transfer",
                Provider.BANK,
                _lowered(keywords.bank_transfer_signals),
                BANK_TRANSFER_MATCHERS,
                correlate=True,
            ),
            Route("mpesa", Provider.MPESA, _lowered(keywords.mobile_money), MPESA_MATCHERS),
            Route(
                "airtel_money",
                Provider.AIRTEL_MONEY,
                _lowered(keywords.airtel_money),
                AIRTEL_MATCHERS,
            ),
            Route("bank", Provider.BANK, _lowered(keywords.bank), LEGACY_BANK_MATCHERS),
            # Unlabelled messages still get a best-effort M-Pesa parse
            Route("fallback", Provider.UNKNOWN, (), MPESA_MATCHERS, catch_all=True),
        ]

    def select_route(self, message: str) -> Route:
        """Return the first route whose keywords appear in ``message``."""
        lowered = message.lower()
        for route in self.routes:
            if route.applies(lowered):
                return route
        return self.routes[-1]

    def classify(self, message: Any, correlate: bool = True) -> ParsedTransaction:
        """
        Parse a single message (or a bank debit/confirmation pair).

        Args:
            message: Raw message text
            correlate: Allow multi-message correlation for bank transfers

        Returns:
            Parsed transaction record
        """
        if message is None:
            return ParsedTransaction.failed("")
        raw_message = message if isinstance(message, str) else str(message)

        try:
            return self._classify(raw_message, correlate)
        except Exception as e:
            logger.warning(f"Unexpected error classifying message: {e}")
            return ParsedTransaction.failed(raw_message, error=str(e))

    def _classify(self, raw_message: str, correlate: bool) -> ParsedTransaction:
        text = normalize_message(raw_message)
        if not text:
            return ParsedTransaction.failed(raw_message)

        route = self.select_route(text)
        logger.debug(f"Routing message via {route.name}")

        if (
            correlate
            and route.correlate
            and len(self.correlator.split_segments(raw_message)) > 1
        ):
            merged = self.correlator.merge_pair(raw_message)
            if merged is not None:
                return merged
            logger.debug("No debit and confirmation pair, parsing as a single message")

        for matcher in route.matchers:
            if matcher.applies(text):
                logger.debug(f"Using {matcher.name} matcher")
                return matcher.parse(text, raw_message).with_provider(route.provider)

        return ParsedTransaction.failed(raw_message, route.provider)


def _lowered(keywords: list[str]) -> tuple[str, ...]:
    return tuple(keyword.lower() for keyword in keywords if keyword)


@lru_cache(maxsize=1)
def _default_classifier() -> MessageClassifier:
    return MessageClassifier()


def parse_message(message: Any) -> ParsedTransaction:
    """Parse one message with the default configuration."""
    return _default_classifier().classify(message)


def parse_combined(blob: Any) -> ParsedTransaction:
    """Correlate a pasted bank debit notification and transfer confirmation."""
    return _default_classifier().correlator.parse_combined(blob)
