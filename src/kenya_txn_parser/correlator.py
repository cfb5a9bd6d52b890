"""
Multi-message correlator.

Banks send two SMS for one M-Pesa transfer: a debit notification (account,
timestamp, bank reference) and a transfer confirmation (recipient, M-Pesa
reference). When both are pasted together they are parsed separately and
merged into one record.
"""

from dataclasses import replace
from typing import TYPE_CHECKING, Any, Optional
import logging
import re

from .models.transaction import ParsedTransaction, TransactionType

if TYPE_CHECKING:
    from .classifier import MessageClassifier

logger = logging.getLogger(__name__)

_BLANK_LINE_RE = re.compile(r"\n\s*\n")


class MessageCorrelator:
    """Splits a pasted blob into messages and merges related fragments."""

    def __init__(self, classifier: "MessageClassifier", min_segment_length: int = 10):
        """
        Initialize the correlator.

        Args:
            classifier: Classifier used to parse each segment
            min_segment_length: Segments must be longer than this after trimming
        """
        self.classifier = classifier
        self.min_segment_length = min_segment_length

    def split_segments(self, blob: str) -> list[str]:
        """
        Split a blob on blank lines, or on single newlines when there are none.

        Args:
            blob: Pasted text

        Returns:
            Trimmed segments longer than the minimum length
        """
        chunks = _BLANK_LINE_RE.split(blob)
        if len(chunks) < 2:
            chunks = blob.splitlines()

        segments = [chunk.strip() for chunk in chunks]
        return [s for s in segments if len(s) > self.min_segment_length]

    def parse_combined(self, blob: Any) -> ParsedTransaction:
        """
        Parse each segment and merge a debit notification with a transfer confirmation.

        The confirmation's fields win; the debit notification only fills in a
        missing date, time, account number or bank reference. When only one
        fragment is found the blob is parsed whole, since it may be a single
        message wrapped over several lines. An unsuccessful result means no
        bank fragment was found.

        Args:
            blob: Text holding one or more messages

        Returns:
            Merged transaction record
        """
        if blob is None:
            return ParsedTransaction.failed("")
        raw_message = blob if isinstance(blob, str) else str(blob)

        debit, confirmation = self._collect(raw_message)

        if debit is not None and confirmation is not None:
            return self._merge(confirmation, debit, raw_message)
        fragment = confirmation or debit
        if fragment is None:
            return ParsedTransaction.failed(raw_message)

        whole = self.classifier.classify(raw_message, correlate=False)
        if whole.success:
            return whole
        return replace(fragment, raw_message=raw_message)

    def merge_pair(self, blob: str) -> Optional[ParsedTransaction]:
        """
        Merge a blob only when it holds both a debit notification and a transfer confirmation.

        A single message wrapped over several lines yields None, so the caller
        parses it whole instead of trusting a one-line fragment.

        Args:
            blob: Text holding one or more messages

        Returns:
            Merged transaction record, or None when no pair was found
        """
        debit, confirmation = self._collect(blob)
        if debit is None or confirmation is None:
            return None
        return self._merge(confirmation, debit, blob)

    def _collect(
        self, blob: str
    ) -> tuple[Optional[ParsedTransaction], Optional[ParsedTransaction]]:
        """Return the first debit notification and first transfer confirmation in the blob."""
        segments = self.split_segments(blob)
        logger.debug(f"Correlating {len(segments)} message segments")

        debit: Optional[ParsedTransaction] = None
        confirmation: Optional[ParsedTransaction] = None

        for segment in segments:
            try:
                result = self.classifier.classify(segment, correlate=False)
            except Exception as e:
                logger.warning(f"Skipping segment that failed to parse: {e}")
                continue

            if not result.success:
                continue
            if result.transaction_type is TransactionType.BANK_DEBIT:
                debit = debit or result
            elif result.bank_transfer_type is not None:
                confirmation = confirmation or result

        return debit, confirmation

    def _merge(
        self,
        confirmation: ParsedTransaction,
        debit: ParsedTransaction,
        raw_message: str,
    ) -> ParsedTransaction:
        if not is_same_transfer(confirmation, debit):
            logger.info("Debit notification does not match the transfer, not merging")
            return replace(confirmation, raw_message=raw_message)

        bank_reference = confirmation.bank_reference or debit.bank_reference
        return replace(
            confirmation,
            raw_message=raw_message,
            date=confirmation.date or debit.date,
            time=confirmation.time or debit.time,
            account_number=confirmation.account_number or debit.account_number,
            bank_reference=bank_reference,
            transaction_code=confirmation.transaction_code or bank_reference,
        )


def is_same_transfer(confirmation: ParsedTransaction, debit: ParsedTransaction) -> bool:
    """
    Check whether a debit notification belongs to a transfer confirmation.

    Bank references decide when both fragments carry one; otherwise the
    amounts must agree.
    """
    if confirmation.bank_reference and debit.bank_reference:
        return confirmation.bank_reference == debit.bank_reference
    return confirmation.amount == debit.amount
