from decimal import Decimal

import pytest

from kenya_txn_parser import parse_combined
from kenya_txn_parser.correlator import is_same_transfer
from kenya_txn_parser.models import BankTransferType, TransactionType
from kenya_txn_parser.samples import (
    NCBA_DEBIT_NOTIFICATION,
    NCBA_TILL_TRANSFER,
    SAMPLE_MESSAGES,
)


@pytest.fixture
def correlator(classifier):
    return classifier.correlator


def test_combined_bank_to_till(correlator):
    blob = SAMPLE_MESSAGES["ncba_till_combined"]
    result = correlator.parse_combined(blob)

    assert result.success
    assert result.transaction_type is TransactionType.BANK_TRANSFER
    assert result.bank_transfer_type is BankTransferType.BANK_TO_TILL
    assert result.amount == Decimal("8247")
    assert result.recipient_number == "65575"
    assert result.recipient == "Naivas Kitengela"
    assert result.bank_reference == "FTX25320XAREM"
    assert result.mpesa_reference == "TKGSG4268Q"
    assert result.requires_manual_fee
    assert result.transaction_cost is None
    assert result.raw_message == blob


def test_debit_notification_backfills_missing_fields(correlator):
    result = correlator.parse_combined(SAMPLE_MESSAGES["ncba_till_combined"])

    assert result.date == "16/11/25"
    assert result.time == "02:34 PM"
    assert result.account_number == "992****013"


def test_order_of_messages_does_not_matter(correlator):
    forward = correlator.parse_combined(f"{NCBA_DEBIT_NOTIFICATION}\n\n{NCBA_TILL_TRANSFER}")
    reverse = correlator.parse_combined(f"{NCBA_TILL_TRANSFER}\n{NCBA_DEBIT_NOTIFICATION}")

    assert forward.amount == reverse.amount
    assert forward.date == reverse.date
    assert forward.mpesa_reference == reverse.mpesa_reference


def test_confirmation_fields_take_precedence(correlator):
    confirmation = (
        "Your Mpesa Till transfer of KES 8,247.00 to 65575 Naivas Kitengela on 17/11/25 "
        "at 09:00 AM was successful. BANK REF. FTX25320XAREM MPESA REF. TKGSG4268Q"
    )
    result = correlator.parse_combined(f"{NCBA_DEBIT_NOTIFICATION}\n\n{confirmation}")

    assert result.date == "17/11/25"
    assert result.time == "09:00 AM"
    assert result.account_number == "992****013"


def test_debit_notification_alone(correlator):
    result = correlator.parse_combined(NCBA_DEBIT_NOTIFICATION)

    assert result.success
    assert result.transaction_type is TransactionType.BANK_DEBIT
    assert result.bank_reference == "FTX25320XAREM"


def test_unrelated_debit_is_not_merged(correlator):
    other_debit = (
        "Your account 992****013 has been debited with KES 100.00 on 01/11/25 "
        "at 08:00 AM. Ref: FTX99999ZZZZZ"
    )
    result = correlator.parse_combined(f"{other_debit}\n\n{NCBA_TILL_TRANSFER}")

    assert result.bank_transfer_type is BankTransferType.BANK_TO_TILL
    assert result.date is None
    assert result.account_number is None


def test_debit_without_reference_and_different_amount_is_not_merged(correlator):
    debit = (
        "Your account 992****013 has been debited with KES 8,282.00 on 16/11/25 at 02:34 PM."
    )
    confirmation = "Your Mpesa Till transfer of KES 8,247.00 to 65575 Naivas Kitengela was successful."
    result = correlator.parse_combined(f"{debit}\n\n{confirmation}")

    assert result.bank_transfer_type is BankTransferType.BANK_TO_TILL
    assert result.amount == Decimal("8247.00")
    assert result.date is None
    assert result.account_number is None


def test_debit_without_reference_and_same_amount_is_merged(correlator):
    debit = (
        "Your account 992****013 has been debited with KES 8,247.00 on 16/11/25 at 02:34 PM."
    )
    confirmation = "Your Mpesa Till transfer of KES 8,247.00 to 65575 Naivas Kitengela was successful."
    result = correlator.parse_combined(f"{debit}\n\n{confirmation}")

    assert result.date == "16/11/25"
    assert result.account_number == "992****013"


def test_line_wrapped_confirmation_keeps_its_references(correlator):
    message = (
        "Dear Customer, your Mpesa Till transfer of KES 8,247.00 to 65575 Naivas Kitengela\n"
        "was successful. BANK REF. FTX25320XAREM MPESA REF. TKGSG4268Q. NCBA, Go for it!"
    )
    result = correlator.parse_combined(message)

    assert result.bank_transfer_type is BankTransferType.BANK_TO_TILL
    assert result.bank_reference == "FTX25320XAREM"
    assert result.mpesa_reference == "TKGSG4268Q"


def test_merge_pair_needs_both_fragments(correlator):
    assert correlator.merge_pair(NCBA_TILL_TRANSFER) is None
    assert correlator.merge_pair(SAMPLE_MESSAGES["ncba_till_combined"]) is not None


def test_no_bank_fragments_fails(correlator):
    blob = f"{SAMPLE_MESSAGES['mpesa_till']}\n\n{SAMPLE_MESSAGES['mpesa_send']}"
    result = correlator.parse_combined(blob)

    assert not result.success
    assert result.raw_message == blob


def test_split_segments_drops_short_lines(correlator):
    blob = "ok\n\n" + NCBA_DEBIT_NOTIFICATION + "\n\n   \n\nthanks!\n\n" + NCBA_TILL_TRANSFER
    assert correlator.split_segments(blob) == [NCBA_DEBIT_NOTIFICATION, NCBA_TILL_TRANSFER]


def test_split_segments_on_single_newlines(correlator):
    blob = f"{NCBA_DEBIT_NOTIFICATION}\n{NCBA_TILL_TRANSFER}"
    assert correlator.split_segments(blob) == [NCBA_DEBIT_NOTIFICATION, NCBA_TILL_TRANSFER]


def test_failing_segment_does_not_abort_siblings(classifier, monkeypatch):
    original = classifier.classify

    def flaky(segment, correlate=True):
        if segment == "this segment explodes":
            raise RuntimeError("boom")
        return original(segment, correlate=correlate)

    monkeypatch.setattr(classifier, "classify", flaky)
    blob = f"this segment explodes\n\n{NCBA_TILL_TRANSFER}"

    result = classifier.correlator.parse_combined(blob)
    assert result.success
    assert result.bank_transfer_type is BankTransferType.BANK_TO_TILL


def test_is_same_transfer_prefers_references(classifier):
    till = classifier.classify(NCBA_TILL_TRANSFER)
    debit = classifier.classify(NCBA_DEBIT_NOTIFICATION)
    assert is_same_transfer(till, debit)


def test_module_level_parse_combined():
    result = parse_combined(SAMPLE_MESSAGES["ncba_till_combined"])
    assert result.bank_transfer_type is BankTransferType.BANK_TO_TILL
    assert not parse_combined(None).success
