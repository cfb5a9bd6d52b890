from decimal import Decimal

import pytest

from kenya_txn_parser import (
    MessageClassifier,
    ParserConfig,
    parse_message,
)
from kenya_txn_parser.matchers import MessageMatcher
from kenya_txn_parser.models import BankTransferType, ParsedTransaction, Provider, TransactionType
from kenya_txn_parser.samples import SAMPLE_MESSAGES


def test_mpesa_till_scenario(classifier):
    result = classifier.classify(SAMPLE_MESSAGES["mpesa_till"])

    assert result.success
    assert result.provider is Provider.MPESA
    assert result.transaction_type is TransactionType.PAYMENT
    assert result.amount == Decimal("500.00")
    assert result.transaction_cost == Decimal("0.00")
    assert result.recipient == "JAVA HOUSE - SARIT CENTRE"
    assert result.new_balance == Decimal("15234.50")


def test_mpesa_send_scenario(classifier):
    result = classifier.classify(SAMPLE_MESSAGES["mpesa_send"])

    assert result.success
    assert result.amount == Decimal("1000.00")
    assert result.transaction_cost == Decimal("7.00")
    assert result.recipient_number == "254712345678"


def test_equity_credit_scenario(classifier):
    result = classifier.classify(SAMPLE_MESSAGES["equity"])

    assert result.success
    assert result.provider is Provider.BANK
    assert result.transaction_type is TransactionType.CREDIT
    assert result.amount == Decimal("25000.00")
    assert result.balance == Decimal("67890.00")


def test_unrecognized_sentence(classifier):
    result = classifier.classify("The weather in Nairobi is lovely this afternoon.")

    assert not result.success
    assert result.amount is None
    assert result.transaction_type is None
    assert result.error is None


@pytest.mark.parametrize(
    "sample, provider, route",
    [
        ("mpesa_till", Provider.MPESA, "mpesa"),
        ("airtel_money_send", Provider.AIRTEL_MONEY, "airtel_money"),
        ("kcb", Provider.BANK, "bank"),
        ("ncba_till_transfer", Provider.BANK, "bank_transfer"),
        ("ncba_mpesa_transfer", Provider.BANK, "bank_transfer"),
        ("ncba_debit_notification", Provider.BANK, "bank_transfer"),
    ],
)
def test_routing(classifier, sample, provider, route):
    message = SAMPLE_MESSAGES[sample]
    assert classifier.select_route(message).name == route
    assert classifier.classify(message).provider is provider


def test_bank_transfer_signals_take_priority_over_mpesa_brand(classifier):
    # Mentions MPESA but is a bank-originated transfer
    result = classifier.classify(SAMPLE_MESSAGES["ncba_mpesa_transfer"])

    assert result.provider is Provider.BANK
    assert result.transaction_type is TransactionType.BANK_TRANSFER
    assert result.bank_transfer_type is BankTransferType.BANK_TO_MPESA


def test_unbranded_message_falls_back_to_mpesa_grammar(classifier):
    result = classifier.classify(
        "QWE1RTY234 Confirmed. Ksh250.00 paid to CORNER SHOP. on 1/2/25 at 9:00 AM."
    )

    assert result.success
    assert result.provider is Provider.UNKNOWN
    assert result.transaction_type is TransactionType.PAYMENT
    assert result.transaction_cost == Decimal("0")


def test_combined_blob_through_single_entry_point(classifier):
    result = classifier.classify(SAMPLE_MESSAGES["ncba_till_combined"])

    assert result.bank_transfer_type is BankTransferType.BANK_TO_TILL
    assert result.date == "16/11/25"
    assert result.account_number == "992****013"


def test_line_wrapped_confirmation_is_parsed_whole(classifier):
    message = (
        "Dear Customer, your Mpesa Till transfer of KES 8,247.00 to 65575 Naivas Kitengela\n"
        "was successful. BANK REF. FTX25320XAREM MPESA REF. TKGSG4268Q. NCBA, Go for it!"
    )
    result = classifier.classify(message)

    assert result.bank_transfer_type is BankTransferType.BANK_TO_TILL
    assert result.recipient == "Naivas Kitengela"
    assert result.bank_reference == "FTX25320XAREM"
    assert result.mpesa_reference == "TKGSG4268Q"
    assert result.raw_message == message


@pytest.mark.parametrize("name", sorted(SAMPLE_MESSAGES))
def test_parsing_is_idempotent(classifier, name):
    message = SAMPLE_MESSAGES[name]
    assert classifier.classify(message) == classifier.classify(message)


@pytest.mark.parametrize(
    "message",
    list(SAMPLE_MESSAGES.values())
    + [
        "",
        "   ",
        "hello",
        "Ksh",
        "paid to",
        "received Ksh",
        "account has been debited with",
        "Till transfer of KES to 123",
    ],
)
def test_amount_gates_success(classifier, message):
    result = classifier.classify(message)
    assert result.success == (result.amount is not None)
    if result.success:
        assert result.transaction_type is not None
    else:
        assert result.transaction_type is None


def test_bank_transfers_always_require_manual_fee(classifier):
    for message in SAMPLE_MESSAGES.values():
        result = classifier.classify(message)
        if result.transaction_type is TransactionType.BANK_TRANSFER:
            assert result.requires_manual_fee
            assert result.transaction_cost is None
            assert result.bank_transfer_type is not None


def test_mpesa_received_fee_is_always_zero(classifier):
    result = classifier.classify(SAMPLE_MESSAGES["mpesa_received"])
    assert result.transaction_type is TransactionType.RECEIVED
    assert result.transaction_cost == Decimal("0")


def test_balance_and_fee_are_not_swapped(classifier):
    result = classifier.classify(SAMPLE_MESSAGES["mpesa_till"])
    assert result.transaction_cost == Decimal("0")
    assert result.new_balance == Decimal("15234.50")


def test_raw_message_is_preserved(classifier):
    message = "  " + SAMPLE_MESSAGES["mpesa_send"] + "\n"
    assert classifier.classify(message).raw_message == message


def test_none_and_non_string_input(classifier):
    assert not classifier.classify(None).success
    assert not classifier.classify(12345).success


class ExplodingMatcher(MessageMatcher):
    name = "exploding"
    provider = Provider.MPESA

    def applies(self, text):
        return True

    def extract(self, text, raw_message):
        raise RuntimeError("boom")


def test_unexpected_failure_sets_error(classifier):
    route = classifier.routes[1]
    classifier.routes[1] = type(route)(
        route.name, route.provider, route.keywords, (ExplodingMatcher(),)
    )

    result = classifier.classify(SAMPLE_MESSAGES["mpesa_till"])

    assert not result.success
    assert result.error == "boom"
    assert result.raw_message == SAMPLE_MESSAGES["mpesa_till"]
    assert result.provider is Provider.MPESA


def test_custom_keywords_route_new_bank_brand():
    config = ParserConfig()
    config.keywords.bank.append("faulu")
    classifier = MessageClassifier(config)

    message = "FAULU: KES 2,000.00 credited from SACCO DIVIDEND on 02/01/25."
    result = classifier.classify(message)

    assert classifier.select_route(message).name == "bank"
    assert result.transaction_type is TransactionType.CREDIT
    assert result.recipient == "SACCO DIVIDEND"


def test_module_level_parse_message():
    result = parse_message(SAMPLE_MESSAGES["mpesa_withdraw"])
    assert isinstance(result, ParsedTransaction)
    assert result.transaction_type is TransactionType.WITHDRAW
