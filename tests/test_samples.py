import pytest

from kenya_txn_parser.samples import SAMPLE_MESSAGES, get_sample


@pytest.mark.parametrize("name", sorted(SAMPLE_MESSAGES))
def test_every_sample_parses(classifier, name):
    result = classifier.classify(SAMPLE_MESSAGES[name])
    assert result.success, name
    assert result.transaction_code or result.reference, name


def test_get_sample_unknown_name():
    with pytest.raises(KeyError):
        get_sample("no_such_sample")


def test_get_sample():
    assert get_sample("mpesa_till").startswith("SHK1ABC123")
