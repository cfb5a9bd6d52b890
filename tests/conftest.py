import pytest

from kenya_txn_parser import MessageClassifier


@pytest.fixture
def classifier():
    return MessageClassifier()
