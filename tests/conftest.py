import pytest

from aggregator import aggregate
from data_loader import load
from tests.helpers import ROWS, csv_source


@pytest.fixture
def records():
    return load(csv_source(*ROWS))


@pytest.fixture
def story(records):
    return aggregate(records)
