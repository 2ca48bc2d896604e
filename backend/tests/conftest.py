import uuid

import pytest

from fakes import Catalog


@pytest.fixture
def shop_a():
    return uuid.uuid4()


@pytest.fixture
def shop_b():
    return uuid.uuid4()


@pytest.fixture
def catalog():
    return Catalog()
