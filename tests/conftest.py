"""Shared fixtures."""

import pytest

from tests.fixtures import count_dialog, counter, vending_machine


@pytest.fixture
def counter_machine():
    return counter()


@pytest.fixture
def vending():
    return vending_machine()


@pytest.fixture
def dialog():
    return count_dialog()
