"""Shared fixtures for calculator tests."""
from __future__ import annotations

import pytest

from calculator import Calc
from keypad import Keypad
from models import KeypadConfig


@pytest.fixture
def empty() -> Calc:
    return Calc()


@pytest.fixture
def calc() -> Calc:
    """Two operands: 3.14 on top, 1.0 below it."""
    return Calc(1.0, 3.14)


@pytest.fixture
def keypad() -> Keypad:
    """A keypad that starts with an empty stack."""
    return Keypad(KeypadConfig(initial_operands=[]))


@pytest.fixture
def seeded_keypad() -> Keypad:
    """A keypad with the default three zeros."""
    return Keypad()
