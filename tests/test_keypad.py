"""Tests for the keypad session layer."""
from __future__ import annotations

import logging
import math

import pytest

from keypad import Keypad
from models import KeypadConfig
from operators import ADD, SUB, DivZeroMode


def type_number(keypad: Keypad, text: str) -> None:
    for ch in text:
        if ch == ".":
            keypad.point()
        else:
            keypad.digit(ch)


# ===================================================================
# TEXT ENTRY
# ===================================================================

class TestTextEntry:

    def test_digits_accumulate(self, keypad):
        type_number(keypad, "12")
        assert keypad.operand_text == "12"

    def test_point_appends(self, keypad):
        type_number(keypad, "3.14")
        assert keypad.operand_text == "3.14"

    def test_second_point_truncates(self, keypad):
        type_number(keypad, "3.14")
        keypad.point()
        assert keypad.operand_text == "3."

    def test_clear(self, keypad):
        type_number(keypad, "42")
        keypad.clear()
        assert keypad.operand_text == ""

    @pytest.mark.parametrize("bad", ["a", "12", "", "-"])
    def test_digit_rejects_non_digits(self, keypad, bad):
        with pytest.raises(ValueError):
            keypad.digit(bad)


# ===================================================================
# ENTER
# ===================================================================

class TestEnter:

    def test_pushes_typed_operand(self, keypad):
        type_number(keypad, "2.5")
        assert keypad.enter()
        assert keypad.view().operands == [2.5]
        assert keypad.operand_text == ""

    def test_blank_duplicates_top(self, keypad):
        type_number(keypad, "7")
        keypad.enter()
        assert keypad.enter()
        assert keypad.view().operands == [7.0, 7.0]

    def test_blank_on_empty_stack_rejected(self, keypad):
        assert not keypad.enter()
        view = keypad.view()
        assert view.operand_count == 0
        assert "dup" in view.error

    def test_lone_point_rejected(self, keypad):
        keypad.point()
        assert not keypad.enter()
        assert keypad.operand_text == "."
        assert keypad.view().operand_count == 0
        assert "Not a number" in keypad.view().error


# ===================================================================
# OPERATORS
# ===================================================================

class TestOperators:

    def test_enter_then_operator(self, keypad):
        type_number(keypad, "1")
        keypad.enter()
        type_number(keypad, "2")
        keypad.enter()
        assert keypad.apply("+")
        assert keypad.view().operands == [3.0]

    def test_operator_pushes_pending_operand(self, keypad):
        type_number(keypad, "1")
        keypad.enter()
        type_number(keypad, "3")
        assert keypad.apply(SUB)
        assert keypad.view().operands == [-2.0]
        assert keypad.operand_text == ""

    def test_failed_binary_takes_back_pending_operand(self, keypad):
        type_number(keypad, "5")
        assert not keypad.apply(ADD)
        view = keypad.view()
        assert view.operand_count == 0
        assert view.operand_text == "5"
        assert view.error is not None

    def test_failed_binary_without_text(self, keypad):
        type_number(keypad, "5")
        keypad.enter()
        assert not keypad.apply("*")
        assert keypad.view().operands == [5.0]

    def test_unary_applies_to_top(self, keypad):
        type_number(keypad, "9")
        keypad.enter()
        assert keypad.apply("sqrt")
        assert keypad.view().operands == [3.0]

    def test_unary_on_empty_stack_rejected(self, keypad):
        assert not keypad.apply("neg")
        assert keypad.view().operand_count == 0

    def test_sqrt_of_negative_is_nan(self, seeded_keypad):
        type_number(seeded_keypad, "4")
        seeded_keypad.apply("-")
        assert seeded_keypad.apply("sqrt")
        assert math.isnan(seeded_keypad.view().top)

    def test_divide_by_zero_ieee(self, seeded_keypad):
        type_number(seeded_keypad, "1")
        seeded_keypad.enter()
        type_number(seeded_keypad, "0")
        assert seeded_keypad.apply("/")
        assert seeded_keypad.view().top == math.inf

    def test_divide_by_zero_strict(self):
        keypad = Keypad(KeypadConfig(initial_operands=[1.0], div_zero=DivZeroMode.ERROR))
        type_number(keypad, "0")
        assert not keypad.apply("/")
        view = keypad.view()
        assert view.operands == [1.0]
        assert view.operand_text == "0"
        assert "division by zero" in view.error

    def test_unknown_operator_raises(self, keypad):
        with pytest.raises(KeyError):
            keypad.apply("%")


# ===================================================================
# SWAP / PI
# ===================================================================

class TestStackKeys:

    def test_swap(self, keypad):
        for text in ("1", "2"):
            type_number(keypad, text)
            keypad.enter()
        assert keypad.swap()
        assert keypad.view().operands == [2.0, 1.0]

    def test_swap_rejected(self, keypad):
        assert not keypad.swap()
        assert keypad.view().error is not None

    def test_pi(self, keypad):
        assert keypad.pi()
        assert keypad.view().top == math.pi


# ===================================================================
# DISPLAY / ERRORS
# ===================================================================

class TestDisplay:

    def test_default_shows_three_zeros(self, seeded_keypad):
        view = seeded_keypad.view()
        assert view.operands == [0.0, 0.0, 0.0]
        assert view.operand_count == 3

    def test_only_top_values_shown(self, seeded_keypad):
        for text in ("1", "2", "3"):
            type_number(seeded_keypad, text)
            seeded_keypad.enter()
        view = seeded_keypad.view()
        assert view.operands == [1.0, 2.0, 3.0]
        assert view.operand_count == 6

    def test_display_depth(self):
        keypad = Keypad(KeypadConfig(initial_operands=[1.0, 2.0, 3.0], display_depth=1))
        assert keypad.view().operands == [3.0]

    def test_short_stack(self, keypad):
        keypad.pi()
        assert len(keypad.view().operands) == 1

    def test_typed_text_shown(self, keypad):
        type_number(keypad, "4.")
        assert keypad.view().operand_text == "4."

    def test_success_clears_error(self, keypad):
        keypad.swap()
        assert keypad.view().error is not None
        keypad.pi()
        assert keypad.view().error is None

    def test_rejection_is_logged(self, keypad, caplog):
        with caplog.at_level(logging.WARNING, logger="keypad"):
            keypad.swap()
        assert "swap rejected" in caplog.text

    def test_sessions_are_independent(self):
        a, b = Keypad(), Keypad()
        a.pi()
        assert a.view().operand_count == 4
        assert b.view().operand_count == 3
