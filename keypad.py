"""Keypad session: the input and display layer over one ``Calc``.

A keypad accumulates the operand being typed as text.  Enter pushes it,
or duplicates the top when nothing was typed.  Binary operator keys push
a pending operand first, so ``1 Enter 2 +`` and ``1 Enter 2 Enter +``
both leave ``3`` on top.

Rejected key presses never change the stack: the failure is logged,
reported through ``StackView.error``, and the key returns ``False``.
"""
from __future__ import annotations

import logging
import math

from calculator import Calc, CalcError
from models import KeypadConfig, StackView
from operators import Operator, get_operator

logger = logging.getLogger(__name__)


class Keypad:
    """One calculator session; owns its engine exclusively."""

    def __init__(self, config: KeypadConfig | None = None) -> None:
        if config is None:
            config = KeypadConfig()
        self.config = config
        self._calc = Calc(*config.initial_operands)
        self._text = ""
        self._error: str | None = None

    @property
    def calc(self) -> Calc:
        return self._calc

    @property
    def operand_text(self) -> str:
        return self._text

    # -- helpers -------------------------------------------------------------

    def _has_operand(self) -> bool:
        return bool(self._text.strip())

    def _operand(self) -> float:
        try:
            return float(self._text)
        except ValueError:
            raise ValueError(f"Not a number: {self._text!r}") from None

    def _ok(self) -> bool:
        self._error = None
        return True

    def _reject(self, action: str, exc: Exception) -> bool:
        logger.warning("%s rejected: %s", action, exc)
        self._error = str(exc)
        return False

    # -- text entry ----------------------------------------------------------

    def digit(self, d: str) -> bool:
        if len(d) != 1 or d not in "0123456789":
            raise ValueError(f"Not a digit: {d!r}")
        self._text += d
        return self._ok()

    def point(self) -> bool:
        """Add a decimal point, or cut the text back to its first point."""
        if "." in self._text:
            self._text = self._text[: self._text.index(".") + 1]
        else:
            self._text += "."
        return self._ok()

    def clear(self) -> bool:
        self._text = ""
        return self._ok()

    # -- stack keys ----------------------------------------------------------

    def enter(self) -> bool:
        """Push the typed operand, or duplicate the top if none was typed."""
        try:
            if self._has_operand():
                self._calc.push_operand(self._operand())
            else:
                self._calc.dup()
        except (CalcError, ValueError) as e:
            return self._reject("enter", e)
        self._text = ""
        return self._ok()

    def swap(self) -> bool:
        try:
            self._calc.swap()
        except CalcError as e:
            return self._reject("swap", e)
        return self._ok()

    def pi(self) -> bool:
        self._calc.push_operand(math.pi)
        return self._ok()

    def apply(self, op: Operator | str) -> bool:
        """Perform an operator key.

        Binary operators consume a pending operand first; if the operation
        then fails the operand is taken back off the stack and the typed
        text is kept.
        """
        if isinstance(op, str):
            op = get_operator(op, self.config.div_zero)

        if op.arity == 1:
            try:
                self._calc.perform_unary(op)
            except (CalcError, ArithmeticError, ValueError) as e:
                return self._reject(op.name, e)
            return self._ok()

        pushed = False
        try:
            if self._has_operand():
                self._calc.push_operand(self._operand())
                pushed = True
            self._calc.perform_binary(op)
        except (CalcError, ArithmeticError, ValueError) as e:
            if pushed:
                self._calc.pop_operand()
            return self._reject(op.name, e)
        self._text = ""
        return self._ok()

    # -- display -------------------------------------------------------------

    def view(self) -> StackView:
        """The top ``display_depth`` operands, bottom first."""
        count = self._calc.operand_count()
        shown = min(count, self.config.display_depth)
        return StackView(
            operands=[self._calc.peek_operand(shown - i - 1) for i in range(shown)],
            operand_text=self._text,
            operand_count=count,
            error=self._error,
        )
