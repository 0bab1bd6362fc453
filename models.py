"""Keypad configuration and display models."""
from __future__ import annotations

from pydantic import BaseModel, Field

from operators import DivZeroMode


class KeypadConfig(BaseModel):
    """Settings for a keypad session."""

    initial_operands: list[float] = Field(
        default_factory=lambda: [0.0, 0.0, 0.0],
        description="Stack content at start, bottom first",
    )
    display_depth: int = Field(
        default=3,
        ge=1,
        description="How many of the top operands the display shows",
    )
    div_zero: DivZeroMode = DivZeroMode.IEEE


class StackView(BaseModel):
    """What a calculator display renders after each key press.

    ``operands`` lists the visible values bottom first, so the last entry
    is the top of the stack.
    """

    operands: list[float] = Field(default_factory=list)
    operand_text: str = ""
    operand_count: int = Field(default=0, ge=0)
    error: str | None = None

    @property
    def top(self) -> float | None:
        return self.operands[-1] if self.operands else None
