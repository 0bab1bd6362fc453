"""Named operators for the keypad.

Each operator knows its symbol, how many operands it consumes, and the
function that computes its result.  Arithmetic follows IEEE-754 doubles
by default: ``1 / 0`` is ``inf`` and ``sqrt(-1)`` is ``nan`` instead of a
Python exception.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable


class DivZeroMode(Enum):
    """What ``/`` does when the divisor is zero."""

    IEEE = auto()        # +-inf, or nan for 0/0
    ERROR = auto()       # Raise ZeroDivisionError


class UnknownOperatorError(KeyError):
    """Raised when an operator symbol is not in the catalog."""

    def __init__(self, symbol: str) -> None:
        self.symbol = symbol
        super().__init__(f"Unknown operator: {symbol!r}")

    def __str__(self) -> str:
        return self.args[0]


@dataclass(frozen=True)
class Operator:
    symbol: str
    name: str
    arity: int
    fn: Callable[..., float]

    def __post_init__(self) -> None:
        if self.arity not in (1, 2):
            raise ValueError(f"arity must be 1 or 2, got {self.arity}")

    def __call__(self, *operands: float) -> float:
        if len(operands) != self.arity:
            raise TypeError(
                f"{self.name} takes {self.arity} operand(s), got {len(operands)}"
            )
        return self.fn(*operands)


# ---------------------------------------------------------------------------
# Arithmetic
# ---------------------------------------------------------------------------

def ieee_div(x: float, y: float) -> float:
    """Float division that never raises.

    Python's ``/`` raises on a zero divisor; doubles give a signed
    infinity (sign of ``x`` times sign of the zero) or nan for ``0/0``.
    """
    if y != 0:
        return x / y
    if x == 0 or math.isnan(x):
        return math.nan
    return math.copysign(math.inf, x) * math.copysign(1.0, y)


def strict_div(x: float, y: float) -> float:
    if y == 0:
        raise ZeroDivisionError("division by zero")
    return x / y


def ieee_sqrt(x: float) -> float:
    """Square root returning nan for negative input."""
    if x < 0:
        return math.nan
    return math.sqrt(x)


def divide(mode: DivZeroMode = DivZeroMode.IEEE) -> Operator:
    """The ``/`` operator for the given division-by-zero mode."""
    fn = ieee_div if mode == DivZeroMode.IEEE else strict_div
    return Operator("/", "div", 2, fn)


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------

ADD = Operator("+", "add", 2, lambda x, y: x + y)
SUB = Operator("-", "sub", 2, lambda x, y: x - y)
MUL = Operator("*", "mul", 2, lambda x, y: x * y)
DIV = divide(DivZeroMode.IEEE)
SQRT = Operator("sqrt", "sqrt", 1, ieee_sqrt)
NEG = Operator("neg", "neg", 1, lambda x: -x)

BINARY: tuple[Operator, ...] = (ADD, SUB, MUL, DIV)
UNARY: tuple[Operator, ...] = (SQRT, NEG)

OPERATORS: dict[str, Operator] = {op.symbol: op for op in BINARY + UNARY}


def get_operator(
    symbol: str,
    div_zero: DivZeroMode = DivZeroMode.IEEE,
) -> Operator:
    """Look up an operator by symbol or name."""
    if symbol in ("/", "div"):
        return divide(div_zero)
    op = OPERATORS.get(symbol)
    if op is None:
        op = next((o for o in OPERATORS.values() if o.name == symbol), None)
    if op is None:
        raise UnknownOperatorError(symbol)
    return op
