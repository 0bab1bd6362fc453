"""Operand-stack calculator engine.

The engine owns a stack of floats (the tail of the list is the top) and
exposes the primitives an RPN calculator is built from: push, pop,
depth-indexed peek, swap, dup, and application of unary/binary functions
that consume operands and push their result.

Every failing call leaves the stack exactly as it was.  Decision branches
are annotated with the ids listed by ``contract.build_contract()`` so
white-box tests can trace coverage.
"""
from __future__ import annotations

import inspect
import logging
from typing import Callable

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------

class CalcError(Exception):
    """Base class for recoverable engine failures."""


class StackUnderflowError(CalcError):
    """Raised when an operation needs more operands than are present."""

    def __init__(self, operation: str, required: int, available: int) -> None:
        self.operation = operation
        self.required = required
        self.available = available
        super().__init__(
            f"{operation} needs {required} operand(s), "
            f"but the stack holds {available}"
        )


class InvalidDepthError(CalcError):
    """Raised when a peek depth does not name a stack position."""

    def __init__(self, depth: int, size: int) -> None:
        self.depth = depth
        self.size = size
        super().__init__(f"depth {depth} is outside the stack [0, {size})")


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------

def _arity(fn: Callable[..., float]) -> int:
    """Number of operands ``fn`` consumes."""
    declared = getattr(fn, "arity", None)
    if declared is not None:
        return declared
    try:
        params = inspect.signature(fn).parameters.values()
    except (TypeError, ValueError):
        raise TypeError(f"cannot determine the arity of {fn!r}") from None
    return sum(
        1 for p in params
        if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD)
        and p.default is p.empty
    )


class Calc:
    """A stack of float operands.

    ``Calc(1.0, 3.14)`` starts with ``3.14`` on top and ``1.0`` below it.
    """

    def __init__(self, *operands: float) -> None:
        self._operands: list[float] = list(operands)

    def __len__(self) -> int:
        return len(self._operands)

    def __repr__(self) -> str:
        return f"Calc{tuple(self._operands)!r}"

    # -- internal helpers ---------------------------------------------------

    def _require(self, operation: str, count: int) -> None:
        """Raise unless at least ``count`` operands are present.

        Branches: UNDERFLOW, SUFFICIENT
        """
        available = len(self._operands)
        if available < count:                                     # UNDERFLOW
            logger.debug("%s rejected: %d < %d operands", operation, available, count)
            raise StackUnderflowError(operation, count, available)
        # (falls through) SUFFICIENT

    # -- queries ------------------------------------------------------------

    def operand_count(self) -> int:
        return len(self._operands)

    def peek_operand(self, depth: int = 0) -> float:
        """Value ``depth`` positions below the top, without removing it.

        Branches: PEEK-NEGATIVE, PEEK-TOO-DEEP, PEEK-OK
        """
        size = len(self._operands)
        if depth < 0:                                             # PEEK-NEGATIVE
            raise InvalidDepthError(depth, size)
        if depth >= size:                                         # PEEK-TOO-DEEP
            raise InvalidDepthError(depth, size)
        return self._operands[size - depth - 1]                   # PEEK-OK

    def snapshot(self) -> tuple[float, ...]:
        """Copy of the stack, bottom first."""
        return tuple(self._operands)

    # -- stack manipulation -------------------------------------------------

    def push_operand(self, value: float) -> None:
        self._operands.append(value)

    def pop_operand(self) -> float:
        """Remove and return the top operand."""
        self._require("pop", 1)
        return self._operands.pop()

    def swap(self) -> None:
        """Exchange the top two operands."""
        self._require("swap", 2)
        ops = self._operands
        ops[-1], ops[-2] = ops[-2], ops[-1]

    def dup(self) -> None:
        """Push a copy of the top operand."""
        self._require("dup", 1)
        self._operands.append(self._operands[-1])

    # -- operations ---------------------------------------------------------

    def perform_unary(self, fn: Callable[[float], float]) -> float:
        """Replace the top ``y`` with ``fn(y)`` and return it."""
        self._require("unary operation", 1)
        # fn runs before anything is popped, so a raising fn changes nothing
        result = fn(self._operands[-1])
        self._operands[-1] = result
        return result

    def perform_binary(self, fn: Callable[[float, float], float]) -> float:
        """Replace ``x, y`` (``y`` on top) with ``fn(x, y)`` and return it."""
        self._require("binary operation", 2)
        result = fn(self._operands[-2], self._operands[-1])
        del self._operands[-2:]
        self._operands.append(result)
        return result

    def perform_operation(self, fn: Callable[..., float]) -> float:
        """Apply a one- or two-operand function, chosen by its arity.

        Branches: OP-UNARY, OP-BINARY, OP-BAD-ARITY
        """
        arity = _arity(fn)
        if arity == 1:                                            # OP-UNARY
            return self.perform_unary(fn)
        if arity == 2:                                            # OP-BINARY
            return self.perform_binary(fn)
        raise TypeError(                                          # OP-BAD-ARITY
            f"operation must take 1 or 2 operands, {fn!r} takes {arity}"
        )
