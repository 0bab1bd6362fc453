"""Executable contract for the operand-stack engine.

Each engine operation is described by:
- min_operands: how many operands must be present for it to succeed
- postconditions: what the stack and result must look like afterwards
- error conditions: which starting states must raise, and with what
- properties: relationships between operations that must always hold

Stacks are passed around as tuples, bottom first (``Calc.snapshot()``).
Validation tools and the conformance tests iterate over this module
instead of restating the rules.

Layers
------
Postcondition / ErrorCondition / StackProperty   building blocks
OperationContract   per-operation contract
Branch              every decision point white-box tests must cover
CalcContract        the full contract
build_contract()    constructs the CalcContract
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Callable

from calculator import Calc, InvalidDepthError, StackUnderflowError

Stack = tuple[float, ...]


# ---------------------------------------------------------------------------
# Building blocks
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Postcondition:
    name: str
    description: str
    check: Callable[[Stack, tuple, Stack, Any], bool]   # before, args, after, result


@dataclass(frozen=True)
class ErrorCondition:
    name: str
    description: str
    trigger: Callable[[Stack, tuple], bool]             # before, args
    exception: type[Exception]


@dataclass(frozen=True)
class StackProperty:
    name: str
    description: str
    check: Callable[[Stack], bool]


@dataclass(frozen=True)
class OperationContract:
    name: str
    min_operands: int
    postconditions: list[Postcondition]
    error_conditions: list[ErrorCondition]
    properties: list[StackProperty]


@dataclass(frozen=True)
class Branch:
    """A decision point in the engine that must be exercised."""

    id: str
    description: str
    condition: str      # human-readable boolean expression
    operation: str


@dataclass(frozen=True)
class CalcContract:
    operations: dict[str, OperationContract]
    branches: list[Branch]

    @property
    def all_postconditions(self) -> list[tuple[str, Postcondition]]:
        return [
            (name, post)
            for name, op in self.operations.items()
            for post in op.postconditions
        ]

    @property
    def all_properties(self) -> list[tuple[str, StackProperty]]:
        return [
            (name, prop)
            for name, op in self.operations.items()
            for prop in op.properties
        ]


# ---------------------------------------------------------------------------
# Helpers used inside the predicates
# ---------------------------------------------------------------------------

def same_value(a: float, b: float) -> bool:
    """Equality that treats nan as equal to nan."""
    if isinstance(a, float) and isinstance(b, float) and math.isnan(a) and math.isnan(b):
        return True
    return a == b


def same_stack(a: Stack, b: Stack) -> bool:
    return len(a) == len(b) and all(same_value(x, y) for x, y in zip(a, b))


def _unchanged(before: Stack, _args: tuple, after: Stack, _result: Any) -> bool:
    return same_stack(before, after)


def _run(stack: Stack, *steps: str) -> Stack:
    calc = Calc(*stack)
    for step in steps:
        getattr(calc, step)()
    return calc.snapshot()


def underflow(operation: str, count: int) -> ErrorCondition:
    return ErrorCondition(
        "underflow",
        f"{operation} with fewer than {count} operand(s) raises StackUnderflowError",
        lambda before, _args: len(before) < count,
        StackUnderflowError,
    )


# ---------------------------------------------------------------------------
# Contract builder
# ---------------------------------------------------------------------------

def build_contract() -> CalcContract:
    """Construct the full engine contract."""

    operand_count = OperationContract(
        name="operand_count",
        min_operands=0,
        postconditions=[
            Postcondition(
                "equals_size", "Result is the number of operands",
                lambda before, _a, _after, result: result == len(before),
            ),
            Postcondition("stack_unchanged", "Stack is not modified", _unchanged),
        ],
        error_conditions=[],
        properties=[],
    )

    push_operand = OperationContract(
        name="push_operand",
        min_operands=0,
        postconditions=[
            Postcondition(
                "grows_by_one", "Stack size increases by one",
                lambda before, _a, after, _r: len(after) == len(before) + 1,
            ),
            Postcondition(
                "value_on_top", "Pushed value becomes the top",
                lambda before, args, after, _r: (
                    same_value(after[-1], args[0]) and same_stack(after[:-1], before)
                ),
            ),
        ],
        error_conditions=[],
        properties=[],
    )

    peek_operand = OperationContract(
        name="peek_operand",
        min_operands=0,
        postconditions=[
            Postcondition(
                "value_at_depth", "Result is the value depth positions below the top",
                lambda before, args, _after, result: same_value(
                    result, before[len(before) - args[0] - 1]
                ),
            ),
            Postcondition("stack_unchanged", "Stack is not modified", _unchanged),
        ],
        error_conditions=[
            ErrorCondition(
                "invalid_depth",
                "depth < 0 or depth >= size raises InvalidDepthError",
                lambda before, args: args[0] < 0 or args[0] >= len(before),
                InvalidDepthError,
            ),
        ],
        properties=[],
    )

    pop_operand = OperationContract(
        name="pop_operand",
        min_operands=1,
        postconditions=[
            Postcondition(
                "returns_top", "Result is the former top",
                lambda before, _a, _after, result: same_value(result, before[-1]),
            ),
            Postcondition(
                "shrinks_by_one", "Top is removed, the rest is kept",
                lambda before, _a, after, _r: same_stack(after, before[:-1]),
            ),
        ],
        error_conditions=[underflow("pop", 1)],
        properties=[],
    )

    swap = OperationContract(
        name="swap",
        min_operands=2,
        postconditions=[
            Postcondition(
                "top_two_exchanged", "Top two operands trade places",
                lambda before, _a, after, _r: same_stack(
                    after, before[:-2] + (before[-1], before[-2])
                ),
            ),
        ],
        error_conditions=[underflow("swap", 2)],
        properties=[
            StackProperty(
                "involution", "swap twice is the identity",
                lambda s: len(s) < 2 or same_stack(_run(s, "swap", "swap"), s),
            ),
        ],
    )

    dup = OperationContract(
        name="dup",
        min_operands=1,
        postconditions=[
            Postcondition(
                "top_duplicated", "The top now appears at depth 0 and 1",
                lambda before, _a, after, _r: same_stack(after, before + (before[-1],)),
            ),
        ],
        error_conditions=[underflow("dup", 1)],
        properties=[
            StackProperty(
                "pop_undoes_dup", "dup then pop restores the stack",
                lambda s: not s or same_stack(_run(s, "dup", "pop_operand"), s),
            ),
        ],
    )

    perform_unary = OperationContract(
        name="perform_unary",
        min_operands=1,
        postconditions=[
            Postcondition(
                "top_replaced", "Top y is replaced by fn(y)",
                lambda before, args, after, result: (
                    same_value(result, args[0](before[-1]))
                    and same_stack(after, before[:-1] + (result,))
                ),
            ),
        ],
        error_conditions=[underflow("unary operation", 1)],
        properties=[],
    )

    perform_binary = OperationContract(
        name="perform_binary",
        min_operands=2,
        postconditions=[
            Postcondition(
                "operands_reduced", "x, y (y on top) are replaced by fn(x, y)",
                lambda before, args, after, result: (
                    same_value(result, args[0](before[-2], before[-1]))
                    and same_stack(after, before[:-2] + (result,))
                ),
            ),
        ],
        error_conditions=[underflow("binary operation", 2)],
        properties=[],
    )

    branches = [
        Branch("UNDERFLOW", "Too few operands, StackUnderflowError raised",
               "len(stack) < required", "_require"),
        Branch("SUFFICIENT", "Enough operands, operation proceeds",
               "len(stack) >= required", "_require"),
        Branch("PEEK-NEGATIVE", "Negative depth rejected",
               "depth < 0", "peek_operand"),
        Branch("PEEK-TOO-DEEP", "Depth at or past the bottom rejected",
               "depth >= len(stack)", "peek_operand"),
        Branch("PEEK-OK", "Value returned",
               "0 <= depth < len(stack)", "peek_operand"),
        Branch("OP-UNARY", "One-operand function applied",
               "arity(fn) == 1", "perform_operation"),
        Branch("OP-BINARY", "Two-operand function applied",
               "arity(fn) == 2", "perform_operation"),
        Branch("OP-BAD-ARITY", "TypeError for any other arity",
               "arity(fn) not in (1, 2)", "perform_operation"),
    ]

    return CalcContract(
        operations={
            c.name: c
            for c in (
                operand_count, push_operand, peek_operand, pop_operand,
                swap, dup, perform_unary, perform_binary,
            )
        },
        branches=branches,
    )
