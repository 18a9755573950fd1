"""
Intcode Machine — Arithmetic / Comparison Operations

Pure functions: take resolved operand values, return the value to store
(binary ops) or whether a jump is taken (conditions). The machine does all
operand resolution and memory writes, so nothing here touches state.

Comparisons store 1 for true and 0 for false, never a Python bool.
"""

from .decoder import Opcode


def add(a: int, b: int) -> int:
    return a + b


def multiply(a: int, b: int) -> int:
    return a * b


def less_than(a: int, b: int) -> int:
    return 1 if a < b else 0


def equals(a: int, b: int) -> int:
    return 1 if a == b else 0


def is_true(value: int) -> bool:
    return value != 0


def is_false(value: int) -> bool:
    return value == 0


# Opcode -> function(a, b) for the read-read-write instructions
BINARY_OPS = {
    Opcode.ADD: add,
    Opcode.MULTIPLY: multiply,
    Opcode.LESS_THAN: less_than,
    Opcode.EQUALS: equals,
}

# Opcode -> predicate on the first operand for conditional jumps
JUMP_CONDITIONS = {
    Opcode.JUMP_IF_TRUE: is_true,
    Opcode.JUMP_IF_FALSE: is_false,
}
