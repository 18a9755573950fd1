"""
Intcode Machine — Instruction Decoder

An instruction word packs the opcode and the addressing modes of its
operands into one decimal integer:

    word = 1002
           ││└┴─ opcode        = word % 100          -> 2 (MUL)
           │└─── mode of op 1  = (word // 100) % 10  -> 0 Position
           └──── mode of op 2  = (word // 1000) % 10 -> 1 Immediate
                 mode of op 3  = missing             -> 0 Position

The operand count is fixed per opcode (OPCODES below), so the decoder
never guesses the width from the mode digits. Mode digits other than 0/1
are kept as raw ints here and rejected by the resolver in machine.py, so a
bad mode only fails when that operand is actually used.

Addressing modes:
  POSITION   operand is an address, dereference it
  IMMEDIATE  operand is the value itself
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import List, Tuple, Union

from ..errors import InvalidOpcode
from ..mem.memory import ProgramStore


# ──────────────────────────────────────────────
# Addressing modes
# ──────────────────────────────────────────────

class Mode(IntEnum):
    POSITION = 0
    IMMEDIATE = 1


ModeValue = Union[Mode, int]


# ──────────────────────────────────────────────
# Opcodes
# ──────────────────────────────────────────────

class Opcode(IntEnum):
    ADD = 1
    MULTIPLY = 2
    INPUT = 3
    OUTPUT = 4
    JUMP_IF_TRUE = 5
    JUMP_IF_FALSE = 6
    LESS_THAN = 7
    EQUALS = 8
    HALT = 99


# Format: opcode -> (mnemonic, operand_count, last_operand_is_destination)
OPCODES = {
    Opcode.ADD:           ('ADD', 3, True),
    Opcode.MULTIPLY:      ('MUL', 3, True),
    Opcode.INPUT:         ('IN',  1, True),
    Opcode.OUTPUT:        ('OUT', 1, False),
    Opcode.JUMP_IF_TRUE:  ('JNZ', 2, False),
    Opcode.JUMP_IF_FALSE: ('JZ',  2, False),
    Opcode.LESS_THAN:     ('LT',  3, True),
    Opcode.EQUALS:        ('EQ',  3, True),
    Opcode.HALT:          ('HLT', 0, False),
}


@dataclass
class Instruction:
    """One decoded instruction. Transient: rebuilt on every step."""
    address: int
    word: int
    opcode: Opcode
    operands: List[int]
    modes: List[ModeValue]

    @property
    def mnemonic(self) -> str:
        return OPCODES[self.opcode][0]

    @property
    def width(self) -> int:
        """Cells consumed: the word itself plus its operands."""
        return 1 + len(self.operands)

    @property
    def has_destination(self) -> bool:
        return OPCODES[self.opcode][2]


def operand_count(opcode: int) -> int:
    """Number of operand cells that follow `opcode` in the program."""
    try:
        return OPCODES[Opcode(opcode)][1]
    except ValueError:
        raise InvalidOpcode(opcode) from None


def parse_modes(word: int, count: int) -> List[ModeValue]:
    """Extract `count` mode digits from an instruction word.

    Digits are read least-significant first starting at the hundreds place;
    missing digits default to Position. Digits beyond `count` are ignored.
    """
    modes: List[ModeValue] = []
    remaining = word // 100
    for _ in range(count):
        digit = remaining % 10
        remaining //= 10
        modes.append(Mode(digit) if digit in (Mode.POSITION, Mode.IMMEDIATE) else digit)
    return modes


def decode_word(word: int, address: int = None) -> Tuple[Opcode, List[ModeValue]]:
    """Split an instruction word into (opcode, modes).

    Negative words never decode; Python's modulo would otherwise turn -1
    into 99 (HALT).
    """
    if word < 0:
        raise InvalidOpcode(word, address)
    code = word % 100
    try:
        opcode = Opcode(code)
    except ValueError:
        raise InvalidOpcode(code, address) from None
    return opcode, parse_modes(word, operand_count(opcode))


def decode(store: ProgramStore, pc: int) -> Instruction:
    """Fetch and decode the instruction at `pc`.

    Raises InvalidOpcode for unknown opcodes and OutOfBounds when the word
    or any of its operand cells lies outside the program.
    """
    word = store.read(pc)
    opcode, modes = decode_word(word, pc)
    operands = store.read_slice(pc + 1, len(modes))
    return Instruction(pc, word, opcode, operands, modes)
