"""
Intcode Disassembler
====================

Linear sweep over a program: decode at address 0, advance by the
instruction width, repeat. Cells that do not decode (data after a HALT,
truncated instructions) are emitted as one-cell DATA lines and the sweep
continues at the next cell.

API Usage:
    from intcode.disasm import disassemble

    for line in disassemble("1002,4,3,4,33"):
        print(line.format())
    # 0000: 1002 4 3 4       MUL [4], #3 -> [4]
    # 0004: 33               DATA 33

Operand notation:
    [n]   Position mode, the cell at address n
    #n    Immediate mode, the literal n
    ?m:n  unknown mode digit m
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Union

from .cpu.decoder import Instruction, Mode, ModeValue, decode
from .errors import InvalidOpcode, OutOfBounds
from .mem.memory import ProgramStore, parse_program


@dataclass
class DisassembledInstruction:
    """One disassembly line."""
    address: int
    cells: List[int]        # instruction word plus operand cells
    mnemonic: str
    operand_str: str        # e.g. "[9], #3 -> [4]"
    comment: str = ""
    width: int = field(init=False)

    def __post_init__(self):
        self.width = len(self.cells)

    @property
    def cells_str(self) -> str:
        return " ".join(str(c) for c in self.cells)

    def format(self, cells_width: int = 16) -> str:
        """Format as a single listing line."""
        asm = f"{self.mnemonic} {self.operand_str}".strip()
        line = f"{self.address:04d}: {self.cells_str.ljust(cells_width)} {asm}"
        if self.comment:
            line += f"  ; {self.comment}"
        return line


def format_operand(value: int, mode: ModeValue) -> str:
    if mode == Mode.POSITION:
        return f"[{value}]"
    if mode == Mode.IMMEDIATE:
        return f"#{value}"
    return f"?{int(mode)}:{value}"


def format_operands(instr: Instruction) -> str:
    parts = [format_operand(v, m) for v, m in zip(instr.operands, instr.modes)]
    if instr.has_destination and parts:
        sources = ", ".join(parts[:-1])
        return f"{sources} -> {parts[-1]}" if sources else f"-> {parts[-1]}"
    return ", ".join(parts)


def format_instruction(instr: Instruction) -> str:
    """Mnemonic and operands of a decoded instruction, e.g. "ADD [9], [10] -> [3]"."""
    return f"{instr.mnemonic} {format_operands(instr)}".strip()


def disassemble(program: Union[str, Iterable[int], ProgramStore]) -> List[DisassembledInstruction]:
    """Disassemble program text, a list of cells, or a ProgramStore."""
    if isinstance(program, ProgramStore):
        store = program
    elif isinstance(program, str):
        store = ProgramStore(parse_program(program))
    else:
        store = ProgramStore(program)

    lines = []
    addr = 0
    while addr < len(store):
        try:
            instr = decode(store, addr)
        except InvalidOpcode:
            lines.append(_make_data(store, addr))
            addr += 1
            continue
        except OutOfBounds:
            lines.append(_make_data(store, addr, comment="truncated"))
            addr += 1
            continue

        lines.append(DisassembledInstruction(
            address=addr,
            cells=[instr.word] + list(instr.operands),
            mnemonic=instr.mnemonic,
            operand_str=format_operands(instr),
        ))
        addr += instr.width
    return lines


def _make_data(store: ProgramStore, addr: int, comment: str = "") -> DisassembledInstruction:
    word = store.read(addr)
    return DisassembledInstruction(addr, [word], "DATA", str(word), comment)


def listing(program: Union[str, Iterable[int], ProgramStore]) -> str:
    """Full disassembly as newline-joined text."""
    return "\n".join(line.format() for line in disassemble(program))
