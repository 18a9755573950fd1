"""
Intcode Machine — Program Store

The program is both the code and the only data memory of a machine: a flat,
zero-indexed list of signed integers, mutated in place by the instructions
it contains. Its length is fixed when the program is parsed; nothing ever
grows it, so every address outside [0, len) is an error rather than an
implicit extension.

Program text format:
  "1,9,10,3,2,3,11,0,99,30,40,50"
  signed decimal integers, single ',' delimiter, no whitespace.
"""

import re
from typing import Iterable, List

from .. import config
from ..errors import OutOfBounds, NonNumericProgramToken

_INT_TOKEN = re.compile(r'-?[0-9]+')


def parse_program(text: str) -> List[int]:
    """Parse comma-separated program text into a list of integers.

    Raises NonNumericProgramToken on the first token that is not a plain
    signed decimal integer (empty tokens included, so "1,,2" and a trailing
    comma are rejected).
    """
    cells = []
    for position, token in enumerate(text.split(config.DELIMITER)):
        if not _INT_TOKEN.fullmatch(token):
            raise NonNumericProgramToken(token, position)
        cells.append(int(token))
    return cells


class ProgramStore:
    """Fixed-length, randomly addressable integer memory.

    All reads and writes are bounds checked. Negative addresses are never
    wrapped Python-style; they raise OutOfBounds like any other bad address.
    """

    __slots__ = ('_cells',)

    def __init__(self, cells: Iterable[int]):
        self._cells: List[int] = list(cells)

    @classmethod
    def from_text(cls, text: str) -> 'ProgramStore':
        return cls(parse_program(text))

    def __len__(self) -> int:
        return len(self._cells)

    def __repr__(self) -> str:
        return f"ProgramStore(len={len(self._cells)})"

    def _check(self, addr: int):
        if addr < 0 or addr >= len(self._cells):
            raise OutOfBounds(addr, len(self._cells))

    # --- Core read/write ---

    def read(self, addr: int) -> int:
        """Read the cell at addr."""
        self._check(addr)
        return self._cells[addr]

    def write(self, addr: int, value: int):
        """Overwrite the cell at addr."""
        self._check(addr)
        self._cells[addr] = value

    def contains(self, addr: int) -> bool:
        return 0 <= addr < len(self._cells)

    def read_slice(self, start: int, count: int) -> List[int]:
        """Read `count` consecutive cells starting at `start`.

        Fails with OutOfBounds naming the first missing address.
        """
        end = start + count
        if count > 0:
            self._check(start)
            if end > len(self._cells):
                raise OutOfBounds(len(self._cells), len(self._cells))
        return self._cells[start:end]

    # --- Snapshots ---

    def snapshot(self) -> List[int]:
        """Return a copy of every cell, for inspection after a run."""
        return list(self._cells)
