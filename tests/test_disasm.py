"""
Disassembler Tests
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest
from intcode.disasm import DisassembledInstruction, disassemble, listing
from intcode.mem.memory import ProgramStore


DAY2_EXAMPLE = "1,9,10,3,2,3,11,0,99,30,40,50"


class TestDisassemble:

    def test_linear_sweep(self):
        lines = disassemble(DAY2_EXAMPLE)
        assert [l.mnemonic for l in lines] == ['ADD', 'MUL', 'HLT', 'DATA', 'DATA', 'DATA']
        assert [l.address for l in lines] == [0, 4, 8, 9, 10, 11]
        assert lines[0].operand_str == "[9], [10] -> [3]"
        assert lines[0].cells == [1, 9, 10, 3]
        assert lines[0].width == 4
        assert lines[3].operand_str == "30"

    def test_accepts_cells_and_store(self):
        text_lines = disassemble(DAY2_EXAMPLE)
        cells = [int(t) for t in DAY2_EXAMPLE.split(",")]
        assert disassemble(cells) == text_lines
        assert disassemble(ProgramStore(cells)) == text_lines

    def test_truncated_instruction(self):
        lines = disassemble("1,0")
        assert [l.mnemonic for l in lines] == ['DATA', 'DATA']
        assert lines[0].comment == "truncated"
        assert lines[1].comment == ""

    @pytest.mark.parametrize("text,expected", [
        ("3,0,99", "IN -> [0]"),
        ("104,5", "OUT #5"),
        ("1105,1,7", "JNZ #1, #7"),
        ("6,0,1", "JZ [0], [1]"),
        ("1108,1,2,0", "EQ #1, #2 -> [0]"),
        ("301,1,2,3", "ADD ?3:1, [2] -> [3]"),
    ])
    def test_operand_notation(self, text, expected):
        first = disassemble(text)[0]
        assert f"{first.mnemonic} {first.operand_str}" == expected

    def test_halt_has_no_operands(self):
        line = disassemble("99")[0]
        assert line.mnemonic == 'HLT'
        assert line.operand_str == ""


class TestFormat:

    def test_instruction_line(self):
        line = disassemble(DAY2_EXAMPLE)[0]
        assert line.format() == "0000: " + "1 9 10 3".ljust(16) + " ADD [9], [10] -> [3]"

    def test_comment(self):
        line = DisassembledInstruction(7, [1], "DATA", "1", comment="truncated")
        assert line.format() == "0007: " + "1".ljust(16) + " DATA 1  ; truncated"

    def test_listing(self):
        text = listing("1002,4,3,4,33")
        assert text.splitlines() == [
            "0000: " + "1002 4 3 4".ljust(16) + " MUL [4], #3 -> [4]",
            "0004: " + "33".ljust(16) + " DATA 33",
        ]
