"""
Program Store Tests

Parsing of program text and the bounds rules of the store. Every memory
access the machine performs goes through ProgramStore, so these are the
checks that keep a running program inside its own cells.
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest
from intcode.mem.memory import ProgramStore, parse_program
from intcode.errors import OutOfBounds, NonNumericProgramToken


class TestParseProgram:

    def test_signed_integers(self):
        assert parse_program("1,-2,30,0") == [1, -2, 30, 0]

    def test_single_cell(self):
        assert parse_program("99") == [99]

    def test_non_numeric_token(self):
        """The first bad token is reported with its position."""
        with pytest.raises(NonNumericProgramToken) as exc:
            parse_program("1,a,3")
        assert exc.value.token == "a"
        assert exc.value.position == 1

    @pytest.mark.parametrize("text", ["", "1,,2", "1,2,", "1, 2", "+5", "1.5", "1_000", "--1"])
    def test_rejected_texts(self, text):
        with pytest.raises(NonNumericProgramToken):
            parse_program(text)

    def test_error_is_machine_error(self):
        from intcode.errors import MachineError
        with pytest.raises(MachineError):
            parse_program("x")


class TestProgramStore:

    def test_read_write(self):
        store = ProgramStore([1, 2, 3])
        store.write(1, 42)
        assert store.read(1) == 42
        assert len(store) == 3

    def test_from_text(self):
        store = ProgramStore.from_text("5,6,7")
        assert store.snapshot() == [5, 6, 7]

    @pytest.mark.parametrize("addr", [-1, 3, 100])
    def test_read_out_of_bounds(self, addr):
        store = ProgramStore([1, 2, 3])
        with pytest.raises(OutOfBounds) as exc:
            store.read(addr)
        assert exc.value.address == addr
        assert exc.value.length == 3

    def test_write_out_of_bounds_leaves_store_untouched(self):
        store = ProgramStore([1, 2, 3])
        with pytest.raises(OutOfBounds):
            store.write(3, 9)
        with pytest.raises(OutOfBounds):
            store.write(-1, 9)
        assert store.snapshot() == [1, 2, 3]

    def test_negative_address_does_not_wrap(self):
        """-1 must not silently read the last cell."""
        store = ProgramStore([1, 2, 99])
        with pytest.raises(OutOfBounds):
            store.read(-1)

    def test_snapshot_is_a_copy(self):
        store = ProgramStore([1, 2, 3])
        snap = store.snapshot()
        snap[0] = 100
        assert store.read(0) == 1

    def test_contains(self):
        store = ProgramStore([0, 0])
        assert store.contains(0)
        assert store.contains(1)
        assert not store.contains(2)
        assert not store.contains(-1)

    def test_read_slice(self):
        store = ProgramStore([10, 20, 30, 40])
        assert store.read_slice(1, 3) == [20, 30, 40]
        assert store.read_slice(4, 0) == []

    def test_read_slice_past_end(self):
        """The first missing address is reported."""
        store = ProgramStore([10, 20, 30])
        with pytest.raises(OutOfBounds) as exc:
            store.read_slice(1, 3)
        assert exc.value.address == 3
