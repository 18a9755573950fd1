"""
intcodekit CLI Tests

Drives main() with argv lists and checks exit codes plus what lands on
stdout and stderr.
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest
import intcodekit
from intcodekit import EXIT_ERROR, EXIT_OK, EXIT_WAITING, main
from intcode.log import reset_logging


@pytest.fixture(autouse=True)
def _clean_logging():
    reset_logging()
    yield
    reset_logging()


@pytest.fixture
def program_file(tmp_path):
    def _write(text, name="prog.txt"):
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return str(path)
    return _write


class TestRun:

    def test_outputs_one_per_line(self, program_file, capsys):
        path = program_file("3,0,4,0,99\n")
        assert main(["run", path, "-i", "5"]) == EXIT_OK
        assert capsys.readouterr().out == "5\n"

    def test_peek_and_poke(self, program_file, capsys):
        path = program_file("1,9,10,3,2,3,11,0,99,30,40,50")
        assert main(["run", path, "--peek", "0"]) == EXIT_OK
        assert "[0] = 3500" in capsys.readouterr().out

        assert main(["run", path, "--poke", "9=1", "--peek", "3"]) == EXIT_OK
        # [3] = [9] + [10] = 1 + 40
        assert "[3] = 41" in capsys.readouterr().out

    def test_waiting_for_input(self, program_file, capsys):
        path = program_file("3,0,4,0,99")
        assert main(["run", path]) == EXIT_WAITING
        assert "waiting for input at pc=0" in capsys.readouterr().err

    def test_machine_error(self, program_file, capsys):
        path = program_file("42")
        assert main(["run", path]) == EXIT_ERROR
        assert "Unknown opcode 42" in capsys.readouterr().err

    def test_outputs_printed_before_fault(self, program_file, capsys):
        path = program_file("104,7,42")
        assert main(["run", path]) == EXIT_ERROR
        captured = capsys.readouterr()
        assert captured.out == "7\n"
        assert "Unknown opcode 42" in captured.err

    def test_missing_file(self, tmp_path, capsys):
        assert main(["run", str(tmp_path / "nope.txt")]) == EXIT_ERROR
        assert "File not found" in capsys.readouterr().err

    def test_bad_poke(self, program_file, capsys):
        path = program_file("99")
        assert main(["run", path, "--poke", "1"]) == EXIT_ERROR
        assert "ADDR=VALUE" in capsys.readouterr().err

    def test_trace_goes_to_stderr(self, program_file, capsys):
        path = program_file("3,0,4,0,99")
        assert main(["run", path, "-i", "8", "--trace"]) == EXIT_OK
        captured = capsys.readouterr()
        assert captured.out == "8\n"
        assert "0000: IN -> [0]" in captured.err
        assert "0004: HLT" in captured.err


class TestDisasm:

    def test_stdout(self, program_file, capsys):
        path = program_file("1002,4,3,4,33")
        assert main(["disasm", path]) == EXIT_OK
        out = capsys.readouterr().out
        assert "MUL [4], #3 -> [4]" in out
        assert "DATA 33" in out

    def test_output_file(self, program_file, tmp_path, capsys):
        path = program_file("99")
        out_path = tmp_path / "out.asm"
        assert main(["disasm", path, "-o", str(out_path)]) == EXIT_OK
        assert "HLT" in out_path.read_text(encoding="utf-8")


class TestAmplify:

    def test_serial_profile(self, program_file, capsys):
        path = program_file("3,15,3,16,1002,16,10,16,1,16,15,15,4,15,99,0,0")
        assert main(["amplify", path, "--profile", "serial"]) == EXIT_OK
        assert capsys.readouterr().out.splitlines() == ["43210", "phases 4,3,2,1,0"]

    def test_explicit_phases(self, program_file, capsys):
        path = program_file("3,26,1001,26,-4,26,3,27,1002,27,2,27,1,27,26,"
                            "27,4,27,1001,28,-1,28,1005,28,6,99,0,0,5")
        assert main(["amplify", path, "--phases", "5,6,7,8,9"]) == EXIT_OK
        assert capsys.readouterr().out.splitlines()[0] == "139629729"

    def test_protocol_violation(self, program_file, capsys):
        path = program_file("3,6,3,7,99,0,0,0")
        assert main(["amplify", path, "--profile", "serial"]) == EXIT_ERROR
        assert "Amplifier 0" in capsys.readouterr().err


class TestMisc:

    def test_no_command_prints_help(self, capsys):
        assert main([]) == EXIT_OK
        assert "intcodekit" in capsys.readouterr().out

    def test_read_program_text_strips_whitespace(self, program_file):
        path = program_file(" 1, 2,\n-3\r\n")
        assert intcodekit.read_program_text(path) == "1,2,-3"

    def test_log_dir(self, program_file, tmp_path):
        path = program_file("99")
        log_dir = tmp_path / "logs"
        assert main(["--log-dir", str(log_dir), "run", path]) == EXIT_OK
        assert list(log_dir.glob("intcode_*.log"))

    def test_log_flag_uses_default_dir(self, program_file, tmp_path, monkeypatch):
        path = program_file("99")
        log_dir = tmp_path / "default_logs"
        monkeypatch.setattr(intcodekit.config, "LOG_DIR", log_dir)
        assert main(["--log", "run", path]) == EXIT_OK
        assert list(log_dir.glob("intcode_*.log"))

    def test_no_log_file_without_flag(self, program_file, tmp_path, monkeypatch):
        path = program_file("99")
        log_dir = tmp_path / "default_logs"
        monkeypatch.setattr(intcodekit.config, "LOG_DIR", log_dir)
        assert main(["run", path]) == EXIT_OK
        assert not log_dir.exists()
