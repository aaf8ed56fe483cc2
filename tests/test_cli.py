"""
intcodekit CLI Tests

Drives main() in-process: stdout carries program output only, errors go
to stderr, and the return value is the process exit code.
"""
import io
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest

from intcode.errors import ExitCode
from intcodekit import main

from conftest import CHAIN_43210, EQ8_POS, FEEDBACK_139629729

GRAVITY = [1, 9, 10, 3, 2, 3, 11, 0, 99, 30, 40, 50]


@pytest.fixture(autouse=True)
def no_stdin(monkeypatch):
    monkeypatch.setattr(sys, 'stdin', io.StringIO(""))


def _lines(capsys):
    return capsys.readouterr().out.split()


# ══════════════════════════════════════════════
# run
# ══════════════════════════════════════════════

class TestRun:
    def test_queued_input(self, program_file, capsys):
        path = program_file(EQ8_POS)
        assert main(["run", str(path), "-i", "8"]) == ExitCode.OK
        assert _lines(capsys) == ["1"]

    def test_stdin_fallback(self, program_file, capsys, monkeypatch):
        monkeypatch.setattr(sys, 'stdin', io.StringIO("7\n"))
        path = program_file(EQ8_POS)
        assert main(["run", str(path)]) == ExitCode.OK
        out = capsys.readouterr().out
        # no prompt when stdin is not a terminal
        assert out == "0\n"

    def test_repeat_resets_memory(self, program_file, capsys):
        path = program_file(EQ8_POS)
        assert main(["run", str(path), "--repeat", "2", "-i", "8"]) == ExitCode.OK
        assert _lines(capsys) == ["1", "1"]

    def test_set_and_peek(self, program_file, capsys):
        path = program_file(GRAVITY)
        assert main(["run", str(path), "--peek", "0"]) == ExitCode.OK
        assert capsys.readouterr().out == "mem[0] = 3500\n"

    def test_set_patches_image(self, program_file, capsys):
        path = program_file([1, 0, 0, 0, 99])
        assert main(["run", str(path), "--set", "1=4", "--set", "2=4",
                     "--peek", "0"]) == ExitCode.OK
        assert capsys.readouterr().out == "mem[0] = 198\n"

    def test_dump_final_image(self, program_file, capsys):
        path = program_file([1, 0, 0, 0, 99])
        assert main(["run", str(path), "--dump"]) == ExitCode.OK
        assert capsys.readouterr().out == "2,0,0,0,99\n"

    def test_dump_includes_grown_cells(self, program_file, capsys):
        path = program_file([1101, 2, 3, 6, 99])
        assert main(["run", str(path), "--dump"]) == ExitCode.OK
        assert capsys.readouterr().out == "1101,2,3,6,99,0,5\n"

    def test_trace_goes_to_stderr(self, program_file, capsys):
        path = program_file(GRAVITY)
        assert main(["run", str(path), "--trace"]) == ExitCode.OK
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "ADD" in captured.err
        assert "MUL" in captured.err

    def test_step_limit(self, program_file, capsys):
        path = program_file([1105, 1, 0])
        assert main(["run", str(path), "--max-steps", "50"]) == ExitCode.TIMEOUT


# ══════════════════════════════════════════════
# pipe / amp / perms
# ══════════════════════════════════════════════

class TestPipelineCommands:
    def test_pipe_chain(self, program_file, capsys):
        path = program_file(CHAIN_43210)
        assert main(["pipe", str(path), "--phases", "4,3,2,1,0"]) == ExitCode.OK
        assert _lines(capsys) == ["43210"]

    def test_pipe_feedback(self, program_file, capsys):
        path = program_file(FEEDBACK_139629729)
        assert main(["pipe", str(path), "--phases", "9,8,7,6,5",
                     "--feedback"]) == ExitCode.OK
        assert _lines(capsys) == ["139629729"]

    def test_pipe_deadlock(self, program_file, capsys):
        path = program_file([3, 0, 3, 0, 3, 0, 99])
        rc = main(["pipe", str(path), "--phases", "5,6,7,8,9", "--feedback"])
        assert rc == ExitCode.DEADLOCK
        assert "ERROR" in capsys.readouterr().err

    def test_amp_chain(self, program_file, capsys):
        path = program_file(CHAIN_43210)
        assert main(["amp", str(path), "--show-phases"]) == ExitCode.OK
        assert _lines(capsys) == ["43210", "4,3,2,1,0"]

    def test_amp_feedback(self, program_file, capsys):
        path = program_file(FEEDBACK_139629729)
        assert main(["amp", str(path), "--mode", "feedback"]) == ExitCode.OK
        assert _lines(capsys) == ["139629729"]

    def test_perms(self, capsys):
        assert main(["perms", "3"]) == ExitCode.OK
        assert capsys.readouterr().out.splitlines() == [
            "1 2 3", "1 3 2", "2 1 3", "2 3 1", "3 1 2", "3 2 1",
        ]


# ══════════════════════════════════════════════
# Exit codes
# ══════════════════════════════════════════════

class TestExitCodes:
    def test_missing_file(self, tmp_path, capsys):
        assert main(["run", str(tmp_path / "nope.txt")]) == ExitCode.FILE_NOT_FOUND
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "File not found" in captured.err

    @pytest.mark.parametrize("text,code", [
        ("1,x,99", ExitCode.BAD_FORMAT),
        ("99", ExitCode.BAD_FORMAT),
        ("1,,99", ExitCode.COUNT_MISMATCH),
        ("1105,1,100", ExitCode.IP_OUT_OF_BOUNDS),
        ("4,-1,99", ExitCode.NEGATIVE_READ),
        ("1,0,0,-1,99", ExitCode.NEGATIVE_WRITE),
        ("301,0,0,0,99", ExitCode.INVALID_MODE),
    ])
    def test_error_codes(self, program_file, capsys, text, code):
        path = program_file(text)
        assert main(["run", str(path)]) == code
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "ERROR" in captured.err

    def test_usage_error(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["pipe"])
        assert exc.value.code == ExitCode.USAGE

    def test_no_command(self, capsys):
        assert main([]) == ExitCode.USAGE

    def test_error_logged_when_quiet(self, tmp_path, capsys):
        rc = main(["-q", "run", str(tmp_path / "nope.txt")])
        assert rc == ExitCode.FILE_NOT_FOUND
        assert "File not found" in capsys.readouterr().err

    def test_error_written_to_log_file(self, program_file, tmp_path, capsys):
        path = program_file("4,-1,99")
        log_file = tmp_path / "logs" / "run.log"
        rc = main(["--log-file", str(log_file), "run", str(path)])
        assert rc == ExitCode.NEGATIVE_READ
        text = log_file.read_text(encoding="utf-8")
        assert "| ERROR   |" in text
        assert "Negative address -1 in read" in text
