"""
Intcode VM — Program Loader Tests
"""

import pytest

from intcode.errors import (
    ExitCode, ProgramCountMismatch, ProgramFormatError, ProgramNotFound,
    ProgramTooLarge,
)
from intcode.loader import load_program, parse_program


class TestParse:
    def test_basic(self):
        assert parse_program("1,0,0,0,99") == [1, 0, 0, 0, 99]

    def test_whitespace_and_newline(self):
        assert parse_program(" 1, -2 ,3\n") == [1, -2, 3]

    def test_sixty_four_bit_values(self):
        assert parse_program("104,1125899906842624,99")[1] == 1125899906842624

    @pytest.mark.parametrize("text", ["", "   \n", "99", "1,x,3", "1,2.5,3", "1,0x10"])
    def test_format_errors(self, text):
        with pytest.raises(ProgramFormatError) as exc:
            parse_program(text)
        assert exc.value.exit_code == ExitCode.BAD_FORMAT

    def test_out_of_range_value(self):
        with pytest.raises(ProgramFormatError):
            parse_program(f"1,{2**63}")

    @pytest.mark.parametrize("text,expected,parsed", [
        ("1,,3", 3, 2),
        ("1,2,", 3, 2),
        (",1", 2, 1),
    ])
    def test_count_mismatch(self, text, expected, parsed):
        with pytest.raises(ProgramCountMismatch) as exc:
            parse_program(text)
        assert exc.value.expected == expected
        assert exc.value.parsed == parsed
        assert exc.value.exit_code == ExitCode.COUNT_MISMATCH

    def test_too_large(self):
        with pytest.raises(ProgramTooLarge) as exc:
            parse_program("1,2,3", limit=2)
        assert exc.value.exit_code == ExitCode.OUT_OF_MEMORY


class TestLoadFile:
    def test_load(self, program_file):
        path = program_file("3,9,8,9,10,9,4,9,99,-1,8\n")
        assert load_program(path) == [3, 9, 8, 9, 10, 9, 4, 9, 99, -1, 8]

    def test_load_str_path(self, program_file):
        path = program_file([1, 2, 3])
        assert load_program(str(path)) == [1, 2, 3]

    def test_missing_file(self, tmp_path):
        with pytest.raises(ProgramNotFound) as exc:
            load_program(tmp_path / "nope.txt")
        assert exc.value.exit_code == ExitCode.FILE_NOT_FOUND

    def test_directory(self, tmp_path):
        with pytest.raises(ProgramNotFound):
            load_program(tmp_path)

    def test_binary_garbage(self, tmp_path):
        path = tmp_path / "junk.bin"
        path.write_bytes(b"\xff\xfe\x00\x81,\x90")
        with pytest.raises(ProgramFormatError):
            load_program(path)
