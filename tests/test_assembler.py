# =============================================================================
# test_assembler.py - Full Assembler Integration Tests
# =============================================================================
# End-to-end tests for the Assembler facade: source in, object code,
# listing, symbols and error files out.
#
# Test coverage includes:
#   - Complete program assembly
#   - Output file writers
#   - Error reporting with line numbers
#   - Convenience functions
# =============================================================================

import pytest

from minasm import Assembler
from minasm.assembler import assemble, assemble_file


PROGRAM = """\
; demo program
        SEGMENT
        ORG 100h
START:  MOV AL,BL      ; copy
        OR  CL,DH
LOOP:   MUL BH
        JS  LOOP
        JP  DONE
DONE:   DB  0FFh
COUNT:  DW  1234h
        ENDS
        END
"""


# =============================================================================
# Full Assembly Pipeline Tests
# =============================================================================

class TestFullPipeline:
    """Test the complete assembly pipeline from source to code."""

    def test_minimal_program(self):
        """Assemble a one-line program."""
        asm = Assembler()
        assert asm.assemble_string("START: MOV AL,BL") == bytes([0x88, 0xD8])
        assert asm.get_symbols() == {"START": 0}

    def test_complete_program(self):
        """Assemble a program using every statement kind."""
        asm = Assembler()
        code = asm.assemble_string(PROGRAM)
        assert code.hex().upper() == "88D808F1F6E778FC7A00FF3412"
        assert not asm.has_errors()
        assert asm.get_origin() == 0x100

    def test_symbols(self):
        """Labels are collected with their addresses."""
        asm = Assembler()
        asm.assemble_string(PROGRAM)
        assert asm.get_symbols() == {
            "START": 0x100,
            "LOOP": 0x104,
            "DONE": 0x10A,
            "COUNT": 0x10B,
        }

    def test_object_lines(self):
        """Each emitting instruction yields one hex line."""
        asm = Assembler()
        asm.assemble_string(PROGRAM)
        assert asm.get_object_lines() == [
            "88D8", "08F1", "F6E7", "78FC", "7A00", "FF", "3412",
        ]

    def test_instructions_cover_every_line(self):
        """Every source line is kept as an Instruction."""
        asm = Assembler()
        asm.assemble_string(PROGRAM)
        assert len(asm.get_instructions()) == len(PROGRAM.splitlines())

    def test_reassembly_resets_state(self):
        """A second assembly does not inherit earlier symbols or errors."""
        asm = Assembler()
        asm.assemble_string("JS NOWHERE")
        assert asm.has_errors()
        asm.assemble_string("X: DB 1")
        assert not asm.has_errors()
        assert asm.get_symbols() == {"X": 0}


# =============================================================================
# Error Reporting Tests
# =============================================================================

class TestErrorReporting:
    """Test error collection and reporting."""

    def test_diagnostics(self):
        """Diagnostics name the line and offending text."""
        asm = Assembler()
        asm.assemble_string("DB 1\nJS UNKNOWN\nDW xyz")
        assert asm.get_diagnostics() == [
            "line 2: undefined symbol 'UNKNOWN'",
            "line 3: invalid DW value 'XYZ'",
        ]

    def test_error_report_has_context(self):
        """The report shows location, source line and hint."""
        asm = Assembler()
        asm.assemble_string("LOOP: MUL CL\nJS LOPP", filename="prog.asm")
        report = asm.get_error_report()
        assert "prog.asm:2:4: error: undefined symbol 'LOPP'" in report
        assert "    JS LOPP" in report
        assert "did you mean 'LOOP'?" in report
        assert "1 error, 0 warnings" in report

    def test_warnings_are_not_diagnostics(self):
        """Permissive behaviors produce warnings only."""
        asm = Assembler()
        asm.assemble_string("NOP\nMOV AX,BL")
        assert asm.get_diagnostics() == []
        assert len(asm.get_warnings()) == 2


# =============================================================================
# Output File Tests
# =============================================================================

class TestOutputFiles:
    """Test the output file writers."""

    def test_write_object(self, tmp_path):
        """Object file holds one hex line per emitting instruction."""
        asm = Assembler()
        asm.assemble_string("MOV AL,BL\nEND\nDB 5")
        out = tmp_path / "prog.obj"
        asm.write_object(out)
        assert out.read_text() == "88D8\n05\n"

    def test_write_binary(self, tmp_path):
        """Binary file holds the raw byte stream."""
        asm = Assembler()
        asm.assemble_string(PROGRAM)
        out = tmp_path / "prog.bin"
        asm.write_binary(out)
        assert out.read_bytes() == asm.get_code()

    def test_write_listing(self, tmp_path):
        """Listing starts with the title block and has one row per line."""
        asm = Assembler()
        asm.assemble_string("ORG 10h\nLBL: DB 5\nJS LBL")
        out = tmp_path / "prog.lst"
        asm.write_listing(out)
        lines = out.read_text().splitlines()
        assert lines[0] == "=" * 95
        assert lines[1] == "[LINE]  LOC   MACHINE CODE     LABEL     SOURCE"
        assert lines[2] == "=" * 95
        assert len(lines) == 6
        assert lines[4].startswith("[2  ]  0010  05")

    def test_listing_without_header(self):
        """The title block can be turned off."""
        asm = Assembler(listing_header=False)
        asm.assemble_string("DB 1")
        assert asm.get_listing().startswith("[1  ]  0000  01")

    def test_write_symbols(self, tmp_path):
        """Symbol file lists names sorted with hex addresses."""
        asm = Assembler()
        asm.assemble_string(PROGRAM)
        out = tmp_path / "prog.sym"
        asm.write_symbols(out)
        lines = out.read_text().splitlines()
        assert lines[0].startswith("#")
        assert lines[2:] == ["COUNT $010B", "DONE $010A", "LOOP $0104", "START $0100"]

    def test_errors_file_skipped_without_errors(self, tmp_path):
        """No errors file is written for a clean run."""
        asm = Assembler()
        asm.assemble_string("DB 1")
        out = tmp_path / "prog.err"
        assert asm.write_errors(out) is False
        assert not out.exists()

    def test_errors_file_removed_on_clean_run(self, tmp_path):
        """A stale errors file is deleted when there is nothing to report."""
        out = tmp_path / "prog.err"
        out.write_text("line 1: undefined symbol 'OLD'\n")
        asm = Assembler()
        asm.assemble_string("DB 1")
        assert asm.write_errors(out) is False
        assert not out.exists()

    def test_errors_file_written(self, tmp_path):
        """Errors file lists diagnostics one per line."""
        asm = Assembler()
        asm.assemble_string("JS UNKNOWN")
        out = tmp_path / "prog.err"
        assert asm.write_errors(out) is True
        assert out.read_text() == "line 1: undefined symbol 'UNKNOWN'\n"


# =============================================================================
# File Input and Convenience Function Tests
# =============================================================================

class TestFileInput:
    """Test assembling from files and the module-level helpers."""

    def test_assemble_file(self, tmp_path):
        """Assembler reads source files."""
        src = tmp_path / "prog.asm"
        src.write_text(PROGRAM)
        asm = Assembler()
        code = asm.assemble_file(src)
        assert code == Assembler().assemble_string(PROGRAM)

    def test_missing_file(self, tmp_path):
        """A missing source file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            Assembler().assemble_file(tmp_path / "missing.asm")

    def test_assemble_function(self):
        """assemble() returns machine code."""
        assert assemble("MUL CL") == bytes([0xF6, 0xE1])

    def test_assemble_file_function(self, tmp_path):
        """assemble_file() returns machine code."""
        src = tmp_path / "prog.asm"
        src.write_text("DW 1\n")
        assert assemble_file(src) == bytes([0x01, 0x00])
