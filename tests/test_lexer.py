# =============================================================================
# test_lexer.py - Line Tokenizer Unit Tests
# =============================================================================
# Tests for splitting source lines into Instruction records.
#
# Test coverage includes:
#   - Labels, mnemonics and operand splitting
#   - Case normalisation
#   - Comments, blank lines and label-only lines
#   - Line numbering and operand column tracking
# =============================================================================

import pytest
from minasm.assembler.lexer import Instruction, Lexer, tokenize_line, tokenize_source


# =============================================================================
# Basic Line Tests
# =============================================================================

class TestBasicLines:
    """Test tokenization of simple statements."""

    def test_label_mnemonic_two_operands(self):
        """Label, mnemonic and both operands are split out."""
        inst = tokenize_line("START: MOV AL,BL")
        assert inst.label == "START"
        assert inst.mnemonic == "MOV"
        assert inst.operand1 == "AL"
        assert inst.operand2 == "BL"

    def test_single_operand(self):
        """A token without a comma is operand1 only."""
        inst = tokenize_line("    JS LOOP")
        assert inst.label is None
        assert inst.mnemonic == "JS"
        assert inst.operand1 == "LOOP"
        assert inst.operand2 is None

    def test_no_operands(self):
        """A bare mnemonic has no operands."""
        inst = tokenize_line("  END")
        assert inst.mnemonic == "END"
        assert inst.operand1 is None
        assert inst.operand2 is None

    def test_address_and_code_unset(self):
        """Tokenizing does not assign addresses or code."""
        inst = tokenize_line("DB 5")
        assert inst.address is None
        assert inst.machine_code == b""

    def test_returns_instruction(self):
        """Result is an Instruction record."""
        assert isinstance(tokenize_line("MUL CL"), Instruction)


# =============================================================================
# Normalisation Tests
# =============================================================================

class TestNormalisation:
    """Test case handling and whitespace around operands."""

    def test_mnemonic_and_operands_upper_cased(self):
        """Mnemonic and operands are upper-cased."""
        inst = tokenize_line("mov al,bl")
        assert inst.mnemonic == "MOV"
        assert inst.operand1 == "AL"
        assert inst.operand2 == "BL"

    def test_label_keeps_case(self):
        """Labels keep their case as written."""
        inst = tokenize_line("loopTop: mul cl")
        assert inst.label == "loopTop"

    def test_operands_end_at_whitespace(self):
        """Only the token after the mnemonic is read as operands."""
        inst = tokenize_line("JS LBL EXTRA")
        assert inst.operand1 == "LBL"
        assert inst.operand2 is None

    def test_space_after_comma_ends_token(self):
        """Text after a space following the comma is not an operand."""
        inst = tokenize_line("OR CL, DH")
        assert inst.operand1 == "CL"
        assert inst.operand2 is None

    def test_tabs(self):
        """Tabs separate fields like spaces."""
        inst = tokenize_line("L1:\tDW\t1234h")
        assert inst.label == "L1"
        assert inst.mnemonic == "DW"
        assert inst.operand1 == "1234H"

    def test_extra_operands_ignored(self):
        """Only the first two comma-separated parts are kept."""
        inst = tokenize_line("MOV AL,BL,CL")
        assert inst.operand1 == "AL"
        assert inst.operand2 == "BL"

    def test_trailing_comma(self):
        """An empty second operand is treated as absent."""
        inst = tokenize_line("MOV AL,")
        assert inst.operand1 == "AL"
        assert inst.operand2 is None


# =============================================================================
# Comment and Empty Line Tests
# =============================================================================

class TestCommentsAndEmptyLines:
    """Test comment stripping and placeholder lines."""

    def test_comment_stripped(self):
        """Everything from ';' onward is ignored."""
        inst = tokenize_line("MUL BH ; multiply, then store")
        assert inst.mnemonic == "MUL"
        assert inst.operand1 == "BH"
        assert inst.operand2 is None

    def test_empty_line(self):
        """Empty lines produce an empty placeholder."""
        inst = tokenize_line("")
        assert inst.is_empty
        assert inst.label is None
        assert inst.operand1 is None

    def test_comment_only_line(self):
        """Comment-only lines keep their raw text but no fields."""
        inst = tokenize_line("; just a comment")
        assert inst.is_empty
        assert inst.raw_text == "; just a comment"

    def test_label_only_line(self):
        """A label on its own has no mnemonic."""
        inst = tokenize_line("HERE:")
        assert inst.label == "HERE"
        assert inst.mnemonic is None
        assert inst.is_empty

    def test_raw_text_without_newline(self):
        """Trailing newlines are dropped from the raw text."""
        inst = tokenize_line("  DB 1\n")
        assert inst.raw_text == "  DB 1"


# =============================================================================
# Source Tokenization Tests
# =============================================================================

class TestLexer:
    """Test tokenizing whole sources."""

    def test_line_numbers(self):
        """Lines are numbered from 1 in source order."""
        insts = tokenize_source("DB 1\n\nDW 2")
        assert [i.line_number for i in insts] == [1, 2, 3]
        assert insts[1].is_empty

    def test_accepts_line_list(self):
        """A list of lines is accepted as well as a string."""
        insts = list(Lexer(["MOV AL,BL", "END"], "prog.asm").tokenize())
        assert len(insts) == 2
        assert insts[0].filename == "prog.asm"

    @pytest.mark.parametrize("line,column", [
        ("    JS LOOP", 8),
        ("start: JS start", 11),
        ("DB 5", 4),
        ("END", 0),
    ])
    def test_operand_column(self, line, column):
        """Operand column points at operand1 in the raw text."""
        assert tokenize_line(line).operand_column() == column

    def test_location(self):
        """Location carries filename and line number."""
        inst = tokenize_line("JS X", line_number=7, filename="t.asm")
        assert inst.location.filename == "t.asm"
        assert inst.location.line == 7
