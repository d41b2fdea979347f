"""
Assembly Line Tokenizer
=======================

This module splits raw source lines into Instruction records. The source
language is line oriented: each line holds at most one statement.

Line Syntax
-----------
    [label:]  [mnemonic  [operand1[,operand2]]]  [; comment]

- Everything from the first semicolon onward is a comment.
- A first field ending in a colon is a label; the colon is dropped and the
  label keeps its case as written.
- The next field is the mnemonic, normalised to upper case.
- The next field is the operand token, split at commas and upper-cased.
  Anything after it on the line is ignored.

Tokenization is pure: it builds records and does nothing else. Labels are
entered into the symbol table by pass 1, not here.

Example
-------
>>> from minasm.assembler.lexer import tokenize_line
>>> inst = tokenize_line("start: mov al,bl  ; copy", line_number=1)
>>> inst.label, inst.mnemonic, inst.operand1, inst.operand2
('start', 'MOV', 'AL', 'BL')
"""

from dataclasses import dataclass, field
from typing import Iterable, Iterator, Optional

from minasm.errors import SourceLocation


COMMENT_CHAR = ";"
LABEL_SUFFIX = ":"
OPERAND_SEPARATOR = ","


# =============================================================================
# Instruction Record
# =============================================================================

@dataclass
class Instruction:
    """
    One parsed source line.

    Every source line becomes an Instruction, including blank and
    comment-only lines, so the listing has one row per input line.

    Attributes:
        line_number: 1-based position in the source
        raw_text: The line exactly as read, for listings
        label: Label defined on this line, without its colon
        mnemonic: Upper-case mnemonic or directive name
        operand1: First operand, upper-case
        operand2: Second operand, upper-case
        address: Location counter value, set by pass 1 and rewritten by pass 2
        machine_code: Bytes emitted by pass 2
        filename: Source name for error locations
    """
    line_number: int
    raw_text: str
    label: Optional[str] = None
    mnemonic: Optional[str] = None
    operand1: Optional[str] = None
    operand2: Optional[str] = None
    address: Optional[int] = None
    machine_code: bytes = field(default=b"")
    filename: str = "<input>"

    @property
    def is_empty(self) -> bool:
        """True for blank, comment-only and label-only lines."""
        return self.mnemonic is None

    @property
    def location(self) -> SourceLocation:
        """Return a SourceLocation pointing at the first operand if present."""
        return SourceLocation(self.filename, self.line_number, self.operand_column())

    def operand_column(self) -> int:
        """
        Find the 1-based column where operand1 starts in the raw text.

        Returns 0 if the line has no operand or it cannot be located.
        """
        if not self.operand1:
            return 0
        code = strip_comment(self.raw_text).upper()
        start = 0
        if self.label:
            start = code.find(self.label.upper() + LABEL_SUFFIX) + len(self.label) + 1
        if self.mnemonic:
            start = code.find(self.mnemonic, start) + len(self.mnemonic)
        index = code.find(self.operand1, start)
        return index + 1 if index >= 0 else 0


# =============================================================================
# Tokenizer
# =============================================================================

def strip_comment(line: str) -> str:
    """Remove a trailing ';' comment from a line."""
    return line.split(COMMENT_CHAR, 1)[0]


def split_operands(text: str) -> tuple[Optional[str], Optional[str]]:
    """
    Split operand text into at most two operands.

    The part before the first comma is operand1, the part after it (up to
    any further comma) is operand2. Empty parts become None.
    """
    text = text.strip()
    if not text:
        return None, None

    parts = [part.strip().upper() for part in text.split(OPERAND_SEPARATOR)]
    operand1 = parts[0] or None
    operand2 = parts[1] or None if len(parts) > 1 else None
    return operand1, operand2


def tokenize_line(line: str, line_number: int = 1,
                  filename: str = "<input>") -> Instruction:
    """
    Tokenize a single source line into an Instruction.

    Args:
        line: Raw source text (trailing newline is ignored)
        line_number: 1-based line number
        filename: Source name recorded for error locations

    Returns:
        Instruction with label/mnemonic/operands filled in; address and
        machine_code are left unset.
    """
    raw_text = line.rstrip("\r\n")
    inst = Instruction(line_number=line_number, raw_text=raw_text, filename=filename)

    fields = strip_comment(raw_text).split(None, 1)
    if not fields:
        return inst

    if fields[0].endswith(LABEL_SUFFIX):
        inst.label = fields[0][:-len(LABEL_SUFFIX)] or None
        fields = fields[1].split(None, 1) if len(fields) > 1 else []

    if fields:
        inst.mnemonic = fields[0].upper()
        if len(fields) > 1:
            # Only the first whitespace-delimited token holds operands
            operand_token = fields[1].split(None, 1)[0]
            inst.operand1, inst.operand2 = split_operands(operand_token)

    return inst


class Lexer:
    """
    Tokenizes assembly source into Instruction records.

    Usage:
        lexer = Lexer(source_text, "prog.asm")
        instructions = list(lexer.tokenize())

    Attributes:
        lines: Source lines being tokenized
        filename: Name of the source file (for error reporting)
    """

    def __init__(self, source: str | Iterable[str], filename: str = "<input>"):
        if isinstance(source, str):
            self.lines = source.splitlines()
        else:
            self.lines = list(source)
        self.filename = filename

    def tokenize(self) -> Iterator[Instruction]:
        """Yield one Instruction per source line, numbered from 1."""
        for number, line in enumerate(self.lines, start=1):
            yield tokenize_line(line, number, self.filename)


def tokenize_source(source: str | Iterable[str],
                    filename: str = "<input>") -> list[Instruction]:
    """Convenience wrapper returning the full Instruction list."""
    return list(Lexer(source, filename).tokenize())
