"""
Minasm Assembler - Main Interface
=================================

This module provides the Assembler class, the primary interface for
assembling source code. It drives the tokenizer and both code generator
passes, and writes the listing, object, symbol and error files.

Example Usage
-------------
>>> from minasm.assembler import Assembler
>>>
>>> asm = Assembler()
>>> asm.assemble_string('''
...         ORG 10h
... LBL:    DB 5
...         JS LBL
... ''')
b'\\x05x\\xfd'
>>> asm.get_code().hex().upper()
'0578FD'
>>> asm.write_listing("prog.lst")

Command-Line Usage
------------------
    $ minasm prog.asm -o prog.obj -l prog.lst -e prog.err

Options:
    -o, --output FILE      Object file, one hex line per instruction
    -b, --binary FILE      Raw binary object file
    -l, --listing FILE     Listing file
    -e, --errors FILE      Error file (written only if there are errors)
    -s, --symbols FILE     Symbol table file
    -v, --verbose          Verbose output
"""

from pathlib import Path
from typing import Iterable, Optional
import logging

from minasm.assembler.codegen import CodeGenerator
from minasm.assembler.lexer import Instruction
from minasm.assembler.listing import (
    format_listing,
    format_symbols,
    object_bytes,
    object_hex_lines,
)

logger = logging.getLogger(__name__)


class Assembler:
    """
    Main assembler class.

    Assembly never raises for source errors. Every invalid literal and
    undefined symbol is collected; check has_errors() and get_diagnostics()
    after assembling.

    Attributes:
        verbose: If True, log progress at INFO level instead of DEBUG
        listing_header: If True, listings start with the title block
    """

    def __init__(self, verbose: bool = False, listing_header: bool = True):
        """
        Initialize the assembler.

        Args:
            verbose: Enable verbose progress messages
            listing_header: Include the title block in listings
        """
        self._verbose = verbose
        self._listing_header = listing_header
        self._codegen = CodeGenerator()
        self._source_file: Optional[Path] = None

    def _log(self, message: str) -> None:
        logger.log(logging.INFO if self._verbose else logging.DEBUG, message)

    # =========================================================================
    # Assembly Methods
    # =========================================================================

    def assemble_lines(self, lines: Iterable[str], filename: str = "<input>") -> bytes:
        """
        Assemble a sequence of source lines.

        Args:
            lines: Source lines in order
            filename: Virtual filename for error messages

        Returns:
            Generated machine code as bytes
        """
        lines = list(lines)
        self._log(f"Assembling {len(lines)} lines from {filename}...")

        code = self._codegen.generate(lines, filename)

        self._log(f"Generated {len(code)} bytes of code")
        if self.has_errors():
            self._log(f"Assembly produced {len(self.get_diagnostics())} errors")
        return code

    def assemble_string(self, source: str, filename: str = "<input>") -> bytes:
        """
        Assemble source code from a string.

        Args:
            source: Assembly source code
            filename: Virtual filename for error messages

        Returns:
            Generated machine code as bytes
        """
        return self.assemble_lines(source.splitlines(), filename)

    def assemble_file(self, filepath: str | Path) -> bytes:
        """
        Assemble source code from a file.

        Args:
            filepath: Path to assembly source file

        Returns:
            Generated machine code as bytes

        Raises:
            FileNotFoundError: If source file not found
        """
        filepath = Path(filepath)
        self._source_file = filepath

        source = filepath.read_text(encoding="utf-8")
        return self.assemble_string(source, str(filepath))

    # =========================================================================
    # Output Methods
    # =========================================================================

    def get_code(self) -> bytes:
        """Get the generated machine code."""
        return self._codegen.get_code()

    def get_instructions(self) -> list[Instruction]:
        """Get the assembled Instruction records in source order."""
        return self._codegen.get_instructions()

    def get_origin(self) -> int:
        """Get the segment origin code generation started from."""
        return self._codegen.get_origin()

    def get_symbols(self) -> dict[str, int]:
        """
        Get the symbol table.

        Returns:
            Dictionary mapping label names to addresses
        """
        return self._codegen.get_symbols()

    def get_listing(self) -> str:
        """
        Get the assembly listing as a string.

        Returns:
            Listing with line numbers, addresses, code bytes, labels and source
        """
        return format_listing(self._codegen.get_listing_lines(), header=self._listing_header)

    def get_object_lines(self) -> list[str]:
        """Get one hex line per instruction that emitted code."""
        return object_hex_lines(self.get_instructions())

    def write_listing(self, filepath: str | Path) -> None:
        """Write the assembly listing file."""
        Path(filepath).write_text(self.get_listing(), encoding="utf-8")
        self._log(f"Wrote listing to {filepath}")

    def write_object(self, filepath: str | Path) -> None:
        """
        Write the object file as hex text.

        Each instruction that emitted code contributes one upper-case hex line.
        """
        lines = self.get_object_lines()
        Path(filepath).write_text("".join(f"{line}\n" for line in lines), encoding="utf-8")
        self._log(f"Wrote {len(lines)} object lines to {filepath}")

    def write_binary(self, filepath: str | Path) -> None:
        """Write the raw machine code byte stream."""
        code = object_bytes(self.get_instructions())
        Path(filepath).write_bytes(code)
        self._log(f"Wrote {len(code)} bytes to {filepath}")

    def write_symbols(self, filepath: str | Path) -> None:
        """Write the symbol table file."""
        Path(filepath).write_text(format_symbols(self.get_symbols()), encoding="utf-8")
        self._log(f"Wrote symbols to {filepath}")

    def write_errors(self, filepath: str | Path) -> bool:
        """
        Write the diagnostics file, if there is anything to write.

        A clean run removes any errors file left by an earlier run.

        Returns:
            True if the file was written
        """
        diagnostics = self.get_diagnostics()
        if not diagnostics:
            Path(filepath).unlink(missing_ok=True)
            return False
        Path(filepath).write_text("".join(f"{d}\n" for d in diagnostics), encoding="utf-8")
        self._log(f"Wrote {len(diagnostics)} errors to {filepath}")
        return True

    # =========================================================================
    # Error Handling
    # =========================================================================

    def has_errors(self) -> bool:
        """Check if assembly produced errors."""
        return self._codegen.has_errors()

    def get_diagnostics(self) -> list[str]:
        """Get one-line error messages in emission order."""
        return self._codegen.get_diagnostics()

    def get_warnings(self) -> list[str]:
        """Get warning messages in emission order."""
        return self._codegen.get_warnings()

    def get_error_report(self) -> str:
        """Get formatted error report with source context."""
        return self._codegen.get_error_report()


# =============================================================================
# Convenience Functions
# =============================================================================

def assemble(source: str, filename: str = "<input>") -> bytes:
    """
    Convenience function to assemble source code.

    Args:
        source: Assembly source code
        filename: Virtual filename for errors

    Returns:
        Generated machine code
    """
    asm = Assembler()
    return asm.assemble_string(source, filename)


def assemble_file(filepath: str | Path) -> bytes:
    """
    Convenience function to assemble a file.

    Args:
        filepath: Path to source file

    Returns:
        Generated machine code
    """
    asm = Assembler()
    return asm.assemble_file(filepath)
