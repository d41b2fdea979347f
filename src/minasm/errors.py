"""
Minasm Error Hierarchy
======================

This module defines the exception hierarchy for the assembler.
All exceptions inherit from MinasmError, allowing callers to catch all
assembler-related errors with a single except clause if desired.

Exception Hierarchy
-------------------
MinasmError (base)
└── AssemblerError (assembler-related)
    ├── InvalidLiteralError - numeric literal cannot be parsed
    └── UndefinedSymbolError - reference to undefined label

Error Policy
------------
Assembly errors are never fatal. The code generator records every error in
an ErrorCollector and keeps going, so a single run reports all problems in
a source file. Permissive behaviors (redefined labels, unknown registers,
unknown mnemonics, wrapped branch offsets) are collected as warnings.

Error messages follow this format:
    filename:line:column: error: description
    source_line_text
        ^ (pointer to error location)
    hint: suggestion for fixing (when available)
"""

from dataclasses import dataclass
from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class MinasmError(Exception):
    """
    Base exception for all assembler errors.

        try:
            assembler.assemble_file("program.asm")
        except MinasmError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in source code for error reporting.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number (1-indexed, 0 when unknown)
    """
    filename: str
    line: int
    column: int = 0

    def __str__(self) -> str:
        """Format as 'filename:line:column' for error messages."""
        if self.column > 0:
            return f"{self.filename}:{self.line}:{self.column}"
        return f"{self.filename}:{self.line}"


# =============================================================================
# Assembler Exceptions
# =============================================================================

class AssemblerError(MinasmError):
    """
    Base exception for all assembler-related errors.

    Attributes:
        message: The error description
        location: Where in the source the error occurred (optional)
        hint: A suggestion for fixing the error (optional)
        source_line: The actual source text at the error location (optional)
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    def __str__(self) -> str:
        # Re-render so context attached after construction is shown
        return self._format_message()

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

        Example output:
            prog.asm:7:8: error: undefined symbol 'LOOPP'
                JS LOOPP
                   ^
            hint: did you mean 'LOOP'?
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")
            if self.location.column > 0:
                padding = " " * (4 + self.location.column - 1)
                parts.append(f"{padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)

    @property
    def line(self) -> int:
        """Source line number, or 0 when the location is unknown."""
        return self.location.line if self.location else 0

    def diagnostic(self) -> str:
        """
        Render a one-line diagnostic naming the line and offending text.

        This is the form written to the errors file:
            line 4: invalid DB value '12Q'
        """
        return f"line {self.line}: {self.message}"


class InvalidLiteralError(AssemblerError):
    """
    Numeric literal that cannot be parsed.

    Raised for a bad ORG, DB or DW operand: malformed digits, or a value
    outside the signed 16-bit range.

    Example:
        DB 12Q      ; Error: invalid DB value '12Q'
    """

    def __init__(
        self,
        literal: str,
        location: Optional[SourceLocation] = None,
        context: Optional[str] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.literal = literal
        self.context = context
        what = f"{context} value" if context else "numeric literal"
        super().__init__(
            f"invalid {what} '{literal}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class UndefinedSymbolError(AssemblerError):
    """
    Reference to a label that was never defined.

    Raised during the second pass when a branch target cannot be resolved.
    The assembler suggests similarly-named symbols to help catch typos.
    """

    def __init__(
        self,
        symbol: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
        similar_symbols: Optional[list[str]] = None,
    ):
        self.symbol = symbol
        self.similar_symbols = similar_symbols or []

        if not hint and self.similar_symbols:
            suggestions = ", ".join(f"'{s}'" for s in self.similar_symbols[:3])
            hint = f"did you mean {suggestions}?"

        super().__init__(
            f"undefined symbol '{symbol}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


# =============================================================================
# Error Collection
# =============================================================================

class ErrorCollector:
    """
    Collects multiple errors for batch reporting.

    The assembler uses this to continue processing after encountering
    an error, collecting all errors before reporting them together.
    There is no error limit: every problem in the source is reported.

    Example:
        collector = ErrorCollector()
        collector.add(UndefinedSymbolError("LOOP", location))

        if collector.has_errors():
            print(collector.report())
    """

    def __init__(self):
        self.errors: list[AssemblerError] = []
        self.warnings: list[str] = []

    def add(self, error: AssemblerError) -> None:
        """Add an error to the collection."""
        self.errors.append(error)

    def add_warning(self, message: str) -> None:
        """Add a warning message."""
        self.warnings.append(message)

    def extend(self, other: "ErrorCollector") -> None:
        """Append all errors and warnings from another collector."""
        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)

    def has_errors(self) -> bool:
        """Return True if any errors have been collected."""
        return len(self.errors) > 0

    def error_count(self) -> int:
        """Return the number of collected errors."""
        return len(self.errors)

    def warning_count(self) -> int:
        """Return the number of collected warnings."""
        return len(self.warnings)

    def diagnostics(self) -> list[str]:
        """Return one-line diagnostics for all errors, in emission order."""
        return [error.diagnostic() for error in self.errors]

    def report(self) -> str:
        """
        Format all errors and warnings for display.

        Returns:
            Formatted string with all errors and warnings
        """
        lines = []

        for error in self.errors:
            lines.append(str(error))
            lines.append("")

        if self.warnings:
            lines.append("Warnings:")
            for warning in self.warnings:
                lines.append(f"  {warning}")

        error_word = "error" if len(self.errors) == 1 else "errors"
        warning_word = "warning" if len(self.warnings) == 1 else "warnings"
        lines.append(
            f"\n{len(self.errors)} {error_word}, {len(self.warnings)} {warning_word}"
        )

        return "\n".join(lines)

    def clear(self) -> None:
        """Clear all collected errors and warnings."""
        self.errors.clear()
        self.warnings.clear()
