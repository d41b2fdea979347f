"""
Minasm - Two-Pass Assembler for a Minimal 8086-Style Instruction Set
====================================================================

This package translates symbolic assembly source into machine code bytes,
a formatted listing and diagnostics.

Main Components
---------------
- **assembler**: Tokenizer, symbol table and the two assembly passes
- **cpu**: Opcode table and register numbering
- **cli**: The ``minasm`` command-line tool

Quick Start
-----------
    >>> from minasm import Assembler
    >>> asm = Assembler()
    >>> code = asm.assemble_file("prog.asm")
    >>> asm.write_object("prog.obj")
    >>> asm.write_listing("prog.lst")

Or from the command line:
    $ minasm prog.asm -l prog.lst
"""

__version__ = "1.0.0"

from minasm.assembler import Assembler
from minasm.errors import (
    MinasmError,
    AssemblerError,
    InvalidLiteralError,
    UndefinedSymbolError,
    ErrorCollector,
    SourceLocation,
)

__all__ = [
    "__version__",
    "Assembler",
    "MinasmError",
    "AssemblerError",
    "InvalidLiteralError",
    "UndefinedSymbolError",
    "ErrorCollector",
    "SourceLocation",
]
