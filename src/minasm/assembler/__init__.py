"""
Two-Pass Assembler
==================

This package assembles a minimal 8086-style instruction set into machine
code bytes, a formatted listing and a list of diagnostics.

Main Components
---------------
- **Assembler**: Main class that drives assembly and writes output files
- **Lexer**: Splits source lines into Instruction records
- **SymbolTable**: Label name to address mapping
- **CodeGenerator**: Runs pass 1 (addresses) and pass 2 (encoding)
- **parse_literal**: Decimal and hexadecimal literal parser

Assembly Process
----------------
1. **Tokenizing (Lexer)**: one Instruction per source line
2. **Pass 1 (assign_addresses)**: location counter, ORG/SEGMENT handling,
   label addresses
3. **Pass 2 (encode)**: operand resolution, opcode emission, listing rows

Example Usage
-------------
>>> from minasm.assembler import Assembler
>>> asm = Assembler()
>>> asm.assemble_string("START: MOV AL,BL").hex().upper()
'88D8'

Supported Statements
--------------------
- Instructions: MOV, OR (register, register), MUL (register), JS, JP (label)
- Data: DB, DW
- Location: ORG, SEGMENT, ENDS, END
- Labels (``name:``) and ``;`` comments
"""

from minasm.assembler.assembler import Assembler, assemble, assemble_file
from minasm.assembler.lexer import Instruction, Lexer, tokenize_line, tokenize_source
from minasm.assembler.literals import parse_literal, try_parse_literal
from minasm.assembler.symbols import Symbol, SymbolTable
from minasm.assembler.codegen import (
    AssemblerState,
    CodeGenerator,
    EncodeResult,
    assign_addresses,
    encode,
)
from minasm.assembler.listing import (
    format_listing,
    object_bytes,
    object_hex_lines,
    render_listing_line,
)

__all__ = [
    # Main class and functions
    "Assembler",
    "assemble",
    "assemble_file",
    # Tokenizer
    "Instruction",
    "Lexer",
    "tokenize_line",
    "tokenize_source",
    # Literals
    "parse_literal",
    "try_parse_literal",
    # Symbols
    "Symbol",
    "SymbolTable",
    # Passes
    "AssemblerState",
    "CodeGenerator",
    "EncodeResult",
    "assign_addresses",
    "encode",
    # Listing
    "format_listing",
    "object_bytes",
    "object_hex_lines",
    "render_listing_line",
]
