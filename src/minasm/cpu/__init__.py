"""
Minasm CPU Package
==================

Instruction-set definitions shared by both assembler passes.

Modules:
    i8086: Opcode table, byte-register numbering, directive names and
           statement sizing for the supported 8086-style subset.

Usage:
    from minasm.cpu import OPCODE_TABLE, get_register_code
"""

from minasm.cpu.i8086 import (
    # Core types
    InstructionForm,
    InstructionInfo,
    # Master instruction database
    OPCODE_TABLE,
    MNEMONICS,
    BRANCH_INSTRUCTIONS,
    REGISTER_CODES,
    # Directives
    DATA_DIRECTIVES,
    LOCATION_DIRECTIVES,
    DIRECTIVES,
    BRANCH_MIN_OFFSET,
    BRANCH_MAX_OFFSET,
    # Lookup functions
    get_instruction_info,
    get_register_code,
    get_statement_size,
    is_branch_instruction,
    is_directive,
    is_valid_instruction,
)

__all__ = [
    "InstructionForm",
    "InstructionInfo",
    "OPCODE_TABLE",
    "MNEMONICS",
    "BRANCH_INSTRUCTIONS",
    "REGISTER_CODES",
    "DATA_DIRECTIVES",
    "LOCATION_DIRECTIVES",
    "DIRECTIVES",
    "BRANCH_MIN_OFFSET",
    "BRANCH_MAX_OFFSET",
    "get_instruction_info",
    "get_register_code",
    "get_statement_size",
    "is_branch_instruction",
    "is_directive",
    "is_valid_instruction",
]
