"""
Minimal 8086-Style Instruction Set Definitions
==============================================

This module is the single source of truth for the instruction subset the
assembler understands. Both passes consult it: pass 1 for sizes, pass 2 for
opcodes and operand encoding.

Instruction Forms
-----------------
| Form          | Mnemonics | Encoding                               |
|---------------|-----------|----------------------------------------|
| REG_REG       | MOV, OR   | opcode, 0xC0 | (src << 3) | dst        |
| REG           | MUL       | opcode, 0xE0 | reg                     |
| RELATIVE      | JS, JP    | opcode, signed 8-bit offset            |

Every form encodes to exactly two bytes. Branch offsets are relative to the
address of the following instruction (current address + 2).

Registers
---------
Only the eight byte registers are modelled, numbered the way the 8086
ModR/M reg field numbers them:

    AL=0  CL=1  DL=2  BL=3  AH=4  CH=5  DH=6  BH=7
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional


# =============================================================================
# Instruction Forms
# =============================================================================

class InstructionForm(Enum):
    """Operand shape of an instruction, which selects its encoder."""
    REG_REG = auto()    # two byte registers, ModR/M mod=11
    REG = auto()        # one byte register, ModR/M with fixed /digit
    RELATIVE = auto()   # 8-bit PC-relative branch

    def __str__(self) -> str:
        return self.name.lower().replace("_", "-")


@dataclass(frozen=True)
class InstructionInfo:
    """
    Encoding information for one mnemonic.

    Attributes:
        mnemonic: Upper-case mnemonic
        opcode: First encoded byte
        form: Operand shape
        modrm_base: Fixed bits OR-ed into the ModR/M byte (unused for branches)
        size: Total encoded size in bytes
    """
    mnemonic: str
    opcode: int
    form: InstructionForm
    modrm_base: int = 0
    size: int = 2


# =============================================================================
# Master Instruction Table
# =============================================================================

OPCODE_TABLE: dict[str, InstructionInfo] = {
    "MOV": InstructionInfo("MOV", 0x88, InstructionForm.REG_REG, modrm_base=0xC0),
    "OR":  InstructionInfo("OR", 0x08, InstructionForm.REG_REG, modrm_base=0xC0),
    "MUL": InstructionInfo("MUL", 0xF6, InstructionForm.REG, modrm_base=0xE0),
    "JS":  InstructionInfo("JS", 0x78, InstructionForm.RELATIVE),
    "JP":  InstructionInfo("JP", 0x7A, InstructionForm.RELATIVE),
}

MNEMONICS = frozenset(OPCODE_TABLE)

BRANCH_INSTRUCTIONS = frozenset(
    name for name, info in OPCODE_TABLE.items()
    if info.form is InstructionForm.RELATIVE
)


# =============================================================================
# Registers
# =============================================================================

REGISTER_CODES: dict[str, int] = {
    "AL": 0, "CL": 1, "DL": 2, "BL": 3,
    "AH": 4, "CH": 5, "DH": 6, "BH": 7,
}


# =============================================================================
# Directives
# =============================================================================

# Data directives and the number of bytes each reserves
DATA_DIRECTIVES: dict[str, int] = {
    "DB": 1,
    "DW": 2,
}

# Directives that only move or mark the location counter
LOCATION_DIRECTIVES = frozenset({"ORG", "SEGMENT", "ENDS", "END"})

DIRECTIVES = frozenset(DATA_DIRECTIVES) | LOCATION_DIRECTIVES

# Short branches reach this far from the following instruction
BRANCH_MIN_OFFSET = -128
BRANCH_MAX_OFFSET = 127


# =============================================================================
# Lookup Functions
# =============================================================================

def get_instruction_info(mnemonic: str) -> Optional[InstructionInfo]:
    """Return encoding information for a mnemonic, or None if unknown."""
    return OPCODE_TABLE.get(mnemonic.upper())


def is_valid_instruction(mnemonic: str) -> bool:
    """Check whether a mnemonic is a machine instruction."""
    return mnemonic.upper() in OPCODE_TABLE


def is_directive(mnemonic: str) -> bool:
    """Check whether a mnemonic is an assembler directive."""
    return mnemonic.upper() in DIRECTIVES


def is_branch_instruction(mnemonic: str) -> bool:
    """Check whether a mnemonic is a relative branch."""
    return mnemonic.upper() in BRANCH_INSTRUCTIONS


def get_register_code(name: Optional[str]) -> Optional[int]:
    """
    Return the 3-bit register number for a byte register name.

    Returns None for anything that is not one of the eight byte registers;
    callers decide how to treat that.
    """
    if not name:
        return None
    return REGISTER_CODES.get(name.strip().upper())


def get_statement_size(mnemonic: Optional[str]) -> int:
    """
    Return the number of bytes a statement occupies.

    Instructions are fixed width, DB/DW reserve one and two bytes, and
    location directives, blank lines and unknown mnemonics occupy nothing.
    """
    if not mnemonic:
        return 0
    mnemonic = mnemonic.upper()
    info = OPCODE_TABLE.get(mnemonic)
    if info is not None:
        return info.size
    return DATA_DIRECTIVES.get(mnemonic, 0)
