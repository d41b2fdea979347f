"""
Two-Pass Code Generator
=======================

This module turns tokenized Instructions into machine code. It implements
a classic two-pass assembly process:

Pass 1 (Address Assignment)
---------------------------
- Walk all instructions in source order with a location counter
- ORG sets the counter and segment origin; SEGMENT resets both to zero
- Give every line the address of its first byte
- Enter labels into the symbol table at that address
- Advance by the statement size (DB=1, DW=2, instructions=2, else 0)

Pass 2 (Resolve & Encode)
-------------------------
- Restart the counter at the segment origin left by pass 1
- Resolve branch targets and data operands through the symbol table
- Emit opcode and operand bytes for each instruction
- Rewrite each line's address with the pass-2 counter
- Render one listing row per line

Both passes are plain functions over explicit state so they can be run
and tested independently. Errors never stop a pass: they are collected and
the offending line emits nothing (bad data) or uses address 0 (undefined
branch target).
"""

from dataclasses import dataclass, field
from typing import Iterable, Optional
import logging
import struct

from minasm.errors import (
    ErrorCollector,
    InvalidLiteralError,
    UndefinedSymbolError,
)
from minasm.assembler.lexer import Instruction, tokenize_source
from minasm.assembler.literals import parse_literal
from minasm.assembler.symbols import ADDRESS_MASK, SymbolTable
from minasm.assembler.listing import render_listing_line
from minasm.cpu import (
    BRANCH_MAX_OFFSET,
    BRANCH_MIN_OFFSET,
    DATA_DIRECTIVES,
    InstructionForm,
    InstructionInfo,
    get_instruction_info,
    get_register_code,
    get_statement_size,
    is_directive,
    is_valid_instruction,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Assembler State
# =============================================================================

@dataclass
class AssemblerState:
    """
    Mutable state threaded through both passes of one run.

    Attributes:
        location_counter: Address of the next byte to be placed
        segment_origin: Base address set by ORG/SEGMENT
        errors: Errors and warnings from either pass, in emission order
    """
    location_counter: int = 0
    segment_origin: int = 0
    errors: ErrorCollector = field(default_factory=ErrorCollector)

    @property
    def diagnostics(self) -> list[str]:
        """One-line error messages in emission order."""
        return self.errors.diagnostics()

    def advance(self, size: int) -> None:
        """Move the location counter forward, wrapping at 64K."""
        self.location_counter = (self.location_counter + size) & ADDRESS_MASK

    def warn(self, inst: Instruction, message: str) -> None:
        """Record a warning for a source line."""
        text = f"line {inst.line_number}: {message}"
        logger.warning(text)
        self.errors.add_warning(text)


@dataclass
class EncodeResult:
    """
    Output of pass 2.

    Attributes:
        code: Concatenated machine code of all lines
        listing: One rendered listing row per line
        diagnostics: One-line error messages from the run
    """
    code: bytes
    listing: list[str]
    diagnostics: list[str]


# =============================================================================
# Pass 1: Address Assignment
# =============================================================================

def assign_addresses(
    lines: Iterable[str] | Iterable[Instruction],
    state: Optional[AssemblerState] = None,
    filename: str = "<input>",
) -> tuple[list[Instruction], SymbolTable, AssemblerState]:
    """
    First pass: give every line an address and collect label addresses.

    Args:
        lines: Raw source lines, or Instructions already tokenized
        state: State to update; a fresh one is created when omitted
        filename: Source name used when tokenizing raw lines

    Returns:
        (instructions, symbols, state) where state.segment_origin holds the
        origin pass 2 must start from
    """
    lines = list(lines)
    if lines and isinstance(lines[0], Instruction):
        instructions = lines
    else:
        instructions = tokenize_source(lines, filename)

    if state is None:
        state = AssemblerState()
    state.location_counter = 0
    state.segment_origin = 0
    symbols = SymbolTable()

    for inst in instructions:
        mnemonic = inst.mnemonic

        if mnemonic == "SEGMENT":
            state.location_counter = 0
            state.segment_origin = 0
            inst.address = 0

        elif mnemonic == "ORG":
            try:
                origin = parse_literal(inst.operand1, inst.location, context="ORG")
            except InvalidLiteralError as e:
                e.source_line = inst.raw_text
                state.errors.add(e)
                inst.address = state.location_counter
            else:
                state.location_counter = origin & ADDRESS_MASK
                state.segment_origin = state.location_counter
                inst.address = state.location_counter

        else:
            inst.address = state.location_counter
            if mnemonic and not (is_valid_instruction(mnemonic) or is_directive(mnemonic)):
                state.warn(inst, f"unknown mnemonic '{mnemonic}', no code generated")
            state.advance(get_statement_size(mnemonic))

        if inst.label:
            previous = symbols.define(inst.label, inst.address, inst.location)
            if previous is not None:
                state.warn(
                    inst,
                    f"label '{inst.label}' redefined "
                    f"(was ${previous.address:04X}, now ${inst.address:04X})",
                )

    symbols.origin = state.segment_origin
    symbols.pass1_errors = ErrorCollector()
    symbols.pass1_errors.extend(state.errors)

    logger.debug(
        f"Pass 1: {len(instructions)} lines, {len(symbols)} symbols, "
        f"origin ${state.segment_origin:04X}"
    )
    return instructions, symbols, state


# =============================================================================
# Pass 2: Resolve & Encode
# =============================================================================

def encode(
    instructions: list[Instruction],
    symbols: SymbolTable,
    state: Optional[AssemblerState] = None,
) -> EncodeResult:
    """
    Second pass: resolve operands and emit machine code.

    Each Instruction's machine_code and address are overwritten, so running
    this again on the same input gives identical results.

    Args:
        instructions: Output of assign_addresses()
        symbols: Symbol table built by assign_addresses()
        state: State from pass 1; supplies the starting segment origin and
               receives any errors. When omitted, a fresh state is seeded
               from the origin and errors pass 1 left on the symbol table.

    Returns:
        EncodeResult with the byte stream, listing rows and diagnostics
    """
    if state is None:
        state = AssemblerState(segment_origin=symbols.origin)
        state.errors.extend(symbols.pass1_errors)
    state.location_counter = state.segment_origin

    code = bytearray()
    listing: list[str] = []

    for inst in instructions:
        mnemonic = inst.mnemonic
        emitted = b""

        if mnemonic == "ORG":
            # An invalid origin was already reported by pass 1
            try:
                origin = parse_literal(inst.operand1)
            except InvalidLiteralError:
                pass
            else:
                state.location_counter = origin & ADDRESS_MASK

        elif mnemonic == "SEGMENT":
            state.location_counter = 0

        elif mnemonic in DATA_DIRECTIVES:
            emitted = _encode_data(inst, symbols, state)

        elif mnemonic is not None:
            info = get_instruction_info(mnemonic)
            if info is not None:
                emitted = _encode_instruction(inst, info, symbols, state)

        inst.address = state.location_counter
        inst.machine_code = emitted
        state.advance(len(emitted))
        code.extend(emitted)
        listing.append(render_listing_line(inst))

    logger.debug(f"Pass 2: {len(code)} bytes, {state.errors.error_count()} errors")
    return EncodeResult(bytes(code), listing, state.diagnostics)


def _encode_data(inst: Instruction, symbols: SymbolTable,
                 state: AssemblerState) -> bytes:
    """Emit a DB byte or a little-endian DW word, or nothing on error."""
    value = _resolve_data_operand(inst, symbols, state)
    if value is None:
        return b""
    if inst.mnemonic == "DB":
        return bytes([value & 0xFF])
    return struct.pack("<H", value & 0xFFFF)


def _resolve_data_operand(inst: Instruction, symbols: SymbolTable,
                          state: AssemblerState) -> Optional[int]:
    """
    Resolve a DB/DW operand as a literal, falling back to a label.

    Returns None after recording an InvalidLiteralError when neither works.
    """
    try:
        return parse_literal(inst.operand1, inst.location, context=inst.mnemonic)
    except InvalidLiteralError as e:
        symbol = symbols.lookup(inst.operand1) if inst.operand1 else None
        if symbol is not None:
            return symbol.address
        e.source_line = inst.raw_text
        state.errors.add(e)
        return None


def _encode_instruction(inst: Instruction, info: InstructionInfo,
                        symbols: SymbolTable, state: AssemblerState) -> bytes:
    """Dispatch on instruction form and return the encoded bytes."""
    if info.form is InstructionForm.REG_REG:
        dst = _register(inst, inst.operand1, state)
        src = _register(inst, inst.operand2, state)
        return bytes([info.opcode, info.modrm_base | (src << 3) | dst])

    if info.form is InstructionForm.REG:
        reg = _register(inst, inst.operand1, state)
        return bytes([info.opcode, info.modrm_base | reg])

    return bytes([info.opcode, _branch_offset(inst, info, symbols, state)])


def _register(inst: Instruction, name: Optional[str],
              state: AssemblerState) -> int:
    """Map a byte register to its 3-bit code; anything else encodes as 0."""
    code = get_register_code(name)
    if code is None:
        if name:
            state.warn(inst, f"unknown register '{name}', encoded as AL")
        else:
            state.warn(inst, f"missing register operand for {inst.mnemonic}, encoded as AL")
        return 0
    return code


def _branch_offset(inst: Instruction, info: InstructionInfo,
                   symbols: SymbolTable, state: AssemblerState) -> int:
    """
    Compute the 8-bit relative offset for a branch.

    The offset is measured from the following instruction. Undefined
    targets resolve to address 0; offsets outside -128..127 wrap to a
    single byte with a warning.
    """
    try:
        target = symbols.resolve(inst.operand1 or "", inst.location)
    except UndefinedSymbolError as e:
        e.source_line = inst.raw_text
        state.errors.add(e)
        target = 0

    offset = target - (state.location_counter + info.size)
    if not BRANCH_MIN_OFFSET <= offset <= BRANCH_MAX_OFFSET:
        state.warn(
            inst,
            f"branch offset {offset} to ${target & ADDRESS_MASK:04X} out of range, "
            f"truncated to ${offset & 0xFF:02X}",
        )
    return offset & 0xFF


# =============================================================================
# Code Generator
# =============================================================================

class CodeGenerator:
    """
    Runs both passes over a source and keeps their results.

    Usage:
        codegen = CodeGenerator()
        codegen.generate(source_lines)
        code = codegen.get_code()
        rows = codegen.get_listing_lines()
    """

    def __init__(self):
        self._state = AssemblerState()
        self._instructions: list[Instruction] = []
        self._symbols = SymbolTable()
        self._result: Optional[EncodeResult] = None
        self._origin = 0

    def generate(self, lines: Iterable[str], filename: str = "<input>") -> bytes:
        """
        Assemble source lines.

        Errors do not raise; check has_errors() afterwards.

        Args:
            lines: Raw source lines
            filename: Source name for error locations

        Returns:
            The concatenated machine code
        """
        self._state = AssemblerState()
        self._instructions, self._symbols, self._state = assign_addresses(
            lines, self._state, filename
        )
        self._origin = self._state.segment_origin
        self._result = encode(self._instructions, self._symbols, self._state)
        return self._result.code

    def get_code(self) -> bytes:
        """Return the generated machine code."""
        return self._result.code if self._result else b""

    def get_instructions(self) -> list[Instruction]:
        """Return the assembled Instruction records in source order."""
        return self._instructions

    def get_listing_lines(self) -> list[str]:
        """Return the listing rows, one per source line."""
        return self._result.listing if self._result else []

    def get_origin(self) -> int:
        """Return the segment origin pass 2 started from."""
        return self._origin

    def get_symbols(self) -> dict[str, int]:
        """Return a dictionary of symbol names to addresses."""
        return self._symbols.as_dict()

    def get_symbol_table(self) -> SymbolTable:
        """Return the symbol table built by pass 1."""
        return self._symbols

    def get_diagnostics(self) -> list[str]:
        """Return one-line error messages in emission order."""
        return self._state.diagnostics

    def get_warnings(self) -> list[str]:
        """Return warning messages in emission order."""
        return list(self._state.errors.warnings)

    def has_errors(self) -> bool:
        """Check if any errors occurred during assembly."""
        return self._state.errors.has_errors()

    def get_error_report(self) -> str:
        """Get formatted error report."""
        return self._state.errors.report()
