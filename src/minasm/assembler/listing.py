"""
Listing and Object Renderings
=============================

Formats assembled Instructions for the output files.

Listing Format
--------------
```
===============================================================================================
[LINE]  LOC   MACHINE CODE     LABEL     SOURCE
===============================================================================================
[1  ]  0010                             ORG 10h
[2  ]  0010  05             LBL:        LBL: DB 5
[3  ]  0011  78FD                       JS LBL
```

Columns: line number (3 wide), address (4-digit hex, shown when the line
emitted code or is ORG/SEGMENT/DB/DW), machine code as hex pairs, label
with its colon, then the raw source text.

Object Formats
--------------
- Hex: one upper-case hex line per instruction that emitted bytes
- Binary: the concatenated byte stream
"""

from typing import Iterable

from minasm.assembler.lexer import Instruction


LISTING_WIDTH = 95

# Lines of these kinds show their address even when they emit nothing
ADDRESSED_MNEMONICS = frozenset({"ORG", "SEGMENT", "DB", "DW"})


def format_hex(code: bytes) -> str:
    """Render bytes as upper-case hex pairs with no separator."""
    return "".join(f"{b:02X}" for b in code)


def render_listing_line(inst: Instruction) -> str:
    """Render one listing row for an assembled Instruction."""
    label = f"{inst.label}:" if inst.label else ""

    loc = ""
    if inst.address is not None and (
        inst.machine_code or inst.mnemonic in ADDRESSED_MNEMONICS
    ):
        loc = f"{inst.address:04X}"

    return (
        f"[{inst.line_number:<3d}]  {loc:<4s}  {format_hex(inst.machine_code):<13s}  "
        f"{label:<10s}  {inst.raw_text}"
    )


def listing_header() -> list[str]:
    """Return the listing title block."""
    rule = "=" * LISTING_WIDTH
    return [
        rule,
        f"[LINE]  LOC   MACHINE CODE     {'LABEL':<10s}SOURCE",
        rule,
    ]


def format_listing(rows: Iterable[str], header: bool = True) -> str:
    """Join listing rows into the text of a listing file."""
    lines = listing_header() if header else []
    lines.extend(rows)
    return "\n".join(lines) + "\n"


def object_hex_lines(instructions: Iterable[Instruction]) -> list[str]:
    """Return one hex line per Instruction that emitted bytes."""
    return [format_hex(inst.machine_code) for inst in instructions if inst.machine_code]


def object_bytes(instructions: Iterable[Instruction]) -> bytes:
    """Return the concatenated machine code of all Instructions."""
    return b"".join(inst.machine_code for inst in instructions)


def format_symbols(symbols: dict[str, int]) -> str:
    """
    Render a symbol table file.

    Format: name address (one per line)
    """
    lines = ["# Symbol table", "# Generated by minasm"]
    for name, address in sorted(symbols.items()):
        lines.append(f"{name} ${address:04X}")
    return "\n".join(lines) + "\n"
