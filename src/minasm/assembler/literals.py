"""
Numeric Literal Parser
======================

Parses the numeric operands accepted by ORG, DB and DW, and used when a
branch or data operand turns out to be a number rather than a label.

Number Formats
--------------
| Format      | Form      | Example | Value |
|-------------|-----------|---------|-------|
| Decimal     | (none)    | 26      | 26    |
| Hexadecimal | h suffix  | 1Ah     | 26    |
| Hexadecimal | 0x prefix | 0x1A    | 26    |

Literals are trimmed and case-folded before parsing and may carry a leading
sign. Values must fit a signed 16-bit integer (-32768..32767); anything
else is rejected, so FFFFh is an error while -1 is accepted.
"""

import re
from typing import Optional

from minasm.errors import InvalidLiteralError, SourceLocation


INT16_MIN = -0x8000
INT16_MAX = 0x7FFF

_DECIMAL_RE = re.compile(r"[+-]?[0-9]+")
_HEX_RE = re.compile(r"[+-]?[0-9a-f]+")


def parse_literal(text: Optional[str],
                  location: Optional[SourceLocation] = None,
                  context: Optional[str] = None) -> int:
    """
    Parse a decimal or hexadecimal literal into a signed 16-bit value.

    Args:
        text: Operand text such as "10", "1Ah" or "0x1A"
        location: Source location attached to the error on failure
        context: Directive name used in the error message (e.g. "ORG")

    Returns:
        The integer value

    Raises:
        InvalidLiteralError: If the text is not a valid literal or is out
            of range
    """
    if text is None:
        raise InvalidLiteralError("", location, context=context)

    value_str = text.strip().lower()

    if value_str.endswith("h"):
        digits, pattern, base = value_str[:-1], _HEX_RE, 16
    elif value_str.startswith("0x"):
        digits, pattern, base = value_str[2:], _HEX_RE, 16
    else:
        digits, pattern, base = value_str, _DECIMAL_RE, 10

    if not pattern.fullmatch(digits):
        raise InvalidLiteralError(text, location, context=context)

    value = int(digits, base)
    if not INT16_MIN <= value <= INT16_MAX:
        raise InvalidLiteralError(
            text, location, context=context,
            hint=f"value must be between {INT16_MIN} and {INT16_MAX}",
        )
    return value


def try_parse_literal(text: Optional[str]) -> Optional[int]:
    """Parse a literal, returning None instead of raising on failure."""
    try:
        return parse_literal(text)
    except InvalidLiteralError:
        return None


def is_literal(text: Optional[str]) -> bool:
    """Check whether text parses as a numeric literal."""
    return try_parse_literal(text) is not None
