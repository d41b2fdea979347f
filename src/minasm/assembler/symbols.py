"""
Symbol Table
============

Maps label names to addresses. Pass 1 fills the table; pass 2 reads it to
resolve branch targets and data operands.

Labels keep their case as written. Lookups try an exact match first and
then fall back to a case-insensitive match, because operands are upper-cased
by the tokenizer while label definitions are not.

Redefining a label overwrites the earlier address (last definition wins).
define() returns the replaced Symbol so callers can warn about it.

Pass 1 also records on the table the segment origin it finished with and the
errors it collected, so pass 2 can be run from the table alone.
"""

from dataclasses import dataclass
from typing import Iterator, Optional

from minasm.assembler.literals import try_parse_literal
from minasm.errors import ErrorCollector, SourceLocation, UndefinedSymbolError


ADDRESS_MASK = 0xFFFF


@dataclass
class Symbol:
    """
    Symbol table entry.

    Attributes:
        name: Label text without its trailing colon
        address: 16-bit address
        defined: Always True for labels entered by pass 1
        location: Where the label was (last) defined
    """
    name: str
    address: int
    defined: bool = True
    location: Optional[SourceLocation] = None


class SymbolTable:
    """
    Label name to address mapping for one assembler run.

    Usage:
        symbols = SymbolTable()
        symbols.define("START", 0x0100)
        symbols.resolve("START")    # 0x0100
        symbols.resolve("10h")      # 16, literals resolve to themselves

    Attributes:
        origin: Segment origin at the end of pass 1
        pass1_errors: Errors and warnings pass 1 collected
    """

    def __init__(self):
        self._symbols: dict[str, Symbol] = {}
        self.origin = 0
        self.pass1_errors = ErrorCollector()

    def __len__(self) -> int:
        return len(self._symbols)

    def __contains__(self, name: str) -> bool:
        return self.lookup(name) is not None

    def __iter__(self) -> Iterator[Symbol]:
        return iter(self._symbols.values())

    def define(self, name: str, address: int,
               location: Optional[SourceLocation] = None) -> Optional[Symbol]:
        """
        Insert or overwrite a label.

        Args:
            name: Label name as written
            address: Address of the labelled construct
            location: Definition site, for messages

        Returns:
            The Symbol that was replaced, or None for a new label
        """
        previous = self._symbols.get(name)
        self._symbols[name] = Symbol(name, address & ADDRESS_MASK, True, location)
        return previous

    def lookup(self, name: str) -> Optional[Symbol]:
        """Find a symbol by exact name, then case-insensitively."""
        symbol = self._symbols.get(name)
        if symbol is not None:
            return symbol

        name_upper = name.upper()
        for candidate in self._symbols.values():
            if candidate.name.upper() == name_upper:
                return candidate
        return None

    def resolve(self, token: str, location: Optional[SourceLocation] = None) -> int:
        """
        Resolve an operand to a value.

        The token is first parsed as a numeric literal; if that fails it is
        looked up as a label.

        Raises:
            UndefinedSymbolError: If the token is neither a literal nor a
                defined label
        """
        value = try_parse_literal(token)
        if value is not None:
            return value

        symbol = self.lookup(token)
        if symbol is None or not symbol.defined:
            raise UndefinedSymbolError(
                token,
                location=location,
                similar_symbols=self.find_similar(token),
            )
        return symbol.address

    def as_dict(self) -> dict[str, int]:
        """Return a dictionary of symbol names to addresses."""
        return {name: sym.address for name, sym in self._symbols.items()}

    def find_similar(self, name: str) -> list[str]:
        """
        Find symbols with similar names for error hints.

        Uses simple edit distance heuristic.
        """
        name_lower = name.lower()
        similar = []

        for sym in self._symbols:
            sym_lower = sym.lower()
            if (
                abs(len(sym) - len(name)) <= 1 and
                _edit_distance(name_lower, sym_lower) <= 2
            ):
                similar.append(sym)

        return similar[:3]


def _edit_distance(s1: str, s2: str) -> int:
    """Calculate Levenshtein edit distance between two strings."""
    if len(s1) < len(s2):
        s1, s2 = s2, s1

    distances = list(range(len(s2) + 1))
    for i, c1 in enumerate(s1):
        new_distances = [i + 1]
        for j, c2 in enumerate(s2):
            if c1 == c2:
                new_distances.append(distances[j])
            else:
                new_distances.append(1 + min(
                    distances[j],
                    distances[j + 1],
                    new_distances[-1],
                ))
        distances = new_distances

    return distances[-1]
