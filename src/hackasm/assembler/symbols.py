"""
Hack Symbol Table and Free-Register Pool
========================================

Symbols share one namespace: predefined symbols, labels and variables.
A name is bound exactly once per translation; later inserts of the same
name are ignored (first writer wins).

Labels name ROM addresses, everything else names RAM addresses. Only the
RAM bindings take a register out of the free pool, so a label whose value
happens to equal a register number leaves that register free.

Predefined Symbols
------------------
| Symbol   | Address |
|----------|---------|
| R0..R15  | 0..15   |
| SP       | 0       |
| LCL      | 1       |
| ARG      | 2       |
| THIS     | 3       |
| THAT     | 4       |
| SCREEN   | 16384   |
| KBD      | 24576   |
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterator, Optional

from hackasm.config import DEFAULT_POOL_TOP
from hackasm.errors import RegisterPoolExhaustedError, SourceLocation


def _predefined_symbols() -> dict[str, int]:
    symbols = {f"R{i}": i for i in range(16)}
    symbols.update({
        "SP": 0,
        "LCL": 1,
        "ARG": 2,
        "THIS": 3,
        "THAT": 4,
        "SCREEN": 16384,
        "KBD": 24576,
    })
    return symbols


PREDEFINED_SYMBOLS = MappingProxyType(_predefined_symbols())


# =============================================================================
# Symbol Table Entry
# =============================================================================

@dataclass(frozen=True)
class Symbol:
    """
    Symbol table entry.

    Attributes:
        name: Symbol name (case-sensitive)
        address: Bound address (ROM address for labels, RAM otherwise)
        is_label: True for label definitions
        location: Where the symbol was defined or first referenced;
                  None for predefined symbols
    """
    name: str
    address: int
    is_label: bool = False
    location: Optional[SourceLocation] = None

    @property
    def is_predefined(self) -> bool:
        return self.location is None and self.name in PREDEFINED_SYMBOLS


# =============================================================================
# Free-Register Pool
# =============================================================================

class FreeRegisterPool:
    """
    Data-memory addresses not yet bound to a symbol.

    The pool starts as [0, top] and only ever shrinks. Because nothing is
    returned to it, the lowest free address never decreases, so a cursor
    that only moves forward finds it without rescanning.
    """

    def __init__(self, top: int = DEFAULT_POOL_TOP):
        self._top = top
        self._free = set(range(top + 1))
        self._cursor = 0

    def __contains__(self, address: int) -> bool:
        return address in self._free

    def __len__(self) -> int:
        return len(self._free)

    @property
    def top(self) -> int:
        return self._top

    def discard(self, address: int) -> None:
        """Mark an address as used. Addresses outside the pool are ignored."""
        self._free.discard(address)

    def peek_next(self) -> Optional[int]:
        """Return the lowest free address without using it, or None if empty."""
        while self._cursor <= self._top and self._cursor not in self._free:
            self._cursor += 1
        if self._cursor > self._top:
            return None
        return self._cursor

    def allocate_next(self, symbol: str = "",
                      location: Optional[SourceLocation] = None,
                      source_line: Optional[str] = None) -> int:
        """
        Return the lowest free address.

        The address stays in the pool until the caller binds it through
        SymbolTable.try_insert().

        Raises:
            RegisterPoolExhaustedError: If no address is free
        """
        address = self.peek_next()
        if address is None:
            raise RegisterPoolExhaustedError(symbol, location, source_line=source_line)
        return address


# =============================================================================
# Symbol Table
# =============================================================================

class SymbolTable:
    """
    Mapping from symbol name to address, plus the free-register pool.

    Usage:
        table = SymbolTable.with_predefined()
        table.try_insert("LOOP", 4, is_label=True)
        address = table.allocate_variable("i")   # 16
    """

    def __init__(self, pool_top: int = DEFAULT_POOL_TOP):
        self._symbols: dict[str, Symbol] = {}
        self._pool = FreeRegisterPool(pool_top)

    @classmethod
    def with_predefined(cls, pool_top: int = DEFAULT_POOL_TOP) -> "SymbolTable":
        """Create a table seeded with all predefined symbols."""
        table = cls(pool_top)
        for name, address in PREDEFINED_SYMBOLS.items():
            table.try_insert(name, address)
        return table

    def __contains__(self, name: str) -> bool:
        return name in self._symbols

    def __len__(self) -> int:
        return len(self._symbols)

    def __iter__(self) -> Iterator[Symbol]:
        return iter(self._symbols.values())

    @property
    def pool(self) -> FreeRegisterPool:
        return self._pool

    def try_insert(self, name: str, address: int, is_label: bool = False,
                   location: Optional[SourceLocation] = None) -> bool:
        """
        Bind name to address unless the name is already bound.

        Binding a non-label takes its address out of the free pool.

        Returns:
            True if the name was inserted, False if it was already present
        """
        if name in self._symbols:
            return False
        self._symbols[name] = Symbol(name, address, is_label, location)
        if not is_label:
            self._pool.discard(address)
        return True

    def lookup(self, name: str) -> Optional[int]:
        """Return the address bound to name, or None."""
        symbol = self._symbols.get(name)
        return symbol.address if symbol is not None else None

    def get(self, name: str) -> Optional[Symbol]:
        return self._symbols.get(name)

    def is_label(self, name: str) -> bool:
        symbol = self._symbols.get(name)
        return symbol is not None and symbol.is_label

    def allocate_variable(self, name: str,
                          location: Optional[SourceLocation] = None,
                          source_line: Optional[str] = None) -> int:
        """
        Bind a new variable to the lowest free register and return its address.

        Raises:
            RegisterPoolExhaustedError: If the pool is empty
        """
        address = self._pool.allocate_next(name, location, source_line)
        self.try_insert(name, address, location=location)
        return address

    def as_dict(self) -> dict[str, int]:
        """Return a dictionary of symbol names to addresses."""
        return {name: sym.address for name, sym in self._symbols.items()}

    def labels(self) -> dict[str, int]:
        return {name: sym.address for name, sym in self._symbols.items() if sym.is_label}

    def variables(self) -> dict[str, int]:
        """Return user variables (neither labels nor predefined) in allocation order."""
        return {
            name: sym.address
            for name, sym in self._symbols.items()
            if not sym.is_label and not sym.is_predefined
        }
