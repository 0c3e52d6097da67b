"""
Hack Code Generator
===================

Two-pass translation of classified source lines into 16-bit machine code.

Pass 1 (symbol resolution) walks every line, counting instructions, and
binds each label to the ROM address of the instruction that follows it.
Labels may be referenced before they are defined, so pass 2 cannot start
until pass 1 has seen the whole program.

Pass 2 (encoding) walks the lines again, resolves address-instruction
symbols (allocating a RAM register to each new variable, lowest free
address first) and encodes every instruction.
"""

from dataclasses import dataclass
from typing import Iterable
import logging

from hackasm.assembler.lexer import (
    LineKind,
    SourceLine,
    extract_instruction_text,
    extract_label_name,
    split_lines,
    validate_label_definition,
)
from hackasm.assembler.opcodes import MAX_ADDRESS, encode_address, encode_compute
from hackasm.assembler.parser import AddressInstruction, parse_instruction
from hackasm.assembler.symbols import SymbolTable
from hackasm.config import DEFAULT_POOL_TOP
from hackasm.errors import AssemblerError, DuplicateSymbolError

logger = logging.getLogger(__name__)


# =============================================================================
# Listing Entry
# =============================================================================

@dataclass(frozen=True)
class ListingEntry:
    """
    One encoded instruction, for listing output.

    Attributes:
        address: ROM address of the instruction
        code: 16-character binary encoding
        line_number: Source line number (1-indexed)
        source: Instruction text with whitespace and comments removed
    """
    address: int
    code: str
    line_number: int
    source: str


# =============================================================================
# Code Generator
# =============================================================================

class CodeGenerator:
    """
    Generates Hack machine code from source lines.

    Each call to generate() starts from a fresh symbol table, so one
    generator can translate several programs in turn.

    Usage:
        codegen = CodeGenerator()
        code = codegen.generate(source_text, "Prog.asm")
        symbols = codegen.get_symbols()
    """

    def __init__(self, pool_top: int = DEFAULT_POOL_TOP,
                 max_address: int = MAX_ADDRESS):
        self._pool_top = pool_top
        self._max_address = max_address
        self._filename = "<input>"
        self._symbols = SymbolTable.with_predefined(pool_top)
        self._code: list[str] = []
        self._listing: list[ListingEntry] = []

    def generate(self, source: str | Iterable[str], filename: str = "<input>") -> list[str]:
        """
        Translate a program.

        Args:
            source: Source text, or an iterable of lines
            filename: Name used in error messages

        Returns:
            One 16-character binary string per instruction, in source order

        Raises:
            AssemblerError: On the first error found; nothing is returned
        """
        lines = list(split_lines(source))

        self._filename = filename
        self._symbols = SymbolTable.with_predefined(self._pool_top)
        self._code = []
        self._listing = []

        try:
            self._pass1(lines)
            self._pass2(lines)
        except AssemblerError:
            # No partial output survives a failed translation
            self._code = []
            self._listing = []
            raise

        return list(self._code)

    # =========================================================================
    # Results
    # =========================================================================

    def get_code(self) -> list[str]:
        return list(self._code)

    def get_symbol_table(self) -> SymbolTable:
        return self._symbols

    def get_symbols(self) -> dict[str, int]:
        """Return a dictionary of symbol names to addresses."""
        return self._symbols.as_dict()

    def get_listing_entries(self) -> list[ListingEntry]:
        return list(self._listing)

    def get_listing(self) -> str:
        """
        Get the assembly listing as a string.

        Returns:
            The listing showing ROM addresses, machine code and source lines,
            followed by the symbol table.
        """
        lines = []
        lines.append("Hack Assembler Listing")
        lines.append("=" * 60)
        lines.append("")
        lines.append("Addr   Code              Line  Source")
        lines.append("-" * 60)
        for entry in self._listing:
            lines.append(
                f"{entry.address:5d}  {entry.code}  {entry.line_number:4d}  {entry.source}"
            )
        lines.append("")
        lines.append("Symbol Table")
        lines.append("-" * 30)
        for symbol in sorted(self._symbols, key=lambda s: s.name):
            kind = "label" if symbol.is_label else "ram"
            lines.append(f"{symbol.name:20s} = {symbol.address:5d}  {kind}")
        return "\n".join(lines)

    # =========================================================================
    # Pass 1: Symbol Resolution
    # =========================================================================

    def _pass1(self, lines: list[SourceLine]) -> None:
        """
        First pass: bind every label to the address of the next instruction.

        Only instruction lines advance the instruction counter; label,
        comment and blank lines do not.
        """
        instruction_count = 0

        for line in lines:
            if line.kind is LineKind.INSTRUCTION:
                instruction_count += 1
            elif line.kind is LineKind.LABEL:
                self._define_label(line, instruction_count)

        logger.debug(
            f"Pass 1: {instruction_count} instructions, "
            f"{len(self._symbols.labels())} labels"
        )

    def _define_label(self, line: SourceLine, address: int) -> None:
        """Define a label in the symbol table."""
        location = line.location(self._filename)
        validate_label_definition(line.text, location)
        name = extract_label_name(line.text)

        if not self._symbols.try_insert(name, address, is_label=True, location=location):
            existing = self._symbols.get(name)
            raise DuplicateSymbolError(
                name,
                location=location,
                original_location=existing.location if existing else None,
                source_line=line.text.strip(),
            )

        logger.debug(f"Label '{name}' = {address}")

    # =========================================================================
    # Pass 2: Encoding
    # =========================================================================

    def _pass2(self, lines: list[SourceLine]) -> None:
        """Second pass: encode every instruction, allocating variables as met."""
        for line in lines:
            if line.kind is not LineKind.INSTRUCTION:
                continue

            address = len(self._code)
            text = extract_instruction_text(line.text)
            code = self._generate_instruction(text, line)

            self._code.append(code)
            self._listing.append(ListingEntry(address, code, line.line_number, text))

        logger.debug(
            f"Pass 2: {len(self._code)} instructions encoded, "
            f"{len(self._symbols.variables())} variables"
        )

    def _generate_instruction(self, text: str, line: SourceLine) -> str:
        """Encode one instruction."""
        location = line.location(self._filename)
        source_line = line.text.strip()
        instruction = parse_instruction(text, location, source_line)

        if isinstance(instruction, AddressInstruction):
            address = self._resolve_operand(instruction, line)
            return encode_address(address, self._max_address, location, source_line)

        return encode_compute(
            instruction.comp,
            instruction.dest,
            instruction.jump,
            location,
            source_line,
        )

    def _resolve_operand(self, instruction: AddressInstruction, line: SourceLine) -> int:
        """Return the address an @ operand refers to, allocating new variables."""
        if instruction.is_literal:
            return instruction.operand

        name = instruction.operand
        address = self._symbols.lookup(name)
        if address is not None:
            return address

        address = self._symbols.allocate_variable(
            name,
            location=line.location(self._filename),
            source_line=line.text.strip(),
        )
        logger.debug(f"Variable '{name}' allocated at RAM[{address}]")
        return address
