"""
hackasm Error Hierarchy
=======================

This module defines the exception hierarchy for the whole package.
All exceptions inherit from HackError, allowing callers to catch every
assembler-related error with a single except clause if desired.

Exception Hierarchy
-------------------
HackError (base)
└── AssemblerError (assembler-related)
    ├── AssemblySyntaxError - malformed label or instruction syntax
    ├── DuplicateSymbolError - label defined more than once
    ├── MalformedInstructionError - unknown comp/dest/jump field
    ├── AddressOutOfRangeError - address does not fit in 15 bits
    └── RegisterPoolExhaustedError - no free data-memory register left

Every assembler error aborts the translation. There is no batch error
collection: the first error raised is the one reported.

Error messages follow this format:
    filename:line:column: error: description
        source_line_text
        ^^^^^^^^^^^^^^^^ (underline under the statement)
    hint: suggestion for fixing (when available)
"""

from dataclasses import dataclass
from typing import Optional, Union


# =============================================================================
# Base Exception Class
# =============================================================================

class HackError(Exception):
    """
    Root of every exception hackasm raises on purpose.

    Anything else escaping the package (OSError, a bug) is not a HackError,
    which is how the CLI tells an assembly failure from an internal one.
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    Position of a statement in a .asm file.

    Hack statements never span lines, so the column always names the first
    non-space character of the offending line.

    Attributes:
        filename: Source path, or "<input>" for text passed in directly
        line: 1-based line number, counting blank and comment lines
        column: 1-based column of the statement's first character
    """
    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}:{self.column}"


# =============================================================================
# Assembler Exceptions
# =============================================================================

class AssemblerError(HackError):
    """
    A translation failure tied (usually) to one source statement.

    Raising one aborts the whole translation; nothing is written.

    Attributes:
        message: One-line description, without location prefix
        location: Statement position, if known
        hint: How to fix it, if there is something useful to say
        source_line: The statement as written, stripped of surrounding spaces
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Render the error the way the CLI prints it.

            Prog.asm:7:5: error: unknown comp field 'D+X'
                D=D+X
                ^^^^^
            hint: comp must be one of: 0, 1, -1, D, A, ...

        The statement shown is already stripped, so the underline starts at
        its first character rather than at the location's column.
        """
        where = f"{self.location}: " if self.location else ""
        lines = [f"{where}error: {self.message}"]

        if self.source_line:
            lines.append(f"    {self.source_line}")
            lines.append("    " + "^" * len(self.source_line))

        if self.hint:
            lines.append(f"hint: {self.hint}")

        return "\n".join(lines)


class AssemblySyntaxError(AssemblerError):
    """
    Syntax error in assembly source code.

    Raised when a line cannot be decoded at all, before any field lookup
    happens.

    Examples:
        - Label without a closing parenthesis: (LOOP
        - Empty label name: ()
        - Address instruction without operand: @
        - Numeric literal with trailing garbage: @12ab
    """
    pass


class DuplicateSymbolError(AssemblerError):
    """
    Label defined multiple times.

    Raised during the first pass when a label definition reuses a name
    that is already bound, either by an earlier label or by one of the
    predefined symbols (R0-R15, SP, LCL, ARG, THIS, THAT, SCREEN, KBD).
    """

    def __init__(
        self,
        symbol: str,
        location: Optional[SourceLocation] = None,
        original_location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.symbol = symbol
        self.original_location = original_location

        if original_location:
            hint = f"'{symbol}' was first defined at {original_location}"
        else:
            hint = f"'{symbol}' is a predefined symbol"

        super().__init__(
            f"duplicate symbol '{symbol}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class MalformedInstructionError(AssemblerError):
    """
    A compute instruction field has no entry in its encoding table.

    Raised when the extracted dest, comp or jump text is not one of the
    canonical spellings. Destination letters must appear in canonical
    order, so "MD" is accepted but "DM" is not.

    Attributes:
        field: Which field failed ("dest", "comp" or "jump")
        value: The offending field text
        valid_values: The accepted spellings for that field
    """

    def __init__(
        self,
        field: str,
        value: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        valid_values: Optional[list[str]] = None,
    ):
        self.field = field
        self.value = value
        self.valid_values = valid_values or []

        hint = None
        if self.valid_values:
            hint = f"{field} must be one of: {', '.join(self.valid_values)}"

        super().__init__(
            f"unknown {field} field '{value}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class AddressOutOfRangeError(AssemblerError):
    """
    Address does not fit the 15-bit address field.

    Address instructions carry a 15-bit unsigned value, so the largest
    encodable address is 32767. A literal too long to convert is reported
    with its digits as written.
    """

    def __init__(
        self,
        value: Union[int, str],
        max_address: int = 32767,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.value = value
        self.max_address = max_address

        shown = str(value)
        if len(shown) > 12:
            shown = f"{shown[:8]}... ({len(shown)} digits)"

        super().__init__(
            f"address {shown} is out of range",
            location=location,
            hint=f"addresses must be between 0 and {max_address}",
            source_line=source_line,
        )


class RegisterPoolExhaustedError(AssemblerError):
    """
    No free data-memory register remains for a new variable.

    The data memory holds 24577 addressable slots (0 through KBD). Once
    every slot not taken by a predefined symbol is bound to a variable,
    further variables cannot be allocated.
    """

    def __init__(
        self,
        symbol: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.symbol = symbol

        super().__init__(
            f"no free register left for variable '{symbol}'",
            location=location,
            source_line=source_line,
        )
