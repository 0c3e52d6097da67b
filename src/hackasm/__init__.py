"""
hackasm - Assembler for the Hack Computer
=========================================

This package translates Hack assembly language (.asm) into Hack machine
code (.hack): a text file with one 16-character binary string per
instruction.

The Hack machine has a 15-bit address register (A), a data register (D),
and a 32K-word data memory addressed through A (M). Its instruction set
has exactly two instruction classes:

- **Address instruction** ``@value``: load a constant or symbol address into A
- **Compute instruction** ``dest=comp;jump``: compute an ALU expression,
  store it, and optionally jump

Main Components
---------------
- **assembler**: Two-pass assembler (hackasm)
- **config**: Output naming and address-space bounds
- **errors**: Exception hierarchy

Quick Start
-----------
Assemble a program:
    >>> from hackasm import Assembler
    >>> asm = Assembler()
    >>> code = asm.assemble_file("Add.asm")
    >>> asm.write_hack("Add.hack")

Or use the command-line tool:
    $ hackasm Add.asm
    $ hackasm Max.asm -o out/Max.hack -s Max.sym -l Max.lst

Version History
---------------
1.0.0 - Initial release
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from hackasm.assembler import Assembler, assemble, assemble_file
from hackasm.config import AssemblerConfig
from hackasm.errors import (
    HackError,
    SourceLocation,
    AssemblerError,
    AssemblySyntaxError,
    DuplicateSymbolError,
    MalformedInstructionError,
    AddressOutOfRangeError,
    RegisterPoolExhaustedError,
)

__all__ = [
    # Version info
    "__version__",
    # Assembler
    "Assembler",
    "assemble",
    "assemble_file",
    "AssemblerConfig",
    # Exception hierarchy
    "HackError",
    "SourceLocation",
    "AssemblerError",
    "AssemblySyntaxError",
    "DuplicateSymbolError",
    "MalformedInstructionError",
    "AddressOutOfRangeError",
    "RegisterPoolExhaustedError",
]
