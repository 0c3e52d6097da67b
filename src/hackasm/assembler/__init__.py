"""
Hack Assembler
==============

This package translates Hack assembly language into Hack machine code:
one 16-character binary string per instruction.

Main Components
---------------
- **Assembler**: Main class that reads source and writes output files
- **lexer**: Classifies lines as blank, label definition or instruction
- **parser**: Splits instruction text into address/compute fields
- **SymbolTable**: Predefined symbols, labels and variables
- **CodeGenerator**: Runs the two passes

Assembly Process
----------------
1. **Pass 1 (symbol resolution)**: bind each label to the ROM address of
   the instruction following it.
2. **Pass 2 (encoding)**: resolve symbols, allocate RAM registers for new
   variables starting at 16, and encode each instruction.

Example Usage
-------------
>>> from hackasm.assembler import Assembler
>>> asm = Assembler()
>>> asm.assemble_string('''
... (LOOP)
...     @i
...     M=M+1
...     @LOOP
...     0;JMP
... ''')
['0000000000010000', '1111110111001000', '0000000000000000', '1110101010000111']
"""

from hackasm.assembler.assembler import Assembler, assemble, assemble_file
from hackasm.assembler.codegen import CodeGenerator, ListingEntry
from hackasm.assembler.lexer import (
    LineKind,
    SourceLine,
    classify_line,
    extract_instruction_text,
    extract_label_name,
    is_instruction_line,
    is_label_definition_line,
)
from hackasm.assembler.opcodes import (
    COMP_CODES,
    DEST_CODES,
    JUMP_CODES,
    encode_address,
    encode_compute,
)
from hackasm.assembler.parser import (
    AddressInstruction,
    ComputeInstruction,
    parse_instruction,
)
from hackasm.assembler.symbols import (
    PREDEFINED_SYMBOLS,
    FreeRegisterPool,
    Symbol,
    SymbolTable,
)

__all__ = [
    # Main class and functions
    "Assembler",
    "assemble",
    "assemble_file",
    # Code generator
    "CodeGenerator",
    "ListingEntry",
    # Line classifier
    "LineKind",
    "SourceLine",
    "classify_line",
    "extract_instruction_text",
    "extract_label_name",
    "is_instruction_line",
    "is_label_definition_line",
    # Encoding tables
    "COMP_CODES",
    "DEST_CODES",
    "JUMP_CODES",
    "encode_address",
    "encode_compute",
    # Parser
    "AddressInstruction",
    "ComputeInstruction",
    "parse_instruction",
    # Symbols
    "PREDEFINED_SYMBOLS",
    "FreeRegisterPool",
    "Symbol",
    "SymbolTable",
]
