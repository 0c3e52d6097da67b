"""
Hack Instruction Set Definition
===============================

This module defines the encoding tables and the two instruction encoders.
Every Hack instruction is 16 bits wide and is written as a string of
sixteen '0'/'1' characters, most significant bit first.

Instruction Formats
-------------------
1. **Address instruction** (@value)

       0 vvv vvvv vvvv vvvv
       |  \\_____________/
       |   15-bit unsigned address
       opcode 0

2. **Compute instruction** (dest=comp;jump)

       1 1 1 a c1 c2 c3 c4 c5 c6 d1 d2 d3 j1 j2 j3
       \\___/ \\_______________/ \\______/ \\______/
       opcode     comp (7)      dest (3)  jump (3)

   The 'a' bit selects M (RAM[A]) instead of A as the ALU's second input.

Reference
---------
- Nisan & Schocken, "The Elements of Computing Systems", chapter 6
"""

from types import MappingProxyType
from typing import Optional

from hackasm.errors import (
    AddressOutOfRangeError,
    MalformedInstructionError,
    SourceLocation,
)


ADDRESS_OPCODE = "0"
COMPUTE_OPCODE = "111"

# Width of the address field
ADDRESS_BITS = 15
MAX_ADDRESS = (1 << ADDRESS_BITS) - 1

# Placeholder for an omitted dest or jump field
NULL_FIELD = "null"


# =============================================================================
# Field Tables
# =============================================================================

# d1 d2 d3 = store to A, D, M. Letters must be in canonical order.
DEST_CODES = MappingProxyType({
    NULL_FIELD: "000",
    "M":   "001",
    "D":   "010",
    "MD":  "011",
    "A":   "100",
    "AM":  "101",
    "AD":  "110",
    "AMD": "111",
})

# j1 j2 j3 = jump if out < 0, out == 0, out > 0
JUMP_CODES = MappingProxyType({
    NULL_FIELD: "000",
    "JGT": "001",
    "JEQ": "010",
    "JGE": "011",
    "JLT": "100",
    "JNE": "101",
    "JLE": "110",
    "JMP": "111",
})

# a c1..c6
COMP_CODES = MappingProxyType({
    # a = 0: second operand is A
    "0":   "0101010",
    "1":   "0111111",
    "-1":  "0111010",
    "D":   "0001100",
    "A":   "0110000",
    "!D":  "0001101",
    "!A":  "0110001",
    "-D":  "0001111",
    "-A":  "0110011",
    "D+1": "0011111",
    "A+1": "0110111",
    "D-1": "0001110",
    "A-1": "0110010",
    "D+A": "0000010",
    "D-A": "0010011",
    "A-D": "0000111",
    "D&A": "0000000",
    "D|A": "0010101",
    # a = 1: second operand is M
    "M":   "1110000",
    "!M":  "1110001",
    "-M":  "1110011",
    "M+1": "1110111",
    "M-1": "1110010",
    "D+M": "1000010",
    "D-M": "1010011",
    "M-D": "1000111",
    "D&M": "1000000",
    "D|M": "1010101",
})

_FIELD_TABLES = {
    "comp": COMP_CODES,
    "dest": DEST_CODES,
    "jump": JUMP_CODES,
}


# =============================================================================
# Encoders
# =============================================================================

def lookup_field(field: str, value: str,
                 location: Optional[SourceLocation] = None,
                 source_line: Optional[str] = None) -> str:
    """
    Return the bit string for one compute instruction field.

    Args:
        field: "comp", "dest" or "jump"
        value: Field text as written in the source

    Raises:
        MalformedInstructionError: If value is not in the field's table
    """
    table = _FIELD_TABLES[field]
    bits = table.get(value)
    if bits is None:
        raise MalformedInstructionError(
            field, value, location,
            source_line=source_line,
            valid_values=list(table),
        )
    return bits


def encode_address(address: int, max_address: int = MAX_ADDRESS,
                   location: Optional[SourceLocation] = None,
                   source_line: Optional[str] = None) -> str:
    """
    Encode an address instruction.

    >>> encode_address(5)
    '0000000000000101'

    Raises:
        AddressOutOfRangeError: If address is negative or above max_address
    """
    if not 0 <= address <= min(max_address, MAX_ADDRESS):
        raise AddressOutOfRangeError(
            address, min(max_address, MAX_ADDRESS), location, source_line=source_line
        )
    return ADDRESS_OPCODE + format(address, f"0{ADDRESS_BITS}b")


def encode_compute(comp: str, dest: str = NULL_FIELD, jump: str = NULL_FIELD,
                   location: Optional[SourceLocation] = None,
                   source_line: Optional[str] = None) -> str:
    """
    Encode a compute instruction.

    >>> encode_compute("D+A", dest="D")
    '1110000010010000'
    """
    return (
        COMPUTE_OPCODE
        + lookup_field("comp", comp, location, source_line)
        + lookup_field("dest", dest, location, source_line)
        + lookup_field("jump", jump, location, source_line)
    )
