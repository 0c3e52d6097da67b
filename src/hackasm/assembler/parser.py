"""
Hack Instruction Parser
=======================

Splits the stripped text of an instruction line into its fields.

- "@21"          -> AddressInstruction(operand=21)
- "@LOOP"        -> AddressInstruction(operand="LOOP")
- "AM=M-1"       -> ComputeInstruction(dest="AM", comp="M-1", jump="null")
- "D;JGT"        -> ComputeInstruction(dest="null", comp="D", jump="JGT")
- "0;JMP"        -> ComputeInstruction(dest="null", comp="0", jump="JMP")

The parser only splits text; whether a dest, comp or jump spelling is
valid is decided when the instruction is encoded.
"""

from dataclasses import dataclass
from typing import Optional, Union

from hackasm.assembler.opcodes import MAX_ADDRESS, NULL_FIELD
from hackasm.errors import AddressOutOfRangeError, AssemblySyntaxError, SourceLocation


ADDRESS_PREFIX = "@"
MAX_LITERAL_DIGITS = len(str(MAX_ADDRESS))
DEST_SEPARATOR = "="
JUMP_SEPARATOR = ";"


@dataclass(frozen=True)
class AddressInstruction:
    """
    @value instruction.

    Attributes:
        operand: Integer literal, or the name of a symbol to resolve
    """
    operand: Union[int, str]

    @property
    def is_literal(self) -> bool:
        return isinstance(self.operand, int)


@dataclass(frozen=True)
class ComputeInstruction:
    """dest=comp;jump instruction with omitted fields set to "null"."""
    comp: str
    dest: str = NULL_FIELD
    jump: str = NULL_FIELD


Instruction = Union[AddressInstruction, ComputeInstruction]


def parse_address_operand(operand: str,
                          location: Optional[SourceLocation] = None,
                          source_line: Optional[str] = None) -> Union[int, str]:
    """
    Interpret the operand of an address instruction.

    An operand whose first character is a decimal digit is a literal and
    must consist of digits only. Anything else is a symbol name.

    Raises:
        AssemblySyntaxError: Empty operand or malformed literal
        AddressOutOfRangeError: Literal with more significant digits than any address
    """
    if not operand:
        raise AssemblySyntaxError(
            "missing operand after '@'",
            location,
            hint="use @<number> or @<symbol>",
            source_line=source_line,
        )
    if operand[0].isdigit():
        if not (operand.isascii() and operand.isdigit()):
            raise AssemblySyntaxError(
                f"invalid numeric literal '{operand}'",
                location,
                hint="symbol names must not start with a digit",
                source_line=source_line,
            )
        # 32767 has five digits; anything longer cannot fit the address field
        if len(operand.lstrip("0")) > MAX_LITERAL_DIGITS:
            raise AddressOutOfRangeError(operand, MAX_ADDRESS, location, source_line=source_line)
        return int(operand)
    return operand


def split_compute_fields(text: str) -> ComputeInstruction:
    """
    Split dest=comp;jump text into its three fields.

    dest is the text before "=", jump the text after ";", comp whatever
    lies between them.
    """
    dest = NULL_FIELD
    jump = NULL_FIELD
    comp = text

    if DEST_SEPARATOR in comp:
        dest, comp = comp.split(DEST_SEPARATOR, 1)
    if JUMP_SEPARATOR in comp:
        comp, jump = comp.split(JUMP_SEPARATOR, 1)

    return ComputeInstruction(comp=comp, dest=dest, jump=jump)


def parse_instruction(text: str,
                      location: Optional[SourceLocation] = None,
                      source_line: Optional[str] = None) -> Instruction:
    """
    Parse stripped instruction text (see lexer.extract_instruction_text).

    Raises:
        AssemblySyntaxError: Empty instruction or malformed address operand
    """
    if not text:
        raise AssemblySyntaxError("empty instruction", location, source_line=source_line)

    if text.startswith(ADDRESS_PREFIX):
        operand = parse_address_operand(text[len(ADDRESS_PREFIX):], location, source_line)
        return AddressInstruction(operand)

    return split_compute_fields(text)
