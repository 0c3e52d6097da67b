"""
Hack Assembly Line Classifier
=============================

This module decides what each raw source line is and extracts the text
the two assembler passes work on. Hack assembly is strictly
one-statement-per-line, so classification never looks beyond a single
line.

Line Kinds
----------
- BLANK: empty, whitespace only, or a full-line comment
- LABEL: a label definition such as "(LOOP)"
- INSTRUCTION: an address instruction ("@17", "@i") or a compute
  instruction ("D=M", "0;JMP", "AM=M-1")

Comments
--------
Comments start with "//" and run to the end of the line. They may appear
on their own line or after a label or instruction.

Example
-------
>>> from hackasm.assembler.lexer import classify_line, extract_instruction_text
>>> classify_line("   D = D + A   // add")
<LineKind.INSTRUCTION: 3>
>>> extract_instruction_text("   D = D + A   // add")
'D=D+A'
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterable, Iterator

from hackasm.errors import AssemblySyntaxError, SourceLocation


COMMENT_START = "//"
LABEL_OPEN = "("
LABEL_CLOSE = ")"


# =============================================================================
# Line Kind Enumeration
# =============================================================================

class LineKind(Enum):
    """Classification of a single source line."""
    BLANK = auto()        # Empty, whitespace or comment only
    LABEL = auto()        # (NAME)
    INSTRUCTION = auto()  # @value or dest=comp;jump


@dataclass(frozen=True)
class SourceLine:
    """
    A raw source line together with its position and classification.

    Attributes:
        text: The line as read, without its line terminator
        line_number: Line number in the source (1-indexed)
        kind: Result of classify_line(text)
    """
    text: str
    line_number: int
    kind: LineKind

    @property
    def column(self) -> int:
        """Column (1-indexed) of the first non-space character."""
        return _first_significant(self.text) + 1

    def location(self, filename: str) -> SourceLocation:
        """Location of this line's first significant character."""
        return SourceLocation(filename, self.line_number, self.column)


# =============================================================================
# Classification
# =============================================================================

def _first_significant(line: str) -> int:
    """Index of the first non-space character, or len(line) if none."""
    for index, char in enumerate(line):
        if not char.isspace():
            return index
    return len(line)


def is_instruction_line(line: str) -> bool:
    """
    Return True if the line holds an executable instruction.

    Leading spaces are skipped. A comment opener or a label opener ahead
    of any other character means the line is not an instruction.
    """
    start = _first_significant(line)
    if start == len(line):
        return False
    if line.startswith(COMMENT_START, start):
        return False
    return line[start] != LABEL_OPEN


def is_label_definition_line(line: str) -> bool:
    """Return True if the first non-space character opens a label."""
    start = _first_significant(line)
    if start == len(line) or line.startswith(COMMENT_START, start):
        return False
    return line[start] == LABEL_OPEN


def classify_line(line: str) -> LineKind:
    """Classify a raw source line."""
    if is_instruction_line(line):
        return LineKind.INSTRUCTION
    if is_label_definition_line(line):
        return LineKind.LABEL
    return LineKind.BLANK


def source_lines(source: str) -> list[str]:
    """
    Split source text into lines at "\\n" only.

    Form feeds, vertical tabs and Unicode line separators stay part of
    their line.
    A trailing "\\r" is left for split_lines() to strip.
    """
    return source.split("\n")


def split_lines(source: str | Iterable[str]) -> Iterator[SourceLine]:
    """
    Yield classified SourceLine records from source text or an iterable of lines.

    Line terminators are stripped, so lines read from a file object can be
    passed straight through.
    """
    lines = source_lines(source) if isinstance(source, str) else source
    for number, text in enumerate(lines, start=1):
        text = text.rstrip("\r\n")
        yield SourceLine(text, number, classify_line(text))


# =============================================================================
# Extraction
# =============================================================================

def extract_label_name(line: str) -> str:
    """
    Return the label name in a label definition line.

    Spaces and the label delimiters are skipped; every other character up
    to a comment or the end of the line is kept.
    """
    name = []
    index = 0
    while index < len(line):
        if line.startswith(COMMENT_START, index):
            break
        char = line[index]
        if not char.isspace() and char not in (LABEL_OPEN, LABEL_CLOSE):
            name.append(char)
        index += 1
    return "".join(name)


def extract_instruction_text(line: str) -> str:
    """
    Return the instruction with all whitespace and any trailing comment removed.

    "  AM = M - 1   // pop" becomes "AM=M-1".
    """
    code = line.split(COMMENT_START, 1)[0]
    return "".join(char for char in code if not char.isspace())


def validate_label_definition(line: str, location: SourceLocation) -> str:
    """
    Check a label definition line and return its name.

    extract_label_name() is lenient about stray delimiters; this check
    rejects the shapes it would otherwise silently accept.

    Raises:
        AssemblySyntaxError: Missing ")", empty name, name starting with a
            digit, whitespace inside the name, or text after ")"
    """
    code = line.split(COMMENT_START, 1)[0].strip()
    source_line = line.strip()

    close = code.find(LABEL_CLOSE)
    if close == -1:
        raise AssemblySyntaxError(
            "label definition is missing ')'",
            location,
            hint="label definitions look like (NAME)",
            source_line=source_line,
        )
    if code[close + 1:].strip():
        raise AssemblySyntaxError(
            f"unexpected text after label definition: '{code[close + 1:].strip()}'",
            location,
            source_line=source_line,
        )

    name = code[1:close].strip()
    if not name:
        raise AssemblySyntaxError("empty label name", location, source_line=source_line)
    if LABEL_OPEN in name or any(char.isspace() for char in name):
        raise AssemblySyntaxError(
            f"invalid label name '{name}'",
            location,
            source_line=source_line,
        )
    if name[0].isdigit():
        raise AssemblySyntaxError(
            f"label name '{name}' must not start with a digit",
            location,
            hint="digits at the start of an operand are read as a numeric address",
            source_line=source_line,
        )
    return name
