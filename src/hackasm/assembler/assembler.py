"""
Hack Assembler - Main Interface
===============================

This module provides the main Assembler class, the primary interface for
translating Hack assembly into Hack machine code. It reads source, runs
the two-pass code generator and writes the resulting files.

Example Usage
-------------
>>> from hackasm.assembler import Assembler
>>>
>>> asm = Assembler()
>>> asm.assemble_string('''
...     @2
...     D=A
...     @3
...     D=D+A
...     @0
...     M=D
... ''')
['0000000000000010', '1110110000010000', '0000000000000011', '1110000010010000', '0000000000000000', '1110001100001000']
>>>
>>> asm.write_hack("Add.hack")

Command-Line Usage
------------------
    $ hackasm Add.asm -s Add.sym -l Add.lst

Options:
    -o, --output FILE      Output .hack file (default: input.hack)
    -s, --symbols FILE     Generate symbol file
    -l, --listing FILE     Generate listing file
    -v, --verbose          Verbose output
"""

from pathlib import Path
from typing import Iterable, Optional
import logging

from hackasm.assembler.codegen import CodeGenerator
from hackasm.assembler.lexer import source_lines
from hackasm.config import AssemblerConfig
from hackasm.errors import AssemblySyntaxError, SourceLocation

logger = logging.getLogger(__name__)

SOURCE_ENCODING = "utf-8"


class Assembler:
    """
    Main Hack assembler class.

    Every assemble call translates a complete program from scratch; the
    results of the most recent call are available through get_code(),
    get_symbols() and the write_* methods.

    Attributes:
        config: Output naming and address-space bounds
    """

    def __init__(self, config: Optional[AssemblerConfig] = None):
        self.config = config or AssemblerConfig()
        self._source_file: Optional[Path] = None
        self._codegen = CodeGenerator(
            pool_top=self.config.pool_top,
            max_address=self.config.max_address,
        )

    # =========================================================================
    # Assembly Methods
    # =========================================================================

    def assemble_lines(self, lines: Iterable[str], filename: str = "<input>") -> list[str]:
        """
        Assemble a sequence of source lines.

        Args:
            lines: Source lines, with or without line terminators
            filename: Name used in error messages

        Returns:
            One 16-character binary string per instruction

        Raises:
            AssemblerError: If assembly fails
        """
        code = self._codegen.generate(lines, filename)
        logger.info(
            f"Assembled {filename}: {len(code)} instructions, "
            f"{len(self.get_variables())} variables"
        )
        return code

    def assemble_string(self, source: str, filename: str = "<input>") -> list[str]:
        """
        Assemble source code from a string.

        Raises:
            AssemblerError: If assembly fails
        """
        return self.assemble_lines(source_lines(source), filename)

    def assemble(self, source: str, filename: str = "<input>",
                 output_path: str | Path | None = None) -> list[str]:
        """
        Assemble source code, optionally writing the .hack file.

        Args:
            source: Assembly source code
            filename: Virtual filename for error messages
            output_path: Optional output file path

        Returns:
            Generated machine code lines
        """
        code = self.assemble_string(source, filename)
        if output_path:
            self.write_hack(output_path)
        return code

    def assemble_file(self, filepath: str | Path) -> list[str]:
        """
        Assemble source code from a file.

        The file is read as UTF-8 regardless of the locale.

        Raises:
            AssemblerError: If assembly fails
            AssemblySyntaxError: If the file is not valid UTF-8
            FileNotFoundError: If source file not found
        """
        filepath = Path(filepath)
        self._source_file = filepath

        logger.debug(f"Assembling {filepath}...")

        data = filepath.read_bytes()
        try:
            source = data.decode(SOURCE_ENCODING)
        except UnicodeDecodeError as e:
            line = data[:e.start].count(b"\n") + 1
            column = e.start - (data.rfind(b"\n", 0, e.start) + 1) + 1
            raise AssemblySyntaxError(
                f"byte 0x{data[e.start]:02x} is not valid {SOURCE_ENCODING}",
                SourceLocation(str(filepath), line, column),
                hint=f"save the source as {SOURCE_ENCODING}",
            ) from e

        return self.assemble_lines(source_lines(source), str(filepath))

    def output_path_for(self, input_path: str | Path) -> Path:
        """Return input_path with its suffix replaced by the output suffix."""
        return Path(input_path).with_suffix(self.config.output_suffix)

    # =========================================================================
    # Results
    # =========================================================================

    def get_code(self) -> list[str]:
        """Return the machine code lines from the last assembly."""
        return self._codegen.get_code()

    def get_symbols(self) -> dict[str, int]:
        """Return every symbol (predefined, labels and variables) and its address."""
        return self._codegen.get_symbols()

    def get_labels(self) -> dict[str, int]:
        return self._codegen.get_symbol_table().labels()

    def get_variables(self) -> dict[str, int]:
        """Return user variables in allocation order."""
        return self._codegen.get_symbol_table().variables()

    def get_listing(self) -> str:
        return self._codegen.get_listing()

    def get_source_file(self) -> Optional[Path]:
        return self._source_file

    # =========================================================================
    # Output Methods
    # =========================================================================

    def write_hack(self, filepath: str | Path) -> None:
        """
        Write the machine code file.

        One 16-character line per instruction, each newline terminated.
        """
        with open(filepath, "w", encoding=SOURCE_ENCODING) as f:
            for code in self._codegen.get_code():
                f.write(f"{code}\n")

        logger.debug(f"Wrote {len(self._codegen.get_code())} instructions to {filepath}")

    def write_symbols(self, filepath: str | Path) -> None:
        """
        Write symbol table file.

        Format: name address (one per line, sorted by name)
        """
        with open(filepath, "w", encoding=SOURCE_ENCODING) as f:
            f.write("# Symbol table\n")
            f.write("# Generated by hackasm\n")
            for name, address in sorted(self.get_symbols().items()):
                f.write(f"{name} {address}\n")

    def write_listing(self, filepath: str | Path) -> None:
        """Write assembly listing file."""
        with open(filepath, "w", encoding=SOURCE_ENCODING) as f:
            f.write(self.get_listing())
            f.write("\n")


# =============================================================================
# Convenience Functions
# =============================================================================

def assemble(source: str, filename: str = "<input>") -> list[str]:
    """
    Convenience function to assemble source code.

    Returns:
        Generated machine code lines

    Raises:
        AssemblerError: If assembly fails
    """
    asm = Assembler()
    return asm.assemble_string(source, filename)


def assemble_file(filepath: str | Path, output_path: str | Path | None = None) -> Path:
    """
    Assemble a file and write the machine code next to it.

    Args:
        filepath: Path to source file
        output_path: Output path (default: source path with suffix .hack)

    Returns:
        Path of the written machine code file

    Raises:
        AssemblerError: If assembly fails
    """
    asm = Assembler()
    asm.assemble_file(filepath)
    target = Path(output_path) if output_path else asm.output_path_for(filepath)
    asm.write_hack(target)
    return target
