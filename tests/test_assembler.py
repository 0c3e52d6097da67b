# =============================================================================
# test_assembler.py - Full Assembler Integration Tests
# =============================================================================
# End-to-end tests for the complete Hack assembler, from source text to
# machine code lines and output files.
#
# Test coverage includes:
#   - Complete program assembly
#   - Label addressing and forward references
#   - Variable allocation
#   - Error reporting with line numbers
#   - Symbol, listing and machine code files
# =============================================================================

from pathlib import Path

import pytest

from hackasm import AssemblerConfig
from hackasm.assembler import Assembler, assemble, assemble_file
from hackasm.errors import (
    AddressOutOfRangeError,
    AssemblerError,
    AssemblySyntaxError,
    DuplicateSymbolError,
    MalformedInstructionError,
    RegisterPoolExhaustedError,
)


ADD_SOURCE = """\
// Computes R0 = 2 + 3
@2
D=A
@3
D=D+A
@0
M=D
"""

ADD_CODE = [
    "0000000000000010",
    "1110110000010000",
    "0000000000000011",
    "1110000010010000",
    "0000000000000000",
    "1110001100001000",
]

MAX_SOURCE = """\
// Computes R2 = max(R0, R1)

   @R0
   D=M              // D = first number
   @R1
   D=D-M            // D = first number - second number
   @OUTPUT_FIRST
   D;JGT            // if D>0 (first is greater) goto output_first
   @R1
   D=M              // D = second number
   @OUTPUT_D
   0;JMP            // goto output_d
(OUTPUT_FIRST)
   @R0
   D=M              // D = first number
(OUTPUT_D)
   @R2
   M=D              // M[2] = D (greatest number)
(INFINITE_LOOP)
   @INFINITE_LOOP
   0;JMP            // infinite loop
"""

MAX_CODE = [
    "0000000000000000",
    "1111110000010000",
    "0000000000000001",
    "1111010011010000",
    "0000000000001010",
    "1110001100000001",
    "0000000000000001",
    "1111110000010000",
    "0000000000001100",
    "1110101010000111",
    "0000000000000000",
    "1111110000010000",
    "0000000000000010",
    "1110001100001000",
    "0000000000001110",
    "1110101010000111",
]


# =============================================================================
# Full Assembly Pipeline Tests
# =============================================================================

class TestFullPipeline:
    """Test the complete assembly pipeline."""

    def test_add(self):
        """Assemble the constant-addition program."""
        assert Assembler().assemble_string(ADD_SOURCE) == ADD_CODE

    def test_max(self):
        """Assemble a program with labels, jumps and comments."""
        assert Assembler().assemble_string(MAX_SOURCE) == MAX_CODE

    def test_assemble_lines(self):
        """A list of lines with terminators is accepted."""
        lines = ADD_SOURCE.splitlines(keepends=True)
        assert Assembler().assemble_lines(lines) == ADD_CODE

    def test_crlf_source(self):
        source = ADD_SOURCE.replace("\n", "\r\n")
        assert Assembler().assemble_string(source) == ADD_CODE

    def test_convenience_function(self):
        assert assemble(ADD_SOURCE) == ADD_CODE

    def test_empty_program(self):
        assert Assembler().assemble_string("// nothing here\n\n") == []

    def test_every_line_is_16_bits(self):
        for code in Assembler().assemble_string(MAX_SOURCE):
            assert len(code) == 16
            assert set(code) <= {"0", "1"}

    def test_deterministic(self):
        """Repeated runs produce identical output."""
        asm = Assembler()
        first = asm.assemble_string(MAX_SOURCE)
        second = asm.assemble_string(MAX_SOURCE)
        assert first == second == Assembler().assemble_string(MAX_SOURCE)


# =============================================================================
# Label Tests
# =============================================================================

class TestLabels:
    """Test label addressing."""

    def test_label_before_fourth_instruction(self):
        source = """
            @0
            D=M
            @1
            D=D-M
        (LOOP)
            @LOOP
            0;JMP
        """
        code = Assembler().assemble_string(source)
        assert code[4] == "0000000000000100"

    def test_forward_reference(self):
        source = """
            @END
            0;JMP
        (END)
            @END
            0;JMP
        """
        code = Assembler().assemble_string(source)
        assert code[0] == "0000000000000010"
        assert code[2] == "0000000000000010"

    def test_consecutive_labels_share_address(self):
        source = "(A)\n(B)\n@A\n@B\n"
        asm = Assembler()
        asm.assemble_string(source)
        assert asm.get_labels() == {"A": 0, "B": 0}

    def test_label_at_end(self):
        """A trailing label names the address after the last instruction."""
        asm = Assembler()
        asm.assemble_string("@0\n0;JMP\n(END)\n")
        assert asm.get_labels() == {"END": 2}

    def test_label_is_not_a_variable(self):
        asm = Assembler()
        asm.assemble_string("(LOOP)\n@LOOP\n0;JMP\n")
        assert asm.get_variables() == {}


# =============================================================================
# Variable Tests
# =============================================================================

class TestVariables:
    """Test variable allocation."""

    def test_first_variable_at_16(self):
        code = Assembler().assemble_string("@myvar\nM=0\n")
        assert code[0] == "0000000000010000"

    def test_allocation_order(self):
        source = """
            @i
            M=1
            @sum
            M=0
            @i
            D=M
            @count
            M=D
        """
        asm = Assembler()
        code = asm.assemble_string(source)
        assert asm.get_variables() == {"i": 16, "sum": 17, "count": 18}
        assert code[4] == "0000000000010000"

    def test_label_address_does_not_block_register(self):
        """A label equal to 16 leaves RAM[16] free for the first variable."""
        source = "D=0\n" * 16 + "(SIXTEEN)\n@SIXTEEN\n@x\n"
        asm = Assembler()
        code = asm.assemble_string(source)
        assert asm.get_labels() == {"SIXTEEN": 16}
        assert asm.get_variables() == {"x": 16}
        assert code[16] == code[17] == "0000000000010000"

    def test_label_defined_after_use_is_not_allocated(self):
        """Pass 1 sees every label before any variable is allocated."""
        source = "@LATER\n@v\n(LATER)\n@LATER\n"
        asm = Assembler()
        asm.assemble_string(source)
        assert asm.get_labels() == {"LATER": 2}
        assert asm.get_variables() == {"v": 16}

    def test_predefined_symbols(self):
        code = Assembler().assemble_string("@SCREEN\n@KBD\n@THAT\n@R15\n")
        assert code == [
            "0100000000000000",
            "0110000000000000",
            "0000000000000100",
            "0000000000001111",
        ]

    def test_symbols_are_case_sensitive(self):
        """'sp' is a new variable, not SP."""
        asm = Assembler()
        asm.assemble_string("@sp\n")
        assert asm.get_variables() == {"sp": 16}


# =============================================================================
# Error Handling Tests
# =============================================================================

class TestErrorHandling:
    """Test error handling and reporting."""

    def test_unknown_comp_names_line(self):
        with pytest.raises(MalformedInstructionError) as exc_info:
            Assembler().assemble_string("@1\nD=D+X\n", "prog.asm")
        error = exc_info.value
        assert error.field == "comp"
        assert error.location.line == 2
        assert "prog.asm:2:1" in str(error)

    def test_non_canonical_dest(self):
        with pytest.raises(MalformedInstructionError, match="unknown dest field 'DM'"):
            Assembler().assemble_string("DM=1\n")

    def test_unknown_jump(self):
        with pytest.raises(MalformedInstructionError, match="jump"):
            Assembler().assemble_string("0;JUMP\n")

    def test_literal_out_of_range(self):
        with pytest.raises(AddressOutOfRangeError):
            Assembler().assemble_string("@32768\n")

    def test_largest_literal(self):
        assert Assembler().assemble_string("@32767\n") == ["0111111111111111"]

    def test_empty_operand(self):
        with pytest.raises(AssemblySyntaxError):
            Assembler().assemble_string("@  // nothing\n")

    def test_unclosed_label(self):
        with pytest.raises(AssemblySyntaxError) as exc_info:
            Assembler().assemble_string("@0\n  (LOOP\n")
        assert exc_info.value.location.line == 2
        assert exc_info.value.location.column == 3

    def test_duplicate_label(self):
        source = "(LOOP)\n@0\n(LOOP)\n@1\n"
        with pytest.raises(DuplicateSymbolError) as exc_info:
            Assembler().assemble_string(source, "prog.asm")
        assert exc_info.value.original_location.line == 1
        assert "first defined at prog.asm:1:1" in str(exc_info.value)

    def test_label_shadowing_predefined(self):
        with pytest.raises(DuplicateSymbolError, match="predefined"):
            Assembler().assemble_string("(SCREEN)\n@0\n")

    def test_pool_exhausted(self):
        asm = Assembler(AssemblerConfig(pool_top=17))
        with pytest.raises(RegisterPoolExhaustedError, match="'c'"):
            asm.assemble_string("@a\n@b\n@c\n")

    def test_all_errors_are_assembler_errors(self):
        for source in ("D=D+X\n", "@99999\n", "@\n", "(X\n"):
            with pytest.raises(AssemblerError):
                Assembler().assemble_string(source)

    def test_overlong_literal(self):
        """A literal with thousands of digits is out of range, not a crash."""
        with pytest.raises(AddressOutOfRangeError) as exc_info:
            Assembler().assemble_string("@" + "9" * 5000, "prog.asm")
        message = str(exc_info.value)
        assert "(5000 digits)" in message
        assert "prog.asm:1:1" in message

    def test_leading_zeros_do_not_count(self):
        assert Assembler().assemble_string("@000032767\n") == ["0111111111111111"]

    def test_error_underlines_statement(self):
        with pytest.raises(MalformedInstructionError) as exc_info:
            Assembler().assemble_string("@1\n    D=D+X   // add\n", "prog.asm")
        lines = str(exc_info.value).splitlines()
        assert lines[0].startswith("prog.asm:2:5: error:")
        assert lines[1] == "    D=D+X   // add"
        assert lines[2] == "    " + "^" * len("D=D+X   // add")

    def test_form_feed_in_comment(self):
        """Only newlines end a line; a form feed inside a comment is comment text."""
        code = Assembler().assemble_string("@1 // note\x0cD=Q\nD=A\n")
        assert code == ["0000000000000001", "1110110000010000"]

    def test_unicode_separator_in_comment(self):
        code = Assembler().assemble_string("@1 // a\u2028b\n")
        assert code == ["0000000000000001"]

    def test_line_numbers_ignore_other_separators(self):
        with pytest.raises(MalformedInstructionError) as exc_info:
            Assembler().assemble_string("// a\x0bb\x1cc\nD=Q\n")
        assert exc_info.value.location.line == 2

    def test_no_partial_output(self):
        """A failed translation leaves no code behind."""
        asm = Assembler()
        asm.assemble_string(ADD_SOURCE)
        with pytest.raises(AssemblerError):
            asm.assemble_string("@1\n@2\nD=Q\n")
        assert asm.get_code() == []


# =============================================================================
# File I/O Tests
# =============================================================================

class TestFileIO:
    """Test file input/output operations."""

    def test_assemble_file(self, tmp_path):
        src = tmp_path / "Add.asm"
        src.write_text(ADD_SOURCE)
        assert Assembler().assemble_file(src) == ADD_CODE

    def test_write_hack(self, tmp_path):
        out = tmp_path / "Max.hack"
        Assembler().assemble(MAX_SOURCE, output_path=out)
        assert out.read_text() == "\n".join(MAX_CODE) + "\n"

    def test_convenience_file_function(self, tmp_path):
        src = tmp_path / "Add.asm"
        src.write_text(ADD_SOURCE)
        out = assemble_file(src)
        assert out == tmp_path / "Add.hack"
        assert out.read_text().splitlines() == ADD_CODE

    def test_file_with_form_feed(self, tmp_path):
        src = tmp_path / "Page.asm"
        src.write_bytes(b"@1 // page\x0cD=Q\r\nD=A\r\n")
        assert Assembler().assemble_file(src) == ["0000000000000001", "1110110000010000"]

    def test_file_read_as_utf8(self, tmp_path):
        src = tmp_path / "Note.asm"
        src.write_bytes("// r\u00e9sum\u00e9\n@2\n".encode("utf-8"))
        assert Assembler().assemble_file(src) == ["0000000000000010"]

    def test_invalid_utf8(self, tmp_path):
        """Undecodable bytes are reported against the line holding them."""
        src = tmp_path / "Bad.asm"
        src.write_bytes(b"@1\n// \xff\n@2\n")
        with pytest.raises(AssemblySyntaxError) as exc_info:
            Assembler().assemble_file(src)
        error = exc_info.value
        assert error.location.line == 2
        assert error.location.column == 4
        assert "0xff" in str(error)

    def test_output_path_for(self):
        asm = Assembler()
        assert asm.output_path_for("prog/Pong.asm") == Path("prog/Pong.hack")

    def test_custom_output_suffix(self):
        asm = Assembler(AssemblerConfig(output_suffix=".bin"))
        assert asm.output_path_for("Pong.asm") == Path("Pong.bin")

    def test_write_symbols(self, tmp_path):
        asm = Assembler()
        asm.assemble_string("(LOOP)\n@counter\n@LOOP\n0;JMP\n")
        path = tmp_path / "prog.sym"
        asm.write_symbols(path)
        lines = path.read_text().splitlines()
        assert lines[0].startswith("#")
        assert "LOOP 0" in lines
        assert "counter 16" in lines
        assert "SCREEN 16384" in lines
        names = [line.split()[0] for line in lines if not line.startswith("#")]
        assert names == sorted(names)

    def test_listing(self, tmp_path):
        asm = Assembler()
        asm.assemble_string(ADD_SOURCE)
        listing = asm.get_listing()
        assert "Hack Assembler Listing" in listing
        assert "    1  1110110000010000     3  D=A" in listing
        path = tmp_path / "Add.lst"
        asm.write_listing(path)
        assert path.read_text() == listing + "\n"
