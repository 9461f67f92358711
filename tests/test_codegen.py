# =============================================================================
# test_codegen.py - Code Generator Tests
# =============================================================================
# Tests for the three code generator passes.
#
# Test coverage includes:
#   - Label association with the following instruction
#   - Symbol table construction and duplicate handling
#   - Encoding with range checks on operands and labels
#   - Undefined label reporting
# =============================================================================

import logging

import pytest

from littleman.assembler.codegen import CodeGenerator
from littleman.assembler.lexer import tokenize
from littleman.errors import (
    AssemblyError,
    DuplicateLabelError,
    IndexOutOfRangeError,
    UndefinedLabelError,
)


def generate(source: str, strict_labels: bool = False) -> list[int]:
    """Helper that tokenizes and generates in one step."""
    return CodeGenerator(strict_labels=strict_labels).generate(tokenize(source))


# =============================================================================
# Encoding Tests
# =============================================================================

class TestEncoding:
    """Test word encoding of each instruction."""

    def test_empty_program(self):
        """No instructions means no words."""
        assert generate("") == []
        assert generate("; nothing here\n.lonely") == []

    def test_operandless(self):
        """Fixed words for stop, read and print."""
        assert generate("read\nprint\nstop") == [901, 902, 0]

    def test_mailbox_instructions(self):
        """Mailbox instructions encode as base + operand."""
        assert generate("add 1\nsub 2\nsto 3\nsta 4\nload 99") == [101, 202, 303, 404, 599]

    def test_mailbox_zero(self):
        """Mailbox 0 encodes as the bare base."""
        assert generate("load 0") == [500]

    def test_operand_above_99(self):
        """Operands 100-255 lex but fail to encode."""
        with pytest.raises(IndexOutOfRangeError) as exc_info:
            generate("stop\nload 100")
        assert exc_info.value.index == 100
        assert exc_info.value.line == 2

    def test_branches(self):
        """Branches encode as base + label index."""
        source = """
.start
    read
    bz end
    bp start
    b start
.end
    stop
"""
        assert generate(source) == [901, 704, 800, 600, 0]


# =============================================================================
# Label Association Tests
# =============================================================================

class TestLabelAssociation:
    """Test which instruction a label binds to."""

    def test_label_index_skips_labels(self):
        """Label indices count instructions only."""
        gen = CodeGenerator()
        gen.generate(tokenize(".a\nread\n.b\nprint\n.c\nstop"))
        assert gen.get_symbols() == {"a": 0, "b": 1, "c": 2}

    def test_label_followed_by_label_binds_nothing(self):
        """Only the label right before an instruction binds."""
        gen = CodeGenerator()
        gen.generate(tokenize(".first\n.second\nstop"))
        assert gen.get_symbols() == {"second": 0}

    def test_unbound_label_cannot_be_branched_to(self):
        """A label with no instruction after it is not defined."""
        with pytest.raises(UndefinedLabelError):
            generate(".first\n.second\nstop\nb first")

    def test_trailing_label_binds_nothing(self):
        """A label at the end of the program is not defined."""
        with pytest.raises(UndefinedLabelError):
            generate("b end\n.end")

    def test_comment_between_label_and_instruction(self):
        """Comments and blank lines do not break a binding."""
        assert generate(".top\n; body\n\nread\nb top") == [901, 600]

    def test_label_definition_case_folded(self):
        """A mixed-case label definition is reached by a lowercase branch."""
        assert generate(".Loop\nread\nb loop") == [901, 600]

    def test_branch_operand_keeps_case(self):
        """Branch operands are not folded, so they must be written in lowercase."""
        with pytest.raises(UndefinedLabelError):
            generate(".Loop\nread\nb Loop")

    def test_forward_reference(self):
        """Branches may refer to labels defined later."""
        assert generate("b skip\nprint\n.skip\nstop") == [602, 902, 0]


# =============================================================================
# Duplicate Label Tests
# =============================================================================

class TestDuplicateLabels:
    """Test duplicate label handling in both modes."""

    SOURCE = ".x\nread\n.x\nprint\nb x"

    def test_later_definition_wins(self):
        """By default the last binding of a label is used."""
        assert generate(self.SOURCE) == [901, 902, 601]

    def test_redefinition_warns(self, caplog):
        """A redefinition is logged as a warning."""
        with caplog.at_level(logging.WARNING, logger="littleman.assembler.codegen"):
            generate(self.SOURCE)
        assert "redefined" in caplog.text

    def test_strict_rejects_duplicate(self):
        """Strict mode raises on the second definition."""
        with pytest.raises(DuplicateLabelError) as exc_info:
            generate(self.SOURCE, strict_labels=True)
        assert exc_info.value.label == "x"
        assert exc_info.value.line == 3
        assert exc_info.value.original_location.line == 1
        assert "first defined" in str(exc_info.value)

    def test_strict_accepts_unique_labels(self):
        """Strict mode does not affect programs without duplicates."""
        assert generate(".a\nread\n.b\nb a", strict_labels=True) == [901, 600]


# =============================================================================
# Label Resolution Error Tests
# =============================================================================

class TestLabelErrors:
    """Test errors raised while resolving branch targets."""

    def test_undefined_label(self):
        """Branch to a missing label raises with its line."""
        with pytest.raises(UndefinedLabelError) as exc_info:
            generate("read\nb nowhere")
        assert exc_info.value.label == "nowhere"
        assert exc_info.value.line == 2

    def test_undefined_label_suggests_close_match(self):
        """A near-miss label name gets a hint."""
        with pytest.raises(UndefinedLabelError) as exc_info:
            generate(".loop\nread\nb lop")
        assert "loop" in exc_info.value.similar_labels
        assert "did you mean 'loop'?" in str(exc_info.value)

    def test_label_index_above_99(self):
        """A label bound past mailbox 99 cannot be a branch target."""
        source = "\n".join(["read"] * 100 + [".far", "stop", "b far"])
        with pytest.raises(IndexOutOfRangeError) as exc_info:
            generate(source)
        assert exc_info.value.index == 100
        assert exc_info.value.label == "far"

    def test_unreferenced_label_above_99_is_fine(self):
        """Range checks only apply to labels that are used."""
        source = "\n".join(["read"] * 100 + [".far", "stop"])
        words = generate(source)
        assert len(words) == 101
        assert words[-1] == 0

    def test_label_at_99_is_fine(self):
        """Mailbox 99 is a valid branch target."""
        source = "\n".join(["b last"] + ["read"] * 98 + [".last", "stop"])
        assert generate(source)[0] == 699

    def test_all_are_assembly_errors(self):
        """Encoding errors share a base class."""
        for cls in (IndexOutOfRangeError, UndefinedLabelError, DuplicateLabelError):
            assert issubclass(cls, AssemblyError)


# =============================================================================
# Listing Tests
# =============================================================================

class TestListing:
    """Test listing and symbol output."""

    def test_listing_lines(self):
        """Listing rows carry address, word, line and source."""
        gen = CodeGenerator()
        gen.generate(tokenize("; header\n.top\nread\nb top"))
        rows = gen.get_listing_lines()
        assert [(r.address, r.word, r.line, r.source, r.label) for r in rows] == [
            (0, 901, 3, "read", "top"),
            (1, 600, 4, "b top", None),
        ]

    def test_listing_text(self):
        """Listing text includes the symbol table."""
        gen = CodeGenerator()
        gen.generate(tokenize(".top\nread\nb top"))
        listing = gen.get_listing()
        assert "Little Man Assembler Listing" in listing
        assert "Symbol Table" in listing
        assert ".top" in listing
        assert "b top" in listing
        assert "= 00" in listing

    def test_write_symbols(self, tmp_path):
        """Symbol file lists each label with its address."""
        gen = CodeGenerator()
        gen.generate(tokenize(".start\nread\n.end\nstop"))
        path = tmp_path / "prog.sym"
        gen.write_symbols(path)
        lines = path.read_text().splitlines()
        assert lines[0].startswith("#")
        assert lines[2:] == ["end 01", "start 00"]
