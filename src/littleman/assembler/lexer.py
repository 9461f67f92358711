"""
Little Man Assembly Language Lexer
==================================

This module implements the tokenizer for Little Man assembly language.
Source is strictly line oriented: every non-blank line becomes exactly one
token, either an instruction or a label.

Line Grammar
------------
    ; comment                 -> ignored
    .name                     -> LABEL token
    mnemonic                  -> INSTRUCTION (stop, read, print)
    mnemonic number           -> INSTRUCTION (add, sub, sto, sta, load)
    mnemonic label            -> INSTRUCTION (b, bz, bp)

- Everything after ``;`` is a comment.
- Mnemonics and label definitions are case-insensitive (folded to lowercase);
  branch operands are kept exactly as written.
- Operands are separated by commas; empty operand fields are dropped.
- Numeric operands are unsigned 8-bit decimal numbers (0-255). Range
  checking against the 100 mailboxes happens later, in the code generator.
- Blank and comment-only lines produce no token but still count for line
  numbers in error messages.

Example
-------
>>> from littleman.assembler.lexer import Lexer
>>> source = ".top\\n  READ   ; get a value\\n  b top"
>>> for token in Lexer(source, "example.lmc").tokenize():
...     print(token)
Token(LABEL, 'top', 1:1)
Token(INSTRUCTION, read, 2:3)
Token(INSTRUCTION, b top, 3:3)
"""

import difflib
import re
from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator, Optional, Union

from littleman.errors import InvalidInstructionError, OperandParseError, SourceLocation
from littleman.isa import MAX_OPERAND_VALUE, MNEMONICS, OPCODE_TABLE, Instruction, Opcode, OperandKind


COMMENT_CHAR = ";"
LABEL_PREFIX = "."
OPERAND_SEPARATOR = ","

_NUMBER = re.compile(r"\+?[0-9]+")


# =============================================================================
# Token Type Enumeration
# =============================================================================

class TokenType(Enum):
    """Token types for Little Man assembly language."""
    INSTRUCTION = auto()  # value is an Instruction
    LABEL = auto()        # value is the label name


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass(frozen=True)
class Token:
    """
    A single token from the source code.

    Attributes:
        type: The TokenType classification
        value: Instruction for INSTRUCTION tokens, name for LABEL tokens
        line: Line number in source (1-indexed)
        column: Column of the first non-blank character (1-indexed)
        filename: Name of the source file
        source_line: The raw source line, for error context
    """
    type: TokenType
    value: Union[Instruction, str]
    line: int
    column: int = 1
    filename: str = "<input>"
    source_line: str = ""

    def __repr__(self) -> str:
        if self.type is TokenType.LABEL:
            return f"Token({self.type.name}, {self.value!r}, {self.line}:{self.column})"
        return f"Token({self.type.name}, {self.value}, {self.line}:{self.column})"

    @property
    def location(self) -> SourceLocation:
        """Return a SourceLocation for error reporting."""
        return SourceLocation(self.filename, self.line, self.column)

    @property
    def is_label(self) -> bool:
        return self.type is TokenType.LABEL

    @property
    def is_instruction(self) -> bool:
        return self.type is TokenType.INSTRUCTION


# =============================================================================
# Lexer Implementation
# =============================================================================

class Lexer:
    """
    Tokenizes Little Man assembly source code.

    Usage:
        lexer = Lexer(source_text, filename)
        tokens = list(lexer.tokenize())

    Tokenization is fail-fast: the first bad line raises and no further
    tokens are produced.

    Attributes:
        source: The source code being tokenized
        filename: Name of the source file (for error reporting)
    """

    def __init__(self, source: str, filename: str = "<input>", line_number: int = 1):
        """
        Initialize the lexer with source code.

        Args:
            source: The assembly source code to tokenize
            filename: Name of the source file (for error messages)
            line_number: Number of the first source line (default 1)
        """
        self.source = source
        self.filename = filename
        self._first_line = line_number

    def tokenize(self) -> Iterator[Token]:
        """
        Generate tokens from the source code, one per meaningful line.

        Raises:
            InvalidInstructionError: Line is neither an instruction nor a label
            OperandParseError: Numeric operand is not a number in 0-255
        """
        for line_number, raw in enumerate(self.source.split("\n"), start=self._first_line):
            raw = raw.rstrip("\r")
            text = raw.split(COMMENT_CHAR, 1)[0].strip()
            if not text:
                continue

            column = len(raw) - len(raw.lstrip()) + 1
            token = self._lex_line(text, raw, line_number, column)
            if token is not None:
                yield token

    def _lex_line(self, text: str, raw: str, line: int, column: int) -> Optional[Token]:
        """Turn one stripped, non-blank line into a token (or None for a bare prefix)."""
        location = SourceLocation(self.filename, line, column)

        fields = text.split(None, 1)
        head = fields[0]
        rest = fields[1] if len(fields) > 1 else ""
        operands = [part.strip() for part in rest.split(OPERAND_SEPARATOR)]
        operands = [part for part in operands if part]

        head = head.lower()
        opcode = MNEMONICS.get(head)
        if opcode is not None:
            instruction = self._build_instruction(opcode, operands, text, raw, location)
            return Token(TokenType.INSTRUCTION, instruction, line, column, self.filename, raw)

        # Label definitions are folded with the mnemonic field; branch operands are not
        if head.startswith(LABEL_PREFIX) and not operands:
            name = head[len(LABEL_PREFIX):]
            if not name:
                return None
            return Token(TokenType.LABEL, name, line, column, self.filename, raw)

        hint = None
        if head.startswith(LABEL_PREFIX):
            hint = "a label must be on a line of its own"
        else:
            suggestions = difflib.get_close_matches(head, sorted(MNEMONICS))
            if suggestions:
                hint = "did you mean " + " or ".join(f"'{s}'" for s in suggestions) + "?"
        raise InvalidInstructionError(text, location=location, hint=hint, source_line=raw)

    def _build_instruction(self, opcode: Opcode, operands: list[str], text: str, raw: str,
                           location: SourceLocation) -> Instruction:
        info = OPCODE_TABLE[opcode]

        if len(operands) != info.arity:
            raise InvalidInstructionError(
                text,
                location=location,
                hint=f"'{info.mnemonic}' takes {info.operand}",
                source_line=raw,
            )

        if info.operand is OperandKind.NONE:
            return Instruction(opcode)
        if info.operand is OperandKind.LABEL:
            return Instruction(opcode, operands[0])
        return Instruction(opcode, self._parse_number(operands[0], raw, location))

    @staticmethod
    def _parse_number(text: str, raw: str, location: SourceLocation) -> int:
        """Parse an unsigned 8-bit decimal operand."""
        if not _NUMBER.fullmatch(text):
            raise OperandParseError(text, location=location, source_line=raw)
        value = int(text)
        if value > MAX_OPERAND_VALUE:
            raise OperandParseError(text, location=location, source_line=raw)
        return value


# =============================================================================
# Convenience Function
# =============================================================================

def tokenize(source: str, filename: str = "<input>") -> list[Token]:
    """Tokenize a whole source string into a list."""
    return list(Lexer(source, filename).tokenize())
