"""
Little Man Toolchain Error Hierarchy
====================================

This module defines the exception hierarchy for the whole toolchain.
All exceptions inherit from LittleManError, allowing callers to catch
every toolchain error with a single except clause if desired.

Exception Hierarchy
-------------------
LittleManError (base)
├── AssemblerError (assembler-related)
│   ├── AssemblySyntaxError - syntax errors in source
│   │   ├── InvalidInstructionError - unknown mnemonic or wrong arity
│   │   └── OperandParseError - operand is not an 8-bit unsigned number
│   └── AssemblyError - errors while encoding
│       ├── IndexOutOfRangeError - operand or label address above 99
│       ├── UndefinedLabelError - branch to a label that does not exist
│       └── DuplicateLabelError - label defined twice (strict mode only)
├── ImageError - malformed encoded word stream
└── VMError (runtime)
    ├── ProgramDoesNotFitError - load image exceeds the mailboxes
    ├── InstructionCounterOutOfBoundsError - counter left mailboxes 0-99
    ├── NumberOutOfRangeError - accumulator left [-500, 499]
    ├── InvalidOpcodeError - fetched word is not an instruction
    └── MemoryAccessError - no such mailbox, or word wider than 16 bits

Error messages from the assembler follow this format:
    filename:line:column: error: description
        source_line_text
        ^
    hint: suggestion for fixing (when available)
"""

from dataclasses import dataclass
from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class LittleManError(Exception):
    """
    Base exception for all toolchain errors.

        try:
            words = assemble(source)
        except LittleManError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    A location in source code for error reporting.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column of the first non-blank character (1-indexed)
    """
    filename: str
    line: int
    column: int = 1

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}:{self.column}"

    def excerpt(self, source_line: str, indent: int = 4) -> list[str]:
        """
        Quote ``source_line`` with a caret under this location's column.

        >>> SourceLocation("x.lmc", 3, 3).excerpt("  b lop")
        ['      b lop', '      ^']
        """
        pad = " " * indent
        return [pad + source_line, pad + " " * (self.column - 1) + "^"]


# =============================================================================
# Assembler Exceptions
# =============================================================================

class AssemblerError(LittleManError):
    """
    Base exception for errors found while assembling a source file.

    The exception text is the full compiler-style report, e.g.::

        loop.lmc:4:1: error: undefined label 'lop'
            b lop
            ^
        hint: did you mean 'loop'?

    Attributes:
        message: The bare error description, without location
        location: Where in the source the error occurred (optional)
        hint: A suggestion for fixing the error (optional)
        source_line: The raw source line, quoted under the heading (optional)
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
        super().__init__("\n".join(self.report()))

    @property
    def line(self) -> Optional[int]:
        """1-based source line of the error, if known."""
        return self.location.line if self.location else None

    def report(self) -> list[str]:
        """Lines of the error report: heading, quoted source, hint."""
        if self.location is None:
            return [f"error: {self.message}"] + self._hint_lines()

        lines = [f"{self.location}: error: {self.message}"]
        if self.source_line is not None:
            lines += self.location.excerpt(self.source_line)
        return lines + self._hint_lines()

    def _hint_lines(self) -> list[str]:
        return [f"hint: {self.hint}"] if self.hint else []


class AssemblySyntaxError(AssemblerError):
    """
    Syntax error in assembly source code.

    Raised by the lexer when a line cannot be turned into a token.
    """
    pass


class InvalidInstructionError(AssemblySyntaxError):
    """
    Line matches neither an instruction nor a label.

    Covers unknown mnemonics as well as known mnemonics with the wrong
    number of operands, e.g. ``add`` with no slot or ``stop 3``.
    """

    def __init__(
        self,
        text: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.text = text
        super().__init__(
            f"invalid instruction '{text}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class OperandParseError(AssemblySyntaxError):
    """Numeric operand is not an unsigned 8-bit integer."""

    def __init__(
        self,
        operand: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.operand = operand
        super().__init__(
            f"cannot parse operand '{operand}' as a number in 0-255",
            location=location,
            source_line=source_line,
        )


class AssemblyError(AssemblerError):
    """
    Error while encoding a token stream into words.

    Raised by the code generator after tokenization has succeeded.
    """
    pass


class IndexOutOfRangeError(AssemblyError):
    """
    Mailbox index does not fit in two decimal digits.

    Raised for a numeric operand in 100-255, or for a label that resolves
    to an instruction index above 99.
    """

    def __init__(
        self,
        index: int,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        label: Optional[str] = None,
    ):
        self.index = index
        self.label = label

        if label is not None:
            message = f"label '{label}' resolves to index {index}, beyond mailbox 99"
        else:
            message = f"mailbox index {index} is out of range (0-99)"

        super().__init__(message, location=location, source_line=source_line)


class UndefinedLabelError(AssemblyError):
    """
    Reference to a label that is never bound to an instruction.

    The code generator suggests similarly-named labels when this error
    occurs, helping to catch typos.
    """

    def __init__(
        self,
        label: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
        similar_labels: Optional[list[str]] = None,
    ):
        self.label = label
        self.similar_labels = similar_labels or []

        if not hint and self.similar_labels:
            suggestions = ", ".join(f"'{s}'" for s in self.similar_labels[:3])
            hint = f"did you mean {suggestions}?"

        super().__init__(
            f"undefined label '{label}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class DuplicateLabelError(AssemblyError):
    """
    Label bound to more than one instruction.

    Only raised when the assembler runs with strict labels; otherwise the
    later binding wins.
    """

    def __init__(
        self,
        label: str,
        location: Optional[SourceLocation] = None,
        original_location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.label = label
        self.original_location = original_location

        hint = None
        if original_location:
            hint = f"'{label}' was first defined at {original_location}"

        super().__init__(
            f"duplicate label '{label}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


# =============================================================================
# Image Exceptions
# =============================================================================

class ImageError(LittleManError):
    """
    Encoded word stream cannot be serialized.

    Raised when a word does not fit in a signed 16-bit integer.
    """
    pass


# =============================================================================
# Virtual Machine Exceptions
# =============================================================================

class VMError(LittleManError):
    """
    Base exception for runtime errors in the virtual machine.

    Every VMError is fatal: the machine stops at the failing step and
    memory changes made by earlier steps are kept.
    """
    pass


class ProgramDoesNotFitError(VMError):
    """Program plus load offset reaches past the last usable mailbox."""

    def __init__(self, length: int, offset: int):
        self.length = length
        self.offset = offset
        super().__init__(
            f"program of {length} words at offset {offset} does not fit in memory"
        )


class InstructionCounterOutOfBoundsError(VMError):
    """Instruction counter is outside mailboxes 0-99 at fetch time."""

    def __init__(self, counter: int):
        self.counter = counter
        super().__init__(f"instruction counter {counter} is out of bounds")


class NumberOutOfRangeError(VMError):
    """Accumulator left the representable range [-500, 499]."""

    def __init__(self, value: int):
        self.value = value
        super().__init__(f"number {value} is out of range (-500 to 499)")


class InvalidOpcodeError(VMError):
    """Fetched word does not decode to any instruction."""

    def __init__(self, word: int, address: Optional[int] = None):
        self.word = word
        self.address = address
        where = f" at mailbox {address}" if address is not None else ""
        super().__init__(f"invalid instruction {word}{where}")


class MemoryAccessError(VMError):
    """
    Access to a mailbox that does not exist, or a store of a word that a
    mailbox cannot hold (mailboxes are signed 16-bit).
    """

    def __init__(self, address: int, value: Optional[int] = None):
        self.address = address
        self.value = value
        if value is None:
            message = f"mailbox {address} does not exist (0-99)"
        else:
            message = f"word {value} does not fit in mailbox {address} (16-bit signed)"
        super().__init__(message)
