"""
Little Man Code Generator
=========================

This module turns a token stream into encoded words. It is the heart of
the assembler and runs three passes over the tokens:

1. **Association**: Walk the tokens once. Each instruction becomes a slot;
   if the token immediately before it is a label, the slot carries that
   label. A label followed by another label (or by nothing) binds nothing.

2. **Symbol table**: Walk the slots and record ``label -> slot index``.
   The index is the instruction's position after labels are removed, which
   is also its mailbox address when the program is loaded at offset 0.

3. **Encoding**: Encode each slot as ``base + address``. Mailbox operands
   and resolved label addresses must fit in 0-99.

Assembly is all-or-nothing: the first error raises and no words are
returned.
"""

import difflib
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

from littleman.assembler.lexer import Token
from littleman.errors import (
    DuplicateLabelError,
    IndexOutOfRangeError,
    UndefinedLabelError,
)
from littleman.isa import MAX_ADDRESS, Instruction, OperandKind, encode


logger = logging.getLogger(__name__)


# =============================================================================
# Pass Data
# =============================================================================

@dataclass(frozen=True)
class Slot:
    """
    One instruction position in the output program.

    Attributes:
        token: The INSTRUCTION token
        label: Token of the label bound to this slot, if any
    """
    token: Token
    label: Optional[Token] = None

    @property
    def instruction(self) -> Instruction:
        return self.token.value

    @property
    def label_name(self) -> Optional[str]:
        return self.label.value if self.label else None


@dataclass(frozen=True)
class ListingLine:
    """One row of the assembly listing."""
    address: int
    word: int
    line: int
    source: str
    label: Optional[str] = None

    def __str__(self) -> str:
        return f"{self.address:4d}  {self.word:4d}  {self.line:5d}  {self.source}"


# =============================================================================
# Code Generator
# =============================================================================

class CodeGenerator:
    """
    Encodes a token stream into a list of words.

    Attributes:
        strict_labels: If True, a label bound to two instructions raises
            DuplicateLabelError. Otherwise the later binding silently
            replaces the earlier one (a warning is logged).

    Example:
        >>> from littleman.assembler.lexer import tokenize
        >>> gen = CodeGenerator()
        >>> gen.generate(tokenize(".loop\\nread\\nb loop"))
        [901, 600]
    """

    def __init__(self, strict_labels: bool = False):
        self.strict_labels = strict_labels
        self._symbols: dict[str, int] = {}
        self._slots: list[Slot] = []
        self._code: list[int] = []

    # =========================================================================
    # Main Entry Point
    # =========================================================================

    def generate(self, tokens: Iterable[Token]) -> list[int]:
        """
        Run all three passes and return the encoded words.

        Raises:
            IndexOutOfRangeError: Operand or label address above 99
            UndefinedLabelError: Branch to a label that is not bound
            DuplicateLabelError: Label bound twice (strict mode only)
        """
        self._symbols = {}
        self._code = []

        self._slots = self._associate(tokens)
        logger.debug(f"Pass 1: {len(self._slots)} instruction slots")

        self._symbols = self._build_symbol_table(self._slots)
        logger.debug(f"Pass 2: {len(self._symbols)} labels")

        code = [self._encode_slot(slot) for slot in self._slots]
        self._code = code
        logger.debug(f"Pass 3: encoded {len(code)} words")
        return list(code)

    # =========================================================================
    # Pass 1: Label Association
    # =========================================================================

    @staticmethod
    def _associate(tokens: Iterable[Token]) -> list[Slot]:
        slots = []
        previous: Optional[Token] = None
        for token in tokens:
            if token.is_instruction:
                label = previous if previous is not None and previous.is_label else None
                slots.append(Slot(token, label))
            previous = token
        return slots

    # =========================================================================
    # Pass 2: Symbol Table
    # =========================================================================

    def _build_symbol_table(self, slots: list[Slot]) -> dict[str, int]:
        symbols: dict[str, int] = {}
        defined_at: dict[str, Token] = {}

        for index, slot in enumerate(slots):
            if slot.label is None:
                continue
            name = slot.label_name

            if name in symbols:
                first = defined_at[name]
                if self.strict_labels:
                    raise DuplicateLabelError(
                        name,
                        location=slot.label.location,
                        original_location=first.location,
                        source_line=slot.label.source_line,
                    )
                logger.warning(
                    f"{slot.label.location}: label '{name}' redefined, "
                    f"first defined at {first.location}"
                )

            symbols[name] = index
            defined_at[name] = slot.label
            logger.debug(f"Label '{name}' -> {index}")

        return symbols

    # =========================================================================
    # Pass 3: Encoding
    # =========================================================================

    def _encode_slot(self, slot: Slot) -> int:
        instruction = slot.instruction
        kind = instruction.info.operand

        if kind is OperandKind.NONE:
            return encode(instruction.opcode)

        if kind is OperandKind.MAILBOX:
            address = instruction.operand
            if address > MAX_ADDRESS:
                raise IndexOutOfRangeError(
                    address,
                    location=slot.token.location,
                    source_line=slot.token.source_line,
                )
            return encode(instruction.opcode, address)

        return encode(instruction.opcode, self._resolve_label(slot))

    def _resolve_label(self, slot: Slot) -> int:
        name = slot.instruction.operand
        index = self._symbols.get(name)

        if index is None:
            raise UndefinedLabelError(
                name,
                location=slot.token.location,
                source_line=slot.token.source_line,
                similar_labels=difflib.get_close_matches(name, self._symbols.keys()),
            )

        if index > MAX_ADDRESS:
            raise IndexOutOfRangeError(
                index,
                location=slot.token.location,
                source_line=slot.token.source_line,
                label=name,
            )

        return index

    # =========================================================================
    # Results
    # =========================================================================

    def get_code(self) -> list[int]:
        """Return the words produced by the last successful generate()."""
        return list(self._code)

    def get_symbols(self) -> dict[str, int]:
        """Return a dictionary of label names to slot indices."""
        return dict(self._symbols)

    def get_listing_lines(self) -> list[ListingLine]:
        return [
            ListingLine(
                address=index,
                word=word,
                line=slot.token.line,
                source=str(slot.instruction),
                label=slot.label_name,
            )
            for index, (slot, word) in enumerate(zip(self._slots, self._code))
        ]

    def get_listing(self) -> str:
        """
        Get the assembly listing as a string.

        Returns:
            The listing showing addresses, words, and source lines,
            followed by the symbol table.
        """
        lines = []
        lines.append("Little Man Assembler Listing")
        lines.append("=" * 40)
        lines.append("")
        lines.append("Addr  Word   Line  Source")
        lines.append("-" * 40)
        for row in self.get_listing_lines():
            if row.label:
                lines.append(f"{'':20s}.{row.label}")
            lines.append(str(row))
        lines.append("")
        lines.append("Symbol Table")
        lines.append("-" * 30)
        for name, index in sorted(self._symbols.items()):
            lines.append(f"{name:20s} = {index:02d}")
        return "\n".join(lines)

    def write_listing(self, filepath: str | Path) -> None:
        with open(filepath, "w") as f:
            f.write(self.get_listing())

    def write_symbols(self, filepath: str | Path) -> None:
        """
        Write symbol table file.

        Format: name address (one per line)
        """
        with open(filepath, "w") as f:
            f.write("# Symbol table\n")
            f.write("# Generated by lmasm\n")
            for name, index in sorted(self._symbols.items()):
                f.write(f"{name} {index:02d}\n")
