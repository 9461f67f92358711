"""
Little Man Disassembler
=======================

Turns encoded words back into assembly mnemonics. This is the inverse of
the code generator's encoding pass and uses the same band classification
as the CPU, so a word disassembles to exactly the instruction the machine
would execute.

Words that are not instructions (1-99, 900, 903+, negatives) are shown as
``DAT <word>``; they are usually data mailboxes.

Branch targets are shown as labels. Known names come from the symbol
table passed in; other targets get generated names like ``L07``.

Usage:
    disasm = Disassembler()
    for instr in disasm.disassemble([901, 700, 902, 0]):
        print(instr)
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

from littleman.isa import OperandKind, decode


@dataclass
class DisassembledInstruction:
    """
    A single disassembled word.

    Attributes:
        address: Mailbox holding the word
        word: The raw word value
        mnemonic: Instruction mnemonic, or "DAT" for non-instructions
        operand_str: Formatted operand (mailbox number or label)
        target: Branch target address, if the word is a branch
    """
    address: int
    word: int
    mnemonic: str
    operand_str: str = ""
    target: Optional[int] = None

    @property
    def is_data(self) -> bool:
        return self.mnemonic == "DAT"

    def __str__(self) -> str:
        """Format as listing line: ADDRESS: WORD  MNEMONIC OPERAND"""
        asm = f"{self.mnemonic} {self.operand_str}" if self.operand_str else self.mnemonic
        return f"{self.address:02d}: {self.word:5d}  {asm}"

    def to_dict(self) -> dict:
        return {
            "address": self.address,
            "word": self.word,
            "mnemonic": self.mnemonic,
            "operand": self.operand_str,
            "target": self.target,
        }


class Disassembler:
    """
    Disassembler for Little Man words.

    Attributes:
        symbols: Maps mailbox address to label name for branch targets
    """

    def __init__(self, symbol_table: Optional[Dict[int, str]] = None):
        self.symbols: Dict[int, str] = dict(symbol_table or {})

    def add_symbols(self, symbols: Dict[str, int]) -> None:
        """Add labels from an assembler symbol table (name -> address)."""
        for name, address in symbols.items():
            self.symbols[address] = name

    def label_for(self, address: int) -> str:
        return self.symbols.get(address, f"L{address:02d}")

    def disassemble_one(self, word: int, address: int = 0) -> DisassembledInstruction:
        decoded = decode(word)
        if decoded is None:
            return DisassembledInstruction(address, word, "DAT", str(word))

        info = decoded.info
        if info.operand is OperandKind.NONE:
            return DisassembledInstruction(address, word, info.mnemonic)
        if info.operand is OperandKind.MAILBOX:
            return DisassembledInstruction(address, word, info.mnemonic, str(decoded.address))
        return DisassembledInstruction(
            address,
            word,
            info.mnemonic,
            self.label_for(decoded.address),
            target=decoded.address,
        )

    def disassemble(
        self,
        words: List[int],
        start_address: int = 0,
        count: Optional[int] = None,
    ) -> List[DisassembledInstruction]:
        """
        Disassemble a sequence of words.

        Args:
            words: Encoded words
            start_address: Mailbox of the first word
            count: Maximum number of words (None = all)
        """
        if count is not None:
            words = words[:count]
        return [
            self.disassemble_one(word, start_address + index)
            for index, word in enumerate(words)
        ]

    def disassemble_to_text(self, words: List[int], start_address: int = 0,
                            count: Optional[int] = None) -> str:
        """
        Disassemble and return a listing with label lines before branch targets.
        """
        instructions = self.disassemble(words, start_address, count)
        targets = {instr.target for instr in instructions if instr.target is not None}
        targets.update(self.symbols)

        lines = []
        for instr in instructions:
            if instr.address in targets:
                lines.append(f".{self.label_for(instr.address)}")
            lines.append(str(instr))
        return "\n".join(lines)
