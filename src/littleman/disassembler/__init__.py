"""
Little Man Disassembler Module
==============================

Usage:
    from littleman.disassembler import Disassembler

    disasm = Disassembler()
    instructions = disasm.disassemble(words, start_address=0)
"""

from .lmc import Disassembler, DisassembledInstruction

__all__ = [
    "Disassembler",
    "DisassembledInstruction",
]
