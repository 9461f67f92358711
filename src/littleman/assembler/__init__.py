"""
Little Man Assembler
====================

Converts Little Man assembly source into encoded words.

Main Components
---------------
- **Assembler**: Main assembler class that orchestrates the assembly process
- **Lexer**: Tokenizes source lines into instruction and label tokens
- **CodeGenerator**: Binds labels, builds the symbol table, encodes words

Assembly Process
----------------
1. **Tokenizing (Lexer)**: one token per non-blank line
2. **Code Generation (CodeGenerator)**:
   - Pass 1: attach each label to the instruction right after it
   - Pass 2: build the symbol table from instruction positions
   - Pass 3: encode each instruction, resolving branch labels
"""

from littleman.assembler.assembler import Assembler, assemble, assemble_file
from littleman.assembler.codegen import CodeGenerator, ListingLine, Slot
from littleman.assembler.lexer import Lexer, Token, TokenType, tokenize

__all__ = [
    # Main class and functions
    "Assembler",
    "assemble",
    "assemble_file",
    # Lexer
    "Lexer",
    "Token",
    "TokenType",
    "tokenize",
    # Code generator
    "CodeGenerator",
    "ListingLine",
    "Slot",
]
