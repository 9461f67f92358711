"""
Little Man Assembler - Main Interface
=====================================

This module provides the main Assembler class, the primary interface for
assembling Little Man source code. It coordinates the lexer and the code
generator to produce a list of encoded words.

Example Usage
-------------
>>> from littleman.assembler import Assembler
>>> asm = Assembler()
>>> asm.assemble_string('''
... .loop
...     read
...     bz done
...     print
...     b loop
... .done
...     stop
... ''')
[901, 704, 902, 600, 0]
>>> asm.get_symbols()
{'loop': 0, 'done': 4}

Command-Line Usage
------------------
    $ lmasm countdown.lmc -o countdown.bin -l countdown.lst
"""

import logging
from pathlib import Path
from typing import Optional

from littleman.assembler.codegen import CodeGenerator
from littleman.assembler.lexer import Lexer
from littleman.image import write_image


logger = logging.getLogger(__name__)


class Assembler:
    """
    Main Little Man assembler class.

    Attributes:
        strict_labels: Reject labels bound to more than one instruction
    """

    def __init__(self, strict_labels: bool = False):
        """
        Initialize the assembler.

        Args:
            strict_labels: If True, a duplicate label raises
                DuplicateLabelError. By default the later definition wins.
        """
        self.strict_labels = strict_labels
        self._codegen = CodeGenerator(strict_labels=strict_labels)
        self._source_file: Optional[Path] = None

    # =========================================================================
    # Assembly Methods
    # =========================================================================

    def assemble_string(self, source: str, filename: str = "<input>") -> list[int]:
        """
        Assemble source code from a string.

        Args:
            source: Assembly source code
            filename: Virtual filename for error messages

        Returns:
            Encoded words, one per instruction

        Raises:
            AssemblerError: If tokenization or encoding fails
        """
        tokens = list(Lexer(source, filename).tokenize())
        logger.debug(f"Tokenized {filename}: {len(tokens)} tokens")
        return self._codegen.generate(tokens)

    def assemble_file(self, filepath: str | Path) -> list[int]:
        """
        Assemble source code from a file.

        Raises:
            AssemblerError: If assembly fails
            FileNotFoundError: If source file not found
        """
        filepath = Path(filepath)
        self._source_file = filepath
        logger.debug(f"Assembling {filepath}")
        return self.assemble_string(filepath.read_text(), str(filepath))

    # =========================================================================
    # Output Methods
    # =========================================================================

    def get_code(self) -> list[int]:
        return self._codegen.get_code()

    def get_symbols(self) -> dict[str, int]:
        """
        Get the symbol table.

        Returns:
            Dictionary mapping label names to mailbox addresses
        """
        return self._codegen.get_symbols()

    def get_listing(self) -> str:
        return self._codegen.get_listing()

    def write_binary(self, filepath: str | Path) -> int:
        """
        Write the encoded words as a little-endian image.

        Returns:
            Number of bytes written
        """
        return write_image(filepath, self.get_code())

    def write_listing(self, filepath: str | Path) -> None:
        self._codegen.write_listing(filepath)
        logger.debug(f"Wrote listing to {filepath}")

    def write_symbols(self, filepath: str | Path) -> None:
        self._codegen.write_symbols(filepath)
        logger.debug(f"Wrote symbols to {filepath}")


# =============================================================================
# Convenience Functions
# =============================================================================

def assemble(source: str, filename: str = "<input>", strict_labels: bool = False) -> list[int]:
    """
    Convenience function to assemble source code.

    Raises:
        AssemblerError: If assembly fails
    """
    return Assembler(strict_labels=strict_labels).assemble_string(source, filename)


def assemble_file(filepath: str | Path, strict_labels: bool = False) -> list[int]:
    """
    Convenience function to assemble a file.

    Raises:
        AssemblerError: If assembly fails
    """
    return Assembler(strict_labels=strict_labels).assemble_file(filepath)
