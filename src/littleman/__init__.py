"""
littleman - Assembler and Virtual Machine for the Little Man Computer
=====================================================================

This package provides a two-stage toolchain for a minimal decimal computer:
an assembler that turns source text into 16-bit words, and a virtual machine
that executes those words in 100 mailboxes of memory.

Main Components
---------------
- **isa**: instruction set, word encoding and band decoding
- **assembler**: lexer and three-pass code generator (lmasm)
- **emulator**: memory, CPU and run loop (lmvm)
- **disassembler**: words back to mnemonics (lmdisasm)
- **image**: little-endian load image files

Quick Start
-----------
Assemble and run a program:
    >>> from littleman import assemble, Emulator, EmulatorConfig
    >>> words = assemble("read\\nprint\\nstop")
    >>> Emulator(EmulatorConfig(program=tuple(words), inputs=(42,))).run().outputs
    [42]

Or use the command-line tools:
    $ lmasm echo.lmc -o echo.bin
    $ lmvm echo.bin -i 42
    OUTPUT: 42
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from littleman.assembler import Assembler, assemble, assemble_file
from littleman.disassembler import Disassembler
from littleman.emulator import Emulator, EmulatorConfig, LittleManCPU, Memory
from littleman.errors import (
    LittleManError,
    AssemblerError,
    AssemblySyntaxError,
    InvalidInstructionError,
    OperandParseError,
    AssemblyError,
    IndexOutOfRangeError,
    UndefinedLabelError,
    DuplicateLabelError,
    ImageError,
    VMError,
    ProgramDoesNotFitError,
    InstructionCounterOutOfBoundsError,
    NumberOutOfRangeError,
    InvalidOpcodeError,
    MemoryAccessError,
)
from littleman.image import from_bytes, read_image, to_bytes, write_image
from littleman.isa import Instruction, Opcode, decode, encode

__all__ = [
    "__version__",
    # Instruction set
    "Instruction",
    "Opcode",
    "encode",
    "decode",
    # Assembler
    "Assembler",
    "assemble",
    "assemble_file",
    # Emulator
    "Emulator",
    "EmulatorConfig",
    "LittleManCPU",
    "Memory",
    # Disassembler
    "Disassembler",
    # Images
    "to_bytes",
    "from_bytes",
    "read_image",
    "write_image",
    # Exception hierarchy
    "LittleManError",
    "AssemblerError",
    "AssemblySyntaxError",
    "InvalidInstructionError",
    "OperandParseError",
    "AssemblyError",
    "IndexOutOfRangeError",
    "UndefinedLabelError",
    "DuplicateLabelError",
    "ImageError",
    "VMError",
    "ProgramDoesNotFitError",
    "InstructionCounterOutOfBoundsError",
    "NumberOutOfRangeError",
    "InvalidOpcodeError",
    "MemoryAccessError",
]
