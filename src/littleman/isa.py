"""
Little Man Instruction Set Definition
=====================================

This module defines the complete instruction set of the decimal machine:
mnemonics, operand kinds, encoding bases, and the band classification used
to turn a stored word back into an instruction.

Word Encoding
-------------
Every instruction is one signed 16-bit word of the form ``base + slot``:

| Mnemonic | Opcode             | Operand  | Word      |
|----------|--------------------|----------|-----------|
| stop     | STOP               | none     | 0         |
| add      | ADD                | mailbox  | 100 + n   |
| sub      | SUB                | mailbox  | 200 + n   |
| sto      | STORE              | mailbox  | 300 + n   |
| sta      | STORE_ADDRESS      | mailbox  | 400 + n   |
| load     | LOAD               | mailbox  | 500 + n   |
| b        | BRANCH             | label    | 600 + n   |
| bz       | BRANCH_IF_ZERO     | label    | 700 + n   |
| bp       | BRANCH_IF_POSITIVE | label    | 800 + n   |
| read     | READ               | none     | 901       |
| print    | PRINT              | none     | 902       |

``n`` is always a mailbox address in 0-99. Decoding works on 100-wide
bands: the hundreds digit selects the opcode family and the low two
digits are the address.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Union


# =============================================================================
# Machine Constants
# =============================================================================

MAILBOX_COUNT = 100         # Addressable mailboxes 0-99
MAX_ADDRESS = 99            # Highest address an operand can encode
MAX_OPERAND_VALUE = 255     # Operands are parsed as unsigned 8-bit numbers

ACC_MIN = -500              # Lowest representable accumulator value
ACC_MAX = 499               # Highest representable accumulator value

WORD_MIN = -0x8000          # Signed 16-bit word range
WORD_MAX = 0x7FFF


# =============================================================================
# Opcode Enumeration
# =============================================================================

class Opcode(Enum):
    """The eleven instruction kinds of the machine."""
    STOP = auto()
    ADD = auto()
    SUB = auto()
    STORE = auto()
    STORE_ADDRESS = auto()
    LOAD = auto()
    BRANCH = auto()
    BRANCH_IF_ZERO = auto()
    BRANCH_IF_POSITIVE = auto()
    READ = auto()
    PRINT = auto()


class OperandKind(Enum):
    """What kind of operand an instruction takes in source form."""
    NONE = auto()       # stop, read, print
    MAILBOX = auto()    # numeric mailbox address
    LABEL = auto()      # symbolic branch target

    def __str__(self) -> str:
        return {
            OperandKind.NONE: "no operand",
            OperandKind.MAILBOX: "a mailbox number",
            OperandKind.LABEL: "a label",
        }[self]


# =============================================================================
# Opcode Information
# =============================================================================

@dataclass(frozen=True)
class OpcodeInfo:
    """
    Static information about one opcode.

    Attributes:
        mnemonic: Lowercase source mnemonic
        base: Word value with a zero operand
        operand: Kind of operand the instruction takes
    """
    mnemonic: str
    base: int
    operand: OperandKind

    @property
    def arity(self) -> int:
        return 0 if self.operand is OperandKind.NONE else 1


OPCODE_TABLE: dict[Opcode, OpcodeInfo] = {
    Opcode.STOP: OpcodeInfo("stop", 0, OperandKind.NONE),
    Opcode.ADD: OpcodeInfo("add", 100, OperandKind.MAILBOX),
    Opcode.SUB: OpcodeInfo("sub", 200, OperandKind.MAILBOX),
    Opcode.STORE: OpcodeInfo("sto", 300, OperandKind.MAILBOX),
    Opcode.STORE_ADDRESS: OpcodeInfo("sta", 400, OperandKind.MAILBOX),
    Opcode.LOAD: OpcodeInfo("load", 500, OperandKind.MAILBOX),
    Opcode.BRANCH: OpcodeInfo("b", 600, OperandKind.LABEL),
    Opcode.BRANCH_IF_ZERO: OpcodeInfo("bz", 700, OperandKind.LABEL),
    Opcode.BRANCH_IF_POSITIVE: OpcodeInfo("bp", 800, OperandKind.LABEL),
    Opcode.READ: OpcodeInfo("read", 901, OperandKind.NONE),
    Opcode.PRINT: OpcodeInfo("print", 902, OperandKind.NONE),
}

# Mnemonic lookup for the lexer
MNEMONICS: dict[str, Opcode] = {
    info.mnemonic: opcode for opcode, info in OPCODE_TABLE.items()
}

# Hundreds digit -> opcode family, for words 100-899
_BANDS: dict[int, Opcode] = {
    info.base // 100: opcode
    for opcode, info in OPCODE_TABLE.items()
    if 100 <= info.base <= 800
}

# Words that stand alone without an address
_FIXED_WORDS: dict[int, Opcode] = {
    OPCODE_TABLE[Opcode.STOP].base: Opcode.STOP,
    OPCODE_TABLE[Opcode.READ].base: Opcode.READ,
    OPCODE_TABLE[Opcode.PRINT].base: Opcode.PRINT,
}


# =============================================================================
# Instruction Value
# =============================================================================

@dataclass(frozen=True)
class Instruction:
    """
    One source instruction.

    Attributes:
        opcode: The instruction kind
        operand: Mailbox number, label name, or None for operand-less opcodes
    """
    opcode: Opcode
    operand: Union[int, str, None] = None

    @property
    def info(self) -> OpcodeInfo:
        return OPCODE_TABLE[self.opcode]

    @property
    def mnemonic(self) -> str:
        return self.info.mnemonic

    @property
    def is_branch(self) -> bool:
        return self.info.operand is OperandKind.LABEL

    def __str__(self) -> str:
        if self.operand is None:
            return self.mnemonic
        return f"{self.mnemonic} {self.operand}"


@dataclass(frozen=True)
class DecodedWord:
    """
    Result of classifying a stored word.

    Attributes:
        opcode: The instruction family selected by the word's band
        address: Low two digits of the word (0 for stop, read, print)
    """
    opcode: Opcode
    address: int = 0

    @property
    def info(self) -> OpcodeInfo:
        return OPCODE_TABLE[self.opcode]


# =============================================================================
# Encoding and Decoding
# =============================================================================

def encode(opcode: Opcode, address: int = 0) -> int:
    """
    Encode an opcode and mailbox address as a word.

    Operand-less opcodes ignore ``address`` and return their fixed word.

    Raises:
        ValueError: If the address is outside 0-99. Callers that need a
            located error check the range themselves first.
    """
    info = OPCODE_TABLE[opcode]
    if info.operand is OperandKind.NONE:
        return info.base
    if not 0 <= address <= MAX_ADDRESS:
        raise ValueError(f"address {address} out of range 0-{MAX_ADDRESS}")
    return info.base + address


def decode(word: int) -> Optional[DecodedWord]:
    """
    Classify a word by its 100-wide band.

    Returns:
        The decoded opcode and address, or None if the word is not an
        instruction (1-99, 900, 903 and above, negative values).

    >>> decode(512)
    DecodedWord(opcode=<Opcode.LOAD: 6>, address=12)
    >>> decode(950) is None
    True
    """
    fixed = _FIXED_WORDS.get(word)
    if fixed is not None:
        return DecodedWord(fixed)

    if 100 <= word <= 899:
        band, address = divmod(word, 100)
        return DecodedWord(_BANDS[band], address)

    return None
