"""
Memory Subsystem for the Little Man Emulator
============================================

Memory is a flat array of 100 mailboxes, addresses 0-99. Each mailbox
holds one signed 16-bit word: either an instruction or a data value, the
machine makes no distinction.

Load limit:
    A program loaded at ``offset`` must satisfy ``offset + length <= 99``,
    so at most 99 words can be loaded even though 100 mailboxes exist.
    Mailbox 99 is still readable and writable at run time.
"""

from typing import Iterable

from littleman.errors import MemoryAccessError, ProgramDoesNotFitError
from littleman.isa import MAILBOX_COUNT, MAX_ADDRESS, WORD_MAX, WORD_MIN


class Memory:
    """
    The 100 mailboxes of one machine.

    Example:
        >>> mem = Memory()
        >>> mem.load([901, 902, 0])
        >>> mem.read(1)
        902
    """

    SIZE = MAILBOX_COUNT
    LOAD_LIMIT = MAX_ADDRESS

    def __init__(self):
        self._data: list[int] = [0] * self.SIZE

    def __len__(self) -> int:
        return self.SIZE

    def _check_address(self, address: int) -> None:
        # Python would happily index -1 as mailbox 99
        if not 0 <= address < self.SIZE:
            raise MemoryAccessError(address)

    def read(self, address: int) -> int:
        """
        Read the word in a mailbox.

        Raises:
            MemoryAccessError: If the mailbox does not exist
        """
        self._check_address(address)
        return self._data[address]

    def write(self, address: int, value: int) -> None:
        """
        Write a word to a mailbox.

        Raises:
            MemoryAccessError: If the mailbox does not exist or the word
                does not fit in 16 bits
        """
        self._check_address(address)
        if not WORD_MIN <= value <= WORD_MAX:
            raise MemoryAccessError(address, value)
        self._data[address] = value

    def load(self, program: Iterable[int], offset: int = 0) -> None:
        """
        Copy a program into consecutive mailboxes starting at ``offset``.

        Nothing is copied unless the whole program is valid.

        Raises:
            ProgramDoesNotFitError: If ``offset + len(program) > 99``
            MemoryAccessError: If a word does not fit in 16 bits
        """
        program = list(program)
        if offset < 0 or offset + len(program) > self.LOAD_LIMIT:
            raise ProgramDoesNotFitError(len(program), offset)
        for index, word in enumerate(program):
            if not WORD_MIN <= word <= WORD_MAX:
                raise MemoryAccessError(offset + index, word)
        self._data[offset:offset + len(program)] = program

    def dump(self, start: int = 0, count: int = MAILBOX_COUNT) -> list[int]:
        """Return a copy of ``count`` mailboxes starting at ``start``."""
        return self._data[start:start + count]

    def __repr__(self) -> str:
        used = sum(1 for value in self._data if value)
        return f"Memory(mailboxes={self.SIZE}, nonzero={used})"
