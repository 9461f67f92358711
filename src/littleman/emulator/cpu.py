"""
Little Man CPU
==============

Fetch-decode-execute engine for the decimal machine.

Registers:
- Accumulator: the only arithmetic register, always in [-500, 499]
- Instruction counter (IC): address of the next word to fetch
- Zero flag: set when the accumulator is 0
- Positive flag: set when the accumulator is >= 0 (zero counts as positive)

Each call to ``step()`` executes exactly one instruction:

1. Fetch the word at IC, failing if IC is outside mailboxes 0-99
2. Advance IC by one
3. Decode the word by its hundreds band
4. Execute; branches replace IC with an absolute address

The CPU never loops by itself; callers drive it one step at a time.
"""

import logging
from collections import deque
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from littleman.emulator.memory import Memory
from littleman.errors import (
    InstructionCounterOutOfBoundsError,
    InvalidOpcodeError,
    NumberOutOfRangeError,
)
from littleman.isa import ACC_MAX, ACC_MIN, MAX_ADDRESS, DecodedWord, Opcode, decode


logger = logging.getLogger(__name__)


def low_digits(value: int) -> int:
    """
    Keep the low two decimal digits of ``value``.

    The remainder takes the sign of ``value``, so ``low_digits(-123)``
    is -23, not 77.
    """
    remainder = abs(value) % 100
    return remainder if value >= 0 else -remainder


@dataclass
class CPUState:
    """
    Complete register state of the machine.

    Attributes:
        acc: Accumulator
        ic: Instruction counter
        zero: Zero flag
        positive: Positive flag
        halted: True once a stop instruction has executed
    """
    acc: int = 0
    ic: int = 0
    zero: bool = True
    positive: bool = True
    halted: bool = False


class LittleManCPU:
    """
    The machine's processor.

    Input values wait in a queue and are consumed oldest first by ``read``.
    ``print`` places the accumulator in a one-value output register which
    is handed to ``on_output`` and cleared before ``step()`` returns.

    Example:
        >>> mem = Memory()
        >>> mem.load([901, 902, 0])
        >>> cpu = LittleManCPU(mem)
        >>> cpu.on_output = print
        >>> cpu.queue_input([42])
        >>> while not cpu.step():
        ...     pass
        42
    """

    def __init__(self, memory: Memory):
        self.memory = memory
        self.state = CPUState()

        # Pending input, consumed from the right
        self._input: deque[int] = deque()
        self._output: Optional[int] = None

        # on_output(value): called synchronously for every print
        self.on_output: Optional[Callable[[int], None]] = None

        self._handlers: dict[Opcode, Callable[[int], None]] = {
            Opcode.ADD: self._op_add,
            Opcode.SUB: self._op_sub,
            Opcode.STORE: self._op_store,
            Opcode.STORE_ADDRESS: self._op_store_address,
            Opcode.LOAD: self._op_load,
            Opcode.BRANCH: self._op_branch,
            Opcode.BRANCH_IF_ZERO: self._op_branch_if_zero,
            Opcode.BRANCH_IF_POSITIVE: self._op_branch_if_positive,
            Opcode.READ: self._op_read,
            Opcode.PRINT: self._op_print,
        }

    # ========================================
    # Register Properties
    # ========================================

    @property
    def acc(self) -> int:
        return self.state.acc

    @property
    def ic(self) -> int:
        return self.state.ic

    @ic.setter
    def ic(self, value: int) -> None:
        self.state.ic = value

    @property
    def flag_zero(self) -> bool:
        return self.state.zero

    @property
    def flag_positive(self) -> bool:
        return self.state.positive

    @property
    def halted(self) -> bool:
        return self.state.halted

    # ========================================
    # Input
    # ========================================

    def queue_input(self, values: Iterable[int]) -> None:
        """
        Queue input values for ``read``.

        Values are consumed in the order given. Every call also queues a
        single 0 after its values, which ``read`` returns once the real
        values are used up.
        """
        self._input.extendleft(values)
        self._input.appendleft(0)

    @property
    def pending_input(self) -> list[int]:
        """Queued input values in the order ``read`` will consume them."""
        return list(reversed(self._input))

    # ========================================
    # Execution
    # ========================================

    def step(self) -> bool:
        """
        Execute one instruction.

        Returns:
            True if the instruction was ``stop``, False otherwise

        Raises:
            InstructionCounterOutOfBoundsError: IC is outside mailboxes 0-99
            InvalidOpcodeError: The fetched word is not an instruction
            NumberOutOfRangeError: The accumulator left [-500, 499]
        """
        address = self.state.ic
        if not 0 <= address <= MAX_ADDRESS:
            raise InstructionCounterOutOfBoundsError(address)

        word = self.memory.read(address)
        self.state.ic = address + 1

        decoded = decode(word)
        if decoded is None:
            raise InvalidOpcodeError(word, address)

        logger.debug(f"{address:02d}: {word:3d} {decoded.opcode.name} acc={self.state.acc}")

        if decoded.opcode is Opcode.STOP:
            self.state.halted = True
            return True

        self._execute(decoded)

        if self._output is not None:
            value, self._output = self._output, None
            if self.on_output is not None:
                self.on_output(value)

        return False

    def _execute(self, decoded: DecodedWord) -> None:
        self._handlers[decoded.opcode](decoded.address)

    def _set_acc(self, value: int) -> None:
        """Write the accumulator, range-check it, then refresh the flags."""
        self.state.acc = value
        if value < ACC_MIN or value > ACC_MAX:
            raise NumberOutOfRangeError(value)
        self.state.zero = value == 0
        self.state.positive = value >= 0

    # ========================================
    # Instruction Handlers
    # ========================================

    def _op_add(self, address: int) -> None:
        self._set_acc(self.state.acc + self.memory.read(address))

    def _op_sub(self, address: int) -> None:
        self._set_acc(self.state.acc - self.memory.read(address))

    def _op_store(self, address: int) -> None:
        self.memory.write(address, self.state.acc)

    def _op_store_address(self, address: int) -> None:
        self.memory.write(address, low_digits(self.state.acc))

    def _op_load(self, address: int) -> None:
        self._set_acc(self.memory.read(address))

    def _op_branch(self, address: int) -> None:
        self.state.ic = address

    def _op_branch_if_zero(self, address: int) -> None:
        if self.state.zero:
            self.state.ic = address

    def _op_branch_if_positive(self, address: int) -> None:
        if self.state.positive:
            self.state.ic = address

    def _op_read(self, address: int) -> None:
        if self._input:
            self._set_acc(self._input.pop())

    def _op_print(self, address: int) -> None:
        self._output = self.state.acc

    def __repr__(self) -> str:
        s = self.state
        return (
            f"LittleManCPU(ic={s.ic:02d}, acc={s.acc}, "
            f"zero={s.zero}, positive={s.positive})"
        )
