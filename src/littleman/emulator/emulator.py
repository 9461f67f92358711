"""
Little Man Emulator - Main Orchestrator
=======================================

This module provides the `Emulator` class that wires memory and CPU together
and gives a high-level API for running programs.

The Emulator class:
- Builds a machine from an EmulatorConfig (program, load offset, input)
- Collects printed values and forwards them to an optional callback
- Supports execution control (step, run with an optional step limit)
- Offers register and memory inspection

Example usage:
    >>> from littleman.emulator import Emulator, EmulatorConfig
    >>> emu = Emulator(EmulatorConfig(program=(901, 902, 0), inputs=(7,)))
    >>> result = emu.run()
    >>> result.outputs
    [7]
"""

import logging
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Callable, Iterable, Optional

from littleman.emulator.cpu import LittleManCPU
from littleman.emulator.memory import Memory


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmulatorConfig:
    """
    Configuration for emulator initialization.

    Attributes:
        program: Encoded words to load
        offset: Mailbox where the first word is loaded
        entry_point: Initial instruction counter
        inputs: Values for ``read``, consumed in order. None queues nothing;
            any tuple (even empty) queues its values plus a trailing 0.
        max_steps: Default step limit for run(), None for unlimited

    Example:
        >>> config = EmulatorConfig(program=(901, 902, 0), inputs=(5, 6))
    """
    program: tuple[int, ...] = ()
    offset: int = 0
    entry_point: int = 0
    inputs: Optional[tuple[int, ...]] = None
    max_steps: Optional[int] = None


class StopReason(Enum):
    """Why a run() call returned."""
    HALTED = auto()     # stop instruction executed
    MAX_STEPS = auto()  # step limit reached


@dataclass
class RunResult:
    """
    Outcome of a run() call.

    Attributes:
        reason: Why execution stopped
        steps: Instructions executed during this call
        outputs: Every value printed by the emulator so far
    """
    reason: StopReason
    steps: int
    outputs: list[int] = field(default_factory=list)

    @property
    def halted(self) -> bool:
        return self.reason is StopReason.HALTED


class Emulator:
    """
    Little Man machine with output capture.

    Each Emulator owns its own memory and CPU; nothing is shared between
    instances.

    Attributes:
        config: The EmulatorConfig used to initialize this instance
        memory: The 100 mailboxes
        cpu: The processor
        outputs: Every value printed so far, in order
    """

    def __init__(self, config: Optional[EmulatorConfig] = None,
                 on_output: Optional[Callable[[int], None]] = None):
        """
        Initialize the emulator from a configuration.

        Args:
            config: Program, offset and input. Defaults to an empty machine.
            on_output: Called with each printed value as it is printed

        Raises:
            ProgramDoesNotFitError: If the program does not fit at the offset
        """
        self.config = config or EmulatorConfig()
        self.memory = Memory()
        self.cpu = LittleManCPU(self.memory)
        self.cpu.on_output = self._output_hook
        self.outputs: list[int] = []
        self._on_output = on_output
        self._steps = 0

        if self.config.program:
            self.load_program(self.config.program, self.config.offset)
        self.cpu.ic = self.config.entry_point
        if self.config.inputs is not None:
            self.feed_input(self.config.inputs)

    def _output_hook(self, value: int) -> None:
        self.outputs.append(value)
        if self._on_output is not None:
            self._on_output(value)

    # =========================================================================
    # Program Loading
    # =========================================================================

    def load_program(self, words: Iterable[int], offset: int = 0) -> "Emulator":
        """
        Load words into memory starting at ``offset``.

        Returns:
            self, so calls can be chained

        Raises:
            ProgramDoesNotFitError: If ``offset + len(words) > 99``
        """
        words = list(words)
        self.memory.load(words, offset)
        logger.debug(f"Loaded {len(words)} words at offset {offset}")
        return self

    def feed_input(self, values: Iterable[int]) -> "Emulator":
        """
        Queue input values (plus the trailing 0) for ``read``.

        Returns:
            self, so calls can be chained
        """
        self.cpu.queue_input(values)
        return self

    # =========================================================================
    # Execution Control
    # =========================================================================

    def step(self) -> bool:
        """
        Execute a single instruction.

        Returns:
            True if the machine halted on this step

        Raises:
            VMError: On any runtime error
        """
        halted = self.cpu.step()
        self._steps += 1
        return halted

    def run(self, max_steps: Optional[int] = None) -> RunResult:
        """
        Step until the machine halts or ``max_steps`` is reached.

        Args:
            max_steps: Step limit for this call. Falls back to the config's
                max_steps; None means run until halt.

        Raises:
            VMError: On any runtime error. Memory changes made by earlier
                steps are kept.
        """
        limit = max_steps if max_steps is not None else self.config.max_steps
        steps = 0

        while limit is None or steps < limit:
            halted = self.step()
            steps += 1
            if halted:
                logger.debug(f"Halted after {steps} steps")
                return RunResult(StopReason.HALTED, steps, list(self.outputs))

        logger.debug(f"Stopped at step limit {limit}")
        return RunResult(StopReason.MAX_STEPS, steps, list(self.outputs))

    # =========================================================================
    # State Inspection
    # =========================================================================

    @property
    def registers(self) -> dict:
        """
        Get current register values as a dictionary.

        Returns:
            Dictionary with keys: acc, ic, zero, positive
        """
        return {
            'acc': self.cpu.acc,
            'ic': self.cpu.ic,
            'zero': self.cpu.flag_zero,
            'positive': self.cpu.flag_positive,
        }

    @property
    def total_steps(self) -> int:
        return self._steps

    def read_mailbox(self, address: int) -> int:
        return self.memory.read(address)

    def write_mailbox(self, address: int, value: int) -> None:
        self.memory.write(address, value)

    def __repr__(self) -> str:
        return (
            f"Emulator(ic={self.cpu.ic:02d}, acc={self.cpu.acc}, "
            f"steps={self._steps})"
        )
