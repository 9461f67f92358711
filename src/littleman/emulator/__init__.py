"""
Little Man Emulator
===================

Executes encoded word images on a simulated decimal machine.

- **Memory**: 100 mailboxes holding signed 16-bit words
- **LittleManCPU**: accumulator, instruction counter, zero/positive flags
- **Emulator**: config-driven setup, run loop, output capture

Quick Start
-----------

    >>> from littleman.emulator import Emulator, EmulatorConfig
    >>> emu = Emulator(EmulatorConfig(program=(901, 902, 0), inputs=(3,)))
    >>> emu.run().outputs
    [3]
"""

from .cpu import CPUState, LittleManCPU, low_digits
from .emulator import Emulator, EmulatorConfig, RunResult, StopReason
from .memory import Memory

__all__ = [
    "Emulator",
    "EmulatorConfig",
    "RunResult",
    "StopReason",
    "LittleManCPU",
    "CPUState",
    "Memory",
    "low_digits",
]
