# Dip interpreter core
"""
Platform-independent CHIP-8 machine.

Use :class:`Machine` to build an interpreter instance and drive it with
:meth:`Machine.step` and :meth:`Machine.tick`.
"""

from dip.core.config import MachineConfig
from dip.core.decoder import Instruction, decode
from dip.core.errors import (
    Chip8Error,
    ProgramTooLargeError,
    RegisterIndexError,
    StackOverflowError,
    StackUnderflowError,
    UnknownOpcodeError,
)
from dip.core.machine import Machine
from dip.core.trace import ITracer, LoggingTracer, NullTracer, RecordingTracer
from dip.core.types import Mnemonic, StepResult, StepStatus

__all__ = [
    "Machine",
    "MachineConfig",
    # decoding
    "Instruction",
    "Mnemonic",
    "decode",
    # stepping
    "StepResult",
    "StepStatus",
    # tracing
    "ITracer",
    "LoggingTracer",
    "NullTracer",
    "RecordingTracer",
    # errors
    "Chip8Error",
    "ProgramTooLargeError",
    "RegisterIndexError",
    "StackOverflowError",
    "StackUnderflowError",
    "UnknownOpcodeError",
]
