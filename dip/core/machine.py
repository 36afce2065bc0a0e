"""
Machine -- one complete emulated CHIP-8 system.

A machine owns every piece of interpreter state:

* **Memory** -- 4 KB with the glyph table and the program image.
* **Registers** -- ``V0``-``VF``, ``I`` and ``pc``.
* **Call stack** -- 16 return addresses.
* **Timers** -- delay and sound.
* **FrameBuffer** -- the 64 x 32 display and its redraw signal.
* **InputState** -- the sixteen-key latch written by the host.

The host drives the machine through two independent entry points:
:meth:`Machine.step` (one instruction) and :meth:`Machine.tick` (one
timer decrement, ~60 Hz).  Neither blocks or loops.

Machines share nothing, so any number of them can coexist::

    machine = Machine(rom_bytes)
    while running:
        for _ in range(machine.config.steps_per_tick):
            machine.step()
        machine.tick()
"""

from __future__ import annotations

import logging
from typing import Optional

from dip.core.config import MachineConfig
from dip.core.cpu import CPU
from dip.core.errors import Chip8Error, ProgramTooLargeError
from dip.core.frame_buffer import FrameBuffer
from dip.core.input_state import InputState
from dip.core.memory import MAX_PROGRAM_SIZE, Memory
from dip.core.registers import CallStack, RegisterFile
from dip.core.timers import TimerUnit
from dip.core.trace import DEFAULT_TRACER, ITracer
from dip.core.types import StepResult, StepStatus

logger = logging.getLogger(__name__)


class Machine:
    """A self-contained interpreter instance.

    Parameters
    ----------
    program:
        Raw program image, loaded at $200.  At most 3584 bytes.
    config:
        Behaviour switches; defaults to :class:`MachineConfig()`.
    tracer:
        Optional per-instruction trace hook.

    Raises
    ------
    ProgramTooLargeError
        If *program* does not fit in memory.
    """

    def __init__(
        self,
        program: bytes = b"",
        config: Optional[MachineConfig] = None,
        tracer: Optional[ITracer] = None,
    ) -> None:
        self.config: MachineConfig = config or MachineConfig()

        # Core hardware components.
        self.mem: Memory = Memory()
        self.regs: RegisterFile = RegisterFile()
        self.stack: CallStack = CallStack()
        self.timers: TimerUnit = TimerUnit()
        self.frame_buffer: FrameBuffer = FrameBuffer()
        self.input_state: InputState = InputState()
        self.cpu: CPU = CPU(self, self.config, tracer or DEFAULT_TRACER)

        # Machine run-state.
        self.halted: bool = False
        self.halt_reason: Optional[Chip8Error] = None
        self.step_count: int = 0
        self.tick_count: int = 0

        self._program: bytes = b""
        self.load_program(program)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def load_program(self, program: bytes) -> None:
        """Replace the program image and return to power-on state.

        The size check happens before anything is modified, so an
        oversized image leaves the machine exactly as it was.
        """
        program = bytes(program)
        if len(program) > MAX_PROGRAM_SIZE:
            raise ProgramTooLargeError(len(program), MAX_PROGRAM_SIZE)
        self._program = program
        self.reset()

    def reset(self) -> None:
        """Restore power-on state and reload the current program image.

        Key state is left alone; it belongs to the host.
        """
        self.mem.clear()
        self.mem.load_program(self._program)
        self.regs.reset()
        self.stack.reset()
        self.timers.reset()
        self.frame_buffer.reset()
        self.halted = False
        self.halt_reason = None
        self.step_count = 0
        self.tick_count = 0
        logger.debug("Machine reset (%d-byte program)", len(self._program))

    # ------------------------------------------------------------------
    # Driver entry points
    # ------------------------------------------------------------------

    def step(self) -> StepResult:
        """Execute one instruction.

        Returns a :class:`StepResult` describing the outcome.  Once the
        machine has halted every call returns ``StepStatus.HALTED`` without
        touching any state until :meth:`reset`.

        Raises:
            Chip8Error: On a fatal condition (stack overflow / underflow,
                an unknown opcode under ``strict_decode``, or an internal
                register index error).  The machine is halted first.
        """
        if self.halted:
            return StepResult(StepStatus.HALTED, self.regs.pc, 0)

        pc = self.regs.pc
        try:
            result = self.cpu.step()
        except Chip8Error as exc:
            self._halt(pc, exc)
            raise
        self.step_count += 1
        return result

    def tick(self) -> None:
        """Advance both timers by one 60 Hz period."""
        self.timers.tick()
        self.tick_count += 1

    def run(self, steps: int) -> StepResult:
        """Execute up to *steps* instructions, stopping early if halted.

        Returns the result of the last instruction executed.
        """
        result = StepResult(StepStatus.OK, self.regs.pc, 0)
        for _ in range(steps):
            result = self.step()
            if result.status is StepStatus.HALTED:
                break
        return result

    # ------------------------------------------------------------------
    # Host-facing helpers
    # ------------------------------------------------------------------

    def raise_input(self, key: int, down: bool) -> None:
        self.input_state.raise_input(key, down)

    @property
    def draw_flag(self) -> bool:
        return self.frame_buffer.draw_flag

    @draw_flag.setter
    def draw_flag(self, value: bool) -> None:
        self.frame_buffer.draw_flag = value

    @property
    def sound_timer(self) -> int:
        return self.timers.sound

    @property
    def delay_timer(self) -> int:
        return self.timers.delay

    @property
    def program_size(self) -> int:
        return len(self._program)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _halt(self, pc: int, exc: Chip8Error) -> None:
        self.halted = True
        self.halt_reason = exc
        logger.error("Halting at $%03X: %s", pc, exc)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"pc=${self.regs.pc:03X}, "
            f"program={len(self._program)} bytes, "
            f"steps={self.step_count}, "
            f"halted={self.halted})"
        )
