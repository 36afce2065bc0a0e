"""
MachineConfig -- behaviour switches for one emulated machine.

The defaults follow the behaviour most modern CHIP-8 programs expect.
The two quirk flags restore the original COSMAC VIP interpretation of
the shift and block load/store instructions.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class MachineConfig:
    """Configuration for :class:`~dip.core.machine.Machine`.

    Attributes
    ----------
    strict_decode:
        When ``True`` an unknown opcode raises
        :class:`~dip.core.errors.UnknownOpcodeError` and halts the machine.
        When ``False`` it is logged, skipped, and reported through
        :class:`~dip.core.types.StepResult`.
    shift_uses_vy:
        ``8xy6`` / ``8xyE`` shift ``Vy`` into ``Vx`` instead of shifting
        ``Vx`` in place.
    load_store_increments_i:
        ``Fx55`` / ``Fx65`` leave ``I`` pointing past the last byte
        transferred.
    cpu_hz:
        Instructions per second the driver aims for.
    timer_hz:
        Timer decrements per second.
    seed:
        Optional seed for the ``RND`` generator.
    """

    strict_decode: bool = False
    shift_uses_vy: bool = False
    load_store_increments_i: bool = False
    cpu_hz: int = 700
    timer_hz: int = 60
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        if self.cpu_hz <= 0:
            raise ValueError(f"cpu_hz must be positive, got {self.cpu_hz}")
        if self.timer_hz <= 0:
            raise ValueError(f"timer_hz must be positive, got {self.timer_hz}")

    @property
    def steps_per_tick(self) -> int:
        """Instructions to execute between two timer ticks (at least 1)."""
        return max(1, self.cpu_hz // self.timer_hz)
