"""
Register file and call stack.

* Sixteen 8-bit general registers ``V0``-``VF``.  ``VF`` is also the
  carry / not-borrow / shifted-bit / collision flag and is overwritten as a
  side effect of several instructions.
* ``I`` -- 16-bit index register.
* ``pc`` -- 16-bit program counter, starting at $200.
* A 16-slot return-address stack.  The stack pointer names the next free
  slot; pushing into a full stack or popping an empty one raises instead
  of corrupting state.
"""

from __future__ import annotations

from typing import List

from dip.core.errors import RegisterIndexError, StackOverflowError, StackUnderflowError
from dip.core.memory import PROGRAM_START

NUM_REGISTERS: int = 16
FLAG_REGISTER: int = 0xF
STACK_DEPTH: int = 16


class RegisterFile:
    """General registers plus ``I`` and ``pc``."""

    def __init__(self) -> None:
        self.v: bytearray = bytearray(NUM_REGISTERS)
        self.i: int = 0x0000
        self.pc: int = PROGRAM_START

    def get(self, x: int) -> int:
        if not 0 <= x < NUM_REGISTERS:
            raise RegisterIndexError(x)
        return self.v[x]

    def set(self, x: int, value: int) -> None:
        if not 0 <= x < NUM_REGISTERS:
            raise RegisterIndexError(x)
        self.v[x] = value & 0xFF

    @property
    def vf(self) -> int:
        return self.v[FLAG_REGISTER]

    @vf.setter
    def vf(self, value: int) -> None:
        self.v[FLAG_REGISTER] = value & 0xFF

    def reset(self) -> None:
        for x in range(NUM_REGISTERS):
            self.v[x] = 0
        self.i = 0x0000
        self.pc = PROGRAM_START

    def __repr__(self) -> str:
        regs = " ".join(f"V{x:X}={self.v[x]:02X}" for x in range(NUM_REGISTERS))
        return f"RegisterFile(pc=${self.pc:03X} I=${self.i:03X} {regs})"


class CallStack:
    """Fixed-depth return-address stack."""

    def __init__(self, depth: int = STACK_DEPTH) -> None:
        self.depth: int = depth
        self._slots: List[int] = [0] * depth
        self.sp: int = 0

    def push(self, address: int) -> None:
        if self.sp >= self.depth:
            raise StackOverflowError(self.depth, address)
        self._slots[self.sp] = address & 0xFFFF
        self.sp += 1

    def pop(self) -> int:
        if self.sp <= 0:
            raise StackUnderflowError()
        self.sp -= 1
        return self._slots[self.sp]

    def peek(self) -> int:
        if self.sp <= 0:
            raise StackUnderflowError()
        return self._slots[self.sp - 1]

    def reset(self) -> None:
        for n in range(self.depth):
            self._slots[n] = 0
        self.sp = 0

    def __len__(self) -> int:
        return self.sp

    def __repr__(self) -> str:
        frames = ", ".join(f"${a:03X}" for a in self._slots[: self.sp])
        return f"CallStack(sp={self.sp}, [{frames}])"
