"""
Exception hierarchy for the Dip core.

Every failure the interpreter can report derives from :class:`Chip8Error`
so that a driver can catch the whole family in one place and decide
whether to halt, log and continue, or reset the machine.
"""

from __future__ import annotations


class Chip8Error(Exception):
    """Base class for all emulation errors."""


class UnknownOpcodeError(Chip8Error):
    """The fetched word matches no instruction pattern."""

    def __init__(self, pc: int, opcode: int) -> None:
        super().__init__(f"Unknown opcode ${opcode:04X} at ${pc:03X}")
        self.pc = pc
        self.opcode = opcode


class StackOverflowError(Chip8Error):
    """CALL executed with every call-stack slot already in use."""

    def __init__(self, depth: int, address: int) -> None:
        super().__init__(
            f"Call stack overflow (depth {depth}) pushing ${address:03X}"
        )
        self.depth = depth
        self.address = address


class StackUnderflowError(Chip8Error):
    """RET executed with an empty call stack."""

    def __init__(self) -> None:
        super().__init__("Call stack underflow: RET with empty stack")


class ProgramTooLargeError(Chip8Error):
    """Program image does not fit between the load address and the end of memory."""

    def __init__(self, size: int, capacity: int) -> None:
        super().__init__(
            f"Program image is {size} bytes, maximum is {capacity}"
        )
        self.size = size
        self.capacity = capacity


class RegisterIndexError(Chip8Error, IndexError):
    """A register index outside 0-15 reached the register file."""

    def __init__(self, index: int) -> None:
        super().__init__(f"Register index {index} out of range [0, 16)")
        self.index = index
