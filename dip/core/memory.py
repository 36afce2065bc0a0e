"""
Memory -- the flat 4 KB address space of the interpreter.

Layout
------

===========  ==========================================
Range        Contents
===========  ==========================================
$000-$04F    Hex digit glyphs (16 glyphs x 5 bytes)
$050-$1FF    Unused (interpreter area on real hardware)
$200-$FFF    Program image and working RAM
===========  ==========================================

All addresses are masked to 12 bits, so address arithmetic that runs past
$FFF wraps back to $000.
"""

from __future__ import annotations

import logging

from dip.core.errors import ProgramTooLargeError

logger = logging.getLogger(__name__)

MEMORY_SIZE: int = 4096
ADDRESS_MASK: int = MEMORY_SIZE - 1
PROGRAM_START: int = 0x200
MAX_PROGRAM_SIZE: int = MEMORY_SIZE - PROGRAM_START

GLYPH_BYTES: int = 5

# fmt: off
FONTSET: bytes = bytes([
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
])
# fmt: on

assert len(FONTSET) == 16 * GLYPH_BYTES, f"fontset must have 80 bytes, got {len(FONTSET)}"


class Memory:
    """4096 bytes of byte-addressable RAM with the glyph table pre-loaded."""

    def __init__(self) -> None:
        self._data: bytearray = bytearray(MEMORY_SIZE)
        self.load(0, FONTSET)

    # ------------------------------------------------------------------
    # Byte access
    # ------------------------------------------------------------------

    def read_byte(self, addr: int) -> int:
        return self._data[addr & ADDRESS_MASK]

    def write_byte(self, addr: int, value: int) -> None:
        self._data[addr & ADDRESS_MASK] = value & 0xFF

    def read_word(self, addr: int) -> int:
        """Read a big-endian 16-bit word; the second byte wraps at $FFF."""
        return (self.read_byte(addr) << 8) | self.read_byte(addr + 1)

    def read_block(self, addr: int, length: int) -> bytes:
        """Return *length* bytes starting at *addr*, wrapping at $FFF."""
        return bytes(self._data[(addr + i) & ADDRESS_MASK] for i in range(length))

    def __getitem__(self, addr: int) -> int:
        return self.read_byte(addr)

    def __setitem__(self, addr: int, value: int) -> None:
        self.write_byte(addr, value)

    def __len__(self) -> int:
        return MEMORY_SIZE

    # ------------------------------------------------------------------
    # Bulk loading
    # ------------------------------------------------------------------

    def load(self, offset: int, data: bytes) -> None:
        """Copy *data* into memory starting at *offset*.

        Raises:
            ProgramTooLargeError: If the block would run past the end of
                memory.  Nothing is written in that case.
        """
        capacity = MEMORY_SIZE - offset
        if offset < 0 or len(data) > capacity:
            raise ProgramTooLargeError(len(data), max(0, capacity))
        self._data[offset:offset + len(data)] = data

    def load_program(self, image: bytes) -> None:
        """Copy a program image to :data:`PROGRAM_START`."""
        if len(image) > MAX_PROGRAM_SIZE:
            raise ProgramTooLargeError(len(image), MAX_PROGRAM_SIZE)
        self.load(PROGRAM_START, image)
        logger.debug("Loaded %d-byte program at $%03X", len(image), PROGRAM_START)

    def clear(self) -> None:
        """Zero all memory and restore the glyph table."""
        self._data[:] = bytes(MEMORY_SIZE)
        self.load(0, FONTSET)

    def dump(self) -> bytes:
        """Return a copy of the whole address space."""
        return bytes(self._data)

    @staticmethod
    def glyph_address(digit: int) -> int:
        """Address of the 5-byte glyph for hex *digit*."""
        return digit * GLYPH_BYTES

    def __repr__(self) -> str:
        return f"Memory(size={MEMORY_SIZE}, program_start=${PROGRAM_START:03X})"
