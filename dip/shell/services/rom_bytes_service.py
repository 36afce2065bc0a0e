"""
ROM loading service for Dip.

CHIP-8 program images are raw bytes with no header.  This service reads
them from disk, enforces the size limit before a machine is ever built,
and produces a short description for ``--info``.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List

from dip.core.errors import ProgramTooLargeError
from dip.core.memory import MAX_PROGRAM_SIZE, PROGRAM_START

# Extensions commonly used for CHIP-8 program images.
_ROM_EXTENSIONS: frozenset[str] = frozenset({".ch8", ".c8", ".rom", ".bin"})

# Number of leading instruction words shown by :meth:`RomBytesService.describe`.
_PREVIEW_WORDS: int = 4


@dataclass(frozen=True)
class RomInfo:
    """Summary of a program image."""

    title: str
    size: int
    capacity: int
    first_words: List[int]

    @property
    def free(self) -> int:
        return self.capacity - self.size


class RomBytesService:
    """Static utility for loading program images."""

    @staticmethod
    def read(path: str) -> bytes:
        """Read a program image from *path*.

        Raises:
            FileNotFoundError: If *path* does not exist.
            ProgramTooLargeError: If the file exceeds the program area.
            OSError: On general I/O failure.
        """
        with open(path, "rb") as fh:
            data = fh.read(MAX_PROGRAM_SIZE + 1)
        if len(data) > MAX_PROGRAM_SIZE:
            size = os.path.getsize(path)
            raise ProgramTooLargeError(size, MAX_PROGRAM_SIZE)
        return data

    @staticmethod
    def has_rom_extension(path: str) -> bool:
        return os.path.splitext(path)[1].lower() in _ROM_EXTENSIONS

    @staticmethod
    def describe(path: str) -> RomInfo:
        """Read *path* and summarise it."""
        data = RomBytesService.read(path)
        words = [
            (data[i] << 8) | (data[i + 1] if i + 1 < len(data) else 0)
            for i in range(0, min(len(data), _PREVIEW_WORDS * 2), 2)
        ]
        return RomInfo(
            title=os.path.basename(path),
            size=len(data),
            capacity=MAX_PROGRAM_SIZE,
            first_words=words,
        )

    @staticmethod
    def format_info(info: RomInfo) -> dict[str, str]:
        """Human-readable key/value pairs for printing."""
        return {
            "title": info.title,
            "rom_size": f"{info.size} bytes",
            "free_space": f"{info.free} bytes",
            "load_address": f"${PROGRAM_START:03X}",
            "first_opcodes": " ".join(f"{w:04X}" for w in info.first_words),
        }
