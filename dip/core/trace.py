"""
Instruction tracing hooks for Dip.

The dispatcher calls :meth:`ITracer.trace` once per executed instruction
with the program counter, the raw opcode word and the decoded
instruction.  Tracing is optional; the default is :data:`DEFAULT_TRACER`,
which discards everything.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, List, Optional, Tuple

if TYPE_CHECKING:
    from dip.core.decoder import Instruction


class ITracer(ABC):
    """Per-instruction trace hook."""

    @property
    @abstractmethod
    def enabled(self) -> bool: ...

    @abstractmethod
    def trace(self, pc: int, opcode: int, instruction: Instruction): ...


class NullTracer(ITracer):
    """No-op tracer implementation."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @property
    def enabled(self) -> bool:
        return False

    def trace(self, pc: int, opcode: int, instruction: Instruction):
        pass


class LoggingTracer(ITracer):
    """Tracer that writes one DEBUG record per instruction."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self._logger = logger or logging.getLogger("dip.trace")

    @property
    def enabled(self) -> bool:
        return self._logger.isEnabledFor(logging.DEBUG)

    def trace(self, pc: int, opcode: int, instruction: Instruction):
        self._logger.debug("$%03X  %04X  %s", pc, opcode, instruction)


class RecordingTracer(ITracer):
    """Tracer that keeps ``(pc, opcode, mnemonic)`` tuples in memory."""

    def __init__(self, limit: int = 0):
        self._limit = limit
        self.records: List[Tuple[int, int, str]] = []

    @property
    def enabled(self) -> bool:
        return True

    def trace(self, pc: int, opcode: int, instruction: Instruction):
        if self._limit and len(self.records) >= self._limit:
            del self.records[0]
        self.records.append((pc, opcode, instruction.mnemonic.name))

    def clear(self):
        self.records.clear()


# Default tracer instance
DEFAULT_TRACER: ITracer = NullTracer()
