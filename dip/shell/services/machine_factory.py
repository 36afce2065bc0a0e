"""
Machine creation factory for Dip.

Creates a loaded :class:`~dip.core.machine.Machine` from a ROM file path
and optional configuration.

Typical usage::

    machine = MachineFactory.create("pong.ch8")
    machine = MachineFactory.create("pong.ch8", MachineConfig(cpu_hz=1000))
"""

from __future__ import annotations

import logging
from typing import Optional

from dip.core.config import MachineConfig
from dip.core.machine import Machine
from dip.core.trace import ITracer
from dip.shell.services.rom_bytes_service import RomBytesService

logger = logging.getLogger(__name__)


class MachineFactory:
    """Create an emulated machine from a ROM file."""

    @staticmethod
    def create(
        rom_path: str,
        config: Optional[MachineConfig] = None,
        tracer: Optional[ITracer] = None,
    ) -> Machine:
        """Build and return a machine ready to run.

        Parameters
        ----------
        rom_path:
            Filesystem path to the program image.
        config:
            Behaviour switches.  ``None`` uses the defaults.
        tracer:
            Optional per-instruction trace hook.

        Raises
        ------
        FileNotFoundError
            If *rom_path* does not exist.
        ProgramTooLargeError
            If the image does not fit in the program area.
        """
        config = config or MachineConfig()

        logger.info("Loading ROM: %s", rom_path)
        if not RomBytesService.has_rom_extension(rom_path):
            logger.warning("Unrecognised ROM extension: %s", rom_path)
        rom_bytes = RomBytesService.read(rom_path)
        logger.info("ROM size: %d bytes", len(rom_bytes))

        machine = Machine(rom_bytes, config=config, tracer=tracer)
        logger.info("Machine created: %r (%r)", machine, config)
        return machine

    @staticmethod
    def describe(rom_path: str) -> dict[str, str]:
        """Return a human-readable description of a ROM file."""
        info = RomBytesService.describe(rom_path)
        return RomBytesService.format_info(info)
