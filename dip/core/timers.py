"""
Timer unit -- the delay and sound countdown timers.

Both timers are 8-bit and count down by one per :meth:`TimerUnit.tick`
until they reach zero.  The unit has no notion of wall-clock time; the
driver calls :meth:`tick` at a steady ~60 Hz regardless of how often the
CPU is stepped.
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


class TimerUnit:
    """Delay timer (``DT``) and sound timer (``ST``)."""

    def __init__(self) -> None:
        self._delay: int = 0
        self._sound: int = 0

    @property
    def delay(self) -> int:
        return self._delay

    @delay.setter
    def delay(self, value: int) -> None:
        self._delay = value & 0xFF

    @property
    def sound(self) -> int:
        return self._sound

    @sound.setter
    def sound(self, value: int) -> None:
        self._sound = value & 0xFF

    @property
    def sound_active(self) -> bool:
        """``True`` while the host should be producing a tone."""
        return self._sound > 0

    def tick(self) -> None:
        """Decrement both timers by one, stopping at zero."""
        if self._delay > 0:
            self._delay -= 1
        if self._sound > 0:
            if self._sound == 1:
                logger.debug("Sound timer expired; beep ends")
            self._sound -= 1

    def reset(self) -> None:
        self._delay = 0
        self._sound = 0

    def __repr__(self) -> str:
        return f"TimerUnit(delay={self._delay}, sound={self._sound})"
