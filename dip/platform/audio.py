"""
Audio output device for Dip.
Uses pygame.mixer to sound the buzzer while the sound timer is nonzero.

The interpreter has a single-tone buzzer: it is on whenever the sound
timer is above zero and goes silent on the tick that takes it from 1 to
0.  A short square-wave period is synthesised once with numpy, wrapped in
a ``pygame.mixer.Sound`` and looped on a dedicated channel; :meth:`update`
starts or stops that loop to follow the timer.
"""

from __future__ import annotations

import logging
from typing import Optional

import numpy as np
import pygame

logger = logging.getLogger(__name__)

_SAMPLE_RATE: int = 44100
_MIXER_BUFFER_SAMPLES: int = 512

# Buzzer pitch and loudness.
_TONE_HZ: int = 440
_AMPLITUDE: int = 6000


def square_wave(frequency: int, sample_rate: int, amplitude: int) -> np.ndarray:
    """Return one full period of a signed 16-bit square wave."""
    period = max(2, sample_rate // frequency)
    half = period // 2
    wave = np.full(period, amplitude, dtype=np.int16)
    wave[half:] = -amplitude
    return wave


class AudioDevice:
    """Play a tone from the emulated machine's sound timer.

    Parameters
    ----------
    machine:
        The emulated machine.  Expected attribute:

        * ``timers`` -- :class:`~dip.core.timers.TimerUnit`
    enabled:
        Set to ``False`` to create the device in a silent / no-op mode.
    """

    def __init__(self, machine: object, *, enabled: bool = True) -> None:
        self._machine = machine
        self._enabled: bool = enabled
        self._channel: Optional[pygame.mixer.Channel] = None
        self._tone: Optional[pygame.mixer.Sound] = None
        self._playing: bool = False

        if not self._enabled:
            logger.info("AudioDevice: disabled (silent mode)")
            return

        self._init_mixer()

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def playing(self) -> bool:
        return self._playing

    def update(self, paused: bool = False) -> None:
        """Start or stop the tone to match the sound timer.

        Call this once per frame, after the timers have been ticked.  The
        timers are frozen while *paused*, so the tone is silenced too.
        """
        if not self._enabled or self._channel is None:
            return

        active = (
            self._machine.timers.sound_active  # type: ignore[attr-defined]
            and not paused
        )
        if active and not self._playing:
            self._channel.play(self._tone, loops=-1)
            self._playing = True
        elif not active and self._playing:
            self._channel.stop()
            self._playing = False

    def shutdown(self) -> None:
        """Stop playback and release the mixer."""
        self._shutdown_mixer()

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _init_mixer(self) -> None:
        """Initialise the pygame mixer and synthesise the tone."""
        try:
            pygame.mixer.init(
                frequency=_SAMPLE_RATE,
                size=-16,       # signed 16-bit
                channels=1,     # mono
                buffer=_MIXER_BUFFER_SAMPLES,
            )
        except pygame.error as exc:
            logger.warning("AudioDevice: mixer init failed (%s); audio disabled", exc)
            self._enabled = False
            return

        freq, _size, channels = pygame.mixer.get_init()
        wave = square_wave(_TONE_HZ, freq, _AMPLITUDE)
        if channels > 1:
            wave = np.repeat(wave[:, np.newaxis], channels, axis=1)
        self._tone = pygame.sndarray.make_sound(np.ascontiguousarray(wave))

        pygame.mixer.set_num_channels(8)
        self._channel = pygame.mixer.Channel(0)

        logger.info(
            "AudioDevice: mixer ready at %d Hz, %d ch, tone %d Hz",
            freq,
            channels,
            _TONE_HZ,
        )

    def _shutdown_mixer(self) -> None:
        """Stop the mixer channel and release resources."""
        if self._channel is not None:
            try:
                self._channel.stop()
            except pygame.error:
                logger.debug("AudioDevice: channel already stopped")
            self._channel = None
        self._tone = None
        self._playing = False

        if pygame.mixer.get_init():
            pygame.mixer.quit()
