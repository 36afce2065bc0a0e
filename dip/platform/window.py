"""
Main application window for Dip.
Uses pygame to create a display, drive the emulation main loop, and
coordinate audio, video, and input subsystems.

The window is the *driver* of the machine.  Each frame it:

1. polls keyboard events into the keypad latch,
2. calls ``machine.step()`` ``config.steps_per_tick`` times,
3. calls ``machine.tick()`` once,
4. starts or stops the buzzer,
5. re-renders the display if the machine raised its draw flag.

Frames are paced at ``config.timer_hz`` so the timers run at their
nominal rate whatever the instruction rate is.

Typical usage::

    from dip.platform.window import Window

    machine = MachineFactory.create("pong.ch8")
    window = Window(machine, scale=10)
    window.run()
"""

from __future__ import annotations

import logging
import time
from typing import Optional

import pygame

from dip.core.errors import Chip8Error
from dip.core.machine import Machine
from dip.core.types import StepStatus
from dip.platform.audio import AudioDevice
from dip.platform.input_handler import InputHandler
from dip.shell.frame_renderer import FrameRenderer

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_WINDOW_TITLE: str = "Dip"

# Minimum / maximum allowed display scale factors.
_MIN_SCALE: int = 1
_MAX_SCALE: int = 20


class Window:
    """Pygame window that owns the emulation main loop.

    Parameters
    ----------
    machine:
        A loaded :class:`~dip.core.machine.Machine`.
    scale:
        Integer scale factor applied to the native 64x32 resolution.
    enable_audio:
        Set to ``False`` to mute sound output entirely.
    title:
        Text appended to the window caption (usually the ROM name).
    """

    def __init__(
        self,
        machine: Machine,
        scale: int = 10,
        *,
        enable_audio: bool = True,
        title: str = "",
    ) -> None:
        # ---- basic state -------------------------------------------------
        self._machine = machine
        self._scale: int = max(_MIN_SCALE, min(_MAX_SCALE, scale))
        self._running: bool = False
        self._paused: bool = False
        self._title: str = f"{_WINDOW_TITLE} - {title}" if title else _WINDOW_TITLE
        self.error: Optional[Chip8Error] = None

        config = machine.config
        self._frame_hz: int = config.timer_hz
        self._steps_per_frame: int = config.steps_per_tick

        fb = machine.frame_buffer
        self._display_width: int = fb.WIDTH * self._scale
        self._display_height: int = fb.HEIGHT * self._scale

        # ---- init pygame display -----------------------------------------
        if not pygame.get_init():
            pygame.init()

        self._screen: pygame.Surface = pygame.display.set_mode(
            (self._display_width, self._display_height),
            pygame.RESIZABLE,
        )
        pygame.display.set_caption(self._title)

        self._clock: pygame.time.Clock = pygame.time.Clock()

        # ---- subsystems --------------------------------------------------
        self._frame_renderer: FrameRenderer = FrameRenderer(machine)
        self._audio: AudioDevice = AudioDevice(machine, enabled=enable_audio)
        self._input: InputHandler = InputHandler(machine)

        # ---- performance counters ----------------------------------------
        self._frame_count: int = 0
        self._fps_update_time: float = 0.0
        self._fps_display: float = 0.0

        logger.info(
            "Window: %dx%d display (scale=%d, %d Hz, %d steps/frame)",
            self._display_width,
            self._display_height,
            self._scale,
            self._frame_hz,
            self._steps_per_frame,
        )

    # ------------------------------------------------------------------
    # Main loop
    # ------------------------------------------------------------------

    def run(self) -> None:
        """Enter the main emulation loop.

        Blocks until the user closes the window, presses Escape, or the
        machine halts on a fatal error (kept in :attr:`error`).
        """
        self._running = True
        self._fps_update_time = time.monotonic()
        self._frame_count = 0

        logger.info("Entering main loop (target %d fps)", self._frame_hz)

        try:
            while self._running:
                self._tick()
        except KeyboardInterrupt:
            logger.info("Interrupted by user")
        finally:
            self._shutdown()

    # ------------------------------------------------------------------
    # Per-frame tick
    # ------------------------------------------------------------------

    def _tick(self) -> None:
        """Execute one iteration of the main loop."""
        # ---- input -------------------------------------------------------
        self._input.poll()
        if self._input.quit_requested:
            self._running = False
            return
        if self._input.consume_reset():
            logger.info("Reset requested")
            self._machine.reset()
            self._machine.draw_flag = True
        if self._input.consume_pause_toggle():
            self._paused = not self._paused
            logger.info("Paused" if self._paused else "Resumed")

        # ---- emulation ---------------------------------------------------
        if not self._paused:
            try:
                self._run_frame()
            except Chip8Error as exc:
                logger.exception("Machine halted")
                self.error = exc
                self._running = False
                return

        # ---- audio -------------------------------------------------------
        self._audio.update(paused=self._paused)

        # ---- video -------------------------------------------------------
        if self._machine.draw_flag:
            self._present()
            self._machine.draw_flag = False

        # ---- timing ------------------------------------------------------
        self._clock.tick(self._frame_hz)
        self._update_fps()

    def _run_frame(self) -> None:
        """Run one frame's worth of instructions, then one timer tick."""
        machine = self._machine
        for _ in range(self._steps_per_frame):
            result = machine.step()
            if result.status is StepStatus.WAITING_FOR_KEY:
                break
        machine.tick()

    def _present(self) -> None:
        surface = self._frame_renderer.render()

        # Scale to display size.  If the window has been resized, adjust to
        # the new dimensions.
        current_size = self._screen.get_size()
        scaled = pygame.transform.scale(surface, current_size)
        self._screen.blit(scaled, (0, 0))
        pygame.display.flip()

    # ------------------------------------------------------------------
    # FPS tracking
    # ------------------------------------------------------------------

    def _update_fps(self) -> None:
        """Update the displayed FPS counter roughly once per second."""
        self._frame_count += 1
        now = time.monotonic()
        elapsed = now - self._fps_update_time
        if elapsed >= 1.0:
            self._fps_display = self._frame_count / elapsed
            self._frame_count = 0
            self._fps_update_time = now
            suffix = "  [paused]" if self._paused else ""
            pygame.display.set_caption(
                f"{self._title}  [{self._fps_display:.1f} fps]{suffix}"
            )

    # ------------------------------------------------------------------
    # Shutdown
    # ------------------------------------------------------------------

    def _shutdown(self) -> None:
        """Clean up all subsystems."""
        logger.info("Shutting down")
        self._audio.shutdown()
        pygame.quit()
