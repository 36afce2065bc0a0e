"""
Frame renderer for Dip.
Converts the machine's 0/1 FrameBuffer into an RGB pygame Surface.

The core stores one byte per pixel.  A two-entry numpy look-up table maps
each cell to the "off" or "on" colour, and the result is blitted into a
reusable :class:`pygame.Surface` of the display's native size.
"""

from __future__ import annotations

import logging
from typing import Tuple

import numpy as np
import pygame

logger = logging.getLogger(__name__)

# Default colours (0xRRGGBB): black background, green phosphor.
DEFAULT_OFF_COLOUR: int = 0x000000
DEFAULT_ON_COLOUR: int = 0x00FF00


def _rgb(colour: int) -> Tuple[int, int, int]:
    return ((colour >> 16) & 0xFF, (colour >> 8) & 0xFF, colour & 0xFF)


class FrameRenderer:
    """Convert a machine's :class:`FrameBuffer` into a :class:`pygame.Surface`.

    Parameters
    ----------
    machine:
        The emulated machine.  Expected attribute:

        * ``frame_buffer`` -- a :class:`~dip.core.frame_buffer.FrameBuffer`
    off_colour, on_colour:
        ``0xRRGGBB`` colours for unlit and lit pixels.
    """

    def __init__(
        self,
        machine: object,
        off_colour: int = DEFAULT_OFF_COLOUR,
        on_colour: int = DEFAULT_ON_COLOUR,
    ) -> None:
        self._machine = machine
        fb = machine.frame_buffer  # type: ignore[attr-defined]

        self._width: int = fb.WIDTH
        self._height: int = fb.HEIGHT

        self._lut = np.zeros((2, 3), dtype=np.uint8)
        self.set_colours(off_colour, on_colour)

        self._surface: pygame.Surface = pygame.Surface((self._width, self._height))

        logger.info("FrameRenderer: %dx%d", self._width, self._height)

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def surface(self) -> pygame.Surface:
        """The internal pygame Surface (updated on each :meth:`render` call)."""
        return self._surface

    def set_colours(self, off_colour: int, on_colour: int) -> None:
        """Replace the two display colours."""
        self._lut[0] = _rgb(off_colour)
        self._lut[1] = _rgb(on_colour)

    def to_rgb(self) -> np.ndarray:
        """Return the current display as a ``(HEIGHT, WIDTH, 3)`` uint8 array."""
        fb = self._machine.frame_buffer  # type: ignore[attr-defined]
        cells = np.frombuffer(fb.video_buffer, dtype=np.uint8).reshape(
            (self._height, self._width)
        )
        return self._lut[cells & 1]

    def render(self) -> pygame.Surface:
        """Render the current frame and return the surface.

        The same :class:`pygame.Surface` object is reused each frame.
        """
        rgb = self.to_rgb()
        # pygame surfarray expects (W, H, 3) -- transpose width and height.
        pygame.surfarray.blit_array(self._surface, rgb.transpose(1, 0, 2))
        return self._surface
