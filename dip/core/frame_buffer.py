"""
FrameBuffer -- the monochrome display of the interpreter.

The display is 64 x 32 pixels stored one byte per pixel (0 = off,
1 = on) in row-major order::

    video_buffer[y * WIDTH + x]

Sprites are combined with XOR.  Pixel positions wrap on the *linear*
index, so a sprite that runs off the right edge continues at the left
edge of the following row, and one that runs off the bottom continues at
the top.

The buffer also carries :attr:`FrameBuffer.draw_flag`, the redraw signal
set on every clear or sprite draw and cleared by the renderer once it has
consumed the frame.
"""

from __future__ import annotations

from typing import Iterable

import numpy as np


class FrameBuffer:
    """64 x 32 one-byte-per-pixel display with XOR sprite blitting."""

    WIDTH: int = 64
    HEIGHT: int = 32
    SIZE: int = WIDTH * HEIGHT

    SPRITE_WIDTH: int = 8

    def __init__(self) -> None:
        self.video_buffer: bytearray = bytearray(self.SIZE)
        self.draw_flag: bool = False

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def clear(self) -> None:
        """Turn every pixel off."""
        self.video_buffer[:] = bytes(self.SIZE)
        self.draw_flag = True

    def blit(self, x: int, y: int, sprite_rows: Iterable[int]) -> bool:
        """XOR an 8-pixel-wide sprite onto the display at (*x*, *y*).

        Each entry of *sprite_rows* is one byte; bit 7 is the leftmost
        pixel.

        Returns:
            ``True`` if any pixel that was on has been turned off.
        """
        buf = self.video_buffer
        collision = False
        for row, bits in enumerate(sprite_rows):
            base = x + (y + row) * self.WIDTH
            for col in range(self.SPRITE_WIDTH):
                if bits & (0x80 >> col):
                    offset = (base + col) % self.SIZE
                    if buf[offset]:
                        collision = True
                    buf[offset] ^= 1
        self.draw_flag = True
        return collision

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    def read_pixel(self, x: int, y: int) -> int:
        return self.video_buffer[(y * self.WIDTH + x) % self.SIZE]

    def snapshot(self) -> bytes:
        """Return a copy of the 2048 cells in row-major order."""
        return bytes(self.video_buffer)

    def as_array(self) -> np.ndarray:
        """Return the display as a ``(HEIGHT, WIDTH)`` uint8 array (a copy)."""
        return np.frombuffer(self.video_buffer, dtype=np.uint8).reshape(
            (self.HEIGHT, self.WIDTH)
        ).copy()

    def lit_pixels(self) -> int:
        return sum(self.video_buffer)

    def reset(self) -> None:
        self.video_buffer[:] = bytes(self.SIZE)
        self.draw_flag = False

    def __repr__(self) -> str:
        return (
            f"FrameBuffer("
            f"width={self.WIDTH}, "
            f"height={self.HEIGHT}, "
            f"lit={self.lit_pixels()}, "
            f"draw_flag={self.draw_flag})"
        )
