"""
InputState -- the sixteen-key hex keypad latch.

Host code writes key transitions with :meth:`InputState.raise_input`;
the interpreter only ever reads the current state, at the moment an
instruction needs it.

Keypad layout (key index shown in hex)::

    1 2 3 C
    4 5 6 D
    7 8 9 E
    A 0 B F
"""

from __future__ import annotations

from typing import List, Optional

NUM_KEYS: int = 16


class InputState:
    """Pressed / released state for keys 0x0-0xF."""

    def __init__(self) -> None:
        self._keys: List[bool] = [False] * NUM_KEYS

    # ------------------------------------------------------------------
    # Host-side input event injection
    # ------------------------------------------------------------------

    def raise_input(self, key: int, down: bool) -> None:
        """Record a key press (*down* ``True``) or release.

        Indices outside 0-15 are ignored.
        """
        if 0 <= key < NUM_KEYS:
            self._keys[key] = down

    def clear_all_input(self) -> None:
        """Release every key."""
        for k in range(NUM_KEYS):
            self._keys[k] = False

    # ------------------------------------------------------------------
    # Sampling
    # ------------------------------------------------------------------

    def is_pressed(self, key: int) -> bool:
        """Return ``True`` if key ``key & 0xF`` is held."""
        return self._keys[key & 0x0F]

    def first_pressed(self) -> Optional[int]:
        """Lowest-numbered key currently held, or ``None``."""
        for k in range(NUM_KEYS):
            if self._keys[k]:
                return k
        return None

    def pressed_keys(self) -> List[int]:
        return [k for k in range(NUM_KEYS) if self._keys[k]]

    def __repr__(self) -> str:
        held = ",".join(f"{k:X}" for k in self.pressed_keys())
        return f"InputState(held=[{held}])"
