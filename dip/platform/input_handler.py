"""
Input handler for Dip.
Maps keyboard keys to the sixteen keys of the hex keypad.

Keyboard layout
---------------

The left-hand 4x4 block of a QWERTY keyboard stands in for the keypad::

    Keyboard        Keypad
    1 2 3 4         1 2 3 C
    Q W E R         4 5 6 D
    A S D F         7 8 9 E
    Z X C V         A 0 B F

Escape quits.  F5 resets the machine.  P toggles pause.  Losing window
focus releases every held key.
"""

from __future__ import annotations

import logging

import pygame

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Keyboard -> keypad index
# ---------------------------------------------------------------------------

KEY_MAP: dict[int, int] = {
    pygame.K_1: 0x1, pygame.K_2: 0x2, pygame.K_3: 0x3, pygame.K_4: 0xC,
    pygame.K_q: 0x4, pygame.K_w: 0x5, pygame.K_e: 0x6, pygame.K_r: 0xD,
    pygame.K_a: 0x7, pygame.K_s: 0x8, pygame.K_d: 0x9, pygame.K_f: 0xE,
    pygame.K_z: 0xA, pygame.K_x: 0x0, pygame.K_c: 0xB, pygame.K_v: 0xF,
}


class InputHandler:
    """Translates pygame keyboard events into keypad inputs.

    Parameters
    ----------
    machine:
        The emulated machine.  Expected interface:

        * ``input_state.raise_input(key: int, down: bool)``
    """

    def __init__(self, machine: object) -> None:
        self._machine = machine
        self._quit_requested: bool = False
        self._reset_requested: bool = False
        self._pause_toggled: bool = False

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------

    @property
    def quit_requested(self) -> bool:
        """``True`` if the user pressed Escape or closed the window."""
        return self._quit_requested

    def consume_reset(self) -> bool:
        """Return ``True`` once per F5 press."""
        requested, self._reset_requested = self._reset_requested, False
        return requested

    def consume_pause_toggle(self) -> bool:
        """Return ``True`` once per P press."""
        toggled, self._pause_toggled = self._pause_toggled, False
        return toggled

    def poll(self) -> None:
        """Pump the pygame event queue and process all pending events.

        This should be called once at the top of each frame.
        """
        for event in pygame.event.get():
            self.handle_event(event)

    def handle_event(self, event: pygame.event.Event) -> None:
        """Process a single pygame event."""
        if event.type == pygame.QUIT:
            self._quit_requested = True
            return

        # Key-up events are lost while unfocused.
        if event.type == pygame.WINDOWFOCUSLOST:
            self.clear_all()
            return

        if event.type == pygame.KEYDOWN:
            self._on_key_down(event)
        elif event.type == pygame.KEYUP:
            self._on_key_up(event)

    def clear_all(self) -> None:
        """Release all currently-held keys."""
        self._machine.input_state.clear_all_input()  # type: ignore[attr-defined]

    # ------------------------------------------------------------------
    # Keyboard handlers
    # ------------------------------------------------------------------

    def _on_key_down(self, event: pygame.event.Event) -> None:
        key = event.key

        if key == pygame.K_ESCAPE:
            self._quit_requested = True
            return
        if key == pygame.K_F5:
            self._reset_requested = True
            return
        if key == pygame.K_p:
            self._pause_toggled = True
            return

        index = KEY_MAP.get(key)
        if index is not None:
            self._send(index, True)

    def _on_key_up(self, event: pygame.event.Event) -> None:
        index = KEY_MAP.get(event.key)
        if index is not None:
            self._send(index, False)

    # ------------------------------------------------------------------
    # Machine bridge
    # ------------------------------------------------------------------

    def _send(self, index: int, down: bool) -> None:
        logger.debug("Key %X %s", index, "down" if down else "up")
        self._machine.input_state.raise_input(index, down)  # type: ignore[attr-defined]
