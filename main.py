#!/usr/bin/env python3
"""
Dip -- CHIP-8 interpreter.

Launcher for running from a source checkout::

    python main.py roms/pong.ch8 --scale 12

See :mod:`dip.main` for the full list of options.
"""

from __future__ import annotations

import sys

from dip.main import main

if __name__ == "__main__":
    sys.exit(main())
