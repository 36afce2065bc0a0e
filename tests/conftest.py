from __future__ import annotations

from typing import Optional

import pytest

from dip.core.config import MachineConfig
from dip.core.machine import Machine


def program(*words: int) -> bytes:
    """Assemble instruction words into a big-endian program image."""
    return b"".join(w.to_bytes(2, "big") for w in words)


def load(*words: int, config: Optional[MachineConfig] = None) -> Machine:
    return Machine(program(*words), config=config)


@pytest.fixture
def machine() -> Machine:
    return Machine()
