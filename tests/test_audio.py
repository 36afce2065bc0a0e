"""Tests for buzzer control, using a stand-in mixer channel."""

from __future__ import annotations

import numpy as np

from dip.core.machine import Machine
from dip.platform.audio import AudioDevice, square_wave


class _Channel:
    def __init__(self) -> None:
        self.plays = 0
        self.stops = 0

    def play(self, sound: object, loops: int = 0) -> None:
        self.plays += 1

    def stop(self) -> None:
        self.stops += 1


def _device(machine: Machine) -> tuple[AudioDevice, _Channel]:
    device = AudioDevice(machine, enabled=False)
    channel = _Channel()
    device._enabled = True
    device._channel = channel  # type: ignore[assignment]
    device._tone = object()  # type: ignore[assignment]
    return device, channel


def test_square_wave_shape() -> None:
    wave = square_wave(440, 44100, 1000)

    assert wave.dtype == np.int16
    assert len(wave) == 100
    assert set(np.unique(wave)) == {-1000, 1000}


def test_tone_follows_sound_timer() -> None:
    machine = Machine()
    device, channel = _device(machine)

    machine.timers.sound = 1
    device.update()
    assert device.playing
    assert channel.plays == 1

    machine.tick()
    device.update()
    assert not device.playing
    assert channel.stops == 1


def test_tone_stops_while_paused() -> None:
    machine = Machine()
    device, channel = _device(machine)
    machine.timers.sound = 30

    device.update()
    device.update(paused=True)
    assert not device.playing
    assert channel.stops == 1

    device.update()
    assert device.playing
    assert channel.plays == 2


def test_disabled_device_ignores_timer() -> None:
    machine = Machine()
    device = AudioDevice(machine, enabled=False)
    machine.timers.sound = 5

    device.update()

    assert not device.playing
