"""Tests for the flat address space and program loading."""

from __future__ import annotations

import pytest

from dip.core.errors import ProgramTooLargeError
from dip.core.machine import Machine
from dip.core.memory import FONTSET, MAX_PROGRAM_SIZE, PROGRAM_START, Memory


def test_glyph_table_loaded_at_zero() -> None:
    mem = Memory()

    assert mem.read_block(0, 80) == FONTSET
    # Glyph for "0" then "1".
    assert mem.read_block(0, 5) == bytes([0xF0, 0x90, 0x90, 0x90, 0xF0])
    assert mem.read_block(Memory.glyph_address(1), 5) == bytes([0x20, 0x60, 0x20, 0x20, 0x70])
    assert mem[80] == 0


def test_program_loaded_at_0x200() -> None:
    machine = Machine(b"\x12\x34\xAB")

    assert machine.mem[PROGRAM_START] == 0x12
    assert machine.mem[PROGRAM_START + 1] == 0x34
    assert machine.mem[PROGRAM_START + 2] == 0xAB
    assert machine.mem[PROGRAM_START - 1] == 0
    assert machine.regs.pc == PROGRAM_START


def test_addresses_wrap_modulo_4096() -> None:
    mem = Memory()

    mem.write_byte(0x1000 + 0x300, 0x5A)

    assert mem.read_byte(0x300) == 0x5A


def test_write_masks_value_to_byte() -> None:
    mem = Memory()
    mem.write_byte(0x400, 0x1FF)
    assert mem[0x400] == 0xFF


def test_read_word_is_big_endian_and_wraps() -> None:
    mem = Memory()
    mem.write_byte(0xFFF, 0xAB)
    mem.write_byte(0x000, 0xCD)

    assert mem.read_word(0xFFF) == 0xABCD


def test_largest_program_fits() -> None:
    image = bytes(range(256)) * (MAX_PROGRAM_SIZE // 256)
    assert len(image) == 4096 - 512

    machine = Machine(image)

    assert machine.mem[0xFFF] == image[-1]
    assert machine.program_size == MAX_PROGRAM_SIZE


def test_oversized_program_rejected_without_mutation() -> None:
    machine = Machine(b"\x60\x01")
    before = machine.mem.dump()

    with pytest.raises(ProgramTooLargeError) as excinfo:
        machine.load_program(b"\xEE" * (MAX_PROGRAM_SIZE + 1))

    assert excinfo.value.size == MAX_PROGRAM_SIZE + 1
    assert excinfo.value.capacity == MAX_PROGRAM_SIZE
    assert machine.mem.dump() == before


def test_oversized_program_rejected_at_construction() -> None:
    with pytest.raises(ProgramTooLargeError):
        Machine(bytes(MAX_PROGRAM_SIZE + 1))


def test_load_past_end_of_memory_rejected() -> None:
    mem = Memory()
    before = mem.dump()

    with pytest.raises(ProgramTooLargeError):
        mem.load(0xFFE, b"\x01\x02\x03")

    assert mem.dump() == before


def test_clear_restores_glyphs() -> None:
    mem = Memory()
    mem.write_byte(0, 0x00)
    mem.write_byte(0x300, 0x77)

    mem.clear()

    assert mem.read_block(0, 80) == FONTSET
    assert mem[0x300] == 0
