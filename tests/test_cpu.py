"""Instruction-level tests for the dispatcher."""

from __future__ import annotations

import pytest

from dip.core.config import MachineConfig
from dip.core.types import Mnemonic, StepStatus
from tests.conftest import load


# ---------------------------------------------------------------------------
# Flow control
# ---------------------------------------------------------------------------

def test_jp_sets_pc() -> None:
    m = load(0x1345)
    m.step()
    assert m.regs.pc == 0x345


def test_sys_sets_pc() -> None:
    m = load(0x0456)
    result = m.step()
    assert result.mnemonic is Mnemonic.SYS
    assert m.regs.pc == 0x456


def test_call_then_ret_returns_to_following_instruction() -> None:
    # $200: CALL $206   $202: LD V0, $01   $204: JP $204   $206: RET
    m = load(0x2206, 0x6001, 0x1204, 0x00EE)

    m.step()
    assert m.regs.pc == 0x206
    assert m.stack.sp == 1
    assert m.stack.peek() == 0x202

    m.step()
    assert m.regs.pc == 0x202
    assert m.stack.sp == 0


def test_jp_v0_adds_offset() -> None:
    m = load(0x6004, 0xB300)
    m.run(2)
    assert m.regs.pc == 0x304


def test_cls_clears_display_and_signals_redraw() -> None:
    m = load(0x00E0)
    m.frame_buffer.blit(0, 0, [0xFF])
    m.draw_flag = False

    m.step()

    assert m.frame_buffer.snapshot() == bytes(2048)
    assert m.draw_flag
    assert m.regs.pc == 0x202


# ---------------------------------------------------------------------------
# Skips
# ---------------------------------------------------------------------------

@pytest.mark.parametrize(
    "words, expected_pc",
    [
        ((0x6042, 0x3042), 0x206),  # SE Vx, kk taken
        ((0x6042, 0x3043), 0x204),  # SE Vx, kk not taken
        ((0x6042, 0x4043), 0x206),  # SNE Vx, kk taken
        ((0x6042, 0x4042), 0x204),  # SNE Vx, kk not taken
        ((0x6042, 0x6142, 0x5010), 0x208),  # SE Vx, Vy taken
        ((0x6042, 0x6141, 0x5010), 0x206),  # SE Vx, Vy not taken
        ((0x6042, 0x6141, 0x9010), 0x208),  # SNE Vx, Vy taken
        ((0x6042, 0x6142, 0x9010), 0x206),  # SNE Vx, Vy not taken
    ],
)
def test_skips(words: tuple, expected_pc: int) -> None:
    m = load(*words)
    m.run(len(words))
    assert m.regs.pc == expected_pc


def test_skp_and_sknp_follow_key_latch() -> None:
    m = load(0x6A07, 0xEA9E)
    m.raise_input(0x7, True)
    m.run(2)
    assert m.regs.pc == 0x206

    m = load(0x6A07, 0xEA9E)
    m.run(2)
    assert m.regs.pc == 0x204

    m = load(0x6A07, 0xEAA1)
    m.run(2)
    assert m.regs.pc == 0x206

    m = load(0x6A07, 0xEAA1)
    m.raise_input(0x7, True)
    m.run(2)
    assert m.regs.pc == 0x204


# ---------------------------------------------------------------------------
# Loads and ALU
# ---------------------------------------------------------------------------

def test_ld_and_add_immediate_wraps_without_flag() -> None:
    m = load(0x6AFF, 0x6F05, 0x7A02)
    m.run(3)

    assert m.regs.get(0xA) == 0x01
    assert m.regs.vf == 0x05


@pytest.mark.parametrize(
    "a, b",
    [(0, 0), (1, 2), (0x7F, 0x80), (0x80, 0x80), (0xFF, 0x01), (0xFF, 0xFF), (200, 55), (200, 56)],
)
def test_add_vx_vy_carry(a: int, b: int) -> None:
    m = load(0x6000 | a, 0x6100 | b, 0x8014)
    m.run(3)

    assert m.regs.get(0) == (a + b) % 256
    assert m.regs.vf == (1 if a + b > 255 else 0)


def test_sub_equal_operands_sets_no_borrow_flag() -> None:
    m = load(0x6005, 0x6105, 0x8015)
    m.run(3)

    assert m.regs.get(0) == 0
    assert m.regs.vf == 1


@pytest.mark.parametrize("a, b", [(10, 3), (3, 10), (0, 1), (0xFF, 0)])
def test_sub_and_subn(a: int, b: int) -> None:
    m = load(0x6000 | a, 0x6100 | b, 0x8015)
    m.run(3)
    assert m.regs.get(0) == (a - b) % 256
    assert m.regs.vf == (1 if a >= b else 0)

    m = load(0x6000 | a, 0x6100 | b, 0x8017)
    m.run(3)
    assert m.regs.get(0) == (b - a) % 256
    assert m.regs.vf == (1 if b >= a else 0)


def test_flag_written_after_result_when_vf_is_destination() -> None:
    m = load(0x6FFF, 0x6102, 0x8F14)
    m.run(3)
    assert m.regs.vf == 1


def test_bitwise_ops() -> None:
    m = load(0x60F0, 0x613C, 0x8200, 0x8211, 0x8300, 0x8312, 0x8400, 0x8413)
    m.run(8)

    assert m.regs.get(2) == 0xF0 | 0x3C
    assert m.regs.get(3) == 0xF0 & 0x3C
    assert m.regs.get(4) == 0xF0 ^ 0x3C


def test_ld_vx_vy() -> None:
    m = load(0x6177, 0x8010)
    m.run(2)
    assert m.regs.get(0) == 0x77


def test_shifts_in_place() -> None:
    m = load(0x6081, 0x8006)
    m.run(2)
    assert m.regs.get(0) == 0x40
    assert m.regs.vf == 1

    m = load(0x6081, 0x800E)
    m.run(2)
    assert m.regs.get(0) == 0x02
    assert m.regs.vf == 1

    m = load(0x6040, 0x800E)
    m.run(2)
    assert m.regs.get(0) == 0x80
    assert m.regs.vf == 0


def test_shift_quirk_uses_vy() -> None:
    config = MachineConfig(shift_uses_vy=True)
    m = load(0x6001, 0x6104, 0x8016, config=config)
    m.run(3)

    assert m.regs.get(0) == 0x02
    assert m.regs.get(1) == 0x04
    assert m.regs.vf == 0


def test_rnd_masks_with_kk() -> None:
    m = load(*([0xC00F] * 50), config=MachineConfig(seed=1234))
    for _ in range(50):
        m.step()
        assert m.regs.get(0) & 0xF0 == 0


def test_rnd_with_zero_mask_is_zero() -> None:
    m = load(0x60AA, 0xC000)
    m.run(2)
    assert m.regs.get(0) == 0


def test_rnd_is_reproducible_with_seed() -> None:
    a = load(0xC0FF, 0xC1FF, config=MachineConfig(seed=7))
    b = load(0xC0FF, 0xC1FF, config=MachineConfig(seed=7))
    a.run(2)
    b.run(2)
    assert a.regs.v == b.regs.v


def test_rnd_never_produces_255() -> None:
    # $200: RND V0, $FF   $202: JP $200
    m = load(0xC0FF, 0x1200, config=MachineConfig(seed=99))
    seen = set()
    for _ in range(20000):
        m.run(2)
        seen.add(m.regs.get(0))

    assert 0xFF not in seen
    assert 0x00 in seen
    assert 0xFE in seen
    assert len(seen) == 255


# ---------------------------------------------------------------------------
# Index register and memory
# ---------------------------------------------------------------------------

def test_ld_i_and_add_i() -> None:
    m = load(0xA300, 0x6010, 0xF01E)
    m.run(3)
    assert m.regs.i == 0x310


def test_ld_f_points_at_glyph() -> None:
    m = load(0x600A, 0xF029)
    m.run(2)
    assert m.regs.i == 0xA * 5
    assert m.mem.read_block(m.regs.i, 5) == bytes([0xF0, 0x90, 0xF0, 0x90, 0x90])


def test_ld_b_stores_bcd() -> None:
    m = load(0x60EA, 0xA400, 0xF033)  # 0xEA == 234
    m.run(3)

    assert m.mem.read_block(0x400, 3) == bytes([2, 3, 4])
    assert m.regs.i == 0x400


def test_store_and_load_register_block() -> None:
    m = load(0x6011, 0x6122, 0x6233, 0x6344, 0xA400, 0xF255)
    m.run(6)

    assert m.mem.read_block(0x400, 4) == bytes([0x11, 0x22, 0x33, 0x00])
    assert m.regs.i == 0x400

    m = load(0xA208, 0xF265, 0x1204, 0x0000, 0xAABB, 0xCC00)
    m.run(2)
    assert (m.regs.get(0), m.regs.get(1), m.regs.get(2)) == (0xAA, 0xBB, 0xCC)
    assert m.regs.get(3) == 0
    assert m.regs.i == 0x208


def test_memory_quirk_advances_i() -> None:
    config = MachineConfig(load_store_increments_i=True)
    m = load(0xA400, 0xF355, 0xF165, config=config)
    m.run(3)

    assert m.regs.i == 0x400 + 4 + 2


# ---------------------------------------------------------------------------
# Display, timers, keypad
# ---------------------------------------------------------------------------

def test_drw_draws_glyph_and_reports_collision() -> None:
    # LD V0,$3C  LD V1,$00  LD I,$000(glyph 0)  DRW V0,V1,5  DRW V0,V1,5
    m = load(0x603C, 0x6100, 0xA000, 0xD015, 0xD015)
    m.run(4)

    assert m.regs.vf == 0
    assert m.draw_flag
    assert [m.frame_buffer.read_pixel(60 + c, 0) for c in range(4)] == [1, 1, 1, 1]
    assert m.frame_buffer.lit_pixels() == 4 + 2 + 2 + 2 + 4

    m.step()
    assert m.regs.vf == 1
    assert m.frame_buffer.lit_pixels() == 0


def test_drw_single_byte_sprite_wraps() -> None:
    m = load(0x603C, 0x6100, 0xA20C, 0xD011, 0xD011, 0x1200, 0xFF00)
    m.run(4)

    assert m.regs.vf == 0
    assert [m.frame_buffer.read_pixel(x, 1) for x in range(4)] == [1, 1, 1, 1]

    m.step()
    assert m.regs.vf == 1


def test_timer_loads() -> None:
    m = load(0x6030, 0xF015, 0xF018, 0xF107)
    m.run(3)
    assert m.timers.delay == 0x30
    assert m.timers.sound == 0x30

    m.tick()
    m.step()
    assert m.regs.get(1) == 0x2F


def test_wait_for_key_does_not_block() -> None:
    m = load(0xF50A, 0x6001)

    result = m.step()
    assert result.status is StepStatus.WAITING_FOR_KEY
    assert m.regs.pc == 0x200

    result = m.step()
    assert result.status is StepStatus.WAITING_FOR_KEY

    m.raise_input(0xB, True)
    result = m.step()
    assert result.ok
    assert m.regs.get(5) == 0xB
    assert m.regs.pc == 0x202
