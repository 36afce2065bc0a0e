"""Tests for opcode decoding."""

from __future__ import annotations

import pytest

from dip.core.decoder import decode
from dip.core.types import Mnemonic as M


@pytest.mark.parametrize(
    "opcode, mnemonic",
    [
        (0x0123, M.SYS),
        (0x0000, M.SYS),
        (0x00E0, M.CLS),
        (0x00EE, M.RET),
        (0x1ABC, M.JP),
        (0x2ABC, M.CALL),
        (0x3A12, M.SE_VX_KK),
        (0x4A12, M.SNE_VX_KK),
        (0x5AB0, M.SE_VX_VY),
        (0x6A12, M.LD_VX_KK),
        (0x7A12, M.ADD_VX_KK),
        (0x8AB0, M.LD_VX_VY),
        (0x8AB1, M.OR),
        (0x8AB2, M.AND),
        (0x8AB3, M.XOR),
        (0x8AB4, M.ADD_VX_VY),
        (0x8AB5, M.SUB),
        (0x8AB6, M.SHR),
        (0x8AB7, M.SUBN),
        (0x8ABE, M.SHL),
        (0x9AB0, M.SNE_VX_VY),
        (0xA123, M.LD_I),
        (0xB123, M.JP_V0),
        (0xC1FF, M.RND),
        (0xD125, M.DRW),
        (0xE19E, M.SKP),
        (0xE1A1, M.SKNP),
        (0xF107, M.LD_VX_DT),
        (0xF10A, M.LD_VX_K),
        (0xF115, M.LD_DT_VX),
        (0xF118, M.LD_ST_VX),
        (0xF11E, M.ADD_I_VX),
        (0xF129, M.LD_F_VX),
        (0xF133, M.LD_B_VX),
        (0xF155, M.LD_I_VX),
        (0xF165, M.LD_VX_I),
    ],
)
def test_decode_known_opcodes(opcode: int, mnemonic: M) -> None:
    ins = decode(opcode)

    assert ins is not None
    assert ins.mnemonic is mnemonic
    assert ins.opcode == opcode


@pytest.mark.parametrize(
    "opcode",
    [0x5AB1, 0x9AB4, 0x8AB8, 0x8ABF, 0xE100, 0xE19F, 0xF1FF, 0xF100],
)
def test_decode_unknown_opcodes(opcode: int) -> None:
    assert decode(opcode) is None


def test_fields() -> None:
    ins = decode(0xD3A7)

    assert ins is not None
    assert (ins.x, ins.y, ins.n) == (0x3, 0xA, 0x7)
    assert ins.nnn == 0x3A7
    assert ins.kk == 0xA7


@pytest.mark.parametrize(
    "opcode, text",
    [
        (0x00E0, "CLS"),
        (0x2ABC, "CALL $ABC"),
        (0x6A0F, "LD VA, $0F"),
        (0x8124, "ADD V1, V2"),
        (0xD015, "DRW V0, V1, 5"),
        (0xF233, "LD B, V2"),
        (0xF555, "LD [I], V5"),
    ],
)
def test_instruction_text(opcode: int, text: str) -> None:
    assert str(decode(opcode)) == text
