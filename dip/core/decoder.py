"""
Opcode decoder.

Turns a 16-bit instruction word into an :class:`Instruction` tagged with
its :class:`~dip.core.types.Mnemonic`.  Decoding inspects the top nibble
first.  Groups that share a top nibble are split on a secondary field:

* ``0`` -- the whole low byte (``00E0`` CLS, ``00EE`` RET, anything else
  is the legacy ``SYS nnn``).
* ``5`` / ``9`` -- the low nibble must be zero.
* ``8`` -- the low nibble selects the ALU operation.
* ``E`` / ``F`` -- the low byte selects the operation.

Field names follow the usual CHIP-8 notation: ``nnn`` is the low 12 bits,
``x`` and ``y`` are the second and third nibbles, ``kk`` is the low byte
and ``n`` the low nibble.
"""

from __future__ import annotations

from typing import Dict, NamedTuple, Optional

from dip.core.types import Mnemonic

M = Mnemonic

_ALU_OPS: Dict[int, Mnemonic] = {
    0x0: M.LD_VX_VY,
    0x1: M.OR,
    0x2: M.AND,
    0x3: M.XOR,
    0x4: M.ADD_VX_VY,
    0x5: M.SUB,
    0x6: M.SHR,
    0x7: M.SUBN,
    0xE: M.SHL,
}

_KEY_OPS: Dict[int, Mnemonic] = {
    0x9E: M.SKP,
    0xA1: M.SKNP,
}

_MISC_OPS: Dict[int, Mnemonic] = {
    0x07: M.LD_VX_DT,
    0x0A: M.LD_VX_K,
    0x15: M.LD_DT_VX,
    0x18: M.LD_ST_VX,
    0x1E: M.ADD_I_VX,
    0x29: M.LD_F_VX,
    0x33: M.LD_B_VX,
    0x55: M.LD_I_VX,
    0x65: M.LD_VX_I,
}

# Top nibbles that decode to exactly one instruction.
_SIMPLE_OPS: Dict[int, Mnemonic] = {
    0x1: M.JP,
    0x2: M.CALL,
    0x3: M.SE_VX_KK,
    0x4: M.SNE_VX_KK,
    0x6: M.LD_VX_KK,
    0x7: M.ADD_VX_KK,
    0xA: M.LD_I,
    0xB: M.JP_V0,
    0xC: M.RND,
    0xD: M.DRW,
}

# Assembly templates used when an instruction is rendered as text.
_FORMATS: Dict[Mnemonic, str] = {
    M.SYS: "SYS ${nnn:03X}",
    M.CLS: "CLS",
    M.RET: "RET",
    M.JP: "JP ${nnn:03X}",
    M.CALL: "CALL ${nnn:03X}",
    M.SE_VX_KK: "SE V{x:X}, ${kk:02X}",
    M.SNE_VX_KK: "SNE V{x:X}, ${kk:02X}",
    M.SE_VX_VY: "SE V{x:X}, V{y:X}",
    M.LD_VX_KK: "LD V{x:X}, ${kk:02X}",
    M.ADD_VX_KK: "ADD V{x:X}, ${kk:02X}",
    M.LD_VX_VY: "LD V{x:X}, V{y:X}",
    M.OR: "OR V{x:X}, V{y:X}",
    M.AND: "AND V{x:X}, V{y:X}",
    M.XOR: "XOR V{x:X}, V{y:X}",
    M.ADD_VX_VY: "ADD V{x:X}, V{y:X}",
    M.SUB: "SUB V{x:X}, V{y:X}",
    M.SHR: "SHR V{x:X}, V{y:X}",
    M.SUBN: "SUBN V{x:X}, V{y:X}",
    M.SHL: "SHL V{x:X}, V{y:X}",
    M.SNE_VX_VY: "SNE V{x:X}, V{y:X}",
    M.LD_I: "LD I, ${nnn:03X}",
    M.JP_V0: "JP V0, ${nnn:03X}",
    M.RND: "RND V{x:X}, ${kk:02X}",
    M.DRW: "DRW V{x:X}, V{y:X}, {n}",
    M.SKP: "SKP V{x:X}",
    M.SKNP: "SKNP V{x:X}",
    M.LD_VX_DT: "LD V{x:X}, DT",
    M.LD_VX_K: "LD V{x:X}, K",
    M.LD_DT_VX: "LD DT, V{x:X}",
    M.LD_ST_VX: "LD ST, V{x:X}",
    M.ADD_I_VX: "ADD I, V{x:X}",
    M.LD_F_VX: "LD F, V{x:X}",
    M.LD_B_VX: "LD B, V{x:X}",
    M.LD_I_VX: "LD [I], V{x:X}",
    M.LD_VX_I: "LD V{x:X}, [I]",
}


class Instruction(NamedTuple):
    """One decoded instruction word."""

    mnemonic: Mnemonic
    opcode: int

    @property
    def nnn(self) -> int:
        return self.opcode & 0x0FFF

    @property
    def x(self) -> int:
        return (self.opcode >> 8) & 0x0F

    @property
    def y(self) -> int:
        return (self.opcode >> 4) & 0x0F

    @property
    def kk(self) -> int:
        return self.opcode & 0x00FF

    @property
    def n(self) -> int:
        return self.opcode & 0x000F

    def __str__(self) -> str:
        return _FORMATS[self.mnemonic].format(
            nnn=self.nnn, x=self.x, y=self.y, kk=self.kk, n=self.n
        )


def _match(opcode: int) -> Optional[Mnemonic]:
    top = opcode >> 12
    simple = _SIMPLE_OPS.get(top)
    if simple is not None:
        return simple

    if top == 0x0:
        if opcode == 0x00E0:
            return M.CLS
        if opcode == 0x00EE:
            return M.RET
        return M.SYS
    if top == 0x5:
        return M.SE_VX_VY if opcode & 0x000F == 0 else None
    if top == 0x9:
        return M.SNE_VX_VY if opcode & 0x000F == 0 else None
    if top == 0x8:
        return _ALU_OPS.get(opcode & 0x000F)
    if top == 0xE:
        return _KEY_OPS.get(opcode & 0x00FF)
    if top == 0xF:
        return _MISC_OPS.get(opcode & 0x00FF)
    return None


def decode(opcode: int) -> Optional[Instruction]:
    """Decode *opcode*, returning ``None`` if it matches no instruction."""
    mnemonic = _match(opcode & 0xFFFF)
    if mnemonic is None:
        return None
    return Instruction(mnemonic, opcode & 0xFFFF)
