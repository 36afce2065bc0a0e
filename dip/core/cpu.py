"""
CHIP-8 instruction dispatcher.

One call to :meth:`CPU.step` executes exactly one instruction:

1. Fetch the big-endian word at ``pc`` and advance ``pc`` by two.
2. Decode it with :func:`~dip.core.decoder.decode`.
3. Run the handler registered for the decoded mnemonic.

Handlers see ``pc`` already pointing at the following instruction, so a
skip adds two more, a jump overwrites it, CALL pushes it unchanged, and
``Fx0A`` rewinds it by two while no key is held.

Behaviour notes:

* Flag-producing ALU operations write the result first and ``VF`` last,
  so ``VF`` holds the flag even when it is also the destination.
* ``SUB`` / ``SUBN`` set ``VF`` to 1 when there is no borrow, i.e. when
  the minuend is greater than *or equal to* the subtrahend.
* ``RND`` draws from 0-254 before masking with ``kk``.
"""

from __future__ import annotations

import logging
import random
from typing import TYPE_CHECKING, Callable, Dict, Optional

from dip.core.config import MachineConfig
from dip.core.decoder import Instruction, decode
from dip.core.errors import UnknownOpcodeError
from dip.core.memory import Memory
from dip.core.trace import DEFAULT_TRACER, ITracer
from dip.core.types import Mnemonic, StepResult, StepStatus

if TYPE_CHECKING:
    from dip.core.machine import Machine

logger = logging.getLogger(__name__)

Handler = Callable[[Instruction], Optional[StepStatus]]

_RND_MAX: int = 0xFE


class CPU:
    """Fetch-decode-execute engine bound to one :class:`Machine`.

    Parameters
    ----------
    machine:
        Back-reference to the owning machine.  Registers, memory, stack,
        timers, display and keypad are reached through it.
    config:
        Quirk and decode-policy switches.
    tracer:
        Optional per-instruction trace hook.
    """

    def __init__(
        self,
        machine: Machine,
        config: MachineConfig,
        tracer: ITracer = DEFAULT_TRACER,
    ) -> None:
        self.m = machine
        self.config = config
        self.tracer: ITracer = tracer
        self.rng: random.Random = random.Random(config.seed)

        self._dispatch: Dict[Mnemonic, Handler] = self._build_dispatch_table()

    # ------------------------------------------------------------------
    # Shortcuts
    # ------------------------------------------------------------------

    @property
    def mem(self) -> Memory:
        return self.m.mem

    def skip_if(self, cond: bool) -> None:
        if cond:
            r = self.m.regs
            r.pc = (r.pc + 2) & 0xFFFF

    # ------------------------------------------------------------------
    # Execute
    # ------------------------------------------------------------------

    def step(self) -> StepResult:
        """Execute one instruction and report what happened.

        Raises:
            UnknownOpcodeError: Only when ``config.strict_decode`` is set.
            StackOverflowError, StackUnderflowError: From CALL / RET.
        """
        r = self.m.regs
        pc = r.pc
        opcode = self.mem.read_word(pc)
        r.pc = (pc + 2) & 0xFFFF

        ins = decode(opcode)
        if ins is None:
            if self.config.strict_decode:
                raise UnknownOpcodeError(pc, opcode)
            logger.warning("Unknown opcode $%04X at $%03X; skipped", opcode, pc)
            return StepResult(StepStatus.UNKNOWN_OPCODE, pc, opcode)

        if self.tracer.enabled:
            self.tracer.trace(pc, opcode, ins)

        status = self._dispatch[ins.mnemonic](ins)
        return StepResult(status or StepStatus.OK, pc, opcode, ins.mnemonic)

    # ------------------------------------------------------------------
    # Instruction implementations -- flow control
    # ------------------------------------------------------------------

    def i_sys(self, ins: Instruction) -> None:
        self.m.regs.pc = ins.nnn

    def i_cls(self, ins: Instruction) -> None:
        self.m.frame_buffer.clear()

    def i_ret(self, ins: Instruction) -> None:
        self.m.regs.pc = self.m.stack.pop()

    def i_jp(self, ins: Instruction) -> None:
        self.m.regs.pc = ins.nnn

    def i_call(self, ins: Instruction) -> None:
        r = self.m.regs
        self.m.stack.push(r.pc)
        r.pc = ins.nnn

    def i_jp_v0(self, ins: Instruction) -> None:
        r = self.m.regs
        r.pc = (r.v[0] + ins.nnn) & 0xFFFF

    # ------------------------------------------------------------------
    # Instruction implementations -- skips
    # ------------------------------------------------------------------

    def i_se_vx_kk(self, ins: Instruction) -> None:
        self.skip_if(self.m.regs.get(ins.x) == ins.kk)

    def i_sne_vx_kk(self, ins: Instruction) -> None:
        self.skip_if(self.m.regs.get(ins.x) != ins.kk)

    def i_se_vx_vy(self, ins: Instruction) -> None:
        r = self.m.regs
        self.skip_if(r.get(ins.x) == r.get(ins.y))

    def i_sne_vx_vy(self, ins: Instruction) -> None:
        r = self.m.regs
        self.skip_if(r.get(ins.x) != r.get(ins.y))

    def i_skp(self, ins: Instruction) -> None:
        self.skip_if(self.m.input_state.is_pressed(self.m.regs.get(ins.x)))

    def i_sknp(self, ins: Instruction) -> None:
        self.skip_if(not self.m.input_state.is_pressed(self.m.regs.get(ins.x)))

    # ------------------------------------------------------------------
    # Instruction implementations -- loads and ALU
    # ------------------------------------------------------------------

    def i_ld_vx_kk(self, ins: Instruction) -> None:
        self.m.regs.set(ins.x, ins.kk)

    def i_add_vx_kk(self, ins: Instruction) -> None:
        r = self.m.regs
        r.set(ins.x, r.get(ins.x) + ins.kk)

    def i_ld_vx_vy(self, ins: Instruction) -> None:
        r = self.m.regs
        r.set(ins.x, r.get(ins.y))

    def i_or(self, ins: Instruction) -> None:
        r = self.m.regs
        r.set(ins.x, r.get(ins.x) | r.get(ins.y))

    def i_and(self, ins: Instruction) -> None:
        r = self.m.regs
        r.set(ins.x, r.get(ins.x) & r.get(ins.y))

    def i_xor(self, ins: Instruction) -> None:
        r = self.m.regs
        r.set(ins.x, r.get(ins.x) ^ r.get(ins.y))

    def i_add_vx_vy(self, ins: Instruction) -> None:
        r = self.m.regs
        total = r.get(ins.x) + r.get(ins.y)
        r.set(ins.x, total)
        r.vf = 1 if total > 0xFF else 0

    def i_sub(self, ins: Instruction) -> None:
        r = self.m.regs
        vx, vy = r.get(ins.x), r.get(ins.y)
        r.set(ins.x, vx - vy)
        r.vf = 1 if vx >= vy else 0

    def i_subn(self, ins: Instruction) -> None:
        r = self.m.regs
        vx, vy = r.get(ins.x), r.get(ins.y)
        r.set(ins.x, vy - vx)
        r.vf = 1 if vy >= vx else 0

    def i_shr(self, ins: Instruction) -> None:
        r = self.m.regs
        src = r.get(ins.y) if self.config.shift_uses_vy else r.get(ins.x)
        r.set(ins.x, src >> 1)
        r.vf = src & 0x01

    def i_shl(self, ins: Instruction) -> None:
        r = self.m.regs
        src = r.get(ins.y) if self.config.shift_uses_vy else r.get(ins.x)
        r.set(ins.x, src << 1)
        r.vf = (src >> 7) & 0x01

    def i_rnd(self, ins: Instruction) -> None:
        self.m.regs.set(ins.x, self.rng.randint(0, _RND_MAX) & ins.kk)

    # ------------------------------------------------------------------
    # Instruction implementations -- index register and memory
    # ------------------------------------------------------------------

    def i_ld_i(self, ins: Instruction) -> None:
        self.m.regs.i = ins.nnn

    def i_add_i_vx(self, ins: Instruction) -> None:
        r = self.m.regs
        r.i = (r.i + r.get(ins.x)) & 0xFFFF

    def i_ld_f_vx(self, ins: Instruction) -> None:
        r = self.m.regs
        r.i = Memory.glyph_address(r.get(ins.x))

    def i_ld_b_vx(self, ins: Instruction) -> None:
        r = self.m.regs
        value = r.get(ins.x)
        self.mem.write_byte(r.i, value // 100)
        self.mem.write_byte(r.i + 1, value // 10 % 10)
        self.mem.write_byte(r.i + 2, value % 10)

    def i_ld_i_vx(self, ins: Instruction) -> None:
        r = self.m.regs
        for k in range(ins.x + 1):
            self.mem.write_byte(r.i + k, r.get(k))
        if self.config.load_store_increments_i:
            r.i = (r.i + ins.x + 1) & 0xFFFF

    def i_ld_vx_i(self, ins: Instruction) -> None:
        r = self.m.regs
        for k in range(ins.x + 1):
            r.set(k, self.mem.read_byte(r.i + k))
        if self.config.load_store_increments_i:
            r.i = (r.i + ins.x + 1) & 0xFFFF

    # ------------------------------------------------------------------
    # Instruction implementations -- display, timers, keypad
    # ------------------------------------------------------------------

    def i_drw(self, ins: Instruction) -> None:
        r = self.m.regs
        sprite = self.mem.read_block(r.i, ins.n)
        collision = self.m.frame_buffer.blit(r.get(ins.x), r.get(ins.y), sprite)
        r.vf = 1 if collision else 0

    def i_ld_vx_dt(self, ins: Instruction) -> None:
        self.m.regs.set(ins.x, self.m.timers.delay)

    def i_ld_dt_vx(self, ins: Instruction) -> None:
        self.m.timers.delay = self.m.regs.get(ins.x)

    def i_ld_st_vx(self, ins: Instruction) -> None:
        self.m.timers.sound = self.m.regs.get(ins.x)

    def i_ld_vx_k(self, ins: Instruction) -> Optional[StepStatus]:
        r = self.m.regs
        key = self.m.input_state.first_pressed()
        if key is None:
            r.pc = (r.pc - 2) & 0xFFFF
            return StepStatus.WAITING_FOR_KEY
        r.set(ins.x, key)
        return None

    # ------------------------------------------------------------------
    # Dispatch table
    # ------------------------------------------------------------------

    def _build_dispatch_table(self) -> Dict[Mnemonic, Handler]:
        """Map every :class:`Mnemonic` to its bound handler."""
        M = Mnemonic
        t: Dict[Mnemonic, Handler] = {
            M.SYS: self.i_sys,
            M.CLS: self.i_cls,
            M.RET: self.i_ret,
            M.JP: self.i_jp,
            M.CALL: self.i_call,
            M.SE_VX_KK: self.i_se_vx_kk,
            M.SNE_VX_KK: self.i_sne_vx_kk,
            M.SE_VX_VY: self.i_se_vx_vy,
            M.LD_VX_KK: self.i_ld_vx_kk,
            M.ADD_VX_KK: self.i_add_vx_kk,
            M.LD_VX_VY: self.i_ld_vx_vy,
            M.OR: self.i_or,
            M.AND: self.i_and,
            M.XOR: self.i_xor,
            M.ADD_VX_VY: self.i_add_vx_vy,
            M.SUB: self.i_sub,
            M.SHR: self.i_shr,
            M.SUBN: self.i_subn,
            M.SHL: self.i_shl,
            M.SNE_VX_VY: self.i_sne_vx_vy,
            M.LD_I: self.i_ld_i,
            M.JP_V0: self.i_jp_v0,
            M.RND: self.i_rnd,
            M.DRW: self.i_drw,
            M.SKP: self.i_skp,
            M.SKNP: self.i_sknp,
            M.LD_VX_DT: self.i_ld_vx_dt,
            M.LD_VX_K: self.i_ld_vx_k,
            M.LD_DT_VX: self.i_ld_dt_vx,
            M.LD_ST_VX: self.i_ld_st_vx,
            M.ADD_I_VX: self.i_add_i_vx,
            M.LD_F_VX: self.i_ld_f_vx,
            M.LD_B_VX: self.i_ld_b_vx,
            M.LD_I_VX: self.i_ld_i_vx,
            M.LD_VX_I: self.i_ld_vx_i,
        }
        missing = set(Mnemonic) - set(t)
        assert not missing, f"no handler for {sorted(m.name for m in missing)}"
        return t

    def __repr__(self) -> str:
        r = self.m.regs
        return f"CPU(pc=${r.pc:03X}, I=${r.i:03X}, sp={self.m.stack.sp})"
