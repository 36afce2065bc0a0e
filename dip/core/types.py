"""
Core enumerations and value types for Dip.
"""

from enum import Enum, IntEnum
from typing import NamedTuple, Optional


class Mnemonic(IntEnum):
    SYS = 0
    CLS = 1
    RET = 2
    JP = 3
    CALL = 4
    SE_VX_KK = 5
    SNE_VX_KK = 6
    SE_VX_VY = 7
    LD_VX_KK = 8
    ADD_VX_KK = 9
    LD_VX_VY = 10
    OR = 11
    AND = 12
    XOR = 13
    ADD_VX_VY = 14
    SUB = 15
    SHR = 16
    SUBN = 17
    SHL = 18
    SNE_VX_VY = 19
    LD_I = 20
    JP_V0 = 21
    RND = 22
    DRW = 23
    SKP = 24
    SKNP = 25
    LD_VX_DT = 26
    LD_VX_K = 27
    LD_DT_VX = 28
    LD_ST_VX = 29
    ADD_I_VX = 30
    LD_F_VX = 31
    LD_B_VX = 32
    LD_I_VX = 33
    LD_VX_I = 34


class StepStatus(Enum):
    OK = "ok"
    UNKNOWN_OPCODE = "unknown_opcode"
    WAITING_FOR_KEY = "waiting_for_key"
    HALTED = "halted"


class StepResult(NamedTuple):
    """Outcome of one :meth:`Machine.step` call.

    ``pc`` and ``opcode`` describe the instruction that was fetched;
    ``mnemonic`` is ``None`` when the word did not decode or the machine
    was already halted.
    """

    status: StepStatus
    pc: int
    opcode: int
    mnemonic: Optional[Mnemonic] = None

    @property
    def ok(self) -> bool:
        return self.status is StepStatus.OK
