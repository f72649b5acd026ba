"""CHIP-8 ALU operations (8xxx).

Each operation takes the VX and VY operands read before execution and returns
``(result, flag)``. A flag of ``None`` leaves VF untouched. The result is
written to VX first and the flag to VF second, so ``8FY4`` and friends end
with the flag in VF.
"""

from chip8vm.state import EmulatorState
from chip8vm.decode import DecodedInstruction, Op
from chip8vm.registers import read_register, write_register, write_flag


def alu_set(vx: int, vy: int) -> tuple[int, None]:
    """8XY0 - Set: VX = VY."""
    return vy, None


def alu_or(vx: int, vy: int) -> tuple[int, None]:
    """8XY1 - Binary OR: VX |= VY."""
    return vx | vy, None


def alu_and(vx: int, vy: int) -> tuple[int, None]:
    """8XY2 - Binary AND: VX &= VY."""
    return vx & vy, None


def alu_xor(vx: int, vy: int) -> tuple[int, None]:
    """8XY3 - Logical XOR: VX ^= VY."""
    return vx ^ vy, None


def alu_add(vx: int, vy: int) -> tuple[int, int]:
    """8XY4 - Add: VX += VY, set carry flag."""
    result = vx + vy
    carry = int(result > 0xFF)
    return result & 0xFF, carry


def alu_sub_xy(vx: int, vy: int) -> tuple[int, int]:
    """8XY5 - Subtract: VX -= VY, VF = 1 when VX > VY."""
    no_borrow = int(vx > vy)
    return (vx - vy) & 0xFF, no_borrow


def alu_shift_right(vx: int, vy: int) -> tuple[int, int]:
    """8XY6 - Shift right: VX >>= 1."""
    shifted_bit = vx & 1
    return vx >> 1, shifted_bit


def alu_sub_yx(vx: int, vy: int) -> tuple[int, int]:
    """8XY7 - Subtract: VX = VY - VX, VF = 1 when VY > VX."""
    no_borrow = int(vy > vx)
    return (vy - vx) & 0xFF, no_borrow


def alu_shift_left(vx: int, vy: int) -> tuple[int, int]:
    """8XYE - Shift left: VX <<= 1."""
    shifted_bit = (vx & 0x80) >> 7
    return (vx << 1) & 0xFF, shifted_bit


ALU_OPERATIONS = {
    Op.LD_VX_VY: alu_set,
    Op.OR: alu_or,
    Op.AND: alu_and,
    Op.XOR: alu_xor,
    Op.ADD_VX_VY: alu_add,
    Op.SUB: alu_sub_xy,
    Op.SHR: alu_shift_right,
    Op.SUBN: alu_sub_yx,
    Op.SHL: alu_shift_left,
}

SHIFT_OPERATIONS = (Op.SHR, Op.SHL)


def execute_alu_operation(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """8XYN - ALU operations dispatcher."""
    vx = read_register(state, instruction.x)
    vy = read_register(state, instruction.y)

    if instruction.op in SHIFT_OPERATIONS and state.quirks.shift_uses_vy:
        vx = vy

    result, vf = ALU_OPERATIONS[instruction.op](vx, vy)

    state = write_register(state, instruction.x, result)
    if vf is not None:
        state = write_flag(state, vf)
    return state
