"""CHIP-8 control flow instructions."""

from chip8vm.state import EmulatorState
from chip8vm.decode import DecodedInstruction, Op
from chip8vm.constants import NUM_KEYS, INSTRUCTION_SIZE
from chip8vm.errors import OutOfRangeAccess
from chip8vm.registers import read_register, write_pc
from chip8vm.stack import push


def execute_jump(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """1NNN - Jump to address NNN."""
    return write_pc(state, instruction.nnn)


def execute_call(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """2NNN - Call subroutine at NNN."""
    state = state.replace(stack=push(state.stack, state.pc))
    return execute_jump(state, instruction)


def skip_if(state: EmulatorState, condition: bool) -> EmulatorState:
    """Step over the next instruction when condition holds."""
    if condition:
        return write_pc(state, int(state.pc) + INSTRUCTION_SIZE)
    return state


def make_skip_instruction(condition_fn):
    """Factory for skip instructions."""
    def skip_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
        return skip_if(state, condition_fn(state, instruction))
    return skip_instruction


execute_skip_if_equal_immediate = make_skip_instruction(
    lambda state, inst: read_register(state, inst.x) == inst.nn
)

execute_skip_if_not_equal_immediate = make_skip_instruction(
    lambda state, inst: read_register(state, inst.x) != inst.nn
)

execute_skip_if_equal_register = make_skip_instruction(
    lambda state, inst: read_register(state, inst.x) == read_register(state, inst.y)
)

execute_skip_if_not_equal_register = make_skip_instruction(
    lambda state, inst: read_register(state, inst.x) != read_register(state, inst.y)
)


def execute_jump_with_offset(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """BNNN - Jump to address NNN + V0."""
    return write_pc(state, instruction.nnn + read_register(state, 0))


def execute_skip_if_key(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """EX9E/EXA1 - Skip if key pressed/not pressed."""
    key_index = read_register(state, instruction.x)
    if key_index >= NUM_KEYS:
        raise OutOfRangeAccess(key_index, 1, "keypad read", NUM_KEYS)

    key_pressed = bool(state.keypad[key_index])
    is_not_instruction = instruction.op == Op.SKNP
    return skip_if(state, key_pressed ^ is_not_instruction)
