"""Main CHIP-8 emulator execution engine."""

import os
from typing import Optional

import jax.numpy as jnp
from chip8vm.state import EmulatorState
from chip8vm.decode import Op, decode
from chip8vm.constants import PROGRAM_START, INSTRUCTION_SIZE
from chip8vm.errors import LoadError
from chip8vm.memory import check_range, pack_u16
from chip8vm.timers import tick_timers
from chip8vm.instructions.system import execute_clear_screen, execute_return
from chip8vm.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, execute_jump_with_offset, execute_skip_if_key
)
from chip8vm.instructions.alu import execute_alu_operation
from chip8vm.instructions.memory import execute_set, execute_add, execute_set_index, execute_random
from chip8vm.instructions.display import execute_display
from chip8vm.instructions.misc import (
    execute_get_delay_timer, execute_wait_for_key, execute_set_delay_timer,
    execute_set_sound_timer, execute_add_to_index, execute_font_character,
    execute_bcd_conversion, execute_store_registers, execute_load_registers
)


HANDLERS = {
    Op.CLS: execute_clear_screen,
    Op.RET: execute_return,
    Op.JP: execute_jump,
    Op.CALL: execute_call,
    Op.SE_VX_NN: execute_skip_if_equal_immediate,
    Op.SNE_VX_NN: execute_skip_if_not_equal_immediate,
    Op.SE_VX_VY: execute_skip_if_equal_register,
    Op.LD_VX_NN: execute_set,
    Op.ADD_VX_NN: execute_add,
    Op.LD_VX_VY: execute_alu_operation,
    Op.OR: execute_alu_operation,
    Op.AND: execute_alu_operation,
    Op.XOR: execute_alu_operation,
    Op.ADD_VX_VY: execute_alu_operation,
    Op.SUB: execute_alu_operation,
    Op.SHR: execute_alu_operation,
    Op.SUBN: execute_alu_operation,
    Op.SHL: execute_alu_operation,
    Op.SNE_VX_VY: execute_skip_if_not_equal_register,
    Op.LD_I: execute_set_index,
    Op.JP_V0: execute_jump_with_offset,
    Op.RND: execute_random,
    Op.DRW: execute_display,
    Op.SKP: execute_skip_if_key,
    Op.SKNP: execute_skip_if_key,
    Op.LD_VX_DT: execute_get_delay_timer,
    Op.LD_VX_K: execute_wait_for_key,
    Op.LD_DT_VX: execute_set_delay_timer,
    Op.LD_ST_VX: execute_set_sound_timer,
    Op.ADD_I_VX: execute_add_to_index,
    Op.LD_F_VX: execute_font_character,
    Op.LD_B_VX: execute_bcd_conversion,
    Op.LD_MEM_VX: execute_store_registers,
    Op.LD_VX_MEM: execute_load_registers,
}


def execute(state: EmulatorState, instruction: int, address: Optional[int] = None) -> EmulatorState:
    """Execute single CHIP-8 instruction.

    The program counter is not advanced here; see :func:`fetch`.

    Raises:
        IllegalInstruction: If the word is not a known opcode
    """
    decoded_instruction = decode(instruction, address)
    return HANDLERS[decoded_instruction.op](state, decoded_instruction)


def fetch(state: EmulatorState) -> tuple[EmulatorState, jnp.uint16]:
    """Fetch next instruction from memory and advance the program counter."""
    pc = int(state.pc)
    check_range(state.memory, pc, INSTRUCTION_SIZE, "instruction fetch")
    instruction = pack_u16(state.memory[pc], state.memory[pc + 1])
    return state.replace(pc=state.pc + INSTRUCTION_SIZE, instruction=instruction), instruction


def step(state: EmulatorState) -> EmulatorState:
    """Run one full cycle: fetch, execute, tick timers."""
    address = int(state.pc)
    state, instruction = fetch(state)
    state = execute(state, int(instruction), address)
    return tick_timers(state)


def read_source(source) -> bytes:
    """Read a whole program from bytes, a path or a binary file object."""
    if isinstance(source, (bytes, bytearray, memoryview)):
        return bytes(source)
    if isinstance(source, (str, os.PathLike)):
        try:
            with open(source, 'rb') as f:
                return f.read()
        except OSError as error:
            raise LoadError(source, error.strerror or str(error)) from error
    if hasattr(source, "read"):
        try:
            data = source.read()
        except (OSError, ValueError) as error:  # closed handle, or text mode over binary data
            raise LoadError(source, str(error)) from error
        if not isinstance(data, (bytes, bytearray)):
            raise LoadError(source, "source is not opened in binary mode")
        return bytes(data)
    raise LoadError(source, f"unsupported source type {type(source).__name__}")


def load_rom(state: EmulatorState, source) -> EmulatorState:
    """Load ROM data into CHIP-8 memory starting at 0x200.

    Args:
        state: State to load into; nothing but memory is touched
        source: Raw bytes, a filesystem path or a binary file object

    Returns:
        State with the program copied in. Data that does not fit between
        0x200 and the end of memory is dropped.

    Raises:
        LoadError: If the source cannot be opened or read
    """
    rom_data = read_source(source)
    capacity = state.memory.shape[0] - PROGRAM_START
    rom_data = rom_data[:capacity]
    if not rom_data:
        return state
    rom_array = jnp.array(list(rom_data), dtype=jnp.uint8)
    new_memory = state.memory.at[PROGRAM_START:PROGRAM_START + len(rom_data)].set(rom_array)
    return state.replace(memory=new_memory)
