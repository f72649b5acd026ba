"""CHIP-8 miscellaneous instructions (Fxxx)."""

import jax.numpy as jnp
from chip8vm.state import EmulatorState
from chip8vm.decode import DecodedInstruction
from chip8vm.constants import FONT_START, FONT_STRIDE, INSTRUCTION_SIZE
from chip8vm.memory import read_bytes, write_bytes
from chip8vm.registers import read_register, write_register, read_index, write_index, write_pc


def execute_get_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX07 - Set VX to delay timer value."""
    return write_register(state, instruction.x, int(state.delay_timer))


def execute_set_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX15 - Set delay timer to VX."""
    return state.replace(delay_timer=state.V[instruction.x])


def execute_set_sound_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX18 - Set sound timer to VX."""
    return state.replace(sound_timer=state.V[instruction.x])


def execute_add_to_index(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX1E - Add VX to I register, VF unaffected."""
    return write_index(state, read_index(state) + read_register(state, instruction.x))


def execute_wait_for_key(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX0A - Wait for key press (blocking).

    With no key down the program counter is moved back onto this instruction,
    so the next cycle fetches it again.
    """
    if not bool(jnp.any(state.keypad)):
        return write_pc(state, int(state.pc) - INSTRUCTION_SIZE)

    pressed_key = int(jnp.argmax(state.keypad))
    return write_register(state, instruction.x, pressed_key)


def execute_font_character(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX29 - Set I to location of sprite for digit VX."""
    return write_index(state, FONT_START + read_register(state, instruction.x) * FONT_STRIDE)


def execute_bcd_conversion(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX33 - Store BCD representation of VX at I, I+1, I+2."""
    value = read_register(state, instruction.x)
    digits = [value // 100, (value // 10) % 10, value % 10]
    return state.replace(memory=write_bytes(state.memory, read_index(state), digits, "BCD store"))


def _advance_index(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    if state.quirks.increment_index:
        return write_index(state, read_index(state) + instruction.x + 1)
    return state


def execute_store_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX55 - Store V0 through VX in memory starting at I."""
    count = instruction.x + 1
    new_memory = write_bytes(state.memory, read_index(state), state.V[:count], "register store")
    return _advance_index(state.replace(memory=new_memory), instruction)


def execute_load_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX65 - Load V0 through VX from memory starting at I."""
    count = instruction.x + 1
    values = read_bytes(state.memory, read_index(state), count, "register load")
    return _advance_index(state.replace(V=state.V.at[:count].set(values)), instruction)
