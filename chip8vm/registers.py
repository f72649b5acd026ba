"""Index-based access to the general purpose registers."""

import jax.numpy as jnp
from chip8vm.constants import FLAG_REGISTER
from chip8vm.state import EmulatorState


def read_register(state: EmulatorState, index: int) -> int:
    """Value of V[index] as a Python int."""
    return int(state.V[index])


def write_register(state: EmulatorState, index: int, value: int) -> EmulatorState:
    """Store value into V[index], truncated to 8 bits."""
    return state.replace(V=state.V.at[index].set(jnp.uint8(int(value) & 0xFF)))


def write_flag(state: EmulatorState, value: int) -> EmulatorState:
    """Store value into VF."""
    return write_register(state, FLAG_REGISTER, value)


def read_index(state: EmulatorState) -> int:
    return int(state.I)


def write_index(state: EmulatorState, value: int) -> EmulatorState:
    """Store value into I, truncated to 16 bits."""
    return state.replace(I=jnp.asarray(int(value) & 0xFFFF, dtype=jnp.uint16))


def write_pc(state: EmulatorState, value: int) -> EmulatorState:
    """Set the program counter, truncated to 16 bits."""
    return state.replace(pc=jnp.asarray(int(value) & 0xFFFF, dtype=jnp.uint16))
