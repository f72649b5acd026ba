"""Bounds-checked access to the CHIP-8 address space."""

import jax.numpy as jnp
from chip8vm.errors import OutOfRangeAccess


def check_range(memory: jnp.ndarray, address: int, length: int, operation: str) -> None:
    """Raise OutOfRangeAccess unless [address, address + length) fits in memory."""
    limit = memory.shape[0]
    if address < 0 or address + length > limit:
        raise OutOfRangeAccess(address, length, operation, limit)


def read_bytes(memory: jnp.ndarray, address: int, length: int, operation: str = "read") -> jnp.ndarray:
    """Read ``length`` bytes starting at ``address``."""
    check_range(memory, address, length, operation)
    return memory[address:address + length]


def write_bytes(memory: jnp.ndarray, address: int, values, operation: str = "write") -> jnp.ndarray:
    """Return memory with ``values`` written starting at ``address``."""
    values = jnp.asarray(values, dtype=jnp.uint8)
    check_range(memory, address, values.shape[0], operation)
    return memory.at[address:address + values.shape[0]].set(values)


def pack_u16(high: jnp.uint8, low: jnp.uint8) -> jnp.uint16:
    """Pack two bytes into uint16."""
    return (high.astype(jnp.uint16) << 8) | low.astype(jnp.uint16)
