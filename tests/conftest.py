"""Test configuration and fixtures for CHIP-8 emulator tests."""

import pytest
import jax.numpy as jnp
from chip8vm import create_state, Quirks


@pytest.fixture
def fresh_state():
    """Provide a fresh emulator state for each test."""
    return create_state()


@pytest.fixture
def shift_vy_state():
    """Provide a fresh state whose shifts read VY."""
    return create_state().replace(quirks=Quirks(shift_uses_vy=True))


@pytest.fixture
def increment_index_state():
    """Provide a fresh state whose bulk transfers advance I."""
    return create_state().replace(quirks=Quirks(increment_index=True))


def setup_sprite_in_memory(state, address, sprite_bytes):
    """Helper to put sprite data in memory."""
    return state.replace(
        memory=state.memory.at[address:address+len(sprite_bytes)].set(
            jnp.array(sprite_bytes, dtype=jnp.uint8)
        )
    )


def setup_program(state, words, address=0x200):
    """Helper to write big-endian instruction words into memory."""
    data = []
    for word in words:
        data.extend([(word >> 8) & 0xFF, word & 0xFF])
    return setup_sprite_in_memory(state, address, data)
