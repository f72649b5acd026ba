"""Tests for system instructions (0xxx) and the call stack."""

import pytest
import jax.numpy as jnp
from chip8vm import execute, step, StackOverflow, StackUnderflow, STACK_SIZE
from conftest import setup_program


def test_execute_clear_screen(fresh_state):
    """Test 00E0 - Clear display."""
    state = fresh_state.replace(display=fresh_state.display.at[0, 0].set(True))
    state = state.replace(display=state.display.at[63, 31].set(True))

    state = execute(state, 0x00E0)

    assert jnp.sum(state.display) == 0


def test_execute_call_and_return(fresh_state):
    """Test 2NNN (call) and 00EE (return) together."""
    state = fresh_state
    initial_pc = state.pc

    state = execute(state, 0x2300)  # Call 0x300
    assert state.pc == 0x300
    assert state.stack.data[state.stack.pointer - 1] == initial_pc
    assert state.stack.pointer == 1

    state = execute(state, 0x00EE)  # Return
    assert state.pc == initial_pc
    assert state.stack.pointer == 0


def test_return_with_empty_stack(fresh_state):
    """00EE with nothing to return to is a stack underflow."""
    with pytest.raises(StackUnderflow):
        execute(fresh_state, 0x00EE)


def test_seventeenth_call_overflows(fresh_state):
    """16 nested calls fit, the 17th overflows."""
    state = fresh_state
    for _ in range(STACK_SIZE):
        state = execute(state, 0x2300)
    assert state.stack.pointer == STACK_SIZE

    with pytest.raises(StackOverflow):
        execute(state, 0x2300)


def test_nested_calls_return_in_order(fresh_state):
    """Each return lands just after its matching call instruction.

    Subroutine k lives at 0x300 + 4k and is ``CALL next; RET``; the last one
    only returns.
    """
    depth = STACK_SIZE
    words = {}
    for k in range(depth):
        address = 0x300 + 4 * k
        if k < depth - 1:
            words[address] = 0x2000 | (address + 4)
            words[address + 2] = 0x00EE
        else:
            words[address] = 0x00EE

    state = setup_program(fresh_state, [0x2300])
    for address, word in words.items():
        state = setup_program(state, [word], address)

    state = step(state)  # outer call from 0x200
    for _ in range(depth - 1):
        state = step(state)
    assert state.stack.pointer == depth

    expected = [0x300 + 4 * k + 2 for k in reversed(range(depth - 1))] + [0x202]
    for address in expected:
        state = step(state)  # RET
        assert state.pc == address
    assert state.stack.pointer == 0
