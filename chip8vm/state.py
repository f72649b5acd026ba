"""CHIP-8 emulator state structures."""

from typing import Optional

import jax
import jax.numpy as jnp
from flax.struct import dataclass, PyTreeNode, field

from chip8vm.constants import (
    PROGRAM_START, FONT_START, FONT_DATA, SCREEN_WIDTH, SCREEN_HEIGHT,
    STACK_SIZE, MEMORY_SIZE, NUM_REGISTERS, NUM_KEYS,
)


@dataclass(frozen=True)
class Quirks:
    """Behaviours that differ between historical interpreters.

    Attributes:
        shift_uses_vy: 8XY6/8XYE shift VY into VX instead of shifting VX in place
        increment_index: FX55/FX65 leave I pointing past the last byte transferred
    """
    shift_uses_vy: bool = field(pytree_node=False, default=False)
    increment_index: bool = field(pytree_node=False, default=False)


@dataclass(frozen=True)
class StackState:
    """Stack state for subroutine calls."""
    data: jnp.ndarray = field(default_factory=lambda: jnp.zeros(STACK_SIZE, dtype=jnp.uint16))
    pointer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))


class EmulatorState(PyTreeNode):
    """Main CHIP-8 emulator state."""
    rng: jax.random.PRNGKey
    memory: jnp.ndarray = field(default_factory=lambda: jnp.zeros(MEMORY_SIZE, dtype=jnp.uint8))
    pc: jnp.ndarray = field(default_factory=lambda: jnp.asarray(PROGRAM_START, dtype=jnp.uint16))
    display: jnp.ndarray = field(
        default_factory=lambda: jnp.zeros((SCREEN_WIDTH, SCREEN_HEIGHT), dtype=jnp.bool_)
    )
    stack: StackState = field(default_factory=StackState)
    delay_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    sound_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    keypad: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_KEYS, dtype=jnp.bool_))
    V: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_REGISTERS, dtype=jnp.uint8))
    I: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint16))
    instruction: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint16))
    quirks: Quirks = field(pytree_node=False, default_factory=Quirks)

    @property
    def width(self) -> int:
        return self.display.shape[0]

    @property
    def height(self) -> int:
        return self.display.shape[1]


def _with_font(memory: jnp.ndarray) -> jnp.ndarray:
    return memory.at[FONT_START:FONT_START + len(FONT_DATA)].set(
        jnp.array(FONT_DATA, dtype=jnp.uint8)
    )


def create_state(
    rng: Optional[jax.Array] = None,
    width: int = SCREEN_WIDTH,
    height: int = SCREEN_HEIGHT,
    quirks: Optional[Quirks] = None,
) -> EmulatorState:
    """Create initial emulator state with font data loaded.

    Args:
        rng: PRNG key feeding CXNN; defaults to ``jax.random.PRNGKey(0)``
        width: Framebuffer width in pixels
        height: Framebuffer height in pixels
        quirks: Compatibility switches, defaults to ``Quirks()``

    Returns:
        Fresh state with PC at 0x200
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Framebuffer dimensions must be positive, got {width}x{height}")
    if rng is None:
        rng = jax.random.PRNGKey(0)
    state = EmulatorState(
        rng=rng,
        display=jnp.zeros((width, height), dtype=jnp.bool_),
        quirks=quirks if quirks is not None else Quirks(),
    )
    return state.replace(memory=_with_font(state.memory))


def reset_state(state: EmulatorState) -> EmulatorState:
    """Return state to construction-time values.

    Keypad, PRNG key, quirks and framebuffer dimensions are kept.
    """
    return state.replace(
        memory=_with_font(jnp.zeros_like(state.memory)),
        pc=jnp.asarray(PROGRAM_START, dtype=jnp.uint16),
        display=jnp.zeros_like(state.display),
        stack=StackState(),
        delay_timer=jnp.zeros((), dtype=jnp.uint8),
        sound_timer=jnp.zeros((), dtype=jnp.uint8),
        V=jnp.zeros_like(state.V),
        I=jnp.zeros((), dtype=jnp.uint16),
        instruction=jnp.zeros((), dtype=jnp.uint16),
    )
