"""Delay and sound timers."""

import jax.numpy as jnp
from chip8vm.state import EmulatorState


def _count_down(timer: jnp.ndarray) -> jnp.ndarray:
    return jnp.where(timer > 0, timer - 1, timer).astype(jnp.uint8)


def tick_timers(state: EmulatorState) -> EmulatorState:
    """Decrement both timers once, holding them at zero."""
    return state.replace(
        delay_timer=_count_down(state.delay_timer),
        sound_timer=_count_down(state.sound_timer),
    )


def sound_active(state: EmulatorState) -> bool:
    """Whether the host should be producing a tone."""
    return int(state.sound_timer) > 0
