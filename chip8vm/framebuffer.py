"""Monochrome framebuffer with XOR sprite drawing.

The display is stored column-major as ``(width, height)`` and indexed
``display[x, y]``. Hosts that want scanlines should use :func:`frame_buffer`.
"""

import jax.numpy as jnp
import numpy as np

from chip8vm.constants import SPRITE_WIDTH


def clear(display: jnp.ndarray) -> jnp.ndarray:
    """Turn every pixel off."""
    return jnp.zeros_like(display)


def sprite_bits(sprite: jnp.ndarray) -> jnp.ndarray:
    """Expand sprite bytes into a ``(rows, 8)`` bit matrix, MSB first."""
    shifts = jnp.arange(SPRITE_WIDTH - 1, -1, -1, dtype=jnp.uint8)
    return (jnp.asarray(sprite, dtype=jnp.uint8)[:, None] >> shifts) & 1


def draw_sprite(display: jnp.ndarray, sprite: jnp.ndarray, x: int, y: int) -> tuple[jnp.ndarray, jnp.ndarray]:
    """XOR a sprite onto the display at (x, y).

    Every pixel coordinate wraps around the display edges independently.

    Args:
        display: Boolean array of shape (width, height)
        sprite: Sprite rows as bytes, one byte per scanline
        x: Horizontal origin
        y: Vertical origin

    Returns:
        Tuple of (new display, collision) where collision is True if any lit
        pixel was turned off while drawing
    """
    width, height = display.shape
    bits = sprite_bits(sprite).astype(jnp.int32)
    rows = bits.shape[0]

    xs = (x + jnp.arange(SPRITE_WIDTH)) % width
    ys = (y + jnp.arange(rows)) % height
    cols = jnp.broadcast_to(xs[None, :], bits.shape)
    lines = jnp.broadcast_to(ys[:, None], bits.shape)

    # Toggle count per pixel; only exceeds 1 on displays smaller than the sprite
    toggles = jnp.zeros(display.shape, dtype=jnp.int32).at[cols, lines].add(bits)
    flipped = (toggles % 2) == 1

    collision = jnp.any(display & (toggles > 0)) | jnp.any(toggles > 1)
    return display ^ flipped, collision


def frame_buffer(display: jnp.ndarray) -> np.ndarray:
    """Dense row-major ``uint8`` buffer of ``width * height`` cells (1 = on)."""
    return np.ascontiguousarray(np.asarray(display, dtype=np.uint8).T).ravel()
