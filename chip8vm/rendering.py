"""Turn the monochrome display into RGB frames for a host window."""

from typing import Tuple

import jax.numpy as jnp
import numpy as np

from chip8vm.framebuffer import frame_buffer

Color = Tuple[int, int, int]

COLOR_SCHEMES = {
    "classic": ((255, 255, 255), (0, 0, 0)),
    "green": ((0, 255, 0), (0, 0, 0)),  # P1 phosphor
    "amber": ((255, 176, 0), (0, 0, 0)),
    "blue": ((0, 255, 255), (0, 0, 64)),
    "retro": ((255, 255, 0), (64, 0, 64)),
}


def chip8_display_to_rgb(
    display: jnp.ndarray,
    scale: int = 8,
    on_color: Color = (255, 255, 255),
    off_color: Color = (0, 0, 0),
) -> np.ndarray:
    """Convert the boolean display to an upscaled RGB image.

    Args:
        display: Boolean array of shape (width, height)
        scale: Window pixels per CHIP-8 pixel, nearest neighbour
        on_color: RGB color for lit pixels
        off_color: RGB color for dark pixels

    Returns:
        ``uint8`` array of shape (height * scale, width * scale, 3)
    """
    width, height = display.shape
    palette = np.array([off_color, on_color], dtype=np.uint8)
    rgb_frame = palette[frame_buffer(display).reshape(height, width)]

    if scale > 1:
        rgb_frame = rgb_frame.repeat(scale, axis=0).repeat(scale, axis=1)
    return rgb_frame


def create_color_scheme(scheme: str = "classic") -> Tuple[Color, Color]:
    """Look up ``(on_color, off_color)`` for a named scheme."""
    try:
        return COLOR_SCHEMES[scheme]
    except KeyError:
        raise ValueError(
            f"Unknown color scheme '{scheme}'. Available: {sorted(COLOR_SCHEMES)}"
        ) from None
