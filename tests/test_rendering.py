"""Tests for display-to-RGB conversion."""

import pytest
import numpy as np
from chip8vm import chip8_display_to_rgb, create_color_scheme, create_state


def test_rgb_shape_and_scale(fresh_state):
    frame = chip8_display_to_rgb(fresh_state.display, scale=4)
    assert frame.shape == (32 * 4, 64 * 4, 3)
    assert frame.dtype == np.uint8


def test_lit_pixel_position():
    state = create_state(width=8, height=4)
    display = state.display.at[5, 2].set(True)

    frame = chip8_display_to_rgb(display, scale=1, on_color=(10, 20, 30), off_color=(1, 2, 3))

    assert tuple(frame[2, 5]) == (10, 20, 30)
    assert tuple(frame[0, 0]) == (1, 2, 3)


def test_color_schemes():
    assert create_color_scheme("classic") == ((255, 255, 255), (0, 0, 0))
    assert create_color_scheme("green")[0] == (0, 255, 0)
    with pytest.raises(ValueError):
        create_color_scheme("plaid")
