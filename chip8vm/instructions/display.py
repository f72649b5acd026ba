"""CHIP-8 display operations."""

from chip8vm.state import EmulatorState
from chip8vm.decode import DecodedInstruction
from chip8vm.framebuffer import draw_sprite
from chip8vm.memory import read_bytes
from chip8vm.registers import read_register, read_index, write_flag


def execute_display(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """DXYN - Draw sprite at (VX, VY) with height N."""
    sprite_x = read_register(state, instruction.x)
    sprite_y = read_register(state, instruction.y)
    sprite = read_bytes(state.memory, read_index(state), instruction.n, "sprite read")

    display, collision = draw_sprite(state.display, sprite, sprite_x, sprite_y)
    return write_flag(state.replace(display=display), int(collision))
