"""CHIP-8 virtual machine package."""

from chip8vm.state import EmulatorState, Quirks, create_state, reset_state
from chip8vm.emulator import execute, load_rom, fetch, step
from chip8vm.decode import DecodedInstruction, Op, decode, disassemble
from chip8vm.errors import (
    Chip8Error, IllegalInstruction, OutOfRangeAccess, StackOverflow,
    StackUnderflow, LoadError,
)
from chip8vm.framebuffer import frame_buffer
from chip8vm.vm import Chip8, CycleResult
from chip8vm.constants import *
from chip8vm.rendering import chip8_display_to_rgb, create_color_scheme

__all__ = [
    "EmulatorState",
    "Quirks",
    "create_state",
    "reset_state",
    "fetch",
    "execute",
    "step",
    "load_rom",
    "DecodedInstruction",
    "Op",
    "decode",
    "disassemble",
    "Chip8Error",
    "IllegalInstruction",
    "OutOfRangeAccess",
    "StackOverflow",
    "StackUnderflow",
    "LoadError",
    "frame_buffer",
    "Chip8",
    "CycleResult",
    "PROGRAM_START",
    "FONT_START",
    "MEMORY_SIZE",
    "STACK_SIZE",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "chip8_display_to_rgb",
    "create_color_scheme",
]
