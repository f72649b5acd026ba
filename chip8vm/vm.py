"""Stateful facade over the functional core, for hosts."""

from typing import List, Optional

import jax
import jax.numpy as jnp
import numpy as np
from flax.struct import dataclass, field

from chip8vm.constants import NUM_KEYS, PROGRAM_START, SCREEN_WIDTH, SCREEN_HEIGHT
from chip8vm.emulator import step, load_rom, read_source
from chip8vm.errors import Chip8Error
from chip8vm.framebuffer import frame_buffer
from chip8vm.logging import LoggingCallback, build_tqdm_progress_bar
from chip8vm.state import EmulatorState, Quirks, create_state, reset_state


def _peek(state: EmulatorState, address: int) -> Optional[int]:
    if address + 1 >= state.memory.shape[0]:
        return None
    return (int(state.memory[address]) << 8) | int(state.memory[address + 1])

@dataclass(frozen=True)
class CycleResult:
    """Outcome of one call to :meth:`Chip8.cycle`.

    Attributes:
        address: Program counter the cycle started from
        instruction: Word fetched by the cycle, or None if the fetch failed
        error: The fatal condition that stopped the cycle, None on success
    """
    address: int = field(pytree_node=False)
    instruction: Optional[int] = field(pytree_node=False, default=None)
    error: Optional[Chip8Error] = field(pytree_node=False, default=None)

    @property
    def ok(self) -> bool:
        return self.error is None


class Chip8:
    """A CHIP-8 machine driven one cycle at a time by a host loop.

    The host writes ``keypad`` (16 booleans indexed by key value), calls
    :meth:`cycle` at its own cadence and copies :meth:`frame_buffer` to the
    screen. A cycle that fails leaves the machine exactly as it was before
    the cycle and halts it until :meth:`reset`.
    """

    def __init__(
        self,
        rng: Optional[jax.Array] = None,
        width: int = SCREEN_WIDTH,
        height: int = SCREEN_HEIGHT,
        quirks: Optional[Quirks] = None,
        callbacks: Optional[List[LoggingCallback]] = None,
    ):
        self.state: EmulatorState = create_state(rng, width, height, quirks)
        self.keypad = np.zeros(NUM_KEYS, dtype=np.bool_)
        self.callbacks = list(callbacks) if callbacks else []
        self.halted: Optional[CycleResult] = None

    @property
    def quirks(self) -> Quirks:
        return self.state.quirks

    def load(self, source) -> int:
        """Copy a program to 0x200.

        Returns:
            Number of bytes actually placed in memory

        Raises:
            LoadError: If the source cannot be read
        """
        data = read_source(source)
        self.state = load_rom(self.state, data)
        capacity = self.state.memory.shape[0] - PROGRAM_START
        for callback in self.callbacks:
            callback.on_load(source, len(data), capacity)
        return min(len(data), capacity)

    def press_key(self, key: int):
        self.keypad[key] = True

    def release_key(self, key: int):
        self.keypad[key] = False

    def cycle(self) -> CycleResult:
        """Run one fetch-decode-execute-tick cycle."""
        if self.halted is not None:
            return self.halted

        state = self.state.replace(keypad=jnp.asarray(self.keypad, dtype=jnp.bool_))
        address = int(state.pc)
        try:
            state = step(state)
        except Chip8Error as error:
            self.halted = CycleResult(address=address, instruction=_peek(self.state, address), error=error)
            for callback in self.callbacks:
                callback.on_error(error, self.state)
            return self.halted

        self.state = state
        instruction = int(state.instruction)
        for callback in self.callbacks:
            callback.on_cycle(address, instruction, state)
        return CycleResult(address=address, instruction=instruction)

    def run(self, cycles: int, progress: bool = False) -> CycleResult:
        """Run up to ``cycles`` cycles, stopping at the first failure.

        Returns:
            Result of the last cycle executed
        """
        update, close = build_tqdm_progress_bar(cycles, disable=not progress)
        result = None
        try:
            for _ in range(cycles):
                result = self.cycle()
                update(1)
                if not result.ok:
                    break
        finally:
            close()
        return result

    def reset(self):
        """Restore construction-time state; the loaded program is cleared too."""
        self.state = reset_state(self.state)
        self.halted = None
        for callback in self.callbacks:
            callback.on_reset(self.state)

    def frame_buffer(self) -> np.ndarray:
        """Row-major ``uint8`` copy of the display, ``width * height`` cells."""
        return frame_buffer(self.state.display)

    @property
    def width(self) -> int:
        return self.state.width

    @property
    def height(self) -> int:
        return self.state.height
