"""Console logging utilities for the chip8vm interpreter.

This module provides a small logging system with callbacks and formatters
for visibility into a running machine: program loads, fatal errors, register
dumps and per-opcode statistics. Long headless runs can show a tqdm progress
bar.
"""

import time
import sys
from collections import Counter
from typing import Any, Dict, List, Optional, Callable, Tuple

from tqdm import tqdm

from chip8vm.decode import Op, decode, disassemble
from chip8vm.errors import Chip8Error


LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

_ANSI = {
    "DEBUG": "\033[36m",
    "INFO": "\033[32m",
    "WARNING": "\033[33m",
    "ERROR": "\033[31m",
    "CRITICAL": "\033[35m",
}
_RESET = "\033[0m"


class ConsoleLogger:
    """Levelled ``print`` logger for a terminal or any text stream.

    Colors are only used when the stream is a TTY, so captured output
    (tests, pipes, log files) stays plain.
    """

    def __init__(
        self,
        name: str = "chip8vm",
        log_level: str = "INFO",
        use_colors: bool = True,
        show_timestamps: bool = True,
        stream=None,
    ):
        self.name = name
        self.stream = stream if stream is not None else sys.stdout
        self.use_colors = use_colors and getattr(self.stream, "isatty", lambda: False)()
        self.show_timestamps = show_timestamps
        self.start_time = time.perf_counter()
        self.set_level(log_level)

    def set_level(self, log_level: str):
        level = log_level.upper()
        if level not in LEVELS:
            raise ValueError(f"Unknown log level '{log_level}'. Available: {list(LEVELS)}")
        self.log_level = level

    def _should_log(self, level: str) -> bool:
        return LEVELS.index(level.upper()) >= LEVELS.index(self.log_level)

    def _format_message(self, level: str, message: str) -> str:
        tag = f"[{level:>8s}]"
        if self.use_colors:
            tag = f"{_ANSI[level]}{tag}{_RESET}"
        elapsed = f"[{time.perf_counter() - self.start_time:8.2f}s]" if self.show_timestamps else ""
        return f"{elapsed}{tag}[{self.name}] {message}"

    def log(self, level: str, message: str):
        """Log a message at the specified level."""
        level = level.upper()
        if self._should_log(level):
            print(self._format_message(level, message), file=self.stream, flush=True)

    def debug(self, message: str):
        self.log("DEBUG", message)

    def info(self, message: str):
        self.log("INFO", message)

    def warning(self, message: str):
        self.log("WARNING", message)

    def error(self, message: str):
        self.log("ERROR", message)

    def critical(self, message: str):
        self.log("CRITICAL", message)


class EmulatorLogger(ConsoleLogger):
    """Logger that knows how to describe machine state."""

    def __init__(self, name: str = "chip8vm", **kwargs):
        super().__init__(name, **kwargs)

    def log_load(self, source: Any, size: int, capacity: int):
        """Log a program load, warning when it was truncated."""
        self.info(f"Loaded {size} bytes from {_describe_source(source)}")
        if size > capacity:
            self.warning(f"Program truncated to {capacity} bytes")

    def log_error(self, error: Chip8Error, state: Any = None):
        """Log a fatal condition and, when available, the machine state."""
        self.error(f"{type(error).__name__}: {error}")
        if state is not None:
            self.log_registers(state, level="ERROR")

    def log_registers(self, state: Any, level: str = "DEBUG"):
        """Dump PC, I, timers, stack depth and V0-VF."""
        if not self._should_log(level):
            return
        instruction = int(state.instruction)
        self.log(
            level,
            f"PC=0x{int(state.pc):03X} I=0x{int(state.I):03X} "
            f"DT={int(state.delay_timer)} ST={int(state.sound_timer)} "
            f"SP={int(state.stack.pointer)} last=0x{instruction:04X} ({disassemble(instruction)})"
        )
        for i in range(0, 16, 4):
            parts = [f"V{j:X}={int(state.V[j]):02X}" for j in range(i, i + 4)]
            self.log(level, "  " + " ".join(parts))


def _describe_source(source: Any) -> str:
    if isinstance(source, (bytes, bytearray, memoryview)):
        return "<memory>"
    return str(getattr(source, "name", source))


class LoggingCallback:
    """Base class for logging callbacks."""

    def on_load(self, source: Any, size: int, capacity: int):
        """Called after a program is loaded."""
        pass

    def on_cycle(self, address: int, instruction: int, state: Any = None):
        """Called after each successful cycle."""
        pass

    def on_error(self, error: Chip8Error, state: Any = None):
        """Called when a cycle fails."""
        pass

    def on_reset(self, state: Any = None):
        """Called after the machine is reset."""
        pass


class ConsoleCallback(LoggingCallback):
    """Console logging callback."""

    def __init__(self, logger: Optional[EmulatorLogger] = None, trace: bool = False):
        self.logger = logger or EmulatorLogger()
        self.trace = trace

    def on_load(self, source: Any, size: int, capacity: int):
        self.logger.log_load(source, size, capacity)

    def on_cycle(self, address: int, instruction: int, state: Any = None):
        if self.trace:
            self.logger.debug(f"0x{address:03X}: {instruction:04X}  {disassemble(instruction)}")

    def on_error(self, error: Chip8Error, state: Any = None):
        self.logger.log_error(error, state)

    def on_reset(self, state: Any = None):
        self.logger.info("Machine reset")


class MetricsCallback(LoggingCallback):
    """Callback counting executed instructions per opcode."""

    def __init__(self, track_ops: Optional[List[Op]] = None):
        self.track_ops = set(track_ops) if track_ops else None
        self.op_counts = Counter()
        self.error_counts = Counter()
        self.cycle_count = 0

    def on_cycle(self, address: int, instruction: int, state: Any = None):
        self.cycle_count += 1
        op = decode(instruction).op
        if self.track_ops is None or op in self.track_ops:
            self.op_counts[op] += 1

    def on_error(self, error: Chip8Error, state: Any = None):
        self.error_counts[type(error).__name__] += 1

    def on_reset(self, state: Any = None):
        self.op_counts.clear()
        self.error_counts.clear()
        self.cycle_count = 0

    def get_statistics(self) -> Dict[str, Any]:
        """Get counts and shares for executed opcodes."""
        stats = {
            "cycles": self.cycle_count,
            "errors": dict(self.error_counts),
            "ops": {},
        }
        total = sum(self.op_counts.values())
        for op, count in self.op_counts.most_common():
            stats["ops"][op.name] = {
                "count": count,
                "share": count / total if total else 0.0,
            }
        return stats


def build_tqdm_progress_bar(
    n: int,
    desc: Optional[str] = None,
    **kwargs,
) -> Tuple[Callable, Callable]:
    """Build a tqdm progress bar for a run of ``n`` cycles.

    Returns:
        Tuple of (update, close); ``update(steps)`` advances the bar and
        ``close()`` releases it
    """
    if desc is None:
        desc = f"Running ({n:,} cycles)"

    for kwarg in ("total", "unit"):
        kwargs.pop(kwarg, None)

    bar = tqdm(total=n, desc=desc, unit="cycle", **kwargs)

    def _update_progress_bar(steps: int = 1):
        bar.update(int(steps))

    def close_progress_bar():
        bar.close()

    return _update_progress_bar, close_progress_bar
