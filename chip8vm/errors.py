"""Fatal CHIP-8 conditions."""

from typing import Optional


class Chip8Error(Exception):
    """Base class for every condition that halts interpretation."""


class IllegalInstruction(Chip8Error):
    """Instruction word matches no known opcode signature."""

    def __init__(self, instruction: int, address: Optional[int] = None):
        self.instruction = instruction
        self.address = address
        where = f" at 0x{address:03X}" if address is not None else ""
        super().__init__(f"illegal instruction 0x{instruction:04X}{where}")


class OutOfRangeAccess(Chip8Error):
    """Read or write would fall outside addressable space."""

    def __init__(self, address: int, length: int, operation: str, limit: int = 4096):
        self.address = address
        self.length = length
        self.operation = operation
        self.limit = limit
        super().__init__(
            f"{operation} of {length} at 0x{address:04X} exceeds limit 0x{limit:X}"
        )


class StackOverflow(Chip8Error):
    """Call with a full stack."""

    def __init__(self, address: int, depth: int = 16):
        self.address = address
        self.depth = depth
        super().__init__(f"stack overflow calling 0x{address:03X} (depth {depth})")


class StackUnderflow(Chip8Error):
    """Return with an empty stack."""

    def __init__(self):
        super().__init__("stack underflow: return with no caller")


class LoadError(Chip8Error):
    """Program source could not be opened or read."""

    def __init__(self, source, reason: str = ""):
        self.source = source
        message = f"cannot load program from {source!r}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
