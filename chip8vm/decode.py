"""CHIP-8 instruction decoding."""

from enum import Enum
from typing import Optional

from chex import dataclass

from chip8vm.errors import IllegalInstruction


class Op(Enum):
    """Every instruction the interpreter understands."""
    CLS = "00E0"
    RET = "00EE"
    JP = "1NNN"
    CALL = "2NNN"
    SE_VX_NN = "3XNN"
    SNE_VX_NN = "4XNN"
    SE_VX_VY = "5XY0"
    LD_VX_NN = "6XNN"
    ADD_VX_NN = "7XNN"
    LD_VX_VY = "8XY0"
    OR = "8XY1"
    AND = "8XY2"
    XOR = "8XY3"
    ADD_VX_VY = "8XY4"
    SUB = "8XY5"
    SHR = "8XY6"
    SUBN = "8XY7"
    SHL = "8XYE"
    SNE_VX_VY = "9XY0"
    LD_I = "ANNN"
    JP_V0 = "BNNN"
    RND = "CXNN"
    DRW = "DXYN"
    SKP = "EX9E"
    SKNP = "EXA1"
    LD_VX_DT = "FX07"
    LD_VX_K = "FX0A"
    LD_DT_VX = "FX15"
    LD_ST_VX = "FX18"
    ADD_I_VX = "FX1E"
    LD_F_VX = "FX29"
    LD_B_VX = "FX33"
    LD_MEM_VX = "FX55"
    LD_VX_MEM = "FX65"


@dataclass(frozen=True)
class DecodedInstruction:
    """Decoded CHIP-8 instruction with extracted operands."""
    raw: int
    op: Op
    opcode: int  # First nibble
    x: int       # Second nibble (VX register)
    y: int       # Third nibble (VY register)
    n: int       # Fourth nibble (4-bit immediate)
    nn: int      # Last byte (8-bit immediate)
    nnn: int     # Last 12 bits (12-bit address)


# Primary nibbles that name exactly one operation
_PRIMARY = {
    0x1: Op.JP,
    0x2: Op.CALL,
    0x3: Op.SE_VX_NN,
    0x4: Op.SNE_VX_NN,
    0x6: Op.LD_VX_NN,
    0x7: Op.ADD_VX_NN,
    0xA: Op.LD_I,
    0xB: Op.JP_V0,
    0xC: Op.RND,
    0xD: Op.DRW,
}

# Primary nibbles whose trailing nibble must be zero
_REGISTER_COMPARE = {
    0x5: Op.SE_VX_VY,
    0x9: Op.SNE_VX_VY,
}

_SYSTEM = {
    0x00E0: Op.CLS,
    0x00EE: Op.RET,
}

_ALU = {
    0x0: Op.LD_VX_VY,
    0x1: Op.OR,
    0x2: Op.AND,
    0x3: Op.XOR,
    0x4: Op.ADD_VX_VY,
    0x5: Op.SUB,
    0x6: Op.SHR,
    0x7: Op.SUBN,
    0xE: Op.SHL,
}

_KEYPAD = {
    0x9E: Op.SKP,
    0xA1: Op.SKNP,
}

_MISC = {
    0x07: Op.LD_VX_DT,
    0x0A: Op.LD_VX_K,
    0x15: Op.LD_DT_VX,
    0x18: Op.LD_ST_VX,
    0x1E: Op.ADD_I_VX,
    0x29: Op.LD_F_VX,
    0x33: Op.LD_B_VX,
    0x55: Op.LD_MEM_VX,
    0x65: Op.LD_VX_MEM,
}


def _resolve(instruction: int, opcode: int, n: int, nn: int):
    """Select the variant for an instruction, or None if it has no signature."""
    if opcode == 0x0:
        return _SYSTEM.get(instruction)
    if opcode in _REGISTER_COMPARE:
        return _REGISTER_COMPARE[opcode] if n == 0 else None
    if opcode == 0x8:
        return _ALU.get(n)
    if opcode == 0xE:
        return _KEYPAD.get(nn)
    if opcode == 0xF:
        return _MISC.get(nn)
    return _PRIMARY.get(opcode)


def decode(instruction: int, address: Optional[int] = None) -> DecodedInstruction:
    """Decode 16-bit instruction into components.

    Args:
        instruction: Raw instruction word
        address: Where the word was fetched from, used in error reports

    Raises:
        IllegalInstruction: If the word matches no opcode signature
    """
    instruction = int(instruction) & 0xFFFF
    opcode = (instruction & 0xF000) >> 12
    n = instruction & 0x000F
    nn = instruction & 0x00FF

    op = _resolve(instruction, opcode, n, nn)
    if op is None:
        raise IllegalInstruction(instruction, address)

    return DecodedInstruction(
        raw=instruction,
        op=op,
        opcode=opcode,
        x=(instruction & 0x0F00) >> 8,
        y=(instruction & 0x00F0) >> 4,
        n=n,
        nn=nn,
        nnn=instruction & 0x0FFF
    )


_MNEMONICS = {
    Op.CLS: "CLS",
    Op.RET: "RET",
    Op.JP: "JP 0x{nnn:03X}",
    Op.CALL: "CALL 0x{nnn:03X}",
    Op.SE_VX_NN: "SE V{x:X}, 0x{nn:02X}",
    Op.SNE_VX_NN: "SNE V{x:X}, 0x{nn:02X}",
    Op.SE_VX_VY: "SE V{x:X}, V{y:X}",
    Op.LD_VX_NN: "LD V{x:X}, 0x{nn:02X}",
    Op.ADD_VX_NN: "ADD V{x:X}, 0x{nn:02X}",
    Op.LD_VX_VY: "LD V{x:X}, V{y:X}",
    Op.OR: "OR V{x:X}, V{y:X}",
    Op.AND: "AND V{x:X}, V{y:X}",
    Op.XOR: "XOR V{x:X}, V{y:X}",
    Op.ADD_VX_VY: "ADD V{x:X}, V{y:X}",
    Op.SUB: "SUB V{x:X}, V{y:X}",
    Op.SHR: "SHR V{x:X}, V{y:X}",
    Op.SUBN: "SUBN V{x:X}, V{y:X}",
    Op.SHL: "SHL V{x:X}, V{y:X}",
    Op.SNE_VX_VY: "SNE V{x:X}, V{y:X}",
    Op.LD_I: "LD I, 0x{nnn:03X}",
    Op.JP_V0: "JP V0, 0x{nnn:03X}",
    Op.RND: "RND V{x:X}, 0x{nn:02X}",
    Op.DRW: "DRW V{x:X}, V{y:X}, {n}",
    Op.SKP: "SKP V{x:X}",
    Op.SKNP: "SKNP V{x:X}",
    Op.LD_VX_DT: "LD V{x:X}, DT",
    Op.LD_VX_K: "LD V{x:X}, K",
    Op.LD_DT_VX: "LD DT, V{x:X}",
    Op.LD_ST_VX: "LD ST, V{x:X}",
    Op.ADD_I_VX: "ADD I, V{x:X}",
    Op.LD_F_VX: "LD F, V{x:X}",
    Op.LD_B_VX: "LD B, V{x:X}",
    Op.LD_MEM_VX: "LD [I], V{x:X}",
    Op.LD_VX_MEM: "LD V{x:X}, [I]",
}


def disassemble(instruction: int) -> str:
    """Render an instruction word as an assembly mnemonic."""
    try:
        decoded = decode(instruction)
    except IllegalInstruction:
        return f"??? 0x{int(instruction) & 0xFFFF:04X}"
    return _MNEMONICS[decoded.op].format(
        x=decoded.x, y=decoded.y, n=decoded.n, nn=decoded.nn, nnn=decoded.nnn
    )
