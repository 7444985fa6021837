#!/usr/bin/env python3

"""
Instruction Decoder

Every instruction is a single big-endian 16-bit word.  The first nibble picks
the instruction family, and each family has a fixed bitmask which strips the
operands away, leaving a pattern that identifies exactly one instruction:

    Family 0      : exact match (0xFFFF)
    Family 5, 8, 9: 0xF00F
    Family E, F   : 0xF0FF
    All others    : 0xF000

The stripped pattern is the value of the matching Op, so decoding is a single
lookup.  Operands are always found in the same place:

    n   = Nibble
    kk  = Byte
    nnn = Address
    x/y = Register (0-15)

Machine code routines (0nnn) only ever ran on the original hardware, so they
are treated as invalid along with any other unknown word.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from collections import namedtuple
from enum import Enum

CPU_ENDIAN = "big"  # CHIP-8 is big-endian

FAMILY_MASKS = (
    0xFFFF, 0xF000, 0xF000, 0xF000, 0xF000, 0xF00F, 0xF000, 0xF000,
    0xF00F, 0xF00F, 0xF000, 0xF000, 0xF000, 0xF000, 0xF0FF, 0xF0FF
)


class InvalidOpcodeError(Exception):
    pass


class Op(Enum):
    CLS = 0x00E0        # CLS
    RET = 0x00EE        # RET
    JP = 0x1000         # JP addr
    CALL = 0x2000       # CALL addr
    SE_BYTE = 0x3000    # SE Vx, byte
    SNE_BYTE = 0x4000   # SNE Vx, byte
    SE_REG = 0x5000     # SE Vx, Vy
    LD_BYTE = 0x6000    # LD Vx, byte
    ADD_BYTE = 0x7000   # ADD Vx, byte
    LD_REG = 0x8000     # LD Vx, Vy
    OR = 0x8001         # OR Vx, Vy
    AND = 0x8002        # AND Vx, Vy
    XOR = 0x8003        # XOR Vx, Vy
    ADD_REG = 0x8004    # ADD Vx, Vy
    SUB = 0x8005        # SUB Vx, Vy
    SHR = 0x8006        # SHR Vx {, Vy}
    SUBN = 0x8007       # SUBN Vx, Vy
    SHL = 0x800E        # SHL Vx {, Vy}
    SNE_REG = 0x9000    # SNE Vx, Vy
    LD_I = 0xA000       # LD I, addr
    JP_V0 = 0xB000      # JP V0, addr
    RND = 0xC000        # RND Vx, byte
    DRW = 0xD000        # DRW Vx, Vy, nibble
    SKP = 0xE09E        # SKP Vx
    SKNP = 0xE0A1       # SKNP Vx
    LD_VX_DT = 0xF007   # LD Vx, DT
    LD_VX_K = 0xF00A    # LD Vx, K
    LD_DT_VX = 0xF015   # LD DT, Vx
    LD_ST_VX = 0xF018   # LD ST, Vx
    ADD_I = 0xF01E      # ADD I, Vx
    LD_F = 0xF029       # LD F, Vx
    LD_B = 0xF033       # LD B, Vx
    LD_MEM_VX = 0xF055  # LD [I], Vx
    LD_VX_MEM = 0xF065  # LD Vx, [I]


Instruction = namedtuple("Instruction", ["op", "opcode", "x", "y", "n", "kk", "nnn"])

# Operands read by each instruction, used when encoding
_OPERAND_GROUPS = (
    ((Op.CLS, Op.RET), ()),
    ((Op.JP, Op.CALL, Op.LD_I, Op.JP_V0), ("nnn",)),
    ((Op.SE_BYTE, Op.SNE_BYTE, Op.LD_BYTE, Op.ADD_BYTE, Op.RND), ("x", "kk")),
    (
        (
            Op.SE_REG, Op.LD_REG, Op.OR, Op.AND, Op.XOR, Op.ADD_REG, Op.SUB, Op.SHR, Op.SUBN, Op.SHL,
            Op.SNE_REG
        ),
        ("x", "y")
    ),
    ((Op.DRW,), ("x", "y", "n")),
    (
        (
            Op.SKP, Op.SKNP, Op.LD_VX_DT, Op.LD_VX_K, Op.LD_DT_VX, Op.LD_ST_VX, Op.ADD_I, Op.LD_F, Op.LD_B,
            Op.LD_MEM_VX, Op.LD_VX_MEM
        ),
        ("x",)
    )
)

OPERAND_FIELDS = {op: fields for ops, fields in _OPERAND_GROUPS for op in ops}


def decode(opcode):
    try:
        op = Op(opcode & FAMILY_MASKS[(opcode & 0xF000) >> 12])
    except ValueError:
        raise InvalidOpcodeError("Opcode 0x{:04x} is not a valid instruction".format(opcode)) from None

    return Instruction(
        op, opcode,
        (opcode & 0xF00) >> 8,
        (opcode & 0xF0) >> 4,
        opcode & 0xF,
        opcode & 0xFF,
        opcode & 0xFFF
    )


def encode(op, x=0, y=0, n=0, kk=0, nnn=0):
    # Operands the instruction doesn't read are rejected, since they would overlap the ones it does
    operands = {"x": x, "y": y, "n": n, "kk": kk, "nnn": nnn}
    unused = [name for name, value in operands.items() if value and name not in OPERAND_FIELDS[op]]

    if unused:
        raise ValueError("The {} instruction does not take operand(s): {}".format(op.name, ", ".join(unused)))

    if not (0 <= x <= 0xF and 0 <= y <= 0xF and 0 <= n <= 0xF):
        raise ValueError("Register and nibble operands must be between 0x0 and 0xF")

    if not 0 <= kk <= 0xFF:
        raise ValueError("Byte operand must be between 0x00 and 0xFF")

    if not 0 <= nnn <= 0xFFF:
        raise ValueError("Address operand must be between 0x000 and 0xFFF")

    opcode = op.value | (x << 8) | (y << 4) | n | kk | nnn

    if decode(opcode).op is not op:
        raise ValueError("Operands given do not fit the {} instruction".format(op.name))

    return opcode


def assemble(opcodes):
    # Build a raw program image from a sequence of instruction words
    return b"".join(opcode.to_bytes(2, CPU_ENDIAN) for opcode in opcodes)
