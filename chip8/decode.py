# Opcode decoding.
#
# decode() turns a raw 16-bit opcode into an Instruction: a tag naming the
# operation plus every field the handlers might want. It never touches CPU
# state, so the whole opcode table can be checked on its own.
#
# Dispatch is two-level like the CowGod reference
# (http://devernay.free.fr/hacks/chip8/C8TECH10.HTM#3.1): the high nibble picks
# a family, and the families that share a high nibble pick again on the low
# nibble or the low byte.

from collections import namedtuple

from .bits import nibble, low_byte, address
from .errors import DecodeError

Instruction = namedtuple("Instruction", "op opcode x y n kk nnn")

# family -> op for families with a single instruction
SIMPLE = {
    0x1: "JP",         # 1nnn - Jump to address nnn
    0x2: "CALL",       # 2nnn - Call subroutine at nnn
    0x3: "SE_Vx_kk",   # 3xkk - Skip next instruction if Vx == kk
    0x4: "SNE_Vx_kk",  # 4xkk - Skip next instruction if Vx != kk
    0x6: "LD_Vx_kk",   # 6xkk - Vx = kk
    0x7: "ADD_Vx_kk",  # 7xkk - Vx = Vx + kk (no carry)
    0xA: "LD_I",       # Annn - I = nnn
    0xB: "JP_V0",      # Bnnn - Jump to nnn + V0
    0xC: "RND",        # Cxkk - Vx = random byte AND kk
    0xD: "DRW",        # Dxyn - Draw n-byte sprite at (Vx, Vy)
}

# 8xyN - math and logic between two registers, keyed by N
ALU = {
    0x0: "LD_Vx_Vy",
    0x1: "OR",
    0x2: "AND",
    0x3: "XOR",
    0x4: "ADD",
    0x5: "SUB",
    0x6: "SHR",
    0x7: "SUBN",
    0xE: "SHL",
}

# ExKK - keyboard skips
KEYS = {
    0x9E: "SKP",
    0xA1: "SKNP",
}

# FxKK - timers, memory and I
MISC = {
    0x07: "LD_Vx_DT",
    0x0A: "LD_Vx_K",
    0x15: "LD_DT_Vx",
    0x18: "LD_ST_Vx",
    0x1E: "ADD_I_Vx",
    0x29: "LD_F_Vx",
    0x33: "LD_B_Vx",
    0x55: "LD_I_Vx",
    0x65: "LD_Vx_I",
}


def _family_0(opcode):
    if opcode == 0x00E0:
        return "CLS"
    if opcode == 0x00EE:
        return "RET"
    return "SYS"


def _family_5(opcode):
    # 5xy0 only
    return "SE_Vx_Vy" if nibble(opcode, 1) == 0 else None


def _family_8(opcode):
    return ALU.get(nibble(opcode, 1))


def _family_9(opcode):
    # 9xy0 only
    return "SNE_Vx_Vy" if nibble(opcode, 1) == 0 else None


def _family_E(opcode):
    return KEYS.get(low_byte(opcode))


def _family_F(opcode):
    return MISC.get(low_byte(opcode))


FAMILIES = {
    0x0: _family_0,
    0x5: _family_5,
    0x8: _family_8,
    0x9: _family_9,
    0xE: _family_E,
    0xF: _family_F,
}


def decode(opcode, pc=0):
    """Decode one opcode.

    ``pc`` is only used to report where a bad opcode was found.
    Raises DecodeError if the opcode is not one of the 35 instructions.
    """
    family = nibble(opcode, 4)
    if family in SIMPLE:
        op = SIMPLE[family]
    else:
        op = FAMILIES[family](opcode)
    if op is None:
        raise DecodeError(opcode, pc)

    return Instruction(
        op=op,
        opcode=opcode,
        x=nibble(opcode, 3),
        y=nibble(opcode, 2),
        n=nibble(opcode, 1),
        kk=low_byte(opcode),
        nnn=address(opcode),
    )
