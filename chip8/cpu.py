# CHIP8 Virtual Machine:
# Memory - 4096 bytes: the font at 0x000-0x04F, the program from 0x200 up.
# CPU - 16 8-bit registers (VF doubles as the flag register), a 16-bit I
#       register, the program counter and a 16-slot call stack.
# Output - 64x32 framebuffer of on/off pixels plus a redraw flag.
# Timers - delay and sound, both decay at 60Hz no matter how fast we run.
#----------------------------------------------------------------------------------------------
# Reference: CowGod's CHIP8 Technical reference http://devernay.free.fr/hacks/chip8/C8TECH10.HTM
#
# Every handler checks its operands before it writes anything, so a fatal
# error leaves the machine exactly as it was before the instruction.

import random

import numpy as np

from . import config
from .bits import wrap_add, wrap_sub
from .config import FLAG, WIDTH, HEIGHT, MEMORY_SIZE, PROGRAM_START
from .decode import decode
from .errors import (
    MemoryBoundsError,
    RegisterBoundsError,
    StackOverflowError,
    StackUnderflowError,
)
from .font import FONTSET, FONT_START, glyph_address
from .log import log


class Chip8:

    def __init__(self, rng=None):
        # RND source; pass a seeded random.Random for repeatable runs
        self.rng = rng if rng is not None else random.Random()
        self.setup_funcmap()
        self.reset()

    def reset(self):
        # ---- CPU state ----
        self.memory = bytearray(MEMORY_SIZE)
        self.V = [0] * config.NUM_REGISTERS
        self.I = 0
        self.pc = PROGRAM_START

        self.stack = np.zeros(config.STACK_DEPTH, dtype=np.uint16)
        self.sp = 0

        self.delay = 0
        self.sound = 0
        self._timer_phase = 0

        # ---- Peripherals ----
        self.vram = np.zeros((HEIGHT, WIDTH), dtype=bool)
        self.keys = np.zeros(config.NUM_KEYS, dtype=bool)
        self.should_draw = True

        # Load fontset into memory
        self.memory[FONT_START:FONT_START + len(FONTSET)] = FONTSET

    # ---- Load program ----
    def load_program(self, program):
        # The ROM loader guarantees the size; anything past the end of memory is dropped.
        program = bytes(program)[:config.MAX_PROGRAM_SIZE]
        self.memory[PROGRAM_START:PROGRAM_START + len(program)] = program
        self.pc = PROGRAM_START
        log("Loaded program:", len(program), "bytes")

    # ---- Cycle ----
    def fetch(self):
        if self.pc < 0 or self.pc + 1 >= MEMORY_SIZE:
            raise MemoryBoundsError("PC out of bounds: 0x%03X" % self.pc)
        return (self.memory[self.pc] << 8) | self.memory[self.pc + 1]

    def step(self):
        """Fetch, decode and execute one instruction."""
        opcode = self.fetch()
        self.execute(decode(opcode, self.pc))

    def execute(self, instr):
        # Handlers return the next pc for control flow, None to fall through.
        next_pc = self.funcmap[instr.op](instr)
        self.pc = self.pc + 2 if next_pc is None else next_pc

    # ---- Timers ----
    def tick_timers(self, rate_hz):
        """Advance the timers by one instruction's worth of time.

        Call once per executed instruction, with the rate instructions are
        being run at. The timers drop by one every rate_hz/60 calls, so they
        keep a 60Hz cadence whatever the instruction rate is.
        """
        if rate_hz <= 0:
            raise ValueError("rate_hz must be positive, got %r" % rate_hz)
        self._timer_phase += config.TIMER_HZ
        while self._timer_phase >= rate_hz:
            self._timer_phase -= rate_hz
            if self.delay > 0:
                self.delay -= 1
            if self.sound > 0:
                self.sound -= 1

    @property
    def sound_active(self):
        return self.sound > 0

    # ---- Input ----
    def set_keyboard(self, index, pressed):
        if not 0 <= index < config.NUM_KEYS:
            raise RegisterBoundsError("No such key: %r" % index)
        self.keys[index] = bool(pressed)

    def set_keys(self, states):
        self.keys[:] = np.asarray(states, dtype=bool)

    # ---- Output ----
    def read_framebuffer(self):
        return self.vram.copy()

    def take_redraw_flag(self):
        redraw = self.should_draw
        self.should_draw = False
        return redraw

    # ---- Opcode function map ----
    def setup_funcmap(self):
        self.funcmap = {
            "SYS": self.op_SYS,              # 0nnn - Machine code routine (ignored)
            "CLS": self.op_CLS,              # 00E0 - Clear the display
            "RET": self.op_RET,              # 00EE - Return from subroutine
            "JP": self.op_JP,                # 1nnn - Jump to address
            "CALL": self.op_CALL,            # 2nnn - Call subroutine
            "SE_Vx_kk": self.op_SE_Vx_kk,    # 3xkk - Skip if Vx == kk
            "SNE_Vx_kk": self.op_SNE_Vx_kk,  # 4xkk - Skip if Vx != kk
            "SE_Vx_Vy": self.op_SE_Vx_Vy,    # 5xy0 - Skip if Vx == Vy
            "LD_Vx_kk": self.op_LD_Vx_kk,    # 6xkk - Vx = kk
            "ADD_Vx_kk": self.op_ADD_Vx_kk,  # 7xkk - Vx += kk
            "LD_Vx_Vy": self.op_LD_Vx_Vy,    # 8xy0 - Vx = Vy
            "OR": self.op_OR,                # 8xy1
            "AND": self.op_AND,              # 8xy2
            "XOR": self.op_XOR,              # 8xy3
            "ADD": self.op_ADD,              # 8xy4 - VF = carry
            "SUB": self.op_SUB,              # 8xy5 - VF = NOT borrow
            "SHR": self.op_SHR,              # 8xy6 - VF = bit shifted out
            "SUBN": self.op_SUBN,            # 8xy7 - VF = NOT borrow
            "SHL": self.op_SHL,              # 8xyE - VF = bit shifted out
            "SNE_Vx_Vy": self.op_SNE_Vx_Vy,  # 9xy0 - Skip if Vx != Vy
            "LD_I": self.op_LD_I,            # Annn - I = nnn
            "JP_V0": self.op_JP_V0,          # Bnnn - Jump to nnn + V0
            "RND": self.op_RND,              # Cxkk - Vx = random & kk
            "DRW": self.op_DRW,              # Dxyn - Draw sprite
            "SKP": self.op_SKP,              # Ex9E - Skip if key Vx pressed
            "SKNP": self.op_SKNP,            # ExA1 - Skip if key Vx not pressed
            "LD_Vx_DT": self.op_LD_Vx_DT,    # Fx07
            "LD_Vx_K": self.op_LD_Vx_K,      # Fx0A - Wait for a key
            "LD_DT_Vx": self.op_LD_DT_Vx,    # Fx15
            "LD_ST_Vx": self.op_LD_ST_Vx,    # Fx18
            "ADD_I_Vx": self.op_ADD_I_Vx,    # Fx1E
            "LD_F_Vx": self.op_LD_F_Vx,      # Fx29 - I = font glyph for Vx
            "LD_B_Vx": self.op_LD_B_Vx,      # Fx33 - BCD of Vx at I
            "LD_I_Vx": self.op_LD_I_Vx,      # Fx55 - Store V0..Vx at I
            "LD_Vx_I": self.op_LD_Vx_I,      # Fx65 - Load V0..Vx from I
        }

    # ---- Helpers ----
    def _skip_if(self, condition):
        return self.pc + 4 if condition else None

    def _check_range(self, start, length):
        if length and (start < 0 or start + length > MEMORY_SIZE):
            raise MemoryBoundsError(
                "Access to 0x%03X..0x%03X is out of memory (pc=0x%03X)"
                % (start, start + length - 1, self.pc))

    def _key_register(self, x):
        key = self.V[x]
        if key >= config.NUM_KEYS:
            raise RegisterBoundsError(
                "V%X holds 0x%02X, not a key (pc=0x%03X)" % (x, key, self.pc))
        return key

    # ---- Opcode handlers ----

    # 0nnn / 00E0 / 00EE - SYS call / Clear Screen / Return from subroutine
    def op_SYS(self, instr):
        log("SYS call ignored (0nnn):", hex(instr.nnn))

    def op_CLS(self, instr):
        self.vram[:] = False
        self.should_draw = True
        log("Clear the display")

    def op_RET(self, instr):
        if self.sp == 0:
            raise StackUnderflowError("Stack underflow on 00EE at 0x%03X" % self.pc)
        self.sp -= 1
        addr = int(self.stack[self.sp])
        log("Return to", hex(addr))
        return addr

    def op_JP(self, instr):
        log("Jump to address", hex(instr.nnn))
        return instr.nnn

    def op_CALL(self, instr):
        if self.sp >= config.STACK_DEPTH:
            raise StackOverflowError("Stack overflow on CALL at 0x%03X" % self.pc)
        self.stack[self.sp] = self.pc + 2
        self.sp += 1
        log("Call subroutine at", hex(instr.nnn))
        return instr.nnn

    def op_SE_Vx_kk(self, instr):
        return self._skip_if(self.V[instr.x] == instr.kk)

    def op_SNE_Vx_kk(self, instr):
        return self._skip_if(self.V[instr.x] != instr.kk)

    def op_SE_Vx_Vy(self, instr):
        return self._skip_if(self.V[instr.x] == self.V[instr.y])

    def op_LD_Vx_kk(self, instr):
        self.V[instr.x] = instr.kk
        log(f"Set V{instr.x:X} = {instr.kk}")

    def op_ADD_Vx_kk(self, instr):
        # no carry flag for the immediate form
        self.V[instr.x] = wrap_add(self.V[instr.x], instr.kk)
        log(f"Add {instr.kk} to V{instr.x:X}: {self.V[instr.x]}")

    # 8xy0..8xyE
    # Both operands are read before VF is written, so VF can be an operand.
    def op_LD_Vx_Vy(self, instr):
        self.V[instr.x] = self.V[instr.y]

    def op_OR(self, instr):
        self.V[instr.x] |= self.V[instr.y]

    def op_AND(self, instr):
        self.V[instr.x] &= self.V[instr.y]

    def op_XOR(self, instr):
        self.V[instr.x] ^= self.V[instr.y]

    def op_ADD(self, instr):
        vx, vy = self.V[instr.x], self.V[instr.y]
        self.V[instr.x] = wrap_add(vx, vy)
        self.V[FLAG] = 1 if vx + vy > 0xFF else 0
        log(f"Add V{instr.y:X} to V{instr.x:X}: carry={self.V[FLAG]}")

    def op_SUB(self, instr):
        vx, vy = self.V[instr.x], self.V[instr.y]
        self.V[instr.x] = wrap_sub(vx, vy)
        self.V[FLAG] = 1 if vx >= vy else 0
        log(f"Subtract V{instr.y:X} from V{instr.x:X}: NOT borrow={self.V[FLAG]}")

    # Shifts only look at Vx; early interpreters shifted Vy into Vx instead.
    def op_SHR(self, instr):
        vx = self.V[instr.x]
        self.V[instr.x] = vx >> 1
        self.V[FLAG] = vx & 0x1

    def op_SUBN(self, instr):
        vx, vy = self.V[instr.x], self.V[instr.y]
        self.V[instr.x] = wrap_sub(vy, vx)
        self.V[FLAG] = 1 if vy >= vx else 0
        log(f"Set V{instr.x:X} = V{instr.y:X} - V{instr.x:X}: NOT borrow={self.V[FLAG]}")

    def op_SHL(self, instr):
        vx = self.V[instr.x]
        self.V[instr.x] = (vx << 1) & 0xFF
        self.V[FLAG] = (vx >> 7) & 0x1

    def op_SNE_Vx_Vy(self, instr):
        return self._skip_if(self.V[instr.x] != self.V[instr.y])

    # Annn / Bnnn / Cxkk
    def op_LD_I(self, instr):
        self.I = instr.nnn
        log(f"Set I = {self.I:03X}")

    def op_JP_V0(self, instr):
        # no masking: a target past the end of memory fails on the next fetch
        target = instr.nnn + self.V[0]
        log(f"Jump to address V0 + {instr.nnn:03X} = {target:03X}")
        return target

    def op_RND(self, instr):
        self.V[instr.x] = self.rng.randint(0, 255) & instr.kk

    # Dxyn - DRW Vx, Vy, nibble
    def op_DRW(self, instr):
        rows = instr.n
        self._check_range(self.I, rows)

        px = self.V[instr.x]
        py = self.V[instr.y]
        collision = 0
        for row in range(rows):
            sprite = self.memory[self.I + row]
            if sprite == 0:
                continue
            vy = (py + row) % HEIGHT
            for bit in range(8):
                if sprite & (0x80 >> bit):
                    vx = (px + bit) % WIDTH
                    if self.vram[vy, vx]:
                        collision = 1
                    self.vram[vy, vx] = not self.vram[vy, vx]

        self.V[FLAG] = collision
        self.should_draw = True
        log(f"Drew sprite at ({px}, {py}), collision={collision}")

    # Ex9E / ExA1 - SKP / SKNP
    def op_SKP(self, instr):
        return self._skip_if(self.keys[self._key_register(instr.x)])

    def op_SKNP(self, instr):
        return self._skip_if(not self.keys[self._key_register(instr.x)])

    # Fx07..Fx65 - timers, memory, I, and key input
    def op_LD_Vx_DT(self, instr):
        self.V[instr.x] = self.delay

    def op_LD_Vx_K(self, instr):
        pressed = np.flatnonzero(self.keys)
        if pressed.size == 0:
            # stall: pc stays put so this runs again next step
            return self.pc
        self.V[instr.x] = int(pressed[0])
        log(f"Key {self.V[instr.x]:X} pressed")

    def op_LD_DT_Vx(self, instr):
        self.delay = self.V[instr.x]

    def op_LD_ST_Vx(self, instr):
        self.sound = self.V[instr.x]

    def op_ADD_I_Vx(self, instr):
        self.I = (self.I + self.V[instr.x]) & 0xFFFF

    def op_LD_F_Vx(self, instr):
        digit = self.V[instr.x]
        if digit > 0xF:
            raise RegisterBoundsError(
                "V%X holds 0x%02X, no font glyph for it (pc=0x%03X)" % (instr.x, digit, self.pc))
        self.I = glyph_address(digit)

    # Cuts Vx into three decimal digits at I, I+1, I+2
    # Example: Vx = 234, mem[I] = 2, mem[I+1] = 3, mem[I+2] = 4
    def op_LD_B_Vx(self, instr):
        self._check_range(self.I, 3)
        v = self.V[instr.x]
        self.memory[self.I] = v // 100
        self.memory[self.I + 1] = (v // 10) % 10
        self.memory[self.I + 2] = v % 10

    # I is left where it was after both of these.
    def op_LD_I_Vx(self, instr):
        count = instr.x + 1
        self._check_range(self.I, count)
        self.memory[self.I:self.I + count] = bytes(self.V[:count])

    def op_LD_Vx_I(self, instr):
        count = instr.x + 1
        self._check_range(self.I, count)
        self.V[:count] = list(self.memory[self.I:self.I + count])
