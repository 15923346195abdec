# pyglet front end: owns the window, turns key events into keypad presses,
# paces the CPU and draws the framebuffer.
#
# Everything runs off pyglet's clock on the main thread:
#   _cpu_tick    - runs as many instructions as the elapsed time is worth,
#                  ticking the timers after each one
#   on_draw      - re-uploads the framebuffer when the CPU raised redraw
#   _update_bench - FPS / cycles per second HUD, once a second

import numpy as np
import pyglet
from pyglet.window import key

from . import config
from .errors import Chip8Error
from .keypad import KEY_BINDINGS
from .log import log, toggle_logging


def _symbol(char):
    # pyglet names the digit keys _0.._9
    return getattr(key, "_" + char if char.isdigit() else char)


#map binding keys
KEYMAP = {_symbol(char): index for char, index in KEY_BINDINGS.items()}

# never try to catch up more than this much time in one tick
MAX_CATCHUP = 0.1


class Chip8Window(pyglet.window.Window):

    def __init__(self, cpu, rom, cpu_hz=config.CPU_HZ, scale=config.SCALE):
        self.scale = scale
        window_width = config.WIDTH * scale
        window_height = config.HEIGHT * scale
        super().__init__(
            width=window_width,
            height=window_height,
            caption="CHIP-8 Emulator",
            resizable=False,
            vsync=False
        )

        self.cpu = cpu
        self.rom = rom
        self.cpu_hz = cpu_hz
        self.error = None
        self._halted = False
        self._cycle_debt = 0.0

        self.cpu.load_program(rom)

        # Pre-allocated small framebuffer (64x32 RGBA), upscaled with numpy.repeat
        self._small_framebuf = np.zeros((config.HEIGHT, config.WIDTH, 4), dtype=np.uint8)
        self._small_framebuf[..., 3] = 255

        #creating ImageData once, updated in place on redraw
        self.image = pyglet.image.ImageData(
            window_width,
            window_height,
            'RGBA',
            self._upscaled().tobytes()
        )

        # Performance tracking counters
        self._fps_counter = 0
        self._cps_counter = 0
        self._bench_time = pyglet.clock.get_default().time()

        # Labels for HUD
        self.fps_label = pyglet.text.Label(
            "FPS: 0",
            font_size=12,
            x=5,
            y=window_height - 15,
            anchor_x='left',
            anchor_y='center',
            color=(255, 255, 255, 255)
        )
        self.cps_label = pyglet.text.Label(
            "Cycles/s: 0",
            font_size=12,
            x=5,
            y=window_height - 30,
            anchor_x='left',
            anchor_y='center',
            color=(255, 255, 255, 255)
        )

        # Schedule the loops
        pyglet.clock.schedule_interval(self._cpu_tick, 1 / cpu_hz)
        pyglet.clock.schedule_interval(self._update_bench, 1.0)

    # ---- CPU cycle ----
    def _cpu_tick(self, dt):
        self._cycle_debt += min(dt, MAX_CATCHUP) * self.cpu_hz
        cycles = int(self._cycle_debt)
        self._cycle_debt -= cycles
        try:
            for _ in range(cycles):
                self.cpu.step()
                self.cpu.tick_timers(self.cpu_hz)
        except Chip8Error as e:
            print("Emulation error:", e)
            self.error = e
            self.halt()
            return
        self._cps_counter += cycles

    def halt(self):
        if self._halted:
            return
        self._halted = True
        pyglet.clock.unschedule(self._cpu_tick)
        pyglet.clock.unschedule(self._update_bench)
        self.close()

    def reset(self):
        log("Reset, reloading ROM")
        self.cpu.reset()
        self.cpu.load_program(self.rom)
        self._cycle_debt = 0.0

    # ---- FPS / CPS ----
    def _update_bench(self, dt):
        now = pyglet.clock.get_default().time()
        elapsed = now - self._bench_time
        if elapsed >= 1.0:
            self.fps_label.text = f"FPS: {self._fps_counter / elapsed:.1f}"
            self.cps_label.text = f"Cycles/s: {self._cps_counter / elapsed:.0f}"

            self._fps_counter = 0
            self._cps_counter = 0
            self._bench_time = now

    # ---- Drawing ----
    def _upscaled(self):
        # pyglet's origin is bottom-left, CHIP-8's is top-left
        self._small_framebuf[..., :3] = np.flipud(self.cpu.read_framebuffer())[..., None] * 255
        if self.scale == 1:
            return self._small_framebuf
        return np.repeat(np.repeat(self._small_framebuf, self.scale, axis=0), self.scale, axis=1)

    def on_draw(self):
        if self.cpu.take_redraw_flag():
            #updates existing image without creating new object
            self.image.set_data('RGBA', self.width * 4, self._upscaled().tobytes())

        self.clear()
        self.image.blit(0, 0)
        self.fps_label.draw()
        self.cps_label.draw()
        self._fps_counter += 1

    # ---- Input ----
    def on_key_press(self, symbol, modifiers):
        #@Override
        if symbol == key.ESCAPE:
            self.halt()
        elif symbol == key.F1:
            print("logsOn:", toggle_logging())
        elif symbol == key.F5:
            self.reset()
        elif symbol in KEYMAP:
            self.cpu.set_keyboard(KEYMAP[symbol], True)

    def on_key_release(self, symbol, modifiers):
        #@Override
        if symbol in KEYMAP:
            self.cpu.set_keyboard(KEYMAP[symbol], False)

    def on_close(self):
        self.halt()
