import argparse
import sys

from . import config
from .cpu import Chip8
from .errors import RomError
from .log import set_logging
from .rom import load_rom


def build_parser():
    parser = argparse.ArgumentParser(
        prog="chip8",
        description="CHIP-8 Emulator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="Controls:\n"
               "  1 2 3 4 / Q W E R / A S D F / Z X C V  keypad\n"
               "  F1  toggle trace logging\n"
               "  F5  reset and reload the ROM\n"
               "  Esc quit\n"
    )
    parser.add_argument("rom", help="ROM image to run")
    parser.add_argument("--hz", type=int, default=config.CPU_HZ, metavar="N",
                        help=f"Instructions per second (default: {config.CPU_HZ})")
    parser.add_argument("--scale", type=int, default=config.SCALE, metavar="N",
                        help=f"Pixel scale factor for the window (default: {config.SCALE})")
    parser.add_argument("--log", action="store_true",
                        help="Print a trace of executed instructions")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    if args.hz <= 0 or args.scale <= 0:
        print("--hz and --scale must be positive", file=sys.stderr)
        return 2
    set_logging(args.log)

    try:
        rom = load_rom(args.rom)
    except RomError as e:
        print(e, file=sys.stderr)
        return 1

    # the window needs a display, only bring pyglet in once the ROM is good
    import pyglet
    from .window import Chip8Window

    window = Chip8Window(Chip8(), rom, cpu_hz=args.hz, scale=args.scale)
    pyglet.app.run()

    if window.error is not None:
        print("Emulation stopped:", window.error, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
