from .cpu import Chip8
from .decode import Instruction, decode
from .errors import (
    Chip8Error,
    DecodeError,
    MemoryBoundsError,
    RegisterBoundsError,
    RomError,
    StackError,
    StackOverflowError,
    StackUnderflowError,
)
from .rom import load_rom

__version__ = "0.1.0"
