"""Fatal emulator errors.

Nothing here is recoverable: once one of these is raised the machine is
considered halted and the run loop reports it.
"""


class Chip8Error(Exception):
    """Base class for every fatal emulator error."""


class DecodeError(Chip8Error):
    """Opcode does not match any instruction in its family."""

    def __init__(self, opcode, address):
        self.opcode = opcode
        self.address = address
        super().__init__(f"Unknown opcode {opcode:04X} at {address:03X}")


class StackError(Chip8Error):
    pass


class StackOverflowError(StackError):
    """CALL with all 16 stack slots in use."""


class StackUnderflowError(StackError):
    """RET with nothing on the stack."""


class RegisterBoundsError(Chip8Error):
    """A register value used as a key or glyph index is out of range."""


class MemoryBoundsError(Chip8Error):
    """A computed address falls outside the 4K address space."""


class RomError(Chip8Error):
    """ROM image can't be loaded (missing, empty or too big)."""
