from . import config
from .errors import RomError
from .log import log


def load_rom(path):
    """Read a ROM image and check it fits between 0x200 and the end of memory."""
    log("Loading ROM:", path)
    try:
        with open(path, "rb") as f:
            rom = f.read()
    except OSError as e:
        raise RomError(f"Can't read ROM {path}: {e}") from e

    if not rom:
        raise RomError(f"ROM {path} is empty")
    if len(rom) > config.MAX_PROGRAM_SIZE:
        raise RomError(
            f"ROM {path} is {len(rom)} bytes, at most {config.MAX_PROGRAM_SIZE} fit in memory")
    return rom
