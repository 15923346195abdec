# Bit helpers for pulling fields out of opcodes and for 8-bit register math.
# Nibbles are numbered 1 (lowest) to 4 (highest):
#   nibble(0xABCD, 1) == 0xD
#   nibble(0xABCD, 4) == 0xA


def nibble(opcode, n):
    assert 1 <= n <= 4, "nibble position must be 1..4"
    return (opcode >> ((n - 1) * 4)) & 0xF


def low_byte(opcode):
    return opcode & 0xFF


def address(opcode):
    return opcode & 0x0FFF


def wrap_add(a, b):
    """Add two bytes, wrapping around at 256."""
    return (a + b) & 0xFF


def wrap_sub(a, b):
    """Subtract two bytes, wrapping around below 0."""
    return (a - b) & 0xFF
