# The CHIP-8 hex keypad and how it sits on a QWERTY keyboard.
#
#   Keypad        Keyboard
#   1 2 3 C       1 2 3 4
#   4 5 6 D       Q W E R
#   7 8 9 E       A S D F
#   A 0 B F       Z X C V

KEYPAD_LAYOUT = (
    (0x1, 0x2, 0x3, 0xC),
    (0x4, 0x5, 0x6, 0xD),
    (0x7, 0x8, 0x9, 0xE),
    (0xA, 0x0, 0xB, 0xF),
)

KEYBOARD_LAYOUT = (
    "1234",
    "QWER",
    "ASDF",
    "ZXCV",
)

# keyboard character -> keypad index, same position on both grids
KEY_BINDINGS = {
    char: value
    for chars, values in zip(KEYBOARD_LAYOUT, KEYPAD_LAYOUT)
    for char, value in zip(chars, values)
}


def key_for(char):
    """Keypad index bound to a keyboard character, or None."""
    return KEY_BINDINGS.get(char.upper())
