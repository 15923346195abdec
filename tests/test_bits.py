import unittest

from chip8.bits import nibble, low_byte, address, wrap_add, wrap_sub
from chip8.font import FONTSET, GLYPH_SIZE, glyph_address


class TestNibble(unittest.TestCase):

    def test_positions(self):
        self.assertEqual(nibble(0xABCD, 1), 0xD)
        self.assertEqual(nibble(0xABCD, 2), 0xC)
        self.assertEqual(nibble(0xABCD, 3), 0xB)
        self.assertEqual(nibble(0xABCD, 4), 0xA)

    def test_bad_position(self):
        with self.assertRaises(AssertionError):
            nibble(0xABCD, 0)
        with self.assertRaises(AssertionError):
            nibble(0xABCD, 5)

    def test_fields(self):
        self.assertEqual(low_byte(0x6A42), 0x42)
        self.assertEqual(address(0x2ABC), 0xABC)


class TestWrap(unittest.TestCase):

    def test_add(self):
        self.assertEqual(wrap_add(1, 2), 3)
        self.assertEqual(wrap_add(0xFF, 1), 0)
        self.assertEqual(wrap_add(0xFF, 0xFF), 0xFE)

    def test_sub(self):
        self.assertEqual(wrap_sub(5, 3), 2)
        self.assertEqual(wrap_sub(0, 1), 0xFF)
        self.assertEqual(wrap_sub(3, 5), 0xFE)


class TestFont(unittest.TestCase):

    def test_size(self):
        self.assertEqual(len(FONTSET), 16 * GLYPH_SIZE)

    def test_glyph_address(self):
        self.assertEqual(glyph_address(0), 0)
        self.assertEqual(glyph_address(0xA), 50)
        self.assertEqual(glyph_address(0xF), 75)
