import os
import tempfile
import unittest

from chip8.__main__ import main
from chip8.errors import RomError
from chip8.rom import load_rom


class TestLoadRom(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)

    def write(self, name, data):
        path = os.path.join(self.tmp.name, name)
        with open(path, "wb") as f:
            f.write(data)
        return path

    def test_reads_bytes(self):
        path = self.write("ok.ch8", b"\x60\x05\x70\x03")
        self.assertEqual(load_rom(path), b"\x60\x05\x70\x03")

    def test_largest_rom_fits(self):
        path = self.write("big.ch8", b"\x00" * 0xE00)
        self.assertEqual(len(load_rom(path)), 0xE00)

    def test_too_big(self):
        path = self.write("huge.ch8", b"\x00" * 0xE01)
        with self.assertRaises(RomError):
            load_rom(path)

    def test_empty(self):
        path = self.write("empty.ch8", b"")
        with self.assertRaises(RomError):
            load_rom(path)

    def test_missing(self):
        with self.assertRaises(RomError):
            load_rom(os.path.join(self.tmp.name, "nope.ch8"))


class TestMain(unittest.TestCase):

    def test_missing_rom_exits_1(self):
        with tempfile.TemporaryDirectory() as tmp:
            self.assertEqual(main([os.path.join(tmp, "nope.ch8")]), 1)

    def test_bad_rate_exits_2(self):
        self.assertEqual(main(["whatever.ch8", "--hz", "0"]), 2)
