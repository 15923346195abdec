import unittest

from chip8.decode import decode
from chip8.errors import DecodeError


# opcode -> expected tag, one per instruction (35 in total)
TABLE = {
    0x0123: "SYS",
    0x00E0: "CLS",
    0x00EE: "RET",
    0x1ABC: "JP",
    0x2ABC: "CALL",
    0x3A12: "SE_Vx_kk",
    0x4A12: "SNE_Vx_kk",
    0x5AB0: "SE_Vx_Vy",
    0x6A12: "LD_Vx_kk",
    0x7A12: "ADD_Vx_kk",
    0x8AB0: "LD_Vx_Vy",
    0x8AB1: "OR",
    0x8AB2: "AND",
    0x8AB3: "XOR",
    0x8AB4: "ADD",
    0x8AB5: "SUB",
    0x8AB6: "SHR",
    0x8AB7: "SUBN",
    0x8ABE: "SHL",
    0x9AB0: "SNE_Vx_Vy",
    0xAABC: "LD_I",
    0xBABC: "JP_V0",
    0xCA12: "RND",
    0xDAB5: "DRW",
    0xEA9E: "SKP",
    0xEAA1: "SKNP",
    0xFA07: "LD_Vx_DT",
    0xFA0A: "LD_Vx_K",
    0xFA15: "LD_DT_Vx",
    0xFA18: "LD_ST_Vx",
    0xFA1E: "ADD_I_Vx",
    0xFA29: "LD_F_Vx",
    0xFA33: "LD_B_Vx",
    0xFA55: "LD_I_Vx",
    0xFA65: "LD_Vx_I",
}


class TestDecode(unittest.TestCase):

    def test_every_instruction(self):
        self.assertEqual(len(set(TABLE.values())), 35)
        for opcode, op in TABLE.items():
            with self.subTest(opcode=f"{opcode:04X}"):
                self.assertEqual(decode(opcode).op, op)

    def test_fields(self):
        instr = decode(0xD12F)
        self.assertEqual(instr.op, "DRW")
        self.assertEqual(instr.opcode, 0xD12F)
        self.assertEqual(instr.x, 0x1)
        self.assertEqual(instr.y, 0x2)
        self.assertEqual(instr.n, 0xF)
        self.assertEqual(instr.kk, 0x2F)
        self.assertEqual(instr.nnn, 0x12F)

    def test_unknown_opcodes(self):
        for opcode in (0x5AB1, 0x9ABF, 0x8AB8, 0x8ABF, 0xEA00, 0xEA9F, 0xFA00, 0xFAFF):
            with self.subTest(opcode=f"{opcode:04X}"):
                with self.assertRaises(DecodeError):
                    decode(opcode)

    def test_error_reports_opcode_and_address(self):
        with self.assertRaises(DecodeError) as ctx:
            decode(0xF0FF, 0x2A4)
        self.assertEqual(ctx.exception.opcode, 0xF0FF)
        self.assertEqual(ctx.exception.address, 0x2A4)
        self.assertIn("F0FF", str(ctx.exception))
        self.assertIn("2A4", str(ctx.exception))
