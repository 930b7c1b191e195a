#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import unittest
from pchip.disassembler import disassemble, format_line

ROM = bytes((0x00, 0xE0, 0xA2, 0x2A, 0x60, 0x0C, 0xD0, 0x1F, 0x12, 0x00, 0xFF))


class TestDisassembler(unittest.TestCase):
    def test_disassembler_lines(self):
        lines = list(disassemble(ROM, 0, 0x200))
        self.assertEqual(5, len(lines))  # The trailing odd byte is not listed
        self.assertEqual((0x200, 0x00E0, "CLS"), lines[0])
        self.assertEqual((0x202, 0xA22A, "LD I, 0x22a"), lines[1])
        self.assertEqual((0x206, 0xD01F, "DRW V0, V1, 0xf"), lines[3])
        self.assertEqual((0x208, 0x1200, "JP 0x200"), lines[4])

    def test_disassembler_restart(self):
        first = list(disassemble(ROM, 4, 0x200))
        self.assertEqual((0x204, 0x600C, "LD V0, 0x0c"), first[0])
        self.assertEqual(first, list(disassemble(ROM, 4, 0x200)))

    def test_disassembler_is_lazy(self):
        lines = disassemble(ROM)
        self.assertEqual((0x000, 0x00E0, "CLS"), next(lines))

    def test_disassembler_does_not_touch_data(self):
        data = bytearray(ROM)
        list(disassemble(data))
        self.assertEqual(ROM, bytes(data))

    def test_disassembler_unknown(self):
        self.assertEqual([(0x0, 0x0000, "??? 0x0000")], list(disassemble(b"\x00\x00")))

    def test_disassembler_format_line(self):
        self.assertEqual("0x200  00e0  CLS", format_line((0x200, 0x00E0, "CLS")))
