#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import unittest
from contextlib import redirect_stdout
from io import StringIO
from pchip.cpu import CPU
from pchip.debugger import Debugger


class TestDebugger(unittest.TestCase):
    def setUp(self):
        self.debugger = Debugger()
        self.cpu = CPU(debugger=self.debugger)

    def test_debugger_live_flag(self):
        self.assertFalse(self.debugger.is_live())
        self.debugger.set_live(True)
        self.assertTrue(self.debugger.is_live())

    def test_debugger_debug_line(self):
        self.cpu.load(b"\x6F\x12")
        self.cpu.step()
        debug_str = self.debugger.debug(self.cpu)
        self.assertTrue(debug_str.startswith("V: 0x12" + "00" * 15))
        self.assertIn("PC: 0x200", debug_str)
        self.assertIn("OP: 0x6f12", debug_str)
        self.assertIn("IN: LD Vf, 0x12", debug_str)
        self.assertNotIn("Stack", debug_str)

    def test_debugger_verbose_after_halt(self):
        self.cpu.load(b"\x22\x04\x00\x00\x00\x00")
        self.cpu.step()
        self.cpu.step()
        debug_str = self.debugger.debug(self.cpu, verbose=True)
        self.assertIn("Stack: 0x202", debug_str)
        self.assertIn("Reason: Opcode 0x0000 at address 0x204", debug_str)

    def test_debugger_verbose_empty_stack(self):
        self.assertIn("Stack: (Empty)", self.debugger.debug(self.cpu, verbose=True))

    def test_debugger_live_output(self):
        self.debugger.set_live(True)
        cpu = CPU(debugger=self.debugger)
        cpu.load(b"\x00\xE0")
        output = StringIO()

        with redirect_stdout(output):
            cpu.step()

        self.assertIn("IN: CLS", output.getvalue())
