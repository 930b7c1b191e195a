#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import os
import tempfile
import unittest
from contextlib import redirect_stdout
from io import StringIO
from pchip import main
from pchip.cpu import CPUError
from plainchip import parse_args


class TestMain(unittest.TestCase):
    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.filename = os.path.join(self.temp_dir.name, "test.ch8")

        with open(self.filename, "wb") as f:
            f.write(bytes((0x00, 0xE0, 0x60, 0x01, 0x01, 0x23)))

    def tearDown(self):
        self.temp_dir.cleanup()

    def _args(self, *argv):
        return vars(parse_args(list(argv) + [self.filename]))

    def test_main_parse_args_defaults(self):
        args = self._args()
        self.assertEqual(self.filename, args["filename"])
        self.assertIsNone(args["clock_speed"])
        self.assertIsNone(args["index_overflow_quirks"])
        self.assertFalse(args["debug"])
        self.assertFalse(args["disassemble"])

    def test_main_disassemble(self):
        output = StringIO()

        with redirect_stdout(output):
            main(self._args("--disassemble"))

        lines = output.getvalue().splitlines()
        self.assertEqual("0x200  00e0  CLS", lines[1])
        self.assertEqual("0x202  6001  LD V0, 0x01", lines[2])
        self.assertEqual("0x204  0123  ??? 0x0123", lines[3])

    def test_main_headless_run_halts(self):
        output = StringIO()

        with redirect_stdout(output), self.assertRaises(CPUError) as context:
            main(self._args("-r", "null", "-c", "0", "--index_overflow_quirks", "1"))

        self.assertIn("Opcode 0x0123 at address 0x204", str(context.exception))
