#!/usr/bin/env python3

"""
Machine State

Everything a CHIP-8 program can see or change lives here: RAM, the V
registers, the index register, the program counter, the call stack, both
timers, the framebuffer and the keypad.  The CPU owns no machine state of its
own, it is handed one of these and mutates it.

A freshly built state is ready to run: the system font is written at address
0x000, and the program counter points at 0x200 where ROMs are loaded.

Snapshots are plain in-memory copies, so they can be restored later (for
example to rewind after a crash), but they are not a file format.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from collections import namedtuple
from .constants import FONT_LOCATION, MAX_ROM_SIZE, NUM_REGISTERS, PROGRAM_START, SYSTEM_FONT
from .framebuffer import Framebuffer
from .keypad import Keypad
from .ram import RAM
from .stack import Stack
from .timers import Timers

Snapshot = namedtuple("Snapshot", ["mem", "v", "i", "pc", "stack", "dt", "st", "pixels", "keys"])


class ResourceError(Exception):
    pass


class MachineState:
    def __init__(self):
        self.ram = RAM()
        self.v = memoryview(bytearray(NUM_REGISTERS))  # Bytearrays keep registers to 8 bits for free
        self.i = 0
        self.pc = PROGRAM_START
        self.stack = Stack()
        self.timers = Timers()
        self.framebuffer = Framebuffer()
        self.keypad = Keypad()
        self.reset()

    def reset(self):
        # Program memory above the font is left alone, so a loaded ROM can be rerun
        self.ram.write_block(FONT_LOCATION, SYSTEM_FONT)
        self.v[:] = bytes(NUM_REGISTERS)
        self.i = 0
        self.pc = PROGRAM_START
        self.stack.clear()
        self.timers.clear()
        self.framebuffer.clear()
        self.keypad.clear()

    def load(self, rom):
        # Check the size first, so an oversized ROM leaves everything as it was
        if len(rom) > MAX_ROM_SIZE:
            raise ResourceError(
                "ROM is {} bytes, but only {} bytes are available from 0x{:03x}".format(
                    len(rom), MAX_ROM_SIZE, PROGRAM_START
                )
            )

        self.ram.write_block(PROGRAM_START, rom)

    def snapshot(self):
        return Snapshot(
            self.ram.dump(), bytes(self.v), self.i, self.pc, tuple(self.stack.get_items()), self.timers.dt,
            self.timers.st, self.framebuffer.snapshot(), tuple(self.keypad.key_down)
        )

    def restore(self, snapshot):
        self.ram.write_block(0, snapshot.mem)
        self.v[:] = snapshot.v
        self.i = snapshot.i
        self.pc = snapshot.pc
        self.stack.set_items(snapshot.stack)
        self.timers.dt = snapshot.dt
        self.timers.st = snapshot.st
        self.framebuffer.load_pixels(snapshot.pixels)
        self.keypad.key_down = list(snapshot.keys)
