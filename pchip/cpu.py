#!/usr/bin/env python3

"""
CPU Emulator (CHIP-8)

Like a real computer, this is where most of the processing happens.  The CPU
doesn't run on its own: every call to step() fetches, decodes and executes
exactly one instruction against the MachineState it was handed, and every call
to tick_timers() counts the 60Hz timers down once.  The host decides how often
to call each, so ROMs written for different speeds can be run at the right
rate without the timers drifting.

The CPU is always in one of three states:

- Running      : step() executes the next instruction.
- Awaiting key : Fx0A is waiting for a key to go down.  step() changes
                 nothing until one does, then stores it and moves on.
- Halted       : an unknown opcode, or a stack overflow/underflow, stopped
                 the program.  The failing instruction has no effect, and the
                 CPU stays halted until it is reset.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from collections import namedtuple
from random import Random
from . import decoder
from .constants import ADDR_MASK, FONT_GLYPH_SIZE, FONT_LOCATION
from .debugger import Debugger
from .decoder import decode
from .stack import StackError
from .state import MachineState

STATE_RUNNING = "running"
STATE_AWAITING_KEY = "awaiting_key"
STATE_HALTED = "halted"


class CPUError(Exception):
    pass


class ProgramError(Exception):
    # Raised by a running program doing something impossible.  Never escapes step(), the CPU halts instead.
    pass


class Status(namedtuple("Status", ["state", "register", "reason", "opcode", "address"])):
    __slots__ = ()

    @classmethod
    def running(cls):
        return cls(STATE_RUNNING, None, None, None, None)

    @classmethod
    def awaiting_key(cls, register):
        return cls(STATE_AWAITING_KEY, register, None, None, None)

    @classmethod
    def halted(cls, reason, opcode, address):
        return cls(STATE_HALTED, None, reason, opcode, address)

    @property
    def is_running(self):
        return self.state == STATE_RUNNING

    @property
    def is_awaiting_key(self):
        return self.state == STATE_AWAITING_KEY

    @property
    def is_halted(self):
        return self.state == STATE_HALTED


RUNNING = Status.running()


class CPU:
    def __init__(self, state=None, debugger=None, index_overflow_quirks=None, rng=None):
        self.state = MachineState() if state is None else state
        self.debugger = Debugger() if debugger is None else debugger
        self.live_debug = self.debugger.is_live()
        self.rng = Random() if rng is None else rng

        # Index overflow quirks: Fx1E sets Vf when I passes 0xFFF, as on the Amiga interpreter.  Off by default.
        self.index_overflow_quirks = False if index_overflow_quirks is None else index_overflow_quirks

        # Define instruction pointers, one per decoded variant.
        # n = Nibble
        # kk = Byte
        # nnn = address
        # x/y = register (0-15)
        self.instructions = {
            decoder.CLS:       self._00E0,
            decoder.RET:       self._00EE,
            decoder.JP:        self._1nnn,
            decoder.CALL:      self._2nnn,
            decoder.SE_BYTE:   self._3xkk,
            decoder.SNE_BYTE:  self._4xkk,
            decoder.SE_REG:    self._5xy0,
            decoder.LD_BYTE:   self._6xkk,
            decoder.ADD_BYTE:  self._7xkk,
            decoder.LD_REG:    self._8xy0,
            decoder.OR:        self._8xy1,
            decoder.AND:       self._8xy2,
            decoder.XOR:       self._8xy3,
            decoder.ADD_REG:   self._8xy4,
            decoder.SUB:       self._8xy5,
            decoder.SHR:       self._8xy6,
            decoder.SUBN:      self._8xy7,
            decoder.SHL:       self._8xyE,
            decoder.SNE_REG:   self._9xy0,
            decoder.LD_I:      self._Annn,
            decoder.JP_V0:     self._Bnnn,
            decoder.RND:       self._Cxkk,
            decoder.DRW:       self._Dxyn,
            decoder.SKP:       self._Ex9E,
            decoder.SKNP:      self._ExA1,
            decoder.LD_VX_DT:  self._Fx07,
            decoder.LD_VX_K:   self._Fx0A,
            decoder.LD_DT_VX:  self._Fx15,
            decoder.LD_ST_VX:  self._Fx18,
            decoder.ADD_I:     self._Fx1E,
            decoder.LD_F:      self._Fx29,
            decoder.LD_B:      self._Fx33,
            decoder.LD_MEM_VX: self._Fx55,
            decoder.LD_VX_MEM: self._Fx65,
            decoder.UNKNOWN:   self._opcode_unsupported
        }

        self.status = RUNNING
        self.opcode = decode(0)
        self.debug_pc = self.state.pc

    # Host-facing operations

    def load(self, rom):
        self.state.load(rom)

    def reset(self):
        self.state.reset()
        self.status = RUNNING
        self.opcode = decode(0)
        self.debug_pc = self.state.pc

    def step(self):
        status = self.status

        if status.is_halted:
            return status

        if status.is_awaiting_key:
            return self._resume_keypress(status.register)

        state = self.state
        # Keep track of the program counter before altering it in any way, so a failing instruction can be undone
        self.debug_pc = state.pc
        self.opcode = decode(self.fetch())

        if self.live_debug:
            self.debugger.output(self)

        self.inc_pc()  # Program counter updates after fetch, but before execute

        try:
            self.instructions[self.opcode.op]()
        except (ProgramError, StackError) as err:
            # Nothing else has been touched by the failing instruction, so only the program counter needs undoing
            state.pc = self.debug_pc
            self.status = Status.halted(str(err), self.opcode.word, self.debug_pc)

        return self.status

    def tick_timers(self):
        self.state.timers.tick()

    def set_key(self, key, pressed):
        self.state.keypad.set_key(key, pressed)

    def display_snapshot(self):
        return self.state.framebuffer.snapshot()

    def sound_active(self):
        return self.state.timers.sound_active()

    def is_halted(self):
        return self.status.is_halted

    def save_state(self):
        return self.state.snapshot(), self.status

    def restore_state(self, saved):
        snapshot, status = saved
        self.state.restore(snapshot)
        self.status = status
        self.debug_pc = snapshot.pc

        if status.is_awaiting_key:
            self.state.keypad.begin_wait()

    # Internals

    def fetch(self):
        ram = self.state.ram
        pc = self.state.pc
        return (ram.read(pc) << 8) | ram.read((pc + 1) & ADDR_MASK)

    def inc_pc(self):
        self.state.pc = (self.state.pc + 2) & ADDR_MASK

    def dec_pc(self):
        # Only used to hold the program counter on the keypress wait
        self.state.pc = (self.state.pc - 2) & ADDR_MASK

    def _resume_keypress(self, register):
        state = self.state
        key = state.keypad.take_keypress()

        if key is None:
            return self.status

        state.v[register] = key
        self.inc_pc()
        self.status = RUNNING
        return RUNNING

    # Operand fields of the instruction being executed
    @property
    def vx(self):
        return self.opcode.x

    @property
    def vy(self):
        return self.opcode.y

    @property
    def addr(self):
        return self.opcode.nnn

    @property
    def byte(self):
        return self.opcode.nn

    @property
    def nibble(self):
        return self.opcode.n

    def _opcode_unsupported(self):
        raise ProgramError(
            "Opcode 0x{:04x} at address 0x{:03x} is not a CHIP-8 instruction".format(self.opcode.word, self.debug_pc)
        )

    def _00E0(self):  # CLS
        self.state.framebuffer.clear()

    def _00EE(self):  # RET
        self.state.pc = self.state.stack.pop()

    def _1nnn(self):  # JP addr
        self.state.pc = self.addr

    def _2nnn(self):  # CALL addr
        # The program counter already points past this instruction, which is where RET comes back to
        self.state.stack.push(self.state.pc)
        self.state.pc = self.addr

    def _post_skip(self):
        self.inc_pc()

    def _3xkk(self):  # SE Vx, byte
        if self.state.v[self.vx] == self.byte:
            self._post_skip()

    def _4xkk(self):  # SNE Vx, byte
        if self.state.v[self.vx] != self.byte:
            self._post_skip()

    def _5xy0(self):  # SE Vx, Vy
        v = self.state.v

        if v[self.vx] == v[self.vy]:
            self._post_skip()

    def _6xkk(self):  # LD Vx, byte
        self.state.v[self.vx] = self.byte

    def _7xkk(self):  # ADD Vx, byte
        # No carry flag for this one
        v = self.state.v
        vx = self.vx
        v[vx] = (v[vx] + self.byte) & 0xFF

    def _8xy0(self):  # LD Vx, Vy
        v = self.state.v
        v[self.vx] = v[self.vy]

    def _8xy1(self):  # OR Vx, Vy
        v = self.state.v
        v[self.vx] |= v[self.vy]

    def _8xy2(self):  # AND Vx, Vy
        v = self.state.v
        v[self.vx] &= v[self.vy]

    def _8xy3(self):  # XOR Vx, Vy
        v = self.state.v
        v[self.vx] ^= v[self.vy]

    def _8xy4(self):  # ADD Vx, Vy
        v = self.state.v
        val = v[self.vx] + v[self.vy]
        v[self.vx] = val & 0xFF
        v[0xF] = int(val > 0xFF)  # Vf is set when carrying

    def _post_8xy5_8xy7(self, val):  # Post-SUB/SUBN
        v = self.state.v
        v[self.vx] = val & 0xFF
        # Vf is set when NOT borrowing.  Set it after Vx, so the flag wins when Vf is the destination.
        v[0xF] = int(val >= 0)

    def _8xy5(self):  # SUB Vx, Vy
        v = self.state.v
        self._post_8xy5_8xy7(v[self.vx] - v[self.vy])

    def _8xy6(self):  # SHR Vx
        v = self.state.v
        val = v[self.vx]
        v[self.vx] = val >> 1
        v[0xF] = val & 1

    def _8xy7(self):  # SUBN Vx, Vy
        v = self.state.v
        self._post_8xy5_8xy7(v[self.vy] - v[self.vx])

    def _8xyE(self):  # SHL Vx
        v = self.state.v
        val = v[self.vx]
        v[self.vx] = (val << 1) & 0xFF
        v[0xF] = val >> 7

    def _9xy0(self):  # SNE Vx, Vy
        v = self.state.v

        if v[self.vx] != v[self.vy]:
            self._post_skip()

    def _Annn(self):  # LD I, addr
        self.state.i = self.addr

    def _Bnnn(self):  # JP V0, addr
        self.state.pc = (self.state.v[0] + self.addr) & ADDR_MASK

    def _Cxkk(self):  # RND Vx, byte
        # The ANDing here is intentional.  This is not a random number between 0 and 'byte' inclusive.
        self.state.v[self.vx] = self.rng.randint(0, 0xFF) & self.byte

    def _Dxyn(self):  # DRW Vx, Vy, nibble
        state = self.state
        ram = state.ram
        i = state.i
        rows = [ram.read((i + row) & ADDR_MASK) for row in range(self.nibble)]
        collided = state.framebuffer.draw_sprite(state.v[self.vx], state.v[self.vy], rows)
        state.v[0xF] = int(collided)

    def _Ex9E(self):  # SKP Vx
        if self.state.keypad.is_key_down(self.state.v[self.vx]):
            self._post_skip()

    def _ExA1(self):  # SKNP Vx
        if not self.state.keypad.is_key_down(self.state.v[self.vx]):
            self._post_skip()

    def _Fx07(self):  # LD Vx, DT
        self.state.v[self.vx] = self.state.timers.dt

    def _Fx0A(self):  # LD Vx, K
        # Rather than blocking, park the program counter on this instruction and let step() collect the key later.
        # Timers and the display carry on as normal in the meantime.
        self.dec_pc()
        self.state.keypad.begin_wait()
        self.status = Status.awaiting_key(self.vx)

    def _Fx15(self):  # LD DT, Vx
        self.state.timers.set_delay(self.state.v[self.vx])

    def _Fx18(self):  # LD ST, Vx
        self.state.timers.set_sound(self.state.v[self.vx])

    def _Fx1E(self):  # ADD I, Vx
        state = self.state
        val = state.i + state.v[self.vx]
        state.i = val & ADDR_MASK

        # Allow for Amiga CHIP-8 interpreter behaviour
        if self.index_overflow_quirks:
            state.v[0xF] = int(val > ADDR_MASK)

    def _Fx29(self):  # LD F, Vx
        self.state.i = (FONT_LOCATION + FONT_GLYPH_SIZE * (self.state.v[self.vx] & 0xF)) & ADDR_MASK

    def _Fx33(self):  # LD B, Vx
        state = self.state
        val = state.v[self.vx]
        i = state.i
        state.ram.write(i, val // 100)                           # Most-significant digit
        state.ram.write((i + 1) & ADDR_MASK, (val // 10) % 10)  # Middle digit
        state.ram.write((i + 2) & ADDR_MASK, val % 10)          # Least-significant digit

    def _Fx55(self):  # LD [I], Vx
        state = self.state
        i = state.i

        for reg in range(self.vx + 1):
            state.ram.write((i + reg) & ADDR_MASK, state.v[reg])

    def _Fx65(self):  # LD Vx, [I]
        state = self.state
        i = state.i

        for reg in range(self.vx + 1):
            state.v[reg] = state.ram.read((i + reg) & ADDR_MASK)
