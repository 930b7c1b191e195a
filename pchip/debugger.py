#!/usr/bin/env python3

"""
CPU Debugger

If enabled, this will output information before each instruction executed:
    * All 16 of the [V] registers, starting with most significant (Vf) and
      reducing to least significant (V0)
    * I  - Index register
    * DT - Delay timer
    * ST - Sound timer
    * PC - Program counter
    * OP - OpCode number
    * IN - Decoded instruction

If the CPU halts, all of the above will be reported, with the addition of the
stack contents and the reason for halting.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .decoder import mnemonic


class Debugger:
    def __init__(self):
        self.live = False

    def debug(self, cpu, verbose=False):
        state = cpu.state
        debug_str = (
            "V: 0x" + ("{:02x}" * 16) + " I: 0x{:03x} DT: 0x{:02x} ST: 0x{:02x} PC: 0x{:03x} OP: 0x{:04x} IN: {}"
        ).format(
            *[state.v[reg_num] for reg_num in range(15, -1, -1)] +
            [state.i, state.timers.dt, state.timers.st, cpu.debug_pc, cpu.opcode.word, mnemonic(cpu.opcode)]
        )

        if verbose:
            stack_items = state.stack.get_items()
            stack_str = (" 0x{:03x}" * len(stack_items)).format(*stack_items)
            debug_str += "\nStack:{}".format(stack_str or " (Empty)")

            if cpu.status.reason:
                debug_str += "\nReason: {}".format(cpu.status.reason)

        return debug_str

    def set_live(self, enabled):
        self.live = enabled

    def is_live(self):
        return self.live

    def output(self, cpu):
        print(self.debug(cpu))
