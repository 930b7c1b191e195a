#!/usr/bin/env python3

"""
Disassembler

Walks a block of bytes two at a time and yields one (address, word, text)
line per instruction, using the same decoder as the CPU.  Nothing is
executed, so data mixed in with code is simply listed as whatever instruction
it happens to look like.

Lines are generated lazily.  Call it again with a different start to list
another part of the same block.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .decoder import decode, mnemonic


def disassemble(data, start=0, base=0):
    # 'start' is the offset into data, 'base' is the address data[0] would sit at in RAM.  A trailing odd byte is
    # not a whole instruction, so it isn't listed.
    for offset in range(start, len(data) - 1, 2):
        word = (data[offset] << 8) | data[offset + 1]
        yield base + offset, word, mnemonic(decode(word))


def format_line(line):
    address, word, text = line
    return "0x{:03x}  {:04x}  {}".format(address, word, text)
