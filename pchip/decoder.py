#!/usr/bin/env python3

"""
Opcode Decoder

Turns a raw 16-bit instruction word into an Opcode tuple: the variant tag
naming the operation, plus every operand field the instruction could carry.
Decoding never fails.  Words that don't match a known instruction decode to
the UNKNOWN variant, and it is up to the CPU to decide what to do with them.

The same decoder is shared by the CPU, the debugger and the disassembler, so
mnemonics are produced here too.

Operand fields (fixed bit positions for every instruction):
    x   = bits 11-8  (register)
    y   = bits 7-4   (register)
    n   = bits 3-0   (nibble)
    nn  = bits 7-0   (byte)
    nnn = bits 11-0  (address)
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from collections import namedtuple

# Variant tags
CLS = "CLS"              # 00E0
RET = "RET"              # 00EE
JP = "JP"                # 1nnn
CALL = "CALL"            # 2nnn
SE_BYTE = "SE_BYTE"      # 3xnn
SNE_BYTE = "SNE_BYTE"    # 4xnn
SE_REG = "SE_REG"        # 5xy0
LD_BYTE = "LD_BYTE"      # 6xnn
ADD_BYTE = "ADD_BYTE"    # 7xnn
LD_REG = "LD_REG"        # 8xy0
OR = "OR"                # 8xy1
AND = "AND"              # 8xy2
XOR = "XOR"              # 8xy3
ADD_REG = "ADD_REG"      # 8xy4
SUB = "SUB"              # 8xy5
SHR = "SHR"              # 8xy6
SUBN = "SUBN"            # 8xy7
SHL = "SHL"              # 8xyE
SNE_REG = "SNE_REG"      # 9xy0
LD_I = "LD_I"            # Annn
JP_V0 = "JP_V0"          # Bnnn
RND = "RND"              # Cxnn
DRW = "DRW"              # Dxyn
SKP = "SKP"              # Ex9E
SKNP = "SKNP"            # ExA1
LD_VX_DT = "LD_VX_DT"    # Fx07
LD_VX_K = "LD_VX_K"      # Fx0A
LD_DT_VX = "LD_DT_VX"    # Fx15
LD_ST_VX = "LD_ST_VX"    # Fx18
ADD_I = "ADD_I"          # Fx1E
LD_F = "LD_F"            # Fx29
LD_B = "LD_B"            # Fx33
LD_MEM_VX = "LD_MEM_VX"  # Fx55
LD_VX_MEM = "LD_VX_MEM"  # Fx65
UNKNOWN = "UNKNOWN"

# Families which are fully identified by their first nibble
FAMILY_OPS = {
    0x1: JP,
    0x2: CALL,
    0x3: SE_BYTE,
    0x4: SNE_BYTE,
    0x6: LD_BYTE,
    0x7: ADD_BYTE,
    0xA: LD_I,
    0xB: JP_V0,
    0xC: RND,
    0xD: DRW
}

# Families with a sub-opcode, keyed by (family, sub-opcode).  0x0/0xE/0xF use the low byte, 0x5/0x8/0x9 use the low
# nibble.
SUB_OPS = {
    (0x0, 0xE0): CLS,
    (0x0, 0xEE): RET,
    (0x5, 0x0): SE_REG,
    (0x8, 0x0): LD_REG,
    (0x8, 0x1): OR,
    (0x8, 0x2): AND,
    (0x8, 0x3): XOR,
    (0x8, 0x4): ADD_REG,
    (0x8, 0x5): SUB,
    (0x8, 0x6): SHR,
    (0x8, 0x7): SUBN,
    (0x8, 0xE): SHL,
    (0x9, 0x0): SNE_REG,
    (0xE, 0x9E): SKP,
    (0xE, 0xA1): SKNP,
    (0xF, 0x07): LD_VX_DT,
    (0xF, 0x0A): LD_VX_K,
    (0xF, 0x15): LD_DT_VX,
    (0xF, 0x18): LD_ST_VX,
    (0xF, 0x1E): ADD_I,
    (0xF, 0x29): LD_F,
    (0xF, 0x33): LD_B,
    (0xF, 0x55): LD_MEM_VX,
    (0xF, 0x65): LD_VX_MEM
}

NIBBLE_SUB_FAMILIES = (0x5, 0x8, 0x9)

# Assembler text, in the usual Cowgod syntax
MNEMONICS = {
    CLS:       "CLS",
    RET:       "RET",
    JP:        "JP 0x{nnn:03x}",
    CALL:      "CALL 0x{nnn:03x}",
    SE_BYTE:   "SE V{x:01x}, 0x{nn:02x}",
    SNE_BYTE:  "SNE V{x:01x}, 0x{nn:02x}",
    SE_REG:    "SE V{x:01x}, V{y:01x}",
    LD_BYTE:   "LD V{x:01x}, 0x{nn:02x}",
    ADD_BYTE:  "ADD V{x:01x}, 0x{nn:02x}",
    LD_REG:    "LD V{x:01x}, V{y:01x}",
    OR:        "OR V{x:01x}, V{y:01x}",
    AND:       "AND V{x:01x}, V{y:01x}",
    XOR:       "XOR V{x:01x}, V{y:01x}",
    ADD_REG:   "ADD V{x:01x}, V{y:01x}",
    SUB:       "SUB V{x:01x}, V{y:01x}",
    SHR:       "SHR V{x:01x}",
    SUBN:      "SUBN V{x:01x}, V{y:01x}",
    SHL:       "SHL V{x:01x}",
    SNE_REG:   "SNE V{x:01x}, V{y:01x}",
    LD_I:      "LD I, 0x{nnn:03x}",
    JP_V0:     "JP V0, 0x{nnn:03x}",
    RND:       "RND V{x:01x}, 0x{nn:02x}",
    DRW:       "DRW V{x:01x}, V{y:01x}, 0x{n:01x}",
    SKP:       "SKP V{x:01x}",
    SKNP:      "SKNP V{x:01x}",
    LD_VX_DT:  "LD V{x:01x}, DT",
    LD_VX_K:   "LD V{x:01x}, K",
    LD_DT_VX:  "LD DT, V{x:01x}",
    LD_ST_VX:  "LD ST, V{x:01x}",
    ADD_I:     "ADD I, V{x:01x}",
    LD_F:      "LD F, V{x:01x}",
    LD_B:      "LD B, V{x:01x}",
    LD_MEM_VX: "LD [I], V{x:01x}",
    LD_VX_MEM: "LD V{x:01x}, [I]",
    UNKNOWN:   "??? 0x{word:04x}"
}


class Opcode(namedtuple("Opcode", ["op", "word", "family", "x", "y", "n", "nn", "nnn"])):
    __slots__ = ()

    @property
    def is_unknown(self):
        return self.op == UNKNOWN


def decode(word):
    word &= 0xFFFF
    family = word >> 12
    nn = word & 0xFF
    n = word & 0xF
    op = FAMILY_OPS.get(family)

    if op is None:
        op = SUB_OPS.get((family, n if family in NIBBLE_SUB_FAMILIES else nn), UNKNOWN)

        # 00E0 and 00EE are exact matches, the middle nibble must be clear
        if family == 0x0 and word & 0x0F00:
            op = UNKNOWN

    return Opcode(op, word, family, (word & 0xF00) >> 8, (word & 0xF0) >> 4, n, nn, word & 0xFFF)


def mnemonic(opcode):
    return MNEMONICS[opcode.op].format(**opcode._asdict())
