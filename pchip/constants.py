#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

# App identification
APP_NAME = "PlainChip Emulator"
APP_VERSION = "1.0.0"
APP_COPYRIGHT = "Copyright (C) 2022 Gregory Maynard-Hoare, licensed under GNU Affero General Public License v3.0"
APP_INTRO = "{} V{} -- ".format(APP_NAME, APP_VERSION)

# Memory map
MEM_SIZE = 0x1000
ADDR_MASK = 0xFFF      # I and PC only ever use their low 12 bits
PROGRAM_START = 0x200  # 0x000 - 0x1FF is reserved for the interpreter and font
MAX_ROM_SIZE = MEM_SIZE - PROGRAM_START

# Registers and call stack
NUM_REGISTERS = 0x10
STACK_SIZE = 16

# Display
VID_WIDTH = 64
VID_HEIGHT = 32
SPRITE_WIDTH = 8

# Keypad
NUM_KEYS = 0x10

# Timers tick at 60Hz regardless of the instruction rate
TIMER_FREQ = 60.0
DEFAULT_CLOCK_SPEED = 1000

# Built-in hexadecimal font, 5 bytes per glyph, loaded at FONT_LOCATION
FONT_LOCATION = 0x000
FONT_GLYPH_SIZE = 5
SYSTEM_FONT = bytes((
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80   # F
))

# Default mappings for keys 0-F, later populated into a dictionary.  These are PyGame keyscans for the usual
# 1234/QWER/ASDF/ZXCV layout on a QWERTY keyboard
DEFAULT_KEYMAP = "120,49,50,51,113,119,101,97,115,100,122,99,52,114,102,118"

# Renderers selectable at startup
SUPPORTED_RENDERERS = ["pygame", "null"]
