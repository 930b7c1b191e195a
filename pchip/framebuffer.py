#!/usr/bin/env python3

"""
Framebuffer Emulator

Programs for this system cannot write directly into video RAM.  The only ways
to change the screen are a full clear, or drawing a sprite with XOR.  Pixels
are held here in their own small RAM bank, one byte per pixel, and the host
renderer picks up a snapshot whenever it is time to refresh the display.

Sprite coordinates always wrap around the 64x32 screen, for the start position
as well as every pixel of the sprite.

Collisions (where any pixel was set, but was unset by an XOR) are reported as
a single flag for the whole sprite.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import VID_WIDTH, VID_HEIGHT, SPRITE_WIDTH
from .ram import RAM


class FramebufferError(Exception):
    pass


class Framebuffer:
    def __init__(self, vid_width=VID_WIDTH, vid_height=VID_HEIGHT):
        if vid_width <= 0 or vid_height <= 0:
            raise FramebufferError("Display dimensions must be positive")

        self.vid_width = vid_width
        self.vid_height = vid_height
        self.vid_size = vid_width * vid_height
        self.vram = RAM(self.vid_size)
        self.dirty = True  # Set whenever the renderer needs to draw again

    def clear(self):
        self.vram.clear()
        self.dirty = True

    def get_vid_size(self):
        return self.vid_width, self.vid_height

    def get_pixel(self, x, y):
        return self.vram.read((y % self.vid_height) * self.vid_width + (x % self.vid_width)) != 0

    def xor_pixel(self, x, y):
        # Returns True if a lit pixel was switched off
        vram_loc = (y % self.vid_height) * self.vid_width + (x % self.vid_width)
        pixel = self.vram.read(vram_loc)
        self.vram.write(vram_loc, pixel ^ 0xFF)
        self.dirty = True
        return pixel != 0

    def draw_sprite(self, x, y, rows):
        # Each row is one byte of sprite data, most significant bit on the left.  Keep drawing after a collision, the
        # flag is reported once for the whole sprite.
        collided = False

        for row_num, row in enumerate(rows):
            for col in range(SPRITE_WIDTH):
                if row & (0x80 >> col) and self.xor_pixel(x + col, y + row_num):
                    collided = True

        return collided

    def snapshot(self):
        # Read-only copy of the screen for the renderer: a tuple of rows, each a tuple of booleans
        mem = self.vram.mem
        width = self.vid_width
        return tuple(
            tuple(mem[row_start + x] != 0 for x in range(width))
            for row_start in range(0, self.vid_size, width)
        )

    def load_pixels(self, pixels):
        # Restores a snapshot taken with the method above
        if len(pixels) != self.vid_height or any(len(row) != self.vid_width for row in pixels):
            raise FramebufferError("Pixel data does not match the display size")

        for y, row in enumerate(pixels):
            for x, pixel in enumerate(row):
                self.vram.write(y * self.vid_width + x, 0xFF if pixel else 0x00)

        self.dirty = True
