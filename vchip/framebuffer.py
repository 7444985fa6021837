#!/usr/bin/env python3

"""
Framebuffer Emulator

Pixels are written here, and are only drawn to the actual display (the host
rendering system) once per frame.  Programs for this system cannot write
directly into video RAM.  Instead, sprites are drawn to the screen using an XOR
method against a single monochrome plane.

Collisions (where any pixel was set, but was unset by an XOR), are reported
back to the caller so the CPU can set the Vf flag.

Video RAM holds one byte per pixel (0 = off, 1 = on), row-major.  The host
renderer only ever sees a read-only view of it.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import VID_WIDTH, VID_HEIGHT
from .ram import RAM


class FramebufferError(Exception):
    pass


class Framebuffer:
    def __init__(self, vid_width=VID_WIDTH, vid_height=VID_HEIGHT, allow_wrapping=True):
        if vid_width <= 0 or vid_height <= 0:
            raise FramebufferError("Display dimensions must be positive")

        self.vid_width = vid_width
        self.vid_height = vid_height
        self.vid_size = vid_width * vid_height
        self.allow_wrapping = allow_wrapping
        self.vram = RAM(self.vid_size)
        self.dirty = True  # Force the first frame to be drawn

    def clear(self):
        self.vram.clear()
        self.dirty = True

    def xor_pixel(self, x, y):
        # Returns flagging any collision, or None if the pixel was clipped

        if self.allow_wrapping:
            x %= self.vid_width
            y %= self.vid_height
        elif x >= self.vid_width or y >= self.vid_height:
            return None

        vram_loc = y * self.vid_width + x
        pixel = self.vram.read(vram_loc)
        self.vram.write(vram_loc, pixel ^ 1)
        self.dirty = True

        return pixel != 0

    def draw_sprite(self, x, y, sprite_bytes):
        # Each byte is one 8-pixel row, most significant bit leftmost.  The sprite's start always wraps, regardless of
        # whether the rest of the sprite is wrapped or clipped.
        x %= self.vid_width
        y %= self.vid_height
        collided = False

        for row, spr_data in enumerate(sprite_bytes):
            for col in range(8):
                if spr_data & (0x80 >> col) and self.xor_pixel(x + col, y + row):
                    # Don't stop drawing.  Set the flag, and never unset it for this sprite.
                    collided = True

        return collided

    def get_pixel(self, x, y):
        return self.vram.read(y * self.vid_width + x)

    def snapshot(self):
        return self.vram.mem.toreadonly()

    def mark_clean(self):
        self.dirty = False

    def get_vid_size(self):
        return self.vid_width, self.vid_height
