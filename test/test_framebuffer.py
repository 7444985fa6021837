#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import unittest
from vchip.constants import SYSTEM_FONT
from vchip.framebuffer import Framebuffer, FramebufferError


class TestFrameBuffer(unittest.TestCase):
    def setUp(self):
        self.framebuffer = Framebuffer()
        self.framebuffer_clip = Framebuffer(4, 5, allow_wrapping=False)
        self.framebuffer_wrap = Framebuffer(3, 4, allow_wrapping=True)

    def test_framebuffer_size(self):
        self.assertEqual((64, 32), self.framebuffer.get_vid_size())
        self.assertEqual(64 * 32, len(self.framebuffer.snapshot()))
        self.assertRaises(FramebufferError, Framebuffer, 0, 32)

    def test_framebuffer_writes_clip(self):
        fb = self.framebuffer_clip
        self.assertFalse(fb.xor_pixel(0, 0))
        self.assertEqual("0100000000000000000000000000000000000000", fb.vram.mem.hex())
        fb.xor_pixel(1, 1)
        self.assertEqual("0100000000010000000000000000000000000000", fb.vram.mem.hex())
        self.assertIsNone(fb.xor_pixel(4, 5))  # Should do nothing as wrapping is off
        self.assertEqual("0100000000010000000000000000000000000000", fb.vram.mem.hex())
        self.assertTrue(fb.xor_pixel(0, 0))
        self.assertEqual("0000000000010000000000000000000000000000", fb.vram.mem.hex())

    def test_framebuffer_writes_wrap(self):
        fb = self.framebuffer_wrap
        fb.xor_pixel(0, 0)
        self.assertEqual("010000000000000000000000", fb.vram.mem.hex())
        fb.xor_pixel(1, 1)
        self.assertEqual("010000000100000000000000", fb.vram.mem.hex())
        self.assertTrue(fb.xor_pixel(3, 4))  # Should erase the first pixel
        self.assertEqual("000000000100000000000000", fb.vram.mem.hex())

    def test_framebuffer_clear(self):
        fb = self.framebuffer
        fb.draw_sprite(10, 10, SYSTEM_FONT[:5])
        fb.draw_sprite(60, 30, b"\xFF\xFF\xFF\xFF")
        fb.clear()
        snapshot = fb.snapshot()
        self.assertEqual(64 * 32, len(snapshot))
        self.assertFalse(any(snapshot))

    def test_framebuffer_draw_twice_collides(self):
        fb = self.framebuffer
        sprite = b"\xFF\x81\x81\x81\xFF"  # 8x5
        self.assertFalse(fb.draw_sprite(8, 4, sprite))
        self.assertEqual(1, fb.get_pixel(8, 4))
        self.assertEqual(1, fb.get_pixel(15, 8))
        self.assertEqual(0, fb.get_pixel(9, 5))
        self.assertTrue(fb.draw_sprite(8, 4, sprite))
        self.assertFalse(any(fb.snapshot()))

    def test_framebuffer_no_collision_on_empty_pixels(self):
        fb = self.framebuffer
        fb.draw_sprite(0, 0, b"\xF0")
        self.assertFalse(fb.draw_sprite(0, 0, b"\x0F"))
        self.assertEqual(1, fb.get_pixel(0, 0))
        self.assertEqual(1, fb.get_pixel(7, 0))

    def test_framebuffer_sprite_wraps(self):
        fb = self.framebuffer
        fb.draw_sprite(62, 31, b"\xC0\xC0")
        self.assertEqual(1, fb.get_pixel(62, 31))
        self.assertEqual(1, fb.get_pixel(63, 31))
        self.assertEqual(1, fb.get_pixel(62, 0))
        self.assertEqual(1, fb.get_pixel(63, 0))

        # The sprite's origin wraps too
        fb.clear()
        fb.draw_sprite(64 + 3, 32 + 2, b"\x80")
        self.assertEqual(1, fb.get_pixel(3, 2))

    def test_framebuffer_sprite_clips(self):
        fb = Framebuffer(allow_wrapping=False)
        fb.draw_sprite(62, 31, b"\xF0\xF0")
        self.assertEqual(2, sum(fb.snapshot()))
        self.assertEqual(1, fb.get_pixel(62, 31))
        self.assertEqual(1, fb.get_pixel(63, 31))

    def test_framebuffer_snapshot_read_only(self):
        snapshot = self.framebuffer.snapshot()
        self.assertTrue(snapshot.readonly)

        with self.assertRaises(TypeError):
            snapshot[0] = 1

    def test_framebuffer_dirty_flag(self):
        fb = self.framebuffer
        self.assertTrue(fb.dirty)
        fb.mark_clean()
        self.assertFalse(fb.dirty)
        fb.draw_sprite(0, 0, b"\x00")  # Nothing set, so nothing changed
        self.assertFalse(fb.dirty)
        fb.draw_sprite(0, 0, b"\x80")
        self.assertTrue(fb.dirty)
        fb.mark_clean()
        fb.clear()
        self.assertTrue(fb.dirty)
