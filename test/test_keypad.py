#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import unittest
from vchip.keypad import Keypad, KeypadError


class TestKeypad(unittest.TestCase):
    def setUp(self):
        self.keypad = Keypad()

    def test_keypad_initially_empty(self):
        self.assertIsNone(self.keypad.any_pressed())

        for key in range(0x10):
            self.assertFalse(self.keypad.is_down(key))

    def test_keypad_set_pressed_replaces(self):
        self.keypad.set_pressed({0x1, 0xA})
        self.assertTrue(self.keypad.is_down(0x1))
        self.assertTrue(self.keypad.is_down(0xA))
        self.keypad.set_pressed({0x2})
        self.assertFalse(self.keypad.is_down(0x1))
        self.assertTrue(self.keypad.is_down(0x2))
        self.assertEqual(frozenset({0x2}), self.keypad.get_pressed())

    def test_keypad_any_pressed_lowest(self):
        self.keypad.set_pressed({0xF, 0x3, 0x7})
        self.assertEqual(0x3, self.keypad.any_pressed())

    def test_keypad_out_of_range(self):
        self.assertRaises(KeypadError, self.keypad.set_pressed, {0x10})
        self.assertRaises(KeypadError, self.keypad.set_pressed, {-1})

    def test_keypad_keypress_ignores_held_keys(self):
        self.keypad.set_pressed({0x4})
        self.keypad.setup_keypress()
        self.assertIsNone(self.keypad.get_keypress())

        # Still held, so still ignored
        self.keypad.set_pressed({0x4})
        self.assertIsNone(self.keypad.get_keypress())

        # A different key counts straight away
        self.keypad.set_pressed({0x4, 0x9})
        self.assertEqual(0x9, self.keypad.get_keypress())

    def test_keypad_keypress_after_release(self):
        self.keypad.set_pressed({0x4})
        self.keypad.setup_keypress()
        self.keypad.set_pressed(set())
        self.assertIsNone(self.keypad.get_keypress())
        self.keypad.set_pressed({0x4})
        self.assertEqual(0x4, self.keypad.get_keypress())

    def test_keypad_reset(self):
        self.keypad.set_pressed({0x1})
        self.keypad.reset()
        self.assertIsNone(self.keypad.any_pressed())
