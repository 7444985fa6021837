#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import unittest
from vchip.stack import Stack, StackError, StackOverflowError, StackUnderflowError


class TestStack(unittest.TestCase):
    def setUp(self):
        self.stack = Stack(3)

    def _populate_stack(self):
        self.stack.push(0x0)
        self.stack.push(0x1)
        self.stack.push(0xFFF)

    def test_stack_default_depth(self):
        self.assertEqual(16, Stack().size)

    def test_stack_push_pop(self):
        self._populate_stack()
        self.assertEqual(3, self.stack.sp)
        self.assertEqual(0xFFF, self.stack.pop())
        self.assertEqual(0x1, self.stack.pop())
        self.assertEqual(0x0, self.stack.pop())
        self.assertEqual(0, self.stack.sp)

    def test_stack_overflow(self):
        self._populate_stack()
        self.assertRaises(StackOverflowError, self.stack.push, 0x1)

    def test_stack_underflow(self):
        self.assertRaises(StackUnderflowError, self.stack.pop)

    def test_stack_errors_share_base(self):
        self.assertTrue(issubclass(StackOverflowError, StackError))
        self.assertTrue(issubclass(StackUnderflowError, StackError))

    def test_stack_clear(self):
        self._populate_stack()
        self.stack.clear()
        self.assertEqual([], self.stack.get_items())
