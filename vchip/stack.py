#!/usr/bin/env python3

"""
Stack Emulator

It is unnecessary to include the CPU call stack as part of system RAM, because
there is no specified location for it.  The stack pointer (SP) is never exposed
to the running program either, so we can simply wrap a list and report its
length as the stack pointer.

Only the call and return instructions push and pop addresses.  Overflowing or
underflowing the stack means the program is broken, so both are fatal.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import STACK_DEPTH


class StackError(Exception):
    pass


class StackOverflowError(StackError):
    pass


class StackUnderflowError(StackError):
    pass


class Stack:
    def __init__(self, size=STACK_DEPTH):
        self.items = []
        self.size = size

    @property
    def sp(self):
        return len(self.items)

    def push(self, item):
        # Fetching the stack size with 'len' should be immediate, so no slow loop
        if len(self.items) >= self.size:
            raise StackOverflowError("Stack overflow")

        self.items.append(item)

    def pop(self):
        try:
            return self.items.pop()
        except IndexError:
            raise StackUnderflowError("Stack underflow") from None

    def clear(self):
        self.items.clear()

    def get_items(self):
        # For error reports
        return self.items
