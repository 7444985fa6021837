#!/usr/bin/env python3

"""
RAM Emulator

Supports reading and writing of blocks of memory or individual bytes, and fast
zeroing of memory blocks.

All accesses are bounds-checked.  Programs for this system assume a well-formed
image, so touching memory that doesn't exist is treated as fatal rather than
being silently wrapped around.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"


class RAMError(Exception):
    pass


class OutOfBoundsError(RAMError):
    pass


class RAM:
    def __init__(self, mem_size=0):
        self.resize(mem_size)

    def resize(self, mem_size):
        self.mem = memoryview(bytearray(mem_size))
        self.mem_top = mem_size - 1
        self.mem_size = mem_size

    def read(self, location):
        self.check_bounds(location)
        return self.mem[location]

    def read_block(self, location, size=1):
        self.check_bounds(location)

        if size > 1:
            self.check_bounds(location + size - 1)

        return self.mem[location:location + size]

    def write(self, location, byte):
        self.check_bounds(location)
        self.mem[location] = byte

    def write_block(self, location, block):
        block_size = len(block)
        block_top = location + block_size
        self.check_bounds(location)

        if block_size > 1:
            self.check_bounds(block_top - 1)

        self.mem[location:block_top] = block

    def check_bounds(self, location):
        if location < 0 or location > self.mem_top:
            raise OutOfBoundsError("Memory access out of bounds at 0x{:04x}".format(location))

    def zero_block(self, offset, size):
        block_top = offset + size
        self.check_bounds(offset)
        self.check_bounds(block_top - 1)
        self.mem[offset:block_top] = bytes(size)

    def clear(self):
        if self.mem_size:
            self.zero_block(0, self.mem_size)
