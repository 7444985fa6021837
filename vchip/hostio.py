#!/usr/bin/env python3

"""
Host I/O Functionality

Handles loading program images for later writing into RAM.  Images are raw
big-endian binaries with no header, so all we can check is that they fit into
the program area.

Save states are not supported.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import MEM_SIZE, PROGRAM_START

MAX_PROGRAM_SIZE = MEM_SIZE - PROGRAM_START


class LoaderError(Exception):
    pass


class Loader:
    def load_binary(self, source):
        # Accepts either a filename or the raw image itself
        if isinstance(source, (bytes, bytearray, memoryview)):
            data = bytes(source)
        else:
            with open(source, "rb") as f:
                data = f.read()

        if len(data) > MAX_PROGRAM_SIZE:
            raise LoaderError(
                "Program is {} bytes long, but only {} bytes are available".format(len(data), MAX_PROGRAM_SIZE)
            )

        return data
