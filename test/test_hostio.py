#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import os
import tempfile
import unittest
from vchip.hostio import Loader, LoaderError, MAX_PROGRAM_SIZE


class TestLoader(unittest.TestCase):
    def setUp(self):
        self.loader = Loader()

    def test_loader_load_file_present(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            filename = os.path.join(temp_dir, "loop.ch8")

            with open(filename, "wb") as f:
                f.write(b"\x60\x05\x12\x00")

            self.assertEqual(b"\x60\x05\x12\x00", self.loader.load_binary(filename))

    def test_loader_load_bytes(self):
        self.assertEqual(b"\x00\xE0", self.loader.load_binary(bytearray(b"\x00\xE0")))

    def test_loader_load_file_missing(self):
        self.assertRaises(FileNotFoundError, self.loader.load_binary, "NoFile.ch8")

    def test_loader_too_big(self):
        self.assertEqual(0xE00, MAX_PROGRAM_SIZE)
        self.loader.load_binary(bytes(MAX_PROGRAM_SIZE))
        self.assertRaises(LoaderError, self.loader.load_binary, bytes(MAX_PROGRAM_SIZE + 1))
