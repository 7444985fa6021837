#!/usr/bin/env python3

"""
Keypad State

Holds which of the 16 hexadecimal keys are currently held.  The state is
replaced wholesale once per frame with whatever the host input plugin reports,
so nothing persists beyond the current frame.

Waiting for a keypress (Fx0A) needs a fresh press rather than a held key,
otherwise a key held down from a previous prompt would immediately satisfy the
next one.  setup_keypress() remembers which keys are already held, and those
are ignored by get_keypress() until they have been released.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import NUM_KEYS


class KeypadError(Exception):
    pass


class Keypad:
    def __init__(self):
        self.pressed = frozenset()
        self.stale_keys = set()

    def set_pressed(self, keys):
        pressed = frozenset(keys)

        for key in pressed:
            if not 0 <= key < NUM_KEYS:
                raise KeypadError("Key 0x{:x} is outside the keypad range".format(key))

        self.pressed = pressed
        # Once a held key has been let go, a new press of it counts again
        self.stale_keys &= pressed

    def get_pressed(self):
        return self.pressed

    def is_down(self, key):
        return key in self.pressed

    def any_pressed(self):
        return min(self.pressed) if self.pressed else None

    def setup_keypress(self):
        self.stale_keys = set(self.pressed)

    def get_keypress(self):
        fresh_keys = self.pressed - self.stale_keys
        return min(fresh_keys) if fresh_keys else None

    def reset(self):
        self.pressed = frozenset()
        self.stale_keys = set()
