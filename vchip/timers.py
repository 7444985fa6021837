#!/usr/bin/env python3

"""
Timer Subsystem

Two independent countdown counters, delay and sound.  Both are decremented
once per frame (60Hz of wall-clock time), no matter how many instructions the
CPU managed to run during that frame.  Whoever drives the emulation is
responsible for calling tick() at that cadence.

The buzzer should sound whenever the sound timer is above zero.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"


class Timers:
    def __init__(self):
        self.delay = 0
        self.sound = 0

    def reset(self):
        self.delay = 0
        self.sound = 0

    def set_delay(self, value):
        self.delay = value & 0xFF

    def set_sound(self, value):
        self.sound = value & 0xFF

    def tick(self):
        # Returns True only on the tick where the sound timer runs out, so the buzzer can be stopped
        if self.delay > 0:
            self.delay -= 1

        if self.sound > 0:
            self.sound -= 1
            return self.sound == 0

        return False

    def is_sound_active(self):
        return self.sound > 0
