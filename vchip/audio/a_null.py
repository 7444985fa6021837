#!/usr/bin/env python3

"""
Null Audio Plugin

Serves as a base class for other Audio plugins.  Can be used on its own if no
sound is required.

The buzzer is switched on (play tone) and off (stop tone) to follow the sound
timer.  enable_buzzer() may be called every frame with the same value, so
plugins must only act when the state actually changes.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"


class Audio:
    def __init__(self):
        # Buzzer should be disabled (not playing sounds) by default
        self.buzzer_enabled = False

    def enable_buzzer(self, enabled):
        # The buzzer should play sounds when the sound timer is >0
        self.buzzer_enabled = enabled

    def shutdown(self):
        self.buzzer_enabled = False
