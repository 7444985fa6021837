#!/usr/bin/env python3

"""
PyGame Audio Plugin

Plays the buzzer within PyGame / SDL.

The emulated buzzer is simply 'on' or 'off', so a single-pitched square wave is
built once at startup and looped for as long as the buzzer is enabled.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import pygame
from .a_null import Audio as AudioBase

PLAYBACK_FREQUENCY = 44100
TONE_FREQUENCY = 440.0
DEFAULT_VOLUME = 0.1


class Audio(AudioBase):
    def __init__(self):
        pygame.mixer.pre_init(PLAYBACK_FREQUENCY, size=8, channels=1, buffer=512, allowedchanges=0)
        pygame.mixer.init()

        # One full cycle of the wave, high for the first half and low for the second (unsigned 8-bit samples)
        cycle_size = int(PLAYBACK_FREQUENCY / TONE_FREQUENCY)
        half_cycle = cycle_size // 2
        cycle = b"\xFF" * half_cycle + b"\x00" * (cycle_size - half_cycle)

        self.sound = pygame.mixer.Sound(buffer=cycle * 100)
        self.sound.set_volume(DEFAULT_VOLUME)
        super().__init__()

    def enable_buzzer(self, enabled):
        # If the sound is already playing, it won't be restarted
        if enabled:
            if not self.buzzer_enabled:
                self.sound.play(-1)
        elif self.buzzer_enabled:
            self.sound.stop()

        super().enable_buzzer(enabled)

    def shutdown(self):
        self.sound.stop()
        pygame.mixer.quit()
        super().shutdown()
