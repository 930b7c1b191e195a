#!/usr/bin/env python3

"""
PyGame Audio Plugin

Plays the buzzer through PyGame / SDL.  The emulated machine only has an 'on'
or 'off' buzzer, so one cycle of an 8-bit square wave at the chosen tone is
built up front, and simply looped while the buzzer is on.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import pygame
from .a_null import Audio as AudioBase

PLAYBACK_FREQUENCY = 44100
DEFAULT_VOLUME = 0.1


class Audio(AudioBase):
    def __init__(self):
        self.sound = None
        self.frequency = None
        pygame.mixer.pre_init(PLAYBACK_FREQUENCY, size=8, channels=1, buffer=512, allowedchanges=0)
        pygame.mixer.init()
        super().__init__()

    def set_frequency(self, frequency):
        # Rebuilding the sample is slow, so only do it when the tone actually changes
        if frequency == self.frequency:
            return

        self.frequency = frequency
        half_period = max(1, int(PLAYBACK_FREQUENCY / frequency / 2))
        wave = bytes((0xFF,)) * half_period + bytes((0x00,)) * half_period

        if self.sound:
            self.sound.stop()

        self.sound = pygame.mixer.Sound(buffer=wave)
        self.sound.set_volume(DEFAULT_VOLUME)

        if self.buzzer_enabled:
            # If the tone is changed while the buzzer is on, carry on with the new one
            self.sound.play(-1)

    def enable_buzzer(self, enabled):
        # If a sound is already being played, it won't be restarted
        if enabled and not self.buzzer_enabled:
            self.sound.play(-1)
        elif not enabled and self.buzzer_enabled:
            self.sound.stop()

        super().enable_buzzer(enabled)

    def shutdown(self):
        if self.sound:
            self.sound.stop()

        pygame.mixer.quit()
        super().shutdown()
