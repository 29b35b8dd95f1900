#!/usr/bin/env python3

"""
PyGame Audio Plugin

Plays the buzzer within PyGame / SDL.

The original buzzer simply has an 'on' or 'off' status, so a square wave is
built once at startup and looped for as long as the buzzer is enabled.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import pygame
from .a_null import Audio as AudioBase
from ..hostio import HostUnavailable

PLAYBACK_FREQUENCY = 44100
BEEP_FREQUENCY = 440.0
DEFAULT_VOLUME = 0.1

def build_square_wave(frequency, playback_frequency=PLAYBACK_FREQUENCY):
    # One full cycle of unsigned 8-bit samples: high for the first half, low for the second
    cycle_length = max(2, int(round(playback_frequency / frequency)))
    half_length = cycle_length // 2
    return bytes([0xFF] * half_length + [0x00] * (cycle_length - half_length))

class Audio(AudioBase):
    def __init__(self, frequency=BEEP_FREQUENCY):
        super().__init__()

        try:
            pygame.mixer.pre_init(PLAYBACK_FREQUENCY, size=8, channels=1, buffer=512, allowedchanges=0)
            pygame.mixer.init()
            self.sound = pygame.mixer.Sound(buffer=build_square_wave(frequency))
        except pygame.error as err:
            raise HostUnavailable("Unable to start PyGame audio: {}".format(err)) from err

        self.sound.set_volume(DEFAULT_VOLUME)

    def enable_buzzer(self, enabled):
        # If the buzzer is already in the requested state, nothing happens, so this is safe to call every frame
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
