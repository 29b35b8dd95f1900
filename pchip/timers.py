#!/usr/bin/env python3

"""
Delay and Sound Timers

Both timers are 8-bit counters which count down towards zero once per 60Hz
frame, no matter how many instructions ran during that frame.  Programs poll
the delay timer, and the sound timer sounds the buzzer for as long as it is
non-zero.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"


class Timer:
    def __init__(self):
        self.value = 0

    def set(self, value):
        self.value = value & 0xFF

    def read(self):
        return self.value

    def tick(self):
        if self.value > 0:
            self.value -= 1


class SoundTimer(Timer):
    def is_active(self):
        # The host should keep the tone playing while this is True
        return self.value > 0
