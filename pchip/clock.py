#!/usr/bin/env python3

"""
Host Clock

Paces the emulator at 60 frames per second.  Python's sleep isn't accurate
enough on its own to hit frame boundaries, so we sleep for most of the wait
and then spin for the remainder.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from time import perf_counter, sleep
from .hostio import HostUnavailable

SPIN_MARGIN = 0.002  # Seconds left to busy-wait at the end of a sleep


class Clock:
    def __init__(self):
        self.last_time = perf_counter()

    def now(self):
        this_time = perf_counter()

        if this_time < self.last_time:
            raise HostUnavailable("The host clock went backwards.")

        self.last_time = this_time
        return this_time

    def sleep_until(self, target_time):
        remaining = target_time - self.now()

        if remaining > SPIN_MARGIN:
            sleep(remaining - SPIN_MARGIN)

        while self.now() < target_time:  # Unfortunately we have to do this to get the timing right
            pass
