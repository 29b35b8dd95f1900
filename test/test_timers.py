#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import unittest
from pchip.timers import Timer, SoundTimer


class TestTimers(unittest.TestCase):
    def test_timer_counts_down_to_zero(self):
        timer = Timer()
        timer.set(2)
        timer.tick()
        self.assertEqual(1, timer.read())
        timer.tick()
        self.assertEqual(0, timer.read())
        timer.tick()
        self.assertEqual(0, timer.read())

    def test_timer_masks_value(self):
        timer = Timer()
        timer.set(0x1FF)
        self.assertEqual(0xFF, timer.read())

    def test_sound_timer_active(self):
        timer = SoundTimer()
        self.assertFalse(timer.is_active())
        timer.set(1)
        self.assertTrue(timer.is_active())
        timer.tick()
        self.assertFalse(timer.is_active())
