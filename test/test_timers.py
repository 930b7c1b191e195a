#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import unittest
from pchip.timers import Timers


class TestTimers(unittest.TestCase):
    def setUp(self):
        self.timers = Timers()

    def test_timers_init(self):
        self.assertEqual((0, 0), (self.timers.dt, self.timers.st))
        self.assertFalse(self.timers.sound_active())

    def test_timers_tick_floor(self):
        self.timers.set_delay(2)
        self.timers.set_sound(1)
        self.timers.tick()
        self.assertEqual((1, 0), (self.timers.dt, self.timers.st))
        self.timers.tick()
        self.timers.tick()
        self.assertEqual((0, 0), (self.timers.dt, self.timers.st))

    def test_timers_sound_active(self):
        self.timers.set_sound(2)
        self.assertTrue(self.timers.sound_active())
        self.timers.tick()
        self.assertTrue(self.timers.sound_active())
        self.timers.tick()
        self.assertFalse(self.timers.sound_active())

    def test_timers_sixty_ticks(self):
        self.timers.set_delay(60)

        for _ in range(60):
            self.timers.tick()

        self.assertEqual(0, self.timers.dt)

    def test_timers_clear(self):
        self.timers.set_delay(5)
        self.timers.set_sound(5)
        self.timers.clear()
        self.assertEqual((0, 0), (self.timers.dt, self.timers.st))
