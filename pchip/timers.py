#!/usr/bin/env python3

"""
Delay and Sound Timers

Both timers count down towards zero at 60Hz, and stop there.  They are not
connected to the instruction clock at all: the host calls tick() at its own
60Hz cadence, however many instructions were executed in between, and even
while the CPU is waiting for a keypress.

The sound timer doesn't make any noise itself.  While it is above zero the
buzzer should be on, and sound_active() tells the host's audio plugin so.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"


class Timers:
    def __init__(self):
        self.dt = 0  # Delay timer
        self.st = 0  # Sound timer

    def tick(self):
        if self.dt > 0:
            self.dt -= 1

        if self.st > 0:
            self.st -= 1

    def set_delay(self, value):
        self.dt = value & 0xFF

    def set_sound(self, value):
        self.st = value & 0xFF

    def sound_active(self):
        return self.st > 0

    def clear(self):
        self.dt = 0
        self.st = 0
