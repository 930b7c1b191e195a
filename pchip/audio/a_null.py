#!/usr/bin/env python3

"""
Null Audio Plugin

Serves as a base class for other Audio plugins.  Can be used on its own if no
sound is required.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"


class Audio:
    def __init__(self):
        # Buzzer should be disabled (not playing sounds) by default
        self.buzzer_enabled = False

    def set_frequency(self, frequency):
        # Set the buzzer tone in Hz
        pass

    def enable_buzzer(self, enabled):
        # The buzzer should sound whenever the sound timer is above zero
        self.buzzer_enabled = enabled

    def shutdown(self):
        pass
