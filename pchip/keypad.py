#!/usr/bin/env python3

"""
Keypad

Holds the up/down state of the 16 hex keys, as fed in by an input plugin (or
directly by whatever is hosting the CPU).

The Fx0A instruction needs to wait for a key to be pressed.  A key that was
already held when the wait began must not count, so the keypad only latches a
key on a 'down' edge, i.e. a change from released to pressed, and only while
armed.  The first such key wins until it is collected.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import NUM_KEYS


class KeypadError(Exception):
    pass


class Keypad:
    def __init__(self):
        self.key_down = [False] * NUM_KEYS
        self.awaiting_keypress = False
        self.last_keypress = None

    def _check_key(self, key):
        if not 0 <= key < NUM_KEYS:
            raise KeypadError("Key 0x{:x} is outside the keypad".format(key))

    def set_key(self, key, pressed):
        self._check_key(key)
        pressed = bool(pressed)

        if pressed and not self.key_down[key] and self.awaiting_keypress and self.last_keypress is None:
            self.last_keypress = key

        self.key_down[key] = pressed

    def is_key_down(self, key):
        # Programs may ask about any register value, so only the low nibble picks the key
        return self.key_down[key & 0xF]

    def begin_wait(self):
        self.awaiting_keypress = True
        self.last_keypress = None

    def take_keypress(self):
        # Returns the latched key and disarms, or None if nothing has been pressed yet
        key = self.last_keypress

        if key is not None:
            self.awaiting_keypress = False
            self.last_keypress = None

        return key

    def clear(self):
        self.key_down = [False] * NUM_KEYS
        self.awaiting_keypress = False
        self.last_keypress = None
