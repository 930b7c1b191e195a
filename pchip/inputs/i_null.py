#!/usr/bin/env python3

"""
Null Input Plugin

Serves as a base class for other Input plugins.  Can be used on its own if zero
input functionality is required.

Input plugins translate host keys into the 16 hex keys, using a keymap of 16
comma-separated host key codes (for keys 0 to F, in that order), and pass
every press and release straight on to the CPU.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from ..constants import NUM_KEYS


class InputsError(Exception):
    pass


class Inputs:
    def __init__(self, keymap, cpu):
        self.keymap_dict = {}
        self.cpu = cpu
        keymap_split = keymap.split(",")

        if len(keymap_split) != NUM_KEYS:
            raise InputsError("Incorrect number of keys defined -- 16 required.  Use commas to split numbers")

        for key_num, key_defined in enumerate(keymap_split):
            try:
                key_defined_ord = int(key_defined)
            except ValueError:
                raise InputsError("Defined keys are not all integer values") from None

            if key_defined_ord in self.keymap_dict:
                raise InputsError("Duplicate keys defined")

            self.keymap_dict[key_defined_ord] = key_num

    def host_key_event(self, host_key, pressed):
        # Returns True if the host key is mapped to the keypad
        hex_key = self.keymap_dict.get(host_key)

        if hex_key is None:
            return False

        self.cpu.set_key(hex_key, pressed)
        return True

    def process_messages(self):
        return False  # Don't exit the program

    def shutdown(self):
        pass
