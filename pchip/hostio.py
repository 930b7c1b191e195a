#!/usr/bin/env python3

"""
Host I/O Functionality

Handles loading ROM binaries from the host filesystem.  Oversized ROMs are
turned away here, before any of them reaches emulated RAM.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import MAX_ROM_SIZE
from .state import ResourceError


class Loader:
    def load_binary(self, filename):
        with open(filename, "rb") as f:
            return f.read()

    def load_rom(self, filename):
        data = self.load_binary(filename)

        if len(data) > MAX_ROM_SIZE:
            raise ResourceError(
                "ROM '{}' is {} bytes, which is over the {} byte limit".format(filename, len(data), MAX_ROM_SIZE)
            )

        return data
