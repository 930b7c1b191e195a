#!/usr/bin/env python3

"""
Null Renderer Plugin

This serves as a base class for other rendering plugins.

It can also be used on its own if no display is wanted, such as when running
headless, or when only the debug output is of interest.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"


class RendererError(Exception):
    pass


class Renderer:
    def __init__(self, scale=None, **kwargs):  # pylint: disable=unused-argument
        self.scale = 1 if scale is None else scale
        self.frames_drawn = 0
        self.title = ""
        self.set_resolution(0, 0)

    def set_resolution(self, width, height):
        self.width = width
        self.height = height

    def draw_frame(self, pixels):  # pylint: disable=unused-argument
        # Pixels arrive as a tuple of rows, each a tuple of booleans
        self.frames_drawn += 1

    def refresh_display(self, content_changed=False):
        pass

    def set_title(self, title):
        self.title = title

    def shutdown(self):
        pass
