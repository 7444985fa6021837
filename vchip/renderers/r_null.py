#!/usr/bin/env python3

"""
Null Renderer Plugin

This serves as a base class for other rendering plugins.

This module can be used on its own as a Renderer plugin if you don't want to
see anything.  Without a renderer, performance data will also not be shown.

Renderers are handed a read-only snapshot of video RAM once per frame (one byte
per pixel, row-major, 0 = off).  They must never write back into it.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"


class RendererError(Exception):
    pass


class Renderer:
    def __init__(self, scale=None, **kwargs):  # pylint: disable=unused-argument
        self.scale = 1 if scale is None else scale
        self.title = ""
        self.set_resolution(0, 0)

    def set_resolution(self, width, height):
        self.width = width
        self.height = height

    def render(self, snapshot):
        if len(snapshot) != self.width * self.height:
            raise RendererError("Snapshot size does not match the display resolution")

    def set_title(self, title):
        self.title = title

    def shutdown(self):
        pass
