#!/usr/bin/env python3

"""
Curses Renderer Plugin

Used by a Framebuffer object to draw the screen.  This draws graphics in a
standard Linux-style TTY Terminal, the Windows Command Prompt, or PowerShell.

Each lit pixel is drawn as inverted spaces, stretched horizontally by the
scale so the screen keeps roughly the right shape.  The top line of the pad
holds the title bar.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import curses
from .r_null import Renderer as RendererBase
from ..hostio import HostUnavailable


class Renderer(RendererBase):
    def __init__(self, scale=None, palette=None, **kwargs):
        if scale is None:
            scale = 2  # Default horizontal stretch if not supplied, or set to default

        self.pixel_char = " " * scale
        self.pad = None
        self.last_screen_height = -1
        self.last_screen_width = -1

        try:
            self.screen = curses.initscr()
        except curses.error as err:
            raise HostUnavailable("Unable to start Curses: {}".format(err)) from err

        try:
            curses.curs_set(0)
        except curses.error:
            pass  # Not every terminal can hide the cursor

        curses.noecho()
        curses.cbreak()
        super().__init__(scale, palette)

    def set_resolution(self, width, height):
        # We have to allow one extra character, presumably for the cursor, otherwise we can't write the furthest
        # bottom-right pixel.  The extra line at the top is for the title.
        self.pad = curses.newpad(height + 2, width * self.scale + 1)
        super().set_resolution(width, height)

    def refresh_display(self, pixels, content_changed=False):
        screen_height, screen_width = self.screen.getmaxyx()
        width = self.width

        if content_changed:
            for location, pixel in enumerate(pixels):
                y, x = divmod(location, width)
                self.pad.addstr(y + 1, x * self.scale, self.pixel_char, curses.A_REVERSE if pixel else curses.A_NORMAL)

        if screen_height != self.last_screen_height or screen_width != self.last_screen_width:
            # Screen resolution changed, redraw everything
            self.screen.clear()

            if hasattr(curses, "resizeterm"):
                # This doesn't work on Windows
                curses.resizeterm(screen_height, screen_width)

            self.screen.refresh()
            self.last_screen_height = screen_height
            self.last_screen_width = screen_width
            content_changed = True

        if content_changed:
            try:
                self.pad.refresh(0, 0, 0, 0, screen_height - 1, screen_width - 1)
            except curses.error as err:
                raise HostUnavailable("Unable to draw to the terminal: {}".format(err)) from err

        super().refresh_display(pixels, content_changed)

    def set_title(self, title):
        if self.pad:
            title_width = self.width * self.scale
            self.pad.addstr(0, 0, title[:title_width].ljust(title_width), curses.A_REVERSE)

        super().set_title(title)

    def shutdown(self):
        curses.nocbreak()
        curses.echo()

        try:
            curses.curs_set(1)
        except curses.error:
            pass

        curses.endwin()
        super().shutdown()

    # No Superclass for this Curses-specific method

    def get_curses_screen(self):
        return self.screen
