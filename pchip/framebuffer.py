#!/usr/bin/env python3

"""
Framebuffer Emulator

Pixels are written here, and are only handed to the actual display (the host
rendering system) once per 60Hz frame.  The grid is the single source of truth
for what is on screen; renderers only ever get a read-only view of it.

Programs for this system cannot write directly into video RAM.  The only ways
to change the screen are to clear it, or to draw sprites with XOR.  Each
sprite row is one byte, most significant bit leftmost.

Collisions (where any pixel was set, but was unset by an XOR) are reported
back to the caller once the whole sprite has been drawn.

The sprite's starting position always wraps around the screen.  By default,
the parts of a sprite which run off the right or bottom edges also wrap.
Original COSMAC VIP behaviour (clipping those parts instead) can be selected
with 'allow_wrapping=False'.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import APP_NAME, VID_WIDTH, VID_HEIGHT


class Framebuffer:
    def __init__(self, renderer, allow_wrapping=True, vid_width=VID_WIDTH, vid_height=VID_HEIGHT):
        self.renderer = renderer
        self.allow_wrapping = allow_wrapping
        self.vid_width = vid_width
        self.vid_height = vid_height
        self.vid_size = vid_width * vid_height
        self.pixels = memoryview(bytearray(self.vid_size))  # One byte per pixel, always 0 or 1
        self.content_changed = True
        self.renderer.set_resolution(vid_width, vid_height)
        self.report_perf()

    def clear(self):
        self.pixels[:] = bytes(self.vid_size)
        self.content_changed = True

    def xor_pixel(self, x, y):
        # Returns True if a lit pixel was switched off, False if not, or None if the pixel was clipped

        if self.allow_wrapping:
            x %= self.vid_width
            y %= self.vid_height
        elif x >= self.vid_width or y >= self.vid_height:
            return None

        vram_loc = y * self.vid_width + x
        pixel = self.pixels[vram_loc]
        self.pixels[vram_loc] = pixel ^ 1
        self.content_changed = True

        return pixel == 1

    def draw(self, x, y, sprite_rows):
        x %= self.vid_width
        y %= self.vid_height
        collided = False

        for row_num, row in enumerate(sprite_rows):
            for col_num in range(8):
                # Unlit sprite pixels leave the screen untouched, so only lit ones need XORing
                if row & (0x80 >> col_num) and self.xor_pixel(x + col_num, y + row_num):
                    # Don't stop drawing.  Set the flag, and never unset it for this sprite.
                    collided = True

        return int(collided)

    def get_pixel(self, x, y):
        return self.pixels[y * self.vid_width + x]

    def get_rows(self):
        vid_width = self.vid_width
        return [list(self.pixels[y * vid_width:(y + 1) * vid_width]) for y in range(self.vid_height)]

    def get_vid_size(self):
        return self.vid_width, self.vid_height

    def refresh_display(self):
        # Present the grid.  Renderers can skip the (slow) redraw if nothing changed since the last frame.
        self.renderer.refresh_display(self.pixels.toreadonly(), self.content_changed)
        self.content_changed = False

    def report_perf(self, fps=0, ops=0):
        title = "{} - {} FPS, {} OPS".format(APP_NAME, fps, ops)
        self.renderer.set_title(title)
