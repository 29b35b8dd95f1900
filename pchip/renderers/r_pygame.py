#!/usr/bin/env python3

"""
PyGame Renderer Plugin

Draws graphics onto an SDL window surface via PyGame.  The surface is
allocated at the size of the CHIP-8 screen, and then the contents are
stretched (in the correct aspect ratio using 'Nearest Neighbour' translation)
to fit the window itself.  This means we don't have to draw the same pixel
multiple times.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import pygame
from .r_null import Renderer as RendererBase
from ..constants import APP_NAME
from ..hostio import HostUnavailable


class Renderer(RendererBase):
    def __init__(self, scale=None, palette=None, **kwargs):
        if scale is None:
            scale = 640  # Default window width if not supplied, or set to default

        try:
            pygame.display.init()
            self.scaled_size = (scale, scale // 2)
            self.display_surface = pygame.display.set_mode(self.scaled_size)
        except pygame.error as err:
            raise HostUnavailable("Unable to open a PyGame window: {}".format(err)) from err

        self.set_title(APP_NAME)
        self.rgb_buffer = None
        super().__init__(scale, palette)

        # Split compound RGB values for faster byte-based lookup later
        self.rgb_map = [bytes((i >> 16, (i >> 8) & 0xFF, i & 0xFF)) for i in self.colour_map]

    def set_resolution(self, width, height):
        # The base class calls this before the palette is ready, with an empty screen
        super().set_resolution(width, height)
        self.rgb_buffer = memoryview(bytearray(width * height * 3))  # 24-bit

    def refresh_display(self, pixels, content_changed=False):
        if content_changed and self.rgb_buffer:
            # Update RGB buffer in-place to minimise allocations and PyGame calls
            rgb_buffer = self.rgb_buffer
            rgb_map = self.rgb_map

            for location, pixel in enumerate(pixels):
                rgb_location = location * 3
                rgb_buffer[rgb_location:rgb_location + 3] = rgb_map[pixel]

            # Blit the bytearray straight to the surface.  This is much faster than very frequent PixelArray updates
            try:
                render_surface = pygame.image.frombuffer(rgb_buffer, (self.width, self.height), "RGB")
                scaled_win = pygame.transform.scale(render_surface, self.scaled_size)
                self.display_surface.blit(scaled_win, (0, 0))
                pygame.display.flip()
            except pygame.error as err:
                raise HostUnavailable("PyGame display is unavailable: {}".format(err)) from err

        super().refresh_display(pixels, content_changed)

    def set_title(self, title):
        pygame.display.set_caption(title)
        super().set_title(title)

    def shutdown(self):
        # PyGame currently segfaults if display.quit is called via __del__
        pygame.display.quit()
        super().shutdown()
