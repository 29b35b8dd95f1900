#!/usr/bin/env python3

"""
Host I/O Functionality

Handles loading ROM binaries for later writing into RAM, and defines the error
raised when one of the host's services (display, input, audio, or clock) can't
be used.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import logging
from .constants import MAX_ROM_SIZE

logger = logging.getLogger(__name__)


class LoaderError(Exception):
    pass


class RomIoError(LoaderError):
    pass


class RomTooLarge(LoaderError):
    pass


class HostUnavailable(Exception):
    pass


class Loader:
    def __init__(self, max_rom_size=MAX_ROM_SIZE):
        self.max_rom_size = max_rom_size

    def load_binary(self, filename):
        try:
            with open(filename, "rb") as f:
                return f.read()
        except OSError as err:
            raise RomIoError("Unable to read '{}': {}".format(filename, err.strerror or err)) from err

    def load_rom(self, filename):
        data = self.load_binary(filename)
        rom_size = len(data)

        if rom_size > self.max_rom_size:
            raise RomTooLarge(
                "ROM '{}' is {} bytes, but at most {} bytes can be loaded.".format(
                    filename, rom_size, self.max_rom_size
                )
            )

        logger.debug("Loaded %d byte ROM from '%s'", rom_size, filename)
        return data
