#!/usr/bin/env python3

"""
RAM Emulator

A flat 4K address space.  Programs can only form 12-bit addresses, so byte
reads and writes from the CPU wrap around the top of memory rather than
failing.  Block writes are only performed by the host (font and ROM loading),
and those are checked so a bad load can't silently wrap over the font.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import MEM_SIZE


class RAMError(Exception):
    pass


class RAM:
    def __init__(self, mem_size=MEM_SIZE):
        self.mem = memoryview(bytearray(mem_size))
        self.mem_top = mem_size - 1
        self.mem_size = mem_size
        # Address wrapping relies on the size being a power of two
        self.addr_mask = mem_size - 1

    def read(self, location):
        return self.mem[location & self.addr_mask]

    def read_block(self, location, size=1):
        addr_mask = self.addr_mask
        return bytes(self.mem[(location + offset) & addr_mask] for offset in range(size))

    def write(self, location, byte):
        self.mem[location & self.addr_mask] = byte & 0xFF

    def write_block(self, location, block):
        block_size = len(block)
        block_top = location + block_size
        self.check_overflow(block_top - 1)
        self.mem[location:block_top] = block

    def check_overflow(self, location):
        if location > self.mem_top:
            raise RAMError("Memory overflow")

    def clear(self):
        self.mem[:] = bytes(self.mem_size)
