#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import unittest
from pchip.ram import RAM, RAMError


class TestRAM(unittest.TestCase):
    def setUp(self):
        self.ram = RAM(8)

    def test_ram_init(self):
        self.assertEqual(0x1000, RAM().mem_size)
        self.assertEqual("0000000000000000", self.ram.mem.hex())

    def test_ram_write(self):
        self.ram.write(1, 255)
        self.assertEqual("00ff000000000000", self.ram.mem.hex())

    def test_ram_write_masks_byte(self):
        self.ram.write(0, 0x1FE)
        self.assertEqual(0xFE, self.ram.read(0))

    def test_ram_address_wrap(self):
        self.ram.write(9, 0xAB)  # Wraps to 1
        self.assertEqual(0xAB, self.ram.read(1))
        self.assertEqual(0xAB, self.ram.read(17))

    def test_ram_read_block_wrap(self):
        self.ram.write(7, 0x12)
        self.ram.write(0, 0x34)
        self.assertEqual(b"\x12\x34", self.ram.read_block(7, 2))

    def test_ram_write_block(self):
        self.ram.write_block(1, bytearray(b"\xFD\xFE"))
        self.ram.write_block(7, bytearray(b"\xFF"))
        self.assertEqual("00fdfe00000000ff", self.ram.mem.hex())

    def test_ram_block_overflow(self):
        self.assertRaises(RAMError, self.ram.write_block, 7, bytearray(b"\xFE\xFF"))

    def test_ram_clear(self):
        self.ram.write_block(1, bytearray(b"\xFD\xFE"))
        self.ram.clear()
        self.assertEqual("0000000000000000", self.ram.mem.hex())
