#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

# App identification
APP_NAME = "PlainChip Emulator"
APP_VERSION = "1.0.0"
APP_COPYRIGHT = "Copyright (C) 2022 Gregory Maynard-Hoare, licensed under GNU Affero General Public License v3.0"
APP_INTRO = "{} V{} -- ".format(APP_NAME, APP_VERSION)

# Memory layout
MEM_SIZE = 0x1000
FONT_LOC = 0x000
PROGRAM_LOC = 0x200
MAX_ROM_SIZE = MEM_SIZE - PROGRAM_LOC

# Display and timing
VID_WIDTH = 64
VID_HEIGHT = 32
FRAME_FREQ = 60.0  # Timers, input polling and display all run at 60Hz
FRAME_INTERVAL = 1.0 / FRAME_FREQ
DEFAULT_CYCLES_PER_FRAME = 10
STACK_SIZE = 16

# Default mappings for keys 0-F, later populated into a dictionary.  Note that the keyscans (on a UK QWERTY keyboard)
# and ASCII characters for these are the same code.  In key order: X 1 2 3 Q W E A S D Z C 4 R F V
DEFAULT_KEYMAP = "120,49,50,51,113,119,101,97,115,100,122,99,52,114,102,118"

# Background, foreground
DEFAULT_PALETTE = "000032,FFFFFF"

# CPU quirks (not including display wrapping)
CPU_QUIRKS = ["shift", "load"]

# Built-in hex font, 5 rows per glyph 0-F.  Written to FONT_LOC on reset.
SYSTEM_FONT = bytes((
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80   # F
))
FONT_GLYPH_SIZE = 5

# Process exit codes
EXIT_OK = 0
EXIT_USAGE = 1  # Bad arguments, or the ROM couldn't be loaded
EXIT_FAULT = 2  # The emulated machine crashed, or the host couldn't support it
