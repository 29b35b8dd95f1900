#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import unittest
from pchip.constants import DEFAULT_KEYMAP
from pchip.cpu import CPU
from pchip.debugger import Debugger, format_registers
from pchip.ram import RAM
from pchip.stack import Stack
from pchip.framebuffer import Framebuffer
from pchip.renderers.r_null import Renderer
from pchip.inputs.i_null import Inputs
from pchip.audio.a_null import Audio


class TestDebugger(unittest.TestCase):
    def setUp(self):
        self.debugger = Debugger()
        renderer = Renderer()
        self.cpu = CPU(
            RAM(), Stack(), Framebuffer(renderer), Inputs(DEFAULT_KEYMAP, renderer), Audio(), self.debugger
        )

    def test_format_registers(self):
        self.assertEqual("00 01 ff", format_registers([0x00, 0x01, 0xFF]))

    def test_debugger_trace_line(self):
        cpu = self.cpu
        cpu.v[0x0] = 0xAB
        cpu.i = 0x123
        cpu.opcode = 0x6042
        debug_str = self.debugger.debug(cpu, "LD V0, 0x42")
        self.assertIn("PC: 0x200 OP: 0x6042 LD V0, 0x42", debug_str)
        self.assertIn("V: ab 00", debug_str)
        self.assertIn("I: 0x0123", debug_str)
        self.assertIn("SP: 0", debug_str)
        self.assertNotIn("Stack", debug_str)

    def test_debugger_verbose(self):
        cpu = self.cpu
        cpu.stack.push(0x202)
        cpu.stack.push(0x30A)
        cpu.awaiting_keypress = 0x4
        debug_str = self.debugger.debug(cpu, "???", verbose=True)
        self.assertIn("SP: 2", debug_str)
        self.assertIn("Stack: 0x202 0x30a", debug_str)
        self.assertIn("keypress into V4", debug_str)

    def test_debugger_live_switch(self):
        self.assertFalse(self.debugger.is_live())
        self.debugger.set_live(1)
        self.assertIs(True, self.debugger.is_live())
