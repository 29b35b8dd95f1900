#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import unittest
from pchip.constants import DEFAULT_KEYMAP
from pchip.inputs.i_null import Inputs, InputsError
from pchip.renderers.r_null import Renderer


class TestInputs(unittest.TestCase):
    def setUp(self):
        self.inputs = Inputs(DEFAULT_KEYMAP, Renderer())

    def test_inputs_default_keymap(self):
        keymap_dict = self.inputs.keymap_dict
        self.assertEqual(0x0, keymap_dict[ord("x")])
        self.assertEqual(0x1, keymap_dict[ord("1")])
        self.assertEqual(0xC, keymap_dict[ord("4")])
        self.assertEqual(0xD, keymap_dict[ord("r")])
        self.assertEqual(0xE, keymap_dict[ord("f")])
        self.assertEqual(0xF, keymap_dict[ord("v")])

    def test_inputs_bad_keymaps(self):
        renderer = Renderer()
        self.assertRaises(InputsError, Inputs, "1,2,3", renderer)
        self.assertRaises(InputsError, Inputs, ",".join(["a"] * 16), renderer)
        self.assertRaises(InputsError, Inputs, ",".join(["49"] * 16), renderer)

    def test_inputs_press_release(self):
        self.inputs.press(0x5)
        self.assertTrue(self.inputs.is_key_down(0x5))
        self.inputs.release(0x5)
        self.assertFalse(self.inputs.is_key_down(0x5))

    def test_inputs_first_keypress_kept(self):
        inputs = self.inputs
        inputs.setup_keypress()
        self.assertIsNone(inputs.get_keypress())
        inputs.press(0x3)
        inputs.press(0x7)
        self.assertEqual(0x3, inputs.get_keypress())

    def test_inputs_held_key_is_not_a_new_keypress(self):
        inputs = self.inputs
        inputs.press(0x3)
        inputs.setup_keypress()
        inputs.press(0x3)  # Still held, so no transition
        self.assertIsNone(inputs.get_keypress())
        inputs.release(0x3)
        inputs.press(0x3)
        self.assertEqual(0x3, inputs.get_keypress())

    def test_inputs_null_is_not_interactive(self):
        self.assertFalse(self.inputs.interactive)
        self.assertFalse(self.inputs.process_messages())
