#!/usr/bin/env python3

"""
Null Input Plugin

Serves as a base class for other Input plugins.  Can be used on its own if zero
input functionality is required, or driven directly by calling 'press' and
'release', which is how the tests simulate a keyboard.

The CPU only ever sees the 16 key states, plus the first key to go down since
it last called 'setup_keypress'.  Mapping host keys to those 16 is handled
here.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"


class InputsError(Exception):
    pass


class Inputs:
    interactive = False  # Can a user actually press anything?

    def __init__(self, keymap, renderer, force_lowercase=False):
        self.keymap_dict = {}
        self.renderer = renderer
        self.key_down = [False] * 0x10
        keymap_split = keymap.split(",")

        if len(keymap_split) != 0x10:
            raise InputsError("Incorrect number of keys defined -- 16 required.  Use commas to split numbers")

        for key_num, key_defined in enumerate(keymap_split):
            try:
                key_defined_ord = int(key_defined)
            except ValueError:
                raise InputsError("Defined keys are not all integer values") from None

            if force_lowercase:
                # If we are working with characters rather than keyscan codes, we should convert to lowercase
                key_defined_ord = ord(chr(key_defined_ord).lower())

            if key_defined_ord in self.keymap_dict:
                raise InputsError("Duplicate keys defined")

            self.keymap_dict[key_defined_ord] = key_num

        self.last_keypress = None

    def process_messages(self):
        return False  # Don't exit the program

    def press(self, key):
        if not self.key_down[key]:
            self.key_down[key] = True

            # Only the first key to go down is remembered, until the next reset
            if self.last_keypress is None:
                self.last_keypress = key

    def release(self, key):
        self.key_down[key] = False

    def is_key_down(self, key):
        return self.key_down[key]

    def setup_keypress(self):
        self.last_keypress = None

    def get_keypress(self):
        return self.last_keypress

    def shutdown(self):
        pass
