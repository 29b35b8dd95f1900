#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import io
import os
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pchip import main, select_plugins
from pchip.constants import DEFAULT_KEYMAP, DEFAULT_PALETTE, EXIT_OK, EXIT_USAGE, EXIT_FAULT
from pchip.inputs.i_null import Inputs
from pchip.renderers.r_null import Renderer
from pchip.audio.a_null import Audio
from plainchip import parse_args


class TestMain(unittest.TestCase):
    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.stdout = io.StringIO()
        self.stderr = io.StringIO()

    def tearDown(self):
        self.temp_dir.cleanup()

    def _write_rom(self, data):
        filename = os.path.join(self.temp_dir.name, "test.ch8")

        with open(filename, "wb") as f:
            f.write(data)

        return filename

    def _args(self, filename, **options):
        args = {
            "filename": filename,
            "cycles": None,
            "renderer": "null",
            "scale": None,
            "mute": 1,
            "keymap": DEFAULT_KEYMAP,
            "palette": DEFAULT_PALETTE,
            "seed": 0,
            "frames": 2,
            "shift_quirks": None,
            "load_quirks": None,
            "screen_wrap_quirks": None,
            "debug": False
        }
        args.update(options)
        return args

    def _main(self, args):
        with redirect_stdout(self.stdout), redirect_stderr(self.stderr):
            return main(args)

    def test_main_runs_rom(self):
        self.assertEqual(EXIT_OK, self._main(self._args(self._write_rom(b"\x12\x00"))))
        self.assertEqual("", self.stderr.getvalue())

    def test_main_rom_missing(self):
        self.assertEqual(EXIT_USAGE, self._main(self._args(os.path.join(self.temp_dir.name, "NoFile.ch8"))))
        self.assertIn("NoFile.ch8", self.stderr.getvalue())

    def test_main_rom_too_large(self):
        self.assertEqual(EXIT_USAGE, self._main(self._args(self._write_rom(b"\x00" * 3585))))

    def test_main_bad_keymap(self):
        args = self._args(self._write_rom(b"\x12\x00"), keymap="1,2,3")
        self.assertEqual(EXIT_USAGE, self._main(args))

    def test_main_bad_palette(self):
        args = self._args(self._write_rom(b"\x12\x00"), palette="FFFFFF")
        self.assertEqual(EXIT_USAGE, self._main(args))

    def test_main_illegal_instruction(self):
        self.assertEqual(EXIT_FAULT, self._main(self._args(self._write_rom(b"\x50\x01"))))
        self.assertIn("0x5001", self.stderr.getvalue())

    def test_main_stack_underflow(self):
        self.assertEqual(EXIT_FAULT, self._main(self._args(self._write_rom(b"\x00\xEE"))))
        self.assertIn("Stack underflow", self.stderr.getvalue())

    def test_main_stack_overflow(self):
        self.assertEqual(EXIT_FAULT, self._main(self._args(self._write_rom(b"\x22\x00"))))
        self.assertIn("Stack overflow", self.stderr.getvalue())

    def test_select_null_plugins(self):
        self.assertEqual((Inputs, Renderer, Audio), select_plugins("null", True))


class TestParseArgs(unittest.TestCase):
    def test_parse_args_defaults(self):
        args = vars(parse_args(["game.ch8"]))
        self.assertEqual("game.ch8", args["filename"])
        self.assertEqual(10, args["cycles"])
        self.assertIsNone(args["renderer"])
        self.assertIsNone(args["shift_quirks"])
        self.assertEqual(0, args["frames"])
        self.assertFalse(args["debug"])

    def test_parse_args_options(self):
        args = vars(parse_args(["game.ch8", "-c", "20", "-r", "null", "--shift_quirks", "1", "--seed", "5", "-d"]))
        self.assertEqual(20, args["cycles"])
        self.assertEqual("null", args["renderer"])
        self.assertEqual(1, args["shift_quirks"])
        self.assertEqual(5, args["seed"])
        self.assertTrue(args["debug"])

    def test_parse_args_usage_error(self):
        for argv in [], ["game.ch8", "-c", "lots"], ["game.ch8", "-r", "teletype"]:
            with redirect_stderr(io.StringIO()), self.assertRaises(SystemExit) as ctx:
                parse_args(argv)

            self.assertEqual(EXIT_USAGE, ctx.exception.code)
