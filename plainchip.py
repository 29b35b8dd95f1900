#!/usr/bin/env python3

__author__ = "Gregory Maynard-Hoare"
__copyright__ = "Copyright (C) 2024 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"
__version__ = "1.0.0"

import logging
import sys
from argparse import ArgumentParser
from pchip import main
from pchip.constants import CPU_QUIRKS, DEFAULT_CYCLES_PER_FRAME, DEFAULT_KEYMAP, DEFAULT_PALETTE, EXIT_USAGE


class UsageArgumentParser(ArgumentParser):
    def error(self, message):
        # Usage errors share an exit code with ROM loading failures
        self.print_usage(sys.stderr)
        self.exit(EXIT_USAGE, "{}: error: {}\n".format(self.prog, message))


def parse_args(argv=None):
    parser = UsageArgumentParser()
    parser.add_argument("filename", help="ROM to execute (normally ending in .ch8 or .c8)")
    parser.add_argument(
        "-c", "--cycles", type=int, default=DEFAULT_CYCLES_PER_FRAME,
        help="set the number of instructions executed every 60Hz frame (default {})".format(DEFAULT_CYCLES_PER_FRAME)
    )
    parser.add_argument(
        "-r", "--renderer", choices=["pygame", "curses", "null"],
        help="set the rendering, input, and audio systems (pygame by default if available, otherwise curses)"
    )
    parser.add_argument(
        "-s", "--scale", type=int,
        help="set the window width in PyGame mode (default 640), and scale in Curses mode (default 2)"
    )
    parser.add_argument(
        "-m", "--mute", type=int, choices=[0, 1], default=0,
        help="mute the emulated audio.  0 = unmuted (default), 1 = muted"
    )
    parser.add_argument(
        "-k", "--keymap", default=DEFAULT_KEYMAP,
        help="redefine the 16 keyscan codes (PyGame) or character numbers (Curses).  Separate each decimal with a comma"
    )
    parser.add_argument(
        "--palette", default=DEFAULT_PALETTE,
        help="redefine the background and foreground colours in comma-separated hex (default {})".format(
            DEFAULT_PALETTE
        )
    )
    parser.add_argument("--seed", type=int, help="seed the random number generator, for repeatable runs")
    parser.add_argument(
        "--frames", type=int, default=0,
        help="quit after this many 60Hz frames (default 0 = run until quit)"
    )

    for sys_quirk in CPU_QUIRKS + ["screen_wrap"]:
        parser.add_argument(
            "--{}_quirks".format(sys_quirk), type=int, choices=[0, 1],
            help="manually disable or enable {} quirks".format(sys_quirk.replace("_", " "))
        )

    parser.add_argument(
        "-d", "--debug", action="store_true", default=False,
        help="enable live debug output and verbose logging.  Slows CPU execution"
    )
    return parser.parse_args(argv)  # Calls sys.exit(1) if args are incorrect


def run(argv=None):
    args = vars(parse_args(argv))
    logging.basicConfig(
        format="%(levelname)s: %(name)s: %(message)s", level=logging.DEBUG if args["debug"] else logging.WARNING
    )
    # It is possible to start the emulator from a GUI by calling main with a dictionary
    sys.exit(main(args))


if __name__ == "__main__":
    run()
