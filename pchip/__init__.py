#!/usr/bin/env python3

"""
Main Startup Module

Simply call main(args) to start the emulator, replacing args with a dictionary
of options.  This can be done via the Terminal or GUI.  The return value is the
process exit code.

All options must be supplied.  Defaults can be specified with a 'None'.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import logging
import sys
from .constants import APP_INTRO, APP_COPYRIGHT, CPU_QUIRKS, EXIT_OK, EXIT_USAGE, EXIT_FAULT, PROGRAM_LOC
from .cpu import CPU, CPUError
from .debugger import Debugger
from .framebuffer import Framebuffer
from .hostio import Loader, LoaderError, HostUnavailable
from .inputs.i_null import InputsError
from .ram import RAM
from .renderers.r_null import RendererError
from .stack import Stack, StackError

logger = logging.getLogger(__name__)


class StartupError(Exception):
    pass


def select_plugins(opt_renderer, mute_audio):
    # Returns the Inputs, Renderer and Audio classes for the chosen host
    auto_select_renderer = opt_renderer is None  # If necessary, try PyGame first, then Curses.

    # flake8: noqa: F401
    if auto_select_renderer or opt_renderer == "pygame":
        # pylint: disable=unused-import, import-outside-toplevel, raise-missing-from
        try:
            import pygame
        except ImportError:
            if not auto_select_renderer:
                raise StartupError("PyGame does not appear to be installed.")

            logger.info("PyGame is not installed, falling back to Curses")
            opt_renderer = "curses"
        else:
            from .inputs.i_pygame import Inputs
            from .renderers.r_pygame import Renderer

            if mute_audio:
                from .audio.a_null import Audio
            else:
                from .audio.a_pygame import Audio

    if opt_renderer == "curses":
        # pylint: disable=unused-import, import-outside-toplevel, raise-missing-from
        try:
            import curses
        except ImportError:
            if auto_select_renderer:
                raise StartupError("Neither PyGame nor Curses (or Windows-Curses) appear to be installed.")

            raise StartupError("Curses (or Windows-Curses) does not appear to be installed.")
        else:
            from .inputs.i_curses import Inputs
            from .renderers.r_curses import Renderer

            if mute_audio:
                from .audio.a_null import Audio
            else:
                from .audio.a_curses import Audio

    if opt_renderer == "null":
        # pylint: disable=import-outside-toplevel
        from .inputs.i_null import Inputs
        from .renderers.r_null import Renderer
        from .audio.a_null import Audio

    return Inputs, Renderer, Audio


def _quirk_setting(args, name):
    quirk_setting = args["{}_quirks".format(name)]
    return None if quirk_setting is None else bool(quirk_setting)


def main(args):
    print("".join((APP_INTRO, APP_COPYRIGHT)))

    try:
        rom = Loader().load_rom(args["filename"])
        Inputs, Renderer, Audio = select_plugins(args["renderer"], args["mute"])
    except (LoaderError, StartupError) as err:
        print(err, file=sys.stderr)
        return EXIT_USAGE

    renderer = inputs = audio = cpu = None
    exit_code = EXIT_OK
    report = None

    try:
        # Set up a new rendering system, and attach a framebuffer to it
        renderer = Renderer(scale=args["scale"], palette=args["palette"])
        screen_wrap_quirks = args["screen_wrap_quirks"]
        framebuffer = Framebuffer(renderer, allow_wrapping=(screen_wrap_quirks is None or bool(screen_wrap_quirks)))

        # Set up host inputs, and link to the chosen rendering module in case it provides inputs too
        inputs = Inputs(args["keymap"], renderer)
        audio = Audio()

        # Set up debugger and live output if necessary
        debugger = Debugger()
        debugger.set_live(args["debug"])

        # Create a new CPU, plug it into the rest of the system, load the program and boot it up
        quirk_settings = {
            "{}_quirks".format(cpu_quirk): _quirk_setting(args, cpu_quirk) for cpu_quirk in CPU_QUIRKS
        }
        cpu = CPU(
            RAM(), Stack(), framebuffer, inputs, audio, debugger, cycles_per_frame=args["cycles"], seed=args["seed"],
            **quirk_settings
        )
        cpu.load(rom)
        cpu.run(PROGRAM_LOC, max_frames=args["frames"] or 0)
    except (InputsError, RendererError) as err:
        exit_code = EXIT_USAGE
        report = str(err)
    except (CPUError, StackError, HostUnavailable) as err:
        exit_code = EXIT_FAULT
        report = str(err) if cpu is None else cpu.fault_report(err)
    finally:
        # The CPU has quit, so shut down the host.  __del__ cannot be relied upon when using PyPy
        for plugin in audio, inputs, renderer:
            if plugin is not None:
                plugin.shutdown()

    # Report after shutdown, so the message isn't lost inside a Curses screen
    if report is not None:
        print(report, file=sys.stderr)

    return exit_code
