#!/usr/bin/env python3

"""
Main Startup Module

Simply call main(args) to start the emulator, replacing args with a dictionary
of options.  This can be done via the Terminal or GUI.

All options must be supplied.  Defaults can be specified with a 'None'.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import APP_INTRO, APP_COPYRIGHT, DEFAULT_KEYMAP, DEFAULT_QUIRKS, MEM_SIZE, QUIRKS
from .cpu import CPU, CPUHaltedError, FATAL_ERRORS
from .framebuffer import Framebuffer
from .hostio import Loader
from .keypad import Keypad
from .ram import RAM
from .runner import Runner
from .stack import Stack
from .timers import Timers


class StartupError(Exception):
    pass


def _quirk_setting(args, quirk):
    quirk_setting = args.get("{}_quirks".format(quirk))
    return DEFAULT_QUIRKS[quirk] if quirk_setting is None else bool(quirk_setting)


def build_machine(image, **quirk_settings):
    # Assemble the core with a program loaded, ready to step.  Quirks not given take their default settings.
    unknown_quirks = set(quirk_settings) - {"{}_quirks".format(quirk) for quirk in QUIRKS}

    if unknown_quirks:
        raise StartupError("Unknown quirks: {}".format(", ".join(sorted(unknown_quirks))))

    screen_wrap_quirks = quirk_settings.pop("screen_wrap_quirks", None)
    framebuffer = Framebuffer(
        allow_wrapping=DEFAULT_QUIRKS["screen_wrap"] if screen_wrap_quirks is None else screen_wrap_quirks
    )
    keypad = Keypad()
    cpu = CPU(RAM(MEM_SIZE), Stack(), framebuffer, keypad, Timers(), **quirk_settings)
    cpu.load_program(image)
    return cpu, framebuffer, keypad


def main(args):
    print("".join((APP_INTRO, APP_COPYRIGHT)))

    opt_renderer = args.get("renderer")
    auto_select_renderer = opt_renderer is None  # If necessary, try PyGame first, then Curses.

    if opt_renderer not in (None, "pygame", "curses", "null"):
        raise StartupError("Unknown renderer '{}'.".format(opt_renderer))
    mute_audio = args.get("mute")

    # flake8: noqa: F401
    if auto_select_renderer or opt_renderer == "pygame":
        # pylint: disable=unused-import, import-outside-toplevel, raise-missing-from
        try:
            import pygame
        except ImportError:
            if auto_select_renderer:
                opt_renderer = "curses"
            else:
                raise StartupError(
                    "PyGame does not appear to be installed."
                )
        else:
            opt_renderer = "pygame"
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
                raise StartupError(
                    "Neither PyGame nor Curses (or Windows-Curses) appear to be installed."
                )

            raise StartupError(
                "Curses (or Windows-Curses) does not appear to be installed."
            )
        else:
            from .inputs.i_curses import Inputs
            from .renderers.r_curses import Renderer

            # Terminals can handle fixed-length beeps, but not sampled sound
            if mute_audio or mute_audio is None:
                from .audio.a_null import Audio
            else:
                from .audio.a_curses import Audio

    if opt_renderer == "null":
        # pylint: disable=import-outside-toplevel
        from .inputs.i_null import Inputs
        from .renderers.r_null import Renderer
        from .audio.a_null import Audio

    quirk_settings = {}

    for quirk in QUIRKS:
        quirk_settings["{}_quirks".format(quirk)] = _quirk_setting(args, quirk)

    # Read the program binary, and build a machine with it loaded
    image = Loader().load_binary(args["filename"])
    cpu, framebuffer, keypad = build_machine(image, **quirk_settings)

    # Set up the host rendering, input and audio systems
    renderer = Renderer(
        scale=args.get("scale"),
        pygame_palette=args.get("pygame_palette"),
        curses_cursor_mode=args.get("curses_cursor_mode") or 0
    )

    # Anything started from here on must be shut down again, even if a later plugin fails to start
    inputs = None
    audio = None

    try:
        inputs = Inputs(args.get("keymap") or DEFAULT_KEYMAP, renderer)
        audio = Audio()
        runner = Runner(cpu, framebuffer, keypad, inputs, renderer, audio, clock_speed=args.get("clock_speed"))
        runner.run()
    except FATAL_ERRORS as err:
        raise CPUHaltedError(cpu.fault_report()) from err
    finally:
        # The CPU has quit, so shut down the rendering framework.  __del__ cannot be relied upon when using PyPy
        if audio is not None:
            audio.shutdown()

        if inputs is not None:
            inputs.shutdown()

        renderer.shutdown()
