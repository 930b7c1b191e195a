#!/usr/bin/env python3

"""
Main Startup Module

Simply call main(args) to start the emulator, replacing args with a dictionary
of options.  This can be done via the Terminal or GUI.

All options must be supplied.  Defaults can be specified with a 'None'.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import APP_INTRO, APP_COPYRIGHT, PROGRAM_START
from .cpu import CPU
from .debugger import Debugger
from .disassembler import disassemble, format_line
from .host import Host
from .hostio import Loader


class StartupError(Exception):
    pass


def list_disassembly(rom):
    for line in disassemble(rom, 0, PROGRAM_START):
        print(format_line(line))


def main(args):
    print("".join((APP_INTRO, APP_COPYRIGHT)))
    rom = Loader().load_rom(args["filename"])

    if args["disassemble"]:
        list_disassembly(rom)
        return

    opt_renderer = args["renderer"]
    auto_select_renderer = opt_renderer is None  # If necessary, try PyGame first, then run headless
    mute_audio = args["mute"]

    # flake8: noqa: F401
    if auto_select_renderer or opt_renderer == "pygame":
        # pylint: disable=unused-import, import-outside-toplevel, raise-missing-from
        try:
            import pygame
        except ImportError:
            if not auto_select_renderer:
                raise StartupError("PyGame does not appear to be installed.")

            opt_renderer = "null"
        else:
            opt_renderer = "pygame"
            from .inputs.i_pygame import Inputs
            from .renderers.r_pygame import Renderer

            if mute_audio:
                from .audio.a_null import Audio
            else:
                from .audio.a_pygame import Audio

    if opt_renderer == "null":
        # pylint: disable=import-outside-toplevel
        from .inputs.i_null import Inputs
        from .renderers.r_null import Renderer
        from .audio.a_null import Audio

    # Set up debugger and live output if necessary
    debugger = Debugger()
    debugger.set_live(args["debug"])

    index_overflow_quirks = args["index_overflow_quirks"]
    cpu = CPU(
        debugger=debugger,
        index_overflow_quirks=None if index_overflow_quirks is None else bool(index_overflow_quirks)
    )
    cpu.load(rom)

    renderer = Renderer(scale=args["scale"], pygame_palette=args["pygame_palette"])
    inputs = Inputs(args["keymap"], cpu)
    audio = Audio()
    audio.set_frequency(440.0)
    host = Host(cpu, renderer, inputs, audio, clock_speed=args["clock_speed"])

    try:
        host.run()
    finally:
        # The host has quit, so shut down the rendering framework.  __del__ cannot be relied upon when using PyPy
        audio.shutdown()
        inputs.shutdown()
        renderer.shutdown()
