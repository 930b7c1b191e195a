#!/usr/bin/env python3

__author__ = "Gregory Maynard-Hoare"
__copyright__ = "Copyright (C) 2024 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"
__version__ = "1.0.0"

from argparse import ArgumentParser
from pchip import main
from pchip.constants import DEFAULT_CLOCK_SPEED, DEFAULT_KEYMAP, SUPPORTED_RENDERERS


def parse_args(argv=None):
    parser = ArgumentParser()
    parser.add_argument("filename", help="ROM to execute (normally ending in .ch8 or .c8)")
    parser.add_argument(
        "-c", "--clock_speed", type=int,
        help="set the CPU speed in operations/second (default {}, 0 = uncapped)".format(DEFAULT_CLOCK_SPEED)
    )
    parser.add_argument(
        "-r", "--renderer", choices=SUPPORTED_RENDERERS,
        help="set the rendering, input, and audio systems (pygame by default if available, otherwise null)"
    )
    parser.add_argument(
        "-s", "--scale", type=int,
        help="set the window width in PyGame mode (default 512)"
    )
    parser.add_argument(
        "-m", "--mute", type=int, choices=[0, 1],
        help="mute the emulated audio.  0 = unmuted (default), 1 = muted"
    )
    parser.add_argument(
        "-k", "--keymap", default=DEFAULT_KEYMAP,
        help="redefine the 16 keyscan codes for keys 0-F.  Separate each decimal with a comma"
    )
    parser.add_argument(
        "--pygame_palette",
        help="redefine the background and foreground colours in comma-separated hex, e.g. 222222,DDDDDD"
    )
    parser.add_argument(
        "--index_overflow_quirks", type=int, choices=[0, 1],
        help="set VF when ADD I, Vx takes I past 0xFFF, as on the Amiga interpreter (default 0)"
    )
    parser.add_argument(
        "-d", "--debug", action="store_true", default=False,
        help="enable live debug output of every instruction executed.  Slows CPU execution"
    )
    parser.add_argument(
        "--disassemble", action="store_true", default=False,
        help="list the ROM as instructions instead of running it"
    )
    return parser.parse_args(argv)  # Can call sys.exit(2) if args are incorrect


def cli():
    # It is possible to start the emulator from a GUI by calling main with a dictionary
    main(vars(parse_args()))


if __name__ == "__main__":
    cli()
