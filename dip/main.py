"""
Dip -- CHIP-8 interpreter.

Command-line entry point.  Parses arguments, creates the emulated machine
from a ROM file, and launches the pygame display window.

Usage examples::

    # Run a ROM with default settings
    dip roms/pong.ch8

    # Faster CPU, larger window
    dip roms/pong.ch8 --hz 1200 --scale 15

    # Original COSMAC VIP shift and load/store behaviour
    dip roms/game.ch8 --shift-quirk --memory-quirk

    # Print ROM metadata without launching
    dip roms/pong.ch8 --info

    # ROM path given as an option
    dip -r roms/pong.ch8

    # Log every executed instruction
    dip roms/pong.ch8 --trace
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Optional

from dip.core.config import MachineConfig
from dip.core.errors import Chip8Error
from dip.core.trace import ITracer, LoggingTracer
from dip.shell.services.machine_factory import MachineFactory


# ---------------------------------------------------------------------------
# CLI definition
# ---------------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    """Construct the argument parser."""
    parser = argparse.ArgumentParser(
        prog="dip",
        description=(
            "Dip -- CHIP-8 interpreter.  "
            "Load a ROM file and play it in a pygame window."
        ),
    )

    parser.add_argument(
        "rom",
        nargs="?",
        default=None,
        help="Path to the ROM file (.ch8, .c8, .rom, .bin)",
    )
    parser.add_argument(
        "-r", "--rom",
        dest="rom_option",
        metavar="ROM",
        default=None,
        help="Path to the ROM file, as an alternative to the positional form.",
    )

    # Timing
    parser.add_argument(
        "--hz",
        type=int,
        default=MachineConfig.cpu_hz,
        help=f"Instructions per second.  Default: {MachineConfig.cpu_hz}.",
    )

    # Behaviour
    parser.add_argument(
        "--strict",
        action="store_true",
        default=False,
        help="Halt on unknown opcodes instead of skipping them.",
    )
    parser.add_argument(
        "--shift-quirk",
        action="store_true",
        default=False,
        help="8xy6/8xyE shift Vy into Vx (COSMAC VIP behaviour).",
    )
    parser.add_argument(
        "--memory-quirk",
        action="store_true",
        default=False,
        help="Fx55/Fx65 advance I past the transferred block (COSMAC VIP behaviour).",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for the RND instruction.",
    )

    # Display
    parser.add_argument(
        "--scale", "-s",
        type=int,
        default=10,
        help="Display scale factor (1-20).  Default: 10.",
    )

    # Audio
    parser.add_argument(
        "--no-audio",
        action="store_true",
        default=False,
        help="Disable audio output.",
    )

    # Debugging / info
    parser.add_argument(
        "--info",
        action="store_true",
        default=False,
        help="Print ROM metadata and exit without launching the emulator.",
    )
    parser.add_argument(
        "--trace",
        action="store_true",
        default=False,
        help="Log every executed instruction (implies DEBUG on dip.trace).",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="count",
        default=0,
        help="Increase log verbosity (-v for INFO, -vv for DEBUG).",
    )

    return parser


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------

def _configure_logging(verbosity: int, trace: bool) -> None:
    """Set up the root logger based on requested verbosity."""
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity >= 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    if trace:
        logging.getLogger("dip.trace").setLevel(logging.DEBUG)


# ---------------------------------------------------------------------------
# Info mode
# ---------------------------------------------------------------------------

def _print_rom_info(rom_path: str) -> int:
    """Print human-readable metadata for a ROM."""
    try:
        info = MachineFactory.describe(rom_path)
    except (OSError, Chip8Error) as exc:
        print(f"Error reading ROM: {exc}", file=sys.stderr)
        return 1

    print("Dip ROM Information")
    print("=" * 40)
    for key, value in info.items():
        label = key.replace("_", " ").title()
        print(f"  {label:20s}: {value}")
    print("=" * 40)
    return 0


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main(argv: Optional[list[str]] = None) -> int:
    """Application entry point.

    Parameters
    ----------
    argv:
        Command-line arguments.  ``None`` to use ``sys.argv``.

    Returns
    -------
    int
        Exit code (0 on success).
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.verbose, args.trace)
    logger = logging.getLogger("dip.main")

    if args.rom and args.rom_option:
        parser.error("give the ROM either positionally or with -r, not both")
    rom_arg = args.rom or args.rom_option
    if rom_arg is None:
        parser.error("a ROM file is required")

    # Validate the ROM path early.
    rom_path: str = os.path.expanduser(rom_arg)
    if not os.path.isfile(rom_path):
        print(f"Error: ROM file not found: {rom_path}", file=sys.stderr)
        return 1

    # Info-only mode.
    if args.info:
        return _print_rom_info(rom_path)

    try:
        config = MachineConfig(
            strict_decode=args.strict,
            shift_uses_vy=args.shift_quirk,
            load_store_increments_i=args.memory_quirk,
            cpu_hz=args.hz,
            seed=args.seed,
        )
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2

    tracer: Optional[ITracer] = LoggingTracer() if args.trace else None

    # Create the emulated machine.
    try:
        machine = MachineFactory.create(rom_path, config, tracer)
    except (OSError, Chip8Error) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    # Import lazily so --info works without a display.
    from dip.platform.window import Window

    logger.info("Starting emulation ...")
    window: Optional[Window] = None
    try:
        window = Window(
            machine,
            scale=args.scale,
            enable_audio=not args.no_audio,
            title=os.path.basename(rom_path),
        )
        window.run()
    except KeyboardInterrupt:
        pass
    except Exception as exc:
        logger.exception("Fatal error during emulation")
        print(f"Fatal error: {exc}", file=sys.stderr)
        return 1

    if window is not None and window.error is not None:
        print(f"Machine halted: {window.error}", file=sys.stderr)
        return 1

    logger.info("Exited cleanly")
    return 0


if __name__ == "__main__":
    sys.exit(main())
