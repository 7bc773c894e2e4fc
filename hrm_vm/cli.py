"""
hrmvm - run a preset room on the HRM virtual machine

Usage:
    hrmvm <room> [--inbox V ...] [--max-steps N] [--policy strict|game]
                 [--interactive] [--trace] [--floor] [-v]
    hrmvm --list
    hrmvm <room> --listing

Inbox values are signed integers or single letters. Without --inbox the
room's sample inbox is used. With --interactive values are read from
stdin, one per line, and the run ends when stdin is closed.

Each outbox value is printed on its own line as soon as it is produced.
The exit status is 0 for a clean stop, otherwise the fault's code.

Examples:
    hrmvm zero-preservation-initiative
    hrmvm equalization-room --inbox 4 4 1 2
    hrmvm busy-mail-room --interactive < letters.txt
"""

import argparse
import logging
import sys
import threading
from typing import List, Optional, TextIO

from . import __version__
from .cpu.alu import CharPolicy
from .cpu.values import parse_value
from .emu import DEFAULT_MAX_STEPS, EmulatorConfig, StopReason
from .log_setup import setup_logging
from .periph.inbox import InteractiveInbox
from .periph.outbox import Outbox
from .rooms import ROOMS, get_room, room_names

log = logging.getLogger(__name__)

# Seconds to wait for the stdin reader after the run stops. After a HALT
# the reader has already closed the inbox; otherwise it may still be
# blocked on stdin and is left to die with the process.
READER_JOIN_TIMEOUT = 1.0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hrmvm",
        description="Human Resource Machine style virtual machine",
        epilog="Rooms: " + ", ".join(room_names()),
    )
    parser.add_argument("room", nargs="?", help="Preset room to run")
    parser.add_argument("--inbox", nargs="*", metavar="V",
                        help="Inbox values (default: the room's sample inbox)")
    parser.add_argument("--interactive", action="store_true",
                        help="Read inbox values from stdin while running")
    parser.add_argument("--max-steps", type=int, default=None,
                        help=f"Step ceiling (default: {DEFAULT_MAX_STEPS})")
    parser.add_argument("--policy", choices=[p.value for p in CharPolicy], default=None,
                        help="Character policy (default: the room's)")
    parser.add_argument("--trace", action="store_true",
                        help="Print an instruction trace to stderr")
    parser.add_argument("--floor", action="store_true",
                        help="Print the final floor to stderr")
    parser.add_argument("--list", action="store_true",
                        help="List preset rooms and exit")
    parser.add_argument("--listing", action="store_true",
                        help="Print the room's program and exit")
    parser.add_argument("--verbose", "-v", action="count", default=0,
                        help="Increase log verbosity (-v, -vv)")
    parser.add_argument("--log-file", help="Also write a DEBUG log to this file")
    parser.add_argument("--version", action="version",
                        version=f"hrmvm {__version__}")
    return parser


def _feed_inbox(inbox: InteractiveInbox, stream: TextIO):
    """Push one value per non-blank line of `stream`, then close the inbox."""
    try:
        for line in stream:
            if not line.strip():
                continue
            try:
                inbox.put(parse_value(line))
            except ValueError as e:
                log.error("Skipping input line: %s", e)
    finally:
        inbox.close()


def main(argv: Optional[List[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.list:
        for slug in room_names():
            room = ROOMS[slug]
            print(f"{slug:32s} {room.title} ({len(room.program)} lines, "
                  f"{room.floor_size} tiles)")
        return 0

    if not args.room:
        parser.error("a room is required (see --list)")
    try:
        room = get_room(args.room)
    except KeyError as e:
        parser.error(e.args[0])

    if args.listing:
        print(room.program.listing())
        return 0

    if args.inbox is not None and args.interactive:
        parser.error("--inbox and --interactive are mutually exclusive")

    console_level = {0: logging.WARNING, 1: logging.INFO}.get(args.verbose, logging.DEBUG)
    setup_logging(console_level=console_level, log_file=args.log_file)

    try:
        config = EmulatorConfig(
            max_steps=args.max_steps if args.max_steps is not None else DEFAULT_MAX_STEPS,
            char_policy=CharPolicy(args.policy) if args.policy else room.char_policy,
        )
        inbox = None
        if args.inbox is not None:
            inbox = [parse_value(v) for v in args.inbox]
    except ValueError as e:
        print(f"hrmvm: error: {e}", file=sys.stderr)
        return 2

    reader = None
    if args.interactive:
        inbox = InteractiveInbox()
        reader = threading.Thread(target=_feed_inbox, args=(inbox, sys.stdin),
                                  name="hrmvm-inbox-reader", daemon=True)

    outbox = Outbox(listener=lambda value: print(value, flush=True))
    emu = room.build(inbox=inbox, outbox=outbox, config=config)
    emu.enable_trace(args.trace)

    if reader is not None:
        reader.start()
    log.info("Running %s (%d lines, %d tiles, policy %s)",
             room.title, len(room.program), room.floor_size, config.char_policy.value)
    result = emu.run()
    if reader is not None:
        reader.join(timeout=READER_JOIN_TIMEOUT)

    if args.trace:
        print(emu.get_trace(), file=sys.stderr)
    if args.floor:
        print(emu.mem.dump(), file=sys.stderr)

    if result.reason is StopReason.FAULT:
        print(f"hrmvm: fault: {result.fault}", file=sys.stderr)
    elif result.reason is StopReason.TIMEOUT:
        log.warning("Step ceiling of %d reached", config.max_steps)
    return result.exit_code


if __name__ == "__main__":
    sys.exit(main())
