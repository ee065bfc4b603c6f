# main.py
from __future__ import annotations

import argparse
import sys
from contextlib import ExitStack
from dataclasses import dataclass
from typing import List, Optional, TextIO

import utilities
from debug import Debug
from errors import EnigmaError
from machine import Machine, StepTrace
from utilities import load_config, process_lines

# ────────────────────────────────────────────────────────────────────────
#  0. Configuration & logging
# ────────────────────────────────────────────────────────────────────────


debug = Debug()


@dataclass(slots=True)
class Config:
    """Runtime switches for one run of the simulator."""

    verbose: bool = False           # trace every key-press on stderr
    block: int = 5                  # output group size


def trace_step(step: StepTrace) -> None:
    """Observer that logs ``[AXLE] H -> H -> Q -> Q`` per key-press."""
    debug.log("stepping", f"[{step.settings}]")
    debug.log(
        "encipher",
        f"[{step.settings}] {step.source} -> {step.plugged} -> "
        f"{step.rotated} -> {step.result}",
    )


# ────────────────────────────────────────────────────────────────────────
#  1. Processing
# ────────────────────────────────────────────────────────────────────────


def run(machine: Machine, source: TextIO, sink: TextIO, cfg: Config) -> None:
    """Convert every message in SOURCE and write the groups to SINK."""
    observer = trace_step if cfg.verbose else None
    for line in process_lines(machine, source, block=cfg.block, observer=observer):
        sink.write(line + "\n")


# ────────────────────────────────────────────────────────────────────────
#  2. CLI helpers
# ────────────────────────────────────────────────────────────────────────


def _block_size(text: str) -> int:
    try:
        block = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid block size: {text!r}") from None
    if block < 1:
        raise argparse.ArgumentTypeError(f"block size must be at least 1, got {block}")
    return block


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Encrypt or decrypt with a rotor machine")
    p.add_argument("config", metavar="CONFIG", help="Machine configuration (text, or JSON when it ends in .json).")
    p.add_argument("input", metavar="INPUT", nargs="?", help="Settings and messages. Default: standard input")
    p.add_argument("output", metavar="OUTPUT", nargs="?", help="Converted messages. Default: standard output")
    p.add_argument("--verbose", action="store_true", help="Trace rotor settings and the signal path on stderr.")
    p.add_argument("--block", type=_block_size, default=5, help="Output group size. Default: 5")
    return p.parse_args(argv)


# ────────────────────────────────────────────────────────────────────────
#  3. Main entry point
# ────────────────────────────────────────────────────────────────────────


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    cfg = Config(verbose=args.verbose, block=args.block)

    if cfg.verbose:
        debug.enable("stepping", "encipher")
        utilities.debug.enable("config")

    try:
        machine = load_config(args.config)
        with ExitStack() as stack:
            source = (
                stack.enter_context(open(args.input, encoding="utf-8"))
                if args.input else sys.stdin
            )
            sink = (
                stack.enter_context(open(args.output, "w", encoding="utf-8"))
                if args.output else sys.stdout
            )
            run(machine, source, sink, cfg)
    except (EnigmaError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
