"""`retrial run`: evaluate one tracker on one sequence with automatic reinitialization."""

from __future__ import annotations

import argparse
import math
import sys

from rich.markup import escape

from retrial.config import load_run_config, load_tracker
from retrial.core.controller import run_with_reinitialization
from retrial.core.errors import RetrialError
from retrial.core.types import Marker
from retrial.data.sequence import load_sequence
from retrial.results import save_trial
from retrial.utils.rich_utils import CONSOLE


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="retrial run",
        description="Run an external tracker over a sequence, reinitializing it after failures.",
    )
    p.add_argument("--config", type=str, default=None, help="Run config YAML (see retrial.config.RunConfig)")
    p.add_argument("--tracker", type=str, default=None, help="Tracker YAML (identifier, command, linkpath)")
    p.add_argument("--sequence", type=str, default=None, help="Sequence directory (groundtruth.txt + frames)")
    p.add_argument("--out", type=str, default=None, help="Results directory")
    p.add_argument("--dry-run", action="store_true", help="Print the command and working directory only")
    p.add_argument(
        "overrides",
        nargs="*",
        metavar="KEY=VALUE",
        help="Config overrides, e.g. fail_overlap=0 skip_initialize=5 'skip_labels=[occlusion]'",
    )
    return p


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    args = _build_parser().parse_args(argv)

    overrides = list(args.overrides)
    if args.tracker:
        overrides.append(f"tracker={args.tracker}")
    if args.sequence:
        overrides.append(f"sequence={args.sequence}")
    if args.out:
        overrides.append(f"output={args.out}")
    if args.dry_run:
        overrides.append("fake=true")

    try:
        cfg = load_run_config(args.config, overrides)
        if not cfg.tracker or not cfg.sequence:
            CONSOLE.print("[red]Both a tracker and a sequence are required.[/]")
            return 2

        tracker = load_tracker(cfg.tracker)
        sequence = load_sequence(cfg.sequence)
        CONSOLE.print(
            f"[cyan][run][/cyan] tracker={tracker.identifier} sequence={sequence.name} frames={sequence.length}"
        )

        trajectory, time = run_with_reinitialization(tracker, sequence, cfg.context(), cfg.options())
    except (RetrialError, FileNotFoundError, ValueError) as e:
        CONSOLE.print(f"[red]{type(e).__name__}: {escape(str(e))}[/]", highlight=False)
        return 1

    if cfg.fake:
        if not isinstance(trajectory, str):
            # A single-frame sequence has nothing to track, so no command is built.
            CONSOLE.print(f"[cyan][run][/cyan] DRY RUN: sequence {sequence.name} has a single frame, nothing to run")
            return 0
        CONSOLE.print(f"[cyan][run][/cyan] DRY RUN command: {escape(str(trajectory))}", highlight=False)
        CONSOLE.print(f"[cyan][run][/cyan] DRY RUN working directory: {escape(str(time))}", highlight=False)
        return 0

    if not trajectory:
        CONSOLE.print("[red]Tracker produced no result; trial aborted.[/]")
        return 1

    failures = sum(1 for s in trajectory if s is Marker.FAIL)
    CONSOLE.print(f"[cyan][run][/cyan] failures={failures}")
    if not math.isnan(time):
        CONSOLE.print(f"[cyan][run][/cyan] mean time per frame={time:.6f}s")
    if cfg.output:
        save_trial(cfg.output, sequence.name, trajectory, time)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
