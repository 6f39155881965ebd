from __future__ import annotations

import sys

from retrial.utils.rich_utils import CONSOLE, configure_python_logging, enable_file_logging

def _print_help() -> None:
    CONSOLE.print(
        "retrial - run external trackers with automatic reinitialization\n"
        "\n"
        "Usage:\n"
        "  retrial <command> [args...]\n"
        "\n"
        "Commands:\n"
        "  run    evaluate one tracker on one sequence\n"
        "\n"
        "Run `retrial <command> --help` for command-specific help.\n"
        ,
        markup=False,
    )


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the `retrial` console script."""
    if argv is None:
        argv = sys.argv[1:]

    # Mirror console output to a plaintext log (best-effort).
    enable_file_logging()
    configure_python_logging()

    if not argv or argv[0] in {"-h", "--help"}:
        _print_help()
        return 0

    cmd, rest = argv[0], argv[1:]

    if cmd == "run":
        from retrial.cli.run import main as run_main

        try:
            return run_main(rest)
        except SystemExit as exc:
            return int(exc.code) if exc.code is not None else 0

    CONSOLE.print(f"[red]Unknown command: {cmd!r}[/]\n")
    _print_help()
    return 2
