"""Module entry point: `python -m retrial`."""

from __future__ import annotations

from retrial.cli.main import main


if __name__ == "__main__":
    raise SystemExit(main())
