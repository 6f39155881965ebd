"""Trajectory text files.

One line per frame:
  - a single number is a marker code (0 = unset, 1 = init, 2 = fail)
  - 4 comma separated numbers are a rectangle (x, y, w, h)
  - an even count >= 6 is a polygon
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from retrial.core.types import Marker, Region, Slot, Trajectory

logger = logging.getLogger(__name__)


def parse_slot(line: str) -> Slot:
    parts = [p for p in line.replace("\t", ",").split(",") if p.strip()]
    values = [float(p) for p in parts]
    if len(values) == 1:
        if not values[0].is_integer():
            raise ValueError(f"Marker code must be a whole number, got {parts[0].strip()}")
        return Marker(int(values[0]))
    return Region.from_iterable(values)


def read_trajectory(path: str | Path) -> Trajectory:
    """Read a trajectory file, returning an empty list when it is missing or unreadable."""
    p = Path(path)
    if not p.is_file():
        return []

    trajectory: Trajectory = []
    try:
        with p.open("r", encoding="utf-8") as f:
            for raw in f:
                line = raw.strip()
                if not line:
                    continue
                trajectory.append(parse_slot(line))
    except (OSError, UnicodeDecodeError, ValueError) as e:
        logger.warning("Unable to parse trajectory file %s: %s", p, e)
        return []
    return trajectory


def format_slot(slot: Slot) -> str:
    if isinstance(slot, Marker):
        return str(int(slot))
    return slot.to_text()


def write_trajectory(path: str | Path, trajectory: Iterable[Slot]) -> Path:
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    with out.open("w", encoding="utf-8") as f:
        for slot in trajectory:
            f.write(format_slot(slot) + "\n")
    return out
