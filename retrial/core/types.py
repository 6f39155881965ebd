from __future__ import annotations

import enum
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Union

import numpy as np


class Marker(enum.IntEnum):
    """Per-frame outcome codes that stand in for a region.

    The integer values double as the codes written to trajectory files.
    """

    UNSET = 0
    INIT = 1
    FAIL = 2


@dataclass(frozen=True)
class Region:
    """
    A target region in pixel coordinates.

    4 values:     axis-aligned rectangle (x, y, w, h)
    2k values:    polygon (x1, y1, ..., xk, yk), k >= 3
    """

    values: tuple[float, ...]

    def __post_init__(self) -> None:
        values = tuple(float(v) for v in self.values)
        n = len(values)
        if n != 4 and (n < 6 or n % 2 != 0):
            raise ValueError(f"Region must have 4 values or an even count >= 6, got {n}")
        object.__setattr__(self, "values", values)

    @staticmethod
    def from_iterable(values: Iterable[float]) -> "Region":
        return Region(values=tuple(values))

    @property
    def kind(self) -> str:
        return "rectangle" if len(self.values) == 4 else "polygon"

    def polygon(self) -> np.ndarray:
        """Corner points as a (K, 2) float64 array."""
        if self.kind == "rectangle":
            x, y, w, h = self.values
            return np.asarray([[x, y], [x + w, y], [x + w, y + h], [x, y + h]], dtype=np.float64)
        return np.asarray(self.values, dtype=np.float64).reshape(-1, 2)

    def bounds(self) -> tuple[float, float, float, float]:
        """(x0, y0, x1, y1) of the axis-aligned bounding box."""
        pts = self.polygon()
        x0, y0 = pts.min(axis=0)
        x1, y1 = pts.max(axis=0)
        return float(x0), float(y0), float(x1), float(y1)

    @property
    def is_empty(self) -> bool:
        if not all(math.isfinite(v) for v in self.values):
            return True
        if self.kind == "rectangle":
            return self.values[2] <= 0 or self.values[3] <= 0
        pts = self.polygon()
        x, y = pts[:, 0], pts[:, 1]
        area = 0.5 * abs(float(np.dot(x, np.roll(y, -1)) - np.dot(y, np.roll(x, -1))))
        return area <= 0

    def to_text(self) -> str:
        return ",".join(f"{v:.4f}" for v in self.values)


Slot = Union[Region, Marker]
Trajectory = list[Slot]


@dataclass(frozen=True)
class TrackerDescriptor:
    identifier: str
    command: str
    # Directories prepended to the dynamic library search path of the process.
    linkpath: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "linkpath", tuple(str(p) for p in self.linkpath))


@dataclass(frozen=True)
class ExecutionContext:
    # Build the command and working directory but never start the process.
    fake: bool = False
    # Delete the per-run working directory after every run.
    cleanup: bool = True
    # Parent for per-run working directories (system temp dir if None).
    temp_root: Path | None = None


@dataclass(frozen=True)
class ReinitOptions:
    """Reinitialization policy.

    `fail_overlap=None` disables failure detection: every run is treated as one
    continuous pass. With a threshold set, a frame fails when its overlap is
    at or below the threshold or is undefined.
    """

    skip_labels: frozenset[str] = field(default_factory=frozenset)
    skip_initialize: int = 1
    fail_overlap: float | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "skip_labels", frozenset(self.skip_labels))
        object.__setattr__(self, "skip_initialize", max(1, int(self.skip_initialize)))
        if self.fail_overlap is not None:
            object.__setattr__(self, "fail_overlap", float(self.fail_overlap))
