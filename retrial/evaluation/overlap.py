from __future__ import annotations

from typing import Sequence

import numpy as np
import shapely
from shapely.geometry import Polygon

from retrial.core.types import Marker, Region, Slot


def _bounds_disjoint(a: Region, b: Region) -> bool:
    ax0, ay0, ax1, ay1 = a.bounds()
    bx0, by0, bx1, by1 = b.bounds()
    return ax1 <= bx0 or bx1 <= ax0 or ay1 <= by0 or by1 <= ay0


def _rectangle_overlap(a: Region, b: Region) -> float:
    ax0, ay0, ax1, ay1 = a.bounds()
    bx0, by0, bx1, by1 = b.bounds()
    iw = max(0.0, min(ax1, bx1) - max(ax0, bx0))
    ih = max(0.0, min(ay1, by1) - max(ay0, by0))
    intersection = iw * ih
    union = (ax1 - ax0) * (ay1 - ay0) + (bx1 - bx0) * (by1 - by0) - intersection
    if union <= 0:
        return float("nan")
    return float(intersection / union)


def _to_polygon(region: Region):
    poly = Polygon(region.polygon())
    # Self-intersecting tracker output is split into valid parts instead of raising.
    return poly if poly.is_valid else shapely.make_valid(poly)


def _polygon_overlap(a: Region, b: Region) -> float:
    pa, pb = _to_polygon(a), _to_polygon(b)
    intersection = pa.intersection(pb).area
    union = pa.area + pb.area - intersection
    if union <= 0:
        return float("nan")
    return float(intersection / union)


def region_overlap(a: Slot, b: Slot) -> float:
    """Intersection over union of two regions; NaN when either side is not a usable region."""
    if isinstance(a, Marker) or isinstance(b, Marker):
        return float("nan")
    if a.is_empty or b.is_empty:
        return float("nan")
    if _bounds_disjoint(a, b):
        return 0.0
    if a.kind == "rectangle" and b.kind == "rectangle":
        return _rectangle_overlap(a, b)
    return _polygon_overlap(a, b)


def calculate_overlap(predicted: Sequence[Slot], groundtruth: Sequence[Slot]) -> np.ndarray:
    """Per-frame overlap over the common prefix of both sequences."""
    n = min(len(predicted), len(groundtruth))
    return np.asarray([region_overlap(predicted[i], groundtruth[i]) for i in range(n)], dtype=np.float64)
