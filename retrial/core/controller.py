from __future__ import annotations

import logging
from pathlib import Path

import numpy as np

from retrial.core.errors import NoResultError
from retrial.core.executor import run_once
from retrial.core.types import ExecutionContext, Marker, ReinitOptions, TrackerDescriptor, Trajectory
from retrial.data.sequence import Sequence, get_labels, get_region
from retrial.evaluation.overlap import calculate_overlap

logger = logging.getLogger(__name__)


def first_failure(overlap: np.ndarray, fail_overlap: float | None) -> int | None:
    """0-based index of the first failing frame after the seed, if any."""
    if fail_overlap is None:
        return None
    failed = (overlap <= fail_overlap) | ~np.isfinite(overlap)
    failed[:1] = False
    hits = np.flatnonzero(failed)
    return int(hits[0]) if hits.size else None


def next_start(sequence: Sequence, start: int, skip_labels: frozenset[str]) -> int:
    """First frame at or after `start` carrying none of `skip_labels`, else the last frame."""
    if not skip_labels:
        return start
    return next(
        (frame for frame in range(start, sequence.length + 1) if not get_labels(sequence, frame) & skip_labels),
        sequence.length,
    )


def run_with_reinitialization(
    tracker: TrackerDescriptor,
    sequence: Sequence,
    context: ExecutionContext,
    options: ReinitOptions | None = None,
) -> tuple[Trajectory, float] | tuple[str, Path]:
    """
    Track a whole sequence, restarting the tracker after every detected failure.

    The result is one trajectory of length N where each seed frame is
    `Marker.INIT`, each failure frame is `Marker.FAIL` and every other frame
    covered by a run holds the reported region. The time is the mean per-frame
    time over all frames produced by all runs.

    Returns `([], nan)` when a run produced no result at all. In dry-run mode
    the executor's `(command, working_directory)` is passed through.
    """

    options = options or ReinitOptions()
    n = sequence.length

    trajectory: Trajectory = [Marker.UNSET] * n
    total_time = 0.0
    total_frames = 0

    start = 1
    while start < n:
        try:
            result = run_once(tracker, sequence, start, context)
        except NoResultError as e:
            logger.error("%s", e)
            return [], float("nan")

        if context.fake:
            return result

        segment, mean_time = result
        if not segment:
            return [], float("nan")

        total_time += mean_time * len(segment)
        total_frames += len(segment)

        overlap = calculate_overlap(segment, get_region(sequence, range(start, n + 1)))
        failure = first_failure(overlap, options.fail_overlap)

        trajectory[start - 1] = Marker.INIT

        if failure is not None:
            failed_frame = start + failure
            # Frames strictly between the seed and the failure, as far as the run reached.
            for offset in range(1, min(failure, len(segment))):
                trajectory[start + offset - 1] = segment[offset]
            trajectory[failed_frame - 1] = Marker.FAIL

            logger.info("Detected failure at frame %d.", failed_frame)
            start = next_start(sequence, failed_frame + options.skip_initialize, options.skip_labels)
            logger.info("Reinitializing at frame %d.", start)
        else:
            for offset in range(1, min(n - start + 1, len(segment))):
                trajectory[start + offset - 1] = segment[offset]
            start = n

    if total_frames == 0:
        return trajectory, float("nan")
    return trajectory, total_time / total_frames
