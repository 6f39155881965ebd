from __future__ import annotations

import logging
import shutil
import subprocess
import time
from pathlib import Path

from retrial.core.environment import library_search_path, working_directory
from retrial.core.errors import ConfigurationError, NoResultError, TrajectoryLengthMismatchError
from retrial.core.types import ExecutionContext, TrackerDescriptor, Trajectory
from retrial.data.sequence import Sequence
from retrial.data.trial import OUTPUT_FILE, prepare_trial_data
from retrial.io.trajectory import read_trajectory
from retrial.utils.rich_utils import print_raw_output

logger = logging.getLogger(__name__)


def _execute(tracker: TrackerDescriptor, directory: Path) -> tuple[str | None, float]:
    """Run the tracker command inside `directory`; returns (raw output, elapsed seconds)."""
    output = None
    elapsed = 0.0

    logger.info('Executing "%s" in "%s".', tracker.command, directory)
    try:
        with library_search_path(tracker.linkpath), working_directory(directory):
            t0 = time.time()
            proc = subprocess.run(
                tracker.command,
                shell=True,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                errors="replace",
                check=False,
            )
            elapsed = time.time() - t0
        output = proc.stdout
        if proc.returncode != 0:
            logger.warning("System command has not exited normally (status %d).", proc.returncode)
    except (OSError, ValueError, subprocess.SubprocessError) as e:
        # Output validation below decides whether this run is usable.
        logger.error('Exception thrown "%s".', e)

    return output, elapsed


def _validate(
    tracker: TrackerDescriptor,
    trajectory: Trajectory,
    *,
    expected: int,
    output: str | None,
) -> None:
    if len(trajectory) == expected:
        return

    logger.warning("Tracker %s did not produce a valid trajectory file.", tracker.identifier)
    if output:
        print_raw_output(output)

    if not trajectory:
        raise NoResultError(f"No result produced by tracker {tracker.identifier}. Stopping.")
    raise TrajectoryLengthMismatchError(
        f"Tracker {tracker.identifier} produced {len(trajectory)} frames, expected {expected}. Stopping.",
        expected=expected,
        produced=len(trajectory),
    )


def run_once(
    tracker: TrackerDescriptor,
    sequence: Sequence,
    start: int,
    context: ExecutionContext,
) -> tuple[Trajectory, float] | tuple[str, Path]:
    """
    Run the tracker once over frames `start..N` (1-based).

    Returns the produced trajectory (seed frame included) and the mean time per
    requested frame. In dry-run mode returns `(command, working_directory)`
    instead and leaves the directory in place.
    """

    if not tracker.command:
        raise ConfigurationError(f"Unable to execute tracker {tracker.identifier}. No command given.")
    if start < 1 or start >= sequence.length:
        raise ValueError(f"start must be in 1..{sequence.length - 1}, got {start}")

    directory = prepare_trial_data(sequence, start, context)

    if context.fake:
        return tracker.command, directory

    try:
        output, elapsed = _execute(tracker, directory)

        trajectory = read_trajectory(directory / OUTPUT_FILE)
        requested = sequence.length - start
        _validate(tracker, trajectory, expected=requested + 1, output=output)

        return trajectory, elapsed / requested
    finally:
        if context.cleanup:
            shutil.rmtree(directory, ignore_errors=True)
