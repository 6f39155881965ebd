from pathlib import Path

import pytest

from conftest import write_sequence
from retrial.core.controller import run_with_reinitialization
from retrial.core.types import ExecutionContext, Marker, Region, ReinitOptions
from retrial.data.sequence import load_sequence


def test_static_tracker_fails_when_target_jumps(tmp_path: Path, make_tracker):
    # Target sits still for five frames, then jumps; the tracker never moves.
    regions = [(10, 10, 20, 20)] * 5 + [(100, 100, 20, 20)] * 5
    sequence = load_sequence(write_sequence(tmp_path / "jump", regions))
    work_root = tmp_path / "work"

    trajectory, time = run_with_reinitialization(
        make_tracker(),
        sequence,
        ExecutionContext(temp_root=work_root),
        ReinitOptions(fail_overlap=0.0),
    )

    assert trajectory[:5] == [Marker.INIT] + [Region((10, 10, 20, 20))] * 4
    assert trajectory[5] is Marker.FAIL
    assert trajectory[6] is Marker.INIT
    assert trajectory[7:] == [Region((100, 100, 20, 20))] * 3
    assert time >= 0.0
    assert list(work_root.iterdir()) == []


def test_static_tracker_without_detection_runs_once(tmp_path: Path, make_tracker):
    regions = [(10, 10, 20, 20)] * 5 + [(100, 100, 20, 20)] * 5
    sequence = load_sequence(write_sequence(tmp_path / "jump", regions))

    trajectory, _ = run_with_reinitialization(
        make_tracker(), sequence, ExecutionContext(temp_root=tmp_path / "work")
    )

    assert trajectory == [Marker.INIT] + [Region((10, 10, 20, 20))] * 9


def test_dry_run_reports_command(tmp_path: Path, make_tracker):
    sequence = load_sequence(write_sequence(tmp_path / "s", [(0, 0, 5, 5)] * 3))
    tracker = make_tracker()

    command, directory = run_with_reinitialization(
        tracker, sequence, ExecutionContext(fake=True, temp_root=tmp_path / "work")
    )

    assert command == tracker.command
    assert (Path(directory) / "region.txt").read_text().strip() == Region((0, 0, 5, 5)).to_text()


@pytest.mark.parametrize("extra", ["-1", "2"])
def test_bad_output_length_propagates(tmp_path: Path, make_tracker, extra):
    from retrial.core.errors import TrajectoryLengthMismatchError

    sequence = load_sequence(write_sequence(tmp_path / "s", [(0, 0, 5, 5)] * 4))
    with pytest.raises(TrajectoryLengthMismatchError):
        run_with_reinitialization(
            make_tracker("--extra", extra), sequence, ExecutionContext(temp_root=tmp_path / "work")
        )
