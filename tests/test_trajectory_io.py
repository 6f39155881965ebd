from pathlib import Path

from retrial.core.types import Marker, Region
from retrial.io.trajectory import read_trajectory, write_trajectory


def test_read_trajectory_missing_file_is_empty(tmp_path: Path):
    assert read_trajectory(tmp_path / "output.txt") == []


def test_read_trajectory_parses_markers_rectangles_and_polygons(tmp_path: Path):
    path = tmp_path / "output.txt"
    path.write_text("1\n10,20,30,40\n\n0,0,4,0,4,2,0,2\n2\n")

    traj = read_trajectory(path)

    assert traj == [
        Marker.INIT,
        Region((10, 20, 30, 40)),
        Region((0, 0, 4, 0, 4, 2, 0, 2)),
        Marker.FAIL,
    ]


def test_read_trajectory_unparseable_file_is_empty(tmp_path: Path):
    path = tmp_path / "output.txt"
    path.write_text("10,20,30,40\nnot a region\n")
    assert read_trajectory(path) == []


def test_write_trajectory_round_trips_markers(tmp_path: Path):
    traj = [Marker.INIT, Region((1.5, 2, 3, 4)), Marker.FAIL, Marker.UNSET]
    path = write_trajectory(tmp_path / "out" / "seq_001.txt", traj)

    assert path.read_text().splitlines()[0] == "1"
    assert read_trajectory(path) == traj


def test_read_trajectory_rejects_fractional_marker_codes(tmp_path: Path):
    path = tmp_path / "output.txt"
    path.write_text("1\n1.7\n")
    assert read_trajectory(path) == []

    path.write_text("1.0\n2\n")
    assert read_trajectory(path) == [Marker.INIT, Marker.FAIL]
