from __future__ import annotations

import math
from pathlib import Path

from retrial.core.types import Trajectory
from retrial.io.trajectory import write_trajectory
from retrial.utils.rich_utils import CONSOLE


def save_trial(out_dir: str | Path, sequence_name: str, trajectory: Trajectory, time: float) -> Path | None:
    """
    Persist one trial.

    Output layout:
      <out_dir>/<sequence>_001.txt    trajectory (markers as 0/1/2)
      <out_dir>/<sequence>_time.txt   mean seconds per frame
    """

    if not trajectory:
        return None

    out = Path(out_dir)
    path = write_trajectory(out / f"{sequence_name}_001.txt", trajectory)
    value = "NaN" if math.isnan(time) else f"{time:.6f}"
    (out / f"{sequence_name}_time.txt").write_text(value + "\n", encoding="utf-8")
    CONSOLE.print(f"[bold yellow]Trial results saved: {path}")
    return path
