from __future__ import annotations

import tempfile
from pathlib import Path

from retrial.core.types import ExecutionContext
from retrial.data.sequence import Sequence, get_region

# Name of the trajectory file a tracker is expected to write into its working directory.
OUTPUT_FILE = "output.txt"
IMAGES_FILE = "images.txt"
REGION_FILE = "region.txt"


def prepare_trial_data(sequence: Sequence, start: int, context: ExecutionContext) -> Path:
    """
    Create a fresh working directory with the tracker input for frames `start..N`.

    Output layout:
      <dir>/images.txt   absolute frame paths, one per line
      <dir>/region.txt   ground-truth region of frame `start`
    """

    if context.temp_root is not None:
        Path(context.temp_root).mkdir(parents=True, exist_ok=True)
    directory = Path(
        tempfile.mkdtemp(prefix=f"trial_{sequence.name}_", dir=str(context.temp_root) if context.temp_root else None)
    )

    frames = sequence.frames[start - 1 :]
    with (directory / IMAGES_FILE).open("w", encoding="utf-8") as f:
        for frame in frames:
            f.write(f"{frame}\n")

    (region,) = get_region(sequence, [start])
    (directory / REGION_FILE).write_text(region.to_text() + "\n", encoding="utf-8")
    return directory
