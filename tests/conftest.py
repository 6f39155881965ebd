from __future__ import annotations

import sys
from pathlib import Path

import pytest

from retrial.core.types import TrackerDescriptor

# Stand-in for an external tracker: reports the initial region for every frame.
_TRACKER_SCRIPT = r'''
import argparse
import os
from pathlib import Path

p = argparse.ArgumentParser()
p.add_argument("--extra", type=int, default=0)
p.add_argument("--exit", type=int, default=0)
p.add_argument("--echo", default="")
p.add_argument("--env-var", default="")
p.add_argument("--env-dump", default="")
args = p.parse_args()

frames = [line for line in Path("images.txt").read_text().splitlines() if line.strip()]
region = Path("region.txt").read_text().strip()

if args.echo:
    print(args.echo.encode().decode("unicode_escape"), end="")
if args.env_dump:
    Path(args.env_dump).write_text(os.environ.get(args.env_var, "<unset>"))

count = len(frames) + args.extra
if count > 0:
    Path("output.txt").write_text("".join(region + "\n" for _ in range(count)))
raise SystemExit(args.exit)
'''


def write_sequence(
    root: Path,
    regions: list[tuple[float, ...]],
    labels: dict[str, list[int]] | None = None,
) -> Path:
    """Create a sequence directory with empty frame files; label frames are 1-based."""
    color = root / "color"
    color.mkdir(parents=True, exist_ok=True)
    for i in range(len(regions)):
        (color / f"{i + 1:08d}.jpg").write_bytes(b"")
    (root / "groundtruth.txt").write_text(
        "".join(",".join(str(v) for v in r) + "\n" for r in regions), encoding="utf-8"
    )
    for name, frames in (labels or {}).items():
        flags = ["1" if i + 1 in frames else "0" for i in range(len(regions))]
        (root / f"{name}.tag").write_text("\n".join(flags) + "\n", encoding="utf-8")
    return root


@pytest.fixture
def tracker_script(tmp_path: Path) -> Path:
    path = tmp_path / "fake_tracker.py"
    path.write_text(_TRACKER_SCRIPT, encoding="utf-8")
    return path


@pytest.fixture
def make_tracker(tracker_script: Path):
    def _make(*args: str, linkpath: tuple[str, ...] = (), identifier: str = "static") -> TrackerDescriptor:
        command = " ".join([f'"{sys.executable}"', f'"{tracker_script}"', *args])
        return TrackerDescriptor(identifier=identifier, command=command, linkpath=linkpath)

    return _make
