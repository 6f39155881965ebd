from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from retrial.core.errors import ConfigurationError
from retrial.core.types import Region

_IMAGE_SUFFIXES = (".jpg", ".jpeg", ".png")
_LABEL_SUFFIXES = (".tag", ".label")


@dataclass(frozen=True)
class Sequence:
    """
    An annotated image sequence.

    frames:      absolute image paths, one per frame
    groundtruth: one region per frame
    labels:      one (possibly empty) label set per frame
    """

    name: str
    frames: tuple[Path, ...]
    groundtruth: tuple[Region, ...]
    labels: tuple[frozenset[str], ...]

    def __post_init__(self) -> None:
        n = len(self.frames)
        if len(self.groundtruth) != n:
            raise ConfigurationError(
                f"Sequence {self.name!r}: {len(self.groundtruth)} ground-truth regions for {n} frames"
            )
        if len(self.labels) != n:
            raise ConfigurationError(f"Sequence {self.name!r}: {len(self.labels)} label sets for {n} frames")

    @property
    def length(self) -> int:
        return len(self.frames)


def _check_frame(sequence: Sequence, frame: int) -> int:
    if frame < 1 or frame > sequence.length:
        raise IndexError(f"Frame {frame} out of range 1..{sequence.length} for sequence {sequence.name!r}")
    return frame - 1


def get_region(sequence: Sequence, frames: Iterable[int]) -> list[Region]:
    """Ground-truth regions for 1-based frame numbers."""
    return [sequence.groundtruth[_check_frame(sequence, f)] for f in frames]


def get_labels(sequence: Sequence, frame: int) -> frozenset[str]:
    """Labels of a 1-based frame number."""
    return sequence.labels[_check_frame(sequence, frame)]


def _parse_region_line(raw: str, *, path: Path, lineno: int) -> Region:
    try:
        return Region.from_iterable(float(v) for v in raw.replace("\t", ",").split(","))
    except ValueError as e:
        raise ConfigurationError(f"Bad region at {path}:{lineno}: {raw.rstrip()}") from e


def read_groundtruth(path: str | Path) -> list[Region]:
    p = Path(path)
    regions: list[Region] = []
    with p.open("r", encoding="utf-8") as f:
        for lineno, raw in enumerate(f, start=1):
            line = raw.strip()
            if not line:
                continue
            regions.append(_parse_region_line(line, path=p, lineno=lineno))
    return regions


def _find_frames(directory: Path) -> list[Path]:
    listing = directory / "images.txt"
    if listing.is_file():
        frames = []
        for raw in listing.read_text(encoding="utf-8").splitlines():
            line = raw.strip()
            if line:
                frame = Path(line)
                frames.append(frame if frame.is_absolute() else (directory / frame).resolve())
        return frames

    for candidate in (directory / "color", directory):
        if candidate.is_dir():
            frames = sorted(p.resolve() for p in candidate.iterdir() if p.suffix.lower() in _IMAGE_SUFFIXES)
            if frames:
                return frames
    return []


def _read_label_file(path: Path, length: int) -> list[bool]:
    flags = []
    for raw in path.read_text(encoding="utf-8").splitlines():
        line = raw.strip()
        if line:
            flags.append(line not in {"0", "0.0", "false"})
    # Label files may stop early; missing trailing frames are unlabeled.
    flags += [False] * (length - len(flags))
    return flags[:length]


def load_sequence(directory: str | Path, *, name: str | None = None) -> Sequence:
    """
    Load a sequence directory.

    Layout:
      <dir>/groundtruth.txt        one region per line
      <dir>/images.txt             optional explicit frame list
      <dir>/color/*.jpg            or images directly in <dir>
      <dir>/<label>.tag|.label     per-frame 0/1 flags
    """

    root = Path(directory).expanduser().resolve()
    gt_path = root / "groundtruth.txt"
    if not gt_path.is_file():
        raise FileNotFoundError(f"groundtruth.txt not found in sequence directory: {root}")

    groundtruth = read_groundtruth(gt_path)
    frames = _find_frames(root)
    if len(frames) != len(groundtruth):
        raise ConfigurationError(
            f"Sequence {root.name!r}: found {len(frames)} frames but {len(groundtruth)} ground-truth regions"
        )

    n = len(frames)
    per_frame: list[set[str]] = [set() for _ in range(n)]
    for label_path in sorted(root.iterdir()):
        if label_path.suffix.lower() not in _LABEL_SUFFIXES or not label_path.is_file():
            continue
        for i, flag in enumerate(_read_label_file(label_path, n)):
            if flag:
                per_frame[i].add(label_path.stem)

    return Sequence(
        name=name or root.name,
        frames=tuple(frames),
        groundtruth=tuple(groundtruth),
        labels=tuple(frozenset(s) for s in per_frame),
    )
