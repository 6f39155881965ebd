"""Run configuration: tracker descriptions and trial options (YAML + dot-list overrides)."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, Union

from omegaconf import OmegaConf
from omegaconf.errors import OmegaConfBaseException

from retrial.core.errors import ConfigurationError
from retrial.core.types import ExecutionContext, ReinitOptions, TrackerDescriptor


@dataclass
class RunConfig:
    """Configuration of one (tracker, sequence) trial."""

    tracker: Optional[str] = None  # Path to a tracker YAML file
    sequence: Optional[str] = None  # Sequence directory
    output: Optional[str] = None  # Results directory; nothing is written when unset

    # Execution
    fake: bool = False  # Dry run: only report the command and working directory
    cleanup: bool = True  # Delete per-run working directories
    temp_root: Optional[str] = None

    # Reinitialization
    skip_labels: List[str] = field(default_factory=list)
    skip_initialize: int = 1
    # Overlap at or below which a frame counts as a failure; null disables detection.
    fail_overlap: Optional[float] = None

    def context(self) -> ExecutionContext:
        return ExecutionContext(
            fake=self.fake,
            cleanup=self.cleanup,
            temp_root=Path(self.temp_root).expanduser() if self.temp_root else None,
        )

    def options(self) -> ReinitOptions:
        return ReinitOptions(
            skip_labels=frozenset(self.skip_labels),
            skip_initialize=self.skip_initialize,
            fail_overlap=self.fail_overlap,
        )


def load_run_config(path: Optional[Union[str, Path]] = None, overrides: Sequence[str] = ()) -> RunConfig:
    """Merge order: defaults < YAML file < `key=value` overrides."""
    try:
        cfg = OmegaConf.structured(RunConfig)
        if path is not None:
            p = Path(path)
            if not p.is_file():
                raise FileNotFoundError(f"Run config file not found: {p}")
            cfg = OmegaConf.merge(cfg, OmegaConf.load(str(p)))
        if overrides:
            cfg = OmegaConf.merge(cfg, OmegaConf.from_dotlist(list(overrides)))
        return OmegaConf.to_object(cfg)
    except OmegaConfBaseException as e:
        raise ConfigurationError(f"Invalid run configuration: {e}") from e


def load_tracker(path: Union[str, Path]) -> TrackerDescriptor:
    """
    Load a tracker description.

    Example:
      identifier: ncc
      command: python ${oc.env:HOME}/trackers/ncc.py
      linkpath: [/opt/opencv/lib]
    """

    p = Path(path)
    if not p.is_file():
        raise FileNotFoundError(f"Tracker file not found: {p}")

    try:
        data = OmegaConf.to_container(OmegaConf.load(str(p)), resolve=True)
    except OmegaConfBaseException as e:
        raise ConfigurationError(f"Invalid tracker file {p}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"Tracker file {p} must contain a mapping")

    unknown = set(data) - {"identifier", "command", "linkpath"}
    if unknown:
        raise ConfigurationError(f"Unrecognized keys in tracker file {p}: {sorted(unknown)}")

    linkpath = data.get("linkpath") or []
    if isinstance(linkpath, str):
        linkpath = [linkpath]

    return TrackerDescriptor(
        identifier=str(data.get("identifier") or p.stem),
        command=str(data.get("command") or ""),
        linkpath=tuple(str(x) for x in linkpath),
    )
