"""
retrial: run external single-target trackers with automatic reinitialization.

Example usage:
    >>> from retrial import load_sequence, run_with_reinitialization
    >>> from retrial import ExecutionContext, ReinitOptions, TrackerDescriptor
    >>>
    >>> tracker = TrackerDescriptor(identifier="ncc", command="python ncc.py")
    >>> sequence = load_sequence("sequences/ball")
    >>> trajectory, time = run_with_reinitialization(
    ...     tracker, sequence, ExecutionContext(), ReinitOptions(fail_overlap=0.0)
    ... )
"""

from __future__ import annotations

from retrial.core.controller import run_with_reinitialization
from retrial.core.errors import (
    ConfigurationError,
    NoResultError,
    RetrialError,
    TrajectoryLengthMismatchError,
)
from retrial.core.executor import run_once
from retrial.core.types import ExecutionContext, Marker, Region, ReinitOptions, TrackerDescriptor
from retrial.data.sequence import Sequence, load_sequence
from retrial.version import __version__

__all__ = [
    "__version__",
    "ConfigurationError",
    "ExecutionContext",
    "Marker",
    "NoResultError",
    "Region",
    "ReinitOptions",
    "RetrialError",
    "Sequence",
    "TrackerDescriptor",
    "TrajectoryLengthMismatchError",
    "load_sequence",
    "run_once",
    "run_with_reinitialization",
]
