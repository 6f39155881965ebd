from __future__ import annotations


class RetrialError(RuntimeError):
    """Base class for failures raised while running a tracker trial."""


class ConfigurationError(RetrialError):
    """The tracker or sequence description cannot be used as given."""


class NoResultError(RetrialError):
    """The tracker process did not leave a parseable trajectory behind."""


class TrajectoryLengthMismatchError(RetrialError):
    """The tracker produced a trajectory that does not cover the requested frames."""

    def __init__(self, message: str, *, expected: int, produced: int) -> None:
        super().__init__(message)
        self.expected = expected
        self.produced = produced
