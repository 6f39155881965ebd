"""Scoped changes to process-wide state (environment variables, working directory)."""

from __future__ import annotations

import os
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Sequence


def library_search_variable() -> str:
    return "PATH" if sys.platform.startswith("win") else "LD_LIBRARY_PATH"


@contextmanager
def scoped_environ(name: str, value: str | None) -> Iterator[None]:
    """Set (or with `None`, leave untouched) one environment variable for the scope.

    The previous value is restored verbatim on exit, including the variable
    being absent.
    """
    previous = os.environ.get(name)
    if value is not None:
        os.environ[name] = value
    try:
        yield
    finally:
        if previous is None:
            os.environ.pop(name, None)
        else:
            os.environ[name] = previous


def build_library_path(linkpath: Sequence[str], inherited: str | None) -> str | None:
    """Link-path fragments followed by the inherited search path, or `None` to keep it."""
    if not linkpath:
        return None
    parts = [str(p) for p in linkpath]
    if inherited:
        parts.append(inherited)
    return os.pathsep.join(parts)


@contextmanager
def library_search_path(linkpath: Sequence[str]) -> Iterator[str]:
    """Prepend `linkpath` to the dynamic library search path; yields the variable name."""
    var = library_search_variable()
    with scoped_environ(var, build_library_path(linkpath, os.environ.get(var))):
        yield var


@contextmanager
def working_directory(path: str | Path) -> Iterator[Path]:
    previous = os.getcwd()
    os.chdir(path)
    try:
        yield Path(path)
    finally:
        os.chdir(previous)
