# Copyright 2022 the Regents of the University of California, Nerfstudio Team and contributors. All rights reserved.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Shared Rich console and logging setup."""

from __future__ import annotations

import os
from pathlib import Path
import re
import sys

from rich.console import Console
from rich.logging import RichHandler

_ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")


class _TeeStream:
    """A minimal text stream that tees Rich console output to a log file.

    - Terminal output keeps ANSI styling.
    - File output is stripped of ANSI escape codes for readability.
    """

    def __init__(self) -> None:
        self._log_file = None

    def set_log_file(self, log_file) -> None:
        self._log_file = log_file

    def write(self, text: str) -> int:
        # Always target the current sys.stdout so pytest's `capsys` captures output.
        stream = sys.stdout
        written = stream.write(text)
        stream.flush()

        if self._log_file is not None:
            if getattr(self._log_file, "closed", False):
                self._log_file = None
            else:
                try:
                    self._log_file.write(_ANSI_ESCAPE_RE.sub("", text))
                    self._log_file.flush()
                except (OSError, ValueError):
                    self._log_file = None
        return written

    def flush(self) -> None:
        sys.stdout.flush()
        if self._log_file is not None and not getattr(self._log_file, "closed", False):
            try:
                self._log_file.flush()
            except (OSError, ValueError):
                self._log_file = None

    def isatty(self) -> bool:
        return bool(getattr(sys.stdout, "isatty", lambda: False)())

    @property
    def encoding(self) -> str:
        return getattr(sys.stdout, "encoding", "utf-8")


_TEE_STREAM = _TeeStream()
CONSOLE = Console(width=120, file=_TEE_STREAM)

_LOG_FILE_HANDLE = None
_LOG_FILE_PATH: Path | None = None
_PY_LOGGING_CONFIGURED = False


def _default_log_dir() -> Path:
    # Prefer a local ./logs directory when possible; fall back to the user's cache.
    cwd_logs = Path.cwd() / "logs"
    try:
        cwd_logs.mkdir(parents=True, exist_ok=True)
        test_file = cwd_logs / ".retrial_write_test"
        test_file.write_text("ok", encoding="utf-8")
        test_file.unlink(missing_ok=True)
        return cwd_logs
    except OSError:
        cache_root = Path(os.getenv("XDG_CACHE_HOME", str(Path.home() / ".cache")))
        return cache_root / "retrial" / "logs"


def enable_file_logging() -> Path | None:
    """Enable mirroring console output to a plaintext log file.

    The log file is resolved from:
      1) `RETRIAL_LOG_FILE`
      2) `RETRIAL_LOG_DIR` + "retrial.log"
      3) `./logs/retrial.log` (or fallback to XDG cache if not writable)
    """

    global _LOG_FILE_HANDLE, _LOG_FILE_PATH

    env_file = os.getenv("RETRIAL_LOG_FILE")
    if env_file:
        log_path = Path(env_file)
    else:
        env_dir = os.getenv("RETRIAL_LOG_DIR")
        log_path = (Path(env_dir) if env_dir else _default_log_dir()) / "retrial.log"

    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError:
        return None

    # Idempotent if called repeatedly with the same file.
    if (
        _LOG_FILE_HANDLE is not None
        and _LOG_FILE_PATH == log_path
        and not getattr(_LOG_FILE_HANDLE, "closed", False)
    ):
        return _LOG_FILE_PATH

    previous_handle = _LOG_FILE_HANDLE

    try:
        new_handle = log_path.open("a", encoding="utf-8")
    except OSError:
        return None

    _LOG_FILE_HANDLE = new_handle
    _LOG_FILE_PATH = log_path
    _TEE_STREAM.set_log_file(_LOG_FILE_HANDLE)

    if previous_handle is not None:
        try:
            previous_handle.close()
        except OSError:
            pass
    return _LOG_FILE_PATH


def configure_python_logging(level: str | int | None = None) -> None:
    """Route standard `logging` output through Rich CONSOLE.

    Since CONSOLE is tee'd to a plaintext log file via `enable_file_logging`,
    log records emitted by the executor and controller are persisted too.

    This is best-effort and idempotent.
    """

    global _PY_LOGGING_CONFIGURED
    if _PY_LOGGING_CONFIGURED:
        return

    import logging

    if level is None:
        level = os.getenv("RETRIAL_LOG_LEVEL", "INFO").upper()

    logging.basicConfig(
        level=level,
        handlers=[
            RichHandler(
                console=CONSOLE,
                rich_tracebacks=False,
                show_time=True,
                show_level=True,
                show_path=False,
            ),
        ],
        force=True,
    )
    _PY_LOGGING_CONFIGURED = True


def print_raw_output(output: str) -> None:
    """Dump captured process output between visible markers.

    Control characters other than newline and carriage return are dropped so
    backspaces and terminal escapes emitted by a tracker do not garble the log.
    """
    printable = "".join(ch for ch in output if ord(ch) > 31 or ch in "\n\r")
    CONSOLE.print("Printing command line output:", markup=False)
    CONSOLE.print("-------------------- Begin raw output ------------------------", markup=False)
    CONSOLE.print(printable, markup=False, highlight=False)
    CONSOLE.print("--------------------- End raw output -------------------------", markup=False)
