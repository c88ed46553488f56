"""Append-only log of the commands entered by the user."""

from __future__ import annotations

from pathlib import Path

from .clock import timestamp


def log_command(path: str | Path, message: str) -> None:
    """Append ``message`` to the log at ``path``, prefixed by the current timestamp."""
    with open(path, "a", encoding="utf-8") as log:
        log.write(f"{timestamp()} {message}\n")