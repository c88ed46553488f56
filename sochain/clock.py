"""Timestamps for the activity log and transaction life cycle."""

from __future__ import annotations

import time
from dataclasses import dataclass

# Pause, in seconds, between polling attempts of the worker loops.
SLEEP_INTERVAL = 0.02


@dataclass
class Timestamps:
    """Wall-clock times (seconds since the epoch) of a transaction's stages."""

    created: float = 0.0
    signed_by_server: float = 0.0
    signed_by_wallet: float = 0.0


def timestamp(when: float | None = None) -> str:
    """Format ``when`` (default: now) as ``YYYYmmdd HH:MM:SS.mmm`` in local time.

    The three-digit suffix is the whole-second epoch value modulo 1000.
    """
    if when is None:
        when = time.time()
    seconds = int(when)
    stamp = time.strftime("%Y%m%d %H:%M:%S", time.localtime(seconds))
    return f"{stamp}.{seconds % 1000:03d}"