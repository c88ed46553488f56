"""Counting semaphores that guard the three buffers and the terminate flag."""

from __future__ import annotations

import threading
from dataclasses import dataclass

MAIN_WALLET_SEM_NAME = "/main_wallet"
WALLET_SERVER_SEM_NAME = "/wallet_server"
SERVER_MAIN_SEM_NAME = "/server_main"
UNREAD_SUFFIX = "_unread"
FREE_SPACE_SUFFIX = "_free_space"
MUTEX_SUFFIX = "_mutex"
TERMINATE_MUTEX_NAME = "/terminate_mutex"


class _CountingSemaphore:
    """A counting semaphore whose current value can be inspected."""

    def __init__(self, value: int = 1) -> None:
        if value < 0:
            raise ValueError(f"semaphore value must be non-negative, got {value}")
        self._value = value
        self._cond = threading.Condition(threading.Lock())

    @property
    def value(self) -> int:
        with self._cond:
            return self._value

    def acquire(self, blocking: bool = True, timeout: float | None = None) -> bool:
        """Decrement the counter, waiting while it is zero; False on timeout."""
        with self._cond:
            if not blocking:
                if self._value == 0:
                    return False
            elif not self._cond.wait_for(lambda: self._value > 0, timeout):
                return False
            self._value -= 1
            return True

    def release(self, n: int = 1) -> None:
        """Increment the counter by ``n`` and wake waiters."""
        if n < 1:
            raise ValueError("n must be at least 1")
        with self._cond:
            self._value += n
            self._cond.notify(n)

    def __enter__(self) -> _CountingSemaphore:
        self.acquire()
        return self

    def __exit__(self, *exc) -> None:
        self.release()


@dataclass
class TripletSemaphores:
    """Producer-consumer semaphores for one buffer."""

    unread: _CountingSemaphore
    free_space: _CountingSemaphore
    mutex: _CountingSemaphore


@dataclass
class Semaphores:
    """All semaphores of the system."""

    main_wallet: TripletSemaphores
    wallet_server: TripletSemaphores
    server_main: TripletSemaphores
    terminate_mutex: _CountingSemaphore


def create_triplet_sems(capacity: int) -> TripletSemaphores:
    """Create unread (0), free_space (``capacity``) and mutex (1) semaphores."""
    return TripletSemaphores(
        unread=_CountingSemaphore(0),
        free_space=_CountingSemaphore(capacity),
        mutex=_CountingSemaphore(1),
    )


def create_all_semaphores(capacity: int) -> Semaphores:
    """Create the semaphores of every buffer, free space set to ``capacity``."""
    return Semaphores(
        main_wallet=create_triplet_sems(capacity),
        wallet_server=create_triplet_sems(capacity),
        server_main=create_triplet_sems(capacity),
        terminate_mutex=_CountingSemaphore(1),
    )


def describe_semaphores(sems: Semaphores) -> str:
    """Return one ``name: value`` line per semaphore, followed by a blank line."""
    lines = []
    for prefix, triplet in (
        (MAIN_WALLET_SEM_NAME, sems.main_wallet),
        (WALLET_SERVER_SEM_NAME, sems.wallet_server),
        (SERVER_MAIN_SEM_NAME, sems.server_main),
    ):
        lines.append(f"{prefix}{UNREAD_SUFFIX}: {triplet.unread.value}")
        lines.append(f"{prefix}{FREE_SPACE_SUFFIX}: {triplet.free_space.value}")
        lines.append(f"{prefix}{MUTEX_SUFFIX}: {triplet.mutex.value}")
    lines.append(f"{TERMINATE_MUTEX_NAME}: {sems.terminate_mutex.value}")
    return "\n".join(lines) + "\n\n\n"