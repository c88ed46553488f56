"""Starting wallet and server workers and waiting for their results."""

from __future__ import annotations

import threading
from typing import Any, Callable

from .container import InfoContainer
from .memory import Buffers
from .server import execute_server
from .wallet import execute_wallet


class _Worker(threading.Thread):
    """A worker thread that keeps the return value or error of its function."""

    def __init__(self, name: str, function: Callable[..., int], args: tuple) -> None:
        super().__init__(name=name, daemon=True)
        self._function = function
        self._args = args
        self.result: int | None = None
        self.error: BaseException | None = None

    def run(self) -> None:
        try:
            self.result = self._function(*self._args)
        except BaseException as exc:  # reported to the waiter
            self.error = exc

    @property
    def pid(self) -> int:
        """Native identifier of the running worker, 0 before it starts."""
        return self.native_id or 0


def _launch(name: str, function: Callable[..., int], *args: Any) -> _Worker:
    # Only the main thread receives signals, so workers need no handlers.
    worker = _Worker(name, function, args)
    worker.start()
    return worker


def launch_wallet(wallet_id: int, info: InfoContainer, buffers: Buffers) -> _Worker:
    """Start the worker of wallet ``wallet_id`` and return its handle."""
    return _launch(f"wallet-{wallet_id}", execute_wallet, wallet_id, info, buffers)


def launch_server(server_id: int, info: InfoContainer, buffers: Buffers) -> _Worker:
    """Start the worker of server ``server_id`` and return its handle."""
    return _launch(f"server-{server_id}", execute_server, server_id, info, buffers)


def wait_process(process: _Worker) -> int | None:
    """Wait for ``process`` to finish and return its result.

    An exception raised inside the worker is raised again here.
    """
    process.join()
    if process.error is not None:
        raise process.error
    return process.result