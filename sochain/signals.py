"""Interrupt and alarm handling, and the periodic report of pending transactions."""

from __future__ import annotations

import signal
import time

from .container import InfoContainer
from .memory import Buffers

_NS_PER_SECOND = 1_000_000_000


class SignalFlags:
    """Records whether SIGINT or SIGALRM arrived since last checked."""

    def __init__(self) -> None:
        self.interrupted = False
        self.alarmed = False

    def install(self) -> None:
        """Route SIGINT (and SIGALRM where available) to this object's handlers."""
        signal.signal(signal.SIGINT, self.on_interrupt)
        if hasattr(signal, "SIGALRM"):
            signal.signal(signal.SIGALRM, self.on_alarm)

    def on_interrupt(self, signum, frame) -> None:
        self.interrupted = True

    def on_alarm(self, signum, frame) -> None:
        self.alarmed = True

    def reset_alarm(self, period: int) -> None:
        """Clear the alarm flag and schedule the next alarm in ``period`` seconds."""
        self.alarmed = False
        if hasattr(signal, "alarm"):
            signal.alarm(period)


def elapsed_text(created: float, now: float) -> str:
    """Format the time from ``created`` to ``now`` as ``seconds.milliseconds``."""
    delta_ns = int(round((now - created) * _NS_PER_SECOND))
    seconds, nanos = divmod(delta_ns, _NS_PER_SECOND)
    return f"{seconds}.{nanos // 1_000_000:03d}"


def alarm_report(
    info: InfoContainer, buffers: Buffers, now: float | None = None
) -> str:
    """List ``id elapsed`` for every transaction still waiting in a buffer.

    Slots are visited in order; for each slot the main-wallets, wallets-servers
    and servers-main buffers are reported in that order.
    """
    if now is None:
        now = time.time()
    with info.sems.main_wallet.mutex:
        main_wallets = dict(buffers.main_wallets.occupied())
    with info.sems.wallet_server.mutex:
        wallets_servers = dict(buffers.wallets_servers.pending())
    with info.sems.server_main.mutex:
        servers_main = dict(buffers.servers_main.occupied())

    lines = [""]
    for index in range(info.buffers_size):
        for slots in (main_wallets, wallets_servers, servers_main):
            tx = slots.get(index)
            if tx is not None:
                lines.append(f"{tx.id} {elapsed_text(tx.change_time.created, now)}")
    return "\n".join(lines) + "\n"