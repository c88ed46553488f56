"""Summary statistics written to the stats file."""

from __future__ import annotations

from pathlib import Path

from .container import InfoContainer
from .memory import Buffers


def _joined(values) -> str:
    return ", ".join(str(value) for value in values)


def format_stats(info: InfoContainer, buffers: Buffers, main_pid: int) -> str:
    """Return the statistics text for the given container and buffers."""
    received = sum(info.wallets_stats)
    unread = len(buffers.servers_main)
    lines = [
        "Process Statistics:",
        f"Main has PID: [{main_pid}]",
        f"There were {info.n_wallets} Wallets, PIDs: [{_joined(info.wallets_pids)}]",
        f"There were {info.n_servers} Servers, PIDs: [{_joined(info.servers_pids)}]",
        f"Main received {received} transaction(s)!",
    ]
    lines += [
        f"Wallet {i} signed {count} transaction(s)!"
        for i, count in enumerate(info.wallets_stats)
    ]
    lines += [
        f"Server {i} processed {count} transaction(s)!"
        for i, count in enumerate(info.servers_stats)
    ]
    lines.append(f"Main read {received - unread} receipts.")
    balances = ", ".join(f"{balance:.2f}" for balance in info.balances)
    lines.append(f"Final Balances [{balances}] SOT")
    return "\n".join(lines) + "\n"


def write_stats(
    path: str | Path, info: InfoContainer, buffers: Buffers, main_pid: int
) -> None:
    """Overwrite the file at ``path`` with the statistics text."""
    Path(path).write_text(format_stats(info, buffers, main_pid), encoding="utf-8")