"""Loading of the run settings and the system arguments from text files."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

MAX_NAME_LENGTH = 256


class SettingsError(ValueError):
    """Raised when a settings or arguments file is missing or malformed."""


@dataclass(frozen=True)
class Settings:
    """Where the log and statistics go, and the alarm period in seconds."""

    log_file: str
    stats_file: str
    period: int


@dataclass(frozen=True)
class Config:
    """The system arguments: balances, process counts and limits."""

    init_balance: float
    n_wallets: int
    n_servers: int
    buffers_size: int
    max_txs: int


def _read_tokens(path: str | Path, count: int, what: str) -> list[str]:
    try:
        text = Path(path).read_text()
    except OSError as exc:
        raise SettingsError(f"cannot open {what} file {path!s}: {exc}") from exc
    tokens = text.split()
    if len(tokens) < count:
        raise SettingsError(
            f"{what} file {path!s} holds {len(tokens)} value(s), expected {count}"
        )
    return tokens[:count]


def _parse(kind: type, token: str, what: str):
    try:
        return kind(token)
    except ValueError as exc:
        raise SettingsError(f"invalid {what} value {token!r}") from exc


def load_settings(path: str | Path) -> Settings:
    """Read the log file name, stats file name and alarm period from ``path``."""
    log_file, stats_file, period = _read_tokens(path, 3, "settings")
    for name in (log_file, stats_file):
        if len(name) >= MAX_NAME_LENGTH:
            raise SettingsError(f"file name too long: {name[:32]!r}...")
    return Settings(log_file, stats_file, _parse(int, period, "settings"))


def load_config(path: str | Path) -> Config:
    """Read the five system arguments from ``path``."""
    balance, wallets, servers, size, max_txs = _read_tokens(path, 5, "args")
    return Config(
        init_balance=_parse(float, balance, "args"),
        n_wallets=_parse(int, wallets, "args"),
        n_servers=_parse(int, servers, "args"),
        buffers_size=_parse(int, size, "args"),
        max_txs=_parse(int, max_txs, "args"),
    )