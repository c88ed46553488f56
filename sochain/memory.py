"""Transactions and the buffers that carry them between main, wallets and servers."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field

from .clock import Timestamps


@dataclass
class Transaction:
    """A transfer of ``amount`` SOT from wallet ``src_id`` to wallet ``dest_id``."""

    id: int
    src_id: int
    dest_id: int
    amount: float
    wallet_signature: int = -1
    server_signature: int = -1
    change_time: Timestamps = field(default_factory=Timestamps)


def _check_size(size: int) -> None:
    if size < 1:
        raise ValueError(f"buffer size must be positive, got {size}")


class RandomAccessBuffer:
    """Fixed slots, each free or occupied; readers pick the slot they want."""

    def __init__(self, size: int) -> None:
        _check_size(size)
        self.size = size
        self._slots: list[Transaction | None] = [None] * size

    def write(self, tx: Transaction) -> bool:
        """Store a copy of ``tx`` in the first free slot; return False if full."""
        for index, slot in enumerate(self._slots):
            if slot is None:
                self._slots[index] = copy.deepcopy(tx)
                return True
        return False

    def _take(self, predicate) -> Transaction | None:
        for index, slot in enumerate(self._slots):
            if slot is not None and predicate(slot):
                self._slots[index] = None
                return slot
        return None

    def take_for_wallet(self, wallet_id: int) -> Transaction | None:
        """Remove and return the first transaction whose source is ``wallet_id``."""
        return self._take(lambda tx: tx.src_id == wallet_id)

    def take_by_id(self, tx_id: int) -> Transaction | None:
        """Remove and return the transaction with id ``tx_id``, if present."""
        return self._take(lambda tx: tx.id == tx_id)

    def occupied(self) -> list[tuple[int, Transaction]]:
        """Return ``(slot, transaction)`` pairs of occupied slots in slot order."""
        return [(index, tx) for index, tx in enumerate(self._slots) if tx is not None]

    def __len__(self) -> int:
        return sum(slot is not None for slot in self._slots)


class CircularBuffer:
    """First-in first-out ring; any reader takes the oldest transaction.

    Writes do not check for room: callers limit them with a free-space semaphore.
    """

    def __init__(self, size: int) -> None:
        _check_size(size)
        self.size = size
        self._slots: list[Transaction | None] = [None] * size
        self._in = 0
        self._out = 0

    def write(self, tx: Transaction) -> None:
        """Store a copy of ``tx`` at the write position and advance it."""
        self._slots[self._in] = copy.deepcopy(tx)
        self._in = (self._in + 1) % self.size

    def read(self) -> Transaction | None:
        """Return the oldest unread transaction, or None when the ring is empty."""
        if self._in == self._out:
            return None
        tx = self._slots[self._out]
        self._out = (self._out + 1) % self.size
        return tx

    def _is_pending(self, index: int) -> bool:
        if self._in >= self._out:
            return self._out <= index < self._in
        return index >= self._out or index < self._in

    def pending(self) -> list[tuple[int, Transaction]]:
        """Return ``(slot, transaction)`` pairs not yet read, in slot order."""
        return [
            (index, tx)
            for index, tx in enumerate(self._slots)
            if tx is not None and self._is_pending(index)
        ]

    def __len__(self) -> int:
        return (self._in - self._out) % self.size


@dataclass
class Buffers:
    """The three buffers linking main to wallets, wallets to servers, servers to main."""

    main_wallets: RandomAccessBuffer
    wallets_servers: CircularBuffer
    servers_main: RandomAccessBuffer


def create_buffers(size: int) -> Buffers:
    """Create the three buffers, each with ``size`` slots."""
    return Buffers(
        main_wallets=RandomAccessBuffer(size),
        wallets_servers=CircularBuffer(size),
        servers_main=RandomAccessBuffer(size),
    )