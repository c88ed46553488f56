"""Wallet worker: signs transactions from main and forwards them to the servers."""

from __future__ import annotations

import time

from .clock import SLEEP_INTERVAL
from .container import InfoContainer
from .memory import Buffers, Transaction


def execute_wallet(wallet_id: int, info: InfoContainer, buffers: Buffers) -> int:
    """Run the wallet loop until termination; return the number of signed transactions.

    Each round takes a transaction addressed from this wallet out of the
    main-wallets buffer, signs it and writes it to the wallets-servers buffer.
    When nothing is addressed to this wallet, the round waits a few
    milliseconds and tries again.
    """
    inbox = info.sems.main_wallet
    outbox = info.sems.wallet_server
    while not info.read_terminate():
        inbox.unread.acquire()
        inbox.mutex.acquire()
        if info.read_terminate():
            break
        tx = wallet_receive_transaction(wallet_id, info, buffers)
        inbox.mutex.release()
        # A transaction meant for another wallet stays unread for that wallet.
        (inbox.unread if tx is None else inbox.free_space).release()

        if tx is None:
            time.sleep(SLEEP_INTERVAL)
            continue
        wallet_process_transaction(tx, wallet_id, info)

        outbox.free_space.acquire()
        outbox.mutex.acquire()
        if info.read_terminate():
            break
        wallet_send_transaction(tx, info, buffers)
        outbox.mutex.release()
        outbox.unread.release()

        print(f"[Wallet {wallet_id}] Li a transação {tx.id} do buffer e a assinei!")
        time.sleep(SLEEP_INTERVAL)
    return info.wallets_stats[wallet_id]


def wallet_receive_transaction(
    wallet_id: int, info: InfoContainer, buffers: Buffers
) -> Transaction | None:
    """Take the next transaction whose source is ``wallet_id``.

    Returns None when the system is terminating or no such transaction waits.
    """
    if info.read_terminate():
        return None
    return buffers.main_wallets.take_for_wallet(wallet_id)


def wallet_process_transaction(
    tx: Transaction, wallet_id: int, info: InfoContainer
) -> None:
    """Sign ``tx`` with ``wallet_id`` and count it for this wallet."""
    tx.wallet_signature = wallet_id
    tx.change_time.signed_by_wallet = time.time()
    info.wallets_stats[wallet_id] += 1


def wallet_send_transaction(
    tx: Transaction, info: InfoContainer, buffers: Buffers
) -> None:
    """Write the signed ``tx`` to the wallets-servers buffer."""
    buffers.wallets_servers.write(tx)