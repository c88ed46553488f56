"""Server worker: validates signed transactions, moves funds, issues receipts."""

from __future__ import annotations

import time

from .clock import SLEEP_INTERVAL
from .container import InfoContainer
from .memory import Buffers, Transaction


def execute_server(server_id: int, info: InfoContainer, buffers: Buffers) -> int:
    """Run the server loop until termination; return the number of processed transactions.

    Each round reads the oldest transaction from the wallets-servers buffer,
    validates and applies it, and writes the receipt to the servers-main buffer.
    """
    inbox = info.sems.wallet_server
    outbox = info.sems.server_main
    while not info.read_terminate():
        inbox.unread.acquire()
        inbox.mutex.acquire()
        if info.read_terminate():
            break
        tx = server_receive_transaction(info, buffers)
        inbox.mutex.release()
        inbox.free_space.release()

        if tx is None:
            time.sleep(SLEEP_INTERVAL)
            continue

        server_process_transaction(tx, server_id, info)

        outbox.free_space.acquire()
        outbox.mutex.acquire()
        if info.read_terminate():
            break
        server_send_transaction(tx, info, buffers)
        outbox.mutex.release()
        outbox.unread.release()

        if tx.server_signature != -1:
            print(
                f"[Server {server_id}] Li a transação {tx.id} do buffer "
                "e esta foi processada corretamente!"
            )
        else:
            print(f"[Server {server_id}] A transação {tx.id} falhou por alguma razão!\n")
        time.sleep(SLEEP_INTERVAL)
    return info.servers_stats[server_id]


def server_receive_transaction(
    info: InfoContainer, buffers: Buffers
) -> Transaction | None:
    """Read the oldest pending transaction, or None if terminating or empty."""
    if info.read_terminate():
        return None
    return buffers.wallets_servers.read()


def _valid_wallet_ids(tx: Transaction, info: InfoContainer) -> bool:
    return (
        tx.src_id != tx.dest_id
        and 0 <= tx.src_id < info.n_wallets
        and 0 <= tx.dest_id < info.n_wallets
    )


def _enough_funds(tx: Transaction, balances: list[float]) -> bool:
    return tx.amount <= balances[tx.src_id]


def _signed_by_source(tx: Transaction) -> bool:
    return tx.wallet_signature == tx.src_id


def server_process_transaction(
    tx: Transaction, server_id: int, info: InfoContainer
) -> bool:
    """Validate ``tx`` and, if valid, move the funds and sign it.

    A transaction is valid when source and destination are distinct existing
    wallets, the source holds at least ``amount`` and the wallet signature is
    the source's. Returns whether the transaction was applied.
    """
    valid = (
        _valid_wallet_ids(tx, info)
        and _enough_funds(tx, info.balances)
        and _signed_by_source(tx)
    )
    if valid:
        info.balances[tx.src_id] -= tx.amount
        info.balances[tx.dest_id] += tx.amount
        tx.server_signature = server_id
        tx.change_time.signed_by_server = time.time()
        info.servers_stats[server_id] += 1
    return valid


def server_send_transaction(
    tx: Transaction, info: InfoContainer, buffers: Buffers
) -> bool:
    """Write the receipt of a server-signed ``tx`` to the servers-main buffer.

    Unsigned transactions are dropped, as is a receipt that finds no free slot.
    Returns whether the receipt was stored.
    """
    if tx.server_signature < 0:
        return False
    return buffers.servers_main.write(tx)