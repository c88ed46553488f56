"""Shared state of a running system: configuration, balances, statistics."""

from __future__ import annotations

from .settings import Config
from .synchronization import Semaphores


class InfoContainer:
    """Everything main, wallets and servers share besides the buffers."""

    def __init__(self, config: Config, semaphores: Semaphores) -> None:
        self.config = config
        self.init_balance = config.init_balance
        self.n_wallets = config.n_wallets
        self.n_servers = config.n_servers
        self.buffers_size = config.buffers_size
        self.max_txs = config.max_txs
        self.balances = [config.init_balance] * config.n_wallets
        self.wallets_pids = [0] * config.n_wallets
        self.wallets_stats = [0] * config.n_wallets
        self.servers_pids = [0] * config.n_servers
        self.servers_stats = [0] * config.n_servers
        self.sems = semaphores
        self._terminate = False

    def read_terminate(self) -> bool:
        """Read the terminate flag under its mutex."""
        with self.sems.terminate_mutex:
            return self._terminate

    def request_terminate(self) -> None:
        """Set the terminate flag under its mutex."""
        with self.sems.terminate_mutex:
            self._terminate = True

    def wake_up_processes(self) -> None:
        """Post every semaphore a worker may be blocked on so all can finish."""
        sems = self.sems
        for _ in range(self.n_wallets):
            sems.main_wallet.unread.release()
            sems.main_wallet.mutex.release()
            sems.wallet_server.free_space.release()
            sems.wallet_server.mutex.release()
        for _ in range(self.n_servers):
            sems.wallet_server.unread.release()
            sems.wallet_server.mutex.release()
            sems.server_main.free_space.release()
            sems.server_main.mutex.release()
        sems.server_main.unread.release()
        sems.server_main.mutex.release()
        sems.main_wallet.free_space.release()
        sems.main_wallet.mutex.release()