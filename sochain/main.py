"""The SOchain main process: user commands, transactions, receipts and shutdown."""

from __future__ import annotations

import os
import signal
import sys
import time
from typing import Iterable, Iterator, TextIO

from .activity_log import log_command
from .clock import SLEEP_INTERVAL
from .container import InfoContainer
from .memory import Transaction, create_buffers
from .process import launch_server, launch_wallet, wait_process
from .settings import Config, Settings, SettingsError, load_config, load_settings
from .signals import SignalFlags, alarm_report
from .stats import write_stats
from .synchronization import create_all_semaphores

_UNRECOGNISED = "[Main] Operação não reconhecida, insira 'help' para assistência.\n"

_HELP = (
    "[Main] Operações disponíveis:\n"
    "[Main]  bal id - consultar o saldo da carteira identificada por id.\n"
    "[Main]  trx src_id dest_id amount - criar uma nova transação.\n"
    "[Main]  rcp id - obter o comprovativo da transação de número id.\n"
    "[Main]  help - imprime a informação sobre as operações disponíveis.\n"
    "[Main]  end - termina a execução do SOchain.\n"
)


def parse_args(argv: list[str]) -> tuple[Config, Settings]:
    """Load the system arguments and settings from the two files named in ``argv``.

    Raises SettingsError, with a message meant for the user, when the number
    of arguments is wrong or either file cannot be read.
    """
    if len(argv) != 2:
        raise SettingsError("Uso: ./SOchain args.txt settings.txt")
    args_path, settings_path = argv
    try:
        config = load_config(args_path)
    except SettingsError as exc:
        raise SettingsError(
            "Valores Incorretos! Exemplo de uso:\n100.0\n5\n2\n5\n5\n"
        ) from exc
    try:
        settings = load_settings(settings_path)
    except SettingsError as exc:
        raise SettingsError(
            "Valores Incorretos! Exemplo de uso:\nlog.txt\nstats.txt\n10\n"
        ) from exc
    return config, settings


def _tokens(lines: Iterable[str]) -> Iterator[str]:
    for line in lines:
        yield from line.split()


class SOchain:
    """The main process of the system, driving wallets and servers."""

    def __init__(
        self, config: Config, settings: Settings, out: TextIO | None = None
    ) -> None:
        self.config = config
        self.settings = settings
        self.out = out if out is not None else sys.stdout
        self.buffers = create_buffers(config.buffers_size)
        self.info = InfoContainer(config, create_all_semaphores(config.buffers_size))
        self.tx_counter = 0
        self.flags = SignalFlags()
        self._wallets: list = []
        self._servers: list = []
        self._alarms_enabled = False

    def _say(self, text: str = "", end: str = "\n") -> None:
        print(text, end=end, file=self.out, flush=True)

    def _log(self, message: str) -> None:
        log_command(self.settings.log_file, message)

    def create_processes(self) -> None:
        """Start one worker per wallet and per server and record their ids."""
        for wallet_id in range(self.info.n_wallets):
            worker = launch_wallet(wallet_id, self.info, self.buffers)
            self._wallets.append(worker)
            self.info.wallets_pids[wallet_id] = worker.pid
        for server_id in range(self.info.n_servers):
            worker = launch_server(server_id, self.info, self.buffers)
            self._servers.append(worker)
            self.info.servers_pids[server_id] = worker.pid

    def _install_signals(self) -> dict:
        previous = {signal.SIGINT: signal.getsignal(signal.SIGINT)}
        if hasattr(signal, "SIGALRM"):
            previous[signal.SIGALRM] = signal.getsignal(signal.SIGALRM)
        self.flags.install()
        self._alarms_enabled = hasattr(signal, "alarm")
        return previous

    def _restore_signals(self, previous: dict) -> None:
        if self._alarms_enabled:
            signal.alarm(0)
        self._alarms_enabled = False
        for signum, handler in previous.items():
            if handler is not None:
                signal.signal(signum, handler)

    def _arguments(self, tokens: Iterator[str], kinds: tuple) -> list | None:
        values = []
        for kind in kinds:
            token = next(tokens, None)
            if token is None:
                return None
            try:
                values.append(kind(token))
            except ValueError:
                self._say(_UNRECOGNISED)
                return None
        return values

    def _dispatch(self, command: str, tokens: Iterator[str]) -> None:
        if command in ("bal", "rcp"):
            args = self._arguments(tokens, (int,))
            if args is not None:
                (self.print_balance if command == "bal" else self.receive_receipt)(*args)
        elif command == "trx":
            args = self._arguments(tokens, (int, int, float))
            if args is not None:
                self.create_transaction(*args)
        elif command == "stat":
            self.print_stat()
        elif command == "help":
            self.help()
        elif command == "end":
            self._log("end")
            self.end_execution()
        else:
            self._say(_UNRECOGNISED)

    def user_interaction(self, lines: Iterable[str] | None = None) -> None:
        """Read commands from ``lines`` (default: standard input) until the end.

        Running out of input or an interrupt ends the execution as ``end`` does.
        """
        tokens = _tokens(sys.stdin if lines is None else lines)
        if self._alarms_enabled:
            self.flags.reset_alarm(self.settings.period)
        while not self.info.read_terminate():
            if self.flags.alarmed:
                self._say(alarm_report(self.info, self.buffers), end="")
                if self._alarms_enabled:
                    self.flags.reset_alarm(self.settings.period)
                else:
                    self.flags.alarmed = False
            if self.flags.interrupted:
                self._say()
                self.end_execution()
                break
            self._say("[Main] Introduzir operação: ", end="")
            command = next(tokens, None)
            if command is None or self.flags.interrupted:
                self._say()
                self.end_execution()
                break
            self._dispatch(command, tokens)
            time.sleep(SLEEP_INTERVAL)

    def print_balance(self, wallet_id: int) -> float | None:
        """Print and return the balance of ``wallet_id``; None if it does not exist."""
        self._log(f"bal {wallet_id}")
        if not 0 <= wallet_id < self.info.n_wallets:
            self._say(f"[Main] A carteira {wallet_id} não existe!\n")
            return None
        balance = self.info.balances[wallet_id]
        self._say(f"[Main] O saldo da carteira {wallet_id} é de {balance:0.2f} SOT atualmente.\n")
        return balance

    def create_transaction(
        self, src_id: int, dest_id: int, amount: float
    ) -> Transaction | None:
        """Create a transaction and hand it to the wallets; return it if sent.

        The transaction counter advances even when a wallet id is invalid.
        Nothing is created once ``max_txs`` transactions exist.
        """
        if self.tx_counter == self.info.max_txs:
            self._say("[Main] O número máximo de transações foi alcançado!\n")
            return None
        tx = Transaction(id=self.tx_counter, src_id=src_id, dest_id=dest_id, amount=amount)
        self.tx_counter += 1
        self._log(f"trx {src_id} {dest_id} {amount:f}")

        if not 0 <= src_id < self.info.n_wallets:
            self._say(f"[Main] A carteira de origem {src_id} não existe!\n")
            return None
        if not 0 <= dest_id < self.info.n_wallets:
            self._say(f"[Main] A carteira de destino {dest_id} não existe!\n")
            return None

        tx.change_time.created = time.time()
        sems = self.info.sems.main_wallet
        sems.free_space.acquire()
        sems.mutex.acquire()
        if self.info.read_terminate():
            sems.mutex.release()
            return None
        self.buffers.main_wallets.write(tx)
        sems.mutex.release()
        sems.unread.release()

        self._say(
            f"[Main] A transação {tx.id} foi criada para transferir {tx.amount:0.2f} SOT "
            f"da carteira {tx.src_id} para a carteira {tx.dest_id}!"
        )
        return tx

    def _receipt_missing(self, tx_id: int) -> None:
        self._say(f"[Main] O comprovativo da execução da transação {tx_id} não está disponível.\n")

    def receive_receipt(self, tx_id: int) -> Transaction | None:
        """Take the receipt of transaction ``tx_id`` from the servers, if one waits."""
        self._log(f"rcp {tx_id}")
        sems = self.info.sems.server_main
        if not sems.unread.acquire(timeout=SLEEP_INTERVAL):
            self._receipt_missing(tx_id)
            return None
        sems.mutex.acquire()
        if self.info.read_terminate():
            sems.mutex.release()
            return None
        tx = self.buffers.servers_main.take_by_id(tx_id)
        sems.mutex.release()
        (sems.unread if tx is None else sems.free_space).release()

        if tx is None:
            self._receipt_missing(tx_id)
            return None
        self._say(
            f"[Main] O comprovativo da execução {tx.id} foi obtido.\n"
            f"[Main] O comprovativo da transação id {tx.id} contém src_id {tx.src_id}, "
            f"dest_id {tx.dest_id}, amount {tx.amount:0.2f} e foi assinado pela carteira "
            f"{tx.wallet_signature} e servidor {tx.server_signature}.\n"
        )
        return tx

    def print_stat(self) -> None:
        """Print the configuration, current counters and per-worker figures."""
        info = self.info
        self._say(
            "- Configuração inicial:\n"
            "        Propriedade     Valor\n"
            f"        init_balance    {info.init_balance:0.2f}\n"
            f"        n_wallets       {info.n_wallets}\n"
            f"        n_servers       {info.n_servers}\n"
            f"        buffers_size:   {info.buffers_size}\n"
            f"        max_txs         {info.max_txs}\n"
            "- Variáveis atuais:\n"
            f"        terminate       {int(info.read_terminate())}\n"
            f"        tx_count:       {self.tx_counter}\n"
            "- Informação sobre as carteiras:\n"
            "        Carteira        PID             Saldo           Transações Assinadas",
        )
        self._log("stat")
        for i, (pid, balance, signed) in enumerate(
            zip(info.wallets_pids, info.balances, info.wallets_stats)
        ):
            sot = f"{balance:.2f} SOT"
            self._say(f"        {i:<10d}      {pid:<10d}      {sot:<15} {signed}")
        self._say(
            "- Informação sobre os servidores:\n"
            "        Servidor        PID             Transações Processadas"
        )
        for i, (pid, processed) in enumerate(zip(info.servers_pids, info.servers_stats)):
            self._say(f"        {i:<10d}      {pid:<10d}      {processed}")
        self._say()

    def help(self) -> None:
        """Print the available commands."""
        self._say(_HELP)
        self._log("help")

    def write_final_statistics(self) -> None:
        """Print what each wallet signed and each server processed."""
        info = self.info
        self._say("[Main] A encerrar a execução do SOchain! As estatísticas da execução são:")
        for i, (signed, balance) in enumerate(zip(info.wallets_stats, info.balances)):
            self._say(
                f"[Main] A carteira {i} assinou {signed} transações "
                f"e terminou com {balance:2.0f} SOT!"
            )
        for i, processed in enumerate(info.servers_stats):
            self._say(f"[Main] O servidor {i} assinou {processed} transações!")

    def wait_processes(self) -> list[int | None]:
        """Wake every worker and wait for all of them; return their results."""
        self.info.wake_up_processes()
        workers, self._wallets, self._servers = self._wallets + self._servers, [], []
        return [wait_process(worker) for worker in workers]

    def end_execution(self) -> None:
        """Set the terminate flag, wait for the workers and write the statistics."""
        self.info.request_terminate()
        self.wait_processes()
        self.write_final_statistics()
        write_stats(self.settings.stats_file, self.info, self.buffers, os.getpid())


def main(argv: list[str] | None = None) -> int:
    """Run SOchain with an arguments file and a settings file."""
    if argv is None:
        argv = sys.argv[1:]
    try:
        config, settings = parse_args(argv)
        chain = SOchain(config, settings)
    except (SettingsError, ValueError) as exc:
        if exc.__cause__ is not None:
            print(exc.__cause__, file=sys.stderr)
        print(f"[Main] {exc}")
        return 1
    print("[Main] Parâmetros corretos!\n\n")
    chain.create_processes()
    previous = chain._install_signals()
    try:
        chain.user_interaction(sys.stdin)
    finally:
        chain._restore_signals(previous)
    return 0