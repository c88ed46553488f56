import io
import time

import pytest

from sochain.main import SOchain, main, parse_args
from sochain.memory import Transaction
from sochain.settings import Config, Settings, SettingsError


def _config(**overrides):
    values = dict(init_balance=100.0, n_wallets=2, n_servers=1, buffers_size=4, max_txs=5)
    values.update(overrides)
    return Config(**values)


def _settings(tmp_path):
    return Settings(str(tmp_path / "log.txt"), str(tmp_path / "stats.txt"), 20)


@pytest.fixture
def make_chain(tmp_path):
    def build(**overrides):
        out = io.StringIO()
        return SOchain(_config(**overrides), _settings(tmp_path), out), out

    return build


def _write_files(tmp_path):
    args = tmp_path / "args.txt"
    args.write_text("256.0\n16\n4\n64\n512\n")
    settings = tmp_path / "settings.txt"
    settings.write_text(f"{tmp_path / 'log.txt'}\n{tmp_path / 'stats.txt'}\n20")
    return str(args), str(settings)


def test_parse_args_reads_both_files(tmp_path):
    config, settings = parse_args(list(_write_files(tmp_path)))
    assert config.init_balance == 256.0
    assert config.n_wallets == 16
    assert config.max_txs == 512
    assert settings.period == 20
    assert settings.log_file == str(tmp_path / "log.txt")


def test_parse_args_wrong_count():
    with pytest.raises(SettingsError, match="Uso"):
        parse_args(["only-one"])


def test_parse_args_missing_settings(tmp_path):
    args, _ = _write_files(tmp_path)
    with pytest.raises(SettingsError, match="log.txt"):
        parse_args([args, str(tmp_path / "absent.txt")])


def test_print_balance_valid_and_logged(make_chain, tmp_path):
    chain, out = make_chain()
    assert chain.print_balance(0) == 100.0
    assert "O saldo da carteira 0 é de 100.00 SOT atualmente." in out.getvalue()
    assert (tmp_path / "log.txt").read_text().rstrip().endswith("bal 0")


def test_print_balance_unknown_wallet(make_chain):
    chain, out = make_chain()
    assert chain.print_balance(7) is None
    assert "A carteira 7 não existe!" in out.getvalue()


def test_create_transaction_writes_to_wallet_buffer(make_chain):
    chain, out = make_chain()
    tx = chain.create_transaction(0, 1, 10.0)
    assert tx.id == 0
    assert chain.tx_counter == 1
    assert chain.buffers.main_wallets.take_for_wallet(0).dest_id == 1
    assert chain.info.sems.main_wallet.unread.value == 1
    assert "A transação 0 foi criada" in out.getvalue()


def test_create_transaction_invalid_source_still_counts(make_chain):
    chain, out = make_chain()
    assert chain.create_transaction(5, 1, 10.0) is None
    assert chain.tx_counter == 1
    assert len(chain.buffers.main_wallets) == 0
    assert "A carteira de origem 5 não existe!" in out.getvalue()


def test_create_transaction_invalid_destination(make_chain):
    chain, out = make_chain()
    assert chain.create_transaction(0, -1, 10.0) is None
    assert "A carteira de destino -1 não existe!" in out.getvalue()


def test_create_transaction_limit(make_chain):
    chain, out = make_chain(max_txs=1)
    assert chain.create_transaction(0, 1, 1.0) is not None
    assert chain.create_transaction(0, 1, 1.0) is None
    assert chain.tx_counter == 1
    assert "O número máximo de transações foi alcançado!" in out.getvalue()


def test_receive_receipt_takes_matching(make_chain):
    chain, out = make_chain()
    receipt = Transaction(3, 0, 1, 5.0, wallet_signature=0, server_signature=0)
    chain.buffers.servers_main.write(receipt)
    chain.info.sems.server_main.unread.release()
    free_before = chain.info.sems.server_main.free_space.value
    got = chain.receive_receipt(3)
    assert got.id == 3
    assert len(chain.buffers.servers_main) == 0
    assert chain.info.sems.server_main.free_space.value == free_before + 1
    assert "O comprovativo da execução 3 foi obtido." in out.getvalue()


def test_receive_receipt_other_id_left_in_place(make_chain):
    chain, out = make_chain()
    chain.buffers.servers_main.write(Transaction(3, 0, 1, 5.0, 0, 0))
    chain.info.sems.server_main.unread.release()
    assert chain.receive_receipt(2) is None
    assert len(chain.buffers.servers_main) == 1
    assert chain.info.sems.server_main.unread.value == 1
    assert "transação 2 não está disponível" in out.getvalue()


def test_receive_receipt_nothing_waiting(make_chain):
    chain, out = make_chain()
    assert chain.receive_receipt(0) is None
    assert "não está disponível" in out.getvalue()


def test_help_and_stat_output(make_chain, tmp_path):
    chain, out = make_chain()
    chain.help()
    chain.print_stat()
    text = out.getvalue()
    assert "[Main]  end - termina a execução do SOchain." in text
    assert "init_balance    100.00" in text
    assert "tx_count:       0" in text
    log_lines = (tmp_path / "log.txt").read_text().splitlines()
    assert [line.split()[-1] for line in log_lines] == ["help", "stat"]


def test_write_final_statistics(make_chain):
    chain, out = make_chain()
    chain.write_final_statistics()
    text = out.getvalue()
    assert "[Main] A carteira 1 assinou 0 transações e terminou com 100 SOT!" in text
    assert "[Main] O servidor 0 assinou 0 transações!" in text


def test_user_interaction_commands(make_chain, tmp_path):
    chain, out = make_chain()
    chain.user_interaction(["help\n", "bal 1\n", "foo\n", "trx 0 1 2.5\n", "end\n"])
    text = out.getvalue()
    assert chain.info.read_terminate() is True
    assert "Operação não reconhecida" in text
    assert chain.tx_counter == 1
    assert (tmp_path / "stats.txt").read_text().startswith("Process Statistics:")
    logged = [line.split(None, 2)[2] for line in (tmp_path / "log.txt").read_text().splitlines()]
    assert logged[0] == "help"
    assert logged[1] == "bal 1"
    assert logged[-1] == "end"


def test_user_interaction_ends_on_eof(make_chain):
    chain, _ = make_chain()
    chain.user_interaction(["stat"])
    assert chain.info.read_terminate() is True


def test_full_transaction_flow(make_chain, tmp_path):
    chain, _ = make_chain()
    chain.create_processes()
    try:
        assert all(pid > 0 for pid in chain.info.wallets_pids + chain.info.servers_pids)
        tx = chain.create_transaction(0, 1, 10.0)
        receipt = None
        deadline = time.monotonic() + 10
        while receipt is None and time.monotonic() < deadline:
            receipt = chain.receive_receipt(tx.id)
    finally:
        chain.end_execution()
    assert receipt.wallet_signature == 0
    assert receipt.server_signature == 0
    assert chain.info.balances[0] == 100.0 - 10.0
    assert sum(chain.info.balances) == 200.0
    stats = (tmp_path / "stats.txt").read_text()
    assert "Wallet 0 signed 1 transaction(s)!" in stats
    assert "Server 0 processed 1 transaction(s)!" in stats


def test_main_wrong_arguments(capsys):
    assert main(["one"]) == 1
    assert "Uso: ./SOchain args.txt settings.txt" in capsys.readouterr().out


def test_main_runs_until_end(tmp_path, monkeypatch, capsys):
    args, settings = _write_files(tmp_path)
    (tmp_path / "args.txt").write_text("50.0\n2\n1\n4\n5\n")
    monkeypatch.setattr("sys.stdin", io.StringIO("help\nend\n"))
    assert main([args, settings]) == 0
    out = capsys.readouterr().out
    assert "[Main] Parâmetros corretos!" in out
    assert "A encerrar a execução do SOchain!" in out
    assert "Final Balances [50.00, 50.00] SOT" in (tmp_path / "stats.txt").read_text()