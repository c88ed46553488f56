import pytest

from sochain.container import InfoContainer
from sochain.memory import Transaction, create_buffers
from sochain.settings import Config
from sochain.stats import format_stats, write_stats
from sochain.synchronization import create_all_semaphores


@pytest.fixture
def info():
    config = Config(init_balance=256.0, n_wallets=2, n_servers=1, buffers_size=4, max_txs=8)
    container = InfoContainer(config, create_all_semaphores(config.buffers_size))
    container.wallets_pids = [11, 12]
    container.servers_pids = [21]
    return container


def test_header_lines(info):
    lines = format_stats(info, create_buffers(4), 42).splitlines()
    assert lines[0] == "Process Statistics:"
    assert lines[1] == "Main has PID: [42]"
    assert lines[2] == "There were 2 Wallets, PIDs: [11, 12]"
    assert lines[3] == "There were 1 Servers, PIDs: [21]"


def test_counts_and_receipts(info):
    info.wallets_stats = [3, 2]
    info.servers_stats = [4]
    buffers = create_buffers(4)
    buffers.servers_main.write(Transaction(0, 0, 1, 1.0))
    lines = format_stats(info, buffers, 1).splitlines()
    assert "Main received 5 transaction(s)!" in lines
    assert "Wallet 0 signed 3 transaction(s)!" in lines
    assert "Wallet 1 signed 2 transaction(s)!" in lines
    assert "Server 0 processed 4 transaction(s)!" in lines
    assert "Main read 4 receipts." in lines


def test_final_balances_line(info):
    text = format_stats(info, create_buffers(4), 1)
    assert text.endswith("Final Balances [256.00, 256.00] SOT\n")


def test_write_stats_round_trip(info, tmp_path):
    target = tmp_path / "stats.txt"
    buffers = create_buffers(4)
    write_stats(target, info, buffers, 7)
    assert target.read_text(encoding="utf-8") == format_stats(info, buffers, 7)


def test_write_stats_overwrites(info, tmp_path):
    target = tmp_path / "stats.txt"
    target.write_text("old contents\n" * 50)
    write_stats(target, info, create_buffers(4), 7)
    assert "old contents" not in target.read_text(encoding="utf-8")


def test_write_stats_missing_directory(info, tmp_path):
    with pytest.raises(OSError):
        write_stats(tmp_path / "missing" / "stats.txt", info, create_buffers(4), 7)