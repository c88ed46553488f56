# sochain

`sochain` simulates a small transaction chain. The main loop takes commands
from the user. Wallet workers sign the transactions that come from their own
wallet. Server workers check the transactions, move the funds and issue
receipts. The stages pass transactions to each other through three bounded
buffers, and counting semaphores guard every buffer and the terminate flag.

## Installation

```
pip install .
```

The package has no dependencies outside the standard library. For the tests,
install the `test` extra (`pip install .[test]`) and run `pytest`.

## Running

The program reads two files:

```
sochain args.txt settings.txt
```

`args.txt` holds five values, separated by whitespace: the initial balance,
the number of wallets, the number of servers, the buffer size and the
maximum number of transactions.

```
256.0
16
4
64
512
```

`settings.txt` holds three values: the path of the activity log, the path of
the statistics file and the period in seconds between status reports.

```
log.txt
stats.txt
20
```

If the wrong number of arguments is given, or a file is missing or holds
too few or malformed values, the program prints a usage message and exits
with status 1.

## Commands

At the prompt you can enter:

- `bal id`: show the balance of wallet `id`.
- `trx src_id dest_id amount`: create a transaction. The transaction counter
  advances even when a wallet id is invalid; no transaction is created once
  the maximum has been reached.
- `rcp id`: take the receipt of transaction `id` if a server has issued it.
- `stat`: show the configuration, the terminate flag, the transaction
  counter, and the id, balance and counters of every worker.
- `help`: list the commands.
- `end`: stop every worker, print the final statistics and write the
  statistics file.

`bal`, `trx`, `rcp`, `stat`, `help` and `end` are appended to the activity
log with a timestamp. The statistics file is overwritten when the run ends.
Running out of input ends the run the same way `end` does.

Where the platform has `SIGALRM`, each time the period runs out the program
prints, before the next prompt, every transaction that is still in a buffer
together with the time since it was created. Ctrl-C ends the run as `end`
does; both signals are checked between commands.

A server accepts a transaction only if source and destination are distinct
existing wallets, the source has enough funds and the wallet signature is the
source's. Rejected transactions produce no receipt.

## Using it from Python

```python
from sochain.settings import load_config, load_settings
from sochain.main import SOchain

config = load_config("args.txt")
settings = load_settings("settings.txt")
chain = SOchain(config, settings, None)
chain.create_processes()
chain.user_interaction(["trx 0 1 10.0", "rcp 0", "end"])
```

`SOchain` also exposes each command directly: `print_balance`,
`create_transaction`, `receive_receipt`, `print_stat`, `help` and
`end_execution`. The building blocks live in their own modules:
`sochain.memory` (`Transaction`, `RandomAccessBuffer`, `CircularBuffer`,
`create_buffers`), `sochain.synchronization` (`create_all_semaphores`,
`describe_semaphores`), `sochain.container` (`InfoContainer`),
`sochain.wallet`, `sochain.server`, `sochain.process`, `sochain.stats`,
`sochain.signals`, `sochain.activity_log` and `sochain.clock`.

## What it does not do

Wallets and servers run as threads inside one Python process, not as
separate operating-system processes sharing memory. The "PID" columns of
`stat` and of the statistics file show the native thread ids of the workers.