# simplebank

A small bank ledger library. It keeps accounts, the entries that change
their balances, and the transfers between them in an SQLite database,
using only the standard library's `sqlite3`.

Each transfer runs inside one database transaction. The transaction
records the transfer. It writes a negative entry for the sender and a
positive entry for the receiver. It then updates both balances. If any
step fails, the transaction is rolled back and nothing is kept.

## Modules

### `simplebank.models`

Frozen dataclasses `Account`, `Entry` and `Transfer`, each with
`to_dict()`. `to_dict()` returns a JSON-ready mapping in which
`created_at` is an ISO 8601 string.

### `simplebank.queries`

- `connect(database)` opens a connection in autocommit mode with
  foreign keys enforced. The connection may be shared between threads.
- `create_schema(connection)` creates the `accounts`, `entries` and
  `transfers` tables and their indexes if they are missing. The schema
  requires a transfer amount to be positive.
- `Queries(connection)` runs single queries on a connection:
  - Accounts: `create_account`, `get_account`, `get_account_for_update`,
    `update_account`, `add_account_balance`, `delete_account`,
    `list_accounts`.
  - Entries: `create_entry`, `get_entry`, `list_entries`.
  - Transfers: `create_transfer`, `get_transfer`, `list_transfers`.
- `NoRowsError` (a `LookupError`) is raised in these cases:
  - a `get_*` call finds nothing;
  - `update_account` or `add_account_balance` names a missing account.

  Deleting a missing account is not an error.
- Listings are ordered by id and paged with `limit` and `offset`.
  A negative `limit` or `offset` raises `ValueError`.
- `list_transfers(from_account_id, to_account_id, limit, offset)`
  returns transfers out of the first account or into the second.

### `simplebank.store`

`Store(connection)` is a `Queries` that adds one method:

```python
store.transfer_tx(from_account_id, to_account_id, amount)
```

This method performs the transfer and returns a `TransferTxResult`. The
result holds the `transfer`, the `from_entry` and `to_entry`, and the
updated `from_account` and `to_account`.

Transactions started through one store are run one at a time. The two
balances are always updated in ascending order of account id. A
transaction begins with `BEGIN IMMEDIATE` and fails with `RuntimeError`
if the connection already holds an open transaction.

### `simplebank.random_util`

Helpers for test data:

- `random_int(min_value, max_value)` returns a value in the inclusive
  range. It raises `ValueError` if the range is empty.
- `random_string(n)` returns `n` ASCII letters.
- `random_owner()` returns six letters.
- `random_money()` returns an amount from 0 to 1000.
- `random_currency()` returns one of `USD`, `EUR` or `CAD`.

## Usage

```python
from simplebank.queries import connect, create_schema
from simplebank.store import Store

connection = connect(":memory:")
create_schema(connection)

store = Store(connection)
alice = store.create_account("alice", 100, "USD")
bob = store.create_account("bob", 50, "USD")

result = store.transfer_tx(alice.id, bob.id, 10)
print(result.from_account.balance, result.to_account.balance)  # 90 60

entries = store.list_entries(alice.id, limit=10, offset=0)
transfers = store.list_transfers(alice.id, alice.id, limit=10, offset=0)
```

## What it does not do

This package is a library only. It has no command-line program, no
server and no API. It does not run database migrations beyond
`create_schema`. It works with SQLite only.

A transfer does not check the following:

- that the amount is covered by the sender's balance;
- that the two accounts share a currency.

The schema's foreign keys and the positive-amount check are the only
safeguards.