"""Transactions that span several queries, such as money transfers."""

import sqlite3
import threading
from dataclasses import dataclass
from typing import Callable, Tuple, TypeVar

from .models import Account, Entry, Transfer
from .queries import Queries

T = TypeVar("T")


@dataclass(frozen=True)
class TransferTxResult:
    """Everything a transfer transaction created or changed."""

    transfer: Transfer
    from_account: Account
    to_account: Account
    from_entry: Entry
    to_entry: Entry


class Store(Queries):
    """Runs single queries and multi-query transactions on one connection.

    Transactions started through one store are serialised, so concurrent
    callers never interleave their statements on the shared connection.
    """

    def __init__(self, connection: sqlite3.Connection) -> None:
        super().__init__(connection)
        self._tx_lock = threading.Lock()

    def _exec_tx(self, fn: Callable[[Queries], T]) -> T:
        """Run ``fn`` inside a transaction, committing on success and rolling back on error."""
        with self._tx_lock:
            if self.connection.in_transaction:
                raise RuntimeError("connection already holds an open transaction")
            self.connection.execute("BEGIN IMMEDIATE")
            try:
                result = fn(self.with_tx(self.connection))
            except Exception as tx_err:
                try:
                    self.connection.execute("ROLLBACK")
                except sqlite3.Error as rb_err:
                    raise RuntimeError(f"tx err: {tx_err}, rb err: {rb_err}") from tx_err
                raise
            self.connection.execute("COMMIT")
            return result

    def transfer_tx(self, from_account_id: int, to_account_id: int, amount: int) -> TransferTxResult:
        """Move ``amount`` from one account to another.

        Creates the transfer record and both entries, then updates the two
        balances, always touching the account with the lower id first.
        """

        def run(q: Queries) -> TransferTxResult:
            transfer = q.create_transfer(from_account_id, to_account_id, amount)
            from_entry = q.create_entry(from_account_id, -amount)
            to_entry = q.create_entry(to_account_id, amount)

            if from_account_id < to_account_id:
                from_account, to_account = _add_money(
                    q, from_account_id, -amount, to_account_id, amount
                )
            else:
                to_account, from_account = _add_money(
                    q, to_account_id, amount, from_account_id, -amount
                )

            return TransferTxResult(
                transfer=transfer,
                from_account=from_account,
                to_account=to_account,
                from_entry=from_entry,
                to_entry=to_entry,
            )

        return self._exec_tx(run)


def _add_money(
    q: Queries, account_id1: int, amount1: int, account_id2: int, amount2: int
) -> Tuple[Account, Account]:
    account1 = q.add_account_balance(account_id1, amount1)
    account2 = q.add_account_balance(account_id2, amount2)
    return account1, account2