"""Typed queries over the bank's SQLite tables."""

import sqlite3
from datetime import datetime, timezone
from typing import Any, Callable, List, Sequence, TypeVar, Union
import os

from .models import Account, Entry, Transfer

T = TypeVar("T")

_SCHEMA = """
CREATE TABLE IF NOT EXISTS accounts (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    owner TEXT NOT NULL,
    balance INTEGER NOT NULL,
    currency TEXT NOT NULL,
    created_at TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS accounts_owner_idx ON accounts (owner);

CREATE TABLE IF NOT EXISTS entries (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    account_id INTEGER NOT NULL REFERENCES accounts (id),
    amount INTEGER NOT NULL,
    created_at TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS entries_account_id_idx ON entries (account_id);

CREATE TABLE IF NOT EXISTS transfers (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    from_account_id INTEGER NOT NULL REFERENCES accounts (id),
    to_account_id INTEGER NOT NULL REFERENCES accounts (id),
    amount INTEGER NOT NULL CHECK (amount > 0),
    created_at TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS transfers_from_idx ON transfers (from_account_id);
CREATE INDEX IF NOT EXISTS transfers_to_idx ON transfers (to_account_id);
CREATE INDEX IF NOT EXISTS transfers_pair_idx
    ON transfers (from_account_id, to_account_id);
"""

_ACCOUNT_COLUMNS = "id, owner, balance, currency, created_at"
_ENTRY_COLUMNS = "id, account_id, amount, created_at"
_TRANSFER_COLUMNS = "id, from_account_id, to_account_id, amount, created_at"


class NoRowsError(LookupError):
    """Raised when a query that must return one row finds none."""

    def __init__(self, message: str = "no rows in result set") -> None:
        super().__init__(message)


def connect(database: Union[str, "os.PathLike[str]"]) -> sqlite3.Connection:
    """Open a database in autocommit mode with foreign keys enforced."""
    connection = sqlite3.connect(
        database, isolation_level=None, check_same_thread=False, timeout=30.0
    )
    connection.execute("PRAGMA foreign_keys = ON")
    return connection


def create_schema(connection: sqlite3.Connection) -> None:
    """Create the accounts, entries and transfers tables if missing."""
    connection.executescript(_SCHEMA)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _account(row: Sequence[Any]) -> Account:
    id_, owner, balance, currency, created_at = row
    return Account(id_, owner, balance, currency, datetime.fromisoformat(created_at))


def _entry(row: Sequence[Any]) -> Entry:
    id_, account_id, amount, created_at = row
    return Entry(id_, account_id, amount, datetime.fromisoformat(created_at))


def _transfer(row: Sequence[Any]) -> Transfer:
    id_, from_id, to_id, amount, created_at = row
    return Transfer(id_, from_id, to_id, amount, datetime.fromisoformat(created_at))


def _check_page(limit: int, offset: int) -> None:
    if limit < 0:
        raise ValueError("LIMIT must not be negative")
    if offset < 0:
        raise ValueError("OFFSET must not be negative")


class Queries:
    """Runs the bank's queries on one connection."""

    def __init__(self, connection: sqlite3.Connection) -> None:
        self.connection = connection

    def with_tx(self, connection: sqlite3.Connection) -> "Queries":
        """Return a Queries bound to the connection that holds a transaction."""
        return Queries(connection)

    def _one(self, sql: str, params: Sequence[Any], build: Callable[[Sequence[Any]], T]) -> T:
        row = self.connection.execute(sql, params).fetchone()
        if row is None:
            raise NoRowsError()
        return build(row)

    def _many(self, sql: str, params: Sequence[Any], build: Callable[[Sequence[Any]], T]) -> List[T]:
        return [build(row) for row in self.connection.execute(sql, params)]

    # accounts

    def add_account_balance(self, account_id: int, amount: int) -> Account:
        """Add ``amount`` to an account's balance and return the account."""
        cursor = self.connection.execute(
            "UPDATE accounts SET balance = balance + ? WHERE id = ?", (amount, account_id)
        )
        if cursor.rowcount == 0:
            raise NoRowsError()
        return self.get_account(account_id)

    def create_account(self, owner: str, balance: int, currency: str) -> Account:
        """Insert a new account and return it."""
        cursor = self.connection.execute(
            "INSERT INTO accounts (owner, balance, currency, created_at) VALUES (?, ?, ?, ?)",
            (owner, balance, currency, _now()),
        )
        return self.get_account(cursor.lastrowid)

    def delete_account(self, account_id: int) -> None:
        """Delete an account; deleting a missing account is not an error."""
        self.connection.execute("DELETE FROM accounts WHERE id = ?", (account_id,))

    def get_account(self, account_id: int) -> Account:
        """Return the account with the given id."""
        return self._one(
            f"SELECT {_ACCOUNT_COLUMNS} FROM accounts WHERE id = ? LIMIT 1",
            (account_id,),
            _account,
        )

    def get_account_for_update(self, account_id: int) -> Account:
        """Return the account for modification; the enclosing transaction holds the lock."""
        return self.get_account(account_id)

    def list_accounts(self, limit: int, offset: int) -> List[Account]:
        """Return a page of accounts ordered by id."""
        _check_page(limit, offset)
        return self._many(
            f"SELECT {_ACCOUNT_COLUMNS} FROM accounts ORDER BY id LIMIT ? OFFSET ?",
            (limit, offset),
            _account,
        )

    def update_account(self, account_id: int, balance: int) -> Account:
        """Set an account's balance and return the account."""
        cursor = self.connection.execute(
            "UPDATE accounts SET balance = ? WHERE id = ?", (balance, account_id)
        )
        if cursor.rowcount == 0:
            raise NoRowsError()
        return self.get_account(account_id)

    # entries

    def create_entry(self, account_id: int, amount: int) -> Entry:
        """Record a balance change for an account and return it."""
        cursor = self.connection.execute(
            "INSERT INTO entries (account_id, amount, created_at) VALUES (?, ?, ?)",
            (account_id, amount, _now()),
        )
        return self.get_entry(cursor.lastrowid)

    def get_entry(self, entry_id: int) -> Entry:
        """Return the entry with the given id."""
        return self._one(
            f"SELECT {_ENTRY_COLUMNS} FROM entries WHERE id = ? LIMIT 1",
            (entry_id,),
            _entry,
        )

    def list_entries(self, account_id: int, limit: int, offset: int) -> List[Entry]:
        """Return a page of one account's entries ordered by id."""
        _check_page(limit, offset)
        return self._many(
            f"SELECT {_ENTRY_COLUMNS} FROM entries WHERE account_id = ? "
            "ORDER BY id LIMIT ? OFFSET ?",
            (account_id, limit, offset),
            _entry,
        )

    # transfers

    def create_transfer(self, from_account_id: int, to_account_id: int, amount: int) -> Transfer:
        """Record a transfer between two accounts and return it."""
        cursor = self.connection.execute(
            "INSERT INTO transfers (from_account_id, to_account_id, amount, created_at) "
            "VALUES (?, ?, ?, ?)",
            (from_account_id, to_account_id, amount, _now()),
        )
        return self.get_transfer(cursor.lastrowid)

    def get_transfer(self, transfer_id: int) -> Transfer:
        """Return the transfer with the given id."""
        return self._one(
            f"SELECT {_TRANSFER_COLUMNS} FROM transfers WHERE id = ? LIMIT 1",
            (transfer_id,),
            _transfer,
        )

    def list_transfers(
        self, from_account_id: int, to_account_id: int, limit: int, offset: int
    ) -> List[Transfer]:
        """Return a page of transfers out of one account or into another, ordered by id."""
        _check_page(limit, offset)
        return self._many(
            f"SELECT {_TRANSFER_COLUMNS} FROM transfers "
            "WHERE from_account_id = ? OR to_account_id = ? "
            "ORDER BY id LIMIT ? OFFSET ?",
            (from_account_id, to_account_id, limit, offset),
            _transfer,
        )