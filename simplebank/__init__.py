"""A small bank ledger over SQLite: accounts, entries and transactional transfers."""

__version__ = "0.1.0"