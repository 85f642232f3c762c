import dataclasses
import json
from datetime import datetime, timezone

import pytest

from simplebank.models import Account, Entry, Transfer

NOW = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


def test_account_to_dict():
    account = Account(id=1, owner="alice", balance=100, currency="USD", created_at=NOW)
    data = account.to_dict()
    assert data == {
        "id": 1,
        "owner": "alice",
        "balance": 100,
        "currency": "USD",
        "created_at": NOW.isoformat(),
    }


def test_entry_to_dict():
    entry = Entry(id=4, account_id=1, amount=-10, created_at=NOW)
    assert entry.to_dict() == {
        "id": 4,
        "account_id": 1,
        "amount": -10,
        "created_at": NOW.isoformat(),
    }


def test_transfer_to_dict():
    transfer = Transfer(id=9, from_account_id=1, to_account_id=2, amount=10, created_at=NOW)
    assert transfer.to_dict() == {
        "id": 9,
        "from_account_id": 1,
        "to_account_id": 2,
        "amount": 10,
        "created_at": NOW.isoformat(),
    }


def test_to_dict_is_json_serialisable_and_round_trips_time():
    account = Account(id=1, owner="bob", balance=5, currency="EUR", created_at=NOW)
    decoded = json.loads(json.dumps(account.to_dict()))
    assert datetime.fromisoformat(decoded["created_at"]) == NOW
    assert decoded["owner"] == "bob"


def test_models_are_immutable():
    account = Account(id=1, owner="bob", balance=5, currency="EUR", created_at=NOW)
    with pytest.raises(dataclasses.FrozenInstanceError):
        account.balance = 10  # type: ignore[misc]
    assert account.balance == 5
    assert account.to_dict()["balance"] == 5


def test_models_compare_by_value():
    first = Entry(id=1, account_id=2, amount=3, created_at=NOW)
    second = Entry(id=1, account_id=2, amount=3, created_at=NOW)
    assert first == second