import pytest

from simplebank.random_util import (
    random_currency,
    random_int,
    random_money,
    random_owner,
    random_string,
)


def test_random_int_stays_in_range():
    values = {random_int(3, 7) for _ in range(500)}
    assert values <= set(range(3, 8))
    assert min(values) == 3
    assert max(values) == 7


def test_random_int_single_value_range():
    assert random_int(5, 5) == 5


def test_random_int_rejects_inverted_range():
    with pytest.raises(ValueError):
        random_int(10, 1)


@pytest.mark.parametrize("n", [0, 1, 6, 32])
def test_random_string_length(n):
    assert len(random_string(n)) == n


def test_random_string_negative_length_is_empty():
    assert random_string(-3) == ""


def test_random_string_uses_only_letters():
    text = random_string(200)
    assert text.isascii()
    assert text.isalpha()


def test_random_owner_is_six_letters():
    owner = random_owner()
    assert len(owner) == 6
    assert owner.isalpha()


def test_random_money_range():
    for _ in range(200):
        assert 0 <= random_money() <= 1000


def test_random_currency_is_supported():
    seen = {random_currency() for _ in range(300)}
    assert seen == {"USD", "EUR", "CAD"}