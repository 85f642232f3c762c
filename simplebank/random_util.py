"""Random values for seeding accounts in tests and demos."""

import random
import string

ALPHABET = string.ascii_lowercase + string.ascii_uppercase
CURRENCIES = ("USD", "EUR", "CAD")


def random_int(min_value: int, max_value: int) -> int:
    """Return a random integer in the closed range [min_value, max_value]."""
    if max_value < min_value:
        raise ValueError(f"invalid range: {min_value} > {max_value}")
    return random.randint(min_value, max_value)


def random_string(n: int) -> str:
    """Return a random string of ``n`` ASCII letters."""
    return "".join(random.choice(ALPHABET) for _ in range(max(n, 0)))


def random_owner() -> str:
    """Return a random six-letter owner name."""
    return random_string(6)


def random_money() -> int:
    """Return a random amount of money between 0 and 1000."""
    return random_int(0, 1000)


def random_currency() -> str:
    """Return one of the supported currency codes at random."""
    return random.choice(CURRENCIES)