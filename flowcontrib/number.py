"""Random number expression function."""

from __future__ import annotations

import random

__all__ = ["random_int"]

_DEFAULT_LIMIT = 10


def random_int(*args: int) -> int:
    """Return a random integer in [0, limit); the limit defaults to 10."""
    limit = _DEFAULT_LIMIT
    if args:
        limit = args[0]
        if isinstance(limit, bool) or not isinstance(limit, int):
            raise TypeError("random limit must be an int")
    if limit <= 0:
        raise ValueError("invalid argument to random: limit must be positive")
    return random.randrange(limit)