"""Weighted round-robin selection of slave databases."""

from __future__ import annotations

import math
import random
import re
from functools import reduce
from typing import Optional, Sequence

from .errors import ErrorKind, ProxyError

SLAVE_SPLIT = ","
WEIGHT_SPLIT = "@"

_INTEGER = re.compile(r"[+-]?\d+")


def gcd(weights: Sequence[int]) -> int:
    """Return the greatest common divisor of positive slave weights."""
    if not weights:
        raise ValueError("no weights")
    if any(weight <= 0 for weight in weights):
        raise ValueError("weights must be positive")
    return reduce(math.gcd, weights)


def parse_weighted_address(addr: str) -> tuple[str, int]:
    """Split ``host:port@weight`` into address and weight (1 if absent)."""
    parts = addr.split(WEIGHT_SPLIT)
    address = parts[0]
    if not address:
        raise ProxyError(ErrorKind.ADDRESS_NULL)
    if len(parts) != 2:
        return address, 1
    text = parts[1]
    if not _INTEGER.fullmatch(text):
        raise ValueError(f"invalid weight {text!r} in {addr!r}")
    return address, int(text)


def parse_slave_list(slave_str: str) -> list[tuple[str, int]]:
    """Parse a comma separated list of weighted slave addresses."""
    if not slave_str:
        return []
    trimmed = slave_str.strip(SLAVE_SPLIT)
    return [parse_weighted_address(item) for item in trimmed.split(SLAVE_SPLIT)]


class RoundRobinBalancer:
    """Hands out slave indices in proportion to their weights."""

    def __init__(self, weights: Sequence[int], rng: Optional[random.Random] = None) -> None:
        self._weights = tuple(weights)
        self._last = 0
        self._queue: list[int] = []
        if not self._weights:
            return

        divisor = gcd(self._weights)
        for index, weight in enumerate(self._weights):
            self._queue.extend([index] * (weight // divisor))

        if len(self._weights) > 1:
            rng = rng if rng is not None else random.Random()
            total = len(self._queue)
            for _ in range(total):
                x = rng.randrange(total)
                other = total % (x + 1)
                self._queue[x], self._queue[other] = self._queue[other], self._queue[x]

    @property
    def weights(self) -> tuple[int, ...]:
        """The weights the balancer was built from."""
        return self._weights

    @property
    def queue(self) -> tuple[int, ...]:
        """The order in which slave indices are handed out."""
        return tuple(self._queue)

    def next_index(self) -> int:
        """Return the index of the next slave to use."""
        length = len(self._queue)
        if length == 0:
            raise ProxyError(ErrorKind.NO_DATABASE)
        if length == 1:
            return self._queue[0]
        self._last %= length
        index = self._queue[self._last]
        self._last = (self._last + 1) % length
        return index