"""
TGSBuilder Time and Randomness Sources

Builders never read the wall clock or a global random generator directly.
They are handed a Clock and a RandomSource so construction can be made
deterministic in tests and isolated between threads.

Production:
- SystemClock: timezone-aware UTC now()
- SystemRandomSource: secrets module (CSPRNG)

Testing:
- FixedClock: always returns the same instant
- SeededRandomSource: reproducible bytes from a seed (never for real keys)
"""

from __future__ import annotations

import random
import secrets
import threading
from datetime import datetime, timezone
from typing import Any, Protocol

import attrs


class Clock(Protocol):
    """Source of the current time."""

    def now(self) -> datetime:
        """Return the current time as a timezone-aware UTC datetime."""
        ...


class RandomSource(Protocol):
    """Source of random bytes and integers."""

    def token_bytes(self, length: int) -> bytes:
        """Return length random bytes."""
        ...

    def randbelow(self, upper: int) -> int:
        """Return a random int in [0, upper)."""
        ...


@attrs.define(frozen=True, slots=True)
class SystemClock:
    """Wall-clock time in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


@attrs.define(frozen=True, slots=True)
class FixedClock:
    """Clock pinned to a single instant."""

    instant: datetime = attrs.field()

    @instant.validator
    def _check_aware(self, attribute: Any, value: datetime) -> None:
        if value.tzinfo is None:
            raise ValueError("FixedClock instant must be timezone-aware")

    def now(self) -> datetime:
        return self.instant


@attrs.define(frozen=True, slots=True)
class SystemRandomSource:
    """Cryptographically secure randomness from the secrets module."""

    def token_bytes(self, length: int) -> bytes:
        return secrets.token_bytes(length)

    def randbelow(self, upper: int) -> int:
        return secrets.randbelow(upper)


@attrs.define
class SeededRandomSource:
    """
    Reproducible randomness for test vectors.

    Output is predictable by construction. Use only where reproducibility
    matters more than secrecy.
    """

    seed: int = 0
    _rng: random.Random = attrs.field(init=False, repr=False)
    _lock: threading.Lock = attrs.field(init=False, repr=False, factory=threading.Lock)

    def __attrs_post_init__(self) -> None:
        self._rng = random.Random(self.seed)

    def token_bytes(self, length: int) -> bytes:
        with self._lock:
            return bytes(self._rng.getrandbits(8) for _ in range(length))

    def randbelow(self, upper: int) -> int:
        with self._lock:
            return self._rng.randrange(upper)
