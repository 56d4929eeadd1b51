"""Injectable randomness and time sources.

The random source is chosen once, when the engine is built. Production
wiring uses the operating system's CSPRNG; a seeded source exists for tests
and is flagged as insecure so nobody mistakes it for the real thing.
"""

import random
import secrets
from datetime import datetime, timezone
from typing import Protocol


class RandomSource(Protocol):
    is_secure: bool

    def randbelow(self, n: int) -> int:
        """Return a uniformly distributed integer in ``[0, n)``."""
        ...


class SecureRandomSource:
    """Backed by ``secrets`` (the OS CSPRNG)."""

    is_secure = True

    def randbelow(self, n: int) -> int:
        return secrets.randbelow(n)

    def __repr__(self) -> str:
        return "SecureRandomSource()"


class SeededRandomSource:
    """Mersenne Twister seeded for reproducibility. Predictable; never use for real draws."""

    is_secure = False

    def __init__(self, seed: int | str | None = None) -> None:
        self._seed = seed
        self._random = random.Random(seed)

    def randbelow(self, n: int) -> int:
        return self._random.randrange(n)

    def __repr__(self) -> str:
        return f"SeededRandomSource(seed={self._seed!r})"


class Clock(Protocol):
    def now(self) -> datetime:
        ...


class SystemClock:
    def now(self) -> datetime:
        return datetime.now(timezone.utc)
