"""
Coarse wall clock for expiry stamps.

Stamps are whole units (minutes by default) since the epoch. An entry whose
stamp equals the current unit is already expired.
"""

from __future__ import annotations

import math
import time
from typing import Callable

_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"

# Largest representable wall-clock instant: epoch + 1e8 days
MAX_EPOCH_SECONDS = 8.64e12


class ExpiryClock:
    """Converts wall-clock time to integer expiry stamps and back to text."""

    def __init__(
        self,
        unit_seconds: int = 60,
        radix: int = 10,
        time_source: Callable[[], float] = time.time,
    ) -> None:
        if unit_seconds <= 0:
            raise ValueError("unit_seconds must be positive")
        if not 2 <= radix <= 36:
            raise ValueError("radix must be between 2 and 36")
        self.unit_seconds = unit_seconds
        self.radix = radix
        self._time_source = time_source

    @property
    def max_stamp(self) -> int:
        return math.floor(MAX_EPOCH_SECONDS / self.unit_seconds)

    def now(self) -> int:
        """Current time in whole units since the epoch."""
        return math.floor(self._time_source() / self.unit_seconds)

    def expires_at(self, ttl: float) -> int:
        """Stamp for an entry living ``ttl`` units from now.

        Fractional ttls are floored to a whole unit.
        """
        return min(math.floor(self.now() + ttl), self.max_stamp)

    def is_expired(self, expires_at: int) -> bool:
        return self.now() >= expires_at

    def encode(self, stamp: int) -> str:
        """Render a stamp in the configured radix (lowercase digits)."""
        if self.radix == 10:
            return str(stamp)
        if stamp == 0:
            return "0"
        sign = "-" if stamp < 0 else ""
        n = abs(stamp)
        digits: list[str] = []
        while n:
            n, rem = divmod(n, self.radix)
            digits.append(_DIGITS[rem])
        return sign + "".join(reversed(digits))

    def decode(self, text: str) -> int:
        """Parse a stored stamp.

        Raises:
            ValueError: If the text is not a number in the configured radix.
        """
        return int(text.strip(), self.radix)
