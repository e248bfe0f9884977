"""
Time-sortable unique identifiers (ULID).

A ULID is 128 bits: a 48-bit millisecond Unix timestamp followed by
80 bits of randomness, rendered as 26 Crockford base32 characters.
Lexicographic order of the strings matches generation order, which keeps
primary-key indexes append-mostly and lets operators sort error ids
chronologically.

Used for client-side record ids and for error correlation ids.
"""

import secrets
import threading
import time
from typing import Callable

CROCKFORD_ALPHABET = "0123456789ABCDEFGHJKMNPQRSTVWXYZ"
ULID_LENGTH = 26

_TIMESTAMP_CHARS = 10
_RANDOM_CHARS = 16
_RANDOM_BITS = 80
_MAX_TIMESTAMP = (1 << 48) - 1
_MAX_RANDOM = (1 << _RANDOM_BITS) - 1


def _encode(value: int, length: int) -> str:
    """Encode a non-negative integer as fixed-width Crockford base32."""
    chars = []
    for _ in range(length):
        value, remainder = divmod(value, 32)
        chars.append(CROCKFORD_ALPHABET[remainder])
    return "".join(reversed(chars))


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


class UlidGenerator:
    """Thread-safe, monotonic ULID factory.

    Within one millisecond (or when the clock moves backwards) the previous
    randomness is incremented instead of redrawn, so every id is strictly
    greater than the one before it.

    Args:
        clock: Returns the current Unix time in milliseconds.
        random_bits: Returns a random integer of the requested bit width.
    """

    def __init__(
        self,
        clock: Callable[[], int] = _now_ms,
        random_bits: Callable[[int], int] = secrets.randbits,
    ) -> None:
        self._clock = clock
        self._random_bits = random_bits
        self._lock = threading.Lock()
        self._last_ms = -1
        self._last_random = 0

    def __call__(self) -> str:
        with self._lock:
            now = self._clock()
            if now <= self._last_ms:
                timestamp = self._last_ms
                randomness = self._last_random + 1
                if randomness > _MAX_RANDOM:
                    # Randomness exhausted within one millisecond: borrow the next one.
                    timestamp += 1
                    randomness = self._random_bits(_RANDOM_BITS)
            else:
                timestamp = now
                randomness = self._random_bits(_RANDOM_BITS)

            if timestamp > _MAX_TIMESTAMP:
                raise OverflowError("ULID timestamp exceeds 48 bits")

            self._last_ms = timestamp
            self._last_random = randomness

        return _encode(timestamp, _TIMESTAMP_CHARS) + _encode(randomness, _RANDOM_CHARS)


new_ulid = UlidGenerator()
