"""
Time-ordered identifier generation.
Identifiers are 64-bit integers: 42 bits of milliseconds since 2020-01-01 UTC followed by
a 22-bit counter that is seeded randomly at every new millisecond. The text form is the
13-character Crockford base32 encoding, so lexical order matches creation order.
"""

from __future__ import annotations

import secrets
import threading
import time
from collections.abc import Callable
from typing import Final

TSID_EPOCH_MS: Final[int] = 1_577_836_800_000
COUNTER_BITS: Final[int] = 22
COUNTER_MASK: Final[int] = (1 << COUNTER_BITS) - 1
TSID_TEXT_LENGTH: Final[int] = 13

_ALPHABET: Final[str] = "0123456789ABCDEFGHJKMNPQRSTVWXYZ"
_DECODE_MAP: Final[dict[str, int]] = {char: index for index, char in enumerate(_ALPHABET)}
_DECODE_MAP.update({"I": 1, "L": 1, "O": 0})


def encode_tsid(value: int) -> str:
    """Render a 64-bit identifier as 13 Crockford base32 characters."""

    if value < 0 or value >= 1 << 64:
        raise ValueError(f"TSID value out of range: {value}")
    chars = [_ALPHABET[(value >> (60 - 5 * index)) & 0x1F] for index in range(TSID_TEXT_LENGTH)]
    return "".join(chars)


def decode_tsid(text: str) -> int:
    """Parse the 13-character text form back into its integer value."""

    cleaned = text.strip().upper()
    if len(cleaned) != TSID_TEXT_LENGTH:
        raise ValueError(f"TSID must have {TSID_TEXT_LENGTH} characters, got {text!r}")

    value = 0
    for char in cleaned:
        digit = _DECODE_MAP.get(char)
        if digit is None:
            raise ValueError(f"Invalid TSID character {char!r} in {text!r}")
        value = (value << 5) | digit

    # The first character only carries 4 bits.
    if value >= 1 << 64:
        raise ValueError(f"TSID out of range: {text!r}")
    return value


class TsidGenerator:
    """Thread-safe generator of strictly increasing identifiers."""

    def __init__(self, *, clock_ms: Callable[[], int] | None = None) -> None:
        self._clock_ms = clock_ms or (lambda: time.time_ns() // 1_000_000)
        self._lock = threading.Lock()
        self._last_ms = -1
        self._counter = 0

    def next_value(self) -> int:
        with self._lock:
            now_ms = max(self._clock_ms() - TSID_EPOCH_MS, 0)
            if now_ms > self._last_ms:
                self._last_ms = now_ms
                # Half range leaves room for increments within the same millisecond.
                self._counter = secrets.randbits(COUNTER_BITS - 1)
            else:
                self._counter += 1
                if self._counter > COUNTER_MASK:
                    self._last_ms += 1
                    self._counter = 0
            return (self._last_ms << COUNTER_BITS) | self._counter

_DEFAULT_GENERATOR = TsidGenerator()


def generate_tsid() -> int:
    """Return a new identifier from the process-wide generator."""

    return _DEFAULT_GENERATOR.next_value()
