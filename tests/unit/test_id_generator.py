"""
Unit tests for time-ordered identifier generation.
"""

from __future__ import annotations

import pytest

from device_management.common.id_generator import (
    COUNTER_BITS,
    TSID_EPOCH_MS,
    TsidGenerator,
    decode_tsid,
    encode_tsid,
)


def test_identifiers_increase_within_the_same_millisecond() -> None:
    generator = TsidGenerator(clock_ms=lambda: TSID_EPOCH_MS + 1_000)

    values = [generator.next_value() for _ in range(50)]

    assert values == sorted(values)
    assert len(set(values)) == 50
    assert {value >> COUNTER_BITS for value in values} == {1_000}


def test_identifiers_stay_ordered_when_clock_moves_backwards() -> None:
    ticks = iter([TSID_EPOCH_MS + 500, TSID_EPOCH_MS + 400])
    generator = TsidGenerator(clock_ms=lambda: next(ticks))

    first = generator.next_value()
    second = generator.next_value()

    assert second > first


def test_text_form_sorts_like_numeric_value() -> None:
    generator = TsidGenerator()
    values = [generator.next_value() for _ in range(20)]
    texts = [encode_tsid(value) for value in values]

    assert texts == sorted(texts)
    assert all(len(text) == 13 for text in texts)


def test_decode_accepts_lowercase_and_crockford_aliases() -> None:
    assert decode_tsid("0000000000001") == 1
    assert decode_tsid("000000000000l") == 1
    assert decode_tsid("000000000000O") == 0
    assert decode_tsid(encode_tsid(0x0123_4567_89AB_CDEF).lower()) == 0x0123_4567_89AB_CDEF


@pytest.mark.parametrize("text", ["", "123", "00000000000000", "0000000000U00", "G000000000000"])
def test_decode_rejects_malformed_text(text: str) -> None:
    with pytest.raises(ValueError):
        decode_tsid(text)
