"""
Tests for ULID generation.
"""

import threading

import pytest

from recy.shared.identifiers import CROCKFORD_ALPHABET, ULID_LENGTH, UlidGenerator, new_ulid


class TestUlidFormat:
    """Shape of generated identifiers."""

    def test_length_and_alphabet(self) -> None:
        """A ULID is 26 Crockford base32 characters."""
        value = new_ulid()
        assert len(value) == ULID_LENGTH
        assert set(value) <= set(CROCKFORD_ALPHABET)

    def test_timestamp_prefix_encodes_clock(self) -> None:
        """The first 10 characters encode the millisecond timestamp."""
        generator = UlidGenerator(clock=lambda: 0, random_bits=lambda bits: 0)
        assert generator() == "0" * ULID_LENGTH

        generator = UlidGenerator(clock=lambda: 32, random_bits=lambda bits: 1)
        assert generator() == "0000000010" + "0" * 15 + "1"

    def test_rejects_timestamps_beyond_48_bits(self) -> None:
        generator = UlidGenerator(clock=lambda: 1 << 48, random_bits=lambda bits: 0)
        with pytest.raises(OverflowError):
            generator()


class TestUlidOrdering:
    """Generated ids sort in generation order."""

    def test_ids_sort_in_generation_order(self) -> None:
        ids = [new_ulid() for _ in range(500)]
        assert ids == sorted(ids)
        assert len(set(ids)) == len(ids)

    def test_same_millisecond_increments_randomness(self) -> None:
        """Within one millisecond the random part is incremented."""
        generator = UlidGenerator(clock=lambda: 1_700_000_000_000, random_bits=lambda bits: 41)
        first, second = generator(), generator()
        assert first[:10] == second[:10]
        assert second > first
        assert int(second[-1], 32) - int(first[-1], 32) == 1

    def test_clock_regression_stays_monotonic(self) -> None:
        """A clock moving backwards never produces a smaller id."""
        ticks = iter([2_000, 1_000, 1_500])
        generator = UlidGenerator(clock=lambda: next(ticks), random_bits=lambda bits: 5)
        ids = [generator() for _ in range(3)]
        assert ids == sorted(ids)
        assert len(set(ids)) == 3

    def test_randomness_overflow_moves_to_next_millisecond(self) -> None:
        generator = UlidGenerator(
            clock=lambda: 10, random_bits=lambda bits: (1 << bits) - 1
        )
        first, second = generator(), generator()
        assert second > first
        assert second[:10] != first[:10]

    def test_thread_safe_uniqueness(self) -> None:
        """Concurrent callers never receive the same id."""
        generator = UlidGenerator()
        results: list[str] = []
        lock = threading.Lock()

        def worker() -> None:
            local = [generator() for _ in range(200)]
            with lock:
                results.extend(local)

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(results) == 800
        assert len(set(results)) == 800
