"""Lottery number sampler.

Draws sets of distinct numbers from a closed range using the OS CSPRNG
(``secrets.SystemRandom``). Range and set size are fixed configuration,
validated once when the sampler is built.
"""

from __future__ import annotations

import secrets

from lotterypay.core.constants import (
    DEFAULT_MAX_NUMBER,
    DEFAULT_MIN_NUMBER,
    DEFAULT_NUMBERS_PER_SET,
)


class SamplerConfigError(ValueError):
    """Raised when the sampler range cannot produce a full set."""


class NumberSampler:
    """Draws ``numbers_per_set`` distinct integers from ``[min_number, max_number]``."""

    def __init__(
        self,
        min_number: int = DEFAULT_MIN_NUMBER,
        max_number: int = DEFAULT_MAX_NUMBER,
        numbers_per_set: int = DEFAULT_NUMBERS_PER_SET,
    ) -> None:
        if numbers_per_set < 1:
            raise SamplerConfigError(f"numbers_per_set must be >= 1 (got {numbers_per_set})")
        if min_number > max_number:
            raise SamplerConfigError(
                f"min_number ({min_number}) must not exceed max_number ({max_number})"
            )
        range_size = max_number - min_number + 1
        if numbers_per_set > range_size:
            raise SamplerConfigError(
                f"Cannot draw {numbers_per_set} distinct numbers from a range of {range_size}"
            )
        self.min_number = min_number
        self.max_number = max_number
        self.numbers_per_set = numbers_per_set
        self._rng = secrets.SystemRandom()

    def draw_set(self) -> list[int]:
        """One sorted set of distinct numbers."""
        population = range(self.min_number, self.max_number + 1)
        return sorted(self._rng.sample(population, self.numbers_per_set))

    def draw(self, count: int) -> list[list[int]]:
        """``count`` independent sets. Sets may repeat across a ticket."""
        if count < 0:
            raise ValueError("count must be non-negative")
        return [self.draw_set() for _ in range(count)]


def format_numbers(numbers: list[int]) -> str:
    """``[3, 11, 19]`` -> ``"3 - 11 - 19"``."""
    return " - ".join(str(n) for n in numbers)


def format_ticket_numbers(sets: list[list[int]]) -> str:
    """One line per set: ``"Ticket 1: 3 - 11 - 19 ..."``."""
    return "\n".join(f"Ticket {i}: {format_numbers(s)}" for i, s in enumerate(sets, start=1))
