"""Seeded PRNG substrate - pure draws keyed by (seed, index)."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Protocol, Sequence, TypeVar

T = TypeVar("T")

_MULTIPLIER = 1103515245
_INCREMENT = 12345
_RESOLUTION = 10000


class RollSource(Protocol):
    """Anything carrying a run seed and a persisted roll count."""

    run_seed: int
    roll_count: int


@dataclass
class RollCounter:
    """Standalone roll stream. Game state satisfies the same protocol."""

    run_seed: int
    roll_count: int = 0


def next_uniform(seed: int, index: int = 0) -> float:
    """Return a value in [0, 1) for ``(seed, index)``.

    Arithmetic is carried out on doubles and then truncated to 32 bits, so
    large seeds lose low bits exactly as saves written by other clients did.
    The result is quantized to 1/10000.
    """
    try:
        s = float(seed + index) * _MULTIPLIER + _INCREMENT
    except OverflowError:
        return 0.0
    if not math.isfinite(s):
        return 0.0
    return ((int(s) & 0x7FFFFFFF) % _RESOLUTION) / _RESOLUTION


def next_roll(source: RollSource) -> float:
    """Draw the next gameplay value and advance ``roll_count`` by one."""
    value = next_uniform(source.run_seed, source.roll_count)
    source.roll_count += 1
    return value


def pick_variant(seed: int, salt: int, items: Sequence[T]) -> T:
    """Deterministic cosmetic pick. Never touches a roll counter."""
    if not items:
        raise ValueError("pick_variant requires at least one item")
    index = int(next_uniform(seed, salt) * len(items))
    return items[min(index, len(items) - 1)]


def hash_string(text: str) -> int:
    """Stable 32-bit string hash over UTF-16 code units (absolute value)."""
    h = 0
    data = text.encode("utf-16-le")
    for i in range(0, len(data), 2):
        code = data[i] | (data[i + 1] << 8)
        h = (h << 5) - h + code
        h = ((h + 0x80000000) & 0xFFFFFFFF) - 0x80000000
    return abs(h)
