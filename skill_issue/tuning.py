"""Seeded-parameter derivation and the central tunable table."""
from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping, TypeVar

from skill_issue.rng import next_uniform

C = TypeVar("C", bound=str)


def seeded_variation(seed: int, base: float, variance: float, salt: int = 0) -> float:
    """Value in [base - variance, base + variance], fixed per (seed, salt)."""
    return base + (next_uniform(seed, salt) * 2 - 1) * variance


def seeded_choice(seed: int, salt: int, categories: Iterable[C]) -> C:
    """Pick a category. Input order does not matter; categories are sorted first."""
    ordered = sorted(set(categories))
    if not ordered:
        raise ValueError("seeded_choice requires at least one category")
    index = int(next_uniform(seed, salt) * len(ordered))
    return ordered[min(index, len(ordered) - 1)]


@dataclass(frozen=True)
class Tunable:
    """A seed-varied constant.

    Attributes:
        name: Dotted identifier, e.g. ``"energy.decay"``.
        base: Center value.
        variance: Maximum absolute deviation from ``base``.
        salt: Mixed into the seed; unique across the table.
    """

    name: str
    base: float
    variance: float
    salt: int

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Tunable name must be non-empty")
        if self.variance < 0:
            raise ValueError(f"variance must be >= 0, got {self.variance}")

    @property
    def low(self) -> float:
        return self.base - self.variance

    @property
    def high(self) -> float:
        return self.base + self.variance

    def value(self, seed: int) -> float:
        if self.variance == 0:
            return self.base
        return seeded_variation(seed, self.base, self.variance, self.salt)


_tunables: dict[str, Tunable] = {}
_salts: dict[int, str] = {}

TUNABLES: Mapping[str, Tunable] = MappingProxyType(_tunables)


def reserve_salt(name: str, salt: int) -> int:
    """Allocate a salt used outside the tunable table (categorical picks)."""
    owner = _salts.get(salt)
    if owner is not None:
        raise ValueError(f"Salt {salt} already allocated to {owner!r}")
    _salts[salt] = name
    return salt


def register_tunable(name: str, base: float, variance: float, salt: int) -> Tunable:
    """Define a tunable. Raises ValueError on a reused name or salt."""
    if name in _tunables:
        raise ValueError(f"Tunable {name!r} already registered")
    owner = _salts.get(salt)
    if owner is not None:
        raise ValueError(f"Salt {salt} already allocated to {owner!r}")
    tunable = Tunable(name=name, base=base, variance=variance, salt=salt)
    _tunables[name] = tunable
    _salts[salt] = name
    return tunable


def derived_parameters(seed: int) -> dict[str, float]:
    """Every registered tunable resolved for ``seed``, keyed by name."""
    return {name: t.value(seed) for name, t in sorted(_tunables.items())}
