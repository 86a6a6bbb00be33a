"""Energy / momentum economy: bounded accumulators and their deltas."""
from __future__ import annotations

from skill_issue.personality import (
    Personality,
    social_success_energy,
    solo_success_energy,
)
from skill_issue.rng import hash_string
from skill_issue.tasks import TaskDef
from skill_issue.tuning import register_tunable, seeded_variation

# --- Energy tunables ---
ENERGY_DECAY = register_tunable("energy.decay", 0.02, 0.005, 1001)
FAILURE_ENERGY_COST = register_tunable("energy.failure_cost", 0.02, 0.005, 1003)
SATURDAY_WORK_PENALTY = register_tunable("energy.saturday_work", 0.1, 0.02, 1004)

# --- Momentum tunables ---
MOMENTUM_SUCCESS_BONUS = register_tunable("momentum.success_bonus", 0.075, 0.025, 3001)
MOMENTUM_FAILURE_PENALTY = register_tunable("momentum.failure_penalty", 0.04, 0.01, 3002)
MOMENTUM_DECAY = register_tunable("momentum.decay", 0.02, 0.005, 3003)

# Task success effects use SALT_TASK_ENERGY_BASE + hash(task id).
SALT_TASK_ENERGY_BASE = 2000
TASK_ENERGY_VARIANCE_FACTOR = 0.2

SOCIAL_CATEGORIES = frozenset({"social"})


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def apply_delta(value: float, delta: float) -> float:
    """The single mutation primitive: ``clamp(value + delta, 0, 1)``."""
    return clamp(value + delta, 0.0, 1.0)


class Economy:
    """Energy and momentum, each kept in [0, 1] on every assignment."""

    __slots__ = ("_energy", "_momentum")

    def __init__(self, energy: float = 0.6, momentum: float = 0.5) -> None:
        self._energy = clamp(energy, 0.0, 1.0)
        self._momentum = clamp(momentum, 0.0, 1.0)

    @property
    def energy(self) -> float:
        return self._energy

    @energy.setter
    def energy(self, value: float) -> None:
        self._energy = clamp(value, 0.0, 1.0)

    @property
    def momentum(self) -> float:
        return self._momentum

    @momentum.setter
    def momentum(self, value: float) -> None:
        self._momentum = clamp(value, 0.0, 1.0)

    def shift(self, energy: float = 0.0, momentum: float = 0.0) -> None:
        self._energy = apply_delta(self._energy, energy)
        self._momentum = apply_delta(self._momentum, momentum)

    def copy(self) -> Economy:
        return Economy(self._energy, self._momentum)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Economy):
            return NotImplemented
        return self._energy == other._energy and self._momentum == other._momentum

    def __repr__(self) -> str:
        return f"Economy(energy={self._energy!r}, momentum={self._momentum!r})"

    def __deepcopy__(self, memo: dict) -> Economy:
        return self.copy()


# --- Derived per-run values ---


def energy_decay_per_block(seed: int) -> float:
    return ENERGY_DECAY.value(seed)


def momentum_decay_per_block(seed: int) -> float:
    return MOMENTUM_DECAY.value(seed)


def failure_energy_cost(seed: int) -> float:
    return FAILURE_ENERGY_COST.value(seed)


def saturday_work_penalty(seed: int) -> float:
    return SATURDAY_WORK_PENALTY.value(seed)


def momentum_success_bonus(seed: int) -> float:
    return MOMENTUM_SUCCESS_BONUS.value(seed)


def momentum_failure_penalty(seed: int) -> float:
    return MOMENTUM_FAILURE_PENALTY.value(seed)


def apply_block_decay(economy: Economy, seed: int) -> None:
    """Time-block transition: both scalars decay by their seeded rate."""
    economy.shift(
        energy=-energy_decay_per_block(seed),
        momentum=-momentum_decay_per_block(seed),
    )


# --- Task effects ---


def is_social_task(task: TaskDef) -> bool:
    return task.category in SOCIAL_CATEGORIES


def task_salt(task_id: str) -> int:
    return SALT_TASK_ENERGY_BASE + hash_string(task_id)


def task_energy_effect(
    task: TaskDef, succeeded: bool, seed: int, personality: Personality
) -> float:
    """Energy delta for one attempt.

    Success: declared effect jittered by +/-20% per task, plus the social or
    solo personality modifier. Failure: the declared failure effect when one
    is declared (zero included), otherwise the seeded default cost.
    """
    if succeeded:
        effect = 0.0
        base = task.success_energy if task.success_energy is not None else 0.0
        if base != 0:
            variance = abs(base) * TASK_ENERGY_VARIANCE_FACTOR
            effect += seeded_variation(seed, base, variance, task_salt(task.id))
        if is_social_task(task):
            effect += social_success_energy(personality)
        else:
            effect += solo_success_energy(personality)
        return effect

    if task.failure_energy is not None:
        return task.failure_energy
    return -failure_energy_cost(seed)
