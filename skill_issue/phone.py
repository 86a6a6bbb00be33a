"""Checking the phone: one roll picks how the scroll goes."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from skill_issue.hints import SALT_PHONE_FLAVOR, Messages, pick_message
from skill_issue.rescue import add_rescue_chance_bonus
from skill_issue.rng import next_roll
from skill_issue.state import GameState
from skill_issue.tasks import TaskCatalog, default_catalog
from skill_issue.tuning import Tunable, register_tunable
from skill_issue.types import TaskCategory

PhoneOutcome = Literal["void", "scrollHole", "actualBreak", "somethingNice", "usefulFind"]

PHONE_OUTCOMES: tuple[PhoneOutcome, ...] = (
    "void", "scrollHole", "actualBreak", "somethingNice", "usefulFind",
)

BASE_WEIGHTS: dict[PhoneOutcome, int] = {
    "void": 50,
    "scrollHole": 20,
    "actualBreak": 16,
    "somethingNice": 10,
    "usefulFind": 4,
}

MIN_WEIGHT = 1
SOMETHING_NICE_RESCUE_BONUS = 0.1
UNLOCK_MIN_FAILURES = 2

# Energy can go either way; momentum always drops, by how much varies.
ENERGY_EFFECTS: dict[PhoneOutcome, Tunable] = {
    "void": register_tunable("phone.void.energy", -0.04, 0.01, 1010),
    "scrollHole": register_tunable("phone.scroll_hole.energy", -0.06, 0.01, 1011),
    "actualBreak": register_tunable("phone.actual_break.energy", 0.02, 0.01, 1012),
    "somethingNice": register_tunable("phone.something_nice.energy", 0.03, 0.01, 1013),
    "usefulFind": register_tunable("phone.useful_find.energy", 0.015, 0.005, 1014),
}

MOMENTUM_EFFECTS: dict[PhoneOutcome, Tunable] = {
    "void": register_tunable("phone.void.momentum", -0.175, 0.025, 3010),
    "scrollHole": register_tunable("phone.scroll_hole.momentum", -0.225, 0.025, 3011),
    "actualBreak": register_tunable("phone.actual_break.momentum", -0.125, 0.025, 3012),
    "somethingNice": register_tunable("phone.something_nice.momentum", -0.075, 0.025, 3013),
    "usefulFind": register_tunable("phone.useful_find.momentum", -0.075, 0.025, 3014),
}

_FLAVOR_KEYS: dict[PhoneOutcome, str] = {
    "void": "phoneVoid",
    "scrollHole": "phoneScrollHole",
    "actualBreak": "phoneActualBreak",
    "somethingNice": "phoneSomethingNice",
    "usefulFind": "phoneUsefulFind",
}


def adjusted_weights(state: GameState) -> dict[PhoneOutcome, int]:
    """Outcome weights for the current state.

    Tiredness, a stalled day and the night all push toward the scroll hole.
    """
    weights = dict(BASE_WEIGHTS)
    if state.energy < 0.3:
        weights["scrollHole"] += 10
        weights["actualBreak"] -= 5
        weights["void"] -= 5
    if state.momentum < 0.3:
        weights["scrollHole"] += 10
        weights["void"] -= 10
    if state.time_block == "night":
        weights["scrollHole"] += 10
        weights["somethingNice"] -= 5
        weights["void"] -= 5
    return {k: max(MIN_WEIGHT, w) for k, w in weights.items()}


def select_phone_outcome(state: GameState) -> PhoneOutcome:
    """Spend one roll on the weighted outcome table."""
    weights = adjusted_weights(state)
    threshold = next_roll(state) * sum(weights.values())
    for outcome in PHONE_OUTCOMES:
        threshold -= weights[outcome]
        if threshold < 0:
            return outcome
    return PHONE_OUTCOMES[-1]


def phone_energy_effect(seed: int, outcome: PhoneOutcome) -> float:
    return ENERGY_EFFECTS[outcome].value(seed)


def phone_momentum_effect(seed: int, outcome: PhoneOutcome) -> float:
    return MOMENTUM_EFFECTS[outcome].value(seed)


def unlockable_category(state: GameState, catalog: TaskCatalog) -> TaskCategory | None:
    """Category of the most-failed variant task that is still locked.

    Needs at least two failures. Ties go to catalog order.
    """
    best: TaskCategory | None = None
    best_failures = UNLOCK_MIN_FAILURES - 1
    for task in catalog.with_variants():
        if task.category in state.variants_unlocked:
            continue
        failures = state.task(task.id).failure_count
        if failures > best_failures:
            best, best_failures = task.category, failures
    return best


@dataclass(frozen=True)
class PhoneResult:
    outcome: PhoneOutcome
    energy_change: float
    momentum_change: float
    text: str
    unlocked_variant: TaskCategory | None = None


def check_phone(
    state: GameState,
    catalog: TaskCatalog | None = None,
    messages: Messages | None = None,
) -> PhoneResult:
    """Always allowed, costs no slot. Clears pending notifications."""
    if catalog is None:
        catalog = default_catalog()
    outcome = select_phone_outcome(state)
    energy = phone_energy_effect(state.run_seed, outcome)
    momentum = phone_momentum_effect(state.run_seed, outcome)
    state.economy.shift(energy=energy, momentum=momentum)
    state.phone_notification_count = 0
    state.run_stats.phone_checks += 1

    unlocked = None
    if outcome == "somethingNice":
        add_rescue_chance_bonus(state, SOMETHING_NICE_RESCUE_BONUS)
    elif outcome == "usefulFind":
        unlocked = unlockable_category(state, catalog)
        if unlocked is not None:
            state.variants_unlocked.append(unlocked)

    text = pick_message(state, _FLAVOR_KEYS[outcome], SALT_PHONE_FLAVOR, messages)
    return PhoneResult(outcome, energy, momentum, text, unlocked)
