"""Friend rescue: a roll-gated check-in after a run of failures."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Literal

from skill_issue.economy import clamp
from skill_issue.hints import Messages, PatternHint, pattern_hint, rescue_result_message
from skill_issue.personality import rescue_energy_effect
from skill_issue.rng import next_roll
from skill_issue.state import GameState, is_weekend
from skill_issue.tasks import TaskCatalog
from skill_issue.tuning import register_tunable

THRESHOLD = 3
PHONE_BUZZ_THRESHOLD = 2
COST_WEEKDAY = 1
COST_WEEKEND = 2
MAX_CHANCE = 0.9

FRIEND_RESCUE_CHANCE = register_tunable("rescue.chance", 0.4, 0.05, 5001)

CORRECT_TIER_MOMENTUM = 0.1
WRONG_TIER_MOMENTUM = 0.03
WRONG_TIER_ENERGY_PENALTY = 0.08

ActivityTier = Literal["low", "medium", "high"]


@dataclass(frozen=True)
class Activity:
    id: ActivityTier
    energy_threshold: float


ACTIVITIES: tuple[Activity, ...] = (
    Activity("low", 0.2),
    Activity("medium", 0.45),
    Activity("high", 0.7),
)


def activity(tier: ActivityTier) -> Activity:
    for a in ACTIVITIES:
        if a.id == tier:
            return a
    raise KeyError(tier)


class RescuePhase(Enum):
    IDLE = "idle"
    ELIGIBLE = "eligible"
    OFFERED = "offered"
    RESOLVED = "resolved"


def rescue_phase(state: GameState) -> RescuePhase:
    """Where today's rescue stands, read off the state."""
    if state.friend_rescue_used_today:
        return RescuePhase.RESOLVED
    if state.screen == "friendRescue":
        return RescuePhase.OFFERED
    if is_rescue_eligible(state):
        return RescuePhase.ELIGIBLE
    return RescuePhase.IDLE


def rescue_cost(state: GameState) -> int:
    return COST_WEEKEND if is_weekend(state) else COST_WEEKDAY


def can_afford_rescue(state: GameState) -> bool:
    if is_weekend(state):
        return state.weekend_points_remaining >= COST_WEEKEND
    return state.slots_remaining >= COST_WEEKDAY


def friend_rescue_chance(seed: int) -> float:
    return FRIEND_RESCUE_CHANCE.value(seed)


def effective_rescue_chance(state: GameState) -> float:
    return min(friend_rescue_chance(state.run_seed) + state.friend_rescue_chance_bonus, MAX_CHANCE)


def is_rescue_eligible(state: GameState) -> bool:
    return (
        state.consecutive_failures >= THRESHOLD
        and not state.friend_rescue_used_today
        and can_afford_rescue(state)
    )


def should_trigger_rescue(state: GameState) -> bool:
    """Roll for a rescue. Spends a roll only when the gates are open."""
    if not is_rescue_eligible(state):
        return False
    return next_roll(state) < effective_rescue_chance(state)


def is_correct_tier(chosen: Activity, energy: float) -> bool:
    return energy >= chosen.energy_threshold


def activity_effects(chosen: Activity, state: GameState) -> tuple[float, float]:
    """``(energy, momentum)`` deltas for picking ``chosen`` at current energy."""
    energy = rescue_energy_effect(state.personality)
    if is_correct_tier(chosen, state.energy):
        return energy, CORRECT_TIER_MOMENTUM
    return energy - WRONG_TIER_ENERGY_PENALTY, WRONG_TIER_MOMENTUM


@dataclass(frozen=True)
class RescueResult:
    correct: bool
    energy_change: float
    momentum_change: float
    hint: PatternHint
    message: str


def accept_rescue(
    state: GameState,
    tier: ActivityTier | Activity,
    catalog: TaskCatalog | None = None,
    messages: Messages | None = None,
) -> RescueResult:
    """Go with the friend. Mutates ``state``.

    The pattern hint is picked before the effects land, since variant
    unlock weights read the low energy and momentum the rescue is about
    to lift.
    """
    chosen = tier if isinstance(tier, Activity) else activity(tier)
    correct = is_correct_tier(chosen, state.energy)
    energy, momentum = activity_effects(chosen, state)
    hint = pattern_hint(state, catalog, messages)
    message = rescue_result_message(state, correct, messages)

    state.economy.shift(energy=energy, momentum=momentum)
    cost = rescue_cost(state)
    if is_weekend(state):
        state.weekend_points_remaining = max(0, state.weekend_points_remaining - cost)
    else:
        state.slots_remaining = max(0, state.slots_remaining - cost)
    state.friend_rescue_used_today = True
    state.consecutive_failures = 0
    state.run_stats.friend_rescues.accepted += 1
    if hint.unlocks_variant and hint.unlocks_variant not in state.variants_unlocked:
        state.variants_unlocked.append(hint.unlocks_variant)
    if state.screen == "friendRescue":
        state.screen = "game"
    return RescueResult(correct, energy, momentum, hint, message)


def decline_rescue(state: GameState) -> None:
    """The check-in still counts: failures reset and today's rescue is spent."""
    state.consecutive_failures = 0
    state.friend_rescue_used_today = True
    if state.screen == "friendRescue":
        state.screen = "game"


def add_rescue_chance_bonus(state: GameState, delta: float) -> None:
    state.friend_rescue_chance_bonus = clamp(state.friend_rescue_chance_bonus + delta, 0.0, MAX_CHANCE)
