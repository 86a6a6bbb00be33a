"""Day cycle: time blocks, nights, sleep and the week boundary."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Literal

from skill_issue.config import DEFAULT_RULES, RulesConfig
from skill_issue.economy import apply_block_decay
from skill_issue.rng import next_roll
from skill_issue.state import GameState, is_weekend
from skill_issue.tasks import TaskCatalog, default_catalog
from skill_issue.tuning import register_tunable
from skill_issue.types import DAYS, TIME_BLOCKS, WEEKEND_START

ALL_NIGHTER_PENALTY = register_tunable("energy.all_nighter", 0.25, 0.05, 4001)

DogUrgency = Literal["normal", "waiting", "urgent", "critical"]
DOG_URGENCY_LEVELS: tuple[DogUrgency, ...] = ("normal", "waiting", "urgent", "critical")
DOG_TASK_ID = "walk-dog"


def all_nighter_penalty(seed: int) -> float:
    return ALL_NIGHTER_PENALTY.value(seed)


def extended_night_slots(energy: float) -> int:
    """1 to 4 slots; more energy, more productive night."""
    return max(1, math.floor(energy * 4))


def can_push_through(state: GameState) -> bool:
    """Weekdays only, never twice in a row, never from inside an extended night."""
    if is_weekend(state):
        return False
    return not state.pushed_through_last_night and not state.in_extended_night


def dog_walked_today(state: GameState) -> bool:
    return any(t.succeeded_today for t in state.tasks if t.id == DOG_TASK_ID)


def dog_walk_failed_today(state: GameState) -> bool:
    return any(
        t.attempted_today and not t.succeeded_today
        for t in state.tasks
        if t.id == DOG_TASK_ID
    )


def dog_urgency(state: GameState) -> DogUrgency:
    """Escalates through the day; a missed walk yesterday floors it at ``waiting``."""
    if dog_walked_today(state):
        return "normal"
    if is_weekend(state):
        level = 1
    else:
        level = TIME_BLOCKS.index(state.time_block)
    if state.dog_failed_yesterday:
        level = max(level, 1)
    return DOG_URGENCY_LEVELS[min(level, len(DOG_URGENCY_LEVELS) - 1)]


@dataclass(frozen=True)
class SleepModifier:
    energy: float
    momentum: float


def sleep_quality(state: GameState, catalog: TaskCatalog | None = None) -> SleepModifier:
    """How today carries into tomorrow's starting energy and momentum."""
    if catalog is None:
        catalog = default_catalog()
    energy = 0.0
    momentum = 0.0

    ate = any(t.succeeded_today and catalog.get(t.id).category == "food" for t in state.tasks)
    if ate:
        energy += 0.1
        momentum += 0.05
    else:
        energy -= 0.1

    if dog_walked_today(state):
        energy += 0.05
        momentum += 0.05
    elif dog_walk_failed_today(state):
        momentum -= 0.1

    if sum(1 for t in state.tasks if t.succeeded_today) >= 3:
        momentum += 0.1

    if state.momentum < 0.3:
        energy -= 0.05
        momentum -= 0.05

    return SleepModifier(energy, momentum)


def _end_day(state: GameState) -> None:
    state.dog_failed_yesterday = not dog_walked_today(state)
    if state.time_block == "night" and can_push_through(state):
        state.screen = "nightChoice"
    else:
        state.screen = "daySummary"


def skip_time_block(state: GameState, rules: RulesConfig = DEFAULT_RULES) -> None:
    """Decay, then move to the next block or close out the day."""
    apply_block_decay(state.economy, state.run_seed)
    index = TIME_BLOCKS.index(state.time_block)
    if index + 1 < len(TIME_BLOCKS):
        state.time_block = TIME_BLOCKS[index + 1]
        state.slots_remaining = rules.slots_per_block
        state.selected_task_id = None
        if next_roll(state) < rules.block_notification_chance:
            state.phone_notification_count += 1
    else:
        _end_day(state)


def end_weekend_day(state: GameState) -> None:
    _end_day(state)


def choose_sleep(state: GameState) -> None:
    state.screen = "daySummary"


def push_through(state: GameState) -> int:
    """Stay up. Returns the extended-night slot count granted."""
    slots = extended_night_slots(state.energy)
    state.in_extended_night = True
    state.slots_remaining = slots
    state.screen = "game"
    state.run_stats.all_nighters += 1
    return slots


def continue_to_next_day(
    state: GameState,
    catalog: TaskCatalog | None = None,
    rules: RulesConfig = DEFAULT_RULES,
) -> bool:
    """Apply sleep and start the next day. False once the week is over."""
    next_index = state.day_index + 1
    if next_index >= rules.week_length:
        state.screen = "weekComplete"
        return False

    pulled_all_nighter = state.in_extended_night
    sleep = sleep_quality(state, catalog)
    state.economy.shift(energy=sleep.energy, momentum=sleep.momentum)
    if pulled_all_nighter:
        state.economy.shift(energy=-all_nighter_penalty(state.run_seed))

    state.day = DAYS[next_index]
    state.day_index = next_index
    state.screen = "game"
    state.pushed_through_last_night = pulled_all_nighter
    state.in_extended_night = False

    if next_index >= WEEKEND_START:
        state.weekend_points_remaining = rules.weekend_points
    else:
        # An all-nighter costs the next morning.
        state.time_block = "afternoon" if pulled_all_nighter else "morning"
        state.slots_remaining = rules.slots_per_block

    for task in state.tasks:
        task.attempted_today = False
        task.succeeded_today = False
    state.friend_rescue_used_today = False
    state.friend_rescue_chance_bonus = 0.0
    state.selected_task_id = None
    return True
