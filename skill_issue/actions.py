"""Player task attempts."""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Protocol

from skill_issue.config import DEFAULT_RULES, RulesConfig
from skill_issue.economy import (
    momentum_failure_penalty,
    momentum_success_bonus,
    saturday_work_penalty,
    task_energy_effect,
)
from skill_issue.hints import Messages, phone_buzz_text, phone_ignored_text
from skill_issue.probability import resolve_outcome, success_probability
from skill_issue.rescue import PHONE_BUZZ_THRESHOLD, THRESHOLD, should_trigger_rescue
from skill_issue.rng import next_roll
from skill_issue.state import GameState, is_weekend
from skill_issue.tasks import TaskCatalog, TaskDef, default_catalog


class FirstAttemptTracker(Protocol):
    """Lifetime one-shot flag, kept outside the run state."""

    def is_first_ever_attempt(self) -> bool: ...

    def mark_first_attempt(self) -> None: ...


@dataclass(frozen=True)
class AttemptResult:
    succeeded: bool
    probability: float
    friend_rescue_triggered: bool
    phone_buzz_text: str | None = None


def select_task(state: GameState, task_id: str | None) -> None:
    state.selected_task_id = task_id


def can_attempt(state: GameState, task: TaskDef) -> bool:
    """Not yet done today and the day still has resources for it."""
    if state.task(task.id).succeeded_today:
        return False
    if is_weekend(state):
        return state.weekend_points_remaining >= task.weekend_cost
    return state.slots_remaining > 0


def failure_notification_chance(failures: int, rules: RulesConfig = DEFAULT_RULES) -> float:
    chance = rules.failure_notification_base + rules.failure_notification_step * (failures - 1)
    return min(chance, rules.failure_notification_cap)


def attempt_task(
    state: GameState,
    task_id: str,
    catalog: TaskCatalog | None = None,
    use_variant: bool = False,
    first_attempt: FirstAttemptTracker | None = None,
    rules: RulesConfig = DEFAULT_RULES,
    messages: Messages | None = None,
) -> AttemptResult | None:
    """Attempt a task. Returns None when it can't be attempted right now.

    Resources are spent whatever the outcome. The very first attempt of a
    player's lifetime always succeeds; its roll is still drawn so the stream
    stays aligned.
    """
    if catalog is None:
        catalog = default_catalog()
    task = catalog.get(task_id)
    if not can_attempt(state, task):
        return None

    weekend = is_weekend(state)
    variant = use_variant and task.has_variant
    effective = task
    if variant:
        effective = replace(task, base_rate=task.variant_base_rate)

    forced = first_attempt is not None and first_attempt.is_first_ever_attempt()
    if forced:
        first_attempt.mark_first_attempt()
    probability = 1.0 if forced else success_probability(effective, state)
    succeeded = resolve_outcome(probability, state)

    runtime = state.task(task_id)
    runtime.attempted_today = True
    runtime.succeeded_today = succeeded
    if not succeeded:
        runtime.failure_count += 1

    stats = state.run_stats
    stats.tasks.record(succeeded)
    stats.by_time_block[state.time_block].record(succeeded)
    if variant and task.category not in stats.variants_used:
        stats.variants_used.append(task.category)

    if weekend:
        state.weekend_points_remaining -= task.weekend_cost
    else:
        state.slots_remaining -= 1

    state.economy.shift(energy=task_energy_effect(task, succeeded, state.run_seed, state.personality))

    if succeeded:
        state.economy.shift(momentum=momentum_success_bonus(state.run_seed))
        state.consecutive_failures = 0
        if task.auto_satisfies and catalog.has(task.auto_satisfies):
            state.task(task.auto_satisfies).succeeded_today = True
        if weekend and task.category == "work" and state.day == "saturday":
            # Borrowing against Sunday.
            state.economy.shift(energy=-saturday_work_penalty(state.run_seed))
        return AttemptResult(succeeded, probability, False)

    state.economy.shift(momentum=-momentum_failure_penalty(state.run_seed))
    state.consecutive_failures += 1
    if next_roll(state) < failure_notification_chance(state.consecutive_failures, rules):
        state.phone_notification_count += 1

    triggered = should_trigger_rescue(state)
    if triggered:
        state.screen = "friendRescue"
        stats.friend_rescues.triggered += 1

    buzz = None
    if state.consecutive_failures == PHONE_BUZZ_THRESHOLD:
        buzz = phone_buzz_text(state, messages)
    elif state.consecutive_failures >= THRESHOLD and not triggered:
        buzz = phone_ignored_text(state, messages)
    return AttemptResult(succeeded, probability, triggered, buzz)
