"""Decision types and the single dispatch point that applies them."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from skill_issue.actions import FirstAttemptTracker, attempt_task
from skill_issue.config import DEFAULT_RULES, RulesConfig
from skill_issue.daycycle import (
    can_push_through,
    choose_sleep,
    end_weekend_day,
    push_through,
    skip_time_block,
)
from skill_issue.phone import PhoneOutcome, check_phone
from skill_issue.rescue import ACTIVITIES, ActivityTier, accept_rescue, decline_rescue
from skill_issue.state import GameState, is_weekend
from skill_issue.tasks import TaskCatalog, TaskDef, default_catalog
from skill_issue.types import TaskCategory


@dataclass(frozen=True)
class Attempt:
    task_id: str
    use_variant: bool = False


@dataclass(frozen=True)
class Skip:
    """Weekday: move on to the next time block."""


@dataclass(frozen=True)
class CheckPhone:
    pass


@dataclass(frozen=True)
class EndDay:
    """Weekend: call it a day."""


@dataclass(frozen=True)
class Sleep:
    pass


@dataclass(frozen=True)
class PushThrough:
    pass


@dataclass(frozen=True)
class AcceptRescue:
    activity: ActivityTier


@dataclass(frozen=True)
class DeclineRescue:
    pass


Decision = Union[Attempt, Skip, CheckPhone, EndDay, Sleep, PushThrough, AcceptRescue, DeclineRescue]


@dataclass(frozen=True)
class ActionResult:
    """What one decision did. Optional fields are set by the matching decision only."""

    decision: Decision
    energy_before: float
    energy_after: float
    momentum_before: float
    momentum_after: float
    succeeded: bool | None = None
    probability: float | None = None
    friend_rescue_triggered: bool = False
    phone_buzz_text: str | None = None
    phone_outcome: PhoneOutcome | None = None
    phone_text: str | None = None
    phone_unlocked_variant: TaskCategory | None = None
    rescue_hint: str | None = None
    rescue_correct: bool | None = None


def available_tasks(state: GameState, catalog: TaskCatalog) -> list[TaskDef]:
    """Weekends offer every unfinished task; weekdays only those in the current block."""
    tasks = []
    for runtime in state.tasks:
        if runtime.succeeded_today or not catalog.has(runtime.id):
            continue
        task = catalog.get(runtime.id)
        if is_weekend(state) or state.time_block in task.available_blocks:
            tasks.append(task)
    return tasks


def available_decisions(state: GameState, catalog: TaskCatalog | None = None) -> list[Decision]:
    if catalog is None:
        catalog = default_catalog()

    if state.screen == "friendRescue":
        return [AcceptRescue(a.id) for a in ACTIVITIES] + [DeclineRescue()]

    if state.screen == "nightChoice":
        decisions: list[Decision] = [Sleep()]
        if can_push_through(state):
            decisions.append(PushThrough())
        return decisions

    decisions = []
    if is_weekend(state):
        if state.weekend_points_remaining > 0:
            for task in available_tasks(state, catalog):
                if state.weekend_points_remaining >= task.weekend_cost:
                    decisions.extend(_attempts(state, task))
            decisions.append(CheckPhone())
        decisions.append(EndDay())
    else:
        if state.slots_remaining > 0:
            for task in available_tasks(state, catalog):
                decisions.extend(_attempts(state, task))
            decisions.append(CheckPhone())
        decisions.append(Skip())
    return decisions


def _attempts(state: GameState, task: TaskDef) -> list[Attempt]:
    out = [Attempt(task.id)]
    if task.has_variant and task.category in state.variants_unlocked:
        out.append(Attempt(task.id, use_variant=True))
    return out


def execute_decision(
    state: GameState,
    decision: Decision,
    catalog: TaskCatalog | None = None,
    rules: RulesConfig = DEFAULT_RULES,
    first_attempt: FirstAttemptTracker | None = None,
) -> ActionResult:
    """Apply ``decision`` to ``state`` in place."""
    if catalog is None:
        catalog = default_catalog()
    energy_before, momentum_before = state.energy, state.momentum
    extra: dict[str, Any] = {}

    if isinstance(decision, Attempt):
        result = attempt_task(state, decision.task_id, catalog, decision.use_variant,
                              first_attempt=first_attempt, rules=rules)
        if result is not None:
            extra = {
                "succeeded": result.succeeded,
                "probability": result.probability,
                "friend_rescue_triggered": result.friend_rescue_triggered,
                "phone_buzz_text": result.phone_buzz_text,
            }
    elif isinstance(decision, Skip):
        skip_time_block(state, rules)
    elif isinstance(decision, CheckPhone):
        phone = check_phone(state, catalog)
        extra = {
            "phone_outcome": phone.outcome,
            "phone_text": phone.text,
            "phone_unlocked_variant": phone.unlocked_variant,
        }
    elif isinstance(decision, EndDay):
        end_weekend_day(state)
    elif isinstance(decision, Sleep):
        choose_sleep(state)
    elif isinstance(decision, PushThrough):
        push_through(state)
    elif isinstance(decision, AcceptRescue):
        rescue = accept_rescue(state, decision.activity, catalog)
        extra = {"rescue_hint": rescue.hint.text, "rescue_correct": rescue.correct}
    elif isinstance(decision, DeclineRescue):
        decline_rescue(state)
    else:
        raise TypeError(f"Unknown decision {decision!r}")

    return ActionResult(
        decision=decision,
        energy_before=energy_before,
        energy_after=state.energy,
        momentum_before=momentum_before,
        momentum_after=state.momentum,
        **extra,
    )


def has_lost(state: GameState) -> bool:
    return state.energy <= 0


def is_complete(state: GameState) -> bool:
    return state.screen == "weekComplete"
