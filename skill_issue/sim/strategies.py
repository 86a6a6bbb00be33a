"""Automated players for headless runs."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Protocol

from skill_issue.rescue import ACTIVITIES
from skill_issue.sim.decisions import (
    AcceptRescue,
    Attempt,
    CheckPhone,
    Decision,
    EndDay,
    PushThrough,
    Skip,
    Sleep,
)
from skill_issue.state import GameState, is_weekend
from skill_issue.tasks import CATEGORY_PRIORITIES, TaskCatalog


@dataclass
class DecisionContext:
    """What a strategy sees. ``roll`` draws from the strategy's own stream."""

    state: GameState
    available: list[Decision]
    catalog: TaskCatalog
    roll: Callable[[], float]


class Strategy(Protocol):
    name: str

    def decide(self, context: DecisionContext) -> Decision: ...


def _first(available: list[Decision], kind: type) -> Decision | None:
    for decision in available:
        if isinstance(decision, kind):
            return decision
    return None


def _fallback(available: list[Decision]) -> Decision:
    return _first(available, Skip) or _first(available, EndDay) or available[0]


def _matched_rescue(context: DecisionContext) -> Decision:
    """Highest activity tier current energy can carry."""
    energy = context.state.energy
    for activity in sorted(ACTIVITIES, key=lambda a: a.energy_threshold, reverse=True):
        if energy >= activity.energy_threshold:
            for decision in context.available:
                if isinstance(decision, AcceptRescue) and decision.activity == activity.id:
                    return decision
    low = AcceptRescue("low")
    return low if low in context.available else context.available[0]


def _attempts(context: DecisionContext) -> list[Attempt]:
    return [d for d in context.available if isinstance(d, Attempt)]


class RandomStrategy:
    """Uniform pick among whatever is on offer."""

    name = "random"

    def decide(self, context: DecisionContext) -> Decision:
        index = int(context.roll() * len(context.available))
        return context.available[min(index, len(context.available) - 1)]


class PriorityStrategy:
    """Category priority first, easier tasks first within a category. Never checks the phone."""

    name = "priority"

    def decide(self, context: DecisionContext) -> Decision:
        state, available = context.state, context.available
        if state.screen == "friendRescue":
            medium = AcceptRescue("medium")
            return medium if medium in available else available[0]
        if state.screen == "nightChoice":
            if state.energy > 0.6 and state.momentum > 0.5:
                push = _first(available, PushThrough)
                if push is not None:
                    return push
            return _first(available, Sleep) or available[0]

        def key(d: Attempt) -> tuple[int, float]:
            task = context.catalog.get(d.task_id)
            return (-CATEGORY_PRIORITIES.get(task.category, 0), -task.base_rate)

        attempts = sorted((d for d in _attempts(context) if not d.use_variant), key=key)
        for attempt in attempts:
            if not state.task(attempt.task_id).attempted_today:
                return attempt
        return _fallback(available)


class HumanStrategy:
    """Priorities with noise, the odd phone check when stuck, matched rescues."""

    name = "human"

    def decide(self, context: DecisionContext) -> Decision:
        state, available = context.state, context.available
        if state.screen == "friendRescue":
            return _matched_rescue(context)
        if state.screen == "nightChoice":
            push = _first(available, PushThrough)
            if push is not None and state.energy > 0.6 and state.day_index < 4 and context.roll() < 0.3:
                return push
            return _first(available, Sleep) or available[0]

        phone = _first(available, CheckPhone)
        if phone is not None and state.momentum < 0.3 and context.roll() < 0.1:
            return phone

        best: Attempt | None = None
        best_weight = -1.0
        for attempt in _attempts(context):
            task = context.catalog.get(attempt.task_id)
            weight = float(CATEGORY_PRIORITIES.get(task.category, 0))
            if state.dog_failed_yesterday and task.category == "dog":
                weight += 50
            if task.category == "work" and not is_weekend(state) and state.time_block in ("morning", "afternoon"):
                weight += 30
            if attempt.use_variant and state.energy < 0.4:
                weight += 15
            weight += context.roll() * 20
            if weight > best_weight:
                best, best_weight = attempt, weight
        if best is not None:
            return best
        return _fallback(available)


STRATEGIES: dict[str, Callable[[], Strategy]] = {
    "random": RandomStrategy,
    "priority": PriorityStrategy,
    "human": HumanStrategy,
}


def get_strategy(name: str) -> Strategy:
    """Look up a strategy by name. Raises KeyError if unknown."""
    if name not in STRATEGIES:
        raise KeyError(name)
    return STRATEGIES[name]()
