"""Headless week simulation."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable

from skill_issue.config import DEFAULT_RULES, RulesConfig
from skill_issue.daycycle import continue_to_next_day
from skill_issue.personality import Personality
from skill_issue.rng import RollCounter, next_roll
from skill_issue.sim.decisions import (
    AcceptRescue,
    ActionResult,
    Attempt,
    Decision,
    available_decisions,
    execute_decision,
    has_lost,
    is_complete,
)
from skill_issue.sim.strategies import DecisionContext, Strategy
from skill_issue.state import GameState, new_run
from skill_issue.tasks import TaskCatalog, default_catalog
from skill_issue.types import Day

logger = logging.getLogger(__name__)

# Strategies draw from a stream offset from the run seed so their choices
# never move the game's own roll count.
STRATEGY_SEED_OFFSET = 7919
MAX_STEPS = 5000


@dataclass
class DaySummary:
    day: Day
    day_index: int
    energy_start: float
    momentum_start: float
    energy_end: float = 0.0
    momentum_end: float = 0.0
    actions: list[ActionResult] = field(default_factory=list)
    pulled_all_nighter: bool = False
    friend_rescue_triggered: bool = False
    friend_rescue_accepted: bool = False

    @property
    def tasks_succeeded(self) -> list[str]:
        return [a.decision.task_id for a in self.actions
                if isinstance(a.decision, Attempt) and a.succeeded]

    @property
    def tasks_failed(self) -> list[str]:
        return [a.decision.task_id for a in self.actions
                if isinstance(a.decision, Attempt) and a.succeeded is False]


@dataclass(frozen=True)
class SimStats:
    energy_start: float
    energy_end: float
    energy_min: float
    momentum_start: float
    momentum_end: float
    momentum_min: float
    attempted: int
    succeeded: int
    rescues_triggered: int
    rescues_accepted: int
    all_nighters: int
    phone_checks: int
    variants_unlocked: tuple[str, ...]

    @property
    def success_rate(self) -> float:
        return self.succeeded / self.attempted if self.attempted else 0.0


@dataclass(frozen=True)
class SimulationResult:
    seed: int
    strategy: str
    personality: Personality
    survived: bool
    days: tuple[DaySummary, ...]
    stats: SimStats
    roll_count: int

    def to_dict(self) -> dict[str, Any]:
        s = self.stats
        return {
            "seed": self.seed,
            "strategy": self.strategy,
            "personality": self.personality.to_dict(),
            "survived": self.survived,
            "rollCount": self.roll_count,
            "stats": {
                "energy": {"start": s.energy_start, "end": s.energy_end, "min": s.energy_min},
                "momentum": {"start": s.momentum_start, "end": s.momentum_end, "min": s.momentum_min},
                "tasks": {"attempted": s.attempted, "succeeded": s.succeeded,
                          "successRate": s.success_rate},
                "friendRescues": {"triggered": s.rescues_triggered, "accepted": s.rescues_accepted},
                "allNighters": s.all_nighters,
                "phoneChecks": s.phone_checks,
                "variantsUnlocked": list(s.variants_unlocked),
            },
            "days": [
                {
                    "day": d.day,
                    "energyStart": d.energy_start,
                    "energyEnd": d.energy_end,
                    "momentumStart": d.momentum_start,
                    "momentumEnd": d.momentum_end,
                    "succeeded": d.tasks_succeeded,
                    "failed": d.tasks_failed,
                    "allNighter": d.pulled_all_nighter,
                    "rescueTriggered": d.friend_rescue_triggered,
                    "rescueAccepted": d.friend_rescue_accepted,
                }
                for d in self.days
            ],
        }


ActionObserver = Callable[[GameState, Decision, ActionResult], None]


def simulate(
    seed: int,
    strategy: Strategy,
    catalog: TaskCatalog | None = None,
    rules: RulesConfig = DEFAULT_RULES,
    on_action: ActionObserver | None = None,
    max_steps: int = MAX_STEPS,
) -> SimulationResult:
    """Play one week from a fresh run until it completes or energy runs out."""
    if catalog is None:
        catalog = default_catalog()
    state = new_run(seed, catalog=catalog, rules=rules)
    strategy_rolls = RollCounter(seed + STRATEGY_SEED_OFFSET)

    days: list[DaySummary] = [DaySummary(state.day, 0, state.energy, state.momentum)]
    energy_min, momentum_min = state.energy, state.momentum
    steps = 0

    while not is_complete(state) and not has_lost(state):
        if state.screen == "daySummary":
            current = days[-1]
            current.energy_end, current.momentum_end = state.energy, state.momentum
            current.pulled_all_nighter = state.in_extended_night
            if continue_to_next_day(state, catalog, rules):
                days.append(DaySummary(state.day, state.day_index, state.energy, state.momentum))
            continue

        steps += 1
        if steps > max_steps:
            logger.warning("Seed %d hit the step limit (%d) on %s", seed, max_steps, state.day)
            break

        available = available_decisions(state, catalog)
        context = DecisionContext(state, available, catalog, lambda: next_roll(strategy_rolls))
        decision = strategy.decide(context)
        result = execute_decision(state, decision, catalog, rules)

        day = days[-1]
        day.actions.append(result)
        if result.friend_rescue_triggered:
            day.friend_rescue_triggered = True
        if isinstance(decision, AcceptRescue):
            day.friend_rescue_accepted = True
        energy_min = min(energy_min, state.energy)
        momentum_min = min(momentum_min, state.momentum)
        if on_action is not None:
            on_action(state, decision, result)

    last = days[-1]
    if not is_complete(state):
        last.energy_end, last.momentum_end = state.energy, state.momentum
        last.pulled_all_nighter = last.pulled_all_nighter or state.in_extended_night

    survived = is_complete(state) and not has_lost(state)
    stats = SimStats(
        energy_start=days[0].energy_start,
        energy_end=state.energy,
        energy_min=energy_min,
        momentum_start=days[0].momentum_start,
        momentum_end=state.momentum,
        momentum_min=momentum_min,
        attempted=state.run_stats.tasks.attempted,
        succeeded=state.run_stats.tasks.succeeded,
        rescues_triggered=state.run_stats.friend_rescues.triggered,
        rescues_accepted=state.run_stats.friend_rescues.accepted,
        all_nighters=state.run_stats.all_nighters,
        phone_checks=state.run_stats.phone_checks,
        variants_unlocked=tuple(state.variants_unlocked),
    )
    logger.debug("Seed %d (%s): survived=%s, %d/%d tasks, rolls=%d",
                 seed, strategy.name, survived, stats.succeeded, stats.attempted, state.roll_count)
    return SimulationResult(
        seed=seed,
        strategy=strategy.name,
        personality=state.personality,
        survived=survived,
        days=tuple(days),
        stats=stats,
        roll_count=state.roll_count,
    )