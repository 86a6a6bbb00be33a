"""Outcome probability model."""
from __future__ import annotations

from skill_issue.economy import clamp
from skill_issue.personality import time_modifier
from skill_issue.rng import next_roll
from skill_issue.state import GameState, is_weekend
from skill_issue.tasks import TaskDef

WEEKEND_WORK_MODIFIER = 0.75


def momentum_modifier(momentum: float) -> float:
    """0 -> 0.7x, 0.5 -> 1.0x, 1 -> 1.3x."""
    return 0.7 + momentum * 0.6


def energy_modifier(energy: float) -> float:
    """0 -> 0.8x, 0.5 -> 1.0x, 1 -> 1.2x."""
    return 0.8 + energy * 0.4


def weekend_work_modifier(task: TaskDef, state: GameState) -> float:
    if task.category != "work" or not is_weekend(state):
        return 1.0
    return WEEKEND_WORK_MODIFIER


def success_probability(task: TaskDef, state: GameState) -> float:
    """Base rate times every modifier, clamped to [0, 1]."""
    p = task.base_rate
    p *= time_modifier(state.personality, state.time_block, state.run_seed)
    p *= momentum_modifier(state.momentum)
    p *= energy_modifier(state.energy)
    p *= weekend_work_modifier(task, state)
    return clamp(p, 0.0, 1.0)


def resolve_outcome(probability: float, state: GameState) -> bool:
    """Spend exactly one roll against ``probability``."""
    return next_roll(state) < probability
