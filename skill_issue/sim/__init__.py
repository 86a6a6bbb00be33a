"""skill_issue.sim - Headless week simulation, strategies and batch statistics."""
from skill_issue.sim.decisions import (
    AcceptRescue,
    ActionResult,
    Attempt,
    CheckPhone,
    DeclineRescue,
    Decision,
    EndDay,
    PushThrough,
    Skip,
    Sleep,
    available_decisions,
    available_tasks,
    execute_decision,
    has_lost,
    is_complete,
)
from skill_issue.sim.engine import DaySummary, SimStats, SimulationResult, simulate
from skill_issue.sim.stats import BatchStats, GroupEntry, Spread, aggregate, simulate_many
from skill_issue.sim.strategies import (
    STRATEGIES,
    DecisionContext,
    HumanStrategy,
    PriorityStrategy,
    RandomStrategy,
    Strategy,
    get_strategy,
)

__all__ = [
    "AcceptRescue",
    "ActionResult",
    "Attempt",
    "BatchStats",
    "CheckPhone",
    "DaySummary",
    "DecisionContext",
    "DeclineRescue",
    "Decision",
    "EndDay",
    "GroupEntry",
    "HumanStrategy",
    "PriorityStrategy",
    "PushThrough",
    "RandomStrategy",
    "STRATEGIES",
    "SimStats",
    "SimulationResult",
    "Skip",
    "Sleep",
    "Spread",
    "Strategy",
    "aggregate",
    "available_decisions",
    "available_tasks",
    "execute_decision",
    "get_strategy",
    "has_lost",
    "is_complete",
    "simulate",
    "simulate_many",
]
