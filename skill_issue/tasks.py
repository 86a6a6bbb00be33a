"""Task definitions, runtime task state and the catalog registry."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Sequence

from skill_issue.rng import hash_string, pick_variant
from skill_issue.types import TIME_BLOCKS, TaskCategory, TimeBlock


@dataclass(frozen=True)
class TaskDef:
    """Immutable task definition (numeric contract only, no text).

    Attributes:
        id: Unique task identifier.
        category: Drives weekend work penalty and social/solo modifiers.
        base_rate: Base success probability in [0, 1].
        available_blocks: Weekday blocks the task is offered in.
        variant_base_rate: Base rate of the minimal variant, if any.
        weekend_cost: Weekend action points per attempt.
        success_energy: Declared energy change on success; None = undeclared.
        failure_energy: Declared energy change on failure; None = undeclared.
        auto_satisfies: Task id marked succeeded when this one succeeds.
    """

    id: str
    category: TaskCategory
    base_rate: float
    available_blocks: tuple[TimeBlock, ...] = TIME_BLOCKS
    variant_base_rate: float | None = None
    weekend_cost: int = 1
    success_energy: float | None = None
    failure_energy: float | None = None
    auto_satisfies: str | None = None

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("TaskDef id must be non-empty")
        if not 0.0 <= self.base_rate <= 1.0:
            raise ValueError(f"base_rate must be in [0, 1], got {self.base_rate}")
        if self.weekend_cost < 1:
            raise ValueError(f"weekend_cost must be >= 1, got {self.weekend_cost}")

    @property
    def has_variant(self) -> bool:
        return self.variant_base_rate is not None


@dataclass
class TaskRuntime:
    """Per-run mutable task state. Daily flags are cleared at each new day."""

    id: str
    failure_count: int = 0
    attempted_today: bool = False
    succeeded_today: bool = False


class TaskCatalog:
    """Stores task definitions. Insertion order is the display order."""

    def __init__(self, definitions: tuple[TaskDef, ...] | list[TaskDef] = ()) -> None:
        self._definitions: dict[str, TaskDef] = {}
        for defn in definitions:
            self.define(defn)

    def define(self, task: TaskDef) -> None:
        """Register a task. Overwrites if the id exists."""
        self._definitions[task.id] = task

    def get(self, task_id: str) -> TaskDef:
        """Look up a definition. Raises KeyError if not defined."""
        if task_id not in self._definitions:
            raise KeyError(task_id)
        return self._definitions[task_id]

    def has(self, task_id: str) -> bool:
        return task_id in self._definitions

    def ids(self) -> list[str]:
        return list(self._definitions)

    def with_variants(self) -> list[TaskDef]:
        return [t for t in self._definitions.values() if t.has_variant]

    def fresh_runtime(self) -> list[TaskRuntime]:
        return [TaskRuntime(id=task_id) for task_id in self._definitions]

    def __iter__(self):
        return iter(self._definitions.values())

    def __len__(self) -> int:
        return len(self._definitions)


# Higher = more important. Used by automated strategies.
CATEGORY_PRIORITIES: dict[TaskCategory, int] = {
    "dog": 100,
    "work": 90,
    "food": 80,
    "hygiene": 70,
    "selfcare": 40,
    "chores": 30,
    "social": 20,
    "creative": 10,
}

DEFAULT_TASKS: tuple[TaskDef, ...] = (
    TaskDef("shower", "hygiene", 0.35, ("morning", "evening"), variant_base_rate=0.7),
    TaskDef("brush-teeth-morning", "hygiene", 0.35, ("morning",)),
    TaskDef("brush-teeth-evening", "hygiene", 0.2, ("evening", "night")),
    TaskDef("cook", "food", 0.1, ("morning", "afternoon", "evening"),
            variant_base_rate=0.5, success_energy=-0.02),
    TaskDef("delivery", "food", 0.75, ("afternoon", "evening", "night")),
    TaskDef("dishes", "chores", 0.25, ("morning", "afternoon", "evening"),
            variant_base_rate=0.55),
    TaskDef("walk-dog", "dog", 0.85, TIME_BLOCKS,
            success_energy=0.04, auto_satisfies="go-outside"),
    TaskDef("work", "work", 0.4, ("morning", "afternoon")),
    TaskDef("practice-music", "creative", 0.05, ("afternoon", "evening", "night"),
            success_energy=0.05),
    TaskDef("shopping", "chores", 0.3, ("morning", "afternoon", "evening"), weekend_cost=2),
    TaskDef("social-event", "social", 0.35, ("afternoon", "evening"), weekend_cost=3),
    TaskDef("go-outside", "selfcare", 0.4, ("morning", "afternoon", "evening")),
)


def default_catalog() -> TaskCatalog:
    return TaskCatalog(DEFAULT_TASKS)


# --- Evolution ---

EVOLUTION_STAGES = ("neutral", "aware", "honest", "resigned")


def evolution_stage(failure_count: int) -> str:
    if failure_count <= 1:
        return "neutral"
    if failure_count <= 3:
        return "aware"
    if failure_count <= 5:
        return "honest"
    return "resigned"


def evolved_description(
    name: str,
    task_id: str,
    failure_count: int,
    seed: int,
    evolution: Mapping[str, Sequence[str]] | None,
) -> str:
    """Pick the flavor line for a task's current evolution stage.

    Stays stable for a run; never consumes a gameplay roll.
    """
    stage = evolution_stage(failure_count)
    if stage == "neutral" or not evolution or not evolution.get(stage):
        return name
    return pick_variant(seed, hash_string(task_id + stage), evolution[stage])
