"""Run state: the single mutable value the actions operate on."""
from __future__ import annotations

import copy
import random
from dataclasses import dataclass, field
from typing import Any

from skill_issue.config import DEFAULT_RULES, RulesConfig
from skill_issue.economy import Economy
from skill_issue.personality import (
    Personality,
    personality_from_seed,
    starting_energy,
    starting_momentum,
)
from skill_issue.tasks import TaskCatalog, TaskRuntime, default_catalog
from skill_issue.types import (
    TIME_BLOCKS,
    WEEKEND_START,
    Day,
    GameMode,
    Screen,
    TaskCategory,
    TimeBlock,
)

MAX_SEED = 2147483647


@dataclass
class Tally:
    attempted: int = 0
    succeeded: int = 0

    def record(self, succeeded: bool) -> None:
        self.attempted += 1
        if succeeded:
            self.succeeded += 1


@dataclass
class RescueTally:
    triggered: int = 0
    accepted: int = 0


@dataclass
class RunStats:
    """Counters collected during a run for the patterns reveal."""

    tasks: Tally = field(default_factory=Tally)
    by_time_block: dict[str, Tally] = field(
        default_factory=lambda: {block: Tally() for block in TIME_BLOCKS}
    )
    phone_checks: int = 0
    all_nighters: int = 0
    friend_rescues: RescueTally = field(default_factory=RescueTally)
    variants_used: list[TaskCategory] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "tasks": {"attempted": self.tasks.attempted, "succeeded": self.tasks.succeeded},
            "byTimeBlock": {
                block: {"attempted": t.attempted, "succeeded": t.succeeded}
                for block, t in self.by_time_block.items()
            },
            "phoneChecks": self.phone_checks,
            "allNighters": self.all_nighters,
            "friendRescues": {
                "triggered": self.friend_rescues.triggered,
                "accepted": self.friend_rescues.accepted,
            },
            "variantsUsed": list(self.variants_used),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RunStats:
        by_block = {block: Tally() for block in TIME_BLOCKS}
        for block, tally in data["byTimeBlock"].items():
            by_block[block] = Tally(int(tally["attempted"]), int(tally["succeeded"]))
        return cls(
            tasks=Tally(int(data["tasks"]["attempted"]), int(data["tasks"]["succeeded"])),
            by_time_block=by_block,
            phone_checks=int(data["phoneChecks"]),
            all_nighters=int(data["allNighters"]),
            friend_rescues=RescueTally(
                int(data["friendRescues"]["triggered"]),
                int(data["friendRescues"]["accepted"]),
            ),
            variants_used=list(data["variantsUsed"]),
        )


@dataclass
class GameState:
    """Everything a run needs. Also the roll source for ``next_roll``."""

    run_seed: int
    personality: Personality
    economy: Economy
    tasks: list[TaskRuntime]
    day: Day = "monday"
    day_index: int = 0
    time_block: TimeBlock = "morning"
    slots_remaining: int = 3
    weekend_points_remaining: int = 8
    selected_task_id: str | None = None
    screen: Screen = "game"
    dog_failed_yesterday: bool = False
    pushed_through_last_night: bool = False
    in_extended_night: bool = False
    consecutive_failures: int = 0
    friend_rescue_used_today: bool = False
    friend_rescue_chance_bonus: float = 0.0
    roll_count: int = 0
    variants_unlocked: list[TaskCategory] = field(default_factory=list)
    phone_notification_count: int = 0
    run_stats: RunStats = field(default_factory=RunStats)
    game_mode: GameMode = "main"

    @property
    def energy(self) -> float:
        return self.economy.energy

    @property
    def momentum(self) -> float:
        return self.economy.momentum

    def task(self, task_id: str) -> TaskRuntime:
        for t in self.tasks:
            if t.id == task_id:
                return t
        raise KeyError(task_id)

    def clone(self) -> GameState:
        """Independent copy for speculative play; nothing is shared."""
        return copy.deepcopy(self)


def is_weekend(state: GameState) -> bool:
    return state.day_index >= WEEKEND_START


def random_seed() -> int:
    return random.randrange(MAX_SEED)


def new_run(
    seed: int | None = None,
    mode: GameMode = "main",
    catalog: TaskCatalog | None = None,
    rules: RulesConfig = DEFAULT_RULES,
) -> GameState:
    """Fresh run. Personality and starting economy derive from the seed."""
    if seed is None:
        seed = random_seed()
    if catalog is None:
        catalog = default_catalog()
    return GameState(
        run_seed=seed,
        personality=personality_from_seed(seed),
        economy=Economy(starting_energy(seed), starting_momentum(seed)),
        tasks=catalog.fresh_runtime(),
        slots_remaining=rules.slots_per_block,
        weekend_points_remaining=rules.weekend_points,
        game_mode=mode,
    )
