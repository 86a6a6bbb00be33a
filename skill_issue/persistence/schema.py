"""Save payload shapes, one closed set of types per schema version.

JSON keys are camelCase so payloads stay readable by every client that
ever wrote them. Parsing validates shape and raises CorruptSaveError.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Callable, Literal, TypeVar, Union

from skill_issue.errors import CorruptSaveError
from skill_issue.personality import Personality
from skill_issue.state import RunStats
from skill_issue.types import (
    DAYS,
    GAME_MODES,
    SCREENS,
    TASK_CATEGORIES,
    TIME_BLOCKS,
    Day,
    GameMode,
    Screen,
    TaskCategory,
    TimeBlock,
)

T = TypeVar("T")


# --- Field readers ---


def _field(data: dict[str, Any], key: str) -> Any:
    if not isinstance(data, dict):
        raise CorruptSaveError(f"Expected an object, got {type(data).__name__}")
    if key not in data:
        raise CorruptSaveError(f"Missing field {key!r}")
    return data[key]


def _int(data: dict[str, Any], key: str) -> int:
    value = _field(data, key)
    if (isinstance(value, bool) or not isinstance(value, (int, float))
            or not math.isfinite(value) or value != int(value)):
        raise CorruptSaveError(f"Field {key!r} must be an integer, got {value!r}")
    return int(value)


def _float(data: dict[str, Any], key: str) -> float:
    value = _field(data, key)
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise CorruptSaveError(f"Field {key!r} must be a number, got {value!r}")
    return value


def _bool(data: dict[str, Any], key: str) -> bool:
    value = _field(data, key)
    if not isinstance(value, bool):
        raise CorruptSaveError(f"Field {key!r} must be a boolean, got {value!r}")
    return value


def _tag(data: dict[str, Any], key: str, allowed: tuple[T, ...]) -> T:
    value = _field(data, key)
    if value not in allowed:
        raise CorruptSaveError(f"Field {key!r} has unknown value {value!r}")
    return value


def _optional(data: dict[str, Any], key: str, read: Callable[[dict[str, Any], str], T]) -> T | None:
    if data.get(key) is None:
        return None
    return read(data, key)


def _list(data: dict[str, Any], key: str) -> list[Any]:
    value = _field(data, key)
    if not isinstance(value, list):
        raise CorruptSaveError(f"Field {key!r} must be a list")
    return value


def _wrap(parse: Callable[[], T], what: str) -> T:
    try:
        return parse()
    except (KeyError, TypeError, ValueError, AttributeError, OverflowError) as exc:
        raise CorruptSaveError(f"Invalid {what}: {exc}") from exc


# --- Shared pieces ---


@dataclass(frozen=True)
class SavedTask:
    id: str
    failure_count: int
    attempted_today: bool
    succeeded_today: bool

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SavedTask:
        task_id = _field(data, "id")
        if not isinstance(task_id, str):
            raise CorruptSaveError(f"Task id must be a string, got {task_id!r}")
        return cls(
            id=task_id,
            failure_count=_int(data, "failureCount"),
            attempted_today=_bool(data, "attemptedToday"),
            succeeded_today=_bool(data, "succeededToday"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "failureCount": self.failure_count,
            "attemptedToday": self.attempted_today,
            "succeededToday": self.succeeded_today,
        }


def _personality(data: dict[str, Any]) -> Personality:
    return _wrap(lambda: Personality.from_dict(_field(data, "personality")), "personality")


def _run_stats(data: dict[str, Any]) -> RunStats:
    if data.get("runStats") is None:
        return RunStats()
    return _wrap(lambda: RunStats.from_dict(data["runStats"]), "runStats")


def _categories(data: dict[str, Any], key: str) -> tuple[TaskCategory, ...]:
    values = _list(data, key)
    for value in values:
        if value not in TASK_CATEGORIES:
            raise CorruptSaveError(f"Unknown task category {value!r} in {key!r}")
    return tuple(values)


@dataclass(frozen=True)
class CompletedRun:
    """One finished week in the patterns history."""

    seed: int
    personality: Personality
    stats: RunStats
    completed_at: int

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CompletedRun:
        return cls(
            seed=_int(data, "seed"),
            personality=_personality(data),
            stats=_wrap(lambda: RunStats.from_dict(_field(data, "stats")), "stats"),
            completed_at=_int(data, "completedAt"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "seed": self.seed,
            "personality": self.personality.to_dict(),
            "stats": self.stats.to_dict(),
            "completedAt": self.completed_at,
        }


@dataclass(frozen=True)
class PatternsData:
    """Cross-run history. Same shape in every schema version so far."""

    unlocked: bool = False
    history: tuple[CompletedRun, ...] = ()
    has_seen_intro: bool = False
    has_ever_attempted: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PatternsData:
        return cls(
            unlocked=_bool(data, "unlocked"),
            history=tuple(CompletedRun.from_dict(run) for run in _list(data, "history")),
            has_seen_intro=bool(data.get("hasSeenIntro", False)),
            has_ever_attempted=bool(data.get("hasEverAttempted", False)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "unlocked": self.unlocked,
            "history": [run.to_dict() for run in self.history],
            "hasSeenIntro": self.has_seen_intro,
            "hasEverAttempted": self.has_ever_attempted,
        }


# --- Version 3: a single current run ---


@dataclass(frozen=True)
class SavedStateV3:
    day: Day
    day_index: int
    time_block: TimeBlock
    slots_remaining: int
    weekend_points_remaining: int
    tasks: tuple[SavedTask, ...]
    selected_task_id: str | None
    screen: Screen
    energy: float
    momentum: float
    run_seed: int
    personality: Personality
    dog_failed_yesterday: bool
    pushed_through_last_night: bool
    in_extended_night: bool
    consecutive_failures: int
    friend_rescue_used_today: bool
    roll_count: int
    variants_unlocked: tuple[TaskCategory, ...]
    run_stats: RunStats
    friend_rescue_chance_bonus: float | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SavedStateV3:
        return cls(**_common_state_fields(data),
                   friend_rescue_chance_bonus=_optional(data, "friendRescueChanceBonus", _float))

    def to_dict(self) -> dict[str, Any]:
        out = _common_state_dict(self)
        if self.friend_rescue_chance_bonus is not None:
            out["friendRescueChanceBonus"] = self.friend_rescue_chance_bonus
        return out


@dataclass(frozen=True)
class SaveDataV3:
    version: Literal[3]
    current_run: SavedStateV3 | None
    patterns: PatternsData
    saved_at: int

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SaveDataV3:
        _expect_version(data, 3)
        run = _field(data, "currentRun")
        return cls(
            version=3,
            current_run=None if run is None else SavedStateV3.from_dict(run),
            patterns=PatternsData.from_dict(_field(data, "patterns")),
            saved_at=_int(data, "savedAt"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": 3,
            "currentRun": None if self.current_run is None else self.current_run.to_dict(),
            "patterns": self.patterns.to_dict(),
            "savedAt": self.saved_at,
        }


# --- Version 4: one slot per game mode ---


@dataclass(frozen=True)
class SavedStateV4:
    day: Day
    day_index: int
    time_block: TimeBlock
    slots_remaining: int
    weekend_points_remaining: int
    tasks: tuple[SavedTask, ...]
    selected_task_id: str | None
    screen: Screen
    energy: float
    momentum: float
    run_seed: int
    personality: Personality
    dog_failed_yesterday: bool
    pushed_through_last_night: bool
    in_extended_night: bool
    consecutive_failures: int
    friend_rescue_used_today: bool
    roll_count: int
    variants_unlocked: tuple[TaskCategory, ...]
    run_stats: RunStats
    friend_rescue_chance_bonus: float
    phone_notification_count: int
    game_mode: GameMode

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SavedStateV4:
        return cls(
            **_common_state_fields(data),
            friend_rescue_chance_bonus=_float(data, "friendRescueChanceBonus"),
            phone_notification_count=_int(data, "phoneNotificationCount"),
            game_mode=_tag(data, "gameMode", GAME_MODES),
        )

    def to_dict(self) -> dict[str, Any]:
        out = _common_state_dict(self)
        out["friendRescueChanceBonus"] = self.friend_rescue_chance_bonus
        out["phoneNotificationCount"] = self.phone_notification_count
        out["gameMode"] = self.game_mode
        return out


@dataclass(frozen=True)
class SavedRunsV4:
    main: SavedStateV4 | None = None
    seeded: SavedStateV4 | None = None

    def get(self, mode: GameMode) -> SavedStateV4 | None:
        return self.main if mode == "main" else self.seeded


@dataclass(frozen=True)
class SaveDataV4:
    version: Literal[4]
    runs: SavedRunsV4
    patterns: PatternsData
    saved_at: int
    migrated_at: int | None = field(default=None, compare=False)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SaveDataV4:
        _expect_version(data, 4)
        runs = _field(data, "runs")
        main, seeded = _field(runs, "main"), _field(runs, "seeded")
        return cls(
            version=4,
            runs=SavedRunsV4(
                main=None if main is None else SavedStateV4.from_dict(main),
                seeded=None if seeded is None else SavedStateV4.from_dict(seeded),
            ),
            patterns=PatternsData.from_dict(_field(data, "patterns")),
            saved_at=_int(data, "savedAt"),
            migrated_at=_optional(data, "migratedAt", _int),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "version": 4,
            "runs": {
                "main": None if self.runs.main is None else self.runs.main.to_dict(),
                "seeded": None if self.runs.seeded is None else self.runs.seeded.to_dict(),
            },
            "patterns": self.patterns.to_dict(),
            "savedAt": self.saved_at,
        }
        if self.migrated_at is not None:
            out["migratedAt"] = self.migrated_at
        return out


AnySaveData = Union[SaveDataV3, SaveDataV4]

SCHEMAS: dict[int, type] = {
    3: SaveDataV3,
    4: SaveDataV4,
}


def _expect_version(data: dict[str, Any], version: int) -> None:
    found = _field(data, "version")
    if found != version:
        raise CorruptSaveError(f"Expected version {version}, got {found!r}")


def _common_state_fields(data: dict[str, Any]) -> dict[str, Any]:
    selected = data.get("selectedTaskId")
    if selected is not None and not isinstance(selected, str):
        raise CorruptSaveError(f"selectedTaskId must be a string, got {selected!r}")
    return {
        "day": _tag(data, "day", DAYS),
        "day_index": _int(data, "dayIndex"),
        "time_block": _tag(data, "timeBlock", TIME_BLOCKS),
        "slots_remaining": _int(data, "slotsRemaining"),
        "weekend_points_remaining": _int(data, "weekendPointsRemaining"),
        "tasks": tuple(SavedTask.from_dict(t) for t in _list(data, "tasks")),
        "selected_task_id": selected,
        "screen": _tag(data, "screen", SCREENS),
        "energy": _float(data, "energy"),
        "momentum": _float(data, "momentum"),
        "run_seed": _int(data, "runSeed"),
        "personality": _personality(data),
        "dog_failed_yesterday": _bool(data, "dogFailedYesterday"),
        "pushed_through_last_night": _bool(data, "pushedThroughLastNight"),
        "in_extended_night": _bool(data, "inExtendedNight"),
        "consecutive_failures": _int(data, "consecutiveFailures"),
        "friend_rescue_used_today": _bool(data, "friendRescueUsedToday"),
        "roll_count": _int(data, "rollCount"),
        "variants_unlocked": _categories(data, "variantsUnlocked"),
        "run_stats": _run_stats(data),
    }


def _common_state_dict(state: SavedStateV3 | SavedStateV4) -> dict[str, Any]:
    return {
        "day": state.day,
        "dayIndex": state.day_index,
        "timeBlock": state.time_block,
        "slotsRemaining": state.slots_remaining,
        "weekendPointsRemaining": state.weekend_points_remaining,
        "tasks": [t.to_dict() for t in state.tasks],
        "selectedTaskId": state.selected_task_id,
        "screen": state.screen,
        "energy": state.energy,
        "momentum": state.momentum,
        "runSeed": state.run_seed,
        "personality": state.personality.to_dict(),
        "dogFailedYesterday": state.dog_failed_yesterday,
        "pushedThroughLastNight": state.pushed_through_last_night,
        "inExtendedNight": state.in_extended_night,
        "consecutiveFailures": state.consecutive_failures,
        "friendRescueUsedToday": state.friend_rescue_used_today,
        "rollCount": state.roll_count,
        "variantsUnlocked": list(state.variants_unlocked),
        "runStats": state.run_stats.to_dict(),
    }
