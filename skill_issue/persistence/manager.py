"""Save/load of runs and the patterns history over a host store."""
from __future__ import annotations

import json
import logging
from dataclasses import replace

from skill_issue.config import SaveConfig
from skill_issue.economy import Economy
from skill_issue.errors import SaveError
from skill_issue.persistence.migrations import CURRENT_SAVE_VERSION, Clock, epoch_millis, upgrade
from skill_issue.persistence.schema import (
    CompletedRun,
    PatternsData,
    SaveDataV4,
    SavedRunsV4,
    SavedStateV4,
    SavedTask,
)
from skill_issue.persistence.store import KeyValueStore
from skill_issue.state import GameState, RunStats, new_run
from skill_issue.tasks import TaskCatalog, TaskRuntime, default_catalog
from skill_issue.types import GameMode

logger = logging.getLogger(__name__)


def to_saved_state(state: GameState) -> SavedStateV4:
    return SavedStateV4(
        day=state.day,
        day_index=state.day_index,
        time_block=state.time_block,
        slots_remaining=state.slots_remaining,
        weekend_points_remaining=state.weekend_points_remaining,
        tasks=tuple(
            SavedTask(t.id, t.failure_count, t.attempted_today, t.succeeded_today)
            for t in state.tasks
        ),
        selected_task_id=state.selected_task_id,
        screen=state.screen,
        energy=state.energy,
        momentum=state.momentum,
        run_seed=state.run_seed,
        personality=state.personality,
        dog_failed_yesterday=state.dog_failed_yesterday,
        pushed_through_last_night=state.pushed_through_last_night,
        in_extended_night=state.in_extended_night,
        consecutive_failures=state.consecutive_failures,
        friend_rescue_used_today=state.friend_rescue_used_today,
        roll_count=state.roll_count,
        variants_unlocked=tuple(state.variants_unlocked),
        run_stats=RunStats.from_dict(state.run_stats.to_dict()),
        friend_rescue_chance_bonus=state.friend_rescue_chance_bonus,
        phone_notification_count=state.phone_notification_count,
        game_mode=state.game_mode,
    )


def from_saved_state(saved: SavedStateV4, catalog: TaskCatalog | None = None) -> GameState:
    """Rebuild a run. Tasks follow the catalog; saved entries for unknown ids drop."""
    if catalog is None:
        catalog = default_catalog()
    by_id = {t.id: t for t in saved.tasks}
    tasks = []
    for task_id in catalog.ids():
        s = by_id.get(task_id)
        if s is None:
            tasks.append(TaskRuntime(id=task_id))
        else:
            tasks.append(TaskRuntime(task_id, s.failure_count, s.attempted_today, s.succeeded_today))
    return GameState(
        run_seed=saved.run_seed,
        personality=saved.personality,
        economy=Economy(saved.energy, saved.momentum),
        tasks=tasks,
        day=saved.day,
        day_index=saved.day_index,
        time_block=saved.time_block,
        slots_remaining=saved.slots_remaining,
        weekend_points_remaining=saved.weekend_points_remaining,
        selected_task_id=saved.selected_task_id,
        screen=saved.screen,
        dog_failed_yesterday=saved.dog_failed_yesterday,
        pushed_through_last_night=saved.pushed_through_last_night,
        in_extended_night=saved.in_extended_night,
        consecutive_failures=saved.consecutive_failures,
        friend_rescue_used_today=saved.friend_rescue_used_today,
        friend_rescue_chance_bonus=saved.friend_rescue_chance_bonus,
        roll_count=saved.roll_count,
        variants_unlocked=list(saved.variants_unlocked),
        phone_notification_count=saved.phone_notification_count,
        run_stats=RunStats.from_dict(saved.run_stats.to_dict()),
        game_mode=saved.game_mode,
    )


class SaveManager:
    """Whole-payload reads and writes under one key.

    Every write re-reads the payload first so the slot not being written and
    the patterns history are carried through. An unreadable payload loads as
    an empty save; the reason lands on ``last_load_issue``.
    """

    def __init__(
        self,
        store: KeyValueStore,
        config: SaveConfig | None = None,
        clock: Clock = epoch_millis,
        catalog: TaskCatalog | None = None,
    ) -> None:
        self._store = store
        self._config = config if config is not None else SaveConfig()
        self._clock = clock
        self._catalog = catalog if catalog is not None else default_catalog()
        self.last_load_issue: str | None = None

    @property
    def config(self) -> SaveConfig:
        return self._config

    def empty(self) -> SaveDataV4:
        return SaveDataV4(
            version=CURRENT_SAVE_VERSION,
            runs=SavedRunsV4(),
            patterns=PatternsData(),
            saved_at=self._clock(),
        )

    def load_data(self) -> SaveDataV4:
        self.last_load_issue = None
        raw: str | None = None
        try:
            raw = self._store.get(self._config.storage_key)
            if raw is None:
                return self.empty()
            return upgrade(json.loads(raw), self._clock)
        except (SaveError, KeyError, TypeError, ValueError, OverflowError, RecursionError, OSError) as exc:
            self.last_load_issue = f"{type(exc).__name__}: {exc}"
            logger.warning("Discarding unreadable save under %r: %s",
                           self._config.storage_key, self.last_load_issue)
            if self._config.backup_corrupt and raw is not None:
                self._backup(raw)
            return self.empty()

    def _backup(self, raw: str) -> None:
        try:
            self._store.set(self._config.backup_key, raw)
        except OSError:
            logger.exception("Could not back up save to %r", self._config.backup_key)
        else:
            logger.info("Backed up unreadable save to %r", self._config.backup_key)

    def write_data(self, data: SaveDataV4) -> None:
        try:
            self._store.set(self._config.storage_key, json.dumps(data.to_dict()))
        except OSError:
            logger.exception("Could not write save to %r", self._config.storage_key)

    def _update(self, existing: SaveDataV4, *, runs: SavedRunsV4 | None = None,
                patterns: PatternsData | None = None) -> None:
        self.write_data(SaveDataV4(
            version=CURRENT_SAVE_VERSION,
            runs=existing.runs if runs is None else runs,
            patterns=existing.patterns if patterns is None else patterns,
            saved_at=self._clock(),
        ))

    @staticmethod
    def _with_slot(runs: SavedRunsV4, mode: GameMode, saved: SavedStateV4 | None) -> SavedRunsV4:
        return replace(runs, main=saved) if mode == "main" else replace(runs, seeded=saved)

    # --- Runs ---

    def save_game(self, state: GameState) -> None:
        existing = self.load_data()
        self._update(existing, runs=self._with_slot(existing.runs, state.game_mode, to_saved_state(state)))

    def has_saved_run(self, mode: GameMode = "main") -> bool:
        return self.load_data().runs.get(mode) is not None

    def load_game(self, mode: GameMode = "main", seed: int | None = None) -> GameState:
        """The saved run for ``mode``, or a fresh run when there is none."""
        saved = self.load_data().runs.get(mode)
        if saved is None:
            return new_run(seed, mode=mode, catalog=self._catalog)
        return from_saved_state(saved, self._catalog)

    def reset_run(self, mode: GameMode = "main") -> None:
        existing = self.load_data()
        self._update(existing, runs=self._with_slot(existing.runs, mode, None))

    # --- Patterns ---

    def patterns(self) -> PatternsData:
        return self.load_data().patterns

    def save_completed_run(self, state: GameState) -> None:
        existing = self.load_data()
        patterns = existing.patterns
        run = CompletedRun(
            seed=state.run_seed,
            personality=state.personality,
            stats=RunStats.from_dict(state.run_stats.to_dict()),
            completed_at=self._clock(),
        )
        self._update(existing, patterns=replace(patterns, unlocked=True, history=patterns.history + (run,)))

    def is_first_ever_attempt(self) -> bool:
        return not self.patterns().has_ever_attempted

    def mark_first_attempt(self) -> None:
        existing = self.load_data()
        self._update(existing, patterns=replace(existing.patterns, has_ever_attempted=True))

    def has_seen_intro(self) -> bool:
        return self.patterns().has_seen_intro

    def mark_intro_seen(self) -> None:
        existing = self.load_data()
        self._update(existing, patterns=replace(existing.patterns, has_seen_intro=True))

    def clear_all(self) -> None:
        """Drop everything, patterns included."""
        self._store.remove(self._config.storage_key)
