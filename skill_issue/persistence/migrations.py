"""Sequential save upgrades, keyed by source version."""
from __future__ import annotations

import logging
import time
from typing import Any, Callable

from skill_issue.errors import CorruptSaveError, MigrationError
from skill_issue.persistence.schema import (
    SCHEMAS,
    AnySaveData,
    SaveDataV3,
    SaveDataV4,
    SavedRunsV4,
    SavedStateV3,
    SavedStateV4,
)
from skill_issue.state import RunStats

logger = logging.getLogger(__name__)

CURRENT_SAVE_VERSION = 4

Clock = Callable[[], int]


def epoch_millis() -> int:
    return int(time.time() * 1000)


def _state_v3_to_v4(state: SavedStateV3) -> SavedStateV4:
    return SavedStateV4(
        day=state.day,
        day_index=state.day_index,
        time_block=state.time_block,
        slots_remaining=state.slots_remaining,
        weekend_points_remaining=state.weekend_points_remaining,
        tasks=state.tasks,
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
        variants_unlocked=state.variants_unlocked,
        run_stats=RunStats.from_dict(state.run_stats.to_dict()),
        # v3 saves written before the bonus existed carry no value.
        friend_rescue_chance_bonus=(
            0.0 if state.friend_rescue_chance_bonus is None else state.friend_rescue_chance_bonus
        ),
        # Notifications were not persisted in v3.
        phone_notification_count=0,
        # Only the main mode existed in v3.
        game_mode="main",
    )


def migrate_v3_to_v4(data: SaveDataV3, clock: Clock | None = None) -> SaveDataV4:
    """Move ``currentRun`` into ``runs.main`` and open an empty seeded slot.

    Patterns and ``savedAt`` carry over untouched. ``clock`` only stamps
    ``migrated_at``.
    """
    return SaveDataV4(
        version=4,
        runs=SavedRunsV4(
            main=None if data.current_run is None else _state_v3_to_v4(data.current_run),
            seeded=None,
        ),
        patterns=data.patterns,
        saved_at=data.saved_at,
        migrated_at=None if clock is None else clock(),
    )


MIGRATIONS: dict[int, Callable[..., AnySaveData]] = {
    3: migrate_v3_to_v4,
}


def run_migrations(data: AnySaveData, clock: Clock | None = None) -> SaveDataV4:
    """Upgrade ``data`` to the current version.

    Returns ``data`` itself when it is already current. Raises
    MigrationError for a version newer than this client or with no path
    forward.
    """
    version = data.version
    if version == CURRENT_SAVE_VERSION:
        return data  # type: ignore[return-value]
    if version > CURRENT_SAVE_VERSION:
        raise MigrationError(version, f"Save version {version} is newer than {CURRENT_SAVE_VERSION}")

    current: AnySaveData = data
    while current.version < CURRENT_SAVE_VERSION:
        migrate = MIGRATIONS.get(current.version)
        if migrate is None:
            raise MigrationError(current.version, f"No migration from save version {current.version}")
        logger.debug("Migrating save from version %d", current.version)
        current = migrate(current, clock)
    return current  # type: ignore[return-value]


def parse_save(raw: dict[str, Any]) -> AnySaveData:
    """Typed view of a decoded payload at its own version."""
    if not isinstance(raw, dict):
        raise CorruptSaveError(f"Save payload must be an object, got {type(raw).__name__}")
    version = raw.get("version")
    if isinstance(version, bool) or not isinstance(version, int):
        raise CorruptSaveError(f"Save version must be an integer, got {version!r}")
    schema = SCHEMAS.get(version)
    if schema is None:
        if version > CURRENT_SAVE_VERSION:
            raise MigrationError(version, f"Save version {version} is newer than {CURRENT_SAVE_VERSION}")
        raise MigrationError(version, f"No migration from save version {version}")
    return schema.from_dict(raw)


def upgrade(raw: dict[str, Any], clock: Clock | None = None) -> SaveDataV4:
    """Parse then migrate a decoded payload."""
    return run_migrations(parse_save(raw), clock)
