"""Configuration dataclasses."""
from __future__ import annotations

from dataclasses import dataclass

from skill_issue.types import DAYS


@dataclass(frozen=True)
class SaveConfig:
    """Immutable persistence settings.

    Attributes:
        storage_key: Key the whole save payload is written under.
        backup_corrupt: Copy an unreadable payload aside before it can be
            overwritten by the next save.
        backup_suffix: Appended to ``storage_key`` for that copy.
    """

    storage_key: str = "skill-issue-save"
    backup_corrupt: bool = True
    backup_suffix: str = ".corrupt"

    @property
    def backup_key(self) -> str:
        return self.storage_key + self.backup_suffix


@dataclass(frozen=True)
class RulesConfig:
    """Immutable day-cycle rule numbers.

    Attributes:
        slots_per_block: Weekday action slots granted per time block.
        weekend_points: Action points granted per weekend day.
        block_notification_chance: Chance of a phone notification on a
            time-block change.
        failure_notification_base: Notification chance after the first
            consecutive failure.
        failure_notification_step: Added per further consecutive failure.
        failure_notification_cap: Upper bound for the failure chance.
        week_length: Days in a run, counted from monday.
    """

    slots_per_block: int = 3
    weekend_points: int = 8
    block_notification_chance: float = 0.15
    failure_notification_base: float = 0.25
    failure_notification_step: float = 0.15
    failure_notification_cap: float = 0.6
    week_length: int = 7

    def __post_init__(self) -> None:
        if self.slots_per_block <= 0:
            raise ValueError("slots_per_block must be positive")
        if self.weekend_points <= 0:
            raise ValueError("weekend_points must be positive")
        if not 1 <= self.week_length <= len(DAYS):
            raise ValueError(f"week_length must be in [1, {len(DAYS)}], got {self.week_length}")


DEFAULT_RULES = RulesConfig()
