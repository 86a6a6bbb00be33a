"""skill-issue — Deterministic week-long life-sim engine."""
from skill_issue.actions import AttemptResult, FirstAttemptTracker, attempt_task, can_attempt, select_task
from skill_issue.config import DEFAULT_RULES, RulesConfig, SaveConfig
from skill_issue.daycycle import (
    choose_sleep,
    continue_to_next_day,
    dog_urgency,
    end_weekend_day,
    push_through,
    skip_time_block,
    sleep_quality,
)
from skill_issue.economy import Economy, apply_delta, clamp, task_energy_effect
from skill_issue.errors import CorruptSaveError, MigrationError, SaveError
from skill_issue.personality import Personality, describe_personality, personality_from_seed
from skill_issue.phone import PhoneResult, check_phone
from skill_issue.probability import resolve_outcome, success_probability
from skill_issue.rescue import (
    ACTIVITIES,
    RescuePhase,
    RescueResult,
    accept_rescue,
    decline_rescue,
    rescue_phase,
    should_trigger_rescue,
)
from skill_issue.rng import RollCounter, hash_string, next_roll, next_uniform, pick_variant
from skill_issue.state import GameState, RunStats, new_run
from skill_issue.tasks import DEFAULT_TASKS, TaskCatalog, TaskDef, TaskRuntime, default_catalog
from skill_issue.tuning import TUNABLES, Tunable, derived_parameters, seeded_choice, seeded_variation

__all__ = [
    "ACTIVITIES",
    "AttemptResult",
    "CorruptSaveError",
    "DEFAULT_RULES",
    "DEFAULT_TASKS",
    "Economy",
    "FirstAttemptTracker",
    "GameState",
    "MigrationError",
    "Personality",
    "PhoneResult",
    "RescuePhase",
    "RescueResult",
    "RollCounter",
    "RulesConfig",
    "RunStats",
    "SaveConfig",
    "SaveError",
    "TUNABLES",
    "TaskCatalog",
    "TaskDef",
    "TaskRuntime",
    "Tunable",
    "accept_rescue",
    "apply_delta",
    "attempt_task",
    "can_attempt",
    "check_phone",
    "choose_sleep",
    "clamp",
    "continue_to_next_day",
    "decline_rescue",
    "default_catalog",
    "derived_parameters",
    "describe_personality",
    "dog_urgency",
    "end_weekend_day",
    "hash_string",
    "new_run",
    "next_roll",
    "next_uniform",
    "personality_from_seed",
    "pick_variant",
    "push_through",
    "rescue_phase",
    "resolve_outcome",
    "seeded_choice",
    "seeded_variation",
    "select_task",
    "should_trigger_rescue",
    "skip_time_block",
    "sleep_quality",
    "success_probability",
    "task_energy_effect",
]
