"""skill_issue.persistence - Versioned save payloads, migrations and host stores."""
from skill_issue.persistence.manager import SaveManager, from_saved_state, to_saved_state
from skill_issue.persistence.migrations import (
    CURRENT_SAVE_VERSION,
    MIGRATIONS,
    migrate_v3_to_v4,
    parse_save,
    run_migrations,
    upgrade,
)
from skill_issue.persistence.schema import (
    SCHEMAS,
    CompletedRun,
    PatternsData,
    SaveDataV3,
    SaveDataV4,
    SavedRunsV4,
    SavedStateV3,
    SavedStateV4,
    SavedTask,
)
from skill_issue.persistence.store import FileStore, KeyValueStore, MemoryStore

__all__ = [
    "CURRENT_SAVE_VERSION",
    "CompletedRun",
    "FileStore",
    "KeyValueStore",
    "MIGRATIONS",
    "MemoryStore",
    "PatternsData",
    "SCHEMAS",
    "SaveDataV3",
    "SaveDataV4",
    "SaveManager",
    "SavedRunsV4",
    "SavedStateV3",
    "SavedStateV4",
    "SavedTask",
    "from_saved_state",
    "migrate_v3_to_v4",
    "parse_save",
    "run_migrations",
    "to_saved_state",
    "upgrade",
]
