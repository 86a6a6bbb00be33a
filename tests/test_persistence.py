"""Tests for stores and the save manager."""
from __future__ import annotations

import json
from dataclasses import replace

import pytest

from skill_issue.actions import attempt_task
from skill_issue.config import SaveConfig
from skill_issue.persistence import (
    FileStore,
    MemoryStore,
    SavedTask,
    SaveManager,
    from_saved_state,
    to_saved_state,
)
from skill_issue.state import new_run

KEY = "skill-issue-save"


@pytest.fixture
def store():
    """Empty in-memory store."""
    return MemoryStore()


@pytest.fixture
def manager(store):
    """Manager with a fixed clock."""
    return SaveManager(store, clock=lambda: 1000)


def _played(seed: int = 42, mode: str = "main"):
    s = new_run(seed, mode=mode)
    attempt_task(s, "shower")
    attempt_task(s, "walk-dog")
    s.friend_rescue_chance_bonus = 0.1
    s.phone_notification_count = 2
    return s


class TestConversion:
    def test_round_trip(self) -> None:
        state = _played()
        assert from_saved_state(to_saved_state(state)) == state

    def test_missing_tasks_start_fresh(self) -> None:
        saved = to_saved_state(new_run(42))
        state = from_saved_state(replace(saved, tasks=saved.tasks[:2]))
        assert len(state.tasks) == 12
        assert state.task("work").failure_count == 0

    def test_unknown_tasks_dropped(self) -> None:
        saved = to_saved_state(new_run(42))
        extra = SavedTask("juggling", 4, True, False)
        state = from_saved_state(replace(saved, tasks=saved.tasks + (extra,)))
        with pytest.raises(KeyError):
            state.task("juggling")


class TestMemoryStore:
    def test_basic(self, store) -> None:
        assert store.get("k") is None
        store.set("k", "v")
        assert store.get("k") == "v"
        store.remove("k")
        assert store.get("k") is None
        store.remove("k")


class TestFileStore:
    def test_missing_key(self, tmp_path) -> None:
        assert FileStore(tmp_path).get("nothing") is None

    def test_set_get_overwrite(self, tmp_path) -> None:
        fs = FileStore(tmp_path / "saves")
        fs.set("slot", "one")
        fs.set("slot", "two")
        assert fs.get("slot") == "two"
        assert [p.name for p in (tmp_path / "saves").iterdir()] == ["slot.json"]

    def test_key_quoted(self, tmp_path) -> None:
        fs = FileStore(tmp_path)
        assert fs.path_for("a/b").parent == tmp_path

    def test_remove(self, tmp_path) -> None:
        fs = FileStore(tmp_path)
        fs.set("k", "v")
        fs.remove("k")
        fs.remove("k")
        assert fs.get("k") is None


class TestSaveAndLoad:
    def test_fresh_run_when_empty(self, manager) -> None:
        state = manager.load_game(seed=42)
        assert state.run_seed == 42
        assert state.roll_count == 0
        assert manager.has_saved_run() is False

    def test_round_trip(self, manager) -> None:
        state = _played()
        manager.save_game(state)
        assert manager.has_saved_run("main")
        assert manager.load_game("main") == state

    def test_slots_independent(self, manager) -> None:
        main = _played(1)
        seeded = _played(2, mode="seeded")
        manager.save_game(main)
        manager.save_game(seeded)
        assert manager.load_game("main").run_seed == 1
        assert manager.load_game("seeded").run_seed == 2
        manager.reset_run("main")
        assert manager.has_saved_run("main") is False
        assert manager.load_game("seeded").run_seed == 2

    def test_payload_is_current_version(self, manager, store) -> None:
        manager.save_game(_played())
        raw = json.loads(store.get(KEY))
        assert raw["version"] == 4
        assert raw["savedAt"] == 1000
        assert raw["runs"]["main"]["gameMode"] == "main"

    def test_loads_v3_payload(self, store, v3_run, v3_payload) -> None:
        store.set(KEY, json.dumps(v3_payload(v3_run())))
        manager = SaveManager(store)
        state = manager.load_game("main")
        assert state.roll_count == 17
        assert state.game_mode == "main"
        assert state.friend_rescue_chance_bonus == 0.0
        assert manager.last_load_issue is None

    def test_clear_all(self, manager, store) -> None:
        manager.save_game(_played())
        manager.mark_intro_seen()
        manager.clear_all()
        assert store.get(KEY) is None
        assert manager.has_seen_intro() is False


class TestCorruptSaves:
    def test_bad_json_falls_back(self, store) -> None:
        store.set(KEY, "{not json")
        manager = SaveManager(store)
        data = manager.load_data()
        assert data.runs.main is None
        assert manager.last_load_issue is not None
        assert store.get(KEY + ".corrupt") == "{not json"

    def test_newer_version_falls_back(self, store) -> None:
        store.set(KEY, json.dumps({"version": 99}))
        manager = SaveManager(store)
        assert manager.has_saved_run() is False
        assert "MigrationError" in manager.last_load_issue
        assert json.loads(store.get(KEY + ".corrupt")) == {"version": 99}

    def test_old_version_falls_back(self, store) -> None:
        store.set(KEY, json.dumps({"version": 2, "currentRun": None}))
        manager = SaveManager(store)
        assert manager.load_data().runs.main is None
        assert manager.last_load_issue is not None

    def test_backup_disabled(self, store) -> None:
        store.set(KEY, "garbage")
        manager = SaveManager(store, SaveConfig(backup_corrupt=False))
        manager.load_data()
        assert store.keys() == [KEY]

    def test_fallback_logged(self, store, caplog) -> None:
        store.set(KEY, "garbage")
        SaveManager(store).load_data()
        assert any("unreadable save" in r.getMessage() for r in caplog.records)

    def test_issue_cleared_on_good_load(self, store) -> None:
        store.set(KEY, "garbage")
        manager = SaveManager(store)
        manager.load_data()
        manager.save_game(_played())
        manager.load_data()
        assert manager.last_load_issue is None

    def test_infinite_count_falls_back(self, store, v3_run, v3_payload) -> None:
        run = v3_run()
        run["runStats"]["phoneChecks"] = float("inf")
        store.set(KEY, json.dumps(v3_payload(run)))
        manager = SaveManager(store)
        assert manager.load_data().runs.main is None
        assert "CorruptSaveError" in manager.last_load_issue

    def test_deep_nesting_falls_back(self, store) -> None:
        store.set(KEY, "[" * 100000 + "]" * 100000)
        manager = SaveManager(store)
        assert manager.load_data().runs.main is None
        assert manager.last_load_issue is not None

    def test_undecodable_file_falls_back(self, tmp_path) -> None:
        store = FileStore(tmp_path)
        store.path_for(KEY).write_bytes(b"\xff\xfe{garbage")
        manager = SaveManager(store)
        assert manager.load_data().runs.main is None
        assert "UnicodeDecodeError" in manager.last_load_issue
        assert store.get(KEY + ".corrupt") is None


class TestPatterns:
    def test_first_attempt_flag(self, manager) -> None:
        assert manager.is_first_ever_attempt() is True
        manager.mark_first_attempt()
        assert manager.is_first_ever_attempt() is False

    def test_tracker_forces_first_success(self, manager) -> None:
        state = new_run(42)
        result = attempt_task(state, "work", first_attempt=manager)
        assert result.succeeded is True
        assert manager.is_first_ever_attempt() is False

    def test_patterns_survive_run_saves(self, manager) -> None:
        manager.mark_intro_seen()
        manager.save_game(_played())
        manager.reset_run("main")
        assert manager.has_seen_intro() is True

    def test_completed_run_appended(self, manager) -> None:
        state = _played()
        manager.save_completed_run(state)
        manager.save_completed_run(state)
        patterns = manager.patterns()
        assert patterns.unlocked is True
        assert len(patterns.history) == 2
        assert patterns.history[0].seed == 42
        assert patterns.history[0].completed_at == 1000
        assert patterns.history[0].stats == state.run_stats

    def test_slot_survives_completed_run(self, manager) -> None:
        manager.save_game(_played())
        manager.save_completed_run(_played(7))
        assert manager.load_game("main").run_seed == 42
