"""Shared fixtures: legacy save payloads."""
from __future__ import annotations

import pytest

from skill_issue.persistence import to_saved_state
from skill_issue.state import new_run

V4_ONLY = ("phoneNotificationCount", "gameMode", "friendRescueChanceBonus")


@pytest.fixture
def v3_run():
    """Build a version 3 ``currentRun`` object from a played-looking run."""

    def make(seed: int = 42, bonus: float | None = None) -> dict:
        state = new_run(seed)
        state.roll_count = 17
        state.consecutive_failures = 2
        state.variants_unlocked = ["food"]
        state.task("cook").failure_count = 3
        data = to_saved_state(state).to_dict()
        for key in V4_ONLY:
            data.pop(key)
        if bonus is not None:
            data["friendRescueChanceBonus"] = bonus
        return data

    return make


@pytest.fixture
def v3_payload():
    """Wrap a run (or None) in a version 3 save."""

    def make(run: dict | None) -> dict:
        return {
            "version": 3,
            "currentRun": run,
            "patterns": {"unlocked": True, "history": [], "hasSeenIntro": True, "hasEverAttempted": True},
            "savedAt": 1700000000000,
        }

    return make
