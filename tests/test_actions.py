"""Tests for task attempts."""
from __future__ import annotations

import pytest

from skill_issue.actions import attempt_task, can_attempt, failure_notification_chance, select_task
from skill_issue.economy import (
    momentum_failure_penalty,
    momentum_success_bonus,
    saturday_work_penalty,
    task_energy_effect,
)
from skill_issue.hints import DEFAULT_MESSAGES
from skill_issue.personality import NEUTRAL
from skill_issue.state import new_run
from skill_issue.tasks import TaskCatalog, TaskDef, default_catalog

IMPOSSIBLE = TaskCatalog([
    TaskDef("impossible-a", "creative", 0.0),
    TaskDef("impossible-b", "creative", 0.0),
    TaskDef("impossible-c", "creative", 0.0),
    TaskDef("impossible-d", "creative", 0.0),
])

CERTAIN = TaskCatalog([
    TaskDef("work", "work", 1.0),
    TaskDef("walk-dog", "dog", 1.0, auto_satisfies="go-outside"),
    TaskDef("go-outside", "selfcare", 1.0),
])


class StubTracker:
    """In-memory lifetime flag."""

    def __init__(self, first: bool = True) -> None:
        self.first = first
        self.marked = 0

    def is_first_ever_attempt(self) -> bool:
        return self.first

    def mark_first_attempt(self) -> None:
        self.first = False
        self.marked += 1


@pytest.fixture
def state():
    """Neutral weekday morning on the default catalog."""
    s = new_run(42)
    s.personality = NEUTRAL
    s.economy.energy = 0.5
    s.economy.momentum = 0.5
    return s


def _fail(s, catalog, times):
    results = []
    for i in range(times):
        s.slots_remaining = 3
        results.append(attempt_task(s, catalog.ids()[i], catalog))
    return results


class TestCanAttempt:
    def test_weekday_needs_slot(self, state) -> None:
        shower = default_catalog().get("shower")
        assert can_attempt(state, shower)
        state.slots_remaining = 0
        assert not can_attempt(state, shower)

    def test_done_today(self, state) -> None:
        state.task("shower").succeeded_today = True
        assert not can_attempt(state, default_catalog().get("shower"))

    def test_weekend_points(self, state) -> None:
        state.day, state.day_index = "saturday", 5
        state.weekend_points_remaining = 2
        catalog = default_catalog()
        assert can_attempt(state, catalog.get("shopping"))
        assert not can_attempt(state, catalog.get("social-event"))

    def test_unavailable_returns_none(self, state) -> None:
        state.slots_remaining = 0
        assert attempt_task(state, "shower") is None
        assert state.roll_count == 0

    def test_select(self, state) -> None:
        select_task(state, "shower")
        assert state.selected_task_id == "shower"


class TestAttempt:
    def test_spends_slot_and_roll(self, state) -> None:
        result = attempt_task(state, "shower")
        assert result is not None
        assert state.slots_remaining == 2
        assert state.roll_count >= 1
        assert state.task("shower").attempted_today is True
        assert state.run_stats.tasks.attempted == 1

    def test_weekend_spends_points(self, state) -> None:
        state.day, state.day_index = "sunday", 6
        attempt_task(state, "shopping")
        assert state.weekend_points_remaining == 6
        assert state.slots_remaining == 3

    def test_failure_bookkeeping(self, state) -> None:
        state.tasks = IMPOSSIBLE.fresh_runtime()
        result = attempt_task(state, "impossible-a", IMPOSSIBLE)
        assert result.succeeded is False
        assert result.probability == 0.0
        assert state.task("impossible-a").failure_count == 1
        assert state.consecutive_failures == 1
        assert state.momentum == pytest.approx(0.5 - momentum_failure_penalty(42))
        assert state.roll_count == 2

    def test_success_bookkeeping(self, state) -> None:
        state.consecutive_failures = 2
        result = attempt_task(state, "work", CERTAIN, first_attempt=StubTracker())
        assert result.succeeded is True
        assert state.consecutive_failures == 0
        assert state.momentum == pytest.approx(0.5 + momentum_success_bonus(42))
        assert state.run_stats.by_time_block["morning"].succeeded == 1
        assert state.roll_count == 1

    def test_auto_satisfies(self, state) -> None:
        state.tasks = CERTAIN.fresh_runtime()
        attempt_task(state, "walk-dog", CERTAIN, first_attempt=StubTracker())
        assert state.task("go-outside").succeeded_today is True
        assert state.task("go-outside").attempted_today is False

    def test_variant_uses_variant_rate(self, state) -> None:
        catalog = TaskCatalog([TaskDef("shower", "hygiene", 0.0, variant_base_rate=1.0)])
        state.tasks = catalog.fresh_runtime()
        state.economy.energy = 1.0
        state.economy.momentum = 1.0
        result = attempt_task(state, "shower", catalog, use_variant=True)
        assert result.probability == 1.0
        assert result.succeeded is True
        assert state.run_stats.variants_used == ["hygiene"]

    def test_energy_effect_applied(self, state) -> None:
        state.tasks = IMPOSSIBLE.fresh_runtime()
        task = IMPOSSIBLE.get("impossible-a")
        attempt_task(state, "impossible-a", IMPOSSIBLE)
        assert state.energy == pytest.approx(0.5 + task_energy_effect(task, False, 42, NEUTRAL))


class TestReplay:
    def test_first_three_attempts_replay(self) -> None:
        def play():
            s = new_run(42)
            out = []
            for task_id in ("shower", "work", "walk-dog"):
                result = attempt_task(s, task_id)
                assert result is not None
                out.append((result.succeeded, s.energy, s.momentum))
            return out, s.roll_count

        assert play() == play()


class TestFirstAttempt:
    def test_forced_success_at_zero_probability(self, state) -> None:
        state.tasks = IMPOSSIBLE.fresh_runtime()
        tracker = StubTracker()
        result = attempt_task(state, "impossible-a", IMPOSSIBLE, first_attempt=tracker)
        assert result.succeeded is True
        assert result.probability == 1.0
        assert tracker.marked == 1
        assert state.roll_count == 1

    def test_only_once(self, state) -> None:
        state.tasks = IMPOSSIBLE.fresh_runtime()
        tracker = StubTracker()
        attempt_task(state, "impossible-a", IMPOSSIBLE, first_attempt=tracker)
        second = attempt_task(state, "impossible-b", IMPOSSIBLE, first_attempt=tracker)
        assert second.succeeded is False
        assert tracker.marked == 1

    def test_without_tracker_zero_fails(self, state) -> None:
        state.tasks = IMPOSSIBLE.fresh_runtime()
        assert attempt_task(state, "impossible-a", IMPOSSIBLE).succeeded is False


class TestSaturdayWork:
    def test_penalty_on_saturday_success(self, state) -> None:
        state.tasks = CERTAIN.fresh_runtime()
        state.day, state.day_index = "saturday", 5
        task = CERTAIN.get("work")
        attempt_task(state, "work", CERTAIN, first_attempt=StubTracker())
        expected = 0.5 + task_energy_effect(task, True, 42, NEUTRAL) - saturday_work_penalty(42)
        assert state.energy == pytest.approx(expected)

    def test_no_penalty_on_sunday(self, state) -> None:
        state.tasks = CERTAIN.fresh_runtime()
        state.day, state.day_index = "sunday", 6
        task = CERTAIN.get("work")
        attempt_task(state, "work", CERTAIN, first_attempt=StubTracker())
        assert state.energy == pytest.approx(0.5 + task_energy_effect(task, True, 42, NEUTRAL))


class TestFailureChain:
    def test_notification_chance(self) -> None:
        assert failure_notification_chance(1) == pytest.approx(0.25)
        assert failure_notification_chance(2) == pytest.approx(0.4)
        assert failure_notification_chance(4) == pytest.approx(0.6)
        assert failure_notification_chance(10) == pytest.approx(0.6)

    def test_buzz_on_second_failure(self, state) -> None:
        state.tasks = IMPOSSIBLE.fresh_runtime()
        first, second = _fail(state, IMPOSSIBLE, 2)
        assert first.phone_buzz_text is None
        assert second.phone_buzz_text in DEFAULT_MESSAGES["phoneBuzz"]

    def test_no_rescue_before_threshold(self, state) -> None:
        state.tasks = IMPOSSIBLE.fresh_runtime()
        results = _fail(state, IMPOSSIBLE, 2)
        assert not any(r.friend_rescue_triggered for r in results)
        assert state.roll_count == 4

    def test_third_failure_rolls_for_rescue(self, state) -> None:
        state.tasks = IMPOSSIBLE.fresh_runtime()
        _fail(state, IMPOSSIBLE, 3)
        assert state.roll_count == 7

    def test_used_today_blocks_rescue(self, state) -> None:
        state.tasks = IMPOSSIBLE.fresh_runtime()
        state.friend_rescue_used_today = True
        results = _fail(state, IMPOSSIBLE, 4)
        assert not any(r.friend_rescue_triggered for r in results)
        assert state.screen == "game"
        assert results[2].phone_buzz_text in DEFAULT_MESSAGES["phoneIgnored"]

    def test_rescue_triggers_across_seeds(self) -> None:
        triggered = 0
        for seed in range(1, 31):
            s = new_run(seed, catalog=IMPOSSIBLE)
            s.friend_rescue_chance_bonus = 0.9
            results = _fail(s, IMPOSSIBLE, 3)
            if results[2].friend_rescue_triggered:
                triggered += 1
                assert s.screen == "friendRescue"
                assert s.run_stats.friend_rescues.triggered == 1
                assert results[2].phone_buzz_text is None
        assert triggered > 0
