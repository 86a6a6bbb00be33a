"""Tests for headless simulation."""
from __future__ import annotations

import pytest

from skill_issue.sim import (
    AcceptRescue,
    Attempt,
    CheckPhone,
    DeclineRescue,
    EndDay,
    HumanStrategy,
    PriorityStrategy,
    PushThrough,
    RandomStrategy,
    Skip,
    Sleep,
    aggregate,
    available_decisions,
    execute_decision,
    get_strategy,
    has_lost,
    is_complete,
    simulate,
    simulate_many,
)
from skill_issue.state import new_run

STRATEGY_TYPES = (RandomStrategy, PriorityStrategy, HumanStrategy)


@pytest.fixture
def state():
    """Weekday morning, default catalog."""
    return new_run(42)


class TestAvailableDecisions:
    def test_weekday_morning(self, state) -> None:
        decisions = available_decisions(state)
        assert Attempt("shower") in decisions
        assert Attempt("work") in decisions
        assert Attempt("practice-music") not in decisions
        assert Attempt("shower", use_variant=True) not in decisions
        assert CheckPhone() in decisions
        assert decisions[-1] == Skip()

    def test_variant_after_unlock(self, state) -> None:
        state.variants_unlocked.append("hygiene")
        assert Attempt("shower", use_variant=True) in available_decisions(state)

    def test_no_slots_only_skip(self, state) -> None:
        state.slots_remaining = 0
        assert available_decisions(state) == [Skip()]

    def test_succeeded_tasks_hidden(self, state) -> None:
        state.task("shower").succeeded_today = True
        assert Attempt("shower") not in available_decisions(state)

    def test_weekend(self, state) -> None:
        state.day, state.day_index = "saturday", 5
        state.time_block = "night"
        state.weekend_points_remaining = 2
        decisions = available_decisions(state)
        assert Attempt("practice-music") in decisions
        assert Attempt("shopping") in decisions
        assert Attempt("social-event") not in decisions
        assert decisions[-1] == EndDay()

    def test_night_choice(self, state) -> None:
        state.screen = "nightChoice"
        assert available_decisions(state) == [Sleep(), PushThrough()]
        state.pushed_through_last_night = True
        assert available_decisions(state) == [Sleep()]

    def test_rescue(self, state) -> None:
        state.screen = "friendRescue"
        decisions = available_decisions(state)
        assert decisions == [
            AcceptRescue("low"), AcceptRescue("medium"), AcceptRescue("high"), DeclineRescue(),
        ]


class TestExecuteDecision:
    def test_attempt(self, state) -> None:
        result = execute_decision(state, Attempt("shower"))
        assert result.succeeded is not None
        assert result.probability is not None
        assert result.energy_before != result.energy_after or result.momentum_before != result.momentum_after

    def test_skip(self, state) -> None:
        result = execute_decision(state, Skip())
        assert state.time_block == "afternoon"
        assert result.energy_after < result.energy_before

    def test_phone(self, state) -> None:
        result = execute_decision(state, CheckPhone())
        assert result.phone_outcome is not None
        assert result.phone_text

    def test_rescue(self, state) -> None:
        state.screen = "friendRescue"
        state.consecutive_failures = 3
        result = execute_decision(state, AcceptRescue("low"))
        assert result.rescue_correct is True
        assert result.rescue_hint
        assert state.screen == "game"

    def test_unknown_decision(self, state) -> None:
        with pytest.raises(TypeError):
            execute_decision(state, "nap")  # type: ignore[arg-type]

    def test_lost_and_complete(self, state) -> None:
        assert not has_lost(state)
        state.economy.energy = 0.0
        assert has_lost(state)
        assert not is_complete(state)
        state.screen = "weekComplete"
        assert is_complete(state)


class TestSimulate:
    @pytest.mark.parametrize("strategy_type", STRATEGY_TYPES)
    def test_replay_identical(self, strategy_type) -> None:
        a = simulate(42, strategy_type())
        b = simulate(42, strategy_type())
        assert a.to_dict() == b.to_dict()
        assert a.roll_count == b.roll_count

    @pytest.mark.parametrize("strategy_type", STRATEGY_TYPES)
    def test_terminates(self, strategy_type) -> None:
        for seed in range(1, 6):
            result = simulate(seed, strategy_type())
            assert 1 <= len(result.days) <= 7
            if result.survived:
                assert len(result.days) == 7
                assert result.stats.energy_end > 0

    def test_resources_stay_bounded(self) -> None:
        seen = []

        def observe(state, decision, result) -> None:
            seen.append((state.energy, state.momentum))

        simulate(42, HumanStrategy(), on_action=observe)
        assert seen
        assert all(0.0 <= e <= 1.0 and 0.0 <= m <= 1.0 for e, m in seen)

    def test_roll_count_matches_state(self) -> None:
        final = {}

        def observe(state, decision, result) -> None:
            final["rolls"] = state.roll_count

        result = simulate(42, HumanStrategy(), on_action=observe)
        assert result.roll_count == final["rolls"]

    def test_seeds_differ(self) -> None:
        assert simulate(1, PriorityStrategy()).to_dict() != simulate(2, PriorityStrategy()).to_dict()

    def test_stats_consistent(self) -> None:
        result = simulate(42, HumanStrategy())
        day_attempts = sum(len(d.tasks_succeeded) + len(d.tasks_failed) for d in result.days)
        assert day_attempts == result.stats.attempted
        assert result.stats.succeeded <= result.stats.attempted
        assert result.stats.energy_min <= result.stats.energy_start

    def test_step_limit(self, caplog) -> None:
        result = simulate(42, HumanStrategy(), max_steps=3)
        assert not result.survived
        assert any("step limit" in r.getMessage() for r in caplog.records)

    def test_to_dict_shape(self) -> None:
        data = simulate(42, PriorityStrategy()).to_dict()
        assert data["seed"] == 42
        assert data["strategy"] == "priority"
        assert set(data["stats"]) >= {"energy", "momentum", "tasks", "friendRescues"}
        assert data["days"][0]["day"] == "monday"


class TestStrategies:
    def test_lookup(self) -> None:
        assert get_strategy("human").name == "human"
        with pytest.raises(KeyError):
            get_strategy("speedrunner")

    def test_priority_never_checks_phone(self) -> None:
        picks = []
        simulate(42, PriorityStrategy(), on_action=lambda s, d, r: picks.append(d))
        assert CheckPhone() not in picks


class TestAggregate:
    def test_batch(self) -> None:
        results = simulate_many(range(1, 11), HumanStrategy)
        batch = aggregate(results, ["timePref", "personality"])
        assert batch.runs == 10
        assert 0.0 <= batch.survival_rate <= 1.0
        assert sum(e.runs for e in batch.groups["timePref"].values()) == 10
        assert sum(e.runs for e in batch.groups["personality"].values()) == 10
        assert batch.energy_end.low <= batch.energy_end.median <= batch.energy_end.high

    def test_empty(self) -> None:
        batch = aggregate([])
        assert batch.runs == 0
        assert batch.survival_rate == 0.0

    def test_to_dict(self) -> None:
        batch = aggregate(simulate_many(range(3), PriorityStrategy), ["socialPref"])
        data = batch.to_dict()
        assert data["runs"] == 3
        assert "socialPref" in data["groups"]
