"""Tests for the friend rescue."""
from __future__ import annotations

import pytest

from skill_issue.personality import NEUTRAL, Personality, rescue_energy_effect
from skill_issue.rescue import (
    MAX_CHANCE,
    RescuePhase,
    accept_rescue,
    activity,
    add_rescue_chance_bonus,
    decline_rescue,
    effective_rescue_chance,
    friend_rescue_chance,
    is_correct_tier,
    is_rescue_eligible,
    rescue_phase,
    should_trigger_rescue,
)
from skill_issue.state import new_run


@pytest.fixture
def state():
    """A neutral weekday run three failures deep."""
    s = new_run(42)
    s.personality = NEUTRAL
    s.economy.energy = 0.5
    s.economy.momentum = 0.5
    s.consecutive_failures = 3
    return s


def _weekend(s, points: int) -> None:
    s.day, s.day_index = "saturday", 5
    s.weekend_points_remaining = points


class TestGating:
    def test_below_threshold_no_roll(self, state) -> None:
        state.consecutive_failures = 2
        assert should_trigger_rescue(state) is False
        assert state.roll_count == 0

    def test_used_today_no_roll(self, state) -> None:
        state.friend_rescue_used_today = True
        assert should_trigger_rescue(state) is False
        assert state.roll_count == 0

    def test_no_slots_no_roll(self, state) -> None:
        state.slots_remaining = 0
        assert should_trigger_rescue(state) is False
        assert state.roll_count == 0

    def test_weekend_needs_two_points(self, state) -> None:
        _weekend(state, 1)
        assert is_rescue_eligible(state) is False
        _weekend(state, 2)
        assert is_rescue_eligible(state) is True

    def test_eligible_spends_one_roll(self, state) -> None:
        should_trigger_rescue(state)
        assert state.roll_count == 1

    def test_chance_range(self) -> None:
        for seed in range(100):
            assert 0.35 - 1e-9 <= friend_rescue_chance(seed) <= 0.45 + 1e-9

    def test_bonus_capped(self, state) -> None:
        state.friend_rescue_chance_bonus = 0.8
        assert effective_rescue_chance(state) == MAX_CHANCE

    def test_add_bonus_clamped(self, state) -> None:
        add_rescue_chance_bonus(state, 5.0)
        assert state.friend_rescue_chance_bonus == MAX_CHANCE
        add_rescue_chance_bonus(state, -9.0)
        assert state.friend_rescue_chance_bonus == 0.0


class TestTiers:
    def test_unknown_tier(self) -> None:
        with pytest.raises(KeyError):
            activity("extreme")  # type: ignore[arg-type]

    def test_correct_tier(self) -> None:
        assert is_correct_tier(activity("medium"), 0.45)
        assert not is_correct_tier(activity("high"), 0.69)


class TestAccept:
    def test_correct_tier_effects(self, state) -> None:
        state.screen = "friendRescue"
        result = accept_rescue(state, "low")
        assert result.correct is True
        assert result.momentum_change == pytest.approx(0.1)
        assert state.momentum == pytest.approx(0.6)
        assert state.energy == pytest.approx(0.5 + rescue_energy_effect(NEUTRAL))

    def test_wrong_tier_effects(self, state) -> None:
        result = accept_rescue(state, "high")
        assert result.correct is False
        assert result.energy_change == pytest.approx(rescue_energy_effect(NEUTRAL) - 0.08)
        assert state.momentum == pytest.approx(0.53)

    def test_hermit_loses_energy(self, state) -> None:
        state.personality = Personality(time="neutral", social="hermit")
        accept_rescue(state, "low")
        assert state.energy == pytest.approx(0.47)

    def test_spends_slot_and_resets(self, state) -> None:
        state.screen = "friendRescue"
        accept_rescue(state, "medium")
        assert state.slots_remaining == 2
        assert state.consecutive_failures == 0
        assert state.friend_rescue_used_today is True
        assert state.run_stats.friend_rescues.accepted == 1
        assert state.screen == "game"

    def test_weekend_costs_two(self, state) -> None:
        _weekend(state, 5)
        accept_rescue(state, "low")
        assert state.weekend_points_remaining == 3

    def test_does_not_roll(self, state) -> None:
        accept_rescue(state, "low")
        assert state.roll_count == 0

    def test_unlock_hint_unlocks_variant(self, state) -> None:
        state.consecutive_failures = 0
        state.task("shower").failure_count = 2
        result = accept_rescue(state, "low")
        assert result.hint.key == "unlock.hygiene"
        assert "hygiene" in state.variants_unlocked


class TestDecline:
    def test_resets_and_spends_today(self, state) -> None:
        state.screen = "friendRescue"
        energy, momentum = state.energy, state.momentum
        decline_rescue(state)
        assert state.consecutive_failures == 0
        assert state.friend_rescue_used_today is True
        assert state.screen == "game"
        assert (state.energy, state.momentum) == (energy, momentum)
        assert state.slots_remaining == 3


class TestPhase:
    def test_progression(self, state) -> None:
        state.consecutive_failures = 0
        assert rescue_phase(state) is RescuePhase.IDLE
        state.consecutive_failures = 3
        assert rescue_phase(state) is RescuePhase.ELIGIBLE
        state.screen = "friendRescue"
        assert rescue_phase(state) is RescuePhase.OFFERED
        decline_rescue(state)
        assert rescue_phase(state) is RescuePhase.RESOLVED
