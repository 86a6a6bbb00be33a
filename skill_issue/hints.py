"""Cosmetic text picks. Nothing here advances the roll stream."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Mapping, Sequence

from skill_issue.rng import next_uniform, pick_variant
from skill_issue.state import GameState
from skill_issue.tasks import TaskCatalog, default_catalog
from skill_issue.tuning import reserve_salt
from skill_issue.types import TaskCategory

SALT_PHONE_BUZZ = reserve_salt("hint.phone_buzz", 7001)
SALT_PHONE_IGNORED = reserve_salt("hint.phone_ignored", 7002)
SALT_RESCUE_MESSAGE = reserve_salt("hint.rescue_message", 7003)
SALT_RESCUE_RESULT = reserve_salt("hint.rescue_result", 7004)
SALT_PATTERN_HINT = reserve_salt("hint.pattern", 7005)
SALT_PHONE_FLAVOR = reserve_salt("hint.phone_flavor", 7006)

Messages = Mapping[str, Sequence[str]]

DEFAULT_MESSAGES: dict[str, tuple[str, ...]] = {
    "phoneBuzz": (
        "Your phone buzzes. You don't check it.",
        "A notification. You ignore it.",
        "Something buzzes in your pocket.",
    ),
    "phoneIgnored": (
        "Another buzz. You let it go.",
        "The phone again. Not now.",
        "Your phone gives up and goes quiet.",
    ),
    "rescueMessages": (
        "Hey, you doing okay? Want to grab coffee?",
        "I'm near your place anyway. Quick walk?",
        "Free for a bit? Could use the company.",
    ),
    "rescueResultCorrect": (
        "That was exactly what you needed.",
        "Good call. You feel a bit more like yourself.",
    ),
    "rescueResultIncorrect": (
        "You went along with it, but it took more than it gave.",
        "Nice of them. You're wiped now though.",
    ),
    "nightOwlThriving": ("You always come alive after dark.",),
    "nightOwlMorning": ("Mornings aren't your thing. That's okay.",),
    "earlyBirdThriving": ("You're sharper in the morning. Use it.",),
    "earlyBirdNight": ("It's late for you. Maybe call it a day?",),
    "hermitSocialCost": ("I know this takes something out of you. Thanks for coming.",),
    "socialBatteryBoost": ("You seem better after we hang out.",),
    "lowEnergy": ("You seem really wiped. Be gentle with yourself.",),
    "variantUnlock": ("It doesn't have to be the full thing every time.",),
    "fallback": (
        "That was nice. You seem a bit better.",
        "One thing at a time. You've got this.",
    ),
    "phoneVoid": ("Nothing new. You knew that.",),
    "phoneScrollHole": ("Thirty minutes later...",),
    "phoneActualBreak": ("That actually helped a little.",),
    "phoneSomethingNice": ("Someone sent you something nice.",),
    "phoneUsefulFind": ("Huh. That's a useful trick.",),
}


def _salt_for(state: GameState, base_salt: int) -> int:
    # Varies within a run without reading from the roll stream.
    return base_salt + state.day_index * 23 + state.roll_count * 7


def pick_message(
    state: GameState, key: str, base_salt: int, messages: Messages | None = None
) -> str:
    table = DEFAULT_MESSAGES if messages is None else messages
    return pick_variant(state.run_seed, _salt_for(state, base_salt), table[key])


def phone_buzz_text(state: GameState, messages: Messages | None = None) -> str:
    return pick_message(state, "phoneBuzz", SALT_PHONE_BUZZ, messages)


def phone_ignored_text(state: GameState, messages: Messages | None = None) -> str:
    return pick_message(state, "phoneIgnored", SALT_PHONE_IGNORED, messages)


def rescue_message(state: GameState, messages: Messages | None = None) -> str:
    return pick_message(state, "rescueMessages", SALT_RESCUE_MESSAGE, messages)


def rescue_result_message(
    state: GameState, correct: bool, messages: Messages | None = None
) -> str:
    key = "rescueResultCorrect" if correct else "rescueResultIncorrect"
    return pick_message(state, key, SALT_RESCUE_RESULT, messages)


# --- Pattern hints (friend's observation on an accepted rescue) ---

PERSONALITY_WEIGHT = 10
STATE_WEIGHT = 6

PATTERN_MESSAGES: dict[str, tuple[str, ...]] = {
    "creativeStruggling": ("Music's been hard lately, huh. It'll come back.",),
    "dogAnchor": ("At least the dog got out. That counts.",),
    "highMomentum": ("You've got a rhythm going. Ride it.",),
    "hygieneStruggling": ("A quick rinse counts too, you know.",),
    "generalStruggle": ("Rough stretch. It's not just you.",),
    "unlock.hygiene": ("Even just washing your face is something.",),
    "unlock.food": ("Toast is a meal. I'm serious.",),
    "unlock.chores": ("Just do a few dishes. Not all of them.",),
}


@dataclass(frozen=True)
class HintGroup:
    """One candidate hint with its gating condition and selection weight."""

    key: str
    condition: Callable[[GameState], bool]
    weight: Callable[[GameState], float]
    unlocks_variant: TaskCategory | None = None


@dataclass(frozen=True)
class PatternHint:
    key: str
    text: str
    unlocks_variant: TaskCategory | None = None


def variant_unlock_weight(state: GameState, task_id: str, category: TaskCategory) -> float:
    """Grows with failures and with low energy or momentum; 0 if not eligible."""
    if category in state.variants_unlocked:
        return 0
    failures = state.task(task_id).failure_count
    if failures == 0:
        return 0
    weight = 3 + state.run_seed % 4
    weight += failures * (3 + (state.run_seed >> 8) % 3)
    if state.energy < 0.4:
        weight += 3
    if state.momentum < 0.4:
        weight += 3
    return weight


def _fixed(weight: float) -> Callable[[GameState], float]:
    return lambda state: weight


def _failures(state: GameState, catalog: TaskCatalog, category: str) -> int:
    return sum(t.failure_count for t in state.tasks if catalog.get(t.id).category == category)


def pattern_hint_groups(catalog: TaskCatalog) -> list[HintGroup]:
    groups: list[HintGroup] = []
    for task in catalog.with_variants():
        groups.append(HintGroup(
            key=f"unlock.{task.category}",
            condition=lambda s, t=task: t.category not in s.variants_unlocked
            and s.task(t.id).failure_count > 0,
            weight=lambda s, t=task: variant_unlock_weight(s, t.id, t.category),
            unlocks_variant=task.category,
        ))
    p = _fixed(PERSONALITY_WEIGHT)
    w = _fixed(STATE_WEIGHT)
    groups += [
        HintGroup("nightOwlThriving", lambda s: s.personality.time == "nightOwl"
                  and s.time_block == "night" and s.momentum > 0.5, p),
        HintGroup("nightOwlMorning", lambda s: s.personality.time == "nightOwl"
                  and s.time_block == "morning" and s.energy < 0.4, p),
        HintGroup("earlyBirdThriving", lambda s: s.personality.time == "earlyBird"
                  and s.time_block == "morning" and s.momentum > 0.5, p),
        HintGroup("earlyBirdNight", lambda s: s.personality.time == "earlyBird"
                  and s.time_block == "night" and s.energy < 0.4, p),
        HintGroup("hermitSocialCost", lambda s: s.personality.social == "hermit", p),
        HintGroup("socialBatteryBoost", lambda s: s.personality.social == "socialBattery", p),
        HintGroup("creativeStruggling", lambda s: _failures(s, catalog, "creative") >= 4, w),
        HintGroup("lowEnergy", lambda s: s.energy < 0.3, w),
        HintGroup("hygieneStruggling", lambda s: _failures(s, catalog, "hygiene") >= 5, w),
        HintGroup("dogAnchor", lambda s: any(
            t.succeeded_today for t in s.tasks if t.id == "walk-dog"), w),
        HintGroup("highMomentum", lambda s: s.momentum > 0.7, w),
        HintGroup("generalStruggle", lambda s: s.consecutive_failures >= 2, w),
    ]
    return groups


def _lookup(key: str, messages: Messages | None) -> Sequence[str]:
    if messages is not None and key in messages:
        return messages[key]
    if key in DEFAULT_MESSAGES:
        return DEFAULT_MESSAGES[key]
    if key in PATTERN_MESSAGES:
        return PATTERN_MESSAGES[key]
    return DEFAULT_MESSAGES["variantUnlock"]


def pattern_hint(
    state: GameState,
    catalog: TaskCatalog | None = None,
    messages: Messages | None = None,
) -> PatternHint:
    """Weighted pick among matching hint groups, seeded by day and roll count.

    Reads state only; the caller applies ``unlocks_variant``.
    """
    if catalog is None:
        catalog = default_catalog()
    candidates = []
    for group in pattern_hint_groups(catalog):
        if group.condition(state):
            weight = group.weight(state)
            if weight > 0:
                candidates.append((group, weight))

    salt = SALT_PATTERN_HINT + state.day_index * 47 + state.roll_count * 19
    if not candidates:
        text = pick_variant(state.run_seed, salt, _lookup("fallback", messages))
        return PatternHint("fallback", text)

    total = sum(weight for _, weight in candidates)
    threshold = next_uniform(state.run_seed, salt) * total
    selected = candidates[-1][0]
    for group, weight in candidates:
        threshold -= weight
        if threshold < 0:
            selected = group
            break
    text = pick_variant(state.run_seed, salt + 13, _lookup(selected.key, messages))
    return PatternHint(selected.key, text, selected.unlocks_variant)
