"""Per-run personality and the modifiers it drives."""
from __future__ import annotations

from dataclasses import dataclass

from skill_issue.tuning import Tunable, register_tunable, reserve_salt, seeded_choice
from skill_issue.types import (
    SOCIAL_PREFERENCES,
    TIME_BLOCKS,
    TIME_PREFERENCES,
    SocialPreference,
    TimeBlock,
    TimePreference,
)

SALT_PERSONALITY_TIME = reserve_salt("personality.time", 6001)
SALT_PERSONALITY_SOCIAL = reserve_salt("personality.social", 6002)
SALT_ART_STYLE = reserve_salt("art_style", 6101)

STARTING_ENERGY = register_tunable("start.energy", 0.60, 0.05, 6010)
STARTING_MOMENTUM = register_tunable("start.momentum", 0.50, 0.05, 6011)

ART_STYLES: tuple[str, ...] = ("flat", "isometric", "minimal", "pixel", "sketch")


@dataclass(frozen=True)
class Personality:
    time: TimePreference
    social: SocialPreference

    def to_dict(self) -> dict[str, str]:
        return {"time": self.time, "social": self.social}

    @classmethod
    def from_dict(cls, data: dict[str, str]) -> Personality:
        time, social = data["time"], data["social"]
        if time not in TIME_PREFERENCES:
            raise ValueError(f"Unknown time preference {time!r}")
        if social not in SOCIAL_PREFERENCES:
            raise ValueError(f"Unknown social preference {social!r}")
        return cls(time=time, social=social)  # type: ignore[arg-type]


NEUTRAL = Personality(time="neutral", social="neutral")


def personality_from_seed(seed: int) -> Personality:
    return Personality(
        time=seeded_choice(seed, SALT_PERSONALITY_TIME, TIME_PREFERENCES),
        social=seeded_choice(seed, SALT_PERSONALITY_SOCIAL, SOCIAL_PREFERENCES),
    )


def starting_energy(seed: int) -> float:
    return STARTING_ENERGY.value(seed)


def starting_momentum(seed: int) -> float:
    return STARTING_MOMENTUM.value(seed)


def art_style_for_seed(seed: int) -> str:
    return seeded_choice(seed, SALT_ART_STYLE, ART_STYLES)


# --- Time of day ---

# (base, variance) per time preference and block. Neutral is the default
# daily curve; the other rows shift it.
_TIME_TABLE: dict[TimePreference, dict[TimeBlock, tuple[float, float]]] = {
    "nightOwl": {
        "morning": (0.9, 0.03),
        "afternoon": (1.0, 0.0),
        "evening": (1.0, 0.0),
        "night": (1.3, 0.05),
    },
    "earlyBird": {
        "morning": (1.15, 0.05),
        "afternoon": (1.0, 0.0),
        "evening": (1.0, 0.0),
        "night": (1.15, 0.03),
    },
    "neutral": {
        "morning": (1.1, 0.03),
        "afternoon": (0.9, 0.03),
        "evening": (1.0, 0.0),
        "night": (1.25, 0.05),
    },
}


def _register_time_modifiers() -> dict[tuple[str, str], Tunable]:
    table: dict[tuple[str, str], Tunable] = {}
    salt = 3101
    for pref in TIME_PREFERENCES:
        for block in TIME_BLOCKS:
            base, variance = _TIME_TABLE[pref][block]
            table[(pref, block)] = register_tunable(f"time.{pref}.{block}", base, variance, salt)
            salt += 1
    return table


TIME_MODIFIERS = _register_time_modifiers()


def time_modifier(personality: Personality, block: TimeBlock, seed: int) -> float:
    """Probability multiplier for attempting a task in ``block``."""
    return TIME_MODIFIERS[(personality.time, block)].value(seed)


def base_time_modifier(personality: Personality, block: TimeBlock) -> float:
    return TIME_MODIFIERS[(personality.time, block)].base


# --- Social axis ---

RESCUE_ENERGY: dict[SocialPreference, float] = {
    "socialBattery": 0.12,
    "hermit": -0.03,
    "neutral": 0.1,
}

SOCIAL_SUCCESS_ENERGY: dict[SocialPreference, float] = {
    "socialBattery": 0.03,
    "hermit": -0.02,
    "neutral": 0.0,
}

SOLO_SUCCESS_ENERGY: dict[SocialPreference, float] = {
    "socialBattery": 0.0,
    "hermit": 0.02,
    "neutral": 0.0,
}


def rescue_energy_effect(personality: Personality) -> float:
    return RESCUE_ENERGY[personality.social]


def social_success_energy(personality: Personality) -> float:
    return SOCIAL_SUCCESS_ENERGY[personality.social]


def solo_success_energy(personality: Personality) -> float:
    return SOLO_SUCCESS_ENERGY[personality.social]


_TIME_LABELS = {"nightOwl": "Night Owl", "earlyBird": "Early Bird", "neutral": "Flexible Schedule"}
_SOCIAL_LABELS = {"socialBattery": "Social Battery", "hermit": "Hermit", "neutral": "Social Neutral"}


def describe_personality(personality: Personality) -> str:
    return f"{_TIME_LABELS[personality.time]} + {_SOCIAL_LABELS[personality.social]}"
