"""Shared tag types and their canonical orderings."""
from __future__ import annotations

from typing import Literal

TimeBlock = Literal["morning", "afternoon", "evening", "night"]
Day = Literal["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]
Screen = Literal[
    "splash", "menu", "intro", "game", "nightChoice", "daySummary",
    "weekComplete", "friendRescue",
]
GameMode = Literal["main", "seeded"]
TaskCategory = Literal[
    "hygiene", "food", "chores", "dog", "work", "creative", "selfcare", "social",
]
TimePreference = Literal["nightOwl", "earlyBird", "neutral"]
SocialPreference = Literal["socialBattery", "hermit", "neutral"]

TIME_BLOCKS: tuple[TimeBlock, ...] = ("morning", "afternoon", "evening", "night")
DAYS: tuple[Day, ...] = (
    "monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday",
)
SCREENS: tuple[Screen, ...] = (
    "splash", "menu", "intro", "game", "nightChoice", "daySummary",
    "weekComplete", "friendRescue",
)
GAME_MODES: tuple[GameMode, ...] = ("main", "seeded")
TASK_CATEGORIES: tuple[TaskCategory, ...] = (
    "hygiene", "food", "chores", "dog", "work", "creative", "selfcare", "social",
)
TIME_PREFERENCES: tuple[TimePreference, ...] = ("nightOwl", "earlyBird", "neutral")
SOCIAL_PREFERENCES: tuple[SocialPreference, ...] = ("socialBattery", "hermit", "neutral")

# Day index at which the weekend starts (saturday).
WEEKEND_START = 5
