"""Batch statistics over many simulated weeks."""
from __future__ import annotations

import statistics
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Literal

from skill_issue.sim.engine import SimulationResult, simulate
from skill_issue.sim.strategies import Strategy

GroupBy = Literal["personality", "timePref", "socialPref", "allNighters"]
GROUP_BY: tuple[GroupBy, ...] = ("personality", "timePref", "socialPref", "allNighters")


@dataclass(frozen=True)
class Spread:
    mean: float
    low: float
    high: float
    median: float

    @classmethod
    def of(cls, values: list[float]) -> Spread:
        if not values:
            return cls(0.0, 0.0, 0.0, 0.0)
        return cls(statistics.fmean(values), min(values), max(values), statistics.median(values))


@dataclass(frozen=True)
class GroupEntry:
    runs: int
    survived: int

    @property
    def survival_rate(self) -> float:
        return self.survived / self.runs if self.runs else 0.0


@dataclass(frozen=True)
class BatchStats:
    runs: int
    survival_rate: float
    energy_end: Spread
    momentum_end: Spread
    attempted_avg: float
    success_rate_avg: float
    rescue_triggered_rate: float
    rescue_accepted_rate: float
    all_nighter_rate: float
    phone_checks_avg: float
    groups: dict[str, dict[str, GroupEntry]] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "runs": self.runs,
            "survivalRate": self.survival_rate,
            "energyEnd": vars(self.energy_end),
            "momentumEnd": vars(self.momentum_end),
            "attemptedAvg": self.attempted_avg,
            "successRateAvg": self.success_rate_avg,
            "rescueTriggeredRate": self.rescue_triggered_rate,
            "rescueAcceptedRate": self.rescue_accepted_rate,
            "allNighterRate": self.all_nighter_rate,
            "phoneChecksAvg": self.phone_checks_avg,
            "groups": {
                dim: {
                    key: {"runs": e.runs, "survived": e.survived, "survivalRate": e.survival_rate}
                    for key, e in entries.items()
                }
                for dim, entries in self.groups.items()
            },
        }


def group_key(result: SimulationResult, dimension: GroupBy) -> str:
    if dimension == "personality":
        return f"{result.personality.time}+{result.personality.social}"
    if dimension == "timePref":
        return result.personality.time
    if dimension == "socialPref":
        return result.personality.social
    if dimension == "allNighters":
        return str(result.stats.all_nighters)
    raise ValueError(f"Unknown grouping {dimension!r}")


def _rate(results: list[SimulationResult], pred: Callable[[SimulationResult], bool]) -> float:
    return sum(1 for r in results if pred(r)) / len(results)


def aggregate(results: Iterable[SimulationResult], group_by: Iterable[GroupBy] = ()) -> BatchStats:
    results = list(results)
    if not results:
        empty = Spread.of([])
        return BatchStats(0, 0.0, empty, empty, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0)

    groups: dict[str, dict[str, GroupEntry]] = {}
    for dimension in group_by:
        buckets: dict[str, list[SimulationResult]] = {}
        for r in results:
            buckets.setdefault(group_key(r, dimension), []).append(r)
        groups[dimension] = {
            key: GroupEntry(len(rs), sum(1 for r in rs if r.survived))
            for key, rs in sorted(buckets.items())
        }

    return BatchStats(
        runs=len(results),
        survival_rate=_rate(results, lambda r: r.survived),
        energy_end=Spread.of([r.stats.energy_end for r in results]),
        momentum_end=Spread.of([r.stats.momentum_end for r in results]),
        attempted_avg=statistics.fmean(r.stats.attempted for r in results),
        success_rate_avg=statistics.fmean(r.stats.success_rate for r in results),
        rescue_triggered_rate=_rate(results, lambda r: r.stats.rescues_triggered > 0),
        rescue_accepted_rate=_rate(results, lambda r: r.stats.rescues_accepted > 0),
        all_nighter_rate=_rate(results, lambda r: r.stats.all_nighters > 0),
        phone_checks_avg=statistics.fmean(r.stats.phone_checks for r in results),
        groups=groups,
    )


def simulate_many(seeds: Iterable[int], make_strategy: Callable[[], Strategy]) -> list[SimulationResult]:
    """One fresh strategy per seed."""
    return [simulate(seed, make_strategy()) for seed in seeds]
