"""Week Viewer — Energy and momentum over one simulated week.

Exercises skill_issue.sim: every action of a headless run is recorded and
plotted, with day boundaries, rescues and all-nighters marked.

Controls:
  Left/Right  Previous / next seed
  S           Cycle strategy
  R           Random seed
  Esc         Quit
"""
from __future__ import annotations

import argparse
import random
import sys
from dataclasses import dataclass, field

import pygame

from skill_issue.personality import describe_personality
from skill_issue.sim import AcceptRescue, PushThrough, STRATEGIES, SimulationResult, get_strategy, simulate

SCREEN_W, SCREEN_H = 1000, 560
PLOT_LEFT, PLOT_RIGHT = 60, SCREEN_W - 20
PLOT_TOP, PLOT_BOTTOM = 70, SCREEN_H - 60
FPS = 30

BG_COLOR = (22, 22, 30)
GRID_COLOR = (50, 50, 64)
TEXT_COLOR = (210, 210, 220)
ENERGY_COLOR = (240, 190, 60)
MOMENTUM_COLOR = (90, 170, 240)
RESCUE_COLOR = (120, 220, 120)
NIGHT_COLOR = (180, 110, 220)


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Week Viewer — skill-issue simulation plot")
    p.add_argument("--seed", type=int, default=42, help="Starting seed (default: 42)")
    p.add_argument("--strategy", choices=sorted(STRATEGIES), default="human",
                   help="Strategy (default: human)")
    return p.parse_args()


@dataclass
class Trace:
    """One point per action, plus where each day starts."""

    result: SimulationResult
    energy: list[float] = field(default_factory=list)
    momentum: list[float] = field(default_factory=list)
    day_starts: list[int] = field(default_factory=list)
    rescues: list[int] = field(default_factory=list)
    all_nighters: list[int] = field(default_factory=list)


def run_trace(seed: int, strategy: str) -> Trace:
    energy: list[float] = []
    momentum: list[float] = []
    rescues: list[int] = []
    nights: list[int] = []
    day_starts: list[int] = []
    last_day = [-1]

    def record(state, decision, result) -> None:
        if state.day_index != last_day[0]:
            day_starts.append(len(energy))
            last_day[0] = state.day_index
        energy.append(state.energy)
        momentum.append(state.momentum)
        # Indices line up once the starting point is prepended.
        if isinstance(decision, AcceptRescue):
            rescues.append(len(energy))
        elif isinstance(decision, PushThrough):
            nights.append(len(energy))

    result = simulate(seed, get_strategy(strategy), on_action=record)
    energy.insert(0, result.stats.energy_start)
    momentum.insert(0, result.stats.momentum_start)
    return Trace(result, energy, momentum, day_starts, rescues, nights)


def _x(i: int, n: int) -> float:
    return PLOT_LEFT + (PLOT_RIGHT - PLOT_LEFT) * i / max(1, n - 1)


def _y(v: float) -> float:
    return PLOT_BOTTOM - (PLOT_BOTTOM - PLOT_TOP) * v


def draw(screen: pygame.Surface, font: pygame.font.Font, trace: Trace, strategy: str) -> None:
    screen.fill(BG_COLOR)
    n = len(trace.energy)

    for level in (0.0, 0.25, 0.5, 0.75, 1.0):
        y = _y(level)
        pygame.draw.line(screen, GRID_COLOR, (PLOT_LEFT, y), (PLOT_RIGHT, y))
        screen.blit(font.render(f"{level:.2f}", True, TEXT_COLOR), (10, y - 7))

    for day, start in zip(trace.result.days, trace.day_starts):
        x = _x(start, n)
        pygame.draw.line(screen, GRID_COLOR, (x, PLOT_TOP), (x, PLOT_BOTTOM))
        screen.blit(font.render(day.day[:3], True, TEXT_COLOR), (x + 4, PLOT_BOTTOM + 8))

    for i in trace.rescues:
        pygame.draw.circle(screen, RESCUE_COLOR, (_x(i, n), _y(trace.energy[i])), 5)
    for i in trace.all_nighters:
        pygame.draw.circle(screen, NIGHT_COLOR, (_x(i, n), _y(trace.energy[i])), 5, 2)

    for values, color in ((trace.energy, ENERGY_COLOR), (trace.momentum, MOMENTUM_COLOR)):
        if n > 1:
            points = [(_x(i, n), _y(v)) for i, v in enumerate(values)]
            pygame.draw.lines(screen, color, False, points, 2)

    r = trace.result
    status = "survived" if r.survived else "burned out"
    header = (f"seed {r.seed}  |  {strategy}  |  {describe_personality(r.personality)}  |  "
              f"{status}  |  {r.stats.succeeded}/{r.stats.attempted} tasks  |  {r.roll_count} rolls")
    screen.blit(font.render(header, True, TEXT_COLOR), (PLOT_LEFT, 20))
    legend = font.render("energy", True, ENERGY_COLOR)
    screen.blit(legend, (PLOT_LEFT, 42))
    screen.blit(font.render("momentum", True, MOMENTUM_COLOR), (PLOT_LEFT + legend.get_width() + 16, 42))
    screen.blit(font.render("<-/-> seed   S strategy   R random   Esc quit", True, GRID_COLOR),
                (PLOT_LEFT, SCREEN_H - 24))


def main() -> None:
    args = parse_args()
    strategies = sorted(STRATEGIES)
    seed, strategy = args.seed, args.strategy

    pygame.init()
    screen = pygame.display.set_mode((SCREEN_W, SCREEN_H))
    pygame.display.set_caption("Week Viewer — skill-issue")
    clock = pygame.time.Clock()
    font = pygame.font.SysFont("monospace", 13)

    trace = run_trace(seed, strategy)
    running = True
    while running:
        clock.tick(FPS)
        changed = False
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    running = False
                elif event.key == pygame.K_RIGHT:
                    seed += 1
                    changed = True
                elif event.key == pygame.K_LEFT:
                    seed = max(0, seed - 1)
                    changed = True
                elif event.key == pygame.K_s:
                    strategy = strategies[(strategies.index(strategy) + 1) % len(strategies)]
                    changed = True
                elif event.key == pygame.K_r:
                    seed = random.randrange(2147483647)
                    changed = True
        if changed:
            trace = run_trace(seed, strategy)
        draw(screen, font, trace, strategy)
        pygame.display.flip()

    pygame.quit()
    sys.exit()


if __name__ == "__main__":
    main()
