# Render-only views of the engine: interpolated snake positions and frame snapshots.
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

import numpy as np


Cell = tuple[int, int]


def interpolate_snake(before: Sequence[Cell], after: Sequence[Cell], progress: float) -> np.ndarray:
    """
    Blend two consecutive snakes for smooth drawing between ticks.

    Returns a float array of shape (len(after), 2). Segments present in both
    snakes are linearly interpolated by `progress`; segments that only exist in
    `after` (growth) are passed through at their post-tick position.
    """
    t = min(1.0, max(0.0, float(progress)))
    end = np.asarray(after, dtype=np.float64).reshape(-1, 2)
    if end.size == 0:
        return end

    start = np.asarray(before, dtype=np.float64).reshape(-1, 2)
    shared = min(len(start), len(end))
    out = end.copy()
    if shared:
        out[:shared] = start[:shared] + (end[:shared] - start[:shared]) * t
    return out


@dataclass(frozen=True)
class InterpolationFrame:
    """Pre-tick and post-tick snakes plus how far the next tick has progressed."""
    before: tuple[Cell, ...]
    after: tuple[Cell, ...]
    progress: float = 0.0

    def positions(self) -> np.ndarray:
        return interpolate_snake(self.before, self.after, self.progress)


@dataclass(frozen=True)
class RenderSnapshot:
    """Read-only view handed to the presentation layer once per frame."""
    snake_cells: tuple[Cell, ...]
    positions: np.ndarray = field(compare=False, repr=False)
    target_cell: Cell | None
    prompt: str
    score: int
    level: int
    lives: int
    running: bool
    paused: bool
    game_over: bool
    progress: float
    theme_index: int
    events: tuple = ()

    @property
    def length(self) -> int:
        return len(self.snake_cells)
