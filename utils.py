# Shared simulation helpers: config, scripted player, episode runner, stats.
from __future__ import annotations

from dataclasses import dataclass
import logging
import random
from typing import Callable

import numpy as np

try:
    from .game_logic import EventKind, InvalidAnswer, MathSnakeGame, SnakeConfig, aim_heading
    from .math_problems import MathProblemGenerator
except ImportError:
    from game_logic import EventKind, InvalidAnswer, MathSnakeGame, SnakeConfig, aim_heading
    from math_problems import MathProblemGenerator


logger = logging.getLogger(__name__)

FRAME_CHOICES_MS = (8, 16, 33)


@dataclass
class SimConfig:
    width: int = 32
    height: int = 24
    tick_interval_ms: int = 300
    frame_ms: float = 16.0
    episodes: int = 50
    max_ticks: int = 2000
    accuracy: float = 0.8
    think_ms: float = 600.0
    seed: int | None = None


@dataclass
class EpisodeResult:
    score: int
    level: int
    length: int
    ticks: int
    targets: int
    wrong_answers: int
    game_over: bool


class ScriptedPlayer:
    """
    Stand-in for a human at the answer box.

    Waits `think_ms` after each new problem, then answers correctly with
    probability `accuracy`. After a correct answer it re-submits whenever the
    snake has drifted off course, since one re-aim only fixes one axis.
    """

    def __init__(self, accuracy: float, think_ms: float, rng: random.Random) -> None:
        if not 0.0 <= accuracy <= 1.0:
            raise ValueError("accuracy must be between 0 and 1")
        self.accuracy = accuracy
        self.think_ms = think_ms
        self.rng = rng
        self.wrong_answers = 0
        self._serial = -1
        self._waited_ms = 0.0
        self._solved = False
        self._cooldown_ms = 0.0

    def observe(self, game: MathSnakeGame, elapsed_ms: float) -> None:
        """Called once per frame before the engine advances."""
        if not game.state.running or game.state.paused:
            return
        if game.target.serial != self._serial:
            self._serial = game.target.serial
            self._waited_ms = 0.0
            self._solved = False
            self._cooldown_ms = 0.0

        self._waited_ms += elapsed_ms
        self._cooldown_ms = max(0.0, self._cooldown_ms - elapsed_ms)
        if self._waited_ms < self.think_ms or self._cooldown_ms > 0:
            return

        if self._solved:
            wanted = aim_heading(game.head, game.target.cell)
            if wanted is None or wanted == game.direction:
                return

        answer = game.target.problem.answer
        if self.rng.random() >= self.accuracy:
            answer += self.rng.choice((-1, 1))
        try:
            correct = game.submit_answer(str(answer))
        except InvalidAnswer as exc:
            logger.debug("Scripted answer rejected: %s", exc)
            return

        # Let at least one tick pass before judging the new course.
        self._cooldown_ms = game.config.tick_interval_ms + game.config.redirect_delay_ms
        if correct:
            self._solved = True
        else:
            self.wrong_answers += 1
            self._waited_ms = 0.0


def make_game(cfg: SimConfig, rng: random.Random) -> MathSnakeGame:
    game_cfg = SnakeConfig(
        width=cfg.width,
        height=cfg.height,
        tick_interval_ms=cfg.tick_interval_ms,
    )
    return MathSnakeGame(game_cfg, problem_source=MathProblemGenerator(rng), rng=rng)


def run_episode(
    cfg: SimConfig,
    rng: random.Random | None = None,
    render_step: Callable[[MathSnakeGame, int], None] | None = None,
) -> EpisodeResult:
    """Play one headless game at a fixed frame rate until game over or `max_ticks`."""
    rng = rng or random.Random(cfg.seed)
    game = make_game(cfg, rng)
    player = ScriptedPlayer(cfg.accuracy, cfg.think_ms, rng)
    game.start()

    targets = 0
    while game.state.running and game.tick_count < cfg.max_ticks:
        player.observe(game, cfg.frame_ms)
        ticks_before = game.tick_count
        snap = game.advance(cfg.frame_ms)
        if render_step is not None and game.tick_count != ticks_before:
            render_step(game, game.tick_count)
        targets += sum(1 for e in snap.events if e.kind is EventKind.TARGET_REACHED)

    return EpisodeResult(
        score=game.state.score,
        level=game.state.level,
        length=len(game.snake),
        ticks=game.tick_count,
        targets=targets,
        wrong_answers=player.wrong_answers,
        game_over=game.state.game_over,
    )


def chunked_mean(values: list[float], chunk_size: int) -> tuple[np.ndarray, np.ndarray]:
    """Compute mean value per fixed-size chunk."""
    if chunk_size <= 0:
        raise ValueError("chunk_size must be > 0")

    arr = np.asarray(values, dtype=np.float32)
    if arr.size == 0:
        empty = np.array([], dtype=np.float32)
        return empty, empty

    x_end: list[float] = []
    means: list[float] = []
    for start in range(0, arr.size, chunk_size):
        chunk = arr[start : start + chunk_size]
        x_end.append(float(start + chunk.size))
        means.append(float(np.mean(chunk)))

    return np.asarray(x_end, dtype=np.float32), np.asarray(means, dtype=np.float32)


def summarize(results: list[EpisodeResult]) -> dict[str, float]:
    """Aggregate episode results into the numbers the CLI prints."""
    if not results:
        raise ValueError("results cannot be empty")
    scores = np.asarray([r.score for r in results], dtype=np.float32)
    return {
        "episodes": float(len(results)),
        "mean_score": float(scores.mean()),
        "median_score": float(np.median(scores)),
        "max_score": float(scores.max()),
        "std_score": float(scores.std()),
        "mean_level": float(np.mean([r.level for r in results])),
        "mean_length": float(np.mean([r.length for r in results])),
        "mean_targets": float(np.mean([r.targets for r in results])),
        "game_over_rate": float(np.mean([r.game_over for r in results])),
    }
