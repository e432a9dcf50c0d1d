# Core Math Snake game state and rules, independent from GUI/simulation code.
from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from enum import Enum
import itertools
import logging
import math
import random
import re
from typing import Callable

try:
    from .math_problems import MathProblemGenerator, Problem, ProblemSource
    from .rendering import InterpolationFrame, RenderSnapshot
    from .timing import FrameTimers, Scheduler, TickClock
except ImportError:
    from math_problems import MathProblemGenerator, Problem, ProblemSource
    from rendering import InterpolationFrame, RenderSnapshot
    from timing import FrameTimers, Scheduler, TickClock


logger = logging.getLogger(__name__)

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")

Cell = tuple[int, int]
Heading = tuple[int, int]

RIGHT: Heading = (1, 0)
LEFT: Heading = (-1, 0)
DOWN: Heading = (0, 1)
UP: Heading = (0, -1)
HEADINGS = (RIGHT, LEFT, DOWN, UP)

# Bounds used by the GUI and CLI when validating user input.
MIN_GRID_SIZE = 5
MAX_GRID_SIZE = 60
MIN_CELL_SIZE = 12
MAX_CELL_SIZE = 48
MIN_TICK_MS = 60
MAX_TICK_MS = 1000


@dataclass
class SnakeConfig:
    """Runtime settings shared between the logic layer and front ends."""
    width: int = 32
    height: int = 24
    cell_size: int = 25
    tick_interval_ms: int = 300
    redirect_delay_ms: int = 100
    initial_lives: int = 3
    max_level: int = 5
    points_per_level: int = 10          # score per target = level * this
    level_up_every: int = 100
    target_attempts: int = 50
    target_radius: float = 1.5
    theme_count: int = 8

    def validate(self) -> None:
        if self.width < 1 or self.height < 1:
            raise ValueError("Grid width and height must be >= 1.")
        if self.tick_interval_ms <= 0:
            raise ValueError("tick_interval_ms must be > 0.")
        if self.redirect_delay_ms < 0:
            raise ValueError("redirect_delay_ms cannot be negative.")
        if self.initial_lives < 1:
            raise ValueError("initial_lives must be >= 1.")
        if self.target_attempts < 1:
            raise ValueError("target_attempts must be >= 1.")
        if self.theme_count < 1:
            raise ValueError("theme_count must be >= 1.")


class EventKind(Enum):
    WALL_COLLISION = "wall_collision"
    SELF_COLLISION = "self_collision"
    TARGET_REACHED = "target_reached"
    LEVEL_UP = "level_up"
    GAME_OVER = "game_over"


@dataclass(frozen=True)
class GameEvent:
    kind: EventKind
    cell: Cell | None = None


class InvalidAnswer(ValueError):
    """Answer submission rejected; game state was not touched."""


@dataclass
class GameState:
    running: bool = False
    paused: bool = False
    score: int = 0
    level: int = 1
    lives: int = 3

    @property
    def game_over(self) -> bool:
        return self.lives == 0


@dataclass(frozen=True)
class Target:
    """Active grid cell paired with the problem whose answer unlocks it."""
    cell: Cell
    problem: Problem
    serial: int


def reverse_heading(heading: Heading) -> Heading:
    return -heading[0], -heading[1]


def aim_heading(head: Cell, goal: Cell) -> Heading | None:
    """
    Pick the axis-aligned heading that closes the larger offset to `goal`.

    Ties go to the horizontal axis. Returns None when already on `goal`.
    """
    dx = goal[0] - head[0]
    dy = goal[1] - head[1]
    if dx == 0 and dy == 0:
        return None
    if abs(dx) >= abs(dy):
        return (1 if dx > 0 else -1), 0
    return 0, (1 if dy > 0 else -1)


class MathSnakeGame:
    """
    Pure game state + rules (no Tkinter/UI code).

    Driven by `advance(elapsed_ms)` once per display frame. A fixed-rate tick
    clock decides when one simulation step runs; between steps only the
    interpolation progress moves. Correct answers reverse the snake at once and
    re-aim it toward the target after a short deferred delay.
    """

    def __init__(
        self,
        config: SnakeConfig | None = None,
        problem_source: ProblemSource | None = None,
        scheduler: Scheduler | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.config = config or SnakeConfig()
        self.config.validate()
        self.problems: ProblemSource = problem_source or MathProblemGenerator()
        self.rng = rng or random.Random()
        self.timers = FrameTimers()
        # External schedulers are not pumped by advance().
        self.scheduler: Scheduler = scheduler or self.timers
        self.clock = TickClock(self.config.tick_interval_ms)
        self.theme_index = 0
        self.epoch = 0
        self._target_serial = itertools.count(1)
        self._listeners: list[Callable[[GameEvent], None]] = []
        self._frame_events: list[GameEvent] = []
        self.reset()

    # ------------------------------------------------------------------ state

    def reset(self) -> None:
        """Initialize a fresh game: full lives, level 1, centered snake, new target."""
        self.epoch += 1
        self.state = GameState(lives=self.config.initial_lives)
        self.tick_count = 0
        self.problems.set_level(self.state.level)
        self.clock.reset()
        self._respawn_snake()
        self.target: Target = self._new_target()

    def _respawn_snake(self) -> None:
        center = (self.config.width // 2, self.config.height // 2)
        self.snake: deque[Cell] = deque([center])  # ordered body, head at index 0
        self.direction: Heading = RIGHT
        self.pending_direction: Heading = RIGHT    # applied on the next tick
        self.frame = InterpolationFrame(tuple(self.snake), tuple(self.snake), 0.0)

    @property
    def head(self) -> Cell:
        return self.snake[0]

    # --------------------------------------------------------------- commands

    def start(self) -> None:
        """Begin ticking. Ignored while already running or after game over."""
        if self.state.running:
            return
        if self.state.game_over:
            logger.info("Start ignored: game over, restart required")
            return
        self.state.running = True
        self.state.paused = False
        self.clock.reset()
        logger.info("Game started (level %d, lives %d)", self.state.level, self.state.lives)

    def pause(self) -> None:
        """Toggle pause. While paused no tick fires and progress is frozen."""
        self.state.paused = not self.state.paused
        logger.info("Game %s", "paused" if self.state.paused else "resumed")

    def resume(self) -> None:
        if self.state.paused:
            self.pause()

    def restart(self) -> None:
        """Back to the initial configuration; in-flight re-aims become no-ops."""
        self.reset()
        logger.info("Game restarted")

    def queue_heading(self, heading: Heading) -> None:
        """Queue a steering input; reject instant 180-degree turns."""
        if heading not in HEADINGS:
            return
        if len(self.snake) > 1 and heading == reverse_heading(self.direction):
            return
        self.pending_direction = heading

    def submit_answer(self, raw: str) -> bool:
        """
        Check an answer against the active target.

        Any valid submission reverses the snake immediately. A correct one also
        schedules a re-aim toward the target after `redirect_delay_ms`.
        Raises InvalidAnswer (without touching state) when the game is not
        running, is paused, or `raw` is not an integer.
        """
        if not self.state.running:
            raise InvalidAnswer("Please start the game first!")
        if self.state.paused:
            raise InvalidAnswer("Game is paused.")
        text = (raw or "").strip()
        if not text:
            raise InvalidAnswer("Please enter an answer!")
        if not _INTEGER_RE.fullmatch(text):
            raise InvalidAnswer("Please enter a valid number!")
        value = int(text)

        self.pending_direction = reverse_heading(self.direction)

        target = self.target
        if value != target.problem.answer:
            logger.debug("Wrong answer %d (expected %d)", value, target.problem.answer)
            return False

        epoch = self.epoch
        self.scheduler.call_later(
            self.config.redirect_delay_ms,
            lambda: self._redirect_to_target(epoch, target),
        )
        logger.debug("Correct answer %d, re-aim scheduled", value)
        return True

    def _redirect_to_target(self, epoch: int, target: Target) -> None:
        """Deferred half of a correct answer; stale once restarted or retargeted."""
        if epoch != self.epoch or target is not self.target:
            logger.debug("Dropping stale re-aim (epoch %d, target %d)", epoch, target.serial)
            return
        heading = aim_heading(self.head, target.cell)
        if heading is not None:
            self.pending_direction = heading

    # ----------------------------------------------------------------- events

    def add_listener(self, listener: Callable[[GameEvent], None]) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: Callable[[GameEvent], None]) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _emit(self, kind: EventKind, cell: Cell | None = None) -> None:
        event = GameEvent(kind, cell)
        self._frame_events.append(event)
        for listener in list(self._listeners):
            listener(event)

    # --------------------------------------------------------------- per frame

    def advance(self, elapsed_ms: float) -> RenderSnapshot:
        """Per-frame entry point: pump deferred actions, maybe step, return a snapshot."""
        self.timers.advance(elapsed_ms)
        if self.state.running and not self.state.paused:
            if self.clock.advance(elapsed_ms):
                self.step()
            else:
                self.frame = InterpolationFrame(self.frame.before, self.frame.after, self.clock.progress)
        return self.snapshot(drain_events=True)

    def step(self) -> None:
        """Run exactly one discrete simulation step."""
        self.tick_count += 1
        before = tuple(self.snake)

        self.direction = self.pending_direction
        new_head = (self.head[0] + self.direction[0], self.head[1] + self.direction[1])

        if not self._in_bounds(new_head):
            self._handle_collision(EventKind.WALL_COLLISION, new_head)
            return
        if new_head in self.snake:
            self._handle_collision(EventKind.SELF_COLLISION, new_head)
            return

        self.snake.appendleft(new_head)
        if self._near_target(new_head):
            # Tail stays: net growth of one segment.
            self._handle_target_reached()
        else:
            self.snake.pop()

        self.frame = InterpolationFrame(before, tuple(self.snake), 0.0)

    def _in_bounds(self, cell: Cell) -> bool:
        x, y = cell
        return 0 <= x < self.config.width and 0 <= y < self.config.height

    def _near_target(self, cell: Cell) -> bool:
        tx, ty = self.target.cell
        return math.hypot(cell[0] - tx, cell[1] - ty) < self.config.target_radius

    def _handle_collision(self, kind: EventKind, cell: Cell) -> None:
        self.state.lives = max(0, self.state.lives - 1)
        self._emit(kind, cell)
        if self.state.lives == 0:
            self.state.running = False
            # Snake stays frozen where it died.
            still = tuple(self.snake)
            self.frame = InterpolationFrame(still, still, 0.0)
            logger.info("Game over: final score %d at level %d", self.state.score, self.state.level)
            self._emit(EventKind.GAME_OVER, self.head)
            return
        logger.info("%s at %s, %d lives left", kind.value, cell, self.state.lives)
        self._respawn_snake()

    def _handle_target_reached(self) -> None:
        state = self.state
        reached = self.target.cell
        state.score += state.level * self.config.points_per_level
        self.theme_index = (self.theme_index + 1) % self.config.theme_count

        leveled = False
        if state.score > 0 and state.score % self.config.level_up_every == 0:
            previous = state.level
            state.level = min(self.config.max_level, state.level + 1)
            self.problems.set_level(state.level)
            leveled = state.level > previous

        # Listeners see the replacement target already installed.
        self.target = self._new_target()
        self._emit(EventKind.TARGET_REACHED, reached)
        if leveled:
            logger.info("Level up: %d (score %d)", state.level, state.score)
            self._emit(EventKind.LEVEL_UP, reached)

    def _new_target(self) -> Target:
        """Ask for a new problem and place it off the snake (best effort)."""
        problem = self.problems.generate()
        occupied = set(self.snake)
        cell = self.head
        for _ in range(self.config.target_attempts):
            cell = (self.rng.randrange(self.config.width), self.rng.randrange(self.config.height))
            if cell not in occupied:
                break
        else:
            logger.warning(
                "No free target cell after %d attempts; placing on %s anyway",
                self.config.target_attempts,
                cell,
            )
        return Target(cell, problem, next(self._target_serial))

    # --------------------------------------------------------------- snapshot

    def snapshot(self, drain_events: bool = False) -> RenderSnapshot:
        """Read-only view for the presentation layer."""
        events: tuple[GameEvent, ...] = ()
        if drain_events:
            events = tuple(self._frame_events)
            self._frame_events.clear()
        state = self.state
        return RenderSnapshot(
            snake_cells=tuple(self.snake),
            positions=self.frame.positions(),
            target_cell=self.target.cell,
            prompt=self.target.problem.prompt,
            score=state.score,
            level=state.level,
            lives=state.lives,
            running=state.running,
            paused=state.paused,
            game_over=state.game_over,
            progress=self.frame.progress,
            theme_index=self.theme_index,
            events=events,
        )
