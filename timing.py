# Frame-driven timing: the fixed-rate tick clock and one-shot deferred callbacks.
from __future__ import annotations

from dataclasses import dataclass, field
import itertools
import logging
from typing import Callable, Protocol


logger = logging.getLogger(__name__)


class Scheduler(Protocol):
    """Anything that can run a callback once after a delay in milliseconds."""

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> object: ...


class TickClock:
    """
    Accumulated-time clock that decides when one simulation step fires.

    The accumulator is reset to zero on every fire, so a long frame never
    produces more than one step; leftover time is simply dropped.
    """

    def __init__(self, interval_ms: float) -> None:
        if interval_ms <= 0:
            raise ValueError("interval_ms must be > 0")
        self.interval_ms = float(interval_ms)
        self.accumulated_ms = 0.0

    def reset(self) -> None:
        self.accumulated_ms = 0.0

    def advance(self, elapsed_ms: float) -> bool:
        """Add frame time; return True when a step should fire this frame."""
        self.accumulated_ms += max(0.0, float(elapsed_ms))
        if self.accumulated_ms >= self.interval_ms:
            self.accumulated_ms = 0.0
            return True
        return False

    @property
    def progress(self) -> float:
        """Fraction of the current interval already elapsed, clamped to [0, 1]."""
        return min(1.0, max(0.0, self.accumulated_ms / self.interval_ms))


@dataclass(order=True)
class _Timer:
    due_ms: float
    seq: int
    callback: Callable[[], None] = field(compare=False)


class FrameTimers:
    """
    One-shot timers pumped by elapsed frame time instead of the wall clock.

    Runs independently of the tick clock and of pause state, the same way a
    browser `setTimeout` keeps running behind a paused animation loop.
    """

    def __init__(self) -> None:
        self.now_ms = 0.0
        self._timers: list[_Timer] = []
        self._seq = itertools.count()

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> int:
        """Schedule `callback` to run once `delay_ms` from now; returns a handle."""
        seq = next(self._seq)
        self._timers.append(_Timer(self.now_ms + max(0.0, float(delay_ms)), seq, callback))
        return seq

    def cancel(self, handle: int) -> bool:
        before = len(self._timers)
        self._timers = [t for t in self._timers if t.seq != handle]
        return len(self._timers) != before

    @property
    def pending(self) -> int:
        return len(self._timers)

    def advance(self, elapsed_ms: float) -> int:
        """Move time forward and fire every due timer in due order. Returns count fired."""
        self.now_ms += max(0.0, float(elapsed_ms))
        due = sorted(t for t in self._timers if t.due_ms <= self.now_ms)
        if not due:
            return 0
        due_seqs = {t.seq for t in due}
        self._timers = [t for t in self._timers if t.seq not in due_seqs]
        for timer in due:
            logger.debug("Firing deferred timer %d at %.1f ms", timer.seq, self.now_ms)
            timer.callback()
        return len(due)
