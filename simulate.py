# Headless simulation entrypoint: scripted players, summary table, optional matplotlib chart.
from __future__ import annotations

import argparse
import logging
import os
import random

# Keep matplotlib cache local for environments without writable home config.
LOCAL_MPLCONFIG = os.path.join(os.path.dirname(os.path.abspath(__file__)), ".mplconfig")
os.makedirs(LOCAL_MPLCONFIG, exist_ok=True)
os.environ.setdefault("MPLCONFIGDIR", LOCAL_MPLCONFIG)

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np

try:
    from .game_logic import MAX_GRID_SIZE, MAX_TICK_MS, MIN_GRID_SIZE, MIN_TICK_MS
    from .utils import FRAME_CHOICES_MS, EpisodeResult, SimConfig, chunked_mean, run_episode, summarize
except ImportError:
    from game_logic import MAX_GRID_SIZE, MAX_TICK_MS, MIN_GRID_SIZE, MIN_TICK_MS
    from utils import FRAME_CHOICES_MS, EpisodeResult, SimConfig, chunked_mean, run_episode, summarize


logger = logging.getLogger(__name__)


def _print_progress_bar(episode: int, total: int, bar_length: int = 40) -> None:
    """Print a compact progress bar in the terminal."""
    total_safe = max(1, int(total))
    percent = min(1.0, max(0.0, episode / total_safe))
    filled = int(bar_length * percent)
    bar = "#" * filled + "-" * (bar_length - filled)
    print(f"\rProgress: |{bar}| {episode}/{total_safe} ({percent * 100:.1f}%)", end="", flush=True)


def simulate(cfg: SimConfig, show_progress: bool = True) -> list[EpisodeResult]:
    """Run `cfg.episodes` independent games with one shared seeded RNG."""
    if cfg.episodes <= 0:
        raise ValueError("episodes must be > 0")

    rng = random.Random(cfg.seed)
    results: list[EpisodeResult] = []
    for episode in range(1, cfg.episodes + 1):
        result = run_episode(cfg, rng=rng)
        results.append(result)
        logger.debug(
            "Episode %d: score=%d level=%d length=%d ticks=%d",
            episode, result.score, result.level, result.length, result.ticks,
        )
        if show_progress:
            _print_progress_bar(episode, cfg.episodes)
    if show_progress:
        print()
    return results


def print_summary(results: list[EpisodeResult]) -> None:
    stats = summarize(results)
    print("=" * 44)
    print("SIMULATION RESULTS")
    print("=" * 44)
    rows = (
        ("Episodes", stats["episodes"], "{:.0f}"),
        ("Mean score", stats["mean_score"], "{:.2f}"),
        ("Median score", stats["median_score"], "{:.2f}"),
        ("Max score", stats["max_score"], "{:.0f}"),
        ("Std dev", stats["std_score"], "{:.2f}"),
        ("Mean level", stats["mean_level"], "{:.2f}"),
        ("Mean length", stats["mean_length"], "{:.2f}"),
        ("Targets / game", stats["mean_targets"], "{:.2f}"),
        ("Game-over rate", stats["game_over_rate"] * 100, "{:.1f}%"),
    )
    for name, value, fmt in rows:
        print(f"{name:<20} {fmt.format(value):>20}")
    print("=" * 44)


def save_score_plot(results: list[EpisodeResult], path: str, chunk_size: int = 10) -> None:
    """Write a trend + distribution chart of episode scores to `path`."""
    scores = [float(r.score) for r in results]
    fig, (ax_trend, ax_hist) = plt.subplots(2, 1, figsize=(10, 8))

    ax_trend.set_title(f"Score Trend (Average per {chunk_size} Episodes)")
    ax_trend.set_xlabel("Episode")
    ax_trend.set_ylabel("Score")
    ax_trend.grid(alpha=0.25)
    x, mean = chunked_mean(scores, chunk_size=chunk_size)
    if x.size > 0:
        ax_trend.plot(x, mean, color="#1f77b4", linewidth=2.2, marker="o", markersize=3, label="Average score")
        ax_trend.legend(loc="upper left")

    ax_hist.set_title("Score Distribution")
    ax_hist.set_xlabel("Score")
    ax_hist.set_ylabel("Count")
    ax_hist.grid(alpha=0.2)
    if scores:
        ax_hist.hist(scores, bins=min(30, max(1, len(set(scores)))), color="#44b5a4", alpha=0.85, edgecolor="#17323a")
        mean_all = float(np.mean(scores))
        ax_hist.axvline(mean_all, color="#1f77b4", linestyle="--", linewidth=1.6, label=f"Mean: {mean_all:.2f}")
        ax_hist.legend(loc="upper right")

    fig.tight_layout()
    fig.savefig(path)
    plt.close(fig)
    logger.info("Saved score chart to %s", path)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    defaults = SimConfig()
    parser = argparse.ArgumentParser(description="Headless Math Snake simulation")
    parser.add_argument("--episodes", type=int, default=defaults.episodes)
    parser.add_argument("--width", type=int, default=defaults.width)
    parser.add_argument("--height", type=int, default=defaults.height)
    parser.add_argument("--tick-ms", type=int, default=defaults.tick_interval_ms, help="Tick interval in ms")
    parser.add_argument("--frame-ms", type=float, default=defaults.frame_ms, choices=FRAME_CHOICES_MS)
    parser.add_argument("--max-ticks", type=int, default=defaults.max_ticks)
    parser.add_argument("--accuracy", type=float, default=defaults.accuracy, help="Chance of a correct answer")
    parser.add_argument("--think-ms", type=float, default=defaults.think_ms, help="Delay before answering")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--plot", default=None, help="Save a score chart to this path (PNG)")
    parser.add_argument("--no-progress", action="store_true", help="Disable the progress bar")
    parser.add_argument("--log-level", default="WARNING", choices=("DEBUG", "INFO", "WARNING", "ERROR"))
    return parser.parse_args(argv)


def config_from_args(args: argparse.Namespace) -> SimConfig:
    for label, value in (("width", args.width), ("height", args.height)):
        if not (MIN_GRID_SIZE <= value <= MAX_GRID_SIZE):
            raise ValueError(f"{label} must be between {MIN_GRID_SIZE} and {MAX_GRID_SIZE}.")
    if not (MIN_TICK_MS <= args.tick_ms <= MAX_TICK_MS):
        raise ValueError(f"tick-ms must be between {MIN_TICK_MS} and {MAX_TICK_MS}.")
    return SimConfig(
        width=args.width,
        height=args.height,
        tick_interval_ms=args.tick_ms,
        frame_ms=args.frame_ms,
        episodes=args.episodes,
        max_ticks=args.max_ticks,
        accuracy=args.accuracy,
        think_ms=args.think_ms,
        seed=args.seed,
    )


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    cfg = config_from_args(args)
    results = simulate(cfg, show_progress=not args.no_progress)
    print_summary(results)
    if args.plot:
        save_score_plot(results, args.plot)


if __name__ == "__main__":
    main()
