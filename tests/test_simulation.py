"""Tests for utils.py and simulate.py - the headless scripted-player harness."""

import os
import random
import sys
from unittest.mock import MagicMock

import pytest

# Add project root to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from game_logic import LEFT, RIGHT, MathSnakeGame, SnakeConfig, Target
from math_problems import Problem
from simulate import config_from_args, main, parse_args, print_summary, simulate
from utils import EpisodeResult, ScriptedPlayer, SimConfig, chunked_mean, run_episode, summarize


def small_cfg(**overrides):
    values = dict(width=12, height=10, episodes=3, max_ticks=120, seed=123)
    values.update(overrides)
    return SimConfig(**values)


class TestScriptedPlayer:

    def _game(self):
        problems = MagicMock()
        problems.generate.return_value = Problem("6 + 1", 7, "addition")
        game = MathSnakeGame(SnakeConfig(width=10, height=10), problem_source=problems, rng=random.Random(0))
        game.start()
        game.target = Target((5, 1), game.target.problem, game.target.serial)
        return game

    def test_invalid_accuracy_raises(self):
        with pytest.raises(ValueError):
            ScriptedPlayer(1.5, 0, random.Random(0))

    def test_waits_before_answering(self):
        game = self._game()
        player = ScriptedPlayer(1.0, 500, random.Random(0))
        player.observe(game, 100)
        assert game.pending_direction == RIGHT

    def test_correct_answer_triggers_reaim(self):
        game = self._game()
        player = ScriptedPlayer(1.0, 0, random.Random(0))
        player.observe(game, 16)
        assert game.pending_direction == LEFT
        game.advance(100)
        assert game.pending_direction == (0, -1)
        assert player.wrong_answers == 0

    def test_wrong_answers_are_counted(self):
        game = self._game()
        player = ScriptedPlayer(0.0, 0, random.Random(0))
        player.observe(game, 16)
        assert player.wrong_answers == 1
        assert game.timers.pending == 0

    def test_idle_when_paused(self):
        game = self._game()
        game.pause()
        player = ScriptedPlayer(1.0, 0, random.Random(0))
        player.observe(game, 16)
        assert game.pending_direction == RIGHT


class TestRunEpisode:

    def test_episode_respects_bounds(self):
        result = run_episode(small_cfg())
        assert 0 <= result.ticks <= 120
        assert 1 <= result.level <= 5
        assert result.score >= 0
        assert result.length >= 1
        assert result.score % 10 == 0

    def test_same_seed_same_result(self):
        assert run_episode(small_cfg()) == run_episode(small_cfg())

    def test_render_step_called_per_tick(self):
        calls = []
        result = run_episode(small_cfg(max_ticks=30), render_step=lambda game, tick: calls.append(tick))
        assert calls == list(range(1, result.ticks + 1))

    def test_always_wrong_player_is_counted(self):
        result = run_episode(small_cfg(accuracy=0.0, think_ms=0, max_ticks=200))
        assert result.wrong_answers > 0


class TestStats:

    def test_chunked_mean(self):
        x, mean = chunked_mean([1, 2, 3, 4, 5], chunk_size=2)
        assert x.tolist() == [2.0, 4.0, 5.0]
        assert mean.tolist() == [1.5, 3.5, 5.0]

    def test_chunked_mean_rejects_bad_chunk(self):
        with pytest.raises(ValueError):
            chunked_mean([1.0], chunk_size=0)

    def test_summarize(self):
        results = [
            EpisodeResult(score=10, level=1, length=2, ticks=50, targets=1, wrong_answers=0, game_over=True),
            EpisodeResult(score=30, level=1, length=4, ticks=90, targets=3, wrong_answers=2, game_over=False),
        ]
        stats = summarize(results)
        assert stats["mean_score"] == pytest.approx(20.0)
        assert stats["max_score"] == 30.0
        assert stats["mean_targets"] == pytest.approx(2.0)
        assert stats["game_over_rate"] == pytest.approx(0.5)

    def test_summarize_empty_raises(self):
        with pytest.raises(ValueError):
            summarize([])


class TestCli:

    def test_simulate_runs_requested_episodes(self):
        assert len(simulate(small_cfg(episodes=2), show_progress=False)) == 2

    def test_simulate_rejects_zero_episodes(self):
        with pytest.raises(ValueError):
            simulate(small_cfg(episodes=0), show_progress=False)

    def test_config_from_args_validates_grid(self):
        args = parse_args(["--width", "2"])
        with pytest.raises(ValueError):
            config_from_args(args)

    def test_config_from_args(self):
        cfg = config_from_args(parse_args(["--episodes", "4", "--tick-ms", "200", "--seed", "9"]))
        assert cfg.episodes == 4
        assert cfg.tick_interval_ms == 200
        assert cfg.seed == 9

    def test_print_summary(self, capsys):
        print_summary([EpisodeResult(20, 1, 3, 40, 2, 0, True)])
        out = capsys.readouterr().out
        assert "SIMULATION RESULTS" in out
        assert "Mean score" in out

    def test_main_writes_plot(self, tmp_path, capsys):
        plot_path = tmp_path / "scores.png"
        main([
            "--episodes", "2",
            "--width", "10",
            "--height", "10",
            "--max-ticks", "60",
            "--seed", "1",
            "--no-progress",
            "--plot", str(plot_path),
        ])
        assert plot_path.exists()
        assert "SIMULATION RESULTS" in capsys.readouterr().out
