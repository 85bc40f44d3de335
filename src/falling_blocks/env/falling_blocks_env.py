from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from falling_blocks.game import COLORS, Action, Difficulty, GameConfig, GameSession, ManualScheduler


def _hex_to_rgb(value: str) -> Tuple[int, int, int]:
    value = value.lstrip("#")
    return int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16)


EMPTY_RGB = (30, 30, 36)


class FallingBlocksEnv(gym.Env):
    """Gymnasium view of a ``GameSession``.

    Each step applies one ``Action`` and then advances the session's virtual
    clock by ``ms_per_step``, so gravity ticks arrive at the pace set by the
    difficulty. The reward is the score gained during the step.
    """

    metadata = {"render_modes": ["rgb_array"], "render_fps": 10}

    def __init__(self, config: Optional[GameConfig] = None, render_mode: Optional[str] = None,
                 difficulty: Difficulty | str = Difficulty.EASY,
                 ms_per_step: int = 100,
                 max_episode_steps: int = 5000) -> None:
        super().__init__()
        self.scheduler = ManualScheduler()
        self.game = GameSession(config, scheduler=self.scheduler)
        self.difficulty = Difficulty.parse(difficulty)
        self.ms_per_step = int(ms_per_step)
        self.max_episode_steps = int(max_episode_steps)
        self.render_mode = render_mode

        h, w = self.game.config.height, self.game.config.width
        n_kinds = len(COLORS)
        self.observation_space = spaces.Dict(
            {
                "board": spaces.Box(low=0, high=n_kinds, shape=(h, w), dtype=np.int8),
                "piece": spaces.Box(low=0, high=1, shape=(h, w), dtype=np.int8),
                "next": spaces.Discrete(n_kinds + 1),
            }
        )
        self.action_space = spaces.Discrete(len(Action))
        self._steps = 0

    def _get_obs(self) -> Dict[str, Any]:
        state = self.game.get_state()
        return {
            "board": np.clip(state, 0, None).astype(np.int8),
            "piece": (state < 0).astype(np.int8),
            "next": int(self.game.next_piece.kind),
        }

    def _get_info(self) -> Dict[str, Any]:
        return {
            "score": self.game.score,
            "lines_cleared_total": self.game.lines_cleared_total,
            "pieces_locked": self.game.pieces_locked,
            "steps": self._steps,
        }

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        if seed is not None:
            self.game.rng.seed(seed)
        difficulty = (options or {}).get("difficulty", self.difficulty)
        self.game.start("agent", difficulty)
        self._steps = 0
        return self._get_obs(), self._get_info()

    def step(self, action: int):
        if not self.game.active:
            raise RuntimeError("step() called on a finished episode; call reset() first")
        before = self.game.score
        self.game.step(Action(int(action)))
        if self.game.active:
            self.scheduler.advance(self.ms_per_step)
        self._steps += 1

        reward = float(self.game.score - before)
        terminated = bool(self.game.game_over)
        truncated = not terminated and self._steps >= self.max_episode_steps
        return self._get_obs(), reward, terminated, truncated, self._get_info()

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode != "rgb_array":
            return None
        state = self.game.get_state()
        cell = 12
        h, w = state.shape
        img = np.zeros((h * cell, w * cell, 3), dtype=np.uint8)
        for y in range(h):
            for x in range(w):
                v = abs(int(state[y, x]))
                color = _hex_to_rgb(COLORS[v]) if v else EMPTY_RGB
                img[y * cell : (y + 1) * cell, x * cell : (x + 1) * cell, :] = color
        return img

    def close(self) -> None:
        self.game.stop()
