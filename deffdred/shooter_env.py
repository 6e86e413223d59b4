"""
GridShooterEnv - gymnasium wrapper around the DeffDred simulation
-----------------------------------------------------------------
- One frame of the fixed-tick game per env step
- Discrete MultiDiscrete action space: [move(5), fire(2), upgrade(3)]
  (the upgrade slot is only read while an upgrade offer is pending)
- Vector observation: player state + top-K nearest enemies + top-M nearest
  hostile bullets
- Text rendering through the same renderer the terminal game uses

Quick test:
    python -m deffdred --headless
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from .config import GRID_COLS, GRID_ROWS
from .entities import Key
from .game import Game, Mode
from .render import render_frame
from .spawner import PatternSchedule
from .utils import clamp

MOVE_KEYS = (None, Key.UP, Key.DOWN, Key.LEFT, Key.RIGHT)

DEFAULT_REWARDS = {
    "R_HIT": 0.3,
    "R_KILL": 1.0,
    "R_DAMAGE": 0.5,     # per hp lost
    "R_HEAL": 0.1,       # per hp regained
    "R_SHOT": 0.01,
    "R_TIME": 0.001,
    "R_DEATH": 5.0,
}


class GridShooterEnv(gym.Env):
    """Grid shooter environment"""

    metadata = {"render_modes": ["human", "ansi"], "render_fps": 1000 // 60}

    def __init__(
        self,
        render_mode: Optional[str] = None,
        pattern_path: Optional[str] = None,
        max_steps: int = 3000,
        k_enemies: int = 5,
        m_bullets: int = 8,
        rewards: Optional[Dict[str, float]] = None,
    ):
        super().__init__()

        self.render_mode = render_mode
        self.pattern_path = pattern_path
        self.max_steps = max_steps
        self.k_enemies = k_enemies
        self.m_bullets = m_bullets
        self.rewards = dict(DEFAULT_REWARDS, **(rewards or {}))

        # move: 0 stay, 1 up, 2 down, 3 left, 4 right
        # fire: 0/1
        # upgrade: 0..2 -> offer entries 1..3
        self.action_space = spaces.MultiDiscrete([5, 2, 3])

        # Player: pos(2) hp(1) currency(1) fire-ready(1) paused(1)
        # Each enemy: rel pos(2) hp(1) hazard-firing(1)
        # Each bullet: rel pos(2) vel(2)
        obs_dim = 6 + (self.k_enemies * 4) + (self.m_bullets * 4)
        self.observation_space = spaces.Box(
            low=-1.0, high=1.0, shape=(obs_dim,), dtype=np.float32
        )

        self.game: Game = None  # type: ignore
        self._step_count = 0
        self._events: Dict[str, float] = {}

    # ----------------------------
    # Gym API
    # ----------------------------

    def reset(self, seed: Optional[int] = None, options: Optional[dict] = None):
        super().reset(seed=seed)

        schedule = PatternSchedule.from_file(self.pattern_path)
        self.game = Game(pattern=schedule, rng=self.np_random)
        self._step_count = 0
        self._events = {}

        return self._get_obs(), self._get_info()

    def step(self, action):
        move, shoot, pick = int(action[0]), int(action[1]), int(action[2])

        if self.game.mode is Mode.UPGRADE:
            self.game.choose_upgrade(pick + 1)
            self._events = {}
        else:
            keys = set()
            if MOVE_KEYS[move] is not None:
                keys.add(MOVE_KEYS[move])
            if shoot:
                keys.add(Key.FIRE)
            self._events = dict(self.game.tick(keys))

        reward = self._compute_reward()

        terminated = not self.game.running
        self._step_count += 1
        truncated = self._step_count >= self.max_steps

        obs = self._get_obs()
        info = self._get_info()

        if self.render_mode == "human":
            self.render()

        return obs, reward, terminated, truncated, info

    # ----------------------------
    # Observation / reward / info
    # ----------------------------

    def _get_obs(self) -> np.ndarray:
        g = self.game
        p = g.player
        px, py = p.x + 1, p.y

        ready = (g.frame * g.frame_ms - g.last_fire_ms) >= p.fire_cooldown_ms
        obs_parts: List[float] = [
            (p.x / max(1, GRID_COLS - p.width)) * 2 - 1,
            (p.y / max(1, GRID_ROWS - p.height)) * 2 - 1,
            (p.hp / max(1, p.max_hp)) * 2 - 1,
            (p.currency / max(1, p.max_currency)) * 2 - 1,
            1.0 if ready else -1.0,
            1.0 if g.paused else -1.0,
        ]

        # Enemies: top-K nearest alive
        enemies = sorted(
            (e for e in g.enemies if e.alive),
            key=lambda e: (e.x - px) ** 2 + (e.y - py) ** 2,
        )
        for i in range(self.k_enemies):
            if i < len(enemies):
                e = enemies[i]
                obs_parts += [
                    clamp((e.x - px) / GRID_COLS, -1, 1),
                    clamp((e.y - py) / GRID_ROWS, -1, 1),
                    clamp(e.hp / max(1, e.max_hp), -1, 1),
                    1.0 if e.is_firing else 0.0,
                ]
            else:
                obs_parts += [0.0, 0.0, 0.0, 0.0]

        # Hostile bullets: top-M nearest
        bullets = sorted(
            (b for b in g.bullets if b.kind.hostile),
            key=lambda b: (b.x - px) ** 2 + (b.y - py) ** 2,
        )
        for i in range(self.m_bullets):
            if i < len(bullets):
                b = bullets[i]
                obs_parts += [
                    clamp((b.x - px) / GRID_COLS, -1, 1),
                    clamp((b.y - py) / GRID_ROWS, -1, 1),
                    clamp(b.dx / 2, -1, 1),
                    clamp(b.dy / 2, -1, 1),
                ]
            else:
                obs_parts += [0.0, 0.0, 0.0, 0.0]

        return np.array(obs_parts, dtype=np.float32)

    def _compute_reward(self) -> float:
        r = self.rewards
        reward = 0.0

        reward += r["R_HIT"] * self._events.get("hit", 0.0)
        reward += r["R_KILL"] * self._events.get("kill", 0.0)
        reward += r["R_HEAL"] * self._events.get("heal", 0.0)

        reward -= r["R_DAMAGE"] * self._events.get("damage", 0.0)
        reward -= r["R_SHOT"] * self._events.get("shot", 0.0)
        reward -= r["R_TIME"]

        if self.game.end_reason == "killed":
            reward -= r["R_DEATH"]

        return float(reward)

    def _get_info(self) -> Dict[str, Any]:
        g = self.game
        return {
            "hp": g.player.hp,
            "currency": g.player.currency,
            "score": g.score,
            "frame": g.frame,
            "kills": self._events.get("kill", 0.0),
            "damage_taken": self._events.get("damage", 0.0),
            "num_enemies": len(g.enemies),
            "num_bullets": len(g.bullets),
            "hazards_firing": sum(1 for e in g.enemies if e.is_firing),
            "paused": g.paused,
            "step": self._step_count,
        }

    # ----------------------------
    # Rendering
    # ----------------------------

    def render(self):
        if self.render_mode is None:
            return None
        text = "\n".join(render_frame(self.game.snapshot()))
        if self.render_mode == "ansi":
            return text
        print("\033[2J\033[1;1H" + text)
        return None

    def close(self):
        pass


# ----------------------------
# Quick sanity test
# ----------------------------

def run_random_episode(render: bool = False, seed: Optional[int] = 42, pattern_path: Optional[str] = None):
    """Run a random episode for testing"""
    env = GridShooterEnv(render_mode="human" if render else None, pattern_path=pattern_path)
    obs, info = env.reset(seed=seed)

    terminated = False
    truncated = False
    total = 0.0

    while not (terminated or truncated):
        action = env.action_space.sample()
        obs, reward, terminated, truncated, info = env.step(action)
        total += reward

    print(f"[GridShooterEnv] Random episode return: {total:.2f} | "
          f"score {info['score']} | frames {info['frame']} | hp {info['hp']}")
    env.close()
    return total, info
