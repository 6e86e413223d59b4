"""
Custom callback for tracking task-specific metrics during training.
Records: enemies killed, damage taken, final score, frames survived.
"""

import os
import csv
from typing import Dict, List, Any, Optional

import numpy as np
from stable_baselines3.common.callbacks import BaseCallback


class EpisodeTally:
    """Accumulates per-step info dicts into per-episode totals"""

    def __init__(self):
        self.kills = 0.0
        self.damage = 0.0

    def add(self, info: Dict[str, Any]):
        self.kills += info.get("kills", 0.0)
        self.damage += info.get("damage_taken", 0.0)

    def reset(self):
        self.kills = 0.0
        self.damage = 0.0


class MetricsCallback(BaseCallback):
    """
    Callback to track and log task-specific metrics per episode.
    Saves to CSV for easy plotting.
    """

    def __init__(
        self,
        log_dir: str,
        algo_name: str,
        verbose: int = 1,
    ):
        super().__init__(verbose)
        self.log_dir = log_dir
        self.algo_name = algo_name

        # Episode tracking
        self.episode_rewards: List[float] = []
        self.episode_lengths: List[int] = []
        self.episode_kills: List[float] = []
        self.episode_damage: List[float] = []
        self.episode_scores: List[int] = []

        # One running tally per parallel env
        self._tallies: List[EpisodeTally] = []

        # CSV file
        self.csv_path: Optional[str] = None
        self.csv_file = None
        self.csv_writer = None

    def _on_training_start(self) -> None:
        """Initialize CSV file for logging."""
        os.makedirs(self.log_dir, exist_ok=True)
        self.csv_path = os.path.join(self.log_dir, f"{self.algo_name}_metrics.csv")

        self.csv_file = open(self.csv_path, "w", newline="")
        self.csv_writer = csv.writer(self.csv_file)
        self.csv_writer.writerow([
            "timestep", "episode", "reward", "length",
            "kills", "damage", "score", "frames", "survived"
        ])
        self.csv_file.flush()

        if self.verbose > 0:
            print(f"[MetricsCallback] Logging to {self.csv_path}")

    def _on_step(self) -> bool:
        infos = self.locals.get("infos", [])
        dones = self.locals.get("dones", [])

        while len(self._tallies) < len(infos):
            self._tallies.append(EpisodeTally())

        for i, (info, done) in enumerate(zip(infos, dones)):
            tally = self._tallies[i]
            tally.add(info)

            # Monitor wrapper adds episode info on the last step
            if done and "episode" in info:
                ep_info = info["episode"]
                self._record(ep_info["r"], ep_info["l"], tally, info)
                tally.reset()

        return True

    def _record(self, reward, length, tally: EpisodeTally, info: Dict[str, Any]):
        score = info.get("score", 0)
        frames = info.get("frame", 0)
        survived = 1.0 if info.get("hp", 0) > 0 else 0.0

        self.episode_rewards.append(reward)
        self.episode_lengths.append(length)
        self.episode_kills.append(tally.kills)
        self.episode_damage.append(tally.damage)
        self.episode_scores.append(score)

        if self.csv_writer:
            self.csv_writer.writerow([
                self.num_timesteps,
                len(self.episode_rewards),
                reward,
                length,
                tally.kills,
                tally.damage,
                score,
                frames,
                survived,
            ])
            self.csv_file.flush()

        if self.verbose > 0 and len(self.episode_rewards) % 10 == 0:
            avg_reward = sum(self.episode_rewards[-10:]) / 10
            print(f"[{self.algo_name}] Episode {len(self.episode_rewards)}, "
                  f"Timestep {self.num_timesteps}, "
                  f"Avg Reward (10 ep): {avg_reward:.2f}")

    def _on_training_end(self) -> None:
        if self.csv_file:
            self.csv_file.close()
            if self.verbose > 0:
                print(f"[MetricsCallback] Saved {len(self.episode_rewards)} episodes to {self.csv_path}")

    def get_summary(self) -> Dict[str, Any]:
        """Get summary statistics."""
        if not self.episode_rewards:
            return {}

        return {
            "mean_reward": np.mean(self.episode_rewards),
            "std_reward": np.std(self.episode_rewards),
            "mean_length": np.mean(self.episode_lengths),
            "total_episodes": len(self.episode_rewards),
            "mean_kills": np.mean(self.episode_kills),
            "mean_score": np.mean(self.episode_scores),
        }
