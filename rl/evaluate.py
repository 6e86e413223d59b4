"""
Evaluation script for trained agents
Plays greedy episodes with a saved model and reports game-level outcomes
(score, frames survived, kills) next to the shaped return.
"""

import argparse
import time
from typing import Callable, Dict, List, Optional

import numpy as np

from stable_baselines3 import PPO, DQN
from stable_baselines3.common.vec_env import DummyVecEnv, VecNormalize

from deffdred import GridShooterEnv
from deffdred.config import FRAME_MS
from rl.configs.shooter_config import ENV_CONFIG
from rl.wrappers import MultiDiscreteToDiscreteWrapper

ALGOS = {"ppo": PPO, "dqn": DQN}


def summarize(episodes: List[Dict[str, float]]) -> Dict[str, float]:
    """Mean/std over per-episode records"""
    if not episodes:
        return {}
    returns = np.array([ep["return"] for ep in episodes])
    return {
        "episodes": len(episodes),
        "mean_reward": float(returns.mean()),
        "std_reward": float(returns.std()),
        "mean_length": float(np.mean([ep["length"] for ep in episodes])),
        "mean_score": float(np.mean([ep["score"] for ep in episodes])),
        "mean_frames": float(np.mean([ep["frames"] for ep in episodes])),
        "mean_kills": float(np.mean([ep["kills"] for ep in episodes])),
        "survival_rate": float(np.mean([ep["survived"] for ep in episodes])),
    }


def print_summary(title: str, stats: Dict[str, float]):
    print(f"\n{'=' * 50}")
    print(f"{title} ({stats.get('episodes', 0)} episodes)")
    if stats:
        print(f"Return:   {stats['mean_reward']:.2f} ± {stats['std_reward']:.2f}")
        print(f"Score:    {stats['mean_score']:.1f}")
        print(f"Frames:   {stats['mean_frames']:.1f}")
        print(f"Kills:    {stats['mean_kills']:.2f}")
        print(f"Survived: {stats['survival_rate'] * 100:.0f}%")
    print("=" * 50)


def _vec_env(algo: str, render: bool, vec_normalize_path: Optional[str]):
    def _init():
        env = GridShooterEnv(render_mode="human" if render else None, **ENV_CONFIG)
        return MultiDiscreteToDiscreteWrapper(env) if algo == "dqn" else env

    env = DummyVecEnv([_init])
    if vec_normalize_path:
        env = VecNormalize.load(vec_normalize_path, env)
        env.training = False
        env.norm_reward = False
    return env


def evaluate_model(
    model_path: str,
    algo: str = "ppo",
    n_episodes: int = 10,
    render: bool = False,
    seed: Optional[int] = None,
    vec_normalize_path: Optional[str] = None,
) -> Dict[str, float]:
    """
    Play ``n_episodes`` greedy episodes with a saved model

    Args:
        model_path: Path to the saved model
        algo: 'ppo' or 'dqn'
        render: Print each frame to the terminal at game speed
        seed: Base seed, episode i uses seed + i
        vec_normalize_path: VecNormalize statistics saved next to a PPO model
    """
    if algo not in ALGOS:
        raise ValueError(f"Unknown algorithm: {algo}")
    model = ALGOS[algo].load(model_path)
    env = _vec_env(algo, render, vec_normalize_path)

    episodes = []
    for episode in range(n_episodes):
        if seed is not None:
            env.seed(seed + episode)
        obs = env.reset()
        total, steps = 0.0, 0
        kills = 0.0

        while True:
            action, _ = model.predict(obs, deterministic=True)
            obs, reward, done, infos = env.step(action)
            info = infos[0]
            total += float(reward[0])
            kills += info.get("kills", 0.0)
            steps += 1
            if render:
                time.sleep(FRAME_MS / 1000.0)
            if done[0]:
                break

        episodes.append({
            "return": total,
            "length": steps,
            "score": info.get("score", 0),
            "frames": info.get("frame", 0),
            "kills": kills,
            "survived": 1.0 if info.get("hp", 0) > 0 else 0.0,
        })
        print(f"[evaluate] Episode {episode + 1}/{n_episodes}: return {total:.2f} | "
              f"score {episodes[-1]['score']} | frames {episodes[-1]['frames']}")

    env.close()
    stats = summarize(episodes)
    print_summary(f"{algo.upper()} evaluation", stats)
    return stats


def play_policy(
    policy: Callable[[GridShooterEnv, np.ndarray], np.ndarray],
    n_episodes: int = 10,
    seed: Optional[int] = None,
) -> List[Dict[str, float]]:
    """Run a plain callable policy on the unwrapped environment"""
    env = GridShooterEnv(render_mode=None, **ENV_CONFIG)
    episodes = []
    for episode in range(n_episodes):
        obs, info = env.reset(seed=seed + episode if seed is not None else None)
        total, steps, kills = 0.0, 0, 0.0
        terminated = truncated = False
        while not (terminated or truncated):
            obs, reward, terminated, truncated, info = env.step(policy(env, obs))
            total += reward
            kills += info["kills"]
            steps += 1
        episodes.append({
            "return": total,
            "length": steps,
            "score": info["score"],
            "frames": info["frame"],
            "kills": kills,
            "survived": 1.0 if info["hp"] > 0 else 0.0,
        })
    env.close()
    return episodes


def compare_with_random(n_episodes: int = 10, seed: Optional[int] = None) -> Dict[str, float]:
    """Uniform random actions as a baseline"""
    print("[evaluate] Running random policy baseline...")
    stats = summarize(play_policy(lambda env, obs: env.action_space.sample(), n_episodes, seed))
    print_summary("Random policy", stats)
    return stats


def main():
    parser = argparse.ArgumentParser(description="Evaluate a trained agent on the grid shooter")
    parser.add_argument("model_path", type=str, help="Path to the trained model")
    parser.add_argument("--algo", type=str, default="ppo", choices=sorted(ALGOS),
                        help="Algorithm the model was trained with (default: ppo)")
    parser.add_argument("--n-episodes", type=int, default=10,
                        help="Number of evaluation episodes (default: 10)")
    parser.add_argument("--render", action="store_true", help="Print frames to the terminal")
    parser.add_argument("--seed", type=int, default=42, help="Base seed (default: 42)")
    parser.add_argument("--vec-normalize", type=str, default=None,
                        help="Path to VecNormalize stats (PPO)")
    parser.add_argument("--compare-random", action="store_true",
                        help="Also evaluate a random policy")
    args = parser.parse_args()

    results = evaluate_model(
        model_path=args.model_path,
        algo=args.algo,
        n_episodes=args.n_episodes,
        render=args.render,
        seed=args.seed,
        vec_normalize_path=args.vec_normalize,
    )

    if args.compare_random:
        baseline = compare_with_random(n_episodes=args.n_episodes, seed=args.seed)
        print(f"\nScore over random: {results['mean_score'] - baseline['mean_score']:+.1f}")
        print(f"Return over random: {results['mean_reward'] - baseline['mean_reward']:+.2f}")


if __name__ == "__main__":
    main()
