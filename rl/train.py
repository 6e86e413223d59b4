"""
Training script for the grid shooter environment using Stable-Baselines3
Supports PPO (native MultiDiscrete) and DQN (flattened Discrete actions).
"""

import os
import argparse
from typing import Optional

from stable_baselines3 import PPO, DQN
from stable_baselines3.common.vec_env import DummyVecEnv, VecNormalize
from stable_baselines3.common.callbacks import CheckpointCallback, EvalCallback
from stable_baselines3.common.monitor import Monitor

from deffdred import GridShooterEnv
from rl.configs.shooter_config import (
    ENV_CONFIG, PPO_CONFIG, DQN_CONFIG, TRAINING_CONFIG, REWARD_CONFIGS,
)
from rl.metrics_callback import MetricsCallback
from rl.wrappers import MultiDiscreteToDiscreteWrapper


def make_env(seed: Optional[int] = None, wrap_for_dqn: bool = False, reward_config: str = "baseline"):
    """Factory function to create the environment"""
    rewards = {k: v for k, v in REWARD_CONFIGS[reward_config].items() if k.startswith("R_")}

    def _init():
        env = GridShooterEnv(rewards=rewards, **ENV_CONFIG)
        if wrap_for_dqn:
            env = MultiDiscreteToDiscreteWrapper(env)
        env = Monitor(env)
        if seed is not None:
            env.reset(seed=seed)
        return env
    return _init


def run_dirs(algo: str):
    """Model, log and tensorboard directories for one algorithm"""
    return (
        os.path.join(TRAINING_CONFIG["model_dir"], algo),
        os.path.join(TRAINING_CONFIG["log_dir"], algo),
        os.path.join(TRAINING_CONFIG["tensorboard_log"], algo),
    )


def _callbacks(eval_env, save_dir: str, log_dir: str, algo: str, n_envs: int = 1):
    checkpoint_callback = CheckpointCallback(
        save_freq=max(TRAINING_CONFIG["save_freq"] // n_envs, 1),
        save_path=save_dir,
        name_prefix=f"{algo}_deffdred",
    )
    eval_callback = EvalCallback(
        eval_env,
        best_model_save_path=save_dir,
        log_path=log_dir,
        eval_freq=max(TRAINING_CONFIG.get("eval_freq", 5000) // n_envs, 1),
        deterministic=True,
        render=False,
    )
    metrics_callback = MetricsCallback(log_dir=log_dir, algo_name=algo, verbose=1)
    return [checkpoint_callback, eval_callback, metrics_callback], metrics_callback


def _report(algo: str, final_path: str, metrics_callback: MetricsCallback):
    print(f"\n{'='*60}")
    print(f"{algo.upper()} Training complete! Model saved to {final_path}")
    summary = metrics_callback.get_summary()
    if summary:
        print(f"Mean Reward: {summary['mean_reward']:.2f} ± {summary['std_reward']:.2f}")
        print(f"Mean Score: {summary['mean_score']:.1f}")
        print(f"Total Episodes: {summary['total_episodes']}")
    print(f"{'='*60}\n")


def train_ppo(
    total_timesteps: int = None,
    save_dir: Optional[str] = None,
    log_dir: Optional[str] = None,
    tensorboard_log: Optional[str] = None,
    n_envs: int = 4,
    reward_config: str = "baseline",
):
    """Train PPO agent on the grid shooter"""

    if total_timesteps is None:
        total_timesteps = TRAINING_CONFIG["total_timesteps"]
    default_dirs = run_dirs("ppo")
    save_dir = save_dir or default_dirs[0]
    log_dir = log_dir or default_dirs[1]
    tensorboard_log = tensorboard_log or default_dirs[2]

    os.makedirs(save_dir, exist_ok=True)
    os.makedirs(log_dir, exist_ok=True)

    print(f"\n{'='*60}")
    print(f"Training PPO for {total_timesteps:,} timesteps...")
    print(f"Using {n_envs} parallel environments, reward config '{reward_config}'")
    print(f"{'='*60}\n")

    env = DummyVecEnv([make_env(seed=i, reward_config=reward_config) for i in range(n_envs)])
    env = VecNormalize(env, norm_obs=True, norm_reward=True)

    eval_env = DummyVecEnv([make_env(seed=100, reward_config=reward_config)])
    eval_env = VecNormalize(eval_env, norm_obs=True, norm_reward=False, training=False)

    callbacks, metrics_callback = _callbacks(eval_env, save_dir, log_dir, "ppo", n_envs)

    model = PPO(env=env, tensorboard_log=tensorboard_log, **PPO_CONFIG)
    model.learn(total_timesteps=total_timesteps, callback=callbacks)

    final_path = os.path.join(save_dir, "ppo_deffdred_final")
    model.save(final_path)
    env.save(os.path.join(save_dir, "vec_normalize.pkl"))

    _report("ppo", final_path, metrics_callback)
    return model, metrics_callback


def train_dqn(
    total_timesteps: int = None,
    save_dir: Optional[str] = None,
    log_dir: Optional[str] = None,
    tensorboard_log: Optional[str] = None,
    reward_config: str = "baseline",
):
    """Train DQN agent on the grid shooter"""

    if total_timesteps is None:
        total_timesteps = TRAINING_CONFIG["total_timesteps"]
    default_dirs = run_dirs("dqn")
    save_dir = save_dir or default_dirs[0]
    log_dir = log_dir or default_dirs[1]
    tensorboard_log = tensorboard_log or default_dirs[2]

    os.makedirs(save_dir, exist_ok=True)
    os.makedirs(log_dir, exist_ok=True)

    print(f"\n{'='*60}")
    print(f"Training DQN for {total_timesteps:,} timesteps...")
    print(f"Using MultiDiscrete->Discrete action wrapper (30 actions)")
    print(f"{'='*60}\n")

    env = DummyVecEnv([make_env(seed=0, wrap_for_dqn=True, reward_config=reward_config)])
    eval_env = DummyVecEnv([make_env(seed=100, wrap_for_dqn=True, reward_config=reward_config)])

    callbacks, metrics_callback = _callbacks(eval_env, save_dir, log_dir, "dqn")

    model = DQN(env=env, tensorboard_log=tensorboard_log, **DQN_CONFIG)
    model.learn(total_timesteps=total_timesteps, callback=callbacks)

    final_path = os.path.join(save_dir, "dqn_deffdred_final")
    model.save(final_path)

    _report("dqn", final_path, metrics_callback)
    return model, metrics_callback


def main():
    parser = argparse.ArgumentParser(description="Train RL agent on the grid shooter")
    parser.add_argument(
        "--algo",
        type=str,
        default="ppo",
        choices=["ppo", "dqn", "all"],
        help="RL algorithm to use (default: ppo)",
    )
    parser.add_argument(
        "--timesteps",
        type=int,
        default=None,
        help=f"Total timesteps to train (default: {TRAINING_CONFIG['total_timesteps']})",
    )
    parser.add_argument(
        "--n-envs",
        type=int,
        default=4,
        help="Number of parallel environments for PPO (default: 4)",
    )
    parser.add_argument(
        "--reward-config",
        type=str,
        default="baseline",
        choices=sorted(REWARD_CONFIGS),
        help="Reward shaping preset (default: baseline)",
    )

    args = parser.parse_args()

    if args.algo in ("dqn", "all"):
        train_dqn(total_timesteps=args.timesteps, reward_config=args.reward_config)
    if args.algo in ("ppo", "all"):
        train_ppo(total_timesteps=args.timesteps, n_envs=args.n_envs, reward_config=args.reward_config)


if __name__ == "__main__":
    main()
