"""
Training configuration for the grid shooter environment
Reward shaping presets and Stable-Baselines3 hyperparameters
"""

from deffdred.shooter_env import DEFAULT_REWARDS

# GridShooterEnv keyword arguments (rendering stays off while training)
ENV_CONFIG = {
    "pattern_path": None,   # scripted bullets off by default
    "max_steps": 3000,      # 180 seconds at 60 ms per tick
    "k_enemies": 5,
    "m_bullets": 8,
}

# ==============================================================================
# REWARD SHAPING CONFIGURATIONS
# ==============================================================================

# Balanced: every event weighted about equally
REWARD_CONFIG_BASELINE = {
    "name": "baseline",
    "description": "Balanced reward shaping (the env defaults)",
    **DEFAULT_REWARDS,
}

# Dodge bullets and beams first, kills second
REWARD_CONFIG_SURVIVAL = {
    "name": "survival",
    "description": "Prioritize survival - higher damage/death penalties",
    "R_HIT": 0.1,
    "R_KILL": 0.5,
    "R_DAMAGE": 1.5,
    "R_HEAL": 0.3,
    "R_SHOT": 0.02,
    "R_TIME": 0.0,
    "R_DEATH": 10.0,
}

# Farm currency: kills fill the upgrade meter faster
REWARD_CONFIG_AGGRESSIVE = {
    "name": "aggressive",
    "description": "Reward kills heavily to reach upgrades sooner",
    "R_HIT": 0.5,
    "R_KILL": 2.0,
    "R_DAMAGE": 0.3,
    "R_HEAL": 0.2,
    "R_SHOT": 0.0,
    "R_TIME": 0.001,
    "R_DEATH": 3.0,
}

REWARD_CONFIGS = {
    "baseline": REWARD_CONFIG_BASELINE,
    "survival": REWARD_CONFIG_SURVIVAL,
    "aggressive": REWARD_CONFIG_AGGRESSIVE,
}

# ==============================================================================
# ALGORITHM HYPERPARAMETERS
# ==============================================================================

PPO_CONFIG = {
    "policy": "MlpPolicy",
    "learning_rate": 3e-4,
    "n_steps": 1024,
    "batch_size": 256,
    "n_epochs": 10,
    "gamma": 0.99,
    "gae_lambda": 0.95,
    "clip_range": 0.2,
    "ent_coef": 0.01,
    "vf_coef": 0.5,
    "max_grad_norm": 0.5,
    "verbose": 1,
}

DQN_CONFIG = {
    "policy": "MlpPolicy",
    "learning_rate": 1e-4,
    "buffer_size": 100_000,
    "learning_starts": 1000,
    "batch_size": 128,
    "tau": 1.0,
    "gamma": 0.99,
    "train_freq": 4,
    "gradient_steps": 1,
    "target_update_interval": 1000,
    "exploration_fraction": 0.1,
    "exploration_initial_eps": 1.0,
    "exploration_final_eps": 0.05,
    "verbose": 1,
}

# ==============================================================================
# TRAINING SETTINGS
# ==============================================================================

TRAINING_CONFIG = {
    "total_timesteps": 500_000,
    "save_freq": 10_000,
    "eval_freq": 5_000,
    "log_dir": "./logs",
    "model_dir": "./models",
    "tensorboard_log": "./tensorboard_logs",
}
