"""DeffDred - fixed-tick grid shooter simulation"""

from .entities import Bullet, BulletKind, Enemy, EnemyKind, HazardPhase, Key, Player, make_enemy
from .game import Game, Mode, Snapshot
from .leaderboard import Leaderboard
from .shooter_env import GridShooterEnv, run_random_episode
from .spawner import PatternError, PatternSchedule
from .upgrades import UpgradeKind

__all__ = [
    'Bullet', 'BulletKind', 'Enemy', 'EnemyKind', 'HazardPhase', 'Key', 'Player', 'make_enemy',
    'Game', 'Mode', 'Snapshot', 'Leaderboard', 'GridShooterEnv', 'run_random_episode',
    'PatternError', 'PatternSchedule', 'UpgradeKind',
]
