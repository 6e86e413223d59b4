"""
Action-space wrappers for algorithms that cannot take MultiDiscrete actions
"""

import numpy as np
import gymnasium as gym
from gymnasium import spaces


class MultiDiscreteToDiscreteWrapper(gym.ActionWrapper):
    """
    Flat Discrete view of GridShooterEnv's MultiDiscrete([move, fire, upgrade])
    actions, for DQN. Index order is row-major: the upgrade slot varies fastest,
    then fire, then move.
    """

    def __init__(self, env):
        super().__init__(env)
        self.orig_action_space = env.action_space
        self._nvec = tuple(int(n) for n in env.action_space.nvec)
        # every flat index decoded up front; the table is 30 rows for the shooter
        self._table = np.stack(
            np.unravel_index(np.arange(int(np.prod(self._nvec))), self._nvec), axis=1
        ).astype(np.int64)
        self.n_total = len(self._table)
        self.action_space = spaces.Discrete(self.n_total)

    def action(self, action):
        """Flat index -> [move, fire, upgrade]"""
        return self._table[int(action)].copy()

    def reverse_action(self, action):
        """[move, fire, upgrade] -> flat index"""
        return int(np.ravel_multi_index(tuple(int(a) for a in action), self._nvec))
