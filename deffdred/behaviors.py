"""Enemy behaviours: burst wander, the hazard phase cycle, and enemy fire.

Every enemy shares one ``Enemy`` record; the functions here switch on
``enemy.kind`` instead of relying on subclasses.

Burst wander
------------
A wandering enemy draws a direction from {-1, 0, 1}^2, commits to
``burst_steps`` steps of it and arms a ``pause_ticks`` pause in the same tick.
While paused nothing moves; only the pause and fire timers count down.
Movement is throttled to one cell every ``ticks_per_step`` ticks.

Hazard cycle
------------
``COOLDOWN -> FLASHING -> FIRING -> COOLDOWN``.  During COOLDOWN the hazard
wanders like a basic enemy; it is frozen while FLASHING and FIRING.  Entering
FIRING and leaving it both clear ``player_damaged_this_fire``.
"""

from __future__ import annotations

from typing import List

import numpy as np

from .config import GRID_COLS, GRID_ROWS, WANDER_CONFIG
from .entities import (
    Bullet, BulletKind, Enemy, EnemyKind, HazardPhase, HAZARD_FRAMES, Player,
)
from .utils import clamp, sign

# Boss orb directions: cardinal, diagonal, then knight's-move offsets
BOSS_BURST_DIRS = (
    (0, -2), (2, 0), (0, 2), (-2, 0),
    (2, -2), (2, 2), (-2, 2), (-2, -2),
    (2, -1), (1, -2), (2, 1), (1, 2),
    (-2, 1), (-1, 2), (-2, -1), (-1, -2),
)

_NEXT_PHASE = {
    HazardPhase.COOLDOWN: HazardPhase.FLASHING,
    HazardPhase.FLASHING: HazardPhase.FIRING,
    HazardPhase.FIRING: HazardPhase.COOLDOWN,
}


def wander(enemy: Enemy, rng: np.random.Generator, cols: int = GRID_COLS, rows: int = GRID_ROWS):
    """One tick of burst-wander movement"""
    if enemy.pause_timer > 0:
        enemy.pause_timer -= 1
        if enemy.fire_timer > 0:
            enemy.fire_timer -= 1
        return

    if enemy.burst_steps <= 0:
        enemy.dx = int(rng.integers(-1, 2))
        enemy.dy = int(rng.integers(-1, 2))
        enemy.burst_steps = WANDER_CONFIG["burst_steps"]
        enemy.pause_timer = WANDER_CONFIG["pause_ticks"]

    enemy.move_frame_counter += 1
    if enemy.move_frame_counter >= WANDER_CONFIG["ticks_per_step"]:
        enemy.x += enemy.dx
        enemy.y += enemy.dy
        enemy.move_frame_counter = 0
        enemy.burst_steps -= 1

    enemy.x = clamp(enemy.x, 0, cols - 1)
    enemy.y = clamp(enemy.y, 0, rows - 1)

    if enemy.fire_timer > 0:
        enemy.fire_timer -= 1


def advance_hazard(enemy: Enemy, rng: np.random.Generator, cols: int = GRID_COLS, rows: int = GRID_ROWS):
    """One tick of the hazard phase cycle"""
    if enemy.phase is HazardPhase.COOLDOWN:
        wander(enemy, rng, cols, rows)

    enemy.phase_timer -= 1
    if enemy.phase_timer > 0:
        return

    enemy.phase = _NEXT_PHASE[enemy.phase]
    enemy.phase_timer = HAZARD_FRAMES[enemy.phase]
    if enemy.phase is not HazardPhase.FLASHING:
        enemy.player_damaged_this_fire = False


def update_enemy(enemy: Enemy, rng: np.random.Generator, cols: int = GRID_COLS, rows: int = GRID_ROWS):
    """Per-tick local update. Dead enemies are left untouched."""
    if not enemy.alive:
        return
    if enemy.kind is EnemyKind.HAZARD:
        advance_hazard(enemy, rng, cols, rows)
    else:
        wander(enemy, rng, cols, rows)


def can_fire(enemy: Enemy) -> bool:
    if not enemy.alive or enemy.kind is EnemyKind.HAZARD:
        return False
    return enemy.fire_timer == 0


def reset_fire(enemy: Enemy):
    if enemy.kind is not EnemyKind.HAZARD:
        enemy.fire_timer = enemy.fire_cooldown


def aimed_shot(enemy: Enemy, player: Player) -> Bullet:
    """Single EnemyShot aimed at the player, spawned one row below the enemy"""
    dx = sign(player.x - enemy.x)
    dy = sign(player.y - enemy.y)
    if player.y > enemy.y:
        dy = 1
    return Bullet(enemy.x, enemy.y + 1, dx, dy, BulletKind.ENEMY_SHOT)


def boss_burst(enemy: Enemy, cols: int = GRID_COLS, rows: int = GRID_ROWS) -> List[Bullet]:
    """16 BossOrb bullets from the boss centre column"""
    cx, cy = enemy.x + 1, enemy.y
    if not (0 <= cx < cols and 0 <= cy < rows):
        return []
    return [Bullet(cx, cy, dx, dy, BulletKind.BOSS_ORB) for dx, dy in BOSS_BURST_DIRS]


def fire(enemy: Enemy, player: Player, cols: int = GRID_COLS, rows: int = GRID_ROWS) -> List[Bullet]:
    """Fire if ready and reset the cooldown. Returns the new bullets."""
    if not can_fire(enemy):
        return []
    if enemy.kind is EnemyKind.BOSS:
        bullets = boss_burst(enemy, cols, rows)
    else:
        bullets = [aimed_shot(enemy, player)]
    reset_fire(enemy)
    return bullets
