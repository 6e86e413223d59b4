"""Unit tests for the entity model."""

from __future__ import annotations

import pytest

from deffdred.config import GRID_COLS, GRID_ROWS
from deffdred.entities import (
    Bullet, BulletKind, EnemyKind, HAZARD_FRAMES, HazardPhase, Key, Player, SPENT_X, make_enemy,
)

pytestmark = pytest.mark.unit


class TestPlayer:
    def test_defaults(self):
        p = Player(x=29, y=16)
        assert (p.hp, p.max_hp) == (10, 10)
        assert (p.currency, p.max_currency) == (0, 100)
        assert p.bullet_speed == -1
        assert p.damage == 10
        assert p.bullet_streams == 1
        assert (p.width, p.height) == (3, 2)

    def test_footprint_skips_blank_cells(self):
        p = Player(x=10, y=5)
        assert set(p.cells()) == {(11, 5), (10, 6), (11, 6), (12, 6)}
        assert not p.occupies(10, 5)
        assert p.occupies(11, 5)

    def test_move_clamps_to_arena(self):
        p = Player(x=0, y=0)
        p.move({Key.UP, Key.LEFT})
        assert (p.x, p.y) == (0, 0)

        p = Player(x=GRID_COLS - 3, y=GRID_ROWS - 2, move_speed=4)
        p.move({Key.DOWN, Key.RIGHT})
        assert (p.x, p.y) == (GRID_COLS - 3, GRID_ROWS - 2)

    def test_move_speed_overshoot_is_clamped(self):
        p = Player(x=GRID_COLS - 4, y=1, move_speed=3)
        p.move({Key.RIGHT, Key.UP})
        assert p.x == GRID_COLS - 3
        assert p.y == 0

    def test_hp_and_currency_bounds(self):
        p = Player(x=0, y=0, hp=2)
        p.take_damage(5)
        assert p.hp == 0 and not p.alive
        p.heal(50)
        assert p.hp == p.max_hp
        p.currency = 95
        p.award(10)
        assert p.currency == p.max_currency


class TestBullet:
    def test_update_and_bounds(self):
        b = Bullet(0, 0, -1, 0)
        assert not b.is_out_of_bounds()
        b.update()
        assert b.is_out_of_bounds()

    def test_spent_bullet_is_out_of_bounds(self):
        b = Bullet(5, 5, 0, -1, BulletKind.PLAYER_SHOT)
        b.mark_spent()
        assert b.spent
        assert b.x == SPENT_X
        assert b.is_out_of_bounds()

    def test_kind_glyphs_and_damage(self):
        assert BulletKind.PLAYER_SHOT.symbol == "o"
        assert BulletKind.ENEMY_SHOT.symbol == "*"
        assert BulletKind.BOSS_ORB.symbol == "O"
        assert BulletKind.ENEMY_SHOT.damage == 1
        assert BulletKind.BOSS_ORB.damage == 3
        assert not BulletKind.PLAYER_SHOT.hostile


class TestEnemyFactory:
    def test_basic(self):
        e = make_enemy(EnemyKind.BASIC, 3, 4)
        assert (e.hp, e.max_hp, e.fire_cooldown) == (10, 10, 60)
        assert e.fire_timer == 0
        assert list(e.cells()) == [(3, 4)]

    def test_hazard(self):
        e = make_enemy(EnemyKind.HAZARD, 3, 10)
        assert e.hp == 20
        assert e.is_hazard
        assert e.phase is HazardPhase.COOLDOWN
        assert e.phase_timer == HAZARD_FRAMES[HazardPhase.COOLDOWN]

    def test_boss_footprint(self):
        e = make_enemy(EnemyKind.BOSS, 28, 1)
        assert e.hp == 150
        assert set(e.cells()) == {(28, 1), (29, 1), (30, 1), (29, 2)}

    def test_hazard_frames_are_rounded_up(self):
        assert HAZARD_FRAMES[HazardPhase.COOLDOWN] == 67
        assert HAZARD_FRAMES[HazardPhase.FLASHING] == 17
        assert HAZARD_FRAMES[HazardPhase.FIRING] == 25
