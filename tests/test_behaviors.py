"""Unit tests for enemy movement, the hazard cycle and enemy fire."""

from __future__ import annotations

import pytest

from deffdred.behaviors import (
    BOSS_BURST_DIRS, aimed_shot, boss_burst, can_fire, fire, reset_fire, update_enemy, wander,
)
from deffdred.config import GRID_COLS
from deffdred.entities import BulletKind, EnemyKind, HAZARD_FRAMES, HazardPhase, Player, make_enemy

from conftest import StubRng

pytestmark = pytest.mark.unit


# --------------------------------------------------------------------------
# Burst wander
# --------------------------------------------------------------------------

class TestBurstWander:
    def test_pause_elapses_before_first_step(self):
        e = make_enemy(EnemyKind.BASIC, 10, 5)
        rng = StubRng([1, 0])
        for _ in range(18):
            wander(e, rng)
        assert (e.x, e.y) == (10, 5)
        wander(e, rng)
        assert (e.x, e.y) == (11, 5)
        assert e.burst_steps == 4

    def test_burst_moves_one_cell_every_third_tick(self):
        e = make_enemy(EnemyKind.BASIC, 10, 5)
        rng = StubRng([-1, 1])
        for _ in range(19 + 3 * 4):
            wander(e, rng)
        assert (e.x, e.y) == (5, 10)
        assert e.burst_steps == 0

    def test_position_clamped_to_arena(self):
        e = make_enemy(EnemyKind.BASIC, 0, 0)
        rng = StubRng([-1, -1])
        for _ in range(40):
            wander(e, rng)
        assert (e.x, e.y) == (0, 0)

    def test_fire_timer_counts_down_while_paused(self, stub_rng):
        e = make_enemy(EnemyKind.BASIC, 10, 5)
        reset_fire(e)
        for _ in range(59):
            update_enemy(e, stub_rng)
        assert not can_fire(e)
        update_enemy(e, stub_rng)
        assert can_fire(e)

    def test_dead_enemy_does_not_move_or_fire(self):
        e = make_enemy(EnemyKind.BASIC, 10, 5)
        e.hp = 0
        rng = StubRng([1, 1])
        for _ in range(40):
            update_enemy(e, rng)
        assert (e.x, e.y) == (10, 5)
        assert not can_fire(e)
        assert fire(e, Player(x=29, y=16)) == []


# --------------------------------------------------------------------------
# Hazard phase cycle
# --------------------------------------------------------------------------

class TestHazardCycle:
    def _run(self, e, ticks, rng):
        for _ in range(ticks):
            update_enemy(e, rng)

    def test_full_cycle_durations(self, stub_rng):
        e = make_enemy(EnemyKind.HAZARD, 30, 10)
        cooldown = HAZARD_FRAMES[HazardPhase.COOLDOWN]
        flash = HAZARD_FRAMES[HazardPhase.FLASHING]
        firing = HAZARD_FRAMES[HazardPhase.FIRING]

        self._run(e, cooldown - 1, stub_rng)
        assert e.phase is HazardPhase.COOLDOWN
        self._run(e, 1, stub_rng)
        assert e.phase is HazardPhase.FLASHING

        self._run(e, flash - 1, stub_rng)
        assert e.phase is HazardPhase.FLASHING
        self._run(e, 1, stub_rng)
        assert e.phase is HazardPhase.FIRING

        self._run(e, firing - 1, stub_rng)
        assert e.is_firing
        self._run(e, 1, stub_rng)
        assert e.phase is HazardPhase.COOLDOWN
        assert e.phase_timer == cooldown

    def test_damage_flag_resets_on_entering_and_leaving_firing(self, stub_rng):
        e = make_enemy(EnemyKind.HAZARD, 30, 10)
        e.phase = HazardPhase.FLASHING
        e.phase_timer = 1
        e.player_damaged_this_fire = True
        self._run(e, 1, stub_rng)
        assert e.is_firing
        assert e.player_damaged_this_fire is False

        e.player_damaged_this_fire = True
        e.phase_timer = 1
        self._run(e, 1, stub_rng)
        assert e.phase is HazardPhase.COOLDOWN
        assert e.player_damaged_this_fire is False

    def test_frozen_outside_cooldown(self):
        e = make_enemy(EnemyKind.HAZARD, 30, 10)
        e.phase = HazardPhase.FLASHING
        e.phase_timer = 10
        rng = StubRng([1, 1] * 20)
        self._run(e, 9, rng)
        assert (e.x, e.y) == (30, 10)
        assert len(rng.values) == 40

    def test_wanders_during_cooldown(self):
        e = make_enemy(EnemyKind.HAZARD, 30, 10)
        rng = StubRng([1, 0])
        self._run(e, 19, rng)
        assert (e.x, e.y) == (31, 10)

    def test_never_fires(self, stub_rng):
        e = make_enemy(EnemyKind.HAZARD, 30, 10)
        assert not can_fire(e)
        assert fire(e, Player(x=29, y=16)) == []
        reset_fire(e)
        assert e.fire_timer == 0


# --------------------------------------------------------------------------
# Enemy fire
# --------------------------------------------------------------------------

class TestEnemyFire:
    def test_aimed_shot_toward_player_below(self):
        e = make_enemy(EnemyKind.BASIC, 10, 2)
        b = aimed_shot(e, Player(x=29, y=16))
        assert (b.x, b.y, b.dx, b.dy) == (10, 3, 1, 1)
        assert b.kind is BulletKind.ENEMY_SHOT

    def test_aimed_shot_toward_player_above(self):
        e = make_enemy(EnemyKind.BASIC, 10, 10)
        b = aimed_shot(e, Player(x=5, y=4))
        assert (b.dx, b.dy) == (-1, -1)

    def test_aimed_shot_same_row_and_column(self):
        e = make_enemy(EnemyKind.BASIC, 29, 16)
        b = aimed_shot(e, Player(x=29, y=16))
        assert (b.dx, b.dy) == (0, 0)

    def test_fire_resets_cooldown(self):
        e = make_enemy(EnemyKind.BASIC, 10, 2)
        bullets = fire(e, Player(x=29, y=16))
        assert len(bullets) == 1
        assert e.fire_timer == e.fire_cooldown
        assert fire(e, Player(x=29, y=16)) == []

    def test_boss_burst_sixteen_orbs(self):
        boss = make_enemy(EnemyKind.BOSS, 28, 1)
        bullets = fire(boss, Player(x=29, y=16))
        assert len(bullets) == 16
        assert all(b.kind is BulletKind.BOSS_ORB for b in bullets)
        assert all((b.x, b.y) == (29, 1) for b in bullets)
        assert [(b.dx, b.dy) for b in bullets] == list(BOSS_BURST_DIRS)
        assert len(set(BOSS_BURST_DIRS)) == 16
        assert boss.fire_timer == boss.fire_cooldown

    def test_boss_burst_needs_centre_in_arena(self):
        boss = make_enemy(EnemyKind.BOSS, GRID_COLS - 1, 1)
        assert boss_burst(boss) == []
        assert fire(boss, Player(x=0, y=0)) == []
        assert boss.fire_timer == boss.fire_cooldown
