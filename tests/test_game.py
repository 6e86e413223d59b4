"""Tick orchestrator tests, including end-to-end runs of the pipeline."""

from __future__ import annotations

import numpy as np
import pytest

from deffdred.config import FRAME_MS, GRID_COLS, GRID_ROWS
from deffdred.entities import Bullet, BulletKind, EnemyKind, HazardPhase, Key, make_enemy
from deffdred.game import Game, Mode, stream_directions
from deffdred.spawner import PatternSchedule, ScriptedSpawn

pytestmark = pytest.mark.unit


class FakeControls:
    """Scripted input collaborator."""

    def __init__(self, polls, choices=()):
        self.polls = list(polls)
        self.choices = list(choices)

    def poll(self):
        return self.polls.pop(0) if self.polls else set()

    def choice(self):
        return self.choices.pop(0) if self.choices else None


# --------------------------------------------------------------------------
# Setup
# --------------------------------------------------------------------------

class TestSetup:
    def test_initial_state(self):
        game = Game(seed=1)
        assert (game.player.x, game.player.y) == (GRID_COLS // 2 - 1, GRID_ROWS - 4)
        assert [e.kind for e in game.enemies] == [EnemyKind.BASIC, EnemyKind.HAZARD]
        assert (game.enemies[1].x, game.enemies[1].y) == (GRID_COLS // 2 - 1, GRID_ROWS // 2)
        assert game.frame == 0 and game.score == 0
        assert game.mode is Mode.RUNNING

    def test_reset_rewinds_pattern(self):
        game = Game(pattern=PatternSchedule([ScriptedSpawn(0, 5, 0, 0, 1)]), initial_enemies=False)
        game.tick()
        assert game.schedule.remaining == 0
        game.reset()
        assert game.schedule.remaining == 1
        assert game.bullets == []


# --------------------------------------------------------------------------
# End-to-end scenarios
# --------------------------------------------------------------------------

class TestEndToEnd:
    def test_enemy_shot_on_player_centre_costs_one_hp(self, empty_game):
        p = empty_game.player
        empty_game.bullets.append(Bullet(p.x + 1, p.y + 1, 0, 0, BulletKind.ENEMY_SHOT))
        empty_game.tick()
        assert empty_game.player.hp == 9
        assert empty_game.events["damage"] == 1

    def test_non_consumed_shot_hits_again_next_tick(self, empty_game):
        p = empty_game.player
        empty_game.bullets.append(Bullet(p.x + 1, p.y + 1, 0, 0, BulletKind.ENEMY_SHOT))
        empty_game.tick()
        empty_game.tick()
        assert empty_game.player.hp == 8

    def test_consumed_shot_when_not_piercing(self):
        game = Game(seed=0, initial_enemies=False, enemy_shots_pierce=False)
        p = game.player
        game.bullets.append(Bullet(p.x + 1, p.y + 1, 0, 0, BulletKind.ENEMY_SHOT))
        game.tick()
        game.tick()
        assert game.player.hp == 9
        assert game.bullets == []

    def test_adjacent_player_bullet_kills_enemy_and_is_pruned(self, empty_game):
        enemy = make_enemy(EnemyKind.BASIC, 10, 5)
        empty_game.enemies.append(enemy)
        # advances to (10, 6) before the collision pass
        shot = Bullet(10, 7, 0, -1, BulletKind.PLAYER_SHOT)
        empty_game.bullets.append(shot)

        empty_game.tick()
        assert enemy.hp <= 0
        assert empty_game.player.currency == 10
        assert empty_game.score == 50
        assert empty_game.events["kill"] == 1
        assert enemy not in empty_game.enemies

        empty_game.tick()
        assert shot not in empty_game.bullets
        assert empty_game.player.currency == 10
        assert empty_game.score == 50

    def test_full_currency_pauses_for_upgrade(self, empty_game):
        empty_game.player.currency = 100
        empty_game.tick()
        assert empty_game.mode is Mode.UPGRADE
        assert len(empty_game.offer) == 3
        assert len(set(empty_game.offer)) == 3
        assert empty_game.frame == 0

        for _ in range(5):
            empty_game.tick()
        assert empty_game.frame == 0

        assert not empty_game.choose_upgrade(0)
        assert not empty_game.choose_upgrade(4)
        assert empty_game.paused

        assert empty_game.choose_upgrade(2)
        assert empty_game.player.currency == 0
        assert empty_game.mode is Mode.RUNNING
        assert empty_game.offer == []

        empty_game.tick()
        assert empty_game.frame == 1

    def test_choose_without_offer_is_rejected(self, empty_game):
        assert not empty_game.choose_upgrade(1)

    def test_quit_honoured_while_paused(self, empty_game):
        empty_game.player.currency = 100
        empty_game.tick()
        empty_game.tick({Key.QUIT})
        assert empty_game.mode is Mode.OVER
        assert empty_game.end_reason == "quit"

    def test_death_ends_run(self, empty_game):
        p = empty_game.player
        p.hp = 1
        empty_game.bullets.append(Bullet(p.x + 1, p.y, 0, 0, BulletKind.ENEMY_SHOT))
        empty_game.tick()
        assert not empty_game.running
        assert empty_game.end_reason == "killed"
        assert empty_game.frame == 0

        empty_game.tick({Key.RIGHT})
        assert empty_game.player.x == GRID_COLS // 2 - 1

    def test_hazard_alignment_kills(self, empty_game):
        hazard = make_enemy(EnemyKind.HAZARD, empty_game.player.x, empty_game.player.y - 2)
        hazard.phase = HazardPhase.FIRING
        hazard.phase_timer = 10
        empty_game.enemies.append(hazard)
        empty_game.tick()
        assert empty_game.player.hp == 0
        assert empty_game.mode is Mode.OVER


# --------------------------------------------------------------------------
# Pipeline details
# --------------------------------------------------------------------------

class TestPipeline:
    def test_scripted_bullets_spawn_and_advance(self):
        game = Game(pattern=PatternSchedule([ScriptedSpawn(0, 5, 0, 0, 1)]), initial_enemies=False)
        game.tick()
        assert [(b.x, b.y, b.kind) for b in game.bullets] == [(5, 1, BulletKind.ENEMY_SHOT)]

    def test_out_of_bounds_bullets_pruned(self, empty_game):
        empty_game.bullets.append(Bullet(0, 0, 0, -1))
        empty_game.tick()
        assert empty_game.bullets == []

    def test_player_fire_and_cooldown(self, empty_game):
        p = empty_game.player
        empty_game.tick({Key.FIRE})
        assert empty_game.events["shot"] == 1
        (shot,) = empty_game.bullets
        assert (shot.x, shot.y, shot.dx, shot.dy) == (p.x + 1, p.y, 0, -1)

        shots = 0
        for _ in range(8):
            shots += empty_game.tick({Key.FIRE})["shot"]
        assert shots == 0
        # frame 9: 540 ms since the first shot
        assert empty_game.tick({Key.FIRE})["shot"] == 1

    def test_all_streams(self, empty_game):
        empty_game.player.bullet_streams = 8
        empty_game.tick({Key.FIRE})
        dirs = [(b.dx, b.dy) for b in empty_game.bullets]
        assert dirs == [(0, -1), (-1, -1), (1, -1), (-1, 0), (1, 0), (-1, 1), (1, 1), (0, 1)]

    def test_stream_directions_use_speed_magnitude(self, empty_game):
        p = empty_game.player
        p.bullet_speed = -2
        p.bullet_streams = 5
        assert stream_directions(p) == [(0, -2), (-1, -2), (1, -2), (-2, 0), (2, 0)]

    def test_survival_bonus_every_fifty_frames(self, empty_game):
        for _ in range(49):
            empty_game.tick()
        assert empty_game.score == 0
        empty_game.tick()
        assert empty_game.frame == 50
        assert empty_game.score == 50

    def test_spawner_adds_enemies(self, empty_game):
        for _ in range(83):
            empty_game.tick()
        assert [e.kind for e in empty_game.enemies] == [EnemyKind.BASIC]

    def test_dead_enemies_are_compacted(self, empty_game):
        dead = make_enemy(EnemyKind.BASIC, 5, 5)
        dead.hp = 0
        empty_game.enemies.append(dead)
        empty_game.tick()
        assert dead not in empty_game.enemies

    def test_enemies_fire_at_player(self, empty_game):
        empty_game.enemies.append(make_enemy(EnemyKind.BASIC, 10, 2))
        empty_game.tick()
        assert [(b.x, b.y, b.kind) for b in empty_game.bullets] == [(10, 3, BulletKind.ENEMY_SHOT)]

    def test_snapshot_is_detached(self, empty_game):
        snap = empty_game.snapshot()
        snap.player.hp = 1
        assert empty_game.player.hp == 10
        assert snap.frame == 0

    def test_render_called_before_frame_advance(self, empty_game):
        seen = []
        empty_game.tick(render=seen.append)
        assert [s.frame for s in seen] == [0]
        assert empty_game.frame == 1


# --------------------------------------------------------------------------
# Invariants over long random runs
# --------------------------------------------------------------------------

class TestInvariants:
    @pytest.mark.parametrize("seed", [0, 1, 2])
    def test_bounds_hold_every_tick(self, seed):
        game = Game(seed=seed)
        keys_rng = np.random.default_rng(seed + 100)
        alphabet = [Key.UP, Key.DOWN, Key.LEFT, Key.RIGHT, Key.FIRE]
        for _ in range(600):
            if game.paused:
                game.choose_upgrade(1)
            keys = {k for k in alphabet if keys_rng.random() < 0.4}
            game.tick(keys)
            p = game.player
            assert 0 <= p.hp <= p.max_hp
            assert 0 <= p.currency <= p.max_currency
            assert 0 <= p.x <= GRID_COLS - p.width
            assert 0 <= p.y <= GRID_ROWS - p.height
            assert all(e.alive for e in game.enemies)
            if not game.running:
                break


# --------------------------------------------------------------------------
# Fixed-tick loop
# --------------------------------------------------------------------------

class TestRunLoop:
    def test_sleeps_to_tick_boundary_and_quits(self, empty_game):
        sleeps = []
        controls = FakeControls([set(), set(), set(), {Key.QUIT}])
        score = empty_game.run(controls, clock=lambda: 0.0, sleep=sleeps.append)
        assert empty_game.frame == 3
        assert sleeps == [pytest.approx(FRAME_MS / 1000.0)] * 3
        assert empty_game.end_reason == "quit"
        assert score == empty_game.score

    def test_slow_tick_does_not_sleep(self, empty_game):
        sleeps = []
        times = iter([0.0, 1.0] * 10)
        empty_game.run(FakeControls([]), clock=lambda: next(times), sleep=sleeps.append, max_frames=3)
        assert sleeps == []
        assert empty_game.frame == 3

    def test_upgrade_pause_waits_for_choice(self, empty_game):
        empty_game.player.currency = 100
        rendered = []
        controls = FakeControls([], choices=[None, 2])
        empty_game.run(
            controls, render=rendered.append, clock=lambda: 0.0, sleep=lambda s: None, max_frames=2
        )
        assert empty_game.player.currency == 0
        assert empty_game.frame == 2
        assert any(s.mode is Mode.UPGRADE for s in rendered)

    def test_quit_while_paused(self, empty_game):
        empty_game.player.currency = 100
        controls = FakeControls([set(), {Key.QUIT}])
        empty_game.run(controls, clock=lambda: 0.0, sleep=lambda s: None)
        assert empty_game.end_reason == "quit"
        assert empty_game.frame == 0
