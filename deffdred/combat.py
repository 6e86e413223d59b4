"""Collision and damage resolution.

Four independent checks run once per tick:

  1. ``hostile_bullets_vs_player``: EnemyShot / BossOrb bullets on an
     occupied player cell deal their kind's damage.
  2. ``player_bullets_vs_enemies``: a PlayerShot within Manhattan distance 1
     of any occupied enemy cell hits it.  Each enemy takes at most one hit per
     tick; the bullet is spent; a lethal hit pays currency and score once.
  3. Life steal is applied from inside check 2, healing a share of the damage
     actually absorbed (overkill excluded).
  4. ``hazards_vs_player``: a firing hazard instantly kills an aligned player,
     otherwise its 3-wide cross deals contact damage once per firing cycle.

Each check updates a ``CombatReport`` which the orchestrator folds into its
per-tick event counters.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from .config import HAZARD_CONFIG, REWARD_CONFIG
from .entities import Bullet, BulletKind, Enemy, Player
from .utils import manhattan


@dataclass
class CombatReport:
    damage_taken: int = 0
    damage_dealt: int = 0
    hits: int = 0
    kills: int = 0
    healed: int = 0
    score: int = 0
    player_killed: bool = False


def hostile_bullets_vs_player(
    player: Player, bullets: List[Bullet], report: CombatReport, pierce: bool = True
) -> CombatReport:
    cells = set(player.cells())
    for b in bullets:
        if not b.kind.hostile or (b.x, b.y) not in cells:
            continue
        before = player.hp
        player.take_damage(b.kind.damage)
        report.damage_taken += before - player.hp
        if not pierce:
            b.mark_spent()
        if not player.alive:
            report.player_killed = True
            break
    return report


def _bullet_hits(bullet: Bullet, enemy: Enemy) -> bool:
    return any(manhattan((bullet.x, bullet.y), cell) <= 1 for cell in enemy.cells())


def player_bullets_vs_enemies(
    player: Player, enemies: List[Enemy], bullets: List[Bullet], report: CombatReport
) -> CombatReport:
    for enemy in enemies:
        if not enemy.alive:
            continue
        for b in bullets:
            if b.kind is not BulletKind.PLAYER_SHOT or b.spent:
                continue
            if not _bullet_hits(b, enemy):
                continue

            before = enemy.hp
            dmg = max(player.damage, 0)
            dealt = max(min(before, dmg), 0)
            enemy.hp -= dmg
            b.mark_spent()
            report.hits += 1
            report.damage_dealt += dealt

            if dealt > 0 and player.life_steal_percent > 0:
                heal = dealt * player.life_steal_percent // 100
                if heal > 0:
                    hp_before = player.hp
                    player.heal(heal)
                    report.healed += player.hp - hp_before

            if before > 0 and enemy.hp <= 0:
                player.award(REWARD_CONFIG["kill_currency"])
                report.score += REWARD_CONFIG["kill_score"]
                report.kills += 1
            break
    return report


def in_kill_alignment(player: Player, hazard: Enemy) -> bool:
    """Player reference cell lined up with the hazard's beam origin"""
    if player.x == hazard.x and abs(player.y - hazard.y) <= HAZARD_CONFIG["kill_column_range"]:
        return True
    if player.y == hazard.y and abs(player.x - hazard.x) <= HAZARD_CONFIG["kill_row_range"]:
        return True
    return False


def in_beam(player: Player, hazard: Enemy) -> bool:
    half = HAZARD_CONFIG["beam_half_width"]
    return any(
        abs(px - hazard.x) <= half or abs(py - hazard.y) <= half
        for px, py in player.cells()
    )


def hazards_vs_player(player: Player, enemies: List[Enemy], report: CombatReport) -> CombatReport:
    firing = [e for e in enemies if e.alive and e.is_firing]

    for hazard in firing:
        if in_kill_alignment(player, hazard):
            report.damage_taken += player.hp
            player.hp = 0
            report.player_killed = True
            return report

    for hazard in firing:
        if hazard.player_damaged_this_fire or not in_beam(player, hazard):
            continue
        before = player.hp
        player.take_damage(HAZARD_CONFIG["contact_damage"])
        report.damage_taken += before - player.hp
        hazard.player_damaged_this_fire = True
        if not player.alive:
            report.player_killed = True
            break
    return report
