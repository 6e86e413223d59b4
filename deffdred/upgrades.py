"""
Upgrade catalog, random offers and effect application
"""

from enum import Enum
from typing import List

import numpy as np

from .config import UPGRADE_CONFIG
from .entities import Player


class UpgradeKind(Enum):
    INCREASE_HP = "Increase Max HP (+5)"
    ATTACK_SPEED = "Attack Speed (+20%)"
    BULLET_SPEED = "Bullet Speed (+1)"
    DAMAGE = "Damage (+5)"
    MOVE_SPEED = "Move Speed (+1)"
    BULLET_STREAMS = "Bullets Amount (+1 stream, up to 8)"
    LIFE_STEAL = "Life Steal (+5% per upgrade)"

    @property
    def label(self) -> str:
        return self.value


UPGRADE_CATALOG = tuple(UpgradeKind)


def should_offer(player: Player, pending: bool) -> bool:
    return not pending and player.currency >= player.max_currency


def offer_upgrades(rng: np.random.Generator, size: int = UPGRADE_CONFIG["offer_size"]) -> List[UpgradeKind]:
    """Shuffle the catalog and take the first ``size`` entries"""
    order = rng.permutation(len(UPGRADE_CATALOG))
    return [UPGRADE_CATALOG[i] for i in order[:size]]


def apply_upgrade(player: Player, kind: UpgradeKind):
    cfg = UPGRADE_CONFIG
    if kind is UpgradeKind.INCREASE_HP:
        player.max_hp += cfg["max_hp_bonus"]
        player.hp += cfg["max_hp_bonus"]
    elif kind is UpgradeKind.ATTACK_SPEED:
        player.fire_cooldown_ms = int(player.fire_cooldown_ms * cfg["attack_speed_factor"])
    elif kind is UpgradeKind.BULLET_SPEED:
        # speed is stored negative (upward), so this raises its magnitude
        player.bullet_speed -= cfg["bullet_speed_bonus"]
    elif kind is UpgradeKind.DAMAGE:
        player.damage += cfg["damage_bonus"]
    elif kind is UpgradeKind.MOVE_SPEED:
        player.move_speed += cfg["move_speed_bonus"]
    elif kind is UpgradeKind.BULLET_STREAMS:
        player.bullet_streams = min(player.bullet_streams + 1, cfg["max_bullet_streams"])
    elif kind is UpgradeKind.LIFE_STEAL:
        player.life_steal_percent = min(
            player.life_steal_percent + cfg["life_steal_bonus"], cfg["max_life_steal"]
        )
