"""
Game entity dataclasses
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Tuple

from .config import (
    GRID_COLS, GRID_ROWS, FRAME_MS, PLAYER_CONFIG, ENEMY_CONFIGS, HAZARD_CONFIG,
    BULLET_DAMAGE,
)
from .utils import shape_cells, frames_for_ms

# Spent bullets are parked here so the next prune pass drops them
SPENT_X = -100


class Key(Enum):
    """Logical input keys"""
    UP = "w"
    DOWN = "s"
    LEFT = "a"
    RIGHT = "d"
    FIRE = " "
    QUIT = "q"


class BulletKind(Enum):
    """Bullet ownership; the value is its glyph"""
    PLAYER_SHOT = "o"
    ENEMY_SHOT = "*"
    BOSS_ORB = "O"

    @property
    def symbol(self) -> str:
        return self.value

    @property
    def hostile(self) -> bool:
        return self is not BulletKind.PLAYER_SHOT

    @property
    def damage(self) -> int:
        if self is BulletKind.BOSS_ORB:
            return BULLET_DAMAGE["boss_orb"]
        if self is BulletKind.ENEMY_SHOT:
            return BULLET_DAMAGE["enemy_shot"]
        return 0


class EnemyKind(Enum):
    BASIC = "basic"
    HAZARD = "hazard"
    BOSS = "boss"


class HazardPhase(Enum):
    COOLDOWN = "cooldown"
    FLASHING = "flashing"
    FIRING = "firing"


HAZARD_FRAMES = {
    HazardPhase.COOLDOWN: frames_for_ms(HAZARD_CONFIG["cooldown_ms"], FRAME_MS),
    HazardPhase.FLASHING: frames_for_ms(HAZARD_CONFIG["flash_ms"], FRAME_MS),
    HazardPhase.FIRING: frames_for_ms(HAZARD_CONFIG["fire_ms"], FRAME_MS),
}


@dataclass
class Player:
    """Player ship entity"""
    x: int
    y: int
    hp: int = PLAYER_CONFIG["hp"]
    max_hp: int = PLAYER_CONFIG["max_hp"]
    currency: int = 0
    max_currency: int = PLAYER_CONFIG["max_currency"]
    fire_cooldown_ms: int = PLAYER_CONFIG["fire_cooldown_ms"]
    bullet_speed: int = PLAYER_CONFIG["bullet_speed"]
    damage: int = PLAYER_CONFIG["damage"]
    move_speed: int = PLAYER_CONFIG["move_speed"]
    bullet_streams: int = PLAYER_CONFIG["bullet_streams"]  # 1..8
    life_steal_percent: int = PLAYER_CONFIG["life_steal_percent"]
    shape: Tuple[str, ...] = PLAYER_CONFIG["shape"]

    @property
    def width(self) -> int:
        return max(len(row) for row in self.shape)

    @property
    def height(self) -> int:
        return len(self.shape)

    @property
    def alive(self) -> bool:
        return self.hp > 0

    def cells(self):
        return shape_cells(self.shape, self.x, self.y)

    def occupies(self, x: int, y: int) -> bool:
        return any(c == (x, y) for c in self.cells())

    def move(self, keys, cols: int = GRID_COLS, rows: int = GRID_ROWS):
        """Apply direction keys, keeping the footprint inside the arena"""
        max_x = cols - self.width
        max_y = rows - self.height
        if Key.UP in keys and self.y > 0:
            self.y -= self.move_speed
        if Key.DOWN in keys and self.y < max_y:
            self.y += self.move_speed
        if Key.LEFT in keys and self.x > 0:
            self.x -= self.move_speed
        if Key.RIGHT in keys and self.x < max_x:
            self.x += self.move_speed
        self.x = min(max(self.x, 0), max_x)
        self.y = min(max(self.y, 0), max_y)

    def take_damage(self, amount: int):
        self.hp = max(self.hp - amount, 0)

    def heal(self, amount: int):
        self.hp = min(self.hp + amount, self.max_hp)

    def award(self, amount: int):
        self.currency = min(self.currency + amount, self.max_currency)


@dataclass
class Bullet:
    """Bullet projectile entity"""
    x: int
    y: int
    dx: int
    dy: int
    kind: BulletKind = BulletKind.ENEMY_SHOT

    @property
    def symbol(self) -> str:
        return self.kind.symbol

    @property
    def spent(self) -> bool:
        return self.x == SPENT_X

    def update(self):
        self.x += self.dx
        self.y += self.dy

    def mark_spent(self):
        self.x = SPENT_X

    def is_out_of_bounds(self, cols: int = GRID_COLS, rows: int = GRID_ROWS) -> bool:
        return self.x < 0 or self.x >= cols or self.y < 0 or self.y >= rows


@dataclass
class Enemy:
    """Enemy entity; behaviour is selected by ``kind``"""
    x: int
    y: int
    kind: EnemyKind = EnemyKind.BASIC
    hp: int = 10
    max_hp: int = 10
    shape: Tuple[str, ...] = ("#",)

    # fire state
    fire_cooldown: int = 60
    fire_timer: int = 0

    # burst wander state
    dx: int = 0
    dy: int = 0
    move_frame_counter: int = 0
    burst_steps: int = 0
    pause_timer: int = 0

    # hazard state (unused by other kinds)
    phase: HazardPhase = HazardPhase.COOLDOWN
    phase_timer: int = field(default_factory=lambda: HAZARD_FRAMES[HazardPhase.COOLDOWN])
    player_damaged_this_fire: bool = False

    @property
    def alive(self) -> bool:
        return self.hp > 0

    @property
    def is_hazard(self) -> bool:
        return self.kind is EnemyKind.HAZARD

    @property
    def is_flashing(self) -> bool:
        return self.is_hazard and self.phase is HazardPhase.FLASHING

    @property
    def is_firing(self) -> bool:
        return self.is_hazard and self.phase is HazardPhase.FIRING

    def cells(self):
        return shape_cells(self.shape, self.x, self.y)


def make_enemy(kind: EnemyKind, x: int, y: int) -> Enemy:
    """Build an enemy of the given kind with its configured stats"""
    cfg = ENEMY_CONFIGS[kind.value]
    return Enemy(
        x=x,
        y=y,
        kind=kind,
        hp=cfg["hp"],
        max_hp=cfg["hp"],
        shape=tuple(cfg["shape"]),
        fire_cooldown=cfg["fire_cooldown"],
    )
