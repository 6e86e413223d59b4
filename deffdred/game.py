"""
Game - fixed-tick simulation orchestrator
-----------------------------------------
- Owns every piece of mutable state: player, enemies, bullets, counters
- ``tick(keys)`` runs one frame of the pipeline
- Upgrade selection is an explicit paused mode, resolved by ``choose_upgrade``
- ``run()`` paces ticks against the wall clock and talks to the input and
  rendering collaborators

Per-tick pipeline:
    quit check -> move player -> scripted bullets -> advance/prune bullets
    -> hostile bullets vs player -> enemy update + fire -> player bullets vs
    enemies -> hazards vs player -> upgrade trigger -> render -> player fire
    -> frame advance + spawns -> compact dead enemies
"""

from __future__ import annotations

import copy
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional, Set, Tuple

import numpy as np

from .behaviors import fire, update_enemy
from .combat import (
    CombatReport, hazards_vs_player, hostile_bullets_vs_player, player_bullets_vs_enemies,
)
from .config import FRAME_MS, GRID_COLS, GRID_ROWS, PLAYER_CONFIG, REWARD_CONFIG
from .entities import Bullet, BulletKind, Enemy, EnemyKind, Key, Player, make_enemy
from .spawner import EnemySpawner, PatternSchedule
from .upgrades import UpgradeKind, apply_upgrade, offer_upgrades, should_offer
from .utils import make_rng


class Mode(Enum):
    RUNNING = "running"
    UPGRADE = "upgrade"
    OVER = "over"


@dataclass(frozen=True)
class Snapshot:
    """Read-only view handed to the renderer"""
    player: Player
    enemies: Tuple[Enemy, ...]
    bullets: Tuple[Bullet, ...]
    frame: int
    score: int
    mode: Mode
    offer: Tuple[UpgradeKind, ...] = ()


def stream_directions(player: Player) -> List[Tuple[int, int]]:
    """Velocities of the player's active bullet streams, in unlock order"""
    v = player.bullet_speed
    s = abs(v)
    dirs = [
        (0, v),    # forward
        (-1, v),   # up left
        (1, v),    # up right
        (-s, 0),   # left
        (s, 0),    # right
        (-1, s),   # down left
        (1, s),    # down right
        (0, s),    # down
    ]
    return dirs[:max(player.bullet_streams, 1)]


class Game:
    """Single run of the shooter"""

    def __init__(
        self,
        pattern: Optional[PatternSchedule] = None,
        seed: Optional[int] = None,
        rng: Optional[np.random.Generator] = None,
        cols: int = GRID_COLS,
        rows: int = GRID_ROWS,
        frame_ms: int = FRAME_MS,
        enemy_shots_pierce: bool = PLAYER_CONFIG["enemy_shots_pierce"],
        initial_enemies: bool = True,
    ):
        self.cols = cols
        self.rows = rows
        self.frame_ms = frame_ms
        self.enemy_shots_pierce = enemy_shots_pierce
        self.initial_enemies = initial_enemies
        self.rng = rng if rng is not None else make_rng(seed)
        self.schedule = pattern if pattern is not None else PatternSchedule()

        self.player: Player = None  # type: ignore
        self.enemies: List[Enemy] = []
        self.bullets: List[Bullet] = []
        self.spawner: EnemySpawner = None  # type: ignore
        self.frame = 0
        self.score = 0
        self.mode = Mode.RUNNING
        self.offer: List[UpgradeKind] = []
        self.end_reason: Optional[str] = None
        self.last_fire_ms = 0
        self.events: Dict[str, float] = {}

        self.reset()

    # ----------------------------
    # Lifecycle
    # ----------------------------

    def reset(self, seed: Optional[int] = None):
        if seed is not None:
            self.rng = make_rng(seed)
        self.schedule.cursor = 0

        self.player = Player(x=self.cols // 2 - 1, y=self.rows - 4)
        self.bullets = []
        self.enemies = []
        if self.initial_enemies:
            self.enemies.append(make_enemy(EnemyKind.BASIC, self.cols // 2 - 1, 2))
            self.enemies.append(make_enemy(EnemyKind.HAZARD, self.cols // 2 - 1, self.rows // 2))
        self.spawner = EnemySpawner(self.rng, self.cols, self.rows)

        self.frame = 0
        self.score = 0
        self.mode = Mode.RUNNING
        self.offer = []
        self.end_reason = None
        # first shot is available immediately
        self.last_fire_ms = -self.player.fire_cooldown_ms
        self._reset_events()

    @property
    def running(self) -> bool:
        return self.mode is not Mode.OVER

    @property
    def paused(self) -> bool:
        return self.mode is Mode.UPGRADE

    def end(self, reason: str):
        self.mode = Mode.OVER
        self.end_reason = reason

    def _reset_events(self):
        self.events = {
            "shot": 0.0, "hit": 0.0, "kill": 0.0, "damage": 0.0, "heal": 0.0, "spawned": 0.0,
        }

    # ----------------------------
    # Tick
    # ----------------------------

    def tick(self, keys: Set[Key] = frozenset(), render: Optional[Callable[[Snapshot], None]] = None):
        """Advance one frame. Returns the per-tick event counters."""
        self._reset_events()
        if not self.running:
            return self.events
        if Key.QUIT in keys:
            self.end("quit")
            return self.events
        if self.paused:
            return self.events

        report = CombatReport()
        try:
            self._pipeline(keys, report, render)
        finally:
            self._fold(report)
            self._compact()
        return self.events

    def _pipeline(self, keys, report: CombatReport, render):
        player = self.player
        player.move(keys, self.cols, self.rows)

        self.bullets.extend(self.schedule.spawn_due(self.frame))
        for b in self.bullets:
            b.update()
        self.bullets = [b for b in self.bullets if not b.is_out_of_bounds(self.cols, self.rows)]

        hostile_bullets_vs_player(player, self.bullets, report, pierce=self.enemy_shots_pierce)
        if self._died(report):
            return

        for enemy in self.enemies:
            if not enemy.alive:
                continue
            update_enemy(enemy, self.rng, self.cols, self.rows)
            self.bullets.extend(fire(enemy, player, self.cols, self.rows))

        player_bullets_vs_enemies(player, self.enemies, self.bullets, report)

        hazards_vs_player(player, self.enemies, report)
        if self._died(report):
            return

        if should_offer(player, self.paused):
            self.offer = offer_upgrades(self.rng)
            self.mode = Mode.UPGRADE
            return

        if render is not None:
            render(self.snapshot())

        self._player_fire(keys)
        self._advance_frame()

    def _died(self, report: CombatReport) -> bool:
        if report.player_killed or not self.player.alive:
            self.end("killed")
            return True
        return False

    def _player_fire(self, keys):
        if Key.FIRE not in keys:
            return
        now_ms = self.frame * self.frame_ms
        if now_ms - self.last_fire_ms < self.player.fire_cooldown_ms:
            return

        bx, by = self.player.x + 1, self.player.y
        if 0 <= bx < self.cols and 0 <= by < self.rows:
            for dx, dy in stream_directions(self.player):
                self.bullets.append(Bullet(bx, by, dx, dy, BulletKind.PLAYER_SHOT))
                self.events["shot"] += 1.0
        self.last_fire_ms = now_ms

    def _advance_frame(self):
        self.frame += 1
        if self.frame % REWARD_CONFIG["survival_every_frames"] == 0:
            self.score += REWARD_CONFIG["survival_score"]

        spawned = self.spawner.step(self.frame)
        self.enemies.extend(spawned)
        self.events["spawned"] += len(spawned)

    def _fold(self, report: CombatReport):
        self.score += report.score
        self.events["hit"] += report.hits
        self.events["kill"] += report.kills
        self.events["damage"] += report.damage_taken
        self.events["heal"] += report.healed

    def _compact(self):
        self.enemies = [e for e in self.enemies if e.alive]

    # ----------------------------
    # Upgrades
    # ----------------------------

    def choose_upgrade(self, choice: int) -> bool:
        """Apply offer entry ``choice`` (1-based). False if nothing was applied."""
        if not self.paused or not 1 <= choice <= len(self.offer):
            return False
        apply_upgrade(self.player, self.offer[choice - 1])
        self.player.currency = 0
        self.offer = []
        self.mode = Mode.RUNNING
        return True

    # ----------------------------
    # Snapshot / loop
    # ----------------------------

    def snapshot(self) -> Snapshot:
        return Snapshot(
            player=copy.deepcopy(self.player),
            enemies=tuple(copy.deepcopy(e) for e in self.enemies),
            bullets=tuple(copy.deepcopy(b) for b in self.bullets),
            frame=self.frame,
            score=self.score,
            mode=self.mode,
            offer=tuple(self.offer),
        )

    def run(
        self,
        controls,
        render: Optional[Callable[[Snapshot], None]] = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
        max_frames: Optional[int] = None,
    ) -> int:
        """
        Fixed-tick loop. ``controls`` provides ``poll() -> set of Key`` and
        ``choice() -> Optional[int]`` for the upgrade menu.
        Returns the final score.
        """
        tick_s = self.frame_ms / 1000.0
        while self.running:
            if max_frames is not None and self.frame >= max_frames:
                break
            start = clock()
            keys = controls.poll()

            if self.paused and Key.QUIT not in keys:
                if render is not None:
                    render(self.snapshot())
                choice = controls.choice()
                if choice is not None:
                    self.choose_upgrade(choice)
            else:
                self.tick(keys, render=render)

            if not self.running:
                break
            # no catch-up: a slow tick just delays the next one
            remaining = start + tick_s - clock()
            if remaining > 0:
                sleep(remaining)
        return self.score
