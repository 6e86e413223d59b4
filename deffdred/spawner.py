"""
Spawn scheduling: scripted bullet patterns and the procedural enemy spawner.

Pattern files hold one ``frame x y dx dy`` record per line; blank lines and
lines starting with ``#`` are ignored.  Any other line that is not five
integers makes the whole file invalid.
"""

from __future__ import annotations

import warnings
from dataclasses import dataclass
from typing import Iterable, List, Optional

import numpy as np

from .config import GRID_COLS, GRID_ROWS, PATTERN_COMMENT, SPAWN_CONFIG
from .entities import Bullet, BulletKind, Enemy, EnemyKind, make_enemy


class PatternError(ValueError):
    """A pattern line could not be parsed as five integers"""


@dataclass(frozen=True)
class ScriptedSpawn:
    frame: int
    x: int
    y: int
    dx: int
    dy: int


def parse_pattern(lines: Iterable[str]) -> List[ScriptedSpawn]:
    """Parse pattern lines into spawns sorted by trigger frame"""
    spawns = []
    for lineno, line in enumerate(lines, start=1):
        text = line.strip()
        if not text or text.startswith(PATTERN_COMMENT):
            continue
        fields = text.split()
        if len(fields) < 5:
            raise PatternError(f"line {lineno}: expected 5 integers, got {text!r}")
        try:
            frame, x, y, dx, dy = (int(v) for v in fields[:5])
        except ValueError as exc:
            raise PatternError(f"line {lineno}: expected 5 integers, got {text!r}") from exc
        spawns.append(ScriptedSpawn(frame, x, y, dx, dy))
    # sorted() is stable, equal frames keep file order
    return sorted(spawns, key=lambda s: s.frame)


def load_pattern(path: str) -> List[ScriptedSpawn]:
    with open(path, "r", encoding="utf-8") as f:
        try:
            return parse_pattern(f)
        except UnicodeDecodeError as exc:
            raise PatternError(f"not valid UTF-8: {exc}") from exc


class PatternSchedule:
    """Forward-only cursor over scripted spawns"""

    def __init__(self, spawns: Optional[Iterable[ScriptedSpawn]] = None):
        self.spawns: List[ScriptedSpawn] = sorted(spawns or [], key=lambda s: s.frame)
        self.cursor = 0

    def __len__(self) -> int:
        return len(self.spawns)

    @property
    def remaining(self) -> int:
        return len(self.spawns) - self.cursor

    def spawn_due(self, frame: int) -> List[Bullet]:
        """Consume every record with trigger frame <= frame"""
        bullets = []
        while self.cursor < len(self.spawns) and self.spawns[self.cursor].frame <= frame:
            s = self.spawns[self.cursor]
            bullets.append(Bullet(s.x, s.y, s.dx, s.dy, BulletKind.ENEMY_SHOT))
            self.cursor += 1
        return bullets

    @classmethod
    def from_file(cls, path: Optional[str]) -> "PatternSchedule":
        """Load a pattern file, falling back to an empty schedule"""
        if path is None:
            return cls()
        try:
            return cls(load_pattern(path))
        except (OSError, PatternError) as exc:
            warnings.warn(
                f"Error loading pattern {path!r}: {exc}. Starting empty level.",
                RuntimeWarning,
                stacklevel=2,
            )
            return cls()


def scaled_interval(base: int, frame: int) -> int:
    """Spawn interval after difficulty scaling at the given frame"""
    over = frame - SPAWN_CONFIG["scaling_start_frame"]
    if over <= 0:
        return base
    steps = over // SPAWN_CONFIG["scaling_step_frames"]
    value = float(base)
    for _ in range(steps):
        value *= SPAWN_CONFIG["scaling_factor"]
    return max(int(value + 0.5), 1)


def boss_due(frame: int) -> bool:
    first = SPAWN_CONFIG["boss_first_frame"]
    return frame >= first and (frame - first) % SPAWN_CONFIG["boss_every_frames"] == 0


class EnemySpawner:
    """Interval counters for basic and hazard enemies plus the boss schedule"""

    def __init__(
        self,
        rng: np.random.Generator,
        cols: int = GRID_COLS,
        rows: int = GRID_ROWS,
        basic_interval: int = SPAWN_CONFIG["basic_interval"],
        hazard_interval: int = SPAWN_CONFIG["hazard_interval"],
    ):
        self.rng = rng
        self.cols = cols
        self.rows = rows
        self.basic_interval = basic_interval
        self.hazard_interval = hazard_interval
        self.basic_counter = 0
        self.hazard_counter = 0

    def intervals(self, frame: int):
        return (
            scaled_interval(self.basic_interval, frame),
            scaled_interval(self.hazard_interval, frame),
        )

    def step(self, frame: int) -> List[Enemy]:
        """Advance counters for a new frame and return any enemies spawned"""
        self.basic_counter += 1
        self.hazard_counter += 1
        basic_every, hazard_every = self.intervals(frame)
        spawned = []

        if self.basic_counter >= basic_every:
            x = int(self.rng.integers(0, self.cols))
            y = int(self.rng.integers(0, SPAWN_CONFIG["basic_max_row"] + 1))
            spawned.append(make_enemy(EnemyKind.BASIC, x, y))
            self.basic_counter = 0

        if self.hazard_counter >= hazard_every:
            x = int(self.rng.integers(0, self.cols))
            spawned.append(make_enemy(EnemyKind.HAZARD, x, self.rows // 2))
            self.hazard_counter = 0

        if boss_due(frame):
            bx, by = SPAWN_CONFIG["boss_position"]
            spawned.append(make_enemy(EnemyKind.BOSS, bx, by))

        return spawned
