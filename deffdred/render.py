"""
Monospace text rendering of a game snapshot
"""

from __future__ import annotations

from typing import List, Sequence, Tuple

from .config import GRID_COLS, GRID_ROWS
from .game import Mode, Snapshot


def bar(label: str, value: int, maximum: int, width: int = GRID_COLS) -> str:
    """Fixed-width fill bar, e.g. ``HP: [#####     ]``"""
    value = max(0, min(value, maximum))
    filled = (value * width) // maximum if maximum > 0 else 0
    return f"{label}[{'#' * filled}{' ' * (width - filled)}]"


def render_grid(snap: Snapshot, cols: int = GRID_COLS, rows: int = GRID_ROWS) -> List[str]:
    """Bordered arena with player, enemies, hazard beams and bullets"""
    grid = [[" "] * (cols + 2) for _ in range(rows + 2)]
    for x in range(1, cols + 1):
        grid[0][x] = grid[rows + 1][x] = "-"
    for y in range(1, rows + 1):
        grid[y][0] = grid[y][cols + 1] = "|"
    for y, x in ((0, 0), (0, cols + 1), (rows + 1, 0), (rows + 1, cols + 1)):
        grid[y][x] = "+"

    def put(x: int, y: int, ch: str):
        # arena coordinates, offset by the border
        if 0 <= x < cols and 0 <= y < rows:
            grid[y + 1][x + 1] = ch

    p = snap.player
    for dy, row in enumerate(p.shape):
        for dx, ch in enumerate(row):
            if ch != " ":
                put(p.x + dx, p.y + dy, ch)

    for e in snap.enemies:
        if not e.alive:
            continue
        if e.is_hazard:
            put(e.x, e.y, e.shape[0])
            if e.is_flashing and (snap.frame // 4) % 2 == 0:
                for y in range(rows):
                    put(e.x, y, "|")
                for x in range(cols):
                    put(x, e.y, "-")
            elif e.is_firing:
                for off in (-1, 0, 1):
                    for y in range(rows):
                        put(e.x + off, y, "|")
                for off in (-1, 0, 1):
                    for x in range(cols):
                        put(x, e.y + off, "-")
            continue
        for dy, row in enumerate(e.shape):
            for dx, ch in enumerate(row):
                if ch != " ":
                    put(e.x + dx, e.y + dy, ch)

    for b in snap.bullets:
        put(b.x, b.y, b.symbol)

    return ["".join(row) for row in grid]


def render_upgrade_menu(offer: Sequence) -> List[str]:
    lines = ["Choose an upgrade:"]
    for i, kind in enumerate(offer, start=1):
        lines.append(f"{i}. {kind.label}")
    lines.append("Press 1, 2, or 3 to select.")
    return lines


def render_frame(snap: Snapshot, cols: int = GRID_COLS, rows: int = GRID_ROWS) -> List[str]:
    """Full screen for one tick"""
    if snap.mode is Mode.UPGRADE:
        return render_upgrade_menu(snap.offer)
    p = snap.player
    lines = [
        bar("HP: ", p.hp, p.max_hp, cols),
        bar("$:  ", p.currency, p.max_currency, cols),
    ]
    lines += render_grid(snap, cols, rows)
    lines.append(f"Frame: {snap.frame} | Score: {snap.score} | Use WASD to move, SPACE to fire, Q to quit")
    return lines


def render_leaderboard(entries: Sequence[Tuple[int, str]], score: int) -> List[str]:
    lines = ["===== Leaderboard (Top 10) ====="]
    for i, (s, name) in enumerate(entries, start=1):
        lines.append(f"{i}. {name} - {s}")
    lines.append("")
    lines.append(f"Your score: {score}")
    return lines
