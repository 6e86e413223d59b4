"""
Curses front end: key polling, screen drawing and the game-over prompt
"""

from __future__ import annotations

import curses
from typing import Iterable, List, Optional, Set

from .entities import Key
from .game import Game, Snapshot
from .leaderboard import Leaderboard
from .render import render_frame, render_leaderboard
from .spawner import PatternSchedule

KEY_MAP = {
    ord("w"): Key.UP, ord("W"): Key.UP, curses.KEY_UP: Key.UP,
    ord("s"): Key.DOWN, ord("S"): Key.DOWN, curses.KEY_DOWN: Key.DOWN,
    ord("a"): Key.LEFT, ord("A"): Key.LEFT, curses.KEY_LEFT: Key.LEFT,
    ord("d"): Key.RIGHT, ord("D"): Key.RIGHT, curses.KEY_RIGHT: Key.RIGHT,
    ord(" "): Key.FIRE,
    ord("q"): Key.QUIT, ord("Q"): Key.QUIT,
}

CHOICE_MAP = {ord("1"): 1, ord("2"): 2, ord("3"): 3}


def keys_from_codes(codes: Iterable[int]) -> Set[Key]:
    """Map raw key codes read this tick to logical keys"""
    return {KEY_MAP[c] for c in codes if c in KEY_MAP}


def choice_from_codes(codes: Iterable[int]) -> Optional[int]:
    """Last upgrade digit pressed, if any"""
    choice = None
    for c in codes:
        if c in CHOICE_MAP:
            choice = CHOICE_MAP[c]
    return choice


class CursesControls:
    """Non-blocking keyboard reader; one drain of the input buffer per tick"""

    def __init__(self, screen):
        self.screen = screen
        self._codes: List[int] = []

    def poll(self) -> Set[Key]:
        self._codes = []
        while True:
            code = self.screen.getch()
            if code == -1:
                break
            self._codes.append(code)
        return keys_from_codes(self._codes)

    def choice(self) -> Optional[int]:
        return choice_from_codes(self._codes)


class CursesScreen:
    """Draws rendered text lines"""

    def __init__(self, screen):
        self.screen = screen

    def draw_lines(self, lines: List[str]):
        self.screen.erase()
        height, width = self.screen.getmaxyx()
        for y, line in enumerate(lines[:height]):
            try:
                self.screen.addstr(y, 0, line[:max(width - 1, 0)])
            except curses.error:
                pass  # writing the bottom-right cell raises
        self.screen.refresh()

    def __call__(self, snap: Snapshot):
        self.draw_lines(render_frame(snap))


def prompt_name(screen, frame: int, score: int) -> str:
    curses.flushinp()
    screen.nodelay(False)
    curses.echo()
    curses.curs_set(1)
    screen.erase()
    screen.addstr(0, 0, f"Game Over! Survived {frame} frames.")
    screen.addstr(1, 0, f"Your score: {score}")
    screen.addstr(3, 0, "Enter a username for the leaderboard: ")
    screen.refresh()
    raw = screen.getstr(3, 39, 64)
    curses.noecho()
    curses.curs_set(0)
    return raw.decode("utf-8", errors="replace")


def play(pattern_path: Optional[str], scores_path: str, seed: Optional[int] = None) -> int:
    """Interactive run in the terminal. Returns the final score."""
    schedule = PatternSchedule.from_file(pattern_path)
    game = Game(pattern=schedule, seed=seed)
    board = Leaderboard(scores_path)

    def main(stdscr):
        curses.curs_set(0)
        stdscr.nodelay(True)
        view = CursesScreen(stdscr)
        game.run(CursesControls(stdscr), render=view)

        name = prompt_name(stdscr, game.frame, game.score)
        entries = board.submit(game.score, name)
        view.draw_lines(render_leaderboard(entries, game.score) + ["", "Press any key to exit."])
        stdscr.getch()

    curses.wrapper(main)
    return game.score
